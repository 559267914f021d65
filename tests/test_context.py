"""Tests for Context."""

import unittest
from unittest.mock import Mock

from vinculum import identity
from vinculum.context import Context


class TestResolve(unittest.TestCase):
    def setUp(self) -> None:
        self.context = Context()

    def test_first_invocation_wins(self) -> None:
        target = Mock(side_effect=lambda value: {"value": value})

        first = self.context.resolve(target, "a")
        second = self.context.resolve(target, "b")

        self.assertIs(first, second)
        self.assertEqual(first, {"value": "a"})
        target.assert_called_once_with("a")

    def test_passes_keyword_arguments(self) -> None:
        target = Mock(return_value=1)
        self.context.resolve(target, bundle={"x": 1})
        target.assert_called_once_with(bundle={"x": 1})

    def test_distinct_targets_are_cached_separately(self) -> None:
        first = Mock(return_value="first")
        second = Mock(return_value="second")
        self.assertEqual(self.context.resolve(first), "first")
        self.assertEqual(self.context.resolve(second), "second")
        self.assertEqual(len(self.context), 2)

    def test_bound_wrapper_shares_the_cache_entry(self) -> None:
        def recipe():
            return object()

        def wrapper():
            return recipe()

        identity.bind(recipe, wrapper)
        self.assertIs(self.context.resolve(recipe), self.context.resolve(wrapper))

    def test_falsy_results_are_cached(self) -> None:
        target = Mock(return_value=None)
        self.assertIsNone(self.context.resolve(target))
        self.assertIsNone(self.context.resolve(target))
        target.assert_called_once_with()

    def test_contexts_are_independent(self) -> None:
        target = Mock(side_effect=object)
        other = Context()
        self.assertIsNot(self.context.resolve(target), other.resolve(target))
        self.assertEqual(target.call_count, 2)

    def test_contains(self) -> None:
        target = Mock(return_value=1)
        self.assertNotIn(target, self.context)
        self.context.resolve(target)
        self.assertIn(target, self.context)


class TestClear(unittest.TestCase):
    def test_clear_forces_new_invocation(self) -> None:
        context = Context()
        target = Mock(side_effect=object)

        before = context.resolve(target)
        context.clear()
        after = context.resolve(target)

        self.assertIsNot(before, after)
        self.assertEqual(target.call_count, 2)

    def test_clear_empties_the_cache(self) -> None:
        context = Context()
        context.resolve(Mock(return_value=1))
        context.clear()
        self.assertEqual(len(context), 0)


if __name__ == "__main__":
    unittest.main()
