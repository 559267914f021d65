"""Tests for Module visibility and imports."""

import unittest
from unittest.mock import Mock

from vinculum.context import Context
from vinculum.exceptions import NotExposedError, RegistrationError, ResolutionError
from vinculum.lifecycle import Lifecycle
from vinculum.module import Module, ModuleRegistration, Visibility
from vinculum.resolver import Resolution


class Engine:
    def __init__(self, bundle) -> None:
        self.url = bundle["url"]


class TestRegister(unittest.TestCase):
    def setUp(self) -> None:
        self.module = Module("db")

    def test_register_factory_and_resolve(self) -> None:
        self.module.register("url", factory=lambda bundle: "sqlite://")
        self.assertEqual(self.module.resolve("url"), "sqlite://")

    def test_register_constructor(self) -> None:
        self.module.register_factory("url", lambda bundle: "sqlite://")
        self.module.register_constructor("engine", Engine)
        engine = self.module.resolve("engine")
        self.assertIsInstance(engine, Engine)
        self.assertEqual(engine.url, "sqlite://")

    def test_duplicate_token_raises(self) -> None:
        self.module.register("url", factory=lambda bundle: "first")
        with self.assertRaises(RegistrationError) as ctx:
            self.module.register("url", factory=lambda bundle: "second")
        self.assertIn("'url'", str(ctx.exception))
        self.assertIn("db", str(ctx.exception))
        self.assertEqual(ctx.exception.token, "url")
        self.assertEqual(self.module.resolve("url"), "first")

    def test_missing_target_raises_before_registering(self) -> None:
        with self.assertRaises(RegistrationError):
            self.module.register("url")
        self.assertFalse(self.module.has("url"))

    def test_invalid_resolution_raises(self) -> None:
        with self.assertRaises(RegistrationError):
            self.module.register("url", factory=lambda bundle: "x", resolution="later")

    def test_lifecycle_and_resolution_options(self) -> None:
        factory = Mock(side_effect=lambda bundle: object())
        self.module.register("fresh", factory=factory, lifecycle=Lifecycle.TRANSIENT)
        self.assertIsNot(self.module.resolve("fresh"), self.module.resolve("fresh"))

        lazy = Mock(return_value={"ready": True})
        self.module.register("lazy", factory=lazy, resolution=Resolution.LAZY)
        proxy = self.module.resolve("lazy")
        lazy.assert_not_called()
        self.assertTrue(proxy["ready"])


class TestVisibility(unittest.TestCase):
    def setUp(self) -> None:
        self.module = Module("db")
        self.module.register("url", factory=lambda bundle: "sqlite://", visibility=Visibility.PRIVATE)
        self.module.register("engine", constructor=Engine)

    def test_exposes(self) -> None:
        self.assertTrue(self.module.exposes("engine"))
        self.assertFalse(self.module.exposes("url"))
        self.assertFalse(self.module.exposes("missing"))

    def test_has(self) -> None:
        self.assertTrue(self.module.has("url"))
        self.assertFalse(self.module.has("missing"))

    def test_private_token_is_available_to_own_recipes(self) -> None:
        self.assertEqual(self.module.resolve("engine").url, "sqlite://")

    def test_resolving_private_token_raises(self) -> None:
        with self.assertRaises(NotExposedError) as ctx:
            self.module.resolve("url")
        self.assertIn("does not expose", str(ctx.exception))
        self.assertEqual(ctx.exception.token, "url")

    def test_resolving_unknown_token_raises(self) -> None:
        with self.assertRaises(ResolutionError) as ctx:
            self.module.resolve("missing")
        self.assertNotIsInstance(ctx.exception, NotExposedError)
        self.assertIn("'missing'", str(ctx.exception))

    def test_entries_list_public_tokens_only(self) -> None:
        self.assertEqual([token for token, _ in self.module.entries], ["engine"])
        self.assertEqual(len(self.module.registrations), 1)
        self.assertIsInstance(self.module.registrations[0], ModuleRegistration)

    def test_visibility_accepts_strings(self) -> None:
        module = Module()
        module.register("hidden", factory=lambda bundle: 1, visibility="private")
        self.assertFalse(module.exposes("hidden"))

    def test_invalid_visibility_raises(self) -> None:
        with self.assertRaises(RegistrationError):
            Module().register("token", factory=lambda bundle: 1, visibility="internal")


class TestImport(unittest.TestCase):
    def setUp(self) -> None:
        self.database = Module("database")
        self.database.register("url", factory=lambda bundle: "sqlite://", visibility="private")
        self.database.register("engine", constructor=Engine)
        self.app = Module("app")
        self.app.import_module(self.database)

    def test_imported_public_tokens_are_dependencies(self) -> None:
        self.app.register("service", factory=lambda bundle: bundle["engine"].url)
        self.assertEqual(self.app.resolve("service"), "sqlite://")

    def test_imported_private_tokens_are_hidden(self) -> None:
        self.app.register("leak", factory=lambda bundle: bundle["url"])
        with self.assertRaises(KeyError):
            self.app.resolve("leak")

    def test_imported_tokens_are_not_exposed_by_importer(self) -> None:
        self.assertFalse(self.app.has("engine"))
        with self.assertRaises(ResolutionError):
            self.app.resolve("engine")

    def test_own_tokens_win_over_imported(self) -> None:
        self.app.register("engine", factory=lambda bundle: "own engine")
        self.app.register("service", factory=lambda bundle: bundle["engine"])
        self.assertEqual(self.app.resolve("service"), "own engine")

    def test_imported_singletons_are_cached_per_importer(self) -> None:
        self.app.register("service", factory=lambda bundle: bundle["engine"], lifecycle="transient")
        other = Module("other")
        other.import_module(self.database)
        other.register("service", factory=lambda bundle: bundle["engine"], lifecycle="transient")

        self.assertIs(self.app.resolve("service"), self.app.resolve("service"))
        self.assertIsNot(self.app.resolve("service"), other.resolve("service"))
        self.assertIsNot(self.app.resolve("service"), self.database.resolve("engine"))

    def test_modules_lists_imported_clones(self) -> None:
        [imported] = self.app.modules
        self.assertIsNot(imported, self.database)
        self.assertEqual(imported.name, "database")


class TestClone(unittest.TestCase):
    def test_clone_keeps_registrations_and_visibility(self) -> None:
        module = Module("db")
        module.register("url", factory=lambda bundle: "sqlite://", visibility="private")
        module.register("engine", constructor=Engine)

        cloned = module.clone()

        self.assertEqual(cloned.resolve("engine").url, "sqlite://")
        self.assertFalse(cloned.exposes("url"))
        self.assertIsNot(cloned.resolve("engine"), module.resolve("engine"))

    def test_clone_with_context_shares_singletons(self) -> None:
        context = Context()
        module = Module("db", context=context)
        module.register("engine", factory=lambda bundle: object())
        self.assertIs(module.clone(context=context).resolve("engine"), module.resolve("engine"))

    def test_clone_keeps_imports(self) -> None:
        database = Module("database")
        database.register("url", factory=lambda bundle: "sqlite://")
        app = Module("app")
        app.import_module(database)
        app.register("service", factory=lambda bundle: bundle["url"])

        self.assertEqual(app.clone().resolve("service"), "sqlite://")


if __name__ == "__main__":
    unittest.main()
