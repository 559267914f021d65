"""Identity-keyed memoization of invocation results."""

import logging
from typing import Any, Callable, Dict, TypeVar

from vinculum import identity

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Context:
    """A cache mapping a target's identity to the result of its first call.

    The first call for a target wins: later calls with the same target return
    the cached result and ignore their arguments. Targets are told apart by
    identity, not equality, so two equal but distinct callables are cached
    separately.

    Examples:
        >>> context = Context()
        >>> make = lambda bundle: object()
        >>> context.resolve(make, {}) is context.resolve(make, {"other": 1})
        True
    """

    def __init__(self) -> None:
        self._instances: Dict[str, Any] = {}

    @classmethod
    def create(cls) -> "Context":
        return cls()

    def resolve(self, target: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        """Return the cached result for *target*, invoking it on first use."""
        key = identity.extract(target)

        if key in self._instances:
            logger.debug("Context hit for identity %s", key)
            return self._instances[key]

        logger.debug("Context miss for identity %s", key)
        result = target(*args, **kwargs)
        self._instances[key] = result
        return result

    def clear(self) -> None:
        """Forget every cached result."""
        self._instances.clear()

    def __contains__(self, target: object) -> bool:
        return identity.extract(target) in self._instances

    def __len__(self) -> int:
        return len(self._instances)
