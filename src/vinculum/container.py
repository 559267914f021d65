"""Token registry composing registrations and their inter-dependencies."""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

from vinculum.bundle import Bundle, Descriptor
from vinculum.context import Context
from vinculum.registration import Registration

logger = logging.getLogger(__name__)

RegistrationT = TypeVar("RegistrationT", bound=Registration)


class Container(Generic[RegistrationT]):
    """Maps tokens to registrations and resolves them against each other.

    Every recipe resolved through a container receives a bundle exposing all
    registered tokens. Reading a token from that bundle resolves its
    registration on demand, so recipes can be registered in any order and
    siblings a recipe never reads are never built.

    Registrations are cloned on :meth:`register` and bound to the
    container's root context, which makes singletons local to the container.

    Examples:
        >>> container = Container.create()
        >>> container.register("a", Registration.create(lambda bundle: 2))
        >>> container.register("b", Registration.create(lambda bundle: 3))
        >>> container.register("c", Registration.create(lambda bundle: bundle["a"] + bundle["b"]))
        >>> container.resolve("c")
        5
    """

    def __init__(self, context: Optional[Context] = None) -> None:
        self._root_context = context if context is not None else Context()
        self._registrations: Dict[Hashable, RegistrationT] = {}

    @classmethod
    def create(cls, context: Optional[Context] = None) -> "Container[RegistrationT]":
        return cls(context)

    @property
    def context(self) -> Context:
        return self._root_context

    @property
    def registrations(self) -> List[RegistrationT]:
        return list(self._registrations.values())

    @property
    def entries(self) -> List[Tuple[Hashable, RegistrationT]]:
        return list(self._registrations.items())

    def get(self, token: Hashable) -> Optional[RegistrationT]:
        return self._registrations.get(token)

    def has(self, token: Hashable) -> bool:
        return token in self._registrations

    def __contains__(self, token: object) -> bool:
        return token in self._registrations

    def register(self, token: Hashable, registration: RegistrationT) -> None:
        """Store a clone of *registration* bound to this container's root context.

        Registering a token again replaces its previous registration.
        """
        logger.debug("Registering token %r", token)
        self._registrations[token] = registration.clone(context=self._root_context)

    def resolve(
        self,
        token: Hashable,
        *,
        context: Optional[Context] = None,
        bundle: Optional[Mapping] = None,
    ) -> Any:
        """Resolve *token*, or return ``None`` if it was never registered.

        Args:
            token: The token to resolve.
            context: Cache for scoped registrations, shared by every sibling
                read during this resolution. A fresh one is used when omitted.
            bundle: Extra dependencies for tokens the container does not
                provide. Registered tokens always take precedence.
        """
        registration = self._registrations.get(token)
        if registration is None:
            logger.debug("Token %r is not registered", token)
            return None

        resolution_context = context if context is not None else Context()
        siblings = Bundle.create(
            (sibling, _sibling_descriptor(entry, resolution_context))
            for sibling, entry in self._registrations.items()
        )

        return registration.resolve(
            context=resolution_context,
            bundle=Bundle.merge(siblings, bundle),
        )

    def clone(self, context: Optional[Context] = None) -> "Container[RegistrationT]":
        """Copy this container; registrations are re-bound to the new root context."""
        container: Container[RegistrationT] = type(self)(context)
        for token, registration in self._registrations.items():
            container.register(token, registration)
        return container

    def __len__(self) -> int:
        return len(self._registrations)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._registrations)!r})"


def _sibling_descriptor(registration: Registration, context: Context) -> Descriptor:
    return Descriptor.deferred(
        lambda bundle: registration.resolve(bundle=bundle, context=context)
    )
