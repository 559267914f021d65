"""Registrations pair a resolver with a lifecycle policy."""

import logging
from collections.abc import Mapping
from typing import Callable, Generic, Optional, TypeVar, Union

from vinculum.bundle import Bundle
from vinculum.context import Context
from vinculum.exceptions import ResolutionError
from vinculum.lifecycle import Lifecycle

logger = logging.getLogger(__name__)

R = TypeVar("R")

LifecycleLike = Union[Lifecycle, str]


class Registration(Generic[R]):
    """A resolver bound to a lifecycle and a default context.

    Args:
        resolver: A ``bundle -> value`` callable, usually a
            :class:`~vinculum.resolver.Resolver`.
        context: Cache used for ``Lifecycle.SINGLETON``. A private one is
            created when omitted.
        lifecycle: ``Lifecycle.SINGLETON`` (default), ``Lifecycle.SCOPED`` or
            ``Lifecycle.TRANSIENT``, or their string values.
        bundle: Fallback dependencies, used for tokens missing from the
            bundle supplied at resolution time.

    Examples:
        >>> registration = Registration.create(lambda bundle: object())
        >>> registration.resolve() is registration.resolve()
        True
        >>> fresh = Registration.create(lambda bundle: object(), lifecycle="transient")
        >>> fresh.resolve() is fresh.resolve()
        False
    """

    def __init__(
        self,
        resolver: Callable[[Bundle], R],
        *,
        context: Optional[Context] = None,
        lifecycle: LifecycleLike = Lifecycle.SINGLETON,
        bundle: Optional[Mapping] = None,
    ) -> None:
        self._resolver = resolver
        self._context = context if context is not None else Context()
        self._lifecycle = lifecycle
        self._bundle = Bundle.merge(bundle)

    @classmethod
    def create(
        cls,
        resolver: Callable[[Bundle], R],
        *,
        context: Optional[Context] = None,
        lifecycle: LifecycleLike = Lifecycle.SINGLETON,
        bundle: Optional[Mapping] = None,
    ) -> "Registration[R]":
        return cls(resolver, context=context, lifecycle=lifecycle, bundle=bundle)

    @property
    def resolver(self) -> Callable[[Bundle], R]:
        return self._resolver

    @property
    def context(self) -> Context:
        return self._context

    @property
    def lifecycle(self) -> LifecycleLike:
        return self._lifecycle

    @property
    def bundle(self) -> Bundle:
        return self._bundle

    def resolve(
        self,
        *,
        bundle: Optional[Mapping] = None,
        context: Optional[Context] = None,
        lifecycle: Optional[LifecycleLike] = None,
    ) -> R:
        """Produce a value according to the lifecycle.

        Args:
            bundle: Dependencies handed to the resolver.
            context: Cache used for ``Lifecycle.SCOPED``.
            lifecycle: Overrides the registration's lifecycle for this call.

        Raises:
            ResolutionError: If the lifecycle is scoped and no context is
                given, or if the lifecycle is not a known value.
        """
        tag = self._lifecycle if lifecycle is None else lifecycle
        try:
            policy = Lifecycle(tag)
        except ValueError:
            raise ResolutionError(
                f"Could not resolve registration. Invalid lifecycle: {tag!r}"
            ) from None

        dependencies = self._dependencies(bundle)

        if policy is Lifecycle.TRANSIENT:
            return self._resolver(dependencies)

        if policy is Lifecycle.SINGLETON:
            return self._context.resolve(self._resolver, dependencies)

        if context is None:
            raise ResolutionError(
                "Could not resolve scoped registration. Missing resolution context"
            )
        return context.resolve(self._resolver, dependencies)

    def clone(
        self,
        *,
        context: Optional[Context] = None,
        bundle: Optional[Mapping] = None,
    ) -> "Registration[R]":
        """Copy this registration, optionally with another context or bundle.

        A clone given a new context has its own singleton cache.
        """
        logger.debug("Cloning registration of %r", self._resolver)
        return Registration(
            self._resolver,
            context=context if context is not None else self._context,
            lifecycle=self._lifecycle,
            bundle=bundle if bundle is not None else self._bundle,
        )

    def _dependencies(self, bundle: Optional[Mapping]) -> Mapping:
        if not self._bundle:
            return bundle if bundle is not None else Bundle.create()
        return Bundle.merge(bundle, self._bundle)

    def __repr__(self) -> str:
        tag = self._lifecycle.value if isinstance(self._lifecycle, Lifecycle) else self._lifecycle
        return f"{type(self).__name__}({self._resolver!r}, lifecycle={tag!r})"
