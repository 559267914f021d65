"""Uniform ``bundle -> value`` callables wrapping construction targets."""

import inspect
import logging
import operator
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Iterator, Optional, Tuple, Union

from vinculum import identity
from vinculum.bundle import Bundle
from vinculum.exceptions import RegistrationError

logger = logging.getLogger(__name__)


class Resolution(Enum):
    """When a resolver invokes its target.

    Attributes:
        EAGER: The target is invoked as soon as the resolver is called.
        LAZY: The resolver returns a :class:`LazyProxy`; the target is
            invoked on the first observation of that proxy.
    """

    EAGER = "eager"
    LAZY = "lazy"


class Resolver:
    """Wraps a factory or a constructor into a ``bundle -> value`` callable.

    A resolver shares the identity of its target, so a
    :class:`~vinculum.context.Context` memoizes it as the recipe it wraps.

    Use :meth:`create` rather than instantiating directly.

    Examples:
        >>> resolver = Resolver.create(factory=lambda bundle: bundle["name"].upper())
        >>> resolver({"name": "db"})
        'DB'
    """

    def __init__(
        self,
        target: Callable[..., Any],
        resolution: Resolution = Resolution.EAGER,
        instance_class: Optional[type] = None,
    ) -> None:
        self.target = target
        self.resolution = resolution
        self._instance_class = instance_class
        identity.bind(target, self)

    @classmethod
    def create(
        cls,
        factory: Optional[Callable[[Bundle], Any]] = None,
        constructor: Optional[type] = None,
        resolution: Union[Resolution, str] = Resolution.EAGER,
    ) -> "Resolver":
        """Build a resolver for exactly one of *factory* or *constructor*.

        Both kinds of target are called with the bundle as their only
        argument.

        Args:
            factory: A callable returning the value.
            constructor: A class instantiated to produce the value.
            resolution: ``Resolution.EAGER`` (default) or ``Resolution.LAZY``,
                or their string values.

        Raises:
            RegistrationError: If no target, both targets, an invalid target
                or an unknown resolution is given.
        """
        if factory is None and constructor is None:
            raise RegistrationError(
                "Could not create resolver. Invalid registration options: "
                "missing a valid registration target"
            )
        if factory is not None and constructor is not None:
            raise RegistrationError(
                "Could not create resolver. Invalid registration options: "
                "provide either `factory` or `constructor`, not both"
            )
        if factory is not None and not callable(factory):
            raise RegistrationError(
                "Could not create resolver. Invalid registration options: "
                f"factory must be callable, got {type(factory).__name__}"
            )
        if constructor is not None and not inspect.isclass(constructor):
            raise RegistrationError(
                "Could not create resolver. Invalid registration options: "
                f"constructor must be a class, got {type(constructor).__name__}"
            )

        try:
            strategy = Resolution(resolution)
        except ValueError:
            raise RegistrationError(
                "Could not create resolver. Invalid registration options: "
                f"unknown resolution {resolution!r}"
            ) from None

        if constructor is not None:
            return cls(constructor, strategy, instance_class=constructor)
        return cls(factory, strategy)

    def __call__(self, bundle: Optional[Mapping] = None) -> Any:
        if bundle is None:
            bundle = Bundle.create()

        if self.resolution is Resolution.LAZY:
            return LazyProxy(lambda: self._invoke(bundle), self._instance_class)
        return self._invoke(bundle)

    def _invoke(self, bundle: Mapping) -> Any:
        if self.resolution is Resolution.LAZY:
            logger.debug("Materializing lazy resolution of %s", _describe(self.target))
        return self.target(bundle)

    def __repr__(self) -> str:
        kind = "constructor" if self._instance_class is not None else "factory"
        return f"Resolver({kind}={_describe(self.target)}, resolution={self.resolution.value!r})"


def _forward_binary(op: Callable[[Any, Any], Any]) -> Tuple[Callable[..., Any], Callable[..., Any]]:
    """Build the forward and reflected forms of a binary operator."""

    def forward(self: "LazyProxy", other: Any) -> Any:
        return op(materialize(self), other)

    def reflected(self: "LazyProxy", other: Any) -> Any:
        return op(other, materialize(self))

    return forward, reflected


class LazyProxy:
    """A stand-in for a value that is built on first observation.

    Attribute access, item access, membership, iteration, calls, comparisons,
    hashing, formatting, numeric conversion, arithmetic and bitwise operators
    and the context manager protocol all materialize the value once and then
    forward to it. Augmented assignment falls back to the plain operator, so
    ``proxy += 1`` rebinds the name to the result. When the proxied class is
    known up front, ``isinstance`` checks pass without materializing.
    """

    __slots__ = ("_lazy_factory", "_lazy_class", "_lazy_instance", "__weakref__")

    def __init__(self, factory: Callable[[], Any], instance_class: Optional[type] = None) -> None:
        object.__setattr__(self, "_lazy_factory", factory)
        object.__setattr__(self, "_lazy_class", instance_class)

    @property  # type: ignore[misc]
    def __class__(self) -> type:
        instance_class = object.__getattribute__(self, "_lazy_class")
        if instance_class is not None and not is_materialized(self):
            return instance_class
        return materialize(self).__class__

    def __getattr__(self, name: str) -> Any:
        return getattr(materialize(self), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(materialize(self), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(materialize(self), name)

    def __dir__(self) -> Any:
        return dir(materialize(self))

    def __getitem__(self, key: Any) -> Any:
        return materialize(self)[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        materialize(self)[key] = value

    def __delitem__(self, key: Any) -> None:
        del materialize(self)[key]

    def __contains__(self, item: Any) -> bool:
        return item in materialize(self)

    def __iter__(self) -> Iterator[Any]:
        return iter(materialize(self))

    def __len__(self) -> int:
        return len(materialize(self))

    def __bool__(self) -> bool:
        return bool(materialize(self))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return materialize(self)(*args, **kwargs)

    def __eq__(self, other: object) -> bool:
        return materialize(self) == other

    def __ne__(self, other: object) -> bool:
        return materialize(self) != other

    def __lt__(self, other: Any) -> bool:
        return materialize(self) < other

    def __le__(self, other: Any) -> bool:
        return materialize(self) <= other

    def __gt__(self, other: Any) -> bool:
        return materialize(self) > other

    def __ge__(self, other: Any) -> bool:
        return materialize(self) >= other

    def __hash__(self) -> int:
        return hash(materialize(self))

    def __str__(self) -> str:
        return str(materialize(self))

    def __repr__(self) -> str:
        return repr(materialize(self))

    def __format__(self, format_spec: str) -> str:
        return format(materialize(self), format_spec)

    def __reversed__(self) -> Iterator[Any]:
        return reversed(materialize(self))

    def __index__(self) -> int:
        return operator.index(materialize(self))

    def __int__(self) -> int:
        return int(materialize(self))

    def __float__(self) -> float:
        return float(materialize(self))

    def __round__(self, ndigits: Optional[int] = None) -> Any:
        return round(materialize(self), ndigits)

    def __neg__(self) -> Any:
        return -materialize(self)

    def __pos__(self) -> Any:
        return +materialize(self)

    def __abs__(self) -> Any:
        return abs(materialize(self))

    def __invert__(self) -> Any:
        return ~materialize(self)

    def __enter__(self) -> Any:
        return materialize(self).__enter__()

    def __exit__(self, *exc_info: Any) -> Any:
        return materialize(self).__exit__(*exc_info)

    __add__, __radd__ = _forward_binary(operator.add)
    __sub__, __rsub__ = _forward_binary(operator.sub)
    __mul__, __rmul__ = _forward_binary(operator.mul)
    __matmul__, __rmatmul__ = _forward_binary(operator.matmul)
    __truediv__, __rtruediv__ = _forward_binary(operator.truediv)
    __floordiv__, __rfloordiv__ = _forward_binary(operator.floordiv)
    __mod__, __rmod__ = _forward_binary(operator.mod)
    __divmod__, __rdivmod__ = _forward_binary(divmod)
    __pow__, __rpow__ = _forward_binary(pow)
    __lshift__, __rlshift__ = _forward_binary(operator.lshift)
    __rshift__, __rrshift__ = _forward_binary(operator.rshift)
    __and__, __rand__ = _forward_binary(operator.and_)
    __xor__, __rxor__ = _forward_binary(operator.xor)
    __or__, __ror__ = _forward_binary(operator.or_)


def materialize(proxy: LazyProxy) -> Any:
    """Return the value behind *proxy*, building it if needed."""
    try:
        return object.__getattribute__(proxy, "_lazy_instance")
    except AttributeError:
        pass

    factory = object.__getattribute__(proxy, "_lazy_factory")
    instance = factory()
    object.__setattr__(proxy, "_lazy_instance", instance)
    # The bundle captured by the factory is no longer needed.
    object.__setattr__(proxy, "_lazy_factory", None)
    return instance


def is_materialized(proxy: LazyProxy) -> bool:
    """Tell whether *proxy* has built its value, without building it."""
    try:
        object.__getattribute__(proxy, "_lazy_instance")
    except AttributeError:
        return False
    return True


def _describe(target: Any) -> str:
    return getattr(target, "__qualname__", type(target).__name__)
