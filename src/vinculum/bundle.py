"""Immutable, lazily evaluated mappings from token to value.

A bundle carries dependencies into a recipe. Each token is backed by a
:class:`Descriptor`: either a plain value or a getter that is called only when
the token is read. Bundles are built once and never change afterwards.

Examples:
    >>> bundle = Bundle.create([
    ...     ("host", Descriptor.of("localhost")),
    ...     ("url", lambda partial: Descriptor.of("http://" + partial["host"])),
    ...     ("host", Descriptor.of("ignored")),
    ... ])
    >>> bundle["url"]
    'http://localhost'
    >>> Bundle.merge({"host": "example.org", "port": 80}, bundle)["host"]
    'example.org'
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Hashable,
    Iterable,
    Iterator,
    Optional,
    Tuple,
    Union,
)


@dataclass(frozen=True)
class Descriptor:
    """Describes how a bundle produces the value of one token.

    Attributes:
        value: The value returned on every read, for direct descriptors.
        getter: Called with the bundle being read, on every read, for
            deferred descriptors. Takes precedence over ``value``.
    """

    value: Any = None
    getter: Optional[Callable[["Bundle"], Any]] = None

    @classmethod
    def of(cls, value: Any) -> "Descriptor":
        """Describe a value known up front."""
        return cls(value=value)

    @classmethod
    def deferred(cls, getter: Callable[["Bundle"], Any]) -> "Descriptor":
        """Describe a value computed by *getter* each time it is read."""
        return cls(getter=getter)

    @property
    def is_deferred(self) -> bool:
        return self.getter is not None

    def read(self, bundle: "Bundle") -> Any:
        if self.getter is not None:
            return self.getter(bundle)
        return self.value


DescriptorSource = Union[Descriptor, Callable[["Bundle"], Descriptor]]
DescriptorEntries = Union[
    Mapping[Hashable, DescriptorSource],
    Iterable[Tuple[Hashable, DescriptorSource]],
]


class Bundle(Mapping):
    """An immutable token to value mapping.

    Use :meth:`create` or :meth:`merge` to build one. Reading a token evaluates
    its descriptor; membership tests, iteration and ``len`` never do.
    """

    __slots__ = ("_descriptors",)

    def __init__(self) -> None:
        object.__setattr__(self, "_descriptors", {})

    @classmethod
    def create(cls, descriptors: DescriptorEntries = ()) -> "Bundle":
        """Build a bundle from ``(token, descriptor)`` pairs or a mapping.

        The first entry seen for a token wins; later entries for the same
        token are dropped without being evaluated. An entry may also be a
        callable taking the bundle under construction and returning the
        :class:`Descriptor` to install. It is called exactly once, before
        later entries are applied.

        Raises:
            TypeError: If an entry is neither a descriptor nor a callable
                returning one.
        """
        if isinstance(descriptors, Bundle):
            descriptors = list(descriptors._descriptors.items())
        elif isinstance(descriptors, Mapping):
            descriptors = descriptors.items()

        bundle = cls()
        installed = bundle._descriptors
        for token, source in descriptors:
            if token in installed:
                continue
            installed[token] = _install(token, source, bundle)
        return bundle

    @classmethod
    def merge(cls, *bundles: Optional[Mapping]) -> "Bundle":
        """Combine bundles, earlier arguments winning on token collisions.

        ``None`` arguments are skipped. Plain mappings are accepted and their
        values are used as direct values. Deferred entries are carried over
        without being evaluated.
        """
        return cls.create(
            entry
            for bundle in bundles
            if bundle is not None
            for entry in _entries_of(bundle)
        )

    def descriptor(self, token: Hashable) -> Descriptor:
        """Return the descriptor backing *token* without evaluating it."""
        return self._descriptors[token]

    def __getitem__(self, token: Hashable) -> Any:
        return self._descriptors[token].read(self)

    def __contains__(self, token: object) -> bool:
        return token in self._descriptors

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._descriptors)!r})"


def _install(token: Hashable, source: DescriptorSource, bundle: Bundle) -> Descriptor:
    if isinstance(source, Descriptor):
        return source
    if callable(source):
        descriptor = source(bundle)
        if isinstance(descriptor, Descriptor):
            return descriptor
        raise TypeError(
            f"Descriptor function for {token!r} returned {type(descriptor).__name__}, "
            f"expected Descriptor"
        )
    raise TypeError(
        f"Bundle entry for {token!r} must be a Descriptor or a callable returning one, "
        f"got {type(source).__name__}"
    )


def _entries_of(bundle: Mapping) -> Iterator[Tuple[Hashable, Descriptor]]:
    if isinstance(bundle, Bundle):
        yield from bundle._descriptors.items()
    else:
        for token, value in bundle.items():
            yield token, Descriptor.of(value)
