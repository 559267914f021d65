"""Lifecycle management for registrations."""

from enum import Enum


class Lifecycle(Enum):
    """Defines how long a resolved value lives.

    Attributes:
        SINGLETON: Cached in the registration's own context, shared by every
            resolution through the same container.
        SCOPED: Cached in the context supplied at resolution time.
        TRANSIENT: A new value is produced on every resolution.

    Examples:
        >>> Lifecycle.SINGLETON
        <Lifecycle.SINGLETON: 'singleton'>
        >>> Lifecycle("scoped")
        <Lifecycle.SCOPED: 'scoped'>
    """

    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"
