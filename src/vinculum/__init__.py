"""vinculum: token-based dependency resolution with lazy, circular-safe recipes."""

from vinculum import identity
from vinculum.bundle import Bundle, Descriptor
from vinculum.container import Container
from vinculum.context import Context
from vinculum.decorators import provides
from vinculum.exceptions import (
    IdentityError,
    NotExposedError,
    RegistrationError,
    ResolutionError,
)
from vinculum.lifecycle import Lifecycle
from vinculum.module import Module, Visibility
from vinculum.registration import Registration
from vinculum.resolver import LazyProxy, Resolution, Resolver, is_materialized, materialize

__all__ = [
    "Bundle",
    "Container",
    "Context",
    "Descriptor",
    "IdentityError",
    "LazyProxy",
    "Lifecycle",
    "Module",
    "NotExposedError",
    "Registration",
    "RegistrationError",
    "Resolution",
    "ResolutionError",
    "Resolver",
    "Visibility",
    "identity",
    "is_materialized",
    "materialize",
    "provides",
]
