"""Decorator helpers for vinculum.

These decorators provide cleaner syntax for registering recipes.
"""

import inspect
from typing import Any, Callable, Hashable, TypeVar, Union

from vinculum.container import Container
from vinculum.module import Module
from vinculum.registration import Registration
from vinculum.resolver import Resolution, Resolver

T = TypeVar("T")


def provides(
    target: Union[Module, Container],
    token: Hashable,
    **options: Any,
) -> Callable[[T], T]:
    """Register the decorated class or function under *token*.

    **On a class:** the class is registered as a constructor.

    **On a function:** the function is registered as a factory.

    Either way it is called with the bundle as its only argument. Dependencies
    are read from the bundle by token; nothing is inferred from the signature.

    Args:
        target: The :class:`Module` or :class:`Container` to register on.
        token: The token to register under.
        **options: ``resolution`` and ``lifecycle``, plus ``visibility`` when
            registering on a module.

    Returns:
        A decorator returning the class or function unmodified.

    Raises:
        RegistrationError: If the registration is rejected, for instance
            because a module already holds *token*.

    Examples:
        >>> module = Module("greetings")
        >>> @provides(module, "name")
        ... def make_name(bundle):
        ...     return "world"
        >>> @provides(module, "greeter")
        ... class Greeter:
        ...     def __init__(self, bundle):
        ...         self.name = bundle["name"]
        >>> module.resolve("greeter").name
        'world'
    """

    def decorator(inner: T) -> T:
        kind = "constructor" if inspect.isclass(inner) else "factory"

        if isinstance(target, Module):
            target.register(token, **{kind: inner}, **options)
            return inner

        registration_options = dict(options)
        resolution = registration_options.pop("resolution", Resolution.EAGER)
        resolver = Resolver.create(**{kind: inner}, resolution=resolution)
        target.register(token, Registration.create(resolver, **registration_options))
        return inner

    return decorator
