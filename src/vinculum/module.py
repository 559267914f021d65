"""Modules group registrations and control which tokens they expose."""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Hashable, List, Optional, Tuple, TypeVar, Union

from vinculum.bundle import Bundle, Descriptor
from vinculum.container import Container
from vinculum.context import Context
from vinculum.exceptions import NotExposedError, RegistrationError, ResolutionError
from vinculum.lifecycle import Lifecycle
from vinculum.registration import LifecycleLike, Registration
from vinculum.resolver import Resolution, Resolver

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Visibility(Enum):
    """Whether a module token can be resolved from outside the module.

    Attributes:
        PUBLIC: Resolvable by callers and by modules importing this one.
        PRIVATE: Only available as a dependency of the module's own recipes.
    """

    PUBLIC = "public"
    PRIVATE = "private"


class ModuleRegistration(Registration[R]):
    """A registration that also records its visibility."""

    def __init__(
        self,
        resolver: Callable[[Bundle], R],
        *,
        context: Optional[Context] = None,
        lifecycle: LifecycleLike = Lifecycle.SINGLETON,
        bundle: Optional[Mapping] = None,
        visibility: Union[Visibility, str] = Visibility.PUBLIC,
    ) -> None:
        super().__init__(resolver, context=context, lifecycle=lifecycle, bundle=bundle)
        try:
            self.visibility = Visibility(visibility)
        except ValueError:
            raise RegistrationError(
                f"Could not create registration. Invalid visibility: {visibility!r}"
            ) from None

    def clone(
        self,
        *,
        context: Optional[Context] = None,
        bundle: Optional[Mapping] = None,
    ) -> "ModuleRegistration[R]":
        return ModuleRegistration(
            self.resolver,
            context=context if context is not None else self.context,
            lifecycle=self.lifecycle,
            bundle=bundle if bundle is not None else self.bundle,
            visibility=self.visibility,
        )


class Module:
    """A unit of registrations with public and private tokens.

    Private tokens can be read by the module's own recipes but cannot be
    resolved from outside. Importing another module makes its public tokens
    available as dependencies of this module's recipes.

    Args:
        name: Label used in error messages.
        context: Root context for singletons; also shared with imported
            modules.

    Examples:
        >>> database = Module("database")
        >>> database.register("url", factory=lambda bundle: "sqlite://", visibility="private")
        >>> database.register("engine", factory=lambda bundle: f"engine({bundle['url']})")
        >>> app = Module("app")
        >>> app.import_module(database)
        >>> app.register("service", factory=lambda bundle: f"service({bundle['engine']})")
        >>> app.resolve("service")
        'service(engine(sqlite://))'
        >>> database.exposes("url")
        False
    """

    def __init__(self, name: Optional[str] = None, context: Optional[Context] = None) -> None:
        self.name = name
        self._context = context if context is not None else Context()
        self._container: Container[ModuleRegistration] = Container(self._context)
        self._modules: List["Module"] = []

    @property
    def label(self) -> str:
        return self.name if self.name is not None else f"<module at {id(self):#x}>"

    @property
    def modules(self) -> List["Module"]:
        return list(self._modules)

    @property
    def registrations(self) -> List[ModuleRegistration]:
        """Public registrations only."""
        return [registration for _, registration in self.entries]

    @property
    def entries(self) -> List[Tuple[Hashable, ModuleRegistration]]:
        """Public ``(token, registration)`` pairs only."""
        return [
            (token, registration)
            for token, registration in self._container.entries
            if registration.visibility is Visibility.PUBLIC
        ]

    def has(self, token: Hashable) -> bool:
        """Tell whether this module holds *token*, whatever its visibility."""
        return self._container.has(token)

    def exposes(self, token: Hashable) -> bool:
        """Tell whether *token* is registered here and public."""
        registration = self._container.get(token)
        return registration is not None and registration.visibility is Visibility.PUBLIC

    def register(
        self,
        token: Hashable,
        *,
        factory: Optional[Callable[[Bundle], Any]] = None,
        constructor: Optional[type] = None,
        resolution: Union[Resolution, str] = Resolution.EAGER,
        lifecycle: LifecycleLike = Lifecycle.SINGLETON,
        visibility: Union[Visibility, str] = Visibility.PUBLIC,
    ) -> None:
        """Register a factory or a constructor under *token*.

        Raises:
            RegistrationError: If the target is missing or invalid, or if the
                module already holds *token*.
        """
        resolver = Resolver.create(factory=factory, constructor=constructor, resolution=resolution)
        self._set_registration(
            token,
            ModuleRegistration(resolver, lifecycle=lifecycle, visibility=visibility),
        )

    def register_factory(self, token: Hashable, factory: Callable[[Bundle], Any], **options: Any) -> None:
        self.register(token, factory=factory, **options)

    def register_constructor(self, token: Hashable, constructor: type, **options: Any) -> None:
        self.register(token, constructor=constructor, **options)

    def import_module(self, module: "Module") -> None:
        """Make the public tokens of *module* available to this module's recipes.

        A clone of *module* bound to this module's context is kept, so its
        singletons are cached per importer.
        """
        logger.debug("Module %s imports module %s", self.label, module.label)
        self._modules.append(module.clone(context=self._context))

    def clone(self, context: Optional[Context] = None) -> "Module":
        clone = Module(self.name, context)
        for token, registration in self._container.entries:
            clone._set_registration(token, registration)
        for module in self._modules:
            clone._modules.append(module.clone(context=clone._context))
        return clone

    def resolve(self, token: Hashable, *, context: Optional[Context] = None) -> Any:
        """Resolve a public token.

        Raises:
            ResolutionError: If the module does not hold *token*.
            NotExposedError: If *token* is private.
        """
        if not self._container.has(token):
            raise ResolutionError(
                f"Could not resolve token {token!r}. Module {self.label} does not "
                f"contain a registration associated with the given token.",
                token=token,
            )
        if not self.exposes(token):
            raise NotExposedError(
                f"Could not resolve token {token!r}. Module {self.label} does not "
                f"expose a registration associated with the given token.",
                token=token,
            )

        resolution_context = context if context is not None else Context()
        imported = Bundle.create(
            (imported_token, _imported_descriptor(module, imported_token, resolution_context))
            for module in self._modules
            for imported_token, _ in module.entries
        )
        return self._container.resolve(token, context=resolution_context, bundle=imported)

    def _set_registration(self, token: Hashable, registration: ModuleRegistration) -> None:
        if self._container.has(token):
            raise RegistrationError(
                f"Could not register token {token!r}. Module {self.label} already "
                f"contains a registration assigned to the same token.",
                token=token,
            )
        self._container.register(token, registration)

    def __repr__(self) -> str:
        return f"Module({self.label!r})"


def _imported_descriptor(module: Module, token: Hashable, context: Context) -> Descriptor:
    return Descriptor.deferred(lambda bundle: module.resolve(token, context=context))
