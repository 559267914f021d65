"""Stable, reference-scoped identities for construction targets.

An identity is a 22 character base62 rendering of a version 4 UUID. Identities
are attached to targets through a process-wide side table keyed by object
reference, so attaching one never changes the target's attributes, equality
or serialized form. Entries are dropped when their target is collected.

Callables that cannot be weakly referenced (``operator.itemgetter``, method
descriptors...) are pinned by the table instead and live as long as the
process. Other values that cannot be weakly referenced (``int``, ``str``,
``tuple``, slotted objects without ``__weakref__``...) cannot carry an
identity.

Examples:
    >>> def recipe(bundle):
    ...     return 42
    >>> extract(recipe) == extract(recipe)
    True
    >>> len(extract(recipe))
    22
    >>> decode(encode("123e4567-e89b-12d3-a456-426614174000"))
    '123e4567-e89b-12d3-a456-426614174000'
"""

import logging
import string
import threading
import uuid
import weakref
from typing import Any, Callable, Dict, Tuple, TypeVar, Union

from vinculum.exceptions import IdentityError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
IDENTITY_LENGTH = 22

_BASE = len(ALPHABET)
_INDEX = {char: index for index, char in enumerate(ALPHABET)}
_HEX_LENGTH = 32
_MAX_VALUE = 1 << 128

# id(target) -> (reference to target, identity); the reference is weak unless
# the target is a callable that cannot be weakly referenced.
_identities: Dict[int, Tuple[Callable[[], Any], str]] = {}
_lock = threading.RLock()


def create() -> str:
    """Return a new random identity."""
    return encode(uuid.uuid4())


def encode(value: Union[str, uuid.UUID]) -> str:
    """Encode a UUID into its 22 character base62 form.

    Raises:
        IdentityError: If *value* is not 32 hex digits once hyphens are removed.
    """
    digits = str(value).replace("-", "")
    if len(digits) != _HEX_LENGTH or not all(c in string.hexdigits for c in digits):
        raise IdentityError(f"Could not encode identity. Invalid UUID: {value!r}", value)

    number = int(digits, 16)
    chars = []
    while number:
        number, remainder = divmod(number, _BASE)
        chars.append(ALPHABET[remainder])
    return "".join(reversed(chars)).rjust(IDENTITY_LENGTH, ALPHABET[0])


def decode(identity: str) -> str:
    """Decode a base62 identity back into a hyphenated UUID string.

    Raises:
        IdentityError: On a character outside the base62 alphabet, on a
            length other than 22 characters, or when the value does not fit
            in 128 bits.
    """
    number = 0
    for char in identity:
        index = _INDEX.get(char)
        if index is None:
            raise IdentityError(f"Invalid base62 character: {char!r}", identity)
        number = number * _BASE + index

    if len(identity) != IDENTITY_LENGTH:
        raise IdentityError(
            f"Could not decode identity. Expected {IDENTITY_LENGTH} characters, got {len(identity)}",
            identity,
        )

    if number >= _MAX_VALUE:
        raise IdentityError(f"Could not decode identity. Value exceeds 128 bits: {identity!r}", identity)

    digits = format(number, "032x")
    return f"{digits[:8]}-{digits[8:12]}-{digits[12:16]}-{digits[16:20]}-{digits[20:]}"


def extract(target: Any) -> str:
    """Return the identity of *target*, attaching a new one on first request.

    Raises:
        IdentityError: If *target* is not callable and cannot be weakly
            referenced.
    """
    with _lock:
        entry = _identities.get(id(target))
        if entry is not None and entry[0]() is target:
            return entry[1]

        identity = create()
        _attach(target, identity)
        return identity


def bind(source: Any, target: T) -> T:
    """Give *target* the identity of *source* and return *target*.

    Wrappers bound this way are memoized as if they were the object they
    wrap.
    """
    with _lock:
        _attach(target, extract(source))
    return target


def _attach(target: Any, identity: str) -> None:
    key = id(target)
    try:
        reference = weakref.ref(target, _forget(key))
    except TypeError:
        if not callable(target):
            raise IdentityError(
                f"Could not extract identity. Unextendable target: {type(target).__name__}",
                target,
            ) from None
        reference = _pinned(target)
    _identities[key] = (reference, identity)
    logger.debug("Attached identity %s to %s", identity, type(target).__name__)


def _forget(key: int) -> Callable[["weakref.ref[Any]"], None]:
    def callback(reference: "weakref.ref[Any]") -> None:
        with _lock:
            entry = _identities.get(key)
            if entry is not None and entry[0] is reference:
                del _identities[key]

    return callback


def _pinned(target: Any) -> Callable[[], Any]:
    # Holding target keeps id(target) from being reused while the entry exists.
    def reference() -> Any:
        return target

    return reference
