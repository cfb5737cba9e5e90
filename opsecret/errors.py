"""
Error taxonomy for secret resolution.

Every failure surfaces as one of these exceptions. Messages are written to be
read by an operator without access to logs, so they always name the vault,
item, section or field involved and the store's status where there is one.

Cancellation is not modelled here: ``asyncio.CancelledError`` propagates
untouched through the client and the resolver.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class OpSecretError(Exception):
    """Base class for every error raised by opsecret."""

    def wrap(self, context: str) -> OpSecretError:
        """Return an error of the same kind whose message is prefixed with ``context``.

        Callers chain the original with ``raise err.wrap(...) from err``.
        """
        return type(self)(f"{context}: {self}")


class ConfigError(OpSecretError):
    """Missing or invalid configuration."""


class InvalidRequest(OpSecretError):
    """The incoming request is absent or has no secret name."""


class MalformedPath(OpSecretError):
    """The secret path is not of the form ``vault/item[/field]``."""


class ResolutionError(OpSecretError):
    """Base class for failures while resolving a parsed path."""


class NotFoundError(ResolutionError):
    pass


class VaultNotFound(NotFoundError):
    pass


class ItemNotFound(NotFoundError):
    pass


class SectionNotFound(NotFoundError):
    pass


class FieldNotFound(NotFoundError):
    pass


class AmbiguousError(ResolutionError):
    pass


class AmbiguousVault(AmbiguousError):
    pass


class AmbiguousItem(AmbiguousError):
    pass


class AmbiguousField(AmbiguousError):
    pass


class ItemFetchFailed(ResolutionError):
    """The item was found by title but could not be loaded."""


class StoreError(ResolutionError):
    """Base class for errors talking to the store."""


class StoreAPIError(StoreError):
    """The store answered with a non-success HTTP status.

    ``status`` is the HTTP status code and ``message`` the store's own
    explanation (the JSON ``message`` or, failing that, the status line).
    """

    def __init__(self, status: int, message: str, *, context: str = "") -> None:
        self.status = status
        self.message = message
        self.context = context
        text = f"1Password Connect error ({status}): {message}"
        super().__init__(f"{context}: {text}" if context else text)

    def wrap(self, context: str) -> StoreAPIError:
        if self.context:
            context = f"{context}: {self.context}"
        return StoreAPIError(self.status, self.message, context=context)


class TransportError(StoreError):
    """The store could not be reached (DNS, TLS, connection, timeout)."""


def exactly_one(candidates: Sequence[T], missing: OpSecretError, ambiguous: OpSecretError) -> T:
    """Return the only element of ``candidates``; raise ``missing`` if none, ``ambiguous`` if several."""
    if not candidates:
        raise missing
    if len(candidates) > 1:
        raise ambiguous
    return candidates[0]
