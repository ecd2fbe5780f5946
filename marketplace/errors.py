"""
Failure types shared by the service layer.

Lookups that miss are not exceptions: ``get``/``update`` style operations
return ``None`` and every ``remove`` style operation returns an
:class:`Outcome`.  Authorization failures on update-style operations,
attachment I/O failures and malformed input are raised so they can never
be mistaken for a successful result.  The HTTP layer maps each of these to
its own status code.
"""
import enum


class Outcome(enum.Enum):
    """Result of a delete request."""

    OK = "ok"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""


class Forbidden(ServiceError):
    """The acting user is neither the record's author nor an administrator."""

    def __init__(self, message: str = "Only the author or an administrator may modify this resource"):
        super().__init__(message)


class ValidationError(ServiceError):
    """Input rejected before any record or attachment was written."""


class AttachmentIOError(ServiceError):
    """A filesystem operation on an attachment failed."""


class AttachmentNotFound(AttachmentIOError):
    """The referenced attachment does not exist in the store."""
