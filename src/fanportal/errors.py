"""
Exceptions raised by the portal service.

Every failure is synchronous and local to the call that raised it.
"""


class PortalError(Exception):
    """Base class for all portal errors."""


class Unauthorized(PortalError):
    """The caller's role does not allow the requested operation."""


class NotFound(PortalError):
    """The referenced id or name does not exist in the target collection."""


class Conflict(PortalError):
    """A unique key is already taken."""


class InvalidInput(PortalError):
    """A required field is empty or a value is outside its allowed set."""
