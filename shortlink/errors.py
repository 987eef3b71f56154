class ShortlinkError(Exception):
    """Base class for errors raised by the link store operations."""


class InvalidInputError(ShortlinkError):
    """Malformed URL, code, or TTL."""


class CodeConflictError(ShortlinkError):
    """The requested code is already taken."""


class CodeGenerationError(ShortlinkError):
    """Every generated code collided with an existing one."""
