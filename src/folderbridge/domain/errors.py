"""Domain errors."""


class FolderBridgeError(Exception):
    """Base error with optional path/operation context."""

    def __init__(self, message: str, path: str = "", operation: str = ""):
        self.message = message
        self.path = path
        self.operation = operation
        if operation:
            super().__init__(f"[{operation}] {path}: {message}")
        else:
            super().__init__(message)


class NotFoundError(FolderBridgeError):
    """Folder or path segment absent."""
    pass


class PermissionDeniedError(FolderBridgeError):
    """Capability permission query did not report granted."""
    pass


class ReadFailureError(FolderBridgeError):
    """Content unreadable or undecodable."""
    pass


class WriteFailureError(FolderBridgeError):
    """Underlying write rejected."""
    pass


class PatternError(FolderBridgeError, ValueError):
    """Malformed glob or regex input."""
    pass


class EditMatchError(FolderBridgeError):
    """Text to replace was not found in the target file."""
    pass


class InvalidPathError(FolderBridgeError, ValueError):
    """Virtual path does not address any folder."""
    pass


class AbortedByUser(Exception):
    """Capability acquisition cancelled by the user.

    Not a failure: deliberately outside the FolderBridgeError hierarchy so
    generic error handlers never report it.
    """
    pass
