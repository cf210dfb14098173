from typing import Optional


class DirectoryReadError(OSError):
    """
    Exception raised when a directory cannot be listed while building a tree.

    This covers every reason a listing can fail: the path does not exist, is not a
    directory, or cannot be read because of permissions. The failure is not retried;
    callers are expected to report it and show no partial tree.

    Attributes:
        path (str): The directory that could not be listed.
        reason (Optional[str]): Description of the underlying failure, if known.

    Example:
        >>> error = DirectoryReadError("/no/such/dir", "No such file or directory")
        >>> str(error)
        'Cannot read directory: /no/such/dir (No such file or directory)'
        >>> error.path
        '/no/such/dir'
    """

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        """
        Initialize the exception with the path that failed.

        Args:
            path (str): The directory that could not be listed.
            reason (str, optional): Description of the underlying failure.
        """
        self.path = path
        self.reason = reason
        message = f"Cannot read directory: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class MalformedMessageError(ValueError):
    """
    Exception raised when a channel message or node record cannot be understood.

    Example:
        >>> error = MalformedMessageError("Unknown command: 'explode'")
        >>> str(error)
        "Unknown command: 'explode'"
    """

    pass


class WelcomeTabError(ValueError):
    """
    Exception raised when an operation that needs a tree targets the welcome tab.

    Attributes:
        tab_id (str): Identifier of the welcome tab that was targeted.

    Example:
        >>> str(WelcomeTabError("welcome"))
        "Operation not supported on the welcome tab: 'welcome'"
    """

    def __init__(self, tab_id: str) -> None:
        self.tab_id = tab_id
        super().__init__(f"Operation not supported on the welcome tab: {tab_id!r}")
