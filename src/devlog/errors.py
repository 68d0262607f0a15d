"""Exceptions raised by devlog."""


class DevlogError(Exception):
    """Base class for expected devlog failures."""


class NotAGitRepository(DevlogError):
    """Raised when the working directory is not inside a git work tree."""

    def __init__(self, path=None):
        self.path = path
        super().__init__(
            "Not a git repository. Please run devlog from inside a git repository."
        )


class InvalidRange(DevlogError):
    """Raised when a recap range is not of the form <from>..<to>."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            "Invalid range format. Use: devlog recap <from>..<to> "
            "(e.g., HEAD~10..HEAD)"
        )
