class IconSyncError(Exception):
    """Base class for figma-icon-sync errors"""

    pass


class MalformedContentError(IconSyncError):
    """Raised when icon content has no single well-formed top-level <svg> element"""

    pass


class FileOperationError(IconSyncError):
    """Raised when a target path is not usable for writing"""

    pass


class ConfigError(IconSyncError):
    """Raised when the configuration file is missing or invalid"""

    pass


class FigmaAPIError(IconSyncError):
    """Raised when the Figma API returns an error or cannot be reached"""

    pass


class GitError(IconSyncError):
    """Raised when a git command or the pull request API fails"""

    pass
