"""Inertia Press exception classes."""

__all__ = [
    "AssetNotFoundError",
    "InertiaPressError",
    "ManifestNotFoundError",
    "MissingEntryPointError",
]


class InertiaPressError(Exception):
    """Base exception for Inertia Press related errors."""


class ManifestNotFoundError(InertiaPressError):
    """Raised when the manifest file is missing, unreadable or invalid."""

    def __init__(self, manifest_path: str, reason: "str | None" = None) -> None:
        """Initialize the exception.

        Args:
            manifest_path: The location the manifest was expected at.
            reason: Optional detail on why the manifest could not be used.
        """
        message = f"[Vite] No usable manifest found at {manifest_path!r}. Did you forget to build your assets?"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.manifest_path = manifest_path


class AssetNotFoundError(InertiaPressError):
    """Raised when an entry point is not found in the manifest."""

    def __init__(self, file_path: str, manifest_path: str) -> None:
        super().__init__(f"[Vite] Input {file_path!r} not found in manifest at {manifest_path!r}.")
        self.file_path = file_path
        self.manifest_path = manifest_path


class MissingEntryPointError(InertiaPressError):
    """Raised when assets are requested but no entry point is configured."""

    def __init__(self) -> None:
        super().__init__("[Vite] No entry point configured. Set `ViteConfig.input` or pass an entry explicitly.")
