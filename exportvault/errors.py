"""
Exception types raised by the ExportVault cache.
"""


class ExportVaultError(Exception):
    """Base class for every error the cache reports to its callers."""


class SourceNotConfigured(ExportVaultError):
    """No export file path could be resolved."""

    def __init__(self, message: str = "Export file not found. Please set the export file path."):
        super().__init__(message)


class SourceNotFound(SourceNotConfigured):
    """An export file path is configured but nothing exists there."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Export file not found at: {path}")


class SourceFormatError(ExportVaultError):
    """The export file could not be read as delimited text."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(
            f"Failed to parse CSV file: {detail}. Please ensure the CSV file is properly formatted."
        )


class DecryptionError(ExportVaultError):
    """An encrypted token is malformed, tampered with, or from another machine."""

    def __init__(self, message: str = "Failed to decrypt cache. The cache may be corrupted or from a different system."):
        super().__init__(message)
