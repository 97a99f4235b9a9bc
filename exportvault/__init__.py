"""
ExportVault
Copyright (c) 2025

LEGAL NOTICE AND THREAT MODEL:
This tool is for personal use only. It caches a password manager export on the
device where it is installed, encrypted with a key bound to that device and
user account. It protects the cached data against casual disk inspection and
copying the cache file elsewhere; it does not protect against software running
as the same user on the same device.
"""

from .errors import (
    ExportVaultError,
    SourceNotConfigured,
    SourceNotFound,
    SourceFormatError,
    DecryptionError,
)
from .models import Credential, PaymentCard, SecureNote, Snapshot
from .storage import CacheManager, CacheState

__all__ = [
    "CacheManager",
    "CacheState",
    "Credential",
    "PaymentCard",
    "SecureNote",
    "Snapshot",
    "ExportVaultError",
    "SourceNotConfigured",
    "SourceNotFound",
    "SourceFormatError",
    "DecryptionError",
]
