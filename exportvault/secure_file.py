"""
Reading and writing files through the cache codec.

Files written here are encrypted tokens restricted to the owner. Reads also
accept plain content so caches written before encryption was introduced keep
loading.
"""

import os
import shutil
import logging
from typing import Optional, Union

from .crypto import CryptoManager
from .utils import set_secure_file_permissions
from . import config

logger = logging.getLogger(__name__)


def read_secure(path: str, crypto: Optional[CryptoManager] = None) -> bytes:
    """
    Read a file written by write_secure().

    Content shaped like an encrypted token is decrypted; anything else is
    returned as-is.

    Raises:
        DecryptionError: If the content is token-shaped but cannot be decrypted
        OSError: If the file cannot be read
    """
    crypto = crypto or CryptoManager()
    with open(path, 'rb') as f:
        content = f.read()

    if crypto.is_token(content):
        return crypto.decrypt(content)

    logger.debug(f"{path} is not encrypted, reading as plain text")
    return content


def write_secure(path: str, plaintext: Union[bytes, str], encrypt: bool = True,
                 crypto: Optional[CryptoManager] = None) -> None:
    """
    Write a file, encrypting it unless encrypt is False, and restrict it to the owner.

    The content goes to a temporary file first and replaces path in one move,
    so a failed write leaves any previous file intact.
    """
    if isinstance(plaintext, str):
        plaintext = plaintext.encode('utf-8')
    if encrypt:
        crypto = crypto or CryptoManager()
        content = crypto.encrypt(plaintext).encode('utf-8')
    else:
        content = plaintext

    tmp_path = path + config.TEMP_FILE_SUFFIX
    try:
        with open(tmp_path, 'wb') as f:
            f.write(content)
        # Restrict before the move so the final file is never world-readable
        set_secure_file_permissions(tmp_path)
        shutil.move(tmp_path, path)
    except Exception as e:
        logger.error(f"Error writing {path}: {e}", exc_info=True)
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    if not set_secure_file_permissions(path):
        logger.warning(f"Failed to set secure file permissions for {path}.")
