"""
Cryptographic operations for the export cache.

The cache key is derived from attributes of the machine and user account, so a
cache file copied to another machine (or read by another account) cannot be
decrypted there. This protects against casual disk inspection and file
exfiltration, not against code running as the same user.
"""

import os
import sys
import json
import socket
import getpass
import platform
from typing import NamedTuple, Optional, Union
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.backends import default_backend
from cryptography.exceptions import InvalidTag

from . import config
from .errors import DecryptionError


class MachineIdentity(NamedTuple):
    """Environmental attributes the cache key is bound to."""
    hostname: str
    username: str
    platform: str
    arch: str

    @classmethod
    def current(cls) -> 'MachineIdentity':
        """Collect the identity of the running machine and user."""
        try:
            username = getpass.getuser()
        except (KeyError, OSError):
            # No login name in the environment or the password database
            username = str(os.getuid()) if hasattr(os, 'getuid') else ""
        return cls(
            hostname=socket.gethostname(),
            username=username,
            platform=sys.platform,
            arch=platform.machine(),
        )

    def joined(self) -> str:
        return config.IDENTITY_SEPARATOR.join(self)


def derive_machine_key(identity: Optional[MachineIdentity] = None) -> bytes:
    """
    Derive the 256-bit cache key from a machine identity.

    Args:
        identity: Identity to bind the key to; defaults to the running machine

    Returns:
        32-byte encryption key
    """
    if identity is None:
        identity = MachineIdentity.current()
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=config.KEY_SIZE,
        salt=config.KEY_DERIVATION_SALT,
        iterations=config.KEY_DERIVATION_ITERATIONS,
        backend=default_backend()
    )
    return kdf.derive(identity.joined().encode('utf-8'))


class CryptoManager:
    """Encrypts and decrypts cache payloads with an AES-256-GCM machine key."""

    def __init__(self, identity: Optional[MachineIdentity] = None, key: Optional[bytes] = None):
        """
        Initialize the crypto manager.

        Args:
            identity: Machine identity to derive the key from (defaults to this machine)
            key: Pre-derived 32-byte key; skips derivation when given
        """
        self.backend = default_backend()
        self._identity = identity
        self._key = key

    @property
    def key(self) -> bytes:
        # Derived once per manager
        if self._key is None:
            self._key = derive_machine_key(self._identity)
        return self._key

    def encrypt(self, plaintext: Union[bytes, str]) -> str:
        """
        Encrypt data using AES-256-GCM.

        Args:
            plaintext: Data to encrypt; text is encoded as UTF-8

        Returns:
            JSON token holding the hex-encoded nonce, tag and ciphertext
        """
        if isinstance(plaintext, str):
            plaintext = plaintext.encode('utf-8')
        nonce = os.urandom(config.NONCE_SIZE)
        cipher = Cipher(
            algorithms.AES(self.key),
            modes.GCM(nonce),
            backend=self.backend
        )
        encryptor = cipher.encryptor()
        ciphertext = encryptor.update(plaintext) + encryptor.finalize()
        return json.dumps({
            config.TOKEN_IV_FIELD: nonce.hex(),
            config.TOKEN_TAG_FIELD: encryptor.tag.hex(),
            config.TOKEN_CIPHERTEXT_FIELD: ciphertext.hex(),
        })

    def decrypt(self, token: Union[bytes, str]) -> bytes:
        """
        Decrypt a token produced by encrypt().

        Args:
            token: JSON token text

        Returns:
            Decrypted plaintext

        Raises:
            DecryptionError: If the token is malformed or authentication fails
        """
        try:
            fields = self._parse_token(token)
            if fields is None:
                raise ValueError("not an encrypted token")
            nonce, tag, ciphertext = (bytes.fromhex(v) for v in fields)
            cipher = Cipher(
                algorithms.AES(self.key),
                modes.GCM(nonce, tag, min_tag_length=config.TAG_SIZE),
                backend=self.backend
            )
            decryptor = cipher.decryptor()
            return decryptor.update(ciphertext) + decryptor.finalize()
        except (InvalidTag, ValueError, TypeError) as e:
            raise DecryptionError() from e

    def is_token(self, content: Union[bytes, str]) -> bool:
        """Check whether content has the shape of an encrypted token."""
        return self._parse_token(content) is not None

    @staticmethod
    def _parse_token(content: Union[bytes, str]):
        """Return the (iv, authTag, encrypted) strings if content is token-shaped, else None."""
        try:
            data = json.loads(content)
        except (ValueError, TypeError, RecursionError):
            return None
        if not isinstance(data, dict):
            return None
        values = [
            data.get(config.TOKEN_IV_FIELD),
            data.get(config.TOKEN_TAG_FIELD),
            data.get(config.TOKEN_CIPHERTEXT_FIELD),
        ]
        if not all(isinstance(v, str) for v in values):
            return None
        return values
