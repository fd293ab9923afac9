"""
Field-level envelope encryption for secret asset values
Uses AES-256-GCM (AEAD) from the cryptography library
"""

import base64
import binascii
import logging
import os
import re
from typing import NamedTuple, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from assetvault.core.exceptions import CryptoError

logger = logging.getLogger(__name__)

KEY_LENGTH = 32  # AES-256
NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # 128-bit authentication tag

_HEX_KEY = re.compile(r"^[0-9a-fA-F]{64}$")


class EncryptedPayload(NamedTuple):
    """Base64-encoded envelope stored in place of a secret value"""

    cipher_text: str
    iv: str
    tag: str

    def is_empty(self) -> bool:
        return not (self.cipher_text or self.iv or self.tag)


def parse_key(raw_key: Optional[str]) -> bytes:
    """
    Turn the configured key string into raw key bytes

    Accepted forms, in order of preference: 64 hex characters, base64 that
    decodes to 32 bytes, or a plain string whose UTF-8 bytes are the key.

    Args:
        raw_key: Value of ENCRYPTION_KEY

    Returns:
        32 key bytes

    Raises:
        CryptoError: if the key is missing or does not yield 32 bytes
    """
    if not raw_key:
        raise CryptoError("ENCRYPTION_KEY is not set")

    if _HEX_KEY.match(raw_key):
        return bytes.fromhex(raw_key)

    try:
        decoded = base64.b64decode(raw_key, validate=True)
    except (binascii.Error, ValueError):
        decoded = b""
    if len(decoded) == KEY_LENGTH:
        return decoded

    key = raw_key.encode("utf-8")
    if len(key) != KEY_LENGTH:
        raise CryptoError(f"ENCRYPTION_KEY must be {KEY_LENGTH} bytes")
    return key


class FieldEncryption:
    """
    Encrypts and decrypts individual field values

    One instance is built at startup from the deployment key and handed to
    every service that reads or writes secret fields.
    """

    def __init__(self, key: bytes):
        """
        Args:
            key: 32 raw key bytes (see parse_key)
        """
        if len(key) != KEY_LENGTH:
            raise CryptoError(f"Encryption key must be {KEY_LENGTH} bytes, got {len(key)}")
        self._cipher = AESGCM(key)

    @classmethod
    def from_settings(cls, raw_key: Optional[str]) -> "FieldEncryption":
        """Build the engine from the ENCRYPTION_KEY setting, failing fast"""
        engine = cls(parse_key(raw_key))
        logger.info("Field encryption initialized")
        return engine

    def encrypt(self, plaintext: Optional[str]) -> EncryptedPayload:
        """
        Encrypt a single value

        Args:
            plaintext: Value to protect; None is treated as an empty string

        Returns:
            EncryptedPayload with base64 cipher text, nonce and tag
        """
        nonce = os.urandom(NONCE_SIZE)
        sealed = self._cipher.encrypt(nonce, (plaintext or "").encode("utf-8"), None)
        cipher_text, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
        return EncryptedPayload(
            cipher_text=base64.b64encode(cipher_text).decode("ascii"),
            iv=base64.b64encode(nonce).decode("ascii"),
            tag=base64.b64encode(tag).decode("ascii"),
        )

    def decrypt(self, payload: Optional[EncryptedPayload]) -> str:
        """
        Decrypt a stored envelope

        A payload with all three parts empty was never populated and decrypts
        to "". Any other payload must authenticate.

        Args:
            payload: Envelope produced by encrypt()

        Returns:
            Decrypted plaintext

        Raises:
            CryptoError: on malformed input or authentication failure
        """
        if payload is None or payload.is_empty():
            return ""

        try:
            cipher_text = base64.b64decode(payload.cipher_text, validate=True)
            nonce = base64.b64decode(payload.iv, validate=True)
            tag = base64.b64decode(payload.tag, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CryptoError(f"Malformed encrypted payload: {e}") from e

        if len(nonce) != NONCE_SIZE or len(tag) != TAG_SIZE:
            raise CryptoError("Malformed encrypted payload: bad nonce or tag length")

        try:
            plaintext = self._cipher.decrypt(nonce, cipher_text + tag, None)
        except InvalidTag as e:
            logger.error("Encrypted payload failed authentication")
            raise CryptoError("Encrypted payload failed authentication") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CryptoError("Decrypted payload is not valid UTF-8") from e
