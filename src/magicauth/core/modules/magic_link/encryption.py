import base64
import hashlib
from typing import Protocol

from cryptography.fernet import Fernet, InvalidToken


class DecryptionError(Exception):
    """Raised when a ciphertext is malformed or has been tampered with."""


class Encryptor(Protocol):
    def encrypt(self, plaintext: str) -> str: ...

    def decrypt(self, ciphertext: str) -> str: ...


class FernetEncryptor:
    """Authenticated symmetric encryption of text with a key derived from a secret string."""

    def __init__(self, secret: str) -> None:
        key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())
        self._fernet = Fernet(key)

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        try:
            return self._fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            raise DecryptionError("Could not decrypt value") from e
