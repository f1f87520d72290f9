"""AES encryption of notification bodies."""

from enum import Enum

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from barkpush.errors import ConfigurationError, EncryptionError

__all__ = ["CipherFamily", "CipherMode", "encrypt"]

CBC_IV_LENGTH = 16


class CipherFamily(str, Enum):
    aes128 = "aes128"
    aes192 = "aes192"
    aes256 = "aes256"

    @classmethod
    def parse(cls, value: str) -> "CipherFamily":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigurationError(f"Invalid encrypt type: {value!r}") from None

    @property
    def key_size(self) -> int:
        """Native key size in bytes."""
        return int(self.value[3:]) // 8


class CipherMode(str, Enum):
    cbc = "cbc"
    ecb = "ecb"
    gcm = "gcm"

    @classmethod
    def parse(cls, value: str) -> "CipherMode":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigurationError(f"Invalid encrypt mode: {value!r}") from None

    @property
    def generates_iv(self) -> bool:
        return self is not CipherMode.cbc


def encrypt(
    family: CipherFamily, mode: CipherMode, key: bytes, iv: bytes, plaintext: bytes
) -> bytes:
    """Encrypt plaintext with the selected AES variant.

    CBC and ECB pad with PKCS7. GCM needs no padding and returns the
    ciphertext followed by the authentication tag.

    Raises:
        EncryptionError: If the key or IV does not suit the cipher, or the
            primitive fails.
    """
    if len(key) != family.key_size:
        raise EncryptionError(
            f"{family.value} requires a {family.key_size} byte key, got {len(key)}"
        )

    try:
        if mode is CipherMode.gcm:
            return AESGCM(key).encrypt(iv, plaintext, None)

        if mode is CipherMode.cbc:
            if len(iv) != CBC_IV_LENGTH:
                raise EncryptionError(
                    f"cbc requires a {CBC_IV_LENGTH} byte iv, got {len(iv)}"
                )
            cipher_mode = modes.CBC(iv)
        else:
            cipher_mode = modes.ECB()

        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = Cipher(algorithms.AES(key), cipher_mode).encryptor()
        return encryptor.update(padded) + encryptor.finalize()
    except (ValueError, TypeError) as e:
        raise EncryptionError(f"{family.value}-{mode.value} encryption failed: {e}") from e
