"""Fernet symmetric encryption for storing broker and bot secrets."""

from cryptography.fernet import Fernet

from stratdeck.config import settings

_fernet: Fernet | None = None


def _get_fernet() -> Fernet:
    global _fernet
    if _fernet is None:
        key = settings.encryption_key
        if not key:
            raise RuntimeError(
                "SD_ENCRYPTION_KEY not set. Generate one with: "
                "python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\""
            )
        _fernet = Fernet(key.encode() if isinstance(key, str) else key)
    return _fernet


def encrypt(plaintext: str) -> str:
    """Encrypt a string and return base64-encoded ciphertext."""
    return _get_fernet().encrypt(plaintext.encode()).decode()


def decrypt(ciphertext: str) -> str:
    """Decrypt a base64-encoded ciphertext and return plaintext."""
    return _get_fernet().decrypt(ciphertext.encode()).decode()


def encrypt_optional(plaintext: str | None) -> str | None:
    """Encrypt, passing None and empty strings through as None."""
    if not plaintext:
        return None
    return encrypt(plaintext)


def mask_secret(plaintext: str, visible: int = 4) -> str:
    """Mask all but the last few characters of a secret for display."""
    if len(plaintext) <= visible:
        return "*" * len(plaintext)
    return "*" * (len(plaintext) - visible) + plaintext[-visible:]
