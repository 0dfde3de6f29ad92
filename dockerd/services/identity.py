import hashlib
import secrets


def compute_id(content: bytes) -> str:
    """First 8 bytes of the SHA-256 digest of content, hex encoded."""
    return hashlib.sha256(content).digest()[:8].hex()


class IdentityGenerator:
    def new_id(self) -> str:
        return compute_id(secrets.token_hex(16).encode())
