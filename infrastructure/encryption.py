# ============================================================================
# WORKSPACE ENCRYPTION
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Infrastructure - Encryption-at-rest for integration secrets
# PURPOSE: Decrypt provider tokens with per-workspace derived keys
# CREATED: 12 OCT 2026
# EXPORTS: WorkspaceEncryptionService, EncryptedValue, DecryptionError
# DEPENDENCIES: cryptography
# ============================================================================
"""
Workspace Encryption

Integration secrets are stored with AES-256-GCM under a key derived per
workspace:

    workspace_key = HKDF-SHA256(master_key, salt=ENCRYPTION_HKDF_SALT,
                                info=workspace_id, length=32)

Stored format:
    encrypted_data = "<authTagHex>:<ciphertextHex>"
    iv             = 16 random bytes, hex encoded (separate column)

A wrong workspace id, a wrong IV or any tampering fails the GCM tag
check and raises DecryptionError without leaking which part was wrong.

Usage:
    service = WorkspaceEncryptionService.from_env()
    token = service.decrypt_with_workspace_key(ws_id, row.bot_token, row.bot_token_iv)
"""

import logging
import os
import secrets
from dataclasses import dataclass
from typing import Dict, Optional, Union
from uuid import UUID

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

logger = logging.getLogger(__name__)

IV_BYTES = 16
TAG_BYTES = 16


class DecryptionError(Exception):
    """Raised when stored ciphertext cannot be decrypted."""


@dataclass(frozen=True)
class EncryptedValue:
    """Ciphertext plus IV, as stored in a provider table."""
    encrypted_data: str
    iv: str


class WorkspaceEncryptionService:
    """
    AES-256-GCM with HKDF-derived workspace keys.

    Derived keys are cached per workspace id for the life of the service.
    """

    def __init__(self, master_key_hex: str, hkdf_salt_hex: Optional[str] = None):
        if not master_key_hex or len(master_key_hex) != 64:
            raise ValueError("ENCRYPTION_KEY must be 64 characters (32 bytes in hex)")
        try:
            self._master_key = bytes.fromhex(master_key_hex)
            self._salt = bytes.fromhex(hkdf_salt_hex) if hkdf_salt_hex else None
        except ValueError:
            raise ValueError("ENCRYPTION_KEY and ENCRYPTION_HKDF_SALT must be hex encoded") from None
        self._key_cache: Dict[str, bytes] = {}

    @classmethod
    def from_env(cls) -> "WorkspaceEncryptionService":
        """Build from ENCRYPTION_KEY and ENCRYPTION_HKDF_SALT."""
        return cls(
            master_key_hex=os.environ.get("ENCRYPTION_KEY", ""),
            hkdf_salt_hex=os.environ.get("ENCRYPTION_HKDF_SALT") or None,
        )

    def _workspace_key(self, workspace_id: Union[str, UUID]) -> bytes:
        workspace = str(workspace_id)
        key = self._key_cache.get(workspace)
        if key is None:
            key = HKDF(
                algorithm=hashes.SHA256(),
                length=32,
                salt=self._salt,
                info=workspace.encode("utf-8"),
            ).derive(self._master_key)
            self._key_cache[workspace] = key
        return key

    def encrypt_with_workspace_key(
        self,
        workspace_id: Union[str, UUID],
        plaintext: str,
    ) -> EncryptedValue:
        """Encrypt plaintext for one workspace with a fresh random IV."""
        iv = secrets.token_bytes(IV_BYTES)
        sealed = AESGCM(self._workspace_key(workspace_id)).encrypt(
            iv, plaintext.encode("utf-8"), None
        )
        ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
        return EncryptedValue(
            encrypted_data=f"{tag.hex()}:{ciphertext.hex()}",
            iv=iv.hex(),
        )

    def decrypt_with_workspace_key(
        self,
        workspace_id: Union[str, UUID],
        encrypted_data: str,
        iv: str,
    ) -> str:
        """
        Decrypt a value stored for one workspace.

        Raises:
            DecryptionError: Malformed input, wrong workspace, or tampering
        """
        try:
            tag_hex, ciphertext_hex = encrypted_data.split(":")
            tag = bytes.fromhex(tag_hex)
            ciphertext = bytes.fromhex(ciphertext_hex)
            nonce = bytes.fromhex(iv)
            if len(tag) != TAG_BYTES or not nonce:
                raise ValueError("bad tag or iv length")
            plaintext = AESGCM(self._workspace_key(workspace_id)).decrypt(
                nonce, ciphertext + tag, None
            )
            return plaintext.decode("utf-8")
        except (ValueError, AttributeError, InvalidTag, UnicodeDecodeError):
            raise DecryptionError("Failed to decrypt workspace data") from None


__all__ = [
    "WorkspaceEncryptionService",
    "EncryptedValue",
    "DecryptionError",
]
