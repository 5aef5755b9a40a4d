# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Infrastructure - External service clients
# PURPOSE: Workspace credential decryption and the Redis client
# CREATED: 12 OCT 2026
# ============================================================================
"""
Infrastructure module for the Integration Health Monitor.

Provides:
- WorkspaceEncryptionService: Decrypt per-workspace provider credentials
- init_redis / close_redis: Shared async Redis client

Usage:
    from infrastructure import WorkspaceEncryptionService, init_redis

    encryption = WorkspaceEncryptionService.from_env()
    token = encryption.decrypt_with_workspace_key(workspace_id, data, iv)

    redis_client = await init_redis()
"""

from .encryption import (
    DecryptionError,
    EncryptedValue,
    WorkspaceEncryptionService,
)
from .redis_client import (
    get_redis_url,
    init_redis,
    close_redis,
)

__all__ = [
    # Encryption
    "DecryptionError",
    "EncryptedValue",
    "WorkspaceEncryptionService",
    # Redis
    "get_redis_url",
    "init_redis",
    "close_redis",
]
