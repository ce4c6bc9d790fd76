from __future__ import annotations

import os
from pathlib import Path

from .logging import get_logger

logger = get_logger(__name__)

SECURE_TOKEN_MODE = 0o600


def ensure_secure_permissions(path: str | os.PathLike[str]) -> None:
    """Narrow a token file to owner read/write (0600).

    Best-effort hardening: failures are logged and never raised.
    """
    token_path = Path(path)
    try:
        if not token_path.exists():
            return
        mode = token_path.stat().st_mode & 0o777
        if mode == SECURE_TOKEN_MODE:
            return
        logger.warning(
            "email.credentials.insecure_permissions",
            path=str(token_path),
            mode=f"{mode:03o}",
        )
        os.chmod(token_path, SECURE_TOKEN_MODE)
    except (OSError, ValueError) as exc:
        logger.warning(
            "email.credentials.permission_check_failed",
            path=str(token_path),
            error=str(exc),
        )
