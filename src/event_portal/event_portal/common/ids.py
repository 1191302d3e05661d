from __future__ import annotations

import secrets
import uuid

from ..core.constants import QR_TOKEN_BYTES, QR_TOKEN_PREFIX


def new_id() -> str:
    return uuid.uuid4().hex


def new_qr_token() -> str:
    """Unguessable check-in token; the QR image encodes only this string."""
    return f"{QR_TOKEN_PREFIX}-{secrets.token_urlsafe(QR_TOKEN_BYTES)}"
