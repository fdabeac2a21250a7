"""Opaque installation id generation."""
from __future__ import annotations

import secrets

OID_BYTES = 16


def create_random_id() -> str:
    """Return a fresh, collision-improbable opaque id."""
    return secrets.token_hex(OID_BYTES)
