"""Shared-secret guard for the operator routes."""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from settings import get_settings

NODE_SECRET_HEADER = "X-Node-Secret"


def require_node_secret(
    x_node_secret: Optional[str] = Header(default=None, alias=NODE_SECRET_HEADER),
) -> None:
    """Reject the request unless it carries the configured secret.

    With no ``NODE_SECRET`` configured every request is accepted.
    """
    expected = get_settings().node_secret
    if not expected:
        return
    if x_node_secret is None or not secrets.compare_digest(
        x_node_secret.encode("utf-8"), expected.encode("utf-8")
    ):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
