from __future__ import annotations  # Re-export avatar_gateway public API

from .avatar_gateway import AvatarGatewayError, speak

__all__ = ["AvatarGatewayError", "speak"]
