"""Response envelope shared by every router."""

from __future__ import annotations

from pydantic import BaseModel


class Envelope(BaseModel):
    """``{"success": ..., "message": ...}``; routers extend it with their resource."""

    success: bool = True
    message: str | None = None
