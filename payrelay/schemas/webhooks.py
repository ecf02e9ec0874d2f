"""Pydantic schemas for webhook endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class WebhookAckResponse(BaseModel):
    status: str
    event_type: Optional[str] = None
