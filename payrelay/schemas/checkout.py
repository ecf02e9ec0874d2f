"""Pydantic schemas for checkout endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CheckoutRequest(BaseModel):
    note: Any = None


class CheckoutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    redirect_url: Optional[str] = Field(default=None, alias="redirectUrl")
    checkout_id: Optional[str] = Field(default=None, alias="checkoutId")


class ErrorResponse(BaseModel):
    error: str
