"""Yoco payment processor integration."""

from payrelay.integrations.yoco.client import YocoClient, get_yoco_client

__all__ = ["YocoClient", "get_yoco_client"]
