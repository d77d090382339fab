"""Porkbun DNS API."""

from .client import PorkbunClient, DEFAULT_BASE_URL

__all__ = ["PorkbunClient", "DEFAULT_BASE_URL"]
