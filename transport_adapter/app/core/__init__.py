"""Core identifiers shared across the adapter."""
from __future__ import annotations

SERVICE_NAME = "transport_adapter"
