"""Runtime services: telemetry and settings."""

from . import telemetry
from .config import AlignSettings

__all__ = ["AlignSettings", "telemetry"]
