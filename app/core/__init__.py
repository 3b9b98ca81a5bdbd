"""Core app configuration, security and error types."""

from app.core.config import get_settings, settings
from app.core.enums import Difficulty, Frequency, Role, Tier
from app.core.errors import AppError

__all__ = ["get_settings", "settings", "AppError", "Difficulty", "Frequency", "Role", "Tier"]
