"""Python client for the MethodHub API."""

from app.client.api import ApiError, MethodHubClient
from app.client.session import SessionContext

__all__ = ["ApiError", "MethodHubClient", "SessionContext"]
