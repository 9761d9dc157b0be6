"""Python client for the Career Saathi API."""

from client.api_client import ApiError, CareerSaathiClient
from client.verification import (
    FileMarkerStore,
    InMemoryMarkerStore,
    VerificationState,
    VerificationTracker,
)

__all__ = [
    "ApiError",
    "CareerSaathiClient",
    "FileMarkerStore",
    "InMemoryMarkerStore",
    "VerificationState",
    "VerificationTracker",
]
