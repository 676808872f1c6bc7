"""Policy expiration detection and background polling."""

from app.services.expiration.detector import PolicyExpirationService
from app.services.expiration.poller import PolicyExpirationPoller, PollerState

__all__ = [
    "PolicyExpirationService",
    "PolicyExpirationPoller",
    "PollerState",
]
