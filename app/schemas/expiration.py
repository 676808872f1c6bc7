"""Schemas for the policy expiration check."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class ExpirationCheckResult(BaseModel):
    """Outcome of one expiration detector run.

    Attributes:
        checked_at: Reference time used for the run
        candidates: Expired policies without a ledger row at scan time
        reported_policy_ids: Policies logged and added to the ledger
        skipped_policy_ids: Policies expired longer than the threshold
    """

    checked_at: datetime
    candidates: int = 0
    reported_policy_ids: List[int] = Field(default_factory=list)
    skipped_policy_ids: List[int] = Field(default_factory=list)

    @property
    def reported(self) -> int:
        return len(self.reported_policy_ids)


class ExpirationCheckResponse(BaseModel):
    """Admin endpoint payload for a manual expiration check."""

    message: str
    result: ExpirationCheckResult
