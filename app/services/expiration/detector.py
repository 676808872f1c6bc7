"""Detection and one-time reporting of newly expired insurance policies.

A policy moves through three states relative to "now":

* active: ``end_date >= today``
* expired-unprocessed: ``end_date < today`` and no ledger row
* expired-processed: a ``ProcessedExpiration`` row exists

Only ``PolicyExpirationService.run`` moves a policy into the last state, and
only when it expired no longer than ``max_hours_since_expiration`` ago.
Older expirations are skipped and stay unprocessed.

Warnings are emitted before the ledger commit. Two runs overlapping in time
(a manual admin check during a poller scan) can therefore both log the same
policy; the unique ``policy_id`` constraint then fails the later commit,
which surfaces as ``TransientError`` and leaves a single ledger row.
"""

from datetime import datetime, time, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.policy_repository import PolicyRepository
from app.repositories.processed_expiration_repository import ProcessedExpirationRepository
from app.schemas.expiration import ExpirationCheckResult
from app.services.base_service import BaseService
from app.services.history_merger import UNKNOWN_PROVIDER
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class PolicyExpirationService(BaseService):
    """Scans for expired policies and records each reported one in the ledger."""

    def __init__(self, session: AsyncSession, max_hours_since_expiration: int):
        """Initialize the detector.

        Args:
            session: Database session scoped to this run
            max_hours_since_expiration: Expirations older than this are not reported
        """
        super().__init__(session)
        self.max_hours_since_expiration = max_hours_since_expiration
        self.policy_repo = PolicyRepository(session)
        self.ledger_repo = ProcessedExpirationRepository(session)

    async def check_and_log_expired_policies(
        self, now: Optional[datetime] = None
    ) -> ExpirationCheckResult:
        """Run one detection pass.

        Args:
            now: Reference time; defaults to the local current time

        Returns:
            ExpirationCheckResult describing what was reported and skipped

        Raises:
            TransientError: If the storage layer fails; nothing is persisted
        """
        return await self.execute(now=now or datetime.now())

    async def run(self, now: datetime) -> ExpirationCheckResult:
        current_date = now.date()
        threshold = timedelta(hours=self.max_hours_since_expiration)
        result = ExpirationCheckResult(checked_at=now)

        candidates = await self.policy_repo.list_expired_unprocessed(before=current_date)
        result.candidates = len(candidates)

        for policy in candidates:
            elapsed = now - datetime.combine(policy.end_date, time.min)

            if elapsed > threshold:
                result.skipped_policy_ids.append(policy.id)
                continue

            provider = policy.provider or UNKNOWN_PROVIDER
            LOGGER.warning(
                f"POLICY EXPIRED: Policy ID {policy.id} for Car {policy.car.vin} "
                f"(Owner: {policy.car.owner.name}) expired on {policy.end_date.isoformat()}. "
                f"Provider: {provider}. Time since expiration: {elapsed}",
                extra={
                    "policy_id": policy.id,
                    "car_vin": policy.car.vin,
                    "owner_name": policy.car.owner.name,
                    "expiration_date": policy.end_date.isoformat(),
                    "provider": provider,
                    "hours_since_expiration": round(elapsed.total_seconds() / 3600, 2),
                },
            )

            self.ledger_repo.stage(
                policy_id=policy.id,
                expiration_date=policy.end_date,
                processed_at=now,
            )
            result.reported_policy_ids.append(policy.id)

        if candidates:
            # Every ledger row of this run lands in one transaction
            await self.session.commit()
            LOGGER.info(
                f"Processed {len(candidates)} expired policies "
                f"({result.reported} reported, {len(result.skipped_policy_ids)} skipped)."
            )
        else:
            LOGGER.debug("No expired policies found to process.")

        return result
