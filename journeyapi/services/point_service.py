from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from journeyapi.repositories.points_repository import PointsRepository
from journeyapi.core.exceptions import TransientBackendError
from journeyapi.schemas.points import (
    PointsBalanceResponse,
    PointsLedgerResponse,
    PointsTransactionResult,
    PointsIntegrityCheckResponse,
)
import logging

logger = logging.getLogger(__name__)


class PointService:
    """Points ledger: the only writer of ``users.points``"""

    def __init__(self, db: Session):
        self.db = db
        self.points_repo = PointsRepository(db)

    def append(
        self,
        user_id: int,
        delta_points: int,
        source: str,
        details: Optional[Dict[str, Any]] = None,
        ref_id: Optional[str] = None,
    ) -> PointsTransactionResult:
        """Credit (or debit) points in one transaction.

        Args:
            user_id: owner of the points
            delta_points: signed change
            source: ledger tag such as ``journey-check-in``
            details: free-form metadata stored with the entry
            ref_id: idempotency key; a repeated ref_id returns the first result

        Raises:
            NotFoundError: unknown user
            TransientBackendError: the transaction failed and was rolled back
        """
        try:
            result = self.points_repo.append(
                user_id=user_id,
                delta_points=delta_points,
                source=source,
                details=details,
                ref_id=ref_id,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Points append failed for user {user_id} "
                f"(delta={delta_points}, source={source}, ref_id={ref_id}): {e}"
            )
            raise TransientBackendError(
                "Failed to record points",
                details={"user_id": user_id, "ref_id": ref_id},
            )

        if result.already_applied:
            logger.info(f"Points ref_id {ref_id} already applied for user {user_id}")
        else:
            logger.info(
                f"Points {delta_points:+d} ({source}) for user {user_id}, "
                f"balance {result.balance_after}"
            )
        return result

    def get_user_balance(self, user_id: int) -> PointsBalanceResponse:
        return PointsBalanceResponse(balance=self.points_repo.get_user_balance(user_id))

    def get_user_ledger(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> PointsLedgerResponse:
        """Newest first; page size capped at 100"""
        if limit > 100:
            limit = 100
        return self.points_repo.get_user_ledger(user_id=user_id, limit=limit, offset=offset)

    def verify_user_integrity(self, user_id: int) -> PointsIntegrityCheckResponse:
        result = self.points_repo.verify_integrity_for_user(user_id)
        if result.status != "OK":
            logger.error(
                f"Points integrity mismatch for user {user_id}: ledger_sum={result.ledger_sum} "
                f"profile={result.profile_points} latest={result.latest_balance_after}"
            )
        return result
