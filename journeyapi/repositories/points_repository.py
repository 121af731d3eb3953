"""
Points ledger repository.

The ledger is the source of truth for a user's points; ``users.points`` is a
cache of the ledger sum. ``append`` keeps both in step inside one
transaction:

1. lock the user row
2. return the existing row if ``ref_id`` was already applied (idempotency)
3. insert the ledger row with ``balance_after`` = cached total + delta
4. write the new total back to ``users.points``
5. commit; on a ref_id race, roll back and return the winner's row
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import desc, asc
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone

from journeyapi.models.points import PointsLedger as PointsLedgerModel
from journeyapi.models.user import User as UserModel
from journeyapi.core.exceptions import NotFoundError
from journeyapi.schemas.points import (
    PointsLedgerEntry,
    PointsLedgerResponse,
    PointsTransactionResult,
    PointsIntegrityCheckResponse,
)
from journeyapi.repositories.base import BaseRepository


class PointsRepository(BaseRepository[PointsLedgerModel, PointsLedgerEntry]):
    def __init__(self, db: Session):
        super().__init__(PointsLedgerModel, PointsLedgerEntry, db)

    def _existing_result(self, entry: PointsLedgerModel) -> PointsTransactionResult:
        return PointsTransactionResult(
            success=True,
            transaction_id=entry.id,
            delta_points=entry.delta_points,
            balance_after=entry.balance_after,
            already_applied=True,
            message="Transaction already processed (idempotent)",
        )

    def get_by_ref_id(self, ref_id: str) -> Optional[PointsLedgerModel]:
        return (
            self.db.query(self.model_class)
            .filter(self.model_class.ref_id == ref_id)
            .first()
        )

    def append(
        self,
        user_id: int,
        delta_points: int,
        source: str,
        details: Optional[Dict[str, Any]] = None,
        ref_id: Optional[str] = None,
    ) -> PointsTransactionResult:
        self._ensure_clean_session()
        try:
            user = (
                self.db.query(UserModel)
                .filter(UserModel.id == user_id)
                .with_for_update()
                .first()
            )
            if user is None:
                raise NotFoundError(
                    f"User {user_id} not found", details={"user_id": user_id}
                )

            if ref_id:
                existing = self.get_by_ref_id(ref_id)
                if existing is not None:
                    self.db.commit()
                    return self._existing_result(existing)

            new_balance = (user.points or 0) + delta_points
            entry = self.model_class(
                user_id=user_id,
                delta_points=delta_points,
                balance_after=new_balance,
                source=source,
                details=details or {},
                ref_id=ref_id,
            )
            self.db.add(entry)
            user.points = new_balance
            self.db.flush()
            self.db.commit()

            return PointsTransactionResult(
                success=True,
                transaction_id=entry.id,
                delta_points=delta_points,
                balance_after=new_balance,
                message="Transaction completed successfully",
            )
        except IntegrityError:
            self.db.rollback()
            if ref_id:
                existing = self.get_by_ref_id(ref_id)
                if existing is not None:
                    return self._existing_result(existing)
            raise

    def get_user_balance(self, user_id: int) -> int:
        user = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if user is None:
            raise NotFoundError(f"User {user_id} not found", details={"user_id": user_id})
        return user.points or 0

    def get_user_ledger(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> PointsLedgerResponse:
        query = self.db.query(self.model_class).filter(
            self.model_class.user_id == user_id
        )
        total_count = query.count()
        instances = (
            query.order_by(desc(self.model_class.id)).limit(limit).offset(offset).all()
        )

        return PointsLedgerResponse(
            balance=self.get_user_balance(user_id),
            entries=[self._to_schema(instance) for instance in instances],
            total_count=total_count,
            has_next=offset + limit < total_count,
        )

    def verify_integrity_for_user(self, user_id: int) -> PointsIntegrityCheckResponse:
        """Ledger sum vs cached profile total vs latest balance_after"""
        profile_points = self.get_user_balance(user_id)
        entries: List[PointsLedgerModel] = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(asc(self.model_class.id))
            .all()
        )
        ledger_sum = sum(entry.delta_points for entry in entries)
        latest_balance = entries[-1].balance_after if entries else 0

        status = (
            "OK"
            if ledger_sum == profile_points == latest_balance
            else "MISMATCH"
        )
        return PointsIntegrityCheckResponse(
            status=status,
            user_id=user_id,
            ledger_sum=ledger_sum,
            profile_points=profile_points,
            latest_balance_after=latest_balance,
            entry_count=len(entries),
            verified_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
        )
