from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session
from datetime import datetime, timezone

from journeyapi.models.check_in import CheckIn as CheckInModel
from journeyapi.models.check_in import UserVisit as UserVisitModel
from journeyapi.schemas.checkin import CheckInEvent
from journeyapi.schemas.user import RecentVendor
from journeyapi.repositories.base import BaseRepository


class CheckInRepository(BaseRepository[CheckInModel, CheckInEvent]):
    """Append-only: there is no update or delete path for check-in events"""

    def __init__(self, db: Session):
        super().__init__(CheckInModel, CheckInEvent, db)

    def record(
        self,
        user_id: int,
        vendor_id: str,
        check_in_type: str,
        points_earned: int,
        journey_id: Optional[int] = None,
        vendor_index: Optional[int] = None,
        distance_miles: Optional[float] = None,
        proximity_overridden: bool = False,
        commit: bool = True,
    ) -> CheckInEvent:
        return self.create(
            commit=commit,
            user_id=user_id,
            vendor_id=vendor_id,
            journey_id=journey_id,
            vendor_index=vendor_index,
            check_in_type=check_in_type,
            points_earned=points_earned,
            is_journey_check_in=journey_id is not None,
            distance_miles=distance_miles,
            proximity_overridden=proximity_overridden,
        )

    def get_journey_check_in(
        self, journey_id: int, vendor_id: str
    ) -> Optional[CheckInEvent]:
        instance = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.journey_id == journey_id,
                self.model_class.vendor_id == vendor_id,
            )
            .order_by(self.model_class.id.asc())
            .first()
        )
        return self._to_schema(instance)

    def list_for_user(self, user_id: int, limit: int = 50) -> List[CheckInEvent]:
        instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(desc(self.model_class.id))
            .limit(limit)
            .all()
        )
        return [self._to_schema(instance) for instance in instances]


class UserVisitRepository(BaseRepository[UserVisitModel, RecentVendor]):
    def __init__(self, db: Session):
        super().__init__(UserVisitModel, RecentVendor, db)

    def record_visit(
        self, user_id: int, vendor_id: str, vendor_name: str, commit: bool = True
    ) -> RecentVendor:
        """Bump the visit counter; returns the updated row"""
        instance = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.user_id == user_id,
                self.model_class.vendor_id == vendor_id,
            )
            .first()
        )
        now = datetime.now(timezone.utc)
        if instance is None:
            instance = self.model_class(
                user_id=user_id,
                vendor_id=vendor_id,
                vendor_name=vendor_name,
                visit_count=1,
                last_visit_at=now,
            )
            self.db.add(instance)
        else:
            instance.visit_count += 1
            instance.vendor_name = vendor_name
            instance.last_visit_at = now

        self.db.flush()
        if commit:
            self.db.commit()
        return self._to_schema(instance)

    def get_recent(self, user_id: int, limit: int = 5) -> List[RecentVendor]:
        instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(desc(self.model_class.last_visit_at))
            .limit(limit)
            .all()
        )
        return [self._to_schema(instance) for instance in instances]
