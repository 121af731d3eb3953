from typing import Any, Dict, List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session
from datetime import datetime, timezone

from journeyapi.models.journey import Journey as JourneyModel
from journeyapi.models.journey import JourneyStats as JourneyStatsModel
from journeyapi.schemas.journey import Journey as JourneySchema
from journeyapi.schemas.journey import JourneyStatsResponse
from journeyapi.repositories.base import BaseRepository


class JourneyRepository(BaseRepository[JourneyModel, JourneySchema]):
    def __init__(self, db: Session):
        super().__init__(JourneyModel, JourneySchema, db)

    def create_journey(
        self,
        user_id: int,
        deal_type: str,
        stops: List[Dict[str, Any]],
        start_latitude: Optional[float],
        start_longitude: Optional[float],
        max_distance: Optional[float],
        total_distance: float,
        estimated_time: float,
        commit: bool = True,
    ) -> JourneySchema:
        return self.create(
            commit=commit,
            user_id=user_id,
            deal_type=deal_type,
            stops=stops,
            current_vendor_index=0,
            start_latitude=start_latitude,
            start_longitude=start_longitude,
            max_distance=max_distance,
            total_distance=total_distance,
            estimated_time=estimated_time,
            is_active=True,
            is_completed=False,
            is_cancelled=False,
            completion_bonus=0,
        )

    def lock_for_update(self, journey_id: int) -> Optional[JourneyModel]:
        return (
            self.db.query(self.model_class)
            .filter(self.model_class.id == journey_id)
            .with_for_update()
            .first()
        )

    def get_for_user(self, journey_id: int, user_id: int) -> Optional[JourneySchema]:
        instance = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.id == journey_id,
                self.model_class.user_id == user_id,
            )
            .first()
        )
        return self._to_schema(instance)

    def get_active_for_user(self, user_id: int) -> Optional[JourneySchema]:
        instance = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.user_id == user_id,
                self.model_class.is_active.is_(True),
            )
            .order_by(desc(self.model_class.id))
            .first()
        )
        return self._to_schema(instance)

    def get_recent_for_user(self, user_id: int, limit: int = 5) -> List[JourneySchema]:
        instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(desc(self.model_class.id))
            .limit(limit)
            .all()
        )
        return [self._to_schema(instance) for instance in instances]


class JourneyStatsRepository(BaseRepository[JourneyStatsModel, JourneyStatsResponse]):
    def __init__(self, db: Session):
        super().__init__(JourneyStatsModel, JourneyStatsResponse, db)

    def get_for_user(self, user_id: int) -> JourneyStatsResponse:
        instance = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .first()
        )
        return self._to_schema(instance) or JourneyStatsResponse()

    def record(
        self,
        user_id: int,
        vendors_visited: int,
        completed: bool,
        commit: bool = True,
    ) -> JourneyStatsResponse:
        """Increment the per-user counters for one finished journey"""
        instance = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .with_for_update()
            .first()
        )
        if instance is None:
            instance = self.model_class(
                user_id=user_id,
                completed_journeys=0,
                cancelled_journeys=0,
                total_vendors_visited=0,
            )
            self.db.add(instance)

        instance.total_vendors_visited += vendors_visited
        if completed:
            instance.completed_journeys += 1
            instance.last_completed_at = datetime.now(timezone.utc)
        else:
            instance.cancelled_journeys += 1

        self.db.flush()
        if commit:
            self.db.commit()
        return self._to_schema(instance)
