"""
Journey lifecycle.

A user has at most one active journey. States::

    active -> completed   (every stop checked in, or explicit complete)
    active -> cancelled   (explicit cancel, or the last stop skipped)

Completed and cancelled journeys are terminal. Each mutation locks the
journey row, rewrites the ``stops`` list as a whole and commits once;
points are credited afterwards through the ledger.
"""

from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from journeyapi.config import Settings
from journeyapi.core.exceptions import (
    ConflictError,
    InvalidProofError,
    NotFoundError,
    TooFarError,
    TransientBackendError,
    ValidationError,
)
from journeyapi.models.journey import Journey as JourneyModel
from journeyapi.providers.vendor_catalog import VendorCatalog
from journeyapi.repositories.checkin_repository import (
    CheckInRepository,
    UserVisitRepository,
)
from journeyapi.repositories.journey_repository import (
    JourneyRepository,
    JourneyStatsRepository,
)
from journeyapi.schemas.checkin import JourneyCheckInRequest
from journeyapi.schemas.journey import (
    Journey,
    JourneyCheckInResult,
    JourneyCreateRequest,
    JourneyEndResult,
    JourneyStatsResponse,
)
from journeyapi.services.checkin_service import CheckinService
from journeyapi.services.point_service import PointService
from journeyapi.services.route_service import RouteService

logger = logging.getLogger(__name__)


def checkin_ref(journey_id: int, vendor_id: str) -> str:
    return f"journey:{journey_id}:checkin:{vendor_id}"


def completion_ref(journey_id: int) -> str:
    return f"journey:{journey_id}:completion"


def partial_completion_ref(journey_id: int) -> str:
    return f"journey:{journey_id}:partial-completion"


class JourneyService:
    def __init__(
        self,
        db: Session,
        settings: Settings,
        catalog: VendorCatalog,
    ):
        self.db = db
        self.settings = settings
        self.journey_repo = JourneyRepository(db)
        self.stats_repo = JourneyStatsRepository(db)
        self.checkin_repo = CheckInRepository(db)
        self.visit_repo = UserVisitRepository(db)
        self.point_service = PointService(db)
        self.route_service = RouteService(settings, catalog)
        self.checkin_service = CheckinService(
            db, settings, catalog, point_service=self.point_service
        )

    # ------------------------------------------------------------------ reads

    def get_active(self, user_id: int) -> Optional[Journey]:
        return self.journey_repo.get_active_for_user(user_id)

    def get(self, user_id: int, journey_id: int) -> Journey:
        journey = self.journey_repo.get_for_user(journey_id, user_id)
        if journey is None:
            raise NotFoundError(
                f"Journey {journey_id} not found", details={"journey_id": journey_id}
            )
        return journey

    def recent(self, user_id: int, limit: int = 5) -> List[Journey]:
        return self.journey_repo.get_recent_for_user(user_id, limit=limit)

    def stats(self, user_id: int) -> JourneyStatsResponse:
        return self.stats_repo.get_for_user(user_id)

    # -------------------------------------------------------------- internals

    def _lock(self, user_id: int, journey_id: int) -> JourneyModel:
        journey = self.journey_repo.lock_for_update(journey_id)
        if journey is None or journey.user_id != user_id:
            self.db.rollback()
            raise NotFoundError(
                f"Journey {journey_id} not found", details={"journey_id": journey_id}
            )
        return journey

    def _require_active(self, journey: JourneyModel) -> None:
        if not journey.is_active:
            state = "completed" if journey.is_completed else "cancelled"
            self.db.rollback()
            raise ConflictError(
                f"Journey {journey.id} is already {state}",
                details={"journey_id": journey.id, "state": state},
            )

    def _commit(self, journey: JourneyModel, action: str) -> Journey:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Journey {journey.id} {action} failed: {e}")
            raise TransientBackendError(
                f"Failed to {action} journey", details={"journey_id": journey.id}
            )
        self.db.refresh(journey)
        return Journey.model_validate(journey)

    @staticmethod
    def _visited(journey: JourneyModel) -> int:
        return sum(1 for stop in journey.stops or [] if stop.get("checked_in"))

    def _finish(self, journey: JourneyModel, completed: bool) -> None:
        """Flip to a terminal state and bump stats, inside the open transaction"""
        now = datetime.now(timezone.utc)
        journey.is_active = False
        if completed:
            journey.is_completed = True
            journey.completed_at = now
        else:
            journey.is_cancelled = True
            journey.cancelled_at = now
        self.stats_repo.record(
            journey.user_id,
            vendors_visited=self._visited(journey),
            completed=completed,
            commit=False,
        )

    # -------------------------------------------------------------- mutations

    def start(self, user_id: int, request: JourneyCreateRequest) -> Journey:
        """Create an active journey over ``vendor_ids`` ordered nearest-first.

        Raises:
            ValidationError: no vendors given
            NotFoundError: an unknown vendor id
            ConflictError: another journey is active and ``replace_active`` is off
        """
        if not request.vendor_ids:
            raise ValidationError("A journey needs at least one vendor")

        route = self.route_service.build_route(request.vendor_ids, request.start_location)

        active = self.journey_repo.get_active_for_user(user_id)
        if active is not None:
            if not request.replace_active:
                raise ConflictError(
                    "An active journey already exists",
                    details={"active_journey_id": active.id},
                )
            old = self._lock(user_id, active.id)
            if old.is_active:
                self._finish(old, completed=False)
                logger.info(f"Journey {old.id} cancelled, replaced by a new journey")

        stops = [
            {
                "vendor_id": stop.vendor_id,
                "name": stop.name,
                "latitude": stop.latitude,
                "longitude": stop.longitude,
                "distance": stop.distance,
                "has_qr_code": stop.has_qr_code,
                "checked_in": False,
                "check_in_timestamp": None,
                "check_in_type": None,
            }
            for stop in route.stops
        ]
        try:
            journey = self.journey_repo.create_journey(
                user_id=user_id,
                deal_type=request.deal_type.value,
                stops=stops,
                start_latitude=request.start_location.latitude,
                start_longitude=request.start_location.longitude,
                max_distance=request.max_distance,
                total_distance=route.total_distance,
                estimated_time=route.estimated_time,
                commit=False,
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Journey start failed for user {user_id}: {e}")
            raise TransientBackendError("Failed to start journey")

        logger.info(
            f"Journey {journey.id} started for user {user_id}: "
            f"{len(stops)} stops, {route.total_distance:.2f} mi"
        )
        return journey

    def advance(self, user_id: int, journey_id: int) -> Journey:
        """Move to the next stop; at the last stop the journey is unchanged"""
        journey = self._lock(user_id, journey_id)
        self._require_active(journey)

        if journey.current_vendor_index >= journey.total_vendors - 1:
            self.db.rollback()
            return Journey.model_validate(journey)

        journey.current_vendor_index += 1
        return self._commit(journey, "advance")

    def skip(self, user_id: int, journey_id: int, index: Optional[int] = None) -> Journey:
        """Drop a stop (default: the current one) and re-clamp the index.

        Skipping the only remaining stop cancels the journey. If every stop
        left is already checked in, the journey completes without a bonus.
        """
        journey = self._lock(user_id, journey_id)
        self._require_active(journey)

        stops = list(journey.stops or [])
        current = journey.current_vendor_index
        target = current if index is None else index
        if target < 0 or target >= len(stops):
            self.db.rollback()
            raise ValidationError(
                f"Stop index {target} out of range",
                details={"index": target, "total_vendors": len(stops)},
            )
        if stops[target].get("checked_in"):
            self.db.rollback()
            raise ConflictError(
                "Cannot skip a stop that is already checked in",
                details={"index": target},
            )

        remaining = [dict(stop) for i, stop in enumerate(stops) if i != target]
        if target < current:
            current -= 1
        elif target == current and current >= len(remaining):
            current = max(0, len(remaining) - 1)

        journey.stops = remaining
        journey.current_vendor_index = current

        if not remaining:
            self._finish(journey, completed=False)
            logger.info(f"Journey {journey.id} cancelled: last stop skipped")
        elif all(stop.get("checked_in") for stop in remaining):
            self._finish(journey, completed=True)
            logger.info(f"Journey {journey.id} completed after skip")

        return self._commit(journey, "skip stop on")

    def check_in(
        self, user_id: int, journey_id: int, request: JourneyCheckInRequest
    ) -> JourneyCheckInResult:
        journey = self._lock(user_id, journey_id)
        stops = list(journey.stops or [])
        index = journey.current_vendor_index if request.index is None else request.index
        if index < 0 or index >= len(stops):
            self.db.rollback()
            raise ValidationError(
                f"Stop index {index} out of range",
                details={"index": index, "total_vendors": len(stops)},
            )

        stop = stops[index]
        if stop.get("checked_in"):
            self.db.rollback()
            return self._repeat_check_in(journey, stop)

        self._require_active(journey)

        try:
            decision = self.checkin_service.evaluate_proof(
                stop["vendor_id"],
                stop["latitude"],
                stop["longitude"],
                bool(stop.get("has_qr_code")),
                request,
            )
        except (InvalidProofError, TooFarError):
            self.db.rollback()
            raise

        updated = [dict(s) for s in stops]
        updated[index].update(
            checked_in=True,
            check_in_timestamp=datetime.now(timezone.utc).isoformat(),
            check_in_type=decision.check_in_type,
        )
        journey.stops = updated
        completed = all(s["checked_in"] for s in updated)
        bonus = 0
        if completed:
            bonus = self.settings.COMPLETION_BONUS_PER_STOP * len(updated)
            journey.completion_bonus = bonus
            self._finish(journey, completed=True)

        try:
            event = self.checkin_repo.record(
                user_id=user_id,
                vendor_id=stop["vendor_id"],
                journey_id=journey.id,
                vendor_index=index,
                check_in_type=decision.check_in_type,
                points_earned=decision.points,
                distance_miles=decision.distance_miles,
                proximity_overridden=decision.proximity_overridden,
                commit=False,
            )
            self.visit_repo.record_visit(
                user_id, stop["vendor_id"], stop.get("name", ""), commit=False
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Journey {journey_id} check-in write failed: {e}")
            raise TransientBackendError(
                "Failed to record check-in", details={"journey_id": journey_id}
            )
        result = self._commit(journey, "check in on")
        logger.info(
            f"Journey {journey.id} stop {index} ({stop['vendor_id']}) checked in "
            f"as {decision.check_in_type}"
        )

        balance = self.checkin_service.credit(
            user_id,
            decision.points,
            source="journey-check-in",
            ref_id=checkin_ref(journey.id, stop["vendor_id"]),
            details={"journey_id": journey.id, "vendor_id": stop["vendor_id"]},
        )
        if completed:
            balance = self.checkin_service.credit(
                user_id,
                bonus,
                source="journey-completion",
                ref_id=completion_ref(journey.id),
                details={"journey_id": journey.id, "vendors": len(updated)},
            )
            logger.info(f"Journey {journey.id} completed, bonus {bonus}")

        return JourneyCheckInResult(
            journey=result,
            check_in=event,
            points_earned=decision.points,
            completion_bonus=bonus,
            journey_completed=completed,
            points_balance=balance,
        )

    def _repeat_check_in(self, journey: JourneyModel, stop: dict) -> JourneyCheckInResult:
        """Answer a repeated check-in and retry any credit that never landed"""
        event = self.checkin_repo.get_journey_check_in(journey.id, stop["vendor_id"])
        balance = None
        if event is not None:
            balance = self.checkin_service.credit(
                journey.user_id,
                event.points_earned,
                source="journey-check-in",
                ref_id=checkin_ref(journey.id, stop["vendor_id"]),
                details={"journey_id": journey.id, "vendor_id": stop["vendor_id"]},
            )
        if journey.completion_bonus:
            balance = self.checkin_service.credit(
                journey.user_id,
                journey.completion_bonus,
                source="journey-completion",
                ref_id=completion_ref(journey.id),
                details={"journey_id": journey.id, "vendors": journey.total_vendors},
            )

        return JourneyCheckInResult(
            journey=Journey.model_validate(journey),
            already_checked_in=True,
            check_in=event,
            journey_completed=journey.is_completed,
            points_balance=balance,
        )

    def complete(self, user_id: int, journey_id: int) -> JourneyEndResult:
        """End early as completed; partially visited journeys earn a smaller bonus"""
        journey = self._lock(user_id, journey_id)
        self._require_active(journey)

        visited = self._visited(journey)
        total = journey.total_vendors
        self._finish(journey, completed=True)
        result = self._commit(journey, "complete")

        bonus = 0
        if 0 < visited < total:
            bonus = self.settings.PARTIAL_COMPLETION_POINTS_PER_STOP * visited
            self.checkin_service.credit(
                user_id,
                bonus,
                source="journey-partial-completion",
                ref_id=partial_completion_ref(journey.id),
                details={"journey_id": journey.id, "vendors_visited": visited},
            )

        logger.info(
            f"Journey {journey.id} completed by user: {visited}/{total} visited, bonus {bonus}"
        )
        return JourneyEndResult(journey=result, vendors_visited=visited, bonus_points=bonus)

    def cancel(self, user_id: int, journey_id: int) -> JourneyEndResult:
        journey = self._lock(user_id, journey_id)
        self._require_active(journey)

        visited = self._visited(journey)
        self._finish(journey, completed=False)
        result = self._commit(journey, "cancel")
        logger.info(f"Journey {journey.id} cancelled ({visited} visited)")
        return JourneyEndResult(journey=result, vendors_visited=visited)
