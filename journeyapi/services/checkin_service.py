"""
Check-in processing.

Proof rules:

- QR: the payload must be exactly ``{QR_SCHEME}://checkin/{vendor_id}``
- location: Haversine distance to the vendor within
  ``CHECKIN_PROXIMITY_MILES``; further away needs ``force``
- neither: only accepted with ``force``

A check-in is written in two steps. The event (and visit counter) commit
first; points are appended afterwards with a deterministic ``ref_id`` so a
retry never double-credits.
"""

from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from journeyapi.config import Settings
from journeyapi.core.exceptions import (
    InvalidProofError,
    NotFoundError,
    TooFarError,
    TransientBackendError,
)
from journeyapi.models.journey import CheckInType
from journeyapi.providers.vendor_catalog import VendorCatalog
from journeyapi.repositories.checkin_repository import (
    CheckInRepository,
    UserVisitRepository,
)
from journeyapi.schemas.checkin import (
    CheckInDecision,
    CheckInProof,
    VendorCheckInResponse,
)
from journeyapi.services.point_service import PointService
from journeyapi.utils.geo import haversine_miles, miles_to_meters

logger = logging.getLogger(__name__)


class CheckinService:
    def __init__(
        self,
        db: Session,
        settings: Settings,
        catalog: VendorCatalog,
        point_service: Optional[PointService] = None,
    ):
        self.db = db
        self.settings = settings
        self.catalog = catalog
        self.point_service = point_service or PointService(db)
        self.checkin_repo = CheckInRepository(db)
        self.visit_repo = UserVisitRepository(db)

    def qr_payload_for(self, vendor_id: str) -> str:
        return f"{self.settings.qr_prefix}{vendor_id}"

    def evaluate_proof(
        self,
        vendor_id: str,
        latitude: float,
        longitude: float,
        has_qr_code: bool,
        proof: CheckInProof,
    ) -> CheckInDecision:
        """Validate proof of presence and decide type and points.

        Nothing is written here.

        Raises:
            InvalidProofError: QR mismatch, QR at a vendor without one, or no proof
            TooFarError: location fix beyond the threshold and not forced
        """
        if proof.qr_payload:
            if not has_qr_code:
                raise InvalidProofError(
                    "This vendor does not offer QR check-in",
                    details={"vendor_id": vendor_id},
                )
            if proof.qr_payload != self.qr_payload_for(vendor_id):
                logger.warning(
                    f"QR payload mismatch for vendor {vendor_id}: {proof.qr_payload!r}"
                )
                raise InvalidProofError(
                    "QR code does not match this vendor, please rescan",
                    details={"vendor_id": vendor_id},
                )
            return CheckInDecision(
                check_in_type=CheckInType.QR.value,
                points=self.settings.BASE_CHECKIN_POINTS,
            )

        distance = None
        overridden = False
        threshold = self.settings.CHECKIN_PROXIMITY_MILES
        if proof.location is not None:
            distance = haversine_miles(
                proof.location.latitude, proof.location.longitude, latitude, longitude
            )
            if distance > threshold:
                if not proof.force:
                    raise TooFarError(distance_miles=distance, threshold_miles=threshold)
                overridden = True
                logger.warning(
                    f"Proximity override at vendor {vendor_id}: "
                    f"{distance:.3f} mi ({miles_to_meters(distance):.0f} m) > {threshold} mi"
                )
        elif proof.force:
            overridden = True
            logger.warning(f"Check-in at vendor {vendor_id} forced without proof")
        else:
            raise InvalidProofError(
                "Scan the vendor's QR code or share your location to check in",
                details={"vendor_id": vendor_id},
            )

        if has_qr_code:
            check_in_type = CheckInType.QR_SKIPPED.value
            points = self.settings.QR_SKIPPED_POINTS
        else:
            check_in_type = CheckInType.MANUAL.value
            points = self.settings.BASE_CHECKIN_POINTS

        return CheckInDecision(
            check_in_type=check_in_type,
            points=points,
            distance_miles=distance,
            proximity_overridden=overridden,
        )

    def credit(
        self,
        user_id: int,
        points: int,
        source: str,
        ref_id: str,
        details: Optional[dict] = None,
    ) -> int:
        """Append to the ledger after the check-in committed; returns the balance.

        The check-in itself stays recorded when this fails; repeating the
        request retries the credit under the same ref_id.
        """
        try:
            return self.point_service.append(
                user_id=user_id,
                delta_points=points,
                source=source,
                details=details,
                ref_id=ref_id,
            ).balance_after
        except TransientBackendError:
            logger.error(
                f"Check-in recorded but points not credited: user={user_id} "
                f"points={points} source={source} ref_id={ref_id}"
            )
            raise

    def check_in_vendor(
        self, user_id: int, vendor_id: str, proof: CheckInProof
    ) -> VendorCheckInResponse:
        """Check in at a vendor outside of any journey"""
        vendor = self.catalog.get(vendor_id)
        if vendor is None:
            raise NotFoundError(
                f"Vendor {vendor_id} not found", details={"vendor_id": vendor_id}
            )

        decision = self.evaluate_proof(
            vendor.id, vendor.latitude, vendor.longitude, vendor.has_qr_code, proof
        )

        try:
            event = self.checkin_repo.record(
                user_id=user_id,
                vendor_id=vendor.id,
                check_in_type=decision.check_in_type,
                points_earned=decision.points,
                distance_miles=decision.distance_miles,
                proximity_overridden=decision.proximity_overridden,
                commit=False,
            )
            self.visit_repo.record_visit(user_id, vendor.id, vendor.name, commit=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Check-in write failed for user {user_id} at {vendor_id}: {e}")
            raise TransientBackendError(
                "Failed to record check-in", details={"vendor_id": vendor_id}
            )

        logger.info(
            f"User {user_id} checked in at {vendor_id} ({decision.check_in_type}, "
            f"+{decision.points})"
        )
        balance = self.credit(
            user_id,
            decision.points,
            source="check-in",
            ref_id=f"checkin:{event.id}",
            details={"vendor_id": vendor.id, "check_in_type": decision.check_in_type},
        )

        return VendorCheckInResponse(
            check_in=event,
            points_earned=decision.points,
            points_balance=balance,
            message=f"Checked in at {vendor.name}! +{decision.points} points",
        )
