import pytest
from unittest.mock import patch

from journeyapi.core.exceptions import InvalidProofError, TooFarError, TransientBackendError
from journeyapi.models import CheckIn, PointsLedger, UserVisit
from journeyapi.schemas.checkin import CheckInProof
from journeyapi.schemas.route import Coordinates
from journeyapi.services.checkin_service import CheckinService

FIVE_MILES_OF_LATITUDE = 5 / 69.09


@pytest.fixture
def checkin_service(db, settings, catalog):
    return CheckinService(db, settings, catalog)


def location_of(vendor, lat_offset=0.0):
    return Coordinates(latitude=vendor.latitude + lat_offset, longitude=vendor.longitude)


class TestEvaluateProof:
    def test_matching_qr(self, checkin_service, catalog):
        v1 = catalog.get("v1")
        proof = CheckInProof(qr_payload="lootsganja://checkin/v1")

        decision = checkin_service.evaluate_proof(v1.id, v1.latitude, v1.longitude, True, proof)

        assert decision.check_in_type == "qr"
        assert decision.points == 10

    @pytest.mark.parametrize(
        "payload",
        ["wrongscheme://x", "lootsganja://checkin/v2", "lootsganja://checkin/v1/extra", "v1"],
    )
    def test_mismatched_qr_is_invalid(self, checkin_service, payload):
        with pytest.raises(InvalidProofError) as exc_info:
            checkin_service.evaluate_proof(
                "v1", 61.2176, -149.8953, True, CheckInProof(qr_payload=payload)
            )

        assert exc_info.value.error_code == "CHECKIN_001"

    def test_qr_at_vendor_without_qr(self, checkin_service):
        with pytest.raises(InvalidProofError):
            checkin_service.evaluate_proof(
                "v2", 61.1424, -149.8663, False, CheckInProof(qr_payload="lootsganja://checkin/v2")
            )

    def test_nearby_location_without_qr_capability_is_manual(self, checkin_service, catalog):
        v2 = catalog.get("v2")
        proof = CheckInProof(location=location_of(v2, 0.0005))

        decision = checkin_service.evaluate_proof(v2.id, v2.latitude, v2.longitude, False, proof)

        assert decision.check_in_type == "manual"
        assert decision.points == 10
        assert decision.distance_miles < 0.1
        assert decision.proximity_overridden is False

    def test_location_at_qr_vendor_is_qr_skipped(self, checkin_service, catalog):
        v3 = catalog.get("v3")
        proof = CheckInProof(location=location_of(v3))

        decision = checkin_service.evaluate_proof(v3.id, v3.latitude, v3.longitude, True, proof)

        assert decision.check_in_type == "qr_skipped"
        assert decision.points == 5

    def test_five_miles_away_is_too_far(self, checkin_service, catalog):
        v2 = catalog.get("v2")
        proof = CheckInProof(location=location_of(v2, FIVE_MILES_OF_LATITUDE))

        with pytest.raises(TooFarError) as exc_info:
            checkin_service.evaluate_proof(v2.id, v2.latitude, v2.longitude, False, proof)

        assert exc_info.value.distance_miles == pytest.approx(5, rel=0.01)
        assert exc_info.value.details["threshold_miles"] == 0.1
        assert exc_info.value.status_code == 409

    def test_force_overrides_distance_and_keeps_audit(self, checkin_service, catalog):
        v2 = catalog.get("v2")
        proof = CheckInProof(location=location_of(v2, FIVE_MILES_OF_LATITUDE), force=True)

        decision = checkin_service.evaluate_proof(v2.id, v2.latitude, v2.longitude, False, proof)

        assert decision.proximity_overridden is True
        assert decision.distance_miles == pytest.approx(5, rel=0.01)
        assert decision.points == 10

    def test_no_proof_rejected_unless_forced(self, checkin_service):
        with pytest.raises(InvalidProofError):
            checkin_service.evaluate_proof("v2", 61.1424, -149.8663, False, CheckInProof())

        decision = checkin_service.evaluate_proof(
            "v2", 61.1424, -149.8663, False, CheckInProof(force=True)
        )
        assert decision.proximity_overridden is True
        assert decision.distance_miles is None


class TestVendorCheckIn:
    def test_standalone_check_in_credits_points(self, checkin_service, db, user):
        result = checkin_service.check_in_vendor(
            user.id, "v1", CheckInProof(qr_payload="lootsganja://checkin/v1")
        )

        assert result.points_earned == 10
        assert result.points_balance == 10
        assert result.check_in.journey_id is None
        assert result.check_in.is_journey_check_in is False

        entry = db.query(PointsLedger).filter(PointsLedger.user_id == user.id).one()
        assert entry.ref_id == f"checkin:{result.check_in.id}"
        assert entry.source == "check-in"

        visit = db.get(UserVisit, (user.id, "v1"))
        assert visit.visit_count == 1
        assert visit.vendor_name == "Northern Lights Cannabis"

    def test_invalid_qr_writes_nothing(self, checkin_service, db, user):
        with pytest.raises(InvalidProofError):
            checkin_service.check_in_vendor(
                user.id, "v1", CheckInProof(qr_payload="wrongscheme://x")
            )

        assert db.query(CheckIn).count() == 0
        assert db.query(PointsLedger).count() == 0

    def test_forced_check_in_records_distance(self, checkin_service, db, user, catalog):
        v2 = catalog.get("v2")
        result = checkin_service.check_in_vendor(
            user.id,
            "v2",
            CheckInProof(location=location_of(v2, FIVE_MILES_OF_LATITUDE), force=True),
        )

        event = db.get(CheckIn, result.check_in.id)
        assert event.proximity_overridden is True
        assert event.distance_miles == pytest.approx(5, rel=0.01)

    def test_points_failure_keeps_check_in(self, checkin_service, db, user):
        with patch.object(
            checkin_service.point_service,
            "append",
            side_effect=TransientBackendError("Failed to record points"),
        ):
            with pytest.raises(TransientBackendError):
                checkin_service.check_in_vendor(
                    user.id, "v1", CheckInProof(qr_payload="lootsganja://checkin/v1")
                )

        assert db.query(CheckIn).filter(CheckIn.user_id == user.id).count() == 1
        assert db.query(PointsLedger).count() == 0
