import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from journeyapi.core.exceptions import NotFoundError, TransientBackendError
from journeyapi.models import PointsLedger, User
from journeyapi.services.point_service import PointService


@pytest.fixture
def point_service(db):
    return PointService(db)


class TestPointService:
    def test_append_updates_profile_and_balance_after(self, point_service, db, user):
        first = point_service.append(user.id, 10, "check-in")
        second = point_service.append(user.id, 5, "check-in")

        assert first.balance_after == 10
        assert second.balance_after == 15
        assert db.get(User, user.id).points == 15
        assert point_service.get_user_balance(user.id).balance == 15

    def test_ref_id_makes_append_idempotent(self, point_service, db, user):
        first = point_service.append(user.id, 10, "journey-check-in", ref_id="journey:1:checkin:v1")
        again = point_service.append(user.id, 10, "journey-check-in", ref_id="journey:1:checkin:v1")

        assert not first.already_applied
        assert again.already_applied
        assert again.transaction_id == first.transaction_id
        assert point_service.get_user_balance(user.id).balance == 10
        assert db.query(PointsLedger).filter(PointsLedger.user_id == user.id).count() == 1

    def test_unknown_user(self, point_service):
        with pytest.raises(NotFoundError):
            point_service.append(9999, 10, "check-in")

    def test_database_failure_is_transient(self, point_service, user):
        with patch.object(
            point_service.points_repo,
            "append",
            side_effect=OperationalError("INSERT", {}, Exception("database is locked")),
        ):
            with pytest.raises(TransientBackendError) as exc_info:
                point_service.append(user.id, 10, "check-in", ref_id="checkin:1")

        assert exc_info.value.status_code == 503
        assert point_service.get_user_balance(user.id).balance == 0

    def test_ledger_newest_first_with_paging(self, point_service, user):
        for delta in (10, 5, 15):
            point_service.append(user.id, delta, "check-in")

        page = point_service.get_user_ledger(user.id, limit=2, offset=0)

        assert page.balance == 30
        assert page.total_count == 3
        assert page.has_next is True
        assert [e.delta_points for e in page.entries] == [15, 5]
        assert [e.balance_after for e in page.entries] == [30, 15]

    def test_ledger_limit_capped(self, point_service, user):
        with patch.object(point_service.points_repo, "get_user_ledger") as get_ledger:
            point_service.get_user_ledger(user.id, limit=1000)

        get_ledger.assert_called_once_with(user_id=user.id, limit=100, offset=0)

    def test_profile_points_equal_ledger_sum(self, point_service, user):
        for delta in (10, 10, 5, -3, 15):
            point_service.append(user.id, delta, "check-in")

        check = point_service.verify_user_integrity(user.id)

        assert check.status == "OK"
        assert check.ledger_sum == check.profile_points == check.latest_balance_after == 37
        assert check.entry_count == 5

    def test_integrity_mismatch_detected(self, point_service, make_user):
        # points written outside the ledger
        drifted = make_user(points=50)
        point_service.append(drifted.id, 10, "check-in")

        check = point_service.verify_user_integrity(drifted.id)

        assert check.status == "MISMATCH"
        assert check.ledger_sum == 10
        assert check.profile_points == 60
