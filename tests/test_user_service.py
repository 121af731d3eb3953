import pytest
from datetime import date

from journeyapi.core.exceptions import ConflictError, ValidationError
from journeyapi.schemas.checkin import CheckInProof
from journeyapi.schemas.user import UserPreferencesUpdate
from journeyapi.services.checkin_service import CheckinService
from journeyapi.services.user_service import UserService, age_on


@pytest.fixture
def user_service(db, settings):
    return UserService(db, settings)


class TestUserService:
    def test_profile_of_new_user(self, user_service, user):
        profile = user_service.get_profile(user.id)

        assert profile.user_id == user.id
        assert profile.points == 0
        assert profile.favorites == []
        assert profile.is_age_verified is False
        assert profile.tos_accepted is False

    def test_set_username(self, user_service, user):
        assert user_service.set_username(user.id, "aurora_fan").username == "aurora_fan"

    def test_username_taken(self, user_service, user, make_user):
        user_service.set_username(user.id, "aurora_fan")
        other = make_user()

        with pytest.raises(ConflictError):
            user_service.set_username(other.id, "aurora_fan")

    def test_verify_age_and_tos(self, user_service, user):
        profile = user_service.verify_age(user.id, date(1990, 5, 1))
        assert profile.is_age_verified

        assert user_service.accept_tos(user.id).tos_accepted

    def test_under_21_rejected(self, user_service, user):
        today = date.today()
        with pytest.raises(ValidationError):
            user_service.verify_age(user.id, date(today.year - 18, 1, 1))

    def test_age_on_birthday_boundary(self):
        assert age_on(date(2000, 6, 15), date(2021, 6, 14)) == 20
        assert age_on(date(2000, 6, 15), date(2021, 6, 15)) == 21

    def test_preferences_default_then_update(self, user_service, user):
        prefs = user_service.get_preferences(user.id)
        assert prefs.theme == "light"
        assert prefs.max_distance == 25.0

        updated = user_service.update_preferences(
            user.id, UserPreferencesUpdate(theme="dark", show_partner_only=True)
        )
        assert updated.theme == "dark"
        assert updated.show_partner_only is True
        assert updated.notifications is True

    def test_recent_vendors_from_check_ins(self, user_service, db, settings, catalog, user):
        checkins = CheckinService(db, settings, catalog)
        checkins.check_in_vendor(user.id, "v1", CheckInProof(qr_payload="lootsganja://checkin/v1"))
        checkins.check_in_vendor(user.id, "v1", CheckInProof(qr_payload="lootsganja://checkin/v1"))

        recent = user_service.get_recent_vendors(user.id)

        assert [(r.vendor_id, r.visit_count) for r in recent] == [("v1", 2)]
        assert user_service.get_profile(user.id).points == 20
