import pytest

from journeyapi.core.exceptions import ConflictError, NotFoundError
from journeyapi.services.favorites_service import FavoritesService


@pytest.fixture
def favorites_service(db, catalog):
    return FavoritesService(db, catalog)


class TestFavoritesService:
    def test_add_and_list(self, favorites_service, user):
        added = favorites_service.add_favorite(user.id, "v3")

        assert added.name == "Chugach Greenhouse"
        assert added.is_partner is True

        listing = favorites_service.get_user_favorites(user.id)
        assert listing.total_count == 1
        assert listing.favorites[0].vendor_id == "v3"

    def test_unknown_vendor(self, favorites_service, user):
        with pytest.raises(NotFoundError):
            favorites_service.add_favorite(user.id, "nope")

    def test_duplicate(self, favorites_service, user):
        favorites_service.add_favorite(user.id, "v1")

        with pytest.raises(ConflictError):
            favorites_service.add_favorite(user.id, "v1")

    def test_remove_and_check(self, favorites_service, user):
        favorites_service.add_favorite(user.id, "v1")
        assert favorites_service.check_favorite(user.id, "v1").is_favorited

        assert favorites_service.remove_favorite(user.id, "v1")
        assert not favorites_service.check_favorite(user.id, "v1").is_favorited

    def test_remove_missing(self, favorites_service, user):
        with pytest.raises(NotFoundError):
            favorites_service.remove_favorite(user.id, "v1")
