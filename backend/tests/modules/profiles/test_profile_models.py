import pytest
from pydantic import ValidationError

from modules.profiles.models import (
    CreateProfileRequest,
    ProfileUpdate,
    UserRole,
)

from tests.fakes import make_profile


class TestUserRole:
    def test_values(self):
        assert UserRole.LANDLORD.value == "landlord"
        assert UserRole.TENANT.value == "tenant"

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            UserRole("admin")


class TestProfile:
    def test_profile_is_immutable(self):
        profile = make_profile()
        with pytest.raises(ValidationError):
            profile.role = UserRole.LANDLORD

    def test_optional_fields_default_to_none(self):
        profile = make_profile()
        assert profile.phone is None
        assert profile.bio is None
        assert profile.avatar_url is None


class TestCreateProfileRequest:
    def test_role_parsed(self):
        request = CreateProfileRequest(user_id="u", email="a@example.com", role="landlord")
        assert request.role == UserRole.LANDLORD

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            CreateProfileRequest(user_id="u", email="a@example.com", role="admin")

    def test_empty_user_id(self):
        with pytest.raises(ValidationError):
            CreateProfileRequest(user_id="", email="a@example.com", role="tenant")

    def test_default_display_name(self):
        request = CreateProfileRequest(user_id="u", email="carol@example.com", role="tenant")
        assert request.default_display_name() == "carol"

    def test_explicit_display_name(self):
        request = CreateProfileRequest(
            user_id="u", email="carol@example.com", role="tenant", display_name="Carol"
        )
        assert request.default_display_name() == "Carol"


class TestProfileUpdate:
    def test_all_optional(self):
        update = ProfileUpdate()
        assert update.display_name is None

    def test_length_limits(self):
        with pytest.raises(ValidationError):
            ProfileUpdate(phone="1" * 51)
