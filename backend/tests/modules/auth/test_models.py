import pytest

from modules.auth.exceptions import RoleUndeterminedError
from modules.auth.models import (
    EffectiveSession,
    Principal,
    ResolutionFailure,
    SignupAttributes,
)
from modules.profiles.models import UserRole

from tests.fakes import make_principal, make_profile


class TestSignupAttributes:
    def test_parse_supabase_metadata(self):
        """Should read user_type and name from raw metadata."""
        attrs = SignupAttributes.model_validate({"user_type": "landlord", "name": "Alice"})
        assert attrs.role == "landlord"
        assert attrs.display_name == "Alice"

    def test_missing_keys(self):
        """Absent keys should parse as None."""
        attrs = SignupAttributes.model_validate({})
        assert attrs.role is None
        assert attrs.display_name is None

    def test_extra_keys_ignored(self):
        """Provider-added keys like email_verified should be ignored."""
        attrs = SignupAttributes.model_validate(
            {"user_type": "tenant", "email_verified": True, "sub": "abc"}
        )
        assert attrs.role == "tenant"

    def test_non_string_values_are_absent(self):
        """User-supplied metadata of the wrong type parses as None."""
        attrs = SignupAttributes.model_validate({"user_type": ["landlord"], "name": 42})
        assert attrs.role is None
        assert attrs.display_name is None

    def test_for_signup(self):
        """for_signup should produce the metadata keys Supabase stores."""
        data = SignupAttributes.for_signup("alice@example.com", UserRole.LANDLORD, "Alice")
        assert data == {"user_type": "landlord", "name": "Alice"}

    def test_for_signup_defaults_name_to_email_local_part(self):
        """Without a display name, the email local part should be used."""
        data = SignupAttributes.for_signup("bob@example.com", UserRole.TENANT)
        assert data["name"] == "bob"


class TestPrincipal:
    def test_signup_property(self):
        """signup should expose parsed attributes."""
        principal = make_principal(user_type="landlord", name="Alice")
        assert principal.signup.role == "landlord"
        assert principal.signup.display_name == "Alice"

    def test_access_token_not_serialized(self):
        """The access token should stay out of dumps and repr."""
        principal = make_principal(access_token="secret-token")
        assert "access_token" not in principal.model_dump()
        assert "secret-token" not in repr(principal)
        assert principal.access_token == "secret-token"

    def test_principal_is_immutable(self):
        """Principal should be immutable."""
        principal = Principal(id="user-123")
        with pytest.raises(Exception):
            principal.id = "other"


class TestResolutionFailure:
    def test_from_error(self):
        """Should copy code and message from a RentHubError."""
        failure = ResolutionFailure.from_error(RoleUndeterminedError("user-123"))
        assert failure.code == "ROLE_UNDETERMINED"
        assert "user-123" in failure.message


class TestEffectiveSession:
    def test_empty_session(self):
        """A default session is signed out."""
        session = EffectiveSession()
        assert session.is_authenticated is False
        assert session.effective_role is None
        assert session.needs_profile_setup is False

    def test_landlord_session(self):
        """Role flags should follow effective_role."""
        profile = make_profile(role=UserRole.LANDLORD)
        session = EffectiveSession(
            principal=make_principal(),
            profile=profile,
            effective_role=UserRole.LANDLORD,
        )
        assert session.is_landlord is True
        assert session.is_tenant is False

    def test_needs_profile_setup(self):
        """Signed in without profile and not loading needs setup."""
        session = EffectiveSession(principal=make_principal())
        assert session.needs_profile_setup is True

    def test_loading_does_not_need_setup(self):
        """A loading session should not report missing profile yet."""
        session = EffectiveSession(principal=make_principal(), is_loading=True)
        assert session.needs_profile_setup is False

    def test_session_is_immutable(self):
        """EffectiveSession should be immutable."""
        session = EffectiveSession()
        with pytest.raises(Exception):
            session.is_loading = True
