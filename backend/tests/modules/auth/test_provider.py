import pytest
from unittest.mock import MagicMock

from modules.auth.exceptions import AuthError
from modules.auth.models import AuthEventType
from modules.auth.provider import (
    SupabaseAuthProvider,
    principal_from_session,
    principal_from_user,
)


def make_user(user_id="user-123", email="test@example.com", metadata=None):
    user = MagicMock()
    user.id = user_id
    user.email = email
    user.user_metadata = metadata if metadata is not None else {"user_type": "tenant"}
    return user


def make_session(user=None, access_token="jwt-token"):
    session = MagicMock()
    session.user = user or make_user()
    session.access_token = access_token
    return session


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def provider(client):
    return SupabaseAuthProvider(client)


class TestPrincipalMapping:
    def test_principal_from_user(self):
        principal = principal_from_user(make_user(metadata={"user_type": "landlord", "name": "A"}))
        assert principal.id == "user-123"
        assert principal.email == "test@example.com"
        assert principal.signup_attributes == {"user_type": "landlord", "name": "A"}
        assert principal.access_token is None

    def test_principal_from_user_without_metadata(self):
        user = make_user(email=None, metadata={})
        user.user_metadata = None
        principal = principal_from_user(user)
        assert principal.email == ""
        assert principal.signup_attributes == {}

    def test_principal_from_session(self):
        principal = principal_from_session(make_session())
        assert principal.access_token == "jwt-token"

    def test_principal_from_no_session(self):
        assert principal_from_session(None) is None


class TestSupabaseAuthProvider:
    @pytest.mark.asyncio
    async def test_get_current_session(self, client, provider):
        client.auth.get_session.return_value = make_session()
        principal = await provider.get_current_session()
        assert principal.id == "user-123"

    @pytest.mark.asyncio
    async def test_get_current_session_signed_out(self, client, provider):
        client.auth.get_session.return_value = None
        assert await provider.get_current_session() is None

    @pytest.mark.asyncio
    async def test_sign_up_sends_attributes(self, client, provider):
        """Signup attributes should be sent as user metadata."""
        response = MagicMock()
        response.user = make_user(metadata={"user_type": "landlord", "name": "Alice"})
        response.session = make_session(access_token="new-token")
        client.auth.sign_up.return_value = response

        principal = await provider.sign_up(
            "alice@example.com", "secret123", {"user_type": "landlord", "name": "Alice"}
        )

        client.auth.sign_up.assert_called_once_with(
            {
                "email": "alice@example.com",
                "password": "secret123",
                "options": {"data": {"user_type": "landlord", "name": "Alice"}},
            }
        )
        assert principal.signup.role == "landlord"
        assert principal.access_token == "new-token"

    @pytest.mark.asyncio
    async def test_sign_up_pending_confirmation(self, client, provider):
        """Without a session the principal carries no token."""
        response = MagicMock()
        response.user = make_user()
        response.session = None
        client.auth.sign_up.return_value = response

        principal = await provider.sign_up("a@example.com", "secret123", {})
        assert principal.access_token is None

    @pytest.mark.asyncio
    async def test_sign_up_without_user(self, client, provider):
        response = MagicMock()
        response.user = None
        client.auth.sign_up.return_value = response

        with pytest.raises(AuthError, match="User creation failed"):
            await provider.sign_up("a@example.com", "secret123", {})

    @pytest.mark.asyncio
    async def test_sign_up_provider_error(self, client, provider):
        """Provider exceptions become AuthError with the provider message."""
        client.auth.sign_up.side_effect = Exception("User already registered")

        with pytest.raises(AuthError) as exc_info:
            await provider.sign_up("a@example.com", "secret123", {})
        assert exc_info.value.message == "User already registered"

    @pytest.mark.asyncio
    async def test_sign_in(self, client, provider):
        response = MagicMock()
        response.user = make_user()
        response.session = make_session()
        client.auth.sign_in_with_password.return_value = response

        principal = await provider.sign_in_with_password("test@example.com", "secret123")

        assert principal.id == "user-123"
        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "test@example.com", "password": "secret123"}
        )

    @pytest.mark.asyncio
    async def test_sign_in_invalid_credentials(self, client, provider):
        client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        with pytest.raises(AuthError, match="Invalid login credentials"):
            await provider.sign_in_with_password("test@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_sign_out_error(self, client, provider):
        client.auth.sign_out.side_effect = Exception("network down")

        with pytest.raises(AuthError):
            await provider.sign_out()

    def test_on_auth_state_change_forwards_events(self, client, provider):
        """Known events are forwarded with a mapped principal."""
        received = []
        subscription = MagicMock()
        client.auth.on_auth_state_change.return_value = subscription

        unsubscribe = provider.on_auth_state_change(
            lambda event, principal: received.append((event, principal))
        )
        forward = client.auth.on_auth_state_change.call_args[0][0]
        forward("SIGNED_IN", make_session())
        forward("SIGNED_OUT", None)
        forward("PASSWORD_RECOVERY", make_session())

        assert [event for event, _ in received] == [
            AuthEventType.SIGNED_IN,
            AuthEventType.SIGNED_OUT,
        ]
        assert received[0][1].id == "user-123"
        assert received[1][1] is None
        assert unsubscribe is subscription.unsubscribe
