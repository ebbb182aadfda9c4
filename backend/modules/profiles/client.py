"""
HTTP client for the profile creation endpoint.

Processes that only hold the anon key (for example a session manager
running next to a UI) cannot write to ``profiles`` directly; they call
``POST /api/create-profile`` on the backend instead.
"""

import logging
from typing import Optional

import httpx

from shared.config import get_settings
from .models import CreateProfileRequest, CreateProfileResult
from .exceptions import ProfileCreationError

logger = logging.getLogger(__name__)


class HttpProfileCreationClient:
    """IProfileCreator that calls the backend's create-profile endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self._url = url or settings.profile_service_url
        self._timeout = timeout if timeout is not None else settings.profile_service_timeout_seconds
        self._transport = transport

    async def create_profile(
        self,
        request: CreateProfileRequest,
        access_token: Optional[str] = None,
    ) -> CreateProfileResult:
        headers = {"Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(
                    self._url,
                    json=request.model_dump(mode="json"),
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error("Profile service unreachable: %s", e)
            raise ProfileCreationError(request.user_id, f"profile service unreachable: {e}") from e

        if response.status_code >= 400:
            reason = _error_message(response)
            logger.error("Profile service error (%s): %s", response.status_code, reason)
            raise ProfileCreationError(request.user_id, reason)

        try:
            result = CreateProfileResult.model_validate(response.json())
        except ValueError as e:
            raise ProfileCreationError(request.user_id, f"malformed profile service response: {e}") from e

        logger.info(
            "Profile %s via service with role %s",
            "created" if result.created else "found",
            result.profile.role.value,
        )
        return result


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the error message from an error response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("detail") or body.get("error") or body)
    return str(body)
