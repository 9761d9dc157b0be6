"""Async Python client for the Career Saathi API.

Mirrors what the web frontend does: validates signup input before any
network call, and tracks the "just verified" transition locally.

Example:
    async with CareerSaathiClient("http://localhost:3000") as client:
        await client.signup("asha@example.com", "Passw0rd", "Asha Rao")
        session = await client.load_session(id_token)
        if client.just_verified(session["profile"]["uid"]):
            ...  # send the user to profile completion
            client.acknowledge_verification(session["profile"]["uid"])
"""

from types import TracebackType
from typing import Any, Optional

import httpx

from client.verification import VerificationTracker
from domain.validation import validate_signup


class ApiError(Exception):
    """Error response from the API."""

    def __init__(self, status_code: int, error_code: str, message: str) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        super().__init__(f"{status_code} {error_code}: {message}")


class CareerSaathiClient:
    """Thin async client over the HTTP API."""

    def __init__(
        self,
        base_url: str,
        tracker: Optional[VerificationTracker] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/api",
            timeout=timeout,
            transport=transport,
        )
        self.tracker = tracker or VerificationTracker()

    async def __aenter__(self) -> "CareerSaathiClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def signup(
        self,
        email: str,
        password: str,
        display_name: str,
        phone_number: Optional[str] = None,
    ) -> dict[str, Any]:
        """Sign up. Invalid input raises ValidationError without a request."""
        validate_signup(email, password, display_name)
        body: dict[str, Any] = {
            "email": email,
            "password": password,
            "displayName": display_name,
        }
        if phone_number:
            body["phoneNumber"] = phone_number

        data = await self._request("POST", "/auth/signup", json=body)
        self.tracker.mark_unverified(data["uid"])
        return data

    async def load_session(self, id_token: str) -> dict[str, Any]:
        """Load the session for ``id_token`` and update the verification state."""
        data = await self._request("POST", "/auth/session", token=id_token)
        self.tracker.observe(data["profile"]["uid"], data["emailVerified"])
        return data

    async def resend_verification_email(self, id_token: str) -> bool:
        """Ask the API to send another verification email."""
        data = await self._request("POST", "/auth/verification-email", token=id_token)
        return bool(data["sent"])

    def just_verified(self, uid: str) -> bool:
        return self.tracker.just_verified(uid)

    def acknowledge_verification(self, uid: str) -> None:
        self.tracker.acknowledge(uid)

    async def get_profile(self, id_token: str, uid: Optional[str] = None) -> dict[str, Any]:
        path = f"/users/profile/{uid}" if uid else "/users/profile"
        data = await self._request("GET", path, token=id_token)
        return data["profile"]  # type: ignore[no-any-return]

    async def update_profile(
        self, id_token: str, changes: dict[str, Any], uid: Optional[str] = None
    ) -> dict[str, Any]:
        path = f"/users/profile/{uid}" if uid else "/users/profile"
        return await self._request("PUT", path, token=id_token, json=changes)

    async def complete_profile(self, id_token: str) -> dict[str, Any]:
        data = await self._request("POST", "/users/profile/complete", token=id_token)
        return data["profile"]  # type: ignore[no-any-return]

    async def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        response = await self._http.request(method, path, headers=headers, json=json)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise ApiError(
                response.status_code,
                body.get("error_code", "HTTP_ERROR"),
                body.get("error", response.reason_phrase),
            )
        return response.json()  # type: ignore[no-any-return]
