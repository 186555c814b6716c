from __future__ import annotations

import logging
import time
from datetime import datetime
from urllib.parse import quote

import httpx

from carrierbot.application.exceptions import CollaboratorError
from carrierbot.application.ports.calendar import CalendarPort
from carrierbot.core.config import settings

TOKEN_URL = "https://oauth2.googleapis.com/token"
CALENDAR_API_URL = "https://www.googleapis.com/calendar/v3"


class GoogleCalendar(CalendarPort):
    """Google Calendar over REST, authorised with a long-lived OAuth refresh token."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        calendar_id: str | None = None,
        timezone: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client_id = client_id or settings.GOOGLE_CLIENT_ID
        self._client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self._refresh_token = refresh_token or settings.GOOGLE_REFRESH_TOKEN
        self._calendar_id = calendar_id or settings.GOOGLE_CALENDAR_ID
        self._timezone = timezone or settings.BUSINESS_TIMEZONE
        self._client = client or httpx.AsyncClient(timeout=10.0)
        self._access_token: str | None = None
        self._access_token_expires_at = 0.0
        self._logger = logging.getLogger(__name__)

        if not (self._client_id and self._client_secret and self._refresh_token):
            raise ValueError("GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN are required")

    async def is_slot_free(self, start: datetime, end: datetime) -> bool:
        payload = {
            "timeMin": start.isoformat(),
            "timeMax": end.isoformat(),
            "timeZone": self._timezone,
            "items": [{"id": self._calendar_id}],
        }
        data = await self._request("POST", f"{CALENDAR_API_URL}/freeBusy", payload)
        calendar = (data.get("calendars") or {}).get(self._calendar_id) or {}
        if calendar.get("errors"):
            raise CollaboratorError(f"Calendar freeBusy error: {calendar['errors']}")
        return len(calendar.get("busy") or []) == 0

    async def create_event(
        self,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        payload = {
            "summary": summary,
            "description": description,
            "start": {"dateTime": start.isoformat(), "timeZone": self._timezone},
            "end": {"dateTime": end.isoformat(), "timeZone": self._timezone},
        }
        url = f"{CALENDAR_API_URL}/calendars/{quote(self._calendar_id, safe='')}/events"
        data = await self._request("POST", url, payload)
        event_id = data.get("id")
        if not event_id:
            raise CollaboratorError("No event ID returned from Google Calendar API")
        self._logger.info("Calendar event created", extra={"event_id": event_id, "title": summary})
        return str(event_id)

    async def _request(self, method: str, url: str, payload: dict) -> dict:
        token = await self._get_access_token()
        try:
            response = await self._client.request(
                method, url, json=payload, headers={"Authorization": f"Bearer {token}"}
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            self._logger.error("Google Calendar request failed", extra={"error": str(e)})
            raise CollaboratorError(f"Google Calendar request failed: {e}") from e

    async def _get_access_token(self) -> str:
        if self._access_token and time.time() < self._access_token_expires_at:
            return self._access_token
        try:
            response = await self._client.post(
                TOKEN_URL,
                data={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "refresh_token": self._refresh_token,
                    "grant_type": "refresh_token",
                },
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            self._logger.error("Google token refresh failed", extra={"error": str(e)})
            raise CollaboratorError(f"Google token refresh failed: {e}") from e

        token = data.get("access_token")
        if not token:
            raise CollaboratorError("Google token response without access_token")
        # refresh one minute early
        self._access_token = token
        self._access_token_expires_at = time.time() + int(data.get("expires_in", 3600)) - 60
        return token
