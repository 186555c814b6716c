from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Any

import httpx

GRAPH_API_URL = "https://graph.facebook.com"


class WhatsAppClient:
    """Thin WhatsApp Cloud API client (Meta Graph)."""

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        api_version: str = "v20.0",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._access_token = access_token
        self._base_url = f"{GRAPH_API_URL}/{api_version}/{phone_number_id}"
        self._client = client or httpx.AsyncClient(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    async def send_text(self, recipient_id: str, text: str) -> None:
        await self._send_message(recipient_id, {"type": "text", "text": {"body": text, "preview_url": False}})

    async def send_image(self, recipient_id: str, image_path: Path, caption: str) -> None:
        media_id = await self.upload_media(image_path)
        await self._send_message(recipient_id, {"type": "image", "image": {"id": media_id, "caption": caption}})

    async def upload_media(self, path: Path) -> str:
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        resp = await self._client.post(
            f"{self._base_url}/media",
            headers=self._headers(),
            data={"messaging_product": "whatsapp", "type": mime_type},
            files={"file": (path.name, path.read_bytes(), mime_type)},
        )
        self._raise_for_error(resp, recipient_id=None)
        media_id = resp.json().get("id")
        if not media_id:
            raise ValueError("No media ID returned from WhatsApp API")
        return str(media_id)

    async def _send_message(self, recipient_id: str, body: dict[str, Any]) -> None:
        payload = {"messaging_product": "whatsapp", "recipient_type": "individual", "to": recipient_id, **body}
        resp = await self._client.post(f"{self._base_url}/messages", headers=self._headers(), json=payload)
        self._raise_for_error(resp, recipient_id=recipient_id)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    def _raise_for_error(self, resp: httpx.Response, recipient_id: str | None) -> None:
        if resp.status_code < 400:
            return
        try:
            error = resp.json().get("error", {})
            error_code = error.get("code")
            error_message = error.get("message")
            error_subcode = error.get("error_subcode")
        except Exception:
            error_code = None
            error_message = resp.text
            error_subcode = None

        self._logger.error(
            "WhatsApp request failed",
            extra={
                "status": resp.status_code,
                "error_code": error_code,
                "error_message": error_message,
                "error_subcode": error_subcode,
                "recipient_id": recipient_id,
            },
        )
        resp.raise_for_status()
