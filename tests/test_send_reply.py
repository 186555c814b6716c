from __future__ import annotations

import logging
from pathlib import Path

import pytest

from carrierbot.application.use_cases.send_reply import SendReplyUseCase
from carrierbot.infrastructure.whatsapp.mock_transport import MockChatTransport


class BrokenMediaTransport(MockChatTransport):
    async def send_media(self, conversation_id: str, media_path: Path, caption: str) -> None:
        raise RuntimeError("upload rejected")


@pytest.mark.asyncio
async def test_long_replies_are_truncated():
    transport = MockChatTransport()
    sent = await SendReplyUseCase(transport, max_chars=10).execute("c1", "a" * 25)
    assert sent is True
    assert transport.sent == [("c1", "a" * 10 + "…", None)]


@pytest.mark.asyncio
async def test_short_replies_are_untouched():
    transport = MockChatTransport()
    await SendReplyUseCase(transport, max_chars=10).execute("c1", "a" * 10)
    assert transport.sent == [("c1", "a" * 10, None)]


@pytest.mark.asyncio
async def test_disabled_auto_reply_only_logs(caplog):
    transport = MockChatTransport()
    use_case = SendReplyUseCase(transport, auto_reply_enabled=False)
    with caplog.at_level(logging.INFO):
        sent = await use_case.execute("c1", "hola")
    assert sent is False
    assert transport.sent == []
    assert "WOULD_SEND_REPLY" in caplog.text


@pytest.mark.asyncio
async def test_media_reply_carries_caption():
    transport = MockChatTransport()
    await SendReplyUseCase(transport).execute_media("c1", Path("info.jpg"), "Somos Ultracel")
    assert transport.sent == [("c1", "Somos Ultracel", Path("info.jpg"))]


@pytest.mark.asyncio
async def test_missing_image_falls_back_to_text():
    transport = MockChatTransport()
    await SendReplyUseCase(transport).execute_media("c1", None, "Somos Ultracel")
    assert transport.sent == [("c1", "Somos Ultracel", None)]


@pytest.mark.asyncio
async def test_failed_media_upload_falls_back_to_text():
    transport = BrokenMediaTransport()
    sent = await SendReplyUseCase(transport).execute_media("c1", Path("info.jpg"), "Somos Ultracel")
    assert sent is True
    assert transport.sent == [("c1", "Somos Ultracel", None)]
