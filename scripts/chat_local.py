#!/usr/bin/env python3
"""
Talk to the dialogue engine from a terminal, without WhatsApp or HTTP.

    ENV=local python3 scripts/chat_local.py

Replies are captured by MockChatTransport and printed after each turn,
followed by the conversation's dialogue state. Admin alerts go through the
same transport, so they show up addressed to ADMIN_NUMBER.
"""

from __future__ import annotations

import asyncio
import itertools
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
os.environ.setdefault("ENV", "local")

from carrierbot.domain.entities.message import Message  # noqa: E402
from carrierbot.infrastructure.whatsapp.mock_transport import MockChatTransport  # noqa: E402
from carrierbot.wiring.dependencies import get_container  # noqa: E402

HELP = """\
/new    start over with a fresh conversation id
/state  print the stored state and data
/quit   leave"""


def _show_outbound(transport: MockChatTransport, since: int) -> None:
    outbound = transport.sent[since:]
    if not outbound:
        print("  (no reply)")
    for recipient, text, media in outbound:
        prefix = f"[{recipient}]"
        if media is not None:
            prefix += f" <{media.name}>"
        print(f"{prefix}\n{text}\n")


async def run(conversation_id: str) -> None:
    container = get_container()
    engine = container["use_case"]
    store = container["store"]
    transport = container["transport"]
    if not isinstance(transport, MockChatTransport):
        sys.exit("Real WhatsApp credentials are configured; run with ENV=local and no WHATSAPP_ACCESS_TOKEN.")

    message_ids = itertools.count(1)
    sessions = itertools.count(2)
    print(f"Chatting as {conversation_id}. /help for commands.")

    while True:
        try:
            line = input("tú> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if line in ("/quit", "/exit"):
            break
        if line == "/help":
            print(HELP)
        elif line == "/new":
            conversation_id = f"{conversation_id.split('#')[0]}#{next(sessions)}"
            print(f"Now chatting as {conversation_id}")
        elif line == "/state":
            session = store.get(conversation_id)
            print(f"{session.state.value} {session.data}")
        elif line:
            since = len(transport.sent)
            await engine.handle(
                Message(
                    id=f"local.{next(message_ids)}",
                    conversation_id=conversation_id,
                    text=line,
                    timestamp=0,
                    platform="local",
                )
            )
            _show_outbound(transport, since)
            print(f"  state={store.get(conversation_id).state.value}")


if __name__ == "__main__":
    asyncio.run(run(os.getenv("CHAT_CONVERSATION_ID", "5217770000000")))
