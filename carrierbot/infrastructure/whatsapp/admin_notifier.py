from __future__ import annotations

import logging

from carrierbot.application.ports.admin_notifier import AdminNotifierPort
from carrierbot.application.ports.chat_transport import ChatTransportPort
from carrierbot.application.utils.message_rules import only_digits


class WhatsAppAdminNotifier(AdminNotifierPort):
    def __init__(self, transport: ChatTransportPort, admin_number: str) -> None:
        self._transport = transport
        self._admin_number = only_digits(admin_number)
        self._logger = logging.getLogger(__name__)

    async def notify(self, text: str) -> bool:
        if not self._admin_number:
            self._logger.error("ADMIN_NUMBER is not configured; admin alert dropped")
            return False
        try:
            await self._transport.send_text(self._admin_number, text)
        except Exception as e:
            self._logger.error("Admin alert failed", extra={"error": str(e)})
            return False
        self._logger.info("Admin alert sent", extra={"conversation_id": self._admin_number})
        return True
