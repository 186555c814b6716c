from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, time, timedelta
from typing import AsyncIterator, Awaitable, Callable
from zoneinfo import ZoneInfo

from carrierbot.application.exceptions import GenerationError, ValidationError
from carrierbot.application.ports.admin_notifier import AdminNotifierPort
from carrierbot.application.ports.calendar import CalendarPort
from carrierbot.application.ports.content_provider import ContentProviderPort
from carrierbot.application.ports.session_store import SessionStorePort
from carrierbot.application.use_cases.generate_text import GenerateTextUseCase
from carrierbot.application.use_cases.resolve_temporal import ResolveTemporalUseCase
from carrierbot.application.use_cases.send_reply import SendReplyUseCase
from carrierbot.application.utils import replies
from carrierbot.application.utils.message_rules import (
    confirmation,
    is_cancel,
    is_greeting,
    is_mx_phone,
    is_portability_interest,
    menu_option,
    only_digits,
    parse_amount,
)
from carrierbot.domain.entities.dialogue_state import DialogueState
from carrierbot.domain.entities.message import Message
from carrierbot.domain.entities.session import Session

StateHandler = Callable[[Session, str], Awaitable[None]]

UTC = ZoneInfo("UTC")
_TIME_KEYS = ("time", "time_text", "time_readable")


class HandleIncomingMessageUseCase:
    """
    Per-conversation dialogue state machine.

    One inbound message produces at most one state transition. Global
    interrupts (cancel/greeting, portability interest, debug command) are
    checked before the handler registered for the current state runs.
    """

    def __init__(
        self,
        store: SessionStorePort,
        resolver: ResolveTemporalUseCase,
        generate_text: GenerateTextUseCase,
        calendar: CalendarPort,
        content: ContentProviderPort,
        notifier: AdminNotifierPort,
        send_reply: SendReplyUseCase,
        timezone: ZoneInfo,
        business_name: str,
        allowed_amounts: list[int],
        appointment_minutes: int = 60,
        debug_prefix: str | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._generate_text = generate_text
        self._calendar = calendar
        self._content = content
        self._notifier = notifier
        self._send_reply = send_reply
        self._timezone = timezone
        self._business_name = business_name
        self._allowed_amounts = list(allowed_amounts)
        self._appointment_minutes = appointment_minutes
        self._debug_prefix = (debug_prefix or "").strip().lower()
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._logger = logging.getLogger(__name__)

        self._handlers: dict[DialogueState, StateHandler] = {
            DialogueState.IDLE: self._on_idle,
            DialogueState.INFO: self._on_info,
            DialogueState.RECHARGE_NUMBER: self._on_recharge_number,
            DialogueState.RECHARGE_AMOUNT: self._on_recharge_amount,
            DialogueState.APPT_NAME: self._on_appt_name,
            DialogueState.APPT_DATE_INPUT: self._on_appt_date_input,
            DialogueState.APPT_DATE_CONFIRM: self._on_appt_date_confirm,
            DialogueState.APPT_TIME_INPUT: self._on_appt_time_input,
            DialogueState.APPT_TIME_CONFIRM: self._on_appt_time_confirm,
            DialogueState.PORTABILITY_INTAKE: self._on_portability_intake,
            DialogueState.HANDOFF: self._on_handoff,
        }
        missing = set(DialogueState) - set(self._handlers)
        if missing:
            raise ValueError(f"No handler for states: {sorted(s.value for s in missing)}")

    async def handle(self, message: Message) -> None:
        if not self._store.mark_processed(message.id):
            self._logger.info("Duplicate message ignored", extra={"message_id": message.id})
            return

        conversation_id = message.conversation_id
        async with self._conversation_lock(conversation_id):
            try:
                await self._process(conversation_id, (message.text or "").strip())
            except Exception as e:
                self._logger.exception(
                    "Failed to handle incoming message",
                    extra={"conversation_id": conversation_id, "message_id": message.id, "error": str(e)},
                )
                try:
                    await self._reply(conversation_id, replies.GENERIC_ERROR)
                except Exception:
                    self._logger.exception("Failed to send error reply", extra={"conversation_id": conversation_id})

    @asynccontextmanager
    async def _conversation_lock(self, conversation_id: str) -> AsyncIterator[None]:
        # the lock is dropped once no task holds or waits for it
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        self._lock_users[conversation_id] = self._lock_users.get(conversation_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[conversation_id] -= 1
            if not self._lock_users[conversation_id]:
                del self._lock_users[conversation_id]
                del self._locks[conversation_id]

    @property
    def active_conversations(self) -> int:
        """Conversations with a message being handled or queued."""
        return len(self._locks)

    async def _process(self, conversation_id: str, text: str) -> None:
        if is_cancel(text) or is_greeting(text):
            self._store.reset(conversation_id)
            await self._reply(conversation_id, replies.welcome_menu(self._business_name))
            return

        if is_portability_interest(text):
            self._store.set(conversation_id, DialogueState.PORTABILITY_INTAKE)
            await self._reply(conversation_id, replies.portability_requirements(self._business_name))
            return

        if self._debug_prefix and text.lower().startswith(self._debug_prefix):
            self._store.get(conversation_id)
            await self._run_debug_command(conversation_id, text[len(self._debug_prefix):].strip())
            return

        session = self._store.get(conversation_id)
        self._logger.info("Dispatching message", extra={"conversation_id": conversation_id, "state": session.state.value})
        try:
            await self._handlers[session.state](session, text)
        except ValidationError as e:
            await self._reply(conversation_id, str(e))

    async def _run_debug_command(self, conversation_id: str, prompt: str) -> None:
        try:
            output = await self._generate_text.execute(prompt or replies.DEBUG_DEFAULT_PROMPT)
        except GenerationError as e:
            self._logger.warning("Debug command failed", extra={"conversation_id": conversation_id, "error": str(e)})
            await self._reply(conversation_id, replies.MODEL_BUSY)
            return
        await self._reply(conversation_id, output)

    # --- state handlers -------------------------------------------------

    async def _on_idle(self, session: Session, text: str) -> None:
        option = menu_option(text)
        if option is None:
            await self._reply(session.id, replies.welcome_menu(self._business_name))
            return

        if option == "1":
            pitch = await self._content.get_pitch_text()
            await self._send_reply.execute_media(session.id, self._content.get_company_image(), pitch)
            self._store.set(session.id, DialogueState.INFO)
        elif option == "2":
            await self._reply(session.id, replies.RECHARGE_ASK_NUMBER)
            self._store.set(session.id, DialogueState.RECHARGE_NUMBER)
        elif option == "3":
            await self._reply(session.id, replies.CALL_CENTER)
            self._store.set(session.id, DialogueState.IDLE)
        elif option == "4":
            await self._reply(session.id, replies.APPT_ASK_NAME)
            self._store.set(session.id, DialogueState.APPT_NAME)
        else:
            await self._reply(session.id, replies.HANDOFF_STARTED)
            await self._notify_admin(replies.admin_handoff_alert(session.id))
            self._store.set(session.id, DialogueState.HANDOFF)

    async def _on_info(self, session: Session, text: str) -> None:
        await self._reply(session.id, replies.INFO_FOLLOW_UP)

    async def _on_recharge_number(self, session: Session, text: str) -> None:
        if not is_mx_phone(text):
            raise ValidationError(replies.RECHARGE_INVALID_NUMBER)
        self._store.set(session.id, DialogueState.RECHARGE_AMOUNT, {"recharge_number": only_digits(text)})
        await self._reply(session.id, replies.recharge_ask_amount(self._allowed_amounts))

    async def _on_recharge_amount(self, session: Session, text: str) -> None:
        amount = parse_amount(text)
        if amount is None or amount not in self._allowed_amounts:
            raise ValidationError(replies.recharge_invalid_amount(self._allowed_amounts))
        number = session.data.get("recharge_number", "")
        await self._reply(session.id, replies.recharge_confirmed(number, amount))
        await self._notify_admin(replies.admin_recharge_alert(session.id, number, amount))
        self._store.set(session.id, DialogueState.IDLE)

    async def _on_appt_name(self, session: Session, text: str) -> None:
        if not text:
            raise ValidationError(replies.APPT_ASK_NAME)
        self._store.set(session.id, DialogueState.APPT_DATE_INPUT, {"name": text})
        await self._reply(session.id, replies.APPT_ASK_DATE)

    async def _on_appt_date_input(self, session: Session, text: str) -> None:
        parsed = await self._resolver.resolve_date(text)
        if parsed.iso_date is None:
            raise ValidationError(replies.APPT_DATE_NOT_UNDERSTOOD)
        iso_date = parsed.iso_date.isoformat()
        readable = parsed.readable or iso_date
        self._store.set(
            session.id,
            DialogueState.APPT_DATE_CONFIRM,
            {"date": iso_date, "date_text": text, "date_readable": readable},
        )
        await self._reply(session.id, replies.appt_confirm_date(readable, iso_date))

    async def _on_appt_date_confirm(self, session: Session, text: str) -> None:
        answer = confirmation(text)
        if answer is True:
            self._store.set(session.id, DialogueState.APPT_TIME_INPUT)
            await self._reply(session.id, replies.APPT_ASK_TIME)
        elif answer is False:
            self._store.set(session.id, DialogueState.APPT_DATE_INPUT)
            await self._reply(session.id, replies.APPT_RETRY_DATE)
        else:
            await self._reply(session.id, replies.ANSWER_YES_NO)

    async def _on_appt_time_input(self, session: Session, text: str) -> None:
        parsed = await self._resolver.resolve_time(text)
        if parsed.iso_time is None:
            raise ValidationError(replies.APPT_TIME_NOT_UNDERSTOOD)
        readable = parsed.readable or parsed.iso_time
        self._store.set(
            session.id,
            DialogueState.APPT_TIME_CONFIRM,
            {"time": parsed.iso_time, "time_text": text, "time_readable": readable},
        )
        await self._reply(session.id, replies.appt_confirm_time(readable, parsed.iso_time))

    async def _on_appt_time_confirm(self, session: Session, text: str) -> None:
        answer = confirmation(text)
        if answer is True:
            await self._book_appointment(session)
        elif answer is False:
            self._store.set(session.id, DialogueState.APPT_TIME_INPUT)
            await self._reply(session.id, replies.APPT_RETRY_TIME)
        else:
            await self._reply(session.id, replies.ANSWER_YES_NO)

    async def _on_portability_intake(self, session: Session, text: str) -> None:
        self._store.set(session.id, DialogueState.IDLE, {"portability_details": text})
        await self._notify_admin(replies.admin_portability_alert(session.id, text))
        await self._reply(session.id, replies.PORTABILITY_RECEIVED)

    async def _on_handoff(self, session: Session, text: str) -> None:
        await self._reply(session.id, replies.HANDOFF_ACK)

    # --- helpers ----------------------------------------------------------

    async def _book_appointment(self, session: Session) -> None:
        name = session.data.get("name", "")
        iso_date = session.data.get("date")
        iso_time = session.data.get("time")
        if not iso_date or not iso_time:
            self._store.set(session.id, DialogueState.APPT_DATE_INPUT)
            await self._reply(session.id, replies.APPT_ASK_DATE)
            return

        start, end = self._appointment_window(iso_date, iso_time)
        try:
            if not await self._calendar.is_slot_free(start, end):
                self._store.set(session.id, DialogueState.APPT_DATE_INPUT, dict.fromkeys(_TIME_KEYS))
                await self._reply(session.id, replies.APPT_SLOT_BUSY)
                return
            event_id = await self._calendar.create_event(
                summary=f"Cita con {name}",
                description=f"Cita agendada vía WhatsApp ({session.id}).",
                start=start,
                end=end,
            )
        except Exception as e:
            self._logger.error(
                "Calendar booking failed",
                extra={"conversation_id": session.id, "error": str(e)},
            )
            self._store.reset(session.id)
            await self._reply(session.id, replies.APPT_CALENDAR_ERROR)
            return

        self._logger.info("Appointment booked", extra={"conversation_id": session.id, "event_id": event_id})
        await self._reply(session.id, replies.appt_created(iso_date, iso_time))
        await self._notify_admin(replies.admin_appointment_alert(session.id, name, iso_date, iso_time, event_id))
        self._store.reset(session.id)

    def _appointment_window(self, iso_date: str, iso_time: str) -> tuple[datetime, datetime]:
        local_start = datetime.combine(date.fromisoformat(iso_date), time.fromisoformat(iso_time), tzinfo=self._timezone)
        start = local_start.astimezone(UTC)
        return start, start + timedelta(minutes=self._appointment_minutes)

    async def _notify_admin(self, text: str) -> bool:
        try:
            delivered = await self._notifier.notify(text)
        except Exception as e:
            self._logger.error("Admin notification raised", extra={"error": str(e)})
            return False
        if not delivered:
            self._logger.warning("Admin notification not delivered")
        return delivered

    async def _reply(self, conversation_id: str, text: str) -> None:
        await self._send_reply.execute(conversation_id, text)
