from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from carrierbot.core.config import settings
from carrierbot.application.ports.admin_notifier import AdminNotifierPort
from carrierbot.application.ports.calendar import CalendarPort
from carrierbot.application.ports.chat_transport import ChatTransportPort
from carrierbot.application.ports.content_provider import ContentProviderPort
from carrierbot.application.ports.generative_backend import GenerativeBackendPort
from carrierbot.application.use_cases.generate_text import GenerateTextUseCase
from carrierbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from carrierbot.application.use_cases.resolve_temporal import ResolveTemporalUseCase
from carrierbot.application.use_cases.send_reply import SendReplyUseCase
from carrierbot.infrastructure.calendar.google_calendar import GoogleCalendar
from carrierbot.infrastructure.calendar.mock_calendar import MockCalendar
from carrierbot.infrastructure.content.site_content import SiteContentProvider
from carrierbot.infrastructure.llm.mock_backend import MockGenerativeBackend
from carrierbot.infrastructure.llm.openai_backend import OpenAIBackend
from carrierbot.infrastructure.store.memory_store import MemorySessionStore
from carrierbot.infrastructure.whatsapp.admin_notifier import WhatsAppAdminNotifier
from carrierbot.infrastructure.whatsapp.mock_transport import MockChatTransport
from carrierbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient
from carrierbot.infrastructure.whatsapp.whatsapp_transport import WhatsAppTransport


logger = logging.getLogger(__name__)


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_session_store() -> MemorySessionStore:
    return MemorySessionStore(ttl_seconds=settings.SESSION_TTL_SECONDS)


@lru_cache
def get_generative_backend() -> GenerativeBackendPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAIBackend()
    logger.info("Using MockGenerativeBackend (OPENAI_API_KEY missing)")
    return MockGenerativeBackend()


@lru_cache
def get_generate_text() -> GenerateTextUseCase:
    return GenerateTextUseCase(
        backend=get_generative_backend(),
        primary_model=settings.OPENAI_MODEL_PRIMARY,
        fallback_model=settings.OPENAI_MODEL_FALLBACK,
        max_attempts=settings.GENERATION_MAX_ATTEMPTS,
    )


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_temporal_resolver() -> ResolveTemporalUseCase:
    return ResolveTemporalUseCase(timezone=get_timezone(), invoker=get_generate_text())


@lru_cache
def get_calendar() -> CalendarPort:
    if not settings.GOOGLE_REFRESH_TOKEN or _is_dev():
        logger.info("Using MockCalendar (ENV=%s)", settings.ENV)
        return MockCalendar()
    return GoogleCalendar()


@lru_cache
def get_chat_transport() -> ChatTransportPort:
    logger.info(
        "WHATSAPP_ACCESS_TOKEN present=%s len=%s",
        bool(settings.WHATSAPP_ACCESS_TOKEN),
        len(settings.WHATSAPP_ACCESS_TOKEN or ""),
    )

    if not (settings.WHATSAPP_ACCESS_TOKEN and settings.WHATSAPP_PHONE_NUMBER_ID):
        if _is_dev():
            logger.info("Using MockChatTransport (token missing, ENV=dev/local)")
            return MockChatTransport()
        raise ValueError("WHATSAPP_ACCESS_TOKEN and WHATSAPP_PHONE_NUMBER_ID are required to send replies.")

    logger.info("Using real WhatsAppTransport")
    client = WhatsAppClient(
        access_token=settings.WHATSAPP_ACCESS_TOKEN,
        phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
        api_version=settings.META_GRAPH_API_VERSION,
    )
    return WhatsAppTransport(client=client)


@lru_cache
def get_admin_notifier() -> AdminNotifierPort:
    return WhatsAppAdminNotifier(transport=get_chat_transport(), admin_number=settings.ADMIN_NUMBER)


@lru_cache
def get_content_provider() -> ContentProviderPort:
    return SiteContentProvider(
        site_url=settings.COMPANY_SITE_URL,
        generate_text=get_generate_text(),
        business_name=settings.BUSINESS_NAME,
        image_path=settings.COMPANY_IMAGE_PATH,
        site_ttl_seconds=settings.SITE_CACHE_TTL_SECONDS,
        pitch_ttl_seconds=settings.PITCH_CACHE_TTL_SECONDS,
        max_chars=settings.MAX_REPLY_CHARS,
    )


@lru_cache
def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        store=get_session_store(),
        resolver=get_temporal_resolver(),
        generate_text=get_generate_text(),
        calendar=get_calendar(),
        content=get_content_provider(),
        notifier=get_admin_notifier(),
        send_reply=SendReplyUseCase(
            transport=get_chat_transport(),
            auto_reply_enabled=settings.AUTO_REPLY_ENABLED,
            max_chars=settings.MAX_REPLY_CHARS,
        ),
        timezone=get_timezone(),
        business_name=settings.BUSINESS_NAME,
        allowed_amounts=settings.ALLOWED_RECHARGE_AMOUNTS,
        appointment_minutes=settings.APPOINTMENT_DURATION_MINUTES,
        debug_prefix=settings.DEBUG_COMMAND_PREFIX,
    )


def get_container() -> dict[str, object]:
    return {
        "use_case": get_handle_incoming_message_use_case(),
        "store": get_session_store(),
        "transport": get_chat_transport(),
    }
