from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str | None = None

    OPENAI_MODEL_PRIMARY: str = "gpt-4o-mini"
    OPENAI_MODEL_FALLBACK: str = "gpt-4o"
    OPENAI_TEMPERATURE: float = 0.2
    OPENAI_TIMEOUT_SECONDS: float = 30.0
    GENERATION_MAX_ATTEMPTS: int = 4

    BUSINESS_NAME: str = "Ultracel"
    BUSINESS_TIMEZONE: str = "America/Mexico_City"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = True
    DEBUG_COMMAND_PREFIX: str = "gpt"
    MAX_REPLY_CHARS: int = 4000
    SESSION_TTL_SECONDS: float | None = None

    ADMIN_NUMBER: str = "527779313920"
    ALLOWED_RECHARGE_AMOUNTS: list[int] = [110, 160, 210]
    APPOINTMENT_DURATION_MINUTES: int = 60

    META_VERIFY_TOKEN: str = ""
    META_APP_SECRET: str | None = None
    META_GRAPH_API_VERSION: str = "v20.0"
    WHATSAPP_ACCESS_TOKEN: str | None = None
    WHATSAPP_PHONE_NUMBER_ID: str | None = None

    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GOOGLE_REFRESH_TOKEN: str | None = None
    GOOGLE_CALENDAR_ID: str = "primary"

    COMPANY_SITE_URL: str = "https://ultracel.com.mx/"
    COMPANY_IMAGE_PATH: str | None = "assets/ultracel-info.jpg"
    SITE_CACHE_TTL_SECONDS: float = 6 * 60 * 60
    PITCH_CACHE_TTL_SECONDS: float = 2 * 60 * 60


settings = Settings()
