from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")

    PROJECT_NAME: str = "callkit"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Provider selection (CALLING_MOCK_MODE overrides all to "mock")
    CALLING_MOCK_MODE: bool = False
    TELEPHONY_PROVIDER: str = ""
    VOICE_PROVIDER: str = ""
    LLM_PROVIDER: str = ""
    STT_PROVIDER: str = ""

    # Telephony
    VAPI_API_KEY: str = ""
    VAPI_PHONE_NUMBER_ID: str = ""
    VAPI_WEBHOOK_SECRET: str = ""
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_API_KEY_SID: str = ""
    TWILIO_API_KEY_SECRET: str = ""
    TWILIO_PHONE_NUMBER: str = ""
    WEBHOOK_BASE_URL: str = "http://localhost:3002"

    # Voice
    ELEVENLABS_API_KEY: str = ""
    ELEVENLABS_VOICE_ID: str = "rachel"

    # AI Services
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_STRUCTURED_MODEL: str = "gpt-4o"
    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    DEEPGRAM_API_KEY: str = ""
    DEEPGRAM_MODEL: str = "nova-2"

    # Infrastructure
    REDIS_URL: str = "redis://localhost:6379"
    HTTP_TIMEOUT_SECONDS: float = 30.0


def load_settings() -> Settings:
    """Read a fresh settings snapshot from the environment."""
    return Settings()


settings = load_settings()
