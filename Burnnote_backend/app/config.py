from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SUMMARY_PROMPT = (
    "You summarize personal notes. Reply with a short summary of the user's text "
    "in the same language as the text. Do not add commentary."
)


class Settings(BaseSettings):
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8098
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_PATH: str = "burnnote.db"
    DATABASE_URL: str = ""
    SQL_ECHO: bool = False

    # Auth
    ADMIN_KEY: str = ""
    ADMIN_KEYS: str = ""
    TENANT_ISOLATION: bool = True
    AUTH_DEBUG: bool = False

    # Summaries
    AI_API_BASE: str = ""
    AI_API_KEY: str = ""
    AI_MODEL: str = "gpt-4o-mini"
    AI_SYSTEM_PROMPT: str = DEFAULT_SUMMARY_PROMPT
    AI_TIMEOUT: float = 30.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DATABASE_PATH:
            return f"sqlite+aiosqlite:///{self.DATABASE_PATH}"
        return ""


settings = Settings()
