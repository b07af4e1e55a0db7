from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # core
    ENV: str = "dev"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # notion
    NOTION_API_KEY: str
    NOTION_BASE_URL: str = "https://api.notion.com/v1"
    NOTION_VERSION: str = "2022-06-28"
    NOTION_TIMEOUT_SECONDS: int = 20
    # Notion caps a single query page at 100 rows
    NOTION_PAGE_SIZE: int = 100
    # Only transport failures are retried; HTTP status errors surface immediately
    NOTION_MAX_ATTEMPTS: int = 3

    # hyper network databases
    HYPER_NETWORK_DATABASE_ID: str
    HYPER_NETWORK_HARD_SKILLS_DATABASE_ID: str
    HYPER_NETWORK_CONTACTS_DATABASE_ID: str

    # cors
    FRONTEND_ORIGIN: str | None = None
    # Explicit debug-only switch for wide-open CORS in non-prod envs
    CORS_ALLOW_ALL_ORIGINS: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
