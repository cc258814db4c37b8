import os
from dataclasses import dataclass
from dotenv import load_dotenv
from pathlib import Path

# Go up one level from tech_news/ to root/
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration handed to the store/feed factories."""

    db_url: str = "sqlite:///tech_news.db"
    storage_backend: str = "sqlite"   # sqlite | memory | none
    feed_source: str = "mock"         # mock | newsapi | google_news
    newsapi_key: str = ""
    firecrawl_api_key: str = ""
    firecrawl_base_url: str = "https://api.firecrawl.dev/v0"
    enhance_on_fetch: bool = False
    fetch_on_startup: bool = True


def load_settings() -> Settings:
    """Read settings from the environment (and .env, loaded above)."""
    return Settings(
        db_url=os.getenv("DB_URL", "sqlite:///tech_news.db"),
        storage_backend=os.getenv("STORAGE_BACKEND", "sqlite").strip().lower(),
        feed_source=os.getenv("FEED_SOURCE", "mock").strip().lower(),
        newsapi_key=os.getenv("NEWSAPI_KEY", ""),
        firecrawl_api_key=os.getenv("FIRECRAWL_API_KEY", ""),
        firecrawl_base_url=os.getenv("FIRECRAWL_BASE_URL", "https://api.firecrawl.dev/v0"),
        enhance_on_fetch=_flag("ENHANCE_ON_FETCH"),
        fetch_on_startup=_flag("FETCH_ON_STARTUP", "1"),
    )
