import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from the project root before Settings reads the environment
env_file_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_file_path)


class Settings(BaseSettings):
    # === STORE ===
    # Format: postgresql://user@host:port/database
    DATABASE_URL: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None

    # === PAYMENT PROVIDER - LIPIA ===
    # Without an API key the relay runs in demo mode
    LIPIA_API_KEY: Optional[str] = None
    LIPIA_BASE_URL: str = "https://lipia-api.kreativelabske.com/api"
    LIPIA_DEMO_MODE: bool = False
    PROVIDER_TIMEOUT_SECONDS: float = 30.0

    # === HTTP ===
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]

    # === LOGGING ===
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def demo_mode(self) -> bool:
        return self.LIPIA_DEMO_MODE or not self.LIPIA_API_KEY


def get_settings() -> Settings:
    return Settings()


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level.upper())
