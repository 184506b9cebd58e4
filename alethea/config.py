from pydantic_settings import BaseSettings
from typing import List
import os

class Settings(BaseSettings):
    NEWS_API_KEY: str = ""
    GOOGLE_FACT_CHECK_API_KEY: str = ""
    NEWS_API_URL: str = "https://newsapi.org/v2/"
    NEWS_COUNTRY: str = "br"
    NEWS_LANGUAGE: str = "pt"
    NEWS_PAGE_SIZE: int = 20
    FACT_CHECK_LANGUAGE: str = "pt"
    HTTP_TIMEOUT: float = 12.0
    ALLOWED_ORIGINS: str = "http://localhost:3000"
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # heuristic scoring
    SOURCE_WEIGHT: float = 0.7
    CONTENT_WEIGHT: float = 0.3
    TRUE_THRESHOLD: float = 0.8
    FAKE_THRESHOLD: float = 0.4

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

settings = Settings(_env_file=os.getenv("ENV_FILE", ".env"), _env_file_encoding="utf-8")
