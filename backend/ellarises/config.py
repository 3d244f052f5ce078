from __future__ import annotations

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    domain: str = "localhost"
    # e.g. "postgresql+psycopg://postgres@localhost:5432/ella_rises"
    db_url: str = "sqlite:///./data/ella_rises.db"
    db_echo: bool = False
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    # List endpoint paging
    default_page_size: int = 50
    max_page_size: int = 200

    @model_validator(mode="after")
    def _check_page_sizes(self) -> Settings:
        if self.default_page_size < 1 or self.max_page_size < 1:
            raise ValueError("Page sizes must be positive")
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                "DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE "
                f"({self.default_page_size} > {self.max_page_size})"
            )
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.db_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()
