"""
Runtime configuration for the Roof Quote API
Values come from ROOFQUOTE_* environment variables or a local .env file
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ROOFQUOTE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    company_name: str = "Roof Quote"
    # Contact details printed on PDF estimates ("N/A" when unset)
    company_email: Optional[str] = None
    company_phone: Optional[str] = None
    pdf_output_dir: str = "pdfs"
    cors_origins: str = "*"
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"
    building_search_km: float = 0.15

    def cors_origin_list(self) -> List[str] | str:
        raw = [x.strip() for x in self.cors_origins.split(",") if x.strip()]
        if not raw or raw == ["*"]:
            return "*"
        return raw


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
