from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from utils import mask_secret


class Configuration(BaseModel):
    # Remote catalog (PostgREST / Supabase REST)
    catalog_base_url: Optional[str] = Field(default=None)
    catalog_api_key: Optional[str] = Field(default=None)
    catalog_timeout: int = Field(default=10)
    catalog_retries: int = Field(default=0)
    places_table: str = Field(default="places")
    services_table: str = Field(default="service_providers")
    events_table: str = Field(default="events")
    listings_table: str = Field(default="marketplace_listings")

    # Pipeline
    source_timeout_sec: float = Field(default=12.0)
    debounce_sec: float = Field(default=0.5)
    default_results_limit: int = Field(default=6)
    generic_tier_delay_sec: float = Field(default=0.0)
    tag_boost_enabled: bool = Field(default=True)
    search_tables_path: Optional[str] = Field(default=None)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "catalog_base_url": os.getenv("CATALOG_BASE_URL"),
            "catalog_api_key": os.getenv("CATALOG_API_KEY"),
            "catalog_timeout": os.getenv("CATALOG_TIMEOUT"),
            "catalog_retries": os.getenv("CATALOG_RETRIES"),
            "places_table": os.getenv("PLACES_TABLE"),
            "services_table": os.getenv("SERVICES_TABLE"),
            "events_table": os.getenv("EVENTS_TABLE"),
            "listings_table": os.getenv("LISTINGS_TABLE"),
            "source_timeout_sec": os.getenv("SOURCE_TIMEOUT_SEC"),
            "debounce_sec": os.getenv("DEBOUNCE_SEC"),
            "default_results_limit": os.getenv("DEFAULT_RESULTS_LIMIT"),
            "generic_tier_delay_sec": os.getenv("GENERIC_TIER_DELAY_SEC"),
            "tag_boost_enabled": os.getenv("TAG_BOOST_ENABLED"),
            "search_tables_path": os.getenv("SEARCH_TABLES_PATH"),
        }

        bool_fields = {"tag_boost_enabled"}

        for k, v in env_map.items():
            if v is None:
                continue
            if k in bool_fields:
                raw[k] = str(v).lower() in {"1", "true", "yes", "on"}
            else:
                raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    @property
    def catalog_enabled(self) -> bool:
        return bool(self.catalog_base_url)

    def require_catalog(self) -> None:
        if not self.catalog_base_url:
            raise ValueError("CATALOG_BASE_URL is required")

    def log_summary(self) -> str:
        return (
            "catalog=%s base=%s timeout=%s retries=%s debounce=%.2fs defaults=%d api_key=%s"
            % (
                self.catalog_enabled,
                self.catalog_base_url or "unset",
                self.catalog_timeout,
                self.catalog_retries,
                self.debounce_sec,
                self.default_results_limit,
                mask_secret(self.catalog_api_key),
            )
        )
