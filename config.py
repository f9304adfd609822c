from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from appdirs import user_log_dir
from dotenv import load_dotenv


@dataclass
class Settings:
    database_url: str = ""
    log_dir: str = field(default_factory=lambda: user_log_dir("crm_backoffice"))
    log_level: str = "INFO"
    detailed_logging: bool = False
    default_managers_limit: int = 10
    default_orders_limit: int = 25
    password_hash_iterations: int = 260_000


@lru_cache()
def get_settings() -> Settings:
    dotenv_path = Path(__file__).resolve().parent / ".env"
    load_dotenv(dotenv_path)

    return Settings(
        database_url=os.getenv("DATABASE_URL", ""),
        log_dir=os.getenv("LOG_DIR") or user_log_dir("crm_backoffice"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        detailed_logging=os.getenv("DETAILED_LOGGING", "0").lower() in {"1", "true", "yes", "on"},
        default_managers_limit=int(os.getenv("DEFAULT_MANAGERS_LIMIT", "10")),
        default_orders_limit=int(os.getenv("DEFAULT_ORDERS_LIMIT", "25")),
        password_hash_iterations=int(os.getenv("PASSWORD_HASH_ITERATIONS", "260000")),
    )
