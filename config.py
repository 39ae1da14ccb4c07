from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parent
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: Optional[str] = None) -> Optional[str]:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_list(*keys: str, default: str = "") -> Tuple[str, ...]:
    v = _get_env(*keys, default=default) or ""
    return tuple(item.strip() for item in v.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    database_name: str
    cors_origins: Tuple[str, ...]
    admin_emails: Tuple[str, ...]
    log_level: str
    port: int


settings = Settings(
    database_url=_get_env("DATABASE_URL", "MONGO_URL"),
    database_name=_get_env("DATABASE_NAME", default="storefront") or "storefront",
    cors_origins=_get_list("CORS_ORIGINS", default="*"),
    admin_emails=tuple(e.lower() for e in _get_list("ADMIN_EMAILS")),
    log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
    port=_get_int("PORT", default=8000),
)
