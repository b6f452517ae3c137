# config.py
# ------------------------------------------------------------
# Einstellungen aus Umgebung / .env
#
# .env Beispiel:
#   SPOONACULAR_API_KEY=...
#   REQUEST_TIMEOUT=15
#   BATCH_SIZE=20
#   FALLBACK_SIZE=10
#   STORE_PATH=saved_recipes.json
# ------------------------------------------------------------

from __future__ import annotations
import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

SPOONACULAR_BASE_URL = "https://api.spoonacular.com"
MEALDB_BASE_URL = "https://www.themealdb.com/api/json/v1/1"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    spoonacular_api_key: str = ""
    spoonacular_base_url: str = SPOONACULAR_BASE_URL
    mealdb_base_url: str = MEALDB_BASE_URL
    request_timeout: float = 15.0
    batch_size: int = 20
    fallback_size: int = 10
    store_path: str = "saved_recipes.json"
    log_level: str = "INFO"


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return val.strip()


def _get_number(name: str, default, cast):
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be a number, got {raw!r}. "
                         f"Fix it in your .env (e.g., {name}={default})")


def load_settings() -> Settings:
    """Liest .env und baut die Settings. API-Key kommt nur von außen, nie aus dem Code."""
    load_dotenv()
    return Settings(
        spoonacular_api_key=_get_env("SPOONACULAR_API_KEY", ""),
        spoonacular_base_url=_get_env("SPOONACULAR_BASE_URL", SPOONACULAR_BASE_URL).rstrip("/"),
        mealdb_base_url=_get_env("MEALDB_BASE_URL", MEALDB_BASE_URL).rstrip("/"),
        request_timeout=_get_number("REQUEST_TIMEOUT", 15.0, float),
        batch_size=_get_number("BATCH_SIZE", 20, int),
        fallback_size=_get_number("FALLBACK_SIZE", 10, int),
        store_path=_get_env("STORE_PATH", "saved_recipes.json"),
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
    )
