# providers.py
# ------------------------------------------------------------
# HTTP-Clients für die beiden Rezept-Quellen.
# - Spoonacular (primär): /recipes/random, /recipes/{id}/information
# - TheMealDB (Fallback): /random.php
# Jeder Fehler (Status != 2xx, Netzwerk, Timeout, kaputtes JSON)
# wird als ProviderError gemeldet.
# ------------------------------------------------------------

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger("gastro-hero.providers")


class ProviderError(Exception):
    def __init__(self, provider: str, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.url = url
        self.status_code = status_code


async def _get_json(http: httpx.AsyncClient, provider: str, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
    try:
        r = await http.get(url, params=params)
    except httpx.HTTPError as e:
        raise ProviderError(provider, f"request failed: {e!r}", url=url) from e
    logger.debug("%s status: %s url=%s", provider, r.status_code, url)
    if not r.is_success:
        raise ProviderError(provider, f"HTTP {r.status_code}: {r.text[:200]}", url=url, status_code=r.status_code)
    try:
        return r.json()
    except ValueError as e:
        raise ProviderError(provider, "invalid JSON body", url=url, status_code=r.status_code) from e


class SpoonacularClient:
    name = "spoonacular"

    def __init__(self, http: httpx.AsyncClient, api_key: str, base_url: str):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def _require_key(self) -> str:
        if not self.api_key:
            raise ProviderError(self.name, "no SPOONACULAR_API_KEY configured")
        return self.api_key

    async def random_recipes(self, number: int) -> List[Dict[str, Any]]:
        """GET /recipes/random -> Liste der Rohdatensätze (kann leer sein)."""
        key = self._require_key()
        url = f"{self.base_url}/recipes/random"
        data = await _get_json(self.http, self.name, url, {"number": number, "apiKey": key})
        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected payload shape", url=url)
        recipes = data.get("recipes") or []
        if not isinstance(recipes, list):
            raise ProviderError(self.name, "'recipes' is not a list", url=url)
        return recipes

    async def recipe_information(self, recipe_id: str) -> Dict[str, Any]:
        key = self._require_key()
        url = f"{self.base_url}/recipes/{recipe_id}/information"
        data = await _get_json(self.http, self.name, url, {"includeNutrition": "false", "apiKey": key})
        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected payload shape", url=url)
        return data


class MealDBClient:
    name = "themealdb"

    def __init__(self, http: httpx.AsyncClient, base_url: str):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def random_meal(self) -> Optional[Dict[str, Any]]:
        """GET /random.php -> erster Eintrag aus 'meals' oder None, wenn leer."""
        url = f"{self.base_url}/random.php"
        data = await _get_json(self.http, self.name, url)
        meals = data.get("meals") if isinstance(data, dict) else None
        if not isinstance(meals, list) or not meals:
            return None
        return meals[0]
