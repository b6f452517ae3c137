# storage.py
# ------------------------------------------------------------
# "Offline speichern":
# - Key-Value-Store (String -> String) als JSON-Datei
# - Index 'saved_recipes' = JSON-Liste der IDs
# - Snapshot 'recipe_{id}' = komplettes Rezept als JSON
# Fehler beim Lesen/Schreiben werden geloggt und geschluckt.
# ------------------------------------------------------------

from __future__ import annotations
import asyncio
import json
import logging
import os
from typing import Dict, FrozenSet, List, Optional

from pydantic import ValidationError

from gastro_hero.models import Recipe

logger = logging.getLogger("gastro-hero.storage")

INDEX_KEY = "saved_recipes"

def snapshot_key(recipe_id: str) -> str:
    return f"recipe_{recipe_id}"

# ----------------- Store -----------------

class JsonFileStore:
    """Einfacher Key-Value-Store in einer JSON-Datei. Schreiben atomar über .tmp + replace."""

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)

    def _set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    async def get_item(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

# ----------------- Index -----------------

class SavedRecipeIndex:
    """
    Menge der offline gespeicherten IDs. Wird einmal geladen und nur durch
    save_offline() verändert. Die Menge ist ein frozenset und wird bei jedem
    Speichern komplett ersetzt; gleichzeitige Aufrufe laufen nacheinander.
    """

    def __init__(self, store):
        self.store = store
        self._ids: FrozenSet[str] = frozenset()
        self._lock = asyncio.Lock()

    @property
    def ids(self) -> FrozenSet[str]:
        return self._ids

    def is_saved(self, recipe_id: str) -> bool:
        return str(recipe_id) in self._ids

    async def load(self) -> FrozenSet[str]:
        try:
            raw = await self.store.get_item(INDEX_KEY)
            if raw:
                arr = json.loads(raw)
                self._ids = frozenset(str(x) for x in arr)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Could not load saved index: %s", e)
        return self._ids

    async def save_offline(self, recipe: Recipe) -> bool:
        """Schreibt den Snapshot, dann den Index. True nur, wenn beides geklappt hat."""
        async with self._lock:
            rid = str(recipe.id)
            try:
                await self.store.set_item(snapshot_key(rid), recipe.model_dump_json())
                nxt = self._ids | {rid}
                await self.store.set_item(INDEX_KEY, json.dumps(sorted(nxt)))
            except (OSError, ValueError, TypeError) as e:
                logger.warning("Save offline failed for %s: %s", rid, e)
                return False
            self._ids = nxt
            logger.info("Saved recipe %s offline (%d total)", rid, len(nxt))
            return True

    async def get_snapshot(self, recipe_id: str) -> Optional[Recipe]:
        try:
            raw = await self.store.get_item(snapshot_key(str(recipe_id)))
            if not raw:
                return None
            return Recipe.model_validate_json(raw)
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.warning("Could not read snapshot %s: %s", recipe_id, e)
            return None

    def sorted_ids(self) -> List[str]:
        return sorted(self._ids)
