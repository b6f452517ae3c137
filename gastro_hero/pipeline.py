# pipeline.py
# ------------------------------------------------------------
# Rezept-Beschaffung:
#   1) Batch von Spoonacular holen
#   2) Normalisieren (Reihenfolge bleibt, Unbrauchbares fliegt raus)
#   3) Unvollständige Rezepte parallel hydrieren
#   4) Fallback auf TheMealDB, wenn 1) scheitert oder 3) leer ist
# acquire() wirft nie; im schlimmsten Fall kommt eine leere Liste.
# ------------------------------------------------------------

from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from gastro_hero.config import Settings, load_settings
from gastro_hero.enrichment import hydrate_batch
from gastro_hero.models import Recipe
from gastro_hero.normalize import normalize_primary_summary, normalize_secondary
from gastro_hero.providers import MealDBClient, ProviderError, SpoonacularClient

logger = logging.getLogger("gastro-hero.pipeline")

# ----------------- Stufe 1 + 2 -----------------

def normalize_batch(raw_records: List[Dict[str, Any]]) -> List[Recipe]:
    """Operation A auf jeden Eintrag; doppelte IDs im selben Batch werden verworfen."""
    batch: List[Recipe] = []
    seen = set()
    for i, raw in enumerate(raw_records):
        try:
            recipe = normalize_primary_summary(raw, i)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping primary record at %s: %s", i, e)
            continue
        if recipe is None:
            continue
        if recipe.id in seen:
            logger.warning("Dropping record at %s: duplicate id %s", i, recipe.id)
            continue
        seen.add(recipe.id)
        batch.append(recipe)
    return batch

async def fetch_primary_batch(primary, batch_size: int) -> List[Recipe]:
    raw = await primary.random_recipes(batch_size)
    batch = normalize_batch(raw)
    logger.info("Primary batch: %d raw, %d usable", len(raw), len(batch))
    return batch

# ----------------- Stufe 4 -----------------

async def _fallback_slot(secondary) -> Optional[Dict[str, Any]]:
    try:
        return await secondary.random_meal()
    except ProviderError as e:
        logger.warning("Fallback request failed: %s", e)
        return None

async def fetch_fallback(secondary, fallback_size: int) -> List[Recipe]:
    """`fallback_size` Einzel-Requests gleichzeitig; Reihenfolge = Reihenfolge der Anfragen."""
    if fallback_size <= 0:
        return []
    raws = await asyncio.gather(*(_fallback_slot(secondary) for _ in range(fallback_size)))

    recipes: List[Recipe] = []
    seen = set()
    for raw in raws:
        if raw is None:
            continue
        try:
            recipe = normalize_secondary(raw)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping secondary record: %s", e)
            continue
        if recipe is None:
            continue
        if recipe.id in seen:
            logger.debug("Fallback returned %s twice, keeping first", recipe.id)
            continue
        seen.add(recipe.id)
        recipes.append(recipe)

    if not recipes:
        logger.warning("Fallback exhausted: %d requests, no usable recipe", fallback_size)
    else:
        logger.info("Fallback produced %d of %d recipes", len(recipes), fallback_size)
    return recipes

# ----------------- Orchestrierung -----------------

async def _run(primary, secondary, batch_size: int, fallback_size: int) -> List[Recipe]:
    try:
        batch = await fetch_primary_batch(primary, batch_size)
    except ProviderError as e:
        logger.warning("Primary provider failed, switching to fallback: %s", e)
        return await fetch_fallback(secondary, fallback_size)

    recipes = await hydrate_batch(batch, primary)
    if not recipes:
        logger.info("Primary batch empty, switching to fallback")
        return await fetch_fallback(secondary, fallback_size)
    return recipes

async def acquire(
    batch_size: Optional[int] = None,
    fallback_size: Optional[int] = None,
    *,
    primary=None,
    secondary=None,
    settings: Optional[Settings] = None,
) -> List[Recipe]:
    """
    Einziger Einstieg für die Oberfläche. Gibt die geordnete Rezeptliste zurück
    oder eine leere Liste, wirft aber nie.
    `primary`/`secondary` können ersetzt werden (Tests, andere Quellen);
    sonst werden Spoonacular und TheMealDB mit einem gemeinsamen httpx-Client gebaut.
    """
    try:
        settings = settings or load_settings()
        batch_size = settings.batch_size if batch_size is None else batch_size
        fallback_size = settings.fallback_size if fallback_size is None else fallback_size

        if primary is not None and secondary is not None:
            return await _run(primary, secondary, batch_size, fallback_size)

        async with httpx.AsyncClient(timeout=settings.request_timeout) as http:
            if primary is None:
                primary = SpoonacularClient(http, settings.spoonacular_api_key, settings.spoonacular_base_url)
            if secondary is None:
                secondary = MealDBClient(http, settings.mealdb_base_url)
            return await _run(primary, secondary, batch_size, fallback_size)
    except Exception:
        logger.exception("Acquisition failed unexpectedly, returning empty list")
        return []

# ----------------- Konsument -----------------

class RecipeFeed:
    """
    Hält den Zustand einer Ansicht: Liste, loading-Flag und ob sie noch lebt.
    Ergebnisse eines Laufs werden nur übernommen, wenn die Ansicht noch offen
    ist und kein neuerer Lauf gestartet wurde.
    """

    def __init__(self, batch_size: Optional[int] = None, fallback_size: Optional[int] = None, **acquire_kwargs):
        self.batch_size = batch_size
        self.fallback_size = fallback_size
        self.acquire_kwargs = acquire_kwargs
        self.recipes: List[Recipe] = []
        self.loading = False
        self.alive = True
        self._generation = 0

    async def load(self) -> bool:
        self._generation += 1
        run = self._generation
        self.loading = True
        result = await acquire(self.batch_size, self.fallback_size, **self.acquire_kwargs)
        if not self.alive or run != self._generation:
            logger.debug("Discarding stale result of run %s (%d recipes)", run, len(result))
            return False
        self.recipes = result
        self.loading = False
        return True

    def close(self) -> None:
        self.alive = False
