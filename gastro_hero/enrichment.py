# enrichment.py
# -------------------------------------------
# Hydrierung für unvollständige Rezepte (Stufe 3 der Pipeline).
# - Heuristik: completeness check (Zutaten UND Schritte vorhanden?)
# - Lookup: Spoonacular /recipes/{id}/information, alle parallel
# - Merge ohne Original zu überschreiben, Reihenfolge bleibt
# -------------------------------------------

from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, List

from gastro_hero.models import Recipe
from gastro_hero.normalize import normalize_primary_detail

logger = logging.getLogger("gastro-hero.enrichment")

# ----------------- Completeness Heuristik -----------------

def assess_completeness(recipe: Recipe) -> Dict[str, Any]:
    if not recipe.ingredients and not recipe.instructions:
        return {"is_complete": False, "reason": "no ingredients, no instructions"}
    if not recipe.ingredients:
        return {"is_complete": False, "reason": "no ingredients"}
    if not recipe.instructions:
        return {"is_complete": False, "reason": "no instructions"}
    return {"is_complete": True, "reason": "ok"}

def needs_hydration(recipe: Recipe) -> bool:
    return not recipe.is_complete

# ----------------- Hydrierung -----------------

async def _hydrate_one(primary, recipe: Recipe) -> Recipe:
    detail = await primary.recipe_information(recipe.id)
    return normalize_primary_detail(detail, recipe)

async def hydrate_batch(batch: List[Recipe], primary) -> List[Recipe]:
    """
    Holt Details für alle unvollständigen Rezepte gleichzeitig und merged sie
    per id zurück. Schlägt ein Detail-Call fehl, bleibt das Rezept wie es war.
    Die Reihenfolge von `batch` wird nie verändert.
    """
    pending: List[Recipe] = []
    for r in batch:
        if needs_hydration(r):
            logger.debug("Needs hydration: %s (%s)", r.id, assess_completeness(r)["reason"])
            pending.append(r)

    if not pending:
        return list(batch)

    logger.info("Hydrating %d of %d recipes", len(pending), len(batch))
    results = await asyncio.gather(
        *(_hydrate_one(primary, r) for r in pending),
        return_exceptions=True,
    )

    hydrated: Dict[str, Recipe] = {}
    for original, result in zip(pending, results):
        if isinstance(result, Recipe):
            hydrated[original.id] = result
        elif isinstance(result, Exception):
            logger.warning("Hydration skipped for %s: %s", original.id, result)
        else:
            # BaseException (z. B. CancelledError) nicht schlucken
            raise result

    return [hydrated.get(r.id, r) for r in batch]
