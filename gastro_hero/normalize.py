# normalize.py
# ------------------------------------------------------------
# Provider-Schemas -> kanonisches Recipe.
# - Spoonacular: "random" (Übersicht) und "information" (Details)
# - TheMealDB: flache strIngredientN/strMeasureN Felder
# Ein Datensatz wird entweder vollständig gemappt oder verworfen (None).
# ------------------------------------------------------------

from __future__ import annotations
import logging
import re
from typing import Any, Dict, List, Optional

from gastro_hero.models import Recipe

logger = logging.getLogger("gastro-hero.normalize")

MEALDB_MAX_INGREDIENTS = 20
_LINE_BREAK_RX = re.compile(r"\r?\n")

# ----------------- Hilfsfunktionen -----------------

def _first_str(values: Any) -> Optional[str]:
    if isinstance(values, list) and values:
        first = values[0]
        if isinstance(first, str) and first.strip():
            return first
    return None

def _as_minutes(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None

def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None

def _ingredient_lines(extended: Any) -> List[str]:
    """extendedIngredients -> Liste der 'original'-Strings (z. B. '2 cups flour')."""
    if not isinstance(extended, list):
        return []
    out: List[str] = []
    for item in extended:
        if isinstance(item, dict) and isinstance(item.get("original"), str) and item["original"].strip():
            out.append(item["original"].strip())
    return out

def _first_group_steps(analyzed: Any) -> List[str]:
    """Nur die erste Anleitungsgruppe zählt."""
    if not isinstance(analyzed, list) or not analyzed or not isinstance(analyzed[0], dict):
        return []
    raw_steps = analyzed[0].get("steps")
    if not isinstance(raw_steps, list):
        return []
    steps: List[str] = []
    for s in raw_steps:
        if isinstance(s, dict) and isinstance(s.get("step"), str) and s["step"].strip():
            steps.append(s["step"].strip())
    return steps

def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list)) and not value:
        return False
    return True

# ----------------- Spoonacular -----------------

def normalize_primary_summary(raw: Dict[str, Any], position: int) -> Optional[Recipe]:
    """
    Mappt einen Eintrag aus /recipes/random.
    `position` ist der 0-basierte Index im Batch; fehlt die Provider-ID,
    wird position + 1 als ID verwendet.
    """
    if not isinstance(raw, dict):
        logger.warning("Skipping primary record at %s: not an object", position)
        return None
    title = _as_text(raw.get("title"))
    if title is None:
        logger.warning("Skipping primary record at %s: no title", position)
        return None

    native_id = raw.get("id")
    rid = str(native_id) if native_id else str(position + 1)
    instructions = _first_group_steps(raw.get("analyzedInstructions"))

    return Recipe(
        id=rid,
        title=title.strip(),
        image=_as_text(raw.get("image")) or None,
        cuisine=_first_str(raw.get("cuisines")) or "world",
        minutes=_as_minutes(raw.get("readyInMinutes")),
        difficulty="medium" if instructions else "easy",
        category=_first_str(raw.get("dishTypes")) or "dinner",
        ingredients=_ingredient_lines(raw.get("extendedIngredients")),
        instructions=instructions,
        summary=_as_text(raw.get("summary")) or "",
    )

def normalize_primary_detail(raw: Optional[Dict[str, Any]], existing: Recipe) -> Recipe:
    """
    Non-destructive Merge: ein Feld aus /recipes/{id}/information gewinnt nur,
    wenn es vorhanden ist. Sonst bleibt der Wert aus der Übersicht.
    id und difficulty kommen nie aus der Detail-Antwort.
    """
    if not isinstance(raw, dict):
        return existing

    candidates = {
        "title": (_as_text(raw.get("title")) or "").strip(),
        "image": _as_text(raw.get("image")),
        "cuisine": _first_str(raw.get("cuisines")),
        "minutes": _as_minutes(raw.get("readyInMinutes")),
        "category": _first_str(raw.get("dishTypes")),
        "ingredients": _ingredient_lines(raw.get("extendedIngredients")),
        "instructions": _first_group_steps(raw.get("analyzedInstructions")),
        "summary": _as_text(raw.get("summary")),
    }
    update = {k: v for k, v in candidates.items() if _present(v)}
    if not update:
        return existing
    return existing.model_copy(update=update)

# ----------------- TheMealDB -----------------

def _mealdb_ingredients(meal: Dict[str, Any]) -> List[str]:
    ingredients: List[str] = []
    for i in range(1, MEALDB_MAX_INGREDIENTS + 1):
        name = meal.get(f"strIngredient{i}")
        if not isinstance(name, str) or not name.strip():
            continue
        measure = meal.get(f"strMeasure{i}")
        if isinstance(measure, str) and measure.strip():
            ingredients.append(f"{measure.strip()} {name.strip()}")
        else:
            ingredients.append(name.strip())
    return ingredients

def _split_lines(text: Any) -> List[str]:
    if not isinstance(text, str):
        return []
    return [ln.strip() for ln in _LINE_BREAK_RX.split(text) if ln.strip()]

def normalize_secondary(raw: Dict[str, Any]) -> Optional[Recipe]:
    """Mappt einen TheMealDB-Eintrag aus /random.php."""
    if not isinstance(raw, dict):
        return None
    meal_id = raw.get("idMeal")
    title = _as_text(raw.get("strMeal"))
    if not meal_id or title is None:
        logger.warning("Skipping secondary record: idMeal/strMeal missing")
        return None

    return Recipe(
        id=str(meal_id),
        title=title.strip(),
        image=_as_text(raw.get("strMealThumb")) or None,
        cuisine=_as_text(raw.get("strArea")) or "world",
        minutes=None,
        difficulty="easy",
        category=_as_text(raw.get("strCategory")) or "dinner",
        ingredients=_mealdb_ingredients(raw),
        instructions=_split_lines(raw.get("strInstructions")),
        summary="",
    )
