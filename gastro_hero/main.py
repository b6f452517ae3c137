# main.py
# ------------------------------------------------------------
# CLI-Browser für die Rezept-Pipeline.
# Flow:
#   - Rezepte beschaffen (Spoonacular -> Hydrierung -> TheMealDB)
#   - Liste ausgeben
#   - interaktiv: Nummer = Rezept öffnen, 'save <n>' = offline speichern
#
# Aufrufbeispiele:
#   py -m gastro_hero.main
#   py -m gastro_hero.main 20 10
#   py -m gastro_hero.main --once 5
# ------------------------------------------------------------

from __future__ import annotations
import asyncio
import logging
import re
import sys
from typing import List, Optional

from gastro_hero.config import Settings, load_settings
from gastro_hero.models import Recipe
from gastro_hero.pipeline import RecipeFeed
from gastro_hero.storage import JsonFileStore, SavedRecipeIndex

logger = logging.getLogger("gastro-hero")

SAVE_RX = re.compile(r"^save\s+(\d+)$", re.IGNORECASE)

def setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s"
    )

def pretty(recipes: List[Recipe], saved: Optional[SavedRecipeIndex] = None):
    if not recipes:
        print("Keine Rezepte gefunden.")
        return
    for i, r in enumerate(recipes, 1):
        mark = "  [offline]" if saved and saved.is_saved(r.id) else ""
        print(f"{i}. {r.title or '(ohne Titel)'}{mark}")
        print(f"   {r.meta_line()} · {r.category}")

def show_recipe(r: Recipe):
    print(f"\n{r.title}")
    print(f"{r.meta_line()} · {r.category}")
    if r.ingredients:
        print("\nZutaten:")
        for ing in r.ingredients:
            print("  -", ing)
    if r.instructions:
        print("\nSchritte:")
        for k, step in enumerate(r.instructions, 1):
            print(f"  {k}. {step}")
    print()

def _parse_sizes(args: List[str], settings: Settings):
    nums = [int(a) for a in args if a.isdigit()]
    batch = nums[0] if len(nums) > 0 else settings.batch_size
    fallback = nums[1] if len(nums) > 1 else settings.fallback_size
    return batch, fallback

async def _browse(args: List[str], interactive: bool):
    settings = load_settings()
    setup_logging(settings)
    batch, fallback = _parse_sizes(args, settings)

    saved = SavedRecipeIndex(JsonFileStore(settings.store_path))
    await saved.load()

    feed = RecipeFeed(batch, fallback, settings=settings)
    print("Lade Rezepte…")
    await feed.load()
    logger.info("Loaded %d recipes (%d saved offline)", len(feed.recipes), len(saved.ids))
    pretty(feed.recipes, saved)

    if not interactive:
        feed.close()
        return

    print("\nNummer = Rezept öffnen, 'save <n>' = offline speichern, 'exit' = Ende.")
    while True:
        try:
            msg = (await asyncio.to_thread(input, "> ")).strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not msg or msg.lower() in ("exit", "quit"):
            break
        m = SAVE_RX.match(msg)
        idx = int(m.group(1)) if m else (int(msg) if msg.isdigit() else None)
        if idx is None or not (1 <= idx <= len(feed.recipes)):
            print("Unbekannte Eingabe.")
            continue
        recipe = feed.recipes[idx - 1]
        if m:
            ok = await saved.save_offline(recipe)
            print("Gespeichert." if ok else "Speichern fehlgeschlagen.")
        else:
            show_recipe(recipe)
    feed.close()

if __name__ == "__main__":
    argv = sys.argv[1:]
    once = "--once" in argv
    asyncio.run(_browse([a for a in argv if a != "--once"], interactive=not once))
