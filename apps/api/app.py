# app.py
# ------------------------------------------------------------
# FastAPI-Wrapper für die Rezept-Pipeline
# Endpoints:
#   GET  /health
#   GET  /recipes?batch_size=&fallback_size=
#   POST /saved        { Recipe }
#   GET  /saved
#   GET  /saved/{id}
# Optional: CORS für lokale UIs (Streamlit etc.)
# ------------------------------------------------------------

from __future__ import annotations
import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import List, Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

# Eigene Module
from gastro_hero.config import load_settings
from gastro_hero.models import Recipe
from gastro_hero.pipeline import acquire
from gastro_hero.storage import JsonFileStore, SavedRecipeIndex

settings = load_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s"
)
logger = logging.getLogger("gastro-hero.api")

_index: Optional[SavedRecipeIndex] = None
_index_lock = asyncio.Lock()

async def get_index() -> SavedRecipeIndex:
    """Index wird genau einmal gebaut und geladen, auch bei gleichzeitigen Requests."""
    global _index
    if _index is None:
        async with _index_lock:
            if _index is None:
                idx = SavedRecipeIndex(JsonFileStore(settings.store_path))
                await idx.load()
                _index = idx
    return _index

@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Index beim Start laden
    await get_index()
    yield

# ---------------- FastAPI Setup ----------------

app = FastAPI(
    title="Gastro Hero API",
    version="0.1.0",
    description="Zufällige Rezepte von Spoonacular (mit TheMealDB als Fallback) und Offline-Speicher.",
    lifespan=lifespan,
)

# CORS (optional: für lokale UIs)
origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8501").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in origins if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------- Schemas ----------------

class RecipeList(BaseModel):
    items: List[Recipe]

class SavedResponse(BaseModel):
    saved: bool
    ids: List[str]

class SavedIds(BaseModel):
    ids: List[str]

# ---------------- Routes ----------------

@app.get("/health")
def health():
    return {"status": "ok", "spoonacular_configured": bool(settings.spoonacular_api_key)}

@app.get("/recipes", response_model=RecipeList)
async def recipes(
    batch_size: int = Query(settings.batch_size, ge=1, le=100),
    fallback_size: int = Query(settings.fallback_size, ge=0, le=50),
):
    start = time.time()
    items = await acquire(batch_size, fallback_size, settings=settings)
    logger.info({"route": "recipes", "latency_ms": int((time.time() - start) * 1000),
                 "batch_size": batch_size, "result_count": len(items)})
    return RecipeList(items=items)

@app.post("/saved", response_model=SavedResponse)
async def save_offline(recipe: Recipe):
    idx = await get_index()
    ok = await idx.save_offline(recipe)
    return SavedResponse(saved=ok, ids=idx.sorted_ids())

@app.get("/saved", response_model=SavedIds)
async def saved_ids():
    idx = await get_index()
    return SavedIds(ids=idx.sorted_ids())

@app.get("/saved/{recipe_id}", response_model=Recipe)
async def saved_recipe(recipe_id: str):
    idx = await get_index()
    if not idx.is_saved(recipe_id):
        raise HTTPException(status_code=404, detail="recipe not saved")
    snap = await idx.get_snapshot(recipe_id)
    if snap is None:
        raise HTTPException(status_code=404, detail="snapshot missing")
    return snap

@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")
