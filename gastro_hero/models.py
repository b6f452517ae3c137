from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict

Difficulty = Literal["easy", "medium"]


class Recipe(BaseModel):
    """Kanonisches Rezept, egal von welchem Provider. Nach dem Bauen unveränderlich."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    image: Optional[str] = None
    cuisine: str = "world"
    minutes: Optional[int] = None
    difficulty: Difficulty = "easy"
    category: str = "dinner"
    ingredients: List[str] = []
    instructions: List[str] = []
    summary: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.ingredients) and bool(self.instructions)

    def meta_line(self) -> str:
        minutes = self.minutes if self.minutes is not None else "–"
        return f"{minutes} min · {self.difficulty or '–'} · {self.cuisine or 'world'}"
