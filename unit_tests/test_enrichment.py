import asyncio

from gastro_hero.enrichment import assess_completeness, hydrate_batch, needs_hydration
from gastro_hero.models import Recipe
from gastro_hero.providers import ProviderError

def _recipe(rid, ingredients=("x",), instructions=("y",)):
    return Recipe(id=rid, title=f"R{rid}", ingredients=list(ingredients), instructions=list(instructions))

class _Details:
    """Antwortet pro id; 'fail' liefert ProviderError, Verzögerungen drehen die Ankunftsreihenfolge um."""

    def __init__(self, details, fail=(), delays=None):
        self.details = details
        self.fail = set(fail)
        self.delays = delays or {}
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def recipe_information(self, rid):
        self.calls.append(rid)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(rid, 0))
            if rid in self.fail:
                raise ProviderError("spoonacular", "HTTP 500", status_code=500)
            return self.details.get(rid, {})
        finally:
            self.in_flight -= 1

def test_assess_completeness_reasons():
    assert assess_completeness(_recipe("1"))["is_complete"]
    assert assess_completeness(_recipe("1", ingredients=()))["reason"] == "no ingredients"
    assert assess_completeness(_recipe("1", instructions=()))["reason"] == "no instructions"
    assert needs_hydration(_recipe("1", ingredients=(), instructions=()))

def test_complete_batch_makes_no_calls():
    batch = [_recipe("1"), _recipe("2")]
    primary = _Details({})
    out = asyncio.run(hydrate_batch(batch, primary))
    assert out == batch
    assert primary.calls == []

def test_hydration_matches_by_id_not_arrival_order():
    batch = [_recipe("1", ingredients=()), _recipe("2"), _recipe("3", instructions=())]
    details = {
        "1": {"extendedIngredients": [{"original": "one"}]},
        "3": {"analyzedInstructions": [{"steps": [{"step": "three"}]}]},
    }
    # "1" kommt zuletzt zurück
    primary = _Details(details, delays={"1": 0.05, "3": 0.0})
    out = asyncio.run(hydrate_batch(batch, primary))

    assert [r.id for r in out] == ["1", "2", "3"]
    assert out[0].ingredients == ["one"]
    assert out[1] is batch[1]
    assert out[2].instructions == ["three"]
    assert sorted(primary.calls) == ["1", "3"]
    assert primary.max_in_flight == 2

def test_one_failure_keeps_summary_and_others_hydrate():
    batch = [_recipe(str(i), instructions=()) for i in range(1, 6)]
    details = {str(i): {"analyzedInstructions": [{"steps": [{"step": f"s{i}"}]}]} for i in range(1, 6)}
    primary = _Details(details, fail={"3"})
    out = asyncio.run(hydrate_batch(batch, primary))

    assert [r.id for r in out] == ["1", "2", "3", "4", "5"]
    assert out[2] == batch[2]
    assert out[2].instructions == []
    assert [r.instructions for i, r in enumerate(out) if i != 2] == [["s1"], ["s2"], ["s4"], ["s5"]]
