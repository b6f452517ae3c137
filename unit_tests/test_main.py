from gastro_hero import main
from gastro_hero.config import Settings
from gastro_hero.models import Recipe

def test_parse_sizes_defaults_and_overrides():
    s = Settings(batch_size=20, fallback_size=10)
    assert main._parse_sizes([], s) == (20, 10)
    assert main._parse_sizes(["5"], s) == (5, 10)
    assert main._parse_sizes(["5", "3"], s) == (5, 3)

def test_pretty_prints_meta_line(capsys):
    recipes = [
        Recipe(id="1", title="Soup", minutes=25, difficulty="medium", cuisine="French", category="starter"),
        Recipe(id="2", title=""),
    ]
    main.pretty(recipes)
    out = capsys.readouterr().out
    assert "1. Soup" in out
    assert "25 min · medium · French · starter" in out
    assert "2. (ohne Titel)" in out
    assert "– min · easy · world · dinner" in out

def test_pretty_empty(capsys):
    main.pretty([])
    assert "Keine Rezepte" in capsys.readouterr().out
