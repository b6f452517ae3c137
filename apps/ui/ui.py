# apps/ui/ui.py
import html
import os
import requests
import streamlit as st

# --- Config & Secrets (safe) ---
try:
    _secrets = dict(st.secrets)
except Exception:
    _secrets = {}

API_BASE = os.getenv("API_BASE") or _secrets.get("API_BASE") or "http://127.0.0.1:8000"

# --- Page setup ---
st.set_page_config(page_title="Gastro Hero-AI", layout="wide")

# --- Minimal CSS, dark cards ---
st.markdown("""
<style>
.block-container { padding-top: 1.2rem; padding-bottom: 2rem; }
h1 { letter-spacing: 0.2px; }
.subtitle {
  color: #9AA5B1; margin-top: -0.4rem; margin-bottom: 1.2rem;
  font-size: 0.98rem;
}
.card {
  background: #0D0F12;
  border: 1px solid #243141;
  border-radius: 14px;
  padding: 16px;
  margin-bottom: 12px;
}
.card h4 { margin: 0 0 6px 0; color: #F8FAFC; }
.card .meta { color: #9AA5B1; font-size: 0.85rem; margin-bottom: 8px; }
.card .saved { color: #5AB4B4; font-size: 0.8rem; }
hr.divider { border: none; border-top: 1px solid #243141; margin: 16px 0; }
footer { color: #808697; font-size: 0.85rem; margin-top: 8px; }
</style>
""", unsafe_allow_html=True)

# --- Header ---
st.title("Gastro Hero-AI")
st.markdown('<div class="subtitle">Random recipes from Spoonacular, with TheMealDB as backup. Save the ones you like for offline use.</div>', unsafe_allow_html=True)

# --- Sidebar: settings & diagnostics ---
with st.sidebar:
    st.header("Settings")
    batch_size = st.slider("Recipes per batch", 1, 50, 20)
    fallback_size = st.slider("Fallback recipes", 0, 20, 10)
    st.caption(f"API_BASE = {API_BASE}")
    if st.button("Test /health"):
        try:
            r = requests.get(f"{API_BASE}/health", timeout=10)
            st.success(f"/health → {r.status_code}: {r.text[:180]}")
        except Exception as e:
            st.error(f"Cannot reach API: {e}")

# --- HTTP helpers ---
def call_recipes(batch_size: int, fallback_size: int):
    url = f"{API_BASE}/recipes"
    params = {"batch_size": batch_size, "fallback_size": fallback_size}
    return requests.get(url, params=params, timeout=60).json()

def call_save(recipe: dict):
    return requests.post(f"{API_BASE}/saved", json=recipe, timeout=15).json()

def call_saved_ids():
    return requests.get(f"{API_BASE}/saved", timeout=15).json()

def meta_line(r: dict) -> str:
    minutes = r.get("minutes")
    minutes = minutes if minutes is not None else "–"
    return f"{minutes} min · {r.get('difficulty') or '–'} · {r.get('cuisine') or 'world'}"

def ingredient_preview(r: dict) -> str:
    ings = r.get("ingredients") or []
    if not ings:
        return ""
    return ", ".join(ings[:3]) + ("…" if len(ings) > 3 else "")

# --- State ---
if "recipes" not in st.session_state:
    st.session_state.recipes = None
if "saved_ids" not in st.session_state:
    try:
        st.session_state.saved_ids = set(call_saved_ids().get("ids", []))
    except Exception:
        st.session_state.saved_ids = set()

# --- Action ---
if st.button("Load recipes") or st.session_state.recipes is None:
    with st.spinner("Loading recipes…"):
        try:
            st.session_state.recipes = call_recipes(batch_size, fallback_size).get("items", [])
        except Exception as e:
            st.error(f"API error: {e}")
            st.session_state.recipes = []

results = st.session_state.recipes or []
if not results:
    st.info("No recipes right now.")
else:
    columns = st.columns(2)
    for i, r in enumerate(results):
        with columns[i % 2]:
            st.markdown('<div class="card">', unsafe_allow_html=True)
            if r.get("image"):
                st.image(r["image"], width="stretch")
            st.markdown(f"<h4>{html.escape(r.get('title') or '')}</h4>", unsafe_allow_html=True)
            st.markdown(f'<div class="meta">{meta_line(r)} · {html.escape(r.get("category") or "dinner")}</div>', unsafe_allow_html=True)
            preview = ingredient_preview(r)
            if preview:
                st.markdown(f'<div class="meta">{html.escape(preview)}</div>', unsafe_allow_html=True)

            with st.expander("Open recipe"):
                if r.get("ingredients"):
                    st.markdown("**Ingredients:**")
                    st.markdown("\n".join(f"- {z}" for z in r["ingredients"]))
                if r.get("instructions"):
                    st.markdown("**Instructions:**")
                    st.markdown("\n".join(f"{k+1}. {s}" for k, s in enumerate(r["instructions"])))

            if r.get("id") in st.session_state.saved_ids:
                st.markdown('<div class="saved">Saved</div>', unsafe_allow_html=True)
            elif st.button("Save offline", key=f"save-{r.get('id')}"):
                try:
                    data = call_save(r)
                except Exception as e:
                    st.error(f"API error: {e}")
                    data = {}
                if data.get("saved"):
                    st.session_state.saved_ids = set(data.get("ids", []))
                    st.rerun()
                elif data:
                    st.warning("Could not save recipe.")

            st.markdown('</div>', unsafe_allow_html=True)

# --- Footer ---
st.markdown('<hr class="divider" />', unsafe_allow_html=True)
st.markdown('<footer>Tip: set SPOONACULAR_API_KEY in the backend .env, otherwise every batch comes from TheMealDB.</footer>', unsafe_allow_html=True)
