from pathlib import Path
import sys

import streamlit as st

REPO_ROOT = Path(__file__).resolve().parent
SRC_DIR = REPO_ROOT / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mysterymap.app.display import (
    available_types,
    available_vibes,
    map_link,
    result_count_label,
    subtitle,
    top_tags,
)
from mysterymap.app.preferences import FilterState
from mysterymap.app.query_state import encode_params, hydrate
from mysterymap.app.waitlist import InvalidInput, WaitlistUnavailable, dismiss, join, visible
from mysterymap.config import settings
from mysterymap.config.scoring_constants import BUDGET_MAX, BUDGET_MIN, WAITLIST_BAR_SNOOZE_DAYS
from mysterymap.ingestion.orchestrator import Catalog, build_catalog
from mysterymap.processing.images import image_candidates
from mysterymap.recommend.engine import get_recommendations
from mysterymap.storage.repository import is_saved, open_store, save_venue

st.set_page_config(page_title="MysteryMap", page_icon="🗺️", layout="wide")


if "filters" not in st.session_state:
    # The URL is read exactly once; later edits to it are not observed.
    hydrated = hydrate(st.query_params.to_dict())
    st.session_state["filters"] = hydrated
    st.session_state["w_vibes"] = sorted(hydrated.selected_vibes)
    st.session_state["w_types"] = sorted(hydrated.selected_types)
    st.session_state["w_budget"] = int(min(max(hydrated.budget_ceiling, BUDGET_MIN), BUDGET_MAX))
if "store" not in st.session_state:
    # Session-only unless MYSTERYMAP_PAGE_STORE names a file.
    st.session_state["store"] = open_store(settings.PAGE_STORE_FILE)
if "catalog" not in st.session_state:
    # One read per session, no retry on failure.
    with st.spinner("Loading venues..."):
        st.session_state["catalog"] = build_catalog()

state: FilterState = st.session_state["filters"]
store = st.session_state["store"]
catalog: Catalog = st.session_state["catalog"]

# --- waitlist bar ---
if visible(store):
    with st.container(border=True):
        bar_left, bar_mid, bar_right = st.columns([3, 3, 1])
        bar_left.markdown("**Get early access** · join the MysteryMap waitlist.")
        email = bar_mid.text_input("Email", placeholder="you@email.com", label_visibility="collapsed")
        if bar_right.button("Join"):
            try:
                result = join(store, email)
                if result.delivered:
                    st.success("Thanks, you're on the list!")
                else:
                    st.info("Online signup isn't open yet. Send us your email and we'll add you.")
                    st.link_button("✉️ Email us", result.mailto)
            except (InvalidInput, WaitlistUnavailable) as exc:
                st.error(str(exc))
        if bar_right.button("not now"):
            dismiss(store, WAITLIST_BAR_SNOOZE_DAYS)
            st.rerun()

st.title("Hidden Gems Near You")
if not catalog.available:
    st.warning(catalog.error)

left_col, right_col = st.columns([1, 2])

with left_col:
    st.subheader("Your vibe")
    vibe_options = sorted(set(available_vibes(catalog.venues)) | state.selected_vibes)
    state.set_vibes(st.multiselect("Vibes", vibe_options, key="w_vibes"))

    state.set_budget(st.slider(
        "Budget (max per person, $)",
        min_value=BUDGET_MIN,
        max_value=BUDGET_MAX,
        key="w_budget",
    ))

    type_options = list(dict.fromkeys(available_types(catalog.venues) + sorted(state.selected_types)))
    state.set_types(st.multiselect("Type", type_options, key="w_types"))

    if st.button("✨ Show my hidden gems", type="primary"):
        state.submit()

results = get_recommendations(catalog.venues, state)

# Replace the query in place: no new history entry, no scroll reset.
st.query_params.from_dict(encode_params(state))

with right_col:
    st.caption(result_count_label(results, state.submitted))
    if not state.submitted:
        st.info("Pick a few vibes and tap “Show my hidden gems”.")
    elif not results and catalog.available:
        st.info("No matches yet. Try another vibe or a higher budget.")

    cards = st.columns(2)
    for i, item in enumerate(results):
        venue = item.venue
        with cards[i % 2].container(border=True):
            # Streamlit cannot observe load errors, so the first candidate is shown.
            st.image(image_candidates(venue.image_url)[0], use_container_width=True)
            st.markdown(f"**{venue.name}** · Score {item.score:.2f}")
            if subtitle(venue):
                st.caption(subtitle(venue))
            if venue.address:
                st.caption(venue.address)
            tags = top_tags(venue)
            if tags:
                st.markdown(" ".join(f"`{t}`" for t in tags))
            link_col, save_col = st.columns(2)
            link_col.link_button("📍 Map", map_link(venue))
            saved = is_saved(store, venue.key)
            if save_col.button("Saved" if saved else "Save", key=f"save-{venue.key}", disabled=saved):
                save_venue(store, venue.key)
                st.rerun()

# Local: pip install -e . then streamlit run streamlit_app.py
