"""Shared fixtures for the mysterymap test suite."""

import sys
from pathlib import Path

import pytest

# Ensure src/ is on the path so "import mysterymap" works when running from repo root.
repo_root = Path(__file__).resolve().parents[1]
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from mysterymap.app.preferences import FilterState
from mysterymap.processing.normalize import Venue


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sheet_csv():
    """Published-sheet CSV: quoted cells, a nameless row, CRLF endings."""
    return (
        "name,type,city,price_avg,vibes,address,image,mapUrl\r\n"
        'Moss & Ember,Cafe,Brooklyn,$14,"cozy, quiet|hidden","212 Wythe Ave, Brooklyn",www.example.com/moss.jpg,\r\n'
        "Neon Tide,Bar,Brooklyn,28,vibrant/late-night,,,\r\n"
        'Paper Lantern,Restaurant,Queens,22.50,romantic,"31-10 Broadway\nAstoria",,https://maps.example/pl\r\n'
        ",Cafe,Nowhere,10,cozy,,,\r\n"
        "\r\n"
    )


@pytest.fixture
def sample_venues():
    """Small working set with a spread of vibes, types and prices."""
    return [
        Venue(name="Moss & Ember", type="Cafe", city="Brooklyn", price_avg=14.0,
              vibes=frozenset({"cozy", "quiet", "hidden"}), address="212 Wythe Ave"),
        Venue(name="Neon Tide", type="Bar", city="Brooklyn", price_avg=28.0,
              vibes=frozenset({"vibrant", "late-night"})),
        Venue(name="Paper Lantern", type="Restaurant", city="Queens", price_avg=22.0,
              vibes=frozenset({"romantic", "cozy"})),
        Venue(name="Quiet Pages", type="Cafe", city="Manhattan", price_avg=None,
              vibes=frozenset({"quiet", "indie"})),
        Venue(name="Rooftop 9", type="Bar", city="Manhattan", price_avg=35.0,
              vibes=frozenset({"views"})),
    ]


@pytest.fixture
def base_state():
    """Submitted filter state: cozy + quiet, any type, $30 ceiling."""
    return FilterState(
        selected_vibes={"cozy", "quiet"},
        selected_types=set(),
        budget_ceiling=30,
        submitted=True,
    )
