"""Unit tests for mysterymap.app.cli — recommend and browse commands."""

import json

import pytest

from mysterymap.app.cli import build_parser, main, run_browse, state_from_args
from mysterymap.app.preferences import FilterState
from mysterymap.app.query_state import Location
from mysterymap.ingestion.orchestrator import DEGRADED_MESSAGE, Catalog
from mysterymap.storage.repository import MemoryStore, saved_ids


def _feed(tmp_path, rows):
    path = tmp_path / "venues.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return str(path)


def _scripted(lines):
    it = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    return fake_input


# ============================================================================
# Argument handling
# ============================================================================
class TestStateFromArgs:
    def test_query_then_overrides(self):
        args = build_parser().parse_args([
            "--query", "https://mysterymap.app/?v=retro&b=40",
            "--types", "Cafe|Wine Bar",
            "--budget", "60",
        ])
        state = state_from_args(args)
        assert state.selected_vibes == {"retro"}
        assert state.selected_types == {"Cafe", "Wine Bar"}
        assert state.budget_ceiling == 60

    def test_vibes_flag_replaces_query_vibes(self):
        args = build_parser().parse_args(["--query", "v=retro", "--vibes", "Cozy,quiet"])
        assert state_from_args(args).selected_vibes == {"cozy", "quiet"}

    def test_default_command(self):
        assert build_parser().parse_args([]).command == "recommend"


# ============================================================================
# main
# ============================================================================
class TestMain:
    def test_json_output(self, tmp_path, capsys):
        source = _feed(tmp_path, [
            {"name": "Moss & Ember", "type": "Cafe", "price_avg": 14, "vibes": "cozy|quiet"},
            {"name": "Neon Tide", "type": "Bar", "price_avg": 28, "vibes": "vibrant"},
        ])
        code = main([
            "recommend", "--source", source, "--vibes", "cozy,quiet", "--budget", "30",
            "--json", "--store", str(tmp_path / "store.json"),
        ])
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert [r["name"] for r in out] == ["Moss & Ember"]
        assert out[0]["score"] == 0.88
        assert out[0]["saved"] is False

    def test_text_output_has_share_link(self, tmp_path, capsys):
        source = _feed(tmp_path, [{"name": "Moss", "type": "Cafe", "vibes": "cozy"}])
        code = main(["--source", source, "--query", "v=cozy", "--store", str(tmp_path / "s.json")])
        assert code == 0
        out = capsys.readouterr().out
        assert "1 pick" in out
        assert "1. Moss  (score 0.58)" in out
        assert "Share: ?v=cozy&go=1" in out

    def test_no_matches_message(self, tmp_path, capsys):
        source = _feed(tmp_path, [{"name": "Moss", "type": "Cafe", "price_avg": 90}])
        main(["--source", source, "--types", "Bar", "--budget", "10", "--store", str(tmp_path / "s.json")])
        assert "No matches" in capsys.readouterr().out

    def test_unavailable_source(self, tmp_path, capsys):
        code = main(["--source", str(tmp_path / "missing.json"), "--store", str(tmp_path / "s.json")])
        assert code == 1
        assert DEGRADED_MESSAGE in capsys.readouterr().err


# ============================================================================
# run_browse
# ============================================================================
class TestRunBrowse:
    @pytest.fixture
    def catalog(self, sample_venues):
        return Catalog(venues=sample_venues, source="test")

    def test_session(self, catalog):
        store = MemoryStore()
        location = Location()
        output = []
        state = run_browse(
            catalog,
            FilterState(),
            store,
            location,
            input_fn=_scripted(["+cozy", "+quiet", "budget 30", "go", "save 1", "save 1", "share", "quit"]),
            output=output.append,
        )
        assert state.submitted
        assert state.selected_vibes == {"cozy", "quiet"}
        assert location.query == "v=cozy,quiet&b=30&go=1"
        assert "/?v=cozy,quiet&b=30&go=1" in output
        assert "Saved." in output
        assert "Already saved." in output
        assert saved_ids(store) == ["Moss & Ember"]
        assert "3 picks:" in output

    def test_eof_flushes_pending_write(self, catalog):
        location = Location()
        run_browse(
            catalog,
            FilterState(),
            MemoryStore(),
            location,
            input_fn=_scripted(["type Cafe"]),
            output=lambda _: None,
        )
        assert location.query == "t=Cafe"

    def test_bad_input(self, catalog):
        output = []
        run_browse(
            catalog,
            FilterState(),
            MemoryStore(),
            Location(),
            input_fn=_scripted(["budget lots", "save 9", "dance", "-cozy", "help"]),
            output=output.append,
        )
        assert "Budget must be a number." in output
        assert "No such result." in output
        assert "Unknown command. Type 'help'." in output

    @pytest.mark.parametrize("value", ["inf", "-inf", "nan"])
    def test_non_finite_budget_keeps_session_alive(self, catalog, value):
        output = []
        state = run_browse(
            catalog,
            FilterState(),
            MemoryStore(),
            Location(),
            input_fn=_scripted([f"budget {value}", "budget 40", "quit"]),
            output=output.append,
        )
        assert "Budget must be a number." in output
        assert state.budget_ceiling == 40
