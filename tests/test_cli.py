"""Tests for the command line entry point."""

import csv
import json

import pytest

from app.__main__ import load_profiles, main, run_match
from tests.factories import FIXTURES


@pytest.fixture
def files(tmp_path):
    deal_path = tmp_path / "deal.json"
    profiles_path = tmp_path / "profiles.json"
    deal_path.write_text(json.dumps(FIXTURES["deals"][0]))
    profiles_path.write_text(json.dumps(FIXTURES["companyProfiles"]))
    return deal_path, profiles_path


class TestMatchCommand:
    """Tests for `python -m app match`."""

    def test_run_match_from_files(self, files, tmp_path, capsys):
        deal_path, profiles_path = files
        output = tmp_path / "out" / "matches.csv"

        results = run_match(deal_path=deal_path, profiles_path=profiles_path, output_path=output)

        assert [r.id for r in results] == ["p1"]
        with open(output, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0][0] == "Rank"
        assert rows[1][1] == "Savannah Capital"
        assert "MATCHING BUYERS" in capsys.readouterr().out

    def test_main_requires_inputs(self):
        with pytest.raises(SystemExit):
            main(["match"])

    def test_main_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["match", "--deal", str(tmp_path / "none.json"), "--profiles", str(tmp_path / "none.json")])
        assert exc.value.code == 1

    def test_load_profiles_accepts_wrapped_document(self, tmp_path):
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"companyProfiles": FIXTURES["companyProfiles"]}))
        assert len(load_profiles(path)) == 4


class TestDatabaseCommands:
    """Tests for loading fixtures and matching a stored deal."""

    def test_load_then_match_by_id(self, tmp_path, capsys):
        db_url = f"sqlite:///{tmp_path / 'cli.db'}"
        fixtures_path = tmp_path / "fixtures.json"
        fixtures_path.write_text(json.dumps(FIXTURES))

        main(["--db-url", db_url, "load", str(fixtures_path)])
        main(["--db-url", db_url, "match", "--deal-id", "d1"])

        out = capsys.readouterr().out
        assert "Savannah Capital" in out
        assert "Polder Partners" not in out

    def test_unknown_deal_id_exits(self, tmp_path):
        db_url = f"sqlite:///{tmp_path / 'cli.db'}"
        with pytest.raises(SystemExit) as exc:
            main(["--db-url", db_url, "match", "--deal-id", "missing"])
        assert exc.value.code == 1
