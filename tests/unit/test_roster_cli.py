"""Tests for roster loading and the analysis command line."""

from __future__ import annotations

import json

import pytest
from conftest import SIX_MEMBER_ROSTER, TWO_SUBGROUP_ROSTER
from pydantic import ValidationError

from reslife.cli import build_parser, main
from reslife.graph import DuplicateMemberError
from reslife.roster import RosterError, graph_from_records, load_roster


@pytest.fixture
def roster_file(tmp_path):
    path = tmp_path / "north-hall.json"
    path.write_text(json.dumps(SIX_MEMBER_ROSTER))
    return path


class TestLoadRoster:
    def test_list_shape_uses_file_stem(self, roster_file):
        graph = load_roster(roster_file)
        assert graph.community_id == "north-hall"
        assert len(graph) == 6

    def test_object_shape(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps({"community_id": "two", "members": TWO_SUBGROUP_ROSTER}))
        graph = load_roster(path)
        assert graph.community_id == "two"
        assert graph.member(3).subgroups == {"floor2", "chess"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(RosterError, match="Cannot read roster"):
            load_roster(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text("[{")
        with pytest.raises(RosterError, match="not valid JSON"):
            load_roster(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps({"community_id": "x"}))
        with pytest.raises(RosterError, match="'members' list"):
            load_roster(path)

    def test_duplicate_ids(self):
        with pytest.raises(DuplicateMemberError):
            graph_from_records([{"id": 1}, {"id": 1}])

    def test_invalid_member(self):
        with pytest.raises(ValidationError):
            graph_from_records([{"id": 1, "last_rating": 9}])


class TestCli:
    def test_parser(self):
        args = build_parser().parse_args(["r.json", "--subgroups", "a", "b", "--min-strength", "1.5"])
        assert args.subgroups == ["a", "b"]
        assert args.min_strength == 1.5
        assert args.debug is False

    def test_full_analysis(self, roster_file, capsys):
        assert main([str(roster_file)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Community analysis: north-hall\n")
        assert "=== GROUP STABILITY ===" in out
        assert "=== CHECK-IN PRIORITY ===" in out

    def test_subgroup_decomposition(self, tmp_path, capsys):
        path = tmp_path / "two.json"
        path.write_text(json.dumps(TWO_SUBGROUP_ROSTER))
        assert main([str(path), "--subgroups", "floor2", "chess"]) == 0
        out = capsys.readouterr().out
        assert "Decomposition over floor2 and chess" in out
        assert "Cohesive: YES" in out

    def test_min_strength_flag(self, roster_file, capsys):
        assert main([str(roster_file), "--min-strength", "10"]) == 0
        assert "Community: 6 members, 0 relationships" in capsys.readouterr().out

    def test_config_file(self, roster_file, tmp_path, capsys):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"graph": {"min_strength": 10.0}}))
        assert main([str(roster_file), "--config", str(config)]) == 0
        assert "0 relationships" in capsys.readouterr().out

    def test_missing_roster(self, tmp_path, capsys):
        assert main([str(tmp_path / "absent.json")]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ERROR: Cannot read roster" in captured.err

    def test_invalid_config(self, roster_file, capsys):
        assert main([str(roster_file), "--min-strength", "-1"]) == 1
        assert "ERROR:" in capsys.readouterr().err

    def test_invalid_member(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"id": 1, "last_rating": 9}]))
        assert main([str(path)]) == 1
        assert "ERROR:" in capsys.readouterr().err
