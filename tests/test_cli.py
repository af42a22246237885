#!/usr/bin/env python3
"""
CLI Test Suite

Runs run_sdg_recommender.main() in-process against temporary tables.
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import run_sdg_recommender
from api.data_loader import CompanyTableCache
from run_sdg_recommender import main, parse_goal


TABLE_TEXT = (
    "company_name\tcorp_code\tRisk_Tag\tG07_mentions_per_1k_tokens\tG07_sent_mean\tG07_reference_sentence\n"
    "에코전지\t036460\t공격형\t4\t2\t태양광 설비를 확대했다.\n"
    "그린물산\t005930\t안전형\t3\t1\t\n"
    "블루오션\t000660\t중립형\t1\t0.5\t\n"
)


@pytest.fixture
def table_file(tmp_path):
    path = tmp_path / "companies.tsv"
    path.write_text(TABLE_TEXT, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    """Keep a developer's .env from switching tests to live mode."""
    monkeypatch.setattr(run_sdg_recommender, "load_dotenv", lambda: None)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.delenv("ENRICHMENT_MODE", raising=False)


class TestParseGoal:

    def test_goal_with_importance(self):
        assert parse_goal("7:5") == (7, 5)

    def test_importance_defaults_to_five(self):
        assert parse_goal("13") == (13, 5)

    def test_invalid(self):
        import argparse
        with pytest.raises(argparse.ArgumentTypeError):
            parse_goal("seven")


class TestMain:

    def test_saves_ranking(self, table_file, tmp_path):
        output_dir = tmp_path / "out"
        code = main([
            "--table", str(table_file), "--goal", "7:5", "--risk", "AGGRESSIVE",
            "--top-n", "2", "--output-dir", str(output_dir), "--quiet",
        ])

        assert code == 0
        ranking_files = list(output_dir.glob("ranking_*.json"))
        assert len(ranking_files) == 1

        data = json.loads(ranking_files[0].read_text(encoding="utf-8"))
        companies = data["recommended_companies"]
        assert [c["corp_code"] for c in companies] == ["036460", "005930"]
        assert companies[0]["score"] == pytest.approx(48.0)

    def test_mock_enrichment_saved(self, table_file, tmp_path):
        output_dir = tmp_path / "out"
        code = main([
            "--table", str(table_file), "--goal", "7:5", "--risk", "공격형",
            "--enrich", "--mode", "mock", "--output-dir", str(output_dir), "--quiet",
        ])

        assert code == 0
        rec_files = list(output_dir.glob("recommendations_*.json"))
        assert len(rec_files) == 1

        data = json.loads(rec_files[0].read_text(encoding="utf-8"))
        first = data["recommended_companies"][0]
        assert first["corp_name"] == "에코전지"
        assert first["explanation"]
        assert len(first["sdg_alignment"]) == 17

    def test_print_only_writes_nothing(self, table_file, tmp_path, capsys):
        output_dir = tmp_path / "out"
        code = main([
            "--table", str(table_file), "--goal", "7:5", "--risk", "중립형",
            "--print-only", "--output-dir", str(output_dir),
        ])

        assert code == 0
        assert not output_dir.exists()
        assert "에코전지" in capsys.readouterr().out

    def test_missing_table_reports_load_failure(self, tmp_path, capsys):
        code = main([
            "--table", str(tmp_path / "missing.csv"), "--goal", "7:5", "--risk", "안전형", "--quiet",
        ])

        assert code == 1
        assert "cannot load data" in capsys.readouterr().err

    def test_table_loaded_through_shared_cache(self, table_file, monkeypatch):
        cache = CompanyTableCache()
        monkeypatch.setattr(run_sdg_recommender, "get_table_cache", lambda: cache)

        args = ["--table", str(table_file), "--goal", "7:5", "--risk", "중립형", "--print-only", "--quiet"]
        assert main(args) == 0
        records = cache.get(table_file)
        assert main(args) == 0

        assert cache.cached_tables == 1
        assert cache.get(table_file) is records

    def test_invalid_preference(self, table_file, capsys):
        code = main(["--table", str(table_file), "--goal", "7:9", "--risk", "안전형", "--quiet"])
        assert code == 2

    def test_live_mode_without_key(self, table_file, tmp_path, capsys):
        code = main([
            "--table", str(table_file), "--goal", "7:5", "--risk", "안전형", "--enrich", "--mode", "live",
            "--output-dir", str(tmp_path / "out"), "--quiet",
        ])
        assert code == 2
        assert "OPENROUTER_API_KEY" in capsys.readouterr().err
