#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
End-to-end tests for the Duplicate Finder CLI commands.
"""

import json
import os

import pytest

from dupe_finder.config import ScanConfig, RetentionPolicy, ClusteringMode
from dupe_finder.main import run, build_config, create_parser


class TestCLIFixture:
    """Runs the CLI against the image_dir fixture with a private database."""

    @pytest.fixture
    def cli(self, tmp_path, image_dir, mocker):
        mocker.patch("dupe_finder.main.enable_json_logging")
        os.utime(image_dir / "a.png", (2_000, 2_000))
        os.utime(image_dir / "sub" / "b.png", (1_000, 1_000))
        db = tmp_path / "state.db"

        def invoke(command, *args, source=True, as_json=False):
            argv = ["--db", str(db)]
            if as_json:
                argv.append("--json")
            argv.append(command)
            if source:
                argv += ["--source", str(image_dir)]
            return run(argv + list(args))
        return invoke

    @staticmethod
    def envelope(capsys):
        lines = capsys.readouterr().out.strip().splitlines()
        return json.loads(lines[-1])


class TestScanCommand(TestCLIFixture):

    def test_scan_reports_exact_pair(self, cli, capsys):
        assert cli("scan", "--no-progress") == 0
        out = capsys.readouterr().out

        assert "DUPLICATE SCAN" in out
        assert "[exact] group 1: 2 items" in out
        assert "keep a.png" in out
        assert "dup  sub/b.png" in out

    def test_second_scan_finds_nothing_new(self, cli, capsys):
        cli("scan", "--no-progress")
        capsys.readouterr()

        assert cli("scan", "--no-progress") == 0
        assert "Changed items: 0" in capsys.readouterr().out

    def test_zero_batch_size_is_an_error(self, cli, capsys):
        assert cli("scan", "--full", "--batch-size", "0", "--no-progress") == 1
        assert "Batch size must be greater than 0" in capsys.readouterr().out

    def test_batch_limit_leaves_remaining_items(self, cli, capsys):
        assert cli("scan", "--full", "--batch-size", "1", "--batches", "2", "--no-similar",
                   as_json=True) == 0
        data = self.envelope(capsys)["data"]

        assert len(data["batches"]) == 2
        assert data["state"] == "batch_suspended"
        assert data["remaining"] == 1

    def test_missing_source(self, tmp_path, capsys):
        code = run(["--db", str(tmp_path / "x.db"), "scan", "--source", str(tmp_path / "nowhere")])
        assert code == 2
        assert "Source directory not found" in capsys.readouterr().err


class TestResultsWorkflow(TestCLIFixture):

    def test_results_before_scan(self, cli, capsys):
        assert cli("results") == 0
        assert "No valid cached results" in capsys.readouterr().out

    def test_scan_results_delete_reset(self, cli, image_dir, capsys):
        assert cli("scan", "--full", "--batch-size", "5", as_json=True) == 0
        assert self.envelope(capsys)["result"] == "success"

        # Results come from the cache
        assert cli("results", as_json=True) == 0
        data = self.envelope(capsys)["data"]
        assert data["cached"] is True
        assert [g["group_type"] for g in data["groups"]] == ["exact"]
        assert data["groups"][0]["retained_id"] == "a.png"

        # Delete refuses without --yes
        assert cli("delete", "--type", "exact", as_json=True) == 1
        assert self.envelope(capsys)["result"] == "error"
        assert (image_dir / "sub" / "b.png").exists()

        assert cli("delete", "--type", "exact", "--yes", as_json=True) == 0
        assert self.envelope(capsys)["data"]["deleted"] == ["sub/b.png"]
        assert not (image_dir / "sub" / "b.png").exists()
        assert (image_dir / "a.png").exists()

        # The cache referenced the deleted file
        cli("results", as_json=True)
        assert self.envelope(capsys)["data"]["cached"] is False

        assert cli("reset", source=False, as_json=True) == 0
        data = self.envelope(capsys)["data"]
        assert data["records_cleared"] is True
        assert data["record_count"] == 3
        assert data["cache_cleared"] is True

    def test_changed_threshold_hides_cached_result(self, cli, capsys):
        cli("scan", "--no-progress")
        capsys.readouterr()

        cli("results", "--threshold", "0.05")
        assert "No valid cached results" in capsys.readouterr().out

    def test_reset_records_only(self, cli, capsys):
        cli("scan", "--no-progress")
        capsys.readouterr()

        assert cli("reset", "--records", source=False) == 0
        out = capsys.readouterr().out
        assert "Cleared 3 scan records." in out
        assert "cached results" not in out

        # Cached result survives a records-only reset
        cli("results")
        assert "Cached results from" in capsys.readouterr().out


class TestBuildConfig:

    def test_flags_override_defaults(self):
        args = create_parser().parse_args([
            "scan", "--source", "x", "--threshold", "0.1", "--no-similar", "--keep", "keep_first",
            "--clustering", "greedy", "--batch-size", "7", "--cache-hours", "2",
        ])
        config = build_config(args)

        assert config.similarity_threshold == 0.1
        assert config.similarity_enabled is False
        assert config.retention is RetentionPolicy.KEEP_FIRST
        assert config.clustering is ClusteringMode.GREEDY
        assert config.batch_size == 7
        assert config.cache_validity_hours == 2

    def test_settings_file_then_flags(self, tmp_path):
        path = tmp_path / "settings.json"
        ScanConfig(batch_size=3, similarity_threshold=0.3).save(path)
        args = create_parser().parse_args(["results", "--source", "x", "--config", str(path),
                                           "--threshold", "0.15"])
        config = build_config(args)

        assert config.batch_size == 3
        assert config.similarity_threshold == 0.15

    def test_no_flags_give_defaults(self):
        args = create_parser().parse_args(["results", "--source", "x"])
        assert build_config(args) == ScanConfig()
