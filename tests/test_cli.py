"""Tests for the click CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from main import cli


@pytest.fixture
def snapshot_file(tmp_path) -> str:
    path = tmp_path / "ledger.json"
    path.write_text(
        json.dumps(
            {
                "pallets": [
                    {
                        "id": "p1",
                        "name": "Spring Lot",
                        "supplier": "Liquidation Co",
                        "source_name": "Amazon Monster",
                        "purchase_cost": 200.0,
                    }
                ],
                "items": [
                    {
                        "id": "a",
                        "name": "Blender",
                        "pallet_id": "p1",
                        "status": "sold",
                        "sale_price": 100.0,
                        "allocated_cost": 50.0,
                        "sale_date": "2024-01-15",
                    },
                    {
                        "id": "b",
                        "name": "Kettle",
                        "pallet_id": "p1",
                        "status": "listed",
                        "listing_price": 40.0,
                        "listing_date": "2024-02-01",
                    },
                ],
            }
        ),
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCli:
    def test_hero_period(self, runner, snapshot_file) -> None:
        result = runner.invoke(
            cli, ["hero", "--snapshot", snapshot_file, "--start", "2024-01-01", "--end", "2024-01-31"]
        )
        assert result.exit_code == 0
        assert "$50.00" in result.output
        sold_line = next(line for line in result.output.splitlines() if "Items Sold:" in line)
        assert sold_line.split()[-1] == "1"

    def test_leaderboard(self, runner, snapshot_file) -> None:
        result = runner.invoke(cli, ["leaderboard", "--snapshot", snapshot_file])
        assert result.exit_code == 0
        assert "Spring Lot" in result.output

    def test_pallet_types(self, runner, snapshot_file) -> None:
        result = runner.invoke(cli, ["pallet-types", "--snapshot", snapshot_file])
        assert result.exit_code == 0
        assert "Amazon Monster" in result.output

    def test_stale(self, runner, snapshot_file) -> None:
        result = runner.invoke(cli, ["stale", "--snapshot", snapshot_file, "--as-of", "2024-03-15"])
        assert result.exit_code == 0
        assert "Kettle" in result.output
        assert "1 stale item(s)" in result.output

    def test_trend(self, runner, snapshot_file) -> None:
        result = runner.invoke(cli, ["trend", "--snapshot", snapshot_file, "--granularity", "weekly"])
        assert result.exit_code == 0
        assert "2024-01-15" in result.output

    def test_pnl(self, runner, snapshot_file) -> None:
        result = runner.invoke(
            cli, ["pnl", "--snapshot", snapshot_file, "--start", "2024-01-01", "--end", "2024-01-31"]
        )
        assert result.exit_code == 0
        assert "Profit & Loss: 2024-01-01 to 2024-01-31" in result.output

    def test_allocate(self, runner, snapshot_file) -> None:
        result = runner.invoke(cli, ["allocate", "p1", "--snapshot", snapshot_file])
        assert result.exit_code == 0
        assert "Spring Lot: $200.00 over 2 item(s)" in result.output
        assert "Blender" in result.output
        assert "100.00" in result.output

    def test_allocate_unknown_pallet(self, runner, snapshot_file) -> None:
        result = runner.invoke(cli, ["allocate", "nope", "--snapshot", snapshot_file])
        assert result.exit_code == 0
        assert "Pallet nope not found." in result.output

    def test_missing_snapshot(self, runner, tmp_path) -> None:
        result = runner.invoke(cli, ["hero", "--snapshot", str(tmp_path / "nope.json")])
        assert result.exit_code == 0
        assert "Error loading snapshot" in result.output

    def test_bad_date(self, runner, snapshot_file) -> None:
        result = runner.invoke(cli, ["hero", "--snapshot", snapshot_file, "--start", "January"])
        assert result.exit_code != 0
