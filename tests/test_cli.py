"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from pairwise_rank import __version__
from pairwise_rank.cli import app
from pairwise_rank.models import ItemState, RatingSnapshot
from pairwise_rank.services.storage import SnapshotStore

runner = CliRunner()


@pytest.fixture
def snapshot_path(tmp_path):
    path = tmp_path / "ratings.json"
    SnapshotStore(path).save(
        RatingSnapshot(
            items={
                "monet": ItemState(rating=1600.0, comparisons=4),
                "turner": ItemState(rating=1500.0, comparisons=4),
                "hokusai": ItemState(rating=1400.0, comparisons=4),
            }
        )
    )
    return path


class TestCommands:
    """Tests for CLI commands."""

    def test_version(self):
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_grades_prints_top_item_ss(self, snapshot_path):
        """Test grades lists the top item with SS without saving by default."""
        result = runner.invoke(app, ["grades", str(snapshot_path)])

        assert result.exit_code == 0
        monet_line = next(line for line in result.output.splitlines() if "monet" in line)
        assert "SS" in monet_line
        assert SnapshotStore(snapshot_path).load().items["monet"].grade is None

    def test_grades_save(self, snapshot_path):
        """Test --save writes grades to the snapshot."""
        result = runner.invoke(app, ["grades", str(snapshot_path), "--save"])

        assert result.exit_code == 0
        assert SnapshotStore(snapshot_path).load().items["monet"].grade == "SS"

    def test_reset_with_yes(self, snapshot_path):
        """Test reset --yes restores defaults on disk."""
        result = runner.invoke(app, ["reset", str(snapshot_path), "--yes"])

        assert result.exit_code == 0
        items = SnapshotStore(snapshot_path).load().items
        assert all(s.rating == 1500.0 and s.comparisons == 0 for s in items.values())

    def test_reset_declined(self, snapshot_path):
        """Test answering no leaves the snapshot alone."""
        result = runner.invoke(app, ["reset", str(snapshot_path)], input="n\n")

        assert result.exit_code == 0
        assert SnapshotStore(snapshot_path).load().items["monet"].rating == 1600.0

    def test_rank_records_decision(self, tmp_path):
        """Test one choice then quit leaves one decision in the snapshot."""
        path = tmp_path / "ratings.json"
        result = runner.invoke(
            app,
            ["rank", str(path), "-i", "monet", "-i", "turner", "--seed", "1"],
            input="1\nq\n",
        )

        assert result.exit_code == 0, result.output
        snapshot = SnapshotStore(path).load()
        assert len(snapshot.history) == 1
        assert {s.comparisons for s in snapshot.items.values()} == {1}

    def test_rank_undo(self, tmp_path):
        """Test choose, undo, quit leaves no decisions."""
        path = tmp_path / "ratings.json"
        items_file = tmp_path / "items.txt"
        items_file.write_text("# artists\nmonet\n\nturner\nhokusai\n")

        result = runner.invoke(
            app,
            ["rank", str(path), "--items-file", str(items_file), "--seed", "3"],
            input="2\nu\nq\n",
        )

        assert result.exit_code == 0, result.output
        snapshot = SnapshotStore(path).load()
        assert snapshot.history == []
        assert set(snapshot.items) == {"monet", "turner", "hokusai"}

    def test_rank_needs_two_items(self, tmp_path):
        """Test ranking a single item exits with an error code."""
        result = runner.invoke(app, ["rank", str(tmp_path / "r.json"), "-i", "solo"])

        assert result.exit_code == 1

    def test_validate(self, tmp_path):
        """Test validate accepts a good config and rejects a bad one."""
        good = tmp_path / "good.yaml"
        good.write_text("items: [a, b]\nranking:\n  k_factor: 16\n")
        bad = tmp_path / "bad.yaml"
        bad.write_text("ranking:\n  count_tolerance: -3\n")

        assert runner.invoke(app, ["validate", str(good)]).exit_code == 0
        assert runner.invoke(app, ["validate", str(bad)]).exit_code == 1

    def test_missing_config(self, tmp_path):
        """Test a missing config file exits with an error code."""
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1

    def test_rank_names_item_left_without_partner(self, tmp_path):
        """Test rank stops and names an item too far behind the others."""
        path = tmp_path / "ratings.json"
        SnapshotStore(path).save(
            RatingSnapshot(
                items={
                    "monet": ItemState(rating=1500.0, comparisons=0),
                    "turner": ItemState(rating=1520.0, comparisons=3),
                    "hokusai": ItemState(rating=1480.0, comparisons=3),
                }
            )
        )

        result = runner.invoke(app, ["rank", str(path)])

        assert result.exit_code == 0, result.output
        assert "No more pairs: monet" in result.output
        assert "Ranking complete" not in result.output
