"""Leaderboard report generation."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from tabulate import tabulate

from pairwise_rank.models import Item


def build_leaderboard_rows(items: Sequence[Item]) -> list[tuple[int, str, str, int, str]]:
    """Convert items (already sorted best first) to table rows.

    Returns:
        List of (rank, item_id, rating, comparisons, grade) tuples.
    """
    return [
        (rank, item.id, f"{item.rating:.1f}", item.comparisons, item.grade or "-")
        for rank, item in enumerate(items, 1)
    ]


def render_leaderboard(
    items: Sequence[Item],
    title: str | None = None,
    tablefmt: str = "github",
) -> str:
    """Render a leaderboard table.

    Args:
        items: Items sorted by rating descending.
        title: Optional markdown heading.
        tablefmt: tabulate table format.

    Returns:
        Report content.
    """
    headers = ("Rank", "Item", "Rating", "Comparisons", "Grade")
    lines = []
    if title:
        lines.extend([f"# {title}", ""])
    lines.append(tabulate(build_leaderboard_rows(items), headers=headers, tablefmt=tablefmt))
    return "\n".join(lines)


def grade_distribution(items: Sequence[Item], labels: Sequence[str]) -> list[tuple[str, int]]:
    """Count graded items per label, in table order; ungraded items are ignored."""
    counts = Counter(item.grade for item in items if item.grade is not None)
    return [(label, counts.get(label, 0)) for label in labels]
