from .reporting import grade_distribution, render_leaderboard
from .session import GradeResult, SessionController, SessionState, StepResult
from .storage import SnapshotStore

__all__ = [
    "GradeResult",
    "SessionController",
    "SessionState",
    "SnapshotStore",
    "StepResult",
    "grade_distribution",
    "render_leaderboard",
]
