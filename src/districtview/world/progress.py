"""LoadProgress — settled/total counter behind the loading overlay."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LoadProgress:
    """Aggregate load progress.

    ``completed`` counts settled tasks, successes and failures alike, and
    only ever moves up by one until it equals ``total``.
    """

    total: int
    completed: int = 0
    failed: int = 0

    def advance(self, ok: bool = True) -> None:
        if self.completed >= self.total:
            raise RuntimeError(
                f"Load progress overflow: {self.completed} / {self.total}"
            )
        self.completed += 1
        if not ok:
            self.failed += 1

    @property
    def done(self) -> bool:
        return self.completed >= self.total

    @property
    def ratio(self) -> float:
        if self.total == 0:
            return 1.0
        return min(1.0, max(0.0, self.completed / self.total))

    @property
    def percent(self) -> float:
        return round(self.ratio * 100.0, 1)

    @property
    def label(self) -> str:
        return f"{self.completed} / {self.total}"

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "total": self.total,
            "failed": self.failed,
            "percent": self.percent,
            "done": self.done,
            "label": self.label,
        }
