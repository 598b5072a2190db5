"""Loop detection over recently executed actions."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import json
from typing import Any, Iterable


def action_signature(actions: Iterable[dict[str, Any]]) -> str:
    """Stable signature for an ordered action batch."""
    return json.dumps(list(actions), sort_keys=True, default=str, ensure_ascii=False)


@dataclass
class LoopDetector:
    """Tracks recent action signatures and scores how repetitive the agent has become.

    The score counts how often the most frequent signature repeats, relative to the
    window, and jumps to 1.0 when the last ``streak_limit`` batches are identical. A
    window holding a single entry scores 0.
    """

    window: int = 6
    streak_limit: int = 3
    history: deque[str] = field(default_factory=deque)

    def __post_init__(self) -> None:
        self.window = max(2, self.window)
        self.streak_limit = max(2, self.streak_limit)
        self.history = deque(self.history, maxlen=self.window)

    def observe(self, actions: Iterable[dict[str, Any]]) -> float:
        self.history.append(action_signature(actions))
        return self.score()

    def score(self) -> float:
        if len(self.history) < 2:
            return 0.0
        entries = list(self.history)
        tail = entries[-self.streak_limit :]
        if len(tail) == self.streak_limit and len(set(tail)) == 1:
            return 1.0
        counts: dict[str, int] = {}
        for entry in entries:
            counts[entry] = counts.get(entry, 0) + 1
        repeats = max(counts.values()) - 1
        return repeats / (len(entries) - 1)

    def reset(self) -> None:
        self.history.clear()
