"""
Progress events emitted by the evolution engine.
"""

from typing import Callable, Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime, timedelta
import itertools
import threading
import time

from src.optimizer.core.chromosome import Chromosome


@dataclass(frozen=True, order=True)
class ProgressEvent:
    """
    Immutable snapshot of a run after one generation.

    Events order by timestamp, then by identifier. ``best_chromosome`` is a
    private copy; listeners may keep or modify it without affecting the run.
    """
    timestamp: datetime
    event_id: int
    generation: int = field(compare=False)
    elapsed_seconds: float = field(compare=False)
    total_seconds: Optional[float] = field(compare=False)
    best_chromosome: Chromosome = field(compare=False)
    converged: bool = field(compare=False)

    @property
    def remaining_seconds(self) -> Optional[float]:
        if self.total_seconds is None:
            return None
        return max(0.0, self.total_seconds - self.elapsed_seconds)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "generation": self.generation,
            "elapsed_seconds": self.elapsed_seconds,
            "total_seconds": self.total_seconds,
            "best_chromosome": self.best_chromosome.to_dict(),
            "converged": self.converged,
        }


ProgressListener = Callable[[ProgressEvent], None]


class EventClock:
    """
    Wall-clock timestamps that never go backwards.

    The wall clock is read once; later timestamps add monotonic elapsed time
    to it, so event timestamps follow emission order even if the system
    clock is adjusted during a run.
    """

    def __init__(self):
        self._wall_start = datetime.now()
        self._monotonic_start = time.monotonic()

    def now(self) -> datetime:
        return self._wall_start + timedelta(seconds=time.monotonic() - self._monotonic_start)


class EventIdGenerator:
    """Monotonically increasing event identifiers, one sequence per engine."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)
