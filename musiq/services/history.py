"""Score history storage and scoreboard statistics."""

import logging
from collections import Counter
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from musiq.core.exceptions import PersistenceError
from musiq.core.models import GameRank, GameRecord

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(list[GameRecord])


class HistoryStore(Protocol):
    """Persistence for finished game records."""

    def load(self) -> list[GameRecord]: ...

    def append(self, record: GameRecord) -> None:
        """Store one record.

        Raises:
            PersistenceError: If the record could not be written.
        """
        ...

    def clear(self) -> None: ...


class JsonHistoryStore:
    """History kept as a JSON array in a single file."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> list[GameRecord]:
        """Load all records. An unreadable file is treated as empty."""
        try:
            return self._read()
        except PersistenceError as e:
            logger.error(f"Failed to load game history: {e}")
            return []

    def append(self, record: GameRecord) -> None:
        """Add a record to the file.

        An unreadable file is left untouched so its games can be recovered.

        Raises:
            PersistenceError: If the file could not be read or written.
        """
        records = self._read()
        records.append(record)
        self._write(records)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to clear game history: {e}") from e

    def _read(self) -> list[GameRecord]:
        if not self.path.exists():
            return []

        try:
            return _records_adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            raise PersistenceError(f"Unreadable game history {self.path}: {e}") from e

    def _write(self, records: list[GameRecord]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(_records_adapter.dump_json(records, indent=2))
        except OSError as e:
            raise PersistenceError(f"Failed to save game history: {e}") from e


class InMemoryHistoryStore:
    """History kept for the lifetime of the process."""

    def __init__(self, records: list[GameRecord] | None = None):
        self.records: list[GameRecord] = list(records or [])

    def load(self) -> list[GameRecord]:
        return list(self.records)

    def append(self, record: GameRecord) -> None:
        self.records.append(record)

    def clear(self) -> None:
        self.records.clear()


class GameHistory:
    """Scoreboard statistics over stored game records."""

    def __init__(self, records: list[GameRecord]):
        self.records = records

    @classmethod
    def from_store(cls, store: HistoryStore) -> "GameHistory":
        return cls(store.load())

    @property
    def total_games_played(self) -> int:
        return len(self.records)

    @property
    def highest_score(self) -> int:
        return max((record.score for record in self.records), default=0)

    @property
    def average_score(self) -> float:
        if not self.records:
            return 0.0
        return sum(record.score for record in self.records) / len(self.records)

    @property
    def perfect_games(self) -> int:
        return sum(1 for record in self.records if record.is_perfect)

    @property
    def best_streak(self) -> int:
        return max((record.best_streak for record in self.records), default=0)

    @property
    def average_accuracy(self) -> float:
        if not self.records:
            return 0.0
        return sum(record.accuracy for record in self.records) / len(self.records)

    @property
    def most_played_artist(self) -> str | None:
        counts = Counter(record.artist_name for record in self.records if record.artist_name)
        if not counts:
            return None
        return counts.most_common(1)[0][0]

    @property
    def favorite_rank(self) -> GameRank:
        """Rank earned most often (Bronze with no games)."""
        counts = Counter(record.rank for record in self.records)
        if not counts:
            return GameRank.BRONZE
        return counts.most_common(1)[0][0]

    def top_scores(self, limit: int = 10) -> list[GameRecord]:
        return sorted(self.records, key=lambda r: r.score, reverse=True)[:limit]

    def top_streaks(self, limit: int = 10) -> list[GameRecord]:
        return sorted(self.records, key=lambda r: r.best_streak, reverse=True)[:limit]

    def perfect_games_history(self) -> list[GameRecord]:
        perfect = [record for record in self.records if record.is_perfect]
        return sorted(perfect, key=lambda r: r.started_at, reverse=True)

    def recent_games(self, limit: int = 20) -> list[GameRecord]:
        return sorted(self.records, key=lambda r: r.started_at, reverse=True)[:limit]

    def games_for_artist(self, artist_id: str) -> list[GameRecord]:
        games = [record for record in self.records if record.artist_id == artist_id]
        return sorted(games, key=lambda r: r.started_at, reverse=True)
