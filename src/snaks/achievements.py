"""High-score ledger stored as a sorted CSV file."""

from __future__ import annotations

import csv
import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from snaks.difficulty import DifficultyKind

logger = logging.getLogger(__name__)

FILE_NAME = "achievements.csv"
SEP = ","
HEADER = ["username", "difficulty", "score"]


class AchievementError(Exception):
    """Raised when the ledger cannot be read, parsed, or written."""


@dataclass(frozen=True)
class Achievement:
    """Best score of one user on one difficulty."""

    username: str
    difficulty: DifficultyKind
    score: int

    @property
    def key(self) -> tuple[str, int]:
        return self.username, _ORDER[self.difficulty]

    def to_dict(self) -> dict:
        return {
            "username": self.username,
            "difficulty": self.difficulty.value,
            "score": self.score,
        }


_ORDER: dict[DifficultyKind, int] = {k: i for i, k in enumerate(DifficultyKind)}


def data_dir() -> Path:
    """Directory holding the ledger, ``$SNAKS_HOME`` or ``~/.config/snaks``."""
    env = os.environ.get("SNAKS_HOME")
    if env:
        return Path(env)
    return Path.home() / ".config" / "snaks"


def group_by_user(achievements: list[Achievement]) -> dict[str, list[Achievement]]:
    """Map each username to its achievements, preserving order."""
    result: dict[str, list[Achievement]] = {}
    for a in achievements:
        result.setdefault(a.username, []).append(a)
    return result


class AchievementLedger:
    """Reads and updates the achievements file.

    The file has a ``username,difficulty,score`` header followed by one row
    per (username, difficulty) pair, sorted by username then difficulty.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else data_dir() / FILE_NAME
        self.entries: list[Achievement] = []

    def read(self) -> list[Achievement]:
        """Load the ledger, creating an empty one if the file is missing."""
        try:
            if not self.path.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(SEP.join(HEADER) + "\n")
                logger.info("Created empty achievements file at %s", self.path)
            text = self.path.read_text()
        except OSError as exc:
            raise AchievementError(f"Failed to read achievements: {exc}") from exc

        rows = list(csv.reader(io.StringIO(text)))
        self.entries = [
            self._parse_row(row, lineno)
            for lineno, row in enumerate(rows[1:], start=2)
            if row
        ]
        return list(self.entries)

    def record(self, achievement: Achievement) -> list[Achievement] | None:
        """Store *achievement* if it beats the user's best for its difficulty.

        Returns the updated, sorted list, or ``None`` if nothing changed.
        """
        if SEP in achievement.username:
            raise AchievementError(f"Username cannot contain {SEP!r}.")

        entries = list(self.entries)
        for i, existing in enumerate(entries):
            if existing.key == achievement.key:
                if existing.score >= achievement.score:
                    return None
                entries[i] = achievement
                break
        else:
            entries.append(achievement)

        entries.sort(key=lambda a: a.key)
        self._write(entries)
        self.entries = entries
        logger.debug(
            "Recorded %d for %s on %s.",
            achievement.score, achievement.username, achievement.difficulty.value,
        )
        return list(entries)

    def best(self, username: str, difficulty: DifficultyKind) -> Achievement | None:
        for a in self.entries:
            if a.username == username and a.difficulty is difficulty:
                return a
        return None

    def grouped(self) -> dict[str, list[Achievement]]:
        return group_by_user(self.entries)

    def _write(self, entries: list[Achievement]) -> None:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(HEADER)
        for a in entries:
            writer.writerow([a.username, a.difficulty.value, a.score])
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(buf.getvalue())
        except OSError as exc:
            raise AchievementError(f"Failed to write achievements: {exc}") from exc

    @staticmethod
    def _parse_row(row: list[str], lineno: int) -> Achievement:
        values = [v.strip() for v in row]
        if len(values) != len(HEADER):
            raise AchievementError(
                f"Line {lineno}: expected {len(HEADER)} fields, got {len(values)}.",
            )
        username, difficulty, score = values
        try:
            kind = DifficultyKind.parse(difficulty)
        except ValueError as exc:
            raise AchievementError(f"Line {lineno}: {exc}") from exc
        try:
            value = int(score)
        except ValueError as exc:
            raise AchievementError(f"Line {lineno}: invalid score {score!r}.") from exc
        if value < 0:
            raise AchievementError(f"Line {lineno}: score must be non-negative.")
        return Achievement(username=username, difficulty=kind, score=value)
