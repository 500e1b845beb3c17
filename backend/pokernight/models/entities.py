from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol


class Seated(Protocol):
    """Anything placed at a seat: engine output or a stored assignment row."""

    @property
    def table_number(self) -> int: ...

    @property
    def seat_position(self) -> int: ...

    @property
    def player_id(self) -> int: ...


@dataclass(frozen=True)
class SeatAssignment:
    """One player placed at one seat; the seating engine's output unit."""

    table_number: int
    seat_position: int
    player_id: int


@dataclass
class SeatingTable:
    table_number: int
    assignments: Sequence[Seated] = field(default_factory=list)

    @property
    def player_ids(self) -> list[int]:
        return [a.player_id for a in self.assignments]


@dataclass(frozen=True)
class DistributionSuggestion:
    tables: int
    players_per_table: str
    description: str
