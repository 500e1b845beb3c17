"""
Seating-chart generation.

Players are split across tables in two independent random passes:

1. the whole roster is Fisher-Yates shuffled and dealt round-robin into
   ``number_of_tables`` buckets, so every table gets ``floor(N/n)`` or
   ``ceil(N/n)`` players and membership is uniformly random;
2. each bucket is shuffled again to pick the seat order at that table.

The random source is a ``rand_below(max_exclusive) -> int`` callable so tests
can pass ``random.Random(seed).randrange`` and get reproducible charts.
"""
from __future__ import annotations

import logging
import math
import random
from collections.abc import Iterable, Sequence
from typing import Callable, TypeVar

from ..core.exceptions import ErrorMessages, SeatingPolicyError, SeatingValidationError
from ..models.entities import DistributionSuggestion, SeatAssignment, Seated, SeatingTable

logger = logging.getLogger(__name__)

T = TypeVar("T")

RandBelow = Callable[[int], int]


def fisher_yates_shuffle(items: Sequence[T], rand_below: RandBelow) -> list[T]:
    """Return a uniformly random permutation of ``items`` without touching the input."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rand_below(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


class SeatingAssignmentEngine:
    """Randomly partition a roster into balanced tables and seats."""

    def __init__(self, rand_below: RandBelow | None = None) -> None:
        self._rand_below = rand_below or random.randrange

    def validate(self, player_ids: Sequence[int], number_of_tables: int) -> None:
        if len(player_ids) == 0:
            raise SeatingValidationError("empty_roster", ErrorMessages.EMPTY_ROSTER)

        if isinstance(number_of_tables, bool) or not isinstance(number_of_tables, int):
            raise SeatingValidationError("invalid_table_count", ErrorMessages.INVALID_TABLE_COUNT)

        if number_of_tables < 1:
            raise SeatingValidationError("non_positive_tables", ErrorMessages.NON_POSITIVE_TABLES)

        if len(set(player_ids)) != len(player_ids):
            raise SeatingValidationError("duplicate_players", ErrorMessages.DUPLICATE_PLAYERS)

        if number_of_tables > len(player_ids):
            raise SeatingValidationError("too_many_tables", ErrorMessages.TOO_MANY_TABLES)

    def distribute(self, player_ids: Sequence[int], number_of_tables: int) -> list[list[int]]:
        """Shuffle the roster and deal it round-robin into one bucket per table."""
        shuffled = fisher_yates_shuffle(player_ids, self._rand_below)
        tables: list[list[int]] = [[] for _ in range(number_of_tables)]
        for index, player_id in enumerate(shuffled):
            tables[index % number_of_tables].append(player_id)
        return tables

    def generate(self, player_ids: Sequence[int], number_of_tables: int) -> list[SeatAssignment]:
        self.validate(player_ids, number_of_tables)

        assignments: list[SeatAssignment] = []
        for table_index, bucket in enumerate(self.distribute(player_ids, number_of_tables)):
            # second pass: seat order is drawn independently of the deal order
            seated = fisher_yates_shuffle(bucket, self._rand_below)
            for seat_index, player_id in enumerate(seated):
                assignments.append(
                    SeatAssignment(
                        table_number=table_index + 1,
                        seat_position=seat_index + 1,
                        player_id=player_id,
                    )
                )

        logger.debug(f"Seated {len(assignments)} players at {number_of_tables} tables")
        return assignments


class SeatingPolicy:
    """Physical table-size bounds that callers may choose to enforce."""

    def __init__(self, min_players_per_table: int = 2, max_players_per_table: int = 10) -> None:
        self.min_players_per_table = min_players_per_table
        self.max_players_per_table = max_players_per_table

    def check(self, player_count: int, number_of_tables: int) -> None:
        smallest = player_count // number_of_tables
        if smallest < self.min_players_per_table and player_count >= 2:
            raise SeatingPolicyError(
                "table_too_small",
                ErrorMessages.TABLE_TOO_SMALL.format(minimum=self.min_players_per_table),
            )

        largest = math.ceil(player_count / number_of_tables)
        if largest > self.max_players_per_table:
            raise SeatingPolicyError(
                "table_too_large",
                ErrorMessages.TABLE_TOO_LARGE.format(maximum=self.max_players_per_table),
            )


def group_assignments_by_table(assignments: Iterable[Seated]) -> list[SeatingTable]:
    """Group assignments (engine tuples or stored rows) into tables ordered by seat."""
    by_table: dict[int, list[Seated]] = {}
    for a in assignments:
        by_table.setdefault(int(a.table_number), []).append(a)

    return [
        SeatingTable(
            table_number=table_number,
            assignments=sorted(members, key=lambda a: int(a.seat_position)),
        )
        for table_number, members in sorted(by_table.items())
    ]


def table_distribution_suggestions(player_count: int, max_tables: int = 8) -> list[DistributionSuggestion]:
    if player_count <= 0:
        return []

    suggestions = []
    for tables in range(1, min(player_count, max_tables) + 1):
        base, extra = divmod(player_count, tables)
        if extra == 0:
            players_per_table = str(base)
            description = f"{base} players per table"
        else:
            players_per_table = f"{base}-{base + 1}"
            description = (
                f"{tables - extra} tables with {base} players, "
                f"{extra} tables with {base + 1} players"
            )
        suggestions.append(
            DistributionSuggestion(tables=tables, players_per_table=players_per_table, description=description)
        )
    return suggestions
