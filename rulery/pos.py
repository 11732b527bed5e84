"""Board coordinates and rectangle queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True, order=True)
class Pos:
    """Tile position on the board."""

    row: int
    col: int

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> "Pos":
        row, col = value
        return cls(int(row), int(col))

    def as_tuple(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle, inclusive on all four bounds."""

    row_min: int
    col_min: int
    row_max: int
    col_max: int

    @classmethod
    def from_corners(cls, p1: Pos, p2: Pos) -> "Rect":
        return cls(
            row_min=min(p1.row, p2.row),
            col_min=min(p1.col, p2.col),
            row_max=max(p1.row, p2.row),
            col_max=max(p1.col, p2.col),
        )

    def contains(self, pos: Pos) -> bool:
        return (
            self.row_min <= pos.row <= self.row_max
            and self.col_min <= pos.col <= self.col_max
        )

    def positions(self) -> Iterator[Pos]:
        """Yield every covered position in row-major order."""

        for row in range(self.row_min, self.row_max + 1):
            for col in range(self.col_min, self.col_max + 1):
                yield Pos(row, col)


__all__ = ["Pos", "Rect"]
