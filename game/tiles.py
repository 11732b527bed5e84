"""Board tile enumeration."""

from __future__ import annotations

from typing import Iterator, List

from rulery import CheckedGameRules, Pos


class TileIndex:
    """Every board position in row-major order."""

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols
        self._tiles: List[Pos] = [Pos(row, col) for row in range(rows) for col in range(cols)]

    @classmethod
    def from_rules(cls, rules: CheckedGameRules) -> "TileIndex":
        return cls(rules.board_rows, rules.board_cols)

    def contains(self, pos: Pos) -> bool:
        return 0 <= pos.row < self.rows and 0 <= pos.col < self.cols

    def __iter__(self) -> Iterator[Pos]:
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)


__all__ = ["TileIndex"]
