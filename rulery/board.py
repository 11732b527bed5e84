"""Board dimensions."""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, ConfigDict, StrictInt

from .pos import Pos

TILE_SIZE = 1.0
TILE_HEIGHT = 0.2


class BoardRuleSet(BaseModel):
    """Rows and columns of the board. Positivity is enforced by checking."""

    model_config = ConfigDict(extra="forbid")
    rows: StrictInt
    cols: StrictInt

    @staticmethod
    def tile_size() -> float:
        return TILE_SIZE

    @staticmethod
    def tile_height() -> float:
        return TILE_HEIGHT

    def contains(self, pos: Pos) -> bool:
        return 0 <= pos.row < self.rows and 0 <= pos.col < self.cols

    def positions(self) -> Iterator[Pos]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield Pos(row, col)


__all__ = ["BoardRuleSet", "TILE_HEIGHT", "TILE_SIZE"]
