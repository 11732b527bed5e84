"""Starting configuration of the board."""

from __future__ import annotations

from typing import Any, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_serializer, field_validator

from .enums import PieceColor, PieceModel
from .pos import Pos


class InitialPiece(BaseModel):
    """One ``(model, color, pos)`` entry. ``pos`` is written as ``[row, col]``."""

    model_config = ConfigDict(extra="forbid", frozen=True)
    model: PieceModel
    color: PieceColor
    pos: Pos

    @field_validator("pos", mode="before")
    @classmethod
    def _coerce_pos(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            if len(value) != 2 or not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
                raise ValueError("pos must be a [row, col] pair of integers")
            return Pos.from_tuple(value)
        return value

    @field_serializer("pos")
    def _dump_pos(self, pos: Pos) -> Tuple[int, int]:
        return pos.as_tuple()


class InitialLayout(RootModel[List[InitialPiece]]):
    """Ordered list of initial pieces. Entries are validated by checking, not on insert."""

    root: List[InitialPiece] = Field(default_factory=list)

    def add(self, piece: InitialPiece) -> None:
        self.root.append(piece)

    def pieces(self) -> List[InitialPiece]:
        return list(self.root)

    def __iter__(self) -> Iterator[InitialPiece]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


__all__ = ["InitialLayout", "InitialPiece"]
