"""Index of the pieces currently on the board."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from rulery import PieceColor, PieceModel, Pos, Rect

from .errors import DuplicatePiece, SessionInvariantError


@dataclass(frozen=True)
class PlacedPiece:
    model: PieceModel
    color: PieceColor
    pos: Pos

    def moved_to(self, pos: Pos) -> "PlacedPiece":
        return PlacedPiece(self.model, self.color, pos)

    def to_payload(self) -> Dict[str, object]:
        return {"model": self.model.value, "color": self.color.value, "pos": list(self.pos.as_tuple())}


class PlacedPieceIndex:
    """Position -> piece mapping; at most one piece per tile."""

    def __init__(self) -> None:
        self._by_pos: Dict[Pos, PlacedPiece] = {}

    def insert(self, piece: PlacedPiece) -> None:
        if piece.pos in self._by_pos:
            raise DuplicatePiece(piece.pos)
        self._by_pos[piece.pos] = piece

    def remove(self, pos: Pos) -> Optional[PlacedPiece]:
        return self._by_pos.pop(pos, None)

    def take(self, pos: Pos) -> PlacedPiece:
        """Remove and return the piece at ``pos``; the caller guarantees one is there."""

        piece = self._by_pos.pop(pos, None)
        if piece is None:
            raise SessionInvariantError(f"expected a piece at {pos}")
        return piece

    def get(self, pos: Pos) -> Optional[PlacedPiece]:
        return self._by_pos.get(pos)

    def is_occupied(self, pos: Pos) -> bool:
        return pos in self._by_pos

    def count_in_rect(self, rect: Rect) -> int:
        return sum(1 for pos in self._by_pos if rect.contains(pos))

    def count_piece_in_rect(self, model: PieceModel, color: PieceColor, rect: Rect) -> int:
        return sum(
            1
            for piece in self._by_pos.values()
            if piece.model == model and piece.color == color and rect.contains(piece.pos)
        )

    def pieces(self) -> List[PlacedPiece]:
        """All pieces ordered by position."""

        return [self._by_pos[pos] for pos in sorted(self._by_pos)]

    def copy(self) -> "PlacedPieceIndex":
        clone = PlacedPieceIndex()
        clone._by_pos = dict(self._by_pos)
        return clone

    def __iter__(self) -> Iterator[PlacedPiece]:
        return iter(self.pieces())

    def __len__(self) -> int:
        return len(self._by_pos)

    def __contains__(self, pos: object) -> bool:
        return pos in self._by_pos


__all__ = ["PlacedPiece", "PlacedPieceIndex"]
