"""Movement and placement candidate collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, Set

from rulery import CheckedGameRules, Context, EvaluationError, PieceColor, PieceModel, Pos

from .contexts import BoardView, MovementContext, PlacementContext
from .pieces import PlacedPiece

logger = logging.getLogger(__name__)


def _collect(tiles: Iterable[Pos], build: Callable[[Pos], Context], predicate: Callable[[Context], bool]) -> Set[Pos]:
    candidates: Set[Pos] = set()
    for tile in tiles:
        try:
            if predicate(build(tile)):
                candidates.add(tile)
        except EvaluationError as exc:
            logger.debug("Tile %s is not a candidate: [%s] %s", tile, exc.code, exc)
    return candidates


@dataclass(frozen=True)
class MovingPiece:
    """A lifted piece together with the tiles it may move to."""

    piece: PlacedPiece
    movable: FrozenSet[Pos]

    @property
    def source(self) -> Pos:
        return self.piece.pos

    @classmethod
    def collect_movable(
        cls, piece: PlacedPiece, view: BoardView, tiles: Iterable[Pos], rules: CheckedGameRules
    ) -> "MovingPiece":
        """Evaluate the piece's movement condition once per tile, skipping the source."""

        piece_rules = rules.get_piece(piece.model)
        movable = _collect(
            (tile for tile in tiles if tile != piece.pos),
            lambda tile: MovementContext(view, piece, tile),
            piece_rules.can_move,
        )
        logger.debug("%s %s at %s can move to %d tile(s)", piece.color, piece.model, piece.pos, len(movable))
        return cls(piece=piece, movable=frozenset(movable))

    def is_cancel_target(self, pos: Pos) -> bool:
        return pos == self.piece.pos

    def can_move_to(self, pos: Pos) -> bool:
        return pos in self.movable


@dataclass(frozen=True)
class PlacingPiece:
    """A piece about to be placed together with the tiles it may be placed on."""

    model: PieceModel
    color: PieceColor
    placeable: FrozenSet[Pos]

    @classmethod
    def collect_placeable(
        cls, model: PieceModel, color: PieceColor, view: BoardView, tiles: Iterable[Pos], rules: CheckedGameRules
    ) -> "PlacingPiece":
        piece_rules = rules.get_piece(model)
        placeable = _collect(
            tiles,
            lambda tile: PlacementContext(view, model, color, tile),
            piece_rules.can_place,
        )
        logger.debug("%s %s can be placed on %d tile(s)", color, model, len(placeable))
        return cls(model=model, color=color, placeable=frozenset(placeable))

    def can_place_at(self, pos: Pos) -> bool:
        return pos in self.placeable


__all__ = ["MovingPiece", "PlacingPiece"]
