"""Scenario contexts answering expression queries from session state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rulery import Context, NoLastAction, NoPieceAtPos, PieceColor, PieceModel, PlayerState, Pos, Rect, Scenario

from .pieces import PlacedPiece, PlacedPieceIndex
from .players import Players
from .turn import TurnSnapshot


@dataclass(frozen=True)
class BoardView:
    """Read-only slice of the session that every context can query."""

    pieces: PlacedPieceIndex
    turn: TurnSnapshot
    last_action: Optional[Pos] = None


class BoardContext(Context):
    """Answers the board and turn queries shared by every scenario."""

    def __init__(self, view: BoardView) -> None:
        self._view = view

    def _piece_at(self, pos: Pos) -> PlacedPiece:
        piece = self._view.pieces.get(pos)
        if piece is None:
            raise NoPieceAtPos(pos)
        return piece

    def _last_action(self) -> Pos:
        if self._view.last_action is None:
            raise NoLastAction()
        return self._view.last_action

    def pos_occupied(self, pos: Pos) -> bool:
        return self._view.pieces.is_occupied(pos)

    def has_last_action(self) -> bool:
        return self._view.last_action is not None

    def turn_number(self) -> int:
        return self._view.turn.turn_number

    def round_number(self) -> int:
        return self._view.turn.round_number

    def last_action_row(self) -> int:
        return self._last_action().row

    def last_action_col(self) -> int:
        return self._last_action().col

    def count_in_rect(self, rect: Rect) -> int:
        return self._view.pieces.count_in_rect(rect)

    def count_piece_in_rect(self, model: PieceModel, color: PieceColor, rect: Rect) -> int:
        return self._view.pieces.count_piece_in_rect(model, color, rect)

    def model_at_pos(self, pos: Pos) -> PieceModel:
        return self._piece_at(pos).model

    def color_at_pos(self, pos: Pos) -> PieceColor:
        return self._piece_at(pos).color


class MovementContext(BoardContext):
    """Is ``moving`` allowed to go from its position to ``target``?

    The moving piece is expected to be lifted out of ``view.pieces``.
    """

    scenario = Scenario.MOVEMENT

    def __init__(self, view: BoardView, moving: PlacedPiece, target: Pos) -> None:
        super().__init__(view)
        self._moving = moving
        self._target = target

    def moving_model(self) -> PieceModel:
        return self._moving.model

    def moving_color(self) -> PieceColor:
        return self._moving.color

    def source_row(self) -> int:
        return self._moving.pos.row

    def source_col(self) -> int:
        return self._moving.pos.col

    def target_row(self) -> int:
        return self._target.row

    def target_col(self) -> int:
        return self._target.col


class PlacementContext(BoardContext):
    scenario = Scenario.PLACEMENT

    def __init__(self, view: BoardView, model: PieceModel, color: PieceColor, pos: Pos) -> None:
        super().__init__(view)
        self._model = model
        self._color = color
        self._pos = pos

    def to_place_model(self) -> PieceModel:
        return self._model

    def to_place_color(self) -> PieceColor:
        return self._color

    def to_place_row(self) -> int:
        return self._pos.row

    def to_place_col(self) -> int:
        return self._pos.col


class WinOrLoseContext(BoardContext):
    scenario = Scenario.WIN_OR_LOSE


class GameOverContext(BoardContext):
    scenario = Scenario.GAME_OVER

    def __init__(self, view: BoardView, players: Players) -> None:
        super().__init__(view)
        self._players = players

    def player_state_equal(self, color: PieceColor, state: PlayerState) -> bool:
        return self._players.get(color).state == state


__all__ = [
    "BoardContext",
    "BoardView",
    "GameOverContext",
    "MovementContext",
    "PlacementContext",
    "WinOrLoseContext",
]
