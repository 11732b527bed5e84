"""Query interface expressions are evaluated against."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .enums import PieceColor, PieceModel, PlayerState, Scenario
from .errors import UnsupportedVariable
from .pos import Pos, Rect


class Context(ABC):
    """Answers the queries an expression tree may perform.

    The board and turn queries are mandatory. Scenario variables default to
    :class:`~rulery.errors.UnsupportedVariable`; each concrete context overrides
    only the ones its scenario defines.
    """

    scenario: Optional[Scenario] = None

    def _unsupported(self, variable: str) -> UnsupportedVariable:
        return UnsupportedVariable(variable, self.scenario)

    # ------------------------------------------------------------ board / turn
    @abstractmethod
    def pos_occupied(self, pos: Pos) -> bool: ...

    @abstractmethod
    def has_last_action(self) -> bool: ...

    @abstractmethod
    def turn_number(self) -> int: ...

    @abstractmethod
    def round_number(self) -> int: ...

    @abstractmethod
    def last_action_row(self) -> int:
        """Row of the last action; raises :class:`~rulery.errors.NoLastAction` if none."""

    @abstractmethod
    def last_action_col(self) -> int: ...

    @abstractmethod
    def count_in_rect(self, rect: Rect) -> int: ...

    @abstractmethod
    def count_piece_in_rect(self, model: PieceModel, color: PieceColor, rect: Rect) -> int: ...

    @abstractmethod
    def model_at_pos(self, pos: Pos) -> PieceModel:
        """Model of the piece on ``pos``; raises :class:`~rulery.errors.NoPieceAtPos` if empty."""

    @abstractmethod
    def color_at_pos(self, pos: Pos) -> PieceColor: ...

    # ---------------------------------------------------------------- movement
    def moving_model(self) -> PieceModel:
        raise self._unsupported("moving_model")

    def moving_color(self) -> PieceColor:
        raise self._unsupported("moving_color")

    def source_row(self) -> int:
        raise self._unsupported("source_row")

    def source_col(self) -> int:
        raise self._unsupported("source_col")

    def target_row(self) -> int:
        raise self._unsupported("target_row")

    def target_col(self) -> int:
        raise self._unsupported("target_col")

    # --------------------------------------------------------------- placement
    def to_place_model(self) -> PieceModel:
        raise self._unsupported("to_place_model")

    def to_place_color(self) -> PieceColor:
        raise self._unsupported("to_place_color")

    def to_place_row(self) -> int:
        raise self._unsupported("to_place_row")

    def to_place_col(self) -> int:
        raise self._unsupported("to_place_col")

    # --------------------------------------------------------------- game over
    def player_state_equal(self, color: PieceColor, state: PlayerState) -> bool:
        raise self._unsupported("player_state_equal")


__all__ = ["Context"]
