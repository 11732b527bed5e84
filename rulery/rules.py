"""Unchecked (editable) and checked (read-only) phases of a rule set."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .board import BoardRuleSet
from .checker import check_rules
from .context import Context
from .count import Count
from .document import (
    dump_expr,
    dump_game_rules,
    dump_initial_layout,
    dump_pieces,
    dump_players,
    parse_bool_expr,
    parse_initial_layout,
    parse_pieces,
    parse_players,
)
from .engine import evaluate_bool
from .enums import PieceColor, PieceModel
from .errors import DocumentFormatError
from .expr import Expr, FalseExpr, TrueExpr
from .initial_layout import InitialPiece
from .piece import PieceRules
from .player import PlayerRules
from .pos import Pos
from .schema import GameRules

DEFAULT_RULES_NAME = "Default Rules"


class UncheckedGameRules:
    """Mutable rule set as authored; it may be in any state until :meth:`check` succeeds."""

    def __init__(self, rules: Optional[GameRules] = None) -> None:
        self._rules = rules.model_copy(deep=True) if rules is not None else GameRules()

    # ---------------------------------------------------------------- accessors
    @property
    def name(self) -> str:
        return self._rules.name

    @property
    def rules(self) -> GameRules:
        """The underlying document model (live, editable)."""

        return self._rules

    # ----------------------------------------------------------------- mutators
    def set_name(self, name: str) -> None:
        self._rules.name = name

    def set_board_rows(self, rows: int) -> None:
        self._rules.board.rows = rows

    def set_board_cols(self, cols: int) -> None:
        self._rules.board.cols = cols

    def add_piece(self, model: PieceModel, rules: PieceRules) -> None:
        self._rules.pieces.add(model, rules)

    def add_player(self, color: PieceColor, rules: PlayerRules) -> None:
        self._rules.players.add(color, rules)

    def add_initial_piece(self, model: PieceModel, color: PieceColor, pos: Union[Pos, Tuple[int, int]]) -> None:
        if not isinstance(pos, Pos):
            pos = Pos.from_tuple(pos)
        self._rules.initial_layout.add(InitialPiece(model=model, color=color, pos=pos))

    def set_game_over_condition(self, expr: Expr) -> None:
        self._rules.game_over_condition = expr

    def set_pieces_from_json(self, source: Union[str, bytes]) -> None:
        self._rules.pieces = parse_pieces(source)

    def set_players_from_json(self, source: Union[str, bytes]) -> None:
        self._rules.players = parse_players(source)

    def set_initial_layout_from_json(self, source: Union[str, bytes]) -> None:
        self._rules.initial_layout = parse_initial_layout(source)

    def set_game_over_condition_from_json(self, source: Union[str, bytes]) -> None:
        self._rules.game_over_condition = parse_bool_expr(source)

    # ----------------------------------------------------------------- checking
    def check(self) -> "CheckedGameRules":
        """Validate and return a checked copy; raises the first error found."""

        check_rules(self._rules)
        return CheckedGameRules._from_valid(self._rules)

    def to_json(self) -> str:
        return dump_game_rules(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UncheckedGameRules):
            return NotImplemented
        return self._rules == other._rules

    def __repr__(self) -> str:
        return f"UncheckedGameRules(name={self._rules.name!r})"


class CheckedGameRules:
    """Rule set that passed checking. It owns a private copy and exposes no mutators.

    Instances come only from :meth:`UncheckedGameRules.check`.
    """

    __slots__ = ("_rules",)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("CheckedGameRules can only be obtained from UncheckedGameRules.check()")

    @classmethod
    def _from_valid(cls, rules: GameRules) -> "CheckedGameRules":
        instance = object.__new__(cls)
        object.__setattr__(instance, "_rules", rules.model_copy(deep=True))
        return instance

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("CheckedGameRules is read-only")

    @classmethod
    def default(cls) -> "CheckedGameRules":
        """The built-in rule set: one white player with unrestricted cubes."""

        unchecked = UncheckedGameRules()
        unchecked.set_name(DEFAULT_RULES_NAME)
        unchecked.add_piece(
            PieceModel.CUBE,
            PieceRules(count=Count.finite(10), movement=TrueExpr(), placement=TrueExpr()),
        )
        unchecked.add_player(
            PieceColor.WHITE,
            PlayerRules(win_condition=FalseExpr(), lose_condition=FalseExpr()),
        )
        for n in range(3):
            unchecked.add_initial_piece(PieceModel.CUBE, PieceColor.WHITE, Pos(n, n))
        unchecked.set_game_over_condition(FalseExpr())
        return unchecked.check()

    # ------------------------------------------------------------------- board
    @property
    def name(self) -> str:
        return self._rules.name

    @property
    def board_rows(self) -> int:
        return self._rules.board.rows

    @property
    def board_cols(self) -> int:
        return self._rules.board.cols

    @staticmethod
    def tile_size() -> float:
        return BoardRuleSet.tile_size()

    @staticmethod
    def tile_height() -> float:
        return BoardRuleSet.tile_height()

    def board_positions(self) -> List[Pos]:
        return list(self._rules.board.positions())

    def contains(self, pos: Pos) -> bool:
        return self._rules.board.contains(pos)

    # ------------------------------------------------------------------ pieces
    def get_piece(self, model: PieceModel) -> PieceRules:
        return self._rules.pieces.get_by_model(model).model_copy(deep=True)

    def pieces(self) -> List[Tuple[PieceModel, PieceRules]]:
        return [(model, rules.model_copy(deep=True)) for model, rules in self._rules.pieces]

    def piece_models(self) -> List[PieceModel]:
        return self._rules.pieces.models()

    # ----------------------------------------------------------------- players
    def get_player(self, color: PieceColor) -> PlayerRules:
        return self._rules.players.get_by_color(color).model_copy(deep=True)

    def players(self) -> List[Tuple[PieceColor, PlayerRules]]:
        return [(color, rules.model_copy(deep=True)) for color, rules in self._rules.players]

    def player_colors(self) -> List[PieceColor]:
        return self._rules.players.colors()

    # ------------------------------------------------------------------ layout
    def initial_pieces(self) -> List[InitialPiece]:
        return self._rules.initial_layout.pieces()

    # --------------------------------------------------------------- game over
    @property
    def game_over_condition(self) -> Expr:
        return self._rules.game_over_condition

    def evaluate_game_over_condition(self, ctx: Context) -> bool:
        return evaluate_bool(self._rules.game_over_condition, ctx)

    # ----------------------------------------------------------- serialization
    def pieces_to_json(self) -> str:
        return dump_pieces(self._rules.pieces)

    def players_to_json(self) -> str:
        return dump_players(self._rules.players)

    def initial_layout_to_json(self) -> str:
        return dump_initial_layout(self._rules.initial_layout)

    def game_over_condition_to_json(self) -> str:
        return dump_expr(self._rules.game_over_condition)

    def to_json(self) -> str:
        return dump_game_rules(self._rules)

    def to_dict(self) -> Dict[str, Any]:
        return self._rules.model_dump(mode="json", by_alias=True)

    def dump_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")

    def save_to_path(self, path: Union[str, Path]) -> None:
        try:
            Path(path).write_bytes(self.dump_bytes())
        except OSError as exc:
            raise DocumentFormatError(f"Cannot write rule document '{path}': {exc}") from exc

    def to_unchecked(self) -> UncheckedGameRules:
        return UncheckedGameRules(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CheckedGameRules):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self.to_json())

    def __repr__(self) -> str:
        return (
            f"CheckedGameRules(name={self._rules.name!r}, "
            f"board={self._rules.board.rows}x{self._rules.board.cols})"
        )


__all__ = ["CheckedGameRules", "DEFAULT_RULES_NAME", "UncheckedGameRules"]
