import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import pytest

# Ensure the project root is available on the Python path when running the tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rulery import (  # noqa: E402
    CheckedGameRules,
    Context,
    Count,
    NoLastAction,
    NoPieceAtPos,
    PieceColor,
    PieceModel,
    PieceRules,
    PlayerRules,
    Pos,
    Rect,
    UncheckedGameRules,
)
from rulery.expr import FalseExpr, TrueExpr  # noqa: E402

RULES_DIR = PROJECT_ROOT / "assets" / "rules"
CORNER_RACE = RULES_DIR / "corner_race.json"


class BoardOnlyContext(Context):
    """Context over a plain ``pos -> (model, color)`` mapping, without scenario variables."""

    def __init__(
        self,
        pieces: Optional[Dict[Pos, Tuple[PieceModel, PieceColor]]] = None,
        *,
        turn_number: int = 1,
        round_number: int = 1,
        last_action: Optional[Pos] = None,
    ) -> None:
        self.pieces = dict(pieces or {})
        self._turn_number = turn_number
        self._round_number = round_number
        self._last_action = last_action
        self.queries = []

    def pos_occupied(self, pos: Pos) -> bool:
        self.queries.append(("pos_occupied", pos))
        return pos in self.pieces

    def has_last_action(self) -> bool:
        return self._last_action is not None

    def turn_number(self) -> int:
        return self._turn_number

    def round_number(self) -> int:
        return self._round_number

    def last_action_row(self) -> int:
        if self._last_action is None:
            raise NoLastAction()
        return self._last_action.row

    def last_action_col(self) -> int:
        if self._last_action is None:
            raise NoLastAction()
        return self._last_action.col

    def count_in_rect(self, rect: Rect) -> int:
        return sum(1 for pos in self.pieces if rect.contains(pos))

    def count_piece_in_rect(self, model: PieceModel, color: PieceColor, rect: Rect) -> int:
        return sum(1 for pos, piece in self.pieces.items() if piece == (model, color) and rect.contains(pos))

    def model_at_pos(self, pos: Pos) -> PieceModel:
        if pos not in self.pieces:
            raise NoPieceAtPos(pos)
        return self.pieces[pos][0]

    def color_at_pos(self, pos: Pos) -> PieceColor:
        if pos not in self.pieces:
            raise NoPieceAtPos(pos)
        return self.pieces[pos][1]


def make_unchecked(
    *,
    rows: int = 4,
    cols: int = 4,
    count: Optional[Count] = None,
    movement=None,
    placement=None,
    win=None,
    lose=None,
    game_over=None,
    colors=(PieceColor.WHITE,),
) -> UncheckedGameRules:
    """Small valid rule set: one cube model and one player per color."""

    unchecked = UncheckedGameRules()
    unchecked.set_name("Test Rules")
    unchecked.set_board_rows(rows)
    unchecked.set_board_cols(cols)
    unchecked.add_piece(
        PieceModel.CUBE,
        PieceRules(
            count=count if count is not None else Count.infinite(),
            movement=movement if movement is not None else TrueExpr(),
            placement=placement if placement is not None else TrueExpr(),
        ),
    )
    for color in colors:
        unchecked.add_player(
            color,
            PlayerRules(
                win_condition=win if win is not None else FalseExpr(),
                lose_condition=lose if lose is not None else FalseExpr(),
            ),
        )
    unchecked.set_game_over_condition(game_over if game_over is not None else FalseExpr())
    return unchecked


@pytest.fixture
def board_context() -> BoardOnlyContext:
    return BoardOnlyContext(
        {
            Pos(0, 0): (PieceModel.CUBE, PieceColor.WHITE),
            Pos(1, 1): (PieceModel.SPHERE, PieceColor.BLACK),
            Pos(2, 2): (PieceModel.CUBE, PieceColor.WHITE),
        },
        turn_number=5,
        round_number=3,
    )


@pytest.fixture
def default_rules() -> CheckedGameRules:
    return CheckedGameRules.default()


@pytest.fixture
def corner_race_path() -> Path:
    return CORNER_RACE


@pytest.fixture
def make_rules():
    return make_unchecked


@pytest.fixture
def make_context():
    return BoardOnlyContext
