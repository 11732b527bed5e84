"""Validation promoting unchecked rule data to a checked rule set.

Checks run in a fixed order and stop at the first violation so callers can
report one actionable message at a time:

1. non-empty name
2. positive board dimensions
3. at least one piece
4. at least one player
5. every initial-layout entry: on the board, not a duplicate position,
   declared color, declared model, within the model's stock cap
6. every expression: ``and``/``or`` arity, scenario variables used only where
   applicable, ``player_state_equal`` colors declared
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterator, Optional, Set, Tuple

from .enums import PieceColor, PieceModel, Scenario
from .errors import (
    AndInvalidArity,
    CountDepleted,
    DuplicateInitialPos,
    InitialPosOutOfBoard,
    InvalidBoardSize,
    NoAddedPiece,
    NoAddedPlayer,
    NoName,
    NoSuchColor,
    NoSuchModel,
    OrInvalidArity,
    RulesError,
    VariableNotAllowed,
)
from .expr import And, Expr, Or, PlayerStateEqual
from .player import PlayerRuleSet
from .pos import Pos
from .schema import GameRules

logger = logging.getLogger(__name__)


def check_rules(rules: GameRules) -> None:
    """Raise the first validation error found in ``rules``; return quietly otherwise."""

    try:
        _check_name(rules)
        _check_board(rules)
        _check_pieces(rules)
        _check_players(rules)
        _check_initial_layout(rules)
        for scenario, expr in iter_conditions(rules):
            check_expression(expr, scenario, rules.players)
    except RulesError as exc:
        logger.warning("Rule set %r failed checking: [%s] %s", rules.name, exc.code, exc)
        raise
    logger.debug("Rule set %r passed checking", rules.name)


def _check_name(rules: GameRules) -> None:
    if not rules.name:
        raise NoName()


def _check_board(rules: GameRules) -> None:
    if rules.board.rows <= 0 or rules.board.cols <= 0:
        raise InvalidBoardSize(rules.board.rows, rules.board.cols)


def _check_pieces(rules: GameRules) -> None:
    if rules.pieces.is_empty():
        raise NoAddedPiece()


def _check_players(rules: GameRules) -> None:
    if rules.players.is_empty():
        raise NoAddedPlayer()


def _check_initial_layout(rules: GameRules) -> None:
    seen: Set[Pos] = set()
    tally: Counter[Tuple[PieceModel, PieceColor]] = Counter()
    for piece in rules.initial_layout:
        if not rules.board.contains(piece.pos):
            raise InitialPosOutOfBoard(piece.pos)
        if piece.pos in seen:
            raise DuplicateInitialPos(piece.pos)
        seen.add(piece.pos)
        if piece.color not in rules.players:
            raise NoSuchColor(piece.color)
        piece_rules = rules.pieces.get_by_model(piece.model)

        key = (piece.model, piece.color)
        tally[key] += 1
        cap = piece_rules.count.remaining
        if cap is not None and tally[key] > cap:
            raise CountDepleted(
                f"initial layout exceeds the {piece.model} stock of {piece.color} at {piece.pos}"
            )


def iter_conditions(rules: GameRules) -> Iterator[Tuple[Scenario, Expr]]:
    """Yield every expression of ``rules`` with the scenario it is evaluated in, in document order."""

    for _, piece in rules.pieces:
        yield Scenario.MOVEMENT, piece.movement
        yield Scenario.PLACEMENT, piece.placement
    for _, player in rules.players:
        yield Scenario.WIN_OR_LOSE, player.lose_condition
        yield Scenario.WIN_OR_LOSE, player.win_condition
    yield Scenario.GAME_OVER, rules.game_over_condition


def check_expression(expr: Expr, scenario: Scenario, players: Optional[PlayerRuleSet] = None) -> None:
    """Validate one expression tree for use in ``scenario``.

    Nodes are visited pre-order; ``players`` enables the declared-color check
    of ``player_state_equal``.
    """

    for node in expr.walk():
        if isinstance(node, And) and len(node.args) < 2:
            raise AndInvalidArity(len(node.args))
        if isinstance(node, Or) and len(node.args) < 2:
            raise OrInvalidArity(len(node.args))
        if node.scenarios is not None and scenario not in node.scenarios:
            raise VariableNotAllowed(node.type_name, scenario)
        if isinstance(node, PlayerStateEqual) and players is not None and node.color not in players:
            raise NoSuchColor(node.color)


__all__ = ["check_expression", "check_rules", "iter_conditions"]
