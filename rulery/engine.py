"""Evaluator for expression trees."""

from __future__ import annotations

import logging
from typing import Union

from .context import Context
from .enums import PieceColor, PieceModel
from .errors import AndInvalidArity, DivisionByZero, EvaluationError, OrInvalidArity
from .expr import (
    Abs,
    Add,
    And,
    BoolIf,
    ColorAtPos,
    ColorEqual,
    ColorIf,
    ColorLiteral,
    Const,
    CountInRect,
    CountPieceInRect,
    Div,
    Equal,
    Expr,
    FalseExpr,
    GreaterOrEqual,
    GreaterThan,
    HasLastAction,
    IntIf,
    LastActionCol,
    LastActionRow,
    LessOrEqual,
    LessThan,
    ModelAtPos,
    ModelEqual,
    ModelIf,
    ModelLiteral,
    MovingColor,
    MovingModel,
    Mul,
    Not,
    NotEqual,
    Or,
    PlayerStateEqual,
    PosOccupied,
    RoundNumber,
    SourceCol,
    SourceRow,
    Sub,
    TargetCol,
    TargetRow,
    ToPlaceCol,
    ToPlaceColor,
    ToPlaceModel,
    ToPlaceRow,
    TrueExpr,
    TurnNumber,
)
from .pos import Pos, Rect

logger = logging.getLogger(__name__)

Value = Union[bool, int, PieceColor, PieceModel]

_COMPARISONS = {
    Equal: lambda a, b: a == b,
    NotEqual: lambda a, b: a != b,
    LessThan: lambda a, b: a < b,
    GreaterThan: lambda a, b: a > b,
    LessOrEqual: lambda a, b: a <= b,
    GreaterOrEqual: lambda a, b: a >= b,
}

_INT_VARIABLES = {
    TurnNumber: "turn_number",
    RoundNumber: "round_number",
    LastActionRow: "last_action_row",
    LastActionCol: "last_action_col",
    SourceRow: "source_row",
    SourceCol: "source_col",
    TargetRow: "target_row",
    TargetCol: "target_col",
    ToPlaceRow: "to_place_row",
    ToPlaceCol: "to_place_col",
}


def _truncating_div(lhs: int, rhs: int) -> int:
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs >= 0) == (rhs > 0) else -quotient


class ExpressionEvaluator:
    """Walks an expression tree, asking ``ctx`` for every query it meets."""

    def __init__(self, ctx: Context) -> None:
        self._ctx = ctx

    def evaluate(self, node: Expr) -> Value:
        if isinstance(node, (TrueExpr, FalseExpr, And, Or, Not, BoolIf, ColorEqual, ModelEqual,
                             PosOccupied, HasLastAction, PlayerStateEqual)) or type(node) in _COMPARISONS:
            return self.eval_bool(node)
        if isinstance(node, (ColorLiteral, ColorIf, ColorAtPos, MovingColor, ToPlaceColor)):
            return self.eval_color(node)
        if isinstance(node, (ModelLiteral, ModelIf, ModelAtPos, MovingModel, ToPlaceModel)):
            return self.eval_model(node)
        return self.eval_int(node)

    # ------------------------------------------------------------------ boolean
    def eval_bool(self, node: Expr) -> bool:
        ctx = self._ctx
        if isinstance(node, TrueExpr):
            return True
        if isinstance(node, FalseExpr):
            return False
        if isinstance(node, And):
            if len(node.args) < 2:
                raise AndInvalidArity(len(node.args))
            return all(self.eval_bool(arg) for arg in node.args)
        if isinstance(node, Or):
            if len(node.args) < 2:
                raise OrInvalidArity(len(node.args))
            return any(self.eval_bool(arg) for arg in node.args)
        if isinstance(node, Not):
            return not self.eval_bool(node.arg)
        compare = _COMPARISONS.get(type(node))
        if compare is not None:
            return compare(self.eval_int(node.lhs), self.eval_int(node.rhs))
        if isinstance(node, BoolIf):
            return self.eval_bool(node.then) if self.eval_bool(node.cond) else self.eval_bool(node.otherwise)
        if isinstance(node, ColorEqual):
            return self.eval_color(node.lhs) == self.eval_color(node.rhs)
        if isinstance(node, ModelEqual):
            return self.eval_model(node.lhs) == self.eval_model(node.rhs)
        if isinstance(node, PosOccupied):
            return ctx.pos_occupied(self._pos(node.row, node.col))
        if isinstance(node, HasLastAction):
            return ctx.has_last_action()
        if isinstance(node, PlayerStateEqual):
            return ctx.player_state_equal(node.color, node.state)
        raise EvaluationError(f"Not a boolean expression: {type(node).__name__}")

    # ------------------------------------------------------------------ integer
    def eval_int(self, node: Expr) -> int:
        ctx = self._ctx
        if isinstance(node, Const):
            return node.value
        if isinstance(node, Add):
            return self.eval_int(node.lhs) + self.eval_int(node.rhs)
        if isinstance(node, Sub):
            return self.eval_int(node.lhs) - self.eval_int(node.rhs)
        if isinstance(node, Mul):
            return self.eval_int(node.lhs) * self.eval_int(node.rhs)
        if isinstance(node, Div):
            lhs = self.eval_int(node.lhs)
            rhs = self.eval_int(node.rhs)
            if rhs == 0:
                raise DivisionByZero()
            return _truncating_div(lhs, rhs)
        if isinstance(node, Abs):
            return abs(self.eval_int(node.arg))
        if isinstance(node, IntIf):
            return self.eval_int(node.then) if self.eval_bool(node.cond) else self.eval_int(node.otherwise)
        query = _INT_VARIABLES.get(type(node))
        if query is not None:
            return getattr(ctx, query)()
        if isinstance(node, CountInRect):
            return ctx.count_in_rect(self._rect(node))
        if isinstance(node, CountPieceInRect):
            model = self.eval_model(node.model)
            color = self.eval_color(node.color)
            return ctx.count_piece_in_rect(model, color, self._rect(node))
        raise EvaluationError(f"Not an integer expression: {type(node).__name__}")

    # -------------------------------------------------------------------- color
    def eval_color(self, node: Expr) -> PieceColor:
        ctx = self._ctx
        if isinstance(node, ColorLiteral):
            return node.color
        if isinstance(node, ColorIf):
            return self.eval_color(node.then) if self.eval_bool(node.cond) else self.eval_color(node.otherwise)
        if isinstance(node, ColorAtPos):
            return ctx.color_at_pos(self._pos(node.row, node.col))
        if isinstance(node, MovingColor):
            return ctx.moving_color()
        if isinstance(node, ToPlaceColor):
            return ctx.to_place_color()
        raise EvaluationError(f"Not a color expression: {type(node).__name__}")

    # -------------------------------------------------------------------- model
    def eval_model(self, node: Expr) -> PieceModel:
        ctx = self._ctx
        if isinstance(node, ModelLiteral):
            return node.model
        if isinstance(node, ModelIf):
            return self.eval_model(node.then) if self.eval_bool(node.cond) else self.eval_model(node.otherwise)
        if isinstance(node, ModelAtPos):
            return ctx.model_at_pos(self._pos(node.row, node.col))
        if isinstance(node, MovingModel):
            return ctx.moving_model()
        if isinstance(node, ToPlaceModel):
            return ctx.to_place_model()
        raise EvaluationError(f"Not a model expression: {type(node).__name__}")

    # ------------------------------------------------------------------ helpers
    def _pos(self, row: Expr, col: Expr) -> Pos:
        return Pos(self.eval_int(row), self.eval_int(col))

    def _rect(self, node: Union[CountInRect, CountPieceInRect]) -> Rect:
        p1 = self._pos(node.row1, node.col1)
        p2 = self._pos(node.row2, node.col2)
        return Rect.from_corners(p1, p2)


def evaluate(node: Expr, ctx: Context) -> Value:
    """Evaluate any expression node against ``ctx``."""

    return ExpressionEvaluator(ctx).evaluate(node)


def evaluate_bool(node: Expr, ctx: Context) -> bool:
    result = ExpressionEvaluator(ctx).eval_bool(node)
    logger.debug("%s evaluated to %s in %s context", node.type_name, result, ctx.scenario)
    return result


def evaluate_int(node: Expr, ctx: Context) -> int:
    return ExpressionEvaluator(ctx).eval_int(node)


def evaluate_color(node: Expr, ctx: Context) -> PieceColor:
    return ExpressionEvaluator(ctx).eval_color(node)


def evaluate_model(node: Expr, ctx: Context) -> PieceModel:
    return ExpressionEvaluator(ctx).eval_model(node)


__all__ = [
    "ExpressionEvaluator",
    "Value",
    "evaluate",
    "evaluate_bool",
    "evaluate_color",
    "evaluate_int",
    "evaluate_model",
]
