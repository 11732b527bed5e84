"""Pydantic models describing the JSON expression trees used by rule documents.

Four expression kinds reference each other: :data:`BoolExpr`, :data:`IntExpr`,
:data:`ColorExpr` and :data:`ModelExpr`. Each is a closed union of frozen node
models discriminated by the ``"type"`` field, e.g.::

    {"type": "and", "args": [{"type": "true"}, {"type": "has_last_action"}]}

Nodes only describe the tree. Evaluation lives in :mod:`rulery.engine` and
always goes through a :class:`rulery.context.Context`.

Some nodes are scenario variables (``moving_color``, ``source_row``,
``player_state_equal`` ...). They may appear in any tree, but ``scenarios``
lists where they are applicable; the checker rejects them elsewhere and a
context of another scenario refuses to answer them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, ClassVar, FrozenSet, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter

from .enums import PieceColor, PieceModel, PlayerState, Scenario

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .context import Context

_MOVEMENT = frozenset({Scenario.MOVEMENT})
_PLACEMENT = frozenset({Scenario.PLACEMENT})
_GAME_OVER = frozenset({Scenario.GAME_OVER})


class Expr(BaseModel):
    """Common base of every expression node."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    #: Scenarios in which the node may be evaluated; ``None`` means all of them.
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = None

    @property
    def type_name(self) -> str:
        return getattr(self, "kind")

    def children(self) -> Iterator["Expr"]:
        """Yield the direct sub-expressions in field order."""

        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, Expr):
                yield value
            elif isinstance(value, (list, tuple)):
                for item in value:
                    if isinstance(item, Expr):
                        yield item

    def walk(self) -> Iterator["Expr"]:
        """Yield this node and all of its descendants, pre-order."""

        yield self
        for child in self.children():
            yield from child.walk()

    def evaluate(self, ctx: "Context") -> Any:
        from .engine import evaluate

        return evaluate(self, ctx)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# ------------------------------------------------------------------- boolean
class TrueExpr(Expr):
    kind: Literal["true"] = Field(alias="type", default="true")


class FalseExpr(Expr):
    kind: Literal["false"] = Field(alias="type", default="false")


class And(Expr):
    """Logical AND over two or more operands, short-circuiting on ``false``."""

    kind: Literal["and"] = Field(alias="type", default="and")
    args: List["BoolExpr"] = Field(default_factory=list)


class Or(Expr):
    """Logical OR over two or more operands, short-circuiting on ``true``."""

    kind: Literal["or"] = Field(alias="type", default="or")
    args: List["BoolExpr"] = Field(default_factory=list)


class Not(Expr):
    kind: Literal["not"] = Field(alias="type", default="not")
    arg: "BoolExpr"


class _IntComparison(Expr):
    lhs: "IntExpr"
    rhs: "IntExpr"


class Equal(_IntComparison):
    kind: Literal["equal"] = Field(alias="type", default="equal")


class NotEqual(_IntComparison):
    kind: Literal["not_equal"] = Field(alias="type", default="not_equal")


class LessThan(_IntComparison):
    kind: Literal["less_than"] = Field(alias="type", default="less_than")


class GreaterThan(_IntComparison):
    kind: Literal["greater_than"] = Field(alias="type", default="greater_than")


class LessOrEqual(_IntComparison):
    kind: Literal["less_or_equal"] = Field(alias="type", default="less_or_equal")


class GreaterOrEqual(_IntComparison):
    kind: Literal["greater_or_equal"] = Field(alias="type", default="greater_or_equal")


class BoolIf(Expr):
    kind: Literal["if"] = Field(alias="type", default="if")
    cond: "BoolExpr"
    then: "BoolExpr"
    otherwise: "BoolExpr"


class ColorEqual(Expr):
    kind: Literal["color_equal"] = Field(alias="type", default="color_equal")
    lhs: "ColorExpr"
    rhs: "ColorExpr"


class ModelEqual(Expr):
    kind: Literal["model_equal"] = Field(alias="type", default="model_equal")
    lhs: "ModelExpr"
    rhs: "ModelExpr"


class PosOccupied(Expr):
    """Whether any piece stands on the given tile."""

    kind: Literal["pos_occupied"] = Field(alias="type", default="pos_occupied")
    row: "IntExpr"
    col: "IntExpr"


class HasLastAction(Expr):
    kind: Literal["has_last_action"] = Field(alias="type", default="has_last_action")


class PlayerStateEqual(Expr):
    """Whether the player of ``color`` currently has ``state`` (game over only)."""

    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _GAME_OVER

    kind: Literal["player_state_equal"] = Field(alias="type", default="player_state_equal")
    color: PieceColor
    state: PlayerState


# ------------------------------------------------------------------- integer
class Const(Expr):
    kind: Literal["const"] = Field(alias="type", default="const")
    value: StrictInt


class _IntBinary(Expr):
    lhs: "IntExpr"
    rhs: "IntExpr"


class Add(_IntBinary):
    kind: Literal["add"] = Field(alias="type", default="add")


class Sub(_IntBinary):
    kind: Literal["sub"] = Field(alias="type", default="sub")


class Mul(_IntBinary):
    kind: Literal["mul"] = Field(alias="type", default="mul")


class Div(_IntBinary):
    """Integer division truncating toward zero; a zero divisor is an error."""

    kind: Literal["div"] = Field(alias="type", default="div")


class Abs(Expr):
    kind: Literal["abs"] = Field(alias="type", default="abs")
    arg: "IntExpr"


class IntIf(Expr):
    kind: Literal["if"] = Field(alias="type", default="if")
    cond: "BoolExpr"
    then: "IntExpr"
    otherwise: "IntExpr"


class TurnNumber(Expr):
    kind: Literal["turn_number"] = Field(alias="type", default="turn_number")


class RoundNumber(Expr):
    kind: Literal["round_number"] = Field(alias="type", default="round_number")


class LastActionRow(Expr):
    kind: Literal["last_action_row"] = Field(alias="type", default="last_action_row")


class LastActionCol(Expr):
    kind: Literal["last_action_col"] = Field(alias="type", default="last_action_col")


class CountInRect(Expr):
    """Number of pieces inside the rectangle spanned by two corners."""

    kind: Literal["count_in_rect"] = Field(alias="type", default="count_in_rect")
    row1: "IntExpr"
    col1: "IntExpr"
    row2: "IntExpr"
    col2: "IntExpr"


class CountPieceInRect(Expr):
    """Number of pieces of one model and color inside a rectangle."""

    kind: Literal["count_piece_in_rect"] = Field(alias="type", default="count_piece_in_rect")
    model: "ModelExpr"
    color: "ColorExpr"
    row1: "IntExpr"
    col1: "IntExpr"
    row2: "IntExpr"
    col2: "IntExpr"


class SourceRow(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _MOVEMENT
    kind: Literal["source_row"] = Field(alias="type", default="source_row")


class SourceCol(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _MOVEMENT
    kind: Literal["source_col"] = Field(alias="type", default="source_col")


class TargetRow(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _MOVEMENT
    kind: Literal["target_row"] = Field(alias="type", default="target_row")


class TargetCol(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _MOVEMENT
    kind: Literal["target_col"] = Field(alias="type", default="target_col")


class ToPlaceRow(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _PLACEMENT
    kind: Literal["to_place_row"] = Field(alias="type", default="to_place_row")


class ToPlaceCol(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _PLACEMENT
    kind: Literal["to_place_col"] = Field(alias="type", default="to_place_col")


# --------------------------------------------------------------------- color
class ColorLiteral(Expr):
    kind: Literal["literal"] = Field(alias="type", default="literal")
    color: PieceColor


class ColorIf(Expr):
    kind: Literal["if"] = Field(alias="type", default="if")
    cond: "BoolExpr"
    then: "ColorExpr"
    otherwise: "ColorExpr"


class ColorAtPos(Expr):
    kind: Literal["color_at_pos"] = Field(alias="type", default="color_at_pos")
    row: "IntExpr"
    col: "IntExpr"


class MovingColor(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _MOVEMENT
    kind: Literal["moving_color"] = Field(alias="type", default="moving_color")


class ToPlaceColor(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _PLACEMENT
    kind: Literal["to_place_color"] = Field(alias="type", default="to_place_color")


# --------------------------------------------------------------------- model
class ModelLiteral(Expr):
    kind: Literal["literal"] = Field(alias="type", default="literal")
    model: PieceModel


class ModelIf(Expr):
    kind: Literal["if"] = Field(alias="type", default="if")
    cond: "BoolExpr"
    then: "ModelExpr"
    otherwise: "ModelExpr"


class ModelAtPos(Expr):
    kind: Literal["model_at_pos"] = Field(alias="type", default="model_at_pos")
    row: "IntExpr"
    col: "IntExpr"


class MovingModel(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _MOVEMENT
    kind: Literal["moving_model"] = Field(alias="type", default="moving_model")


class ToPlaceModel(Expr):
    scenarios: ClassVar[Optional[FrozenSet[Scenario]]] = _PLACEMENT
    kind: Literal["to_place_model"] = Field(alias="type", default="to_place_model")


BoolExpr = Annotated[
    Union[
        TrueExpr,
        FalseExpr,
        And,
        Or,
        Not,
        Equal,
        NotEqual,
        LessThan,
        GreaterThan,
        LessOrEqual,
        GreaterOrEqual,
        BoolIf,
        ColorEqual,
        ModelEqual,
        PosOccupied,
        HasLastAction,
        PlayerStateEqual,
    ],
    Field(discriminator="kind"),
]

IntExpr = Annotated[
    Union[
        Const,
        Add,
        Sub,
        Mul,
        Div,
        Abs,
        IntIf,
        TurnNumber,
        RoundNumber,
        LastActionRow,
        LastActionCol,
        CountInRect,
        CountPieceInRect,
        SourceRow,
        SourceCol,
        TargetRow,
        TargetCol,
        ToPlaceRow,
        ToPlaceCol,
    ],
    Field(discriminator="kind"),
]

ColorExpr = Annotated[
    Union[ColorLiteral, ColorIf, ColorAtPos, MovingColor, ToPlaceColor],
    Field(discriminator="kind"),
]

ModelExpr = Annotated[
    Union[ModelLiteral, ModelIf, ModelAtPos, MovingModel, ToPlaceModel],
    Field(discriminator="kind"),
]

BOOL_NODES = (
    TrueExpr,
    FalseExpr,
    And,
    Or,
    Not,
    Equal,
    NotEqual,
    LessThan,
    GreaterThan,
    LessOrEqual,
    GreaterOrEqual,
    BoolIf,
    ColorEqual,
    ModelEqual,
    PosOccupied,
    HasLastAction,
    PlayerStateEqual,
)
INT_NODES = (
    Const,
    Add,
    Sub,
    Mul,
    Div,
    Abs,
    IntIf,
    TurnNumber,
    RoundNumber,
    LastActionRow,
    LastActionCol,
    CountInRect,
    CountPieceInRect,
    SourceRow,
    SourceCol,
    TargetRow,
    TargetCol,
    ToPlaceRow,
    ToPlaceCol,
)
COLOR_NODES = (ColorLiteral, ColorIf, ColorAtPos, MovingColor, ToPlaceColor)
MODEL_NODES = (ModelLiteral, ModelIf, ModelAtPos, MovingModel, ToPlaceModel)

for _node in (_IntComparison, _IntBinary) + BOOL_NODES + INT_NODES + COLOR_NODES + MODEL_NODES:
    _node.model_rebuild()
del _node

BOOL_EXPR_ADAPTER: TypeAdapter = TypeAdapter(BoolExpr)
INT_EXPR_ADAPTER: TypeAdapter = TypeAdapter(IntExpr)
COLOR_EXPR_ADAPTER: TypeAdapter = TypeAdapter(ColorExpr)
MODEL_EXPR_ADAPTER: TypeAdapter = TypeAdapter(ModelExpr)


__all__ = [
    "Abs",
    "Add",
    "And",
    "BOOL_EXPR_ADAPTER",
    "BOOL_NODES",
    "BoolExpr",
    "BoolIf",
    "COLOR_EXPR_ADAPTER",
    "COLOR_NODES",
    "ColorAtPos",
    "ColorEqual",
    "ColorExpr",
    "ColorIf",
    "ColorLiteral",
    "Const",
    "CountInRect",
    "CountPieceInRect",
    "Div",
    "Equal",
    "Expr",
    "FalseExpr",
    "GreaterOrEqual",
    "GreaterThan",
    "HasLastAction",
    "INT_EXPR_ADAPTER",
    "INT_NODES",
    "IntExpr",
    "IntIf",
    "LastActionCol",
    "LastActionRow",
    "LessOrEqual",
    "LessThan",
    "MODEL_EXPR_ADAPTER",
    "MODEL_NODES",
    "ModelAtPos",
    "ModelEqual",
    "ModelExpr",
    "ModelIf",
    "ModelLiteral",
    "MovingColor",
    "MovingModel",
    "Mul",
    "Not",
    "NotEqual",
    "Or",
    "PlayerStateEqual",
    "PosOccupied",
    "RoundNumber",
    "SourceCol",
    "SourceRow",
    "Sub",
    "TargetCol",
    "TargetRow",
    "ToPlaceCol",
    "ToPlaceColor",
    "ToPlaceModel",
    "ToPlaceRow",
    "TrueExpr",
    "TurnNumber",
]
