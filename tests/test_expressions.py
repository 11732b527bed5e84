import pytest

from game.contexts import BoardView, GameOverContext, MovementContext, PlacementContext, WinOrLoseContext
from game.pieces import PlacedPiece, PlacedPieceIndex
from game.players import Player, Players
from game.turn import TurnSnapshot
from rulery import (
    DivisionByZero,
    NoLastAction,
    NoPieceAtPos,
    PieceColor,
    PieceModel,
    PlayerState,
    Pos,
    UnsupportedVariable,
    evaluate,
    evaluate_bool,
    evaluate_color,
    evaluate_int,
    evaluate_model,
)
from rulery.errors import AndInvalidArity, OrInvalidArity
from rulery.expr import (
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
    FalseExpr,
    GreaterOrEqual,
    GreaterThan,
    HasLastAction,
    IntIf,
    LastActionRow,
    LessOrEqual,
    LessThan,
    ModelAtPos,
    ModelEqual,
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
    SourceRow,
    Sub,
    TargetCol,
    ToPlaceModel,
    ToPlaceRow,
    TrueExpr,
    TurnNumber,
)


def _erroring() -> Equal:
    return Equal(lhs=Div(lhs=Const(value=1), rhs=Const(value=0)), rhs=Const(value=0))


def _view() -> BoardView:
    pieces = PlacedPieceIndex()
    pieces.insert(PlacedPiece(PieceModel.CUBE, PieceColor.BLACK, Pos(2, 2)))
    return BoardView(pieces=pieces, turn=TurnSnapshot(current_player=0, turn_number=4, round_number=2))


def test_and_short_circuits_on_first_false(board_context) -> None:
    assert evaluate_bool(And(args=[FalseExpr(), _erroring()]), board_context) is False
    with pytest.raises(DivisionByZero):
        evaluate_bool(And(args=[TrueExpr(), _erroring()]), board_context)


def test_or_short_circuits_on_first_true(board_context) -> None:
    assert evaluate_bool(Or(args=[TrueExpr(), _erroring()]), board_context) is True
    with pytest.raises(DivisionByZero):
        evaluate_bool(Or(args=[FalseExpr(), _erroring()]), board_context)


def test_and_or_require_two_operands(board_context) -> None:
    with pytest.raises(AndInvalidArity) as and_error:
        evaluate_bool(And(args=[TrueExpr()]), board_context)
    assert and_error.value.arity == 1
    with pytest.raises(OrInvalidArity):
        evaluate_bool(Or(args=[]), board_context)


def test_division_by_zero_is_context_independent(board_context, make_context) -> None:
    expr = Div(lhs=Const(value=5), rhs=Const(value=0))
    for ctx in (board_context, make_context()):
        with pytest.raises(DivisionByZero):
            evaluate_int(expr, ctx)


def test_division_operand_errors_surface_before_division_by_zero(make_context) -> None:
    expr = Div(lhs=LastActionRow(), rhs=Const(value=0))
    with pytest.raises(NoLastAction):
        evaluate_int(expr, make_context())


@pytest.mark.parametrize(
    ("lhs", "rhs", "expected"),
    [(7, 2, 3), (-7, 2, -3), (7, -2, -3), (-7, -2, 3), (0, 5, 0)],
)
def test_division_truncates_toward_zero(make_context, lhs: int, rhs: int, expected: int) -> None:
    expr = Div(lhs=Const(value=lhs), rhs=Const(value=rhs))
    assert evaluate_int(expr, make_context()) == expected


def test_arithmetic(make_context) -> None:
    ctx = make_context()
    expr = Abs(arg=Sub(lhs=Mul(lhs=Const(value=2), rhs=Const(value=3)), rhs=Add(lhs=Const(value=4), rhs=Const(value=5))))
    assert evaluate_int(expr, ctx) == 3


@pytest.mark.parametrize(
    ("node", "expected"),
    [
        (Equal, [False, True, False]),
        (NotEqual, [True, False, True]),
        (LessThan, [True, False, False]),
        (GreaterThan, [False, False, True]),
        (LessOrEqual, [True, True, False]),
        (GreaterOrEqual, [False, True, True]),
    ],
)
def test_comparisons(make_context, node, expected) -> None:
    ctx = make_context()
    results = [
        evaluate_bool(node(lhs=Const(value=lhs), rhs=Const(value=2)), ctx)
        for lhs in (1, 2, 3)
    ]
    assert results == expected


def test_if_evaluates_only_the_taken_branch(board_context) -> None:
    assert evaluate_bool(BoolIf(cond=TrueExpr(), then=TrueExpr(), otherwise=_erroring()), board_context)
    int_if = IntIf(cond=FalseExpr(), then=Div(lhs=Const(value=1), rhs=Const(value=0)), otherwise=Const(value=9))
    assert evaluate_int(int_if, board_context) == 9
    color_if = ColorIf(
        cond=PosOccupied(row=Const(value=0), col=Const(value=0)),
        then=ColorAtPos(row=Const(value=0), col=Const(value=0)),
        otherwise=ColorAtPos(row=Const(value=3), col=Const(value=3)),
    )
    assert evaluate_color(color_if, board_context) is PieceColor.WHITE


def test_board_queries_go_through_context(board_context) -> None:
    assert evaluate_bool(PosOccupied(row=Const(value=1), col=Const(value=1)), board_context)
    assert ("pos_occupied", Pos(1, 1)) in board_context.queries
    assert evaluate_model(ModelAtPos(row=Const(value=1), col=Const(value=1)), board_context) is PieceModel.SPHERE
    assert evaluate_bool(
        ModelEqual(lhs=ModelAtPos(row=Const(value=0), col=Const(value=0)), rhs=ModelLiteral(model=PieceModel.CUBE)),
        board_context,
    )
    assert not evaluate_bool(
        ColorEqual(lhs=ColorAtPos(row=Const(value=1), col=Const(value=1)), rhs=ColorLiteral(color=PieceColor.WHITE)),
        board_context,
    )
    with pytest.raises(NoPieceAtPos) as missing:
        evaluate_color(ColorAtPos(row=Const(value=3), col=Const(value=0)), board_context)
    assert missing.value.pos == Pos(3, 0)


def test_rect_counts_accept_corners_in_any_order(board_context) -> None:
    corners = dict(row1=Const(value=2), col1=Const(value=2), row2=Const(value=0), col2=Const(value=0))
    assert evaluate_int(CountInRect(**corners), board_context) == 3
    white_cubes = CountPieceInRect(
        model=ModelLiteral(model=PieceModel.CUBE), color=ColorLiteral(color=PieceColor.WHITE), **corners
    )
    assert evaluate_int(white_cubes, board_context) == 2


def test_turn_variables(board_context) -> None:
    assert evaluate_int(TurnNumber(), board_context) == 5
    assert evaluate_int(RoundNumber(), board_context) == 3
    assert evaluate_bool(HasLastAction(), board_context) is False
    assert evaluate_bool(Not(arg=HasLastAction()), board_context) is True


def test_movement_context_answers_movement_variables() -> None:
    moving = PlacedPiece(PieceModel.CUBE, PieceColor.WHITE, Pos(0, 1))
    ctx = MovementContext(_view(), moving, Pos(3, 1))
    assert evaluate_int(SourceRow(), ctx) == 0
    assert evaluate_int(TargetCol(), ctx) == 1
    assert evaluate_color(MovingColor(), ctx) is PieceColor.WHITE
    assert evaluate_model(MovingModel(), ctx) is PieceModel.CUBE
    with pytest.raises(UnsupportedVariable) as unsupported:
        evaluate_int(ToPlaceRow(), ctx)
    assert unsupported.value.variable == "to_place_row"


def test_placement_context_rejects_movement_variables() -> None:
    ctx = PlacementContext(_view(), PieceModel.SPHERE, PieceColor.RED, Pos(1, 3))
    assert evaluate_int(ToPlaceRow(), ctx) == 1
    assert evaluate_model(ToPlaceModel(), ctx) is PieceModel.SPHERE
    with pytest.raises(UnsupportedVariable) as unsupported:
        evaluate_int(SourceRow(), ctx)
    assert unsupported.value.variable == "source_row"
    assert "placement" in str(unsupported.value)


def test_player_state_is_only_known_when_game_over() -> None:
    players = Players({PieceColor.WHITE: Player(state=PlayerState.WON), PieceColor.BLACK: Player()})
    query = PlayerStateEqual(color=PieceColor.WHITE, state=PlayerState.WON)
    assert evaluate_bool(query, GameOverContext(_view(), players)) is True
    with pytest.raises(UnsupportedVariable):
        evaluate_bool(query, WinOrLoseContext(_view()))


def test_generic_evaluate_dispatches_on_node_kind(board_context) -> None:
    assert evaluate(TrueExpr(), board_context) is True
    assert evaluate(Const(value=4), board_context) == 4
    assert evaluate(ColorLiteral(color=PieceColor.CYAN), board_context) is PieceColor.CYAN
    assert TrueExpr().evaluate(board_context) is True


def test_walk_is_pre_order() -> None:
    expr = And(args=[Not(arg=TrueExpr()), Equal(lhs=Const(value=1), rhs=TurnNumber())])
    kinds = [node.type_name for node in expr.walk()]
    assert kinds == ["and", "not", "true", "equal", "const", "turn_number"]
