import pytest

from game import GameOverReason, GameSession, IllegalActionError, SessionPhase
from rulery import (
    Count,
    CountDepleted,
    DivisionByZero,
    OutcomePolicy,
    PieceColor,
    PieceModel,
    PlayerState,
    Pos,
    load_checked,
)
from rulery.expr import (
    Const,
    Div,
    Equal,
    Not,
    PosOccupied,
    Sub,
    TargetRow,
    ToPlaceCol,
    ToPlaceRow,
    TrueExpr,
)

WHITE = PieceColor.WHITE
BLACK = PieceColor.BLACK
CUBE = PieceModel.CUBE


def _stock(session: GameSession, color: PieceColor = WHITE) -> Count:
    return session.players.get(color).piece_state(CUBE).stock


def test_default_session_starts_from_initial_layout(default_rules) -> None:
    session = GameSession(default_rules)
    assert session.phase is SessionPhase.SELECTING
    assert session.current_color is WHITE
    assert [piece.pos for piece in session.pieces] == [Pos(0, 0), Pos(1, 1), Pos(2, 2)]
    assert _stock(session) == Count.finite(7)
    assert session.turn_message() == "Turn 1 (Round 1): White"


def test_session_requires_checked_rules(make_rules) -> None:
    with pytest.raises(TypeError):
        GameSession(make_rules())


def test_selection_lists_every_other_tile_under_unrestricted_movement(default_rules) -> None:
    session = GameSession(default_rules)
    moving = session.select_piece((0, 0))
    assert session.phase is SessionPhase.MOVING
    assert len(moving.movable) == 63
    assert Pos(0, 0) not in moving.movable
    assert Pos(0, 0) not in session.pieces


def test_moving_onto_the_source_cancels(default_rules) -> None:
    session = GameSession(default_rules)
    before = session.state_hash()
    session.select_piece(Pos(1, 1))
    session.move_to(Pos(1, 1))
    assert session.phase is SessionPhase.SELECTING
    assert session.turn.turn_number == 1
    assert session.state_hash() == before


def test_cancel_restores_the_lifted_piece(default_rules) -> None:
    session = GameSession(default_rules)
    with pytest.raises(IllegalActionError):
        session.cancel()
    session.select_piece((2, 2))
    session.cancel()
    assert Pos(2, 2) in session.pieces
    assert session.moving is None


def test_move_ends_the_turn(default_rules) -> None:
    session = GameSession(default_rules)
    session.select_piece((0, 0))
    session.move_to((5, 5))
    assert session.last_action == Pos(5, 5)
    assert session.pieces.get(Pos(5, 5)).color is WHITE
    # A lone player wraps around immediately.
    assert (session.turn.turn_number, session.turn.round_number) == (2, 2)
    assert session.phase is SessionPhase.SELECTING


def test_move_captures_the_occupant(make_rules) -> None:
    unchecked = make_rules(colors=(WHITE, BLACK))
    unchecked.add_initial_piece(CUBE, WHITE, (0, 0))
    unchecked.add_initial_piece(CUBE, BLACK, (0, 1))
    session = GameSession(unchecked.check())

    session.select_piece((0, 0))
    session.move_to((0, 1))
    assert len(session.pieces) == 1
    assert session.pieces.get(Pos(0, 1)).color is WHITE
    assert session.players.get(BLACK).piece_state(CUBE).captured == 1
    assert session.current_color is BLACK


def test_illegal_selections(make_rules) -> None:
    unchecked = make_rules(colors=(WHITE, BLACK))
    unchecked.add_initial_piece(CUBE, BLACK, (3, 3))
    session = GameSession(unchecked.check())
    with pytest.raises(IllegalActionError):
        session.select_piece((3, 3))
    with pytest.raises(IllegalActionError):
        session.select_piece((0, 0))
    with pytest.raises(IllegalActionError):
        session.move_to((0, 0))
    with pytest.raises(IllegalActionError):
        session.select_piece("a1")
    assert session.phase is SessionPhase.SELECTING


@pytest.mark.parametrize("pos", [[1.9, 2], [0.0, 0], [True, 0], [0, 0, 0], ["0", "0"]])
def test_positions_must_be_integer_pairs(default_rules, pos) -> None:
    session = GameSession(default_rules)
    before = session.state_hash()
    with pytest.raises(IllegalActionError):
        session.step({"type": "select", "pos": pos})
    with pytest.raises(IllegalActionError):
        session.select_piece(tuple(pos))
    assert session.state_hash() == before
    assert session.phase is SessionPhase.SELECTING


def test_placement_uses_placement_condition_and_stock(make_rules) -> None:
    free_tile = Not(arg=PosOccupied(row=ToPlaceRow(), col=ToPlaceCol()))
    unchecked = make_rules(count=Count.finite(3), placement=free_tile)
    unchecked.add_initial_piece(CUBE, WHITE, (0, 0))
    session = GameSession(unchecked.check())

    placing = session.begin_placing("cube")
    assert session.phase is SessionPhase.PLACING
    assert len(placing.placeable) == 15
    with pytest.raises(IllegalActionError):
        session.place_at((0, 0))
    session.place_at((2, 2))
    assert session.pieces.get(Pos(2, 2)).model is CUBE
    assert _stock(session) == Count.finite(1)
    assert session.players.get(WHITE).piece_state(CUBE).placed == 2


def test_begin_placing_rejects_unknown_models(default_rules) -> None:
    session = GameSession(default_rules)
    with pytest.raises(IllegalActionError):
        session.begin_placing("dragon")
    with pytest.raises(IllegalActionError):
        session.begin_placing(PieceModel.CONE)


def test_depleted_stock_cannot_be_placed(make_rules) -> None:
    session = GameSession(make_rules(count=Count.finite(1)).check())
    session.begin_placing(CUBE)
    session.place_at((1, 1))
    before = session.state_hash()
    with pytest.raises(CountDepleted):
        session.begin_placing(CUBE)
    assert session.state_hash() == before
    assert session.phase is SessionPhase.SELECTING


def test_losing_is_checked_before_winning(make_rules) -> None:
    session = GameSession(make_rules(win=TrueExpr(), lose=TrueExpr()).check())
    session.begin_placing(CUBE)
    session.place_at((0, 0))
    assert session.players.get(WHITE).state is PlayerState.LOST
    assert session.is_over
    assert session.game_over_reason is GameOverReason.NO_ACTIVE_PLAYER


def test_win_first_policy(make_rules) -> None:
    session = GameSession(make_rules(win=TrueExpr(), lose=TrueExpr()).check(), policy=OutcomePolicy.WIN_FIRST)
    session.begin_placing(CUBE)
    session.place_at((0, 0))
    assert session.players.get(WHITE).state is PlayerState.WON


def test_game_over_condition_ends_the_session(make_rules) -> None:
    session = GameSession(make_rules(game_over=TrueExpr()).check())
    session.begin_placing(CUBE)
    session.place_at((0, 0))
    assert session.phase is SessionPhase.GAME_OVER
    assert session.game_over_reason is GameOverReason.CONDITION
    assert session.players.get(WHITE).state is PlayerState.ACTIVE
    with pytest.raises(IllegalActionError):
        session.begin_placing(CUBE)
    result = session.step({"type": "place", "pos": [1, 1]})
    assert result.done
    assert result.info["message"] == "game already finished"


def test_failed_evaluation_rolls_the_step_back(make_rules) -> None:
    broken = Equal(lhs=Div(lhs=Const(value=1), rhs=Const(value=0)), rhs=Const(value=0))
    unchecked = make_rules(win=broken)
    unchecked.add_initial_piece(CUBE, WHITE, (0, 0))
    session = GameSession(unchecked.check())
    session.select_piece((0, 0))
    before = session.state_hash()

    with pytest.raises(DivisionByZero):
        session.move_to((1, 1))
    assert session.state_hash() == before
    assert session.phase is SessionPhase.MOVING
    assert Pos(1, 1) not in session.pieces
    assert session.turn.turn_number == 1


def test_tiles_whose_condition_errors_are_not_candidates(make_rules) -> None:
    one_over_row = Equal(lhs=Div(lhs=Const(value=1), rhs=Sub(lhs=TargetRow(), rhs=Const(value=0))), rhs=Const(value=1))
    unchecked = make_rules(movement=one_over_row)
    unchecked.add_initial_piece(CUBE, WHITE, (3, 3))
    session = GameSession(unchecked.check())
    moving = session.select_piece((3, 3))
    assert moving.movable == frozenset({Pos(1, 0), Pos(1, 1), Pos(1, 2), Pos(1, 3)})


def test_corner_race_capture_finishes_the_game(corner_race_path) -> None:
    session = GameSession(load_checked(corner_race_path))
    moving = session.select_piece((0, 0))
    assert moving.movable == frozenset({Pos(0, 1), Pos(1, 0), Pos(1, 1)})
    session.move_to((1, 0))

    assert session.current_color is BLACK
    session.select_piece((3, 0))
    session.move_to((2, 0))

    moving = session.select_piece((1, 0))
    assert Pos(2, 0) in moving.movable
    session.move_to((2, 0))

    assert session.is_over
    assert session.game_over_reason is GameOverReason.CONDITION
    assert session.players.get(BLACK).state is PlayerState.LOST
    assert session.players.get(WHITE).state is PlayerState.ACTIVE
    assert session.snapshot().player_states == {WHITE: PlayerState.ACTIVE, BLACK: PlayerState.LOST}


def test_corner_race_stock_caps_the_initial_layout(corner_race_path) -> None:
    rules = load_checked(corner_race_path).to_unchecked()
    rules.add_initial_piece(CUBE, WHITE, (1, 1))
    with pytest.raises(CountDepleted):
        rules.check()


def test_step_dispatches_actions(default_rules) -> None:
    session = GameSession(default_rules)
    result = session.step({"type": "select", "pos": [0, 0]})
    assert result.state["phase"] == "moving"
    assert len(result.state["moving"]["movable"]) == 63
    assert not result.done

    with pytest.raises(IllegalActionError):
        session.step({"type": "move"})
    with pytest.raises(IllegalActionError):
        session.step({"type": "jump", "pos": [1, 1]})

    result = session.step({"type": "cancel"})
    assert result.state["phase"] == "selecting"

    result = session.step({"type": "begin_placing", "model": "cube"})
    assert len(result.state["placing"]["placeable"]) == 64
    result = session.step({"type": "place", "pos": [7, 7]})
    assert result.state["turn"] == 2
    assert result.info["player_states"] == {"white": "active"}


def test_state_hash_is_deterministic(default_rules) -> None:
    first = GameSession(default_rules)
    second = GameSession(default_rules)
    assert first.state_hash() == second.state_hash()
    first.select_piece((0, 0))
    assert first.state_hash() != second.state_hash()
    first.cancel()
    assert first.state_hash() == second.state_hash()


def test_reset_restores_initial_state(default_rules) -> None:
    session = GameSession(default_rules)
    initial = session.state_hash()
    session.begin_placing(CUBE)
    session.place_at((4, 4))
    assert session.state_hash() != initial
    observation = session.reset()
    assert observation["state_hash"] == initial
    assert len(session.pieces) == 3
