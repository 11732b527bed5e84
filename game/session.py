"""Game session driving the select / move / place / cancel step protocol."""

from __future__ import annotations

import hashlib
import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from rulery import (
    CheckedGameRules,
    CountDepleted,
    EvaluationError,
    OutcomePolicy,
    PieceColor,
    PieceModel,
    PlayerState,
    Pos,
)

from .candidates import MovingPiece, PlacingPiece
from .contexts import BoardView, GameOverContext, WinOrLoseContext
from .errors import IllegalActionError, NoActivePlayer
from .pieces import PlacedPiece, PlacedPieceIndex
from .players import Players
from .tiles import TileIndex
from .turn import TurnController, TurnSnapshot
from .types import StepResult

logger = logging.getLogger(__name__)

PosLike = Union[Pos, Tuple[int, int], List[int]]


class SessionPhase(str, Enum):
    SELECTING = "selecting"
    MOVING = "moving"
    PLACING = "placing"
    GAME_OVER = "game_over"


class GameOverReason(str, Enum):
    CONDITION = "condition"
    NO_ACTIVE_PLAYER = "no_active_player"


@dataclass(frozen=True)
class SessionSnapshot:
    """Serialisation friendly view of the session state."""

    phase: SessionPhase
    current_color: PieceColor
    turn_number: int
    round_number: int
    last_action: Optional[Pos]
    pieces: Tuple[PlacedPiece, ...]
    player_states: Dict[PieceColor, PlayerState] = field(default_factory=dict)
    game_over_reason: Optional[GameOverReason] = None


@dataclass
class _SavedState:
    players: Players
    pieces: PlacedPieceIndex
    turn: TurnSnapshot
    last_action: Optional[Pos]
    phase: SessionPhase
    moving: Optional[MovingPiece]
    placing: Optional[PlacingPiece]
    game_over_reason: Optional[GameOverReason]


def _as_pos(value: PosLike) -> Pos:
    if isinstance(value, Pos):
        return value
    try:
        coords = tuple(value)
    except TypeError as exc:
        raise IllegalActionError(f"invalid position {value!r}") from exc
    if len(coords) != 2 or not all(isinstance(v, int) and not isinstance(v, bool) for v in coords):
        raise IllegalActionError(f"invalid position {value!r}")
    return Pos.from_tuple(coords)


def _action_field(action: Dict[str, Any], key: str) -> Any:
    try:
        return action[key]
    except KeyError:
        raise IllegalActionError(f"action {action.get('type')!r} requires '{key}'") from None


class GameSession:
    """One game played under a checked rule set.

    Steps must be issued one at a time by a single driver. A step that raises
    :class:`~rulery.errors.EvaluationError` leaves the session exactly as it
    was before the step.
    """

    def __init__(self, rules: CheckedGameRules, *, policy: OutcomePolicy = OutcomePolicy.LOSE_FIRST) -> None:
        if not isinstance(rules, CheckedGameRules):
            raise TypeError("GameSession requires CheckedGameRules; call UncheckedGameRules.check() first")
        self._rules = rules
        self._policy = OutcomePolicy(policy)
        self._tiles = TileIndex.from_rules(rules)
        self.reset()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def reset(self) -> Dict[str, Any]:
        """Start over from the initial layout."""

        self._players = Players.from_rules(self._rules)
        self._pieces = PlacedPieceIndex()
        self._turn = TurnController()
        self._last_action: Optional[Pos] = None
        self._phase = SessionPhase.SELECTING
        self._moving: Optional[MovingPiece] = None
        self._placing: Optional[PlacingPiece] = None
        self._game_over_reason: Optional[GameOverReason] = None
        for initial in self._rules.initial_pieces():
            self._players.get(initial.color).piece_state(initial.model).try_take_stock()
            self._pieces.insert(PlacedPiece(initial.model, initial.color, initial.pos))
        logger.info(
            "Session started with rules %r: %d player(s), %d initial piece(s)",
            self._rules.name,
            self._players.num(),
            len(self._pieces),
        )
        return self.observation()

    @property
    def rules(self) -> CheckedGameRules:
        return self._rules

    @property
    def policy(self) -> OutcomePolicy:
        return self._policy

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_over(self) -> bool:
        return self._phase is SessionPhase.GAME_OVER

    @property
    def game_over_reason(self) -> Optional[GameOverReason]:
        return self._game_over_reason

    @property
    def current_color(self) -> PieceColor:
        return self._players.color_at(self._turn.current_player)

    @property
    def turn(self) -> TurnController:
        return self._turn

    @property
    def players(self) -> Players:
        return self._players

    @property
    def pieces(self) -> PlacedPieceIndex:
        return self._pieces

    @property
    def tiles(self) -> TileIndex:
        return self._tiles

    @property
    def last_action(self) -> Optional[Pos]:
        return self._last_action

    @property
    def moving(self) -> Optional[MovingPiece]:
        return self._moving

    @property
    def placing(self) -> Optional[PlacingPiece]:
        return self._placing

    def board_view(self) -> BoardView:
        return BoardView(pieces=self._pieces, turn=self._turn.snapshot(), last_action=self._last_action)

    # ------------------------------------------------------------ step protocol
    def select_piece(self, pos: PosLike) -> MovingPiece:
        """Lift the current player's piece at ``pos`` and compute where it may go."""

        pos = _as_pos(pos)
        self._require_phase(SessionPhase.SELECTING)
        piece = self._pieces.get(pos)
        if piece is None:
            raise IllegalActionError(f"no piece at {pos}")
        if piece.color != self.current_color:
            raise IllegalActionError(f"piece at {pos} belongs to {piece.color}, not {self.current_color}")
        with self._transaction():
            self._pieces.take(pos)
            self._moving = MovingPiece.collect_movable(piece, self.board_view(), self._tiles, self._rules)
            self._phase = SessionPhase.MOVING
        return self._moving

    def move_to(self, pos: PosLike) -> None:
        """Move the selected piece. Moving onto its own tile cancels the selection."""

        pos = _as_pos(pos)
        self._require_phase(SessionPhase.MOVING)
        assert self._moving is not None
        if self._moving.is_cancel_target(pos):
            self.cancel()
            return
        if not self._moving.can_move_to(pos):
            raise IllegalActionError(f"{self._moving.piece.model} at {self._moving.source} cannot move to {pos}")
        with self._transaction():
            piece = self._moving.piece
            self._capture(pos)
            self._pieces.insert(piece.moved_to(pos))
            self._last_action = pos
            self._moving = None
            logger.info("%s moved %s from %s to %s", piece.color, piece.model, piece.pos, pos)
            self._end_turn()

    def begin_placing(self, model: Union[PieceModel, str]) -> PlacingPiece:
        """Choose a model from the current player's stock and compute where it may be placed."""

        self._require_phase(SessionPhase.SELECTING)
        try:
            model = PieceModel(model)
        except ValueError as exc:
            raise IllegalActionError(f"unknown piece model {model!r}") from exc
        if model not in self._rules.piece_models():
            raise IllegalActionError(f"{model} is not part of these rules")
        color = self.current_color
        if self._players.get(color).piece_state(model).stock.is_depleted():
            raise CountDepleted(f"{color} has no {model} left in stock")
        with self._transaction():
            self._placing = PlacingPiece.collect_placeable(model, color, self.board_view(), self._tiles, self._rules)
            self._phase = SessionPhase.PLACING
        return self._placing

    def place_at(self, pos: PosLike) -> None:
        pos = _as_pos(pos)
        self._require_phase(SessionPhase.PLACING)
        assert self._placing is not None
        if not self._placing.can_place_at(pos):
            raise IllegalActionError(f"{self._placing.model} cannot be placed at {pos}")
        with self._transaction():
            placing = self._placing
            self._players.get(placing.color).piece_state(placing.model).try_take_stock()
            self._capture(pos)
            self._pieces.insert(PlacedPiece(placing.model, placing.color, pos))
            self._last_action = pos
            self._placing = None
            logger.info("%s placed %s at %s", placing.color, placing.model, pos)
            self._end_turn()

    def cancel(self) -> None:
        """Discard a pending selection or placement."""

        if self._phase is SessionPhase.MOVING:
            assert self._moving is not None
            self._pieces.insert(self._moving.piece)
            self._moving = None
        elif self._phase is SessionPhase.PLACING:
            self._placing = None
        else:
            raise IllegalActionError(f"nothing to cancel during {self._phase.value}")
        self._phase = SessionPhase.SELECTING

    def step(self, action: Dict[str, Any]) -> StepResult:
        """Dispatch a ``{"type": ..., ...}`` action to the matching step."""

        if self.is_over:
            return StepResult(self.observation(), True, {"message": "game already finished"})
        kind = action.get("type")
        if kind == "select":
            self.select_piece(_action_field(action, "pos"))
        elif kind == "move":
            self.move_to(_action_field(action, "pos"))
        elif kind == "begin_placing":
            self.begin_placing(_action_field(action, "model"))
        elif kind == "place":
            self.place_at(_action_field(action, "pos"))
        elif kind == "cancel":
            self.cancel()
        else:
            raise IllegalActionError(f"unknown action type {kind!r}")
        return StepResult(self.observation(), self.is_over, self._build_info())

    # --------------------------------------------------------------- inspection
    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            current_color=self.current_color,
            turn_number=self._turn.turn_number,
            round_number=self._turn.round_number,
            last_action=self._last_action,
            pieces=tuple(self._pieces.pieces()),
            player_states={color: player.state for color, player in self._players},
            game_over_reason=self._game_over_reason,
        )

    def observation(self) -> Dict[str, Any]:
        observation: Dict[str, Any] = {
            "rules": self._rules.name,
            "phase": self._phase.value,
            "current_player": self.current_color.value,
            "turn": self._turn.turn_number,
            "round": self._turn.round_number,
            "last_action": list(self._last_action.as_tuple()) if self._last_action else None,
            "pieces": [piece.to_payload() for piece in self._pieces],
            "players": self._players.to_payload(),
            "state_hash": self.state_hash(),
        }
        if self._moving is not None:
            observation["moving"] = {
                "piece": self._moving.piece.to_payload(),
                "movable": [list(pos.as_tuple()) for pos in sorted(self._moving.movable)],
            }
        if self._placing is not None:
            observation["placing"] = {
                "model": self._placing.model.value,
                "color": self._placing.color.value,
                "placeable": [list(pos.as_tuple()) for pos in sorted(self._placing.placeable)],
            }
        if self._game_over_reason is not None:
            observation["game_over_reason"] = self._game_over_reason.value
        return observation

    def turn_message(self) -> str:
        return self._turn.turn_message(str(self.current_color))

    def state_hash(self) -> str:
        """Return a deterministic hash for the current session state."""

        payload = {
            "rules": self._rules.name,
            "phase": self._phase.value,
            "turn": {
                "current_player": self._turn.current_player,
                "turn_number": self._turn.turn_number,
                "round_number": self._turn.round_number,
            },
            "last_action": list(self._last_action.as_tuple()) if self._last_action else None,
            "pieces": [piece.to_payload() for piece in self._pieces],
            "players": self._players.to_payload(),
            "moving": self._moving.piece.to_payload() if self._moving else None,
            "placing": [self._placing.model.value, self._placing.color.value] if self._placing else None,
            "game_over_reason": self._game_over_reason.value if self._game_over_reason else None,
        }
        return hashlib.sha256(json.dumps(payload, sort_keys=True).encode("utf8")).hexdigest()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_phase(self, phase: SessionPhase) -> None:
        if self._phase is SessionPhase.GAME_OVER:
            raise IllegalActionError("the game is over")
        if self._phase is not phase:
            raise IllegalActionError(f"expected phase {phase.value}, session is {self._phase.value}")

    def _save(self) -> _SavedState:
        return _SavedState(
            players=self._players.copy(),
            pieces=self._pieces.copy(),
            turn=self._turn.snapshot(),
            last_action=self._last_action,
            phase=self._phase,
            moving=self._moving,
            placing=self._placing,
            game_over_reason=self._game_over_reason,
        )

    def _restore(self, saved: _SavedState) -> None:
        self._players = saved.players
        self._pieces = saved.pieces
        self._turn.restore(saved.turn)
        self._last_action = saved.last_action
        self._phase = saved.phase
        self._moving = saved.moving
        self._placing = saved.placing
        self._game_over_reason = saved.game_over_reason

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        saved = self._save()
        try:
            yield
        except EvaluationError as exc:
            self._restore(saved)
            logger.warning("Step rolled back: [%s] %s", exc.code, exc)
            raise

    def _capture(self, pos: Pos) -> None:
        captured = self._pieces.remove(pos)
        if captured is not None:
            self._players.get(captured.color).piece_state(captured.model).record_capture()
            logger.info("%s %s at %s was captured", captured.color, captured.model, pos)

    def _end_turn(self) -> None:
        view = self.board_view()
        for color, player in self._players:
            if not player.is_active:
                continue
            state = self._rules.get_player(color).evaluate_state(WinOrLoseContext(view), self._policy)
            if state is not PlayerState.ACTIVE:
                logger.info("%s has %s", color, state.value)
            player.finish(state)

        if self._rules.evaluate_game_over_condition(GameOverContext(view, self._players)):
            self._finish(GameOverReason.CONDITION)
            return
        try:
            self._turn.advance_turn(self._players.states())
        except NoActivePlayer:
            self._finish(GameOverReason.NO_ACTIVE_PLAYER)
            return
        self._phase = SessionPhase.SELECTING
        logger.debug("%s", self.turn_message())

    def _finish(self, reason: GameOverReason) -> None:
        self._phase = SessionPhase.GAME_OVER
        self._game_over_reason = reason
        logger.info("Game over (%s): %s", reason.value, self._players.player_states_message())

    def _build_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "player_states": {color.value: player.state.value for color, player in self._players},
            "state_hash": self.state_hash(),
        }
        if self._game_over_reason is not None:
            info["game_over_reason"] = self._game_over_reason.value
        return info


__all__ = ["GameOverReason", "GameSession", "SessionPhase", "SessionSnapshot"]
