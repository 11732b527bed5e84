"""Turn controller: whose turn it is, plus turn and round counters.

The controller starts at player 0, turn 1, round 1. :meth:`TurnController.advance_turn`
looks for the next active player after the current one, wrapping around at
most once. Wrapping back to an index at or before the current one starts a new
round. When nobody is left to move it raises :class:`~game.errors.NoActivePlayer`
and leaves every counter untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from rulery import PlayerState

from .errors import NoActivePlayer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnSnapshot:
    current_player: int
    turn_number: int
    round_number: int


class TurnController:
    def __init__(self) -> None:
        self._current_player: int = 0
        self._turn_number: int = 1
        self._round_number: int = 1

    @property
    def current_player(self) -> int:
        return self._current_player

    @property
    def turn_number(self) -> int:
        return self._turn_number

    @property
    def round_number(self) -> int:
        return self._round_number

    def snapshot(self) -> TurnSnapshot:
        return TurnSnapshot(
            current_player=self._current_player,
            turn_number=self._turn_number,
            round_number=self._round_number,
        )

    def restore(self, snapshot: TurnSnapshot) -> None:
        self._current_player = snapshot.current_player
        self._turn_number = snapshot.turn_number
        self._round_number = snapshot.round_number

    def reset(self) -> None:
        """Return the controller to player 0, turn 1, round 1."""

        self._current_player = 0
        self._turn_number = 1
        self._round_number = 1

    def advance_turn(self, states: Sequence[PlayerState]) -> int:
        """Hand the turn to the next active player and return its index.

        ``states`` holds every player's state in turn order.
        """

        count = len(states)
        for offset in range(1, count + 1):
            next_index = (self._current_player + offset) % count
            if states[next_index] != PlayerState.ACTIVE:
                continue
            if next_index <= self._current_player:
                self._round_number += 1
            self._turn_number += 1
            self._current_player = next_index
            logger.debug(
                "Turn %d (round %d) goes to player %d",
                self._turn_number,
                self._round_number,
                next_index,
            )
            return next_index
        raise NoActivePlayer()

    def turn_message(self, player_name: str) -> str:
        return f"Turn {self._turn_number} (Round {self._round_number}): {player_name}"


__all__ = ["TurnController", "TurnSnapshot"]
