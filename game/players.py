"""Per-player standing and piece stock."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from rulery import CheckedGameRules, Count, PieceColor, PieceModel, PlayerState

from .errors import SessionInvariantError


@dataclass
class PieceState:
    """Remaining stock of one model for one player, plus placement statistics."""

    stock: Count
    placed: int = 0
    captured: int = 0

    def try_take_stock(self) -> None:
        """Consume one unit of stock; raises :class:`~rulery.errors.CountDepleted` when empty."""

        self.stock.decrease()
        self.placed += 1

    def record_capture(self) -> None:
        self.captured += 1

    def to_payload(self) -> Dict[str, object]:
        return {"stock": str(self.stock), "placed": self.placed, "captured": self.captured}

    def copy(self) -> "PieceState":
        return PieceState(stock=self.stock.model_copy(), placed=self.placed, captured=self.captured)


@dataclass
class Player:
    state: PlayerState = PlayerState.ACTIVE
    pieces: Dict[PieceModel, PieceState] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.state is PlayerState.ACTIVE

    def finish(self, state: PlayerState) -> None:
        """Move an active player to ``WON`` or ``LOST``."""

        if state is PlayerState.ACTIVE:
            return
        if not self.is_active:
            raise SessionInvariantError(f"player already finished as {self.state}, cannot become {state}")
        self.state = state

    def piece_state(self, model: PieceModel) -> PieceState:
        try:
            return self.pieces[model]
        except KeyError as exc:
            raise SessionInvariantError(f"player has no stock entry for {model}") from exc

    def copy(self) -> "Player":
        return Player(state=self.state, pieces={model: piece.copy() for model, piece in self.pieces.items()})


class Players:
    """Insertion-ordered registry ``PieceColor -> Player``; index order is turn order."""

    def __init__(self, players: Dict[PieceColor, Player]) -> None:
        self._players = dict(players)
        self._order: List[PieceColor] = list(self._players)

    @classmethod
    def from_rules(cls, rules: CheckedGameRules) -> "Players":
        """One active player per declared color with stock copied from the piece caps."""

        players: Dict[PieceColor, Player] = {}
        for color in rules.player_colors():
            pieces = {model: PieceState(stock=piece.count.model_copy()) for model, piece in rules.pieces()}
            players[color] = Player(pieces=pieces)
        return cls(players)

    def num(self) -> int:
        return len(self._order)

    def colors(self) -> List[PieceColor]:
        return list(self._order)

    def get(self, color: PieceColor) -> Player:
        try:
            return self._players[color]
        except KeyError as exc:
            raise SessionInvariantError(f"no player for color {color}") from exc

    def get_by_index(self, index: int) -> Tuple[PieceColor, Player]:
        color = self._order[index]
        return color, self._players[color]

    def color_at(self, index: int) -> PieceColor:
        return self._order[index]

    def states(self) -> List[PlayerState]:
        return [self._players[color].state for color in self._order]

    def active_colors(self) -> List[PieceColor]:
        return [color for color in self._order if self._players[color].is_active]

    def player_states_message(self) -> str:
        return ", ".join(f"{color}: {self._players[color].state}" for color in self._order)

    def copy(self) -> "Players":
        return Players({color: player.copy() for color, player in self._players.items()})

    def to_payload(self) -> Dict[str, object]:
        return {
            color.value: {
                "state": player.state.value,
                "pieces": {model.value: piece.to_payload() for model, piece in player.pieces.items()},
            }
            for color, player in self._players.items()
        }

    def __iter__(self) -> Iterator[Tuple[PieceColor, Player]]:
        return iter((color, self._players[color]) for color in self._order)

    def __len__(self) -> int:
        return len(self._order)


__all__ = ["PieceState", "Player", "Players"]
