"""Per-color player rules and the win/lose ordering policy."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, RootModel

from .context import Context
from .engine import evaluate_bool
from .enums import PieceColor, PlayerState
from .errors import DuplicateColor, NoSuchColor
from .expr import BoolExpr


class OutcomePolicy(str, Enum):
    """Order in which a player's lose and win conditions are consulted.

    ``LOSE_FIRST`` checks the lose condition and only looks at the win
    condition when the player has not lost, so a position satisfying both is
    a loss. ``WIN_FIRST`` is the mirror image.
    """

    LOSE_FIRST = "lose_first"
    WIN_FIRST = "win_first"


class PlayerRules(BaseModel):
    model_config = ConfigDict(extra="forbid")
    win_condition: BoolExpr
    lose_condition: BoolExpr

    def evaluate_state(self, ctx: Context, policy: OutcomePolicy = OutcomePolicy.LOSE_FIRST) -> PlayerState:
        """Return ``LOST``, ``WON`` or ``ACTIVE`` for the position in ``ctx``."""

        if OutcomePolicy(policy) is OutcomePolicy.WIN_FIRST:
            if evaluate_bool(self.win_condition, ctx):
                return PlayerState.WON
            if evaluate_bool(self.lose_condition, ctx):
                return PlayerState.LOST
            return PlayerState.ACTIVE
        if evaluate_bool(self.lose_condition, ctx):
            return PlayerState.LOST
        if evaluate_bool(self.win_condition, ctx):
            return PlayerState.WON
        return PlayerState.ACTIVE


class PlayerRuleSet(RootModel[Dict[PieceColor, PlayerRules]]):
    """Insertion-ordered ``PieceColor -> PlayerRules`` mapping; one entry per player."""

    root: Dict[PieceColor, PlayerRules] = Field(default_factory=dict)

    def add(self, color: PieceColor, rules: PlayerRules) -> None:
        color = PieceColor(color)
        if color in self.root:
            raise DuplicateColor(color)
        self.root[color] = rules

    def get_by_color(self, color: PieceColor) -> PlayerRules:
        try:
            return self.root[PieceColor(color)]
        except (KeyError, ValueError):
            raise NoSuchColor(color) from None

    def colors(self) -> List[PieceColor]:
        return list(self.root)

    def items(self) -> List[Tuple[PieceColor, PlayerRules]]:
        return list(self.root.items())

    def is_empty(self) -> bool:
        return not self.root

    def __contains__(self, color: object) -> bool:
        return color in self.root

    def __iter__(self) -> Iterator[Tuple[PieceColor, PlayerRules]]:  # type: ignore[override]
        return iter(self.root.items())

    def __len__(self) -> int:
        return len(self.root)


__all__ = ["OutcomePolicy", "PlayerRuleSet", "PlayerRules", "PlayerState"]
