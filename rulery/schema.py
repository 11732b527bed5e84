"""Pydantic model describing a whole rule document."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from .board import BoardRuleSet
from .expr import BoolExpr, FalseExpr
from .initial_layout import InitialLayout
from .piece import PieceRuleSet
from .player import PlayerRuleSet


class GameRules(BaseModel):
    """The rule-set aggregate shared by the unchecked and checked phases.

    Every field is required when parsing a document; the defaults only serve
    programmatic construction of an empty, editable rule set.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)
    name: str = ""
    board: BoardRuleSet = Field(default_factory=lambda: BoardRuleSet(rows=8, cols=8))
    pieces: PieceRuleSet = Field(default_factory=PieceRuleSet)
    players: PlayerRuleSet = Field(default_factory=PlayerRuleSet)
    initial_layout: InitialLayout = Field(default_factory=InitialLayout)
    game_over_condition: BoolExpr = Field(default_factory=FalseExpr)


REQUIRED_FIELDS = tuple(GameRules.model_fields)


def get_rules_json_schema() -> Dict[str, Any]:
    """Return the JSON schema of rule documents."""

    return GameRules.model_json_schema(by_alias=True)


__all__ = ["GameRules", "REQUIRED_FIELDS", "get_rules_json_schema"]
