"""Per-model piece rules."""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, RootModel

from .context import Context
from .count import Count
from .engine import evaluate_bool
from .enums import PieceColor, PieceModel
from .errors import DuplicateModel, NoSuchModel
from .expr import BoolExpr


class PieceRules(BaseModel):
    """Stock cap plus the movement and placement predicates of one piece model."""

    model_config = ConfigDict(extra="forbid")
    count: Count
    movement: BoolExpr
    placement: BoolExpr

    def can_move(self, ctx: Context) -> bool:
        return evaluate_bool(self.movement, ctx)

    def can_place(self, ctx: Context) -> bool:
        return evaluate_bool(self.placement, ctx)


class PieceRuleSet(RootModel[Dict[PieceModel, PieceRules]]):
    """Insertion-ordered ``PieceModel -> PieceRules`` mapping."""

    root: Dict[PieceModel, PieceRules] = Field(default_factory=dict)

    def add(self, model: PieceModel, rules: PieceRules) -> None:
        model = PieceModel(model)
        if model in self.root:
            raise DuplicateModel(model)
        self.root[model] = rules

    def get_by_model(self, model: PieceModel) -> PieceRules:
        try:
            return self.root[PieceModel(model)]
        except (KeyError, ValueError):
            raise NoSuchModel(model) from None

    def models(self) -> List[PieceModel]:
        return list(self.root)

    def items(self) -> List[Tuple[PieceModel, PieceRules]]:
        return list(self.root.items())

    def is_empty(self) -> bool:
        return not self.root

    def __contains__(self, model: object) -> bool:
        return model in self.root

    def __iter__(self) -> Iterator[Tuple[PieceModel, PieceRules]]:  # type: ignore[override]
        return iter(self.root.items())

    def __len__(self) -> int:
        return len(self.root)


__all__ = ["PieceColor", "PieceModel", "PieceRuleSet", "PieceRules"]
