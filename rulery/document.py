"""JSON codec for rule documents and their independently editable fragments.

A document looks like::

    {
      "name": "Default Rules",
      "board": {"rows": 8, "cols": 8},
      "pieces": {"cube": {"count": 10, "movement": {...}, "placement": {...}}},
      "players": {"white": {"win_condition": {...}, "lose_condition": {...}}},
      "initial_layout": [{"model": "cube", "color": "white", "pos": [0, 0]}],
      "game_over_condition": {"type": "false"}
    }

Every parser raises :class:`~rulery.errors.DocumentFormatError`; duplicate
object keys are rejected instead of silently keeping the last value.
"""

from __future__ import annotations

import json
from typing import Any, List, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .enums import PieceColor, PieceModel
from .errors import DocumentFormatError
from .expr import BOOL_EXPR_ADAPTER, COLOR_EXPR_ADAPTER, INT_EXPR_ADAPTER, MODEL_EXPR_ADAPTER, Expr
from .initial_layout import InitialLayout
from .piece import PieceRuleSet
from .player import PlayerRuleSet
from .schema import GameRules

ModelT = TypeVar("ModelT", bound=BaseModel)
Source = Union[str, bytes, bytearray]


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> dict:
    result: dict = {}
    for key, value in pairs:
        if key in result:
            raise DocumentFormatError(f"Duplicate key '{key}' in rule document")
        result[key] = value
    return result


def decode(source: Source) -> Any:
    """Decode JSON text or UTF-8 bytes into plain Python values."""

    if isinstance(source, (bytes, bytearray)):
        try:
            source = bytes(source).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentFormatError(f"Rule document is not valid UTF-8: {exc}") from exc
    try:
        return json.loads(source, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as exc:
        raise DocumentFormatError(f"Malformed rule document: {exc}") from exc


def _format_validation_error(what: str, exc: ValidationError) -> DocumentFormatError:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    message = first.get("msg", str(exc))
    return DocumentFormatError(f"Invalid {what} at {location}: {message}")


def _parse_model(model: Type[ModelT], source: Source, what: str) -> ModelT:
    data = decode(source)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise _format_validation_error(what, exc) from exc


def _parse_expr(adapter: TypeAdapter, source: Source, what: str) -> Expr:
    data = decode(source)
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise _format_validation_error(what, exc) from exc


# --------------------------------------------------------------------- parsing
def parse_game_rules(source: Source) -> GameRules:
    data = decode(source)
    if isinstance(data, dict):
        missing = [name for name in GameRules.model_fields if name not in data]
        if missing:
            raise DocumentFormatError(f"Rule document is missing field(s): {', '.join(missing)}")
    try:
        return GameRules.model_validate(data)
    except ValidationError as exc:
        raise _format_validation_error("rule document", exc) from exc


def parse_pieces(source: Source) -> PieceRuleSet:
    return _parse_model(PieceRuleSet, source, "pieces")


def parse_players(source: Source) -> PlayerRuleSet:
    return _parse_model(PlayerRuleSet, source, "players")


def parse_initial_layout(source: Source) -> InitialLayout:
    return _parse_model(InitialLayout, source, "initial layout")


def parse_bool_expr(source: Source) -> Expr:
    return _parse_expr(BOOL_EXPR_ADAPTER, source, "boolean expression")


def parse_int_expr(source: Source) -> Expr:
    return _parse_expr(INT_EXPR_ADAPTER, source, "integer expression")


def parse_color_expr(source: Source) -> Expr:
    return _parse_expr(COLOR_EXPR_ADAPTER, source, "color expression")


def parse_model_expr(source: Source) -> Expr:
    return _parse_expr(MODEL_EXPR_ADAPTER, source, "model expression")


def parse_color(source: Source) -> PieceColor:
    data = decode(source)
    try:
        return PieceColor(data)
    except ValueError as exc:
        raise DocumentFormatError(f"Unknown piece color: {data!r}") from exc


def parse_model(source: Source) -> PieceModel:
    data = decode(source)
    try:
        return PieceModel(data)
    except ValueError as exc:
        raise DocumentFormatError(f"Unknown piece model: {data!r}") from exc


# ----------------------------------------------------------------- serializing
def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2)


def dump_model(value: BaseModel) -> str:
    """Serialize any rule fragment (pieces, players, layout, expression, whole rules)."""

    return _dumps(value.model_dump(mode="json", by_alias=True))


def dump_game_rules(rules: GameRules) -> str:
    return dump_model(rules)


def dump_pieces(pieces: PieceRuleSet) -> str:
    return dump_model(pieces)


def dump_players(players: PlayerRuleSet) -> str:
    return dump_model(players)


def dump_initial_layout(layout: InitialLayout) -> str:
    return dump_model(layout)


def dump_expr(expr: Expr) -> str:
    return dump_model(expr)


__all__ = [
    "decode",
    "dump_expr",
    "dump_game_rules",
    "dump_initial_layout",
    "dump_model",
    "dump_pieces",
    "dump_players",
    "parse_bool_expr",
    "parse_color",
    "parse_color_expr",
    "parse_game_rules",
    "parse_initial_layout",
    "parse_int_expr",
    "parse_model",
    "parse_model_expr",
    "parse_pieces",
    "parse_players",
]
