"""Public package interface for the rule expression and validation engine."""

from .board import BoardRuleSet
from .checker import check_expression, check_rules
from .context import Context
from .count import Count
from .engine import evaluate, evaluate_bool, evaluate_color, evaluate_int, evaluate_model
from .enums import PieceColor, PieceModel, PlayerState, Scenario
from .errors import (
    CountDepleted,
    DivisionByZero,
    DocumentFormatError,
    EvaluationError,
    NoLastAction,
    NoPieceAtPos,
    QueryError,
    RuleNotFoundError,
    RulesError,
    RuleValidationError,
    UnsupportedVariable,
)
from .initial_layout import InitialLayout, InitialPiece
from .loader import RuleRepository, load_checked, load_from_bytes, load_from_path
from .piece import PieceRules, PieceRuleSet
from .player import OutcomePolicy, PlayerRules, PlayerRuleSet
from .pos import Pos, Rect
from .rules import CheckedGameRules, UncheckedGameRules
from .schema import GameRules, get_rules_json_schema

__all__ = [
    "BoardRuleSet",
    "CheckedGameRules",
    "Context",
    "Count",
    "CountDepleted",
    "DivisionByZero",
    "DocumentFormatError",
    "EvaluationError",
    "GameRules",
    "InitialLayout",
    "InitialPiece",
    "NoLastAction",
    "NoPieceAtPos",
    "OutcomePolicy",
    "PieceColor",
    "PieceModel",
    "PieceRuleSet",
    "PieceRules",
    "PlayerRuleSet",
    "PlayerRules",
    "PlayerState",
    "Pos",
    "QueryError",
    "Rect",
    "RuleNotFoundError",
    "RuleRepository",
    "RuleValidationError",
    "RulesError",
    "Scenario",
    "UncheckedGameRules",
    "UnsupportedVariable",
    "check_expression",
    "check_rules",
    "evaluate",
    "evaluate_bool",
    "evaluate_color",
    "evaluate_int",
    "evaluate_model",
    "get_rules_json_schema",
    "load_checked",
    "load_from_bytes",
    "load_from_path",
]
