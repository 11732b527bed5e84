"""Custom exceptions raised by the rules subsystem."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ErrorDetails:
    """Structured metadata associated with an exception."""

    code: str
    message: str


class RulesError(Exception):
    """Base class for every error raised while loading, checking or evaluating rules."""

    error_code = "ERR_RULES"

    def __init__(self, message: str, *, details: Optional[ErrorDetails] = None) -> None:
        super().__init__(message)
        self.details = details or ErrorDetails(code=self.error_code, message=message)

    @property
    def code(self) -> str:
        return self.details.code


# ---------------------------------------------------------------------- format
class DocumentFormatError(RulesError):
    """Raised when a rule document cannot be read, decoded or validated."""

    error_code = "ERR_FORMAT"


class RuleNotFoundError(RulesError, KeyError):
    """Raised when a requested rule set name cannot be resolved."""

    error_code = "ERR_RULE_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"Rule set '{name}' not found")
        self.name = name

    def __str__(self) -> str:
        return self.details.message


# ------------------------------------------------------------------ validation
class RuleValidationError(RulesError, ValueError):
    """Raised when a rule set violates one of the checking invariants."""

    error_code = "ERR_VALIDATION"


class NoName(RuleValidationError):
    error_code = "ERR_NO_NAME"

    def __init__(self) -> None:
        super().__init__("no rule name")


class InvalidBoardSize(RuleValidationError):
    error_code = "ERR_INVALID_BOARD_SIZE"

    def __init__(self, rows: int, cols: int) -> None:
        super().__init__(f"invalid board size: {rows}x{cols}")
        self.rows = rows
        self.cols = cols


class NoAddedPiece(RuleValidationError):
    error_code = "ERR_NO_ADDED_PIECE"

    def __init__(self) -> None:
        super().__init__("no added piece")


class NoAddedPlayer(RuleValidationError):
    error_code = "ERR_NO_ADDED_PLAYER"

    def __init__(self) -> None:
        super().__init__("no added player")


class DuplicateColor(RuleValidationError):
    error_code = "ERR_DUPLICATE_COLOR"

    def __init__(self, color: Any) -> None:
        super().__init__(f"duplicate piece color: {color}")
        self.color = color


class DuplicateModel(RuleValidationError):
    error_code = "ERR_DUPLICATE_MODEL"

    def __init__(self, model: Any) -> None:
        super().__init__(f"duplicate piece model: {model}")
        self.model = model


class NoSuchColor(RuleValidationError):
    error_code = "ERR_NO_SUCH_COLOR"

    def __init__(self, color: Any) -> None:
        super().__init__(f"no such piece color: {color}")
        self.color = color


class NoSuchModel(RuleValidationError):
    error_code = "ERR_NO_SUCH_MODEL"

    def __init__(self, model: Any) -> None:
        super().__init__(f"no such piece model: {model}")
        self.model = model


class InitialPosOutOfBoard(RuleValidationError):
    error_code = "ERR_INITIAL_POS_OUT_OF_BOARD"

    def __init__(self, pos: Any) -> None:
        super().__init__(f"initial piece position out of board: {pos}")
        self.pos = pos


class DuplicateInitialPos(RuleValidationError):
    error_code = "ERR_DUPLICATE_INITIAL_POS"

    def __init__(self, pos: Any) -> None:
        super().__init__(f"duplicate initial piece position: {pos}")
        self.pos = pos


class AndInvalidArity(RuleValidationError):
    error_code = "ERR_AND_INVALID_ARITY"

    def __init__(self, arity: int) -> None:
        super().__init__(f"logical AND invalid arity: {arity}")
        self.arity = arity


class OrInvalidArity(RuleValidationError):
    error_code = "ERR_OR_INVALID_ARITY"

    def __init__(self, arity: int) -> None:
        super().__init__(f"logical OR invalid arity: {arity}")
        self.arity = arity


class VariableNotAllowed(RuleValidationError):
    """Raised when a scenario-only variable appears in an expression of another scenario."""

    error_code = "ERR_VARIABLE_NOT_ALLOWED"

    def __init__(self, variable: str, scenario: Any) -> None:
        super().__init__(f"variable '{variable}' is not allowed in {scenario} expressions")
        self.variable = variable
        self.scenario = scenario


# ------------------------------------------------------------------ evaluation
class EvaluationError(RulesError, RuntimeError):
    """Raised while evaluating an expression or consuming stock during play."""

    error_code = "ERR_EVALUATION"


class DivisionByZero(EvaluationError):
    error_code = "ERR_DIVISION_BY_ZERO"

    def __init__(self) -> None:
        super().__init__("division by zero")


class CountDepleted(EvaluationError):
    error_code = "ERR_COUNT_DEPLETED"

    def __init__(self, message: str = "piece count is depleted") -> None:
        super().__init__(message)


class QueryError(EvaluationError):
    """Raised by a context that cannot answer a query."""

    error_code = "ERR_QUERY"


class UnsupportedVariable(QueryError):
    error_code = "ERR_UNSUPPORTED_VARIABLE"

    def __init__(self, variable: str, scenario: Any = None) -> None:
        where = f" in {scenario} context" if scenario is not None else ""
        super().__init__(f"unsupported variable '{variable}'{where}")
        self.variable = variable
        self.scenario = scenario


class NoPieceAtPos(QueryError):
    error_code = "ERR_NO_PIECE_AT_POS"

    def __init__(self, pos: Any) -> None:
        super().__init__(f"no piece at position: {pos}")
        self.pos = pos


class NoLastAction(QueryError):
    error_code = "ERR_NO_LAST_ACTION"

    def __init__(self) -> None:
        super().__init__("no last action")


__all__ = [
    "AndInvalidArity",
    "CountDepleted",
    "DivisionByZero",
    "DocumentFormatError",
    "DuplicateColor",
    "DuplicateInitialPos",
    "DuplicateModel",
    "ErrorDetails",
    "EvaluationError",
    "InitialPosOutOfBoard",
    "InvalidBoardSize",
    "NoAddedPiece",
    "NoAddedPlayer",
    "NoLastAction",
    "NoName",
    "NoPieceAtPos",
    "NoSuchColor",
    "NoSuchModel",
    "OrInvalidArity",
    "QueryError",
    "RuleNotFoundError",
    "RuleValidationError",
    "RulesError",
    "UnsupportedVariable",
    "VariableNotAllowed",
]
