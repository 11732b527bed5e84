"""Runtime session layer playing a checked rule set."""

from .candidates import MovingPiece, PlacingPiece
from .config import Settings, get_settings
from .contexts import BoardView, GameOverContext, MovementContext, PlacementContext, WinOrLoseContext
from .errors import DuplicatePiece, GameError, IllegalActionError, NoActivePlayer, SessionInvariantError
from .logging_config import setup_logging
from .pieces import PlacedPiece, PlacedPieceIndex
from .players import PieceState, Player, Players
from .session import GameOverReason, GameSession, SessionPhase, SessionSnapshot
from .tiles import TileIndex
from .turn import TurnController, TurnSnapshot
from .types import StepResult

__all__ = [
    "BoardView",
    "DuplicatePiece",
    "GameError",
    "GameOverContext",
    "GameOverReason",
    "GameSession",
    "IllegalActionError",
    "MovementContext",
    "MovingPiece",
    "NoActivePlayer",
    "PieceState",
    "PlacedPiece",
    "PlacedPieceIndex",
    "PlacementContext",
    "PlacingPiece",
    "Player",
    "Players",
    "SessionInvariantError",
    "SessionPhase",
    "SessionSnapshot",
    "Settings",
    "StepResult",
    "TileIndex",
    "TurnController",
    "TurnSnapshot",
    "WinOrLoseContext",
    "get_settings",
    "setup_logging",
]
