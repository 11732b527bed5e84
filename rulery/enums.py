"""Closed enumerations shared by the rule data model and the expression trees."""

from __future__ import annotations

from enum import Enum


class PieceModel(str, Enum):
    """Shapes a piece can take."""

    CUBE = "cube"
    SPHERE = "sphere"
    CYLINDER = "cylinder"
    CAPSULE = "capsule"
    CONE = "cone"
    TORUS = "torus"
    TETRAHEDRON = "tetrahedron"

    def __str__(self) -> str:
        return self.value.capitalize()


class PieceColor(str, Enum):
    """Piece colors; each declared color is one player."""

    WHITE = "white"
    BLACK = "black"
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    CYAN = "cyan"
    PURPLE = "purple"

    def __str__(self) -> str:
        return self.value.capitalize()


class PlayerState(str, Enum):
    """Player standing. ``ACTIVE`` may become ``WON`` or ``LOST``, never the reverse."""

    ACTIVE = "active"
    WON = "won"
    LOST = "lost"

    def __str__(self) -> str:
        return self.value.capitalize()


class Scenario(str, Enum):
    """The situations in which an expression is evaluated."""

    MOVEMENT = "movement"
    PLACEMENT = "placement"
    WIN_OR_LOSE = "win_or_lose"
    GAME_OVER = "game_over"

    def __str__(self) -> str:
        return self.value


__all__ = ["PieceColor", "PieceModel", "PlayerState", "Scenario"]
