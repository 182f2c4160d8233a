"""Actions exchanged between agents and the board.

A player emits `Slide`, the environment emits `Place`; an agent with nothing
to do returns `None`, which ends the episode.
"""

from dataclasses import dataclass
from typing import Union

from fib2048.board import Board, fibonacci


@dataclass(frozen=True)
class Slide:
    direction: int

    def __post_init__(self):
        if not 0 <= int(self.direction) < 4:
            raise ValueError(f"Invalid slide direction: {self.direction}")

    def apply(self, board: Board) -> int:
        return board.slide(self.direction)

    def __str__(self):
        return "#" + "URDL"[self.direction]


@dataclass(frozen=True)
class Place:
    position: int
    tile: int

    def __post_init__(self):
        if not 0 <= int(self.position) < 16:
            raise ValueError(f"Invalid position: {self.position}")
        if self.tile not in (1, 2):
            raise ValueError(f"Invalid tile index: {self.tile}")

    def apply(self, board: Board) -> int:
        return board.place(self.position, self.tile)

    def __str__(self):
        return f"{self.position:X}{fibonacci(self.tile)}"


Action = Union[Slide, Place]
