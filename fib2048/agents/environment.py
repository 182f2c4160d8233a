from typing import Optional

import numpy as np

from fib2048.action import Place
from fib2048.agents.base import RandomAgent
from fib2048.board import Board


class RandomEnvironment(RandomAgent):
    """
    Random environment: adds a new tile to an empty cell.

    - index 1 tile (face 1): 90%
    - index 2 tile (face 2): 10%
    - returns None when the board is full
    """

    defaults = "name=random role=environment"

    def __init__(self, args: str = "", rng: np.random.Generator | None = None):
        super().__init__(args, rng=rng)
        self.space = np.arange(16)

    def take_action(self, after: Board) -> Optional[Place]:
        self.rng.shuffle(self.space)
        for pos in self.space:
            if after[pos] != 0:
                continue
            tile = 1 if self.rng.integers(0, 10) else 2
            return Place(int(pos), tile)
        return None
