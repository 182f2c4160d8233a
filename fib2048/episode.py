"""Episode loop and summary statistics for playing agents against each other."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from fib2048.action import Action
from fib2048.agents.base import Agent
from fib2048.board import Board, fibonacci


@dataclass
class Episode:
    board: Board = field(default_factory=Board)
    moves: List[Action] = field(default_factory=list)
    rewards: List[int] = field(default_factory=list)
    score: int = 0

    def step(self) -> int:
        return len(self.moves)

    def max_index(self) -> int:
        return int(self.board.tile.max())


def run_episode(player: Agent, environment: Agent, board: Optional[Board] = None) -> Episode:
    """Alternate environment and player until one of them has no legal action.

    The environment places the first two tiles, then the player and
    environment take turns.
    """
    game = Episode(board=board.copy() if board is not None else Board())
    player.open_episode()
    environment.open_episode()
    while True:
        who = environment if game.step() < 2 or game.step() % 2 == 1 else player
        move = who.take_action(game.board)
        if move is None:
            break
        reward = move.apply(game.board)
        if reward == -1:
            break
        game.moves.append(move)
        game.rewards.append(reward)
        game.score += reward
        if who.check_for_win(game.board):
            break
    player.close_episode()
    environment.close_episode()
    return game


class Statistics:
    """Collect finished episodes and print a summary every `block` episodes."""

    def __init__(self, block: int = 1000):
        self.block = int(block)
        self.scores: List[int] = []
        self.max_indices: List[int] = []

    def add(self, game: Episode) -> None:
        self.scores.append(game.score)
        self.max_indices.append(game.max_index())
        if self.block > 0 and len(self.scores) % self.block == 0:
            print(self.summary(), flush=True)

    def summary(self, last: Optional[int] = None) -> str:
        last = self.block if last is None else last
        scores = np.array(self.scores[-last:])
        tiles = np.array(self.max_indices[-last:])
        lines = [f"{len(self.scores)}\tavg = {scores.mean():.0f}, max = {scores.max()}"]
        # reach rate: share of episodes whose largest tile is at least t
        for t in sorted(set(tiles.tolist()), reverse=True)[:5]:
            reach = (tiles >= t).mean() * 100
            exact = (tiles == t).mean() * 100
            lines.append(f"\t{fibonacci(t)}\t{reach:.1f}%\t({exact:.1f}%)")
        return "\n".join(lines)
