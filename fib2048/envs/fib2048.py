import numpy as np
import gymnasium as gym
from gymnasium import spaces

from fib2048.agents.environment import RandomEnvironment
from fib2048.board import FIBONACCI, Board


class FibonacciEnv(gym.Env):
    """
    Gymnasium-compatible Fibonacci 2048 environment.

    - Actions: 0=up, 1=right, 2=down, 3=left
    - Observation: (4, 4) int32 grid of tile indices
    - Reward: sum of face values of tiles produced by merges
    - Terminated: when the largest face value >= target (if a target is set)
    - Truncated: when no further moves are possible
    """

    metadata = {"render_modes": ["human"]}

    def __init__(self, target: int | None = None, render_mode: str | None = None):
        super().__init__()
        self.target = None if target is None else int(target)
        self.render_mode = render_mode

        self.action_space = spaces.Discrete(4)
        self.observation_space = spaces.Box(low=0, high=len(FIBONACCI) - 1, shape=(4, 4), dtype=np.int32)

        self.board: Board | None = None
        self.environment: RandomEnvironment | None = None
        self.score: int = 0

    def reset(self, *, seed: int | None = None, options: dict | None = None):
        super().reset(seed=seed)
        self.board = Board()
        self.environment = RandomEnvironment(rng=self.np_random)
        self.score = 0
        self._add_tile()
        self._add_tile()
        info = {"score": self.score, "valid_actions": self._valid_actions()}
        return self.board.tile.copy(), info

    def step(self, action: int):
        if not self.action_space.contains(action):
            raise gym.error.InvalidAction(f"Invalid action: {action}")
        assert self.board is not None

        valid_before = self._valid_actions()

        reward = self.board.slide(int(action))
        moved = reward != -1
        reward = max(reward, 0)
        self.score += reward

        if moved:
            self._add_tile()

        max_tile = self.board.max_tile()
        terminated = self.target is not None and max_tile >= self.target
        valid_after = self._valid_actions()
        truncated = not terminated and not valid_after.any()

        info = {
            "score": self.score,
            "moved": bool(moved),
            "max_tile": max_tile,
            "valid_actions": valid_before,
            "valid_actions_next": valid_after,
        }
        return self.board.tile.copy(), float(reward), bool(terminated), bool(truncated), info

    def render(self):
        if self.render_mode == "human" or self.render_mode is None:
            assert self.board is not None
            print(self.board, end="")
            print(f"Score: {self.score}\n")

    # --- Internal helpers ---
    def _add_tile(self):
        assert self.board is not None and self.environment is not None
        move = self.environment.take_action(self.board)
        if move is not None:
            move.apply(self.board)

    def _valid_actions(self) -> np.ndarray:
        """Boolean mask of actions that would change the board."""
        assert self.board is not None
        return np.array([self.board.copy().slide(a) != -1 for a in range(4)], dtype=bool)
