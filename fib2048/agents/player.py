from typing import List, NamedTuple, Optional

from fib2048.action import Slide
from fib2048.agents.base import Agent, RandomAgent
from fib2048.board import Board
from fib2048.ntuple import NTupleNetwork
from fib2048.weight import load_weights, save_weights


class Step(NamedTuple):
    reward: int
    after: Board


class TDPlayer(Agent):
    """
    N-tuple network player trained by backward TD(0) over afterstates.

    Arguments (as `key=value`):
    - init: allocate zeroed weight tables
    - load=PATH: load weight tables (overrides init)
    - save=PATH: write weight tables on `close()`
    - alpha: learning rate; 0 means evaluation only. Each update touches 16
      entries, so keep it near 0.1 / 16 (e.g. 0.00625)
    - max_index: feature cap per cell (default 24)
    """

    defaults = "name=td role=player"

    def __init__(self, args: str = ""):
        super().__init__(args)
        self.history: List[Step] = []
        self.network: NTupleNetwork | None = None
        if self.config.init is not None:
            self.init_weights()
        if self.config.load is not None:
            self.load_weights(self.config.load)

    @property
    def alpha(self) -> float:
        return float(self.config.alpha)

    def init_weights(self) -> None:
        self.network = NTupleNetwork(max_index=self.config.max_index)

    def load_weights(self, path: str) -> None:
        self.network = NTupleNetwork(max_index=self.config.max_index, tables=load_weights(path))

    def save_weights(self, path: str) -> None:
        save_weights(path, self._network().tables)

    def close(self) -> None:
        if self.config.save is not None and self.network is not None:
            self.save_weights(self.config.save)

    def _network(self) -> NTupleNetwork:
        if self.network is None:
            raise RuntimeError("TDPlayer has no weight tables; pass `init` or `load=PATH`")
        return self.network

    def estimate_value(self, after: Board) -> float:
        return self._network().estimate_value(after)

    def adjust_value(self, after: Board, target: float) -> float:
        return self._network().adjust_value(after, target, self.alpha)

    def take_action(self, before: Board) -> Optional[Slide]:
        network = self._network()
        best_op = -1
        best_reward = -1
        best_value = float("-inf")
        best_after = None
        for op in range(4):
            after = before.copy()
            reward = after.slide(op)
            if reward == -1:
                continue
            value = network.estimate_value(after)
            # later ties win
            if value + reward >= best_value + best_reward:
                best_op, best_reward, best_value, best_after = op, reward, value, after
        if best_op == -1:
            return None
        self.history.append(Step(best_reward, best_after))
        return Slide(best_op)

    def open_episode(self, flag: str = "") -> None:
        self.history.clear()

    def close_episode(self, flag: str = "") -> None:
        if self.history and self.alpha != 0:
            # the terminal afterstate has no future reward
            self.adjust_value(self.history[-1].after, 0)
            for i in range(len(self.history) - 2, -1, -1):
                target = self.history[i].reward + self.estimate_value(self.history[i + 1].after)
                self.adjust_value(self.history[i].after, target)
        self.history.clear()


MODES = (None, "moron", "score", "space", "monotonic", "corner")


class DummyPlayer(RandomAgent):
    """Heuristic player; `mode` picks score, space, monotonic, corner or moron."""

    defaults = "name=dummy role=player"

    def __init__(self, args: str = ""):
        super().__init__(args)
        self.opcode = [0, 1, 2, 3]
        self.mode = self.config.mode
        if self.mode not in MODES:
            raise ValueError(f"Unknown dummy mode: {self.mode}")

    def take_action(self, before: Board) -> Optional[Slide]:
        self.rng.shuffle(self.opcode)
        if self.mode == "moron":
            return None
        if self.mode is None:
            for op in self.opcode:
                if before.copy().slide(op) != -1:
                    return Slide(op)
            return None

        best_op, best = -1, 0
        for op in self.opcode:
            after = before.copy()
            reward = after.slide(op)
            if self.mode == "score":
                # an illegal move scores -1 and never beats 0
                score = reward
            elif reward == -1:
                continue
            elif self.mode == "space":
                score = after.num_empty()
            elif self.mode == "monotonic":
                score = reward + after.monotonic()
            else:
                score = reward + after.corner_sum()
            if score >= best:
                best, best_op = score, op
        return Slide(best_op) if best_op != -1 else None
