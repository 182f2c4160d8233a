"""
N-tuple network value function.

Four fixed patterns are looked up under four rotations of the afterstate
(identity, 180 degrees, counter-clockwise, clockwise) and summed. Every
rotation of a board reads from the same table, so one update trains all
four orientations at once.
"""

import numpy as np

from fib2048.board import Board
from fib2048.weight import WeightTable

PATTERNS = (
    (0, 1, 4, 5, 8, 9),
    (1, 2, 5, 6, 9, 10),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
)

# (apply, undo) pairs; each undo exactly cancels its apply
_ROTATIONS = (
    (None, None),
    (Board.reverse, Board.reverse),
    (Board.rotate_left, Board.rotate_right),
    (Board.rotate_right, Board.rotate_left),
)


def rotations(board: Board):
    """Yield a working copy of `board` under each rotation in turn.

    The yielded board is reused between iterations; read it, don't keep it.
    """
    tmp = board.copy()
    for apply, undo in _ROTATIONS:
        if apply is not None:
            apply(tmp)
        yield tmp
        if undo is not None:
            undo(tmp)


class NTupleNetwork:
    def __init__(self, max_index: int = 24, tables: list[WeightTable] | None = None):
        self.max_index = int(max_index)
        sizes = [self.max_index ** len(p) for p in PATTERNS]
        if tables is None:
            tables = [WeightTable(size) for size in sizes]
        elif [len(t) for t in tables] != sizes:
            raise ValueError(
                f"Weight table sizes {[len(t) for t in tables]} do not match "
                f"patterns with max_index={self.max_index} (expected {sizes})"
            )
        self.tables = list(tables)
        # most significant digit first
        self._radix = [
            self.max_index ** np.arange(len(p) - 1, -1, -1, dtype=np.int64) for p in PATTERNS
        ]

    def extract_index(self, board: Board, pattern_id: int) -> int:
        """Mixed-radix feature index of one pattern; digits are clamped to max_index - 1."""
        digits = np.minimum(board.tile.ravel()[list(PATTERNS[pattern_id])], self.max_index - 1)
        return int(digits.astype(np.int64) @ self._radix[pattern_id])

    def features(self, board: Board) -> list[tuple[int, int]]:
        """(table, index) for every pattern under every rotation: 16 lookups."""
        out = []
        for tmp in rotations(board):
            for p in range(len(PATTERNS)):
                out.append((p, self.extract_index(tmp, p)))
        return out

    def estimate_value(self, after: Board) -> float:
        value = 0.0
        for p, i in self.features(after):
            value += float(self.tables[p][i])
        return value

    def adjust_value(self, after: Board, target: float, alpha: float) -> float:
        """Move the estimate of `after` toward `target`. Returns the TD error."""
        error = target - self.estimate_value(after)
        adjust = np.float32(alpha * error)
        for p, i in self.features(after):
            self.tables[p].values[i] += adjust
        return error
