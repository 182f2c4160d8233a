import functools
import re
from enum import IntEnum

import numpy as np

# Fibonacci-like face values; a cell stores the index into this table.
FIBONACCI = (
    0, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, 233,
    377, 610, 987, 1597, 2584, 4181, 6765, 10946, 17711, 28657,
    46368, 75025, 121393, 196418, 317811, 514229, 832040, 1346269,
    2178309, 3524578,
)
_R_FIBONACCI = {v: i for i, v in enumerate(FIBONACCI)}


def fibonacci(i: int) -> int:
    """Face value of tile index `i`."""
    return FIBONACCI[i]


def r_fibonacci(value: int) -> int:
    """Tile index of a face value, or -1 if `value` is not in the table."""
    return _R_FIBONACCI.get(int(value), -1)


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


@functools.total_ordering
class Board:
    """
    Array-based 4x4 board of tile indices.

    Cells are addressed in 1-d row-major form:

         (0)  (1)  (2)  (3)
         (4)  (5)  (6)  (7)
         (8)  (9) (10) (11)
        (12) (13) (14) (15)

    - Index 0 is an empty cell; `fibonacci(index)` is the face value
    - Slides return the merge reward, or -1 when the board would not change
    - Transforms (transpose, reflections, rotations) work in place
    """

    size = 4

    def __init__(self, grid=None):
        if grid is None:
            self.tile = np.zeros((self.size, self.size), dtype=np.int32)
        else:
            self.tile = np.array(grid, dtype=np.int32).reshape(self.size, self.size)

    def copy(self) -> "Board":
        return Board(self.tile)

    # --- Cell access ---
    def get(self, pos: int) -> int:
        if not 0 <= pos < 16:
            raise IndexError(f"board position out of range: {pos}")
        return int(self.tile[pos // 4, pos % 4])

    def set(self, pos: int, index: int) -> None:
        if not 0 <= pos < 16:
            raise IndexError(f"board position out of range: {pos}")
        self.tile[pos // 4, pos % 4] = index

    __getitem__ = get
    __setitem__ = set

    def cells(self) -> tuple:
        return tuple(int(v) for v in self.tile.flat)

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.tile, other.tile))

    def __lt__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells() < other.cells()

    def __hash__(self):
        return hash(self.cells())

    def __repr__(self):
        return f"Board({self.tile.tolist()})"

    # --- Moves ---
    def place(self, pos: int, tile: int) -> int:
        """Place a tile (index 1 or 2) at `pos`. Returns 0, or -1 if invalid."""
        if not 0 <= pos < 16:
            return -1
        if tile != 1 and tile != 2:
            return -1
        self.set(pos, tile)
        return 0

    def slide(self, opcode: int) -> int:
        """Apply a slide (0=up, 1=right, 2=down, 3=left). Returns reward, or -1 if illegal."""
        op = int(opcode) & 0b11
        if op == Direction.UP:
            return self.slide_up()
        if op == Direction.RIGHT:
            return self.slide_right()
        if op == Direction.DOWN:
            return self.slide_down()
        return self.slide_left()

    def slide_left(self) -> int:
        prev = self.tile.copy()
        score = 0
        for r in range(self.size):
            row = self.tile[r]
            top, hold = 0, 0
            for c in range(self.size):
                tile = int(row[c])
                if tile == 0:
                    continue
                row[c] = 0
                if hold:
                    if abs(tile - hold) == 1 or (tile == 1 and hold == 1):
                        merged = max(tile, hold) + 1
                        row[top] = merged
                        top += 1
                        score += fibonacci(merged)
                        hold = 0
                    else:
                        row[top] = hold
                        top += 1
                        hold = tile
                else:
                    hold = tile
            if hold:
                row[top] = hold
        return score if not np.array_equal(self.tile, prev) else -1

    def slide_right(self) -> int:
        self.reflect_horizontal()
        score = self.slide_left()
        self.reflect_horizontal()
        return score

    def slide_up(self) -> int:
        self.rotate_right()
        score = self.slide_right()
        self.rotate_left()
        return score

    def slide_down(self) -> int:
        self.rotate_right()
        score = self.slide_left()
        self.rotate_left()
        return score

    # --- Transforms ---
    def transpose(self) -> None:
        self.tile[:] = self.tile.T.copy()

    def reflect_horizontal(self) -> None:
        self.tile[:] = self.tile[:, ::-1].copy()

    def reflect_vertical(self) -> None:
        self.tile[:] = self.tile[::-1, :].copy()

    def rotate(self, r: int = 1) -> None:
        """Rotate the board clockwise `r` times."""
        r = ((r % 4) + 4) % 4
        if r == 1:
            self.rotate_right()
        elif r == 2:
            self.reverse()
        elif r == 3:
            self.rotate_left()

    def rotate_right(self) -> None:
        self.transpose()
        self.reflect_horizontal()

    def rotate_left(self) -> None:
        self.transpose()
        self.reflect_vertical()

    def reverse(self) -> None:
        self.reflect_horizontal()
        self.reflect_vertical()

    rotate_clockwise = rotate_right
    rotate_counterclockwise = rotate_left

    # --- Heuristics ---
    def num_empty(self) -> int:
        return int((self.tile == 0).sum())

    def corner_sum(self) -> int:
        return int(self.tile[0, 0] + self.tile[0, 3] + self.tile[3, 0] + self.tile[3, 3])

    def monotonic(self) -> int:
        """Length of the longest run of consecutive indices along a row or column."""
        max_length = 0
        for r in range(self.size):
            row = self.tile[r]
            for direction in (1, -1):
                length = 1
                for c in range(self.size - 1):
                    if int(row[c]) - int(row[c + 1]) == direction:
                        length += 1
                        max_length = max(max_length, length)
                    else:
                        length = 1
        for c in range(self.size):
            for direction in (1, -1):
                # column runs start counting from 0
                length = 0
                for r in range(self.size - 1):
                    if int(self.tile[r, c]) - int(self.tile[r + 1, c]) == direction:
                        length += 1
                        max_length = max(max_length, length)
                    else:
                        length = 1
        return max_length

    def max_tile(self) -> int:
        """Face value of the largest tile."""
        return fibonacci(int(self.tile.max()))

    # --- Text I/O ---
    def __str__(self):
        lines = ["+------------------------+"]
        for row in self.tile:
            lines.append("|" + "".join(f"{fibonacci(int(t)):>6}" for t in row) + "|")
        lines.append("+------------------------+")
        return "\n".join(lines) + "\n"

    @classmethod
    def parse(cls, text: str) -> "Board":
        """Read 16 face values separated by any non-digit characters.

        Values missing from the Fibonacci table are stored as the -1 sentinel.
        """
        values = re.findall(r"\d+", text)
        if len(values) < 16:
            raise ValueError(f"expected 16 tile values, got {len(values)}")
        return cls([r_fibonacci(int(v)) for v in values[:16]])
