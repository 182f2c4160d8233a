"""Weight tables and their binary file format.

Layout (little-endian): uint32 table count, then per table a uint32 entry
count followed by that many float32 values.
"""

import numpy as np


class WeightTable:
    """Flat float32 lookup table indexed by an n-tuple feature index."""

    def __init__(self, size: int = 0, values: np.ndarray | None = None):
        if values is None:
            values = np.zeros(int(size), dtype=np.float32)
        self.values = np.ascontiguousarray(values, dtype=np.float32)

    def __len__(self):
        return int(self.values.size)

    def __getitem__(self, i):
        return self.values[i]

    def __setitem__(self, i, v):
        self.values[i] = v

    def fill(self, v: float) -> None:
        self.values.fill(v)

    def __eq__(self, other):
        if not isinstance(other, WeightTable):
            return NotImplemented
        return bool(np.array_equal(self.values, other.values))


def _read(f, dtype: str, count: int) -> np.ndarray:
    itemsize = np.dtype(dtype).itemsize
    raw = f.read(itemsize * count)
    if len(raw) != itemsize * count:
        raise SystemExit(f"Truncated weight file: {getattr(f, 'name', f)}")
    return np.frombuffer(raw, dtype=dtype).copy()


def load_weights(path: str) -> list[WeightTable]:
    """Load tables from `path`. Any I/O failure terminates via SystemExit."""
    try:
        with open(path, "rb") as f:
            count = int(_read(f, "<u4", 1)[0])
            tables = []
            for _ in range(count):
                size = int(_read(f, "<u4", 1)[0])
                tables.append(WeightTable(values=_read(f, "<f4", size)))
    except OSError as e:
        raise SystemExit(f"Cannot load weights from {path}: {e}") from e
    return tables


def save_weights(path: str, tables: list[WeightTable]) -> None:
    """Write tables to `path`. Any I/O failure terminates via SystemExit."""
    try:
        with open(path, "wb") as f:
            f.write(np.array([len(tables)], dtype="<u4").tobytes())
            for t in tables:
                f.write(np.array([len(t)], dtype="<u4").tobytes())
                np.asarray(t.values, dtype="<f4").tofile(f)
    except OSError as e:
        raise SystemExit(f"Cannot save weights to {path}: {e}") from e
