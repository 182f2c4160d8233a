import inspect

import numpy as np
import pytest

from fib2048.board import Board
from fib2048.ntuple import PATTERNS, NTupleNetwork, rotations
from fib2048.weight import WeightTable


def random_board(seed: int, high: int = 8) -> Board:
    rng = np.random.default_rng(seed)
    return Board(rng.integers(0, high, size=(4, 4)))


def randomized_network(max_index: int = 5, seed: int = 0) -> NTupleNetwork:
    net = NTupleNetwork(max_index=max_index)
    rng = np.random.default_rng(seed)
    for t in net.tables:
        t.values[:] = rng.normal(size=len(t)).astype(np.float32)
    return net


def test_table_sizes():
    net = NTupleNetwork(max_index=5)
    assert [len(t) for t in net.tables] == [5 ** 6, 5 ** 6, 5 ** 4, 5 ** 4]
    assert len(PATTERNS) == 4


def test_default_cap_is_24():
    assert inspect.signature(NTupleNetwork).parameters["max_index"].default == 24


def test_mismatched_tables_rejected():
    with pytest.raises(ValueError):
        NTupleNetwork(max_index=5, tables=[WeightTable(10)] * 4)


def test_extract_index_is_most_significant_first():
    net = NTupleNetwork(max_index=5)
    b = Board()
    b[0], b[1], b[4] = 1, 2, 3
    assert net.extract_index(b, 0) == 1 * 5 ** 5 + 2 * 5 ** 4 + 3 * 5 ** 3
    b = Board()
    b[15] = 2
    assert net.extract_index(b, 3) == 2


def test_extract_index_clamps_large_tiles():
    net = NTupleNetwork(max_index=5)
    b = Board()
    b[3] = 20
    assert net.extract_index(b, 3) == 4 * 5 ** 3
    assert net.extract_index(b, 3) < len(net.tables[3])


def test_rotations_restore_copy_and_leave_input_alone():
    b = random_board(1)
    seen = [r.copy() for r in rotations(b)]
    assert seen[0] == b
    assert seen[1].tile.tolist() == np.rot90(b.tile, 2).tolist()
    assert seen[2].tile.tolist() == np.rot90(b.tile, 1).tolist()
    assert seen[3].tile.tolist() == np.rot90(b.tile, -1).tolist()
    assert b == random_board(1)


def test_features_cover_four_rotations_of_four_patterns():
    net = NTupleNetwork(max_index=5)
    feats = net.features(random_board(2))
    assert len(feats) == 16
    assert [p for p, _ in feats] == [0, 1, 2, 3] * 4


def test_estimate_value_is_pure():
    net = randomized_network()
    b = random_board(3)
    before = b.copy()
    v1 = net.estimate_value(b)
    v2 = net.estimate_value(b)
    assert v1 == v2
    assert b == before


def test_estimate_value_invariant_under_input_rotation():
    net = randomized_network()
    b = random_board(4)
    expected = net.estimate_value(b)
    for turn in (Board.rotate_right, Board.rotate_left, Board.reverse):
        t = b.copy()
        turn(t)
        assert net.estimate_value(t) == pytest.approx(expected, rel=1e-5, abs=1e-5)


def test_adjust_value_moves_toward_target():
    net = NTupleNetwork(max_index=5)
    b = random_board(5, high=5)
    assert net.estimate_value(b) == 0.0
    error = net.adjust_value(b, 10.0, alpha=0.01)
    assert error == pytest.approx(10.0)
    after = net.estimate_value(b)
    assert 0.0 < after


def test_adjust_value_without_shared_entries_steps_toward_target():
    net = NTupleNetwork(max_index=16)
    b = Board(np.arange(16).reshape(4, 4))
    assert len(set(net.features(b))) == 16
    before = net.estimate_value(b)
    net.adjust_value(b, 10.0, alpha=0.01)
    after = net.estimate_value(b)
    assert before < after < 10.0
    assert after == pytest.approx(16 * 0.01 * 10.0, rel=1e-5)


def test_adjust_value_accumulates_shared_entries():
    net = NTupleNetwork(max_index=5)
    b = Board()  # every rotation of an empty board addresses entry 0
    net.adjust_value(b, 1.0, alpha=0.5)
    for t in net.tables:
        assert t[0] == pytest.approx(4 * 0.5)
    assert net.estimate_value(b) == pytest.approx(16 * 2.0)


def test_zero_alpha_leaves_tables_unchanged():
    net = randomized_network()
    snapshot = [t.values.copy() for t in net.tables]
    net.adjust_value(random_board(6), 100.0, alpha=0.0)
    for t, s in zip(net.tables, snapshot):
        assert np.array_equal(t.values, s)
