import numpy as np
import pytest
import gymnasium as gym

from fib2048.envs.fib2048 import FibonacciEnv


def test_env_basic_step():
    env = FibonacciEnv()
    obs, info = env.reset(seed=123)
    assert obs.shape == (4, 4)
    assert (obs == 0).sum() == 14  # two tiles spawned
    assert set(np.unique(obs[obs > 0])) <= {1, 2}
    assert env.observation_space.contains(obs)
    obs2, reward, terminated, truncated, info2 = env.step(3)  # left
    assert obs2.shape == (4, 4)
    assert isinstance(reward, float)
    assert isinstance(terminated, bool)
    assert isinstance(truncated, bool)
    assert "valid_actions" in info2
    assert info2["valid_actions"].dtype == bool


def test_env_seed_is_reproducible():
    a, _ = FibonacciEnv().reset(seed=7)
    b, _ = FibonacciEnv().reset(seed=7)
    assert np.array_equal(a, b)


def test_env_rejects_invalid_action():
    env = FibonacciEnv()
    env.reset(seed=0)
    with pytest.raises(gym.error.InvalidAction):
        env.step(4)


def test_env_illegal_move_adds_no_tile():
    env = FibonacciEnv()
    env.reset(seed=0)
    env.board.tile[:] = 0
    env.board[0] = 3
    obs, reward, terminated, truncated, info = env.step(0)  # up: already at the top
    assert not info["moved"]
    assert reward == 0.0
    assert (obs != 0).sum() == 1


def test_env_plays_to_the_end():
    env = FibonacciEnv()
    obs, info = env.reset(seed=1)
    rng = np.random.default_rng(1)
    truncated = False
    for _ in range(5000):
        valid = np.flatnonzero(info["valid_actions"] if "valid_actions_next" not in info else info["valid_actions_next"])
        obs, reward, terminated, truncated, info = env.step(int(rng.choice(valid)))
        assert reward >= 0
        if terminated or truncated:
            break
    assert truncated
    assert info["score"] == env.score


def test_env_target_terminates():
    env = FibonacciEnv(target=3)
    env.reset(seed=0)
    env.board.tile[:] = 0
    env.board[0], env.board[1] = 1, 2
    _, reward, terminated, truncated, info = env.step(3)
    assert reward == 3.0
    assert terminated and not truncated
    assert info["max_tile"] == 3
