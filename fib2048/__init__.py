"""fib2048: Fibonacci 2048 board engine, n-tuple TD agents and Gym environment.

Expose the board as `Board` and the environment as `FibonacciEnv`.
"""

from .board import Board, Direction, fibonacci, r_fibonacci
from .envs.fib2048 import FibonacciEnv

__all__ = ["Board", "Direction", "FibonacciEnv", "fibonacci", "r_fibonacci"]
