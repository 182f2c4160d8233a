from .fib2048 import FibonacciEnv

__all__ = ["FibonacciEnv"]
