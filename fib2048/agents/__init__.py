from .base import Agent, AgentConfig, RandomAgent, parse_args
from .environment import RandomEnvironment
from .player import DummyPlayer, Step, TDPlayer

AGENTS = {
    "td": TDPlayer,
    "player": TDPlayer,
    "dummy": DummyPlayer,
    "random": RandomEnvironment,
    "environment": RandomEnvironment,
}


def make_agent(kind: str, args: str = "") -> Agent:
    """Build an agent by kind name with a `key=value` argument string."""
    if kind not in AGENTS:
        raise ValueError(f"Unknown agent kind: {kind} (expected one of {sorted(AGENTS)})")
    return AGENTS[kind](args)


__all__ = [
    "Agent",
    "AgentConfig",
    "RandomAgent",
    "RandomEnvironment",
    "DummyPlayer",
    "TDPlayer",
    "Step",
    "parse_args",
    "make_agent",
]
