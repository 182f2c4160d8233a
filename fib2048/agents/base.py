from dataclasses import dataclass, field, fields
from typing import Dict, Optional

import numpy as np
from omegaconf import OmegaConf

from fib2048.action import Action
from fib2048.board import Board


@dataclass
class AgentConfig:
    """Typed view of an agent's `key=value` arguments.

    Keys with no field here are kept as strings in `extra`.
    """

    name: str = "unknown"
    role: str = "unknown"
    init: Optional[str] = None
    load: Optional[str] = None
    save: Optional[str] = None
    alpha: float = 0.0
    seed: Optional[int] = None
    max_index: int = 24
    mode: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_meta(cls, meta: Dict[str, str]) -> "AgentConfig":
        known = {f.name for f in fields(cls)} - {"extra"}
        # values are literal strings, never interpolations
        escaped = {k: v.replace("${", "\\${") for k, v in meta.items()}
        typed = {k: v for k, v in escaped.items() if k in known}
        extra = {k: v for k, v in escaped.items() if k not in known}
        cfg = OmegaConf.merge(OmegaConf.structured(cls), typed, {"extra": extra})
        return OmegaConf.to_object(cfg)


def parse_args(args: str) -> Dict[str, str]:
    """Split `key=value` tokens; a bare token sets key and value to itself."""
    meta: Dict[str, str] = {}
    for pair in args.split():
        key, sep, value = pair.partition("=")
        meta[key] = value if sep else pair
    return meta


class Agent:
    """
    Base agent: a fixed capability set shared by players and environments.

    - `take_action(board)` returns an `Action`, or None when it has no move
    - `open_episode` / `close_episode` bracket every game
    - `defaults` are applied before the caller's arguments
    """

    defaults = ""

    def __init__(self, args: str = ""):
        self.meta = parse_args(f"name=unknown role=unknown {self.defaults} {args}")
        self.config = AgentConfig.from_meta(self.meta)

    def open_episode(self, flag: str = "") -> None:
        pass

    def close_episode(self, flag: str = "") -> None:
        pass

    def take_action(self, board: Board) -> Optional[Action]:
        return None

    def check_for_win(self, board: Board) -> bool:
        return False

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # must precede `property` below, which shadows the builtin in this body
    @property
    def name(self) -> str:
        return self.meta["name"]

    @property
    def role(self) -> str:
        return self.meta["role"]

    def property(self, key: str) -> str:
        return self.meta[key]

    def notify(self, msg: str) -> None:
        key, _, value = msg.partition("=")
        self.meta[key] = value
        self.config = AgentConfig.from_meta(self.meta)


class RandomAgent(Agent):
    """Agent with a private random generator, seeded by the `seed` key."""

    def __init__(self, args: str = "", rng: np.random.Generator | None = None):
        super().__init__(args)
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
