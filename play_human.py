import curses

import hydra
from omegaconf import DictConfig

from fib2048.board import Board
from fib2048.envs.fib2048 import FibonacciEnv

KEYS = {curses.KEY_UP: 0, curses.KEY_RIGHT: 1, curses.KEY_DOWN: 2, curses.KEY_LEFT: 3}


def draw(stdscr, obs, score: int, status: str = "Arrows to move, 'q' to quit"):
    stdscr.clear()
    lines = str(Board(obs)).splitlines() + [f"Score: {score}", status]
    h, w = stdscr.getmaxyx()
    for y, line in enumerate(lines[:h]):
        stdscr.addstr(y, 0, line[: max(0, w - 1)])
    stdscr.refresh()


def play_loop(stdscr, env: FibonacciEnv, seed: int | None = None):
    curses.curs_set(0)
    stdscr.keypad(True)
    obs, info = env.reset(seed=seed)
    draw(stdscr, obs, info["score"])

    while True:
        ch = stdscr.getch()
        if ch in (ord("q"), ord("Q")):
            break
        if ch not in KEYS:
            draw(stdscr, obs, info["score"])
            continue
        obs, _, terminated, truncated, info = env.step(KEYS[ch])
        if terminated or truncated:
            draw(stdscr, obs, info["score"], ("You win!" if terminated else "Game over.") + " Press any key...")
            stdscr.getch()
            obs, info = env.reset(seed=seed)
        draw(stdscr, obs, info["score"])


@hydra.main(config_path="./conf", config_name="env", version_base=None)
def main(cfg: DictConfig):
    env = FibonacciEnv(
        target=None if cfg.env.target is None else int(cfg.env.target),
        render_mode=str(cfg.env.render_mode),
    )
    curses.wrapper(play_loop, env=env, seed=cfg.get("seed"))


if __name__ == "__main__":
    main()
