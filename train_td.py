import os

import hydra
from omegaconf import DictConfig, OmegaConf

from fib2048.agents import make_agent
from fib2048.episode import Statistics, run_episode


@hydra.main(config_path="conf", config_name="train", version_base=None)
def main(cfg: DictConfig):
    print(OmegaConf.to_yaml(cfg))

    player = make_agent(str(cfg.player.kind), str(cfg.player.args))
    environment = make_agent(str(cfg.environment.kind), str(cfg.environment.args))
    print(f"Player: {player.name} ({player.role}) | environment: {environment.name} ({environment.role})")

    stats = Statistics(block=int(cfg.block))
    with player, environment:
        for _ in range(int(cfg.total)):
            game = run_episode(player, environment)
            stats.add(game)

    if player.config.save is not None:
        # Hydra runs inside its own output directory
        print(f"Saved weights to: {os.path.join(os.getcwd(), player.config.save)}")


if __name__ == "__main__":
    main()
