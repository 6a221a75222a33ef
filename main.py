#!/usr/bin/env python3

import argparse
import random

from cardclash.core.config import load_battle_config
from cardclash.core.errors import BattleError
from cardclash.core.events import EventManager
from cardclash.game import Battle
from cardclash.game.ai import RandomSkillAI
from cardclash.game.entities import CardCatalog
from cardclash.game.managers import LogManager
from cardclash.renderers import ConsolePresenter


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Card Clash console battle")
    parser.add_argument("--auto", action="store_true", help="Let the AI play the player side too")
    parser.add_argument("--seed", type=int, help="Random seed for decks, targeting and AI")
    parser.add_argument("--config", help="Battle config YAML (default: bundled config/battle.yaml)")
    parser.add_argument("--save-log", action="store_true", help="Write the battle log to logs/")
    return parser.parse_args()


def main():
    args = parse_args()
    rng = random.Random(args.seed)

    config = load_battle_config(args.config)
    catalog = CardCatalog.default()

    event_manager = EventManager()
    log_manager = LogManager(event_manager)
    ConsolePresenter(event_manager)

    player_policy = RandomSkillAI(config.wait_tu_cost, rng=rng) if args.auto else None
    battle = Battle(config, event_manager, player_policy=player_policy, rng=rng)

    try:
        battle.start(
            catalog.random_deck(config.deck_size, rng),
            catalog.random_deck(config.deck_size, rng),
        )
        if not battle.state.is_over:
            print(f"\n\nBattle suspended in phase {battle.phase.name}")
    except KeyboardInterrupt:
        print("\n\nBattle interrupted by user")
    except BattleError as e:
        print(f"\n\nError: {e}")
        raise
    finally:
        if args.save_log:
            path = log_manager.save_log_to_file()
            if path:
                print(f"Log saved to {path}")
        print("\n\nThanks for playing!")


if __name__ == "__main__":
    main()
