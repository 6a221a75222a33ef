"""Battle configuration loading."""

from .battle_config import BattleConfig, BattleConfigLoader, load_battle_config

__all__ = ["BattleConfig", "BattleConfigLoader", "load_battle_config"]
