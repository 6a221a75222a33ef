"""
Configuration loader for battle tuning values.

This module handles loading and parsing of the YAML configuration file
that holds the battle engine's constants (slot counts, starting MP, TU
seeding, damage formula constants).
"""
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigError


@dataclass(frozen=True)
class BattleConfig:
    """Tunable constants for a battle."""

    active_slots: int = 4
    starting_mp: int = 4
    initial_tu_base: int = 1000
    wait_tu_cost: int = 50
    failure_tu_penalty: int = 100
    defense_scale: int = 1000
    advantage_modifier: float = 1.5
    disadvantage_modifier: float = 0.75
    minimum_damage: int = 1
    schedule_preview_count: int = 10
    max_stall_retries: int = 3
    deck_size: int = 6

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            expected = float if f.type in (float, "float") else int
            # bool is an int subclass but never a valid tuning value
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{f.name} must be a number, got {value!r}")
            if expected is int and not isinstance(value, int):
                raise ConfigError(f"{f.name} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigError(f"{f.name} must not be negative, got {value!r}")
        if self.active_slots < 1:
            raise ConfigError("active_slots must be at least 1")

    def with_overrides(self, **overrides: Any) -> "BattleConfig":
        """Return a copy with the given values replaced."""
        return replace(self, **overrides)


class BattleConfigLoader:
    """Loads battle configuration from a YAML file."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or "config/battle.yaml"
        self._raw: dict[str, Any] = {}
        self.unknown_keys: list[str] = []

    def resolve_path(self) -> Path:
        # Relative paths are relative to the package assets directory
        if os.path.isabs(self.config_path):
            return Path(self.config_path)
        assets_root = Path(__file__).parent.parent.parent / "assets"
        return assets_root / self.config_path

    def load_config(self) -> BattleConfig:
        """
        Load configuration from the YAML file.

        Returns:
            BattleConfig built from the file, or the defaults when the file
            is missing or unreadable.

        Raises:
            ConfigError: If a known key holds an invalid value
        """
        config_file = self.resolve_path()

        if not config_file.exists():
            print(f"Warning: Battle config file not found: {config_file}")
            return BattleConfig()

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                self._raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"Error loading battle config: {e}")
            return BattleConfig()

        section = self._raw.get("battle", self._raw)
        if not isinstance(section, dict):
            raise ConfigError(f"Expected a mapping in {config_file}")

        return self.parse(section)

    def parse(self, section: dict[str, Any]) -> BattleConfig:
        """Build a BattleConfig from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(BattleConfig)}
        self.unknown_keys = sorted(key for key in section if key not in known)
        for key in self.unknown_keys:
            print(f"Warning: Unknown battle config key '{key}'")

        values = {key: value for key, value in section.items() if key in known}
        # YAML writes 1.5 and 2 alike; promote ints where floats are expected
        for f in fields(BattleConfig):
            if f.type in (float, "float") and isinstance(values.get(f.name), int) \
                    and not isinstance(values.get(f.name), bool):
                values[f.name] = float(values[f.name])

        return BattleConfig(**values)


def load_battle_config(config_path: Optional[str] = None) -> BattleConfig:
    """Convenience wrapper around ``BattleConfigLoader``."""
    return BattleConfigLoader(config_path).load_config()
