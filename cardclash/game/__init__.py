"""Battle logic operating on units: rosters, combat, AI and orchestration."""

from .battle import Battle

__all__ = ["Battle"]
