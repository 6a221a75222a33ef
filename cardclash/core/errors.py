"""Exception hierarchy for the battle engine."""


class BattleError(Exception):
    """Base exception for battle engine errors."""
    pass


class ConfigError(BattleError):
    """Raised when a configuration value has the wrong type or range."""
    pass


class CardDataError(BattleError):
    """Raised when a card or skill record cannot be parsed."""

    def __init__(self, record_name: str, reason: str):
        super().__init__(f"Invalid card data for '{record_name}': {reason}")
        self.record_name = record_name
        self.reason = reason


class BattleSetupError(BattleError):
    """Raised when a battle cannot be initialized from the given decks."""
    pass


class InvalidPhaseError(BattleError):
    """Raised when an operation is called in the wrong battle phase."""

    def __init__(self, operation: str, phase: object):
        super().__init__(f"Cannot {operation} during phase {phase}")
        self.operation = operation
        self.phase = phase


class SkillResolutionError(BattleError):
    """Raised inside the action pipeline when a skill cannot be resolved."""

    def __init__(self, skill_name: str, reason: str):
        super().__init__(f"Cannot resolve skill '{skill_name}': {reason}")
        self.skill_name = skill_name
        self.reason = reason
