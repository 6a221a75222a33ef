"""Static card and skill records consumed by the battle engine.

These records are immutable. They are produced once by the data ingestion
layer (see ``cardclash.game.entities.card_catalog``) and shared by every
runtime ``Unit`` built from the same card.
"""

from dataclasses import dataclass, field

from .game_enums import AttackType, EffectCategory, Element, TargetScope


class ValidationMixin:
    """Mixin providing validation utilities for data structures."""

    def validate_required_fields(self, required_fields: list[str]) -> bool:
        """Validate that all required fields are present and non-None."""
        for name in required_fields:
            if not hasattr(self, name) or getattr(self, name) is None:
                return False
        return True

    def missing_fields(self, required_fields: list[str]) -> list[str]:
        """Return the names of required fields that are absent or None."""
        return [
            name for name in required_fields
            if not hasattr(self, name) or getattr(self, name) is None
        ]


@dataclass(frozen=True)
class CardStats:
    """Base combat stats of a card."""
    max_hp: int = 100
    physical_attack: int = 10
    special_attack: int = 10
    defense: int = 10
    special_defense: int = 10
    speed: int = 10

    def get(self, stat_name: str) -> int:
        """Look up a stat by attribute name."""
        try:
            return getattr(self, stat_name)
        except AttributeError:
            raise KeyError(f"Unknown stat: {stat_name}") from None


@dataclass(frozen=True)
class SkillDescriptor(ValidationMixin):
    """Static attributes of an action a unit may take.

    ``cost_mp`` may be negative, meaning the skill restores MP. A zero
    ``damage_multiplier`` marks a non-damaging skill.
    """
    name: str
    cost_mp: int = 0
    cost_tu: int = 0
    damage_multiplier: float = 0.0
    target_scope: TargetScope = TargetScope.SINGLE
    effect_category: EffectCategory = EffectCategory.OTHER
    description: str = ""

    REQUIRED_FIELDS = ("name", "cost_mp", "cost_tu", "damage_multiplier",
                       "target_scope", "effect_category")

    @property
    def is_damaging(self) -> bool:
        return bool(self.damage_multiplier) and self.damage_multiplier > 0

    @property
    def is_free(self) -> bool:
        """Free or MP-granting skills are always usable."""
        return self.cost_mp <= 0


@dataclass(frozen=True)
class CardRecord(ValidationMixin):
    """A fully parsed card: identity, element, attack type, stats and skills."""
    card_id: str
    name: str
    element: Element = Element.NONE
    attack_type: AttackType = AttackType.PHYSICAL
    stats: CardStats = field(default_factory=CardStats)
    skills: tuple[SkillDescriptor, ...] = ()
    character_name: str = ""
    rarity: str = ""

    def __post_init__(self):
        # Lists from loaders are frozen into tuples so records stay hashable
        if not isinstance(self.skills, tuple):
            object.__setattr__(self, "skills", tuple(self.skills))
