"""Runtime units and the card catalog that feeds them."""

from .card_catalog import CardCatalog, classify_skill, parse_card, parse_damage_multiplier, parse_skill
from .unit import Unit

__all__ = [
    "Unit",
    "CardCatalog",
    "classify_skill",
    "parse_card",
    "parse_damage_multiplier",
    "parse_skill",
]
