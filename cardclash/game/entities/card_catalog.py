"""Card catalog loading and one-time skill classification.

Card records are loaded from YAML and converted to the immutable
``CardRecord``/``SkillDescriptor`` structures the battle engine consumes.
Skill targeting and effect categories are decided here, once, so the action
pipeline never has to re-read skill text.

Both English keys and the original Japanese labels from the card sheets are
accepted for elements, attack types, stats and skill text.
"""

import random
import re
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml

from ...core.data import (
    AttackType,
    CardRecord,
    CardStats,
    EffectCategory,
    Element,
    SkillDescriptor,
    TargetScope,
)
from ...core.errors import CardDataError


ELEMENT_ALIASES = {
    "赤": Element.RED,
    "red": Element.RED,
    "青": Element.BLUE,
    "blue": Element.BLUE,
    "緑": Element.GREEN,
    "green": Element.GREEN,
    "none": Element.NONE,
    "": Element.NONE,
}

ATTACK_TYPE_ALIASES = {
    "物理": AttackType.PHYSICAL,
    "physical": AttackType.PHYSICAL,
    "特殊": AttackType.SPECIAL,
    "special": AttackType.SPECIAL,
}

# stat field -> (accepted keys, default)
STAT_KEYS = {
    "max_hp": (("max_hp", "hp", "HP"), 100),
    "physical_attack": (("physical_attack", "物攻"), 10),
    "special_attack": (("special_attack", "特攻"), 10),
    "defense": (("defense", "物防"), 10),
    "special_defense": (("special_defense", "特防"), 10),
    "speed": (("speed", "俊敏性"), 10),
}

ALL_TARGET_KEYWORDS = ("全体", "all")
TWO_TARGET_KEYWORDS = ("2体", "two")
MULTIPLIER_KEYWORDS = ("倍",)
HEAL_KEYWORDS = ("回復", "ライフフリップ", "heal")
BUFF_KEYWORDS = ("アップ", "ブースト", " up", "boost")

PASSIVE_SKILL_KINDS = ("passive", "パッシブスキル")

# Ranged multipliers such as "x1.5-2.5" with no leading number use this value
RANGED_MULTIPLIER = 2.0

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)")


def parse_damage_multiplier(value: Any) -> float:
    """Parse a multiplier cell.

    A leading number is used as-is ("1.5倍" -> 1.5). Text without one maps to
    ``RANGED_MULTIPLIER`` when it contains "-", otherwise to 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value)
    match = _LEADING_NUMBER.match(text)
    if match:
        return float(match.group(0))
    if "-" in text:
        return RANGED_MULTIPLIER
    return 0.0


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def classify_skill(
    multiplier: float,
    multiplier_text: str = "",
    target_text: str = "",
    effect_text: str = "",
) -> tuple[TargetScope, EffectCategory]:
    """Derive target scope and effect category from a skill's free text.

    Damage wins over heal, heal over buff; anything else is Other.
    """
    if multiplier > 0 or _contains_any(multiplier_text, MULTIPLIER_KEYWORDS):
        category = EffectCategory.DAMAGE
    elif _contains_any(effect_text, HEAL_KEYWORDS):
        category = EffectCategory.HEAL
    elif _contains_any(f" {effect_text}", BUFF_KEYWORDS):
        category = EffectCategory.BUFF
    else:
        category = EffectCategory.OTHER

    if _contains_any(target_text, ALL_TARGET_KEYWORDS):
        scope = TargetScope.ALL_OPPONENTS
    elif _contains_any(target_text, TWO_TARGET_KEYWORDS):
        scope = TargetScope.TWO_RANDOM
    else:
        scope = TargetScope.SINGLE

    return scope, category


def _parse_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _parse_enum(value: Any, aliases: dict[str, Any], field_name: str, card_name: str):
    key = "" if value is None else str(value).strip()
    try:
        return aliases[key] if key in aliases else aliases[key.lower()]
    except KeyError:
        raise CardDataError(card_name, f"unknown {field_name} '{value}'") from None


def parse_skill(data: dict[str, Any], card_name: str = "") -> SkillDescriptor:
    """Build a SkillDescriptor from one skill mapping."""
    name = data.get("name")
    if not name:
        raise CardDataError(card_name, "skill without a name")

    raw_multiplier = data.get("multiplier", data.get("damage_multiplier"))
    multiplier = parse_damage_multiplier(raw_multiplier)
    multiplier_text = "" if raw_multiplier is None else str(raw_multiplier)
    target_text = str(data.get("target", "") or "")
    effect_text = str(data.get("effect", data.get("description", "")) or "")

    scope, category = classify_skill(multiplier, multiplier_text, target_text, effect_text)

    # Explicit tags from the data layer override text classification
    try:
        if data.get("target_scope"):
            scope = TargetScope(str(data["target_scope"]).lower())
        if data.get("effect_category"):
            category = EffectCategory[str(data["effect_category"]).upper()]
    except (KeyError, ValueError):
        raise CardDataError(card_name, f"invalid tags on skill '{name}'") from None

    return SkillDescriptor(
        name=str(name),
        cost_mp=_parse_int(data.get("cost_mp"), 0),
        cost_tu=_parse_int(data.get("cost_tu"), 0),
        damage_multiplier=multiplier,
        target_scope=scope,
        effect_category=category,
        description=effect_text,
    )


def parse_card(data: dict[str, Any], index: int = 0) -> Optional[CardRecord]:
    """Build a CardRecord from one card mapping.

    Returns:
        The record, or None for incomplete entries (no name, no HP)
    """
    name = data.get("name")
    if not name:
        return None

    raw_stats = data.get("stats", {}) or {}
    stat_values = {}
    for stat_name, (keys, default) in STAT_KEYS.items():
        raw = next((raw_stats[key] for key in keys if key in raw_stats), None)
        stat_values[stat_name] = _parse_int(raw, default)
    stats = CardStats(**stat_values)
    if stats.max_hp <= 0:
        return None

    skill_rows = [
        row for row in data.get("skills", []) or []
        if str(row.get("kind", "active")).lower() not in PASSIVE_SKILL_KINDS
    ]
    skill_rows.sort(key=lambda row: _parse_int(row.get("order"), 0))

    return CardRecord(
        card_id=str(data.get("id", f"card_{index}")),
        name=str(name),
        element=_parse_enum(data.get("element"), ELEMENT_ALIASES, "element", name),
        attack_type=_parse_enum(
            data.get("attack_type", "physical"), ATTACK_TYPE_ALIASES, "attack type", name
        ),
        stats=stats,
        skills=tuple(parse_skill(row, name) for row in skill_rows),
        character_name=str(data.get("character", "") or ""),
        rarity=str(data.get("rarity", "") or ""),
    )


class CardCatalog:
    """All cards available for deck building."""

    def __init__(self, cards: Optional[list[CardRecord]] = None):
        self.cards: list[CardRecord] = list(cards or [])
        self.skipped: int = 0

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self):
        return iter(self.cards)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CardCatalog":
        """Parse the ``cards`` list of a loaded YAML document."""
        catalog = cls()
        for index, row in enumerate(data.get("cards", []) or []):
            card = parse_card(row, index)
            if card is None:
                catalog.skipped += 1
                continue
            catalog.cards.append(card)
        return catalog

    @classmethod
    def from_yaml(cls, file_path: Union[str, Path]) -> "CardCatalog":
        """Load a catalog from a YAML file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Card catalog not found: {file_path}")
        except yaml.YAMLError as e:
            raise CardDataError(str(file_path), f"YAML parse error: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "CardCatalog":
        """Load the sample catalog shipped with the package."""
        return cls.from_yaml(Path(__file__).parent.parent.parent / "assets" / "data" / "cards.yaml")

    def get(self, name: str) -> CardRecord:
        for card in self.cards:
            if card.name == name:
                return card
        raise KeyError(f"No card named '{name}'")

    def random_deck(self, count: int, rng: Optional[random.Random] = None,
                    unique: bool = True) -> list[CardRecord]:
        """Draw a deck; unique draws shuffle the catalog, others allow repeats."""
        rng = rng or random.Random()
        if not self.cards:
            return []
        if unique:
            shuffled = self.cards.copy()
            rng.shuffle(shuffled)
            return shuffled[:count]
        return [rng.choice(self.cards) for _ in range(count)]
