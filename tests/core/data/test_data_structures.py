"""
Unit tests for card records, skill descriptors and the shared enums.
"""
import pytest

from cardclash.core.data import (
    CardRecord,
    CardStats,
    EffectCategory,
    Side,
    SkillDescriptor,
    TargetScope,
)


class TestEnums:
    """Test enum helpers."""

    def test_side_opponent(self):
        """Test that each side's opponent is the other side."""
        assert Side.PLAYER.opponent is Side.ENEMY
        assert Side.ENEMY.opponent is Side.PLAYER

    def test_self_directed_categories(self):
        """Test which effect categories target the actor."""
        assert EffectCategory.HEAL.is_self_directed
        assert EffectCategory.BUFF.is_self_directed
        assert not EffectCategory.DAMAGE.is_self_directed
        assert not EffectCategory.OTHER.is_self_directed

    def test_target_scope_values(self):
        """Test that scope tags parse from their data values."""
        assert TargetScope("two_random") is TargetScope.TWO_RANDOM
        assert TargetScope("all_opponents") is TargetScope.ALL_OPPONENTS


class TestCardStats:
    """Test CardStats."""

    def test_get_by_name(self):
        """Test stat lookup by field name."""
        stats = CardStats(max_hp=500, speed=120)

        assert stats.get("max_hp") == 500
        assert stats.get("speed") == 120

    def test_unknown_stat(self):
        """Test that unknown stats raise KeyError."""
        with pytest.raises(KeyError):
            CardStats().get("luck")


class TestSkillDescriptor:
    """Test SkillDescriptor."""

    def test_damaging_requires_positive_multiplier(self):
        """Test is_damaging for zero and positive multipliers."""
        assert SkillDescriptor("Hit", damage_multiplier=1.2).is_damaging
        assert not SkillDescriptor("Focus", damage_multiplier=0).is_damaging

    def test_free_skills(self):
        """Test that free and MP-granting skills count as free."""
        assert SkillDescriptor("Free", cost_mp=0).is_free
        assert SkillDescriptor("Charge", cost_mp=-2).is_free
        assert not SkillDescriptor("Paid", cost_mp=3).is_free

    def test_missing_fields(self):
        """Test required-field validation from the mixin."""
        skill = SkillDescriptor("Broken", target_scope=None)

        assert skill.missing_fields(list(SkillDescriptor.REQUIRED_FIELDS)) == ["target_scope"]
        assert not skill.validate_required_fields(["target_scope"])
        assert skill.validate_required_fields(["name", "cost_tu"])


class TestCardRecord:
    """Test CardRecord."""

    def test_skills_frozen_to_tuple(self):
        """Test that skill lists are stored as tuples."""
        card = CardRecord("001", "Test", skills=[SkillDescriptor("Hit")])

        assert isinstance(card.skills, tuple)
        assert card.skills[0].name == "Hit"
        assert hash(card) is not None
