"""
Unit tests for the opponent decision policy.
"""
import random
from collections import Counter

import pytest

from cardclash.core.data import Side
from cardclash.game.ai import AIController, RandomSkillAI
from tests.test_utils import CardBuilder


class TestAIController:
    """Test the abstract policy."""

    def test_cannot_instantiate_base(self):
        """Test that the base policy is abstract."""
        with pytest.raises(TypeError):
            AIController()

    def test_wait_uses_configured_cost(self):
        """Test the wait fallback cost."""
        ai = RandomSkillAI(wait_tu_cost=75)

        action = ai.wait("nothing to do")

        assert action.is_wait
        assert action.skill.cost_tu == 75


class TestRandomSkillAI:
    """Test random selection among affordable skills."""

    def test_only_affordable_skills(self):
        """Test that skills costing more MP than available are never picked."""
        cheap = CardBuilder.skill("Cheap", cost_mp=0)
        pricey = CardBuilder.skill("Pricey", cost_mp=5)
        unit = CardBuilder.unit("Foe", Side.ENEMY, mp=2, skills=[cheap, pricey])
        ai = RandomSkillAI(rng=random.Random(7))

        picks = {ai.decide(unit).skill.name for _ in range(30)}

        assert picks == {"Cheap"}

    def test_mp_granting_skill_is_affordable(self):
        """Test that negative-cost skills are affordable at zero MP."""
        charge = CardBuilder.skill("Charge", cost_mp=-2, multiplier=0)
        unit = CardBuilder.unit("Foe", Side.ENEMY, mp=0, skills=[charge])

        assert RandomSkillAI().decide(unit).skill.name == "Charge"

    def test_waits_when_nothing_affordable(self):
        """Test the wait fallback."""
        unit = CardBuilder.unit("Foe", Side.ENEMY, mp=0,
                                skills=[CardBuilder.skill("Big", cost_mp=3)])

        action = RandomSkillAI(wait_tu_cost=50).decide(unit)

        assert action.is_wait
        assert action.skill.cost_tu == 50
        assert "cannot afford" in action.reasoning

    def test_choice_is_spread_across_skills(self):
        """Test that every affordable skill gets picked eventually."""
        skills = [CardBuilder.skill(f"S{i}") for i in range(3)]
        unit = CardBuilder.unit("Foe", Side.ENEMY, skills=skills)
        ai = RandomSkillAI(rng=random.Random(42))

        counts = Counter(ai.decide(unit).skill.name for _ in range(300))

        assert set(counts) == {"S0", "S1", "S2"}

    def test_targets_left_to_pipeline(self):
        """Test that the policy never picks targets."""
        unit = CardBuilder.unit("Foe", Side.ENEMY)

        assert RandomSkillAI().decide(unit).targets == ()
