"""Decision policies for units that are not controlled by a human."""

from .ai_controller import AIController, RandomSkillAI

__all__ = ["AIController", "RandomSkillAI"]
