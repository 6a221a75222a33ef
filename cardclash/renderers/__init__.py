"""Presentation layers that subscribe to battle events."""

from .console_presenter import ConsolePresenter

__all__ = ["ConsolePresenter"]
