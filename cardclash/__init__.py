"""cardclash - a turn-order combat simulator for a card battle game."""

__version__ = "0.1.0"
