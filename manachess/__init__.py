"""ManaChess: chess with a mana, cooldown and status-effect layer."""

__version__ = "0.1.0"
