"""API routes."""

from . import auth, food, nutrition

__all__ = ["auth", "food", "nutrition"]
