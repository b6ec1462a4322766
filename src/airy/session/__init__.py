"""Cooking session state store."""

from .state import ConversationMessage, CookingSession

__all__ = ["ConversationMessage", "CookingSession"]
