"""Recipe models and catalog."""

from .models import Ingredient, Recipe, RecipeContext, Step
from .store import RecipeCatalog

__all__ = ["Ingredient", "Recipe", "RecipeCatalog", "RecipeContext", "Step"]
