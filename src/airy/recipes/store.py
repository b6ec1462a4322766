"""Read-only recipe catalog loaded from a JSON file."""

import json
import logging
from pathlib import Path

from .models import Recipe

logger = logging.getLogger(__name__)


class RecipeCatalog:
    """In-memory recipe catalog.

    The voice core never writes recipes; it only looks them up.
    """

    def __init__(self, recipes: list[Recipe] | None = None) -> None:
        """Initialize catalog.

        Args:
            recipes: Initial recipes
        """
        self._recipes: dict[str, Recipe] = {}
        for recipe in recipes or []:
            self._recipes[recipe.id] = recipe

    @classmethod
    def from_file(cls, path: str | Path) -> "RecipeCatalog":
        """Load a catalog from a JSON file holding a list of recipes.

        Entries that fail to parse are skipped with a warning.

        Args:
            path: JSON file path

        Returns:
            Loaded catalog

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Recipe file not found: {path}")

        with open(path, encoding="utf-8") as f:
            raw = json.load(f)

        if isinstance(raw, dict):
            raw = raw.get("recipes", [])

        recipes = []
        for entry in raw:
            try:
                recipes.append(Recipe.from_dict(entry))
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping invalid recipe entry: {e}")

        logger.info(f"Loaded {len(recipes)} recipes from {path}")
        return cls(recipes)

    def get(self, recipe_id: str) -> Recipe | None:
        """Look up a recipe by id."""
        return self._recipes.get(recipe_id)

    def all(self) -> list[Recipe]:
        """All recipes in load order."""
        return list(self._recipes.values())

    def __len__(self) -> int:
        return len(self._recipes)


__all__ = ["RecipeCatalog"]
