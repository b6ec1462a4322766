"""Recipe data models.

Recipes are stored as camelCase JSON documents (prepTime, cookTime, ...);
from_dict accepts that shape.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Ingredient:
    """One ingredient line."""

    name: str
    amount: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Ingredient":
        """Create from a stored document."""
        return cls(name=str(data.get("name", "")), amount=str(data.get("amount", "")))


@dataclass(frozen=True)
class Step:
    """One cooking step."""

    id: str
    description: str
    image: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str, index: int = 0) -> "Step":
        """Create from a stored document.

        Plain strings are accepted as step descriptions.
        """
        if isinstance(data, str):
            return cls(id=f"step-{index + 1}", description=data)
        return cls(
            id=str(data.get("id", f"step-{index + 1}")),
            description=str(data.get("description", "")),
            image=data.get("image"),
        )


@dataclass(frozen=True)
class Recipe:
    """A recipe from the catalog."""

    id: str
    title: str
    description: str = ""
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 0
    difficulty: str = ""
    image: str | None = None
    ingredients: tuple[Ingredient, ...] = ()
    steps: tuple[Step, ...] = ()
    tips: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def total_steps(self) -> int:
        """Number of steps."""
        return len(self.steps)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recipe":
        """Create a recipe from a stored JSON document.

        Args:
            data: Document with camelCase keys

        Returns:
            Recipe instance

        Raises:
            ValueError: If id or title is missing
        """
        recipe_id = data.get("id")
        title = data.get("title")
        if not recipe_id or not title:
            raise ValueError("Recipe requires 'id' and 'title'")

        return cls(
            id=str(recipe_id),
            title=str(title),
            description=str(data.get("description", "")),
            prep_time=int(data.get("prepTime", 0) or 0),
            cook_time=int(data.get("cookTime", 0) or 0),
            servings=int(data.get("servings", 0) or 0),
            difficulty=str(data.get("difficulty", "")),
            image=data.get("image"),
            ingredients=tuple(Ingredient.from_dict(i) for i in data.get("ingredients", [])),
            steps=tuple(Step.from_dict(s, n) for n, s in enumerate(data.get("steps", []))),
            tips=tuple(str(t) for t in data.get("tips", [])),
            tags=tuple(str(t) for t in data.get("tags", [])),
        )


@dataclass(frozen=True)
class RecipeContext:
    """Snapshot of the recipe position sent along with assistant queries."""

    title: str
    current_step: str
    step_number: int
    total_steps: int
    ingredients: list[Ingredient] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys the assistant backend expects."""
        return {
            "title": self.title,
            "currentStep": self.current_step,
            "stepNumber": self.step_number,
            "totalSteps": self.total_steps,
            "ingredients": [{"name": i.name, "amount": i.amount} for i in self.ingredients],
        }


__all__ = ["Ingredient", "Recipe", "RecipeContext", "Step"]
