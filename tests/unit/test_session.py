"""Unit tests for the cooking session state store."""

import pytest

from airy.recipes import Ingredient, Recipe, Step
from airy.session import CookingSession


@pytest.fixture
def recipe() -> Recipe:
    """Three-step recipe."""
    return Recipe(
        id="tamagoyaki",
        title="卵焼き",
        ingredients=(Ingredient("卵", "3個"), Ingredient("砂糖", "大さじ1")),
        steps=(
            Step("s1", "卵を溶きほぐす"),
            Step("s2", "フライパンで焼く"),
            Step("s3", "巻いて5分冷ます"),
        ),
    )


class TestStepNavigation:
    """Tests for step navigation."""

    def test_starts_on_first_step(self, recipe: Recipe) -> None:
        """Test a new session starts on step 0."""
        session = CookingSession(recipe)
        assert session.current_step_index == 0
        assert session.current_step == recipe.steps[0]

    def test_next_and_previous(self, recipe: Recipe) -> None:
        """Test moving forward and back."""
        session = CookingSession(recipe)
        assert session.next_step() == 1
        assert session.next_step() == 2
        assert session.previous_step() == 1
        assert session.current_step == recipe.steps[1]

    def test_previous_at_first_step_stays(self, recipe: Recipe) -> None:
        """Test previous_step on the first step leaves the index at 0."""
        session = CookingSession(recipe)
        assert session.previous_step() == 0
        assert session.current_step_index == 0

    def test_next_at_last_step_stays(self, recipe: Recipe) -> None:
        """Test next_step on the last step leaves the index unchanged."""
        session = CookingSession(recipe)
        session.go_to_step(2)
        assert session.next_step() == 2
        assert session.current_step_index == 2

    def test_go_to_step_clamps(self, recipe: Recipe) -> None:
        """Test go_to_step clamps out-of-range indexes."""
        session = CookingSession(recipe)
        assert session.go_to_step(10) == 2
        assert session.go_to_step(-3) == 0

    def test_navigation_without_recipe(self) -> None:
        """Test navigation is a no-op without a recipe."""
        session = CookingSession()
        assert session.next_step() == 0
        assert session.previous_step() == 0
        assert session.current_step is None

    def test_navigation_with_empty_recipe(self) -> None:
        """Test navigation is a no-op for a recipe without steps."""
        session = CookingSession(Recipe(id="empty", title="空"))
        assert session.next_step() == 0
        assert session.current_step is None

    def test_set_recipe_resets_step(self, recipe: Recipe) -> None:
        """Test switching recipe goes back to the first step."""
        session = CookingSession(recipe)
        session.next_step()
        session.set_current_recipe(recipe)
        assert session.current_step_index == 0


class TestConversationLog:
    """Tests for the conversation log."""

    def test_append_in_order(self) -> None:
        """Test messages are appended oldest first."""
        session = CookingSession()
        session.add_conversation_message("質問", is_user=True)
        session.add_conversation_message("回答", is_user=False)

        history = session.conversation_history
        assert [m.text for m in history] == ["質問", "回答"]
        assert [m.is_user for m in history] == [True, False]
        assert history[0].timestamp <= history[1].timestamp

    def test_message_ids_unique(self) -> None:
        """Test every message gets its own id."""
        session = CookingSession()
        ids = {session.add_conversation_message(str(i), is_user=True).id for i in range(20)}
        assert len(ids) == 20
        assert all(i.startswith("msg-") for i in ids)

    def test_history_is_a_copy(self) -> None:
        """Test mutating the returned list does not touch the log."""
        session = CookingSession()
        session.add_conversation_message("a", is_user=True)
        session.conversation_history.clear()
        assert len(session.conversation_history) == 1


class TestRecipeContext:
    """Tests for build_recipe_context."""

    def test_none_without_recipe(self) -> None:
        """Test no context without a recipe."""
        assert CookingSession().build_recipe_context() is None

    def test_context_follows_step(self, recipe: Recipe) -> None:
        """Test the context reflects the current step."""
        session = CookingSession(recipe)
        session.next_step()

        context = session.build_recipe_context()

        assert context is not None
        assert context.title == "卵焼き"
        assert context.current_step == "フライパンで焼く"
        assert context.step_number == 2
        assert context.total_steps == 3
        assert [i.name for i in context.ingredients] == ["卵", "砂糖"]


class TestReset:
    """Tests for reset_cooking_session."""

    def test_reset_clears_transient_state(self, recipe: Recipe) -> None:
        """Test reset clears everything except the recipe."""
        session = CookingSession(recipe)
        session.next_step()
        session.set_recognized_text("アイリ次")
        session.set_last_ai_response("次のステップに進みます")
        session.add_conversation_message("AIry次", is_user=True)
        session.set_dialog_visible(True)
        session.set_video_modal_visible(True)
        session.set_current_video_url("https://youtu.be/abcdefghijk")

        session.reset_cooking_session()

        assert session.current_recipe is recipe
        assert session.current_step_index == 0
        assert session.recognized_text == ""
        assert session.last_ai_response == ""
        assert session.conversation_history == []
        assert session.is_response_dialog_visible is False
        assert session.is_video_modal_visible is False
        assert session.current_video_url is None
