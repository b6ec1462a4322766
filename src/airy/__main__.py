"""AIry Voice Core entry point.

Usage:
    python -m airy [OPTIONS]

Options:
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (dev, prod, test)
    --recipe ID      Recipe to cook
    --mock           Use mock speech, alert and assistant components
    --help           Show this help message
    --version        Show version

Utterances are read from stdin, one per line, and go through the same
path as recognized speech.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from . import __version__
from .config.loader import load_config
from .config.profiles import detect_profile

if TYPE_CHECKING:
    from .router.orchestrator import Orchestrator

# Try to find .env in project root (parent of src/)
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()  # Fall back to current directory


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="airy",
        description="AIry Voice Core - Voice assistant for cooking with recipes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m airy                        # Run with auto-detected profile
  python -m airy --profile dev          # Run with development profile
  python -m airy --recipe nikujaga      # Start cooking a recipe
  python -m airy --config my.yaml       # Run with custom config file

Environment:
  AIRY_PROFILE             Set profile (dev, prod, test)
  AIRY_ASSISTANT_ENDPOINT  Recipe assistant function URL
  ANTHROPIC_API_KEY        API key for the claude assistant provider
""",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--recipe",
        metavar="ID",
        help="Recipe to cook (defaults to the first recipe in the catalog)",
    )

    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock components (no speech output, alert sound or network)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"AIry Voice Core v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and recipes, then exit",
    )

    return parser.parse_args(argv)


def resolve_recipes_path(path: str) -> Path:
    """Resolve a relative recipe path against the cwd, then the project root."""
    candidate = Path(path)
    if candidate.is_absolute() or candidate.exists():
        return candidate
    return _project_root / candidate


def print_state(orchestrator: "Orchestrator") -> None:
    """Print the parts of the session a screen would show."""
    session = orchestrator.session
    timer = orchestrator.timer.state

    step = session.current_step
    recipe = session.current_recipe
    if recipe is not None and step is not None:
        print(f"  [{session.current_step_index + 1}/{recipe.total_steps}] {step.description}")
    if orchestrator.timer.is_confirm_dialog_visible:
        print(f"  Timer pending: {timer.description or ''} {timer.display}")
    elif timer.is_active:
        print(f"  Timer running: {timer.display}")
    if session.is_video_modal_visible:
        print(f"  Video: {session.current_video_url}")


def run_repl(orchestrator: "Orchestrator", logger: logging.Logger) -> None:
    """Feed stdin lines to the voice loop until EOF."""
    session = orchestrator.session
    seen = len(session.conversation_history)
    for line in sys.stdin:
        text = line.strip()
        if not text:
            continue
        orchestrator.recognition.submit_text(text)

        # Every spoken response adds to the history, even a repeated one
        history_length = len(session.conversation_history)
        if history_length > seen:
            print(f"AIry: {session.last_ai_response}")
            seen = history_length
        else:
            logger.debug("No spoken response")
        print_state(orchestrator)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for AIry Voice Core.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_args(argv)

    # Load configuration
    try:
        if args.config:
            config = load_config(path=args.config)
        elif args.profile:
            config = load_config(profile=args.profile)
        else:
            # Auto-detect profile
            profile = detect_profile()
            config = load_config(profile=profile.value)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Setup logging
    setup_logging(config.logging.level)
    logger = logging.getLogger("airy")

    logger.info(f"AIry Voice Core v{__version__}")
    logger.info(f"Profile: {args.profile or detect_profile().value}")
    logger.info(f"Log level: {config.logging.level}")

    from .recipes import RecipeCatalog

    try:
        catalog = RecipeCatalog.from_file(resolve_recipes_path(config.recipes.path))
    except FileNotFoundError:
        print(f"Error: Recipe file not found: {config.recipes.path}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error loading recipes: {e}", file=sys.stderr)
        return 1

    if args.recipe:
        recipe = catalog.get(args.recipe)
        if recipe is None:
            print(f"Error: Unknown recipe: {args.recipe}", file=sys.stderr)
            return 1
    else:
        recipes = catalog.all()
        recipe = recipes[0] if recipes else None

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"Wake words: {', '.join(config.wake_word.tokens)}")
        logger.info(f"Locale: {config.voice.locale}")
        logger.info(f"Assistant: {config.assistant.provider}")
        logger.info(f"TTS voice: {config.tts.voice}")
        logger.info(f"Recipes: {len(catalog)}")
        return 0

    # Print startup banner
    print("\n" + "=" * 50)
    print("  AIry Voice Core")
    print("=" * 50)
    print(f"  Version: {__version__}")
    print(f"  Profile: {args.profile or detect_profile().value}")
    print(f"  Wake word: {config.wake_word.tokens[0]}")
    print(f"  Assistant: {config.assistant.provider}")
    print(f"  Recipe: {recipe.title if recipe is not None else '-'}")
    print("=" * 50 + "\n")

    logger.info("Initializing voice loop components...")

    try:
        from .router.orchestrator import Orchestrator

        use_mocks = config.testing.use_mocks or args.mock
        orchestrator = Orchestrator.from_config(config, use_mocks=use_mocks, recipe=recipe)
        logger.info("Components initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize components: {e}")
        print(f"\nError: Failed to initialize voice loop: {e}", file=sys.stderr)
        return 1

    print(f"Type what you would say, starting with '{config.wake_word.tokens[0]}'.")
    print("Press Ctrl+D to stop.\n")

    try:
        orchestrator.start()
        print_state(orchestrator)
        run_repl(orchestrator, logger)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        orchestrator.shutdown()
        logger.info("AIry shut down gracefully")

    return 0


if __name__ == "__main__":
    sys.exit(main())
