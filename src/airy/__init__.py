"""AIry Voice Core - Hands-free assistant for cooking along with a recipe.

AIry listens while you cook and provides:
- Wake word gated commands ("アイリ、次")
- A kitchen timer driven by voice ("タイマー 3分")
- Recipe video control while the video is open
- Free-form cooking questions answered by an LLM

Usage:
    python -m airy --profile dev
    python -m airy --config config/dev.yaml --recipe nikujaga
"""

__version__ = "0.1.0"

from .config import AiryConfig
from .config.loader import load_config

__all__ = [
    "AiryConfig",
    "__version__",
    "load_config",
]
