"""
Item Finder - LLM-based lookup of the closest item in a list.

Asks an OpenAI chat-completion model to pick the list item most similar
to a searched value, and optionally scores the match with a second call
so that weak matches can be returned as None.

Log output of this package is disabled until the application enables it
with logger.enable("item_finder"), as setup_logging() in main does.
"""

from loguru import logger

from shared.models import MatchOutcome

from .finder import ItemFinder
from .transport import ChatCompletionClient

logger.disable("item_finder")

__all__ = ["ItemFinder", "MatchOutcome", "ChatCompletionClient"]
