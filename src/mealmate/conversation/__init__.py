"""Turn-by-turn conversation policy for meal planning."""

from .dates import parse_start_date
from .models import (
    AskDayCount,
    AskEditOrNew,
    ConversationDecision,
    ConversationTurnContext,
    FreeformReply,
    Generate,
)
from .policy import decide

__all__ = [
    "AskDayCount",
    "AskEditOrNew",
    "ConversationDecision",
    "ConversationTurnContext",
    "FreeformReply",
    "Generate",
    "decide",
    "parse_start_date",
]
