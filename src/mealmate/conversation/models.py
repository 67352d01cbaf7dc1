"""Conversation turn context and the decisions the policy can make."""

from dataclasses import dataclass
from datetime import date
from typing import Literal, Union

EMPTY_MESSAGE_REPLY = "Try sending me a question about meals or nutrition and I'll do my best to help!"


@dataclass(frozen=True)
class ConversationTurnContext:
    """Everything the policy knows about a turn. Not persisted."""

    latest_message: str
    saved_recipe_count: int | None = None
    has_existing_plan: bool = False


@dataclass(frozen=True)
class AskEditOrNew:
    """A plan already exists; ask whether to edit it or start a new one."""

    @property
    def message(self) -> str:
        return (
            "You already have a meal plan. Would you like to **edit** your current plan "
            "or create a **new** one?"
        )

    def to_response(self) -> dict:
        return {"message": self.message, "needs_action": True}


@dataclass(frozen=True)
class AskDayCount:
    """Ask how many days the plan should cover."""

    flavor: Literal["edit", "new"] | None = None

    @property
    def message(self) -> str:
        question = "How many days should the plan cover? (e.g. 3, 5, 7 days or 2 weeks)"
        if self.flavor == "edit":
            return f"Let's update your meal plan. {question}"
        if self.flavor == "new":
            return f"Let's create a new meal plan. {question}"
        return f"I'd love to build you a meal plan! {question}"

    def to_response(self) -> dict:
        return {"message": self.message, "needs_days": True}


@dataclass(frozen=True)
class Generate:
    """Enough is known to generate the plan."""

    day_count: int
    start_date: date | None = None

    @property
    def message(self) -> str:
        when = f" starting {self.start_date.strftime('%B %d, %Y')}" if self.start_date else ""
        return f"Great! Creating your {self.day_count}-day meal plan{when} using your saved recipes..."

    def to_response(self) -> dict:
        return {
            "message": self.message,
            "should_generate": True,
            "number_of_days": self.day_count,
            "start_date": self.start_date.isoformat() if self.start_date else None,
        }


@dataclass(frozen=True)
class FreeformReply:
    """
    Open-ended chat turn.

    `reply` is set when the policy already knows the answer (blank input);
    otherwise the caller asks the chat verb of the gateway.
    """

    reply: str | None = None

    @property
    def message(self) -> str | None:
        return self.reply

    def to_response(self) -> dict:
        return {"message": self.reply}


ConversationDecision = Union[AskEditOrNew, AskDayCount, Generate, FreeformReply]
