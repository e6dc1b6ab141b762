"""Chat service: rule-based replies about government schemes.

Learn: There is no model behind the chatbot. Each rule is a topic,
a set of keywords and a canned reply. The message is lowercased and
split into words; the first rule with a keyword among those words
wins, otherwise the fallback reply is used. The bot keeps no state
between messages.
"""

import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from voxai.services.scheme_service import SchemeService

_WORD = re.compile(r"[a-z]+")


@dataclass(frozen=True)
class Rule:
    topic: str
    keywords: frozenset[str]
    reply: str


RULES = [
    Rule(
        "greeting",
        frozenset({"hi", "hello", "hey", "namaste"}),
        "Hello{name}! I can help you find government schemes. "
        "Ask me about scholarships, startups, farming, health, housing or pensions.",
    ),
    Rule(
        "education",
        frozenset({"scholarship", "scholarships", "education", "student", "students", "study"}),
        "For students there is the PM Scholarship Scheme, which gives financial "
        "assistance to meritorious students. Check the Schemes page for eligibility.",
    ),
    Rule(
        "startup",
        frozenset({"startup", "startups", "business", "entrepreneur", "entrepreneurship", "loan"}),
        "Startup India offers support and funding for new startups, including "
        "tax benefits and easier compliance for recognised startups.",
    ),
    Rule(
        "agriculture",
        frozenset({"farmer", "farmers", "farming", "agriculture", "crop", "crops", "kisan"}),
        "Farmers can look at PM-KISAN for direct income support and PM Fasal Bima "
        "Yojana for crop insurance.",
    ),
    Rule(
        "health",
        frozenset({"health", "hospital", "medical", "insurance", "treatment"}),
        "Ayushman Bharat (PM-JAY) provides health cover for hospital treatment "
        "to eligible families.",
    ),
    Rule(
        "housing",
        frozenset({"house", "housing", "home", "awas"}),
        "Pradhan Mantri Awas Yojana helps eligible families build or buy a home.",
    ),
    Rule(
        "pension",
        frozenset({"pension", "retirement", "elderly", "old"}),
        "Atal Pension Yojana offers a guaranteed pension after 60 for workers "
        "in the unorganised sector.",
    ),
    Rule(
        "schemes",
        frozenset({"scheme", "schemes", "list", "help", "available"}),
        "Here are some schemes you can explore: {titles}.",
    ),
    Rule(
        "thanks",
        frozenset({"thanks", "thank", "thx"}),
        "You're welcome! Ask me anything else about government schemes.",
    ),
]

FALLBACK_REPLY = (
    "Sorry, I didn't understand that. Try asking about scholarships, startups, "
    "farming, health, housing or pensions."
)


@dataclass
class ChatReply:
    reply: str
    topic: Optional[str] = None


def match_rule(message: str) -> Optional[Rule]:
    """Return the first rule whose keywords appear in ``message``."""
    words = set(_WORD.findall(message.lower()))
    for rule in RULES:
        if rule.keywords & words:
            return rule
    return None


class ChatService:
    """Answers chat messages from the rule table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def respond(self, message: str, user_name: Optional[str] = None) -> ChatReply:
        rule = match_rule(message)
        if rule is None:
            return ChatReply(reply=FALLBACK_REPLY)

        if rule.topic == "schemes":
            schemes = await SchemeService(self.db).list_schemes()
            titles = ", ".join(s.title for s in schemes[:5])
            if not titles:
                return ChatReply(reply="No schemes have been listed yet.", topic=rule.topic)
            return ChatReply(reply=rule.reply.format(titles=titles), topic=rule.topic)

        if rule.topic == "greeting":
            name = f" {user_name}" if user_name else ""
            return ChatReply(reply=rule.reply.format(name=name), topic=rule.topic)

        return ChatReply(reply=rule.reply, topic=rule.topic)
