"""Keyword-based intent classification for incoming assistant queries.

Every query is classified into exactly one ``Intent`` by walking
``INTENT_RULES`` in order and returning the first rule that matches.  A
rule matches when any of its keywords is a substring of the lower-cased
query and its optional predicate holds.  Nothing matched means
``Intent.CAREER_OR_GENERAL``, so classification never fails.

The keyword lists overlap (``"schedule"`` vs. ``"schedule a meeting"``,
``"hi"`` vs. ``"hiring"``, ``"ok"`` vs. ``"book"``).  Those overlaps are
resolved only by rule order, which is part of the behaviour clients rely
on: reorder rules and user-facing replies change.  Treat the lists as an
append-only configuration table.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from langchain_core.messages import BaseMessage

logger = logging.getLogger(__name__)


class Intent(str, Enum):
    """Discrete intents, declared in evaluation priority order."""

    RESUME_DOWNLOAD = "resume_download"
    NAME_QUERY = "name_query"
    AVAILABILITY_QUESTION = "availability_question"
    DIRECT_SCHEDULING_REQUEST = "direct_scheduling_request"
    EXPLICIT_SCHEDULE_CONFIRMATION = "explicit_schedule_confirmation"
    TIME_DISCUSSION_REDIRECT = "time_discussion_redirect"
    SALARY_REDIRECT = "salary_redirect"
    CONVERSATIONAL = "conversational"
    OBVIOUS_NON_CAREER = "obvious_non_career"
    CAREER_OR_GENERAL = "career_or_general"


# Intents answered by the language model; everything else is canned.
MODEL_INTENTS = frozenset({Intent.CONVERSATIONAL, Intent.CAREER_OR_GENERAL})


# ── Keyword tables ───────────────────────────────────────────────────

RESUME_DOWNLOAD_KEYWORDS = (
    "download resume",
    "download my resume",
    "download cv",
    "download my cv",
    "get resume",
    "get my resume",
    "send resume",
    "send my resume",
    "resume pdf",
    "cv pdf",
    "download pdf",
    "can i download",
    "your resume",
    "curriculum vitae",
    "my resume",
    "give me resume",
    "can i have resume",
    "i want resume",
    "show me resume",
    "share resume",
)

NAME_QUERY_KEYWORDS = (
    "what is my name",
    "what's my name",
    "whats my name",
    "my name is",
    "tell me my name",
    "do you know my name",
    "what do you call me",
    "who am i",
)

AVAILABILITY_KEYWORDS = (
    "are you available",
    "are you free",
    "when are you free",
    "when are you available",
    "available tomorrow",
    "available today",
    "available next week",
    "free tomorrow",
    "free today",
    "free next week",
)

DIRECT_SCHEDULING_KEYWORDS = (
    "schedule a meeting",
    "schedule a call",
    "book a meeting",
    "set up a meeting",
    "can we schedule",
    "can we meet",
    "let's schedule",
    "let's meet",
    "arrange a meeting",
    "arrange a call",
    "book an appointment",
    "set up an appointment",
)

# Job descriptions often contain scheduling-adjacent words; any of these
# suppresses the availability and direct-scheduling intents.
JOB_CONTEXT_KEYWORDS = (
    "we are looking for",
    "looking for a",
    "hiring",
    "job opening",
    "position",
    "developer with",
    "experience",
    "years of experience",
    "candidate",
    "applicant",
    "role",
    "requirements",
    "skills",
    "qualification",
)

EXPLICIT_SCHEDULE_KEYWORDS = ("schedule meeting",)

TIME_SCHEDULING_KEYWORDS = (
    "available at",
    "free at",
    "what time",
    "which time",
    "when would",
    "when can",
    "schedule",
)

# Substrings that mark an earlier message as part of a scheduling thread.
MEETING_HISTORY_MARKERS = (
    "schedule a meeting",
    "schedule meeting",
    "meeting",
    "available",
    "free",
)

SALARY_KEYWORDS = (
    "salary",
    "compensation",
    "pay",
    "wage",
    "salary expectations",
    "salary range",
    "what do you charge",
    "hourly rate",
    "annual salary",
    "compensation package",
    "salary requirement",
    "expected salary",
    "market rate",
    "developer salaries",
    "salary data",
)

CONVERSATIONAL_KEYWORDS = (
    "hello",
    "hi",
    "hey",
    "good morning",
    "good afternoon",
    "good evening",
    "how are you",
    "how do you do",
    "nice to meet you",
    "pleased to meet you",
    "thank you",
    "thanks",
    "welcome",
    "bye",
    "goodbye",
    "see you",
    "talk to you later",
    "have a good day",
    "have a nice day",
    "how is it going",
    "what's up",
    "how have you been",
    "long time no see",
    "it's been a while",
    "how are things",
    "how is everything",
    "what are you up to",
    "how is your day",
    "how was your day",
    "how is your week",
    "how was your weekend",
    "are you doing well",
    "i hope you are well",
    "i hope you're doing well",
    "tell me about yourself",
    "who are you",
    "what are you",
    "introduce yourself",
    "about yourself",
    "something about yourself",
    "no problem",
    "no worries",
    "sure thing",
    "alright",
    "okay",
    "ok",
    "cool",
    "great",
    "awesome",
    "perfect",
    "sounds good",
)

NON_CAREER_KEYWORDS = (
    "capital of",
    "what is the weather",
    "current president",
    "president of",
    "who is the president",
    "prime minister of",
    "who is the prime minister",
    "population of",
    "currency of",
    "time zone",
    "geography",
    "history of",
    "when was",
    "who invented",
    "recipe for",
    "how to cook",
    "sports score",
    "celebrity",
    "movie",
    "book recommendation",
    "travel",
    "vacation",
    "restaurant",
    "shopping",
    "what does the name",
    "meaning of the name",
    "name means",
    "origin of the name",
    "etymology of",
)


# ── Rule table ───────────────────────────────────────────────────────


def contains_any(text: str, keywords: Sequence[str]) -> bool:
    """True if any keyword is a substring of *text* (already lower-cased)."""
    return any(keyword in text for keyword in keywords)


@dataclass(frozen=True)
class QuerySignals:
    """Pre-computed facts about a query that rule predicates depend on."""

    text: str
    has_job_context: bool
    asks_availability: bool
    has_meeting_context: bool

    @classmethod
    def from_query(cls, query: str, history: Sequence[BaseMessage]) -> QuerySignals:
        text = query.lower()
        return cls(
            text=text,
            has_job_context=contains_any(text, JOB_CONTEXT_KEYWORDS),
            asks_availability=contains_any(text, AVAILABILITY_KEYWORDS),
            has_meeting_context=any(
                contains_any(_content_of(msg).lower(), MEETING_HISTORY_MARKERS)
                for msg in history
            ),
        )


@dataclass(frozen=True)
class IntentRule:
    intent: Intent
    keywords: tuple[str, ...]
    predicate: Callable[[QuerySignals], bool] | None = None

    def matches(self, signals: QuerySignals) -> bool:
        if not contains_any(signals.text, self.keywords):
            return False
        return self.predicate is None or self.predicate(signals)


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(Intent.RESUME_DOWNLOAD, RESUME_DOWNLOAD_KEYWORDS),
    IntentRule(Intent.NAME_QUERY, NAME_QUERY_KEYWORDS),
    IntentRule(
        Intent.AVAILABILITY_QUESTION,
        AVAILABILITY_KEYWORDS,
        lambda s: not s.has_job_context,
    ),
    IntentRule(
        Intent.DIRECT_SCHEDULING_REQUEST,
        DIRECT_SCHEDULING_KEYWORDS,
        lambda s: not s.has_job_context,
    ),
    IntentRule(Intent.EXPLICIT_SCHEDULE_CONFIRMATION, EXPLICIT_SCHEDULE_KEYWORDS),
    # Generic "what time" questions only redirect inside a scheduling thread.
    IntentRule(
        Intent.TIME_DISCUSSION_REDIRECT,
        TIME_SCHEDULING_KEYWORDS,
        lambda s: s.has_meeting_context or s.asks_availability,
    ),
    IntentRule(Intent.SALARY_REDIRECT, SALARY_KEYWORDS),
    # Must run before the non-career filter: "okay"/"cool" are small talk.
    IntentRule(Intent.CONVERSATIONAL, CONVERSATIONAL_KEYWORDS),
    IntentRule(Intent.OBVIOUS_NON_CAREER, NON_CAREER_KEYWORDS),
)


def _content_of(message: BaseMessage) -> str:
    content = message.content
    return content if isinstance(content, str) else str(content)


def classify(query: str, history: Sequence[BaseMessage] = ()) -> Intent:
    """Return the first matching intent for *query* given prior *history*."""
    signals = QuerySignals.from_query(query, history)
    for rule in INTENT_RULES:
        if rule.matches(signals):
            logger.debug("Query classified as %s", rule.intent.value)
            return rule.intent
    logger.debug("Query classified as %s (default)", Intent.CAREER_OR_GENERAL.value)
    return Intent.CAREER_OR_GENERAL
