from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

from ..core.exceptions import CollaboratorError

logger = logging.getLogger(__name__)

ADVICE_FALLBACK = "KEEP SHINING FOR JESUS! (ADD API KEY TO ENABLE AI ADVICE)"
ADVICE_EMPTY = "KEEP SHINING FOR JESUS! YOU ARE DOING AMAZING!"


class TextGenerator(Protocol):
    def generate_text(self, prompt: str) -> str:
        raise NotImplementedError

    def generate_json(self, prompt: str) -> Any:
        """Parsed JSON reply."""

        raise NotImplementedError


@dataclass(frozen=True)
class QuizQuestion:
    q: str
    options: list[str]
    a: str


@dataclass(frozen=True)
class Story:
    title: str
    content: str
    topic: str
    quiz: list[QuizQuestion] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "content": self.content,
            "topic": self.topic,
            "quiz": [{"q": q.q, "options": list(q.options), "a": q.a} for q in self.quiz],
        }


def advice_prompt(points: int, rank: int, age_group: str, name: str) -> str:
    return (
        "You are a friendly and encouraging mentor for a child in a church kids ministry. "
        f"The child, {name}, has {points} points and is ranked #{rank} in the {age_group} age group. "
        "Give 3 short, specific, fun, and biblical tips on how they can earn more points "
        "(like memorizing verses, helping others, being early, or participation) and grow in their faith. "
        "Keep the output in ALL CAPS, very positive, and kid-friendly (short sentences)."
    )


def story_prompt(*, rank: int, age_group: str, past_topics: Sequence[str]) -> str:
    return (
        "Create a NEW Bible story for a child.\n"
        f"Profile:\n- Rank: {rank}\n- Age Group: {age_group}\n"
        f"EXCLUDE past topics: {', '.join(past_topics)}.\n"
        'Respond with JSON only: {"title": str, "content": str, '
        '"quiz": [{"q": str, "options": [str], "a": str}], "story_topic": str}'
    )


def parse_story(data) -> Story:
    if not isinstance(data, dict):
        raise CollaboratorError("AI story response is not an object")
    try:
        quiz = [
            QuizQuestion(q=str(item["q"]), options=[str(o) for o in item.get("options", [])], a=str(item["a"]))
            for item in data.get("quiz") or []
        ]
        return Story(
            title=str(data["title"]),
            content=str(data["content"]),
            topic=str(data.get("story_topic") or data.get("topic") or data["title"]),
            quiz=quiz,
        )
    except (KeyError, TypeError) as e:
        raise CollaboratorError("AI story response is missing fields") from e


class MentorService:
    """Kid-facing AI content: mentor advice and Bible stories."""

    def __init__(self, generator: Optional[TextGenerator]):
        self._generator = generator

    @property
    def enabled(self) -> bool:
        return self._generator is not None

    def advice(self, points: int, rank: int, age_group: str, name: str) -> str:
        if self._generator is None:
            return ADVICE_FALLBACK
        text = self._generator.generate_text(advice_prompt(points, rank, age_group, name))
        return text.strip() or ADVICE_EMPTY

    def story(self, *, rank: int, age_group: str, past_topics: Sequence[str] = ()) -> Story:
        if self._generator is None:
            raise CollaboratorError("Story generation is not configured")
        return parse_story(self._generator.generate_json(story_prompt(rank=rank, age_group=age_group, past_topics=past_topics)))
