"""
Learning use cases — quiz, flashcard and mistake-review generation.

Each use case is just a different schema over the same orchestrator entry
point. A result that is not a non-empty list is rejected with ParseError; no
placeholder content is ever substituted, so callers can fall back to their
pre-request state.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from neuralcore.config import TEMPERATURE
from neuralcore.errors import ParseError
from neuralcore.orchestrator import FailoverOrchestrator
from neuralcore.profile import OrchestratorSettings
from neuralcore.prompts import build_flashcard_prompt, build_quiz_prompt, build_review_prompt
from neuralcore.schema import GenerationRequest, array_of, object_of, string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LearnerProfile:
    grade: str
    subject: str


# ── Schemas ──

QUIZ_SCHEMA = array_of(object_of(
    {
        "question": string("The quiz question."),
        "options": array_of(string(), "An array of 4 possible answers."),
        "correctAnswer": string("The correct answer, which must be one of the strings from 'options'."),
        "topic": string("The specific curriculum topic for this question."),
    },
    required=["question", "options", "correctAnswer", "topic"],
))

FLASHCARD_SCHEMA = array_of(object_of(
    {
        "term": string("The key term."),
        "definition": string("A clear definition of the term."),
        "options": array_of(string(), "Optional multiple-choice definitions, including the correct one."),
    },
    required=["term", "definition"],
))

REVIEW_SCHEMA = array_of(object_of(
    {
        "question": string(),
        "userAnswer": string(),
        "correctAnswer": string(),
        "explanation": string("A simple explanation of the correct answer, aimed at the student's grade."),
    },
    required=["question", "userAnswer", "correctAnswer", "explanation"],
))


def _require_items(result, what: str) -> list:
    if not isinstance(result, list) or not result:
        raise ParseError(f"Backend returned invalid or empty {what} data")
    return result


# ── Request builders ──

def build_quiz_request(profile: LearnerProfile, weak_topics: Sequence[str] = (),
                       focus_topics: Sequence[str] = (), count: int = 10,
                       remediation: bool = False) -> GenerationRequest:
    prompt = build_quiz_prompt(profile.grade, profile.subject, count,
                               weak_topics=weak_topics, focus_topics=focus_topics,
                               remediation=remediation)
    return GenerationRequest(prompt, QUIZ_SCHEMA, temperature=TEMPERATURE["quiz"])


def build_flashcard_request(profile: LearnerProfile, difficulty: str = "medium",
                            count: int = 10) -> GenerationRequest:
    prompt = build_flashcard_prompt(profile.grade, profile.subject, difficulty, count)
    return GenerationRequest(prompt, FLASHCARD_SCHEMA, temperature=TEMPERATURE["flashcards"])


def build_review_request(profile: LearnerProfile, incorrect: Sequence[dict]) -> GenerationRequest:
    """``incorrect`` items are ``{"question": <quiz question>, "userAnswer": str}``."""
    items = [
        {
            "question": item["question"]["question"],
            "userAnswer": item["userAnswer"],
            "correctAnswer": item["question"]["correctAnswer"],
        }
        for item in incorrect
    ]
    prompt = build_review_prompt(profile.grade, profile.subject, items)
    return GenerationRequest(prompt, REVIEW_SCHEMA, temperature=TEMPERATURE["review"])


# ── Use cases ──

async def generate_quiz(orchestrator: FailoverOrchestrator, settings: OrchestratorSettings,
                        profile: LearnerProfile, weak_topics: Sequence[str] = (),
                        focus_topics: Sequence[str] = (), count: int = 10,
                        remediation: bool = False) -> list[dict]:
    request = build_quiz_request(profile, weak_topics, focus_topics, count, remediation)
    result = await orchestrator.generate(settings, request)
    questions = _require_items(result, "quiz")
    logger.info("Generated %d quiz questions (%s, %s)", len(questions), profile.grade, profile.subject)
    return questions


async def generate_flashcards(orchestrator: FailoverOrchestrator, settings: OrchestratorSettings,
                              profile: LearnerProfile, difficulty: str = "medium",
                              count: int = 10) -> list[dict]:
    request = build_flashcard_request(profile, difficulty, count)
    result = await orchestrator.generate(settings, request)
    cards = _require_items(result, "flashcard")
    logger.info("Generated %d flashcards (%s, %s)", len(cards), profile.grade, profile.subject)
    return cards


async def generate_review(orchestrator: FailoverOrchestrator, settings: OrchestratorSettings,
                          incorrect: Sequence[dict], profile: LearnerProfile) -> list[dict]:
    if not incorrect:
        return []
    request = build_review_request(profile, incorrect)
    result = await orchestrator.generate(settings, request)
    return _require_items(result, "review")
