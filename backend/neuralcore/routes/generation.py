"""Quiz, flashcard and review generation endpoints.

Generation errors are mapped to HTTP responses by the app-level handler in main.py.
"""

from fastapi import APIRouter, Request

from neuralcore.content import LearnerProfile, generate_flashcards, generate_quiz, generate_review
from neuralcore.models import FlashcardRequest, QuizRequest, ReviewRequest

router = APIRouter(prefix="/api", tags=["Generation"])


def _learner(body) -> LearnerProfile:
    return LearnerProfile(grade=body.profile.grade, subject=body.profile.subject)


@router.post("/quiz")
async def create_quiz(body: QuizRequest, request: Request):
    state = request.app.state
    questions = await generate_quiz(
        state.orchestrator, state.settings, _learner(body),
        weak_topics=body.weakTopics, focus_topics=body.focusTopics,
        count=body.count, remediation=body.remediation,
    )
    return {"questions": questions, "backend": state.settings.active_backend.value}


@router.post("/flashcards")
async def create_flashcards(body: FlashcardRequest, request: Request):
    state = request.app.state
    cards = await generate_flashcards(
        state.orchestrator, state.settings, _learner(body),
        difficulty=body.difficulty, count=body.count,
    )
    return {"cards": cards, "backend": state.settings.active_backend.value}


@router.post("/review")
async def create_review(body: ReviewRequest, request: Request):
    state = request.app.state
    incorrect = [item.model_dump() for item in body.incorrect]
    reviews = await generate_review(state.orchestrator, state.settings, incorrect, _learner(body))
    return {"reviews": reviews, "backend": state.settings.active_backend.value}
