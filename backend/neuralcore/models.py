"""
Pydantic request/response models shared across route modules.
"""

from pydantic import BaseModel, Field


class BackendConfigModel(BaseModel):
    endpoint: str = ""
    credential: str = ""
    model: str = ""
    availableModels: list[str] = Field(default_factory=list)


class SettingsModel(BaseModel):
    activeBackend: str
    perBackend: dict[str, BackendConfigModel] = Field(default_factory=dict)
    failoverEnabled: bool = True


class LearnerModel(BaseModel):
    grade: str
    subject: str


class QuizQuestionModel(BaseModel):
    question: str
    options: list[str]
    correctAnswer: str
    topic: str = ""


class IncorrectAnswerModel(BaseModel):
    question: QuizQuestionModel
    userAnswer: str


class QuizRequest(BaseModel):
    profile: LearnerModel
    weakTopics: list[str] = Field(default_factory=list)
    focusTopics: list[str] = Field(default_factory=list)
    count: int = Field(10, ge=1, le=50)
    remediation: bool = False


class FlashcardRequest(BaseModel):
    profile: LearnerModel
    difficulty: str = "medium"
    count: int = Field(10, ge=1, le=50)


class ReviewRequest(BaseModel):
    profile: LearnerModel
    incorrect: list[IncorrectAnswerModel] = Field(default_factory=list)
