"""
Request contract for the JSON API.

Each model describes the body accepted by one endpoint. Field names are
snake_case in Python and camelCase on the wire.
"""
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from flask import request


# Integer columns are 32-bit on PostgreSQL
MAX_DB_INT = 2**31 - 1

RecordId = Annotated[int, Field(ge=1, le=MAX_DB_INT)]
Count = Annotated[int, Field(ge=0, le=MAX_DB_INT)]


class ContractModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        strict=True,
    )


# ---- Auth ----

class RegisterRequest(ContractModel):
    # Credentials are compared exactly as sent
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str = Field(..., min_length=1, max_length=80)
    password: str = Field(..., min_length=1, max_length=128)
    role: Literal['student', 'teacher'] = 'student'
    name: str = Field(..., min_length=1, max_length=120)


class LoginRequest(ContractModel):
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# ---- Modules ----

class ModuleCreateRequest(ContractModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    video_url: str = Field(..., min_length=1, max_length=500)
    teacher_id: Optional[RecordId] = None
    content: Optional[str] = None
    order: Count = 0


# ---- Progress ----

class ProgressUpdateRequest(ContractModel):
    module_id: RecordId
    completed: bool
    last_position: Optional[Count] = None


# ---- Doubts ----

class DoubtCreateRequest(ContractModel):
    module_id: RecordId
    question: str = Field(..., min_length=1)
    # Accepted for compatibility, the doubt always belongs to the session user
    user_id: Optional[RecordId] = None


class DoubtAnswerRequest(ContractModel):
    answer: str = Field(..., min_length=1)


# ---- Quizzes ----

class QuizGenerateRequest(ContractModel):
    module_id: RecordId


class QuizSubmitRequest(ContractModel):
    quiz_id: RecordId
    score: Count
    total_questions: Count
    user_id: Optional[RecordId] = None


class QuizQuestion(ContractModel):
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct_index: int = Field(..., ge=0)

    @model_validator(mode='after')
    def check_answer_range(self):
        if self.correct_index >= len(self.options):
            raise ValueError(
                f"correctIndex {self.correct_index} is outside the {len(self.options)} options"
            )
        return self


# ---- Chat ----

class ConversationCreateRequest(ContractModel):
    title: str = Field(..., min_length=1, max_length=200)


class MessageCreateRequest(ContractModel):
    content: str = Field(..., min_length=1)


def parse_json(model):
    """Validate the JSON body of the current request against ``model``."""
    return model.model_validate(request.get_json(silent=True) or {})
