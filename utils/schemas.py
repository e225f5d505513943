"""
Request body schemas. Field aliases are the camelCase names the web client sends.
"""
from enum import Enum
from typing import List, Optional, Union

from flask import request
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from utils.errors import InvalidInput


class ExamEnum(str, Enum):
    JEE = "JEE"
    NEET = "NEET"


class PlanTypeEnum(str, Enum):
    SILVER = "silver"
    GOLD = "gold"


class DurationEnum(str, Enum):
    ONE_MONTH = "1M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"


class ProfessionEnum(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class FeedbackTypeEnum(str, Enum):
    REFUND = "refund"
    QUERY = "query"


class RequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, use_enum_values=True)


class QuestionFilters(RequestSchema):
    exam: ExamEnum
    subject: str = Field(..., min_length=1)
    chapters: List[str] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
    question_types: List[str] = Field(default_factory=list, alias="questionTypes")


class PracticeRequest(QuestionFilters):
    offset: int = Field(0, ge=0)


class VerifyAnswerRequest(RequestSchema):
    question_id: int = Field(..., alias="questionId")
    user_answer: Union[str, int, float] = Field(..., alias="userAnswer")
    time_taken: Optional[int] = Field(None, alias="timeTaken", ge=0)


class TrackAttemptRequest(RequestSchema):
    question_id: int = Field(..., alias="questionId")
    is_correct: bool = Field(..., alias="isCorrect")
    time_taken: Optional[int] = Field(None, alias="timeTaken", ge=0)


class MockAnswer(RequestSchema):
    question_number: int = Field(..., alias="questionNumber", ge=1)
    selected_answer: Optional[Union[str, int, float]] = Field(None, alias="selectedAnswer")


class SubmitMockTestRequest(RequestSchema):
    answers: List[MockAnswer] = Field(default_factory=list)
    time_taken: Optional[int] = Field(None, alias="timeTaken", ge=0)

    def answer_dicts(self):
        return [answer.model_dump(by_alias=True) for answer in self.answers]


class CompleteDetailsRequest(RequestSchema):
    name: str = Field(..., min_length=1, max_length=100)
    profession: ProfessionEnum
    grade: Optional[str] = Field(None, max_length=50)
    preparing_for: str = Field(..., alias="preparingFor", min_length=1)
    college_name: Optional[str] = Field(None, alias="collegeName", max_length=200)
    school_name: Optional[str] = Field(None, alias="schoolName", max_length=200)
    state: str = Field(..., min_length=1, max_length=100)
    life_ambition: Optional[str] = Field(None, alias="lifeAmbition", max_length=50)


class SelectExamRequest(RequestSchema):
    exam: ExamEnum


class FeedbackRequest(RequestSchema):
    feedback_type: FeedbackTypeEnum = Field(..., alias="feedbackType")
    message: Optional[str] = Field(None, max_length=2000)
    rating: Optional[int] = Field(None, ge=1, le=5)


class GiftCodeRequest(RequestSchema):
    code: str = Field(..., min_length=1)


class CreateOrderRequest(RequestSchema):
    plan_type: PlanTypeEnum = Field(..., alias="planType")
    duration: DurationEnum
    amount: Optional[int] = Field(None, gt=0)


class VerifyPaymentRequest(RequestSchema):
    order_id: str = Field(..., alias="razorpay_order_id", min_length=1)
    payment_id: str = Field(..., alias="razorpay_payment_id", min_length=1)
    signature: str = Field(..., alias="razorpay_signature", min_length=1)

    @field_validator("order_id", "payment_id", "signature")
    @classmethod
    def no_separator(cls, value):
        if "|" in value:
            raise ValueError("must not contain '|'")
        return value


def _error_message(exc):
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"
    return f"Invalid value for {field}: {error.get('msg')}"


def parse_body(schema, data=None):
    """Validate the JSON body (or data) against schema; InvalidInput on failure."""
    if data is None:
        data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise InvalidInput(_error_message(e))
