from .models import (
    DEFAULT_REQUESTED_COUNT,
    EMPTY_SOURCE_MESSAGE,
    GenerationRequest,
    InvalidInputError,
    Provenance,
    QuizQuestion,
    QuizSet,
    questions_from_records,
)
from .entities import (
    DocumentRecord,
    DocumentStatus,
    Entity,
    RiskLevel,
    SupplierEvaluation,
)
from .fallback import (
    available_domains,
    fallback_evaluation_summary,
    fallback_quiz,
    fallback_risk_summary,
)
from .gateway import (
    GenerationGateway,
    InvalidQuiz,
    QuizParse,
    ValidQuiz,
    parse_quiz_response,
)

__all__ = [
    "DEFAULT_REQUESTED_COUNT",
    "EMPTY_SOURCE_MESSAGE",
    "GenerationRequest",
    "InvalidInputError",
    "Provenance",
    "QuizQuestion",
    "QuizSet",
    "questions_from_records",
    "DocumentRecord",
    "DocumentStatus",
    "Entity",
    "RiskLevel",
    "SupplierEvaluation",
    "available_domains",
    "fallback_evaluation_summary",
    "fallback_quiz",
    "fallback_risk_summary",
    "GenerationGateway",
    "InvalidQuiz",
    "QuizParse",
    "ValidQuiz",
    "parse_quiz_response",
]
