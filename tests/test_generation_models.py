from __future__ import annotations

import pytest

from compliance_training.generation.entities import (
    DocumentStatus,
    Entity,
    RiskLevel,
    SupplierEvaluation,
)
from compliance_training.generation.models import (
    EMPTY_SOURCE_MESSAGE,
    GenerationRequest,
    InvalidInputError,
    Provenance,
    QuizQuestion,
    QuizSet,
    questions_from_records,
)


def _question(**overrides) -> QuizQuestion:
    values = {"question": "Q?", "options": ("A", "B"), "answer": "A"}
    values.update(overrides)
    return QuizQuestion(**values)


def test_question_accepts_valid_item() -> None:
    question = _question(options=["A", "B", "C"])
    assert question.options == ("A", "B", "C")
    assert question.is_correct("A")
    assert not question.is_correct("B")
    assert not question.is_correct(None)
    assert question.to_dict() == {
        "question": "Q?",
        "options": ["A", "B", "C"],
        "answer": "A",
    }


@pytest.mark.parametrize(
    "overrides",
    [
        {"question": "   "},
        {"options": ("A",)},
        {"options": ("A", "")},
        {"options": ("A", "A")},
        {"answer": "Z"},
    ],
)
def test_question_rejects_invalid_item(overrides) -> None:
    with pytest.raises(ValueError):
        _question(**overrides)


def test_quiz_set_requires_questions() -> None:
    with pytest.raises(ValueError):
        QuizSet((), Provenance.PROVIDER)


def test_quiz_set_sequence_behaviour() -> None:
    first, second = _question(question="Um?"), _question(question="Dois?")
    quiz = QuizSet.from_questions([first, second], Provenance.FALLBACK)

    assert len(quiz) == 2
    assert list(quiz) == [first, second]
    assert quiz[1] is second
    assert quiz.is_fallback
    assert quiz.to_records()[0]["question"] == "Um?"


def test_quiz_copy_is_equal_but_distinct() -> None:
    quiz = QuizSet((_question(),), Provenance.PROVIDER)
    clone = quiz.copy()
    assert clone == quiz
    assert clone is not quiz


def test_provenance_does_not_affect_equality() -> None:
    provider = QuizSet((_question(),), Provenance.PROVIDER)
    fallback = QuizSet((_question(),), Provenance.FALLBACK)
    assert provider == fallback


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
def test_request_rejects_blank_text(text) -> None:
    with pytest.raises(InvalidInputError) as exc:
        GenerationRequest.create(text)
    assert str(exc.value) == EMPTY_SOURCE_MESSAGE


@pytest.mark.parametrize("count", [0, -1, True])
def test_request_rejects_bad_count(count) -> None:
    with pytest.raises(ValueError):
        GenerationRequest.create("texto", count)


def test_request_strips_text_and_keeps_hint() -> None:
    request = GenerationRequest.create("  política  ", 5, domain_hint="pep")
    assert request == GenerationRequest("política", 5, "pep")


def test_questions_from_records() -> None:
    records = [{"question": "Q", "options": ["x", "y"], "answer": "y"}]
    assert questions_from_records(records) == [
        QuizQuestion("Q", ("x", "y"), "y")
    ]


@pytest.mark.parametrize("options", ["AB", {"A": 1, "B": 2}, None])
def test_questions_from_records_requires_option_list(options) -> None:
    records = [{"question": "Q", "options": options, "answer": "A"}]
    with pytest.raises(ValueError, match="must be a list"):
        questions_from_records(records)


def test_entity_from_dict_accepts_registry_export() -> None:
    entity = Entity.from_dict(
        {
            "name": "Alfa",
            "category": "Banca",
            "country": "Angola",
            "riskLevel": "Alto",
            "services": ["Crédito"],
            "documents": [{"name": "Alvará", "status": "Expirado"}],
        }
    )
    assert entity.risk_level is RiskLevel.HIGH
    assert entity.risk_level.is_elevated
    assert entity.nif == ""
    assert entity.documents[0].status is DocumentStatus.EXPIRED
    assert entity.has_expired_documents
    assert entity.prompt_payload() == {
        "nome": "Alfa",
        "setor": "Banca",
        "pais": "Angola",
        "risco": "Alto",
        "servicos": ["Crédito"],
    }


def test_entity_from_dict_rejects_unknown_risk() -> None:
    with pytest.raises(ValueError):
        Entity.from_dict({"name": "X", "risk_level": "Extremo"})


def test_evaluation_from_camel_case_export() -> None:
    evaluation = SupplierEvaluation.from_dict(
        {
            "generalInfo": {
                "name": "Beta",
                "nif": "123",
                "entityType": "Empresa Pública",
            },
            "criteriaMatrix": {
                "Integridade": {"items": {"q1": "Código?", "q2": "Sanções?"}},
            },
            "formState": {"q1": "Favorável"},
            "finalScore": 80,
            "finalClassification": "A - Favorável",
        }
    )
    assert evaluation.name == "Beta"
    assert evaluation.entity_type == "Empresa Pública"
    assert evaluation.final_score == 80.0
    assert evaluation.criteria_lines() == [
        "**Integridade:**",
        "- Código?: Favorável",
        "- Sanções?: Não Avaliado",
    ]
