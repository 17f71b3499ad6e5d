"""Quiz and entity builders used across tests."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from compliance_training.generation.entities import (
    DocumentRecord,
    DocumentStatus,
    Entity,
    RiskLevel,
    SupplierEvaluation,
)
from compliance_training.generation.models import (
    Provenance,
    QuizQuestion,
    QuizSet,
)


def make_quiz(size: int = 3) -> QuizSet:
    """Quiz of ``size`` questions whose correct answer is always "Sim"."""

    questions = [
        QuizQuestion(
            question=f"Pergunta {i}?",
            options=("Sim", "Não", "Talvez"),
            answer="Sim",
        )
        for i in range(1, size + 1)
    ]
    return QuizSet(tuple(questions), Provenance.PROVIDER)


def quiz_json(items: Sequence[Dict[str, Any]], *, wrap: bool = True) -> str:
    payload: Any = {"quiz": list(items)} if wrap else list(items)
    return json.dumps(payload, ensure_ascii=False)


def sample_entity(**overrides: Any) -> Entity:
    values: Dict[str, Any] = {
        "name": "SocoOil, Lda.",
        "category": "Serviços Petrolíferos",
        "country": "Angola",
        "risk_level": RiskLevel.LOW,
        "nif": "500012345",
        "services": ("Logística",),
        "documents": (
            DocumentRecord("Alvará", DocumentStatus.VERIFIED),
        ),
    }
    values.update(overrides)
    return Entity(**values)


def sample_evaluation(**overrides: Any) -> SupplierEvaluation:
    criteria: Dict[str, Dict[str, str]] = {
        "Integridade": {
            "q1": "Possui código de conduta?",
            "q2": "Historial de sanções?",
        },
    }
    answers: Dict[str, str] = {"q1": "Favorável"}
    values: Dict[str, Any] = {
        "name": "Tech Solutions, SA",
        "nif": "501987654",
        "entity_type": "Entidade Particular (Empresa Privada)",
        "final_classification": "B - Favorável com Ressalvas",
        "criteria": criteria,
        "answers": answers,
        "final_score": 72.5,
    }
    values.update(overrides)
    return SupplierEvaluation(**values)


def valid_items(count: int) -> List[Dict[str, Any]]:
    return [
        {
            "question": f"Q{i}",
            "options": ["A", "B", "C"],
            "answer": "A",
        }
        for i in range(1, count + 1)
    ]
