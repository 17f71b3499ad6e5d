from __future__ import annotations

import pytest

from compliance_training.generation import fallback
from compliance_training.generation.entities import (
    DocumentRecord,
    DocumentStatus,
    RiskLevel,
)
from compliance_training.generation.models import Provenance
from fixtures import sample_entity, sample_evaluation


def test_default_quiz_is_due_diligence_question() -> None:
    quiz = fallback.fallback_quiz()

    assert quiz.provenance is Provenance.FALLBACK
    assert len(quiz) == 1
    question = quiz[0]
    assert question.question == (
        "Qual a importância da Due Diligence segundo as normas locais?"
    )
    assert question.options == (
        "Nenhuma",
        "Formalidade",
        "Mitigação de Risco",
        "Aumento de burocracia",
    )
    assert question.answer == "Mitigação de Risco"


def test_fallback_quiz_is_deterministic() -> None:
    assert fallback.fallback_quiz() == fallback.fallback_quiz()
    assert fallback.fallback_quiz("pep") == fallback.fallback_quiz("pep")


@pytest.mark.parametrize("hint", [None, "", "unknown", "   "])
def test_unknown_hint_uses_default_domain(hint) -> None:
    assert fallback.fallback_quiz(hint) == fallback.fallback_quiz(
        fallback.DEFAULT_DOMAIN
    )


def test_hint_is_normalized() -> None:
    quiz = fallback.fallback_quiz(" Anti-Corruption ")
    assert len(quiz) == 2
    assert quiz[1].answer == "ISO 37001"


@pytest.mark.parametrize("domain", fallback.available_domains())
def test_every_domain_yields_valid_questions(domain) -> None:
    quiz = fallback.fallback_quiz(domain)
    assert len(quiz) >= 1
    for question in quiz:
        assert len(question.options) >= 2
        assert question.answer in question.options


def test_available_domains_sorted() -> None:
    domains = fallback.available_domains()
    assert domains == sorted(domains)
    assert fallback.DEFAULT_DOMAIN in domains


def test_risk_summary_without_issues() -> None:
    summary = fallback.fallback_risk_summary(sample_entity())

    assert summary.startswith("### Resumo de Risco (Análise de Sistema - Local)")
    assert "A entidade SocoOil, Lda. opera no setor de" in summary
    assert "- Nenhum risco crítico identificado nos dados básicos." in summary


def test_risk_summary_lists_every_issue() -> None:
    entity = sample_entity(
        risk_level=RiskLevel.CRITICAL,
        nif="  ",
        documents=(DocumentRecord("Certidão", DocumentStatus.EXPIRED),),
    )
    summary = fallback.fallback_risk_summary(entity)

    assert "nível de risco CRÍTICO" in summary
    assert "- Falta de identificação fiscal (NIF)." in summary
    assert "- Presença de documentação mandatória expirada." in summary
    assert "Nenhum risco crítico" not in summary


def test_evaluation_summary_mentions_supplier() -> None:
    summary = fallback.fallback_evaluation_summary(sample_evaluation())

    assert summary.startswith(
        "### Resumo da Avaliação (Modo de Segurança Local)"
    )
    assert "**Fornecedor:** Tech Solutions, SA (501987654)" in summary
    assert "**Classificação:** B - Favorável com Ressalvas" in summary
