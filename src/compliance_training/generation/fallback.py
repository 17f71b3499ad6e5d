"""Deterministic, offline results used whenever the provider cannot help.

Nothing here performs I/O or raises for well-formed inputs: the corpus is
fixed at import time and every function returns the same output for the
same input, which makes these results the reference fixtures for the
fallback path.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .entities import Entity, SupplierEvaluation
from .models import Provenance, QuizQuestion, QuizSet

__all__ = [
    "DEFAULT_DOMAIN",
    "available_domains",
    "fallback_evaluation_summary",
    "fallback_quiz",
    "fallback_risk_summary",
]


DEFAULT_DOMAIN = "due_diligence"

_CORPUS: Dict[str, Tuple[QuizQuestion, ...]] = {
    DEFAULT_DOMAIN: (
        QuizQuestion(
            question=(
                "Qual a importância da Due Diligence segundo as normas locais?"
            ),
            options=(
                "Nenhuma",
                "Formalidade",
                "Mitigação de Risco",
                "Aumento de burocracia",
            ),
            answer="Mitigação de Risco",
        ),
    ),
    "anti_corruption": (
        QuizQuestion(
            question=(
                "Um fornecedor oferece um presente valioso durante um "
                "concurso. Qual é a conduta correta?"
            ),
            options=(
                "Aceitar discretamente",
                "Recusar e reportar ao Compliance",
                "Aceitar e partilhar com a equipa",
                "Ignorar a oferta",
            ),
            answer="Recusar e reportar ao Compliance",
        ),
        QuizQuestion(
            question="Que norma define sistemas de gestão antissuborno?",
            options=("ISO 9001", "ISO 27001", "ISO 37001", "ISO 14001"),
            answer="ISO 37001",
        ),
    ),
    "pep": (
        QuizQuestion(
            question=(
                "Uma Pessoa Politicamente Exposta (PEP) como beneficiário "
                "efetivo exige:"
            ),
            options=(
                "Nenhuma ação adicional",
                "Análise de risco acrescida",
                "Rejeição automática",
                "Aprovação imediata",
            ),
            answer="Análise de risco acrescida",
        ),
    ),
    "sanctions": (
        QuizQuestion(
            question=(
                "O nome de uma contraparte coincide com uma lista de "
                "sanções. O que fazer?"
            ),
            options=(
                "Prosseguir com a transação",
                "Suspender e escalar para verificação",
                "Alterar o nome no registo",
            ),
            answer="Suspender e escalar para verificação",
        ),
    ),
}


def available_domains() -> List[str]:
    return sorted(_CORPUS)


def fallback_quiz(domain_hint: Optional[str] = None) -> QuizSet:
    """Return the fixed quiz for ``domain_hint`` (or the default domain)."""
    key = (domain_hint or "").strip().lower().replace("-", "_")
    questions = _CORPUS.get(key) or _CORPUS[DEFAULT_DOMAIN]
    return QuizSet(questions, Provenance.FALLBACK)


def fallback_risk_summary(entity: Entity) -> str:
    """Markdown risk summary computed from the entity's own fields."""
    issues: List[str] = []
    if entity.risk_level.is_elevated:
        issues.append(
            "A entidade apresenta um nível de risco "
            f"{entity.risk_level.value.upper()}, exigindo monitoramento "
            "rigoroso."
        )
    if not entity.nif.strip():
        issues.append("Falta de identificação fiscal (NIF).")
    if entity.has_expired_documents:
        issues.append("Presença de documentação mandatória expirada.")

    if issues:
        attention = "\n".join(f"- {issue}" for issue in issues)
    else:
        attention = "- Nenhum risco crítico identificado nos dados básicos."

    return (
        "### Resumo de Risco (Análise de Sistema - Local)\n"
        "**Visão Geral:** Análise automatizada baseada nos dados "
        f"cadastrais. A entidade {entity.name} opera no setor de "
        f"{entity.category} em {entity.country}.\n\n"
        "**Pontos de Atenção:**\n"
        f"{attention}\n\n"
        "**Recomendação:**\n"
        "Proceder com a verificação manual dos documentos pendentes antes "
        "de qualquer transação financeira.\n"
    )


def fallback_evaluation_summary(evaluation: SupplierEvaluation) -> str:
    """Markdown evaluation summary used when the provider is unavailable."""
    classification = evaluation.final_classification
    return (
        "### Resumo da Avaliação (Modo de Segurança Local)\n"
        f"**Fornecedor:** {evaluation.name} ({evaluation.nif})\n"
        f"**Classificação:** {classification}\n\n"
        "**Análise Heurística:**\n"
        f'O sistema concluiu a avaliação com o estado "{classification}". '
        "Por razões técnicas ou de conectividade, a análise detalhada por "
        "IA está temporariamente indisponível.\n\n"
        "**Próximos Passos:**\n"
        "- Verifique manualmente os itens marcados como 'Não Favorável'.\n"
        "- Valide as certidões de conformidade fiscal e segurança social.\n"
    )
