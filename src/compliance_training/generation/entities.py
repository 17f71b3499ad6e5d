"""Inputs for the risk and supplier-evaluation summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple

__all__ = [
    "DocumentRecord",
    "DocumentStatus",
    "Entity",
    "RiskLevel",
    "SupplierEvaluation",
    "NOT_EVALUATED",
]


NOT_EVALUATED = "Não Avaliado"


class RiskLevel(str, Enum):
    LOW = "Baixo"
    MEDIUM = "Médio"
    HIGH = "Alto"
    CRITICAL = "Crítico"
    INFORMATIONAL = "Informativo"

    @property
    def is_elevated(self) -> bool:
        return self in (RiskLevel.HIGH, RiskLevel.CRITICAL)


class DocumentStatus(str, Enum):
    VERIFIED = "Verificado"
    PENDING = "Pendente"
    EXPIRED = "Expirado"
    RECEIVED = "Recebido"


@dataclass(frozen=True)
class DocumentRecord:
    name: str
    status: DocumentStatus


@dataclass(frozen=True)
class Entity:
    """The subset of a registered entity the risk summary looks at."""

    name: str
    category: str
    country: str
    risk_level: RiskLevel
    nif: str = ""
    services: Tuple[str, ...] = ()
    documents: Tuple[DocumentRecord, ...] = ()

    @property
    def has_expired_documents(self) -> bool:
        return any(
            doc.status is DocumentStatus.EXPIRED for doc in self.documents
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Entity":
        """Build an entity from a JSON-style mapping.

        Accepts both ``risk_level`` and the camelCase ``riskLevel`` used by
        exports of the entity registry.
        """
        risk = data.get("risk_level", data.get("riskLevel", RiskLevel.LOW))
        documents = tuple(
            DocumentRecord(
                name=str(doc.get("name", "")),
                status=DocumentStatus(doc.get("status", "Pendente")),
            )
            for doc in data.get("documents") or []
        )
        return cls(
            name=str(data.get("name", "")),
            category=str(data.get("category", "")),
            country=str(data.get("country", "")),
            risk_level=RiskLevel(risk),
            nif=str(data.get("nif") or ""),
            services=tuple(str(s) for s in data.get("services") or []),
            documents=documents,
        )

    def prompt_payload(self) -> Dict[str, Any]:
        return {
            "nome": self.name,
            "setor": self.category,
            "pais": self.country,
            "risco": self.risk_level.value,
            "servicos": list(self.services),
        }


@dataclass(frozen=True)
class SupplierEvaluation:
    """A finished due-diligence questionnaire for one supplier."""

    name: str
    nif: str
    entity_type: str
    final_classification: str
    criteria: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    answers: Mapping[str, str] = field(default_factory=dict)
    final_score: float | None = None
    address: str = ""
    service_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SupplierEvaluation":
        info = data.get("general_info") or data.get("generalInfo") or {}
        criteria_raw = (
            data.get("criteria") or data.get("criteriaMatrix") or {}
        )
        criteria: Dict[str, Dict[str, str]] = {}
        for criterion, block in criteria_raw.items():
            items = block.get("items") if isinstance(block, Mapping) else None
            if items is None and isinstance(block, Mapping):
                items = block
            if isinstance(items, Mapping):
                criteria[str(criterion)] = {
                    str(k): str(v) for k, v in items.items()
                }
        answers = data.get("answers") or data.get("formState") or {}
        score = data.get("final_score", data.get("finalScore"))
        return cls(
            name=str(info.get("name", "")),
            nif=str(info.get("nif", "")),
            entity_type=str(
                info.get("entity_type", info.get("entityType", ""))
            ),
            final_classification=str(
                data.get(
                    "final_classification",
                    data.get("finalClassification", ""),
                )
            ),
            criteria=criteria,
            answers={str(k): str(v) for k, v in answers.items()},
            final_score=float(score) if score is not None else None,
            address=str(info.get("address", "")),
            service_type=str(
                info.get("service_type", info.get("serviceType", ""))
            ),
        )

    def criteria_lines(self) -> List[str]:
        """Render each criterion and its answered questions as Markdown."""
        lines: List[str] = []
        for criterion, items in self.criteria.items():
            lines.append(f"**{criterion}:**")
            for key, label in items.items():
                lines.append(f"- {label}: {self.answers.get(key, NOT_EVALUATED)}")
        return lines
