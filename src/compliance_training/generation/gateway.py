"""Generation gateway: provider calls with a mandatory local fallback.

Every public operation makes a single attempt against the chat-completion
provider. Any failure (client creation, network, authorization, timeout,
an unparseable body or a body whose items all fail validation) is logged as
a warning and answered from :mod:`compliance_training.generation.fallback`,
so callers always receive a usable result.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..core.ai import load_client
from ..core.config import AISettings, TrainingConfig, default_config
from .entities import Entity, SupplierEvaluation
from .fallback import (
    fallback_evaluation_summary,
    fallback_quiz,
    fallback_risk_summary,
)
from .models import (
    DEFAULT_REQUESTED_COUNT,
    GenerationRequest,
    Provenance,
    QuizQuestion,
    QuizSet,
)

__all__ = [
    "APPLICABLE_LAWS",
    "GenerationGateway",
    "InvalidQuiz",
    "QuizParse",
    "ValidQuiz",
    "build_quiz_messages",
    "parse_quiz_response",
]

logger = logging.getLogger(__name__)

APPLICABLE_LAWS: Tuple[str, ...] = (
    "Lei da Probidade Pública (Lei n.º 3/10)",
    "Lei de Prevenção e Combate ao Branqueamento de Capitais (Lei n.º 5/20)",
    "Lei de Proteção de Dados Pessoais (Lei n.º 22/11)",
    "Código Penal Angolano (artigos sobre corrupção)",
)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.+?)```", re.DOTALL)

ClientFactory = Callable[..., Any]


@dataclass(frozen=True)
class ValidQuiz:
    """Provider output that produced at least one valid question."""

    questions: Tuple[QuizQuestion, ...]
    dropped: int = 0


@dataclass(frozen=True)
class InvalidQuiz:
    """Provider output that cannot be used; ``reason`` is for the logs."""

    reason: str


QuizParse = Union[ValidQuiz, InvalidQuiz]


def build_quiz_messages(request: GenerationRequest) -> List[Dict[str, str]]:
    """Chat messages asking for ``request.requested_count`` questions."""
    system = (
        "Você cria questionários de formação em compliance. "
        "Responda apenas com JSON válido."
    )
    schema = (
        '{"quiz": [{"question": "texto", '
        '"options": ["opção 1", "opção 2", "..."], '
        '"answer": "uma das opções, copiada exatamente"}]}'
    )
    user = (
        f"Gere um quiz de {request.requested_count} perguntas sobre este "
        f"texto: {request.source_text}\n\n"
        f"Formato obrigatório:\n{schema}\n"
        "Regras: uma única resposta correta por pergunta; opções distintas; "
        "a resposta deve ser igual a uma das opções. Retorne apenas JSON."
    )
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def parse_quiz_response(content: Optional[str]) -> QuizParse:
    """Turn raw provider text into a tagged parse result.

    The body may be a JSON array of questions or an object holding the
    array under ``quiz``, optionally wrapped in a Markdown code fence.
    Items that fail validation are dropped individually; the result is
    only invalid when nothing usable is left.
    """
    if not content or not content.strip():
        return InvalidQuiz("empty response")
    try:
        data = _decode_json(content)
    except (ValueError, RecursionError) as exc:
        return InvalidQuiz(f"response is not JSON: {exc}")

    items = data.get("quiz") if isinstance(data, dict) else data
    if not isinstance(items, list):
        return InvalidQuiz("response does not contain a list of questions")
    if not items:
        return InvalidQuiz("response contains no questions")

    questions: List[QuizQuestion] = []
    for item in items:
        question = _question_from_item(item)
        if question is not None:
            questions.append(question)
    if not questions:
        return InvalidQuiz(f"all {len(items)} question(s) failed validation")
    return ValidQuiz(tuple(questions), dropped=len(items) - len(questions))


def _decode_json(content: str) -> Any:
    """Decode the body as-is, or the first fenced block if that fails."""
    try:
        return json.loads(content)
    except ValueError:
        fenced = _FENCE_RE.search(content)
        if fenced is None:
            raise
        return json.loads(fenced.group(1))


def _question_from_item(item: Any) -> Optional[QuizQuestion]:
    if not isinstance(item, dict):
        return None
    question = item.get("question")
    options = item.get("options")
    answer = item.get("answer")
    if not isinstance(question, str) or not isinstance(answer, str):
        return None
    if not isinstance(options, list) or not all(
        isinstance(option, str) for option in options
    ):
        return None
    try:
        return QuizQuestion(
            question=question.strip(),
            options=tuple(option.strip() for option in options),
            answer=answer.strip(),
        )
    except ValueError:
        return None


def _token_params(model: str, max_tokens: int) -> Dict[str, int]:
    if "gpt-5" in model:
        return {"max_completion_tokens": max_tokens}
    return {"max_tokens": max_tokens}


class GenerationGateway:
    """Mediates between callers and the provider, with fallback."""

    def __init__(
        self,
        client: Any = None,
        *,
        settings: Optional[AISettings] = None,
        client_factory: ClientFactory = load_client,
    ) -> None:
        self._client = client
        self._settings = settings or default_config().ai
        self._client_factory = client_factory

    @classmethod
    def from_config(
        cls, config: TrainingConfig, client: Any = None
    ) -> "GenerationGateway":
        return cls(client, settings=config.ai)

    @property
    def settings(self) -> AISettings:
        return self._settings

    def generate_quiz(
        self,
        source_text: str,
        requested_count: int = DEFAULT_REQUESTED_COUNT,
        *,
        domain_hint: Optional[str] = None,
    ) -> QuizSet:
        """Generate a quiz from ``source_text``; never fails once validated.

        Blank text raises :class:`~.models.InvalidInputError` before any
        request is made; that check belongs to the caller.
        """
        request = GenerationRequest.create(
            source_text, requested_count, domain_hint=domain_hint
        )
        return self.generate_quiz_for(request)

    def generate_quiz_for(self, request: GenerationRequest) -> QuizSet:
        try:
            content = self._complete(
                model=self._settings.model,
                messages=build_quiz_messages(request),
                json_mode=True,
            )
        except Exception as exc:
            self._warn_fallback("quiz", f"provider call failed: {exc!r}")
            return fallback_quiz(request.domain_hint)

        parsed = parse_quiz_response(content)
        if isinstance(parsed, InvalidQuiz):
            self._warn_fallback("quiz", parsed.reason)
            return fallback_quiz(request.domain_hint)

        if parsed.dropped:
            logger.info(
                "Dropped %d invalid question(s) from provider output",
                parsed.dropped,
                extra={"event": "questions_dropped", "dropped": parsed.dropped},
            )
        questions = parsed.questions[: request.requested_count]
        logger.debug(
            "Quiz generated by provider",
            extra={"event": "quiz_generated", "count": len(questions)},
        )
        return QuizSet(questions, Provenance.PROVIDER)

    def generate_risk_summary(self, entity: Entity) -> str:
        payload = json.dumps(entity.prompt_payload(), ensure_ascii=False)
        prompt = (
            f"Analise a entidade de risco: {payload}. "
            "Gere um resumo executivo em markdown em Português."
        )
        return self._summary(
            "risk_summary",
            model=self._settings.summary_model,
            prompt=prompt,
            fallback=lambda: fallback_risk_summary(entity),
        )

    def generate_evaluation_summary(
        self, evaluation: SupplierEvaluation
    ) -> str:
        criteria = "\n".join(evaluation.criteria_lines())
        prompt = (
            "Aja como especialista em Compliance. Analise:\n"
            f"Fornecedor: {evaluation.name}\n"
            f"Tipo: {evaluation.entity_type}\n"
            f"Critérios:\n{criteria}\n"
            f"Leis: {', '.join(APPLICABLE_LAWS)}\n"
            "Forneça: Resumo da Avaliação, Pontos de Risco e Recomendação "
            "Final."
        )
        return self._summary(
            "evaluation_summary",
            model=self._settings.evaluation_model,
            prompt=prompt,
            fallback=lambda: fallback_evaluation_summary(evaluation),
        )

    def generate_summary(self, data: Union[Entity, SupplierEvaluation]) -> str:
        """Summarize an entity or a supplier evaluation."""
        if isinstance(data, Entity):
            return self.generate_risk_summary(data)
        if isinstance(data, SupplierEvaluation):
            return self.generate_evaluation_summary(data)
        raise TypeError(
            f"Cannot summarize {type(data).__name__}; "
            "expected Entity or SupplierEvaluation"
        )

    def _summary(
        self,
        kind: str,
        *,
        model: str,
        prompt: str,
        fallback: Callable[[], str],
    ) -> str:
        try:
            content = self._complete(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                json_mode=False,
            )
        except Exception as exc:
            self._warn_fallback(kind, f"provider call failed: {exc!r}")
            return fallback()
        if not content:
            self._warn_fallback(kind, "empty response")
            return fallback()
        return content

    def _client_or_create(self) -> Any:
        if self._client is None:
            self._client = self._client_factory(
                timeout=self._settings.request_timeout_seconds
            )
        return self._client

    def _complete(
        self,
        *,
        model: str,
        messages: List[Dict[str, str]],
        json_mode: bool,
    ) -> str:
        client = self._client_or_create()
        params: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": self._settings.temperature,
            **_token_params(model, self._settings.max_tokens),
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}
        resp = client.chat.completions.create(**params)
        raw_content = resp.choices[0].message.content
        return (raw_content or "").strip()

    @staticmethod
    def _warn_fallback(kind: str, reason: str) -> None:
        logger.warning(
            "Using local fallback for %s: %s",
            kind,
            reason,
            extra={
                "event": "generation_fallback",
                "kind": kind,
                "reason": reason,
            },
        )
