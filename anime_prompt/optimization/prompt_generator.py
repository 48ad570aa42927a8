"""Anime prompt generation via third-party LLM APIs."""

from __future__ import annotations

import importlib
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from anime_prompt.errors import (
    ApiRejectedError,
    BackendUnavailableError,
    EmptyResponseError,
    GenerationTimeoutError,
    NetworkError,
)
from anime_prompt.optimization.instructions import NEGATIVE_PROMPT, SYSTEM_INSTRUCTION
from anime_prompt.services.credential_store import Credential
from anime_prompt.services.history_service import Exchange
from config.settings import AppConfig

logger = logging.getLogger(__name__)

# Exception names shared by the openai and anthropic SDKs.
_REJECTED_ERROR_NAMES = (
    "AuthenticationError",
    "PermissionDeniedError",
    "RateLimitError",
    "BadRequestError",
)

_LABEL_PATTERN = re.compile(
    r"^\*{0,2}\s*generated prompt\s*\*{0,2}\s*:\s*\*{0,2}\s*", re.IGNORECASE
)


@dataclass(slots=True)
class GenerationRequest:
    """Everything the remote model sees for one call."""

    system_instruction: str
    history: Tuple[Exchange, ...]
    keyword: str

    def turns(self) -> List[Tuple[str, str]]:
        """Return (role, text) pairs: past exchanges, then the new keyword."""
        turns: List[Tuple[str, str]] = []
        for exchange in self.history:
            turns.append(("user", exchange.input))
            turns.append(("assistant", exchange.output))
        turns.append(("user", self.keyword))
        return turns


@dataclass(slots=True)
class BackendRequest:
    """Information passed to backend callables."""

    request: GenerationRequest
    model: str
    api_key: str = field(repr=False)
    timeout_s: float
    metadata: Dict[str, Any]


@dataclass(slots=True)
class GenerationResult:
    """User-visible output of a generation."""

    prompt: str
    negative_prompt: str = NEGATIVE_PROMPT


BackendCallable = Callable[[BackendRequest], Optional[str]]


def clean_response_text(text: Optional[str]) -> str:
    """Strip code fences, a leading "Generated Prompt:" label and wrapping quotes."""
    cleaned = (text or "").strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].startswith("```"):
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()

    cleaned = _LABEL_PATTERN.sub("", cleaned, count=1).strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "'\"`":
        cleaned = cleaned[1:-1].strip()
    return cleaned


def _call_sdk(module: Any, backend: str, timeout_s: float, call: Callable[[], Any]) -> Any:
    """Run *call*, translating openai/anthropic style exceptions."""
    rejected = tuple(
        getattr(module, name) for name in _REJECTED_ERROR_NAMES if hasattr(module, name)
    )
    try:
        return call()
    except module.APITimeoutError as exc:
        raise GenerationTimeoutError(
            f"no response within {timeout_s:g}s", backend=backend
        ) from exc
    except rejected as exc:
        raise ApiRejectedError(
            f"API rejected the request, check the API key or quota: {exc}", backend=backend
        ) from exc
    except module.APIError as exc:
        raise NetworkError(f"API call failed: {exc}", backend=backend) from exc


class PromptGenerator:
    """Turn a keyword into an anime image prompt using a registered backend."""

    def __init__(self, config: AppConfig, auto_register: bool = True) -> None:
        self.config = config
        self._backends: Dict[str, BackendCallable] = {}
        self.warnings: list[str] = []
        if auto_register:
            self._auto_register_backends()

    def register_backend(self, name: str, backend: BackendCallable) -> None:
        """Register a generation backend."""
        self._backends[name.lower()] = backend

    def clear_backends(self) -> None:
        """Remove all backends (mainly for tests)."""
        self._backends.clear()

    def has_backend(self, name: str) -> bool:
        """Return True when backend exists."""
        return name.lower() in self._backends

    def available_backends(self) -> list[str]:
        """Return the list of registered backends ordered by preference."""
        priority = {"gemini": 0, "gpt": 1, "claude": 2}
        return sorted(
            self._backends.keys(),
            key=lambda item: (priority.get(item, 99), item),
        )

    def build_request(self, history: Sequence[Exchange], keyword: str) -> GenerationRequest:
        return GenerationRequest(
            system_instruction=SYSTEM_INSTRUCTION,
            history=tuple(history),
            keyword=keyword,
        )

    def generate(
        self,
        history: Sequence[Exchange],
        keyword: str,
        credential: Credential,
        backend: Optional[str] = None,
    ) -> GenerationResult:
        """Issue a single remote call and return the cleaned prompt.

        Nothing is retried; every failure surfaces as a GenerationError.
        """
        name = (backend or self.config.backend).lower()
        backend_fn = self._backends.get(name)
        if backend_fn is None:
            detail = "; ".join(self.warnings) if self.warnings else "no such backend registered"
            raise BackendUnavailableError(f"backend unavailable: {detail}", backend=name)

        payload = BackendRequest(
            request=self.build_request(history, keyword),
            model=self.config.model_for(name),
            api_key=credential.value,
            timeout_s=self.config.request_timeout_s,
            metadata=self.config.metadata,
        )
        logger.info(
            "requesting prompt from %s (model=%s, history=%d)",
            name,
            payload.model,
            len(payload.request.history),
        )
        raw = backend_fn(payload)
        prompt = clean_response_text(raw)
        if not prompt:
            raise EmptyResponseError("the API returned no usable text", backend=name)
        return GenerationResult(prompt=prompt)

    # Internal helpers ---------------------------------------------------------
    def _auto_register_backends(self) -> None:
        """Register backends automatically when their SDKs are importable."""
        self._register_gemini_backend()
        self._register_openai_backend()
        self._register_claude_backend()

    def _register_gemini_backend(self) -> None:
        try:
            genai_module = importlib.import_module("google.genai")
            genai_errors = importlib.import_module("google.genai.errors")
            httpx_module = importlib.import_module("httpx")
        except ImportError as exc:
            self.warnings.append(f"cannot import google-genai: {exc}")
            return

        def _gemini_backend(request: BackendRequest) -> Optional[str]:
            client = genai_module.Client(
                api_key=request.api_key,
                http_options={"timeout": int(request.timeout_s * 1000)},
            )
            contents = [
                {"role": "model" if role == "assistant" else "user", "parts": [{"text": text}]}
                for role, text in request.request.turns()
            ]
            try:
                response = client.models.generate_content(
                    model=request.model,
                    contents=contents,
                    config={"system_instruction": request.request.system_instruction},
                )
            except genai_errors.ClientError as exc:
                raise ApiRejectedError(
                    f"API rejected the request ({exc.code}), check the API key or quota: {exc.message}",
                    backend="gemini",
                ) from exc
            except genai_errors.APIError as exc:
                raise NetworkError(f"API call failed ({exc.code}): {exc.message}", backend="gemini") from exc
            except httpx_module.TimeoutException as exc:
                raise GenerationTimeoutError(
                    f"no response within {request.timeout_s:g}s", backend="gemini"
                ) from exc
            except httpx_module.TransportError as exc:
                raise NetworkError(f"could not reach the API: {exc}", backend="gemini") from exc
            return response.text

        self.register_backend("gemini", _gemini_backend)

    def _register_openai_backend(self) -> None:
        try:
            openai_module = importlib.import_module("openai")
        except ImportError as exc:
            self.warnings.append(f"cannot import openai: {exc}")
            return

        def _gpt_backend(request: BackendRequest) -> Optional[str]:
            client_kwargs: Dict[str, Any] = {
                "api_key": request.api_key,
                "timeout": request.timeout_s,
                "max_retries": 0,
            }
            base_url = request.metadata.get("openai_base_url")
            if base_url:
                client_kwargs["base_url"] = base_url
            client = openai_module.OpenAI(**client_kwargs)

            messages = [{"role": "system", "content": request.request.system_instruction}]
            messages.extend(
                {"role": role, "content": text} for role, text in request.request.turns()
            )
            completion = _call_sdk(
                openai_module,
                "gpt",
                request.timeout_s,
                lambda: client.chat.completions.create(
                    model=request.model,
                    messages=messages,
                    max_tokens=512,
                    temperature=0.85,
                ),
            )
            if not completion.choices:
                return None
            return completion.choices[0].message.content

        self.register_backend("gpt", _gpt_backend)

    def _register_claude_backend(self) -> None:
        try:
            anthropic_module = importlib.import_module("anthropic")
        except ImportError as exc:  # pragma: no cover - optional dependency
            self.warnings.append(f"cannot import anthropic: {exc}")
            return

        def _claude_backend(request: BackendRequest) -> Optional[str]:
            client = anthropic_module.Anthropic(
                api_key=request.api_key,
                timeout=request.timeout_s,
                max_retries=0,
            )
            message = _call_sdk(
                anthropic_module,
                "claude",
                request.timeout_s,
                lambda: client.messages.create(
                    model=request.model,
                    max_tokens=512,
                    system=request.request.system_instruction,
                    messages=[
                        {"role": role, "content": text}
                        for role, text in request.request.turns()
                    ],
                ),
            )
            parts = [
                getattr(block, "text", "")
                for block in (message.content or [])
                if getattr(block, "type", "") == "text"
            ]
            return "\n".join(parts)

        self.register_backend("claude", _claude_backend)
