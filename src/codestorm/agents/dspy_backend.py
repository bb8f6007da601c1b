"""Text generation backed by a DSPy language model."""

from __future__ import annotations

import logging
import time
from typing import Optional

import dspy

from codestorm.config.models import LLMSettings

from .base import GenerationResponse, TextGenerator

LOGGER = logging.getLogger(__name__)

_NOISY_LOGGERS = ("dspy", "LiteLLM", "litellm", "httpx")


def configure_dspy_logging(level: int = logging.WARNING) -> None:
    """Keep DSPy and its HTTP stack from flooding the Codestorm log."""

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)


class DSPyTextGenerator(TextGenerator):
    """Issue completions through a DSPy ``Predict`` program.

    The language model is configured once from :class:`LLMSettings`. A
    ``model_hint`` passed to :meth:`generate` runs the call against a copy of
    the configured model targeting the hinted model name.
    """

    def __init__(self, settings: Optional[LLMSettings] = None) -> None:
        """Configure the DSPy language model.

        Args:
            settings: LLM configuration; defaults are used when omitted.

        Raises:
            RuntimeError: If DSPy rejects the language-model configuration.
        """

        self._settings = settings or LLMSettings()
        configure_dspy_logging()
        self._lm = self._configure_language_model()
        self._program = self._build_program()

    @property
    def model(self) -> str:
        return self._settings.model

    def generate(self, prompt: str, model_hint: Optional[str] = None) -> GenerationResponse:
        model = model_hint or self._settings.model
        lm = self._lm if model == self._settings.model else self._lm.copy(model=model)
        started = time.perf_counter()
        try:
            with dspy.context(lm=lm):
                prediction = self._program(prompt=prompt)
        except Exception as exc:  # pragma: no cover - DSPy runtime errors
            LOGGER.debug("DSPy completion failed: %s", exc)
            return GenerationResponse(
                success=False,
                model=model,
                latency=time.perf_counter() - started,
                error=str(exc) or exc.__class__.__name__,
            )

        completion = getattr(prediction, "completion", "") if prediction else ""
        latency = time.perf_counter() - started
        if not isinstance(completion, str) or not completion.strip():
            return GenerationResponse(
                success=False,
                model=model,
                latency=latency,
                error="The language model returned an empty completion.",
            )
        return GenerationResponse(success=True, content=completion, model=model, latency=latency)

    def _configure_language_model(self):
        """Return a ``dspy.LM`` built from the configured settings."""

        lm_kwargs: dict[str, object] = {
            "model": self._settings.model,
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_tokens,
        }

        api_key = self._settings.api_key
        if self._settings.api_base_url:
            lm_kwargs["api_base"] = self._settings.api_base_url
            if api_key is None:
                api_key = ""
        elif self._settings.provider:
            lm_kwargs["provider"] = self._settings.provider

        if api_key is not None:
            lm_kwargs["api_key"] = api_key

        try:
            language_model = dspy.LM(**lm_kwargs)
            dspy.settings.configure(lm=language_model)
        except Exception as exc:  # pragma: no cover - DSPy configuration errors
            raise RuntimeError(
                "Unable to configure the DSPy language model. Verify the `llm` section of your "
                "configuration."
            ) from exc
        return language_model

    @staticmethod
    def _build_program():
        """Construct the DSPy program used for free-form completions."""

        class CompletionSignature(dspy.Signature):  # type: ignore[misc]
            """Follow the prompt exactly and return the requested output."""

            prompt: str = dspy.InputField()
            completion: str = dspy.OutputField()

        return dspy.Predict(CompletionSignature)


__all__ = ["DSPyTextGenerator", "configure_dspy_logging"]
