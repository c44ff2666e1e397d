"""LLM initialisation: single place to configure the local model server.

The chat model is served by a locally running Ollama instance whose
address is ``settings.ollama_base_url``.  Any LangChain ``BaseChatModel``
can be passed to the chain components instead (tests use scripted fakes).
"""

from __future__ import annotations

import logging

import httpx
from langchain_ollama import ChatOllama
from ollama import ResponseError

from pdf_chat.config import settings

logger = logging.getLogger(__name__)


def get_llm(
    temperature: float | None = None,
    *,
    base_url: str | None = None,
    model: str | None = None,
) -> ChatOllama:
    """Return an Ollama chat model; unset arguments fall back to ``settings``."""
    if temperature is None:
        temperature = settings.llm_temperature
    base_url = base_url or settings.ollama_base_url
    model = model or settings.llm_model_name
    logger.info("Using Ollama endpoint %s (model=%s)", base_url, model)
    return ChatOllama(base_url=base_url, model=model, temperature=temperature)


def is_model_unavailable(exc: BaseException) -> bool:
    """Return ``True`` when *exc* means the model cannot be used at all.

    That is the server being unreachable or timing out, or Ollama answering
    404 because the model has not been pulled.
    """
    if isinstance(exc, ResponseError):
        return exc.status_code == 404
    return isinstance(exc, (ConnectionError, TimeoutError, httpx.TransportError))
