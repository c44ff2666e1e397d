"""Rewrite a follow-up question into a standalone one using the chat history."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from langchain_core.output_parsers import StrOutputParser

from pdf_chat.chain.llm import is_model_unavailable
from pdf_chat.chain.prompts import build_rephrase_prompt
from pdf_chat.exceptions import ModelUnavailable, StreamInterrupted

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from pdf_chat.retrieval.models import ConversationTurn

logger = logging.getLogger(__name__)


class HistoryRewriter:
    """Turns ``(history, follow_up)`` into a question that stands on its own.

    The model's whole response is used verbatim as the new question; the
    only check is that it is not blank.
    """

    def __init__(self, llm: BaseChatModel) -> None:
        self._llm = llm
        self._parser = StrOutputParser()

    def rewrite(self, history: Sequence[ConversationTurn], follow_up: str) -> str:
        """Return the standalone form of *follow_up*.

        With an empty *history* the follow-up is returned unchanged and the
        model is not called.
        """
        if not history:
            return follow_up

        prompt = build_rephrase_prompt(history, follow_up)
        try:
            response = self._llm.invoke(prompt)
        except Exception as exc:
            if is_model_unavailable(exc):
                raise ModelUnavailable("Language model is unavailable", details=str(exc)) from exc
            raise StreamInterrupted("Question rewriting failed", details=str(exc)) from exc

        standalone = self._parser.invoke(response)
        if not standalone.strip():
            raise StreamInterrupted("Language model returned an empty standalone question")
        logger.info("Rewrote follow-up %r as %r", follow_up, standalone)
        return standalone
