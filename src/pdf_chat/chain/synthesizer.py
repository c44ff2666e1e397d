"""Streamed answer synthesis."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from pdf_chat.chain.llm import is_model_unavailable
from pdf_chat.chain.prompts import build_response_prompt
from pdf_chat.exceptions import ModelUnavailable, StreamInterrupted

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from pdf_chat.retrieval.models import ConversationTurn

logger = logging.getLogger(__name__)


class AnswerSynthesizer:
    """Streams a grounded answer from the chat model."""

    def __init__(self, llm: BaseChatModel) -> None:
        self._llm = llm

    def synthesize(
        self,
        context: str,
        history: Sequence[ConversationTurn],
        question: str,
    ) -> Iterator[str]:
        """Yield answer text increments as the model produces them.

        The returned generator is finite and can be consumed once.  Empty
        increments are skipped; nothing else is buffered or reordered.

        Raises
        ------
        ModelUnavailable
            The model could not be reached before any text was produced.
        StreamInterrupted
            The stream failed, possibly after some text was produced.
        """
        messages = build_response_prompt(context, history, question)
        produced = 0
        try:
            for message_chunk in self._llm.stream(messages):
                text = message_chunk.content
                if not isinstance(text, str):
                    text = "".join(part if isinstance(part, str) else part.get("text", "") for part in text)
                if text:
                    produced += 1
                    yield text
        except Exception as exc:
            if produced == 0 and is_model_unavailable(exc):
                raise ModelUnavailable("Language model is unavailable", details=str(exc)) from exc
            raise StreamInterrupted(
                f"Answer stream ended abnormally after {produced} chunk(s)", details=str(exc)
            ) from exc
        logger.info("Answer stream finished (%d chunks)", produced)
