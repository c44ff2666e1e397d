"""Prompt templates for question rephrasing and answer synthesis.

Keeping prompts in one place makes them easy to audit and tweak.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

    from pdf_chat.retrieval.models import ConversationTurn

# ── 1. Follow-up rephrasing ───────────────────────────────────────────

REPHRASE_QUESTION_TEMPLATE = """\
Given the following conversation and a follow up question, rephrase the follow up question to be a standalone question.

Chat History:
{chat_history}
Follow Up Input: {question}
Standalone Question:"""


def format_history_as_text(history: Sequence[ConversationTurn]) -> str:
    """Render turns as ``HUMAN: ...`` / ``AI: ...`` lines."""
    return "\n".join(f"{turn.role.upper()}: {turn.content}" for turn in history)


def build_rephrase_prompt(history: Sequence[ConversationTurn], question: str) -> str:
    """Build the single-string prompt used by the history rewriter."""
    return REPHRASE_QUESTION_TEMPLATE.format(
        chat_history=format_history_as_text(history),
        question=question,
    )


# ── 2. Answer synthesis ───────────────────────────────────────────────

RESPONSE_SYSTEM_TEMPLATE = """\
You are an experienced researcher, expert at interpreting and answering questions based on provided sources. \
Using the provided context, answer the user's question to the best of your ability using the resources provided.
The user may not want to discuss the document and that is ok. You can also talk about anything other than the document. \
Do not repeat text. The user is free to discuss anything they'd like without the need to use the document.
Anything between the following `context` html blocks is retrieved from a knowledge bank, not part of the conversation with the user.
<context>
    {context}
<context/>

REMEMBER: If there is no relevant information within the context, just say "Hmm, I'm not sure." \
Don't try to make up an answer. Anything between the preceding 'context' html blocks is retrieved from a knowledge bank, \
not part of the conversation with the user."""


def build_response_prompt(
    context: str,
    history: Sequence[ConversationTurn],
    question: str,
) -> list[BaseMessage]:
    """Assemble the messages for a retrieval-augmented answer.

    Parameters
    ----------
    context:
        Formatted retrieved segments, embedded in the system message.
    history:
        Prior turns, appended in order as human / AI messages.
    question:
        The current question, appended last.

    Returns
    -------
    list[BaseMessage]
        LangChain messages ready for ``.stream()``.
    """
    return [
        SystemMessage(content=RESPONSE_SYSTEM_TEMPLATE.format(context=context)),
        *(turn.to_message() for turn in history),
        HumanMessage(content=question),
    ]
