"""
Chain: the language-model half of the pipeline.

Public API
----------
- :class:`HistoryRewriter`: follow-up → standalone question.
- :class:`AnswerSynthesizer`: streamed, context-grounded answers.
- :class:`StepSequence`: sequential composition of pipeline steps.
- :func:`get_llm`: the configured local chat model.
"""

from pdf_chat.chain.llm import get_llm
from pdf_chat.chain.rewriter import HistoryRewriter
from pdf_chat.chain.sequence import StepSequence
from pdf_chat.chain.synthesizer import AnswerSynthesizer

__all__ = [
    "AnswerSynthesizer",
    "HistoryRewriter",
    "StepSequence",
    "get_llm",
]
