"""Aggregation of stored submissions into per-question statistics.

Pure and synchronous: the caller loads the question list and the submissions
(with decoded answers) and passes them in. The whole answer set is
recomputed on every call, O(submissions x answers). That is fine for
moderate volumes. Large forms should move to counts updated per submission.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Sequence

from form_responses.models.answer_value import MultiSelectValue, ScalarValue
from form_responses.models.question import Question, QuestionType, TYPES_REQUIRING_OPTIONS
from form_responses.models.statistics import (
    DistributionEntry,
    QuestionStats,
    QuestionSummary,
    WordCount,
)
from form_responses.models.submission import Response

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 3


def tokenize(text: str, *, min_length: int = MIN_WORD_LENGTH) -> List[str]:
    """Lowercased whitespace tokens of at least `min_length` characters."""
    return [word for word in text.lower().split() if len(word) >= min_length]


def _initial_stats(question: Question) -> QuestionStats:
    distribution: Dict[str, int] = {}
    if question.type in TYPES_REQUIRING_OPTIONS:
        distribution = {option: 0 for option in question.options}
    return QuestionStats(
        question=QuestionSummary(
            id=question.id,
            title=question.title,
            type=question.type,
            options=list(question.options),
        ),
        distribution=distribution,
    )


def _add_single_choice(stats: QuestionStats, value, min_length: int) -> None:
    if not isinstance(value, ScalarValue):
        raise TypeError("single choice answers must be scalar values")
    stats.distribution[value.text] = stats.distribution.get(value.text, 0) + 1
    stats.total_responses += 1


def _add_checkbox(stats: QuestionStats, value, min_length: int) -> None:
    if not isinstance(value, MultiSelectValue):
        raise TypeError("checkbox answers must be multi-select values")
    for selected in value.selections:
        stats.distribution[selected] = stats.distribution.get(selected, 0) + 1
    # One per answering submission, not one per selected option
    stats.total_responses += 1


def _add_short_answer(stats: QuestionStats, value, min_length: int) -> None:
    if not isinstance(value, ScalarValue):
        raise TypeError("short answers must be scalar values")
    stats.responses.append(value.text)
    for word in tokenize(value.text, min_length=min_length):
        stats.word_frequency[word] = stats.word_frequency.get(word, 0) + 1
    stats.total_responses += 1


_ACCUMULATORS: Dict[str, Callable[[QuestionStats, object, int], None]] = {
    QuestionType.MULTIPLE_CHOICE: _add_single_choice,
    QuestionType.DROPDOWN: _add_single_choice,
    QuestionType.CHECKBOX: _add_checkbox,
    QuestionType.SHORT_ANSWER: _add_short_answer,
}


def aggregate(
    questions: Sequence[Question],
    submissions: Iterable[Response],
    *,
    min_word_length: int = MIN_WORD_LENGTH,
) -> Dict[str, QuestionStats]:
    """Compute `question_id -> QuestionStats` for every question of a form.

    Answers with an empty value, and answers to questions that are not in
    `questions`, do not count towards any distribution.
    """
    stats: Dict[str, QuestionStats] = {q.id: _initial_stats(q) for q in questions}
    for submission in submissions:
        for answer in submission.answers:
            entry = stats.get(answer.question_id)
            if entry is None or answer.value.is_empty:
                continue
            accumulate = _ACCUMULATORS.get(entry.question.type)
            if accumulate is None:
                logger.warning(
                    "aggregation.unknown_question_type question_id=%s type=%s",
                    answer.question_id,
                    entry.question.type,
                )
                continue
            accumulate(entry, answer.value, min_word_length)
    return stats


def top_words(word_frequency: Dict[str, int], limit: int) -> List[WordCount]:
    """Most frequent words first; ties keep first-occurrence order."""
    ranked = sorted(word_frequency.items(), key=lambda item: -item[1])
    return [WordCount(word=word, count=count) for word, count in ranked[: max(limit, 0)]]


def breakdown(stats: QuestionStats) -> List[DistributionEntry]:
    """Distribution entries sorted by count with percentages of all selections."""
    total = sum(stats.distribution.values())
    ranked = sorted(stats.distribution.items(), key=lambda item: -item[1])
    return [
        DistributionEntry(
            value=value,
            count=count,
            percentage=round(count / total * 100, 2) if total else 0.0,
        )
        for value, count in ranked
    ]


__all__ = ["MIN_WORD_LENGTH", "tokenize", "aggregate", "top_words", "breakdown"]
