"""Pydantic models for aggregated form statistics."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class QuestionSummary(BaseModel):
    id: str
    title: str
    type: str
    options: List[str] = Field(default_factory=list)


class QuestionStats(BaseModel):
    question: QuestionSummary
    total_responses: int = 0
    # Choice questions: option -> count, seeded with every declared option
    distribution: Dict[str, int] = Field(default_factory=dict)
    # Short answers: every non-empty answer in submission order
    responses: List[str] = Field(default_factory=list)
    word_frequency: Dict[str, int] = Field(default_factory=dict)


class WordCount(BaseModel):
    word: str
    count: int


class DistributionEntry(BaseModel):
    value: str
    count: int
    percentage: float


class FormStatistics(BaseModel):
    form_id: str
    total_submissions: int
    question_count: int
    questions: Dict[str, QuestionStats]


class QuestionStatisticsDetail(BaseModel):
    form_id: str
    question_id: str
    statistics: QuestionStats
    breakdown: List[DistributionEntry] = Field(default_factory=list)
    top_words: List[WordCount] = Field(default_factory=list)


__all__ = [
    "QuestionSummary",
    "QuestionStats",
    "WordCount",
    "DistributionEntry",
    "FormStatistics",
    "QuestionStatisticsDetail",
]
