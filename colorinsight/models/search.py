"""
Models for the market search artifact.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List

from colorinsight.models.text import LocalizedText


class Source(BaseModel):
    """A cited web page returned with the search grounding metadata."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str


class SearchResult(BaseModel):
    """Trends, competitors and insight gathered by the market search step."""

    model_config = ConfigDict(populate_by_name=True)

    trends: List[LocalizedText] = Field(default_factory=list)
    competitors: List[LocalizedText] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    market_insight: LocalizedText = Field(default_factory=lambda: LocalizedText(primary=""), alias="marketInsight")
    sources: List[Source] = Field(default_factory=list)
