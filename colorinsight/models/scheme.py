"""
Models for generated color schemes.
"""

import re
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from colorinsight.models.text import LocalizedText

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class Palette(BaseModel):
    """Three hex colors making up a scheme."""

    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str
    accent: str

    @field_validator("primary", "secondary", "accent", mode="before")
    @classmethod
    def _normalize_hex(cls, value):
        match = _HEX_COLOR.match(str(value).strip())
        if not match:
            raise ValueError(f"Invalid hex color: {value!r}")
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return f"#{digits.upper()}"

    def items(self):
        """(label, hex) pairs in display order."""
        return [("Primary", self.primary), ("Secondary", self.secondary), ("Accent", self.accent)]


class SubScores(BaseModel):
    """Five evaluation sub-scores, each in [0, 10]."""

    model_config = ConfigDict(frozen=True)

    match: float = Field(..., ge=0, le=10)
    trend: float = Field(..., ge=0, le=10)
    market: float = Field(..., ge=0, le=10)
    innovation: float = Field(..., ge=0, le=10)
    harmony: float = Field(..., ge=0, le=10)


class Swot(BaseModel):
    strengths: List[LocalizedText] = Field(default_factory=list)
    weaknesses: List[LocalizedText] = Field(default_factory=list)


class ColorScheme(BaseModel):
    """Model representing a candidate color scheme produced by the generator."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: LocalizedText
    description: LocalizedText
    palette: Palette
    scores: SubScores
    weighted_score: Optional[float] = Field(None, alias="weightedScore")
    sources: List[str] = Field(default_factory=list)
    usage_advice: LocalizedText = Field(default_factory=lambda: LocalizedText(primary=""), alias="usageAdvice")
    swot: Optional[Swot] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)
