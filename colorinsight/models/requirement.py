"""
Models for requirements extracted from a positioning report.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from colorinsight.utils.constants import DEFAULT_CUSTOMER_NAME


class Requirement(BaseModel):
    """A single client preference or constraint found in the report."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Identifier assigned by the extractor")
    text: str = Field(..., description="Requirement in the report's original language")
    summary_en: Optional[str] = Field(None, alias="summaryEn", description="English summary")
    source_page: Optional[int] = Field(None, alias="sourcePage", description="Page the requirement came from")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)


class RequirementExtraction(BaseModel):
    """Model representing the requirement extraction response from the AI model."""

    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(DEFAULT_CUSTOMER_NAME, alias="customerName")
    requirements: List[Requirement] = Field(default_factory=list)

    @field_validator("customer_name", mode="before")
    @classmethod
    def _default_customer(cls, value):
        if not value or not str(value).strip():
            return DEFAULT_CUSTOMER_NAME
        return str(value).strip()
