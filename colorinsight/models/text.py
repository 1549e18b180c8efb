"""
Bilingual text shared by every model that carries human-readable copy.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, model_validator


class LocalizedText(BaseModel):
    """A primary-language string with an optional secondary-language rendering."""

    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, value):
        # Plain strings are monolingual; {en, zh} objects come from the generator
        if isinstance(value, str):
            return {"primary": value}
        if isinstance(value, dict) and "primary" not in value and ("en" in value or "zh" in value):
            primary = value.get("en") or value.get("zh") or ""
            secondary = value.get("zh") if value.get("en") else None
            return {"primary": primary, "secondary": secondary or None}
        return value

    def display(self, separator: str = " / ") -> str:
        if self.secondary:
            return f"{self.primary}{separator}{self.secondary}"
        return self.primary

    def __str__(self) -> str:
        return self.primary
