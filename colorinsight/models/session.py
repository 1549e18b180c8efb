"""
Wizard session state and the uploaded file it starts from.
"""

import datetime
import mimetypes
from enum import Enum
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from colorinsight.models.requirement import Requirement
from colorinsight.models.scheme import ColorScheme
from colorinsight.models.search import SearchResult


class WizardState(str, Enum):
    LANDING = "LANDING"
    UPLOAD = "UPLOAD"
    ANALYZING_DOC = "ANALYZING_DOC"
    CONFIRM_REQUIREMENTS = "CONFIRM_REQUIREMENTS"
    SEARCHING = "SEARCHING"
    VIEW_SEARCH_RESULTS = "VIEW_SEARCH_RESULTS"
    COMPARING = "COMPARING"
    RESULT = "RESULT"


class PreviewStatus(str, Enum):
    IDLE = "idle"
    BUSY = "busy"
    READY = "ready"
    ERROR = "error"


class UploadedFile(BaseModel):
    """A file handed to the wizard by the user."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str
    data: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path) -> "UploadedFile":
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content_type=content_type or "application/octet-stream",
            data=path.read_bytes(),
        )


class WizardSession(BaseModel):
    """Everything the wizard has accumulated so far."""

    state: WizardState = WizardState.UPLOAD
    customer_name: str = ""
    requirements: List[Requirement] = Field(default_factory=list)
    search_result: Optional[SearchResult] = None
    schemes: List[ColorScheme] = Field(default_factory=list)
    best_scheme: Optional[ColorScheme] = None
    loading_message: str = ""
    error: Optional[str] = None
    preview_image: Optional[str] = Field(None, repr=False)
    preview_status: PreviewStatus = PreviewStatus.IDLE
    preview_error: Optional[str] = None
    is_exporting: bool = False
    last_export_path: Optional[str] = None

    @property
    def is_generating_image(self) -> bool:
        return self.preview_status == PreviewStatus.BUSY


class AnalysisReport(BaseModel):
    """The material rendered into the on-screen and exported report."""

    customer_name: str
    date: datetime.date
    requirements: List[Requirement]
    best_scheme: ColorScheme
    all_schemes: List[ColorScheme]
    search_result: Optional[SearchResult] = None
    preview_image: Optional[str] = Field(None, repr=False)

    @classmethod
    def from_session(cls, session: WizardSession, report_date: Optional[datetime.date] = None) -> "AnalysisReport":
        if session.best_scheme is None:
            raise ValueError("Session has no selected scheme to report on")
        return cls(
            customer_name=session.customer_name,
            date=report_date or datetime.date.today(),
            requirements=list(session.requirements),
            best_scheme=session.best_scheme,
            all_schemes=list(session.schemes),
            search_result=session.search_result,
            preview_image=session.preview_image,
        )

    def citations(self) -> List[str]:
        """Scheme citations followed by search sources, without repeats."""
        entries = list(self.best_scheme.sources)
        if self.search_result:
            entries.extend(f"{source.title} ({source.url})" for source in self.search_result.sources)
        unique = []
        for entry in entries:
            if entry not in unique:
                unique.append(entry)
        return unique
