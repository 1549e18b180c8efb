"""
Wizard state transitions.

Every function takes the current ``WizardSession`` and returns a new one; the
input session is never mutated. The controller decides which transition to
apply after each external call, which keeps the flow testable without any
network access.
"""

from typing import Iterable, Optional

from colorinsight.errors import InvalidTransitionError, UploadValidationError
from colorinsight.models.requirement import RequirementExtraction
from colorinsight.models.scheme import ColorScheme
from colorinsight.models.search import SearchResult
from colorinsight.models.session import PreviewStatus, UploadedFile, WizardSession, WizardState
from colorinsight.scoring import score_schemes, select_best
from colorinsight.utils.constants import PDF_MIME_TYPE

# Progress indicator: (label, states shown as that step)
STEPS = (
    ("Upload", (WizardState.LANDING, WizardState.UPLOAD)),
    ("Analyze", (WizardState.ANALYZING_DOC, WizardState.CONFIRM_REQUIREMENTS)),
    ("Search", (WizardState.SEARCHING, WizardState.VIEW_SEARCH_RESULTS)),
    ("Compare", (WizardState.COMPARING,)),
    ("Result", (WizardState.RESULT,)),
)


def _require(session: WizardSession, *states: WizardState):
    if session.state not in states:
        allowed = ", ".join(state.value for state in states)
        raise InvalidTransitionError(f"Action not available in state {session.state.value} (expected {allowed})")


def _update(session: WizardSession, **changes) -> WizardSession:
    return session.model_copy(update=changes)


def step_index(state: WizardState) -> int:
    for index, (_, states) in enumerate(STEPS):
        if state in states:
            return index
    raise ValueError(f"Unknown wizard state: {state}")


def initial_session(show_landing: bool = False) -> WizardSession:
    return WizardSession(state=WizardState.LANDING if show_landing else WizardState.UPLOAD)


def leave_landing(session: WizardSession) -> WizardSession:
    _require(session, WizardState.LANDING)
    return _update(session, state=WizardState.UPLOAD)


def validate_upload(upload: UploadedFile, max_bytes: Optional[int] = None):
    """
    Check an upload before any external call is made.

    Raises:
        UploadValidationError: With a user-facing message if the file is not a
            PDF or exceeds ``max_bytes``
    """
    if upload.content_type != PDF_MIME_TYPE:
        raise UploadValidationError("Please upload a PDF file.")
    if max_bytes is not None and upload.size > max_bytes:
        raise UploadValidationError(f"File size exceeds {max_bytes // (1024 * 1024)}MB.")


def select_file(session: WizardSession, upload: UploadedFile, max_bytes: Optional[int] = None) -> WizardSession:
    _require(session, WizardState.UPLOAD)
    try:
        validate_upload(upload, max_bytes)
    except UploadValidationError as e:
        return _update(session, error=str(e), requirements=[])
    return _update(
        session,
        state=WizardState.ANALYZING_DOC,
        error=None,
        loading_message="Extracting text from PDF...",
    )


def set_progress(session: WizardSession, message: str) -> WizardSession:
    return _update(session, loading_message=message)


def document_analyzed(session: WizardSession, extraction: RequirementExtraction) -> WizardSession:
    _require(session, WizardState.ANALYZING_DOC)
    return _update(
        session,
        state=WizardState.CONFIRM_REQUIREMENTS,
        customer_name=extraction.customer_name,
        requirements=list(extraction.requirements),
        loading_message="",
        error=None,
    )


def document_failed(session: WizardSession, message: str) -> WizardSession:
    _require(session, WizardState.ANALYZING_DOC)
    return _update(
        session,
        state=WizardState.UPLOAD,
        requirements=[],
        loading_message="",
        error=message or "Failed to process file",
    )


def reupload(session: WizardSession) -> WizardSession:
    _require(session, WizardState.CONFIRM_REQUIREMENTS)
    return _update(session, state=WizardState.UPLOAD, error=None)


def start_search(session: WizardSession, message: str) -> WizardSession:
    _require(session, WizardState.CONFIRM_REQUIREMENTS)
    if not session.requirements:
        return _update(session, error="No requirements to analyze. Please upload another report.")
    return _update(session, state=WizardState.SEARCHING, loading_message=message, error=None)


def search_completed(session: WizardSession, result: SearchResult) -> WizardSession:
    _require(session, WizardState.SEARCHING)
    return _update(
        session,
        state=WizardState.VIEW_SEARCH_RESULTS,
        search_result=result,
        loading_message="",
        error=None,
    )


def search_failed(session: WizardSession, message: str) -> WizardSession:
    _require(session, WizardState.SEARCHING)
    return _update(
        session,
        state=WizardState.CONFIRM_REQUIREMENTS,
        loading_message="",
        error=message or "Search failed",
    )


def start_generation(session: WizardSession, message: str) -> WizardSession:
    _require(session, WizardState.VIEW_SEARCH_RESULTS)
    return _update(session, state=WizardState.SEARCHING, loading_message=message, error=None)


def schemes_generated(session: WizardSession, schemes: Iterable[ColorScheme]) -> WizardSession:
    _require(session, WizardState.SEARCHING)
    scored = score_schemes(list(schemes))
    return _update(
        session,
        state=WizardState.COMPARING,
        schemes=scored,
        best_scheme=select_best(scored),
        loading_message="",
        error=None,
    )


def generation_failed(session: WizardSession, message: str, fallback: WizardState) -> WizardSession:
    _require(session, WizardState.SEARCHING)
    if fallback not in (WizardState.VIEW_SEARCH_RESULTS, WizardState.CONFIRM_REQUIREMENTS):
        raise InvalidTransitionError(f"Cannot fall back to {fallback.value} after a generation failure")
    return _update(
        session,
        state=fallback,
        loading_message="",
        error=message or "Scheme generation failed",
    )


def view_result(session: WizardSession) -> WizardSession:
    _require(session, WizardState.COMPARING)
    return _update(session, state=WizardState.RESULT, error=None)


def needs_preview(session: WizardSession) -> bool:
    return (
        session.best_scheme is not None
        and session.preview_image is None
        and not session.is_generating_image
    )


def preview_started(session: WizardSession) -> WizardSession:
    return _update(session, preview_status=PreviewStatus.BUSY, preview_error=None)


def preview_ready(session: WizardSession, data_uri: str) -> WizardSession:
    return _update(session, preview_status=PreviewStatus.READY, preview_image=data_uri, preview_error=None)


def preview_failed(session: WizardSession, message: str) -> WizardSession:
    return _update(session, preview_status=PreviewStatus.ERROR, preview_error=message or "Image generation failed")


def export_started(session: WizardSession) -> WizardSession:
    _require(session, WizardState.RESULT)
    return _update(session, is_exporting=True, error=None)


def export_finished(session: WizardSession, path: str) -> WizardSession:
    return _update(session, is_exporting=False, last_export_path=path)


def export_failed(session: WizardSession, message: str) -> WizardSession:
    return _update(session, is_exporting=False, error=message or "Failed to export report")


def reset(session: WizardSession) -> WizardSession:
    """Start over: drop everything gathered so far and return to the upload view."""
    return WizardSession(state=WizardState.UPLOAD)
