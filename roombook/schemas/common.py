from http import HTTPStatus
from pydantic import BaseModel, ConfigDict

from roombook.config import settings

PROBLEM_CONTENT_TYPE = "application/problem+json"


# ─── Problem Document (RFC 7807) ──────────────────────────────────────────────
class ProblemDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    title: str
    status: int
    detail: str
    instance: str


def problem_type(error_code: str) -> str:
    """VALIDATION_ERROR -> /problems/validation-error"""
    return settings.PROBLEM_TYPE_BASE + error_code.lower().replace("_", "-")


def build_problem(
    status_code: int,
    detail: str,
    instance: str,
    error_code: str | None = None,
    **extra,
) -> dict:
    """Return a problem document dict ready to be sent as application/problem+json."""
    doc = ProblemDocument(
        type=problem_type(error_code) if error_code else "about:blank",
        title=HTTPStatus(status_code).phrase,
        status=status_code,
        detail=detail,
        instance=instance,
        **extra,
    )
    return doc.model_dump()


# ─── Shared OpenAPI error responses ───────────────────────────────────────────
def problem_responses(*status_codes: int) -> dict:
    return {
        code: {"model": ProblemDocument, "content": {PROBLEM_CONTENT_TYPE: {}}}
        for code in status_codes
    }
