"""gizmify -- typed client for the SurveyGizmo v4 REST API.

Public re-exports
-----------------

* **Clients:** :class:`GizmifyClient`, :class:`AsyncGizmifyClient`
* **Configuration:** :class:`GizmifyConfig`
* **Errors:** Every :class:`GizmifyError` subclass and :class:`ErrorCode`
* **Models:** Entity records returned by the client

Usage::

    from gizmify import GizmifyClient

    client = GizmifyClient(api_token="...", api_token_secret="...")
    responses = client.get_responses(survey_id=1234)
"""

from __future__ import annotations

# ── Clients ────────────────────────────────────────────────────────────
from gizmify.async_client import AsyncGizmifyClient
from gizmify.client import GizmifyClient

# ── Configuration ───────────────────────────────────────────────────────
from gizmify.config import DEFAULT_BASE_URL, DEFAULT_MAX_ATTEMPTS, GizmifyConfig

# ── Errors ──────────────────────────────────────────────────────────────
from gizmify.errors import (
    ErrorCode,
    GizmifyApiError,
    GizmifyDeserializationError,
    GizmifyError,
    GizmifyRetryExhaustedError,
    GizmifyTransportError,
)

# ── Models ──────────────────────────────────────────────────────────────
from gizmify.models import (
    CONTACT_FIELDS,
    Contact,
    ContactField,
    EmailMessage,
    QuestionOption,
    QuestionProperties,
    Result,
    Survey,
    SurveyCampaign,
    SurveyQuestion,
    SurveyResponse,
)

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Clients
    "GizmifyClient",
    "AsyncGizmifyClient",
    # Configuration
    "GizmifyConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_MAX_ATTEMPTS",
    # Errors
    "GizmifyError",
    "ErrorCode",
    "GizmifyTransportError",
    "GizmifyApiError",
    "GizmifyDeserializationError",
    "GizmifyRetryExhaustedError",
    # Models
    "Survey",
    "SurveyQuestion",
    "QuestionProperties",
    "QuestionOption",
    "SurveyResponse",
    "SurveyCampaign",
    "EmailMessage",
    "Contact",
    "ContactField",
    "CONTACT_FIELDS",
    "Result",
]
