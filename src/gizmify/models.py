"""Plain data records for SurveyGizmo entities.

Every record is a dataclass with a ``from_dict`` classmethod that reads the
SurveyGizmo v4 JSON shape and tolerates missing optional keys.  A missing
required key (``id`` in most records) raises ``KeyError``, which the
envelope unwrapper reports as a deserialization failure.

:class:`Contact` carries a statically declared field map,
:data:`CONTACT_FIELDS`, used to render it as query parameters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, NamedTuple

# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def _int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _opt_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _localized(value: Any) -> dict[str, str]:
    """Localisable strings arrive as ``{"English": "..."}`` or a bare string."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return {str(k): _str(v) for k, v in value.items()}
    return {"English": _str(value)}


def _timestamp(value: Any) -> datetime | None:
    """Parse ``"YYYY-MM-DD HH:MM:SS[ TZ]"`` or its ISO ``T``-separated form.

    The zone suffix is dropped.
    """
    if not value:
        return None
    text = str(value)[:19].replace("T", " ", 1)
    return datetime.strptime(text, "%Y-%m-%d %H:%M:%S")


# ---------------------------------------------------------------------------
# Surveys
# ---------------------------------------------------------------------------

@dataclass
class Survey:
    """A survey as listed by ``GET survey``."""

    id: int
    title: str = ""
    type: str = ""
    status: str = ""
    internal_title: str = ""
    created_on: str = ""
    modified_on: str = ""
    links: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Survey:
        return cls(
            id=int(data["id"]),
            title=_str(data.get("title")),
            type=_str(data.get("_subtype") or data.get("type")),
            status=_str(data.get("status")),
            internal_title=_str(data.get("internal_title")),
            created_on=_str(data.get("created_on")),
            modified_on=_str(data.get("modified_on")),
            links={str(k): _str(v) for k, v in (data.get("links") or {}).items()},
        )


@dataclass
class QuestionProperties:
    option_sort: bool = False
    required: bool = False
    hidden: bool = False
    orientation: str = ""
    question_description: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuestionProperties:
        return cls(
            option_sort=_bool(data.get("option_sort")),
            required=_bool(data.get("required")),
            hidden=_bool(data.get("hidden")),
            orientation=_str(data.get("orientation")),
            question_description=_localized(data.get("question_description")),
        )


@dataclass
class QuestionOption:
    id: int
    shortname: str = ""
    option: str = ""
    answer: str = ""
    title: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuestionOption:
        return cls(
            id=int(data["id"]),
            shortname=_str(data.get("shortname") or data.get("shortName")),
            option=_str(data.get("option")),
            answer=_str(data.get("answer")),
            title=_localized(data.get("title")),
        )


@dataclass
class SurveyQuestion:
    """One question of a survey.

    ``type`` is the concrete question type (``"RADIO"``, ``"TEXTBOX"``...)
    and ``base_type`` its family (``"Question"``, ``"Decorative"``...).
    """

    id: int
    page: int = 0
    title: dict[str, str] = field(default_factory=dict)
    type: str = ""
    base_type: str = ""
    shortname: str = ""
    section_id: int = 0
    answer: str = ""
    answer_id: int | None = None
    shown: bool = False
    properties: QuestionProperties = field(default_factory=QuestionProperties)
    options: list[QuestionOption] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SurveyQuestion:
        return cls(
            id=int(data["id"]),
            page=_int(data.get("page")),
            title=_localized(data.get("title")),
            type=_str(data.get("type")),
            base_type=_str(data.get("base_type")),
            shortname=_str(data.get("shortname") or data.get("shortName")),
            section_id=_int(data.get("section_id")),
            answer=_str(data.get("answer")),
            answer_id=_opt_int(data.get("answer_id")),
            shown=_bool(data.get("shown")),
            properties=QuestionProperties.from_dict(data.get("properties") or {}),
            options=[QuestionOption.from_dict(o) for o in data.get("options") or () if o],
        )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

_QUESTION_KEY = re.compile(r"^\[question\((\d+)\)(.*)\]$")
_URL_KEY = re.compile(r'^\[url\("?(.+?)"?\)\]$')
_VARIABLE_KEY = re.compile(r'^\[variable\("?(.+?)"?\)\]$')
_GEODATA_KEY = re.compile(r'^\[geodata\("?(.+?)"?\)\]$')


@dataclass
class SurveyResponse:
    """A submitted response.

    Answers arrive as flat keys such as ``[question(5)]`` or
    ``[question(7), option(10021)]``; they are folded into
    :attr:`all_questions` keyed by question id.  Several answers to the
    same question (checkbox grids, "other" text) are joined with ``","``.
    ``[url("...")]``, ``[variable("...")]`` and ``[geodata("...")]`` keys
    land in :attr:`urls`, :attr:`variables` and :attr:`geodata`.
    """

    id: str
    contact_id: str = ""
    status: str = ""
    is_test_data: str = ""
    date_submitted: datetime | None = None
    response_comment: str = ""
    all_questions: dict[int, str] = field(default_factory=dict)
    urls: dict[str, str] = field(default_factory=dict)
    variables: dict[str, str] = field(default_factory=dict)
    geodata: dict[str, str] = field(default_factory=dict)

    def add_question(self, question_id: int, value: str) -> None:
        """Record an answer, appending to any earlier one for the same id."""
        if question_id not in self.all_questions:
            self.all_questions[question_id] = value
            return
        self.all_questions[question_id] += "," + value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SurveyResponse:
        response = cls(
            id=_str(data["id"]),
            contact_id=_str(data.get("contact_id")),
            status=_str(data.get("status")),
            is_test_data=_str(data.get("is_test_data")),
            date_submitted=_timestamp(data.get("datesubmitted")),
            response_comment=_str(data.get("sResponseComment")),
        )
        for key, value in data.items():
            if not isinstance(key, str) or not key.startswith("[") or value in (None, ""):
                continue
            match = _QUESTION_KEY.match(key)
            if match:
                response.add_question(int(match.group(1)), _str(value))
                continue
            match = _URL_KEY.match(key)
            if match:
                response.urls[match.group(1)] = _str(value)
                continue
            match = _VARIABLE_KEY.match(key)
            if match:
                response.variables[match.group(1)] = _str(value)
                continue
            match = _GEODATA_KEY.match(key)
            if match:
                response.geodata[match.group(1)] = _str(value)
        return response


# ---------------------------------------------------------------------------
# Campaigns and email messages
# ---------------------------------------------------------------------------

@dataclass
class SurveyCampaign:
    id: int
    name: str = ""
    type: str = ""
    status: str = ""
    uri: str = ""
    language: str = ""
    date_created: str = ""
    date_modified: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SurveyCampaign:
        return cls(
            id=int(data["id"]),
            name=_str(data.get("name")),
            type=_str(data.get("_subtype") or data.get("type")),
            status=_str(data.get("status")),
            uri=_str(data.get("uri")),
            language=_str(data.get("language")),
            date_created=_str(data.get("datecreated")),
            date_modified=_str(data.get("datemodified")),
        )


@dataclass
class EmailMessage:
    id: int
    subtype: str = ""
    message_type: str = ""
    subject: str = ""
    from_name: str | None = None
    from_email: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EmailMessage:
        sender = data.get("from") or {}
        return cls(
            id=int(data["id"]),
            subtype=_str(data.get("_subtype")),
            message_type=_str(data.get("messagetype")),
            subject=_str(data.get("subject")),
            from_name=sender.get("name"),
            from_email=sender.get("email"),
        )


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------

class ContactField(NamedTuple):
    """Maps a :class:`Contact` attribute to its query-string name."""

    attr: str
    query_name: str
    required: bool = False


CONTACT_FIELDS: tuple[ContactField, ...] = (
    ContactField("email", "semailaddress", True),
    ContactField("first_name", "sfirstname", True),
    ContactField("last_name", "slastname", True),
    ContactField("organization", "sorganization", True),
    ContactField("department", "sdepartment"),
    ContactField("title", "stitle"),
    ContactField("business_phone", "sbusinessphone"),
    ContactField("home_phone", "shomephone"),
    ContactField("fax_phone", "sfaxphone"),
    ContactField("address", "smailingaddress"),
    ContactField("address2", "smailingaddress2"),
    ContactField("city", "smailingaddresscity"),
    ContactField("state", "smailingaddressstate"),
    ContactField("postal_code", "smailingaddresspostal"),
    ContactField("country", "smailingaddresscountry"),
    ContactField("url", "surl"),
    ContactField("status", "estatus"),
    *(ContactField(f"custom_field{i}", f"scustomfield{i}") for i in range(1, 11)),
)
"""Contact attributes in the order they are sent.  Required fields are
always sent, even when empty; the rest are omitted when empty."""


@dataclass
class Contact:
    """A campaign contact."""

    id: int = 0
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    organization: str = ""
    department: str = ""
    title: str = ""
    business_phone: str = ""
    home_phone: str = ""
    fax_phone: str = ""
    address: str = ""
    address2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    url: str = ""
    status: str = ""
    custom_field1: str = ""
    custom_field2: str = ""
    custom_field3: str = ""
    custom_field4: str = ""
    custom_field5: str = ""
    custom_field6: str = ""
    custom_field7: str = ""
    custom_field8: str = ""
    custom_field9: str = ""
    custom_field10: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Contact:
        values = {
            f.attr: _str(data.get(f.query_name))
            for f in CONTACT_FIELDS
            if f.query_name in data
        }
        return cls(id=_int(data.get("id")), **values)


# ---------------------------------------------------------------------------
# Direct results
# ---------------------------------------------------------------------------

@dataclass
class Result:
    """Outcome of a create / update / delete call."""

    result_ok: bool
    id: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result:
        inner = data.get("data")
        raw_id = data.get("id")
        if raw_id is None and isinstance(inner, dict):
            raw_id = inner.get("id")
        return cls(result_ok=_bool(data.get("result_ok")), id=_int(raw_id))


def results_ok(results: list[Result]) -> bool:
    """``True`` when the first result of a call reports success."""
    return bool(results) and results[0].result_ok
