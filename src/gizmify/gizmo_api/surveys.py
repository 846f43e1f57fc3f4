"""Survey, question and response API wrappers.

Provides :class:`SurveyAPI` (sync) and :class:`AsyncSurveyAPI` (async).
Both delegate paging, retries and envelope handling to a paginator; the
module-level ``*_endpoint`` functions describe each request once for both.
"""

from __future__ import annotations

from gizmify.errors import GizmifyApiError
from gizmify.models import Result, Survey, SurveyQuestion, SurveyResponse, results_ok

from .envelope import EnvelopeKind
from .pagination import AsyncPaginator, Paginator
from .query import Endpoint, QueryParam


def list_endpoint() -> Endpoint:
    return Endpoint("survey")


def survey_endpoint(survey_id: int) -> Endpoint:
    return Endpoint(f"survey/{survey_id}")


def create_endpoint(title: str | None) -> Endpoint:
    return Endpoint(
        "survey/",
        (QueryParam("type", "survey"), QueryParam("title", title or "", True)),
        method="PUT",
    )


def delete_endpoint(survey_id: int) -> Endpoint:
    return Endpoint(f"survey/{survey_id}", method="DELETE")


def questions_endpoint(survey_id: int) -> Endpoint:
    return Endpoint(f"survey/{survey_id}/surveyquestion")


def responses_endpoint(survey_id: int) -> Endpoint:
    return Endpoint(f"survey/{survey_id}/surveyresponse")


class SurveyAPI:
    """Synchronous wrapper for the ``survey`` resources.

    Parameters
    ----------
    paginator:
        A configured :class:`Paginator`.
    """

    def __init__(self, paginator: Paginator) -> None:
        self._pages = paginator

    def list(self, get_all_pages: bool = True) -> list[Survey]:
        """All surveys visible to the account."""
        return self._pages.collect(
            list_endpoint(), Survey.from_dict, EnvelopeKind.PAGED_LIST,
            get_all_pages=get_all_pages,
        )

    def get(self, survey_id: int) -> Survey | None:
        """Fetch one survey, or ``None`` when the API reports no such survey.

        Transport, retry and deserialization failures still raise.
        """
        try:
            surveys = self._pages.collect(survey_endpoint(survey_id), Survey.from_dict)
        except GizmifyApiError:
            return None
        return surveys[0] if surveys else None

    def create(self, title: str) -> int:
        """Create an empty survey.

        Returns
        -------
        int
            The new survey's id, or ``0`` if the API returned none.
        """
        try:
            surveys = self._pages.collect(create_endpoint(title), Survey.from_dict)
        except GizmifyApiError:
            return 0
        return surveys[0].id if surveys else 0

    def delete(self, survey_id: int) -> bool:
        results = self._pages.collect(
            delete_endpoint(survey_id), Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    def questions(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyQuestion]:
        return self._pages.collect(
            questions_endpoint(survey_id), SurveyQuestion.from_dict, EnvelopeKind.PAGED_LIST,
            get_all_pages=get_all_pages,
        )

    def responses(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyResponse]:
        return self._pages.collect(
            responses_endpoint(survey_id), SurveyResponse.from_dict, EnvelopeKind.PAGED_LIST,
            get_all_pages=get_all_pages,
        )


class AsyncSurveyAPI:
    """Asynchronous wrapper for the ``survey`` resources.

    Mirrors :class:`SurveyAPI` but all methods are coroutines.
    """

    def __init__(self, paginator: AsyncPaginator) -> None:
        self._pages = paginator

    async def list(self, get_all_pages: bool = True) -> list[Survey]:
        return await self._pages.collect(
            list_endpoint(), Survey.from_dict, EnvelopeKind.PAGED_LIST,
            get_all_pages=get_all_pages,
        )

    async def get(self, survey_id: int) -> Survey | None:
        try:
            surveys = await self._pages.collect(survey_endpoint(survey_id), Survey.from_dict)
        except GizmifyApiError:
            return None
        return surveys[0] if surveys else None

    async def create(self, title: str) -> int:
        try:
            surveys = await self._pages.collect(create_endpoint(title), Survey.from_dict)
        except GizmifyApiError:
            return 0
        return surveys[0].id if surveys else 0

    async def delete(self, survey_id: int) -> bool:
        results = await self._pages.collect(
            delete_endpoint(survey_id), Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    async def questions(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyQuestion]:
        return await self._pages.collect(
            questions_endpoint(survey_id), SurveyQuestion.from_dict, EnvelopeKind.PAGED_LIST,
            get_all_pages=get_all_pages,
        )

    async def responses(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyResponse]:
        return await self._pages.collect(
            responses_endpoint(survey_id), SurveyResponse.from_dict, EnvelopeKind.PAGED_LIST,
            get_all_pages=get_all_pages,
        )
