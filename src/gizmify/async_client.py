"""Asynchronous SurveyGizmo client.

:class:`AsyncGizmifyClient` mirrors :class:`GizmifyClient` but every I/O
method is a coroutine.  Pages of one call are still fetched one after
another.

Usage::

    import asyncio
    from gizmify import AsyncGizmifyClient

    async def main():
        async with AsyncGizmifyClient(api_token="...", api_token_secret="...") as client:
            surveys = await client.get_all_surveys()
            print(len(surveys))

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from gizmify.config import GizmifyConfig
from gizmify.gizmo_api.campaigns import AsyncCampaignAPI
from gizmify.gizmo_api.contacts import AsyncContactAPI
from gizmify.gizmo_api.envelope import EnvelopeKind
from gizmify.gizmo_api.pagination import AsyncPaginator
from gizmify.gizmo_api.query import Endpoint
from gizmify.gizmo_api.surveys import AsyncSurveyAPI
from gizmify.gizmo_api.transport import AsyncGizmoTransport, AsyncTransportPort
from gizmify.models import (
    Contact,
    EmailMessage,
    Survey,
    SurveyCampaign,
    SurveyQuestion,
    SurveyResponse,
)

T = TypeVar("T")


class AsyncGizmifyClient:
    """Asynchronous SurveyGizmo client.

    Parameters
    ----------
    api_token:
        SurveyGizmo API token.
    api_token_secret:
        SurveyGizmo API token secret.
    transport:
        Optional :class:`AsyncTransportPort` replacing the default
        :class:`AsyncGizmoTransport`.
    **kwargs:
        Forwarded to :class:`GizmifyConfig`.
    """

    def __init__(
        self,
        api_token: str,
        api_token_secret: str,
        *,
        transport: AsyncTransportPort | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = GizmifyConfig(
            api_token=api_token, api_token_secret=api_token_secret, **kwargs,
        )
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else AsyncGizmoTransport(self._config)
        self._paginator = AsyncPaginator(self._transport, self._config)
        self._surveys = AsyncSurveyAPI(self._paginator)
        self._campaigns = AsyncCampaignAPI(self._paginator)
        self._contacts = AsyncContactAPI(self._paginator)

    @property
    def config(self) -> GizmifyConfig:
        return self._config

    async def collect(
        self,
        endpoint: Endpoint,
        decode: Callable[[Any], T],
        kind: EnvelopeKind = EnvelopeKind.SINGLE_WRAPPED,
        *,
        get_all_pages: bool = False,
        max_pages: int | None = None,
    ) -> list[T]:
        return await self._paginator.collect(
            endpoint, decode, kind, get_all_pages=get_all_pages, max_pages=max_pages,
        )

    # -- surveys -------------------------------------------------------

    async def get_all_surveys(self, get_all_pages: bool = True) -> list[Survey]:
        return await self._surveys.list(get_all_pages)

    async def get_survey(self, survey_id: int) -> Survey | None:
        return await self._surveys.get(survey_id)

    async def create_survey(self, title: str) -> int:
        return await self._surveys.create(title)

    async def delete_survey(self, survey_id: int) -> bool:
        return await self._surveys.delete(survey_id)

    async def get_questions(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyQuestion]:
        return await self._surveys.questions(survey_id, get_all_pages)

    async def get_responses(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyResponse]:
        return await self._surveys.responses(survey_id, get_all_pages)

    # -- campaigns -----------------------------------------------------

    async def get_campaigns(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyCampaign]:
        return await self._campaigns.list(survey_id, get_all_pages)

    async def get_campaign(self, survey_id: int, campaign_id: int) -> SurveyCampaign | None:
        return await self._campaigns.get(survey_id, campaign_id)

    async def create_campaign(self, survey_id: int, name: str, master_campaign_id: int = 0) -> int:
        return await self._campaigns.create(survey_id, name, master_campaign_id)

    async def update_campaign(self, survey_id: int, campaign: SurveyCampaign) -> bool:
        return await self._campaigns.update(survey_id, campaign)

    async def delete_campaign(self, survey_id: int, campaign_id: int) -> bool:
        return await self._campaigns.delete(survey_id, campaign_id)

    async def get_email_messages(self, survey_id: int, campaign_id: int) -> list[EmailMessage]:
        return await self._campaigns.email_messages(survey_id, campaign_id)

    async def update_email_message(self, survey_id: int, campaign_id: int, message: EmailMessage) -> bool:
        return await self._campaigns.update_email_message(survey_id, campaign_id, message)

    # -- contacts ------------------------------------------------------

    async def create_contact(self, survey_id: int, campaign_id: int, contact: Contact) -> int:
        return await self._contacts.create(survey_id, campaign_id, contact)

    async def update_contact(self, survey_id: int, campaign_id: int, contact: Contact) -> bool:
        return await self._contacts.update(survey_id, campaign_id, contact)

    async def delete_contact(self, survey_id: int, campaign_id: int, contact_id: int) -> bool:
        return await self._contacts.delete(survey_id, campaign_id, contact_id)

    async def get_campaign_contacts(self, survey_id: int, campaign_id: int) -> list[Contact]:
        return await self._contacts.list(survey_id, campaign_id)

    async def update_contact_list(
        self,
        contact_list_id: int,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        organization: str | None = None,
        custom_fields: Mapping[str, str | None] | None = None,
    ) -> bool:
        return await self._contacts.update_contact_list(
            contact_list_id, email, first_name, last_name, organization, custom_fields,
        )

    # -- lifecycle -----------------------------------------------------

    async def close(self) -> None:
        if self._owns_transport:
            await self._transport.close()  # type: ignore[attr-defined]

    async def __aenter__(self) -> AsyncGizmifyClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
