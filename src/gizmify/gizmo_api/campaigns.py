"""Campaign and email-message API wrappers.

Provides :class:`CampaignAPI` (sync) and :class:`AsyncCampaignAPI` (async)
around ``survey/{id}/surveycampaign`` and its ``emailmessage`` children.
"""

from __future__ import annotations

from gizmify.errors import GizmifyApiError
from gizmify.models import EmailMessage, Result, SurveyCampaign, results_ok

from .envelope import EnvelopeKind
from .pagination import AsyncPaginator, Paginator
from .query import Endpoint, QueryParam


def _campaigns_path(survey_id: int) -> str:
    return f"survey/{survey_id}/surveycampaign"


def create_endpoint(survey_id: int, name: str | None, master_campaign_id: int = 0) -> Endpoint:
    """``PUT`` a new email campaign, or ``POST`` a copy of a master one."""
    if master_campaign_id > 0:
        return Endpoint(
            f"{_campaigns_path(survey_id)}/{master_campaign_id}",
            (QueryParam("name", name or "", True), QueryParam("copy", "true")),
            method="POST",
        )
    return Endpoint(
        _campaigns_path(survey_id),
        (QueryParam("type", "email"), QueryParam("name", name or "", True)),
        method="PUT",
    )


def update_endpoint(survey_id: int, campaign: SurveyCampaign) -> Endpoint:
    return Endpoint(
        f"{_campaigns_path(survey_id)}/{campaign.id}",
        (QueryParam("name", campaign.name), QueryParam("status", campaign.status)),
        method="POST",
    )


def update_email_message_endpoint(survey_id: int, campaign_id: int, message: EmailMessage) -> Endpoint:
    return Endpoint(
        f"{_campaigns_path(survey_id)}/{campaign_id}/emailmessage/{message.id}",
        (QueryParam("from[name]", message.from_name), QueryParam("from[email]", message.from_email)),
        method="POST",
    )


class CampaignAPI:
    """Synchronous wrapper for survey campaigns.

    Parameters
    ----------
    paginator:
        A configured :class:`Paginator`.
    """

    def __init__(self, paginator: Paginator) -> None:
        self._pages = paginator

    def list(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyCampaign]:
        return self._pages.collect(
            Endpoint(_campaigns_path(survey_id)), SurveyCampaign.from_dict,
            EnvelopeKind.PAGED_LIST, get_all_pages=get_all_pages,
        )

    def get(self, survey_id: int, campaign_id: int) -> SurveyCampaign | None:
        """Fetch one campaign; ``None`` when the API reports no such campaign."""
        try:
            campaigns = self._pages.collect(
                Endpoint(f"{_campaigns_path(survey_id)}/{campaign_id}"), SurveyCampaign.from_dict,
            )
        except GizmifyApiError:
            return None
        return campaigns[0] if campaigns else None

    def create(self, survey_id: int, name: str, master_campaign_id: int = 0) -> int:
        """Create an email campaign.

        With *master_campaign_id* > 0 the master campaign is copied under
        the new *name* instead.

        Returns
        -------
        int
            The new campaign's id, or ``0`` if the API returned none.
        """
        try:
            campaigns = self._pages.collect(
                create_endpoint(survey_id, name, master_campaign_id), SurveyCampaign.from_dict,
            )
        except GizmifyApiError:
            return 0
        return campaigns[0].id if campaigns else 0

    def update(self, survey_id: int, campaign: SurveyCampaign) -> bool:
        """Push *campaign*'s ``name`` and ``status``; empty values are left alone."""
        results = self._pages.collect(
            update_endpoint(survey_id, campaign), Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    def delete(self, survey_id: int, campaign_id: int) -> bool:
        results = self._pages.collect(
            Endpoint(f"{_campaigns_path(survey_id)}/{campaign_id}", method="DELETE"),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    def email_messages(self, survey_id: int, campaign_id: int) -> list[EmailMessage]:
        return self._pages.collect(
            Endpoint(f"{_campaigns_path(survey_id)}/{campaign_id}/emailmessage"),
            EmailMessage.from_dict, EnvelopeKind.PAGED_LIST, get_all_pages=True,
        )

    def update_email_message(self, survey_id: int, campaign_id: int, message: EmailMessage) -> bool:
        """Update the sender (``from[name]`` / ``from[email]``) of a message."""
        results = self._pages.collect(
            update_email_message_endpoint(survey_id, campaign_id, message),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)


class AsyncCampaignAPI:
    """Asynchronous wrapper for survey campaigns.

    See :class:`CampaignAPI` for documentation.
    """

    def __init__(self, paginator: AsyncPaginator) -> None:
        self._pages = paginator

    async def list(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyCampaign]:
        return await self._pages.collect(
            Endpoint(_campaigns_path(survey_id)), SurveyCampaign.from_dict,
            EnvelopeKind.PAGED_LIST, get_all_pages=get_all_pages,
        )

    async def get(self, survey_id: int, campaign_id: int) -> SurveyCampaign | None:
        try:
            campaigns = await self._pages.collect(
                Endpoint(f"{_campaigns_path(survey_id)}/{campaign_id}"), SurveyCampaign.from_dict,
            )
        except GizmifyApiError:
            return None
        return campaigns[0] if campaigns else None

    async def create(self, survey_id: int, name: str, master_campaign_id: int = 0) -> int:
        try:
            campaigns = await self._pages.collect(
                create_endpoint(survey_id, name, master_campaign_id), SurveyCampaign.from_dict,
            )
        except GizmifyApiError:
            return 0
        return campaigns[0].id if campaigns else 0

    async def update(self, survey_id: int, campaign: SurveyCampaign) -> bool:
        results = await self._pages.collect(
            update_endpoint(survey_id, campaign), Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    async def delete(self, survey_id: int, campaign_id: int) -> bool:
        results = await self._pages.collect(
            Endpoint(f"{_campaigns_path(survey_id)}/{campaign_id}", method="DELETE"),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    async def email_messages(self, survey_id: int, campaign_id: int) -> list[EmailMessage]:
        return await self._pages.collect(
            Endpoint(f"{_campaigns_path(survey_id)}/{campaign_id}/emailmessage"),
            EmailMessage.from_dict, EnvelopeKind.PAGED_LIST, get_all_pages=True,
        )

    async def update_email_message(self, survey_id: int, campaign_id: int, message: EmailMessage) -> bool:
        results = await self._pages.collect(
            update_email_message_endpoint(survey_id, campaign_id, message),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)
