"""Contact and contact-list API wrappers.

Provides :class:`ContactAPI` (sync) and :class:`AsyncContactAPI` (async).
Contact fields are rendered from the static
:data:`~gizmify.models.CONTACT_FIELDS` map: required fields are always sent,
optional ones only when non-empty.
"""

from __future__ import annotations

from collections.abc import Mapping

from gizmify.models import CONTACT_FIELDS, Contact, Result, results_ok

from .envelope import EnvelopeKind
from .pagination import AsyncPaginator, Paginator
from .query import Endpoint, QueryParam


def contact_params(contact: Contact) -> tuple[QueryParam, ...]:
    """Render *contact* as ordered query parameters (``id`` excluded)."""
    return tuple(
        QueryParam(f.query_name, getattr(contact, f.attr), f.required)
        for f in CONTACT_FIELDS
    )


def _contacts_path(survey_id: int, campaign_id: int) -> str:
    return f"survey/{survey_id}/surveycampaign/{campaign_id}/contact"


def save_endpoint(survey_id: int, campaign_id: int, contact: Contact, is_new: bool = False) -> Endpoint:
    """``PUT`` a new contact, or ``POST`` changes to ``contact.id``."""
    contact_id = "" if is_new else str(contact.id)
    return Endpoint(
        f"{_contacts_path(survey_id, campaign_id)}/{contact_id}",
        contact_params(contact),
        method="PUT" if is_new else "POST",
    )


def contact_list_endpoint(
    contact_list_id: int,
    email: str,
    first_name: str | None = None,
    last_name: str | None = None,
    organization: str | None = None,
    custom_fields: Mapping[str, str | None] | None = None,
) -> Endpoint:
    params = [
        QueryParam("semailaddress", email or "", True),
        QueryParam("sfirstname", first_name),
        QueryParam("slastname", last_name),
        QueryParam("sorganization", organization),
    ]
    for key, value in (custom_fields or {}).items():
        params.append(QueryParam(f"custom[{key}]", value))
    return Endpoint(f"contactlist/{contact_list_id}", tuple(params), method="POST")


def _created_id(results: list[Result]) -> int:
    if not results_ok(results):
        return -1
    return results[0].id


class ContactAPI:
    """Synchronous wrapper for campaign contacts and contact lists.

    Parameters
    ----------
    paginator:
        A configured :class:`Paginator`.
    """

    def __init__(self, paginator: Paginator) -> None:
        self._pages = paginator

    def create(self, survey_id: int, campaign_id: int, contact: Contact) -> int:
        """Add *contact* to a campaign.

        Returns
        -------
        int
            The new contact id, or ``-1`` if the API reported failure.
        """
        results = self._pages.collect(
            save_endpoint(survey_id, campaign_id, contact, is_new=True),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return _created_id(results)

    def update(self, survey_id: int, campaign_id: int, contact: Contact) -> bool:
        results = self._pages.collect(
            save_endpoint(survey_id, campaign_id, contact),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    def delete(self, survey_id: int, campaign_id: int, contact_id: int) -> bool:
        results = self._pages.collect(
            Endpoint(f"{_contacts_path(survey_id, campaign_id)}/{contact_id}", method="DELETE"),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    def list(self, survey_id: int, campaign_id: int) -> list[Contact]:
        """Every contact of a campaign, across all pages."""
        return self._pages.collect(
            Endpoint(_contacts_path(survey_id, campaign_id)), Contact.from_dict,
            EnvelopeKind.PAGED_LIST, get_all_pages=True,
        )

    def update_contact_list(
        self,
        contact_list_id: int,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        organization: str | None = None,
        custom_fields: Mapping[str, str | None] | None = None,
    ) -> bool:
        """Add or update a member of a contact list.

        ``None`` entries in *custom_fields* are not sent.
        """
        endpoint = contact_list_endpoint(
            contact_list_id, email, first_name, last_name, organization, custom_fields,
        )
        results = self._pages.collect(endpoint, Result.from_dict, EnvelopeKind.SINGLE_OBJECT)
        return results_ok(results)


class AsyncContactAPI:
    """Asynchronous wrapper for campaign contacts and contact lists.

    See :class:`ContactAPI` for documentation.
    """

    def __init__(self, paginator: AsyncPaginator) -> None:
        self._pages = paginator

    async def create(self, survey_id: int, campaign_id: int, contact: Contact) -> int:
        results = await self._pages.collect(
            save_endpoint(survey_id, campaign_id, contact, is_new=True),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return _created_id(results)

    async def update(self, survey_id: int, campaign_id: int, contact: Contact) -> bool:
        results = await self._pages.collect(
            save_endpoint(survey_id, campaign_id, contact),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    async def delete(self, survey_id: int, campaign_id: int, contact_id: int) -> bool:
        results = await self._pages.collect(
            Endpoint(f"{_contacts_path(survey_id, campaign_id)}/{contact_id}", method="DELETE"),
            Result.from_dict, EnvelopeKind.SINGLE_OBJECT,
        )
        return results_ok(results)

    async def list(self, survey_id: int, campaign_id: int) -> list[Contact]:
        return await self._pages.collect(
            Endpoint(_contacts_path(survey_id, campaign_id)), Contact.from_dict,
            EnvelopeKind.PAGED_LIST, get_all_pages=True,
        )

    async def update_contact_list(
        self,
        contact_list_id: int,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        organization: str | None = None,
        custom_fields: Mapping[str, str | None] | None = None,
    ) -> bool:
        endpoint = contact_list_endpoint(
            contact_list_id, email, first_name, last_name, organization, custom_fields,
        )
        results = await self._pages.collect(endpoint, Result.from_dict, EnvelopeKind.SINGLE_OBJECT)
        return results_ok(results)
