"""Synchronous SurveyGizmo client.

:class:`GizmifyClient` wires a transport, a retry policy and the pagination
engine together and exposes one method per logical API call.

Usage::

    from gizmify import GizmifyClient

    with GizmifyClient(api_token="...", api_token_secret="...", batch_size=500) as client:
        for response in client.get_responses(survey_id=1234):
            print(response.id, response.all_questions)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from gizmify.config import GizmifyConfig
from gizmify.gizmo_api.campaigns import CampaignAPI
from gizmify.gizmo_api.contacts import ContactAPI
from gizmify.gizmo_api.envelope import EnvelopeKind
from gizmify.gizmo_api.pagination import Paginator
from gizmify.gizmo_api.query import Endpoint
from gizmify.gizmo_api.surveys import SurveyAPI
from gizmify.gizmo_api.transport import GizmoTransport, TransportPort
from gizmify.models import (
    Contact,
    EmailMessage,
    Survey,
    SurveyCampaign,
    SurveyQuestion,
    SurveyResponse,
)

T = TypeVar("T")


class GizmifyClient:
    """Synchronous SurveyGizmo client.

    Parameters
    ----------
    api_token:
        SurveyGizmo API token.
    api_token_secret:
        SurveyGizmo API token secret.
    transport:
        Optional :class:`TransportPort` to use instead of the default
        httpx-backed :class:`GizmoTransport`.
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`GizmifyConfig`.
    """

    def __init__(
        self,
        api_token: str,
        api_token_secret: str,
        *,
        transport: TransportPort | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = GizmifyConfig(
            api_token=api_token, api_token_secret=api_token_secret, **kwargs,
        )
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else GizmoTransport(self._config)
        self._paginator = Paginator(self._transport, self._config)
        self._surveys = SurveyAPI(self._paginator)
        self._campaigns = CampaignAPI(self._paginator)
        self._contacts = ContactAPI(self._paginator)

    @property
    def config(self) -> GizmifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Generic access
    # ------------------------------------------------------------------

    def collect(
        self,
        endpoint: Endpoint,
        decode: Callable[[Any], T],
        kind: EnvelopeKind = EnvelopeKind.SINGLE_WRAPPED,
        *,
        get_all_pages: bool = False,
        max_pages: int | None = None,
    ) -> list[T]:
        """Run an arbitrary call through the pagination engine.

        See :meth:`Paginator.collect`.
        """
        return self._paginator.collect(
            endpoint, decode, kind, get_all_pages=get_all_pages, max_pages=max_pages,
        )

    # ------------------------------------------------------------------
    # Surveys, questions, responses
    # ------------------------------------------------------------------

    def get_all_surveys(self, get_all_pages: bool = True) -> list[Survey]:
        return self._surveys.list(get_all_pages)

    def get_survey(self, survey_id: int) -> Survey | None:
        return self._surveys.get(survey_id)

    def create_survey(self, title: str) -> int:
        return self._surveys.create(title)

    def delete_survey(self, survey_id: int) -> bool:
        return self._surveys.delete(survey_id)

    def get_questions(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyQuestion]:
        return self._surveys.questions(survey_id, get_all_pages)

    def get_responses(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyResponse]:
        return self._surveys.responses(survey_id, get_all_pages)

    # ------------------------------------------------------------------
    # Campaigns and email messages
    # ------------------------------------------------------------------

    def get_campaigns(self, survey_id: int, get_all_pages: bool = True) -> list[SurveyCampaign]:
        return self._campaigns.list(survey_id, get_all_pages)

    def get_campaign(self, survey_id: int, campaign_id: int) -> SurveyCampaign | None:
        return self._campaigns.get(survey_id, campaign_id)

    def create_campaign(self, survey_id: int, name: str, master_campaign_id: int = 0) -> int:
        return self._campaigns.create(survey_id, name, master_campaign_id)

    def update_campaign(self, survey_id: int, campaign: SurveyCampaign) -> bool:
        return self._campaigns.update(survey_id, campaign)

    def delete_campaign(self, survey_id: int, campaign_id: int) -> bool:
        return self._campaigns.delete(survey_id, campaign_id)

    def get_email_messages(self, survey_id: int, campaign_id: int) -> list[EmailMessage]:
        return self._campaigns.email_messages(survey_id, campaign_id)

    def update_email_message(self, survey_id: int, campaign_id: int, message: EmailMessage) -> bool:
        return self._campaigns.update_email_message(survey_id, campaign_id, message)

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------

    def create_contact(self, survey_id: int, campaign_id: int, contact: Contact) -> int:
        return self._contacts.create(survey_id, campaign_id, contact)

    def update_contact(self, survey_id: int, campaign_id: int, contact: Contact) -> bool:
        return self._contacts.update(survey_id, campaign_id, contact)

    def delete_contact(self, survey_id: int, campaign_id: int, contact_id: int) -> bool:
        return self._contacts.delete(survey_id, campaign_id, contact_id)

    def get_campaign_contacts(self, survey_id: int, campaign_id: int) -> list[Contact]:
        return self._contacts.list(survey_id, campaign_id)

    def update_contact_list(
        self,
        contact_list_id: int,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        organization: str | None = None,
        custom_fields: Mapping[str, str | None] | None = None,
    ) -> bool:
        return self._contacts.update_contact_list(
            contact_list_id, email, first_name, last_name, organization, custom_fields,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            self._transport.close()  # type: ignore[attr-defined]

    def __enter__(self) -> GizmifyClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
