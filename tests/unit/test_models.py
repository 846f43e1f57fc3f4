"""Tests for the entity records in gizmify/models.py."""

from __future__ import annotations

from datetime import datetime

import pytest

from gizmify.models import (
    CONTACT_FIELDS,
    Contact,
    EmailMessage,
    QuestionOption,
    Result,
    Survey,
    SurveyCampaign,
    SurveyQuestion,
    SurveyResponse,
    results_ok,
)


class TestSurvey:
    def test_from_dict(self):
        survey = Survey.from_dict({
            "id": "42",
            "_subtype": "Standard Survey",
            "title": "Feedback",
            "status": "Launched",
            "links": {"default": "https://example.test/s3/42"},
        })
        assert survey.id == 42
        assert survey.type == "Standard Survey"
        assert survey.links["default"].endswith("/42")

    def test_missing_id_raises_key_error(self):
        with pytest.raises(KeyError):
            Survey.from_dict({"title": "x"})


class TestSurveyQuestion:
    def test_from_dict(self):
        q = SurveyQuestion.from_dict({
            "id": 3,
            "_type": "SurveyQuestion",
            "type": "CHECKBOX",
            "base_type": "Question",
            "title": "Pick some",
            "shortname": "pick",
            "properties": {"required": "true", "option_sort": False},
            "options": [{"id": 10001, "title": {"English": "One"}}, None],
        })
        assert q.type == "CHECKBOX"
        assert q.base_type == "Question"
        assert q.title == {"English": "Pick some"}
        assert q.properties.required is True
        assert q.options == [QuestionOption(id=10001, title={"English": "One"})]

    def test_defaults(self):
        q = SurveyQuestion.from_dict({"id": 1})
        assert q.options == []
        assert q.answer_id is None


class TestSurveyResponse:
    def test_answers_folded_by_question(self):
        r = SurveyResponse.from_dict({
            "id": "17",
            "status": "Complete",
            "datesubmitted": "2016-03-04 10:11:12 EST",
            "[question(2)]": "Yes",
            "[question(5), option(10021)]": "Red",
            "[question(5), option(10022)]": "Blue",
            "[question(6)]": "",
            "[question(7)]": None,
            '[url("source")]': "mail",
            '[variable("STANDARD_IP")]': "10.0.0.1",
        })
        assert r.all_questions == {2: "Yes", 5: "Red,Blue"}
        assert r.urls == {"source": "mail"}
        assert r.variables == {"STANDARD_IP": "10.0.0.1"}
        assert r.date_submitted == datetime(2016, 3, 4, 10, 11, 12)

    def test_geodata_kept_apart_from_variables(self):
        r = SurveyResponse.from_dict({
            "id": "18",
            '[geodata("city")]': "Denver",
            '[geodata("country")]': "United States",
            '[geodata("latitude")]': "",
            '[variable("STANDARD_GEOCITY")]': "Denver",
        })
        assert r.geodata == {"city": "Denver", "country": "United States"}
        assert r.variables == {"STANDARD_GEOCITY": "Denver"}
        assert r.all_questions == {}

    @pytest.mark.parametrize("stamp", [
        "2016-03-04T10:11:12",
        "2016-03-04T10:11:12Z",
        "2016-03-04T10:11:12-05:00",
    ])
    def test_iso_timestamp_accepted(self, stamp):
        r = SurveyResponse.from_dict({"id": "1", "datesubmitted": stamp})
        assert r.date_submitted == datetime(2016, 3, 4, 10, 11, 12)

    def test_add_question_appends(self):
        r = SurveyResponse(id="1")
        r.add_question(4, "a")
        r.add_question(4, "b")
        assert r.all_questions[4] == "a,b"

    def test_bad_timestamp_raises_value_error(self):
        with pytest.raises(ValueError):
            SurveyResponse.from_dict({"id": "1", "datesubmitted": "yesterday"})


class TestCampaignAndMessage:
    def test_campaign(self):
        c = SurveyCampaign.from_dict({"id": 9, "name": "Wave", "_subtype": "email", "datecreated": "2016-01-01"})
        assert c.type == "email"
        assert c.date_created == "2016-01-01"

    def test_email_message_sender(self):
        m = EmailMessage.from_dict({"id": 2, "messagetype": "invite", "from": {"name": "Ann", "email": "a@b.c"}})
        assert (m.from_name, m.from_email) == ("Ann", "a@b.c")
        assert m.message_type == "invite"

    def test_email_message_without_sender(self):
        m = EmailMessage.from_dict({"id": 2})
        assert m.from_name is None


class TestContact:
    def test_from_dict_maps_query_names(self):
        c = Contact.from_dict({"id": "4", "semailaddress": "a@b.c", "scustomfield10": "z"})
        assert c.id == 4
        assert c.email == "a@b.c"
        assert c.custom_field10 == "z"

    def test_field_map_covers_every_attribute(self):
        attrs = {f.attr for f in CONTACT_FIELDS}
        declared = set(Contact.__dataclass_fields__) - {"id"}
        assert attrs == declared

    def test_only_identity_fields_required(self):
        required = [f.query_name for f in CONTACT_FIELDS if f.required]
        assert required == ["semailaddress", "sfirstname", "slastname", "sorganization"]


class TestResult:
    def test_top_level_id(self):
        assert Result.from_dict({"result_ok": True, "id": "12"}) == Result(True, 12)

    def test_nested_id(self):
        assert Result.from_dict({"result_ok": "true", "data": {"id": 5}}).id == 5

    def test_no_id(self):
        assert Result.from_dict({"result_ok": False}) == Result(False, 0)

    def test_results_ok(self):
        assert results_ok([Result(True)]) is True
        assert results_ok([Result(False)]) is False
        assert results_ok([]) is False
