"""
Tests for dispute reason/instruction templates and auto-fill.
"""
import pytest
from fastapi.testclient import TestClient

from credit_review.main import app
from credit_review.models import ItemType
from credit_review.services.disputes import TEMPLATES, autofill_dispute, get_template


class TestTemplates:

    def test_every_item_type_has_a_template(self):
        assert set(TEMPLATES) == set(ItemType)

    @pytest.mark.parametrize("item_type,reason,instruction", [
        (ItemType.ACCOUNT,
         "Account information is inaccurate",
         "Verify and correct all account details"),
        (ItemType.PUBLIC_RECORD,
         "This record has incorrect information",
         "Verify the accuracy of this record"),
        (ItemType.INQUIRY,
         "Inquiry not authorized by me",
         "Please remove this unauthorized inquiry immediately"),
    ])
    def test_defaults(self, item_type, reason, instruction):
        template = get_template(item_type)
        assert template.default_reason == reason
        assert template.default_instruction == instruction
        assert reason in template.reasons
        assert instruction in template.instructions


class TestAutofill:

    def test_no_violations_uses_defaults(self):
        text = autofill_dispute(ItemType.INQUIRY, [])
        assert text.reason == "Inquiry not authorized by me"
        assert text.instruction == "Please remove this unauthorized inquiry immediately"

    def test_single_violation_fills_both_fields(self):
        text = autofill_dispute(ItemType.ACCOUNT, ["FCRA Violation: balance wrong"])
        assert text.reason == "FCRA Violation: balance wrong"
        assert text.instruction == "FCRA Violation: balance wrong"

    def test_several_violations_use_all(self):
        text = autofill_dispute(ItemType.ACCOUNT, ["a", "b", "c"])
        assert text.reason == "Use All 3"
        assert text.instruction == "Use All 3"

    def test_blank_entries_ignored(self):
        text = autofill_dispute(ItemType.ACCOUNT, ["  ", "Metro 2 Violation: x"])
        assert text.reason == "Metro 2 Violation: x"


class TestDisputeTemplateEndpoints:

    @pytest.fixture
    def api(self):
        return TestClient(app)

    def test_get_template(self, api):
        response = api.get("/api/dispute-templates/public_record")
        assert response.status_code == 200
        body = response.json()
        assert body["item_type"] == "public_record"
        assert body["default_reason"] == "This record has incorrect information"
        assert len(body["reasons"]) == 7

    def test_unknown_item_type(self, api):
        assert api.get("/api/dispute-templates/mortgage").status_code == 404

    def test_autofill(self, api):
        response = api.post(
            "/api/dispute-templates/autofill",
            json={"item_type": "account", "violations": ["x", "y"]},
        )
        assert response.status_code == 200
        assert response.json() == {"reason": "Use All 2", "instruction": "Use All 2"}

    def test_autofill_defaults(self, api):
        response = api.post("/api/dispute-templates/autofill", json={"item_type": "inquiry"})
        assert response.json()["reason"] == "Inquiry not authorized by me"
