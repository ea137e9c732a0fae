"""
Shared fixtures for the compliance scan tests.

Report builders produce minimal CREDIT_RESPONSE payloads; StubCompletionClient
stands in for the completion service.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from credit_review.config import ScanSettings
from credit_review.services.errors import UpstreamQuotaExceeded
from credit_review.services.llm import CompletionRequest


NOW = datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)

AI_RESPONSE = (
    "- Metro 2 Violation: Date of First Delinquency not reported\n"
    "- FCRA Violation: Inaccurate balance under 15 U.S.C. 1681e(b)\n"
    "- FDCPA Violation: Collector misrepresented the amount owed"
)

AI_VIOLATIONS = [
    "Metro 2 Violation: Date of First Delinquency not reported",
    "FCRA Violation: Inaccurate balance under 15 U.S.C. 1681e(b)",
    "FDCPA Violation: Collector misrepresented the amount owed",
]


# =============================================================================
# REPORT BUILDERS
# =============================================================================

def make_account(
    liability_id: Optional[str] = None,
    creditor: str = "ACME BANK",
    derogatory: bool = True,
    **fields: Any,
) -> Dict[str, Any]:
    account: Dict[str, Any] = {
        "_CREDITOR": {"@_Name": creditor},
        "@_AccountStatusType": "Open",
        "@_CurrentBalance": "1250",
        "@_AccountType": "Revolving",
        "@_DerogatoryDataIndicator": "Y" if derogatory else "N",
    }
    if liability_id:
        account["@CreditLiabilityID"] = liability_id
    account.update(fields)
    return account


def make_inquiry(
    inquiry_date: Optional[str],
    identifier: Optional[str] = None,
    subscriber: str = "CAPITAL AUTO",
) -> Dict[str, Any]:
    inquiry: Dict[str, Any] = {
        "@_SubscriberName": subscriber,
        "@_InquiryPurposeType": "AutoLoan",
        "@_Type": "Individual",
    }
    if inquiry_date is not None:
        inquiry["@_Date"] = inquiry_date
    if identifier:
        inquiry["@_InquiryIdentifier"] = identifier
    return inquiry


def make_report(
    accounts: Optional[List[Dict[str, Any]]] = None,
    public_records: Optional[List[Dict[str, Any]]] = None,
    inquiries: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    response: Dict[str, Any] = {"CREDIT_LIABILITY": accounts or []}
    if public_records is not None:
        response["CREDIT_PUBLIC_RECORD"] = public_records
    if inquiries is not None:
        response["CREDIT_INQUIRY"] = inquiries
    return {"CREDIT_RESPONSE": response}


# =============================================================================
# COMPLETION CLIENT STUB
# =============================================================================

class StubCompletionClient:
    """
    Returns a fixed response for every request.

    Requests whose user content contains any marker in fail_on raise
    RuntimeError; quota_on markers raise UpstreamQuotaExceeded; empty_on
    markers return an empty string.
    """

    def __init__(
        self,
        response: Optional[str] = AI_RESPONSE,
        fail_on: tuple = (),
        quota_on: tuple = (),
        empty_on: tuple = (),
    ):
        self.response = response
        self.fail_on = fail_on
        self.quota_on = quota_on
        self.empty_on = empty_on
        self.requests: List[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> Optional[str]:
        self.requests.append(request)
        await asyncio.sleep(0)
        if any(marker in request.user_content for marker in self.quota_on):
            raise UpstreamQuotaExceeded("insufficient_quota")
        if any(marker in request.user_content for marker in self.fail_on):
            raise RuntimeError("connection reset by peer")
        if any(marker in request.user_content for marker in self.empty_on):
            return ""
        return self.response


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings():
    return ScanSettings(openai_api_key="sk-test")


@pytest.fixture
def offline_settings():
    return ScanSettings(openai_api_key=None)


@pytest.fixture
def stub_client():
    return StubCompletionClient()


@pytest.fixture
def negative_report():
    return make_report(accounts=[
        make_account("TRADE-A", creditor="ACME BANK"),
        make_account("TRADE-B", creditor="MIDLAND FUNDING", **{"@IsCollectionIndicator": "Y"}),
        make_account("TRADE-C", creditor="CITI CARDS", **{"@_PastDueAmount": "75"}),
    ])
