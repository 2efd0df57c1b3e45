"""Integration tests for the raw report to credit profile pipeline"""

import logging
from datetime import datetime, timezone

import pytest

from creditguard.config import settings
from creditguard.domain.models import (
    AccountStatus,
    AccountType,
    Bureau,
    CollectionStatus,
    InquiryType,
    PublicRecordStatus,
    PublicRecordType,
    Severity,
)
from creditguard.domain.profile import build_credit_profile

AS_OF = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.mark.integration
def test_equifax_profile_end_to_end(multi_bureau_report):
    """Test the Equifax view normalizes, aggregates and scores derogatory marks"""
    profile = build_credit_profile(multi_bureau_report, "EFX", as_of=AS_OF)

    assert profile.shape == "provider_views"
    assert profile.selection.resolved == Bureau.EQUIFAX
    assert profile.selection.is_fallback is False

    # revolving, mortgage, installment section order
    assert [a.id for a in profile.accounts] == ["trade_001", "trade_003", "trade_002"]
    assert [a.type for a in profile.accounts] == [AccountType.CREDIT_CARD, AccountType.MORTGAGE, AccountType.AUTO_LOAN]
    assert profile.accounts[1].status == AccountStatus.CLOSED

    derogatory = profile.derogatory_marks
    assert derogatory.total_count == 2  # 1 summary negative account + 1 lien
    assert derogatory.late_payments == 2
    assert derogatory.public_records == 1
    assert derogatory.collections == 0
    assert derogatory.charge_offs == 0
    assert derogatory.estimated_score_impact == 150
    assert derogatory.severity == Severity.MODERATE


@pytest.mark.integration
def test_equifax_account_details(multi_bureau_report):
    """Test reduction-mode buckets and re-derived totals"""
    profile = build_credit_profile(multi_bureau_report, "EFX", as_of=AS_OF)

    details = profile.account_details
    assert details.source == "accounts"
    assert details.revolving.open == 1
    assert details.revolving.total_balance == 1250
    assert details.revolving.credit_limit == 5000
    assert details.revolving.available == 3750
    assert details.revolving.debt_to_credit == 25
    assert details.revolving.payment == 35
    assert details.installment.total_balance == 8000
    assert details.installment.available == -8000
    assert details.installment.debt_to_credit == 0
    assert details.installment.payment == 410
    assert details.mortgage.open == 0

    totals = profile.account_totals
    assert totals.open == 2
    assert totals.total_balance == 9250
    assert totals.credit_limit == 5000
    assert totals.debt_to_credit == 185
    assert totals.payment == 445


@pytest.mark.integration
def test_equifax_overview_prefers_summary(multi_bureau_report):
    profile = build_credit_profile(multi_bureau_report, "EFX", as_of=AS_OF)

    overview = profile.overview
    assert overview.total_accounts == 3
    assert overview.open_accounts == 2
    assert overview.total_balance == 1250
    assert overview.total_credit_limit == 5000
    assert overview.utilization_rate == 0.25
    assert overview.average_account_age_months == 48


@pytest.mark.integration
def test_equifax_records(multi_bureau_report):
    profile = build_credit_profile(multi_bureau_report, "EFX", as_of=AS_OF)

    lien = profile.public_records[0]
    assert lien.type == PublicRecordType.TAX_LIEN
    assert lien.status == PublicRecordStatus.SATISFIED
    assert lien.amount == 2400
    assert lien.court == "COUNTY COURT"

    inquiry = profile.inquiries[0]
    assert inquiry.creditor_name == "CHASE CARD"
    assert inquiry.type == InquiryType.HARD

    collection = profile.collections[0]
    assert collection.creditor_name == "MIDLAND CREDIT"
    assert collection.status == CollectionStatus.OPEN
    assert collection.amount.amount == 540
    assert collection.amount.currency == "USD"


@pytest.mark.integration
def test_transunion_view_is_isolated(multi_bureau_report):
    """Test selecting TransUnion ignores Equifax records and summary"""
    profile = build_credit_profile(multi_bureau_report, "TU", as_of=AS_OF)

    assert [a.creditor_name for a in profile.accounts] == ["DISCOVER"]
    assert profile.accounts[0].credit_utilization == pytest.approx(30.0)
    assert profile.public_records == []
    assert profile.collections == []
    assert profile.selection.is_fallback is False
    assert profile.derogatory_marks.severity == Severity.NONE
    assert profile.overview.total_balance == 300
    assert profile.overview.utilization_rate == pytest.approx(0.3)


@pytest.mark.integration
def test_missing_bureau_falls_back_and_flags(multi_bureau_report):
    profile = build_credit_profile(multi_bureau_report, "XPN", as_of=AS_OF)

    assert profile.selection.is_fallback is True
    assert profile.selection.requested == Bureau.EXPERIAN
    assert profile.selection.resolved == Bureau.EQUIFAX
    assert len(profile.accounts) == 3


@pytest.mark.integration
def test_strict_isolation_yields_empty_profile(multi_bureau_report, monkeypatch):
    monkeypatch.setattr(settings, "strict_bureau_isolation", True)

    profile = build_credit_profile(multi_bureau_report, "XPN", as_of=AS_OF)

    assert profile.selection.view is None
    assert profile.accounts == []
    assert profile.account_details.source == "empty"
    assert profile.derogatory_marks.total_count == 0


@pytest.mark.integration
def test_all_bureaus_merged(multi_bureau_report):
    """Test no bureau merges every view and drops the per-bureau summary"""
    profile = build_credit_profile(multi_bureau_report, as_of=AS_OF)

    assert len(profile.accounts) == 4
    assert profile.selection.resolved is None
    assert profile.derogatory_marks.total_count == 2  # 1 flagged account + 1 lien
    assert profile.account_details.revolving.total_balance == 1550
    assert profile.account_details.revolving.credit_limit == 6000
    assert profile.overview.total_accounts == 4
    assert profile.overview.open_accounts == 3
    assert profile.overview.total_balance == 9550


@pytest.mark.integration
def test_explicit_summary_overrides_embedded(multi_bureau_report):
    profile = build_credit_profile(multi_bureau_report, "TU", summary={"totalNegativeAccounts": 4}, as_of=AS_OF)

    assert profile.derogatory_marks.total_count == 4
    assert profile.derogatory_marks.severity == Severity.MODERATE


@pytest.mark.integration
def test_legacy_report_shape(raw_auto_loan, equifax_summary):
    """Test a single-bureau legacy report with top-level sections"""
    report = {
        "accounts": [raw_auto_loan],
        "summary": equifax_summary,
        "publicRecords": [{"bankruptcyType": "CHAPTER_7", "dispositionStatus": "FILED", "dateFiled": "2020-02-02"}],
        "collections": [{"creditorName": "PORTFOLIO RECOVERY", "amount": 300, "status": "DISPUTED"}],
        "inquiries": [{"date": "2024-01-05", "name": "AMEX", "type": "SOFT"}],
    }

    profile = build_credit_profile(report, as_of=AS_OF)

    assert profile.shape == "legacy"
    assert profile.accounts[0].type == AccountType.AUTO_LOAN
    assert profile.public_records[0].type == PublicRecordType.BANKRUPTCY
    assert profile.public_records[0].status == PublicRecordStatus.FILED
    assert profile.collections[0].status == CollectionStatus.DISPUTED
    assert profile.inquiries[0].type == InquiryType.SOFT
    assert profile.derogatory_marks.total_count == 2  # summary negative + bankruptcy
    assert profile.derogatory_marks.severity == Severity.MODERATE


@pytest.mark.integration
def test_summary_only_report_uses_summary_mode(equifax_summary):
    profile = build_credit_profile({"summary": equifax_summary}, as_of=AS_OF)

    assert profile.accounts == []
    assert profile.account_details.source == "summary"
    assert profile.account_totals.total_balance == 9250
    assert profile.overview.total_accounts == 2


@pytest.mark.integration
@pytest.mark.parametrize("report", [None, "garbage", [], {"unexpected": 1}])
def test_unknown_shape_normalizes_to_empty_profile(report, caplog):
    with caplog.at_level(logging.WARNING):
        profile = build_credit_profile(report, "EFX", as_of=AS_OF)

    assert profile.shape == "unknown"
    assert profile.accounts == []
    assert profile.account_details.source == "empty"
    assert profile.derogatory_marks.severity == Severity.NONE
    assert profile.overview.total_accounts == 0
    assert "Unrecognized bureau payload shape" in caplog.text


@pytest.mark.integration
def test_profile_build_is_logged(multi_bureau_report, caplog):
    with caplog.at_level(logging.INFO):
        build_credit_profile(multi_bureau_report, "EFX", as_of=AS_OF)

    records = [r for r in caplog.records if r.getMessage() == "Credit profile normalized"]
    assert len(records) == 1
    assert records[0].payload_shape == "provider_views"
    assert records[0].bureau == "equifax"
    assert records[0].bureau_fallback is False
    assert records[0].account_count == 3


@pytest.mark.integration
@pytest.mark.parametrize("bureau", ["all", "ALL", " All "])
def test_all_keyword_merges_every_view(multi_bureau_report, bureau):
    """Test "all" takes the merge path instead of falling back to the first view"""
    profile = build_credit_profile(multi_bureau_report, bureau, as_of=AS_OF)

    assert len(profile.accounts) == 4
    assert profile.selection.is_fallback is False
    assert profile.selection.resolved is None
    assert profile.overview.total_balance == 9550


@pytest.mark.integration
def test_naive_as_of_is_taken_as_utc(multi_bureau_report):
    """Test a timezone-naive as_of gives the same profile as its UTC equivalent"""
    naive = build_credit_profile(multi_bureau_report, "TU", as_of=datetime(2024, 6, 1))
    aware = build_credit_profile(multi_bureau_report, "TU", as_of=AS_OF)

    assert naive.overview.average_account_age_months == aware.overview.average_account_age_months
    assert naive.overview.average_account_age_months > 0


@pytest.mark.integration
def test_overview_payment_and_derogatory_figures(multi_bureau_report):
    """Test report-level on-time percentage, late months and the derogatory card count"""
    profile = build_credit_profile(multi_bureau_report, "EFX", as_of=AS_OF)

    overview = profile.overview
    assert overview.on_time_payment_percentage == 67  # only CAPITAL ONE carries a history
    assert overview.late_payment_count == 1
    assert overview.collection_count == 1
    assert overview.derogatory_mark_count == 3  # derogatory total 2 + 1 collection


@pytest.mark.integration
def test_overview_without_histories_reports_zero(multi_bureau_report):
    profile = build_credit_profile(multi_bureau_report, "TU", as_of=AS_OF)

    assert profile.overview.on_time_payment_percentage == 0
    assert profile.overview.late_payment_count == 0
    assert profile.overview.collection_count == 0
    assert profile.overview.derogatory_mark_count == 0


@pytest.mark.integration
def test_personal_info_merged_across_views(multi_bureau_report):
    """Test the first subject wins and later views only fill missing fields"""
    efx, tu = multi_bureau_report["providerViews"]
    efx["summary"]["subject"] = {
        "currentName": {"firstName": "JANE", "lastName": "DOE"},
        "nationalIdentifier": "XXX-XX-1234",
        "currentAddress": {"line1": "1 MAIN ST", "line3": "AUSTIN", "line4": "TX", "line5": "78701"},
        "employmentHistory": [{"employerName": "ACME", "currentEmployer": True, "dateOfEmployment": "2020-06-01"}],
    }
    tu["summary"] = {
        "subject": {
            "currentName": {"firstName": "JANET", "lastName": "DOE"},
            "dateOfBirth": 0,
            "previousAddresses": [{"line1": "9 OLD RD", "line3": "DALLAS", "line4": "TX", "line5": "75001"}],
            "employmentHistory": [{"employerName": "GLOBEX", "currentEmployer": True}],
        }
    }

    merged = build_credit_profile(multi_bureau_report, as_of=AS_OF).personal_info

    assert merged.full_name == "JANE DOE"
    assert merged.ssn == "XXX-XX-1234"
    assert merged.address.city == "AUSTIN"
    assert merged.date_of_birth == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert [a.city for a in merged.previous_addresses] == ["DALLAS"]
    assert merged.employment.employer == "ACME"
    assert merged.employment.years_employed == 4
    assert merged.previous_employments == ()

    transunion = build_credit_profile(multi_bureau_report, "TU", as_of=AS_OF).personal_info
    assert transunion.full_name == "JANET DOE"
    assert transunion.ssn == "***-**-****"
    assert transunion.employment.employer == "GLOBEX"


@pytest.mark.integration
def test_personal_info_falls_back_to_top_level_object(multi_bureau_report):
    multi_bureau_report["personalInfo"] = {"fullName": "JOHN ROE", "ssn": "XXX-XX-9999"}

    profile = build_credit_profile(multi_bureau_report, "EFX", as_of=AS_OF)

    assert profile.personal_info.full_name == "JOHN ROE"
    assert profile.personal_info.ssn == "XXX-XX-9999"


@pytest.mark.integration
def test_legacy_report_personal_info(raw_auto_loan):
    report = {
        "accounts": [raw_auto_loan],
        "personalInfo": {
            "name": {"firstName": "ANA", "middleName": "M", "lastName": "LOPEZ"},
            "addresses": [{"street": "5 ELM ST", "city": "RENO", "state": "NV", "zipCode": "89501"}],
            "employment": {"employer": "INITECH", "title": "ANALYST", "yearsEmployed": 3},
        },
    }

    profile = build_credit_profile(report, as_of=AS_OF)

    info = profile.personal_info
    assert info.full_name == "ANA M LOPEZ"
    assert info.address.street == "5 ELM ST"
    assert info.employment.position == "ANALYST"
    assert info.employment.years_employed == 3
