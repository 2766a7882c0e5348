import csv
import io
from decimal import Decimal

import pytest

from models.marketing.budget import Budget
from models.marketing.result import Result


@pytest.fixture()
def records(db, seed):
    db.add_all([
        Budget(
            campaign_id=seed["spring"], year=2024, month=1, platform="Google",
            operation_type="運用代行", budget_type="月次予算",
            amount=Decimal("100000"), target_kpi="CV", target_value=Decimal("300000"),
        ),
        Result(
            campaign_id=seed["spring"], year=2024, month=1, platform="Google",
            operation_type="運用代行", budget_type="月次予算",
            actual_spend=Decimal("80000"), actual_result=Decimal("240000"),
        ),
        # 예산만
        Budget(
            campaign_id=seed["spring"], year=2024, month=1, platform="Meta",
            operation_type="運用代行", budget_type="月次予算", amount=Decimal("50000"),
        ),
        # 실적만 (다른 클라이언트)
        Result(
            campaign_id=seed["launch"], year=2024, month=2, platform="Yahoo",
            operation_type="インハウス", budget_type="月次予算",
            actual_spend=Decimal("10000"), actual_result=Decimal("5000"),
        ),
    ])
    db.commit()
    return seed


def test_requires_authentication(api):
    res = api.get("/budget-results")
    assert res.status_code == 401


def test_invalid_token_is_rejected(api, users):
    res = api.get("/budget-results", headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401


def test_list_merges_budgets_and_results(api, member_headers, records):
    res = api.get("/budget-results", headers=member_headers)
    assert res.status_code == 200
    body = res.json()

    assert body["success"] is True
    assert len(body["data"]) == 3

    # 최신 월 먼저
    first = body["data"][0]
    assert (first["year"], first["month"]) == (2024, 2)
    assert first["budgetAmount"] is None
    assert first["actualSpend"] == 10000.0
    assert first["roi"] == -50.0
    assert first["campaign"]["client"]["name"] == "Beta"

    google = next(i for i in body["data"] if i["platform"] == "Google")
    assert google["budgetUtilization"] == 80.0
    assert google["roi"] == 200.0
    assert google["variance"] == 20000.0
    assert google["achievementRate"] == 80.0
    assert google["campaign"]["name"] == "Spring Sale"

    meta = next(i for i in body["data"] if i["platform"] == "Meta")
    assert meta["actualSpend"] is None
    assert meta["variance"] == 50000.0

    summary = body["summary"]
    assert summary["totalBudget"] == 150000.0
    assert summary["totalSpend"] == 90000.0
    assert summary["totalResult"] == 245000.0
    assert summary["itemCount"] == 3
    assert summary["budgetItemCount"] == 2
    assert summary["resultItemCount"] == 2


def test_filters_by_month_client_platform_and_department(api, member_headers, records):
    by_month = api.get("/budget-results?year=2024&month=1", headers=member_headers).json()
    assert {i["platform"] for i in by_month["data"]} == {"Google", "Meta"}

    by_client = api.get(f"/budget-results?client={records['beta']}", headers=member_headers).json()
    assert [i["platform"] for i in by_client["data"]] == ["Yahoo"]

    by_platform = api.get("/budget-results?platform=Meta", headers=member_headers).json()
    assert len(by_platform["data"]) == 1

    by_dept = api.get("/budget-results", params={"department": "第一事業部"}, headers=member_headers).json()
    assert {i["campaign"]["client"]["name"] for i in by_dept["data"]} == {"Acme"}

    everything = api.get("/budget-results?client=all&platform=all", headers=member_headers).json()
    assert len(everything["data"]) == 3


def test_empty_result_is_not_an_error(api, member_headers, records):
    res = api.get("/budget-results?year=2030", headers=member_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["data"] == []
    assert body["summary"]["itemCount"] == 0
    assert body["summary"]["totalBudget"] == 0.0


def test_invalid_filter_value(api, member_headers):
    res = api.get("/budget-results?month=13", headers=member_headers)
    assert res.status_code == 400


def test_csv_export(api, member_headers, records):
    res = api.get("/budget-results?format=csv&year=2024&month=1", headers=member_headers)
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "attachment" in res.headers["content-disposition"]

    rows = list(csv.DictReader(io.StringIO(res.text)))
    assert list(rows[0].keys()) == [
        "campaignId", "campaignName", "clientName", "year", "month", "platform",
        "operationType", "budgetType", "budgetAmount", "targetKpi", "targetValue",
        "actualSpend", "actualResult", "budgetUtilization", "roi", "variance",
    ]
    google = next(r for r in rows if r["platform"] == "Google")
    assert google["campaignName"] == "Spring Sale"
    assert google["clientName"] == "Acme"
    assert google["budgetAmount"] == "100000"
    assert google["budgetUtilization"] == "80.00"
    assert google["roi"] == "200.00"
    assert google["variance"] == "20000.00"

    meta = next(r for r in rows if r["platform"] == "Meta")
    assert meta["actualSpend"] == ""
    assert meta["targetKpi"] == ""


def test_monthly_overview(api, member_headers, records):
    res = api.get("/monthly-overview?month=2024-01", headers=member_headers)
    assert res.status_code == 200
    body = res.json()
    assert (body["year"], body["month"]) == (2024, 1)
    assert len(body["data"]) == 2
    assert body["summary"]["totalBudget"] == 150000.0


@pytest.mark.parametrize("value", ["2024", "2024-13", "abc"])
def test_monthly_overview_rejects_bad_month(api, member_headers, value):
    res = api.get(f"/monthly-overview?month={value}", headers=member_headers)
    assert res.status_code == 400


def test_create_budget_and_result_together(api, manager_headers, member_headers, seed):
    payload = {
        "campaignId": seed["spring"],
        "year": 2024,
        "month": 3,
        "platform": "Google",
        "operationType": "運用代行",
        "budgetAmount": 200000,
        "actualSpend": 150000,
        "actualResult": 300000,
    }
    res = api.post("/budget-results", json=payload, headers=manager_headers)
    assert res.status_code == 201
    created = res.json()
    assert created["budgetId"] is not None
    assert created["resultId"] is not None

    listed = api.get("/budget-results?year=2024&month=3", headers=member_headers).json()
    assert len(listed["data"]) == 1
    item = listed["data"][0]
    assert item["budgetType"] == "月次予算"
    assert item["budgetUtilization"] == 75.0
    assert item["roi"] == 100.0


def test_create_same_key_updates_instead_of_duplicating(api, manager_headers, member_headers, seed):
    base = {
        "campaignId": seed["spring"], "year": 2024, "month": 4,
        "platform": "Meta", "operationType": "運用代行",
    }
    api.post("/budget-results", json={**base, "budgetAmount": 1000}, headers=manager_headers)
    api.post("/budget-results", json={**base, "budgetAmount": 2500}, headers=manager_headers)

    listed = api.get("/budget-results?year=2024&month=4", headers=member_headers).json()
    assert len(listed["data"]) == 1
    assert listed["data"][0]["budgetAmount"] == 2500.0


def test_create_requires_a_value(api, manager_headers, seed):
    payload = {
        "campaignId": seed["spring"], "year": 2024, "month": 3,
        "platform": "Google", "operationType": "運用代行",
    }
    res = api.post("/budget-results", json=payload, headers=manager_headers)
    assert res.status_code == 422


def test_create_unknown_campaign(api, manager_headers, seed):
    payload = {
        "campaignId": 9999, "year": 2024, "month": 3,
        "platform": "Google", "operationType": "運用代行", "budgetAmount": 1,
    }
    res = api.post("/budget-results", json=payload, headers=manager_headers)
    assert res.status_code == 400


def test_member_cannot_write(api, member_headers, seed):
    payload = {
        "campaignId": seed["spring"], "year": 2024, "month": 3,
        "platform": "Google", "operationType": "運用代行", "budgetAmount": 1,
    }
    res = api.post("/budget-results", json=payload, headers=member_headers)
    assert res.status_code == 403


def test_store_failure_returns_generic_error(api, engine, member_headers, seed):
    Result.__table__.drop(engine)

    res = api.get("/budget-results", headers=member_headers)
    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "failed to load"}
