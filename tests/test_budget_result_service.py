from decimal import Decimal

import pytest

from schemas.marketing.budget_result import BudgetResultCreate
from service.budget_result import (
    CSV_COLUMNS,
    BudgetResultFilter,
    create_budget_result,
    fetch_rows,
    line_items_to_csv,
    parse_year_month,
)


def test_filter_drops_all_and_blank_values():
    f = BudgetResultFilter(year=2024, month=None, platform="all", operation_type=" ", department="営業部")
    assert f.as_kwargs() == {"year": 2024, "department": "営業部"}


@pytest.mark.parametrize("value, expected", [("2024-01", (2024, 1)), (" 2023-12 ", (2023, 12))])
def test_parse_year_month(value, expected):
    assert parse_year_month(value) == expected


def test_empty_csv_has_header_only():
    text = line_items_to_csv([])
    assert text.strip() == ",".join(CSV_COLUMNS)


def test_create_then_fetch_normalized_rows(db, seed):
    payload = BudgetResultCreate(
        campaign_id=seed["spring"], year=2024, month=6, platform="Google",
        operation_type="運用代行", budget_amount=Decimal("1000"), actual_result=Decimal("12"),
    )
    budget_id, result_id = create_budget_result(db, payload)
    assert budget_id is not None and result_id is not None

    budgets, results = fetch_rows(db, BudgetResultFilter(year=2024, month=6))
    assert len(budgets) == 1 and len(results) == 1
    assert budgets[0].amount == Decimal("1000")
    assert budgets[0].campaign.client.name == "Acme"
    # 지출 없이 성과만 등록하면 지출은 0
    assert results[0].actual_spend == Decimal("0")
    assert results[0].key == budgets[0].key


def test_create_unknown_campaign_raises(db, seed):
    payload = BudgetResultCreate(
        campaign_id=9999, year=2024, month=6, platform="Google",
        operation_type="運用代行", budget_amount=Decimal("1"),
    )
    with pytest.raises(LookupError):
        create_budget_result(db, payload)
