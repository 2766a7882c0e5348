"""
Reconciliation engine tests.

Unit tests for the merge / metric rules and property-based tests for the
key coverage, no-duplication, summary and idempotence guarantees.
"""
from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis.strategies import composite, decimals, integers, lists, sampled_from

from service.reconciliation import (
    BudgetResultKey,
    BudgetRow,
    CampaignRef,
    ClientRef,
    ResultRow,
    TeamAllocation,
    ZERO,
    reconcile,
    safe_ratio,
    summarize,
    to_decimal,
)

CLIENT = ClientRef(id=1, name="Acme", business_division="第一事業部")


def _campaign(cid: int) -> CampaignRef:
    return CampaignRef(id=cid, name=f"Campaign {cid}", client=CLIENT)


def _key(cid=1, year=2024, month=1, platform="Google", op="運用代行", btype="月次予算"):
    return BudgetResultKey(cid, year, month, platform, op, btype)


def _budget(key, amount, id=1, target_kpi=None, target_value=None) -> BudgetRow:
    return BudgetRow(
        id=id,
        key=key,
        amount=Decimal(amount),
        campaign=_campaign(key.campaign_id),
        target_kpi=target_kpi,
        target_value=Decimal(target_value) if target_value is not None else None,
    )


def _result(key, spend, result, id=1) -> ResultRow:
    return ResultRow(
        id=id,
        key=key,
        actual_spend=Decimal(spend),
        actual_result=Decimal(result),
        campaign=_campaign(key.campaign_id),
    )


class TestReconcileScenarios:
    def test_matching_budget_and_result_merge_into_one_item(self):
        key = _key()
        items = reconcile([_budget(key, "100000")], [_result(key, "80000", "240000")])

        assert len(items) == 1
        item = items[0]
        assert item.key == key
        assert item.budget_amount == Decimal("100000")
        assert item.actual_spend == Decimal("80000")
        assert item.budget_utilization == Decimal("80")
        # (240000 - 80000) / 80000 * 100
        assert item.roi == Decimal("200")
        assert item.variance == Decimal("20000")

    def test_budget_only_defaults_result_side(self):
        items = reconcile([_budget(_key(), "50000")], [])

        item = items[0]
        assert item.actual_spend is None
        assert item.actual_result is None
        assert item.result_id is None
        assert item.budget_utilization == ZERO
        assert item.roi == ZERO
        assert item.variance == Decimal("50000")

    def test_result_only_defaults_budget_side(self):
        items = reconcile([], [_result(_key(), "80000", "240000", id=7)])

        item = items[0]
        assert item.budget_amount is None
        assert item.budget_id is None
        assert item.result_id == 7
        assert item.budget_utilization == ZERO
        assert item.variance == ZERO
        assert item.roi == Decimal("200")

    def test_only_matching_budget_is_merged(self):
        k1 = _key(platform="Google")
        k2 = _key(platform="Meta")
        items = reconcile(
            [_budget(k1, "100000", id=1), _budget(k2, "30000", id=2)],
            [_result(k1, "90000", "100000")],
        )

        assert len(items) == 2
        by_platform = {i.platform: i for i in items}
        assert by_platform["Google"].has_budget and by_platform["Google"].has_result
        assert by_platform["Meta"].has_budget and not by_platform["Meta"].has_result

    def test_empty_inputs(self):
        items = reconcile([], [])
        summary = summarize(items)

        assert items == []
        assert summary.total_budget == ZERO
        assert summary.total_spend == ZERO
        assert summary.total_result == ZERO
        assert summary.item_count == 0
        assert summary.budget_item_count == 0
        assert summary.result_item_count == 0
        assert summary.efficiency == ZERO
        assert summary.roi == ZERO

    def test_zero_budget_guards_utilization(self):
        key = _key()
        items = reconcile([_budget(key, "0")], [_result(key, "1000", "500")])

        item = items[0]
        assert item.budget_utilization == ZERO
        assert item.variance == ZERO
        assert item.roi == Decimal("-50")


class TestReconcileRules:
    def test_budget_type_is_part_of_key(self):
        monthly = _key(btype="月次予算")
        extra = _key(btype="追加予算")
        items = reconcile(
            [_budget(monthly, "100", id=1), _budget(extra, "200", id=2)],
            [_result(monthly, "50", "80")],
        )

        assert len(items) == 2
        merged = next(i for i in items if i.budget_type == "月次予算")
        assert merged.actual_spend == Decimal("50")

    def test_duplicate_rows_on_same_side_are_summed(self):
        key = _key()
        items = reconcile(
            [_budget(key, "100", id=1), _budget(key, "50", id=2)],
            [_result(key, "30", "60", id=3), _result(key, "20", "40", id=4)],
        )

        assert len(items) == 1
        item = items[0]
        assert item.budget_id == 1
        assert item.result_id == 3
        assert item.budget_amount == Decimal("150")
        assert item.actual_spend == Decimal("50")
        assert item.actual_result == Decimal("100")

    def test_achievement_rate_uses_target_value(self):
        key = _key()
        items = reconcile(
            [_budget(key, "100000", target_kpi="CV", target_value="50")],
            [_result(key, "80000", "40")],
        )

        assert items[0].target_kpi == "CV"
        assert items[0].achievement_rate == Decimal("80")

    def test_achievement_rate_without_target_is_zero(self):
        key = _key()
        items = reconcile([_budget(key, "100")], [_result(key, "10", "40")])
        assert items[0].achievement_rate == ZERO

    def test_sorted_newest_month_first_then_campaign_name(self):
        items = reconcile(
            [
                _budget(_key(cid=2, year=2024, month=1), "1", id=1),
                _budget(_key(cid=1, year=2024, month=3), "1", id=2),
                _budget(_key(cid=1, year=2023, month=12), "1", id=3),
                _budget(_key(cid=1, year=2024, month=1), "1", id=4),
            ],
            [],
        )

        assert [(i.year, i.month, i.campaign_id) for i in items] == [
            (2024, 3, 1),
            (2024, 1, 1),
            (2024, 1, 2),
            (2023, 12, 1),
        ]

    def test_line_item_id_joins_key_parts(self):
        items = reconcile([_budget(_key(), "1")], [])
        assert items[0].id == "1-2024-1-Google-運用代行-月次予算"

    def test_team_allocations_follow_budget_side(self):
        key = _key()
        sales = TeamAllocation(id=1, team_id=10, team_name="Sales", allocation=Decimal("60"), color="#FF0000")
        ops = TeamAllocation(id=2, team_id=11, team_name="Ops", allocation=Decimal("40"))
        budget = BudgetRow(
            id=1, key=key, amount=Decimal("1000"), campaign=_campaign(1),
            team_allocations=(sales, ops),
        )
        other = _key(platform="Meta")

        items = reconcile([budget], [_result(key, "500", "900"), _result(other, "1", "1", id=2)])
        by_key = {i.key: i for i in items}

        assert by_key[key].team_allocations == [sales, ops]
        assert by_key[other].team_allocations == []

    def test_duplicate_budget_rows_keep_every_allocation(self):
        key = _key()
        a = TeamAllocation(id=1, team_id=10, team_name="Sales", allocation=Decimal("100"))
        b = TeamAllocation(id=2, team_id=11, team_name="Ops", allocation=Decimal("50"))
        rows = [
            BudgetRow(id=1, key=key, amount=Decimal("10"), campaign=_campaign(1), team_allocations=(a,)),
            BudgetRow(id=2, key=key, amount=Decimal("20"), campaign=_campaign(1), team_allocations=(b,)),
        ]

        item = reconcile(rows, [])[0]

        assert item.budget_amount == Decimal("30")
        assert [t.team_id for t in item.team_allocations] == [10, 11]
        # 입력 행은 그대로
        assert rows[0].team_allocations == (a,)

    def test_summary_efficiency_and_roi(self):
        key = _key()
        summary = summarize(reconcile([_budget(key, "100000")], [_result(key, "80000", "240000")]))

        assert summary.total_budget == Decimal("100000")
        assert summary.efficiency == Decimal("3")
        assert summary.roi == Decimal("200")
        assert summary.budget_item_count == 1
        assert summary.result_item_count == 1


class TestNumericNormalization:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, ZERO),
            ("", ZERO),
            ("  ", ZERO),
            ("abc", ZERO),
            (float("nan"), ZERO),
            (float("inf"), ZERO),
            ("1.5", Decimal("1.5")),
            (3, Decimal("3")),
            (Decimal("2.25"), Decimal("2.25")),
        ],
    )
    def test_to_decimal(self, raw, expected):
        assert to_decimal(raw) == expected

    def test_to_decimal_custom_default(self):
        assert to_decimal(None, default=None) is None

    def test_safe_ratio_guards_zero_and_absent(self):
        assert safe_ratio(Decimal("10"), ZERO) == ZERO
        assert safe_ratio(Decimal("10"), None) == ZERO
        assert safe_ratio(None, Decimal("10")) == ZERO
        assert safe_ratio(Decimal("10"), Decimal("4")) == Decimal("2.5")


# ------------------------------------------------------------------
# property-based
# ------------------------------------------------------------------
def _money():
    return decimals(
        min_value=Decimal("0"),
        max_value=Decimal("10000000"),
        places=2,
        allow_nan=False,
        allow_infinity=False,
    )


@composite
def keys(draw):
    # 작은 도메인에서 뽑아 키 충돌이 자주 일어나게
    return BudgetResultKey(
        campaign_id=draw(integers(min_value=1, max_value=3)),
        year=draw(sampled_from([2023, 2024])),
        month=draw(integers(min_value=1, max_value=3)),
        platform=draw(sampled_from(["Google", "Meta"])),
        operation_type=draw(sampled_from(["運用代行", "インハウス"])),
        budget_type=draw(sampled_from(["月次予算", "追加予算"])),
    )


@composite
def budget_rows(draw):
    key = draw(keys())
    return BudgetRow(
        id=draw(integers(min_value=1, max_value=10_000)),
        key=key,
        amount=draw(_money()),
        campaign=_campaign(key.campaign_id),
    )


@composite
def result_rows(draw):
    key = draw(keys())
    return ResultRow(
        id=draw(integers(min_value=1, max_value=10_000)),
        key=key,
        actual_spend=draw(_money()),
        actual_result=draw(_money()),
        campaign=_campaign(key.campaign_id),
    )


class TestReconcileProperties:
    @given(lists(budget_rows(), max_size=20), lists(result_rows(), max_size=20))
    @settings(max_examples=100)
    def test_output_keys_equal_union_of_input_keys(self, budgets, results):
        items = reconcile(budgets, results)
        expected = {b.key for b in budgets} | {r.key for r in results}
        assert {i.key for i in items} == expected

    @given(lists(budget_rows(), max_size=20), lists(result_rows(), max_size=20))
    @settings(max_examples=100)
    def test_no_key_appears_twice(self, budgets, results):
        items = reconcile(budgets, results)
        assert len(items) == len({i.key for i in items})

    @given(lists(budget_rows(), max_size=20))
    @settings(max_examples=100)
    def test_budget_only_items_have_zero_result_metrics(self, budgets):
        for item in reconcile(budgets, []):
            assert item.actual_spend is None
            assert item.actual_result is None
            assert item.budget_utilization == ZERO
            assert item.roi == ZERO

    @given(lists(budget_rows(), max_size=20), lists(result_rows(), max_size=20))
    @settings(max_examples=100)
    def test_zero_or_absent_budget_never_divides(self, budgets, results):
        for item in reconcile(budgets, results):
            if not item.budget_amount:
                assert item.budget_utilization == ZERO
                assert item.variance == ZERO
            assert item.budget_utilization.is_finite()
            assert item.roi.is_finite()

    @given(lists(budget_rows(), max_size=20), lists(result_rows(), max_size=20))
    @settings(max_examples=100)
    def test_summary_totals_match_items_and_inputs(self, budgets, results):
        items = reconcile(budgets, results)
        summary = summarize(items)

        assert summary.total_budget == sum((i.budget_amount or ZERO for i in items), ZERO)
        assert summary.total_spend == sum((i.actual_spend or ZERO for i in items), ZERO)
        assert summary.total_result == sum((i.actual_result or ZERO for i in items), ZERO)
        assert summary.total_budget == sum((b.amount for b in budgets), ZERO)
        assert summary.total_spend == sum((r.actual_spend for r in results), ZERO)
        assert summary.item_count == len(items)

    @given(lists(budget_rows(), max_size=20), lists(result_rows(), max_size=20))
    @settings(max_examples=50)
    def test_reconcile_is_idempotent(self, budgets, results):
        assert reconcile(budgets, results) == reconcile(budgets, results)
