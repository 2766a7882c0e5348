# app/endpoints/marketing/budget_results.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from core.deps import require_manager, require_member
from database.session import get_db
from schemas.enums import ExportFormat
from schemas.marketing.budget_result import (
    BudgetResultCreate,
    BudgetResultCreated,
    BudgetResultItem,
    BudgetResultResponse,
    BudgetResultSummary,
    MonthlyOverviewResponse,
)
from schemas.marketing.csv_io import CsvImportReport
from service import budget_result as budget_result_service
from service import csv_import as csv_import_service
from service.reconciliation import LineItem, Summary

router = APIRouter()
overview_router = APIRouter()


def _optional_int(value: Optional[str], name: str, lo: int, hi: int) -> Optional[int]:
    """'all' / 빈 값은 None. 숫자가 아니거나 범위 밖이면 400."""
    if value is None or value.strip().lower() in {"", "all"}:
        return None
    try:
        number = int(value)
    except ValueError:
        number = None
    if number is None or not lo <= number <= hi:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"invalid {name}: {value}")
    return number


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _serialize(items: List[LineItem], summary: Summary) -> dict:
    return {
        "success": True,
        "data": [BudgetResultItem.model_validate(i) for i in items],
        "summary": BudgetResultSummary.model_validate(summary),
    }


# ==============================
# 예산·실적 통합 조회
# ==============================
@router.get(
    "",
    response_model=BudgetResultResponse,
    summary="예산·실적 통합 조회 (format=csv 로 내보내기)",
)
def read_budget_results(
    db: Session = Depends(get_db),
    year: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    client: Optional[str] = Query(None, description="client id 또는 all"),
    platform: Optional[str] = Query(None),
    operation_type: Optional[str] = Query(None, alias="operationType"),
    department: Optional[str] = Query(None, description="client business_division"),
    format: ExportFormat = Query(ExportFormat.json),
    _=Depends(require_member),
):
    filters = budget_result_service.BudgetResultFilter(
        year=_optional_int(year, "year", 2000, 2100),
        month=_optional_int(month, "month", 1, 12),
        client_id=_optional_int(client, "client", 1, 2**63 - 1),
        platform=platform,
        operation_type=operation_type,
        department=department,
    )
    items, summary = budget_result_service.build_budget_results(db, filters)

    if format == ExportFormat.csv:
        return _csv_response(budget_result_service.line_items_to_csv(items), "budget-results.csv")
    return _serialize(items, summary)


@router.post(
    "",
    response_model=BudgetResultCreated,
    status_code=status.HTTP_201_CREATED,
    summary="예산·실적 동시 등록 (같은 키면 갱신)",
)
def create_budget_result(
    payload: BudgetResultCreate,
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    try:
        budget_id, result_id = budget_result_service.create_budget_result(db, payload)
    except (LookupError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return BudgetResultCreated(
        budget_id=budget_id,
        result_id=result_id,
        message="budget/result saved",
    )


# ==============================
# CSV 가져오기 / 템플릿
# ==============================
@router.post(
    "/import",
    response_model=CsvImportReport,
    summary="CSV 가져오기 (복합 키 기준 upsert)",
)
async def import_budget_results(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    _=Depends(require_manager),
):
    content = await file.read()
    try:
        report = csv_import_service.import_budget_results(db, content)
    except csv_import_service.CsvFormatError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return CsvImportReport(
        imported=report.imported,
        errors=report.errors,
        budgets_upserted=report.budgets_upserted,
        results_upserted=report.results_upserted,
        message=report.message,
        error_messages=report.error_messages,
    )


@router.get("/template", summary="CSV 가져오기 템플릿")
def download_template(_=Depends(require_member)):
    return _csv_response(csv_import_service.csv_template(), "budget-results-template.csv")


# ==============================
# 월간 개요
# ==============================
@overview_router.get(
    "",
    response_model=MonthlyOverviewResponse,
    summary="월간 개요 (month=YYYY-MM)",
)
def read_monthly_overview(
    month: str = Query(..., description="YYYY-MM"),
    format: ExportFormat = Query(ExportFormat.json),
    db: Session = Depends(get_db),
    _=Depends(require_member),
):
    try:
        year, month_num = budget_result_service.parse_year_month(month)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    items, summary = budget_result_service.monthly_overview(db, year=year, month=month_num)
    if format == ExportFormat.csv:
        return _csv_response(
            budget_result_service.line_items_to_csv(items),
            f"monthly-overview-{year}-{month_num:02d}.csv",
        )
    return {"year": year, "month": month_num, **_serialize(items, summary)}
