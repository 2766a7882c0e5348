# service/csv_import.py
"""
예산·실적 CSV 가져오기.

- 필수 열: campaignId, year, month, platform, operationType, budgetType
- 선택 열: budgetAmount, targetKpi, targetValue, actualSpend, actualResult
- 행 단위로 검증하고, 복합 키 기준으로 Budget / Result 를 각각 upsert
- 행 오류는 모아서 리포트로 돌려줌 (가져오기 전체를 중단하지 않음)
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple

import polars as pl
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import CSV_IMPORT_MAX_ERRORS
from crud.marketing.budget import budget_crud
from crud.marketing.result import result_crud
from models.marketing.campaign import Campaign
from service.reconciliation import BudgetResultKey

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["campaignId", "year", "month", "platform", "operationType", "budgetType"]
OPTIONAL_COLUMNS = ["budgetAmount", "targetKpi", "targetValue", "actualSpend", "actualResult"]
SOURCE_LINE_COLUMN = "_sourceLine"

# 헤더 정규화: 소문자 + "_" 제거 → 표준 열 이름
_HEADER_ALIASES: Dict[str, str] = {c.lower(): c for c in REQUIRED_COLUMNS + OPTIONAL_COLUMNS}
_HEADER_ALIASES["amount"] = "budgetAmount"

_TEMPLATE_EXAMPLE = {
    "campaignId": "1",
    "year": "2025",
    "month": "8",
    "platform": "Google",
    "operationType": "運用代行",
    "budgetType": "月次予算",
    "budgetAmount": "100000",
    "targetKpi": "CV",
    "targetValue": "50",
    "actualSpend": "80000",
    "actualResult": "240000",
}


class CsvFormatError(ValueError):
    """파일 자체를 처리할 수 없음 (헤더 누락, 파싱 실패 등)."""


class RowError(ValueError):
    pass


@dataclass
class ImportReport:
    imported: int = 0
    errors: int = 0
    budgets_upserted: int = 0
    results_upserted: int = 0
    error_messages: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.errors:
            return f"{self.imported} rows imported ({self.errors} errors)"
        return f"{self.imported} rows imported"

    def add_error(self, line_no: int, reason: str) -> None:
        self.errors += 1
        if len(self.error_messages) < CSV_IMPORT_MAX_ERRORS:
            self.error_messages.append(f"row {line_no}: {reason}")


@dataclass
class ParsedRow:
    line_no: int
    key: BudgetResultKey
    budget_amount: Optional[Decimal] = None
    target_kpi: Optional[str] = None
    target_value: Optional[Decimal] = None
    actual_spend: Optional[Decimal] = None
    actual_result: Optional[Decimal] = None


# ------------------------------------------------------------------
# 파싱
# ------------------------------------------------------------------
def normalize_header(name: str) -> str:
    raw = (name or "").strip()
    return _HEADER_ALIASES.get(raw.replace("_", "").lower(), raw)


def _clean_lines(content: bytes | str) -> List[Tuple[int, str]]:
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise CsvFormatError("file must be UTF-8 encoded")
    else:
        text = content.lstrip("\ufeff")

    # (원본 줄 번호, 내용). 빈 줄, '#' 주석 줄 제외
    return [
        (line_no, line)
        for line_no, line in enumerate(text.splitlines(), start=1)
        if line.strip() and not line.lstrip().startswith("#")
    ]


def read_frame(content: bytes | str) -> pl.DataFrame:
    """
    CSV → 전부 문자열인 DataFrame.
    원본 파일의 줄 번호를 SOURCE_LINE_COLUMN 에 붙인다.
    """
    lines = _clean_lines(content)
    if not lines:
        raise CsvFormatError("file is empty")
    text = "\n".join(line for _, line in lines)

    try:
        frame = pl.read_csv(
            io.BytesIO(text.encode("utf-8")),
            infer_schema_length=0,  # 전부 문자열로
            truncate_ragged_lines=True,
        )
        frame = frame.rename({c: normalize_header(c) for c in frame.columns})
    except pl.exceptions.PolarsError as e:
        raise CsvFormatError(f"could not parse CSV: {e}") from e

    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise CsvFormatError(f"missing required columns: {', '.join(missing)}")

    # 여러 줄에 걸친 셀이 있으면 줄 대응이 어긋나므로 헤더 다음부터 순번
    line_numbers = [line_no for line_no, _ in lines[1:]]
    if len(line_numbers) != frame.height:
        first = lines[0][0] + 1
        line_numbers = list(range(first, first + frame.height))
    return frame.with_columns(pl.Series(SOURCE_LINE_COLUMN, line_numbers, dtype=pl.Int64))


def parse_number(value: Optional[str], *, column: str) -> Optional[Decimal]:
    """'¥1,200' → Decimal('1200'). 빈 값은 None, 음수/비숫자는 RowError."""
    if value is None:
        return None
    cleaned = value.replace("¥", "").replace("￥", "").replace(",", "").strip()
    if not cleaned:
        return None
    try:
        number = Decimal(cleaned)
    except InvalidOperation:
        raise RowError(f"invalid number in {column}: {value!r}")
    if not number.is_finite() or number < 0:
        raise RowError(f"invalid number in {column}: {value!r}")
    return number


def _parse_int(value: Optional[str], *, column: str) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        raise RowError(f"invalid {column}: {value!r}")


def parse_row(line_no: int, row: Dict[str, Optional[str]]) -> ParsedRow:
    def text(col: str) -> str:
        return (row.get(col) or "").strip()

    for col in REQUIRED_COLUMNS:
        if not text(col):
            raise RowError(f"{col} is required")

    year = _parse_int(row.get("year"), column="year")
    month = _parse_int(row.get("month"), column="month")
    if not (2000 <= year <= 2100) or not (1 <= month <= 12):
        raise RowError(f"invalid year/month: {text('year')}/{text('month')}")

    parsed = ParsedRow(
        line_no=line_no,
        key=BudgetResultKey(
            campaign_id=_parse_int(row.get("campaignId"), column="campaignId"),
            year=year,
            month=month,
            platform=text("platform"),
            operation_type=text("operationType"),
            budget_type=text("budgetType"),
        ),
        budget_amount=parse_number(row.get("budgetAmount"), column="budgetAmount"),
        target_kpi=text("targetKpi") or None,
        target_value=parse_number(row.get("targetValue"), column="targetValue"),
        actual_spend=parse_number(row.get("actualSpend"), column="actualSpend"),
        actual_result=parse_number(row.get("actualResult"), column="actualResult"),
    )
    if (
        parsed.budget_amount is None
        and parsed.actual_spend is None
        and parsed.actual_result is None
    ):
        raise RowError("no budgetAmount, actualSpend or actualResult to import")
    return parsed


# ------------------------------------------------------------------
# 가져오기
# ------------------------------------------------------------------
def _existing_campaign_ids(db: Session, ids: set[int]) -> set[int]:
    if not ids:
        return set()
    rows = db.execute(select(Campaign.id).where(Campaign.id.in_(ids))).scalars().all()
    return set(rows)


def import_budget_results(db: Session, content: bytes | str) -> ImportReport:
    """
    CSV 내용을 읽어 Budget / Result upsert.
    - 헤더 문제는 CsvFormatError (아무것도 쓰지 않음)
    - DB 오류는 전체 rollback 후 그대로 전파
    """
    frame = read_frame(content)
    report = ImportReport()

    parsed_rows: List[ParsedRow] = []
    for row in frame.iter_rows(named=True):
        line_no = row.pop(SOURCE_LINE_COLUMN)
        try:
            parsed_rows.append(parse_row(line_no, row))
        except RowError as e:
            report.add_error(line_no, str(e))
            logger.warning("csv import row %d rejected: %s", line_no, e)

    known = _existing_campaign_ids(db, {p.key.campaign_id for p in parsed_rows})

    try:
        for parsed in parsed_rows:
            if parsed.key.campaign_id not in known:
                report.add_error(parsed.line_no, f"campaign not found: {parsed.key.campaign_id}")
                logger.warning(
                    "csv import row %d rejected: campaign %s not found",
                    parsed.line_no, parsed.key.campaign_id,
                )
                continue

            if parsed.budget_amount is not None:
                budget_crud.upsert_by_key(
                    db,
                    key=parsed.key,
                    amount=parsed.budget_amount,
                    target_kpi=parsed.target_kpi,
                    target_value=parsed.target_value,
                )
                report.budgets_upserted += 1

            if parsed.actual_spend is not None or parsed.actual_result is not None:
                result_crud.upsert_by_key(
                    db,
                    key=parsed.key,
                    actual_spend=parsed.actual_spend,
                    actual_result=parsed.actual_result,
                )
                report.results_upserted += 1

            report.imported += 1
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("csv import failed; rolled back")
        raise

    logger.info(
        "csv import done: imported=%d errors=%d budgets=%d results=%d",
        report.imported, report.errors, report.budgets_upserted, report.results_upserted,
    )
    return report


def csv_template() -> str:
    frame = pl.DataFrame(
        [_TEMPLATE_EXAMPLE],
        schema={col: pl.Utf8 for col in REQUIRED_COLUMNS + OPTIONAL_COLUMNS},
    )
    return frame.write_csv()
