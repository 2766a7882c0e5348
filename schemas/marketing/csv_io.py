# schemas/marketing/csv_io.py
from __future__ import annotations

from typing import List

from schemas.base import ORMBase


class CsvImportReport(ORMBase):
    success: bool = True
    imported: int = 0
    errors: int = 0
    budgets_upserted: int = 0
    results_upserted: int = 0
    message: str = ""
    error_messages: List[str] = []
