"""Write rating records to .xlsx, .csv or .jsonl (chosen by file suffix)."""

import json
import logging
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from .models import REPORT_COLUMNS, RatingRecord

logger = logging.getLogger(__name__)

SHEET_NAME = "Course Ratings"
FORMATS = (".xlsx", ".csv", ".jsonl")


def records_to_frame(records: Iterable[RatingRecord]) -> pd.DataFrame:
    return pd.DataFrame([r.as_row() for r in records], columns=list(REPORT_COLUMNS))


def write_report(records: Iterable[RatingRecord], path: Union[str, Path]) -> Path:
    out_path = Path(path)
    suffix = out_path.suffix.lower()
    if suffix not in FORMATS:
        raise ValueError(f"Unsupported report format '{suffix}' (use one of {', '.join(FORMATS)})")

    records = list(records)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".jsonl":
        with out_path.open("w", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record.as_row(), ensure_ascii=False) + "\n")
    else:
        df = records_to_frame(records)
        if suffix == ".xlsx":
            df.to_excel(out_path, sheet_name=SHEET_NAME, index=False, engine="openpyxl")
        else:
            df.to_csv(out_path, index=False)

    logger.info("Wrote %d rows to %s", len(records), out_path)
    return out_path
