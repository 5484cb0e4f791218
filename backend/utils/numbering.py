import re
from typing import Optional

from sqlalchemy.orm import Session

from utils import local_now


def _next_sequence(db: Session, column, prefix: str) -> int:
    # Highest existing number wins; gaps left by deletes are not reused
    numbers = db.query(column).filter(column.like(f"{prefix}%")).all()
    highest = 0
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    for (number,) in numbers:
        match = pattern.match(number or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


def next_document_number(db: Session, column, kind: str, year: Optional[int] = None) -> str:
    """Next '<kind>-<year>-NNN' number for the given column, e.g. PO-2026-007."""
    year = year or local_now().year
    prefix = f"{kind}-{year}-"
    return f"{prefix}{_next_sequence(db, column, prefix):03d}"
