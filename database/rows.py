import logging
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def parse_rows(model: Type[M], rows: Optional[Iterable[Dict[str, Any]]]) -> List[M]:
    """
    Validate raw table rows into typed records.
    Rows that do not match the model are logged and left out.
    """
    records: List[M] = []
    for row in rows or []:
        try:
            records.append(model(**row))
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed {model.__name__} row {row.get('id', '?')}: {e.error_count()} error(s)"
            )
    return records


def parse_row(model: Type[M], row: Optional[Dict[str, Any]]) -> Optional[M]:
    if not row:
        return None
    parsed = parse_rows(model, [row])
    return parsed[0] if parsed else None
