"""
Attach an enrichment result to its student record.

A failed write never changes the response that is already being prepared,
so failures are logged and swallowed here.
"""
import logging

from student_analysis.core.errors import PersistenceError
from student_analysis.services.student_store import StudentStore

logger = logging.getLogger(__name__)


def persist_result(store: StudentStore, student_id: str, field: str, result: dict) -> bool:
    """Returns True if the result was written."""
    try:
        saved = store.save(student_id, field, result)
    except PersistenceError as e:
        logger.error("Error saving %s for student %s: %s", field, student_id, e)
        return False

    if saved:
        logger.info("✅ %s saved to student profile %s", field, student_id)
    else:
        logger.warning("Student %s not found, %s not saved", student_id, field)
    return saved
