"""
Student Store - the persistence collaborator for enrichment results.

The enrichment pipeline only ever reads a student record and attaches an
analysis to it. It never defines the record schema.

Fields written here:
- softSkillsAssessment
- resume
- marks
- analysis
"""

from datetime import datetime, timezone
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from student_analysis.core.errors import PersistenceError, ValidationError
from student_analysis.db.mongodb import get_collection, COLLECTIONS


def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def to_object_id(student_id: str) -> ObjectId:
    try:
        return ObjectId(student_id)
    except (InvalidId, TypeError):
        raise ValidationError("Invalid student ID format")


class StudentStore:
    """
    Reads student records and attaches analysis results to them.
    """

    def __init__(self, collection: Collection = None):
        if collection is None:
            collection = get_collection(COLLECTIONS["students"])
        self.collection = collection

    def find_by_id(self, student_id: str) -> Optional[dict]:
        """Fetch a student by MongoDB ObjectId. Raises ValidationError for malformed IDs."""
        oid = to_object_id(student_id)
        try:
            doc = self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            raise PersistenceError(f"Could not read student {student_id}: {e}")
        return serialize_doc(doc)

    def find_by_usn(self, usn: str) -> Optional[dict]:
        """Fetch a student by USN (stored uppercase)."""
        try:
            doc = self.collection.find_one({"usn": usn.upper()})
        except PyMongoError as e:
            raise PersistenceError(f"Could not read student {usn}: {e}")
        return serialize_doc(doc)

    def save(self, student_id: str, field: str, value: dict) -> bool:
        """
        Attach `value` to the student's `field`.

        Returns:
            True if a student matched, False if none did.

        Raises:
            PersistenceError on malformed ID or database failure
        """
        try:
            oid = to_object_id(student_id)
        except ValidationError as e:
            raise PersistenceError(str(e))

        try:
            result = self.collection.update_one(
                {"_id": oid},
                {"$set": {field: value, "updatedAt": datetime.now(timezone.utc)}}
            )
        except PyMongoError as e:
            raise PersistenceError(f"Could not save {field} for student {student_id}: {e}")
        return result.matched_count > 0


# Singleton instance
_student_store: StudentStore = None


def get_student_store() -> StudentStore:
    """Get or create the student store (singleton pattern)"""
    global _student_store
    if _student_store is None:
        _student_store = StudentStore()
    return _student_store
