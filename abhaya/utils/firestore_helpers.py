"""
Firestore read helpers shared by the services.
"""

from typing import Any, Dict, List


def snapshot_to_record(doc) -> Dict[str, Any]:
    """Document data with its id merged in (id wins over a stored "id" field)."""
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data


def unresolved_records(db, collection: str) -> List[Dict[str, Any]]:
    """
    All documents of a collection whose `resolved` flag is not truthy.

    Filtered in memory: documents written without the field (older clients)
    would be dropped by a resolved == False query.
    """
    records = []
    for doc in db.collection(collection).stream():
        record = snapshot_to_record(doc)
        if not record.get("resolved"):
            records.append(record)
    return records
