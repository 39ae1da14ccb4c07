"""
MongoDB access for the storefront.

`db` is the module-level database handle (None when DATABASE_URL is unset).
Collection names are the lowercase Pydantic schema names: "product", "user".
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import DESCENDING, MongoClient

from config import settings
from errors import StoreUnavailable
from logger import get_logger

logger = get_logger("database")

client = None
db = None

if settings.database_url:
    client = MongoClient(settings.database_url)
    db = client[settings.database_name]
    logger.info(f"Using MongoDB database '{settings.database_name}'")
else:
    logger.warning("DATABASE_URL not set: data routes will fail until it is configured")


def get_collection(name: str):
    if db is None:
        raise StoreUnavailable("Database not configured")
    return db[name]


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id string; None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Render a stored document for JSON output: `_id` becomes string `id`."""
    if doc is None:
        return None
    out = {k: v for k, v in doc.items() if k not in ("_id", "password_hash")}
    out["id"] = str(doc["_id"])
    return out


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> str:
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)
    now = datetime.now(timezone.utc)
    data_dict["created_at"] = now
    data_dict["updated_at"] = now
    result = get_collection(collection_name).insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(
    collection_name: str,
    filter_dict: Optional[dict] = None,
    limit: Optional[int] = None,
    newest_first: bool = False,
) -> List[dict]:
    cursor = get_collection(collection_name).find(filter_dict or {})
    if newest_first:
        cursor = cursor.sort("_id", DESCENDING)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def get_document(collection_name: str, doc_id: Any) -> Optional[dict]:
    oid = to_object_id(doc_id)
    if oid is None:
        return None
    return get_collection(collection_name).find_one({"_id": oid})


def update_document(collection_name: str, doc_id: Any, fields: dict) -> bool:
    """$set the given fields; returns False when no document has that id."""
    oid = to_object_id(doc_id)
    if oid is None:
        return False
    updates = dict(fields)
    updates["updated_at"] = datetime.now(timezone.utc)
    result = get_collection(collection_name).update_one({"_id": oid}, {"$set": updates})
    return result.matched_count == 1


def delete_document(collection_name: str, doc_id: Any) -> bool:
    oid = to_object_id(doc_id)
    if oid is None:
        return False
    result = get_collection(collection_name).delete_one({"_id": oid})
    return result.deleted_count == 1


def ping() -> str:
    if db is None:
        return "not_configured"
    try:
        db.command("ping")
        return "ok"
    except Exception as e:
        return f"error: {str(e)[:80]}"
