"""
Ordered, id-keyed sub-collections stored in a single JSON column

Fields, files and showroom templates are kept as
``{"order": [id, ...], "items": {id: item}}`` so that items are addressed by a
stable identifier instead of their position in an array. Every helper returns
a new dict; assigning it back to the column is what tells SQLAlchemy the
value changed.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

Collection = Dict[str, Any]


def new_item_id() -> str:
    return uuid.uuid4().hex


def empty_collection() -> Collection:
    return {"order": [], "items": {}}


def _normalized(collection: Optional[Collection]) -> Collection:
    if not collection:
        return empty_collection()
    return {
        "order": list(collection.get("order", [])),
        "items": dict(collection.get("items", {})),
    }


def build_collection(items: Iterable[Dict[str, Any]]) -> Collection:
    """Create a collection from items, giving each a fresh id"""
    return append_items(empty_collection(), items)


def append_items(collection: Optional[Collection], items: Iterable[Dict[str, Any]]) -> Collection:
    result = _normalized(collection)
    for item in items:
        item_id = new_item_id()
        result["items"][item_id] = {key: value for key, value in item.items() if key != "id"}
        result["order"].append(item_id)
    return result


def list_items(collection: Optional[Collection]) -> List[Dict[str, Any]]:
    """Items in insertion order, each with its ``id``"""
    if not collection:
        return []
    items = collection.get("items", {})
    return [
        {"id": item_id, **items[item_id]}
        for item_id in collection.get("order", [])
        if item_id in items
    ]


def get_item(collection: Optional[Collection], item_id: str) -> Optional[Dict[str, Any]]:
    if not collection:
        return None
    item = collection.get("items", {}).get(item_id)
    if item is None:
        return None
    return {"id": item_id, **item}


def replace_item(collection: Optional[Collection], item_id: str, item: Dict[str, Any]) -> Collection:
    result = _normalized(collection)
    if item_id not in result["items"]:
        raise KeyError(item_id)
    result["items"][item_id] = {key: value for key, value in item.items() if key != "id"}
    return result


def remove_item(collection: Optional[Collection], item_id: str) -> Tuple[Collection, Optional[Dict[str, Any]]]:
    """
    Remove one item

    Returns:
        (new collection, removed item or None when the id is unknown)
    """
    result = _normalized(collection)
    removed = result["items"].pop(item_id, None)
    if removed is None:
        return result, None
    result["order"] = [existing for existing in result["order"] if existing != item_id]
    return result, {"id": item_id, **removed}


def count_items(collection: Optional[Collection]) -> int:
    if not collection:
        return 0
    return len(collection.get("items", {}))
