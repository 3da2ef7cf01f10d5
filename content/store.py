# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
import json
from dataclasses import dataclass, field
from functools import lru_cache
from os import environ
from typing import Any, Dict, List, Optional

from bson import ObjectId, json_util
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError

from content.errors import Conflict, InvalidArgument
from content.ids import (
    And,
    Eq,
    Filter,
    Gt,
    Lt,
    Ne,
    Or,
    is_empty,
    to_mongo,
    to_object_id,
)
from content.logger import get_logger
from content.utils import require_env

log = get_logger("store")

MENTORS = "mentors"
SUBJECTS = "subjects"
QUESTIONS = "questions"
ANSWERS = "answers"
KEYWORDS = "keywords"
USERS = "users"


@dataclass
class PageResult:
    results: List[dict] = field(default_factory=list)
    next: Optional[str] = None
    previous: Optional[str] = None
    has_next: bool = False
    has_previous: bool = False


def encode_boundary(paginated_field: str, doc: dict) -> str:
    if paginated_field == "_id":
        return str(doc["_id"])
    return json_util.dumps([doc.get(paginated_field), doc["_id"]])


def decode_boundary(paginated_field: str, token: str):
    """Returns (sort value, _id) for a boundary token"""
    if not token:
        raise InvalidArgument("invalid cursor: empty boundary")
    if paginated_field == "_id":
        oid = to_object_id(token)
        if not isinstance(oid, ObjectId):
            raise InvalidArgument(f"invalid cursor boundary '{token}' for _id")
        return oid, oid
    try:
        value, _id = json_util.loads(token)
    except (json.JSONDecodeError, TypeError, ValueError):
        raise InvalidArgument(f"invalid cursor boundary '{token}' for {paginated_field}")
    return value, _id


def _range(paginated_field: str, value, _id, forward: bool) -> Filter:
    past = Gt if forward else Lt
    if paginated_field == "_id":
        return past("_id", _id)
    ties = And((Eq(paginated_field, value), past("_id", _id)))
    # null and missing values sort below everything and never match $gt/$lt
    if value is None:
        return Or((Ne(paginated_field, None), ties)) if forward else ties
    if forward:
        return Or((Gt(paginated_field, value), ties))
    return Or((Lt(paginated_field, value), ties, Eq(paginated_field, None)))


class Store:
    """
    Thin wrapper over a pymongo database.

    Collections are addressed by name; documents go in and out as plain dicts.
    """

    def __init__(self, db):
        self.db = db

    def ensure_indexes(self):
        self.db[ANSWERS].create_index(
            [("question", DESCENDING), ("mentor", DESCENDING)], unique=True
        )
        self.db[KEYWORDS].create_index([("type", DESCENDING), ("_id", DESCENDING)])
        self.db[MENTORS].create_index([("name", DESCENDING), ("_id", DESCENDING)])
        self.db[SUBJECTS].create_index([("name", ASCENDING)])

    def find(
        self,
        collection: str,
        query: Optional[Dict[str, Any]] = None,
        sort: Optional[List] = None,
        limit: int = 0,
    ) -> List[dict]:
        cursor = self.db[collection].find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def find_one(self, collection: str, query: Dict[str, Any]) -> Optional[dict]:
        return self.db[collection].find_one(query)

    def find_by_id(self, collection: str, _id) -> Optional[dict]:
        return self.find_one(collection, {"_id": to_object_id(_id)})

    def update_one(
        self,
        collection: str,
        query: Dict[str, Any],
        set_fields: Dict[str, Any],
        upsert: bool = False,
        defaults: Optional[Dict[str, Any]] = None,
    ) -> Optional[dict]:
        """
        Atomically matches and updates one document, returning the updated
        document. defaults are only written when the upsert inserts.

        Two concurrent upserts for the same key can both miss the match and
        collide on a unique index; the loser is retried once.
        """
        update = {}
        if set_fields:
            update["$set"] = set_fields
        on_insert = {k: v for k, v in (defaults or {}).items() if k not in set_fields}
        if on_insert:
            update["$setOnInsert"] = on_insert
        if not update:
            raise InvalidArgument(f"nothing to update in {collection} for {query}")
        for attempt in range(2):
            try:
                return self.db[collection].find_one_and_update(
                    query,
                    update,
                    upsert=upsert,
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError as err:
                if attempt > 0:
                    raise Conflict(
                        f"duplicate {collection} document for {query}"
                    ) from err
                log.warning("upsert collided on %s %s, retrying", collection, query)

    def insert_one(self, collection: str, doc: dict) -> dict:
        result = self.db[collection].insert_one(doc)
        return {**doc, "_id": result.inserted_id}

    def paginate(
        self,
        collection: str,
        query: Filter,
        limit: int,
        paginated_field: str = "_id",
        sort_ascending: bool = False,
        next: Optional[str] = None,
        previous: Optional[str] = None,
    ) -> PageResult:
        """
        Returns one window of documents ordered by (paginated_field, _id).

        next/previous are boundary tokens from a previous PageResult. Going
        backwards queries in reverse order and flips the page back.
        """
        backwards = previous is not None
        token = previous if backwards else next
        # walking back over an ascending sort means walking down the index
        forward = sort_ascending != backwards
        if token is not None:
            value, _id = decode_boundary(paginated_field, token)
            boundary = _range(paginated_field, value, _id, forward)
            query = boundary if is_empty(query) else And((query, boundary))
        direction = ASCENDING if forward else DESCENDING
        sort = [(paginated_field, direction)]
        if paginated_field != "_id":
            sort.append(("_id", direction))
        docs = self.find(collection, to_mongo(query), sort=sort, limit=limit + 1)
        has_more = len(docs) > limit
        docs = docs[:limit]
        if backwards:
            docs.reverse()
        result = PageResult(
            results=docs,
            has_next=True if backwards else has_more,
            has_previous=has_more if backwards else token is not None,
        )
        if docs:
            result.next = encode_boundary(paginated_field, docs[-1])
            result.previous = encode_boundary(paginated_field, docs[0])
        return result


@lru_cache(maxsize=1)
def get_store() -> Store:
    client = MongoClient(require_env("MONGO_URI"))
    store = Store(client[environ.get("MONGO_DB_NAME", "mentorpal")])
    store.ensure_indexes()
    return store
