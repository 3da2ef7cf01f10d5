# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
from typing import Dict, List, Optional

from content.errors import InvalidArgument, NotFound
from content.logger import get_logger
from content.store import KEYWORDS, MENTORS, Store

log = get_logger("keyword")


def dedupe_keywords(keywords: List[str]) -> List[str]:
    """Drops case-insensitive duplicates, keeping the first spelling"""
    result: List[str] = []
    seen = set()
    for k in keywords:
        if k.lower() not in seen:
            seen.add(k.lower())
            result.append(k)
    return result


def update_or_create_keyword(store: Store, type: str, keywords: List[str]) -> dict:
    return store.update_one(
        KEYWORDS,
        {"type": type},
        {"type": type, "keywords": dedupe_keywords(keywords)},
        upsert=True,
    )


def find_keyword_row(store: Store, name: str) -> Optional[dict]:
    for row in store.find(KEYWORDS):
        if any(k.lower() == name.lower() for k in row.get("keywords") or []):
            return row
    return None


def _retype(store: Store, row: dict, name: str, new_type: str):
    target = store.find_one(KEYWORDS, {"type": new_type})
    if target is None and len(row.get("keywords") or []) == 1:
        store.update_one(KEYWORDS, {"_id": row["_id"]}, {"type": new_type})
        return
    remaining = [k for k in row["keywords"] if k.lower() != name.lower()]
    store.update_one(KEYWORDS, {"_id": row["_id"]}, {"keywords": remaining})
    existing = target.get("keywords") if target else []
    update_or_create_keyword(store, new_type, [*existing, name])


def update_mentor_keywords(store: Store, mentor_id, entries: List[Dict[str, str]]) -> dict:
    """
    Replaces the mentor's keywords with the names in entries.

    An entry with a type also files its keyword under that type: an existing
    keyword is moved (never copied) and an unknown one is created.
    """
    mentor = store.find_by_id(MENTORS, mentor_id)
    if not mentor:
        raise NotFound(f"no mentor found for id '{mentor_id}'")
    names = []
    for entry in entries:
        name = (entry.get("name") or "").strip()
        if not name:
            raise InvalidArgument(f"keyword is missing a name: {entry}")
        names.append(name)
        new_type = entry.get("type")
        if not new_type:
            continue
        row = find_keyword_row(store, name)
        if row is None:
            target = store.find_one(KEYWORDS, {"type": new_type})
            existing = target.get("keywords") if target else []
            update_or_create_keyword(store, new_type, [*existing, name])
            log.info("created keyword %s (%s)", name, new_type)
        elif row.get("type") != new_type:
            _retype(store, row, name, new_type)
            log.info("moved keyword %s from %s to %s", name, row.get("type"), new_type)
    return store.update_one(
        MENTORS, {"_id": mentor["_id"]}, {"keywords": dedupe_keywords(names)}
    )
