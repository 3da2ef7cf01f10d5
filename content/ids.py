# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
"""
Typed query filters and identifier widening.

Callers describe a query as a small tree of frozen nodes (Eq, Ne, In, Gt, Lt,
And, Or) instead of handing raw dicts to the store. Ids arrive from clients as
strings, but the store may hold either the string or the ObjectId form, so
widen_ids rewrites every id-shaped leaf to accept both.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Tuple, Union

from bson import ObjectId
from bson.errors import InvalidId

from content.errors import InvalidArgument


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class Gt:
    field: str
    value: Any


@dataclass(frozen=True)
class Lt:
    field: str
    value: Any


@dataclass(frozen=True)
class Ne:
    field: str
    value: Any


@dataclass(frozen=True)
class And:
    clauses: Tuple["Filter", ...]


@dataclass(frozen=True)
class Or:
    clauses: Tuple["Filter", ...]


Filter = Union[Eq, Ne, In, Gt, Lt, And, Or]
SCALAR_TYPES = (str, int, float, bool, type(None), ObjectId)


def to_object_id(value):
    """Returns the ObjectId form of value, or value itself if it is not an id"""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str):
        try:
            return ObjectId(value)
        except (InvalidId, TypeError):
            return value
    return value


def same_id(a, b) -> bool:
    return a is not None and b is not None and str(a) == str(b)


def _scalar(field: str, value):
    if not isinstance(value, SCALAR_TYPES):
        raise InvalidArgument(f"unsupported value for filter field '{field}': {value}")
    return value


def _parse_field(field: str, value) -> Filter:
    if isinstance(value, list):
        return In(field, tuple(_scalar(field, v) for v in value))
    if isinstance(value, dict):
        if len(value) != 1:
            raise InvalidArgument(f"unsupported filter for field '{field}': {value}")
        op, operand = next(iter(value.items()))
        if op == "$eq":
            return Eq(field, _scalar(field, operand))
        if op == "$in" and isinstance(operand, list):
            return In(field, tuple(_scalar(field, v) for v in operand))
        raise InvalidArgument(f"unsupported filter operator '{op}' for field '{field}'")
    return Eq(field, _scalar(field, value))


def parse_filter(raw: Dict[str, Any]) -> Filter:
    """
    Converts a JSON filter from a request into a typed filter.

    An empty filter parses to an empty And, which matches everything.
    """
    if raw is None:
        return And(())
    if not isinstance(raw, dict):
        raise InvalidArgument(f"filter must be an object: {raw}")
    clauses: List[Filter] = []
    for key, value in raw.items():
        if key in ("$and", "$or"):
            if not isinstance(value, list):
                raise InvalidArgument(f"{key} requires a list of filters")
            nested = tuple(parse_filter(v) for v in value)
            clauses.append(And(nested) if key == "$and" else Or(nested))
        elif key.startswith("$"):
            raise InvalidArgument(f"unsupported filter operator '{key}'")
        else:
            clauses.append(_parse_field(key, value))
    if len(clauses) == 1:
        return clauses[0]
    return And(tuple(clauses))


def _with_id_forms(values) -> Tuple[Any, ...]:
    widened: List[Any] = []
    for v in values:
        widened.append(v)
        oid = to_object_id(v)
        if oid is not v and oid not in widened:
            widened.append(oid)
    return tuple(widened)


def widen_ids(f: Filter) -> Filter:
    """
    Returns a new filter where every string leaf that parses as an ObjectId
    matches either the raw string or the ObjectId.
    """
    if isinstance(f, Eq):
        if isinstance(f.value, str) and isinstance(to_object_id(f.value), ObjectId):
            return In(f.field, _with_id_forms([f.value]))
        return f
    if isinstance(f, In):
        return In(f.field, _with_id_forms(f.values))
    if isinstance(f, And):
        return And(tuple(widen_ids(c) for c in f.clauses))
    if isinstance(f, Or):
        return Or(tuple(widen_ids(c) for c in f.clauses))
    return f


def is_empty(f: Filter) -> bool:
    return isinstance(f, And) and not f.clauses


def to_mongo(f: Filter) -> Dict[str, Any]:
    if isinstance(f, Eq):
        return {f.field: f.value}
    if isinstance(f, In):
        return {f.field: {"$in": list(f.values)}}
    if isinstance(f, Gt):
        return {f.field: {"$gt": f.value}}
    if isinstance(f, Lt):
        return {f.field: {"$lt": f.value}}
    if isinstance(f, Ne):
        return {f.field: {"$ne": f.value}}
    if isinstance(f, And):
        if not f.clauses:
            return {}
        if len(f.clauses) == 1:
            return to_mongo(f.clauses[0])
        return {"$and": [to_mongo(c) for c in f.clauses]}
    if isinstance(f, Or):
        return {"$or": [to_mongo(c) for c in f.clauses]}
    raise InvalidArgument(f"not a filter: {f}")


def stringify_ids(value):
    """Renders store documents as plain JSON values"""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: stringify_ids(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [stringify_ids(v) for v in value]
    return value
