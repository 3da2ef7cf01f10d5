# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
from dataclasses import dataclass
from typing import Optional

NEXT = "next"
PREV = "prev"
_SEPARATOR = "__"


@dataclass(frozen=True)
class Cursor:
    direction: str
    boundary: str


def encode_cursor(direction: str, boundary: str) -> str:
    if direction not in (NEXT, PREV):
        raise ValueError(f"invalid cursor direction {direction}")
    return f"{direction}{_SEPARATOR}{boundary}"


def decode_cursor(cursor: Optional[str]) -> Optional[Cursor]:
    if not cursor:
        return None
    for direction in (PREV, NEXT):
        prefix = f"{direction}{_SEPARATOR}"
        if cursor.startswith(prefix):
            return Cursor(direction, cursor[len(prefix):])
    # cursors issued before prefixes existed are always forward
    return Cursor(NEXT, cursor)
