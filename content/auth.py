# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
from datetime import datetime, timedelta, timezone
from os import environ
from typing import Callable, Dict

import jwt
import requests

from content.constants import DEFAULT_SUBJECT_NAMES, Role
from content.errors import InvalidArgument
from content.logger import get_logger
from content.store import MENTORS, SUBJECTS, USERS, Store
from content.utils import require_env

log = get_logger("auth")

ACCESS_TOKEN_TTL = timedelta(days=int(environ.get("ACCESS_TOKEN_TTL_DAYS", 1)))

GoogleAuthFunc = Callable[[str], Dict[str, str]]


def get_google_userinfo_url() -> str:
    return (
        environ.get("GOOGLE_USERINFO_URL")
        or "https://www.googleapis.com/oauth2/v1/userinfo"
    )


def fetch_google_user(access_token: str) -> Dict[str, str]:
    res = requests.get(
        get_google_userinfo_url(),
        params={"alt": "json", "access_token": access_token},
    )
    res.raise_for_status()
    return res.json()


def generate_access_token(user: dict, mentor_ids, jwt_secret: str = None) -> dict:
    expiration = datetime.now(timezone.utc) + ACCESS_TOKEN_TTL
    payload = {
        "id": str(user["_id"]),
        "role": user.get("userRole") or Role.USER.value,
        "mentorIds": [str(m) for m in mentor_ids],
        "exp": expiration,
    }
    token = jwt.encode(
        payload, jwt_secret or require_env("JWT_SECRET"), algorithm="HS256"
    )
    return {"accessToken": token, "expirationDate": expiration.isoformat()}


def login_google(
    store: Store,
    access_token: str,
    auth_func: GoogleAuthFunc = fetch_google_user,
    jwt_secret: str = None,
) -> dict:
    """
    Signs in with a Google access token, creating the user on first login.
    A new user also gets a mentor holding the default subjects.
    """
    if not access_token:
        raise InvalidArgument("missing required param accessToken")
    google_user = auth_func(access_token)
    user = store.update_one(
        USERS,
        {"googleId": google_user["id"]},
        {
            "googleId": google_user["id"],
            "name": google_user.get("name"),
            "email": google_user.get("email"),
            "lastLoginAt": datetime.now(timezone.utc),
        },
        upsert=True,
    )
    mentor = store.find_one(MENTORS, {"user": user["_id"]})
    if not mentor:
        # TODO: read default subjects from config instead of fixed names
        subjects = store.find(SUBJECTS, {"name": {"$in": DEFAULT_SUBJECT_NAMES}})
        mentor = store.update_one(
            MENTORS,
            {"user": user["_id"]},
            {
                "user": user["_id"],
                "name": google_user.get("name"),
                "firstName": google_user.get("given_name"),
                "subjects": [s["_id"] for s in subjects],
                "isDirty": True,
            },
            upsert=True,
        )
        log.info("created mentor %s for user %s", mentor["_id"], user["_id"])
    return {
        "user": user,
        **generate_access_token(user, [mentor["_id"]], jwt_secret=jwt_secret),
    }
