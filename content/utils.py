# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
import json
from os import _Environ, environ
from typing import Any, Dict, Optional, Union

from content.constants import Role
from content.errors import ContentError, InvalidArgument
from content.logger import get_logger


log = get_logger()


def require_env(n: str) -> str:
    env_val = environ.get(n, "")
    if not env_val:
        raise EnvironmentError(f"missing required env var {n}")
    return env_val


def load_sentry():
    if environ.get("IS_SENTRY_ENABLED", "") == "true":
        log.info("SENTRY enabled, calling init")
        import sentry_sdk  # NOQA E402
        from sentry_sdk.integrations.aws_lambda import AwsLambdaIntegration  # NOQA E402

        sentry_sdk.init(
            dsn=environ.get("SENTRY_DSN_MENTOR_CONTENT"),
            # include project so issues can be filtered in sentry:
            environment=environ.get("PYTHON_ENV"),
            integrations=[AwsLambdaIntegration(timeout_warning=True)],
            traces_sample_rate=0.20,
            debug=environ.get("SENTRY_DEBUG", "") == "true",
        )


def is_admin(token) -> bool:
    return token.get("role") in (Role.CONTENT_MANAGER.value, Role.ADMIN.value)


def is_authorized(mentor, token) -> bool:
    return is_admin(token) or str(mentor) in token.get("mentorIds", [])


def can_view_mentor(mentor: dict, token: Optional[dict]) -> bool:
    if not mentor.get("isPrivate", False):
        return True
    if not token:
        return False
    return (
        is_admin(token)
        or str(mentor.get("user")) == token.get("id")
        or str(mentor.get("_id")) in token.get("mentorIds", [])
    )


def get_token(event) -> Optional[dict]:
    try:
        return json.loads(event["requestContext"]["authorizer"]["token"])
    except (KeyError, TypeError):
        return None


def get_raw_body(event) -> str:
    body = event.get("body") or ""
    if body and event.get("isBase64Encoded"):
        from base64 import b64decode  # NOQA E402

        body = b64decode(body).decode("utf-8")
    return body


def parse_json_body(body: str) -> dict:
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as err:
        raise InvalidArgument(f"body is not valid json: {err}") from err
    if not isinstance(parsed, dict):
        raise InvalidArgument("body must be a json object")
    return parsed


def get_body(event) -> dict:
    body = get_raw_body(event)
    return parse_json_body(body) if body else {}


def get_query_params(event) -> Dict[str, str]:
    return event.get("queryStringParameters") or {}


def create_json_response(status, data, event, headers=None):
    headers = {} if headers is None else headers
    body = {"data": data}
    append_cors_headers(headers, event)
    append_secure_headers(headers)
    # ObjectIds and datetimes come straight out of the store
    response = {
        "statusCode": status,
        "body": json.dumps(body, default=str),
        "headers": headers,
    }
    return response


def create_error_response(err: ContentError, event):
    return create_json_response(
        err.status, {"error": err.error, "message": str(err)}, event
    )


def append_secure_headers(headers):
    secure = {
        "content-security-policy": "upgrade-insecure-requests;",
        "referrer-policy": "no-referrer-when-downgrade",
        "strict-transport-security": "max-age=31536000",
        "x-content-type-options": "nosniff",
        "x-frame-options": "SAMEORIGIN",
        "x-xss-protection": "1; mode=block",
    }
    for h in secure:
        headers[h] = secure[h]


def append_cors_headers(headers, event):
    headers["Access-Control-Allow-Origin"] = environ.get("CORS_ORIGIN", "*")
    headers[
        "Access-Control-Allow-Headers"
    ] = "Authorization,Origin,Accept,Accept-Language,Content-Language,Content-Type"
    headers["Access-Control-Allow-Methods"] = "GET,PUT,POST,DELETE,OPTIONS"


def props_to_bool(
    name: str, props: Union[Dict[str, Any], _Environ], dft: bool = False
) -> bool:
    if not (props and name in props):
        return dft
    v = props[name]
    return str(v).lower() in ["1", "t", "true"]
