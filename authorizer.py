#
# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
import json
from os import environ
from typing import Callable

import jwt
from jsonschema import validate, ValidationError
from content.logger import get_logger
from content.utils import load_sentry


load_sentry()
log = get_logger("authorizer")
jwt_payload_schema = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "maxLength": 60, "minLength": 5},
        "role": {"type": "string"},
        "mentorIds": {
            "type": "array",
            "items": {"type": "string", "maxLength": 60, "minLength": 5},
        },
    },
    "required": ["id", "role", "mentorIds"],
}


def validate_json(json_data, json_schema):
    try:
        validate(instance=json_data, schema=json_schema)
    except ValidationError as err:
        log.error(err)
        raise err


def decode_token(token: str) -> dict:
    return jwt.decode(token, environ.get("JWT_SECRET"), algorithms=["HS256"])


def extract_token_from_header(request, decode: Callable[[str], dict] = decode_token):
    if request["type"] != "TOKEN" or "authorizationToken" not in request:
        raise Exception("no authentication token provided")
    bearer_token = request["authorizationToken"]
    token_authentication = bearer_token.lower().startswith("bearer")
    token_split = bearer_token.split(" ")
    if not token_authentication or len(token_split) == 1:
        log.warning("malformed authorization header")
        raise Exception("no authentication token provided")
    token = token_split[1]
    try:
        payload = decode(token)
    except jwt.ExpiredSignatureError:
        raise Exception("access token has expired")

    validate_json(payload, jwt_payload_schema)

    return payload


def policy(principal_id, effect, action, context=None):
    result = {
        "principalId": principal_id,
        "policyDocument": {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Action": action,
                    "Effect": effect,
                    "Resource": "*",
                },
            ],
        },
    }
    if context:
        result["context"] = context
    return result


def handler(event, context, decode: Callable[[str], dict] = decode_token):
    # do not log the token for security reasons:
    log.debug(f"{event['type']}, {event['methodArn']}")
    try:
        verified = extract_token_from_header(event, decode)
        log.debug("token valid")
        return policy(
            "apigateway.amazonaws.com",
            "Allow",
            "execute-api:Invoke",
            {"token": json.dumps(verified)},
        )
    except Exception as err:
        log.warning(err)

    return policy("*", "Deny", "*")
