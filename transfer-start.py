#
# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
from content.errors import InvalidArgument
from content.jobs import create_job, get_job_table
from content.logger import get_logger
from content.transfer import validate_json
from content.transfer_mentor_schema import transfer_mentor_json_schema
from content.utils import (
    create_json_response,
    get_raw_body,
    get_token,
    is_authorized,
    load_sentry,
    parse_json_body,
)


load_sentry()
log = get_logger("transfer-start")


def handler(event, context):
    if "body" not in event:
        data = {
            "error": "Bad Request",
            "message": "body payload is required",
        }
        return create_json_response(400, data, event)

    body = get_raw_body(event)
    try:
        transfer_request = parse_json_body(body)
        validate_json(transfer_request, transfer_mentor_json_schema)
    except InvalidArgument as err:
        log.warning(err)
        data = {
            "error": "Bad Request",
            "message": str(err),
        }
        return create_json_response(400, data, event)

    mentor = transfer_request["mentor"]
    token = get_token(event)
    if not token or not is_authorized(mentor, token):
        data = {
            "error": "not authorized",
            "message": "not authorized",
        }
        return create_json_response(401, data, event)

    job = create_job(get_job_table(), mentor, body)
    log.info("queued transfer job %s for mentor %s", job["id"], mentor)
    data = {
        "id": job["id"],
        "mentor": mentor,
        "status": job["status"],
        "statusUrl": f"/transfer/status/{job['id']}",
    }

    return create_json_response(200, data, event)
