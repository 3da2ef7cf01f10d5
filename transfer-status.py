#
# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
from content.jobs import get_job, get_job_table
from content.logger import get_logger
from content.utils import create_json_response, get_token, is_authorized, load_sentry

load_sentry()
log = get_logger("status")


def handler(event, context):
    status_id = event["pathParameters"]["id"]
    token = get_token(event)

    item = get_job(get_job_table(), status_id)
    if item:
        if not token or not is_authorized(item["mentor"], token):
            status = 401
            data = {
                "error": "not authorized",
                "message": "not authorized",
            }
        else:
            status = 200
            data = {
                "id": item["id"],
                "status": item["status"],
                "mentor": item["mentor"],
                # only added once transfer job runs
                **({"updated": item["updated"]} if "updated" in item else {}),
                **(
                    {"errorMessage": item["errorMessage"]}
                    if "errorMessage" in item
                    else {}
                ),
                "statusUrl": f"/transfer/status/{status_id}",
            }
    else:
        data = {
            "error": "not found",
            "message": f"{status_id} not found",
        }
        status = 404

    return create_json_response(status, data, event)
