#
# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
from content.auth import login_google
from content.errors import ContentError
from content.logger import get_logger
from content.store import get_store
from content.utils import (
    create_error_response,
    create_json_response,
    get_body,
    load_sentry,
)


load_sentry()
log = get_logger("login-google")


def handler(event, context):
    try:
        body = get_body(event)
        data = login_google(get_store(), body.get("accessToken"))
    except ContentError as err:
        log.warning(err)
        return create_error_response(err, event)
    log.info("user %s logged in", data["user"]["_id"])
    return create_json_response(200, data, event)
