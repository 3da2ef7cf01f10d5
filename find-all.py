#
# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
import json

from content.connection import find_all
from content.errors import ContentError, InvalidArgument
from content.logger import get_logger
from content.store import KEYWORDS, MENTORS, QUESTIONS, SUBJECTS, get_store
from content.utils import (
    can_view_mentor,
    create_error_response,
    create_json_response,
    get_query_params,
    get_token,
    load_sentry,
    props_to_bool,
)


load_sentry()
log = get_logger("find-all")


def visible_mentors(mentors, token):
    return [m for m in mentors if can_view_mentor(m, token)]


collections = {
    SUBJECTS: None,
    QUESTIONS: None,
    KEYWORDS: None,
    MENTORS: visible_mentors,
}


def handler(event, context):
    collection = event["pathParameters"]["collection"]
    params = get_query_params(event)
    try:
        if collection not in collections:
            raise InvalidArgument(f"unknown collection '{collection}'")
        try:
            filter = json.loads(params["filter"]) if params.get("filter") else None
        except json.JSONDecodeError as err:
            raise InvalidArgument(f"filter is not valid json: {err}") from err
        data = find_all(
            get_store(),
            collection,
            filter=filter,
            limit=params.get("limit"),
            sort_by=params.get("sortBy"),
            sort_ascending=props_to_bool("sortAscending", params),
            cursor=params.get("cursor"),
            filter_invalid=collections[collection],
            context=get_token(event),
        )
    except ContentError as err:
        log.warning(err)
        return create_error_response(err, event)
    return create_json_response(200, data, event)
