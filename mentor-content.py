#
# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
from content.errors import ContentError, InvalidArgument, PermissionDenied
from content.logger import get_logger
from content.mentor import (
    MentorDataRequest,
    find_mentor,
    get_answers,
    get_questions,
    get_subjects,
    get_topics,
)
from content.store import get_store
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
log = get_logger("mentor-content")
views = {
    "topics": get_topics,
    "questions": get_questions,
    "answers": get_answers,
}


def handler(event, context):
    log.info(event.get("pathParameters"))
    params = get_query_params(event)
    view = params.get("view", "answers")
    try:
        if view != "subjects" and view not in views:
            raise InvalidArgument(f"unknown view '{view}'")
        store = get_store()
        mentor = find_mentor(store, event["pathParameters"]["mentor"])
        if not can_view_mentor(mentor, get_token(event)):
            raise PermissionDenied(
                "mentor is private and you do not have permission to access"
            )
        if view == "subjects":
            data = get_subjects(store, mentor)
        else:
            req = MentorDataRequest(
                mentor=mentor,
                use_default_subject=props_to_bool("defaultSubject", params),
                subject_id=params.get("subject"),
                topic_id=params.get("topic"),
                type=params.get("type"),
                status=params.get("status"),
                category_id=params.get("category"),
            )
            data = views[view](store, req)
    except ContentError as err:
        log.warning(err)
        return create_error_response(err, event)
    return create_json_response(200, {view: data}, event)
