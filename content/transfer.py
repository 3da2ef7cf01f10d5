# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
from typing import Any, Dict, List

from jsonschema import ValidationError, validate

from content.answer import upsert_answer
from content.constants import MENTOR_INFO_FIELDS, ImportStatus
from content.errors import InvalidArgument
from content.ids import same_id, stringify_ids, to_object_id
from content.jobs import update_job_status
from content.logger import get_logger
from content.mentor import find_mentor
from content.store import ANSWERS, MENTORS, QUESTIONS, SUBJECTS, Store
from content.subject import update_or_create_subject
from content.transfer_mentor_schema import mentor_import_json_schema

log = get_logger("transfer")

QUESTION_FIELDS = [
    "question",
    "type",
    "subType",
    "name",
    "clientId",
    "paraphrases",
    "mentor",
    "mentorType",
    "minVideoLength",
]
ANSWER_IMPORT_FIELDS = ["transcript", "status", "media", "hasEditedTranscript"]


def validate_json(json_data, json_schema):
    try:
        validate(instance=json_data, schema=json_schema)
    except ValidationError as err:
        log.error(err)
        raise InvalidArgument(f"invalid payload: {err.message}") from err


def _unique_question_ids(subjects: List[dict]) -> List[Any]:
    ids: List[Any] = []
    seen = set()
    for s in subjects:
        for sq in s.get("questions") or []:
            if str(sq["question"]) not in seen:
                seen.add(str(sq["question"]))
                ids.append(sq["question"])
    return ids


def export_mentor(store: Store, mentor) -> Dict[str, Any]:
    """
    Returns everything needed to rebuild the mentor elsewhere as plain JSON.
    A question shared by several subjects is exported once.
    """
    mentor = find_mentor(store, mentor)
    mentor_subject_ids = mentor.get("subjects") or []
    found = store.find(
        SUBJECTS, {"_id": {"$in": [to_object_id(s) for s in mentor_subject_ids]}}
    )
    subjects = [
        s
        for sid in mentor_subject_ids
        for s in found
        if same_id(s["_id"], sid)
    ]
    question_ids = [to_object_id(q) for q in _unique_question_ids(subjects)]
    questions = store.find(QUESTIONS, {"_id": {"$in": question_ids}})
    answers = store.find(
        ANSWERS, {"mentor": mentor["_id"], "question": {"$in": question_ids}}
    )
    return stringify_ids(
        {
            "id": mentor["_id"],
            "mentorInfo": {k: mentor.get(k) for k in MENTOR_INFO_FIELDS if k in mentor},
            "subjects": subjects,
            "questions": questions,
            "answers": answers,
        }
    )


def _question_id(answer: dict):
    q = answer["question"]
    return q["_id"] if isinstance(q, dict) else q


def import_mentor(store: Store, mentor, json: Dict[str, Any]) -> dict:
    """
    Rebuilds the mentor's content from an export.

    Questions, subjects and answers are upserted one document at a time and
    the mentor's subjects are replaced last. There is no transaction: a
    failure part way leaves whatever was already written.
    """
    mentor = find_mentor(store, mentor)
    validate_json(json, mentor_import_json_schema)
    for q in json.get("questions") or []:
        fields = {k: q[k] for k in QUESTION_FIELDS if k in q}
        if fields.get("mentor"):
            fields["mentor"] = to_object_id(fields["mentor"])
        if fields:
            store.update_one(
                QUESTIONS, {"_id": to_object_id(q["_id"])}, fields, upsert=True
            )
    subject_ids = [update_or_create_subject(store, s)["_id"] for s in json["subjects"]]
    for a in json["answers"]:
        fields = {k: a[k] for k in ANSWER_IMPORT_FIELDS if a.get(k) is not None}
        upsert_answer(store, mentor["_id"], _question_id(a), fields)
    mentor_fields: Dict[str, Any] = {
        k: v
        for k, v in (json.get("mentorInfo") or {}).items()
        if k in MENTOR_INFO_FIELDS
    }
    if mentor_fields.get("defaultSubject"):
        mentor_fields["defaultSubject"] = to_object_id(mentor_fields["defaultSubject"])
    mentor_fields["subjects"] = subject_ids
    mentor_fields["isDirty"] = True
    log.info(
        "imported %d subjects and %d answers for mentor %s",
        len(subject_ids),
        len(json["answers"]),
        mentor["_id"],
    )
    return store.update_one(MENTORS, {"_id": mentor["_id"]}, mentor_fields)


def process_transfer_mentor(store: Store, job_table, job_id: str, req: Dict[str, Any]):
    mentor = req.get("mentor")
    update_job_status(job_table, job_id, ImportStatus.IN_PROGRESS)
    try:
        result = import_mentor(store, mentor, req.get("mentorExportJson"))
    except Exception as e:
        log.error("Failed to import mentor %s", mentor)
        log.exception(e)
        update_job_status(job_table, job_id, ImportStatus.FAILED, error=str(e))
        raise e
    update_job_status(job_table, job_id, ImportStatus.DONE)
    return result
