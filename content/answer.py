# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
from typing import Any, Dict, List, Optional

from content.constants import Status
from content.errors import InvalidArgument, NotFound
from content.ids import to_object_id
from content.logger import get_logger
from content.store import ANSWERS, MENTORS, QUESTIONS, Store

log = get_logger("answer")


def placeholder_answer(mentor_id, question_id) -> Dict[str, Any]:
    return {
        "mentor": mentor_id,
        "question": question_id,
        "transcript": "",
        "status": Status.INCOMPLETE.value,
    }


def merge_answers(store: Store, mentor: dict, question_ids: List[Any]) -> List[dict]:
    """
    Pairs every question id with the mentor's stored answer, keeping the
    order (and any repeats) of question_ids.
    """
    if not question_ids:
        return []
    stored = store.find(
        ANSWERS,
        {
            "mentor": mentor["_id"],
            "question": {"$in": [to_object_id(q) for q in question_ids]},
        },
    )
    answers_by_qid = {str(a["question"]): a for a in stored}
    return [
        answers_by_qid.get(str(qid)) or placeholder_answer(mentor["_id"], qid)
        for qid in question_ids
    ]


def upsert_answer(store: Store, mentor_id, question_id, fields: Dict[str, Any]) -> dict:
    """The only write path for answers: one answer per (mentor, question)"""
    if "status" in fields and fields["status"] not in Status.__members__:
        raise InvalidArgument(f"invalid answer status '{fields['status']}'")
    return store.update_one(
        ANSWERS,
        {"mentor": to_object_id(mentor_id), "question": to_object_id(question_id)},
        fields,
        upsert=True,
        defaults={
            "transcript": "",
            "status": Status.INCOMPLETE.value,
            "media": [],
            "hasEditedTranscript": False,
        },
    )


def save_answer(
    store: Store,
    mentor_id,
    question_id,
    transcript: Optional[str] = None,
    status: Optional[str] = None,
    media: Optional[List[dict]] = None,
    has_edited_transcript: Optional[bool] = None,
) -> dict:
    if not store.find_by_id(QUESTIONS, question_id):
        raise NotFound(f"no question found for id '{question_id}'")
    mentor = store.find_by_id(MENTORS, mentor_id)
    if not mentor:
        raise NotFound(f"no mentor found for id '{mentor_id}'")
    fields = {}
    if transcript is not None:
        fields["transcript"] = transcript
    if status is not None:
        fields["status"] = status
    if media is not None:
        fields["media"] = media
    if has_edited_transcript is not None:
        fields["hasEditedTranscript"] = has_edited_transcript
    answer = upsert_answer(store, mentor["_id"], question_id, fields)
    store.update_one(MENTORS, {"_id": mentor["_id"]}, {"isDirty": True})
    log.info("saved answer for mentor %s question %s", mentor["_id"], question_id)
    return answer
