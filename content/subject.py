# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
from typing import Any, Dict, List, Optional

from content.errors import InvalidArgument
from content.ids import same_id, to_object_id
from content.logger import get_logger
from content.store import QUESTIONS, SUBJECTS, Store

log = get_logger("subject")

SUBJECT_FIELDS = ["name", "description", "type", "isRequired", "categories", "topics"]


def _topic_ids(subject_question: dict) -> List[str]:
    return [str(t) for t in subject_question.get("topics") or []]


def _visible_to(question: dict, mentor_id) -> bool:
    owner = question.get("mentor")
    return owner is None or mentor_id is None or same_id(owner, mentor_id)


def get_subject_questions(
    store: Store,
    subject: dict,
    topic_id: Optional[str] = None,
    mentor_id=None,
    type: Optional[str] = None,
    category_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Returns the questions of one subject, in the subject's own order, as
    subject questions: the question document tagged with its subject,
    category and topics.

    Questions that belong to another mentor are skipped, as are references
    to questions that no longer exist.
    """
    entries = subject.get("questions") or []
    if topic_id:
        entries = [sq for sq in entries if str(topic_id) in _topic_ids(sq)]
    if category_id:
        entries = [sq for sq in entries if same_id(sq.get("category"), category_id)]
    if not entries:
        return []
    questions = store.find(
        QUESTIONS,
        {"_id": {"$in": [to_object_id(sq["question"]) for sq in entries]}},
    )
    questions_by_id = {str(q["_id"]): q for q in questions}
    topics_by_id = {str(t["id"]): t for t in subject.get("topics") or []}
    categories_by_id = {str(c["id"]): c for c in subject.get("categories") or []}
    result = []
    for sq in entries:
        question = questions_by_id.get(str(sq["question"]))
        if question is None:
            log.warning(
                "subject %s references missing question %s",
                subject["_id"],
                sq["question"],
            )
            continue
        if type and question.get("type") != type:
            continue
        if not _visible_to(question, mentor_id):
            continue
        result.append(
            {
                "question": question,
                "subject": {"_id": subject["_id"], "name": subject.get("name")},
                "category": categories_by_id.get(str(sq.get("category"))),
                "topics": [
                    topics_by_id[t] for t in _topic_ids(sq) if t in topics_by_id
                ],
            }
        )
    return result


def _stored_subject_question(sq: dict) -> dict:
    question = sq.get("question")
    if isinstance(question, dict):
        question = question.get("_id")
    if not question:
        raise InvalidArgument(f"subject question is missing a question id: {sq}")
    category = sq.get("category")
    if isinstance(category, dict):
        category = category.get("id")
    return {
        "question": to_object_id(question),
        "category": category,
        "topics": [
            t.get("id") if isinstance(t, dict) else t for t in sq.get("topics") or []
        ],
    }


def update_or_create_subject(store: Store, subject: dict) -> dict:
    """
    Saves a subject, matching an existing one by _id when the subject has
    one and by name otherwise. The question list is replaced.
    """
    if subject.get("_id"):
        match = {"_id": to_object_id(subject["_id"])}
    elif subject.get("name"):
        match = {"name": subject["name"]}
    else:
        raise InvalidArgument(f"subject needs an _id or a name: {subject}")
    fields = {k: subject[k] for k in SUBJECT_FIELDS if k in subject}
    fields["questions"] = [
        _stored_subject_question(sq) for sq in subject.get("questions") or []
    ]
    return store.update_one(SUBJECTS, match, fields, upsert=True)
