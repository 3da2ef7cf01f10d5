# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
"""
Mentor content resolution.

A mentor answers the questions of every subject it holds. Subjects are walked
in name order and each subject keeps its own question order, so the list a
mentor works through is stable no matter how the subjects were stored.

Two policies differ on purpose:
  - get_topics returns each topic once, even when several subjects share it
  - get_questions returns one entry per subject question, so a question that
    sits in two subjects comes back twice (once tagged with each subject)
"""
import queue
from dataclasses import dataclass
from threading import Thread
from typing import Any, Dict, List, Optional, Union

from content.answer import merge_answers
from content.constants import QuestionType, Status
from content.errors import InvalidArgument, NotFound
from content.ids import same_id, to_object_id
from content.logger import get_logger
from content.store import MENTORS, SUBJECTS, Store
from content.subject import get_subject_questions

log = get_logger("mentor")

MAX_SUBJECT_WORKERS = 8


@dataclass
class MentorDataRequest:
    mentor: Union[str, dict, Any]
    use_default_subject: bool = False
    subject_id: Optional[str] = None
    topic_id: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    category_id: Optional[str] = None

    def __post_init__(self):
        if self.type is not None and self.type not in QuestionType.__members__:
            raise InvalidArgument(f"invalid question type '{self.type}'")
        if self.status is not None and self.status not in Status.__members__:
            raise InvalidArgument(f"invalid answer status '{self.status}'")


def find_mentor(store: Store, mentor) -> dict:
    if isinstance(mentor, dict):
        return mentor
    found = store.find_by_id(MENTORS, mentor)
    if not found:
        raise NotFound(f"mentor {mentor} not found")
    return found


def get_subjects(store: Store, mentor) -> List[dict]:
    """Returns the mentor's subjects in alphabetical order"""
    mentor = find_mentor(store, mentor)
    return store.find(
        SUBJECTS,
        {"_id": {"$in": [to_object_id(s) for s in mentor.get("subjects") or []]}},
        sort=[("name", 1)],
    )


def _selected_subject_id(mentor: dict, req: MentorDataRequest):
    return mentor.get("defaultSubject") if req.use_default_subject else req.subject_id


def _holds_subject(mentor: dict, subject_id) -> bool:
    return any(same_id(s, subject_id) for s in mentor.get("subjects") or [])


def get_topics(store: Store, req: MentorDataRequest) -> List[dict]:
    """
    Returns topics for one subject (in that subject's order) or for all
    of the mentor's subjects (alphabetically). Each topic appears once.
    """
    mentor = find_mentor(store, req.mentor)
    subject_id = _selected_subject_id(mentor, req)
    topics: List[dict] = []
    if subject_id:
        if _holds_subject(mentor, subject_id):
            subject = store.find_by_id(SUBJECTS, subject_id)
            if subject:
                topics.extend(subject.get("topics") or [])
    else:
        for s in get_subjects(store, mentor):
            topics.extend(s.get("topics") or [])
        topics.sort(key=lambda t: (t.get("name") or "").lower())
    seen = set()
    result = []
    for t in topics:
        if str(t["id"]) not in seen:
            seen.add(str(t["id"]))
            result.append(t)
    return result


def thread_subject_questions(
    store: Store, subjects: List[dict], mentor: dict, req: MentorDataRequest
) -> List[List[Dict[str, Any]]]:
    """
    Filters each subject's questions on a worker thread.
    Results come back indexed by the subject's position.
    """

    class Worker(Thread):
        def __init__(self, request_queue):
            Thread.__init__(self)
            self.queue = request_queue
            self.results = {}
            self.error = None

        def run(self):
            while True:
                item = self.queue.get()
                if item is None:
                    break
                i, subject = item
                try:
                    self.results[i] = get_subject_questions(
                        store,
                        subject,
                        topic_id=req.topic_id,
                        mentor_id=mentor["_id"],
                        type=req.type,
                        category_id=req.category_id,
                    )
                except Exception as err:
                    self.error = err
                    break

    q = queue.Queue()
    for i, subject in enumerate(subjects):
        q.put((i, subject))
    no_workers = min(MAX_SUBJECT_WORKERS, len(subjects))
    # Workers keep working till they receive None
    for _ in range(no_workers):
        q.put(None)
    workers = []
    for _ in range(no_workers):
        worker = Worker(q)
        worker.start()
        workers.append(worker)
    for worker in workers:
        worker.join()
    results: Dict[int, List[Dict[str, Any]]] = {}
    for worker in workers:
        if worker.error is not None:
            raise worker.error
        results.update(worker.results)
    return [results[i] for i in range(len(subjects))]


def get_questions(store: Store, req: MentorDataRequest) -> List[Dict[str, Any]]:
    """
    Returns the subject questions for the mentor, filtered by topic,
    question type and category. Subjects are concatenated in name order.
    A subject filter the mentor does not hold yields an empty list.
    """
    mentor = find_mentor(store, req.mentor)
    subject_id = _selected_subject_id(mentor, req)
    if subject_id:
        subject_ids = [subject_id] if _holds_subject(mentor, subject_id) else []
    else:
        subject_ids = mentor.get("subjects") or []
    if not subject_ids:
        return []
    subjects = store.find(
        SUBJECTS,
        {"_id": {"$in": [to_object_id(s) for s in subject_ids]}},
        sort=[("name", 1)],
    )
    per_subject = thread_subject_questions(store, subjects, mentor, req)
    return [sq for questions in per_subject for sq in questions]


def get_answers(store: Store, req: MentorDataRequest) -> List[Dict[str, Any]]:
    """
    Returns one answer per subject question, in question order. Questions
    the mentor has not answered yet get an INCOMPLETE placeholder.
    The status filter applies after the merge.
    """
    mentor = find_mentor(store, req.mentor)
    subject_questions = get_questions(
        store,
        MentorDataRequest(
            mentor=mentor,
            use_default_subject=req.use_default_subject,
            subject_id=req.subject_id,
            topic_id=req.topic_id,
            type=req.type,
            category_id=req.category_id,
        ),
    )
    answers = merge_answers(
        store, mentor, [sq["question"]["_id"] for sq in subject_questions]
    )
    if req.status:
        answers = [a for a in answers if a.get("status") == req.status]
    return answers
