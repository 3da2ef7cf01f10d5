import mongomock
import pytest
from bson import ObjectId

from content.store import Store

USER_CLINT = ObjectId("5ffdf41a1ee2c62320b49ea1")
USER_DAN = ObjectId("5ffdf41a1ee2c62320b49ea2")
MENTOR_CLINT = ObjectId("5ffdf41a1ee2c62111111111")
MENTOR_DAN = ObjectId("5ffdf41a1ee2c62111111112")
SUBJECT_REPEAT = ObjectId("5ffdf41a1ee2c62320b49eb1")
SUBJECT_BACKGROUND = ObjectId("5ffdf41a1ee2c62320b49eb2")
SUBJECT_STEM = ObjectId("5ffdf41a1ee2c62320b49eb3")
QUESTION_IDLE = ObjectId("511111111111111111111111")
QUESTION_WHO = ObjectId("511111111111111111111112")
QUESTION_AARON = ObjectId("511111111111111111111113")
QUESTION_DAN_ONLY = ObjectId("511111111111111111111114")
QUESTION_FUN = ObjectId("511111111111111111111115")
ANSWER_WHO = ObjectId("611111111111111111111111")

TOPIC_IDLE = {"id": "5ffdf41a1ee2c62320b49ec1", "name": "Idle", "description": "30-second idle clip"}
TOPIC_BACKGROUND = {"id": "5ffdf41a1ee2c62320b49ec2", "name": "Background", "description": "background"}
TOPIC_ADVICE = {"id": "5ffdf41a1ee2c62320b49ec3", "name": "Advice", "description": "advice"}
TOPIC_FUN = {"id": "5ffdf41a1ee2c62320b49ec4", "name": "Fun", "description": "fun"}


def default_data():
    return {
        "users": [
            {"_id": USER_CLINT, "name": "Clinton Anderson", "email": "clint@anderson.com"},
            {"_id": USER_DAN, "name": "Dan Davis", "email": "dan@davis.com"},
        ],
        "mentors": [
            {
                "_id": MENTOR_CLINT,
                "name": "Clinton Anderson",
                "firstName": "Clint",
                "title": "Nuclear Electrician's Mate",
                "subjects": [SUBJECT_REPEAT, SUBJECT_BACKGROUND],
                "defaultSubject": SUBJECT_BACKGROUND,
                "user": USER_CLINT,
                "isDirty": False,
            },
            {
                "_id": MENTOR_DAN,
                "name": "Dan Davis",
                "firstName": "Dan",
                "title": "Scientist",
                "subjects": [SUBJECT_STEM, SUBJECT_BACKGROUND],
                "user": USER_DAN,
                "isPrivate": True,
                "isDirty": False,
            },
        ],
        "subjects": [
            {
                "_id": SUBJECT_REPEAT,
                "name": "Repeat After Me",
                "description": "These are miscellaneous phrases you'll be asked to repeat.",
                "categories": [{"id": "idle", "name": "Idle", "description": ""}],
                "topics": [TOPIC_IDLE],
                "questions": [
                    {"question": QUESTION_IDLE, "category": "idle", "topics": [TOPIC_IDLE["id"]]},
                ],
            },
            {
                "_id": SUBJECT_BACKGROUND,
                "name": "Background",
                "description": "These questions will ask general questions about your background.",
                "categories": [{"id": "category", "name": "Category", "description": ""}],
                "topics": [TOPIC_BACKGROUND, TOPIC_ADVICE],
                "questions": [
                    {"question": QUESTION_WHO, "category": None, "topics": [TOPIC_BACKGROUND["id"]]},
                    {"question": QUESTION_AARON, "category": "category", "topics": [TOPIC_ADVICE["id"]]},
                    {"question": QUESTION_DAN_ONLY, "category": None, "topics": [TOPIC_BACKGROUND["id"]]},
                ],
            },
            {
                "_id": SUBJECT_STEM,
                "name": "STEM",
                "description": "These questions will ask about STEM careers.",
                "categories": [],
                "topics": [TOPIC_FUN, TOPIC_BACKGROUND],
                "questions": [
                    {"question": QUESTION_FUN, "category": None, "topics": [TOPIC_FUN["id"]]},
                    {"question": QUESTION_WHO, "category": None, "topics": [TOPIC_FUN["id"]]},
                ],
            },
        ],
        "questions": [
            {"_id": QUESTION_IDLE, "question": "Don't talk and stay still.", "type": "UTTERANCE", "name": "_IDLE_"},
            {"_id": QUESTION_WHO, "question": "Who are you and what do you do?", "type": "QUESTION"},
            {"_id": QUESTION_AARON, "question": "What is Aaron like?", "type": "QUESTION"},
            {"_id": QUESTION_DAN_ONLY, "question": "What is your favorite color?", "type": "QUESTION", "mentor": MENTOR_DAN},
            {"_id": QUESTION_FUN, "question": "Is STEM fun?", "type": "QUESTION"},
        ],
        "answers": [
            {
                "_id": ANSWER_WHO,
                "mentor": MENTOR_CLINT,
                "question": QUESTION_WHO,
                "transcript": "I'm Clint and I fix nuclear reactors.",
                "status": "COMPLETE",
                "media": [{"type": "video", "tag": "web", "url": "videos/clint/who/web.mp4", "needsTransfer": False}],
                "hasEditedTranscript": False,
            },
        ],
        "keywords": [
            {"type": "Gender", "keywords": ["Male", "Female", "Nonbinary"]},
            {"type": "Career", "keywords": ["STEM"]},
        ],
    }


@pytest.fixture
def store():
    db = mongomock.MongoClient().db
    s = Store(db)
    s.ensure_indexes()
    for collection, docs in default_data().items():
        db[collection].insert_many(docs)
    return s


@pytest.fixture
def empty_store():
    s = Store(mongomock.MongoClient().db)
    s.ensure_indexes()
    return s
