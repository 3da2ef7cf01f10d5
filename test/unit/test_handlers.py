import base64
import gzip
import json
from functools import partial
from importlib import import_module

import pytest

from conftest import (
    MENTOR_CLINT,
    MENTOR_DAN,
    QUESTION_AARON,
    QUESTION_WHO,
    SUBJECT_BACKGROUND,
    SUBJECT_REPEAT,
)
from content.auth import login_google
from content.transfer import export_mentor

CLINT_TOKEN = {"id": "5ffdf41a1ee2c62320b49ea1", "role": "USER", "mentorIds": [str(MENTOR_CLINT)]}
DAN_TOKEN = {"id": "5ffdf41a1ee2c62320b49ea2", "role": "USER", "mentorIds": [str(MENTOR_DAN)]}
ADMIN_TOKEN = {"id": "5ffdf41a1ee2c62320b49eaa", "role": "ADMIN", "mentorIds": []}


class FakeJobTable:
    def __init__(self):
        self.items = {}

    def put_item(self, Item):
        self.items[Item["id"]] = dict(Item)

    def get_item(self, Key):
        item = self.items.get(Key["id"])
        return {"Item": item} if item else {}

    def update_item(self, Key, UpdateExpression, ExpressionAttributeNames, ExpressionAttributeValues):
        item = self.items.setdefault(Key["id"], {"id": Key["id"]})
        item["status"] = ExpressionAttributeValues[":status"]
        item["updated"] = ExpressionAttributeValues[":updated"]
        if ":error" in ExpressionAttributeValues:
            item["errorMessage"] = ExpressionAttributeValues[":error"]


def load_handler(name, monkeypatch, store=None, job_table=None):
    module = import_module(name)
    if store is not None and hasattr(module, "get_store"):
        monkeypatch.setattr(module, "get_store", lambda: store)
    if job_table is not None and hasattr(module, "get_job_table"):
        monkeypatch.setattr(module, "get_job_table", lambda: job_table)
    return module.handler


def event(token=None, path=None, query=None, body=None):
    e = {"pathParameters": path or {}, "queryStringParameters": query}
    if token is not None:
        e["requestContext"] = {"authorizer": {"token": json.dumps(token)}}
    if body is not None:
        e["body"] = body if isinstance(body, str) else json.dumps(body)
    return e


def data(response):
    return json.loads(response["body"])["data"]


@pytest.fixture
def job_table():
    return FakeJobTable()


def test_mentor_content_questions(store, monkeypatch):
    handler = load_handler("mentor-content", monkeypatch, store)
    res = handler(event(path={"mentor": str(MENTOR_CLINT)}, query={"view": "questions"}), None)
    assert res["statusCode"] == 200
    assert res["headers"]["Access-Control-Allow-Methods"] == "GET,PUT,POST,DELETE,OPTIONS"
    questions = data(res)["questions"]
    assert [q["question"]["_id"] for q in questions] == [
        str(QUESTION_WHO),
        str(QUESTION_AARON),
        "511111111111111111111111",
    ]


def test_mentor_content_defaults_to_answers(store, monkeypatch):
    handler = load_handler("mentor-content", monkeypatch, store)
    res = handler(
        event(path={"mentor": str(MENTOR_CLINT)}, query={"status": "COMPLETE"}), None
    )
    assert [a["question"] for a in data(res)["answers"]] == [str(QUESTION_WHO)]


def test_mentor_content_subjects(store, monkeypatch):
    handler = load_handler("mentor-content", monkeypatch, store)
    res = handler(event(path={"mentor": str(MENTOR_CLINT)}, query={"view": "subjects"}), None)
    assert [s["_id"] for s in data(res)["subjects"]] == [
        str(SUBJECT_BACKGROUND),
        str(SUBJECT_REPEAT),
    ]


def test_mentor_content_default_subject_topics(store, monkeypatch):
    handler = load_handler("mentor-content", monkeypatch, store)
    res = handler(
        event(
            path={"mentor": str(MENTOR_CLINT)},
            query={"view": "topics", "defaultSubject": "true"},
        ),
        None,
    )
    assert [t["name"] for t in data(res)["topics"]] == ["Background", "Advice"]


@pytest.mark.parametrize(
    "token,status", [(None, 403), (CLINT_TOKEN, 403), (DAN_TOKEN, 200), (ADMIN_TOKEN, 200)]
)
def test_mentor_content_private_mentor(store, monkeypatch, token, status):
    handler = load_handler("mentor-content", monkeypatch, store)
    res = handler(event(token=token, path={"mentor": str(MENTOR_DAN)}, query={"view": "topics"}), None)
    assert res["statusCode"] == status


@pytest.mark.parametrize(
    "mentor,query,status,error",
    [
        (str(MENTOR_CLINT), {"view": "videos"}, 400, "Bad Request"),
        (str(MENTOR_CLINT), {"view": "questions", "type": "VIDEO"}, 400, "Bad Request"),
        ("5ffdf41a1ee2c62111111199", {"view": "questions"}, 404, "not found"),
    ],
)
def test_mentor_content_errors(store, monkeypatch, mentor, query, status, error):
    handler = load_handler("mentor-content", monkeypatch, store)
    res = handler(event(path={"mentor": mentor}, query=query), None)
    assert res["statusCode"] == status
    assert data(res)["error"] == error


def test_mentor_export(store, monkeypatch):
    handler = load_handler("mentor-export", monkeypatch, store)
    res = handler(event(token=CLINT_TOKEN, path={"mentor": str(MENTOR_CLINT)}), None)
    assert res["statusCode"] == 200
    assert data(res)["id"] == str(MENTOR_CLINT)
    assert handler(event(token=DAN_TOKEN, path={"mentor": str(MENTOR_CLINT)}), None)["statusCode"] == 401
    assert handler(event(path={"mentor": str(MENTOR_CLINT)}), None)["statusCode"] == 401


def test_answer_save(store, monkeypatch):
    handler = load_handler("answer-save", monkeypatch, store)
    body = {
        "mentor": str(MENTOR_CLINT),
        "question": str(QUESTION_AARON),
        "transcript": "Aaron is great",
        "status": "COMPLETE",
    }
    res = handler(event(token=CLINT_TOKEN, body=body), None)
    assert res["statusCode"] == 200
    assert data(res)["transcript"] == "Aaron is great"
    assert store.find_by_id("mentors", MENTOR_CLINT)["isDirty"] is True


def test_answer_save_base64_body(store, monkeypatch):
    handler = load_handler("answer-save", monkeypatch, store)
    body = json.dumps({"mentor": str(MENTOR_CLINT), "question": str(QUESTION_AARON)})
    e = event(token=CLINT_TOKEN, body=base64.b64encode(body.encode("utf-8")).decode("utf-8"))
    e["isBase64Encoded"] = True
    assert data(handler(e, None))["status"] == "INCOMPLETE"


@pytest.mark.parametrize(
    "token,body,status",
    [
        (CLINT_TOKEN, {"mentor": str(MENTOR_CLINT)}, 400),
        (DAN_TOKEN, {"mentor": str(MENTOR_CLINT), "question": str(QUESTION_AARON)}, 401),
        (CLINT_TOKEN, {"mentor": str(MENTOR_CLINT), "question": "5ffdf41a1ee2c62111111199"}, 404),
        (CLINT_TOKEN, {"mentor": str(MENTOR_CLINT), "question": str(QUESTION_AARON), "status": "DONE"}, 400),
    ],
)
def test_answer_save_errors(store, monkeypatch, token, body, status):
    handler = load_handler("answer-save", monkeypatch, store)
    assert handler(event(token=token, body=body), None)["statusCode"] == status


def test_keywords_update(store, monkeypatch):
    handler = load_handler("keywords-update", monkeypatch, store)
    body = {"mentor": str(MENTOR_CLINT), "keywords": [{"name": "Male", "type": "Gender"}]}
    res = handler(event(token=CLINT_TOKEN, body=body), None)
    assert data(res) == {"keywords": ["Male"]}
    assert handler(event(token=DAN_TOKEN, body=body), None)["statusCode"] == 401
    bad = {"mentor": str(MENTOR_CLINT), "keywords": "Male"}
    assert handler(event(token=CLINT_TOKEN, body=bad), None)["statusCode"] == 400


def test_find_all_pages_through_subjects(store, monkeypatch):
    handler = load_handler("find-all", monkeypatch, store)
    first = data(handler(event(path={"collection": "subjects"}, query={"limit": "2"}), None))
    assert len(first["edges"]) == 2
    assert first["pageInfo"]["hasNextPage"] is True
    second = data(
        handler(
            event(
                path={"collection": "subjects"},
                query={"limit": "2", "cursor": first["pageInfo"]["endCursor"]},
            ),
            None,
        )
    )
    assert len(second["edges"]) == 1
    assert second["pageInfo"]["hasNextPage"] is False
    assert second["pageInfo"]["hasPreviousPage"] is True


def test_find_all_filter(store, monkeypatch):
    handler = load_handler("find-all", monkeypatch, store)
    res = handler(
        event(
            path={"collection": "questions"},
            query={"filter": json.dumps({"type": "UTTERANCE"})},
        ),
        None,
    )
    assert [e["node"]["question"] for e in data(res)["edges"]] == ["Don't talk and stay still."]


@pytest.mark.parametrize(
    "token,names", [(None, ["Clinton Anderson"]), (DAN_TOKEN, ["Dan Davis", "Clinton Anderson"])]
)
def test_find_all_hides_private_mentors(store, monkeypatch, token, names):
    handler = load_handler("find-all", monkeypatch, store)
    res = handler(event(token=token, path={"collection": "mentors"}), None)
    assert [e["node"]["name"] for e in data(res)["edges"]] == names


@pytest.mark.parametrize(
    "collection,query",
    [
        ("answers", None),
        ("subjects", {"filter": "{not json"}),
        ("subjects", {"filter": json.dumps({"name": {"$regex": "B"}})}),
        ("subjects", {"sortBy": "name", "cursor": "next__notjson"}),
    ],
)
def test_find_all_bad_requests(store, monkeypatch, collection, query):
    handler = load_handler("find-all", monkeypatch, store)
    res = handler(event(path={"collection": collection}, query=query), None)
    assert res["statusCode"] == 400


def test_login_google(store, monkeypatch):
    module = import_module("login-google")
    monkeypatch.setattr(module, "get_store", lambda: store)
    monkeypatch.setattr(
        module,
        "login_google",
        partial(
            login_google,
            auth_func=lambda token: {"id": "google-1", "name": "Kayla"},
            jwt_secret="secret",
        ),
    )
    res = module.handler(event(body={"accessToken": "token"}), None)
    assert res["statusCode"] == 200
    assert data(res)["accessToken"]
    assert module.handler(event(body={}), None)["statusCode"] == 400


def transfer_body(store):
    return {"mentor": str(MENTOR_DAN), "mentorExportJson": export_mentor(store, MENTOR_CLINT)}


def test_transfer_start_queues_job(store, monkeypatch, job_table):
    handler = load_handler("transfer-start", monkeypatch, job_table=job_table)
    res = handler(event(token=DAN_TOKEN, body=transfer_body(store)), None)
    assert res["statusCode"] == 200
    job = data(res)
    assert job["status"] == "QUEUED"
    assert job["statusUrl"] == f"/transfer/status/{job['id']}"
    assert job_table.items[job["id"]]["mentor"] == str(MENTOR_DAN)


@pytest.mark.parametrize(
    "token,body,status",
    [
        (DAN_TOKEN, None, 400),
        (DAN_TOKEN, {"mentor": str(MENTOR_DAN)}, 400),
        (CLINT_TOKEN, "transfer", 401),
        (None, "transfer", 401),
    ],
)
def test_transfer_start_errors(store, monkeypatch, job_table, token, body, status):
    handler = load_handler("transfer-start", monkeypatch, job_table=job_table)
    if body == "transfer":
        body = transfer_body(store)
    assert handler(event(token=token, body=body), None)["statusCode"] == status
    assert job_table.items == {}


def test_transfer_process_and_status(store, monkeypatch, job_table):
    start = load_handler("transfer-start", monkeypatch, job_table=job_table)
    process = load_handler("transfer-process", monkeypatch, store, job_table)
    status = load_handler("transfer-status", monkeypatch, job_table=job_table)
    job_id = data(start(event(token=DAN_TOKEN, body=transfer_body(store)), None))["id"]
    item = job_table.items[job_id]
    record = {
        "eventName": "INSERT",
        "dynamodb": {
            "NewImage": {
                "id": {"S": job_id},
                "payload": {"B": base64.b64encode(item["payload"].value).decode("utf-8")},
            }
        },
    }
    process({"Records": [record, {"eventName": "REMOVE", "dynamodb": {}}]}, None)
    assert store.find_by_id("mentors", MENTOR_DAN)["subjects"] == [SUBJECT_REPEAT, SUBJECT_BACKGROUND]
    res = status(event(token=DAN_TOKEN, path={"id": job_id}), None)
    assert data(res)["status"] == "DONE"
    assert "updated" in data(res)
    assert status(event(token=CLINT_TOKEN, path={"id": job_id}), None)["statusCode"] == 401
    assert status(event(token=DAN_TOKEN, path={"id": "missing"}), None)["statusCode"] == 404


def test_transfer_process_marks_failed_job(store, monkeypatch, job_table):
    process = load_handler("transfer-process", monkeypatch, store, job_table)
    status = load_handler("transfer-status", monkeypatch, job_table=job_table)
    request = json.dumps({"mentor": str(MENTOR_DAN), "mentorExportJson": {"subjects": []}})
    job_table.put_item(Item={"id": "job-1", "mentor": str(MENTOR_DAN), "status": "QUEUED"})
    record = {
        "eventName": "INSERT",
        "dynamodb": {
            "NewImage": {
                "id": {"S": "job-1"},
                "payload": {"B": base64.b64encode(gzip.compress(request.encode("utf-8"))).decode("utf-8")},
            }
        },
    }
    with pytest.raises(Exception):
        process({"Records": [record]}, None)
    job = data(status(event(token=DAN_TOKEN, path={"id": "job-1"}), None))
    assert job["status"] == "FAILED"
    assert job["errorMessage"].startswith("invalid payload")


@pytest.mark.parametrize("name", ["answer-save", "keywords-update", "login-google", "transfer-start"])
@pytest.mark.parametrize("body", ["{not json", "[1, 2]", ""])
def test_body_must_be_a_json_object(store, monkeypatch, job_table, name, body):
    handler = load_handler(name, monkeypatch, store, job_table)
    res = handler(event(token=ADMIN_TOKEN, body=body), None)
    assert res["statusCode"] == 400
    assert data(res)["error"] == "Bad Request"
    assert job_table.items == {}
