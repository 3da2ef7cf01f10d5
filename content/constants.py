# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
from enum import Enum
from typing import List


class Status(str, Enum):
    INCOMPLETE = "INCOMPLETE"
    COMPLETE = "COMPLETE"


class QuestionType(str, Enum):
    UTTERANCE = "UTTERANCE"
    QUESTION = "QUESTION"


class Role(str, Enum):
    USER = "USER"
    CONTENT_MANAGER = "CONTENT_MANAGER"
    ADMIN = "ADMIN"


class ImportStatus(str, Enum):
    QUEUED = "QUEUED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    FAILED = "FAILED"


DEFAULT_LIMIT = 100
# every mentor created on first login answers these
DEFAULT_SUBJECT_NAMES: List[str] = ["Background", "Repeat After Me"]
MENTOR_INFO_FIELDS: List[str] = [
    "name",
    "firstName",
    "title",
    "email",
    "thumbnail",
    "allowContact",
    "defaultSubject",
    "mentorType",
]
