# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
id_schema = {"type": "string", "minLength": 1}
optional_string = {"type": ["string", "null"]}

mentor_import_json_schema = {
    "type": "object",
    "properties": {
        "id": optional_string,
        "mentorInfo": {
            "type": "object",
            "properties": {
                "name": optional_string,
                "firstName": optional_string,
                "title": optional_string,
                "email": optional_string,
                "thumbnail": optional_string,
                "allowContact": {"type": ["boolean", "null"]},
                "defaultSubject": optional_string,
                "mentorType": optional_string,
            },
        },
        "subjects": {"type": "array", "items": {"$ref": "#/$defs/Subject"}},
        "questions": {"type": "array", "items": {"$ref": "#/$defs/Question"}},
        "answers": {"type": "array", "items": {"$ref": "#/$defs/Answer"}},
    },
    "required": ["subjects", "answers"],
    "$defs": {
        "Category": {
            "type": "object",
            "properties": {
                "id": id_schema,
                "name": {"type": "string"},
                "description": optional_string,
            },
            "required": ["id"],
        },
        "Topic": {
            "type": "object",
            "properties": {
                "id": id_schema,
                "name": {"type": "string"},
                "description": optional_string,
            },
            "required": ["id", "name"],
        },
        "SubjectQuestion": {
            "type": "object",
            "properties": {
                "question": {
                    "anyOf": [
                        id_schema,
                        {
                            "type": "object",
                            "properties": {"_id": id_schema},
                            "required": ["_id"],
                        },
                    ]
                },
                "category": {"type": ["string", "object", "null"]},
                "topics": {"type": "array"},
            },
            "required": ["question"],
        },
        "Subject": {
            "type": "object",
            "properties": {
                "_id": id_schema,
                "name": {"type": "string"},
                "description": optional_string,
                "type": optional_string,
                "isRequired": {"type": ["boolean", "null"]},
                "categories": {"type": "array", "items": {"$ref": "#/$defs/Category"}},
                "topics": {"type": "array", "items": {"$ref": "#/$defs/Topic"}},
                "questions": {
                    "type": "array",
                    "items": {"$ref": "#/$defs/SubjectQuestion"},
                },
            },
            "anyOf": [{"required": ["_id"]}, {"required": ["name"]}],
        },
        "Question": {
            "type": "object",
            "properties": {
                "_id": id_schema,
                "question": {"type": "string"},
                "type": {"enum": ["UTTERANCE", "QUESTION", None]},
                "subType": optional_string,
                "name": optional_string,
                "mentor": optional_string,
                "paraphrases": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["_id"],
        },
        "Media": {
            "type": "object",
            "properties": {
                "type": {"type": "string"},
                "tag": {"type": "string"},
                "url": {"type": "string"},
                "needsTransfer": {"type": "boolean"},
            },
        },
        "Answer": {
            "type": "object",
            "properties": {
                "question": {
                    "anyOf": [
                        id_schema,
                        {
                            "type": "object",
                            "properties": {"_id": id_schema},
                            "required": ["_id"],
                        },
                    ]
                },
                "transcript": optional_string,
                "status": {"enum": ["INCOMPLETE", "COMPLETE", None]},
                "hasEditedTranscript": {"type": ["boolean", "null"]},
                "media": {
                    "type": ["array", "null"],
                    "items": {"$ref": "#/$defs/Media"},
                },
            },
            "required": ["question"],
        },
    },
}

transfer_mentor_json_schema = {
    "type": "object",
    "properties": {
        "mentor": id_schema,
        "mentorExportJson": mentor_import_json_schema,
    },
    "required": ["mentor", "mentorExportJson"],
    # refs inside the embedded schema resolve against this document
    "$defs": mentor_import_json_schema["$defs"],
}
