#
# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
import json
import gzip
from base64 import b64decode
from content.jobs import get_job_table
from content.logger import get_logger
from content.store import get_store
from content.transfer import process_transfer_mentor
from content.utils import load_sentry

load_sentry()
log = get_logger("transfer-process")


def handler(event, context):
    log.debug(json.dumps(event))
    records = list(
        filter(
            lambda r: r["eventName"] == "INSERT"
            and r["dynamodb"]
            and r["dynamodb"]["NewImage"],
            event["Records"],
        )
    )
    log.debug("records to process: %s", len(records))
    for record in records:
        image = record["dynamodb"]["NewImage"]
        payload = b64decode(image["payload"]["B"])  # binary
        request = json.loads(gzip.decompress(payload).decode("utf-8"))
        process_transfer_mentor(get_store(), get_job_table(), image["id"]["S"], request)
