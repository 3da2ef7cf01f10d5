# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
import gzip
import uuid
from datetime import datetime
from functools import lru_cache
from os import environ
from typing import Optional

import boto3
from boto3.dynamodb.types import Binary

from content.constants import ImportStatus
from content.logger import get_logger
from content.utils import require_env

log = get_logger("jobs")
TTL_SEC = int(environ.get("TTL_SEC", (60 * 60 * 24) * 180))  # 180 days


@lru_cache(maxsize=1)
def get_job_table():
    table_name = require_env("JOBS_TABLE_NAME")
    log.info(f"using table {table_name}")
    dynamodb = boto3.resource("dynamodb", region_name=require_env("REGION"))
    return dynamodb.Table(table_name)


def create_job(job_table, mentor: str, body: str) -> dict:
    # this tends to be large so to avoid 400kb max item size:
    compressed_body = gzip.compress(bytes(body, "utf-8"))
    now = datetime.now()
    job = {
        "id": str(uuid.uuid4()),
        "mentor": mentor,
        "status": ImportStatus.QUEUED.value,
        "payload": Binary(compressed_body),
        "created": now.isoformat(),
        # https://docs.aws.amazon.com/amazondynamodb/latest/developerguide/time-to-live-ttl-before-you-start.html#time-to-live-ttl-before-you-start-formatting
        "ttl": int(now.timestamp()) + TTL_SEC,
    }
    job_table.put_item(Item=job)
    return job


def get_job(job_table, job_id: str) -> Optional[dict]:
    db_item = job_table.get_item(Key={"id": job_id})
    log.debug(db_item)
    return db_item.get("Item")


def update_job_status(job_table, job_id: str, status: ImportStatus, error: str = None):
    expression = "SET #status = :status, updated = :updated"
    values = {":status": status.value, ":updated": datetime.now().isoformat()}
    if error:
        expression += ", errorMessage = :error"
        values[":error"] = error
    job_table.update_item(
        Key={"id": job_id},
        UpdateExpression=expression,
        ExpressionAttributeNames={"#status": "status"},
        ExpressionAttributeValues=values,
    )
    log.info("transfer job %s is %s", job_id, status.value)
