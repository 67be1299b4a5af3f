"""DynamoDB check catalog.

The checker owns a single item (hash key ``id``) in the target table.  Each
cycle writes it, updates it, reads it back with and without strong
consistency, queries and scans the table, verifies read-after-write with a
strongly consistent read, and finally deletes it.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any

from awschecker.checks.types import CheckChain, CheckGroup, OperationStep

SERVICE = "DynamoDB"

PUT_ITEM = "PutItem"
UPDATE_ITEM = "UpdateItem"
GET_ITEM = "GetItem"
GET_ITEM_CONSISTENT = "GetItemConsistent"
QUERY = "Query"
QUERY_CONSISTENT = "QueryConsistent"
SCAN = "Scan"
PUT_GET_ITEM_CONSISTENT = "PutGetItemConsistent"
DELETE_ITEM = "DeleteItem"

METHODS = (
    PUT_ITEM,
    UPDATE_ITEM,
    GET_ITEM,
    GET_ITEM_CONSISTENT,
    QUERY,
    QUERY_CONSISTENT,
    SCAN,
    PUT_GET_ITEM_CONSISTENT,
    DELETE_ITEM,
)


class ConsistencyError(Exception):
    """A strongly consistent read did not return the item just written."""


@dataclass(frozen=True)
class DynamoDBTarget:
    """Table and probe item the checker works on."""

    client: Any
    table: str
    item_id: str

    @property
    def key(self) -> dict[str, dict[str, str]]:
        return {"id": {"S": self.item_id}}


def _now() -> dict[str, str]:
    return {"N": str(time.time_ns())}


def _put_item(target: DynamoDBTarget) -> None:
    target.client.put_item(
        TableName=target.table,
        Item={**target.key, "checked_at": _now()},
    )


def _update_item(target: DynamoDBTarget) -> None:
    target.client.update_item(
        TableName=target.table,
        Key=target.key,
        UpdateExpression="SET checked_at = :now",
        ConditionExpression="attribute_not_exists(checked_at) OR checked_at < :now",
        ExpressionAttributeValues={":now": _now()},
    )


def _get_item(target: DynamoDBTarget, consistent: bool) -> dict[str, Any]:
    return target.client.get_item(
        TableName=target.table,
        Key=target.key,
        ConsistentRead=consistent,
    )


def _query(target: DynamoDBTarget, consistent: bool) -> None:
    target.client.query(
        TableName=target.table,
        KeyConditionExpression="id = :id",
        ExpressionAttributeValues={":id": target.key["id"]},
        ConsistentRead=consistent,
    )


async def put_item(target: DynamoDBTarget) -> None:
    await asyncio.to_thread(_put_item, target)


async def update_item(target: DynamoDBTarget) -> None:
    await asyncio.to_thread(_update_item, target)


async def get_item(target: DynamoDBTarget) -> None:
    await asyncio.to_thread(_get_item, target, False)


async def get_item_consistent(target: DynamoDBTarget) -> None:
    await asyncio.to_thread(_get_item, target, True)


async def get_written_item(target: DynamoDBTarget) -> None:
    """Strongly consistent read that fails unless the item is present."""
    response = await asyncio.to_thread(_get_item, target, True)
    if "Item" not in response:
        raise ConsistencyError(f"item {target.item_id!r} missing from {target.table!r}")


async def query(target: DynamoDBTarget) -> None:
    await asyncio.to_thread(_query, target, False)


async def query_consistent(target: DynamoDBTarget) -> None:
    await asyncio.to_thread(_query, target, True)


async def scan(target: DynamoDBTarget) -> None:
    await asyncio.to_thread(target.client.scan, TableName=target.table, Limit=1)


async def delete_item(target: DynamoDBTarget) -> None:
    await asyncio.to_thread(target.client.delete_item, TableName=target.table, Key=target.key)


def dynamodb_check_group(target: DynamoDBTarget) -> CheckGroup:
    def single(name: str, action: Any) -> CheckChain:
        return CheckChain.single(OperationStep(name, target, action))

    return CheckGroup(
        service=SERVICE,
        chains=(
            single(PUT_ITEM, put_item),
            single(UPDATE_ITEM, update_item),
            single(GET_ITEM, get_item),
            single(GET_ITEM_CONSISTENT, get_item_consistent),
            single(QUERY, query),
            single(QUERY_CONSISTENT, query_consistent),
            single(SCAN, scan),
            CheckChain(
                method=PUT_GET_ITEM_CONSISTENT,
                steps=(
                    OperationStep(PUT_ITEM, target, put_item),
                    OperationStep(GET_ITEM_CONSISTENT, target, get_written_item),
                ),
            ),
            single(DELETE_ITEM, delete_item),
        ),
    )
