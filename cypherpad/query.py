"""Query execution services for the query pad."""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol

from neo4j import AsyncDriver, AsyncManagedTransaction

from .models import DatabaseProfile
from .serialization import dumps_records, record_to_dict

LOG = logging.getLogger(__name__)


class QueryExecutor(Protocol):
    """Interface implemented by query executors."""

    async def execute(self, driver: AsyncDriver, profile: DatabaseProfile, query: str) -> str: ...


class Neo4jQueryExecutor:
    """Runs a Cypher statement inside a single managed write transaction.

    The driver may replay the transaction function on transient failures;
    that retry loop belongs to `execute_write` and is not repeated here.
    """

    async def execute(self, driver: AsyncDriver, profile: DatabaseProfile, query: str) -> str:
        started = time.perf_counter()
        async with driver.session(database=profile.database) as session:
            payload = await session.execute_write(_run_and_serialize, query)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        LOG.info("Query finished", extra={"profile": profile.name, "elapsed_ms": elapsed_ms})
        return payload


async def _run_and_serialize(tx: AsyncManagedTransaction, query: str) -> str:
    result = await tx.run(query)
    records: list[dict[str, Any]] = [record_to_dict(record) async for record in result]
    return dumps_records(records)


__all__ = ["Neo4jQueryExecutor", "QueryExecutor"]
