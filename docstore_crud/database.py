"""
DocStore CRUD — MongoDB Client Management
==========================================

What:  Async MongoDB client construction, startup ping, FastAPI dependency.
How:   One AsyncMongoClient is created during the application lifespan,
       stored on `app.state.mongo_client`, and handed to route handlers
       through the `get_mongo_client` dependency.
Who:   main.py (lifespan) creates and closes it; routes receive it per request.
When:  Client is created once at startup; handlers share it for the process lifetime.

Connection Pooling:
    The driver owns the pool and is safe for concurrent use, so handlers
    never lock around it. maxPoolSize caps concurrent connections;
    serverSelectionTimeoutMS bounds how long a call waits for a reachable
    server before raising ServerSelectionTimeoutError.
"""

import logging

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from docstore_crud.config import Settings

logger = logging.getLogger(__name__)


def create_client(config: Settings) -> AsyncMongoClient:
    """
    Build the process-wide MongoDB client from settings.

    Construction does not open a connection; the driver connects lazily on
    the first operation. `ping` forces that first round-trip at startup.
    """
    return AsyncMongoClient(
        config.mongo_url,
        maxPoolSize=config.mongo_max_pool_size,
        serverSelectionTimeoutMS=config.mongo_server_selection_timeout_ms,
    )


async def ping(client: AsyncMongoClient) -> None:
    """
    Round-trip to the server; raises a PyMongoError subclass when unreachable.

    Used by the lifespan (fatal on failure) and by GET /health (reported).
    """
    await client.admin.command("ping")


def get_collection(
    client: AsyncMongoClient, database: str, collection: str
) -> AsyncCollection:
    """Resolve a collection handle; no I/O happens here."""
    return client[database][collection]


# ── Request Dependency ────────────────────────────────────────────────────
def get_mongo_client(request: Request) -> AsyncMongoClient:
    """
    FastAPI dependency returning the shared client held on application state.

    Tests replace this through `app.dependency_overrides[get_mongo_client]`.
    """
    return request.app.state.mongo_client


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def close_client(client: AsyncMongoClient) -> None:
    """Close all pooled connections. Called during application shutdown."""
    await client.close()
    logger.info("MongoDB client closed")
