"""Async wrappers around the synchronous Appwrite SDK services."""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence
from appwrite.exception import AppwriteException
from appwrite.id import ID
from appwrite.query import Query
from appwrite.services.account import Account
from appwrite.services.databases import Databases
from fastapi.concurrency import run_in_threadpool
from app.utils.exceptions import error_for_status

logger = logging.getLogger(__name__)


async def appwrite_call(fn: Callable[..., Any], *args, **kwargs) -> Any:
    """Run one SDK call off the event loop.

    Raises:
        ApiError: The error kind matching the Appwrite status code
    """
    try:
        return await run_in_threadpool(fn, *args, **kwargs)
    except AppwriteException as e:
        message = str(e.message)
        logger.debug(f"Appwrite error {e.code} ({e.type}): {message}")
        raise error_for_status(e.code, message, e.type)


class AccountGateway:
    """Account API (identity provider)."""

    def __init__(self, account: Account):
        self.account = account

    async def create(self, email: str, password: str, name: str) -> Dict[str, Any]:
        return await appwrite_call(
            self.account.create, user_id=ID.unique(), email=email, password=password, name=name
        )

    async def create_email_password_session(self, email: str, password: str) -> Dict[str, Any]:
        """Open a session. The ``secret`` field is only populated for API-key clients."""
        return await appwrite_call(self.account.create_email_password_session, email=email, password=password)

    async def get(self) -> Dict[str, Any]:
        return await appwrite_call(self.account.get)


class DocumentStore:
    """Document access bound to one client and one database.

    The store applies no tenant isolation of its own: callers must scope
    every query with an explicit ``userId``/``accountId`` filter.
    """

    def __init__(self, databases: Databases, database_id: str):
        self.databases = databases
        self.database_id = database_id

    async def list_documents(
        self,
        collection: str,
        filters: Sequence[str] = (),
        ordering: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        queries = list(filters) + list(ordering)
        if limit is not None:
            queries.append(Query.limit(limit))
        result = await appwrite_call(
            self.databases.list_documents, database_id=self.database_id, collection_id=collection, queries=queries
        )
        return result.get("documents", [])

    async def create_document(
        self,
        collection: str,
        fields: Dict[str, Any],
        document_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await appwrite_call(
            self.databases.create_document,
            database_id=self.database_id,
            collection_id=collection,
            document_id=document_id or ID.unique(),
            data=fields,
        )

    async def get_document(self, collection: str, document_id: str) -> Dict[str, Any]:
        return await appwrite_call(
            self.databases.get_document, database_id=self.database_id, collection_id=collection, document_id=document_id
        )

    async def update_document(self, collection: str, document_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await appwrite_call(
            self.databases.update_document,
            database_id=self.database_id,
            collection_id=collection,
            document_id=document_id,
            data=fields,
        )

    async def delete_document(self, collection: str, document_id: str) -> None:
        await appwrite_call(
            self.databases.delete_document,
            database_id=self.database_id,
            collection_id=collection,
            document_id=document_id,
        )
