"""Appwrite client configuration."""

from typing import Optional
from appwrite.client import Client
from appwrite.services.account import Account
from appwrite.services.databases import Databases
from app.config.settings import Settings
from app.services.appwrite_client import AccountGateway, DocumentStore
from app.utils.exceptions import ServerMisconfigured


class AppwriteFactory:
    """Builds Appwrite SDK services for one credential set per call.

    ``session`` acts as the user owning that session secret; ``admin`` uses
    the API key and bypasses per-user permissions. Building a client does
    no I/O.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def client(self, *, session: Optional[str] = None, admin: bool = False) -> Client:
        if not self.settings.appwrite_configured:
            raise ServerMisconfigured(
                "Server mis-configuration: Appwrite is not configured",
                details="APPWRITE_ENDPOINT and APPWRITE_PROJECT_ID must be set",
            )
        client = Client()
        client.set_endpoint(self.settings.appwrite_endpoint)
        client.set_project(self.settings.appwrite_project_id)
        if admin:
            if not self.settings.appwrite_api_key:
                raise ServerMisconfigured(
                    "Server mis-configuration: missing APPWRITE_API_KEY",
                    details="APPWRITE_API_KEY must be set",
                )
            client.set_key(self.settings.appwrite_api_key)
        if session:
            client.set_session(session)
        return client

    def account_service(self, *, session: Optional[str] = None, admin: bool = False) -> Account:
        return Account(self.client(session=session, admin=admin))

    def databases_service(self, *, session: Optional[str] = None, admin: bool = False) -> Databases:
        return Databases(self.client(session=session, admin=admin))

    def account(self, *, session: Optional[str] = None, admin: bool = False) -> AccountGateway:
        return AccountGateway(self.account_service(session=session, admin=admin))

    def documents(self, *, session: Optional[str] = None, admin: bool = False) -> DocumentStore:
        """Document store on the configured database."""
        return DocumentStore(
            self.databases_service(session=session, admin=admin),
            self.settings.appwrite_database_id,
        )
