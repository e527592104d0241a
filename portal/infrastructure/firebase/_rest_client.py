"""Thin Firestore REST API client (no firebase-admin).

Service account tokens come from google-auth; documents are read and
written through Firestore REST v1 with httpx.AsyncClient. Only the
document get/set operations the profile store needs are provided.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from portal.infrastructure.firebase._rest_encoding import decode_fields, encode_document

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"


class FirestoreRequestError(Exception):
    """Raised when Firestore answers with an unexpected status."""

    def __init__(self, path: str, status_code: int) -> None:
        self.path = path
        self.status_code = status_code
        super().__init__(f"Firestore request for {path} failed with status {status_code}")


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class DocumentReference:
    """Reference to a single document."""

    def __init__(self, client: FirestoreRESTClient, path: str) -> None:
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.rsplit("/", 1)[-1]

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document."""
        await self._client.request("PATCH", self._path, body=encode_document(data))

    async def get(self) -> dict[str, Any] | None:
        """Return the document fields, or None when it does not exist."""
        out = await self._client.request("GET", self._path)
        if out is None:
            return None
        return decode_fields(out.get("fields"))


class CollectionReference:
    def __init__(self, client: FirestoreRESTClient, path: str) -> None:
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")


class FirestoreRESTClient:
    """Lightweight Firestore client using the REST API."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in a worker thread."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")

    async def request(
        self, method: str, path: str, body: dict | None = None
    ) -> dict | None:
        """Send one request for a document path. 404 returns None.

        Raises:
            FirestoreRequestError: Any other non-2xx status.
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {await self.get_token()}",
        }
        resp = await self._http.request(method, f"{_BASE}/{path}", headers=headers, json=body)
        if resp.status_code == 404:
            return None
        if resp.status_code not in (200, 204):
            raise FirestoreRequestError(path, resp.status_code)
        return resp.json() if resp.content else {}
