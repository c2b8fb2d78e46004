# ABOUTME: ObjectStore implementation backed by the Google Drive v3 REST API.
# ABOUTME: Uses httpx with a caller-supplied OAuth2 bearer token and an injectable transport.

import json
import logging
import uuid
from collections.abc import Iterator, Sequence
from typing import Any

import httpx

from mylibrary.store.backend import (
    FOLDER_MIME,
    DriveFile,
    FileList,
    RecordNotFoundError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

_API_BASE = "https://www.googleapis.com/drive/v3/files"
_UPLOAD_BASE = "https://www.googleapis.com/upload/drive/v3/files"
_FILE_FIELDS = "id, name, mimeType, properties, parents, webContentLink, size"
_LIST_FIELDS = f"nextPageToken, files({_FILE_FIELDS})"
_CHUNK_SIZE = 65536


def _quote(value: str) -> str:
    """Escape a value for use inside a single-quoted Drive query literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _property_clause(key: str, value: str) -> str:
    return f"properties has {{ key='{_quote(key)}' and value='{_quote(value)}' }}"


def file_from_json(data: dict[str, Any]) -> DriveFile:
    """Convert a Drive ``files`` resource into a DriveFile."""
    size = data.get("size")
    return DriveFile(
        id=data["id"],
        name=data.get("name", ""),
        mime_type=data.get("mimeType", ""),
        properties=dict(data.get("properties") or {}),
        parents=list(data.get("parents") or []),
        size=int(size) if size is not None else None,
        web_content_link=data.get("webContentLink"),
    )


class GoogleDriveStore:
    """ObjectStore over the Drive v3 REST API.

    No retries happen here: a failed call surfaces immediately as
    StoreUnavailableError, or RecordNotFoundError for a 404.
    """

    def __init__(
        self,
        access_token: str,
        *,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {
                "Authorization": f"Bearer {access_token}",
                "User-Agent": "mylibrary/0.1.0",
            },
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)

    # --- Transport helpers ---

    def _send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        try:
            response = self._client.send(request, stream=stream)
        except httpx.HTTPError as exc:
            raise StoreUnavailableError(f"Drive request failed: {request.url}: {exc}") from exc

        if response.status_code == 404:
            response.close()
            raise RecordNotFoundError(f"File not found: {request.url.path}")
        if response.status_code >= 400:
            response.close()
            raise StoreUnavailableError(
                f"HTTP {response.status_code} from Drive: {request.method} {request.url.path}"
            )
        return response

    def _call(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        request = self._client.build_request(method, url, params=params, json=json_body)
        return self._send(request)

    def _list(
        self,
        query: str,
        page_token: str | None = None,
        page_size: int | None = None,
        order_by: str | None = None,
    ) -> FileList:
        params: dict[str, Any] = {"q": query, "fields": _LIST_FIELDS, "spaces": "drive"}
        if page_token:
            params["pageToken"] = page_token
        if page_size:
            params["pageSize"] = page_size
        if order_by:
            params["orderBy"] = order_by
        data = self._call("GET", _API_BASE, params=params).json()
        return FileList(
            files=[file_from_json(f) for f in data.get("files", [])],
            next_page_token=data.get("nextPageToken"),
        )

    def _patch(self, file_id: str, body: dict[str, Any], **params: str) -> DriveFile:
        response = self._call(
            "PATCH",
            f"{_API_BASE}/{file_id}",
            params={"fields": _FILE_FIELDS, **params},
            json_body=body,
        )
        return file_from_json(response.json())

    # --- ObjectStore ---

    def ensure_folder(self, name: str, parent_id: str | None = None) -> str:
        query = f"name='{_quote(name)}' and mimeType='{FOLDER_MIME}' and trashed=false"
        if parent_id:
            query += f" and '{_quote(parent_id)}' in parents"
        existing = self._list(query, page_size=1)
        if existing.files:
            return existing.files[0].id

        body: dict[str, Any] = {"name": name, "mimeType": FOLDER_MIME}
        if parent_id:
            body["parents"] = [parent_id]
        response = self._call("POST", _API_BASE, params={"fields": "id"}, json_body=body)
        folder_id = response.json()["id"]
        logger.info("Created folder %s (%s)", name, folder_id)
        return folder_id

    def create_file(
        self,
        parent_id: str,
        name: str,
        content: bytes,
        mime_type: str,
        properties: dict[str, str] | None = None,
    ) -> DriveFile:
        metadata: dict[str, Any] = {"name": name, "parents": [parent_id]}
        if properties:
            metadata["properties"] = properties

        boundary = uuid.uuid4().hex
        body = b"".join(
            [
                f"--{boundary}\r\n".encode(),
                b"Content-Type: application/json; charset=UTF-8\r\n\r\n",
                json.dumps(metadata).encode("utf-8"),
                f"\r\n--{boundary}\r\n".encode(),
                f"Content-Type: {mime_type}\r\n\r\n".encode(),
                content,
                f"\r\n--{boundary}--".encode(),
            ]
        )
        request = self._client.build_request(
            "POST",
            _UPLOAD_BASE,
            params={"uploadType": "multipart", "fields": _FILE_FIELDS},
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
            content=body,
        )
        return file_from_json(self._send(request).json())

    def update_properties(self, file_id: str, properties: dict[str, str]) -> DriveFile:
        return self._patch(file_id, {"properties": properties})

    def rename(self, file_id: str, new_name: str) -> DriveFile:
        return self._patch(file_id, {"name": new_name})

    def move(self, file_id: str, new_parent_id: str, old_parent_id: str) -> DriveFile:
        return self._patch(file_id, {}, addParents=new_parent_id, removeParents=old_parent_id)

    def list_by_property(
        self,
        key: str,
        value: str,
        page_token: str | None = None,
        page_size: int = 20,
    ) -> FileList:
        query = f"{_property_clause(key, value)} and trashed=false"
        return self._list(query, page_token, page_size, order_by="name")

    def search(
        self,
        text: str,
        *,
        marker: tuple[str, str],
        property_keys: Sequence[str],
        page_token: str | None = None,
        page_size: int = 20,
    ) -> FileList:
        # Drive only supports equality on properties; substring matching is
        # limited to the file name, which embeds title and authors.
        alternatives = [f"name contains '{_quote(text)}'"]
        alternatives += [_property_clause(key, text) for key in property_keys]
        query = (
            f"{_property_clause(*marker)} and ({' or '.join(alternatives)}) and trashed=false"
        )
        return self._list(query, page_token, page_size)

    def get(self, file_id: str) -> DriveFile:
        response = self._call("GET", f"{_API_BASE}/{file_id}", params={"fields": _FILE_FIELDS})
        return file_from_json(response.json())

    def get_content(self, file_id: str) -> bytes:
        return self._call("GET", f"{_API_BASE}/{file_id}", params={"alt": "media"}).content

    def get_content_stream(self, file_id: str) -> Iterator[bytes]:
        request = self._client.build_request(
            "GET", f"{_API_BASE}/{file_id}", params={"alt": "media"}
        )
        response = self._send(request, stream=True)

        def _iter() -> Iterator[bytes]:
            try:
                yield from response.iter_bytes(_CHUNK_SIZE)
            finally:
                response.close()

        return _iter()

    def delete(self, file_id: str) -> None:
        self._call("DELETE", f"{_API_BASE}/{file_id}")

    def list_children(self, parent_id: str) -> list[DriveFile]:
        query = f"'{_quote(parent_id)}' in parents and trashed=false"
        children: list[DriveFile] = []
        page_token: str | None = None
        while True:
            page = self._list(query, page_token, page_size=1000)
            children.extend(page.files)
            if not page.next_page_token:
                return children
            page_token = page.next_page_token
