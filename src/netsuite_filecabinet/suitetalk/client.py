"""SuiteTalk REST client with OAuth 1.0 request signing."""

from __future__ import annotations

import json
import logging
import uuid
from http.client import HTTPException
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError
from urllib.parse import quote, urlencode, urlsplit

from netsuite_filecabinet.errors import RemoteRequestFailed
from netsuite_filecabinet.suitetalk.models import (
    PROBE_QUERY,
    QUERY_PARAM,
    SUITEQL_PATH,
    ConnectionResult,
    ErrorBody,
)
from netsuite_filecabinet.suitetalk.oauth import OAuthSigner

if TYPE_CHECKING:
    from netsuite_filecabinet.config import NetSuiteConfig

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
DEFAULT_UPLOAD_MIME_TYPE = "application/octet-stream"


class NetSuiteClient:
    """Signed JSON client for the SuiteTalk REST API of one NetSuite account."""

    def __init__(
        self,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        token_id: str,
        token_secret: str,
        realm: str,
        timeout: float = 30.0,
    ) -> None:
        """Initialise the client and its OAuth signer.

        Args:
            base_url: Account REST base URL, e.g. https://1234567.suitetalk.api.netsuite.com.
            consumer_key: Integration record consumer key.
            consumer_secret: Integration record consumer secret.
            token_id: Access token ID.
            token_secret: Access token secret.
            realm: NetSuite account ID.
            timeout: Socket timeout in seconds applied to every request.

        Raises:
            ValueError: If the base URL is empty or not an http(s) URL, or any
                credential is empty.
        """
        if not base_url:
            raise ValueError("Missing NetSuite base URL")
        parts = urlsplit(base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"NetSuite base URL must be an absolute http(s) URL: {base_url!r}")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._signer = OAuthSigner(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            token_id=token_id,
            token_secret=token_secret,
            realm=realm,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Perform a signed GET request.

        Args:
            path: Endpoint path relative to the base URL (must start with '/').
            params: Query string parameters.

        Returns:
            Decoded JSON response body.

        Raises:
            RemoteRequestFailed: On any transport, HTTP status or decoding failure.
        """
        return self._send("GET", path, params=params)

    def post(self, path: str, body: dict[str, Any] | None = None) -> Any:
        """Perform a signed POST request with a JSON body."""
        return self._send("POST", path, data=self._json_body(body))

    def put(self, path: str, body: dict[str, Any] | None = None) -> Any:
        """Perform a signed PUT request with a JSON body."""
        return self._send("PUT", path, data=self._json_body(body))

    def delete(self, path: str) -> Any:
        """Perform a signed DELETE request."""
        return self._send("DELETE", path)

    def upload(
        self,
        path: str,
        content: bytes,
        filename: str,
        mime_type: str = DEFAULT_UPLOAD_MIME_TYPE,
    ) -> Any:
        """POST raw file content as a single multipart/form-data part named ``file``.

        The OAuth header is signed exactly as for a JSON POST; only the
        Content-Type differs.

        Args:
            path: Endpoint path relative to the base URL.
            content: Raw bytes to upload.
            filename: File name sent in the Content-Disposition header.
            mime_type: MIME type of the uploaded part.

        Returns:
            Decoded JSON response body.

        Raises:
            RemoteRequestFailed: On any transport, HTTP status or decoding failure.
        """
        boundary = uuid.uuid4().hex
        data = b"".join(
            [
                f"--{boundary}\r\n".encode(),
                (
                    "Content-Disposition: form-data; name=\"file\"; "
                    f'filename="{_disposition_filename(filename)}"\r\n'
                    f"Content-Type: {mime_type}\r\n\r\n"
                ).encode(),
                content,
                f"\r\n--{boundary}--\r\n".encode(),
            ]
        )
        return self._send(
            "POST",
            path,
            data=data,
            content_type=f"multipart/form-data; boundary={boundary}",
        )

    def test_connection(self) -> ConnectionResult:
        """Run one read-only SuiteQL query for the FileCabinet root folder.

        Confirms that signing, credentials, role permissions and network
        reachability all work. Never raises.

        Returns:
            ConnectionResult with the raw response data on success, or the
            error message on failure.
        """
        try:
            response = self.get(SUITEQL_PATH, {QUERY_PARAM: PROBE_QUERY})
        except RemoteRequestFailed as exc:
            logger.warning("[test_connection] connectivity probe failed; error:%s", exc)
            return ConnectionResult(
                success=False,
                message=f"Failed to connect to NetSuite FileCabinet: {exc}",
                error=str(exc),
            )

        logger.info("[test_connection] connectivity probe succeeded; base_url:%s", self._base_url)
        return ConnectionResult(
            success=True,
            message="Successfully connected to NetSuite FileCabinet",
            data=response if isinstance(response, dict) else {"items": response},
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _json_body(body: dict[str, Any] | None) -> bytes:
        return json.dumps(body or {}).encode("utf-8")

    def _signed_headers(self, method: str, path: str, content_type: str) -> dict[str, str]:
        """Sign ``base_url + path`` for this method and build the request headers."""
        signed = self._signer.sign(method, f"{self._base_url}{path}")
        return {
            "Authorization": signed.authorization_header(),
            "Content-Type": content_type,
            "Accept": JSON_CONTENT_TYPE,
        }

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        data: bytes | None = None,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> Any:
        url = f"{self._base_url}{path}"
        if params:
            url = f"{url}?{urlencode(params, quote_via=quote)}"
        try:
            req = urllib_request.Request(
                url,
                data=data,
                headers=self._signed_headers(method, path, content_type),
                method=method,
            )
            with urllib_request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read()
                location = resp.headers.get("Location") if resp.headers is not None else None
        except HTTPError as exc:
            detail = self._error_detail(exc)
            logger.error(
                "[_send] request failed; method:%s;path:%s;status:%d;detail:%s",
                method,
                path,
                exc.code,
                detail,
            )
            raise RemoteRequestFailed(method, path, f"HTTP {exc.code}: {detail}", exc.code) from exc
        except (OSError, HTTPException, ValueError) as exc:
            # URLError, socket timeouts and TLS errors all derive from OSError.
            # urllib raises ValueError for URLs it cannot open.
            reason = getattr(exc, "reason", None) or exc
            logger.error(
                "[_send] request failed; method:%s;path:%s;error:%s", method, path, reason
            )
            raise RemoteRequestFailed(method, path, str(reason)) from exc

        return self._decode(method, path, body, location)

    @staticmethod
    def _decode(method: str, path: str, body: bytes, location: Any) -> Any:
        """Decode a success body; empty bodies (HTTP 204) become a mapping."""
        if not body.strip():
            if isinstance(location, str) and location:
                return {"id": location.rstrip("/").rsplit("/", 1)[-1]}
            return {}
        try:
            return json.loads(body)
        except ValueError as exc:
            raise RemoteRequestFailed(method, path, f"Invalid JSON response: {exc}") from exc

    @staticmethod
    def _error_detail(exc: HTTPError) -> str:
        """Readable detail for an error status; falls back to the HTTP reason phrase."""
        try:
            error_body = ErrorBody.parse(json.loads(exc.read()))
        except (OSError, HTTPException, ValueError, TypeError):
            error_body = None
        if error_body is not None and error_body.message():
            return error_body.message()
        return str(exc.reason)


def _disposition_filename(filename: str) -> str:
    """Percent-encode the characters that would break a quoted multipart filename."""
    return filename.replace('"', "%22").replace("\r", "%0D").replace("\n", "%0A")


def client_from_config(config: NetSuiteConfig) -> NetSuiteClient:
    """Construct a NetSuiteClient from adapter configuration.

    Args:
        config: Adapter configuration instance.

    Returns:
        Configured NetSuiteClient instance.
    """
    return NetSuiteClient(
        base_url=config.base_url,
        consumer_key=config.consumer_key,
        consumer_secret=config.consumer_secret,
        token_id=config.token_id,
        token_secret=config.token_secret,
        realm=config.realm,
        timeout=config.timeout,
    )
