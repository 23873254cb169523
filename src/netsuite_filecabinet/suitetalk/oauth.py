"""OAuth 1.0 HMAC-SHA256 request signing for NetSuite token-based authentication."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import quote

SIGNATURE_METHOD = "HMAC-SHA256"
OAUTH_VERSION = "1.0"
NONCE_BYTES = 16

# OAuth parameter names
PARAM_CONSUMER_KEY = "oauth_consumer_key"
PARAM_NONCE = "oauth_nonce"
PARAM_SIGNATURE_METHOD = "oauth_signature_method"
PARAM_TIMESTAMP = "oauth_timestamp"
PARAM_TOKEN = "oauth_token"
PARAM_VERSION = "oauth_version"
PARAM_SIGNATURE = "oauth_signature"
PARAM_REALM = "realm"


def percent_encode(value: object) -> str:
    """Percent-encode a value per RFC 3986, leaving only unreserved characters."""
    return quote(str(value), safe="")


@dataclass(frozen=True)
class SignedRequest:
    """One signed request: the inputs that were signed and the resulting signature."""

    method: str
    url: str
    timestamp: int
    nonce: str
    signature: str
    oauth_params: tuple[tuple[str, str], ...]

    def authorization_header(self) -> str:
        """Render the ``Authorization`` header value.

        Parameters appear in signing order, followed by ``realm`` and the
        signature, each value percent-encoded and double-quoted.
        """
        pairs = [*self.oauth_params, (PARAM_SIGNATURE, self.signature)]
        return "OAuth " + ",".join(f'{key}="{percent_encode(value)}"' for key, value in pairs)


class OAuthSigner:
    """Signs SuiteTalk requests with a fixed consumer/token credential pair."""

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        token_id: str,
        token_secret: str,
        realm: str,
    ) -> None:
        """Initialise the signer.

        Args:
            consumer_key: Integration record consumer key.
            consumer_secret: Integration record consumer secret.
            token_id: Access token ID.
            token_secret: Access token secret.
            realm: NetSuite account ID.

        Raises:
            ValueError: If any credential is empty.
        """
        credentials = {
            "consumer_key": consumer_key,
            "consumer_secret": consumer_secret,
            "token_id": token_id,
            "token_secret": token_secret,
            "realm": realm,
        }
        missing = [name for name, value in credentials.items() if not value]
        if missing:
            raise ValueError(f"Missing OAuth credentials: {', '.join(missing)}")

        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._token_id = token_id
        self._token_secret = token_secret
        self._realm = realm

    def sign(
        self,
        method: str,
        url: str,
        extra_params: Mapping[str, object] | None = None,
        nonce: str | None = None,
        timestamp: int | None = None,
    ) -> SignedRequest:
        """Sign a request.

        Args:
            method: HTTP method.
            url: Full request URL, without query string.
            extra_params: Additional parameters folded into the signature base
                string (they are not rendered into the header).
            nonce: Fixed nonce; a fresh random one is generated when omitted.
            timestamp: Fixed Unix timestamp; the current time when omitted.

        Returns:
            SignedRequest carrying the signature and header parameters.
        """
        if nonce is None:
            nonce = secrets.token_hex(NONCE_BYTES)
        if timestamp is None:
            timestamp = int(time.time())

        oauth_params: tuple[tuple[str, str], ...] = (
            (PARAM_CONSUMER_KEY, self._consumer_key),
            (PARAM_NONCE, nonce),
            (PARAM_SIGNATURE_METHOD, SIGNATURE_METHOD),
            (PARAM_TIMESTAMP, str(timestamp)),
            (PARAM_TOKEN, self._token_id),
            (PARAM_VERSION, OAUTH_VERSION),
            (PARAM_REALM, self._realm),
        )
        signed_params = dict(oauth_params)
        for key, value in (extra_params or {}).items():
            signed_params[key] = str(value)

        signature = self._signature(self.base_string(method, url, signed_params))
        return SignedRequest(
            method=method.upper(),
            url=url,
            timestamp=timestamp,
            nonce=nonce,
            signature=signature,
            oauth_params=oauth_params,
        )

    @staticmethod
    def base_string(method: str, url: str, params: Mapping[str, str]) -> str:
        """Build the signature base string.

        The sorted ``key=encoded-value`` pairs (realm excluded) are joined
        and then percent-encoded once more as a whole. NetSuite validates
        against exactly this construction.
        """
        param_string = "&".join(
            f"{key}={percent_encode(params[key])}" for key in sorted(params) if key != PARAM_REALM
        )
        return "&".join(
            [method.upper(), percent_encode(url), percent_encode(param_string)]
        )

    def _signature(self, base_string: str) -> str:
        key = f"{percent_encode(self._consumer_secret)}&{percent_encode(self._token_secret)}"
        digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha256)
        return base64.b64encode(digest.digest()).decode("ascii")
