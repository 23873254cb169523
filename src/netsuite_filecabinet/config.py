"""Adapter configuration, optionally loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class NetSuiteConfig:
    """Credential set and FileCabinet scoping for one NetSuite account.

    Required fields have no defaults. The core never reads the environment;
    callers either construct this directly or go through load_config().
    """

    # Required: OAuth 1.0 token-based authentication credentials
    base_url: str
    consumer_key: str
    consumer_secret: str
    token_id: str
    token_secret: str
    realm: str

    # Optional: defaults mirror an unscoped adapter at the FileCabinet root
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    root_folder_id: str = ""
    prefix: str = ""


def load_config() -> NetSuiteConfig:
    """Construct a NetSuiteConfig from environment variables.

    Required environment variables:
        NETSUITE_BASE_URL: Account REST base URL
            (e.g. https://1234567.suitetalk.api.netsuite.com).
        NETSUITE_CONSUMER_KEY: Integration record consumer key.
        NETSUITE_CONSUMER_SECRET: Integration record consumer secret.
        NETSUITE_TOKEN_ID: Access token ID.
        NETSUITE_TOKEN_SECRET: Access token secret.
        NETSUITE_REALM: Account ID used as the OAuth realm.

    Optional environment variables (with defaults):
        NETSUITE_TIMEOUT: Request timeout in seconds (default: 30).
        NETSUITE_ROOT_FOLDER_ID: Folder all paths resolve under (default: provider root).
        NETSUITE_PREFIX: Path prefix applied to every operation (default: none).

    Returns:
        Configured NetSuiteConfig instance.
    """
    return NetSuiteConfig(
        base_url=os.environ["NETSUITE_BASE_URL"],
        consumer_key=os.environ["NETSUITE_CONSUMER_KEY"],
        consumer_secret=os.environ["NETSUITE_CONSUMER_SECRET"],
        token_id=os.environ["NETSUITE_TOKEN_ID"],
        token_secret=os.environ["NETSUITE_TOKEN_SECRET"],
        realm=os.environ["NETSUITE_REALM"],
        timeout=float(os.environ.get("NETSUITE_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))),
        root_folder_id=os.environ.get("NETSUITE_ROOT_FOLDER_ID", ""),
        prefix=os.environ.get("NETSUITE_PREFIX", ""),
    )
