"""
Credential handling for the Sheets Wizard tools.

Every tool call carries its own OAuth2 credential blob as a JSON string:

    {"client_id": ..., "client_secret": ..., "redirect_uri": ...,
     "access_token": ..., "refresh_token": ...}

The blob is parsed once per call into google-auth credentials, which are then
bound to a Google Sheets v4 client. Nothing here talks to the network.
"""

import hashlib
import json
import logging
from collections import OrderedDict
from dataclasses import dataclass

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from sheets_errors import MalformedCredentials

logger = logging.getLogger(__name__)

# Define scopes
SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
]

TOKEN_URI = "https://oauth2.googleapis.com/token"

REQUIRED_FIELDS = ("client_id", "client_secret", "redirect_uri")


@dataclass(frozen=True)
class CredentialBlob:
    """Parsed form of the ``credentials`` tool argument"""

    client_id: str
    client_secret: str
    redirect_uri: str
    access_token: str | None = None
    refresh_token: str | None = None

    def identity(self) -> str:
        """Stable digest of the blob, used as a cache key"""
        material = "\x1f".join(
            value or ""
            for value in (
                self.client_id,
                self.client_secret,
                self.redirect_uri,
                self.access_token,
                self.refresh_token,
            )
        )
        return hashlib.sha256(material.encode("utf-8")).hexdigest()


def parse_credentials(credentials: str) -> CredentialBlob:
    """Parse a JSON credential string into a CredentialBlob"""
    if not isinstance(credentials, str):
        raise MalformedCredentials(
            f"Malformed credentials: expected a JSON string, got {type(credentials).__name__}"
        )

    try:
        data = json.loads(credentials)
    except json.JSONDecodeError as e:
        raise MalformedCredentials(f"Malformed credentials: {e}") from e

    if not isinstance(data, dict):
        raise MalformedCredentials("Malformed credentials: expected a JSON object")

    missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
    if missing:
        raise MalformedCredentials(
            f"Malformed credentials: missing {', '.join(missing)}"
        )

    return CredentialBlob(
        client_id=data["client_id"],
        client_secret=data["client_secret"],
        redirect_uri=data["redirect_uri"],
        access_token=data.get("access_token") or None,
        refresh_token=data.get("refresh_token") or None,
    )


def get_auth_client(credentials: str | CredentialBlob) -> Credentials:
    """Build google-auth credentials from a credential blob.

    With an access token the credentials carry both the access and refresh
    token. Without one they only identify the OAuth client, so the first
    remote call fails with an authentication error.
    """
    blob = credentials if isinstance(credentials, CredentialBlob) else parse_credentials(credentials)

    if blob.access_token:
        return Credentials(
            token=blob.access_token,
            refresh_token=blob.refresh_token,
            token_uri=TOKEN_URI,
            client_id=blob.client_id,
            client_secret=blob.client_secret,
            scopes=SCOPES,
        )

    return Credentials(
        token=None,
        token_uri=TOKEN_URI,
        client_id=blob.client_id,
        client_secret=blob.client_secret,
        scopes=SCOPES,
    )


def get_sheets_client(credentials: str | CredentialBlob):
    """Build a Sheets v4 service bound to the given credentials"""
    creds = get_auth_client(credentials)
    # Static discovery document, no network round trip
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


class SheetsClientFactory:
    """Callable producing a Sheets client for each tool call.

    ``cache_size`` of 0 builds a fresh client on every call. A positive size
    keeps that many clients in a least-recently-used map keyed by credential
    identity for the lifetime of the process.
    """

    def __init__(self, cache_size: int = 0, builder=get_sheets_client):
        if cache_size < 0:
            raise ValueError("cache_size must be >= 0")
        self.cache_size = cache_size
        self._builder = builder
        self._clients: OrderedDict[str, object] = OrderedDict()

    def __call__(self, credentials: str):
        blob = parse_credentials(credentials)
        if not self.cache_size:
            return self._builder(blob)

        key = blob.identity()
        client = self._clients.get(key)
        if client is not None:
            self._clients.move_to_end(key)
            return client

        client = self._builder(blob)
        self._clients[key] = client
        if len(self._clients) > self.cache_size:
            self._clients.popitem(last=False)
            logger.debug("Evicted least recently used Sheets client")
        return client

    def __len__(self) -> int:
        return len(self._clients)

    def clear(self) -> None:
        self._clients.clear()
