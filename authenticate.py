#!/usr/bin/env python3
"""
Sheets Wizard Authentication Script

Runs the Google OAuth consent flow once and prints the credential blob that
every Sheets Wizard tool expects in its ``credentials`` argument.

Usage:
    uv run authenticate.py
"""

import json
import os
import webbrowser
from pathlib import Path

from dotenv import load_dotenv
from google_auth_oauthlib.flow import Flow

from sheets_auth import SCOPES, TOKEN_URI

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"


def load_client_config(path: Path) -> tuple[str, str, str]:
    """Read client_id, client_secret and the first redirect URI from a client secrets file"""
    client_config = json.loads(Path(path).read_text())

    # Handle both web and installed app types
    if 'installed' in client_config:
        client_data = client_config['installed']
    elif 'web' in client_config:
        client_data = client_config['web']
    else:
        raise ValueError("Credentials file must contain either 'installed' or 'web' section")

    redirect_uris = client_data.get('redirect_uris') or []
    if not redirect_uris:
        raise ValueError("Credentials file has no redirect_uris")

    return client_data['client_id'], client_data['client_secret'], redirect_uris[0]


def credential_blob(creds, client_id: str, client_secret: str, redirect_uri: str) -> dict:
    """The JSON object passed as the ``credentials`` tool argument"""
    blob = {
        "client_id": client_id,
        "client_secret": client_secret,
        "redirect_uri": redirect_uri,
        "access_token": creds.token,
    }
    if creds.refresh_token:
        blob["refresh_token"] = creds.refresh_token
    return blob


SETUP_HINT = """\
No OAuth client secrets file at {path}.

Create a Desktop OAuth client for a Google Cloud project with the Sheets API
enabled, download its JSON and either save it as ./credentials.json or point
SHEETS_CLIENT_SECRETS_PATH at it."""


def main():
    load_dotenv()

    secrets_path = Path(os.getenv('SHEETS_CLIENT_SECRETS_PATH', './credentials.json'))
    output_path = os.getenv('SHEETS_CREDENTIALS_OUT')

    print("🔐 Sheets Wizard: create a credentials string")
    print(f"📁 Using client secrets from {secrets_path}")
    print()

    if not secrets_path.exists():
        print(f"❌ {SETUP_HINT.format(path=secrets_path)}")
        return 1

    try:
        client_id, client_secret, redirect_uri = load_client_config(secrets_path)
    except (OSError, ValueError, KeyError) as e:
        print(f"❌ Cannot read {secrets_path}: {e}")
        return 1

    flow = Flow.from_client_config(
        {
            "installed": {
                "client_id": client_id,
                "client_secret": client_secret,
                "redirect_uris": [redirect_uri],
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
            }
        },
        scopes=SCOPES,
        redirect_uri=redirect_uri,
    )

    auth_url, _ = flow.authorization_url(
        prompt="consent",
        access_type="offline",
        include_granted_scopes="true"
    )

    print("🌐 Grant spreadsheet access at:")
    print(f"   {auth_url}")
    if not webbrowser.open(auth_url):
        print("⚠️  No browser available, open the link by hand.")
    print()

    auth_code = input("Code shown after granting access: ").strip()
    if not auth_code:
        print("❌ Nothing entered, aborting")
        return 1

    try:
        flow.fetch_token(code=auth_code)
    except Exception as e:
        print(f"❌ Token exchange failed: {e}")
        return 1

    blob = json.dumps(credential_blob(flow.credentials, client_id, client_secret, redirect_uri))

    if output_path:
        Path(output_path).write_text(blob)
        print(f"💾 Written to {output_path}")
    print("🔑 credentials:")
    print(blob)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
