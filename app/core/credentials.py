"""Service-account token exchange for Google APIs.

A service account's private key signs a short JWT assertion which the OAuth2
token endpoint trades for a bearer token (RFC 7523, jwt-bearer grant). Tokens
are not cached: each call signs and exchanges afresh, so callers should scope a
token to one request.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx
import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)

DATASTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS = 3600


class CredentialError(RuntimeError):
  """Raised when a credential is unusable or the token exchange fails."""


@dataclass(frozen=True)
class ServiceAccountCredential:
  """The subset of a service-account key file needed to mint assertions."""

  client_email: str
  private_key: str
  token_uri: str = DEFAULT_TOKEN_URI
  private_key_id: str | None = None

  @classmethod
  def from_json(cls, raw: str | None) -> ServiceAccountCredential:
    """Parse a service-account JSON document."""
    if not raw:
      raise CredentialError("Service account key is missing")

    try:
      data = json.loads(raw)
    except json.JSONDecodeError as exc:
      raise CredentialError(f"Service account key is not valid JSON: {exc.msg}") from exc

    if not isinstance(data, dict):
      raise CredentialError("Service account key must be a JSON object")

    client_email = data.get("client_email")
    private_key = data.get("private_key")
    if not isinstance(client_email, str) or not client_email:
      raise CredentialError("Service account key is missing client_email")
    if not isinstance(private_key, str) or not private_key:
      raise CredentialError("Service account key is missing private_key")

    # Keys pasted into env vars often keep their newlines escaped.
    private_key = private_key.replace("\\n", "\n")
    token_uri = data.get("token_uri") or DEFAULT_TOKEN_URI
    private_key_id = data.get("private_key_id") or None
    return cls(client_email=client_email, private_key=private_key, token_uri=token_uri, private_key_id=private_key_id)


def _load_signing_key(private_key: str) -> rsa.RSAPrivateKey:
  try:
    key = serialization.load_pem_private_key(private_key.encode("utf-8"), password=None)
  except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
    raise CredentialError("Service account private key could not be loaded") from exc

  if not isinstance(key, rsa.RSAPrivateKey):
    raise CredentialError("Service account private key must be an RSA key")
  return key


def build_assertion(credential: ServiceAccountCredential, *, scope: str = DATASTORE_SCOPE, now: int | None = None) -> str:
  """Return a signed RS256 JWT asserting the service account's identity."""
  issued_at = int(time.time()) if now is None else now
  headers: dict[str, Any] = {"kid": credential.private_key_id} if credential.private_key_id else {}
  payload = {"iss": credential.client_email, "scope": scope, "aud": credential.token_uri, "iat": issued_at, "exp": issued_at + ASSERTION_LIFETIME_SECONDS}

  key = _load_signing_key(credential.private_key)
  try:
    return jwt.encode(payload, key, algorithm="RS256", headers=headers or None)
  except (jwt.PyJWTError, ValueError, TypeError) as exc:
    raise CredentialError("Failed to sign service account assertion") from exc


async def exchange_assertion(assertion: str, *, token_uri: str = DEFAULT_TOKEN_URI, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> str:
  """Trade a signed assertion for an access token at the token endpoint."""
  form = {"grant_type": JWT_BEARER_GRANT, "assertion": assertion}

  try:
    async with httpx.AsyncClient(transport=transport, timeout=timeout, trust_env=False) as client:
      response = await client.post(token_uri, data=form)
  except httpx.RequestError as exc:
    logger.error("Token exchange request failed: %s", exc)
    raise CredentialError(f"Token exchange request failed: {exc}") from exc

  if not response.is_success:
    logger.error("Token exchange failed status=%s body=%s", response.status_code, response.text)
    raise CredentialError(f"Token exchange failed: {response.status_code} - {response.text}")

  try:
    data = response.json()
  except ValueError as exc:
    raise CredentialError("Token exchange returned a non-JSON body") from exc

  token = data.get("access_token") if isinstance(data, dict) else None
  if not isinstance(token, str) or not token:
    raise CredentialError("Token exchange response did not include an access_token")
  return token


async def get_access_token(raw_credential: str | None, *, scope: str = DATASTORE_SCOPE, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> str:
  """Sign an assertion for the service account and exchange it for a bearer token."""
  credential = ServiceAccountCredential.from_json(raw_credential)
  logger.info("Requesting access token for %s", credential.client_email)
  assertion = build_assertion(credential, scope=scope)
  token = await exchange_assertion(assertion, token_uri=credential.token_uri, timeout=timeout, transport=transport)
  logger.info("Access token obtained for %s", credential.client_email)
  return token
