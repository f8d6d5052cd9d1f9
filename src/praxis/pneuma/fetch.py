"""
Manifest Fetcher and action endpoint requests.

Both calls go through one ``httpx.Client`` owned by the manifest
session, so cookies set while fetching the manifest are sent again
when an action is posted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..errors import ActionRequestError, ManifestFetchError
from ..spec.models import ActionManifest, SchemaValidationError, TransactionEnvelope
from ..spec.normalize import NormalizedActions, normalize_actions
from ..utils import is_absolute_url, origin_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedManifest:
    manifest: ActionManifest
    origin: str
    actions: NormalizedActions


def fetch_manifest(
    url: str,
    client: Optional[httpx.Client] = None,
    timeout: float = 30,
) -> FetchedManifest:
    """
    Retrieve and parse an action manifest.

    Args:
        url: Absolute manifest URL
        client: Shared httpx client (a short-lived one is used otherwise)
        timeout: Request timeout in seconds

    Returns:
        FetchedManifest with the parsed manifest, its normalized actions
        and the URL origin

    Raises:
        ManifestFetchError: On a bad URL, network error, non-2xx status,
            invalid JSON, a payload of the wrong shape, or malformed actions
    """
    if not is_absolute_url(url):
        raise ManifestFetchError(f"Manifest URL must be absolute: {url!r}")

    try:
        if client is not None:
            response = client.get(url, timeout=timeout)
        else:
            with httpx.Client(timeout=timeout, follow_redirects=True) as short_lived:
                response = short_lived.get(url)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise ManifestFetchError(f"Failed to fetch manifest {url}: {exc}") from exc
    except ValueError as exc:
        raise ManifestFetchError(f"Manifest at {url} is not valid JSON: {exc}") from exc

    try:
        manifest = ActionManifest.from_dict(payload)
    except SchemaValidationError as exc:
        details = "; ".join(exc.errors)
        raise ManifestFetchError(f"Manifest at {url} has an invalid shape: {details}") from exc

    try:
        actions = normalize_actions(manifest)
    except ValueError as exc:
        raise ManifestFetchError(f"Manifest at {url} has invalid actions: {exc}") from exc

    return FetchedManifest(manifest=manifest, origin=origin_of(url), actions=actions)


def request_transaction(
    url: str,
    from_address: str,
    to_address: str,
    client: Optional[httpx.Client] = None,
    timeout: float = 30,
) -> TransactionEnvelope:
    """
    POST the caller's address to an action endpoint and read back the
    unsigned transaction.

    Raises:
        ActionRequestError: On network error, non-2xx status, non-JSON
            body, or a body without a ``transaction`` field
    """
    body = {"fromAddress": from_address, "toAddress": to_address}
    headers = {"Content-Type": "application/json"}

    try:
        if client is not None:
            response = client.post(url, json=body, headers=headers, timeout=timeout)
        else:
            with httpx.Client(timeout=timeout) as short_lived:
                response = short_lived.post(url, json=body, headers=headers)
        response.raise_for_status()
        result: Any = response.json()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise ActionRequestError(f"Action request to {url} failed: {exc}") from exc
    except ValueError as exc:
        raise ActionRequestError(f"Action endpoint {url} returned non-JSON body") from exc

    if not isinstance(result, dict) or result.get("transaction") is None:
        raise ActionRequestError(f"Action endpoint {url} returned no transaction")

    message = result.get("message") or ""
    return TransactionEnvelope(transaction=result["transaction"], message=str(message))
