"""
Manifest session - owns the resolved actions for one source locator.

The snapshot (manifest, partitions, layout) is replaced as a whole on
every ``load``; readers see either a complete snapshot or ``None``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import httpx

from ..config import EngineConfig
from ..errors import ActionError, ManifestFetchError
from ..pneuma.fetch import fetch_manifest
from ..pneuma.rpc import RpcChainClient
from ..sigil.eth import LocalWallet
from ..spec.models import Action, ActionManifest, ExecutionOutcome
from ..spec.normalize import NormalizedActions
from ..utils import decode_locator
from .layout import LayoutProps, project_layout
from .orchestrator import ActionExecutor, WalletSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    locator: str
    url: str
    manifest: ActionManifest
    origin: str
    actions: NormalizedActions
    layout: LayoutProps


class ActionSession:
    """
    Resolve a locator into actions and dispatch them.

    Args:
        executor: Orchestrator used for every dispatch
        client: httpx client shared by manifest fetch and action
            requests; one is created (and owned) when omitted
        request_timeout: Seconds allowed for the manifest fetch
    """

    def __init__(
        self,
        executor: ActionExecutor,
        client: Optional[httpx.Client] = None,
        request_timeout: float = 30.0,
    ) -> None:
        self._owns_client = client is None
        self.client = client or httpx.Client(follow_redirects=True)
        self.executor = executor
        if self.executor.client is None:
            self.executor.client = self.client
        self.request_timeout = request_timeout
        self.snapshot: Optional[Snapshot] = None
        self.last_error: Optional[ActionError] = None

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        wallet: Optional[WalletSession] = None,
        **executor_kwargs: Any,
    ) -> "ActionSession":
        """Wire a session with a local wallet and a JSON-RPC chain client."""
        client = httpx.Client(follow_redirects=True)
        if wallet is None:
            wallet = LocalWallet.from_env(config.network, client=client)
        chain = RpcChainClient(client=client, poll_interval=config.poll_interval)
        executor = ActionExecutor.from_config(config, wallet, chain, client=client, **executor_kwargs)
        session = cls(executor, client=client, request_timeout=config.request_timeout)
        session._owns_client = True
        return session

    def __enter__(self) -> "ActionSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    @property
    def layout(self) -> Optional[LayoutProps]:
        return self.snapshot.layout if self.snapshot else None

    @property
    def actions(self) -> Optional[NormalizedActions]:
        return self.snapshot.actions if self.snapshot else None

    def load(self, locator: str) -> Optional[LayoutProps]:
        """
        Fetch and project the manifest a locator points at.

        Returns:
            The new layout, or ``None`` when the manifest could not be
            resolved (see ``last_error``)
        """
        self.snapshot = None
        self.last_error = None
        url = decode_locator(locator)

        try:
            fetched = fetch_manifest(url, client=self.client, timeout=self.request_timeout)
        except ManifestFetchError as exc:
            logger.error("Error fetching API data: %s", exc)
            self.last_error = exc
            return None

        actions = fetched.actions
        layout = project_layout(fetched.manifest, fetched.origin, self.dispatch, actions=actions)
        self.snapshot = Snapshot(
            locator=locator,
            url=url,
            manifest=fetched.manifest,
            origin=fetched.origin,
            actions=actions,
            layout=layout,
        )
        logger.info("Loaded %d action(s) from %s", len(actions), url)
        return layout

    def find_action(self, selector: Union[str, int]) -> Action:
        """
        Look up an action by exact label or by its position in the
        layout order (simple actions first, then parameterized ones).

        Raises:
            LookupError: If no manifest is loaded or nothing matches
        """
        if self.snapshot is None:
            raise LookupError("No manifest loaded")

        ordered = list(self.snapshot.actions)
        for action in ordered:
            if action.label == selector:
                return action

        try:
            index = int(selector)
        except (TypeError, ValueError):
            raise LookupError(f"No action labelled {selector!r}") from None
        if not 0 <= index < len(ordered):
            raise LookupError(f"Action index {index} out of range (0-{len(ordered) - 1})")
        return ordered[index]

    def dispatch(
        self,
        action: Action,
        values: Optional[Mapping[str, Optional[str]]] = None,
    ) -> ExecutionOutcome:
        return self.executor.dispatch(action, values)
