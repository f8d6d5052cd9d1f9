"""
Transaction Orchestrator - drive one action from click to confirmation.

    IDLE -> WALLET_CHECK -> REQUESTING -> AWAITING_SIGNATURE
         -> SUBMITTING -> CONFIRMING -> SUCCEEDED | FAILED

Each dispatch runs these steps strictly in order and never retries.
Every error is caught here and turned into a FAILED
``ExecutionOutcome``; nothing escapes ``dispatch``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Protocol

import httpx

from ..config import DEFAULT_COUNTERPARTY, EngineConfig
from ..errors import (
    ActionError,
    ConfirmationFailure,
    DispatchInProgress,
    MissingRequiredParameter,
    SigningRejectedOrFailed,
    WalletNotConnected,
)
from ..pneuma.fetch import request_transaction
from ..spec.binding import bind_action
from ..spec.models import (
    Action,
    DispatchState,
    ExecutionOutcome,
    NetworkId,
    SubmissionHandle,
    WalletAccount,
)

logger = logging.getLogger(__name__)


class WalletSession(Protocol):
    @property
    def account(self) -> Optional[WalletAccount]:
        ...

    @property
    def network(self) -> NetworkId:
        ...

    def sign_and_submit(self, transaction: Any) -> SubmissionHandle:
        ...


class ChainClient(Protocol):
    def wait_for_transaction(self, network: NetworkId, tx_hash: str, timeout: float = ...) -> Any:
        ...


Notifier = Callable[[ExecutionOutcome], None]

_TRANSITIONS: dict[DispatchState, tuple[DispatchState, ...]] = {
    DispatchState.IDLE: (DispatchState.WALLET_CHECK,),
    DispatchState.WALLET_CHECK: (DispatchState.REQUESTING, DispatchState.FAILED),
    DispatchState.REQUESTING: (DispatchState.AWAITING_SIGNATURE, DispatchState.FAILED),
    DispatchState.AWAITING_SIGNATURE: (DispatchState.SUBMITTING, DispatchState.FAILED),
    DispatchState.SUBMITTING: (DispatchState.CONFIRMING, DispatchState.FAILED),
    DispatchState.CONFIRMING: (DispatchState.SUCCEEDED, DispatchState.FAILED),
    DispatchState.SUCCEEDED: (DispatchState.WALLET_CHECK,),
    DispatchState.FAILED: (DispatchState.WALLET_CHECK,),
}


@dataclass
class _Flow:
    action: Action
    tx_hash: Optional[str] = None
    network: Optional[NetworkId] = None
    message: str = ""


@dataclass
class ActionExecutor:
    """
    Executes actions against a wallet session and a chain client.

    Attributes:
        wallet: Connected (or not) wallet session
        chain: Chain client used to wait for finality
        counterparty: Address sent as ``toAddress`` to action endpoints
        client: Shared httpx client for action requests
        request_timeout: Seconds allowed for the action endpoint
        confirm_timeout: Seconds allowed for confirmation
        notify: Called with every terminal outcome
        on_transition: Called with every state entered
    """

    wallet: WalletSession
    chain: ChainClient
    counterparty: str = DEFAULT_COUNTERPARTY
    client: Optional[httpx.Client] = None
    request_timeout: float = 30.0
    confirm_timeout: float = 120.0
    notify: Optional[Notifier] = None
    on_transition: Optional[Callable[[DispatchState], None]] = None
    state: DispatchState = field(default=DispatchState.IDLE, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        wallet: WalletSession,
        chain: ChainClient,
        client: Optional[httpx.Client] = None,
        **kwargs: Any,
    ) -> "ActionExecutor":
        return cls(
            wallet=wallet,
            chain=chain,
            counterparty=config.counterparty,
            client=client,
            request_timeout=config.request_timeout,
            confirm_timeout=config.confirm_timeout,
            **kwargs,
        )

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def dispatch(
        self,
        action: Action,
        values: Optional[Mapping[str, Optional[str]]] = None,
    ) -> ExecutionOutcome:
        """
        Run one action to a terminal outcome.

        Args:
            action: Simple or parameterized action
            values: Parameter values keyed by parameter name

        Returns:
            ExecutionOutcome, SUCCEEDED or FAILED
        """
        if not self._lock.acquire(blocking=False):
            error = DispatchInProgress()
            logger.warning("Dispatch of %r rejected: %s", action.label, error)
            outcome = ExecutionOutcome(
                action_label=action.label, state=DispatchState.FAILED, error=error
            )
            self._notify(outcome)
            return outcome

        try:
            flow = _Flow(action=action)
            try:
                self._run(flow, values)
            except ActionError as exc:
                return self._finish(flow, exc)
            except Exception as exc:
                logger.exception("Unexpected error handling action %r", action.label)
                return self._finish(flow, ActionError(f"Unexpected error: {exc}"))
            return self._finish(flow, None)
        finally:
            if not self.state.terminal:
                self.state = DispatchState.FAILED
            self._lock.release()

    def _run(self, flow: _Flow, values: Optional[Mapping[str, Optional[str]]]) -> None:
        self._enter(DispatchState.WALLET_CHECK)
        account = self.wallet.account
        if account is None:
            raise WalletNotConnected()

        request = bind_action(flow.action, values)

        self._enter(DispatchState.REQUESTING)
        envelope = request_transaction(
            request.url,
            from_address=account.address,
            to_address=self.counterparty,
            client=self.client,
            timeout=self.request_timeout,
        )
        flow.message = envelope.message

        self._enter(DispatchState.AWAITING_SIGNATURE)
        try:
            flow.network = self.wallet.network
            handle = self.wallet.sign_and_submit(envelope.transaction)
        except ActionError:
            raise
        except Exception as exc:
            raise SigningRejectedOrFailed(f"Wallet did not submit the transaction: {exc}") from exc
        if handle is None or not getattr(handle, "hash", None):
            raise SigningRejectedOrFailed("Wallet returned no transaction hash")

        self._enter(DispatchState.SUBMITTING)
        flow.tx_hash = handle.hash

        self._enter(DispatchState.CONFIRMING)
        try:
            self.chain.wait_for_transaction(flow.network, flow.tx_hash, timeout=self.confirm_timeout)
        except ConfirmationFailure:
            raise
        except Exception as exc:
            raise ConfirmationFailure(f"Could not confirm {flow.tx_hash}: {exc}") from exc

    def _finish(self, flow: _Flow, error: Optional[ActionError]) -> ExecutionOutcome:
        if error is None:
            self._enter(DispatchState.SUCCEEDED)
            logger.info("Action %r succeeded: %s", flow.action.label, flow.tx_hash)
        else:
            self._enter(DispatchState.FAILED)
            if isinstance(error, (WalletNotConnected, MissingRequiredParameter)):
                logger.warning("Action %r not dispatched: %s", flow.action.label, error)
            else:
                logger.error("Error handling action %r: %s", flow.action.label, error)

        outcome = ExecutionOutcome(
            action_label=flow.action.label,
            state=self.state,
            tx_hash=flow.tx_hash,
            network=flow.network,
            message=flow.message,
            error=error,
        )
        self._notify(outcome)
        return outcome

    def _enter(self, new_state: DispatchState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal dispatch transition {self.state.value} -> {new_state.value}")
        logger.debug("Dispatch state %s -> %s", self.state.value, new_state.value)
        self.state = new_state
        if self.on_transition is not None:
            try:
                self.on_transition(new_state)
            except Exception:
                logger.exception("Transition callback failed at %s", new_state.value)

    def _notify(self, outcome: ExecutionOutcome) -> None:
        if self.notify is None:
            return
        try:
            self.notify(outcome)
        except Exception:
            logger.exception("Outcome notifier failed for %r", outcome.action_label)
