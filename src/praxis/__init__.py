__all__ = [
    # Models
    "ActionManifest",
    "ActionKind",
    "SimpleAction",
    "ParameterizedAction",
    "Parameter",
    "BoundRequest",
    "TransactionEnvelope",
    "SubmissionHandle",
    "WalletAccount",
    "NetworkId",
    "DispatchState",
    "ExecutionOutcome",
    # Resolution
    "FetchedManifest",
    "fetch_manifest",
    "NormalizedActions",
    "normalize_actions",
    "bind_action",
    "decode_locator",
    # Execution
    "ActionExecutor",
    "ActionSession",
    "LayoutProps",
    "project_layout",
    "LocalWallet",
    "RpcChainClient",
    "EngineConfig",
    # Errors
    "ActionError",
    "ManifestFetchError",
    "WalletNotConnected",
    "MissingRequiredParameter",
    "ActionRequestError",
    "SigningRejectedOrFailed",
    "ConfirmationFailure",
    "DispatchInProgress",
    # Schema
    "SchemaValidationError",
    "SchemaRegistry",
]

from .config import EngineConfig
from .errors import (
    ActionError,
    ActionRequestError,
    ConfirmationFailure,
    DispatchInProgress,
    ManifestFetchError,
    MissingRequiredParameter,
    SigningRejectedOrFailed,
    WalletNotConnected,
)
from .spec.models import (
    ActionKind,
    ActionManifest,
    BoundRequest,
    DispatchState,
    ExecutionOutcome,
    NetworkId,
    Parameter,
    ParameterizedAction,
    SimpleAction,
    SubmissionHandle,
    TransactionEnvelope,
    WalletAccount,
)
from .spec.schemas import SchemaRegistry, SchemaValidationError
from .spec.normalize import NormalizedActions, normalize_actions
from .spec.binding import bind_action
from .utils import decode_locator
from .pneuma.fetch import FetchedManifest, fetch_manifest
from .pneuma.rpc import RpcChainClient
from .sigil.eth import LocalWallet
from .engine.layout import LayoutProps, project_layout
from .engine.orchestrator import ActionExecutor
from .engine.session import ActionSession
