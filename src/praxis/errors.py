"""
Error taxonomy for action resolution and execution.

Every error carries an ``exit_code`` so the CLI can map a failed
dispatch straight onto a process exit status.
"""

from __future__ import annotations

from typing import Iterable


class ActionError(RuntimeError):
    exit_code: int = 1


class ManifestFetchError(ActionError):
    exit_code = 2


class WalletNotConnected(ActionError):
    exit_code = 3

    def __init__(self, message: str = "Please connect your wallet before making a transaction.") -> None:
        super().__init__(message)


class MissingRequiredParameter(ActionError):
    exit_code = 4

    def __init__(self, missing: Iterable[tuple[str, str]]) -> None:
        pairs = list(missing)
        # (name, label) per parameter, in declaration order
        self.missing = [name for name, _ in pairs]
        self.labels = [label for _, label in pairs]
        super().__init__(
            "Missing required parameter(s): " + ", ".join(self.missing)
        )


class ActionRequestError(ActionError):
    exit_code = 5


class SigningRejectedOrFailed(ActionError):
    exit_code = 6


class ConfirmationFailure(ActionError):
    exit_code = 7


class DispatchInProgress(ActionError):
    exit_code = 8

    def __init__(self, message: str = "Another action is still being executed.") -> None:
        super().__init__(message)
