"""
secret_poker.errors — Custom exception classes
==============================================

Defines the exception hierarchy for the orchestration layer.
Each exception stores full context for structured logging. Nothing in
the package catches one of these and carries on: they are always
reported to the immediate caller.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class SecretPokerError(Exception):
    """Base exception for all secret_poker errors."""

    error_type = "SECRET_POKER_ERROR"

    def context(self) -> Dict[str, Any]:
        return {}

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context(),
        )


class ConfigurationError(SecretPokerError):
    """Raised when the contract descriptor or settings are missing or invalid."""

    error_type = "CONFIGURATION_ERROR"

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)

    def context(self) -> Dict[str, Any]:
        return {"path": self.path}


class SigningError(SecretPokerError):
    """Raised when the signer refuses or cannot sign a payload."""

    error_type = "SIGNING_ERROR"

    def __init__(self, signer_address: str, reason: str):
        self.signer_address = signer_address
        self.reason = reason
        super().__init__(f"Signer {signer_address} failed to sign: {reason}")

    def context(self) -> Dict[str, Any]:
        return {"signer_address": self.signer_address, "reason": self.reason}


class InvalidActionError(SecretPokerError):
    """Raised when an action cannot be built from the given input."""

    error_type = "INVALID_ACTION"

    def __init__(self, action: str, validation_errors: List[str]):
        self.action = action
        self.validation_errors = validation_errors
        super().__init__(
            f"Invalid '{action}' action: {validation_errors}"
        )

    def context(self) -> Dict[str, Any]:
        return {"action": self.action, "validation_errors": self.validation_errors}


class IllegalTransitionError(SecretPokerError):
    """Raised when an action is not legal from the table's current phase."""

    error_type = "ILLEGAL_TRANSITION"

    def __init__(self, table_id: Optional[int], action: str, phase: str):
        self.table_id = table_id
        self.action = action
        self.phase = phase
        super().__init__(
            f"Action '{action}' is not allowed for table {table_id} in phase {phase}"
        )

    def context(self) -> Dict[str, Any]:
        return {"table_id": self.table_id, "action": self.action, "phase": self.phase}


class TransportError(SecretPokerError):
    """Raised on network or node failure. Not a rejected transaction."""

    error_type = "TRANSPORT_ERROR"


class OutcomeUnknownError(SecretPokerError):
    """
    Raised when a submission timed out after it may have been broadcast.

    The transaction may or may not have been included. Callers must
    re-query contract state before doing anything irreversible.
    """

    error_type = "OUTCOME_UNKNOWN"

    def __init__(self, sender: str, action_count: int):
        self.sender = sender
        self.action_count = action_count
        super().__init__(
            f"Outcome of submission from {sender} ({action_count} action(s)) is unknown"
        )

    def context(self) -> Dict[str, Any]:
        return {"sender": self.sender, "action_count": self.action_count}


class OutOfGasError(SecretPokerError):
    """Raised when the ledger rejected a submission for exceeding its gas limit."""

    error_type = "OUT_OF_GAS"

    def __init__(self, gas_limit: int, gas_used: Optional[int] = None,
                 tx_hash: Optional[str] = None):
        self.gas_limit = gas_limit
        self.gas_used = gas_used
        self.tx_hash = tx_hash
        super().__init__(
            f"Out of gas: limit {gas_limit}, used {gas_used if gas_used is not None else 'unknown'}"
        )

    def context(self) -> Dict[str, Any]:
        return {"gas_limit": self.gas_limit, "gas_used": self.gas_used, "tx_hash": self.tx_hash}


class ContractRejectedError(SecretPokerError):
    """Raised when a settled transaction carries a non-zero result code."""

    error_type = "CONTRACT_REJECTED"

    def __init__(self, code: int, raw_log: str, tx_hash: Optional[str] = None):
        self.code = code
        self.raw_log = raw_log
        self.tx_hash = tx_hash
        super().__init__(f"Transaction rejected with code {code}: {raw_log}")

    def context(self) -> Dict[str, Any]:
        return {"code": self.code, "raw_log": self.raw_log, "tx_hash": self.tx_hash}


class MalformedResponseError(SecretPokerError):
    """Raised when a settlement lacks the contract's structured reply."""

    error_type = "MALFORMED_RESPONSE"

    def __init__(self, reason: str, tx_hash: Optional[str] = None,
                 raw_value: Optional[str] = None):
        self.reason = reason
        self.tx_hash = tx_hash
        self.raw_value = raw_value
        super().__init__(f"Malformed contract response: {reason}")

    def context(self) -> Dict[str, Any]:
        return {"tx_hash": self.tx_hash, "raw_value": self.raw_value}


class StaleStateError(SecretPokerError):
    """Raised when the local tracker disagrees with the contract's table state."""

    error_type = "STALE_STATE"

    def __init__(self, table_id: int, local: Dict[str, Any], remote: Dict[str, Any]):
        self.table_id = table_id
        self.local = local
        self.remote = remote
        super().__init__(
            f"Table {table_id} is stale: local {local}, contract {remote}"
        )

    def context(self) -> Dict[str, Any]:
        return {"table_id": self.table_id, "local": self.local, "remote": self.remote}


class PermitRevokedError(SecretPokerError):
    """Raised when a locally revoked permit is used for a query."""

    error_type = "PERMIT_REVOKED"

    def __init__(self, permit_name: str, signer_address: str):
        self.permit_name = permit_name
        self.signer_address = signer_address
        super().__init__(
            f"Permit '{permit_name}' of {signer_address} has been revoked"
        )

    def context(self) -> Dict[str, Any]:
        return {"permit_name": self.permit_name, "signer_address": self.signer_address}


def _format_error_block(
    error_type: str,
    message: str,
    context: Dict[str, Any],
) -> str:
    """Format a structured error block for terminal and file logs."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " SECRET POKER ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
