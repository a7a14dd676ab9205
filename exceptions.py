"""
Custom Exception Hierarchy - Domain-specific error types

Provides typed exceptions for the failure modes of the ballot system.
All custom exceptions inherit from BallotError so the HTTP layer and CLI
can catch them with a single clause and still tell them apart.

- Exceptions are data: include context for debugging
- Validation failures never leave partial state behind
- External-service failures are degraded to text by the caller, not raised
"""

from typing import Optional, Dict, Any, Iterable


class BallotError(Exception):
    """Base exception for all ballot system errors"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

    def __str__(self):
        base_msg = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg

    @property
    def message(self) -> str:
        """Message without the context suffix"""
        return self.args[0] if self.args else ""


# ========== Validation Errors ==========


class ValidationError(BallotError):
    """Input validation failures

    Examples:
    - Missing required field (candidate name, image URL)
    - Unknown office
    - Choice that does not belong to the office
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        self.field = field
        self.value = value

        context = {}
        if field:
            context['field'] = field
        if value is not None:
            context['value'] = str(value)

        super().__init__(message, context)


class IncompleteBallotError(ValidationError):
    """Ballot submitted before every office has a selection"""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(
            "Please make a selection (or choose 'Abstain') for every position before submitting.",
            field="selections",
            value=", ".join(self.missing),
        )


# ========== Ballot State Errors ==========


class BallotStateError(BallotError):
    """Operation not allowed in the session's current state"""

    def __init__(self, message: str, state: Optional[str] = None, operation: Optional[str] = None):
        self.state = state
        self.operation = operation

        context = {}
        if state:
            context['state'] = state
        if operation:
            context['operation'] = operation

        super().__init__(message, context)


class BallotLockedError(BallotStateError):
    """Session already submitted; no further mutations accepted"""
    pass


class InvalidTransitionError(BallotStateError):
    """State machine edge that does not exist (e.g. confirm while editing)"""
    pass


# ========== Roster Errors ==========


class CandidateNotFoundError(BallotError):
    """Candidate id not present in the roster"""

    def __init__(self, candidate_id: str):
        self.candidate_id = candidate_id
        super().__init__("Candidate not found", {'candidate_id': candidate_id})


class ConfirmationRequiredError(BallotError):
    """Destructive action attempted without explicit confirmation

    Examples:
    - Removing a candidate (discards their votes)
    - Resetting the election
    """

    def __init__(self, action: str, message: Optional[str] = None):
        self.action = action
        super().__init__(
            message or f"Explicit confirmation required for {action}",
            {'action': action},
        )


# ========== Storage Errors ==========


class StorageError(BallotError):
    """Persisted state could not be read or written

    Examples:
    - Corrupt JSON under a key
    - SQLite operational error
    """

    def __init__(self, message: str, key: Optional[str] = None, original_error: Optional[Exception] = None):
        self.key = key
        self.original_error = original_error

        context = {}
        if key:
            context['key'] = key
        if original_error:
            context['original_error'] = str(original_error)

        super().__init__(message, context)


# ========== Configuration Errors ==========


class ConfigurationError(BallotError):
    """Configuration or environment errors

    Examples:
    - Missing API key
    - Invalid configuration value
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        context = {}
        if config_key:
            context['config_key'] = config_key
        super().__init__(message, context)


# ========== LLM Errors ==========


class LLMError(BallotError):
    """Insight service failures

    Examples:
    - API timeout
    - Invalid credential
    - Empty response
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.model = model
        self.original_error = original_error

        context = {}
        if model:
            context['model'] = model
        if original_error:
            context['original_error'] = str(original_error)

        super().__init__(message, context)


class InsightBusyError(LLMError):
    """An insight request is already in flight"""

    def __init__(self, model: Optional[str] = None):
        super().__init__("An insight request is already in progress", model=model)
