"""Exception types shared across ChartGenie."""


class InputValidationError(ValueError):
    """Raised when a request is rejected before any generation attempt."""

    pass


class LLMCallError(RuntimeError):
    """Raised when the LLM provider cannot produce a completion."""

    pass
