"""Error types raised by the analysis pipeline and the gateway client."""


class EmptyContentError(ValueError):
    """Raised when there is nothing to analyse."""

    def __init__(self, message: str = "Content is required"):
        super().__init__(message)


class GatewayError(RuntimeError):
    """Raised when the inference gateway fails or returns an unusable payload."""

    retryable = True


class GatewayConfigError(GatewayError):
    """Raised when the gateway cannot be called because configuration is missing."""

    retryable = False


class RateLimitError(GatewayError):
    retryable = False

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class CreditsExhaustedError(GatewayError):
    retryable = False

    def __init__(self, message: str = "AI credits exhausted. Please add funds."):
        super().__init__(message)


class AnalysisFormatError(GatewayError):
    def __init__(self, message: str = "Invalid analysis format returned"):
        super().__init__(message)


class IncompleteAnalysisError(GatewayError):
    def __init__(self, message: str = "Incomplete analysis returned"):
        super().__init__(message)
