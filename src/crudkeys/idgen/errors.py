"""Identifier generation exceptions."""


class GenerationError(RuntimeError):
    """Base class for identifier generation errors."""


class GenerationExhausted(GenerationError):
    """
    Raised when no unused identifier could be produced within policy limits.

    Either the retry budget of a random generator ran out, or a counter
    generator reached the top of its value range.
    """

    def __init__(self, collection: str, attempts: int, reason: str = None):
        self.collection = collection
        self.attempts = attempts
        message = f"Could not generate an identifier for {collection} after {attempts} attempts"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
