"""Custom exceptions for quote and offer lifecycle transitions."""


class TransitionError(Exception):
    """Raised inside a transition's transaction to roll it back."""

    def __init__(self, message, error_code="invalid_transition"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class OfferNotAvailableError(TransitionError):
    """Raised when a carrier request is not in a state that allows the operation."""

    def __init__(self, message):
        super().__init__(message, error_code="offer_not_available")


class TransportRequestClosedError(TransitionError):
    """Raised when the transport request no longer accepts offers."""

    def __init__(self, message):
        super().__init__(message, error_code="transport_request_closed")
