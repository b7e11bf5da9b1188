# tripcheck/core/errors.py


class TripCheckError(Exception):
    """
    Base class for every error raised by the trip profitability core.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(TripCheckError):
    """Arguments rejected before any computation or network call."""


class ValidationError(InvalidInput):
    """
    User-entered form data is missing or unusable (no coordinates selected,
    non-numeric or non-positive prices). Never reaches the network layer.
    """


class SuggestionLookupFailure(TripCheckError):
    """Geocoding failed. Soft error: absorbed by the address resolver."""


class NoRouteFound(TripCheckError):
    """The directions service returned no route between the two points."""


# Name used for the same condition at the session / user level
RouteUnavailable = NoRouteFound


class ServiceUnavailable(TripCheckError):
    """Network failure, error status or malformed payload from an external service."""


class PersistenceFailure(TripCheckError):
    """The persistence collaborator rejected or failed to store a record."""
