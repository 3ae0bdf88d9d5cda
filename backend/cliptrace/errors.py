"""Error taxonomy shared by the store, the catalog client and the routes.

Every error carries the HTTP status it maps to; the handlers registered in
``main.create_app`` render them as ``{"message": ...}``.
"""


class ClipTraceError(Exception):
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(ClipTraceError):
    status_code = 400


class NotFoundError(ClipTraceError):
    status_code = 404


class ConflictError(ClipTraceError):
    status_code = 409


class PayloadTooLargeError(ClipTraceError):
    status_code = 413


class InternalError(ClipTraceError):
    status_code = 500


class StoreNotReadyError(ClipTraceError):
    status_code = 503


class UpstreamServiceError(ClipTraceError):
    """Raised by the catalog client when TMDB fails; never leaves the client."""

    status_code = 502
