class StoreError(Exception):
    """Base class for failures the API reports back to the caller."""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidInput(StoreError):
    status_code = 400


class NotFound(StoreError):
    status_code = 404


class PersistFailure(StoreError):
    status_code = 500
