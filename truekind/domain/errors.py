# truekind/domain/errors.py


class StoreError(Exception):
    """Base for errors that reach the client as {error, code}."""

    status_code = 400

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.message = message
        self.code = code


class InvalidRequest(StoreError, ValueError):
    status_code = 400


class Conflict(StoreError):
    status_code = 400


class AuthenticationRequired(StoreError):
    status_code = 401

    def __init__(self, message: str = "Authentication required", code: str = "AUTHENTICATION_REQUIRED"):
        super().__init__(message, code)


class Forbidden(StoreError, PermissionError):
    status_code = 403


class NotFound(StoreError, LookupError):
    status_code = 404
