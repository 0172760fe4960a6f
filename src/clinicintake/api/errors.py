class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class ValidationError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("INVALID_INPUT", message, 422, details)


class NotFoundError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("NOT_FOUND", message, 404, details)


class ConflictError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("CONFLICT", message, 409, details)


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Unauthorized", details: dict = None):
        super().__init__("UNAUTHORIZED", message, 401, details)


class DownstreamError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("DOWNSTREAM_ERROR", message, 502, details)


class ServiceUnavailableError(APIError):
    def __init__(self, code: str, message: str, details: dict = None):
        super().__init__(code, message, 503, details)


# Domain-specific
class PatientNotFoundError(NotFoundError):
    def __init__(self, patient_id: str):
        super().__init__(f"Patient not found ({patient_id})", {"patient_id": patient_id})


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: str):
        super().__init__(f"Check-in session not found ({session_id})", {"session_id": session_id})


class ReportNotFoundError(NotFoundError):
    def __init__(self, key: str):
        super().__init__(f"Report not found ({key})", {"key": key})
