"""
Domain errors raised by the helpers and rendered as JSON by app.py.
Each kind maps to one HTTP status and a user-facing message.
"""


class ServiceError(Exception):
    """Base class for expected, user-visible failures"""
    status_code = 400
    kind = 'error'

    def __init__(self, message, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self):
        payload = {'success': False, 'error': self.kind, 'message': self.message}
        payload.update(self.extra)
        return payload


class InvalidInput(ServiceError):
    status_code = 400
    kind = 'invalid_input'


class NotFound(ServiceError):
    status_code = 404
    kind = 'not_found'


class QuotaExceeded(ServiceError):
    status_code = 403
    kind = 'quota_exceeded'

    def __init__(self, message, **extra):
        extra.setdefault('limitReached', True)
        super().__init__(message, **extra)


class AlreadyOngoing(ServiceError):
    status_code = 409
    kind = 'already_ongoing'


class AlreadyAttempted(ServiceError):
    status_code = 409
    kind = 'already_attempted'


class NotAttempted(ServiceError):
    status_code = 400
    kind = 'not_attempted'


class MockTestNotStarted(ServiceError):
    status_code = 409
    kind = 'mock_test_not_started'


class SubmissionWindowClosed(ServiceError):
    status_code = 409
    kind = 'submission_window_closed'


class InsufficientQuestions(ServiceError):
    status_code = 404
    kind = 'insufficient_questions'


class ConcurrentUpdate(ServiceError):
    status_code = 409
    kind = 'concurrent_update'
