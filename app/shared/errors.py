# app/shared/errors.py
"""Domain error taxonomy. Each error knows the HTTP status it maps to."""


class MemoAppError(Exception):
    status_code: int = 500
    default_message: str = "요청을 처리하는 중 오류가 발생했습니다."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MemoAppError):
    """Missing, empty or malformed request input."""
    status_code = 400
    default_message = "잘못된 요청입니다."


class GenerationError(MemoAppError):
    """The generation endpoint call itself failed."""
    status_code = 500
    default_message = "메모 요약 생성 중 오류가 발생했습니다."


class PersistenceError(MemoAppError):
    """A store operation failed."""
    status_code = 500
    default_message = "메모 저장소 처리 중 오류가 발생했습니다."


class MemoNotFoundError(PersistenceError):
    status_code = 404
    default_message = "메모를 찾을 수 없습니다."

    def __init__(self, memo_id: str):
        self.memo_id = memo_id
        super().__init__(f"메모를 찾을 수 없습니다: {memo_id}")


class ConfigurationError(MemoAppError):
    """Required configuration (e.g. the Gemini credential) is missing."""
