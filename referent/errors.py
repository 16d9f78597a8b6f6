# referent/errors.py
"""
Typed extraction failures.

Every failure carries a stable ErrorCode, a friendly message for end users
(Russian, the audience of the bot) and optional technical details for logs.
"""

from enum import Enum


class ErrorCode(str, Enum):
    # article loading
    ARTICLE_NOT_FOUND = "ARTICLE_NOT_FOUND"
    ARTICLE_LOAD_FAILED = "ARTICLE_LOAD_FAILED"
    ARTICLE_TIMEOUT = "ARTICLE_TIMEOUT"
    ARTICLE_ACCESS_DENIED = "ARTICLE_ACCESS_DENIED"
    ARTICLE_PARSE_ERROR = "ARTICLE_PARSE_ERROR"
    ARTICLE_EMPTY_CONTENT = "ARTICLE_EMPTY_CONTENT"

    # validation
    INVALID_URL = "INVALID_URL"
    URL_REQUIRED = "URL_REQUIRED"
    CONTENT_REQUIRED = "CONTENT_REQUIRED"

    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES = {
    ErrorCode.ARTICLE_NOT_FOUND: "Не удалось загрузить статью по этой ссылке. Страница не найдена.",
    ErrorCode.ARTICLE_LOAD_FAILED: "Не удалось загрузить статью по этой ссылке. Сервер недоступен.",
    ErrorCode.ARTICLE_TIMEOUT: "Превышено время ожидания. Сервер статьи отвечает слишком долго.",
    ErrorCode.ARTICLE_ACCESS_DENIED: "Доступ к статье ограничен. Возможно, требуется подписка или авторизация.",
    ErrorCode.ARTICLE_PARSE_ERROR: "Не удалось обработать статью. Попробуйте другую ссылку.",
    ErrorCode.ARTICLE_EMPTY_CONTENT: "Не удалось извлечь текст статьи. Страница может быть пустой или защищённой.",
    ErrorCode.INVALID_URL: "Указан некорректный URL. Проверьте правильность ссылки.",
    ErrorCode.URL_REQUIRED: "Пожалуйста, введите URL статьи.",
    ErrorCode.CONTENT_REQUIRED: "Отсутствует контент для анализа.",
    ErrorCode.NETWORK_ERROR: "Ошибка сети. Проверьте подключение к интернету.",
    ErrorCode.UNKNOWN_ERROR: "Произошла непредвиденная ошибка. Попробуйте ещё раз.",
}


def error_code_from_status(status: int) -> ErrorCode:
    """Map an upstream HTTP status to the closest article error code."""
    if status in (401, 403):
        return ErrorCode.ARTICLE_ACCESS_DENIED
    if status == 404:
        return ErrorCode.ARTICLE_NOT_FOUND
    if status == 408:
        return ErrorCode.ARTICLE_TIMEOUT
    if 500 <= status < 600:
        return ErrorCode.ARTICLE_LOAD_FAILED
    return ErrorCode.UNKNOWN_ERROR


def error_code_from_message(message: str) -> ErrorCode:
    """Best-effort classification of a transport error by its text."""
    lower = (message or "").lower()
    if "timeout" in lower or "timed out" in lower:
        return ErrorCode.ARTICLE_TIMEOUT
    if "network" in lower or "connection" in lower or "fetch" in lower:
        return ErrorCode.NETWORK_ERROR
    return ErrorCode.UNKNOWN_ERROR


class ExtractionError(Exception):
    code = ErrorCode.UNKNOWN_ERROR
    http_status = 500
    retryable = False

    def __init__(self, details=None, code=None):
        if code is not None:
            self.code = code
        self.details = details
        super().__init__(details or self.code.value)

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self.code]

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message, "details": self.details}


class InvalidInput(ExtractionError):
    code = ErrorCode.INVALID_URL
    http_status = 400


class FetchTimeout(ExtractionError):
    code = ErrorCode.ARTICLE_TIMEOUT
    http_status = 408
    retryable = True


class NetworkError(ExtractionError):
    code = ErrorCode.NETWORK_ERROR
    http_status = 502
    retryable = True


class FetchCancelled(ExtractionError):
    """The caller gave up on the request before the page arrived."""
    code = ErrorCode.NETWORK_ERROR
    http_status = 499


class UpstreamHttpError(ExtractionError):
    def __init__(self, status: int, details=None):
        self.status = status
        self.http_status = 502 if status >= 500 else 400
        self.retryable = status in (408, 429) or status >= 500
        super().__init__(details or f"HTTP {status}", code=error_code_from_status(status))


class EmptyContent(ExtractionError):
    code = ErrorCode.ARTICLE_EMPTY_CONTENT
    http_status = 422


class InternalError(ExtractionError):
    code = ErrorCode.ARTICLE_PARSE_ERROR
    http_status = 500
