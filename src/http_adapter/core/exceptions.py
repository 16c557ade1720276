"""
Иерархия исключений HTTP адаптера.

Классификация:
- ClientError - ошибки выполнения запроса (транспорт, таймауты, SSL)
- ConfigurationError - невалидная конфигурация адаптера

Ошибки построения клиента (невалидный URL, битый сертификат) не
оборачиваются и доходят до вызывающего кода как есть.
"""

from typing import Optional

import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class AdapterError(Exception):
    """Базовое исключение HTTP адаптера."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ЗАПРОСА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ClientError(AdapterError):
    """
    Ошибка выполнения запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        cause: Исходное исключение библиотеки
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        self.url = url
        self.cause = cause

        full_message = message
        if url:
            full_message += f" (url: {url})"

        super().__init__(full_message)

class ConnectionFailed(ClientError):
    """
    Не удалось установить соединение.

    Примеры:
    - Connection refused
    - Address not available
    - 407 Proxy Authentication Required
    """
    pass

class TimeoutError(ClientError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout_type: Тип таймаута ('connect' или 'read')
        cause: Исходное исключение
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_type: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        self.timeout_type = timeout_type

        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout)"

        super().__init__(msg, url, cause)

class SSLError(ClientError):
    """Ошибка TLS рукопожатия или проверки сертификата."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КОНФИГУРАЦИЯ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(AdapterError, ValueError):
    """Ошибка конфигурации."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

PROXY_AUTH_REQUIRED = '407 "Proxy Authentication Required"'


def classify_requests_exception(
    exc: requests.exceptions.RequestException,
    url: Optional[str]
) -> ClientError:
    """
    Конвертировать requests.exceptions в исключения адаптера.

    Args:
        exc: Исключение из requests
        url: URL запроса

    Returns:
        Исключение адаптера; исходное доступно через ``cause``

    Examples:
        >>> exc = requests.exceptions.ConnectTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.timeout_type == "connect"
    """

    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return TimeoutError("Request timeout", url, timeout_type="connect", cause=exc)

    elif isinstance(exc, requests.exceptions.ReadTimeout):
        return TimeoutError("Request timeout", url, timeout_type="read", cause=exc)

    elif isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, cause=exc)

    elif isinstance(exc, requests.exceptions.SSLError):
        return SSLError(str(exc) or "SSL error", url, cause=exc)

    elif isinstance(exc, requests.exceptions.ProxyError):
        # urllib3 сообщает 407 только текстом ошибки
        if "407" in str(exc):
            return ConnectionFailed(PROXY_AUTH_REQUIRED, url, cause=exc)
        return ConnectionFailed("Proxy error", url, cause=exc)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionFailed("Connection failed", url, cause=exc)

    else:
        return ClientError(str(exc) or type(exc).__name__, url, cause=exc)
