# src/http_adapter/core/adapter.py
from typing import Callable, Optional
import itertools
import ssl
import threading
import time
import uuid

import requests

from .config import AdapterConfig
from .client_handle import HTTPClientHandle
from .connection_cache import CacheKey, ConnectionCache
from .env import BindOptions, Env, ProxyOptions, RequestOptions, SSLOptions
from .exceptions import classify_requests_exception
from .timeouts import resolve_timeouts
from .logging import AdapterLogger
from .logging.filters import set_correlation_id, clear_correlation_id

ConfigureCallback = Callable[[HTTPClientHandle], None]

_adapter_ids = itertools.count(1)


class HTTPClientAdapter:
    """
    Адаптер между окружением запроса (Env) и HTTP клиентом на requests.

    Features:
        - Кеширование клиентов по настройкам соединения (переиспользование TCP/TLS)
        - Таймауты запроса: общий ``timeout`` или open/write/read по отдельности
        - Прокси, привязка локального сокета, TLS настройки
        - Пользовательская донастройка клиента через ``configure``
        - Трансляция ошибок requests в исключения адаптера

    Example:
        >>> adapter = HTTPClientAdapter(AdapterConfig(keep_alive_timeout=20))
        >>> env = Env(url="https://example.com", request=RequestOptions(timeout=5))
        >>> adapter.call(env).status
        200
        >>> adapter.close()
    """

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        configure: Optional[ConfigureCallback] = None,
    ):
        """
        Args:
            config: AdapterConfig instance
            configure: Вызывается с каждым новым клиентом после
                стандартной настройки. Выполняется под блокировкой кеша;
                может запрашивать клиентов для других окружений, но не для
                того окружения, клиент которого сейчас настраивается
        """
        self._config = config or AdapterConfig()
        self._configure = configure
        self._cache = ConnectionCache()

        self._ssl_cert_store: Optional[ssl.SSLContext] = None
        self._cert_store_lock = threading.Lock()

        self._logger: Optional[AdapterLogger] = None
        if self._config.logging:
            # Own logger per adapter; closing one adapter keeps the others logging
            name = f"{self._config.logging.name}.{next(_adapter_ids)}"
            self._logger = AdapterLogger(self._config.logging, name=name)

    @property
    def config(self) -> AdapterConfig:
        return self._config

    @property
    def cached_connections(self) -> int:
        """Количество клиентов в кеше."""
        return len(self._cache)

    def __enter__(self):
        """Поддержка контекстного менеджера"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ==================== Клиенты ====================

    def connection(self, env: Env) -> HTTPClientHandle:
        """
        Вернуть клиента для окружения.

        Окружения с одинаковым CacheKey получают один и тот же экземпляр
        клиента. Закешированный клиент возвращается как есть, без повторной
        настройки. Общий ``timeout`` входит в ключ, поэтому его установка
        даёт новый клиент, а не меняет уже выданный.

        Args:
            env: Окружение запроса

        Returns:
            Общий (не принадлежащий вызывающему) экземпляр клиента
        """
        key = CacheKey.from_env(env)
        created = []

        def factory() -> HTTPClientHandle:
            handle = self.build_connection(env)
            created.append(handle)
            return handle

        handle = self._cache.get_or_create(key, factory)

        if self._logger:
            self._logger.debug(
                "Client created" if created else "Client reused",
                cache_size=len(self._cache),
                connect_timeout=handle.connect_timeout,
                send_timeout=handle.send_timeout,
                receive_timeout=handle.receive_timeout,
            )

        return handle

    def build_connection(self, env: Env) -> HTTPClientHandle:
        """
        Создать и настроить новый клиент (без кеширования).

        Порядок: дефолты из конфига, прокси, локальный сокет, таймауты,
        TLS (только для https), пользовательский ``configure``.
        Ошибки настройки пробрасываются как есть.
        """
        config = self._config
        handle = HTTPClientHandle(
            defaults=config.defaults,
            keep_alive_timeout=config.keep_alive_timeout,
            pool_connections=config.pool_connections,
            pool_maxsize=config.pool_maxsize,
        )
        handle.transparent_gzip_decompression = config.transparent_gzip_decompression
        if config.ssl_timeout is not None:
            handle.ssl_config.timeout = config.ssl_timeout

        request = env.request
        if request is not None:
            if request.proxy is not None:
                self.configure_proxy(handle, request.proxy)
            if request.bind is not None:
                self.configure_socket(handle, request.bind)
            self.configure_timeouts(handle, request)

        if env.is_https and env.ssl is not None:
            self.configure_ssl(handle, env.ssl)

        self.configure_client(handle)
        return handle

    # ==================== Настройка клиента ====================

    def configure_timeouts(self, handle: HTTPClientHandle, request: RequestOptions) -> None:
        """
        Применить таймауты запроса к клиенту.

        ``timeout`` перекрывает connect/send/receive целиком; иначе
        ``open_timeout``, ``write_timeout``, ``read_timeout`` применяются
        по отдельности, а незаданные оставляют значение клиента.
        """
        timeouts = resolve_timeouts(request)

        if timeouts.connect is not None:
            handle.connect_timeout = timeouts.connect
        if timeouts.send is not None:
            handle.send_timeout = timeouts.send
        if timeouts.receive is not None:
            handle.receive_timeout = timeouts.receive

    def configure_proxy(self, handle: HTTPClientHandle, proxy: ProxyOptions) -> None:
        handle.proxy = proxy.uri
        if proxy.user and proxy.password:
            handle.set_proxy_auth(proxy.user, proxy.password)

    def configure_socket(self, handle: HTTPClientHandle, bind: BindOptions) -> None:
        handle.socket_local.host = bind.host
        handle.socket_local.port = bind.port

    def configure_ssl(self, handle: HTTPClientHandle, options: SSLOptions) -> None:
        """Перенести TLS опции окружения в ssl_config клиента."""
        ssl_config = handle.ssl_config
        ssl_config.verify_mode = self.ssl_verify_mode(options)
        ssl_config.cert_store = self.ssl_cert_store(options)

        if options.ca_file:
            ssl_config.add_trust_ca(options.ca_file)
        if options.ca_path:
            ssl_config.add_trust_ca(options.ca_path)
        if options.client_cert:
            ssl_config.client_cert = options.client_cert
        if options.client_key:
            ssl_config.client_key = options.client_key
        if options.verify_depth:
            ssl_config.verify_depth = options.verify_depth

    def configure_client(self, handle: HTTPClientHandle) -> None:
        if self._configure is not None:
            self._configure(handle)

    def ssl_cert_store(self, options: SSLOptions) -> Optional[ssl.SSLContext]:
        """
        Хранилище доверенных сертификатов для клиента.

        Явный ``cert_store`` из опций используется как есть. Иначе все
        клиенты адаптера получают один и тот же контекст с системными CA,
        чтобы не пересоздавать TLS сессии. При заданных ``ca_file`` /
        ``ca_path`` общий контекст не выдаётся: клиент загрузит их в
        собственный контекст (см. ``SSLConfig.build_context``).
        """
        if options.cert_store is not None:
            return options.cert_store
        if options.ca_file or options.ca_path:
            return None

        with self._cert_store_lock:
            if self._ssl_cert_store is None:
                self._ssl_cert_store = ssl.create_default_context()
            return self._ssl_cert_store

    @staticmethod
    def ssl_verify_mode(options: SSLOptions) -> ssl.VerifyMode:
        if options.verify_mode is not None:
            return options.verify_mode
        return ssl.CERT_REQUIRED if options.verify else ssl.CERT_NONE

    # ==================== Выполнение запроса ====================

    def call(self, env: Env) -> Env:
        """
        Выполнить запрос окружения и сохранить ответ в нём же.

        Args:
            env: Окружение запроса

        Returns:
            Тот же env с заполненными status/response_body/response_headers

        Raises:
            TimeoutError: Таймаут подключения или чтения
            SSLError: Ошибка TLS
            ConnectionFailed: Соединение не установлено (в т.ч. 407 от прокси)
            ClientError: Прочие ошибки requests
        """
        handle = self.connection(env)

        # Streaming request bodies are not supported; read them up front
        body = env.body
        if hasattr(body, 'read'):
            body = body.read()

        if self._logger:
            set_correlation_id(str(uuid.uuid4()))
            self._logger.info("Request started", method=env.method.upper(), url=env.url)

        start_time = time.time()

        try:
            try:
                response = handle.request(
                    env.method,
                    env.url,
                    body=body,
                    headers=env.request_headers,
                )
            except requests.exceptions.RequestException as exc:
                error = classify_requests_exception(exc, env.url)
                if self._logger:
                    self._logger.error(
                        "Request failed",
                        method=env.method.upper(),
                        url=env.url,
                        error_type=type(error).__name__,
                        error=str(exc),
                    )
                raise error from exc

            content = response.content

            if env.request is not None and env.request.stream_response():
                if self._logger:
                    self._logger.warning(
                        "Streaming is not supported by this adapter, "
                        "the response body is delivered in a single chunk",
                        url=env.url,
                    )
                env.request.on_data(content, len(content))

            env.save_response(
                response.status_code,
                content,
                response.headers,
                response.reason,
            )

            if self._logger:
                self._logger.info(
                    "Request completed",
                    method=env.method.upper(),
                    url=env.url,
                    status=response.status_code,
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                )

            return env
        finally:
            if self._logger:
                clear_correlation_id()

    # ==================== Управление жизненным циклом ====================

    def close(self):
        """
        Закрыть все закешированные клиенты и освободить ресурсы.

        Повторный вызов безопасен.
        """
        self._cache.close_all()

        if self._logger is not None:
            self._logger.close()
