"""
Система конфигурации для HTTP адаптера.

Все конфиги immutable (frozen dataclasses) для потокобезопасности.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT DEFAULTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientDefaults:
    """
    Дефолтные таймауты нового клиента (сек).

    Применяются к каждому созданному клиенту до того, как адаптер
    накладывает таймауты запроса.

    Args:
        connect: Таймаут подключения
        send: Таймаут отправки тела запроса
        receive: Таймаут чтения ответа

    Examples:
        >>> ClientDefaults()
        ClientDefaults(connect=60, send=120, receive=60)
    """
    connect: float = 60
    send: float = 120
    receive: float = 60

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.send <= 0:
            raise ValueError("send timeout must be positive")
        if self.receive <= 0:
            raise ValueError("receive timeout must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class AdapterConfig:
    """
    Главная конфигурация HTTPClientAdapter.

    Заменяет блок настройки клиента: перечисляет всё, что адаптер
    выставляет на новом клиенте при его создании.

    Args:
        defaults: Дефолтные таймауты клиента
        keep_alive_timeout: Сколько держать idle соединение (сек)
        ssl_timeout: Таймаут TLS сессии (сек, опционально)
        transparent_gzip_decompression: Распаковывать gzip/deflate ответы
        pool_connections: Количество connection pools для кеширования
        pool_maxsize: Максимум соединений в пуле
        logging: Конфигурация логирования (None = без логов)

    Examples:
        >>> AdapterConfig(keep_alive_timeout=20, ssl_timeout=25)
        >>> AdapterConfig.create(connect_timeout=5, pool_maxsize=20)
    """
    defaults: ClientDefaults = field(default_factory=ClientDefaults)
    keep_alive_timeout: float = 15
    ssl_timeout: Optional[float] = None
    transparent_gzip_decompression: bool = True
    pool_connections: int = 10
    pool_maxsize: int = 10
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация."""
        if self.keep_alive_timeout <= 0:
            raise ValueError("keep_alive_timeout must be positive")
        if self.ssl_timeout is not None and self.ssl_timeout <= 0:
            raise ValueError("ssl_timeout must be positive")
        if self.pool_connections <= 0:
            raise ValueError("pool_connections must be positive")
        if self.pool_maxsize <= 0:
            raise ValueError("pool_maxsize must be positive")

    @classmethod
    def create(
        cls,
        connect_timeout: Optional[float] = None,
        send_timeout: Optional[float] = None,
        receive_timeout: Optional[float] = None,
        keep_alive_timeout: float = 15,
        ssl_timeout: Optional[float] = None,
        transparent_gzip_decompression: bool = True,
        pool_connections: Optional[int] = None,
        pool_maxsize: Optional[int] = None,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'AdapterConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            connect_timeout: Дефолтный таймаут подключения
            send_timeout: Дефолтный таймаут отправки
            receive_timeout: Дефолтный таймаут чтения
            keep_alive_timeout: Keep-alive таймаут
            ssl_timeout: Таймаут TLS сессии
            transparent_gzip_decompression: Распаковывать сжатые ответы
            pool_connections: Количество connection pools
            pool_maxsize: Максимальный размер connection pool
            logging: Конфигурация логирования

        Returns:
            AdapterConfig instance

        Examples:
            >>> config = AdapterConfig.create(connect_timeout=10)
            >>> config.defaults.send
            120
        """
        defaults_kwargs = {}
        if connect_timeout is not None:
            defaults_kwargs['connect'] = connect_timeout
        if send_timeout is not None:
            defaults_kwargs['send'] = send_timeout
        if receive_timeout is not None:
            defaults_kwargs['receive'] = receive_timeout

        pool_kwargs = {}
        if pool_connections is not None:
            pool_kwargs['pool_connections'] = pool_connections
        if pool_maxsize is not None:
            pool_kwargs['pool_maxsize'] = pool_maxsize

        return cls(
            defaults=ClientDefaults(**defaults_kwargs),
            keep_alive_timeout=keep_alive_timeout,
            ssl_timeout=ssl_timeout,
            transparent_gzip_decompression=transparent_gzip_decompression,
            logging=logging,
            **pool_kwargs
        )

    def with_defaults(self, defaults: ClientDefaults) -> 'AdapterConfig':
        """
        Создать новый конфиг с другими дефолтными таймаутами.

        Example:
            >>> new_config = config.with_defaults(ClientDefaults(connect=5))
        """
        return replace(self, defaults=defaults)
