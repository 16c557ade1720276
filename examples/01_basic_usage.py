"""
Basic usage of HTTPClientAdapter.
"""

from http_adapter import (
    AdapterConfig,
    Env,
    HTTPClientAdapter,
    LoggingConfig,
    RequestOptions,
)


def main():
    config = AdapterConfig.create(
        keep_alive_timeout=20,
        logging=LoggingConfig.create(level="DEBUG", format="colored"),
    )

    with HTTPClientAdapter(config) as adapter:
        env = Env(url="https://httpbin.org/get", request=RequestOptions(open_timeout=2))
        adapter.call(env)
        print(f"Status: {env.status}, {len(env.response_body)} bytes")

        # Same connection settings -> same client, same open connection
        adapter.call(Env(url="https://httpbin.org/headers", request=RequestOptions(open_timeout=2)))
        print(f"Cached clients: {adapter.cached_connections}")

        # A blanket timeout gets its own client
        adapter.call(Env(url="https://httpbin.org/delay/1", request=RequestOptions(timeout=5)))
        print(f"Cached clients: {adapter.cached_connections}")


if __name__ == "__main__":
    main()
