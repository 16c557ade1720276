"""
Tests for client caching in HTTPClientAdapter.connection().
"""

import ssl
import threading

import pytest

from http_adapter.core.adapter import HTTPClientAdapter
from http_adapter.core.client_handle import HTTPClientHandle
from http_adapter.core.env import BindOptions, Env, ProxyOptions, RequestOptions, SSLOptions


class TestConnectionCaching:
    """Handles are shared between environments with equal connection settings."""

    def test_caches_connection(self, adapter, env):
        """Unimportant options reuse the client, a blanket timeout creates a new one."""
        # before client is created
        env.ssl.client_cert = "client-cert"
        env.request.boundary = "doesnt-matter"

        client = adapter.connection(env)
        assert client.ssl_config.client_cert == "client-cert"
        assert client.connect_timeout == 60

        # cached: no connection-relevant option changed
        client2 = adapter.connection(env)
        assert client2 is client
        assert client2.ssl_config.client_cert == "client-cert"
        assert client2.connect_timeout == 60

        # blanket timeout is part of the cache key
        env.request.timeout = 5
        client3 = adapter.connection(env)
        assert client3 is not client2
        assert client3.ssl_config.client_cert == "client-cert"
        assert client3.connect_timeout == 5

    def test_returns_handle_instance(self, adapter, env):
        assert isinstance(adapter.connection(env), HTTPClientHandle)

    def test_equal_environments_share_handle(self, adapter, url):
        """Two distinct Env objects with equal settings get the same handle."""
        env1 = Env(url=url, request=RequestOptions(open_timeout=3))
        env2 = Env(url=url, method="post", body=b"data",
                   request=RequestOptions(open_timeout=3, boundary="xyz"))

        assert adapter.connection(env1) is adapter.connection(env2)

    def test_url_is_not_part_of_key(self, adapter):
        env1 = Env(url="https://a.example.com/one")
        env2 = Env(url="https://b.example.com/two")

        assert adapter.connection(env1) is adapter.connection(env2)

    def test_timeout_vs_default_gives_distinct_handles(self, adapter, url):
        default_env = Env(url=url)
        timeout_env = Env(url=url, request=RequestOptions(timeout=5))

        assert adapter.connection(default_env) is not adapter.connection(timeout_env)

    def test_cached_handle_is_not_reconfigured(self, adapter, env):
        """A cache hit returns the handle unchanged."""
        client = adapter.connection(env)
        client.connect_timeout = 42

        assert adapter.connection(env).connect_timeout == 42

    def test_non_key_fields_do_not_invalidate(self, adapter, env):
        client = adapter.connection(env)

        env.request.boundary = "other"
        env.request.context["trace"] = "abc"
        env.request.on_data = lambda chunk, size: None
        env.request_headers["X-Test"] = "1"
        env.method = "put"

        assert adapter.connection(env) is client
        assert adapter.cached_connections == 1

    @pytest.mark.parametrize("mutate", [
        lambda env: setattr(env.request, "open_timeout", 1),
        lambda env: setattr(env.request, "read_timeout", 1),
        lambda env: setattr(env.request, "write_timeout", 1),
        lambda env: setattr(env.request, "proxy", ProxyOptions(uri="http://proxy.local:3128")),
        lambda env: setattr(env.request, "bind", BindOptions(host="127.0.0.1")),
        lambda env: setattr(env.ssl, "verify", False),
        lambda env: setattr(env.ssl, "ca_file", "/etc/ssl/ca.pem"),
        lambda env: setattr(env.ssl, "client_key", "client.key"),
    ])
    def test_key_fields_produce_new_handle(self, adapter, env, mutate):
        client = adapter.connection(env)

        mutate(env)

        assert adapter.connection(env) is not client
        assert adapter.cached_connections == 2

    def test_reverting_key_field_returns_original_handle(self, adapter, env):
        client = adapter.connection(env)

        env.request.timeout = 5
        timeout_client = adapter.connection(env)
        env.request.timeout = None

        assert adapter.connection(env) is client
        assert timeout_client is not client

    def test_separate_adapters_do_not_share_handles(self, env):
        with HTTPClientAdapter() as first, HTTPClientAdapter() as second:
            assert first.connection(env) is not second.connection(env)

    def test_construction_error_propagates_and_is_not_cached(self, env):
        """Errors raised while building a client reach the caller unchanged."""
        calls = []

        def broken(client):
            calls.append(client)
            raise ssl.SSLError("bad client certificate")

        adapter = HTTPClientAdapter(configure=broken)

        with pytest.raises(ssl.SSLError, match="bad client certificate"):
            adapter.connection(env)
        with pytest.raises(ssl.SSLError):
            adapter.connection(env)

        assert len(calls) == 2
        assert adapter.cached_connections == 0

    def test_env_without_request_options(self, adapter, url):
        client = adapter.connection(Env(url=url, request=None))

        assert (client.connect_timeout, client.send_timeout, client.receive_timeout) == (60, 120, 60)
        assert adapter.connection(Env(url=url, request=None)) is client
        assert adapter.connection(Env(url=url)) is client

    def test_configure_callback_may_request_other_handles(self, url):
        """A configure callback can look up a handle for another environment."""
        other_env = Env(url=url, request=RequestOptions(timeout=3))
        nested = []

        def configure(client):
            if nested:
                return
            nested.append(None)
            nested.append(adapter.connection(other_env))

        adapter = HTTPClientAdapter(configure=configure)
        client = adapter.connection(Env(url=url))

        assert nested[1] is not client
        assert nested[1].receive_timeout == 3
        assert adapter.connection(other_env) is nested[1]
        assert adapter.cached_connections == 2
        adapter.close()

    def test_close_empties_cache(self, adapter, env):
        client = adapter.connection(env)

        adapter.close()

        assert adapter.cached_connections == 0
        assert adapter.connection(env) is not client


class TestConnectionCachingThreadSafety:
    """Concurrent lookups for one key construct a single handle."""

    def test_concurrent_lookups_share_handle(self, url):
        built = []
        start = threading.Barrier(8)

        adapter = HTTPClientAdapter(configure=built.append)
        results = []
        results_lock = threading.Lock()

        def lookup():
            start.wait()
            handle = adapter.connection(Env(url=url, request=RequestOptions(timeout=5)))
            with results_lock:
                results.append(handle)

        threads = [threading.Thread(target=lookup) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(built) == 1
        assert len(results) == 8
        assert all(handle is results[0] for handle in results)

        adapter.close()
