"""Tests for HTTP client construction."""

import httpx
import pytest

from alerta_probe.client import TLSConfig, create_client, effective_timeout
from alerta_probe.errors import ConfigurationError, TLSConfigError


class TestTimeoutFloor:
    """Sub-second timeouts fall back to the 5s default."""

    @pytest.mark.parametrize("configured", [0.2, 0, None])
    def test_below_one_second_uses_default(self, configured) -> None:
        assert effective_timeout(configured) == 5.0

    def test_keeps_sane_values(self) -> None:
        assert effective_timeout(1) == 1.0
        assert effective_timeout(30) == 30.0

    def test_client_uses_floor(self) -> None:
        client = create_client(timeout=0.2)
        assert client.timeout.read == 5.0
        assert client.timeout.connect == 5.0


class TestTLSConfig:
    """Tests for TLS material handling."""

    def test_missing_ca_file_is_config_error(self, tmp_path) -> None:
        with pytest.raises(TLSConfigError):
            TLSConfig(ca=str(tmp_path / "missing.pem")).ssl_context()

    def test_malformed_cert_is_config_error(self, tmp_path) -> None:
        cert = tmp_path / "cert.pem"
        cert.write_text("not a certificate")
        with pytest.raises(TLSConfigError):
            TLSConfig(cert=str(cert)).ssl_context()

    def test_key_without_cert(self) -> None:
        with pytest.raises(TLSConfigError):
            TLSConfig(key="key.pem").ssl_context()

    def test_insecure_skip_verify(self) -> None:
        import ssl

        ctx = TLSConfig(insecure_skip_verify=True).ssl_context()
        assert ctx.verify_mode == ssl.CERT_NONE
        assert ctx.check_hostname is False


class TestRequestDecoration:
    """Headers and credentials are attached to outgoing requests."""

    async def _capture(self, **kwargs) -> httpx.Request:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        async with create_client(transport=httpx.MockTransport(handler), **kwargs) as client:
            await client.get("http://alerta/management/status")
        return seen[0]

    async def test_static_headers(self) -> None:
        request = await self._capture(headers={"X-Env": "prod"})
        assert request.headers["x-env"] == "prod"

    async def test_basic_auth(self) -> None:
        request = await self._capture(username="admin", password="secret")
        assert request.headers["authorization"] == "Basic YWRtaW46c2VjcmV0"

    async def test_bearer_api_key(self) -> None:
        request = await self._capture(api_key="abc123")
        assert request.headers["authorization"] == "Bearer abc123"

    def test_basic_and_bearer_are_exclusive(self) -> None:
        with pytest.raises(ConfigurationError):
            create_client(username="admin", api_key="abc123")
