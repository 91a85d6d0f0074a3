"""上游传输层：支持 httpx 与 curl_cffi（TLS 指纹伪装）。"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

import httpx

from .constants import DEFAULT_IMPERSONATE
from .cookies import Cookie
from .errors import TransportError

logger = logging.getLogger("icloud_hme")


TransportBackend = Literal["httpx", "curl_cffi"]


class UpstreamResponse:
    """统一响应包装，屏蔽不同 HTTP 客户端差异。"""

    def __init__(self, raw: Any):
        self.raw = raw

    @property
    def status_code(self) -> int:
        return int(getattr(self.raw, "status_code", 0))

    @property
    def is_error(self) -> bool:
        """4xx / 5xx"""
        return 400 <= self.status_code < 600

    @property
    def headers(self) -> dict[str, str]:
        headers = getattr(self.raw, "headers", {})
        try:
            return dict(headers)
        except Exception:
            return {}

    @property
    def text(self) -> str:
        value = getattr(self.raw, "text", "")
        return value() if callable(value) else str(value)

    @property
    def cookies(self) -> list[Cookie]:
        """本次响应通过 Set-Cookie 下发的 Cookie"""
        raw_cookies = getattr(self.raw, "cookies", None)
        if raw_cookies is None:
            return []
        # httpx.Cookies 与 curl_cffi 的 Cookies 都暴露底层 CookieJar
        jar = getattr(raw_cookies, "jar", None)
        if jar is not None:
            return [Cookie(name=c.name, value=c.value or "") for c in jar]
        return [Cookie(name=k, value=v or "") for k, v in dict(raw_cookies).items()]

    def raise_for_error(self) -> None:
        """4xx / 5xx 时抛出 TransportError，附带状态码和原始响应体"""
        if self.is_error:
            raise TransportError(self.status_code, self.text)


class BaseUpstreamTransport:
    """统一传输层接口。"""

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json_body: Any = None,
        timeout: Optional[float] = None,
    ) -> UpstreamResponse:
        raise NotImplementedError

    async def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> UpstreamResponse:
        return await self.request(
            "GET",
            url,
            headers=headers,
            params=params,
            timeout=timeout,
        )

    async def post(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        json_body: Any = None,
        timeout: Optional[float] = None,
    ) -> UpstreamResponse:
        return await self.request(
            "POST",
            url,
            headers=headers,
            json_body=json_body,
            timeout=timeout,
        )

    async def close(self) -> None:
        raise NotImplementedError


class HttpxTransport(BaseUpstreamTransport):
    """httpx 传输实现，客户端自带 Cookie 存储。"""

    def __init__(
        self,
        *,
        headers: Optional[dict[str, str]] = None,
        timeout: float,
        proxy: Optional[str] = None,
        trust_env: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        kwargs: dict[str, Any] = {
            "headers": headers,
            "timeout": httpx.Timeout(timeout, connect=min(10.0, timeout)),
            "follow_redirects": True,
            "trust_env": trust_env,
        }
        if proxy:
            kwargs["proxy"] = proxy
        # 测试时可注入 httpx.MockTransport
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json_body: Any = None,
        timeout: Optional[float] = None,
    ) -> UpstreamResponse:
        kwargs: dict[str, Any] = {
            "headers": headers,
            "params": params,
            "json": json_body,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        response = await self._client.request(method, url, **kwargs)
        return UpstreamResponse(response)

    async def close(self) -> None:
        await self._client.aclose()


class CurlCffiTransport(BaseUpstreamTransport):
    """curl_cffi 传输实现（支持 impersonate）。"""

    def __init__(
        self,
        *,
        headers: Optional[dict[str, str]] = None,
        timeout: float,
        proxy: Optional[str] = None,
        impersonate: str,
        session: Any = None,
    ):
        if session is None:
            from curl_cffi import requests as curl_requests

            session = curl_requests.AsyncSession(
                headers=headers,
                timeout=timeout,
                allow_redirects=True,
            )
        self._session = session
        self._proxy = proxy
        self._impersonate = impersonate

    def _build_kwargs(
        self,
        *,
        headers: Optional[dict[str, str]],
        params: Optional[dict[str, Any]],
        json_body: Any,
        timeout: Optional[float],
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "headers": headers,
            "params": params,
            "json": json_body,
            "impersonate": self._impersonate,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        if self._proxy:
            kwargs["proxy"] = self._proxy
        return kwargs

    async def _request_with_proxy_fallback(
        self,
        method: str,
        url: str,
        kwargs: dict[str, Any],
    ) -> Any:
        """兼容 curl_cffi 不同版本的 proxy/proxies 参数。"""
        try:
            return await self._session.request(method, url, **kwargs)
        except TypeError:
            if "proxy" in kwargs and kwargs["proxy"]:
                proxy = kwargs.pop("proxy")
                kwargs["proxies"] = {"http": proxy, "https": proxy}
                return await self._session.request(method, url, **kwargs)
            raise

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json_body: Any = None,
        timeout: Optional[float] = None,
    ) -> UpstreamResponse:
        kwargs = self._build_kwargs(
            headers=headers,
            params=params,
            json_body=json_body,
            timeout=timeout,
        )
        response = await self._request_with_proxy_fallback(method, url, kwargs)
        return UpstreamResponse(response)

    async def close(self) -> None:
        await self._session.close()


def create_upstream_transport(
    *,
    backend: TransportBackend = "httpx",
    headers: Optional[dict[str, str]] = None,
    timeout: float,
    proxy: Optional[str] = None,
    trust_env: bool = False,
    impersonate: str = DEFAULT_IMPERSONATE,
) -> BaseUpstreamTransport:
    """创建上游传输层实例。"""
    if backend == "curl_cffi":
        try:
            return CurlCffiTransport(
                headers=headers,
                timeout=timeout,
                proxy=proxy,
                impersonate=impersonate,
            )
        except Exception as e:
            logger.warning("curl_cffi 不可用，回退 httpx: %s", e)

    return HttpxTransport(
        headers=headers,
        timeout=timeout,
        proxy=proxy,
        trust_env=trust_env,
    )
