"""iCloud 会话：Cookie 认证、服务发现（validate）与 Cookie 轮换"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from .config import HMEConfig
from .constants import HME_ACTIVE_STATUS, HME_SERVICE_KEY
from .cookies import Cookie, merge_cookies, parse_cookie_header
from .errors import (
    ConfigurationError,
    ServiceInactiveError,
    ServiceMissingError,
    ServiceStatusMissingError,
)
from .headers import build_cookie_header, build_session_headers
from .models import Service, ValidateResponse, decode_response
from .transport import BaseUpstreamTransport, create_upstream_transport

logger = logging.getLogger("icloud_hme")


@dataclass(frozen=True)
class Unvalidated:
    """尚未调用 validate()，只有初始 Cookie"""

    cookies: tuple[Cookie, ...] = ()


@dataclass(frozen=True)
class Validated:
    """validate() 成功：服务目录已就绪且 Hide My Email 处于 active"""

    services: dict[str, Service] = field(default_factory=dict)
    cookies: tuple[Cookie, ...] = ()

    def service(self, key: str) -> Optional[Service]:
        return self.services.get(key)


SessionState = Union[Unvalidated, Validated]


def check_hme_service(services: dict[str, Service]) -> Service:
    """
    确认 Hide My Email 服务存在且处于 active

    Raises:
        ServiceMissingError: 目录中没有 premiummailsettings
        ServiceStatusMissingError: 服务没有 status 字段
        ServiceInactiveError: status 不是 "active"
    """
    service = services.get(HME_SERVICE_KEY)
    if service is None:
        raise ServiceMissingError(HME_SERVICE_KEY)
    if service.status is None:
        raise ServiceStatusMissingError(HME_SERVICE_KEY)
    if service.status != HME_ACTIVE_STATUS:
        raise ServiceInactiveError(HME_SERVICE_KEY, service.status)
    return service


class ICloudSession:
    """
    iCloud Web 会话

    用法:
        async with ICloudSession(parse_cookie_header(raw)) as session:
            await session.validate()
            manager = HideMyEmailManager(session)

    同一会话上并发调用 validate() 没有做同步，需由调用方保证串行。
    """

    def __init__(
        self,
        cookies: Iterable[Cookie],
        *,
        config: Optional[HMEConfig] = None,
        transport: Optional[BaseUpstreamTransport] = None,
    ):
        self.config = config or HMEConfig()
        cookies = tuple(cookies)
        # Cookie 无法作为请求头发送时立即失败
        build_cookie_header(cookies)
        self._state: SessionState = Unvalidated(cookies=cookies)
        self._headers = build_session_headers(self.config.user_agent)
        self._client = transport or create_upstream_transport(
            backend=self.config.transport_backend,
            headers=self._headers,
            timeout=self.config.timeout,
            proxy=self.config.proxy,
            trust_env=self.config.trust_env,
            impersonate=self.config.impersonate,
        )

    @classmethod
    def from_config(
        cls,
        config: HMEConfig,
        *,
        transport: Optional[BaseUpstreamTransport] = None,
    ) -> "ICloudSession":
        """根据配置中的 Cookie 字符串创建会话"""
        if not config.cookie:
            raise ConfigurationError(
                "No iCloud cookie configured, set ICLOUD_HME_COOKIE or add "
                "\"cookie\" to the config file"
            )
        return cls(parse_cookie_header(config.cookie), config=config, transport=transport)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_validated(self) -> bool:
        return isinstance(self._state, Validated)

    @property
    def cookies(self) -> tuple[Cookie, ...]:
        return self._state.cookies

    @property
    def services(self) -> dict[str, Service]:
        if isinstance(self._state, Validated):
            return self._state.services
        return {}

    @property
    def client(self) -> BaseUpstreamTransport:
        return self._client

    def cookie_header(self) -> str:
        """当前 Cookie 集合对应的 Cookie 头（每次调用实时生成）"""
        return build_cookie_header(self.cookies)

    def request_headers(self) -> dict[str, str]:
        """单次请求使用的完整认证头"""
        headers = dict(self._headers)
        headers["Cookie"] = self.cookie_header()
        return headers

    async def validate(self) -> Validated:
        """
        调用 setup 服务的 validate 接口，发现可用服务并确认 Hide My Email 已启用

        成功后替换服务目录，并把响应下发的 Cookie 合并进会话。
        失败时会话保持原状态。

        Returns:
            Validated: 新的会话状态

        Raises:
            TransportError: 上游返回 4xx/5xx
            DecodeError: 响应体结构不符
            ServiceError: Hide My Email 服务缺失、缺少状态或未启用
        """
        url = f"{self.config.setup_url.rstrip('/')}/validate"
        logger.debug("POST %s", url)

        response = await self._client.post(url, headers=self.request_headers())
        response.raise_for_error()

        body = decode_response(ValidateResponse, response.text)
        check_hme_service(body.webservices)

        rotated = response.cookies
        cookies = merge_cookies(self.cookies, rotated)
        self._state = Validated(services=dict(body.webservices), cookies=tuple(cookies))

        logger.info(
            "iCloud 会话验证成功，发现 %d 个服务，更新 Cookie: %s",
            len(body.webservices),
            ", ".join(c.name for c in rotated) or "无",
        )
        return self._state

    async def close(self) -> None:
        """关闭 HTTP 客户端"""
        await self._client.close()

    async def __aenter__(self) -> "ICloudSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
