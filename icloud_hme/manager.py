"""Hide My Email 地址管理：生成、保留、列出"""

import logging

from .constants import HME_GENERATE_PATH, HME_LIST_PATH, HME_RESERVE_PATH, HME_SERVICE_KEY
from .errors import ClaimRejectedError, MissingBaseURLError, SessionNotValidatedError
from .models import (
    ClaimPayload,
    GenerateResponse,
    HMEListResult,
    HMEReserveResult,
    ListResponse,
    ReserveResponse,
    decode_response,
)
from .session import ICloudSession, Validated
from .transport import UpstreamResponse

logger = logging.getLogger("icloud_hme")


class HideMyEmailManager:
    """
    基于已验证会话的 Hide My Email 客户端

    构造时即确认会话已通过 validate() 并解析出服务地址；
    每次请求都从会话实时读取 Cookie，validate() 轮换的 Cookie 会被自动使用。
    """

    def __init__(self, session: ICloudSession):
        state = session.state
        if not isinstance(state, Validated):
            raise SessionNotValidatedError()

        service = state.service(HME_SERVICE_KEY)
        if service is None or not service.url:
            raise MissingBaseURLError(HME_SERVICE_KEY)

        self.session = session
        self.base_url = service.url.rstrip("/")

    @classmethod
    def from_session(cls, session: ICloudSession) -> "HideMyEmailManager":
        return cls(session)

    async def _post(self, path: str, json_body=None) -> UpstreamResponse:
        url = f"{self.base_url}{path}"
        logger.debug("POST %s", url)
        response = await self.session.client.post(
            url,
            headers=self.session.request_headers(),
            json_body=json_body,
        )
        response.raise_for_error()
        return response

    async def _get(self, path: str) -> UpstreamResponse:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)
        response = await self.session.client.get(url, headers=self.session.request_headers())
        response.raise_for_error()
        return response

    async def generate(self) -> str:
        """
        生成一个新的候选地址（尚未保留）

        Returns:
            生成的地址字符串

        Raises:
            TransportError: 上游返回 4xx/5xx
            DecodeError: 响应体结构不符
        """
        response = await self._post(HME_GENERATE_PATH)
        body = decode_response(GenerateResponse, response.text)
        return body.result.hme

    async def claim(self, address: str, label: str, note: str) -> HMEReserveResult:
        """
        保留（激活）一个已生成的地址

        Args:
            address: generate() 返回的地址
            label: 标签
            note: 备注

        Returns:
            HMEReserveResult: 服务端返回的完整地址记录

        Raises:
            TransportError: 上游返回 4xx/5xx
            DecodeError: 响应体结构不符
            ClaimRejectedError: 返回的地址未激活，或与请求的地址不一致
        """
        payload = ClaimPayload(hme=address, label=label, note=note)
        response = await self._post(HME_RESERVE_PATH, json_body=payload.model_dump())
        record = decode_response(ReserveResponse, response.text).result.hme

        if not record.is_active or record.hme != address:
            raise ClaimRejectedError(address, record.is_active, record.hme)

        logger.info("已保留 Hide My Email 地址: %s (label: %s)", record.hme, record.label)
        return record

    async def list(self) -> HMEListResult:
        """列出账号下全部地址（服务端一次返回全部，不分页）"""
        response = await self._get(HME_LIST_PATH)
        return decode_response(ListResponse, response.text).result

    async def generate_and_claim(self, label: str, note: str = "") -> str:
        """
        生成并保留一个地址

        两步操作不是原子的：claim 失败时（包括超时等网络错误），已生成的
        地址记录在异常的 orphaned_address 上，由调用方决定重试 claim 还是放弃。
        """
        address = await self.generate()
        try:
            await self.claim(address, label, note)
        except Exception as e:
            e.orphaned_address = address
            logger.warning("地址 %s 已生成但保留失败: %s", address, e)
            raise
        return address
