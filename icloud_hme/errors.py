"""icloud-hme 异常定义。

所有异常都继承自 HMEError，调用方可以统一捕获。任何异常都不会在内部重试。
"""

from typing import Optional


class HMEError(Exception):
    """icloud-hme 所有异常的基类"""

    # generate_and_claim 中 generate 成功、claim 失败时，记录已生成但未保留的地址
    orphaned_address: Optional[str] = None


class ConfigurationError(HMEError):
    """Cookie 等配置无法编码为合法的 HTTP 头"""


class CookieParseError(HMEError, ValueError):
    """Cookie 字符串中存在缺少 "=" 的片段"""

    def __init__(self, segment: str):
        self.segment = segment
        super().__init__(f"Invalid cookie segment: {segment!r}")


class TransportError(HMEError):
    """上游返回 4xx/5xx"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Failed to send request | Status: {status_code} | Response: {body}"
        )


class DecodeError(HMEError):
    """响应体不是预期的 JSON 结构"""


class ServiceError(HMEError):
    """服务目录或 Hide My Email 业务状态不满足要求"""


class ServiceMissingError(ServiceError):
    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Missing Hide my email service ({service})")


class ServiceStatusMissingError(ServiceError):
    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Hide my email missing status ({service})")


class ServiceInactiveError(ServiceError):
    def __init__(self, service: str, status: str):
        self.service = service
        self.status = status
        super().__init__(f"Hide my email is inactive/disabled (status: {status})")


class MissingBaseURLError(ServiceError):
    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Missing Base URL for service {service}")


class SessionNotValidatedError(ServiceError):
    def __init__(self):
        super().__init__("Session must be validated before use, call validate() first")


class ClaimRejectedError(ServiceError):
    """保留接口返回的地址未激活或与请求的地址不一致"""

    def __init__(self, expected: str, is_active: bool, actual: str):
        self.expected = expected
        self.is_active = is_active
        self.actual = actual
        super().__init__(
            f"Hide my email for {expected} is inactive/invalid, "
            f"Active: {str(is_active).lower()}, HME: {actual}"
        )
