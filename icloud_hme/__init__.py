"""iCloud Hide My Email 客户端

基于浏览器 Cookie 认证，生成、保留并列出 Hide My Email 转发地址。
"""

from .config import HMEConfig, load_config
from .cookies import Cookie, merge_cookies, parse_cookie_header, serialize_cookies
from .errors import (
    ClaimRejectedError,
    ConfigurationError,
    CookieParseError,
    DecodeError,
    HMEError,
    MissingBaseURLError,
    ServiceError,
    ServiceInactiveError,
    ServiceMissingError,
    ServiceStatusMissingError,
    SessionNotValidatedError,
    TransportError,
)
from .manager import HideMyEmailManager
from .models import HMEListEmail, HMEListResult, HMEReserveResult, Service
from .session import ICloudSession, Unvalidated, Validated
from .version import __version__, get_version

__all__ = [
    # Config
    "HMEConfig",
    "load_config",
    # Cookies
    "Cookie",
    "parse_cookie_header",
    "serialize_cookies",
    "merge_cookies",
    # Session / manager
    "ICloudSession",
    "Unvalidated",
    "Validated",
    "HideMyEmailManager",
    # Models
    "Service",
    "HMEReserveResult",
    "HMEListEmail",
    "HMEListResult",
    # Errors
    "HMEError",
    "ConfigurationError",
    "CookieParseError",
    "TransportError",
    "DecodeError",
    "ServiceError",
    "ServiceMissingError",
    "ServiceStatusMissingError",
    "ServiceInactiveError",
    "MissingBaseURLError",
    "SessionNotValidatedError",
    "ClaimRejectedError",
    "__version__",
    "get_version",
]
