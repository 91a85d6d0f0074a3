"""iCloud 请求头模板

所有请求都需要带上 Origin / Referer / Accept / User-Agent，
以及由当前 Cookie 集合拼出来的 Cookie 头。
"""

from typing import Iterable

from .constants import ACCEPT, BROWSER_USER_AGENT, ICLOUD_ORIGIN, ICLOUD_REFERER
from .cookies import Cookie, serialize_cookies
from .errors import ConfigurationError


def build_session_headers(user_agent: str = BROWSER_USER_AGENT) -> dict[str, str]:
    """
    构建会话级默认请求头（不含 Cookie）。

    Args:
        user_agent: 浏览器 User-Agent

    Returns:
        dict: 请求头字典
    """
    return {
        "Origin": ICLOUD_ORIGIN,
        "Referer": ICLOUD_REFERER,
        "Accept": ACCEPT,
        "User-Agent": user_agent,
    }


def _is_valid_header_value(value: str) -> bool:
    # 可见 ASCII 与空格、制表符
    return all(ch == "\t" or 32 <= ord(ch) < 127 for ch in value)


def build_cookie_header(cookies: Iterable[Cookie]) -> str:
    """
    将 Cookie 集合序列化为 Cookie 头的值

    Raises:
        ConfigurationError: 结果含有非 ASCII 或控制字符，无法作为 HTTP 头发送
    """
    value = serialize_cookies(cookies)
    if not _is_valid_header_value(value):
        raise ConfigurationError(
            "Cookie cannot be encoded as an HTTP header value "
            "(non-ASCII or control characters)"
        )
    return value
