"""Cookie 解析、序列化与合并

只支持 `name=value` 形式，不处理 Path / Domain / Expires 等属性。
"""

from typing import Iterable

from pydantic import BaseModel, ConfigDict

from .errors import CookieParseError

COOKIE_SEPARATOR = "; "


class Cookie(BaseModel):
    """单个 Cookie，按 name + value 比较相等"""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str

    def __str__(self) -> str:
        return f"{self.name}={self.value}"

    def __repr__(self) -> str:
        return f"Cookie(name={self.name!r}, value='***')"


def parse_cookie_header(header: str) -> list[Cookie]:
    """
    解析浏览器复制出来的 Cookie 字符串

    以 "; " 分段，每段按第一个 "=" 拆分，因此值里可以再出现 "="。
    任意一段缺少 "=" 都会使整个解析失败。

    Args:
        header: 形如 "a=1; b=2" 的字符串

    Returns:
        按输入顺序排列的 Cookie 列表

    Raises:
        CookieParseError: 某一段缺少 "="（空字符串本身也算一段）
    """
    cookies = []
    for segment in header.split(COOKIE_SEPARATOR):
        name, sep, value = segment.partition("=")
        if not sep:
            raise CookieParseError(segment)
        cookies.append(Cookie(name=name, value=value))
    return cookies


def serialize_cookies(cookies: Iterable[Cookie]) -> str:
    """按存储顺序拼接为 Cookie 头"""
    return COOKIE_SEPARATOR.join(str(c) for c in cookies)


def merge_cookies(existing: Iterable[Cookie], incoming: Iterable[Cookie]) -> list[Cookie]:
    """
    把响应中的 Cookie 合并进已有集合

    服务器可能更新任意 Cookie：同名的旧值被丢弃，新值追加到末尾，
    其余旧 Cookie 保持原顺序。
    """
    incoming = list(incoming)
    updated = {c.name for c in incoming}
    merged = [c for c in existing if c.name not in updated]
    merged.extend(incoming)
    return merged
