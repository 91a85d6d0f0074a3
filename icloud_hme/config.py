"""配置读取器 - 从 ~/.icloud-hme/config.json 与环境变量读取"""

import json
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .constants import BROWSER_USER_AGENT, DEFAULT_IMPERSONATE, DEFAULT_TIMEOUT, SETUP_URL

logger = logging.getLogger("icloud_hme")

# 环境变量优先级高于配置文件
ENV_COOKIE = "ICLOUD_HME_COOKIE"
ENV_PROXY = "ICLOUD_HME_PROXY"
ENV_TIMEOUT = "ICLOUD_HME_TIMEOUT"


class HMEConfig(BaseModel):
    """客户端配置"""

    # 从浏览器复制的 iCloud Cookie 字符串
    cookie: str = ""
    setup_url: str = SETUP_URL
    user_agent: str = BROWSER_USER_AGENT
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    transport_backend: Literal["httpx", "curl_cffi"] = "httpx"
    impersonate: str = DEFAULT_IMPERSONATE

    # 格式: "http://host:port" 或 "socks5://host:port"
    proxy: Optional[str] = None
    trust_env: bool = False


def get_config_dir() -> Path:
    """获取配置目录"""
    return Path.home() / ".icloud-hme"


def get_config_path() -> Path:
    """获取配置文件路径"""
    return get_config_dir() / "config.json"


def _apply_env_overrides(data: dict) -> dict:
    cookie = os.environ.get(ENV_COOKIE)
    if cookie:
        data["cookie"] = cookie

    proxy = os.environ.get(ENV_PROXY)
    if proxy:
        data["proxy"] = proxy

    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        try:
            data["timeout"] = float(timeout)
        except ValueError:
            logger.warning("忽略无效的 %s: %s", ENV_TIMEOUT, timeout)

    return data


def load_config(path: Optional[Path] = None) -> HMEConfig:
    """
    加载配置

    配置文件不存在时使用默认值；环境变量覆盖文件中的同名字段。

    Args:
        path: 配置文件路径，默认 ~/.icloud-hme/config.json

    Returns:
        HMEConfig: 配置对象

    Raises:
        ValueError: 配置文件格式错误
    """
    config_path = path or get_config_path()

    data: dict = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"配置文件格式错误: {config_path}: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"配置文件格式错误: {config_path}: 顶层必须是对象")
    else:
        logger.debug("配置文件不存在，使用默认配置: %s", config_path)

    return HMEConfig(**_apply_env_overrides(data))
