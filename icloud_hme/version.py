"""版本信息"""

# 与 pyproject.toml 保持一致
__version__ = "0.1.0"


def get_version() -> str:
    """获取版本号"""
    # 尝试从安装的包元数据获取版本
    try:
        from importlib.metadata import version as get_pkg_version
        return get_pkg_version("icloud-hme")
    except Exception:
        # 回退到硬编码版本
        return __version__
