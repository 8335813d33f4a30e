"""
CLI 本地配置：保存/读取已连接的 base_url，以及 login 命令设置的默认凭证。

按主机的凭证来自 ~/.netrc（见 davctl.credentials），这里保存的用户名/密码作为默认项。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def _config_dir() -> Path:
    """配置目录：~/.config/davctl（所有平台统一）。"""
    return Path.home() / ".config" / "davctl"


def _config_path() -> Path:
    return _config_dir() / "config.json"


def load_config() -> dict[str, Any] | None:
    """读取本地配置；不存在或无效则返回 None。"""
    p = _config_path()
    if not p.exists():
        return None
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def _write(data: dict[str, Any]) -> None:
    p = _config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def save_base_url(base_url: str) -> None:
    """保存 connect 的目标地址；保证以 / 结尾，便于拼接相对路径。"""
    data = load_config() or {}
    data["base_url"] = base_url if base_url.endswith("/") else f"{base_url}/"
    _write(data)


def save_credentials(username: str, password: str | None = None) -> None:
    """保存默认凭证，保留已有的 base_url。"""
    data = load_config() or {}
    data["username"] = username
    data["password"] = password or ""
    _write(data)


def clear_config() -> bool:
    """清除本地配置；存在则删除并返回 True。"""
    p = _config_path()
    if p.exists():
        p.unlink()
        return True
    return False
