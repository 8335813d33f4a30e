"""
按主机查找凭证：每个主机一条登录名/密码，外加一个可选的默认项（.netrc 的 default）。

查找规则：URL 主机名与表中主机名完全相等（不做通配或后缀匹配）→ 默认项 → 匿名。
退回匿名时写一条 warning 日志，但不是错误。
"""

from __future__ import annotations

import logging
import netrc
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlsplit

from davctl.models import ANONYMOUS, Credentials

logger = logging.getLogger(__name__)


@dataclass
class CredentialTable:
    hosts: dict[str, Credentials] = field(default_factory=dict)
    default: Credentials | None = None

    def set_default(self, login: str, password: str) -> None:
        """显式设置默认凭证（CLI login 命令使用）。"""
        self.default = Credentials(login, password)

    def resolve(self, url: str) -> Credentials:
        """返回访问 url 应使用的 (login, password)；找不到时返回匿名凭证，不抛异常。"""
        try:
            hostname = urlsplit(url).hostname
        except ValueError:
            hostname = None
        if hostname is not None and hostname in self.hosts:
            return self.hosts[hostname]
        if self.default is not None:
            return self.default
        logger.warning("no username/password found for URL %s", url)
        return ANONYMOUS


def _netrc_path() -> Path:
    return Path.home() / ".netrc"


def load_netrc(path: str | Path | None = None) -> CredentialTable:
    """
    从 .netrc 读取凭证表。

    :param path: netrc 文件路径，默认 ~/.netrc
    :return: 文件不存在或无法解析时返回空表（无法解析时写 warning）
    """
    p = Path(path) if path is not None else _netrc_path()
    if not p.is_file():
        return CredentialTable()
    try:
        rc = netrc.netrc(str(p))
    except (netrc.NetrcParseError, OSError) as e:
        logger.warning("ignoring unreadable netrc %s: %s", p, e)
        return CredentialTable()
    table = CredentialTable()
    for machine, (login, _account, password) in rc.hosts.items():
        creds = Credentials(login or "", password or "")
        # Python 的 netrc 把 default 项放在 hosts["default"] 中
        if machine == "default":
            table.default = creds
        else:
            table.hosts[machine] = creds
    return table
