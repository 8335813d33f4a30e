"""
davctl 数据模型。

- CatalogueEntry：PROPFIND 列表中的一项（一个远程资源）。
  size / modified_at / content_type 相互独立，服务端没给或解析失败时为 None。
- Credentials：某个主机的登录名与密码。
- ItemResult：批量操作（put/get/delete_matching）中每一项的结果。
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import NamedTuple

from davctl.errors import DavError


class Credentials(NamedTuple):
    login: str
    password: str


# 没有匹配主机、也没有默认项时使用的匿名凭证
ANONYMOUS = Credentials("", "")


@dataclass(frozen=True)
class CatalogueEntry:
    url: str
    name: str
    size: int | None = None
    modified_at: datetime | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class ItemResult:
    """
    批量操作中单项的结果。

    :param source: 本地路径或源 URL
    :param target: 实际目标（URL 或本地路径）；前置检查失败时可能为 None
    :param status_code: 成功时的 HTTP 状态码
    :param error: 失败时的异常
    """

    source: str
    target: str | None = None
    status_code: int | None = None
    error: DavError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_size(text: str) -> int:
    """解析字节数（无符号整数，只接受 ASCII 数字）；其他文本抛 ValueError。"""
    digits = text.strip()
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"not an unsigned integer: {text}")
    return int(digits)


def parse_timestamp(text: str) -> datetime:
    """
    解析时间戳文本，返回带时区的 datetime。

    先按 RFC 1123（WebDAV getlastmodified 的格式，如 "Mon, 12 Jan 1998 09:25:56 GMT"），
    再按 ISO 8601（如 "2024-01-02T03:04:05Z"）。无时区信息时视为 UTC。
    """
    text = text.strip()
    try:
        value = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
