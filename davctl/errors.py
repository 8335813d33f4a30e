"""
davctl 错误类型。

所有异常都继承 DavError，批量操作（put/get/delete_matching）把异常放进
ItemResult.error 而不是抛出；单目标操作（ls/delete）直接抛出。
"""

from __future__ import annotations


class DavError(Exception):
    """davctl 所有错误的基类。"""


class InvalidSource(DavError):
    """本地前置条件不满足：文件不存在、源 URL 中取不到文件名等。"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"invalid source {source}: {reason}")


class InvalidDestination(DavError):
    """目标不满足前置条件：多文件上传到非目录 URL、下载目录不存在等。"""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"invalid destination {target}: {reason}")


class TransportError(DavError):
    """
    传输失败或服务端返回非 2xx。

    :param status_code: HTTP 状态码；连接失败等无响应时为 None
    :param detail: 服务端给出的错误信息，没有时为通用说明
    """

    def __init__(self, url: str, status_code: int | None, detail: str):
        self.url = url
        self.status_code = status_code
        self.detail = detail
        prefix = f"{status_code} " if status_code is not None else ""
        super().__init__(f"{prefix}{url}: {detail}")


class MalformedResponse(DavError):
    """列目录响应不是 multistatus，或条目不是 response 元素。"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"malformed response from {url}: {reason}")


class FilterParseError(DavError):
    """过滤条件某个字段的文本无法解析；field 为出错字段名。"""

    def __init__(self, field: str, value: str, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"cannot parse {field}={value!r}: {reason}")


class LocalError(DavError):
    """上传/下载时本地文件读写失败。"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
