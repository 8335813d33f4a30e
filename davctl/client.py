"""
WebDAV 传输客户端（基于 httpx）。

只负责发请求、返回 httpx.Response，不判断状态码、不解析响应体；
凭证由调用方按请求传入，同一个客户端可以访问不同主机、使用不同账号。
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, BinaryIO, Iterator

import httpx

from davctl.models import Credentials

logger = logging.getLogger(__name__)

# PROPFIND 请求体：只请求列目录需要的属性
PROPFIND_BODY = b"""<?xml version="1.0" encoding="utf-8"?>
<d:propfind xmlns:d="DAV:">
  <d:prop>
    <d:getcontentlength/>
    <d:getlastmodified/>
    <d:getcontenttype/>
    <d:resourcetype/>
  </d:prop>
</d:propfind>"""


def _auth(credentials: Credentials | None) -> httpx.BasicAuth | None:
    """空登录名视为匿名，不发 Authorization 头。"""
    if credentials is None or not credentials.login:
        return None
    return httpx.BasicAuth(credentials.login, credentials.password)


class DavClient:
    """
    WebDAV 客户端，提供 PROPFIND / GET / PUT / DELETE 四种调用。

    示例： DavClient(timeout=10.0) 后将其传给 DavController。
    """

    UPLOAD_CHUNK_SIZE = 1024 * 1024  # 1 MiB，流式上传块大小，避免整文件读入内存

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        :param timeout: 请求超时秒数
        :param verify: 是否验证 HTTPS 证书
        :param transport: 自定义 httpx 传输层（测试时传入 httpx.MockTransport）
        """
        self.timeout = timeout
        self.verify = verify
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=self.timeout,
                verify=self.verify,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """关闭底层 HTTP 客户端。"""
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> DavClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def propfind(self, url: str, depth: str = "1", credentials: Credentials | None = None) -> httpx.Response:
        """
        发送 PROPFIND。

        :param url: 要列出的集合 URL
        :param depth: Depth 头，列目录用 "1"
        """
        logger.debug("PROPFIND %s depth=%s", url, depth)
        headers = {"Depth": depth, "Content-Type": "application/xml; charset=utf-8"}
        return self._get_client().request(
            "PROPFIND", url, content=PROPFIND_BODY, headers=headers, auth=_auth(credentials)
        )

    @contextmanager
    def download(self, url: str, credentials: Credentials | None = None) -> Iterator[httpx.Response]:
        """GET 并以流方式返回响应；响应体需在 with 块内通过 iter_bytes() 读取。"""
        logger.debug("GET %s", url)
        with self._get_client().stream("GET", url, auth=_auth(credentials)) as response:
            yield response

    def _upload_body(self, stream: BinaryIO) -> tuple[bytes | Iterator[bytes], dict[str, str]]:
        """生成 PUT 的 body 与 headers；可 seek 的文件对象按块流式发送，否则整块读入。"""
        try:
            stream.seek(0, 2)
            size = stream.tell()
            stream.seek(0)
        except (AttributeError, OSError):
            body = stream.read()
            return body, {"Content-Length": str(len(body))}

        def chunks() -> Iterator[bytes]:
            while True:
                chunk = stream.read(self.UPLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk

        return chunks(), {"Content-Length": str(size)}

    def upload(self, url: str, stream: BinaryIO, credentials: Credentials | None = None) -> httpx.Response:
        """
        PUT 文件内容到 url（覆盖同名文件）。

        :param url: 目标文件 URL（完整地址，不再拼接文件名）
        :param stream: 以二进制方式打开的文件对象
        """
        logger.debug("PUT %s", url)
        body, headers = self._upload_body(stream)
        return self._get_client().put(url, content=body, headers=headers, auth=_auth(credentials))

    def remove(self, url: str, credentials: Credentials | None = None) -> httpx.Response:
        """DELETE url。"""
        logger.debug("DELETE %s", url)
        return self._get_client().delete(url, auth=_auth(credentials))
