"""
pytest 配置与共享 fixture。

不依赖真实 WebDAV 服务器：FakeDavServer 通过 httpx.MockTransport 处理请求，
记录每个请求，按路径保存上传的内容；PROPFIND 返回预设响应体。
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import pytest

from davctl import CredentialTable, Credentials, DavClient, DavController

from tests.config import (
    DAV_HOST,
    DAV_LOGIN,
    DAV_PASSWORD,
    MULTISTATUS_DIRECTORY,
)


@dataclass
class FakeDavServer:
    """内存中的 WebDAV 服务器；files 以 URL path 为键。"""

    files: dict[str, bytes] = field(default_factory=dict)
    propfind_body: bytes = MULTISTATUS_DIRECTORY
    # 按 (method, path) 覆盖返回状态码
    statuses: dict[tuple[str, str], int] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        override = self.statuses.get((request.method, path))
        if override is not None:
            return httpx.Response(override)
        if request.method == "PROPFIND":
            return httpx.Response(207, content=self.propfind_body, headers={"Content-Type": "application/xml"})
        if request.method == "GET":
            if path not in self.files:
                return httpx.Response(404)
            return httpx.Response(200, content=self.files[path])
        if request.method == "PUT":
            existed = path in self.files
            self.files[path] = request.read()
            return httpx.Response(204 if existed else 201)
        if request.method == "DELETE":
            if self.files.pop(path, None) is None:
                return httpx.Response(404)
            return httpx.Response(204)
        return httpx.Response(405)

    def methods(self) -> list[str]:
        return [r.method for r in self.requests]


@pytest.fixture
def server() -> FakeDavServer:
    return FakeDavServer()


@pytest.fixture
def credentials() -> CredentialTable:
    """只含 DAV_HOST 一项、无默认项的凭证表。"""
    return CredentialTable(hosts={DAV_HOST: Credentials(DAV_LOGIN, DAV_PASSWORD)})


@pytest.fixture
def dav_client(server: FakeDavServer):
    client = DavClient(transport=httpx.MockTransport(server.handle))
    yield client
    client.close()


@pytest.fixture
def controller(credentials: CredentialTable, dav_client: DavClient) -> DavController:
    return DavController(credentials, dav_client)
