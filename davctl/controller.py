"""
WebDAV 操作控制器：put / get / ls / delete。

不保存会话状态，只持有凭证表和传输客户端；每次操作按目标 URL 的主机查找凭证。
批量操作（put/get/delete_matching）逐项执行，某项失败不影响其余项，
每项结果放在 ItemResult 中返回；单目标操作（ls/delete）失败时直接抛出 DavError。
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path, PurePosixPath
from typing import Iterable
from urllib.parse import quote, unquote, urljoin, urlsplit

import httpx

from davctl.catalogue import parse_multistatus
from davctl.client import DavClient
from davctl.credentials import CredentialTable
from davctl.errors import (
    DavError,
    InvalidDestination,
    InvalidSource,
    LocalError,
    TransportError,
)
from davctl.filters import FilterCriteria
from davctl.models import CatalogueEntry, Credentials, ItemResult

logger = logging.getLogger(__name__)

NO_DETAIL = "error status returned without information"
SABRE_MESSAGE = "{http://sabredav.org/ns}message"


def _error_detail(response: httpx.Response) -> str | None:
    """从错误响应中取服务端说明：DAV:error 中的 s:message、响应体文本或状态短语。"""
    try:
        body = response.read()
    except httpx.HTTPError:
        body = b""
    text = body.decode(response.encoding or "utf-8", errors="replace").strip()
    if text.startswith("<"):
        try:
            message = ET.fromstring(body).find(f".//{SABRE_MESSAGE}")
        except ET.ParseError:
            message = None
        if message is not None and (message.text or "").strip():
            return message.text.strip()
    if text:
        return text[:500]
    if response.status_code >= 400 and response.reason_phrase:
        return response.reason_phrase
    return None


def ensure_success(response: httpx.Response, url: str) -> httpx.Response:
    """
    非 2xx 时抛 TransportError，带上服务端给出的说明；没有说明时用通用信息。

    :return: 原响应（成功时）
    """
    if response.is_success:
        return response
    detail = _error_detail(response) or NO_DETAIL
    raise TransportError(url, response.status_code, detail)


def is_collection(url: str) -> bool:
    """路径以 / 结尾的 URL 视为集合（目录）。"""
    return urlsplit(url).path.endswith("/")


def _same_location(a: str, b: str) -> bool:
    """两个 URL 是否指向同一资源：主机不区分大小写，默认端口等价，路径解码后比较且忽略末尾 /。"""
    try:
        ua, ub = httpx.URL(a), httpx.URL(b)
    except httpx.InvalidURL:
        return a.rstrip("/") == b.rstrip("/")
    return (ua.scheme, ua.host, ua.port, ua.path.rstrip("/")) == (
        ub.scheme,
        ub.host,
        ub.port,
        ub.path.rstrip("/"),
    )


def _filename_from_url(url: str) -> str:
    """URL 路径最后一段（百分号解码后）；没有时抛 InvalidSource。"""
    segment = urlsplit(url).path.rsplit("/", 1)[-1]
    name = PurePosixPath(unquote(segment)).name
    if name in ("", ".", ".."):
        raise InvalidSource(url, "URL contains no filename")
    return name


class DavController:
    """
    :param credentials: 凭证表，按主机查找登录名/密码
    :param client: 传输客户端，测试时可注入使用 httpx.MockTransport 的 DavClient
    """

    def __init__(self, credentials: CredentialTable, client: DavClient):
        self.credentials = credentials
        self.client = client

    def set_default_credentials(self, login: str, password: str) -> None:
        """设置默认凭证，之后所有未匹配主机的请求都使用它。"""
        self.credentials.set_default(login, password)

    # ------------------------- put -------------------------

    def _put_one(self, path: Path, target_url: str, credentials: Credentials) -> int:
        if not path.is_file():
            raise InvalidSource(str(path), "not an existing file")
        try:
            with path.open("rb") as fp:
                response = self.client.upload(target_url, fp, credentials)
        except OSError as e:
            raise LocalError(str(path), str(e)) from e
        except httpx.HTTPError as e:
            raise TransportError(target_url, None, str(e)) from e
        return ensure_success(response, target_url).status_code

    def put(self, files: Iterable[str | Path], target_base: str) -> list[ItemResult]:
        """
        上传文件，每个文件一项结果，顺序与输入一致。

        - target_base 以 / 结尾：每个文件上传到 target_base + 本地文件名。
        - 否则只允许上传一个文件，且原样上传到 target_base（不替换最后一段）；
          多个文件时每项都是 InvalidDestination，不发任何请求。

        :param files: 本地文件路径
        :param target_base: 目标集合 URL 或（单文件时）目标文件 URL
        """
        paths = [Path(f) for f in files]
        collection = is_collection(target_base)
        if not collection and len(paths) > 1:
            reason = "not a collection and cannot receive multiple files"
            return [
                ItemResult(str(p), target_base, error=InvalidDestination(target_base, reason))
                for p in paths
            ]
        credentials = self.credentials.resolve(target_base)
        results: list[ItemResult] = []
        for path in paths:
            target: str | None = None
            try:
                if collection:
                    if not path.name:
                        raise InvalidSource(str(path), "path does not end with a file name")
                    try:
                        target = urljoin(target_base, quote(path.name))
                    except ValueError as e:
                        raise InvalidSource(str(path), f"cannot build target URL: {e}") from e
                else:
                    target = target_base
                status = self._put_one(path, target, credentials)
                results.append(ItemResult(str(path), target, status_code=status))
            except DavError as e:
                logger.debug("put %s failed: %s", path, e)
                results.append(ItemResult(str(path), target, error=e))
        logger.info("put %d/%d file(s) to %s", sum(r.ok for r in results), len(results), target_base)
        return results

    # ------------------------- get -------------------------

    def _get_one(self, source: str, target_dir: Path) -> tuple[Path, int]:
        if not target_dir.is_dir():
            raise InvalidDestination(str(target_dir), "not an existing directory")
        target = target_dir / _filename_from_url(source)
        credentials = self.credentials.resolve(source)
        try:
            with self.client.download(source, credentials) as response:
                ensure_success(response, source)
                # 请求成功后才创建本地文件（已存在则覆盖）
                try:
                    with target.open("wb") as fp:
                        for chunk in response.iter_bytes():
                            fp.write(chunk)
                except OSError as e:
                    raise LocalError(str(target), str(e)) from e
                return target, response.status_code
        except httpx.HTTPError as e:
            raise TransportError(source, None, str(e)) from e

    def get(self, sources: Iterable[str], target_dir: str | Path) -> list[ItemResult]:
        """
        下载多个 URL 到本地目录，每个源一项结果，顺序与输入一致。

        本地文件名取 URL 路径最后一段；各源可以在不同主机上，凭证逐个查找。

        :param sources: 远程文件 URL
        :param target_dir: 已存在的本地目录
        """
        target_dir = Path(target_dir)
        results: list[ItemResult] = []
        for source in sources:
            try:
                target, status = self._get_one(source, target_dir)
                results.append(ItemResult(source, str(target), status_code=status))
            except DavError as e:
                logger.debug("get %s failed: %s", source, e)
                results.append(ItemResult(source, str(target_dir), error=e))
        logger.info("got %d/%d file(s) into %s", sum(r.ok for r in results), len(results), target_dir)
        return results

    # ------------------------- ls -------------------------

    def ls(self, url: str, criteria: FilterCriteria | None = None) -> list[CatalogueEntry]:
        """
        列出集合（PROPFIND Depth: 1），只返回满足 criteria 的条目，保持服务端顺序。

        :param criteria: 过滤条件，默认匹配全部
        :raises TransportError: 请求失败或非 2xx
        :raises MalformedResponse: 响应不是 multistatus
        """
        criteria = criteria or FilterCriteria.match_all()
        credentials = self.credentials.resolve(url)
        try:
            response = self.client.propfind(url, "1", credentials)
        except httpx.HTTPError as e:
            raise TransportError(url, None, str(e)) from e
        ensure_success(response, url)
        entries = parse_multistatus(url, response.content)
        return [entry for entry in entries if criteria.matches(entry)]

    # ------------------------- delete -------------------------

    def delete(self, url: str) -> int:
        """
        删除 url 指向的资源，返回 HTTP 状态码。

        :raises TransportError: 请求失败或非 2xx
        """
        credentials = self.credentials.resolve(url)
        try:
            response = self.client.remove(url, credentials)
        except httpx.HTTPError as e:
            raise TransportError(url, None, str(e)) from e
        return ensure_success(response, url).status_code

    def delete_matching(self, url: str, criteria: FilterCriteria) -> list[ItemResult]:
        """
        删除集合中满足 criteria 的所有条目，每个条目一项结果。

        列目录本身失败时直接抛出；单个条目删除失败不影响其余条目。
        PROPFIND 结果中代表集合自身的条目不会被删除。
        """
        results: list[ItemResult] = []
        for entry in self.ls(url, criteria):
            if _same_location(entry.url, url):
                continue
            try:
                status = self.delete(entry.url)
                results.append(ItemResult(entry.url, entry.url, status_code=status))
            except DavError as e:
                logger.debug("delete %s failed: %s", entry.url, e)
                results.append(ItemResult(entry.url, entry.url, error=e))
        logger.info("deleted %d/%d matching entries under %s", sum(r.ok for r in results), len(results), url)
        return results
