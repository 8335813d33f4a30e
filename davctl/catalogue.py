"""
解析 WebDAV PROPFIND 响应（multistatus）为 CatalogueEntry。

单个属性解析失败只会让该属性为 None，不影响条目本身和其他属性。
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Callable, Iterable, TypeVar
from urllib.parse import urljoin

from davctl.errors import MalformedResponse
from davctl.models import CatalogueEntry, parse_size, parse_timestamp

logger = logging.getLogger(__name__)

DAV_NS = "DAV:"
MULTISTATUS = f"{{{DAV_NS}}}multistatus"
RESPONSE = f"{{{DAV_NS}}}response"
HREF = f"{{{DAV_NS}}}href"
PROP_PATH = f"{{{DAV_NS}}}propstat/{{{DAV_NS}}}prop"
GETCONTENTLENGTH = f"{{{DAV_NS}}}getcontentlength"
GETLASTMODIFIED = f"{{{DAV_NS}}}getlastmodified"
GETCONTENTTYPE = f"{{{DAV_NS}}}getcontenttype"

T = TypeVar("T")


def _extract_property(props: Iterable[ET.Element], tag: str, parse: Callable[[str], T]) -> T | None:
    """
    在各个 propstat/prop 中查找 tag，返回第一个能解析的值。

    元素缺失、文本为空或 parse 抛 ValueError 时都视为没有该属性。
    """
    for prop in props:
        node = prop.find(tag)
        if node is None or not (node.text or "").strip():
            continue
        try:
            return parse(node.text)
        except ValueError:
            logger.debug("ignoring unparsable %s: %r", tag, node.text)
    return None


def _join(base: str, name: str) -> str:
    try:
        return urljoin(base, name)
    except ValueError as e:
        logger.warning("cannot join %r onto %s, using base URL: %s", name, base, e)
        return base


def parse_entry(base: str, element: ET.Element) -> CatalogueEntry:
    """
    将一个 DAV:response 元素解析为 CatalogueEntry。

    :param base: 被列目录的 URL，href 相对它解析
    :param element: multistatus 下的 response 元素
    :raises MalformedResponse: element 不是 DAV:response
    """
    if element.tag != RESPONSE:
        raise MalformedResponse(base, f"expected {RESPONSE}, got {element.tag}")
    href = element.find(HREF)
    name = (href.text or "").strip() if href is not None else ""
    # 缺少 href 或 href 为空时视为集合自身
    name = name or "."
    props = element.findall(PROP_PATH)
    return CatalogueEntry(
        url=_join(base, name),
        name=name,
        size=_extract_property(props, GETCONTENTLENGTH, parse_size),
        modified_at=_extract_property(props, GETLASTMODIFIED, parse_timestamp),
        content_type=_extract_property(props, GETCONTENTTYPE, str.strip),
    )


def parse_multistatus(base: str, payload: bytes | str) -> list[CatalogueEntry]:
    """
    解析 PROPFIND 响应体，按服务端顺序返回全部条目（不过滤）。

    :raises MalformedResponse: 不是合法 XML 或根元素不是 DAV:multistatus
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise MalformedResponse(base, f"invalid XML: {e}") from e
    if root.tag != MULTISTATUS:
        raise MalformedResponse(base, f"expected {MULTISTATUS}, got {root.tag}")
    return [parse_entry(base, child) for child in root if child.tag == RESPONSE]
