"""davctl：按主机查找凭证的 WebDAV 操作层（列目录、上传、下载、删除、按条件过滤）。"""

from davctl.catalogue import parse_entry, parse_multistatus
from davctl.client import DavClient
from davctl.controller import DavController, ensure_success
from davctl.credentials import CredentialTable, load_netrc
from davctl.errors import (
    DavError,
    FilterParseError,
    InvalidDestination,
    InvalidSource,
    LocalError,
    MalformedResponse,
    TransportError,
)
from davctl.filters import FilterCriteria
from davctl.models import ANONYMOUS, CatalogueEntry, Credentials, ItemResult

__all__ = [
    "DavClient",
    "DavController",
    "ensure_success",
    "CredentialTable",
    "Credentials",
    "ANONYMOUS",
    "load_netrc",
    "CatalogueEntry",
    "ItemResult",
    "FilterCriteria",
    "parse_entry",
    "parse_multistatus",
    "DavError",
    "InvalidSource",
    "InvalidDestination",
    "TransportError",
    "MalformedResponse",
    "FilterParseError",
    "LocalError",
]
