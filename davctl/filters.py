"""
列目录过滤条件：内容类型子串、大小范围、修改时间范围。

条目缺少 size 或 modified_at 时，对应的范围条件不参与判断；
但设置了内容类型条件时，没有 content_type 的条目一律不匹配。
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, TypeVar

from davctl.errors import FilterParseError
from davctl.models import CatalogueEntry, parse_size, parse_timestamp

# 文本形式中表示「不限制」的占位符
WILDCARD = "*"

T = TypeVar("T")


def _parse_field(field: str, text: str, parse: Callable[[str], T]) -> T | None:
    if text == WILDCARD:
        return None
    try:
        return parse(text)
    except ValueError as e:
        raise FilterParseError(field, text, str(e)) from e


@dataclass(frozen=True)
class FilterCriteria:
    content_type: str | None = None
    min_size: int | None = None
    max_size: int | None = None
    earliest: datetime | None = None
    latest: datetime | None = None

    def __post_init__(self) -> None:
        # 不带时区的时间界限按 UTC 处理，与条目的 modified_at 保持可比较
        for name in ("earliest", "latest"):
            bound = getattr(self, name)
            if bound is not None and bound.tzinfo is None:
                object.__setattr__(self, name, bound.replace(tzinfo=timezone.utc))

    @classmethod
    def match_all(cls) -> FilterCriteria:
        """不带任何条件的实例，匹配所有条目。"""
        return cls()

    @classmethod
    def parse(
        cls,
        content_type: str = WILDCARD,
        min_size: str = WILDCARD,
        max_size: str = WILDCARD,
        earliest: str = WILDCARD,
        latest: str = WILDCARD,
    ) -> FilterCriteria:
        """
        由文本构造过滤条件；每个字段为 "*" 表示不限制。

        任一字段解析失败立即抛 FilterParseError（field 为出错字段），不返回部分有效的条件。
        """
        return cls(
            content_type=None if content_type == WILDCARD else content_type,
            min_size=_parse_field("min_size", min_size, parse_size),
            max_size=_parse_field("max_size", max_size, parse_size),
            earliest=_parse_field("earliest", earliest, parse_timestamp),
            latest=_parse_field("latest", latest, parse_timestamp),
        )

    def matches(self, entry: CatalogueEntry) -> bool:
        if entry.size is not None:
            if self.min_size is not None and entry.size < self.min_size:
                return False
            if self.max_size is not None and entry.size > self.max_size:
                return False
        if entry.modified_at is not None:
            if self.earliest is not None and entry.modified_at < self.earliest:
                return False
            if self.latest is not None and entry.modified_at > self.latest:
                return False
        if self.content_type is not None:
            # 普通子串包含，不是正则
            return entry.content_type is not None and self.content_type in entry.content_type
        return True
