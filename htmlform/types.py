"""htmlform 共享类型别名."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Protocol, TypeAlias, runtime_checkable

LoggerExtra: TypeAlias = MutableMapping[str, Any]
ContextDict: TypeAlias = dict[str, Any]
PayloadMapping: TypeAlias = Mapping[str, Any]
TemplateContext: TypeAlias = dict[str, Any]
RuleList: TypeAlias = list[str]
ValidationRules: TypeAlias = dict[str, RuleList]
FieldErrors: TypeAlias = dict[str, list[str]]


@runtime_checkable
class FieldLike(Protocol):
    """字段集合中条目的结构约定.

    ``is_field`` 为 True 的条目才参与资源汇总与规则收集.
    """

    name: str
    is_field: bool


__all__ = [
    "ContextDict",
    "FieldErrors",
    "FieldLike",
    "LoggerExtra",
    "PayloadMapping",
    "RuleList",
    "TemplateContext",
    "ValidationRules",
]
