"""字段与字段分组.

字段同时承载展示信息(标签、占位、属性、前端资源)与校验规则,
两者从同一份声明推导,避免前后端规则漂移.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from htmlform.fields.collections import FieldCollection
    from htmlform.types import RuleList

# 字段类型到隐式规则的映射
TYPE_RULES: dict[str, str] = {
    "email": "email",
    "url": "url",
    "number": "numeric",
    "checkbox": "boolean",
}

CHOICE_TYPES = frozenset({"select", "radios"})


def _append_unique(target: list[str], values: Iterable[str]) -> None:
    for value in values:
        if value not in target:
            target.append(value)


class Field:
    """单个表单字段.

    Attributes:
        name: 字段名,在所属集合内唯一.
        type: 控件类型,例如 text、email、select.
        included: 是否参与校验规则收集.装饰性字段可通过 ``exclude()`` 排除.
        scripts: 该字段依赖的脚本 URL,保持声明顺序.
        styles: 该字段依赖的样式 URL,保持声明顺序.

    """

    is_field: ClassVar[bool] = True

    def __init__(
        self,
        name: str,
        type: str = "text",
        *,
        label: str | None = None,
        value: Any = None,
        required: bool = False,
        placeholder: str | None = None,
        help_text: str | None = None,
        options: Mapping[str, str] | None = None,
        attributes: Mapping[str, Any] | None = None,
        scripts: Iterable[str] | None = None,
        styles: Iterable[str] | None = None,
    ) -> None:
        if not name:
            msg = "字段名不能为空"
            raise ValueError(msg)
        self.name = name
        self.type = type
        self._label = label
        self.value = value
        self.is_required = required
        self.placeholder_text = placeholder
        self.help = help_text
        self.options: dict[str, str] = dict(options or {})
        self.attributes: dict[str, Any] = dict(attributes or {})
        self.scripts: list[str] = []
        self.styles: list[str] = []
        _append_unique(self.scripts, scripts or ())
        _append_unique(self.styles, styles or ())
        self.included = True
        self.min_chars: int | None = None
        self.max_chars: int | None = None
        self._extra_rules: list[str] = []

    def __repr__(self) -> str:
        return f"<Field {self.name!r} type={self.type!r}>"

    @property
    def label_text(self) -> str:
        """返回标签文案,未声明时由字段名推导."""
        if self._label is not None:
            return self._label
        return self.name.replace("_", " ").strip().capitalize()

    @property
    def id(self) -> str:
        """渲染用的 DOM id."""
        return self.attributes.get("id") or f"field_{self.name}"

    # ------------------------------------------------------------------ #
    # Fluent declaration
    # ------------------------------------------------------------------ #
    def label(self, text: str) -> Field:
        self._label = text
        return self

    def required(self, value: bool = True) -> Field:
        self.is_required = value
        return self

    def placeholder(self, text: str) -> Field:
        self.placeholder_text = text
        return self

    def help_text(self, text: str) -> Field:
        self.help = text
        return self

    def min_length(self, length: int) -> Field:
        self.min_chars = length
        return self

    def max_length(self, length: int) -> Field:
        self.max_chars = length
        return self

    def with_options(self, options: Mapping[str, str]) -> Field:
        self.options = dict(options)
        return self

    def attr(self, name: str, value: Any = True) -> Field:
        self.attributes[name] = value
        return self

    def script(self, *urls: str) -> Field:
        """追加字段依赖的脚本,已存在的 URL 忽略."""
        _append_unique(self.scripts, urls)
        return self

    def style(self, *urls: str) -> Field:
        """追加字段依赖的样式,已存在的 URL 忽略."""
        _append_unique(self.styles, urls)
        return self

    def rules(self, *rules: str) -> Field:
        """追加显式校验规则,例如 ``rules("regex:^[a-z]+$", "confirmed")``."""
        _append_unique(self._extra_rules, rules)
        return self

    def include(self) -> Field:
        self.included = True
        return self

    def exclude(self) -> Field:
        """字段不参与校验规则收集,仍然会被渲染."""
        self.included = False
        return self

    # ------------------------------------------------------------------ #
    # Derived data
    # ------------------------------------------------------------------ #
    def get_validation_rules(self) -> RuleList:
        """根据字段声明推导校验规则.

        顺序固定为: 必填/可空、类型规则、长度规则、可选值规则,最后追加显式规则.

        Returns:
            规则描述符列表,例如 ``["required", "email", "max:255"]``.

        """
        rules: RuleList = ["required" if self.is_required else "nullable"]
        type_rule = TYPE_RULES.get(self.type)
        if type_rule:
            rules.append(type_rule)
        if self.min_chars is not None:
            rules.append(f"min:{self.min_chars}")
        if self.max_chars is not None:
            rules.append(f"max:{self.max_chars}")
        if self.type in CHOICE_TYPES and self.options:
            rules.append("in:" + ",".join(self.options))
        _append_unique(rules, self._extra_rules)
        return rules

    def html_attributes(self, css_class: str | None = None) -> dict[str, Any]:
        """合并声明推导出的 HTML5 属性与自定义属性.

        Args:
            css_class: 主题附加的 class,与自定义 class 合并.

        """
        attributes: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.is_required:
            attributes["required"] = True
        if self.placeholder_text:
            attributes["placeholder"] = self.placeholder_text
        if self.min_chars is not None and self.type != "number":
            attributes["minlength"] = self.min_chars
        if self.max_chars is not None and self.type != "number":
            attributes["maxlength"] = self.max_chars
        attributes.update(self.attributes)
        if css_class:
            custom = str(attributes.get("class", "")).strip()
            attributes["class"] = f"{css_class} {custom}".strip()
        return attributes


class FieldGroup:
    """字段分组(fieldset),本身不是字段.

    分组不直接贡献前端资源与校验规则,其内部字段通过 ``fields`` 访问.
    """

    is_field: ClassVar[bool] = False

    def __init__(self, name: str, legend: str | None = None) -> None:
        from htmlform.fields.collections import FieldCollection

        self.name = name
        self.legend = legend
        self.fields: FieldCollection = FieldCollection()

    def __repr__(self) -> str:
        return f"<FieldGroup {self.name!r} fields={len(self.fields)}>"

    def build(self, callback: Callable[[FieldCollection], object]) -> FieldGroup:
        """在分组的字段集合上执行声明回调."""
        callback(self.fields)
        return self
