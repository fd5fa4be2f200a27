"""``<form>`` 元素的结构化表示."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from markupsafe import Markup, escape

from htmlform.constants import HttpMethod

if TYPE_CHECKING:
    from htmlform.types import FieldErrors, PayloadMapping

_MISSING = object()


def render_attributes(attributes: Mapping[str, Any]) -> Markup:
    """把属性字典渲染为 HTML 属性串.

    布尔 True 渲染为无值属性,False/None 被忽略,其余值统一转义.
    """
    parts: list[str] = []
    for name, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(str(escape(name)))
        else:
            parts.append(f'{escape(name)}="{escape(value)}"')
    return Markup(" ".join(parts))


class Form:
    """表单元素.

    由 FormBuilder 在表单模型初始化时创建,之后归该表单模型独占.

    Attributes:
        method: 表单语义上的 HTTP 方法(大写),可能需要伪装.
        model: 绑定的实体,用于预填字段值.
        old_input: 上一次提交失败时的输入,优先级高于绑定实体.
        errors: 上一次提交失败时各字段的错误文案.
        forwarded_operations: 表单模型允许转发到 Form 的操作名.

    """

    forwarded_operations: ClassVar[frozenset[str]] = frozenset(
        {"action", "route", "attr", "classes", "with_files", "novalidate", "open", "close", "value_for", "error_for"},
    )

    def __init__(
        self,
        method: str = HttpMethod.POST,
        *,
        model: object | None = None,
        old_input: PayloadMapping | None = None,
        errors: FieldErrors | None = None,
        novalidate: bool = False,
    ) -> None:
        normalized = method.upper()
        if not HttpMethod.is_valid(normalized):
            msg = f"不支持的表单方法: {method}"
            raise ValueError(msg)
        self.method = normalized
        self.model = model
        self.old_input: dict[str, Any] = dict(old_input or {})
        self.errors: FieldErrors = {name: list(messages) for name, messages in (errors or {}).items()}
        self.attributes: dict[str, Any] = {}
        self.is_novalidate = novalidate
        self._action: str | None = None
        self._route: tuple[str, dict[str, Any]] | None = None

    def __repr__(self) -> str:
        return f"<Form method={self.method!r}>"

    # ------------------------------------------------------------------ #
    # Fluent configuration
    # ------------------------------------------------------------------ #
    def action(self, url: str) -> Form:
        self._action = url
        self._route = None
        return self

    def route(self, endpoint: str, **values: Any) -> Form:
        """使用 Flask 端点作为 action,渲染时通过 ``url_for`` 解析."""
        self._route = (endpoint, values)
        self._action = None
        return self

    def attr(self, name: str, value: Any = True) -> Form:
        self.attributes[name] = value
        return self

    def classes(self, *names: str) -> Form:
        current = str(self.attributes.get("class", "")).split()
        current.extend(name for name in names if name not in current)
        self.attributes["class"] = " ".join(current)
        return self

    def with_files(self) -> Form:
        self.attributes["enctype"] = "multipart/form-data"
        return self

    def novalidate(self, value: bool = True) -> Form:
        """设置 novalidate 属性,跳过浏览器端 HTML5 校验."""
        self.is_novalidate = value
        return self

    # ------------------------------------------------------------------ #
    # Rendering helpers
    # ------------------------------------------------------------------ #
    @property
    def browser_method(self) -> str:
        return HttpMethod.browser_method(self.method)

    @property
    def spoofed_method(self) -> str | None:
        """需要伪装时返回真实方法,否则返回 None."""
        return self.method if HttpMethod.needs_spoofing(self.method) else None

    def resolve_action(self) -> str | None:
        if self._route is not None:
            from flask import url_for

            endpoint, values = self._route
            return url_for(endpoint, **values)
        return self._action

    def html_attributes(self) -> dict[str, Any]:
        attributes: dict[str, Any] = {
            "method": self.browser_method.lower(),
            "action": self.resolve_action(),
        }
        attributes.update(self.attributes)
        if self.is_novalidate:
            attributes["novalidate"] = True
        return attributes

    def open(self) -> Markup:
        """渲染开始标签,必要时附带 ``_method`` 隐藏字段."""
        markup = Markup("<form {}>").format(render_attributes(self.html_attributes()))
        spoofed = self.spoofed_method
        if spoofed:
            markup += Markup('<input type="hidden" name="{}" value="{}">').format(HttpMethod.SPOOF_FIELD, spoofed)
        return markup

    def close(self) -> Markup:
        return Markup("</form>")

    def value_for(self, name: str, default: Any = None) -> Any:
        """解析字段的预填值.

        优先级: 上次提交的输入 > 绑定实体的属性或键 > ``default``.
        """
        if name in self.old_input:
            return self.old_input[name]
        if self.model is not None:
            if isinstance(self.model, Mapping):
                value = self.model.get(name, _MISSING)
            else:
                value = getattr(self.model, name, _MISSING)
            if value is not _MISSING:
                return value
        return default

    def error_for(self, name: str) -> str | None:
        """返回字段的第一条错误文案."""
        messages = self.errors.get(name)
        return messages[0] if messages else None
