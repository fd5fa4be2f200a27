"""Flask 扩展: 为每个请求创建绑定了主题与请求上下文的表单模型."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from flask import current_app, has_request_context, request

from htmlform.forms.builder import FormBuilder
from htmlform.settings import Settings, get_settings
from htmlform.theme import Theme
from htmlform.utils.structlog_config import get_logger, structlog_config

if TYPE_CHECKING:
    from flask import Flask

    from htmlform.form_model import FormModel

FormModelT = TypeVar("FormModelT", bound="FormModel")

EXTENSION_KEY = "htmlform"

logger = get_logger("htmlform.extension")


class HtmlForms:
    """htmlform 的 Flask 扩展.

    Example:
        >>> forms = HtmlForms(app)
        >>> user_form = forms.make(UserForm).for_update().model(user)

    """

    def __init__(self, app: Flask | None = None, settings: Settings | None = None) -> None:
        self.settings = settings
        self.theme: Theme | None = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """注册扩展并创建共享应用模板加载器的主题."""
        settings = self.settings or get_settings()
        self.settings = settings
        structlog_config.configure(settings.log_level)
        self.theme = Theme.from_flask(app, settings)
        app.extensions[EXTENSION_KEY] = self
        app.jinja_env.globals.setdefault("htmlform", self)
        logger.info("htmlform 已注册", module="extension", action="init_app", theme=settings.theme)

    def make(self, form_model_class: type[FormModelT], **kwargs: Any) -> FormModelT:
        """创建表单模型实例.

        每次调用都使用新的 FormBuilder,绑定实体与回填输入不会在请求之间共享.
        在请求上下文中调用时自动注入当前请求,供 ``validate()`` 使用.
        """
        if self.theme is None or self.settings is None:
            msg = "HtmlForms 尚未调用 init_app"
            raise RuntimeError(msg)
        kwargs.setdefault("request", request._get_current_object() if has_request_context() else None)  # type: ignore[attr-defined]
        return form_model_class(FormBuilder(self.settings), self.theme, settings=self.settings, **kwargs)


def get_extension() -> HtmlForms:
    """返回当前应用注册的扩展实例."""
    extension = current_app.extensions.get(EXTENSION_KEY)
    if extension is None:
        msg = "当前应用未注册 HtmlForms 扩展"
        raise RuntimeError(msg)
    return extension
