"""基于 Jinja2 的主题渲染器.

模板标识以 ``@`` 开头时解析为当前主题下的模板,例如 ``@form`` 对应
``themes/<theme>/form.html``;其余标识按普通模板路径查找.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup

from htmlform.errors import TemplateNotFoundError
from htmlform.forms.form import render_attributes
from htmlform.settings import TEMPLATES_ROOT, Settings, get_settings
from htmlform.utils.structlog_config import get_logger, log_with_context

if TYPE_CHECKING:
    from flask import Flask

    from htmlform.types import TemplateContext

logger = get_logger("htmlform.theme")

THEME_PREFIX = "@"


class Theme:
    """主题渲染器.

    Attributes:
        name: 主题名称,对应 ``themes/`` 下的目录.
        environment: Jinja2 环境,模板自动转义.

    """

    def __init__(self, settings: Settings | None = None, *, loader: BaseLoader | None = None) -> None:
        self.settings = settings or get_settings()
        self.name = self.settings.theme
        loaders: list[BaseLoader] = []
        if loader is not None:
            loaders.append(loader)
        if self.settings.template_dirs:
            loaders.append(FileSystemLoader(list(self.settings.template_dirs)))
        loaders.append(FileSystemLoader(str(TEMPLATES_ROOT)))
        self.environment = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(default=True, default_for_string=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.environment.globals.update(
            theme_template=self.resolve,
            attrs=render_attributes,
        )

    @classmethod
    def from_flask(cls, app: Flask, settings: Settings | None = None) -> Theme:
        """创建与 Flask 应用共享模板加载器的主题,应用模板优先."""
        return cls(settings, loader=app.jinja_env.loader)

    def resolve(self, template: str) -> str:
        """把模板标识解析为模板路径.

        Args:
            template: ``@form``、``@fields/text`` 形式的主题模板,或普通模板路径.

        Returns:
            str: 交给 Jinja2 加载器的模板路径.

        """
        if not template.startswith(THEME_PREFIX):
            return template
        name = template[len(THEME_PREFIX) :]
        if not name.endswith(".html"):
            name = f"{name}.html"
        return f"themes/{self.name}/{name}"

    def render(self, template: str, context: TemplateContext) -> Markup:
        """渲染模板.

        Args:
            template: 模板标识.
            context: 渲染上下文.

        Returns:
            Markup: 渲染结果,可直接嵌入其他模板而不会被二次转义.

        Raises:
            TemplateNotFoundError: 模板不存在时抛出.

        """
        path = self.resolve(template)
        try:
            compiled = self.environment.get_template(path)
        except TemplateNotFound as exc:
            log_with_context(
                "error",
                "模板不存在",
                module="theme",
                action="render",
                context={"template": template, "path": path, "theme": self.name},
            )
            msg = f"模板不存在: {template}"
            raise TemplateNotFoundError(msg, extra={"template": template, "path": path}) from exc
        logger.debug("渲染模板", module="theme", action="render", template=template, path=path)
        return Markup(compiled.render(**context))

    def script_tag(self, url: str) -> Markup:
        return Markup('<script src="{}"></script>').format(url)

    def style_tag(self, url: str) -> Markup:
        return Markup('<link href="{}" rel="stylesheet">').format(url)
