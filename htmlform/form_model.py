"""表单模型.

子类在 setup 钩子中声明字段与按钮,表单模型在首次需要时惰性初始化,
并从同一份字段声明推导 HTML 渲染、前端资源与后端校验规则.

典型用法:

    class UserForm(FormModel):
        def setup(self) -> None:
            self.fields.text("name").required()
            self.fields.email("email").required()
            self.buttons.submit("保存")

        def update_setup(self) -> None:
            self.setup()
            self.fields.hidden("id")

    form = UserForm(form_builder, theme).for_update().model(user)
    html = form.render()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from htmlform.constants import SetupMode
from htmlform.errors import MissingInputError, UnknownOperationError
from htmlform.fields.buttons import ButtonCollection
from htmlform.fields.collections import FieldCollection
from htmlform.settings import Settings, get_settings
from htmlform.utils.structlog_config import get_logger, log_with_context
from htmlform.validation.validator import Validator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from htmlform.fields.buttons import Button
    from htmlform.fields.field import Field, FieldGroup
    from htmlform.forms.builder import FormBuilder
    from htmlform.forms.form import Form
    from htmlform.theme import Theme
    from htmlform.types import FieldLike, ValidationRules

logger = get_logger("htmlform.form_model")

# 操作模式到 setup 钩子名称的映射,未列出的模式使用通用钩子
SETUP_HOOKS: dict[SetupMode, str] = {
    SetupMode.CREATE: "creation_setup",
    SetupMode.UPDATE: "update_setup",
    SetupMode.GENERIC: "setup",
}


def _unique(items: Iterable[str]) -> list[str]:
    """去重并保留首次出现的顺序."""
    return list(dict.fromkeys(items))


class FormModel:
    """声明式表单模型.

    状态机只有两个状态: 未初始化(``form is None``)与已初始化.首次调用
    render/scripts/styles/get_validation_rules/novalidate 或任何转发操作时,
    ``run_setup`` 构建 Form 并执行与操作模式对应的 setup 钩子,此后不再重建.

    操作模式、模板与绑定实体须在触发初始化之前配置.

    Attributes:
        method: 操作模式,"post" 为创建,"put" 为更新,其他值走通用 setup.
        custom_template: 自定义模板标识.
        form: 初始化后的 Form,初始化前为 None.
        fields: 字段集合.
        buttons: 按钮集合.
        request: 可选的请求上下文,``validate`` 未传入数据时使用.

    """

    def __init__(
        self,
        form_builder: FormBuilder,
        theme: Theme,
        *,
        fields: FieldCollection | None = None,
        buttons: ButtonCollection | None = None,
        validator: Validator | None = None,
        request: object | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.form_builder = form_builder
        self.theme = theme
        self.fields = fields if fields is not None else FieldCollection()
        self.buttons = buttons if buttons is not None else ButtonCollection()
        self.validator = validator or Validator()
        self.request = request
        self.settings = settings or get_settings()
        self.method = SetupMode.CREATE.value
        self.custom_template: str | None = None
        self.form: Form | None = None

    def __repr__(self) -> str:
        state = "initialized" if self.is_initialized else "uninitialized"
        return f"<{self.__class__.__name__} method={self.method!r} {state}>"

    # ------------------------------------------------------------------ #
    # Setup state machine
    # ------------------------------------------------------------------ #
    @property
    def is_initialized(self) -> bool:
        return self.form is not None

    @property
    def mode(self) -> SetupMode:
        return SetupMode.from_method(self.method)

    def run_setup(self) -> None:
        """构建 Form 并执行 setup 钩子,已初始化时直接返回.

        构建或钩子抛出异常时,异常原样抛出,``form`` 回到 None,
        字段与按钮恢复到钩子执行前的内容,下次调用会重新初始化.
        """
        if self.form is not None:
            return

        # 钩子内可以访问 self.form,转发调用不会重入初始化
        self.form = self.form_builder.build(self.method)
        fields_before = self.fields.all()
        buttons_before = self.buttons.all()
        hook: Callable[[], None] = getattr(self, SETUP_HOOKS[self.mode])
        try:
            hook()
        except Exception:
            self.form = None
            self.fields.restore(fields_before)
            self.buttons.restore(buttons_before)
            raise

        logger.debug(
            "表单初始化完成",
            module="form_model",
            action="run_setup",
            form_model=self.__class__.__name__,
            mode=self.mode.value,
            fields=len(self.fields),
            buttons=len(self.buttons),
        )

    def setup(self) -> None:
        """声明创建与更新共用的表单属性、字段与按钮."""

    def creation_setup(self) -> None:
        """声明创建场景的字段与按钮,默认复用 ``setup``."""
        self.setup()

    def update_setup(self) -> None:
        """声明更新场景的字段与按钮,默认复用 ``setup``."""
        self.setup()

    # ------------------------------------------------------------------ #
    # Fluent configuration
    # ------------------------------------------------------------------ #
    def for_creation(self) -> FormModel:
        return self.using_method(SetupMode.CREATE.value)

    def for_update(self) -> FormModel:
        return self.using_method(SetupMode.UPDATE.value)

    def using_method(self, method: str) -> FormModel:
        """设置任意操作模式,例如 "get" 用于查询表单."""
        self._warn_if_initialized("using_method")
        self.method = method.lower()
        return self

    def template(self, template: str) -> FormModel:
        """设置自定义模板,覆盖默认的 ``@form``."""
        self.custom_template = template
        return self

    def model(self, model: object) -> FormModel:
        """绑定用于预填字段值的实体,下一次初始化时生效."""
        self._warn_if_initialized("model")
        self.form_builder.set_current_model(model)
        return self

    def novalidate(self, value: bool = True) -> FormModel:
        """设置 novalidate 属性,跳过 HTML5 校验以便在开发环境测试后端校验.

        初始化之后调用同样有效.
        """
        self.run_setup()
        self._built_form.novalidate(value)
        return self

    def _warn_if_initialized(self, action: str) -> None:
        if self.form is not None:
            logger.debug(
                "表单已初始化,配置不会生效",
                module="form_model",
                action=action,
                form_model=self.__class__.__name__,
            )

    @property
    def _built_form(self) -> Form:
        if self.form is None:
            msg = "表单尚未初始化"
            raise RuntimeError(msg)
        return self.form

    # ------------------------------------------------------------------ #
    # Rendering
    # ------------------------------------------------------------------ #
    def render(self, template: str | None = None) -> Markup:
        """渲染整个表单.

        Args:
            template: 本次渲染使用的模板,优先级高于 ``template()`` 设置的模板.

        Returns:
            Markup: 渲染后的 HTML.

        """
        self.run_setup()
        resolved = template or self.custom_template or self.settings.default_template
        return self.theme.render(
            resolved,
            {
                "form": self.form,
                "fields": self.fields,
                "buttons": self.buttons,
            },
        )

    def to_html(self) -> Markup:
        return self.render()

    def __html__(self) -> str:
        return str(self.render())

    def __str__(self) -> str:
        return str(self.render())

    # ------------------------------------------------------------------ #
    # Assets
    # ------------------------------------------------------------------ #
    def scripts(self) -> list[str]:
        """汇总字段依赖的脚本 URL,按首次出现顺序去重."""
        self.run_setup()
        return _unique(url for _name, field in self.fields.only_fields() for url in field.scripts)

    def styles(self) -> list[str]:
        """汇总字段依赖的样式 URL,按首次出现顺序去重."""
        self.run_setup()
        return _unique(url for _name, field in self.fields.only_fields() for url in field.styles)

    def render_scripts(self) -> Markup:
        return Markup("").join(self.theme.script_tag(url) for url in self.scripts())

    def render_styles(self) -> Markup:
        return Markup("").join(self.theme.style_tag(url) for url in self.styles())

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #
    def get_validation_rules(self) -> ValidationRules:
        """收集字段的校验规则.

        只收集真正的字段且 ``included`` 为 True 的条目,分组等非字段条目被跳过.

        Returns:
            字段名到规则描述符列表的映射.

        """
        self.run_setup()
        return {
            name: entry.get_validation_rules()  # type: ignore[attr-defined]
            for name, entry in self.fields.all().items()
            if entry.is_field and getattr(entry, "included", False)
        }

    def validate(self, data: object | None = None) -> dict[str, Any]:
        """按字段规则校验输入.

        Args:
            data: 请求对象或映射;为空时使用构造时注入的 ``request``.

        Returns:
            校验器返回的数据,原样透传.

        Raises:
            MissingInputError: 既没有传入数据也没有请求上下文.
            ValidationError: 由校验器抛出,不做转换.

        """
        source = data if data is not None else self.request
        if source is None:
            log_with_context(
                "warning",
                "缺少待校验的输入",
                module="form_model",
                action="validate",
                context={"form_model": self.__class__.__name__},
            )
            raise MissingInputError
        return self.validator.validate(source, self.get_validation_rules())

    # ------------------------------------------------------------------ #
    # Forwarding
    # ------------------------------------------------------------------ #
    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """把操作转发给 Form、按钮集合或字段集合.

        解析顺序: Form > ButtonCollection > FieldCollection,以各自的
        ``forwarded_operations`` 声明为准.

        Raises:
            UnknownOperationError: 三者都不支持该操作时抛出.

        """
        self.run_setup()
        for target in (self.form, self.buttons, self.fields):
            if name in getattr(target, "forwarded_operations", ()):
                return getattr(target, name)(*args, **kwargs)
        msg = f"{self.__class__.__name__} 不支持操作: {name}"
        raise UnknownOperationError(msg, extra={"operation": name})

    def field(self, name: str) -> FieldLike:
        """按名称获取字段或分组.

        Raises:
            UnknownFieldError: 字段不存在时抛出.

        """
        self.run_setup()
        return self.fields.get(name)

    def __getitem__(self, name: str) -> FieldLike:
        return self.field(name)

    def __contains__(self, name: object) -> bool:
        self.run_setup()
        return name in self.fields

    def _declare(self, name: str, *args: Any, **kwargs: Any) -> Any:
        # 字段声明直接交给字段集合,不经过 Form 与按钮的同名操作
        self.run_setup()
        return getattr(self.fields, name)(*args, **kwargs)

    # Form
    def action(self, url: str) -> FormModel:
        self.call("action", url)
        return self

    def route(self, endpoint: str, **values: Any) -> FormModel:
        self.call("route", endpoint, **values)
        return self

    def attr(self, name: str, value: Any = True) -> FormModel:
        self.call("attr", name, value)
        return self

    def classes(self, *names: str) -> FormModel:
        self.call("classes", *names)
        return self

    def with_files(self) -> FormModel:
        self.call("with_files")
        return self

    # Buttons
    def submit(self, text: str | None = None, **kwargs: Any) -> Button:
        return self.call("submit", text, **kwargs)

    def button(self, name: str, text: str | None = None, **kwargs: Any) -> Button:
        return self.call("button", name, text, **kwargs)

    def link(self, url: str, text: str, **kwargs: Any) -> Button:
        return self.call("link", url, text, **kwargs)

    # Fields
    def add(self, name: str, type: str = "text", **kwargs: Any) -> Field:
        return self._declare("add", name, type, **kwargs)

    def text(self, name: str, **kwargs: Any) -> Field:
        return self._declare("text", name, **kwargs)

    def email(self, name: str, **kwargs: Any) -> Field:
        return self._declare("email", name, **kwargs)

    def password(self, name: str, **kwargs: Any) -> Field:
        return self._declare("password", name, **kwargs)

    def number(self, name: str, **kwargs: Any) -> Field:
        return self._declare("number", name, **kwargs)

    def textarea(self, name: str, **kwargs: Any) -> Field:
        return self._declare("textarea", name, **kwargs)

    def select(self, name: str, options: dict[str, str] | None = None, **kwargs: Any) -> Field:
        return self._declare("select", name, options, **kwargs)

    def checkbox(self, name: str, **kwargs: Any) -> Field:
        return self._declare("checkbox", name, **kwargs)

    def hidden(self, name: str, **kwargs: Any) -> Field:
        return self._declare("hidden", name, **kwargs)

    def file(self, name: str, **kwargs: Any) -> Field:
        return self._declare("file", name, **kwargs)

    def group(
        self,
        name: str,
        legend: str | None = None,
        build: Callable[[FieldCollection], object] | None = None,
    ) -> FieldGroup:
        return self._declare("group", name, legend, build)
