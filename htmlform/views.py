"""通用表单模型视图.

集成 GET/POST 逻辑,依赖 FormModel 与 FormHandler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, TypeVar

from flask import abort, flash, redirect, render_template, request, url_for
from flask.views import MethodView

from htmlform.constants import FlashCategory
from htmlform.errors import ValidationError
from htmlform.extension import get_extension
from htmlform.utils.structlog_config import log_with_context

if TYPE_CHECKING:
    from flask.typing import ResponseReturnValue

    from htmlform.form_model import FormModel
    from htmlform.types import FieldErrors, PayloadMapping, TemplateContext

ResourceT = TypeVar("ResourceT")


class FormHandler(Protocol[ResourceT]):
    """表单持久化协议.

    视图不直接访问存储,load/save 均交给处理器完成.
    """

    def load(self, resource_id: int) -> ResourceT | None:
        """按 ID 加载资源,不存在时返回 None."""
        ...

    def save(self, data: dict[str, Any], resource: ResourceT | None = None) -> ResourceT:
        """创建(resource 为 None)或更新资源."""
        ...


class FormModelView(MethodView, Generic[ResourceT]):
    """通用 GET/POST 视图,子类只需设置类属性.

    Attributes:
        form_model_class: 表单模型类型.
        handler_class: 持久化处理器类型.
        template: 页面模板,表单模型以 ``form`` 变量传入.
        success_message: 保存成功后的提示语.
        redirect_endpoint: 保存成功后跳转的端点,为空时回到来源页.

    """

    form_model_class: ClassVar[type[FormModel]]
    handler_class: ClassVar[type[FormHandler[Any]]]
    template: ClassVar[str]
    success_message: ClassVar[str] = "保存成功"
    redirect_endpoint: ClassVar[str | None] = None

    def __init__(self) -> None:
        """初始化视图.

        Raises:
            RuntimeError: 当子类未配置必需的类属性时抛出.

        """
        for attribute in ("form_model_class", "handler_class", "template"):
            if not getattr(self, attribute, None):
                msg = f"{self.__class__.__name__} 未配置 {attribute}"
                raise RuntimeError(msg)
        self.handler: FormHandler[ResourceT] = self.handler_class()

    # ------------------------------------------------------------------ #
    # HTTP Methods
    # ------------------------------------------------------------------ #
    def get(self, resource_id: int | None = None, **kwargs: object) -> ResponseReturnValue:
        """GET 请求处理,显示表单.

        Args:
            resource_id: 资源 ID,如果为 None 则为创建模式.
            **kwargs: 额外的路由参数.

        Returns:
            渲染的 HTML 字符串.

        """
        resource = self._load_resource(self._resolve_resource_id(resource_id, kwargs))
        form_model = self._make_form(resource)
        return render_template(self.template, **self._build_context(form_model, resource))

    def post(self, resource_id: int | None = None, **kwargs: object) -> ResponseReturnValue:
        """POST 请求处理,提交表单.

        Returns:
            成功时返回重定向响应,校验失败时回填输入并重新渲染表单.

        """
        resolved_id = self._resolve_resource_id(resource_id, kwargs)
        resource = self._load_resource(resolved_id)
        form_model = self._make_form(resource)

        try:
            data = form_model.validate()
        except ValidationError as exc:
            log_with_context(
                "info",
                "表单提交未通过校验",
                module="views",
                action=f"{self.__class__.__name__}.post",
                context={
                    "resource_id": resolved_id,
                    "form_mode": form_model.mode.value,
                    "fields": sorted(exc.errors),
                },
            )
            flash(str(exc), FlashCategory.ERROR)
            form_model = self._make_form(resource, old_input=exc.data, errors=exc.errors)
            return render_template(self.template, **self._build_context(form_model, resource))

        instance = self.handler.save(data, resource)
        flash(self.get_success_message(instance), FlashCategory.SUCCESS)
        return redirect(self._resolve_success_redirect(instance))

    # 浏览器通过 _method 伪装,API 客户端可能直接发送 PUT
    put = post

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _load_resource(self, resource_id: int | None) -> ResourceT | None:
        """加载资源,路由给出 ID 但资源不存在时返回 404."""
        if resource_id is None:
            return None
        resource = self.handler.load(resource_id)
        if resource is None:
            log_with_context(
                "info",
                "表单资源不存在",
                module="views",
                action=f"{self.__class__.__name__}._load_resource",
                context={"resource_id": resource_id},
            )
            abort(404)
        return resource

    def _resolve_resource_id(self, resource_id: int | None, kwargs: dict[str, object]) -> int | None:
        """解析资源 ID.

        支持 ``resource_id`` 以及任意以 ``_id`` 结尾的路由参数.
        """
        if resource_id is not None:
            return resource_id
        for key, candidate in kwargs.items():
            if not key.endswith("_id"):
                continue
            if isinstance(candidate, int):
                return candidate
            if isinstance(candidate, str):
                try:
                    return int(candidate)
                except ValueError:
                    continue
        return None

    def _make_form(
        self,
        resource: ResourceT | None,
        *,
        old_input: PayloadMapping | None = None,
        errors: FieldErrors | None = None,
    ) -> FormModel:
        form_model = get_extension().make(self.form_model_class)
        if resource is None:
            form_model.for_creation()
        else:
            form_model.for_update().model(resource)
        form_model.form_builder.set_old_input(old_input)
        form_model.form_builder.set_errors(errors)
        return form_model

    def _build_context(self, form_model: FormModel, resource: ResourceT | None) -> TemplateContext:
        return {
            "form": form_model,
            "resource": resource,
            "form_mode": "edit" if resource is not None else "create",
        }

    def _resolve_success_redirect(self, instance: ResourceT) -> str:
        endpoint = self.redirect_endpoint
        if not endpoint:
            return request.referrer or request.path
        return url_for(endpoint, **self._success_redirect_kwargs(instance))

    def _success_redirect_kwargs(self, instance: ResourceT) -> dict[str, Any]:
        _ = instance
        return {}

    def get_success_message(self, instance: ResourceT) -> str:
        _ = instance
        return self.success_message
