"""htmlform - 声明式表单模型.

同一份字段声明同时驱动 HTML 渲染、前端资源汇总与后端校验规则.
"""

from htmlform.errors import (
    AppError,
    MissingInputError,
    TemplateNotFoundError,
    UnknownFieldError,
    UnknownOperationError,
    ValidationError,
)
from htmlform.extension import HtmlForms
from htmlform.fields import Button, ButtonCollection, Field, FieldCollection, FieldGroup
from htmlform.form_model import FormModel
from htmlform.forms import Form, FormBuilder
from htmlform.settings import Settings
from htmlform.theme import Theme
from htmlform.validation import Validator

__version__ = "0.1.0"

__all__ = [
    "AppError",
    "Button",
    "ButtonCollection",
    "Field",
    "FieldCollection",
    "FieldGroup",
    "Form",
    "FormBuilder",
    "FormModel",
    "HtmlForms",
    "MissingInputError",
    "Settings",
    "TemplateNotFoundError",
    "Theme",
    "UnknownFieldError",
    "UnknownOperationError",
    "ValidationError",
    "Validator",
]
