"""Form 元素与构建器."""

from .builder import FormBuilder
from .form import Form

__all__ = ["Form", "FormBuilder"]
