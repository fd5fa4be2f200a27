"""字段、字段分组、按钮及其集合."""

from .buttons import Button, ButtonCollection
from .collections import FieldCollection
from .field import Field, FieldGroup

__all__ = [
    "Button",
    "ButtonCollection",
    "Field",
    "FieldCollection",
    "FieldGroup",
]
