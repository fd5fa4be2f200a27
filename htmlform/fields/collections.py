"""有序、按名称索引的字段集合."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from htmlform.errors import UnknownFieldError
from htmlform.fields.field import Field, FieldGroup

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from htmlform.types import FieldLike


class FieldCollection:
    """字段集合.

    按插入顺序保存字段与分组,同名条目重复添加时原位替换.

    Attributes:
        forwarded_operations: 表单模型允许转发到本集合的操作名.

    """

    forwarded_operations: ClassVar[frozenset[str]] = frozenset(
        {
            "add",
            "text",
            "email",
            "password",
            "number",
            "url",
            "textarea",
            "select",
            "radios",
            "checkbox",
            "hidden",
            "file",
            "group",
            "get",
            "only_fields",
        },
    )

    def __init__(self) -> None:
        self._entries: dict[str, FieldLike] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FieldLike]:
        return iter(self._entries.values())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __getitem__(self, name: str) -> FieldLike:
        return self.get(name)

    def __repr__(self) -> str:
        return f"<FieldCollection {list(self._entries)}>"

    def get(self, name: str) -> FieldLike:
        """按名称获取条目.

        Raises:
            UnknownFieldError: 名称不存在时抛出.

        """
        try:
            return self._entries[name]
        except KeyError:
            msg = f"字段不存在: {name}"
            raise UnknownFieldError(msg, extra={"field": name}) from None

    def all(self) -> dict[str, FieldLike]:
        """返回全部条目(含分组)的有序副本."""
        return dict(self._entries)

    def only_fields(self) -> Iterator[tuple[str, Field]]:
        """只产出真正的字段,跳过分组等非字段条目."""
        for name, entry in self._entries.items():
            if entry.is_field:
                yield name, entry  # type: ignore[misc]

    def restore(self, entries: Mapping[str, FieldLike]) -> None:
        """用 ``all()`` 得到的快照替换当前条目."""
        self._entries = dict(entries)

    def put(self, entry: FieldLike) -> FieldLike:
        """放入已构造的条目,同名时原位替换."""
        self._entries[entry.name] = entry
        return entry

    # ------------------------------------------------------------------ #
    # Declarations
    # ------------------------------------------------------------------ #
    def add(self, name: str, type: str = "text", **kwargs: Any) -> Field:
        field = Field(name, type, **kwargs)
        self.put(field)
        return field

    def text(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "text", **kwargs)

    def email(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "email", **kwargs)

    def password(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "password", **kwargs)

    def number(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "number", **kwargs)

    def url(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "url", **kwargs)

    def textarea(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "textarea", **kwargs)

    def select(self, name: str, options: Mapping[str, str] | None = None, **kwargs: Any) -> Field:
        return self.add(name, "select", options=options, **kwargs)

    def radios(self, name: str, options: Mapping[str, str] | None = None, **kwargs: Any) -> Field:
        return self.add(name, "radios", options=options, **kwargs)

    def checkbox(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "checkbox", **kwargs)

    def hidden(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "hidden", **kwargs)

    def file(self, name: str, **kwargs: Any) -> Field:
        return self.add(name, "file", **kwargs)

    def group(
        self,
        name: str,
        legend: str | None = None,
        build: Callable[[FieldCollection], object] | None = None,
    ) -> FieldGroup:
        """声明字段分组,可通过 ``build`` 回调填充分组内字段."""
        group = FieldGroup(name, legend)
        if build is not None:
            group.build(build)
        self.put(group)
        return group
