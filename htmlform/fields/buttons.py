"""表单按钮与按钮集合."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


class Button:
    """表单按钮.``type`` 为 ``link`` 时渲染为超链接."""

    def __init__(
        self,
        name: str,
        type: str = "submit",
        text: str | None = None,
        *,
        url: str | None = None,
        attributes: Mapping[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.type = type
        self.text = text if text is not None else name.replace("_", " ").capitalize()
        self.url = url
        self.attributes: dict[str, Any] = dict(attributes or {})

    def __repr__(self) -> str:
        return f"<Button {self.name!r} type={self.type!r}>"

    @property
    def is_link(self) -> bool:
        return self.type == "link"

    def attr(self, name: str, value: Any = True) -> Button:
        self.attributes[name] = value
        return self

    def classes(self, *names: str) -> Button:
        current = str(self.attributes.get("class", "")).split()
        current.extend(name for name in names if name not in current)
        self.attributes["class"] = " ".join(current)
        return self


class ButtonCollection:
    """按钮集合,按插入顺序保存,同名按钮原位替换."""

    forwarded_operations: ClassVar[frozenset[str]] = frozenset(
        {"submit", "button", "reset", "link"},
    )

    def __init__(self) -> None:
        self._buttons: dict[str, Button] = {}

    def __len__(self) -> int:
        return len(self._buttons)

    def __iter__(self) -> Iterator[Button]:
        return iter(self._buttons.values())

    def __contains__(self, name: object) -> bool:
        return name in self._buttons

    def __getitem__(self, name: str) -> Button:
        return self._buttons[name]

    def all(self) -> dict[str, Button]:
        return dict(self._buttons)

    def restore(self, buttons: Mapping[str, Button]) -> None:
        self._buttons = dict(buttons)

    def add(self, name: str, type: str = "button", text: str | None = None, **kwargs: Any) -> Button:
        button = Button(name, type, text, **kwargs)
        self._buttons[name] = button
        return button

    def submit(self, text: str | None = None, name: str = "submit", **kwargs: Any) -> Button:
        return self.add(name, "submit", text, **kwargs)

    def button(self, name: str, text: str | None = None, **kwargs: Any) -> Button:
        return self.add(name, "button", text, **kwargs)

    def reset(self, text: str | None = None, name: str = "reset", **kwargs: Any) -> Button:
        return self.add(name, "reset", text, **kwargs)

    def link(self, url: str, text: str, name: str | None = None, **kwargs: Any) -> Button:
        return self.add(name or text.lower().replace(" ", "_"), "link", text, url=url, **kwargs)
