"""把请求或映射规范化为待校验的字典."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from werkzeug.datastructures import MultiDict
from werkzeug.wrappers import Request

from htmlform.errors import MissingInputError


def extract_payload(source: object) -> dict[str, Any]:
    """提取请求负载数据.

    Args:
        source: Flask/Werkzeug 请求对象、MultiDict 或普通映射.

    Returns:
        请求数据字典.JSON 请求读取 body,其余读取表单数据.

    Raises:
        MissingInputError: 输入类型无法识别时抛出.

    """
    if isinstance(source, Request):
        if source.is_json:
            body = source.get_json(silent=True)
            return dict(body) if isinstance(body, Mapping) else {}
        return source.form.to_dict()
    if isinstance(source, MultiDict):
        return source.to_dict()
    if isinstance(source, Mapping):
        return dict(source)
    msg = f"无法识别的输入类型: {type(source).__name__}"
    raise MissingInputError(msg, message_key="INVALID_REQUEST")
