"""
Единое место для путей и операций Pushbullet API.

Каждая операция: глагол + путь (+ iden в конце пути, + form-тело).
Клиент строит свои методы из таблицы OPERATIONS, поэтому новый эндпоинт
добавляется одной строкой здесь.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

API_URL = "https://api.pushbullet.com"


@dataclass(frozen=True)
class PushbulletEndpoints:
    """
    Базовые REST-пути (v2).
    """

    ephemerals: str = "/v2/ephemerals"
    chats: str = "/v2/chats"
    devices: str = "/v2/devices"
    pushes: str = "/v2/pushes"
    subscriptions: str = "/v2/subscriptions"
    channel_info: str = "/v2/channel-info"
    user: str = "/v2/users/me"


DEFAULT_ENDPOINTS = PushbulletEndpoints()


@dataclass(frozen=True)
class Operation:
    name: str
    method: str
    resource: str
    with_iden: bool = False
    with_data: bool = False
    doc: str = ""

    def path(self, endpoints: PushbulletEndpoints, iden: Optional[str] = None) -> str:
        base = getattr(endpoints, self.resource)
        if not self.with_iden:
            return base
        return f"{base}/{quote(str(iden), safe='')}"


@dataclass(frozen=True)
class PreparedCall:
    method: str
    path: str
    data: Optional[Mapping[str, Any]] = None


def _op(name: str, method: str, resource: str, *, iden: bool = False, data: bool = False, doc: str = "") -> Operation:
    return Operation(name=name, method=method, resource=resource, with_iden=iden, with_data=data, doc=doc)


OPERATIONS: Dict[str, Operation] = {
    op.name: op
    for op in (
        _op(
            "send_ephemeral", "POST", "ephemerals", data=True,
            doc="Send an arbitrary JSON message (ephemeral) directly to all devices on the account. "
            "Ephemerals are not stored and produce no tickle.",
        ),
        _op(
            "get_chats", "GET", "chats",
            doc="List chats of the current user. Large lists are paginated; follow the cursor yourself.",
        ),
        _op(
            "create_chat", "POST", "chats", data=True,
            doc="Create a chat with another user or email address if one does not already exist.",
        ),
        _op("update_chat", "POST", "chats", iden=True, data=True, doc="Update an existing chat."),
        _op("delete_chat", "DELETE", "chats", iden=True, doc="Delete a chat."),
        _op(
            "get_devices", "GET", "devices",
            doc="List devices of the current user. Large lists are paginated; follow the cursor yourself.",
        ),
        _op("create_device", "POST", "devices", data=True, doc="Create a new device."),
        _op("update_device", "POST", "devices", iden=True, data=True, doc="Update an existing device."),
        _op("delete_device", "DELETE", "devices", iden=True, doc="Delete a device."),
        _op("get_pushes", "GET", "pushes", doc="Request push history."),
        _op(
            "create_push", "POST", "pushes", data=True,
            doc="Send a push. File pushes need the file uploaded first, then a push referencing it.",
        ),
        _op("update_push", "POST", "pushes", iden=True, data=True, doc="Update a push (e.g. dismiss it)."),
        _op("delete_push", "DELETE", "pushes", iden=True, doc="Delete a push."),
        _op(
            "delete_pushes", "DELETE", "pushes",
            doc="Delete all pushes of the current user. Deletion happens asynchronously on the server.",
        ),
        _op(
            "get_subscriptions", "GET", "subscriptions",
            doc="List channel subscriptions of the current user. Large lists are paginated.",
        ),
        _op("create_subscription", "POST", "subscriptions", data=True, doc="Subscribe to a channel."),
        _op("update_subscription", "POST", "subscriptions", iden=True, data=True, doc="Update a subscription."),
        _op("delete_subscription", "DELETE", "subscriptions", iden=True, doc="Unsubscribe from a channel."),
        _op("get_channel_info", "GET", "channel_info", doc="Get information about a channel."),
        _op("get_user", "GET", "user", doc="Get the currently logged in user."),
    )
}


def form_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Плоский form-словарь: вложенные dict/list кодируются в JSON-строку поля.

    Иначе requests при urlencode оставит от вложенного dict только ключи.
    """
    return {
        key: json.dumps(value, ensure_ascii=False) if isinstance(value, (dict, list)) else value
        for key, value in data.items()
    }


def prepare_call(
    name: str,
    *,
    iden: Optional[str] = None,
    data: Optional[Mapping[str, Any]] = None,
    endpoints: PushbulletEndpoints = DEFAULT_ENDPOINTS,
) -> PreparedCall:
    """
    Имя операции -> (метод, путь, тело). Неизвестное имя -> KeyError.

    data уходит только в операции с телом, см. form_fields.
    """
    op = OPERATIONS[name]
    return PreparedCall(
        method=op.method,
        path=op.path(endpoints, iden),
        data=form_fields(data) if op.with_data and data is not None else None,
    )
