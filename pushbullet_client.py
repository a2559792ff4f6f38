from __future__ import annotations

import json
import logging
import os
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Set
from urllib.parse import urljoin

import requests

from pushbullet_endpoints import API_URL, DEFAULT_ENDPOINTS, OPERATIONS, PreparedCall, PushbulletEndpoints, prepare_call
from pushbullet_errors import (
    DecodeError,
    ErrorKind,
    ProtocolError,
    PushbulletError,
    TransportError,
    classify_status,
)

log = logging.getLogger(__name__)

__all__ = [
    "PushbulletClient",
    "PushbulletError",
    "TransportError",
    "ProtocolError",
    "DecodeError",
    "ErrorKind",
    "decode_response",
]


def _clean_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        raise ValueError("PUSHBULLET_API_URL is empty")
    return url.rstrip("/") + "/"


def _mask_token(token: str) -> str:
    return token[:6] + "..." if len(token) > 6 else token


def _try_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return None


def decode_response(status_code: int, text: str) -> Any:
    """
    Статус + тело -> JSON-значение, либо исключение.

    - статус из таблицы ошибок: ProtocolError (тело прикладываем, если это JSON)
    - статус без ошибки, но тело не JSON: DecodeError
    """
    kind = classify_status(status_code)
    if kind is not None:
        raise ProtocolError(kind, status_code, body=_try_json(text), raw_body=text)
    try:
        return json.loads(text)
    except ValueError:
        raise DecodeError(status_code, text) from None


@dataclass
class PushbulletClient:
    access_token: str = ""
    base_url: str = API_URL
    endpoints: PushbulletEndpoints = DEFAULT_ENDPOINTS
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)
    _threads: Set[threading.Thread] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.base_url = _clean_base_url(self.base_url)

    @classmethod
    def from_env(cls) -> "PushbulletClient":
        return cls(
            access_token=os.environ["PUSHBULLET_ACCESS_TOKEN"].strip(),
            base_url=os.environ.get("PUSHBULLET_API_URL") or API_URL,
        )

    def set_token(self, token: str) -> None:
        """
        Новый токен для всех последующих запросов. Уже отправленные запросы
        остаются со старым.
        """
        self.access_token = token

    def _headers(self) -> dict[str, str]:
        return {"Access-Token": self.access_token}

    def _send(self, call: PreparedCall) -> requests.Response:
        url = urljoin(self.base_url, call.path.lstrip("/"))
        # токен читается один раз, здесь
        headers = self._headers()
        log.debug("%s %s token=%s", call.method, call.path, _mask_token(headers["Access-Token"]))
        try:
            resp = requests.request(call.method, url, headers=headers, data=call.data)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{call.method} {url} failed: {e}") from e
        log.debug("%s %s -> HTTP %s (%d bytes)", call.method, call.path, resp.status_code, len(resp.content or b""))
        return resp

    def request(self, call: PreparedCall) -> Any:
        resp = self._send(call)
        try:
            return decode_response(resp.status_code, resp.text)
        except ProtocolError as e:
            log.warning("%s %s -> %s", call.method, call.path, e)
            raise

    def call(self, name: str, *, iden: Optional[str] = None, data: Optional[Mapping[str, Any]] = None) -> Any:
        """Вызов операции по имени из OPERATIONS (KeyError, если такой нет)."""
        return self.request(prepare_call(name, iden=iden, data=data, endpoints=self.endpoints))

    def submit(self, name: str, *args: Any, **kwargs: Any) -> "Future[Any]":
        """
        То же, что self.<name>(...), но в фоновом потоке: возвращает Future.

        Каждый вызов получает свой поток, так что зависший запрос держит
        только свой Future. Future завершается либо результатом, либо
        исключением PushbulletError. Порядок завершения не гарантируется.
        """
        if name not in OPERATIONS:
            raise KeyError(name)
        fn = getattr(self, name)
        future: "Future[Any]" = Future()

        def run() -> None:
            try:
                if not future.set_running_or_notify_cancel():
                    return
                try:
                    result = fn(*args, **kwargs)
                except BaseException as e:
                    future.set_exception(e)
                else:
                    future.set_result(result)
            finally:
                with self._lock:
                    self._threads.discard(threading.current_thread())

        thread = threading.Thread(target=run, name=f"pushbullet-{name}", daemon=True)
        with self._lock:
            self._threads.add(thread)
        thread.start()
        return future

    def close(self) -> None:
        """Ждёт завершения всех вызовов, запущенных через submit."""
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join()

    def __enter__(self) -> "PushbulletClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _bind(name: str) -> Callable[..., Any]:
    op = OPERATIONS[name]

    if op.with_iden and op.with_data:
        def method(self: PushbulletClient, iden: str, data: Optional[Mapping[str, Any]] = None) -> Any:
            return self.call(name, iden=iden, data=data)
    elif op.with_iden:
        def method(self: PushbulletClient, iden: str) -> Any:  # type: ignore[misc]
            return self.call(name, iden=iden)
    elif op.with_data:
        def method(self: PushbulletClient, data: Optional[Mapping[str, Any]] = None) -> Any:  # type: ignore[misc]
            return self.call(name, data=data)
    else:
        def method(self: PushbulletClient) -> Any:  # type: ignore[misc]
            return self.call(name)

    method.__name__ = name
    method.__qualname__ = f"PushbulletClient.{name}"
    path = getattr(DEFAULT_ENDPOINTS, op.resource) + ("/{iden}" if op.with_iden else "")
    method.__doc__ = f"{op.method} {path}\n\n{op.doc}"
    return method


for _name in OPERATIONS:
    setattr(PushbulletClient, _name, _bind(_name))
del _name
