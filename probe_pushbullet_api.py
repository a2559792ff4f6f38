"""
Небольшая диагностика, чтобы быстро понять:
- рабочий ли токен
- какой формат данных возвращают основные эндпоинты

Запуск:
  python probe_pushbullet_api.py
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Callable, List, Tuple

from dotenv import load_dotenv

from pushbullet_client import PushbulletClient
from pushbullet_errors import ProtocolError, PushbulletError


def _pp(title: str, obj: Any) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)
    print(json.dumps(obj, ensure_ascii=False, indent=2)[:5000])


def _sample(data: Any, key: str, n: int = 3) -> Any:
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key][:n]
    return data


def run_probes(client: PushbulletClient) -> int:
    probes: List[Tuple[str, Callable[[], Any], str]] = [
        ("user", client.get_user, ""),
        ("devices", client.get_devices, "devices"),
        ("subscriptions", client.get_subscriptions, "subscriptions"),
    ]
    failed = 0
    for title, fn, key in probes:
        try:
            data = fn()
        except PushbulletError as e:
            failed += 1
            info = {"kind": e.kind.value, "error": e.message}
            if isinstance(e, ProtocolError):
                info["status"] = e.status_code
                info["body"] = e.body
            _pp(f"FAIL: {title}", info)
            continue
        _pp(f"OK: {title} (sample)", _sample(data, key) if key else data)
    return 1 if failed else 0


def main() -> int:
    env_file = os.environ.get("PUSHBULLET_ENV_FILE", "env")
    load_dotenv(env_file, override=False)

    client = PushbulletClient.from_env()
    return run_probes(client)


if __name__ == "__main__":
    sys.exit(main())
