from __future__ import annotations

import itertools
from typing import Iterable

_request_ids = itertools.count(1)


def str_to_hex(value: str) -> str:
    return value.encode("utf-8").hex()


def hex_to_str(value: str) -> str:
    return bytes.fromhex(value).decode("utf-8")


def hex_all(values: Iterable[str]) -> list[str]:
    return [str_to_hex(v) for v in values]


def next_request_id() -> int:
    return next(_request_ids)
