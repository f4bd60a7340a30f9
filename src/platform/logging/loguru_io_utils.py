from inspect import getfile, getsourcelines
from os.path import basename
import re
from time import time
from typing import Any, Callable, Optional

from src.platform.logging.loguru_io_config import (
    MAX_CONTENT_LENGTH,
    SENSITIVE_KEYWORDS,
    GeneratorMethod,
    call_depth_var,
    chain_start_time_var,
)


_MASK = '********'
_SENSITIVE_PATTERN = re.compile(
    r"""(\b(?:{keys})\b\s*[=:]\s*)(['"]?)([^'",)\s]+)(['"]?)""".format(
        keys='|'.join(sorted(SENSITIVE_KEYWORDS))
    ),
    re.IGNORECASE,
)


def handle_yield(yield_method: Optional[GeneratorMethod] = None) -> str:
    return f'yield: {yield_method} | ' if yield_method else ''


def get_chain_start_time() -> float:
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    target = getattr(func, '__func__', func)
    try:
        lineno = getsourcelines(target)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(target))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    layer = max(call_depth_var.get() - 1, 0)
    call_depth_var.set(layer)
    if not layer:
        chain_start_time_var.set(0)


def should_mask_keyword(key: Any, value: Any) -> Any:
    if isinstance(key, str) and key.lower() in SENSITIVE_KEYWORDS:
        return _MASK
    return value


def mask_sensitive(data: Any) -> Any:
    """Mask `key=value` / `key: value` pairs of sensitive keys inside repr-like strings."""
    if data is None or isinstance(data, bool | int | float):
        return data
    text = str(data)
    return _SENSITIVE_PATTERN.sub(lambda m: f'{m.group(1)}{m.group(2)}{_MASK}{m.group(4)}', text)


def truncate_content(data: Any, max_length: int = MAX_CONTENT_LENGTH) -> Any:
    if not isinstance(data, str) or len(data) <= max_length:
        return data
    return f'{data[:max_length]}...(+{len(data) - max_length} chars)'
