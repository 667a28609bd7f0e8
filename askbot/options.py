"""
askbot/options.py
-----------------
Registry-wide defaults and their per-call overrides.

Field-level merge rules (``merge_options(defaults, overrides)``):
• validate / transform / on_validate_error / timeout – the override wins
  whenever it is not None, otherwise the default is kept
  (pass ``timeout=NO_TIMEOUT`` to drop a default timeout for one call)
• send_params – merged key-wise; when both sides hold a dict for the same
  key (e.g. ``link_preview_options``) those dicts are merged key-wise too,
  any other value is replaced
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Union

from .pending import Transformer, ValidateErrorHandler, Validator

NO_TIMEOUT = math.inf


@dataclass(frozen=True)
class PromptOptions:
    validate: Optional[Validator] = None
    transform: Optional[Transformer] = None
    on_validate_error: Optional[Union[str, ValidateErrorHandler]] = None
    timeout: Optional[float] = None
    send_params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be a positive number of seconds")


def merge_send_params(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def merge_options(defaults: PromptOptions, overrides: PromptOptions) -> PromptOptions:
    return replace(
        defaults,
        validate=overrides.validate if overrides.validate is not None else defaults.validate,
        transform=overrides.transform if overrides.transform is not None else defaults.transform,
        on_validate_error=(
            overrides.on_validate_error
            if overrides.on_validate_error is not None
            else defaults.on_validate_error
        ),
        timeout=overrides.timeout if overrides.timeout is not None else defaults.timeout,
        send_params=merge_send_params(defaults.send_params, overrides.send_params),
    )
