from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping

from .board import COLS

MAX_ROWS = 50
TARGET_SCORE = 100
INITIAL_DEAL_COUNT = 27
HINT_DISPLAY_CAP = 6

ADD_NUMBERS = 'addNumbers'
SHUFFLE = 'shuffle'
ERASER = 'eraser'
TOOLS = (ADD_NUMBERS, SHUFFLE, ERASER)

DEFAULT_TOOL_QUOTAS: Dict[str, int] = {ADD_NUMBERS: 10, SHUFFLE: 5, ERASER: 5}

_CAMEL_KEYS = {
    'maxRows': 'max_rows',
    'targetScore': 'target_score',
    'toolQuotas': 'tool_quotas',
    'initialDealCount': 'initial_deal_count',
    'hintDisplayCap': 'hint_display_cap',
}


@dataclass(frozen=True)
class EngineConfig:
    """Fixed parameters of one session; any of them may be overridden at construction."""
    cols: int = COLS
    max_rows: int = MAX_ROWS
    target_score: int = TARGET_SCORE
    tool_quotas: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_TOOL_QUOTAS))
    initial_deal_count: int = INITIAL_DEAL_COUNT
    hint_display_cap: int = HINT_DISPLAY_CAP

    def __post_init__(self) -> None:
        for name in ('cols', 'max_rows', 'target_score', 'initial_deal_count', 'hint_display_cap'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f'{name} must be a positive integer, got {value!r}')
        if set(self.tool_quotas) != set(TOOLS):
            raise ValueError(f'tool_quotas must have exactly the keys {list(TOOLS)}')
        for tool, quota in self.tool_quotas.items():
            if isinstance(quota, bool) or not isinstance(quota, int) or quota < 0:
                raise ValueError(f'quota for {tool} must be a non-negative integer, got {quota!r}')

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'EngineConfig':
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise ValueError(f'unknown config key: {key}')
            kwargs[name] = value
        if 'tool_quotas' in kwargs:
            # partial overrides keep the remaining defaults
            quotas = dict(DEFAULT_TOOL_QUOTAS)
            quotas.update({str(k): v for k, v in dict(kwargs['tool_quotas']).items()})
            kwargs['tool_quotas'] = quotas
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cols': self.cols,
            'maxRows': self.max_rows,
            'targetScore': self.target_score,
            'toolQuotas': dict(self.tool_quotas),
            'initialDealCount': self.initial_deal_count,
            'hintDisplayCap': self.hint_display_cap,
        }
