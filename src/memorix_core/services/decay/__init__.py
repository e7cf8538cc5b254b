"""Decay strategies and engine package."""
from scitrera_app_framework import Variables, get_extension

from .base import (
    DecayEngine,
    DecayEnginePluginBase,
    EXT_DECAY_ENGINE,
)
from .strategies import (
    DecayStrategy,
    HybridDecayStrategy,
    PermanentDecayStrategy,
    TimeBasedDecayStrategy,
    UsageBasedDecayStrategy,
    get_decay_strategy,
)


def get_decay_engine(v: Variables = None) -> DecayEngine:
    """Get the decay engine instance."""
    return get_extension(EXT_DECAY_ENGINE, v)


__all__ = (
    'DecayEngine',
    'DecayEnginePluginBase',
    'get_decay_engine',
    'EXT_DECAY_ENGINE',
    'DecayStrategy',
    'HybridDecayStrategy',
    'PermanentDecayStrategy',
    'TimeBasedDecayStrategy',
    'UsageBasedDecayStrategy',
    'get_decay_strategy',
)
