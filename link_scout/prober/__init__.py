# File: link_scout/prober/__init__.py
"""link_scout.prober: Проверка типовых путей бизнес-сайта (about, services, contact, …)."""

from .pattern_prober import COMMON_PATHS, PatternProber, probe

__all__ = ["COMMON_PATHS", "PatternProber", "probe"]
