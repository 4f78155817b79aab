"""
Analyzer panel

Ten rule-based analyzers, each scoring the business on its own dimensions
and reporting insights, alerts and SWOT fragments.
"""

from .base import (
    AnalyzerBase,
    AnalyzerResult,
    Insight,
    Alert,
    SwotFragment,
    MISSING_CAPABILITY
)
from .registry import default_panel, ANALYZER_NAMES, PANEL_ORDER

__all__ = [
    'AnalyzerBase',
    'AnalyzerResult',
    'Insight',
    'Alert',
    'SwotFragment',
    'MISSING_CAPABILITY',
    'default_panel',
    'ANALYZER_NAMES',
    'PANEL_ORDER',
]
