"""
Analyzer panel registration.

The panel is an explicit construction list. Its order is the merge order
of the aggregator, so later analyzers overwrite earlier ones on shared
dimensions.
"""

from types import MappingProxyType
from typing import List, Mapping

from .base import AnalyzerBase
from .strategy import ChiefStrategist
from .financial import FinancialAnalyst
from .market import MarketAnalyst
from .digital_marketing import DigitalMarketingExpert
from .brand import BrandStrategist
from .consumer import ConsumerPsychologist
from .data_science import DataScientist
from .operations import OperationsExpert
from .risk import RiskManager
from .innovation import InnovationScout


PANEL_ORDER = (
    ChiefStrategist,
    FinancialAnalyst,
    MarketAnalyst,
    DigitalMarketingExpert,
    BrandStrategist,
    ConsumerPsychologist,
    DataScientist,
    OperationsExpert,
    RiskManager,
    InnovationScout,
)

ANALYZER_NAMES: Mapping[str, str] = MappingProxyType({
    cls.analyzer_id: cls.name for cls in PANEL_ORDER
})


def default_panel() -> List[AnalyzerBase]:
    """Fresh instances of the ten panel analyzers in registration order."""
    return [cls() for cls in PANEL_ORDER]
