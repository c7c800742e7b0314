"""Chart derivation and rendering for WebPageTest result sets."""

from .config import VERSION, Layout, ReportConfig, load_config
from .errors import ChartDefinitionError, ReportError, UnknownDerivativeError, UnsupportedCountError
from .report import assemble_report, document_as_dict, map_report

__version__ = VERSION

__all__ = [
    "ChartDefinitionError",
    "Layout",
    "ReportConfig",
    "ReportError",
    "UnknownDerivativeError",
    "UnsupportedCountError",
    "assemble_report",
    "document_as_dict",
    "load_config",
    "map_report",
]
