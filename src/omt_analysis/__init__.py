from omt_analysis.config import Settings
from omt_analysis.errors import (
    ConfigParseError,
    DuplicateFolder,
    MalformedDocument,
    OmtAnalysisError,
    RangeAmbiguous,
    RangeNotFound,
    UnknownFolder,
)
from omt_analysis.service import OmtLanguageService

__all__ = [
    "ConfigParseError",
    "DuplicateFolder",
    "MalformedDocument",
    "OmtAnalysisError",
    "OmtLanguageService",
    "RangeAmbiguous",
    "RangeNotFound",
    "Settings",
    "UnknownFolder",
]
