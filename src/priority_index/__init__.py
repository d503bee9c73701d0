__version__ = "0.1.0"

from .areas import Area
from .areas import AreaRegistry
from .composer import IndexScore
from .composer import compose
from .errors import ConfigurationError
from .errors import Diagnostics
from .parameters import DEFAULTS
from .parameters import Parameters
from .pipeline import PipelineResult
from .population import AgePopulationRecord
from .population import PopulationTable
from .proximity import ProximityMatrix
from .receptivity import ReceptivityScore
from .vulnerability import VulnerabilityScore

__all__ = [
    "DEFAULTS",
    "AgePopulationRecord",
    "Area",
    "AreaRegistry",
    "ConfigurationError",
    "Diagnostics",
    "IndexScore",
    "Parameters",
    "PipelineResult",
    "PopulationTable",
    "ProximityMatrix",
    "ReceptivityScore",
    "VulnerabilityScore",
    "__version__",
    "compose",
]
