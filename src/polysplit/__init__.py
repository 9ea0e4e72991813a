"""Equal-area polygon splitting with short straight cuts."""
from .algorithms import CutCandidate, EdgePairAnalyzer, GreedySplitter, split
from .config import SplitterConfig
from .errors import (
    InfeasibleSplitError, InvalidArgumentError, JobSourceError,
    NumericalFailureError, PolygonSplitError,
)

__version__ = "1.0.0"
