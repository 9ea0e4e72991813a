from .cut import CutCandidate
from .edge_pair import EdgePairAnalyzer, ProjectedPoint, RegionDecomposition
from .greedy_splitter import GreedySplitter, split
