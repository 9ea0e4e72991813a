from .job_source import JobSource, JSONJobAdapter, KeyValueStoreAdapter, SplitJob
from .polygon_io import PolygonIO
