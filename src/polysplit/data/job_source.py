import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import urlopen

from shapely.geometry import Polygon

from ..config import DEFAULT_API_BASE_URL, RuntimeSettings
from ..errors import InvalidArgumentError, JobSourceError
from .polygon_io import PolygonIO

logger = logging.getLogger(__name__)


@dataclass
class SplitJob:
    """A polygon and the number of parts to split it into."""
    polygon: Polygon
    parts: int
    metadata: Dict[str, Any] = field(default_factory=dict)


class JobSource(ABC):
    """
    Abstract interface for job records.
    Lets the command line stay agnostic of where the record comes from
    (local file, remote key-value store).
    """

    @abstractmethod
    def get_polygon(self) -> Polygon:
        """Returns the polygon to split."""
        pass

    @abstractmethod
    def get_parts(self) -> int:
        """Returns the requested number of parts."""
        pass

    @abstractmethod
    def get_metadata(self) -> dict:
        """Returns arbitrary metadata (source, location, etc.)"""
        pass

    def load(self) -> SplitJob:
        return SplitJob(self.get_polygon(), self.get_parts(), self.get_metadata())


class RecordJobSource(JobSource):
    """
    Shared parsing of the job record:
    {"polygon": "POLYGON ((...))", "parts": 4} or {"coordinates": [[x, y], ...], "parts": 4}
    """

    def __init__(self):
        self._data = None

    @abstractmethod
    def _load(self) -> Any:
        pass

    @property
    def data(self) -> dict:
        if self._data is None:
            data = self._load()
            if not isinstance(data, dict):
                raise InvalidArgumentError(f"Job record must be a JSON object, got {type(data).__name__}")
            self._data = data
        return self._data

    def get_polygon(self) -> Polygon:
        if isinstance(self.data.get("polygon"), str):
            return PolygonIO.load_wkt(self.data["polygon"])
        if "coordinates" in self.data:
            return PolygonIO.from_coords(self.data["coordinates"])
        raise InvalidArgumentError("Job record has neither 'polygon' (WKT) nor 'coordinates'.")

    def get_parts(self) -> int:
        parts = self.data.get("parts")
        if isinstance(parts, str) and parts.strip().isdigit():
            parts = int(parts)
        if isinstance(parts, bool) or not isinstance(parts, int):
            raise InvalidArgumentError(f"Job record 'parts' must be an integer, got {parts!r}")
        return parts


class JSONJobAdapter(RecordJobSource):
    """Job record stored in a local JSON file."""

    def __init__(self, filename: str):
        super().__init__()
        self.filename = filename

    def _load(self):
        if not os.path.exists(self.filename):
            raise JobSourceError(f"Job file not found: {self.filename}")
        try:
            with open(self.filename, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(f"Job file {self.filename} is not valid JSON: {e}") from e

    def get_metadata(self) -> dict:
        return {
            "source": "json",
            "filename": self.filename,
        }


class KeyValueStoreAdapter(RecordJobSource):
    """
    Job record fetched over HTTP from a key-value store
    (GET <base_url>/key-value-stores/<store_id>/records/<key>).
    """

    def __init__(self, store_id: str, token: Optional[str] = None,
                 base_url: str = DEFAULT_API_BASE_URL, record_key: str = "INPUT",
                 timeout: float = 30.0):
        super().__init__()
        if not store_id:
            raise InvalidArgumentError("A key-value store id is required.")
        self.store_id = store_id
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.record_key = record_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: RuntimeSettings, **kwargs) -> "KeyValueStoreAdapter":
        return cls(settings.store_id, token=settings.api_token, base_url=settings.api_base_url, **kwargs)

    @property
    def url(self) -> str:
        query = {"disableRedirect": "true"}
        if self.token:
            query["token"] = self.token
        return (f"{self.base_url}/key-value-stores/{quote(self.store_id)}"
                f"/records/{quote(self.record_key)}?{urlencode(query)}")

    def _load(self):
        logger.info("Fetching job record %s from store %s", self.record_key, self.store_id)
        try:
            with urlopen(self.url, timeout=self.timeout) as response:
                body = response.read().decode("utf-8")
        except HTTPError as e:
            raise JobSourceError(f"Key-value store returned HTTP {e.code} for {self.record_key}") from e
        except (URLError, OSError) as e:
            raise JobSourceError(f"Key-value store unreachable: {e}") from e

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(f"Job record is not valid JSON: {e}") from e

    def get_metadata(self) -> dict:
        return {
            "source": "key-value-store",
            "store_id": self.store_id,
            "record_key": self.record_key,
        }
