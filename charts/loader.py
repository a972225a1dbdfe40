"""
Dataset loader.

Fetches the daily weather JSON document once, from a local path or an
HTTP(S) URL, and parses it into observations sorted by date.
"""
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import ChartsConfig
from .errors import DatasetLoadError
from .models import Observation

logger = logging.getLogger(__name__)


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class DatasetLoader:
    """Loader for the daily observation dataset."""

    def __init__(self, config: ChartsConfig):
        """
        Initialize loader.

        Args:
            config: Charts configuration (source, timeout, retries)
        """
        self.config = config
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry logic."""
        session = requests.Session()
        retry_strategy = Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.retry_backoff,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def fetch(self, source: Optional[str] = None) -> Any:
        """
        Fetch and decode the raw JSON document.

        Args:
            source: Path or URL (default: configured dataset source)

        Returns:
            Decoded JSON document

        Raises:
            DatasetLoadError: If the document cannot be read or decoded
        """
        source = source or self.config.dataset_source
        logger.info(f"Fetching dataset from {source}")

        if is_remote(source):
            try:
                response = self.session.get(source, timeout=self.config.request_timeout)
                response.raise_for_status()
                return response.json()
            except requests.RequestException as e:
                logger.error(f"Failed to fetch {source}: {e}")
                raise DatasetLoadError(source, str(e)) from e
            except ValueError as e:
                logger.error(f"Invalid JSON from {source}: {e}")
                raise DatasetLoadError(source, f"invalid JSON: {e}") from e

        try:
            return json.loads(Path(source).read_text(encoding="utf-8"))
        except OSError as e:
            logger.error(f"Failed to read {source}: {e}")
            raise DatasetLoadError(source, str(e)) from e
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {source}: {e}")
            raise DatasetLoadError(source, f"invalid JSON: {e}") from e

    def load(self, source: Optional[str] = None) -> List[Observation]:
        """
        Load observations sorted by date.

        Raises:
            DatasetLoadError: If the document is unreadable or a record is malformed
        """
        source = source or self.config.dataset_source
        document = self.fetch(source)
        observations = parse_observations(document, source)

        if observations:
            logger.info(
                f"Loaded {len(observations)} observations from {source} "
                f"({observations[0].date} to {observations[-1].date})"
            )
        else:
            logger.warning(f"No observations found in {source}")

        return observations


def parse_observations(document: Any, source: str = "<memory>") -> List[Observation]:
    """
    Parse a decoded JSON array into observations sorted by date.

    Raises:
        DatasetLoadError: If the document is not an array or a record is malformed
    """
    if not isinstance(document, list):
        raise DatasetLoadError(source, "expected a JSON array of observation records")

    observations = []
    for index, record in enumerate(document):
        try:
            observations.append(Observation.from_record(record))
        except (KeyError, TypeError, ValueError) as e:
            raise DatasetLoadError(source, f"record {index} is malformed: {e}") from e

    observations.sort(key=lambda o: o.date)
    return observations


def create_loader(config: ChartsConfig) -> DatasetLoader:
    """
    Factory function to create a loader instance

    Args:
        config: Charts configuration

    Returns:
        DatasetLoader instance
    """
    return DatasetLoader(config)
