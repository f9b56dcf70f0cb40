"""
Load the published prescriber dataset (local file or URL).
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import requests
from pydantic import ValidationError

from ..constants import DEFAULT_HTTP_TIMEOUT
from ..errors import DatasetLoadError
from ..models import PrescriberDataset

LOAD_ERROR_BANNER = "Error loading data. Run `python fetch_prescribers.py` to generate prescribers.json."


def _read_source(source: Union[str, Path], session: Optional[requests.Session], timeout: int) -> object:
    text = str(source)
    if text.startswith(("http://", "https://")):
        http = session or requests
        try:
            response = http.get(text, timeout=timeout)
        except requests.RequestException as e:
            raise DatasetLoadError(f"Failed to fetch {text}: {e}") from e
        if response.status_code != 200:
            raise DatasetLoadError(f"Failed to fetch {text}: HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise DatasetLoadError(f"Invalid JSON from {text}") from e

    path = Path(source)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise DatasetLoadError(f"Failed to read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DatasetLoadError(f"Invalid JSON in {path}: {e}") from e


def load_dataset(
    source: Union[str, Path],
    session: Optional[requests.Session] = None,
    timeout: int = DEFAULT_HTTP_TIMEOUT,
) -> PrescriberDataset:
    """
    Load and validate prescribers.json.

    Raises:
        DatasetLoadError: On any read, HTTP, JSON or schema failure
    """
    raw = _read_source(source, session, timeout)
    try:
        return PrescriberDataset.model_validate(raw)
    except ValidationError as e:
        raise DatasetLoadError(f"Dataset failed validation: {e.error_count()} errors") from e


def info_banner(dataset: PrescriberDataset) -> str:
    """One-line summary shown above the map."""
    try:
        generated = datetime.fromisoformat(dataset.generated.replace("Z", "+00:00"))
        generated_text = generated.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        generated_text = dataset.generated
    return (
        f"Data generated: {generated_text} | {dataset.total} prescribers "
        f"({dataset.geocoded} mapped)"
    )
