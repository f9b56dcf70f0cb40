"""
Write the prescriber dataset to its archive and public-serving locations.

Both copies are byte-identical. Each file is written to a temporary sibling and
then atomically moved into place, so readers never observe a half-written file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from .models import PrescriberDataset


def serialize_dataset(dataset: PrescriberDataset) -> str:
    """JSON text exactly as published (2-space indent, UTF-8, trailing newline)."""
    return json.dumps(dataset.to_dict(), indent=2, ensure_ascii=False) + "\n"


def _atomic_write(path: Path, content: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_dataset(dataset: PrescriberDataset, paths: Iterable[Path]) -> List[Path]:
    """
    Write the dataset to every path.

    Returns:
        The paths written, in order
    """
    content = serialize_dataset(dataset)
    written = []
    for path in paths:
        path = Path(path)
        _atomic_write(path, content)
        written.append(path)
    return written
