"""
JSON file persistence for rates and the first-run bootstrap.

The data file holds a JSON array of rate objects. On first run it does not
exist yet and is materialized from the read-only seed file shipped with the
deployment, so later runs read the data file only.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from rates_api.domain.errors import InternalError, NotFoundError, ValidationError
from rates_api.domain.rates import Rate, validate_rate

logger = logging.getLogger(__name__)


def load_rates(path: Path) -> list[Rate]:
    """Parse a JSON array file into rates."""
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"File {path.name} does not exist.")
    if not os.access(path, os.R_OK):
        raise NotFoundError(f"File {path.name} is not readable.")
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InternalError(f"{path.name} is not valid UTF-8 JSON: {exc}") from exc
    except OSError as exc:
        raise InternalError(f"failed to read {path.name}: {exc}") from exc

    if not isinstance(raw, list):
        raise InternalError(f"{path.name} must contain a JSON array of rates")
    rates: list[Rate] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw):
        try:
            rate = Rate.from_dict(entry)
            validate_rate(rate)
        except (TypeError, ValueError, ValidationError) as exc:
            raise InternalError(f"{path.name}: invalid rate at index {index}: {exc}") from exc
        if not rate.id:
            raise InternalError(f"{path.name}: rate at index {index} has no id")
        if rate.id in seen:
            raise InternalError(f"{path.name}: duplicate rate id {rate.id!r}")
        seen.add(rate.id)
        rates.append(rate)
    logger.info("imported %d rates from %s", len(rates), path.name)
    return rates


def save_rates(path: Path, rates: Iterable[Rate]) -> None:
    """Write the full collection atomically (temp file + rename)."""
    path = Path(path)
    try:
        payload = json.dumps([r.to_dict() for r in rates], ensure_ascii=False, indent=2, allow_nan=False)
    except ValueError as exc:
        raise InternalError(f"cannot serialize rates for {path.name}: {exc}") from exc
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        logger.error("failed to export rates to %s: %s", path, exc)
        raise InternalError(f"failed to write {path.name}: {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def bootstrap(seed_file: Path, data_file: Path, persistent: bool = True) -> list[Rate]:
    """
    Load the initial collection: the data file when it exists, otherwise the
    seed file (which is then copied into a new data file when persistent).
    """
    data_file = Path(data_file)
    seed_file = Path(seed_file)
    if data_file.exists():
        logger.info("persistent data in file %s exists", data_file.name)
        return load_rates(data_file)

    logger.info("persistent data in file %s is missing -> seeding from %s", data_file.name, seed_file.name)
    rates = load_rates(seed_file)
    if persistent:
        save_rates(data_file, rates)
    return rates
