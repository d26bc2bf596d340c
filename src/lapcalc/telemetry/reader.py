"""Telemetry CSV reading with column and timestamp detection."""

from __future__ import annotations

import csv
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from lapcalc.telemetry.coordinates import CoordinateProjection
from lapcalc.utils.exceptions import TelemetryDataError

LATITUDE_COLUMN_HINT = "lat"
LONGITUDE_COLUMN_HINT = "lon"
INTERVAL_COLUMN_HINT = "interval"
TIMESTAMP_COLUMN_HINT = "timestamp"
MILLISECONDS_PER_SECOND = 1000.0
SECONDS_PER_DAY = 86_400.0

_NUMBER_PATTERN = re.compile(r"^[0-9]+(\.[0-9]*)?$")
_ISO8601_PATTERN = re.compile(
    r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T([0-9]{2}):([0-9]{2}):([0-9.]+)Z$"
)

TimestampParser = Callable[[list[str]], float]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelemetrySample:
    """One positioned telemetry row.

    Args:
        raw_line: Source line without its line terminator.
        point: Local planar position [m].
        timestamp: Seconds since the start of the log [s].
    """

    raw_line: str
    point: np.ndarray
    timestamp: float


@dataclass(frozen=True)
class TelemetryLog:
    """Parsed telemetry file.

    Args:
        header: Source header line.
        samples: Positioned samples in file order.
        skipped_rows: Number of rows without coordinates.
    """

    header: str
    samples: tuple[TelemetrySample, ...]
    skipped_rows: int = 0


def find_column(headers: list[str], hint: str) -> int:
    """Find the single header containing ``hint``, ignoring case.

    Args:
        headers: Header names.
        hint: Substring that identifies the column.

    Returns:
        Column index.

    Raises:
        lapcalc.utils.exceptions.TelemetryDataError: If zero or several
            headers match.
    """
    needle = hint.lower()
    matches = [index for index, name in enumerate(headers) if needle in name.lower()]
    if len(matches) != 1:
        msg = f"Expected exactly one column matching {hint!r}, found {len(matches)} in {headers}"
        raise TelemetryDataError(msg)
    return matches[0]


def parse_iso8601_seconds(text: str) -> float:
    """Return seconds since midnight of an ISO-8601 ``...Thh:mm:ss.sZ`` stamp.

    Args:
        text: Timestamp text.

    Returns:
        Time of day [s].

    Raises:
        lapcalc.utils.exceptions.TelemetryDataError: If the text is not in
            the expected format.
    """
    match = _ISO8601_PATTERN.match(text.strip())
    if match is None:
        msg = f"Unparseable ISO-8601 timestamp: {text!r}"
        raise TelemetryDataError(msg)
    hours, minutes, seconds = (float(group) for group in match.groups())
    return seconds + 60.0 * (minutes + 60.0 * hours)


def _time_of_day_parser(column: int, start: float) -> TimestampParser:
    """Build a parser of ISO-8601 times of day relative to ``start``.

    A drop of more than half a day between consecutive rows is taken as a
    midnight rollover and adds one day to every later row.

    Args:
        column: Index of the timestamp column.
        start: Time of day of the first positioned row [s].

    Returns:
        Stateful parser to be applied to rows in file order.
    """
    previous = start
    day_offset = 0.0

    def parse(row: list[str]) -> float:
        nonlocal previous, day_offset
        time_of_day = parse_iso8601_seconds(row[column])
        if previous - time_of_day > 0.5 * SECONDS_PER_DAY:
            day_offset += SECONDS_PER_DAY
            logger.debug("Timestamp wrapped past midnight at %s", row[column])
        previous = time_of_day
        return time_of_day + day_offset - start

    return parse


def make_timestamp_parser(headers: list[str], sample_row: list[str]) -> TimestampParser:
    """Choose a timestamp parser from the header and first usable row.

    A numeric ``interval`` column is read as milliseconds. Otherwise a
    ``timestamp`` column in ISO-8601 form is read relative to ``sample_row``,
    rolling over past midnight.

    Args:
        headers: Header names.
        sample_row: First row that carries coordinates.

    Returns:
        Callable mapping a split row to seconds.

    Raises:
        lapcalc.utils.exceptions.TelemetryDataError: If no supported
            timestamp column is found.
    """
    try:
        interval_col = find_column(headers, INTERVAL_COLUMN_HINT)
    except TelemetryDataError:
        interval_col = None
    if interval_col is not None and _NUMBER_PATTERN.match(sample_row[interval_col].strip()):
        return lambda row: float(row[interval_col]) / MILLISECONDS_PER_SECOND

    try:
        timestamp_col = find_column(headers, TIMESTAMP_COLUMN_HINT)
    except TelemetryDataError:
        timestamp_col = None
    if timestamp_col is not None and _ISO8601_PATTERN.match(sample_row[timestamp_col].strip()):
        return _time_of_day_parser(timestamp_col, parse_iso8601_seconds(sample_row[timestamp_col]))

    msg = f"Could not detect a timestamp column in {headers}"
    raise TelemetryDataError(msg)


def read_telemetry_csv(path: str | Path, projection: CoordinateProjection) -> TelemetryLog:
    """Read a GPS telemetry CSV into local-frame samples.

    Rows without latitude or longitude (other channels logging faster than
    GPS) are skipped.

    Args:
        path: Telemetry CSV path.
        projection: Converter into the track's local frame.

    Returns:
        Parsed telemetry log.

    Raises:
        lapcalc.utils.exceptions.TelemetryDataError: If the file is missing
            or empty, columns cannot be resolved, or values do not parse.
    """
    file_path = Path(path)
    if not file_path.exists():
        msg = f"Telemetry file not found: {file_path}"
        raise TelemetryDataError(msg)

    with file_path.open("r", newline="", encoding="utf-8") as handle:
        lines = handle.read().splitlines()
    if not lines:
        msg = f"Telemetry file is empty: {file_path}"
        raise TelemetryDataError(msg)

    header_line = lines[0]
    headers = next(csv.reader([header_line]))
    lat_col = find_column(headers, LATITUDE_COLUMN_HINT)
    lon_col = find_column(headers, LONGITUDE_COLUMN_HINT)

    timestamp_parser: TimestampParser | None = None
    samples: list[TelemetrySample] = []
    skipped = 0
    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        row = next(csv.reader([line]))
        lat_text = row[lat_col].strip() if lat_col < len(row) else ""
        lon_text = row[lon_col].strip() if lon_col < len(row) else ""
        if not lat_text or not lon_text:
            skipped += 1
            continue

        if timestamp_parser is None:
            timestamp_parser = make_timestamp_parser(headers, row)

        try:
            point = projection.to_local(float(lat_text), float(lon_text))
            timestamp = timestamp_parser(row)
        except (IndexError, ValueError) as exc:
            msg = f"Malformed telemetry row {line_number} in {file_path}"
            raise TelemetryDataError(msg) from exc

        samples.append(TelemetrySample(raw_line=line, point=point, timestamp=timestamp))

    if skipped:
        logger.debug("Skipped %d telemetry rows without coordinates", skipped)
    return TelemetryLog(header=header_line, samples=tuple(samples), skipped_rows=skipped)
