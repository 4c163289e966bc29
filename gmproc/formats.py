"""
Text formats: vendor (SeismoSignal-style) import, CSV export and PEER NGA
``.AT2`` files.

Parsers take the file *contents* (``parse_*``); the ``load_*``/``save_*``
helpers wrap them with file access.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import logging
import math
from typing import Any, Dict, Optional, Sequence

import numpy as np

from .exceptions import InvalidWaveformError
from .waveform import Waveform, WaveformMetadata

log = logging.getLogger(__name__)

__all__ = [
    "parse_seismosignal",
    "load_seismosignal",
    "export_csv",
    "waveform_to_csv",
    "save_csv",
    "parse_peer_at2",
    "load_peer_at2",
    "format_at2",
    "save_at2",
]

# header keys copied into dedicated metadata fields (lower-cased)
_HEADER_FIELDS = {
    "units": "units",
    "station": "station",
    "component": "component",
    "date": "date",
    "event": "event_id",
}


# =============================================================================
# VENDOR TEXT FORMAT
# =============================================================================

def parse_seismosignal(text: str) -> Waveform:
    """Parses a SeismoSignal-style two-column export.

    The header is a block of ``Key: Value`` lines ending at the first line
    that contains ``TIME`` or ``ACCELERATION`` (the column captions). Every
    non-blank line after it holds whitespace-separated ``time value`` pairs;
    rows with fewer than two columns are skipped.

    Parameters
    ----------
    text : str
        File contents.

    Returns
    -------
    Waveform
        Header pairs and the derived ``time_step``, ``duration`` and
        ``num_points`` are stored in ``metadata.extra``. A ``Units`` header
        sets ``metadata.units``.

    Raises
    ------
    InvalidWaveformError
        If the column-caption line is missing, a data row is not numeric or
        the samples do not form a valid waveform.
    """
    lines = text.strip().splitlines()
    header_end = next((i for i, line in enumerate(lines) if "TIME" in line or "ACCELERATION" in line), None)
    if header_end is None:
        raise InvalidWaveformError("No TIME/ACCELERATION caption line found; not a SeismoSignal file.")

    headers: Dict[str, Any] = {}
    for line in lines[:header_end]:
        key, sep, value = line.partition(":")
        if sep:
            headers[key.strip()] = value.strip()

    time, values = [], []
    for lineno, row in enumerate(lines[header_end + 1:], start=header_end + 2):
        parts = row.split()
        if len(parts) < 2:
            continue
        try:
            time.append(float(parts[0]))
            values.append(float(parts[1]))
        except ValueError as e:
            raise InvalidWaveformError(f"Line {lineno} is not numeric: {row.strip()!r}") from e

    if not time:
        raise InvalidWaveformError("No data rows found after the header.")

    fields = {}
    for key, value in headers.items():
        name = _HEADER_FIELDS.get(key.lower())
        if name:
            fields[name] = value
    extra = dict(headers)
    extra.update(
        time_step=time[1] - time[0] if len(time) > 1 else 0.0,
        duration=time[-1],
        num_points=len(time),
    )
    log.debug(f"Parsed {len(time)} samples and {len(headers)} header entries.")
    return Waveform(time, values, WaveformMetadata(source="SeismoSignal", extra=extra, **fields))


def load_seismosignal(filepath: str) -> Waveform:
    """Reads and parses a SeismoSignal-style file."""
    try:
        with open(filepath, "r") as fp:
            text = fp.read()
    except FileNotFoundError:
        log.error(f"File not found: {filepath}")
        raise
    return parse_seismosignal(text)


# =============================================================================
# CSV EXPORT
# =============================================================================

def _format_number(value) -> str:
    """Shortest text for a number; integral values have no decimal point."""
    if value is None:
        return ""
    x = float(value)
    if math.isnan(x):
        return ""
    if x.is_integer() and abs(x) < 1e21:
        return str(int(x))
    return repr(x)


def export_csv(time: Sequence[float], values: Optional[Sequence[float]] = None, name: str = "SeismicData") -> str:
    """Two-column CSV text, ``Time,<name>`` header then one row per sample.

    A missing value (`values` shorter than `time`, ``None`` or NaN) is
    written as an empty field.

    Raises
    ------
    InvalidWaveformError
        If `time` is empty.
    """
    if time is None or len(time) == 0:
        raise InvalidWaveformError("Cannot export an empty time vector.")
    if values is None:
        values = ()

    rows = [f"Time,{name}\n"]
    for i, t in enumerate(time):
        v = values[i] if i < len(values) else None
        rows.append(f"{_format_number(t)},{_format_number(v)}\n")
    return "".join(rows)


def waveform_to_csv(waveform: Waveform, name: str = "SeismicData") -> str:
    return export_csv(waveform.time, waveform.amplitude, name)


def save_csv(waveform: Waveform, filepath: str, name: str = "SeismicData") -> None:
    """Writes :func:`waveform_to_csv` output to `filepath`."""
    with open(filepath, "w", newline="") as f:
        f.write(waveform_to_csv(waveform, name))
    log.info(f"Saved CSV file to: {filepath}")


# =============================================================================
# PEER NGA .AT2
# =============================================================================

def parse_peer_at2(text: str) -> Waveform:
    """Parses a record in PEER NGA ``.AT2`` format (acceleration in g).

    Line 2 carries ``Name, Date, Station, Component`` and line 4
    ``NPTS= n, DT= dt SEC``; the samples follow, several per line.

    Returns
    -------
    Waveform
        Acceleration (g) starting at t = 0. ``metadata.extra['record_name']``
        is ``Year_Name_Station_comp_Component``.

    Raises
    ------
    InvalidWaveformError
        If the header is not as expected.
    """
    lines = text.splitlines()
    if len(lines) < 4:
        raise InvalidWaveformError("AT2 header must have four lines.")

    line2 = [p.strip() for p in lines[1].split(",")]
    if len(line2) < 4:
        raise InvalidWaveformError("Line 2 format incorrect. Expected Name, Date, Station, Component.")
    date_parts = line2[1].split("/")
    if len(date_parts) < 3:
        raise InvalidWaveformError("Date format incorrect on Line 2. Expected MM/DD/YYYY.")
    record_name = f"{date_parts[2]}_{line2[0]}_{line2[2]}_comp_{line2[3]}"

    line4 = lines[3].strip().split(",")
    if len(line4) < 2 or "NPTS=" not in line4[0] or "DT=" not in line4[1]:
        raise InvalidWaveformError("Line 4 format incorrect. Expected NPTS=..., DT=...")
    try:
        npts = int(line4[0].split("=")[1].strip())
        dt = float(line4[1].split("=")[1].split()[0])
    except (IndexError, ValueError) as e:
        raise InvalidWaveformError(f"Could not parse NPTS or DT from Line 4: {e}") from e

    try:
        acc = np.array([float(p) for line in lines[4:] for p in line.split()])
    except ValueError as e:
        raise InvalidWaveformError(f"Non-numeric acceleration value: {e}") from e
    if acc.size != npts:
        log.warning(f"Number of data points read ({acc.size}) "
                    f"does not match NPTS specified in header ({npts}). Using read data.")

    metadata = WaveformMetadata(
        units="g",
        sample_rate=1 / dt,
        station=line2[2],
        component=line2[3],
        event_id=line2[0],
        date=line2[1],
        source="PEER NGA",
        extra={"title": lines[0].strip(), "record_name": record_name},
    )
    return Waveform(np.arange(acc.size) * dt, acc, metadata)


def load_peer_at2(filepath: str) -> Waveform:
    """Reads and parses a PEER NGA ``.AT2`` file."""
    try:
        with open(filepath, "r") as fp:
            text = fp.read()
    except FileNotFoundError:
        log.error(f"File not found: {filepath}")
        raise
    return parse_peer_at2(text)


def format_at2(waveform: Waveform, header_details: Optional[Dict[str, str]] = None) -> str:
    """Renders an acceleration record (g) as ``.AT2`` text.

    Parameters
    ----------
    waveform : Waveform
        Acceleration record in g.
    header_details : Optional[Dict[str, str]], optional
        Keys 'title', 'date', 'station', 'component'. Missing keys come from
        the waveform metadata, then from generic defaults.
    """
    if waveform.units is not None and waveform.units.strip() != "g":
        log.warning(f"AT2 files store acceleration in g; record units are {waveform.units!r}.")
    elif waveform.units is None:
        log.debug("Record has no units; writing it as acceleration in g.")

    details = header_details or {}
    md = waveform.metadata
    title = details.get("title", md.extra.get("title", "GMPROC GROUND MOTION RECORD"))
    date = details.get("date", md.date or "01/01/2000")
    station = details.get("station", md.station or "STATION")
    component = details.get("component", md.component or "UNKNOWN")

    acc = waveform.amplitude
    lines = [
        f"{title}\n",
        f"{md.event_id or 'EARTHQUAKE'}, {date}, {station}, {component}\n",
        "ACCELERATION IN G\n",
        f"NPTS= {acc.size}, DT= {waveform.dt:.8f} SEC\n",
    ]
    # 8 values per line
    for start in range(0, acc.size, 8):
        lines.append("".join(f" {a: 15.7e}" for a in acc[start:start + 8]) + "\n")
    return "".join(lines)


def save_at2(waveform: Waveform, filepath: str, header_details: Optional[Dict[str, str]] = None) -> None:
    """Writes :func:`format_at2` output to `filepath`."""
    with open(filepath, "w") as f:
        f.write(format_at2(waveform, header_details))
    log.info(f"Successfully saved .AT2 file to: {filepath}")
