"""
Batch decoding of line-oriented query-string logs.

Usage (example from CLI):
    from querystring_serde.pipeline import run_decode
    from querystring_serde.schema import bind_from_strings

    schema = bind_from_strings("key,url,hits", "string,string,int")
    summary = run_decode("events.tsv", schema, output="events.jsonl")
    print(summary["records"], summary["throughput_records_per_sec"])

Decode errors either abort the run (default) or, with ``skip_malformed``, are
logged per line and counted in the summary.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, TextIO, Tuple, TypedDict

from querystring_serde.decoder import RecordDecoder
from querystring_serde.domain.types import DecodedRecord, Schema
from querystring_serde.errors import MalformedRecord, TypeCoercionError
from querystring_serde.utils.logging import get_logger
from querystring_serde.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

STDIO = "-"


class DecodeSummary(TypedDict):
    """
    Metrics returned by ``run_decode``.
    """

    input: str
    output: Optional[str]
    records: int
    skipped: int
    duration_seconds: float
    throughput_records_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]


@dataclass
class DecodeCounts:
    """Running tally for one batch."""

    decoded: int = 0
    skipped: int = 0


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def iter_lines(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """
    Yield ``(line_number, line)`` with terminators stripped and blank lines dropped.

    Line numbers are 1-based and count blank lines.
    """
    for number, line in enumerate(lines, start=1):
        stripped = line.rstrip("\r\n")
        if stripped:
            yield number, stripped


@contextmanager
def open_input(path: Path | str, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Open a file for reading, or stdin when ``path`` is ``-``."""
    if str(path) == STDIO:
        yield sys.stdin
        return
    with Path(path).open("r", encoding=encoding, errors="replace", newline="") as fh:
        yield fh


def decode_lines(
    decoder: RecordDecoder,
    lines: Iterable[str],
    skip_malformed: bool = False,
    counts: Optional[DecodeCounts] = None,
) -> Iterator[DecodedRecord]:
    """
    Decode lines lazily.

    Parameters
    ----------
    decoder : RecordDecoder
        Decoder bound to the target schema.
    lines : iterable[str]
        Raw lines, with or without trailing newlines.
    skip_malformed : bool
        When True, lines raising MalformedRecord or TypeCoercionError are
        logged at WARNING and skipped. When False, the first one propagates.
    counts : DecodeCounts | None
        Tally updated in place as lines are consumed.
    """
    counts = counts if counts is not None else DecodeCounts()
    for number, line in iter_lines(lines):
        try:
            record = decoder.decode(line)
        except (MalformedRecord, TypeCoercionError) as exc:
            if not skip_malformed:
                raise
            counts.skipped += 1
            log.warning(
                f"[SKIP] line {number}: {exc}",
                extra={"line": number, "error": type(exc).__name__},
            )
            continue
        counts.decoded += 1
        yield record


def _write_jsonl(records: Iterable[DecodedRecord], sink: IO[str]) -> None:
    for record in records:
        sink.write(json.dumps(record.as_dict(), ensure_ascii=False))
        sink.write("\n")


def _summarize(
    input_path: str,
    output_path: Optional[str],
    counts: DecodeCounts,
    stats: ProfileStats,
) -> DecodeSummary:
    duration = stats.duration_seconds
    return DecodeSummary(
        input=input_path,
        output=output_path,
        records=counts.decoded,
        skipped=counts.skipped,
        duration_seconds=_round_float(duration, 4),
        throughput_records_per_sec=_round_float(counts.decoded / duration) if duration else 0.0,
        peak_rss_bytes=stats.peak_rss_bytes,
        cpu_percent=_round_float(stats.cpu_percent, 1) if stats.cpu_percent is not None else None,
    )


def run_decode(
    path: Path | str,
    schema: Schema,
    output: Optional[Path | str] = None,
    skip_malformed: bool = False,
    encoding: str = "utf-8",
    sink: Optional[IO[str]] = None,
) -> DecodeSummary:
    """
    Decode a whole file and write the rows as JSON Lines.

    Parameters
    ----------
    path : Path | str
        Input file, or ``-`` for stdin.
    schema : Schema
        Bound table schema.
    output : Path | str | None
        Destination file. Parent directories are created. When None, rows go
        to ``sink`` if given and are otherwise only counted.
    skip_malformed : bool
        Skip and log undecodable lines instead of aborting.
    encoding : str
        Character set of the input file.
    sink : IO[str] | None
        Text stream receiving rows when ``output`` is None.

    Returns
    -------
    DecodeSummary
        Record counts, timing and resource usage.

    Raises
    ------
    MalformedRecord, TypeCoercionError
        On the first bad line when ``skip_malformed`` is False.
    """
    decoder = RecordDecoder(schema, encoding=encoding)
    counts = DecodeCounts()
    input_path = str(path)
    output_path = str(output) if output is not None else None

    log.info(f"[DECODE START] {input_path}", extra={"input": input_path, "columns": len(schema)})
    with profile_block(f"decode:{input_path}") as stats:
        with open_input(path, encoding=encoding) as fh:
            records = decode_lines(decoder, fh, skip_malformed=skip_malformed, counts=counts)
            if output_path is not None:
                target = Path(output_path)
                target.parent.mkdir(parents=True, exist_ok=True)
                with target.open("w", encoding="utf-8") as out:
                    _write_jsonl(records, out)
            elif sink is not None:
                _write_jsonl(records, sink)
            else:
                for _ in records:
                    pass

    summary = _summarize(input_path, output_path, counts, stats)
    log.info(
        f"[DECODE COMPLETE] {input_path}",
        extra={
            "records": summary["records"],
            "skipped": summary["skipped"],
            "duration": summary["duration_seconds"],
            "throughput_rps": summary["throughput_records_per_sec"],
        },
    )
    return summary


__all__ = [
    "DecodeCounts",
    "DecodeSummary",
    "decode_lines",
    "iter_lines",
    "open_input",
    "run_decode",
]
