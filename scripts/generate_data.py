"""
Sample data generator for the query-string SerDe.

Emits deterministic pseudo-random ``key<TAB>query`` lines shaped like web
tracking hits, with an optional share of deliberately broken lines for
exercising ``--skip-malformed``.
"""

from __future__ import annotations

import random
import sys
import time
from pathlib import Path
from urllib.parse import urlencode

import typer

app = typer.Typer(help="Generate synthetic key<TAB>query-string log lines.")

SAMPLE_COLUMNS = "key,uid,page,dwell,clicks,score,vip,ua"
SAMPLE_COLUMN_TYPES = "string,bigint,string,double,int,float,boolean,string"

_PAGES = ["/", "/search?q=shoes", "/cart", "/checkout/step 2", "/ürün/123"]
_AGENTS = ["Mozilla/5.0 (X11; Linux)", "curl/8.5.0", "Googlebot/2.1 (+http://g.co/bot)"]


def _render_line(rng: random.Random, index: int) -> str:
    params = {
        "UID": rng.randint(1, 2**40),
        "page": rng.choice(_PAGES),
        "dwell": f"{rng.uniform(0, 600):.3f}",
        "clicks": rng.randint(0, 50),
        "score": f"{rng.random():.4f}",
        "vip": rng.choice(["true", "TRUE", "false", "no"]),
        "ua": rng.choice(_AGENTS),
    }
    # Drop an optional field now and then so absent columns show up as nulls.
    if rng.random() < 0.2:
        params.pop("score")
    return f"evt-{index:08d}\t{urlencode(params)}"


def _render_broken_line(rng: random.Random, index: int) -> str:
    if rng.random() < 0.5:
        return f"evt-{index:08d} missing-tab"
    return f"evt-{index:08d}\tclicks=lots&uid=1"


def _generate_lines(
    path: Path, rows: int, seed: int, malformed_rate: float = 0.0
) -> int:
    """Write ``rows`` lines to ``path`` and return how many are broken."""
    rng = random.Random(seed)
    broken = 0
    with path.open("w", encoding="utf-8", newline="\n") as f:
        for i in range(rows):
            if malformed_rate and rng.random() < malformed_rate:
                f.write(_render_broken_line(rng, i) + "\n")
                broken += 1
            else:
                f.write(_render_line(rng, i) + "\n")
    return broken


@app.command()
def main(
    output: Path = typer.Argument(..., help="Destination file."),
    rows: int = typer.Option(
        10_000,
        "--rows",
        "-r",
        help="Number of lines to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    malformed_rate: float = typer.Option(
        0.0,
        "--malformed-rate",
        min=0.0,
        max=1.0,
        help="Fraction of lines to emit broken (missing tab or non-numeric int).",
    ),
) -> None:
    """
    Generate sample lines and print the matching schema.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)

    typer.echo(f"Generating {rows:,} lines -> {output} (seed={seed})")
    broken = _generate_lines(output, rows=rows, seed=seed, malformed_rate=malformed_rate)
    duration = time.perf_counter() - start
    typer.echo(f"Done in {duration:.2f}s ({broken:,} broken lines).")
    typer.echo(f"--columns '{SAMPLE_COLUMNS}' --types '{SAMPLE_COLUMN_TYPES}'")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
