"""
Benchmark script: time a three-field parse built in different ways.

Usage:
    uv run python scripts/bench_parse.py              # sequential
    uv run python scripts/bench_parse.py --parallel   # also run from a thread pool

Each case decodes ``limit=10&page=1&fields=a,b,c`` into a fresh record.
``json.loads`` of the equivalent document is timed for comparison.
"""

from __future__ import annotations

import json
import logging
import sys
import timeit
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from httpreq import Kind, ParsingMap, bind, to_comma_list, to_int

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

NUMBER = 20_000
REPEAT = 5
WORKERS = 4

SOURCE = {"limit": "10", "page": "1", "fields": "a,b,c"}
JSON_DOC = '{"fields": ["a", "b", "c"], "limit": 10, "page": 1}'

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("bench_parse")


@dataclass
class Req:
    fields: list[str] = field(default_factory=list)
    limit: int = 0
    page: int = 0


# ---------------------------------------------------------------------------
# Cases
# ---------------------------------------------------------------------------

def _literal() -> None:
    data = Req()
    ParsingMap([
        ("limit", to_int, bind(data, "limit", Kind.INT)),
        ("page", to_int, bind(data, "page", Kind.INT)),
        ("fields", to_comma_list, bind(data, "fields", Kind.STRING_LIST)),
    ]).parse(SOURCE)


def _add_chain() -> None:
    data = Req()
    (
        ParsingMap.with_capacity(3)
        .add("limit", to_int, bind(data, "limit", Kind.INT))
        .add("page", to_int, bind(data, "page", Kind.INT))
        .add("fields", to_comma_list, bind(data, "fields", Kind.STRING_LIST))
        .parse(SOURCE)
    )


def _typed_helpers() -> None:
    data = Req()
    (
        ParsingMap()
        .add_int("limit", bind(data, "limit", Kind.INT))
        .add_int("page", bind(data, "page", Kind.INT))
        .add_comma_list("fields", bind(data, "fields", Kind.STRING_LIST))
        .parse(SOURCE)
    )


def _json_loads() -> None:
    Req(**json.loads(JSON_DOC))


CASES = {
    "literal": _literal,
    "add chain": _add_chain,
    "typed helpers": _typed_helpers,
    "json.loads": _json_loads,
}


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def _per_call_us(fn) -> float:
    best = min(timeit.repeat(fn, number=NUMBER, repeat=REPEAT))
    return best / NUMBER * 1e6


def _parallel_per_call_us(fn) -> float:
    def batch() -> None:
        for _ in range(NUMBER):
            fn()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        elapsed = timeit.timeit(
            lambda: list(pool.map(lambda _: batch(), range(WORKERS))), number=1
        )
    return elapsed / (NUMBER * WORKERS) * 1e6


def main() -> None:
    parallel = "--parallel" in sys.argv

    log.info("Benchmarking %d case(s), %d calls x %d repeats", len(CASES), NUMBER, REPEAT)
    for name, fn in CASES.items():
        fn()  # warm-up
        log.info("  %-14s %8.2f us/op", name, _per_call_us(fn))

    if parallel:
        log.info("Parallel (%d threads)", WORKERS)
        for name, fn in CASES.items():
            log.info("  %-14s %8.2f us/op", name, _parallel_per_call_us(fn))

    log.info("Done.")


if __name__ == "__main__":
    main()
