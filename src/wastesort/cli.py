"""CLI commands for the waste-sorting resolution engine."""

import base64
import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from wastesort.constants import CACHE_DIR, LOG_LEVEL
from wastesort.models import ProviderAnswer, WasteCategory, WasteRecord
from wastesort.resolver import WasteResolver, create_resolver
from wastesort.storage import DiskStore

app = typer.Typer(
    help="Offline waste-sorting lookups (knowledge base and AI answer cache).",
)
cache_app = typer.Typer(help="AI answer cache commands.")
app.add_typer(cache_app, name="cache", no_args_is_help=True)


class OutputFormat(str, Enum):
    json = "json"
    human = "human"


class _State:
    cache_dir: str = CACHE_DIR


@contextmanager
def _resolver() -> Iterator[WasteResolver]:
    """Resolver on the configured store; the store is closed on exit."""
    with DiskStore(_State.cache_dir) as store:
        yield create_resolver(store)


def _output(data: dict | list | str, fmt: OutputFormat) -> None:
    """Output data in the requested format."""
    if fmt == OutputFormat.json:
        if isinstance(data, str):
            typer.echo(data)
        else:
            typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        if isinstance(data, str):
            typer.echo(data)
        elif isinstance(data, dict):
            for k, v in data.items():
                typer.echo(f"{k}: {v}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    for k, v in item.items():
                        typer.echo(f"  {k}: {v}")
                    typer.echo("---")
                else:
                    typer.echo(f"  {item}")


def _parse_category(value: str) -> WasteCategory:
    """Accept a category by member name (``plast``) or by its label."""
    try:
        return WasteCategory[value.strip().upper()]
    except KeyError:
        pass
    try:
        return WasteCategory(value)
    except ValueError:
        names = ", ".join(c.name for c in WasteCategory)
        raise typer.BadParameter(
            f"Unknown category {value!r}; use one of: {names}"
        ) from None


def _read_image(path: Path) -> str:
    return base64.b64encode(path.read_bytes()).decode("ascii")


FMT_OPT = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]


@app.callback()
def main(
    cache_dir: Annotated[
        str,
        typer.Option(
            "--cache-dir",
            envvar="WASTESORT_CACHE_DIR",
            help="Directory of the persistent store",
        ),
    ] = CACHE_DIR,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Debug logging")
    ] = False,
) -> None:
    """Resolve waste items without calling an AI provider."""
    logging.basicConfig(level=logging.DEBUG if verbose else LOG_LEVEL)
    _State.cache_dir = cache_dir


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@app.command("search")
def search(
    query: Annotated[str, typer.Argument(help="Item description")],
    fmt: FMT_OPT = OutputFormat.json,
) -> None:
    """Resolve a text query from the knowledge base or the cache."""
    with _resolver() as resolver:
        resolution = resolver.resolve_text(query)
    if resolution is None:
        _output({"query": query, "found": False}, fmt)
        return
    _output(
        {"found": True, **resolution.model_dump(mode="json")}, fmt
    )


@app.command("image")
def image(
    path: Annotated[
        Path, typer.Argument(help="JPEG file", exists=True, dir_okay=False)
    ],
    fmt: FMT_OPT = OutputFormat.json,
) -> None:
    """Resolve a photo from the cache by its fingerprint."""
    with _resolver() as resolver:
        resolution = resolver.resolve_image(_read_image(path))
    if resolution is None:
        _output({"image": str(path), "found": False}, fmt)
        return
    _output(
        {"found": True, **resolution.model_dump(mode="json")}, fmt
    )


@app.command("suggest")
def suggest(
    query: Annotated[str, typer.Argument(help="Item description")],
    limit: Annotated[int, typer.Option(help="Max suggestions")] = 3,
    fmt: FMT_OPT = OutputFormat.json,
) -> None:
    """List "did you mean" candidates from the knowledge base."""
    with _resolver() as resolver:
        suggestions = resolver.suggest(query, limit=limit)
    _output([s.model_dump(mode="json") for s in suggestions], fmt)


# ---------------------------------------------------------------------------
# Knowledge base and cache writes
# ---------------------------------------------------------------------------


@app.command("add")
def add(
    name: Annotated[str, typer.Argument(help="Item name")],
    category: Annotated[
        str, typer.Option("--category", "-c", help="Category, e.g. PLAST")
    ],
    note: Annotated[str, typer.Option(help="Disposal note")] = "",
    fmt: FMT_OPT = OutputFormat.json,
) -> None:
    """Add a record to the user knowledge base."""
    record = WasteRecord(
        name=name, category=_parse_category(category), note=note
    )
    with _resolver() as resolver:
        added = resolver.add_record(record)
    _output({"added": added, "record": record.model_dump(mode="json")}, fmt)


@app.command("remember")
def remember(
    name: Annotated[str, typer.Argument(help="Item name")],
    category: Annotated[
        str, typer.Option("--category", "-c", help="Category, e.g. PLAST")
    ],
    note: Annotated[str, typer.Option(help="Disposal note")] = "",
    query: Annotated[
        str | None, typer.Option("--query", "-q", help="Original query")
    ] = None,
    image_path: Annotated[
        Path | None,
        typer.Option("--image", help="Photo the answer was given for"),
    ] = None,
    promote: Annotated[
        bool, typer.Option(help="Also add to the knowledge base")
    ] = True,
    fmt: FMT_OPT = OutputFormat.json,
) -> None:
    """Store an AI provider answer in the cache."""
    answer = ProviderAnswer(
        name=name, category=_parse_category(category), note=note
    )
    image_data = _read_image(image_path) if image_path else None
    with _resolver() as resolver:
        entry = resolver.record_answer(
            answer, query=query, image_data=image_data, promote=promote
        )
    _output(entry.model_dump(mode="json", exclude={"image_fingerprint"}), fmt)


# ---------------------------------------------------------------------------
# Cache maintenance
# ---------------------------------------------------------------------------


@cache_app.command("stats")
def cache_stats(fmt: FMT_OPT = OutputFormat.json) -> None:
    """Show cache entry counts."""
    with _resolver() as resolver:
        counts = resolver.cache.stats()
    _output(counts, fmt)


@cache_app.command("clear")
def cache_clear(
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Do not ask")
    ] = False,
) -> None:
    """Remove every cached answer."""
    if not yes:
        typer.confirm("Clear the AI answer cache?", abort=True)
    with _resolver() as resolver:
        resolver.cache.clear()
    typer.echo("Cache cleared.")


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


@app.command("stats")
def stats(
    since: Annotated[
        int | None,
        typer.Option(help="Epoch milliseconds; defaults to all retained"),
    ] = None,
    fmt: FMT_OPT = OutputFormat.json,
) -> None:
    """Show resolution statistics."""
    with _resolver() as resolver:
        summary = resolver.tracker.stats(0 if since is None else since)
    _output(summary.model_dump(), fmt)


@app.command("popular")
def popular(
    limit: Annotated[int, typer.Option(help="Max queries")] = 10,
    fmt: FMT_OPT = OutputFormat.json,
) -> None:
    """Show the most frequent queries."""
    with _resolver() as resolver:
        queries = resolver.tracker.popular_queries(limit)
    _output([q.model_dump() for q in queries], fmt)


@app.command("prefetch-list")
def prefetch_list(
    max_items: Annotated[int, typer.Option(help="Max queries")] = 20,
    fmt: FMT_OPT = OutputFormat.json,
) -> None:
    """Show popular queries the cache cannot answer yet."""
    from wastesort.analytics.prefetch import get_prefetch_list

    with _resolver() as resolver:
        items = get_prefetch_list(resolver.tracker, resolver.cache, max_items)
    _output([i.model_dump() for i in items], fmt)


if __name__ == "__main__":
    app()
