import asyncio, logging, sys, time
import click
import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress, BarColumn, TextColumn, TimeElapsedColumn,
    TimeRemainingColumn, MofNCompleteColumn, SpinnerColumn
)
from rich.table import Table

from .adapters.chains_static import API_KEY_ENV, load_chains
from .adapters.http_httpx import HttpxGetter
from .adapters.jsonl_sink import JSONLLogSink
from .adapters.parquet_sink import ParquetLogSink
from .application.log_fetcher import LogFetcher
from .application.planning import plan_chunks
from .application.retry import RetryPolicy, exponential_backoff, no_backoff
from .application.use_cases import fetch_range
from .domain.errors import ResultSizeExceeded, ScanLogsError, UnsupportedChain

console = Console(stderr=True)

WILDCARD_TOPICS = ("", "-", "null", "none")


def _parse_topics(topics: tuple[str, ...]) -> list[str | None]:
    if len(topics) > 4:
        raise click.UsageError("At most 4 --topic values (topic0..topic3)")
    return [None if t.lower() in WILDCARD_TOPICS else t for t in topics]


def _make_sink(out: str):
    if not out:
        return JSONLLogSink(stream=sys.stdout)
    if out.endswith(".parquet"):
        return ParquetLogSink(out)
    return JSONLLogSink(out)


@click.group()
@click.option("-v", "--verbose", count=True, help="Repeat for more log output")
def cli(verbose):
    """scanlogs: event logs from Etherscan-compatible block explorers."""
    level = logging.WARNING if verbose == 0 else logging.INFO if verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]",
                        handlers=[RichHandler(console=console, show_path=False)])


@cli.command("chains")
def chains_cmd():
    """List configured explorer endpoints."""
    table = Table(title="explorers")
    for col in ("chain", "explorer", "api url", "key env", "key", "rate"):
        table.add_column(col)
    for cid, ep in sorted(load_chains().items()):
        table.add_row(str(cid), ep.identifier, ep.api_url, API_KEY_ENV.get(cid, ""),
                      "yes" if ep.api_key else "no", f"{ep.requests_per_window}/{ep.window_s:g}s")
    Console().print(table)


@cli.command("fetch")
@click.option("--chain", "chain_id", type=int, required=True, help="Chain id, e.g. 1 for Ethereum")
@click.option("--topic", "topics", multiple=True,
              help="Topic filter; repeat for topic0..topic3 in order, '-' leaves a slot open")
@click.option("--from-block", type=int, required=True)
@click.option("--to-block", type=int, required=True)
@click.option("--step", type=click.IntRange(min=1), default=10_000, show_default=True, help="Blocks per request")
@click.option("--concurrency", type=click.IntRange(min=1), default=4, show_default=True, help="Max parallel chunks")
@click.option("--out", type=str, default="", help="Output .parquet or .jsonl path (default: JSONL on stdout)")
@click.option("--max-pages", type=int, default=None, help="Cap explorer pages for a single block")
@click.option("--max-retries", type=int, default=None, help="Give up after N rate-limited attempts")
@click.option("--backoff", type=float, default=0.0, show_default=True,
              help="Base delay (s) for exponential backoff between rate-limited attempts")
def fetch_cmd(chain_id, topics, from_block, to_block, step, concurrency, out, max_pages, max_retries, backoff):
    """Fetch logs matching the topics across a block range."""
    topic_filter = _parse_topics(topics)
    if from_block > to_block:
        raise click.UsageError("--from-block must be <= --to-block")
    policy = RetryPolicy(
        max_attempts=max_retries,
        backoff=exponential_backoff(backoff) if backoff > 0 else no_backoff,
    )

    async def run():
        http = HttpxGetter()
        fetcher = LogFetcher(load_chains(), http, retry_policy=policy, max_pages=max_pages)
        sink = _make_sink(out)
        total_chunks = len(plan_chunks(from_block, to_block, step))
        t0 = time.time()

        progress = Progress(SpinnerColumn(),
                            TextColumn("[bold]fetching logs[/]"),
                            BarColumn(),
                            MofNCompleteColumn(),
                            TextColumn("•"),
                            TimeElapsedColumn(),
                            TextColumn("→"),
                            TimeRemainingColumn(),
                            TextColumn(" • {task.description}"),
                            console=console,
                            transient=False,
                            expand=True,
                            )
        try:
            with progress:
                task = progress.add_task(description=f"{from_block:,}-{to_block:,}", total=total_chunks)
                _, stats = await fetch_range(
                    getter=fetcher, chain_id=chain_id, topics=topic_filter,
                    start_block=from_block, end_block=to_block,
                    step=step, concurrency=concurrency, sink=sink,
                    on_chunk=lambda chunk, n: progress.advance(task, 1),
                )
        finally:
            await fetcher.aclose()
            await http.aclose()

        elapsed = time.time() - t0
        console.print(f"[bold]done[/]: {stats['total_logs']} logs • {elapsed:.2f}s")
        console.print(
            f"[bold]summary[/]: "
            f"[green]chunks[/]={stats['chunks']}  "
            f"blocks={stats['blocks']}  "
            f"out={out or 'stdout'}"
        )

    try:
        asyncio.run(run())
    except ResultSizeExceeded as e:
        raise click.ClickException(f"{e} (blocks {e.from_block}-{e.to_block}); retry with a smaller --step")
    except UnsupportedChain as e:
        raise click.ClickException(f"{e}; see `scanlogs chains`")
    except ScanLogsError as e:
        raise click.ClickException(str(e))
    except httpx.HTTPError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")


if __name__ == "__main__":
    cli()
