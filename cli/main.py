"""embed-scout CLI — entry-point for extraction and crawling.

Usage:
    python cli/main.py --help

Commands:
    extract   → render one page and list its embed links
    crawl     → site search + per-page embed scan
    serve     → run the HTTP API under uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from embedscout.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Optional

import typer

from embedscout.config import settings
from embedscout.errors import ExtractionError, InputError
from embedscout.logs import configure_logging

app = typer.Typer(
    name="embed-scout",
    help="Find third-party video embed links on script-rendered pages.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default: $LOG_LEVEL)."),
) -> None:
    configure_logging(log_level)


# ---------------------------------------------------------------------------
# Dynamic extraction
# ---------------------------------------------------------------------------
@app.command("extract")
def extract(
    url: str = typer.Argument(..., help="Page to render."),
    wait_selector: Optional[str] = typer.Option(None, "--wait-selector", help="CSS selector to wait for after load."),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", help="Navigation timeout in milliseconds."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result."),
) -> None:
    """Render URL in headless Chromium and print the embed links found."""
    from embedscout.extractor import ScrapeRequest, extract_embeds

    try:
        request = ScrapeRequest.create(url, wait_selector, timeout_ms)
    except InputError as exc:
        typer.echo(f"[extract] Invalid request: {exc}", err=True)
        raise typer.Exit(2)

    try:
        result = extract_embeds(request)
    except ExtractionError as exc:
        typer.echo(f"[extract] Failed: {exc}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    typer.echo(f"[extract] {result.requested_url}")
    typer.echo(f"[extract] Servers : {len(result.servers)}")
    for server in result.servers:
        typer.echo(f"  {server.label}" + (f"  → {server.href}" if server.href else ""))
    typer.echo(f"[extract] Embeds  : {len(result.embeds)}")
    for embed in result.embeds:
        line = f"  [{embed.source_method.value}] {embed.source_url}"
        if embed.final_url != embed.source_url:
            line += f"\n      → {embed.final_url}"
        typer.echo(line)


# ---------------------------------------------------------------------------
# Static crawl
# ---------------------------------------------------------------------------
@app.command("crawl")
def crawl_cmd(
    query: str = typer.Argument(..., help="Title to search for."),
    site: Optional[str] = typer.Option(None, help="Site root (default: $CRAWL_SITE_URL)."),
    limit: Optional[int] = typer.Option(None, min=1, max=200, help="Maximum content pages."),
    dynamic: bool = typer.Option(False, "--dynamic", help="Render each page in a browser."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result."),
) -> None:
    """Search the site and list embed links found on each result page."""
    from embedscout.crawler import crawl

    pages = crawl(query, site=site, limit=limit, dynamic=dynamic)

    if as_json:
        typer.echo(json.dumps([p.to_dict() for p in pages], indent=2, ensure_ascii=False))
        return

    if not pages:
        typer.echo(f"[crawl] No pages found for {query!r}.")
        return
    for page in pages:
        typer.echo(f"[crawl] {page.page}")
        if page.error:
            typer.echo(f"  error: {page.error}")
        elif not page.embeds:
            typer.echo("  (no embed links in static HTML; try --dynamic)")
        for embed in page.embeds:
            typer.echo(f"  {embed.kind}: {embed.url}")


# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(3001, help="Bind port."),
) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    typer.echo(f"[serve] Listening on {host}:{port}")
    uvicorn.run("embedscout.api.app:app", host=host, port=port, log_level=settings.log_level.lower())


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
