#!filepath: src/canonlink/cli.py
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from canonlink.api import get_canonicalizer
from canonlink.errors import CanonlinkError, RulesConfigError
from canonlink.rules.config import DEFAULT_RULES_PATH, describe, load_rules_from_path
from canonlink.utils.logger import get_logger

app = typer.Typer(help="Extract and canonicalize URLs.", no_args_is_help=True)
logger = get_logger(__name__)


@app.command()
def clean(
    url: str,
    keep_trailing_slash: bool = typer.Option(
        False, "--keep-trailing-slash", help="Keep a trailing slash on the path"
    ),
) -> None:
    """Print the canonical form of URL."""
    try:
        out = get_canonicalizer().clean(url, remove_trailing_slash=not keep_trailing_slash)
    except CanonlinkError as e:
        logger.error(f"Cannot clean {url!r}: {e}")
        raise typer.Exit(code=2) from e
    typer.echo(out)


@app.command()
def extract(text: Optional[str] = typer.Argument(None, help="Text, stdin when omitted")) -> None:
    """Print every URL found in TEXT, one per line."""
    source = text if text is not None else sys.stdin.read()
    for url in get_canonicalizer().extract(source):
        typer.echo(url)


@app.command()
def links(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    host: Optional[str] = typer.Option(None, help="Host for relative links"),
) -> None:
    """Print 'url<TAB>text' for every absolute link of an HTML file."""
    html = path.read_text(encoding="utf_8", errors="replace")
    for url, label in get_canonicalizer().extract_href(html, host):
        typer.echo(f"{url}\t{' '.join(label.split())}")


@app.command()
def valid(url: str) -> None:
    """Print whether URL has a registrable public domain."""
    ok = get_canonicalizer().valid(url)
    typer.echo("true" if ok else "false")
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def domain(url: str) -> None:
    """Print the registrable domain of URL; exit 1 when it has none."""
    try:
        found = get_canonicalizer().domain(url)
    except CanonlinkError as e:
        logger.error(f"Cannot parse {url!r}: {e}")
        raise typer.Exit(code=2) from e
    if found is None:
        raise typer.Exit(code=1)
    typer.echo(found)


@app.command("hash")
def hash_(
    url: str,
    clean_first: bool = typer.Option(False, "--clean", help="Canonicalize before hashing"),
) -> None:
    """Print the deduplication digest of URL."""
    try:
        digest = get_canonicalizer().hash(url, clean=clean_first)
    except CanonlinkError as e:
        logger.error(f"Cannot hash {url!r}: {e}")
        raise typer.Exit(code=2) from e
    typer.echo(digest)


@app.command("check-rules")
def check_rules(path: Path = typer.Argument(DEFAULT_RULES_PATH)) -> None:
    """Validate a rule file and print a summary."""
    try:
        rules = load_rules_from_path(path)
    except RulesConfigError as e:
        logger.error(str(e))
        raise typer.Exit(code=2) from e
    summary = describe(rules, path.expanduser().resolve())
    typer.echo(
        f"ok path={summary['path']} global_query_keys={summary['global_query_keys']} "
        f"global_strip={len(summary['global_strip'])} hosts={summary['hosts']}"
    )


if __name__ == "__main__":
    app()
