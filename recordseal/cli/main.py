"""
CLI for inspecting off-chain records and verifying them against their ledger commitments.
"""

import os
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from recordseal.core.canon import canonical_json_str, project_record
from recordseal.core.errors import IntegrityError, InvalidRecord
from recordseal.core.hashing import HASH_ALGORITHM, record_digest
from recordseal.storage import SQLiteLedger, SQLiteRecordStore
from recordseal.verify.verifier import RecordVerifier

app = typer.Typer(
    name="recordseal",
    help="Verify off-chain records against their ledger commitments",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

EXIT_MISMATCH = 3


def get_db_path(db_flag: Optional[Path] = None) -> Path:
    """Resolve DB path in this order:
    1. --db flag
    2. RECORDSEAL_DB_PATH environment variable
    3. Default: ~/.recordseal/records.db
    """
    if db_flag:
        path = db_flag.resolve()
    else:
        env_path = os.environ.get("RECORDSEAL_DB_PATH")
        if env_path:
            path = Path(env_path).resolve()
        else:
            path = Path.home() / ".recordseal" / "records.db"

    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def format_ts(ts: Optional[int]) -> str:
    if ts is None:
        return "—"
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def open_stores(ctx: typer.Context, db: Optional[Path]) -> Tuple[SQLiteLedger, SQLiteRecordStore]:
    db_path = get_db_path(db or (ctx.obj or {}).get("db"))

    if not db_path.exists():
        console.print(f"[red]Database file not found: {escape(str(db_path))}[/]")
        console.print("[yellow]To get started:[/]")
        console.print("  • Set env var: export RECORDSEAL_DB_PATH=/path/to/records.db")
        console.print("  • Or use --db: recordseal records --db /custom/path.db")
        raise typer.Exit(1)

    try:
        return SQLiteLedger(db_path), SQLiteRecordStore(db_path)
    except Exception as e:
        console.print(f"[red]Failed to open database: {escape(str(e))}[/]")
        console.print("[yellow]The file may be corrupted or not a valid SQLite DB.[/]")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Path to SQLite database (overrides RECORDSEAL_DB_PATH env var)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log verification steps to stderr"),
):
    """Verify off-chain records against their ledger commitments."""
    ctx.obj = {"db": db}
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
            force=True,
        )


@app.command()
def records(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(None, "--db", hidden=True),
):
    """List stored records with their commitment counts and latest anchor time."""
    ledger, store = open_stores(ctx, db)

    with ledger, store:
        identifiers = store.list_identifiers()
        if not identifiers:
            console.print("[yellow]No records found in database.[/]")
            return

        table = Table(title="Stored Records")
        table.add_column("Identifier")
        table.add_column("Commitments")
        table.add_column("Last Committed")

        for identifier in identifiers:
            count = len(ledger.history(identifier))
            table.add_row(escape(identifier), str(count), format_ts(ledger.get_latest_timestamp(identifier)))

        console.print(table)


@app.command()
def show(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Record identifier"),
    db: Optional[Path] = typer.Option(None, "--db", hidden=True),
):
    """Show a stored record with its canonical form and current digest."""
    ledger, store = open_stores(ctx, db)

    with ledger, store:
        try:
            record = store.fetch_by_identifier(identifier)
        except InvalidRecord as e:
            console.print(f"[red]Cannot read record '{escape(identifier)}': {escape(str(e))}[/]", soft_wrap=True)
            raise typer.Exit(1)
        if record is None:
            console.print(f"[yellow]No record found for '{escape(identifier)}'[/]")
            raise typer.Exit(1)

        console.print(f"[bold cyan]Record {escape(identifier)}[/]")
        for key in sorted(record):
            console.print(f"  {escape(key):20} {escape(str(record[key]))}")

        try:
            canonical = canonical_json_str(project_record(record))
            digest = record_digest(record)
        except InvalidRecord as e:
            console.print(f"[red]Cannot canonicalize: {escape(str(e))}[/]")
            raise typer.Exit(1)

        console.print("  " + "─" * 70)
        console.print(f"  canonical: {escape(canonical)}", soft_wrap=True)
        console.print(f"  {HASH_ALGORITHM}:    {digest.hex()}", soft_wrap=True)


@app.command()
def history(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Record identifier"),
    db: Optional[Path] = typer.Option(None, "--db", hidden=True),
):
    """Show every commitment anchored for a record, oldest first."""
    ledger, store = open_stores(ctx, db)

    with ledger, store:
        entries = ledger.history(identifier)
        if not entries:
            console.print(f"[yellow]No commitments found for '{escape(identifier)}'[/]")
            raise typer.Exit(1)

        for i, commitment in enumerate(entries):
            latest = "  (latest)" if i == len(entries) - 1 else ""
            console.print(f"{i:4d} | {format_ts(commitment.timestamp)} | {commitment.digest.hex()}{latest}", soft_wrap=True)


@app.command()
def verify(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Record identifier to verify"),
    db: Optional[Path] = typer.Option(None, "--db", hidden=True),
):
    """Verify a stored record against its latest ledger commitment."""
    ledger, store = open_stores(ctx, db)

    with ledger, store:
        verifier = RecordVerifier(ledger)
        try:
            verdict = verifier.verify_from_storage(identifier, store)
        except IntegrityError as e:
            console.print(f"[yellow]Cannot verify '{escape(identifier)}': {escape(str(e))}[/]", soft_wrap=True)
            raise typer.Exit(1)

    if verdict.is_match:
        console.print(f"[green]✓ Data integrity verified for '{escape(identifier)}': no alterations detected[/]", soft_wrap=True)
    else:
        console.print(f"[bold white on red]✗ DATA INTEGRITY COMPROMISED for '{escape(identifier)}': alterations detected[/]", soft_wrap=True)

    console.print(f"  Committed at:  {format_ts(verdict.committed_at)}")
    console.print(f"  Stored hash:   {verdict.committed_hex}", soft_wrap=True)
    console.print(f"  Computed hash: {verdict.computed_hex}", soft_wrap=True)

    if not verdict.is_match:
        raise typer.Exit(EXIT_MISMATCH)


@app.command()
def export(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(None, "--db", hidden=True),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file (default: verification-report.jsonl)"),
):
    """Verify every stored record and write one JSON report per line."""
    ledger, store = open_stores(ctx, db)

    out_path = output or Path("verification-report.jsonl")
    counts = {"match": 0, "mismatch": 0, "error": 0}

    with ledger, store:
        identifiers = store.list_identifiers()
        if not identifiers:
            console.print("[yellow]No records found in database.[/]")
            raise typer.Exit(0)

        verifier = RecordVerifier(ledger)
        with open(out_path, "w", encoding="utf-8") as f:
            for identifier in identifiers:
                try:
                    entry = verifier.verify_from_storage(identifier, store).to_dict()
                    counts[entry["status"]] += 1
                except IntegrityError as e:
                    entry = {"identifier": identifier, "error": type(e).__name__, "message": str(e)}
                    counts["error"] += 1
                json.dump(entry, f, separators=(",", ":"))
                f.write("\n")

    console.print(f"[green]Exported {len(identifiers)} reports to {escape(str(out_path))}[/]")
    console.print(f"  match: {counts['match']}  mismatch: {counts['mismatch']}  unverifiable: {counts['error']}")
    if counts["mismatch"]:
        console.print(f"[bold white on red]✗ {counts['mismatch']} record(s) show alterations[/]")


if __name__ == "__main__":
    app()
