"""fitpulse import — parse CSV exports and consolidate them."""

from __future__ import annotations

import asyncio
import json

import click


@click.command("import")
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, writable=True), help="Write the consolidated dataset as JSON."
)
@click.option("--commit", is_flag=True, help="Commit the consolidated records to the record store.")
@click.option("--user", "user_id", default=None, help="User id the committed records belong to.")
@click.pass_obj
def import_files(config, files: tuple[str, ...], output: str | None, commit: bool, user_id: str | None) -> None:
    """Parse CSV exports and consolidate them into one dataset."""
    from fitpulse.core.cli.common import create_parser
    from fitpulse.core.exceptions import DataProcessingError
    from fitpulse.ingest.session import ImportSession

    if commit and not user_id:
        raise click.UsageError("--commit requires --user")

    session = ImportSession(create_parser(config))
    try:
        session.add_files(files)
    except DataProcessingError as e:
        raise click.ClickException(str(e)) from e

    for uploaded in session.files:
        result = uploaded.result
        if result.success:
            line = f"✓ {uploaded.name}: {result.category}, {result.rows_processed} rows processed"
            if result.rows_skipped:
                line += f" ({result.rows_skipped} skipped)"
            click.echo(line)
        else:
            click.echo(f"✗ {uploaded.name}: {result.error}")

    if not session.processed:
        raise click.ClickException("No files could be processed.")

    dataset = session.consolidate()
    counts = ", ".join(f"{name}={count}" for name, count in dataset.counts().items() if count)
    click.echo(f"Consolidated {len(session.processed)} file(s): {counts or 'no records'}")

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(dataset.to_dict(), f, indent=2)
        click.echo(f"Wrote {output}")

    if commit:
        from fitpulse.core.storage import LocalRecordStore, StorageError

        try:
            store = LocalRecordStore(base_path=config.get("paths.records_dir"))
            summary = asyncio.run(store.commit(user_id, dataset))
        except StorageError as e:
            raise click.ClickException(str(e)) from e
        click.echo(f"Committed {summary.records} record(s) in {summary.groups} group(s) for {user_id}")
