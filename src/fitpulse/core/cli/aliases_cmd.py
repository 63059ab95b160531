"""fitpulse aliases / learn — inspect and extend the learned header aliases."""

from __future__ import annotations

import click

from fitpulse.ingest.models import RecordCategory, target_fields

_CATEGORIES = [c.value for c in RecordCategory if c != RecordCategory.UNKNOWN]


@click.command()
@click.option("--category", "-c", type=click.Choice(_CATEGORIES), default=None, help="Only show one category.")
@click.pass_obj
def aliases(config, category: str | None) -> None:
    """Show header aliases learned from previous imports."""
    from fitpulse.core.cli.common import create_alias_table

    learned = create_alias_table(config).learned()
    if category:
        learned = {category: learned.get(category, {})}

    shown = False
    for cat in sorted(learned):
        for field_name in sorted(learned[cat]):
            headers = learned[cat][field_name]
            if headers:
                click.echo(f"{cat}.{field_name}: {', '.join(headers)}")
                shown = True
    if not shown:
        click.echo("No learned aliases yet.")


@click.command()
@click.argument("category", type=click.Choice(_CATEGORIES))
@click.argument("field_name")
@click.argument("header")
@click.pass_obj
def learn(config, category: str, field_name: str, header: str) -> None:
    """Confirm that HEADER holds FIELD_NAME for CATEGORY files."""
    from fitpulse.core.cli.common import create_alias_table
    from fitpulse.core.exceptions import AliasStoreError

    cat = RecordCategory(category)
    fields = target_fields(cat)
    if field_name not in fields:
        raise click.BadParameter(f"'{field_name}' is not a {category} field. Choose from: {', '.join(fields)}")

    try:
        learned = create_alias_table(config).learn(cat, field_name, header)
    except AliasStoreError as e:
        raise click.ClickException(str(e)) from e

    if learned:
        click.echo(f"Learned '{header.strip().lower()}' for {category}.{field_name}")
    else:
        click.echo(f"'{header.strip().lower()}' is already known for {category}.{field_name}")
