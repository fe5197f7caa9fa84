"""Entity query, point lookup, and reference map commands."""

import click

from qbo_query.cli.common import fail, open_engine, run_command
from qbo_query.constants import (
    DEFAULT_QUERY_BY,
    ENTITY_COMMANDS,
    MAX_RESULTS_PER_PAGE,
    REFERENCE_ENTITIES,
)
from qbo_query.models.query import QueryOptions


def _query_options(func):
    """Attach the shared filter options to an entity command."""
    options = [
        click.option("--start", default=None, help="Start date filter (YYYY-MM-DD)"),
        click.option("--end", default=None, help="End date filter (YYYY-MM-DD)"),
        click.option(
            "--query-by",
            "query_by",
            default=DEFAULT_QUERY_BY,
            show_default=True,
            help="Date field to filter on",
        ),
        click.option("--where", default=None, help="Additional WHERE condition (passed verbatim)"),
        click.option(
            "--max",
            "max_results",
            type=int,
            default=MAX_RESULTS_PER_PAGE,
            show_default=True,
            help="Max results per page",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def make_entity_command(command_name: str, entity: str) -> click.Command:
    """Create the list command for one QuickBooks entity."""

    @click.command(name=command_name, help=f"List {entity} records.")
    @_query_options
    @click.pass_context
    def entity_command(
        ctx: click.Context,
        start: str | None,
        end: str | None,
        query_by: str,
        where: str | None,
        max_results: int,
    ) -> None:
        def _query() -> dict:
            options = QueryOptions(
                start=start,
                end=end,
                query_by=query_by,
                where=where,
                max_results=max_results,
            )
            with open_engine(ctx) as engine:
                results = engine.query(entity, options)
            return {"entity": entity, "count": len(results), "results": results}

        run_command(ctx, _query)

    return entity_command


ENTITY_QUERY_COMMANDS: list[click.Command] = [
    make_entity_command(command_name, entity) for command_name, entity in ENTITY_COMMANDS.items()
]


@click.command(name="get")
@click.argument("entity", required=False)
@click.argument("entity_id", metavar="ID", required=False)
@click.pass_context
def get_command(ctx: click.Context, entity: str | None, entity_id: str | None) -> None:
    """Get a specific record by ID (e.g. get Customer 123)."""
    if not entity or not entity_id:
        fail(ctx, "Usage: get <Entity> <ID>\nExample: get Customer 123")

    def _get() -> dict:
        with open_engine(ctx) as engine:
            result = engine.get_by_id(entity, entity_id)
        return {"entity": entity, "id": entity_id, "result": result}

    run_command(ctx, _get)


@click.command(name="refs")
@click.argument("entity", required=False)
@click.pass_context
def refs_command(ctx: click.Context, entity: str | None) -> None:
    """Get an ID-to-name map for Account, Customer, or Vendor."""
    if entity not in REFERENCE_ENTITIES:
        fail(ctx, f"Usage: refs <Entity>\nSupported: {', '.join(REFERENCE_ENTITIES)}")

    def _refs() -> dict:
        with open_engine(ctx) as engine:
            ref_map = engine.get_reference_map(entity)
        return {"entity": entity, "count": len(ref_map), "map": ref_map}

    run_command(ctx, _refs)
