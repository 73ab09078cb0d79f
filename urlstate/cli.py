import sys
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from click import Group

__all__ = ("get_urlstate_group", "main")


def _to_json(value: Any) -> str:
    from urlstate._serialization import encode_json
    from urlstate.typing import Empty

    if value is Empty:
        return "undefined"
    try:
        return encode_json(value)
    except TypeError:
        return repr(value)


def get_urlstate_group() -> "Group":
    """Get the urlstate CLI group.

    Raises:
        MissingDependencyError: If the `click` package is not installed.

    Returns:
        The urlstate CLI group.
    """
    from urlstate.exceptions import MissingDependencyError

    try:
        import rich_click as click
    except ImportError:
        try:
            import click  # type: ignore[no-redef]
        except ImportError as e:
            raise MissingDependencyError(package="click", install_package="cli") from e
    from rich import get_console

    console = get_console()

    @click.group(name="urlstate")
    @click.option("--log-level", help="Logging level for codec diagnostics.", type=str, default="WARNING")
    @click.option(
        "--log-format",
        help="Diagnostic format on standard error.",
        type=click.Choice(["simple", "structured"]),
        default="simple",
    )
    def urlstate_group(log_level: str, log_format: str) -> None:
        """Inspect typed URL query state."""
        from urlstate.utils.logging import configure_logging

        configure_logging(level=log_level, format_style=log_format, stream=sys.stderr)

    @urlstate_group.command(name="encode", help="Encode a value for use as a query parameter.")
    @click.argument("value", type=str)
    @click.option("--json", "as_json", help="Parse VALUE as a JSON literal first.", is_flag=True, default=False)
    def encode_command(value: str, as_json: bool) -> None:
        import msgspec

        from urlstate._serialization import decode_json
        from urlstate.core.codec import encode_value

        payload: Any = value
        if as_json:
            try:
                payload = decode_json(value)
            except msgspec.DecodeError as e:
                console.print(f"[red]Invalid JSON: {e}[/]")
                raise SystemExit(1) from e
        click.echo(encode_value(payload))

    @urlstate_group.command(name="decode", help="Decode a query parameter value and print it as JSON.")
    @click.argument("text", type=str)
    def decode_command(text: str) -> None:
        from urlstate.core.codec import decode_value

        click.echo(_to_json(decode_value(text)))

    @urlstate_group.command(name="query", help="Build the query object for a query string.")
    @click.argument("query_string", type=str)
    @click.option("--prefix", help="Only read keys with this prefix.", type=str, default="")
    @click.option(
        "--builder",
        "builder_path",
        help="Dotted path to a QueryBuilder instance (e.g. 'myapp.queries.users_builder').",
        type=str,
        default=None,
    )
    def query_command(query_string: str, prefix: str, builder_path: Optional[str]) -> None:
        from urlstate.core.builder import QueryBuilder, get_query_from_url
        from urlstate.core.params import QueryParams
        from urlstate.utils.module_loader import import_string

        builder: Optional[QueryBuilder[Any]] = None
        if builder_path is not None:
            try:
                builder = import_string(builder_path)
            except ImportError as e:
                console.print(f"[red]Error loading builder: {e}[/]")
                raise SystemExit(1) from e
            if not isinstance(builder, QueryBuilder):
                console.print(f"[red]{builder_path} is not a QueryBuilder[/]")
                raise SystemExit(1)
        click.echo(_to_json(get_query_from_url(QueryParams(query_string), prefix, builder)))

    return urlstate_group


def main() -> None:  # pragma: no cover
    get_urlstate_group()()
