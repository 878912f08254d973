"""
modgen CLI - Entry point.

    modgen SwiftUI.swiftinterface > generated_modifiers.py
    modgen SwiftUI.swiftinterface --chunk-size 20 --config modgen.toml
    modgen SwiftUI.swiftinterface --schema --parseable-types Sources/ > schema.json
"""

import logging
import shlex
import sys
from pathlib import Path

import typer

from modgen._version import get_version
from modgen.core.config import load_config
from modgen.core.errors import ModgenError
from modgen.core.pipeline import load_catalog
from modgen.emit.code import emit_code
from modgen.emit.schema import emit_schema

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Generate a modifier dispatcher (or its JSON schema) from an interface file.",
    no_args_is_help=True,
    add_completion=False,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"modgen version {get_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


@app.command()
def generate(
    interface: Path = typer.Argument(  # noqa: B008
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Interface file to read",
    ),
    schema: bool = typer.Option(False, "--schema", help="Emit a JSON schema instead of code"),
    chunk_size: int | None = typer.Option(
        None,
        "--chunk-size",
        min=1,
        help="Modifiers per dispatch chunk (default 10; ignored with --schema)",
    ),
    parseable_types: Path | None = typer.Option(  # noqa: B008
        None,
        "--parseable-types",
        file_okay=False,
        help="Directory scanned for parseable enums and types (schema mode)",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        dir_okay=False,
        help="TOML file overriding the packaged generator tables",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Read INTERFACE and write the generated module (or schema) to stdout.

    Modifiers that cannot be generated are reported on stderr, one per line.
    """
    _configure_logging(verbose)

    try:
        generator_config = load_config(config)
        if chunk_size is not None:
            generator_config = generator_config.with_chunk_size(chunk_size)
        if parseable_types is not None and not schema:
            logger.warning("--parseable-types only applies to schema mode; ignoring it")
            parseable_types = None

        catalog = load_catalog(interface, generator_config, parseable_types)
        for name in catalog.skipped:
            typer.echo(f"`{name}` will be skipped", err=True)

        if schema:
            output = emit_schema(catalog, generator_config)
        else:
            command = shlex.join(
                ["modgen", interface.name, "--chunk-size", str(generator_config.chunk_size)]
            )
            output = emit_code(catalog, generator_config, command)
    except ModgenError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(output, nl=False)


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main()
