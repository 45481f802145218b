import logging
import traceback
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from schema2dts._version import __version__
from schema2dts.codegen.codegen import Codegen
from schema2dts.config import get_config
from schema2dts.exceptions import Schema2DtsError

# stdout carries the declarations when no output file is configured
console = Console(stderr=True)
app = typer.Typer(
    name='schema2dts',
    help='Generate TypeScript declarations from JSON Schema and OpenAPI documents',
    no_args_is_help=True,
)


@app.command()
def generate(
    sources: Annotated[
        list[str] | None,
        typer.Argument(help='Schema files, glob patterns or URLs (override the config)'),
    ] = None,
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option('--output', '-o', help='Output file; prints to stdout if omitted'),
    ] = None,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Log resolution and emission steps')
    ] = False,
) -> None:
    """Generate TypeScript declarations.

    Sources given on the command line replace the configured ones. Without
    a config file the default files in the current directory, the
    [tool.schema2dts] table of pyproject.toml and SCHEMA2DTS_* environment
    variables are consulted.

    Examples:
        schema2dts generate schema.json
        schema2dts generate 'schemas/*.yaml' -o types/schema.d.ts
        schema2dts generate --config schema2dts.yaml
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(message)s',
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )

    try:
        settings = get_config(config, sources=sources or None, output=output)

        with Progress(
            SpinnerColumn(),
            TextColumn('[progress.description]{task.description}'),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task(
                f'Generating declarations for {len(settings.sources)} source(s)...',
                total=None,
            )
            text = Codegen(settings).generate()
            progress.update(task, description='Declaration generation completed!')

        if settings.output:
            console.print(f'[green]Declarations written to[/green] {escape(settings.output)}')
        else:
            typer.echo(text, nl=False)

    except Schema2DtsError as e:
        console.print(f'[red]Error:[/red] {escape(e.message)}')
        raise typer.Exit(1)
    except Exception as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        traceback.print_exc()
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the version of schema2dts."""
    typer.echo(f'schema2dts version: {__version__}')


if __name__ == '__main__':
    app()
