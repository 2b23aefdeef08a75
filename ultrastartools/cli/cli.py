"""Command Line Interface"""

import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import click

from ultrastartools import song as ust
from ultrastartools.formats import DUMPERS, LOADERS
from ultrastartools.formats.enum import Format
from ultrastartools.formats.guess import guess_format
from ultrastartools.formats.typing import Loader
from ultrastartools.version import __version__

from .helpers import loader_option


@click.command()
@click.version_option(__version__)
@click.argument("src", type=click.Path(exists=True, dir_okay=True))
@click.argument("dst", type=click.Path())
@click.option(
    "--input-format",
    "input_format",
    type=click.Choice([f.value for f in LOADERS]),
    help="Input file format, guessed from the file contents by default",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    required=True,
    prompt="Choose an output format",
    type=click.Choice([f.value for f in DUMPERS]),
    help="Output file format",
)
@loader_option(
    "--encoding",
    "encoding",
    type=str,
    help=(
        "Text encoding of the input file, by default UTF-8 is tried first "
        "then latin-1"
    ),
)
def convert(
    src: str,
    dst: str,
    input_format: Optional[str],
    output_format: str,
    loader_options: Optional[Dict[str, Any]] = None,
) -> None:
    """Convert SRC to DST using the format specified by -f"""
    if input_format is None:
        try:
            input_format = guess_format(Path(src))
        except ValueError as e:
            raise click.ClickException(f"{e}, use --input-format") from e

        click.echo(f"Detected input file format : {Format(input_format).value}")

    loader = LOADERS[Format(input_format)]
    dumper = DUMPERS[Format(output_format)]
    song = load_and_report(loader, Path(src), loader_options or {})
    for path, contents in dumper(song, Path(dst)).items():
        path.write_bytes(contents)


def load_and_report(loader: Loader, path: Path, options: Dict[str, Any]) -> ust.Song:
    """Notes fixed while loading are echoed on stderr. Errors in the file,
    in the choice of files or in the text encoding end the command with a
    message instead of a traceback"""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            song = loader(path, **options)
        except UnicodeDecodeError as e:
            raise click.ClickException(f"Could not decode {path} : {e}") from e
        except LookupError as e:
            raise click.ClickException(f"Unknown text encoding : {e}") from e
        except ValueError as e:
            # SongParserError included, it points at the faulty line
            raise click.ClickException(str(e)) from e

    for warning in caught:
        click.echo(f"Warning : {warning.message}", err=True)

    return song


if __name__ == "__main__":
    convert()
