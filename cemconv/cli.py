"""
cemconv CLI - Command-line interface for converting CEM and OBJ models
"""

import logging
import sys

import click

from cemconv.converters.convert import FORMAT_NAMES, convert_bytes, parse_format
from cemconv.exceptions import InputError, UnsupportedFormatError


@click.group()
@click.version_option()
def cli():
    """
    cemconv - Convert models between CEM (ssmf) and Wavefront OBJ.

    Examples:
        cemconv convert -i model.cem -f obj model.obj
        cemconv convert -i model.obj -g obj -f cem model.cem
    """
    pass


@cli.command()
@click.option('-i', '--input', 'input_file', type=click.File('rb'), default='-',
              help='Input file to convert, default is stdin')
@click.option('-g', '--iformat', 'input_format', type=click.Choice(list(FORMAT_NAMES), case_sensitive=False),
              default=None, help='Format to use for the input (default: cem2)')
@click.option('-f', '--format', 'output_format', type=click.Choice(list(FORMAT_NAMES), case_sensitive=False),
              required=True, help='Format to use as the output')
@click.argument('output', type=click.File('wb', lazy=True), default='-')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed conversion info')
def convert(input_file, input_format, output_format, output, verbose):
    """
    Convert a model from one format to another.

    Supported formats: obj, cem, cem2, ssmf (CEM v2), cem1.3 (read header only)

    OUTPUT is the output file, default is stdout.

    Examples:
        cemconv convert -i ship.cem -f obj ship.obj
        cat ship.obj | cemconv convert -g obj -f cem > ship.cem
    """
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        data = input_file.read()
        result = convert_bytes(
            data,
            parse_format(input_format) if input_format else None,
            parse_format(output_format),
        )

        # Only touch the output once the conversion succeeded
        output.write(result)
        output.flush()

        if verbose:
            click.secho(f"✓ Success! Converted {len(data)} → {len(result)} bytes", fg='green', err=True)

    except InputError as e:
        click.secho(f"Input Error: {e}", fg='red', err=True)
        sys.exit(1)
    except UnsupportedFormatError as e:
        click.secho(f"Unsupported: {e}", fg='red', err=True)
        sys.exit(1)
    except OSError as e:
        click.secho(f"I/O Error: {e}", fg='red', err=True)
        sys.exit(1)
    except ValueError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
