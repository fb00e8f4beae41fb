"""
Command-line interface for PDFree.
"""

import logging
import os
import sys

import click
from rich.console import Console
from rich.table import Table

from pdfree.context import ProcessingContext
from pdfree.exceptions import NoExtractableImagesError
from pdfree.settings import DEFAULT_SETTINGS
from pdfree.tools import load_builtin_plugins, registry
from pdfree.utils import format_file_size

console = Console()


def _run_tool(name, settings=None, **config):
    load_builtin_plugins()
    context = ProcessingContext.default(settings or DEFAULT_SETTINGS).with_updates(config=config)
    return registry.create(name, context).run()


def _fail(error):
    console.print(f"\n[bold red]✗ Error:[/bold red] {error}")
    sys.exit(1)


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def cli(verbose):
    """
    PDFree - Extract, compress and convert PDF files locally.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")


@cli.command(name="extract-images")
@click.argument('input_pdf', type=click.Path(exists=True))
@click.option(
    '--output', '-o',
    default='images.zip',
    help='Output ZIP archive',
    type=click.Path()
)
@click.option(
    '--fallback-scope',
    type=click.Choice(['page', 'document']),
    default=None,
    help='Try the paint harvester per page or only when the whole document has no walkable images'
)
def extract_images(input_pdf, output, fallback_scope):
    """
    Extract embedded images into a ZIP archive.

    Example:

        pdfree extract-images input.pdf -o images.zip
    """
    try:
        console.print("\n[bold cyan]Extracting images...[/bold cyan]")
        settings = DEFAULT_SETTINGS.with_overrides(fallback_scope=fallback_scope)
        result = _run_tool("extract-images", settings, input_path=input_pdf, output_path=output)

        table = Table(title="Extracted Images")
        table.add_column("Name", style="cyan")
        table.add_column("Page", style="green", justify="right")
        table.add_column("Size", style="green", justify="right")
        table.add_column("Source", style="dim")
        for entry in result.entries:
            table.add_row(entry.name, str(entry.page_number), format_file_size(entry.size), entry.provenance.value)
        console.print(table)

        console.print(f"\n[bold green]✓ Extracted {result.image_count} image(s)[/bold green]")
        if result.duplicates:
            console.print(f"[dim]{result.duplicates} duplicate(s) skipped[/dim]")
        console.print(f"[dim]Archive: {os.path.abspath(output)}[/dim]\n")

    except NoExtractableImagesError as e:
        console.print(f"\n[bold yellow]{e}[/bold yellow]")
        sys.exit(1)
    except Exception as e:
        _fail(e)


@cli.command(name="compress")
@click.argument('input_pdf', type=click.Path(exists=True))
@click.option('--output', '-o', default='compressed.pdf', help='Output PDF', type=click.Path())
@click.option('--quality', '-q', default=50, help='JPEG quality (1-100)', type=int)
@click.option('--dpi', default=150, help='Capture resolution (36-600)', type=int)
@click.option(
    '--full-page/--keep-floor',
    default=True,
    help='Pure lossy re-encoding, or never encode below 30% quality'
)
def compress(input_pdf, output, quality, dpi, full_page):
    """
    Compress a PDF by re-encoding every page as an image.

    Example:

        pdfree compress input.pdf -q 40 --dpi 120
    """
    try:
        console.print(f"\n[bold cyan]Compressing at {dpi} dpi, quality {quality}...[/bold cyan]")
        result = _run_tool(
            "compress",
            input_path=input_pdf,
            output_path=output,
            image_quality=quality,
            dpi=dpi,
            full_page_mode=full_page,
        )

        table = Table(title="Compression Result", show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Pages", str(result.page_count))
        table.add_row("Original Size", format_file_size(result.original_size))
        table.add_row("Compressed Size", format_file_size(result.compressed_size))
        table.add_row("Ratio", f"{result.compression_ratio:.1%}")
        if result.omitted_pages:
            table.add_row("Omitted Pages", ", ".join(str(page) for page in result.omitted_pages))
        console.print(table)
        console.print(f"\n[bold green]✓ Saved:[/bold green] {os.path.abspath(output)}\n")

    except Exception as e:
        _fail(e)


@cli.command(name="convert")
@click.argument('input_files', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--output', '-o', default='converted.pdf', help='Output PDF', type=click.Path())
@click.option('--monospace/--proportional', default=None, help='Force the text layout')
def convert(input_files, output, monospace):
    """
    Convert HTML, text or image files into one A4 PDF.

    Several inputs are joined in the order given.

    Example:

        pdfree convert notes.txt photo.png -o notes.pdf
    """
    try:
        console.print("\n[bold cyan]Converting...[/bold cyan]")
        destination = _run_tool(
            "convert", inputs=list(input_files), output_path=output, monospace=monospace
        )
        console.print(f"\n[bold green]✓ Successfully created:[/bold green] {destination}\n")
    except Exception as e:
        _fail(e)


@cli.command(name="images-to-pdf")
@click.argument('images', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--output', '-o', default='images.pdf', help='Output PDF', type=click.Path())
def images_to_pdf(images, output):
    """
    Combine images into a PDF, one page per image.

    Example:

        pdfree images-to-pdf a.png b.jpg -o album.pdf
    """
    try:
        destination = _run_tool("images-to-pdf", inputs=list(images), output_path=output)
        console.print(f"\n[bold green]✓ Created {len(images)} page(s):[/bold green] {destination}\n")
    except Exception as e:
        _fail(e)


@cli.command(name="pdf-to-images")
@click.argument('input_pdf', type=click.Path(exists=True))
@click.option('--output', '-o', default='pages.zip', help='Output ZIP archive', type=click.Path())
@click.option('--scale', '-s', default=2.0, help='Render scale', type=float)
def pdf_to_images(input_pdf, output, scale):
    """
    Render every page to PNG inside a ZIP archive.

    Example:

        pdfree pdf-to-images input.pdf --scale 1.5
    """
    try:
        console.print("\n[bold cyan]Rendering pages...[/bold cyan]")
        destination = _run_tool("pdf-to-images", input_path=input_pdf, output_path=output, scale=scale)
        console.print(f"\n[bold green]✓ Saved:[/bold green] {destination}\n")
    except Exception as e:
        _fail(e)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True))
def show_info(input_pdf):
    """
    Display information about a PDF file.

    Example:

        pdfree info input.pdf
    """
    try:
        info = _run_tool("info", input_path=input_pdf)

        table = Table(title=f"PDF Information: {os.path.basename(input_pdf)}")
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        table.add_row("File Path", os.path.abspath(input_pdf))
        table.add_row("File Size", format_file_size(info.file_size))
        table.add_row("Number of Pages", str(info.num_pages))
        table.add_row("Encrypted", "Yes" if info.is_encrypted else "No")
        if info.pages:
            width, height = info.pages[0]
            table.add_row("First Page", f"{width:.0f} x {height:.0f} pt")

        if info.title:
            table.add_row("Title", info.title)
        if info.author:
            table.add_row("Author", info.author)
        if info.subject:
            table.add_row("Subject", info.subject)
        if info.creator:
            table.add_row("Creator", info.creator)
        if info.producer:
            table.add_row("Producer", info.producer)

        console.print()
        console.print(table)
        console.print()

    except Exception as e:
        _fail(e)


def main():
    cli()


if __name__ == '__main__':
    main()
