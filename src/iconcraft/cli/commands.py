import json
import logging
import os
import sys

import click
from rich import print
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from iconcraft import __version__
from iconcraft.errors import IconCraftError
from iconcraft.generator import (
    generate_icons_for_multiple_platforms,
    get_platform_info,
    get_supported_platforms,
    validate_image_file,
)
from iconcraft.models import AdaptiveLayers, GenerationOptions, Platform
from iconcraft.services.image_processor import ImageProcessor
from iconcraft.services.size_config_service import size_config_manager
from iconcraft.utils.config import IconCraftConfig
from iconcraft.utils.logging_handler import setup_session_logging

logger = logging.getLogger(__name__)

PLATFORM_CHOICES = [Platform.IOS, Platform.ANDROID, Platform.ALL]


def setup_logging(debug: bool = False):
    """Setup structured logging format based on debug mode setting."""
    debug_enabled = debug or IconCraftConfig.is_debug_mode()

    if debug_enabled:
        # Structured debug logging format for easy parsing
        logging.basicConfig(
            level=logging.DEBUG,
            format='[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        if not os.environ.get("ICONCRAFT_SUPPRESS_HEADER"):
            logging.info("=" * 60)
            logging.info(f"IconCraft v{__version__} - Debug Log")
            logging.info("=" * 60)
            logging.info(f"Python: {sys.version}")
            logging.info(f"Platform: {sys.platform}")
    else:
        logging.basicConfig(level=logging.WARNING)

    log_dir = IconCraftConfig.get_log_directory()
    if log_dir:
        setup_session_logging(log_dir, debug=debug_enabled)


@click.group(invoke_without_command=True)
@click.option('--debug', '-d', is_flag=True, help="Enable debug logging")
@click.version_option(__version__, message='IconCraft v%(version)s')
@click.pass_context
def cli(ctx, debug):
    """IconCraft: Generate iOS and Android app icons from a single image."""
    setup_logging(debug)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option('-i', '--input', 'input_path', type=click.Path(), help="Source image (1024x1024 recommended)")
@click.option('-o', '--out', 'output_dir', default="icons", show_default=True, help="Output directory")
@click.option('-p', '--platform', type=click.Choice(PLATFORM_CHOICES, case_sensitive=False), default=Platform.IOS, show_default=True)
@click.option('-z', '--zip', 'create_zip', is_flag=True, help="Also create a ZIP archive per platform")
@click.option('-f', '--force', is_flag=True, help="Overwrite an existing output directory")
@click.option('-fg', '--foreground', help="Adaptive mode: foreground layer image")
@click.option('-bg', '--background', help="Adaptive mode: background image or hex color (default #111111)")
@click.option('-m', '--monochrome', help="Adaptive mode: monochrome layer image (Android 13+)")
@click.option('--fg-scale', type=float, help="Foreground content scale for all platforms")
@click.option('--fg-scale-ios', type=float, help="Foreground content scale for iOS")
@click.option('--fg-scale-android', type=float, help="Foreground content scale for Android")
@click.option('--scale', type=float, help="Scale every icon size by this factor")
@click.option('--ios-scale', type=float, help="Scale iOS icon sizes")
@click.option('--android-scale', type=float, help="Scale Android icon sizes")
@click.option('--exclude', help="Comma-separated sizes to skip, e.g. 'ldpi,round' or '20x20@2x'")
@click.option('--custom-config', type=click.Path(), help="JSON or YAML size customization file")
@click.option('--json', 'output_json', is_flag=True, help="Output results as JSON")
def generate(input_path, output_dir, platform, create_zip, force, foreground, background, monochrome,
             fg_scale, fg_scale_ios, fg_scale_android, scale, ios_scale, android_scale,
             exclude, custom_config, output_json):
    """Generate icons for one or all platforms."""
    if not input_path and not foreground:
        raise click.UsageError("Either --input (-i) or --foreground (-fg) for adaptive mode is required")

    platform = platform.lower()
    platforms = get_supported_platforms() if platform == Platform.ALL else [platform]

    try:
        if custom_config:
            custom_sizes = size_config_manager.load_customization_file(custom_config)
        else:
            custom_sizes = size_config_manager.parse_from_cli(
                scale=scale,
                ios_scale=ios_scale,
                android_scale=android_scale,
                exclude=exclude,
                platform=platform,
            )

        layers = AdaptiveLayers.from_values(foreground, background, monochrome) if foreground else None
        options = GenerationOptions(
            force=force,
            create_archive=create_zip,
            custom_sizes=custom_sizes,
            adaptive_layers=layers,
            foreground_scale=fg_scale,
            foreground_scale_ios=fg_scale_ios,
            foreground_scale_android=fg_scale_android,
        )
    except IconCraftError as e:
        _fail(e)

    mode = "Adaptive Icon Mode" if layers else "Standard Mode"
    if not output_json:
        names = " + ".join(p.upper() for p in platforms)
        print(Panel(f"[bold cyan]{names} Icon Generator[/bold cyan]\n[yellow]{mode}[/yellow]", border_style="cyan"))

    results = generate_icons_for_multiple_platforms(platforms, None if layers else input_path, output_dir, options)

    if output_json:
        click.echo(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        print_results(results)

    if not all(r.success for r in results):
        sys.exit(1)


def print_results(results):
    for result in results:
        if not result.success:
            print(Panel(f"[red]{escape(str(result.error))}[/red]", title=f"{result.platform} failed", border_style="red"))
            continue

        table = Table(title=f"{result.platform} icons", show_header=False)
        table.add_row("Output", result.output_dir)
        table.add_row("Files", str(len(result.files)))
        if result.metadata_path:
            table.add_row("Metadata", result.metadata_path)
        if result.zip_path:
            table.add_row("ZIP", result.zip_path)
        table.add_row("Mode", "adaptive" if result.adaptive_mode else "standard")
        print(Panel(table, title="Generation Complete", border_style="green"))


@cli.command()
@click.option('-p', '--platform', type=click.Choice(PLATFORM_CHOICES, case_sensitive=False), default=Platform.ALL, show_default=True)
def info(platform):
    """Show the icon sizes generated for each platform."""
    platform = platform.lower()
    platforms = get_supported_platforms() if platform == Platform.ALL else [platform]
    for key in platforms:
        print_size_table(get_platform_info(key))


def print_size_table(platform_info: dict):
    rows = platform_info["size_info"]
    table = Table(title=f"{platform_info['name']} ({platform_info['icon_count']} icons)")
    if rows:
        for column in rows[0]:
            table.add_column(column.capitalize())
        for row in rows:
            table.add_row(*(str(value) for value in row.values()))
    print(table)


@cli.command()
@click.argument('image', type=click.Path())
def validate(image):
    """Check that IMAGE can be used as a source image."""
    if not os.path.exists(image):
        print(f"[bold red]File not found: {escape(image)}[/bold red]")
        sys.exit(1)

    if not validate_image_file(image):
        formats = ", ".join(ImageProcessor().get_supported_formats())
        print(f"[bold red]Not a supported image: {escape(image)}[/bold red] (supported: {formats})")
        sys.exit(1)

    _, metadata = ImageProcessor().load_image(image)
    print(f"[green]Valid {metadata.format.upper()} image[/green]: {metadata.width}x{metadata.height}")
    if metadata.width != metadata.height:
        print("[yellow]Image is not square; it will be centered on a transparent canvas.[/yellow]")
    if max(metadata.width, metadata.height) < 1024:
        print("[yellow]Image is smaller than 1024px; it will be upscaled.[/yellow]")


def _fail(error: IconCraftError):
    print(Panel(f"[red]{escape(str(error))}[/red]", title="Error", border_style="red"))
    sys.exit(1)
