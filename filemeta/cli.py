"""Command line interface for filemeta."""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from filemeta.core.config import ExtractorConfig, StorageLocation
from filemeta.core.logging import add_log_file, set_log_level
from filemeta.facade import RequestFacade
from filemeta.processing.post_processors import resolve_property
from filemeta.processing.renderer import MetadataRenderer
from filemeta.services.selector import ServiceSelector
from filemeta.storage.resolver import ASSET_PREFIX, STORAGE_REFERENCE

# Storage id used for plain local paths given on the command line
LOCAL_STORAGE_ID = 0


def _load_config(config_path: Optional[str], debug: bool, log_file: Optional[str] = None) -> ExtractorConfig:
    try:
        config = ExtractorConfig.from_file(config_path) if config_path else ExtractorConfig()
    except Exception as e:
        click.echo(f"Error: Failed to load configuration: {e}", err=True)
        sys.exit(1)

    if debug:
        config.debug = True
        set_log_level("DEBUG")
    else:
        set_log_level(config.log_level)
    if log_file:
        add_log_file(log_file, level="DEBUG" if debug else "INFO")
    return config


def _to_reference(reference: str, config: ExtractorConfig) -> str:
    """Map a plain local path onto an ad-hoc storage reference."""
    if reference.startswith(ASSET_PREFIX) or STORAGE_REFERENCE.match(reference):
        return reference

    path = Path(reference).expanduser().resolve()
    if not path.is_file():
        click.echo(f"Error: Input file does not exist: {reference}", err=True)
        sys.exit(1)

    config.storages[LOCAL_STORAGE_ID] = StorageLocation(base_path=str(path.parent), base_url=path.parent.as_uri())
    return f"file:{LOCAL_STORAGE_ID}:{path.name}"


@click.group()
@click.version_option(version="0.1.0", prog_name="filemeta")
def main():
    """filemeta - extract metadata from files with pluggable tools."""


@main.command()
@click.argument('reference', type=str)
@click.option('--service', '-s', default='native', show_default=True, help='Extraction service to use')
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--json', 'as_json', is_flag=True, help='Print the response payload as JSON')
@click.option('--tree', is_flag=True, help='Print the raw metadata tree as JSON')
@click.option('--annotate/--no-annotate', default=False, help='Annotate keys with property paths')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--log-file', type=click.Path(), help='Also write logs to this file')
def extract(
    reference: str,
    service: str,
    config: Optional[str],
    as_json: bool,
    tree: bool,
    annotate: bool,
    debug: bool,
    log_file: Optional[str],
):
    """Extract metadata from REFERENCE (a local path, an asset or file:<id>:<path>)."""
    extractor_config = _load_config(config, debug, log_file)
    reference = _to_reference(reference, extractor_config)

    facade = RequestFacade(extractor_config, renderer=MetadataRenderer(annotate=annotate))
    result = facade.extract(reference, service, caller_is_authorized=True)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif tree:
        click.echo(json.dumps(result.tree, indent=2, ensure_ascii=False))
    elif result.success:
        click.echo(result.html)
        if result.preview:
            click.echo(f"\nPreview: {result.preview}")
    else:
        click.echo(f"✗ Extraction failed: {result.message or 'no metadata extracted'}", err=True)

    if not result.success:
        sys.exit(1)


@main.command()
@click.argument('reference', type=str)
@click.argument('property_path', type=str)
@click.option('--service', '-s', default='native', show_default=True, help='Extraction service to use')
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def decode(reference: str, property_path: str, service: str, config: Optional[str], debug: bool):
    """Print the decoded value of PROPERTY_PATH (e.g. 'EXIF|DateTime->timestamp')."""
    extractor_config = _load_config(config, debug)
    reference = _to_reference(reference, extractor_config)

    result = RequestFacade(extractor_config).extract(reference, service, caller_is_authorized=True)
    if not result.success:
        click.echo(f"✗ Extraction failed: {result.message or 'no metadata extracted'}", err=True)
        sys.exit(1)

    try:
        value = resolve_property(result.tree, property_path)
    except KeyError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(value, ensure_ascii=False))


@main.command()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def services(config: Optional[str], debug: bool):
    """List extraction services and whether they can be used."""
    extractor_config = _load_config(config, debug)
    selector = ServiceSelector(extractor_config)

    for name in selector.available_services():
        selection = selector.select(name)
        if selection.is_success:
            types = ", ".join(sorted(selection.service.get_supported_file_types()))
            click.echo(f"✓ {name}: {types}")
        else:
            click.echo(f"✗ {name}: {selection.error}")


if __name__ == "__main__":
    main()
