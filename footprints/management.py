"""
Management commands for loading and inspecting the building collection
"""
import json

import click
from flask import current_app
from flask.cli import AppGroup

from .extensions import db
from .models import Building, DatasetLoad
from .services.bootstrap_service import DATASET_KEY, BootstrapError
from .services.building_service import get_building_service, run_bootstrap

buildings_cli = AppGroup('buildings', help='Load and inspect the building collection.')


@buildings_cli.command('bootstrap')
@click.option('--force', is_flag=True, help='Clear the collection and reload it from the source.')
def bootstrap_command(force):
    """Extract building records from the open data endpoint and load them once"""
    if force:
        click.confirm('This deletes every stored building before reloading. Continue?', abort=True)

    try:
        result = run_bootstrap(force=force)
    except BootstrapError as exc:
        click.echo(f'❌ Bootstrap failed: {exc}', err=True)
        raise SystemExit(1)

    if result.loaded:
        click.echo(f'✅ Loaded {result.record_count} buildings ({result.skipped_count} rows skipped)')
    elif result.reason == 'already_loaded':
        click.echo(f'ℹ️  Collection already loaded ({result.record_count} buildings); nothing to do.')
    else:
        click.echo('⚠️  Source returned no usable rows; collection left empty.')


@buildings_cli.command('status')
def status_command():
    """Show collection size, load marker and active read configuration"""
    service = get_building_service()
    marker = DatasetLoad.query.filter_by(dataset=DATASET_KEY).first()
    status = {
        'buildings': db.session.query(Building.id).count(),
        'load': marker.to_dict() if marker else None,
        'field_typing': service.typing.value,
        'query_strategy': service.repository.strategy,
        'source_url': current_app.config.get('OPEN_DATA_URL'),
    }
    click.echo(json.dumps(status, indent=2))


def register_commands(app):
    """Register CLI commands"""
    app.cli.add_command(buildings_cli)
