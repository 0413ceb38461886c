"""
Flask CLI commands for the family tree records
"""

import sys

import click

from family_tree.database import init_db
from family_tree.services.exceptions import ServiceError
from family_tree.services.gedcom_service import gedcom_service
from family_tree.shared.gedcom_formatter import GEDCOMFileWriter


def register_commands(app):
    """Register all CLI commands with the Flask app"""

    @app.cli.command('init-db')
    def init_database():
        """Create all database tables."""
        init_db()
        click.echo("✅ Database tables created")

    @app.cli.command('export-gedcom')
    @click.argument('family_id')
    @click.option('--output-file', '-o', required=True, help='Path of the GEDCOM file to write')
    def export_gedcom(family_id, output_file):
        """Export a family to a GEDCOM file."""
        click.echo(f"📜 Exporting family {family_id}...")
        try:
            content = gedcom_service.export_family(family_id, source_name=app.config.get('GEDCOM_SOURCE_NAME'))
        except ServiceError as e:
            click.echo(f"❌ Export failed: {e}")
            sys.exit(1)

        GEDCOMFileWriter.write_gedcom_file(content.split('\n'), output_file)
        click.echo(f"✅ GEDCOM written to {output_file}")

    @app.cli.command('import-gedcom')
    @click.argument('family_id')
    @click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
    @click.option('--verbose', '-v', is_flag=True, help='List every skipped line')
    def import_gedcom(family_id, input_file, verbose):
        """Import a GEDCOM file into an existing family."""
        click.echo(f"📥 Importing {input_file} into family {family_id}...")
        try:
            content = GEDCOMFileWriter.read_gedcom_file(input_file)
            result = gedcom_service.import_into_family(family_id, content, created_by='cli')
        except ServiceError as e:
            click.echo(f"❌ Import failed: {e}")
            sys.exit(1)

        summary = result['summary']
        click.echo("✅ Import completed")
        click.echo(f"  - Persons: {summary['persons']}")
        click.echo(f"  - Parent-child relationships: {summary['relationships']}")
        click.echo(f"  - Spousal relationships: {summary['spouse_relationships']}")
        click.echo(f"  - Skipped lines: {summary['skipped_lines']}")

        if verbose:
            for issue in result['issues']:
                click.echo(f"    line {issue['line_number']}: {issue['reason']} ({issue['line']})")
