#!/usr/bin/env python3
"""
Family Tree Records - Flask JSON API with CLI commands for GEDCOM exchange
"""

import os

from flask import Flask

from family_tree.blueprints.api_changes import api_changes
from family_tree.blueprints.api_families import api_families
from family_tree.blueprints.api_gedcom import api_gedcom
from family_tree.blueprints.api_persons import api_persons
from family_tree.blueprints.api_relationships import api_relationships
from family_tree.commands import register_commands
from family_tree.database import init_app as init_database
from family_tree.error_handlers import register_error_handlers
from family_tree.shared.logging_config import set_project_log_level


class Config:
    """Configuration class for Flask app with required environment variables"""

    def __init__(self):
        # Flask configuration
        self.secret_key = self._require_env('SECRET_KEY')

        # Database configuration
        self.sqlalchemy_database_uri = self._require_env('DATABASE_URL')
        self.sqlalchemy_track_modifications = False

        # Optional settings
        self.log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
        self.gedcom_source_name = os.environ.get('GEDCOM_SOURCE_NAME', 'FamilyTree App')

    def _require_env(self, var_name: str) -> str:
        """Require environment variable or raise error"""
        value = os.environ.get(var_name)
        if not value:
            raise RuntimeError(f"Required environment variable {var_name} is not set")
        return value


def create_app(config=None):
    """Application factory"""
    app = Flask(__name__)

    # Initialize configuration
    if config is None:
        config = Config()

    # Set Flask config from our config object
    app.config['SECRET_KEY'] = config.secret_key
    app.config['SQLALCHEMY_DATABASE_URI'] = config.sqlalchemy_database_uri
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = config.sqlalchemy_track_modifications
    app.config['LOG_LEVEL'] = getattr(config, 'log_level', 'INFO')
    app.config['GEDCOM_SOURCE_NAME'] = getattr(config, 'gedcom_source_name', 'FamilyTree App')
    app.config['TESTING'] = getattr(config, 'testing', False)

    set_project_log_level(app.config['LOG_LEVEL'])

    # Register blueprints
    app.register_blueprint(api_families)
    app.register_blueprint(api_persons)
    app.register_blueprint(api_relationships)
    app.register_blueprint(api_changes)
    app.register_blueprint(api_gedcom)

    # Initialize database
    init_database(app)

    # Register error handlers and CLI commands
    register_error_handlers(app)
    register_commands(app)

    return app


def main_cli():
    """CLI entry point"""
    app = create_app()

    print("Family Tree Records API")
    print("=" * 50)
    print("Endpoints are served under /api (families, persons, relationships, changes, gedcom)")
    print()
    print("Access the API at: http://localhost:5000/api")
    print()

    app.run(debug=False, host='0.0.0.0', port=5000)


if __name__ == '__main__':
    main_cli()
