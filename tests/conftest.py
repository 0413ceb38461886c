"""
Pytest configuration and fixtures for the family tree project
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from app import create_app
from family_tree.database import db as _db
from family_tree.database.models import Family, Person


class BaseTestConfig:
    """Test configuration on an in-memory SQLite database"""

    def __init__(self):
        self.secret_key = 'test-secret-key'
        self.sqlalchemy_database_uri = 'sqlite:///:memory:'
        self.sqlalchemy_track_modifications = False
        self.log_level = 'WARNING'
        self.gedcom_source_name = 'FamilyTree Test'
        self.testing = True


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def app():
    """Create Flask app for testing"""
    return create_app(BaseTestConfig())


@pytest.fixture
def db(app):
    """Fresh tables for each test inside an application context"""
    with app.app_context():
        _db.create_all()
        try:
            yield _db
        finally:
            _db.session.remove()
            _db.drop_all()


@pytest.fixture
def client(app, db):
    """Create test client backed by the test database"""
    return app.test_client()


@pytest.fixture
def family(db):
    """A stored family"""
    family = Family(family_name='Okafor', clan_name='Umu Nna', village_origin='Nnewi')
    db.session.add(family)
    db.session.commit()
    return family


@pytest.fixture
def make_person(db, family):
    """Factory storing persons in the test family"""
    def _make_person(full_name, **values):
        person = Person(family_id=family.id, full_name=full_name, **values)
        db.session.add(person)
        db.session.commit()
        return person

    return _make_person


@pytest.fixture
def sample_gedcom_data():
    """Sample GEDCOM data for testing"""
    return """0 HEAD
1 SOUR FamilyTree App
2 VERS 1.0
1 GEDC
2 VERS 5.5.5
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I1@ INDI
1 NAME Chukwuemeka /Okafor/
2 GIVN Chukwuemeka
2 SURN Okafor
1 SEX M
1 BIRT
2 DATE 19200105
2 PLAC Nnewi
1 DEAT
2 DATE 12 MAR 1990
2 PLAC Lagos
1 OCCU Farmer
0 @I2@ INDI
1 NAME Ngozi /Okafor/
1 SEX F
1 BIRT
2 DATE 1925-07-19
0 @I3@ INDI
1 NAME Amaka /Okafor/
1 SEX F
1 BIRT
2 DATE 19500312
1 NOTE Taught at the village school
2 CONT for forty years.
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
0 TRLR"""
