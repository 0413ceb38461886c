"""
Shared utilities for GEDCOM exchange and API responses
"""

from .date_utils import GEDCOMDateParser
from .gedcom_formatter import GEDCOMFileWriter, GEDCOMFormatter
from .gedcom_parser import GEDCOMParser, parse_gedcom
from .models import FamilyGraph, FamilyUnit, ParentChildEdge, ParseIssue, Person, SpouseEdge


__all__ = [
    'GEDCOMParser', 'GEDCOMFormatter', 'GEDCOMFileWriter', 'GEDCOMDateParser', 'parse_gedcom',
    'FamilyGraph', 'FamilyUnit', 'ParentChildEdge', 'ParseIssue', 'Person', 'SpouseEdge'
]
