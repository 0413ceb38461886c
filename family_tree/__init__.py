"""
Family tree records: persons, relationships, edit approval and GEDCOM exchange
"""
