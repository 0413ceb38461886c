"""
Shared data models for GEDCOM import and export
"""

from dataclasses import dataclass, field


@dataclass
class Person:
    """A person as exchanged through GEDCOM, keyed by a local id"""
    id: str
    full_name: str = ""
    gender: str | None = None
    date_of_birth: str | None = None
    place_of_birth: str | None = None
    date_of_death: str | None = None
    place_of_death: str | None = None
    occupation: str | None = None
    biography: str | None = None
    clan_name: str | None = None
    village_origin: str | None = None

    def to_record(self) -> dict:
        """Person attributes without the local id"""
        return {
            'full_name': self.full_name,
            'gender': self.gender,
            'date_of_birth': self.date_of_birth,
            'place_of_birth': self.place_of_birth,
            'date_of_death': self.date_of_death,
            'place_of_death': self.place_of_death,
            'occupation': self.occupation,
            'biography': self.biography,
            'clan_name': self.clan_name,
            'village_origin': self.village_origin,
        }


@dataclass(frozen=True)
class ParentChildEdge:
    parent_id: str
    child_id: str


@dataclass(frozen=True)
class SpouseEdge:
    spouse1_id: str
    spouse2_id: str
    marital_status: str = 'married'

    @property
    def pair(self) -> frozenset:
        return frozenset((self.spouse1_id, self.spouse2_id))


@dataclass
class FamilyUnit:
    """Represents a GEDCOM family unit (spouses + shared children)"""
    id: str
    husband_id: str | None = None
    wife_id: str | None = None
    children_ids: list[str] = field(default_factory=list)

    @property
    def spouse_ids(self) -> set[str]:
        return {spouse for spouse in (self.husband_id, self.wife_id) if spouse}

    def add_child(self, child_id: str) -> None:
        if child_id not in self.children_ids:
            self.children_ids.append(child_id)


@dataclass
class ParseIssue:
    """A GEDCOM line the parser skipped, with the reason"""
    line_number: int
    line: str
    reason: str

    def to_dict(self) -> dict:
        return {'line_number': self.line_number, 'line': self.line, 'reason': self.reason}


@dataclass
class FamilyGraph:
    """Persons plus parent-child and spouse edges"""
    persons: list[Person] = field(default_factory=list)
    parent_child: list[ParentChildEdge] = field(default_factory=list)
    spouses: list[SpouseEdge] = field(default_factory=list)
    issues: list[ParseIssue] = field(default_factory=list)

    def get_person(self, person_id: str) -> Person | None:
        for person in self.persons:
            if person.id == person_id:
                return person
        return None

    def summary(self) -> dict[str, int]:
        return {
            'persons': len(self.persons),
            'relationships': len(self.parent_child),
            'spouse_relationships': len(self.spouses),
            'skipped_lines': len(self.issues),
        }
