"""
GEDCOM parser for reading family graphs from GEDCOM files
"""

import re

from .date_utils import GEDCOMDateParser
from .logging_config import get_project_logger
from .models import FamilyGraph, ParentChildEdge, ParseIssue, Person, SpouseEdge


logger = get_project_logger(__name__)

LINE_PATTERN = re.compile(r'^(\d+)\s+(@?[^@\s]+@?)\s*(.*)$')
NAME_PATTERN = re.compile(r'^([^/]*?)\s*/([^/]*)/?\s*(.*)$')

EXPECTED_TOP_LEVEL_TAGS = {'HEAD', 'TRLR'}
SEX_VALUES = {'M': 'male', 'F': 'female'}
CLAN_PREFIX = 'Clan: '
VILLAGE_PREFIX = 'Village Origin: '


class GEDCOMParser:
    """Parse GEDCOM text into a FamilyGraph, collecting the lines it had to skip"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.persons: dict[str, Person] = {}
        self.families: list[dict] = []
        self.issues: list[ParseIssue] = []
        self._record = None
        self._current_tag = None
        self._note_kind = None
        self._biographies: dict[str, str] = {}

    def parse_file(self, file_path: str) -> FamilyGraph:
        """Parse a GEDCOM file and return the family graph"""
        with open(file_path, encoding='utf-8-sig') as f:
            return self.parse_content(f.read())

    def parse_content(self, content: str) -> FamilyGraph:
        """Parse GEDCOM text (CRLF or LF line endings) and return the family graph"""
        self.reset()
        content = content.lstrip('\ufeff')

        for line_number, raw_line in enumerate(content.splitlines(), 1):
            line = raw_line.strip()
            if not line:
                continue

            match = LINE_PATTERN.match(line)
            if not match:
                self._skip(line_number, raw_line, 'unparsable line')
                continue

            level = int(match.group(1))
            tag = match.group(2)
            value = match.group(3).strip()

            if level == 0:
                self._start_record(line_number, raw_line, tag, value)
            elif self._record is None:
                continue
            elif level == 1:
                self._handle_level_one(line_number, raw_line, tag, value)
            elif level == 2 and self._current_tag:
                self._handle_level_two(line_number, raw_line, tag, value)

        for person_id, biography in self._biographies.items():
            normalized = ' '.join(biography.split())
            self.persons[person_id].biography = normalized or None

        graph = FamilyGraph(persons=list(self.persons.values()))
        self._build_relationships(graph)
        graph.issues = sorted(self.issues, key=lambda issue: issue.line_number)

        logger.info(f"Parsed GEDCOM: {graph.summary()}")
        return graph

    def _skip(self, line_number: int, line: str, reason: str) -> None:
        self.issues.append(ParseIssue(line_number=line_number, line=line.rstrip('\r\n'), reason=reason))

    def _start_record(self, line_number: int, raw_line: str, tag: str, value: str) -> None:
        """A level-0 line closes the current record and may open a new one"""
        self._record = None
        self._current_tag = None
        self._note_kind = None

        if not (tag.startswith('@') and tag.endswith('@')):
            if tag not in EXPECTED_TOP_LEVEL_TAGS:
                self._skip(line_number, raw_line, f'unsupported record type {tag}')
            return

        record_id = tag.strip('@')
        record_type = value.split(None, 1)[0] if value else ''

        if record_type == 'INDI':
            if record_id in self.persons:
                self._skip(line_number, raw_line, f'duplicate record id {record_id}')
                return
            # Without a SEX line the gender stays unset
            self.persons[record_id] = Person(id=record_id, gender='unset')
            self._record = {'type': 'person', 'id': record_id}
        elif record_type == 'FAM':
            family = {'type': 'family', 'id': record_id, 'husband': None, 'wife': None, 'children': []}
            self.families.append(family)
            self._record = family
        else:
            self._skip(line_number, raw_line, f'unsupported record type {record_type or tag}')

    def _handle_level_one(self, line_number: int, raw_line: str, tag: str, value: str) -> None:
        self._current_tag = tag
        self._note_kind = None

        if self._record['type'] == 'person':
            person = self.persons[self._record['id']]
            if tag == 'NAME':
                person.full_name = self._parse_name(value)
            elif tag == 'SEX':
                person.gender = SEX_VALUES.get(value.upper(), 'other')
            elif tag == 'OCCU':
                person.occupation = value or None
            elif tag == 'NOTE' and value:
                self._note_kind = 'biography'
                self._append_biography(person.id, value)
        else:
            reference = (self._extract_id(value), line_number, raw_line)
            if tag == 'HUSB':
                self._record['husband'] = reference
            elif tag == 'WIFE':
                self._record['wife'] = reference
            elif tag == 'CHIL':
                self._record['children'].append(reference)

    def _handle_level_two(self, line_number: int, raw_line: str, tag: str, value: str) -> None:
        """Level-2 lines only mean something relative to the last level-1 tag"""
        if self._record['type'] != 'person':
            return
        person = self.persons[self._record['id']]

        if self._current_tag in ('BIRT', 'DEAT'):
            prefix = 'birth' if self._current_tag == 'BIRT' else 'death'
            if tag == 'DATE':
                iso_date = GEDCOMDateParser.to_iso(value)
                if iso_date:
                    setattr(person, f'date_of_{prefix}', iso_date)
                else:
                    self._skip(line_number, raw_line, f'unparsable date {value!r}')
            elif tag == 'PLAC':
                setattr(person, f'place_of_{prefix}', value or None)
        elif self._current_tag == 'NOTE' and tag in ('CONT', 'CONC'):
            self._handle_note_line(person, tag, value)

    def _handle_note_line(self, person: Person, tag: str, value: str) -> None:
        if self._note_kind is None:
            # First continuation decides whether this block carries clan/village details
            is_heritage = value.startswith(CLAN_PREFIX) or value.startswith(VILLAGE_PREFIX)
            self._note_kind = 'heritage' if is_heritage else 'biography'

        if self._note_kind == 'heritage' and tag == 'CONT':
            if value.startswith(CLAN_PREFIX):
                person.clan_name = value[len(CLAN_PREFIX):].strip() or None
                return
            if value.startswith(VILLAGE_PREFIX):
                person.village_origin = value[len(VILLAGE_PREFIX):].strip() or None
                return

        if tag == 'CONC':
            self._biographies[person.id] = self._biographies.get(person.id, '') + value
        else:
            self._append_biography(person.id, value)

    def _append_biography(self, person_id: str, text: str) -> None:
        existing = self._biographies.get(person_id, '')
        self._biographies[person_id] = f"{existing} {text}" if existing else text

    def _build_relationships(self, graph: FamilyGraph) -> None:
        """Spouse edge per HUSB+WIFE pair; one parent-child edge per child per defined parent"""
        seen_pairs = set()
        seen_edges = set()

        for family in self.families:
            husband = self._resolve(family['husband'])
            wife = self._resolve(family['wife'])

            if husband and wife and husband != wife:
                pair = frozenset((husband, wife))
                if pair not in seen_pairs:
                    seen_pairs.add(pair)
                    graph.spouses.append(SpouseEdge(spouse1_id=husband, spouse2_id=wife))

            for reference in family['children']:
                child = self._resolve(reference)
                if not child:
                    continue
                for parent in (husband, wife):
                    if not parent:
                        continue
                    if parent == child:
                        self._skip(reference[1], reference[2], 'self-referencing parent-child edge')
                        continue
                    if (parent, child) not in seen_edges:
                        seen_edges.add((parent, child))
                        graph.parent_child.append(ParentChildEdge(parent_id=parent, child_id=child))

    def _resolve(self, reference) -> str | None:
        """Return the person id of a HUSB/WIFE/CHIL reference, reporting dangling ones"""
        if reference is None:
            return None
        person_id, line_number, raw_line = reference
        if person_id not in self.persons:
            self._skip(line_number, raw_line, f'reference to unknown individual {person_id}')
            return None
        return person_id

    def _parse_name(self, value: str) -> str:
        """Split 'given /surname/ suffix'; values without the slash pattern stay verbatim"""
        match = NAME_PATTERN.match(value)
        if not match:
            return value.strip()
        parts = [match.group(1).strip(), match.group(2).strip(), match.group(3).strip()]
        return ' '.join(part for part in parts if part)

    def _extract_id(self, value: str) -> str | None:
        """Extract ID from a GEDCOM pointer (e.g., @I1@)"""
        match = re.search(r'@([^@]+)@', value)
        if match:
            return match.group(1)
        return value.strip() or None


def parse_gedcom(content: str) -> FamilyGraph:
    """Parse GEDCOM text with a fresh parser"""
    return GEDCOMParser().parse_content(content)
