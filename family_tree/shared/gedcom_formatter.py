"""
Pure GEDCOM formatting without file I/O operations
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from .date_utils import GEDCOMDateParser
from .logging_config import get_project_logger
from .models import FamilyUnit


logger = get_project_logger(__name__)

GEDCOM_VERSION = "5.5.5"
NOTE_LINE_LIMIT = 200
SEX_CODES = {'male': 'M', 'female': 'F'}


def escape_text(value) -> str:
    """Flatten free text onto a single GEDCOM line"""
    if value is None:
        return ''
    return str(value).replace('\r', '').replace('\n', ' ').strip()


def wrap_words(text: str, max_length: int = NOTE_LINE_LIMIT) -> list[str]:
    """Word-wrap text into lines of at most max_length characters (single long words stay whole)"""
    lines = []
    current_line = ""

    for word in text.split():
        if current_line and len(current_line) + 1 + len(word) > max_length:
            lines.append(current_line)
            current_line = word
        else:
            current_line = f"{current_line} {word}" if current_line else word

    if current_line:
        lines.append(current_line)

    return lines


class GEDCOMFormatter:
    """Format a family graph to GEDCOM 5.5.5 lines without file operations

    Persons may be any objects exposing ``id`` and the person attributes
    (``full_name``, ``gender``, ``date_of_birth`` ...); parent-child edges
    expose ``parent_id``/``child_id`` and spouse edges ``spouse1_id``/``spouse2_id``.
    """

    def __init__(self, source_name: str = "FamilyTree App", now: datetime | None = None):
        self.source_name = source_name
        self.now = now
        self.local_ids: dict = {}
        self.dropped_children: list[str] = []

    def format_gedcom(self, persons: Iterable, parent_child: Iterable = (), spouses: Iterable = (),
                      file_name: str = "family_tree") -> list[str]:
        """Format the graph to GEDCOM lines"""
        persons = list(persons)

        # Local ids only live for this call
        self.local_ids = {person.id: f"I{index}" for index, person in enumerate(persons, 1)}
        self.dropped_children = []
        persons_by_local_id = {self.local_ids[person.id]: person for person in persons}

        families = self.build_family_units(persons_by_local_id, list(parent_child), list(spouses))

        lines = self._format_header(file_name)
        lines.append("")

        for person in persons:
            lines.extend(self._format_individual(person))

        for family in families:
            lines.extend(self._format_family(family))

        lines.extend(self._format_trailer())
        return lines

    def generate(self, persons: Iterable, parent_child: Iterable = (), spouses: Iterable = (),
                 file_name: str = "family_tree") -> str:
        """Format the graph and return the GEDCOM text"""
        return '\n'.join(self.format_gedcom(persons, parent_child, spouses, file_name))

    def build_family_units(self, persons_by_local_id: dict, parent_child: list, spouses: list) -> list[FamilyUnit]:
        """Group spouse edges into family units and attach children"""
        families: list[FamilyUnit] = []

        for edge in spouses:
            first = self.local_ids.get(edge.spouse1_id)
            second = self.local_ids.get(edge.spouse2_id)
            if not first or not second:
                logger.debug(f"Skipping spouse edge with unknown person: {edge.spouse1_id} & {edge.spouse2_id}")
                continue
            husband, wife = self._assign_roles(persons_by_local_id[first], first,
                                               persons_by_local_id[second], second)
            families.append(FamilyUnit(id=f"F{len(families) + 1}", husband_id=husband, wife_id=wife))

        parents_by_child: dict[str, list[str]] = {}
        for edge in parent_child:
            parent = self.local_ids.get(edge.parent_id)
            child = self.local_ids.get(edge.child_id)
            if not parent or not child:
                logger.debug(f"Skipping parent edge with unknown person: {edge.parent_id} -> {edge.child_id}")
                continue
            parents = parents_by_child.setdefault(child, [])
            if parent not in parents:
                parents.append(parent)

        for child, parents in parents_by_child.items():
            if len(parents) == 1:
                family = self._find_family_of_parent(families, parents[0])
                if family is None:
                    family = self._single_parent_family(families, persons_by_local_id[parents[0]], parents[0])
                family.add_child(child)
                continue

            family = next((f for f in families if len(f.spouse_ids & set(parents)) >= 2), None)
            if family is None:
                # Parents are not spouses of each other; no FAM record can hold this child
                self.dropped_children.append(child)
                logger.warning(f"Child {child} dropped from export: parents {parents} share no family unit")
                continue
            family.add_child(child)

        return families

    def _assign_roles(self, first_person, first_id: str, second_person, second_id: str) -> tuple[str, str]:
        """Male partner is the husband; otherwise the first-listed spouse is"""
        if getattr(first_person, 'gender', None) == 'male':
            return first_id, second_id
        if getattr(second_person, 'gender', None) == 'male':
            return second_id, first_id
        return first_id, second_id

    def _find_family_of_parent(self, families: list[FamilyUnit], parent: str) -> FamilyUnit | None:
        for family in families:
            if family.husband_id == parent or family.wife_id == parent:
                return family
        return None

    def _single_parent_family(self, families: list[FamilyUnit], person, local_id: str) -> FamilyUnit:
        family = FamilyUnit(id=f"F{len(families) + 1}")
        if getattr(person, 'gender', None) == 'female':
            family.wife_id = local_id
        else:
            family.husband_id = local_id
        families.append(family)
        return family

    def _format_header(self, file_name: str) -> list[str]:
        """Format GEDCOM header"""
        now = self.now or datetime.now(UTC)
        return [
            "0 HEAD",
            f"1 SOUR {self.source_name}",
            "2 VERS 1.0",
            "1 GEDC",
            f"2 VERS {GEDCOM_VERSION}",
            "2 FORM LINEAGE-LINKED",
            "1 CHAR UTF-8",
            "1 DATE " + now.strftime("%d %b %Y").upper(),
            "2 TIME " + now.strftime("%H:%M:%S"),
            f"1 FILE {escape_text(file_name) or 'family_tree'}.ged",
        ]

    def _format_trailer(self) -> list[str]:
        """Format GEDCOM trailer"""
        return ["0 TRLR"]

    def _format_individual(self, person) -> list[str]:
        """Format an individual record"""
        lines = [f"0 @{self.local_ids[person.id]}@ INDI"]

        full_name = escape_text(getattr(person, 'full_name', None))
        if full_name:
            name_parts = full_name.split(None, 1)
            given_name = name_parts[0]
            surname = name_parts[1] if len(name_parts) > 1 else ''
            lines.append(f"1 NAME {given_name} /{surname}/")
            if surname:
                lines.append(f"2 GIVN {given_name}")
                lines.append(f"2 SURN {surname}")

        gender = getattr(person, 'gender', None)
        if gender and gender != 'unset':
            lines.append(f"1 SEX {SEX_CODES.get(gender, 'U')}")

        lines.extend(self._format_event('BIRT', getattr(person, 'date_of_birth', None),
                                        getattr(person, 'place_of_birth', None)))
        lines.extend(self._format_event('DEAT', getattr(person, 'date_of_death', None),
                                        getattr(person, 'place_of_death', None)))

        occupation = escape_text(getattr(person, 'occupation', None))
        if occupation:
            lines.append(f"1 OCCU {occupation}")

        biography = escape_text(getattr(person, 'biography', None))
        if biography:
            # An inline first line marks the block as biography, whatever its text
            first_line, *rest = wrap_words(biography)
            lines.append(f"1 NOTE {first_line}")
            for note_line in rest:
                lines.append(f"2 CONT {note_line}")

        clan_name = escape_text(getattr(person, 'clan_name', None))
        village_origin = escape_text(getattr(person, 'village_origin', None))
        if clan_name or village_origin:
            lines.append("1 NOTE")
            if clan_name:
                lines.append(f"2 CONT Clan: {clan_name}")
            if village_origin:
                lines.append(f"2 CONT Village Origin: {village_origin}")

        return lines

    def _format_event(self, tag: str, event_date, place) -> list[str]:
        """Format a BIRT/DEAT block; an unparsable date leaves no DATE line"""
        place = escape_text(place)
        if not event_date and not place:
            return []

        lines = [f"1 {tag}"]
        gedcom_date = GEDCOMDateParser.to_gedcom(event_date)
        if gedcom_date:
            lines.append(f"2 DATE {gedcom_date}")
        elif event_date:
            logger.debug(f"Omitting unparsable {tag} date: {event_date!r}")
        if place:
            lines.append(f"2 PLAC {place}")
        return lines

    def _format_family(self, family: FamilyUnit) -> list[str]:
        """Format a family record"""
        lines = [f"0 @{family.id}@ FAM"]

        if family.husband_id:
            lines.append(f"1 HUSB @{family.husband_id}@")
        if family.wife_id:
            lines.append(f"1 WIFE @{family.wife_id}@")

        for child_id in family.children_ids:
            lines.append(f"1 CHIL @{child_id}@")

        return lines


class GEDCOMFileWriter:
    """Handles GEDCOM file I/O operations"""

    @staticmethod
    def write_gedcom_file(lines: list[str], output_file: str) -> None:
        """Write GEDCOM lines to file"""
        with open(output_file, 'w', encoding='utf-8', newline='\n') as f:
            f.write('\n'.join(lines))

    @staticmethod
    def read_gedcom_file(input_file: str) -> str:
        """Read GEDCOM text from file (a UTF-8 BOM is dropped)"""
        with open(input_file, encoding='utf-8-sig') as f:
            return f.read()
