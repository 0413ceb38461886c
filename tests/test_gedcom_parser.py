"""
Tests for GEDCOM parser, including the export/import round trip
"""

import pytest

from family_tree.shared.gedcom_formatter import GEDCOMFormatter
from family_tree.shared.gedcom_parser import GEDCOMParser, parse_gedcom
from family_tree.shared.models import ParentChildEdge, Person, SpouseEdge


def reasons(graph):
    return [issue.reason for issue in graph.issues]


class TestGEDCOMParser:
    """Test GEDCOM parser functionality"""

    @pytest.fixture
    def parser(self):
        return GEDCOMParser()

    def test_parse_sample(self, parser, sample_gedcom_data):
        graph = parser.parse_content(sample_gedcom_data)

        assert graph.summary() == {
            'persons': 3,
            'relationships': 2,
            'spouse_relationships': 1,
            'skipped_lines': 0,
        }

        father = graph.get_person('I1')
        assert father.full_name == 'Chukwuemeka Okafor'
        assert father.gender == 'male'
        assert father.date_of_birth == '1920-01-05'
        assert father.place_of_birth == 'Nnewi'
        assert father.date_of_death == '1990-03-12'
        assert father.place_of_death == 'Lagos'
        assert father.occupation == 'Farmer'

        mother = graph.get_person('I2')
        assert mother.date_of_birth == '1925-07-19'

        daughter = graph.get_person('I3')
        assert daughter.biography == 'Taught at the village school for forty years.'

    def test_parse_file(self, parser, temp_dir, sample_gedcom_data):
        gedcom_file = temp_dir / "sample.ged"
        gedcom_file.write_text(sample_gedcom_data, encoding='utf-8')

        graph = parser.parse_file(str(gedcom_file))

        assert len(graph.persons) == 3

    def test_family_with_two_children(self, parser):
        """HUSB + WIFE + two CHIL lines give one spouse pair and four parent-child edges"""
        content = "\n".join([
            "0 @I1@ INDI", "1 NAME Obi /Eze/", "1 SEX M",
            "0 @I2@ INDI", "1 NAME Ada /Eze/", "1 SEX F",
            "0 @I3@ INDI", "1 NAME Uche /Eze/",
            "0 @I4@ INDI", "1 NAME Ifeoma /Eze/",
            "0 @F1@ FAM", "1 HUSB @I1@", "1 WIFE @I2@", "1 CHIL @I3@", "1 CHIL @I4@",
            "0 TRLR",
        ])

        graph = parser.parse_content(content)

        assert graph.spouses == [SpouseEdge(spouse1_id='I1', spouse2_id='I2')]
        assert graph.parent_child == [
            ParentChildEdge('I1', 'I3'),
            ParentChildEdge('I2', 'I3'),
            ParentChildEdge('I1', 'I4'),
            ParentChildEdge('I2', 'I4'),
        ]

    def test_single_parent_family(self, parser):
        content = "\n".join([
            "0 @I1@ INDI", "1 NAME Ngozi /Obi/", "1 SEX F",
            "0 @I2@ INDI", "1 NAME Chidi /Obi/",
            "0 @F1@ FAM", "1 WIFE @I1@", "1 CHIL @I2@",
        ])

        graph = parser.parse_content(content)

        assert graph.spouses == []
        assert graph.parent_child == [ParentChildEdge('I1', 'I2')]

    def test_repeated_pairs_are_not_duplicated(self, parser):
        content = "\n".join([
            "0 @I1@ INDI", "0 @I2@ INDI", "0 @I3@ INDI",
            "0 @F1@ FAM", "1 HUSB @I1@", "1 WIFE @I2@", "1 CHIL @I3@",
            "0 @F2@ FAM", "1 HUSB @I2@", "1 WIFE @I1@", "1 CHIL @I3@",
        ])

        graph = parser.parse_content(content)

        assert len(graph.spouses) == 1
        assert len(graph.parent_child) == 2

    @pytest.mark.parametrize("value,expected", [
        ("Amaka /Okafor/", "Amaka Okafor"),
        ("Amaka Ngozi /Okafor/", "Amaka Ngozi Okafor"),
        ("/Okafor/", "Okafor"),
        ("Amaka //", "Amaka"),
        ("Amaka /Okafor/ Jr.", "Amaka Okafor Jr."),
        ("Amaka Okafor", "Amaka Okafor"),
    ])
    def test_name_parsing(self, parser, value, expected):
        graph = parser.parse_content(f"0 @I1@ INDI\n1 NAME {value}")
        assert graph.persons[0].full_name == expected

    @pytest.mark.parametrize("value,expected", [("M", "male"), ("F", "female"), ("U", "other"), ("X", "other")])
    def test_sex_values(self, parser, value, expected):
        graph = parser.parse_content(f"0 @I1@ INDI\n1 SEX {value}")
        assert graph.persons[0].gender == expected

    def test_missing_sex_line_is_unset(self, parser):
        graph = parser.parse_content("0 @I1@ INDI\n1 NAME Ifeoma //")
        assert graph.persons[0].gender == 'unset'

    def test_level_two_date_follows_active_event(self, parser):
        content = "\n".join([
            "0 @I1@ INDI",
            "1 DEAT",
            "2 DATE 1 JAN 2000",
            "1 BIRT",
            "2 PLAC Enugu",
            "2 DATE 2 FEB 1930",
        ])

        person = parser.parse_content(content).persons[0]

        assert person.date_of_death == '2000-01-01'
        assert person.date_of_birth == '1930-02-02'
        assert person.place_of_birth == 'Enugu'
        assert person.place_of_death is None

    def test_date_under_unrelated_tag_is_ignored(self, parser):
        person = parser.parse_content("0 @I1@ INDI\n1 OCCU Weaver\n2 DATE 19500312").persons[0]
        assert person.date_of_birth is None
        assert person.occupation == 'Weaver'

    def test_biography_continuations(self, parser):
        content = "\n".join([
            "0 @I1@ INDI",
            "1 NOTE Walked to",
            "2 CONT   the   market",
            "2 CONC place",
            "2 CONT every day.",
        ])

        person = parser.parse_content(content).persons[0]

        assert person.biography == 'Walked to the marketplace every day.'

    def test_heritage_note_block(self, parser):
        content = "\n".join([
            "0 @I1@ INDI",
            "1 NOTE",
            "2 CONT Loved music.",
            "1 NOTE",
            "2 CONT Clan: Umu Nna",
            "2 CONT Village Origin: Nnewi",
        ])

        person = parser.parse_content(content).persons[0]

        assert person.biography == 'Loved music.'
        assert person.clan_name == 'Umu Nna'
        assert person.village_origin == 'Nnewi'

    def test_crlf_and_byte_order_mark(self, parser):
        content = "\ufeff0 HEAD\r\n0 @I1@ INDI\r\n1 NAME Amaka /Okafor/\r\n1 SEX F\r\n0 TRLR\r\n"

        graph = parser.parse_content(content)

        assert graph.issues == []
        assert graph.persons[0].full_name == 'Amaka Okafor'
        assert graph.persons[0].gender == 'female'

    def test_parser_is_reusable(self, parser, sample_gedcom_data):
        parser.parse_content(sample_gedcom_data)
        graph = parser.parse_content("0 @I9@ INDI\n1 NAME Solo /Person/")

        assert [person.id for person in graph.persons] == ['I9']

    def test_parse_gedcom_function(self, sample_gedcom_data):
        assert len(parse_gedcom(sample_gedcom_data).persons) == 3


class TestParseIssues:
    """Malformed content is skipped and reported, never raised"""

    @pytest.fixture
    def parser(self):
        return GEDCOMParser()

    def test_unparsable_line(self, parser):
        graph = parser.parse_content("0 @I1@ INDI\nthis is not gedcom\n1 NAME Amaka /Okafor/")

        assert graph.persons[0].full_name == 'Amaka Okafor'
        assert len(graph.issues) == 1
        issue = graph.issues[0]
        assert issue.line_number == 2
        assert issue.line == 'this is not gedcom'
        assert issue.reason == 'unparsable line'

    def test_unsupported_record_is_skipped_until_next_record(self, parser):
        content = "\n".join([
            "0 HEAD",
            "1 SOUR Test",
            "0 @S1@ SOUR",
            "1 TITL Parish register",
            "1 NAME Not A Person",
            "0 @I1@ INDI",
            "1 NAME Amaka /Okafor/",
            "0 TRLR",
        ])

        graph = parser.parse_content(content)

        assert [person.full_name for person in graph.persons] == ['Amaka Okafor']
        assert reasons(graph) == ['unsupported record type SOUR']
        assert graph.issues[0].line_number == 3

    def test_unsupported_level_zero_tag(self, parser):
        graph = parser.parse_content("0 NOTE stray\n0 @I1@ INDI")
        assert reasons(graph) == ['unsupported record type NOTE']

    def test_malformed_date(self, parser):
        graph = parser.parse_content("0 @I1@ INDI\n1 BIRT\n2 DATE ABT 1900\n2 PLAC Onitsha")

        person = graph.persons[0]
        assert person.date_of_birth is None
        assert person.place_of_birth == 'Onitsha'
        assert reasons(graph) == ["unparsable date 'ABT 1900'"]

    def test_duplicate_individual(self, parser):
        content = "0 @I1@ INDI\n1 NAME First /One/\n0 @I1@ INDI\n1 NAME Second /One/"

        graph = parser.parse_content(content)

        assert [person.full_name for person in graph.persons] == ['First One']
        assert reasons(graph) == ['duplicate record id I1']

    def test_dangling_reference(self, parser):
        content = "0 @I1@ INDI\n0 @F1@ FAM\n1 HUSB @I1@\n1 WIFE @I7@\n1 CHIL @I9@"

        graph = parser.parse_content(content)

        assert graph.spouses == []
        assert graph.parent_child == []
        assert reasons(graph) == ['reference to unknown individual I7', 'reference to unknown individual I9']

    def test_self_referencing_edge(self, parser):
        content = "0 @I1@ INDI\n0 @I2@ INDI\n0 @F1@ FAM\n1 HUSB @I1@\n1 WIFE @I2@\n1 CHIL @I1@"

        graph = parser.parse_content(content)

        assert graph.parent_child == [ParentChildEdge('I2', 'I1')]
        assert reasons(graph) == ['self-referencing parent-child edge']
        assert graph.issues[0].line_number == 6

    def test_issues_sorted_by_line(self, parser):
        content = "\n".join([
            "0 @I1@ INDI",
            "0 @F1@ FAM",
            "1 CHIL @I5@",
            "garbage",
        ])

        graph = parser.parse_content(content)

        assert [issue.line_number for issue in graph.issues] == [3, 4]

    def test_blank_lines_are_not_issues(self, parser):
        graph = parser.parse_content("0 @I1@ INDI\n\n   \n1 NAME A /B/")
        assert graph.issues == []


class TestRoundTrip:
    """parse(generate(graph)) reproduces persons and both relationship sets"""

    def export_and_parse(self, persons, parent_child=(), spouses=()):
        formatter = GEDCOMFormatter()
        content = formatter.generate(persons, parent_child, spouses)
        return formatter.local_ids, parse_gedcom(content)

    def test_amaka_okafor(self):
        person = Person(id='amaka', full_name='Amaka Okafor', gender='female', date_of_birth='1950-03-12')

        _, graph = self.export_and_parse([person])

        parsed = graph.persons[0]
        assert parsed.full_name == 'Amaka Okafor'
        assert parsed.gender == 'female'
        assert parsed.date_of_birth == '1950-03-12'

    def test_full_family(self):
        persons = [
            Person(id='obi', full_name='Obi Eze', gender='male', date_of_birth='1920-01-05',
                   place_of_birth='Nnewi', date_of_death='1990-03-12', place_of_death='Lagos',
                   occupation='Farmer', clan_name='Umu Nna', village_origin='Nnewi'),
            Person(id='ada', full_name='Ada Eze', gender='female', date_of_birth='1925-07-19',
                   biography='  Sang   at every\nfestival. ' + ' '.join(['word'] * 80)),
            Person(id='uche', full_name='Uche Eze', gender='other', date_of_birth='1950-11-30'),
            Person(id='ify', full_name='Ifeoma', gender='unset'),
            Person(id='nkem', full_name='Nkem Obi', gender='female'),
            Person(id='tobe', full_name='Tobe Obi', gender='male'),
        ]
        parent_child = [
            ParentChildEdge('obi', 'uche'), ParentChildEdge('ada', 'uche'),
            ParentChildEdge('obi', 'ify'), ParentChildEdge('ada', 'ify'),
            ParentChildEdge('nkem', 'tobe'),
        ]
        spouses = [SpouseEdge('ada', 'obi')]

        local_ids, graph = self.export_and_parse(persons, parent_child, spouses)

        assert graph.issues == []
        for person in persons:
            parsed = graph.get_person(local_ids[person.id])
            expected = person.to_record()
            expected['biography'] = ' '.join(person.biography.split()) if person.biography else None
            assert parsed.to_record() == expected

        assert {(edge.parent_id, edge.child_id) for edge in graph.parent_child} == {
            (local_ids[edge.parent_id], local_ids[edge.child_id]) for edge in parent_child
        }
        assert {edge.pair for edge in graph.spouses} == {
            frozenset((local_ids['ada'], local_ids['obi']))
        }

    def test_biography_with_heritage_prefix(self):
        person = Person(id='ada', full_name='Ada Eze', biography='Clan: history was her passion',
                        clan_name='Umu Nna')

        _, graph = self.export_and_parse([person])

        parsed = graph.persons[0]
        assert parsed.biography == 'Clan: history was her passion'
        assert parsed.clan_name == 'Umu Nna'

    @pytest.mark.parametrize("gender", ['male', 'female', 'other', 'unset'])
    def test_every_gender(self, gender):
        _, graph = self.export_and_parse([Person(id='x', full_name='Uche Eze', gender=gender)])
        assert graph.persons[0].gender == gender
