"""
Tests for GEDCOM formatter - formatting family graphs to GEDCOM 5.5.5
"""
from datetime import datetime

import pytest

from family_tree.shared.gedcom_formatter import GEDCOMFileWriter, GEDCOMFormatter, escape_text, wrap_words
from family_tree.shared.models import ParentChildEdge, Person, SpouseEdge


EXPORT_TIME = datetime(2026, 1, 5, 14, 3, 9)


def record(lines, start):
    """Lines of the level-0 record starting with `start`, up to the next level-0 line"""
    index = lines.index(start)
    result = [lines[index]]
    for line in lines[index + 1:]:
        if line.startswith('0 ') or line == '':
            break
        result.append(line)
    return result


class TestGEDCOMFormatter:
    """Test GEDCOM formatter functionality"""

    @pytest.fixture
    def formatter(self):
        """GEDCOM formatter instance with a fixed export time"""
        return GEDCOMFormatter(source_name="FamilyTree App", now=EXPORT_TIME)

    @pytest.fixture
    def amaka(self):
        return Person(id='p-amaka', full_name='Amaka Okafor', gender='female', date_of_birth='1950-03-12')

    def test_format_header(self, formatter):
        """Test GEDCOM header formatting"""
        lines = formatter.format_gedcom([], file_name='okafor')

        assert lines[:10] == [
            "0 HEAD",
            "1 SOUR FamilyTree App",
            "2 VERS 1.0",
            "1 GEDC",
            "2 VERS 5.5.5",
            "2 FORM LINEAGE-LINKED",
            "1 CHAR UTF-8",
            "1 DATE 05 JAN 2026",
            "2 TIME 14:03:09",
            "1 FILE okafor.ged",
        ]
        assert lines[10] == ""
        assert lines[-1] == "0 TRLR"

    def test_individual_record(self, formatter, amaka):
        lines = formatter.format_gedcom([amaka])

        assert record(lines, "0 @I1@ INDI") == [
            "0 @I1@ INDI",
            "1 NAME Amaka /Okafor/",
            "2 GIVN Amaka",
            "2 SURN Okafor",
            "1 SEX F",
            "1 BIRT",
            "2 DATE 19500312",
        ]

    def test_full_individual_emission_order(self, formatter):
        person = Person(
            id='x', full_name='Chukwuemeka Okafor', gender='male',
            date_of_birth='1920-01-05', place_of_birth='Nnewi',
            date_of_death='1990-03-12', place_of_death='Lagos',
            occupation='Farmer', biography='Grew yams.',
            clan_name='Umu Nna', village_origin='Nnewi',
        )

        lines = record(formatter.format_gedcom([person]), "0 @I1@ INDI")

        assert lines == [
            "0 @I1@ INDI",
            "1 NAME Chukwuemeka /Okafor/",
            "2 GIVN Chukwuemeka",
            "2 SURN Okafor",
            "1 SEX M",
            "1 BIRT",
            "2 DATE 19200105",
            "2 PLAC Nnewi",
            "1 DEAT",
            "2 DATE 19900312",
            "2 PLAC Lagos",
            "1 OCCU Farmer",
            "1 NOTE Grew yams.",
            "1 NOTE",
            "2 CONT Clan: Umu Nna",
            "2 CONT Village Origin: Nnewi",
        ]

    def test_name_splits_on_first_whitespace_only(self, formatter):
        person = Person(id='x', full_name='Ada Mary Okafor-Eze')
        lines = formatter.format_gedcom([person])

        assert "1 NAME Ada /Mary Okafor-Eze/" in lines
        assert "2 SURN Mary Okafor-Eze" in lines

    def test_single_word_name(self, formatter):
        lines = formatter.format_gedcom([Person(id='x', full_name='Amaka')])

        assert "1 NAME Amaka //" in lines
        assert not any(line.startswith("2 GIVN") for line in lines)

    @pytest.mark.parametrize("gender,expected", [
        ('male', "1 SEX M"),
        ('female', "1 SEX F"),
        ('other', "1 SEX U"),
    ])
    def test_sex_codes(self, formatter, gender, expected):
        lines = formatter.format_gedcom([Person(id='x', full_name='A B', gender=gender)])
        assert expected in lines

    @pytest.mark.parametrize("gender", [None, 'unset'])
    def test_no_sex_line_without_gender(self, formatter, gender):
        lines = formatter.format_gedcom([Person(id='x', full_name='A B', gender=gender)])
        assert not any(line.startswith("1 SEX") for line in lines)

    def test_unparsable_date_is_omitted(self, formatter):
        person = Person(id='x', full_name='A B', date_of_birth='around 1900', place_of_birth='Onitsha')
        lines = record(formatter.format_gedcom([person]), "0 @I1@ INDI")

        assert "1 BIRT" in lines
        assert "2 PLAC Onitsha" in lines
        assert not any(line.startswith("2 DATE") for line in lines)

    def test_unparsable_date_without_place_leaves_no_event(self, formatter):
        person = Person(id='x', full_name='A B', date_of_death='unknown')
        lines = formatter.format_gedcom([person])
        assert "1 DEAT" not in lines

    def test_biography_wrapped_at_200_characters(self, formatter):
        biography = ' '.join(['storyteller'] * 60)
        person = Person(id='x', full_name='A B', biography=biography)

        lines = formatter.format_gedcom([person])
        note_lines = [line.split(" ", 2)[2] for line in lines if line.startswith(("1 NOTE ", "2 CONT "))]

        assert len(note_lines) > 1
        assert all(len(line) <= 200 for line in note_lines)
        assert ' '.join(note_lines) == biography

    def test_biography_starts_inline_on_note_line(self, formatter):
        person = Person(id='x', full_name='A B', biography='Clan: history was her passion')
        lines = record(formatter.format_gedcom([person]), "0 @I1@ INDI")

        assert "1 NOTE Clan: history was her passion" in lines
        assert not any(line.startswith("2 CONT") for line in lines)

    def test_multiline_text_flattened(self, formatter):
        person = Person(id='x', full_name='A B', occupation='Trader\r\nand farmer')
        lines = formatter.format_gedcom([person])
        assert "1 OCCU Trader and farmer" in lines

    def test_local_ids_follow_input_order(self, formatter):
        persons = [Person(id='c', full_name='C C'), Person(id='a', full_name='A A'), Person(id='b', full_name='B B')]

        lines = formatter.format_gedcom(persons)

        assert [line for line in lines if line.endswith(" INDI")] == ["0 @I1@ INDI", "0 @I2@ INDI", "0 @I3@ INDI"]
        assert formatter.local_ids == {'c': 'I1', 'a': 'I2', 'b': 'I3'}

    def test_local_ids_reset_between_calls(self, formatter):
        formatter.format_gedcom([Person(id='a', full_name='A A'), Person(id='b', full_name='B B')])
        formatter.format_gedcom([Person(id='b', full_name='B B')])
        assert formatter.local_ids == {'b': 'I1'}

    def test_record_order(self, formatter):
        persons = [Person(id='h', full_name='H H', gender='male'), Person(id='w', full_name='W W', gender='female')]
        lines = formatter.format_gedcom(persons, spouses=[SpouseEdge('h', 'w')])

        level_zero = [line for line in lines if line.startswith('0 ')]
        assert level_zero == ["0 HEAD", "0 @I1@ INDI", "0 @I2@ INDI", "0 @F1@ FAM", "0 TRLR"]

    def test_generate_joins_with_newlines(self, formatter, amaka):
        content = formatter.generate([amaka])
        assert content == '\n'.join(formatter.format_gedcom([amaka]))
        assert '\r' not in content


class TestFamilyUnits:
    """Test grouping of spouse and parent edges into FAM records"""

    @pytest.fixture
    def formatter(self):
        return GEDCOMFormatter(now=EXPORT_TIME)

    def test_male_partner_is_husband(self, formatter):
        persons = [Person(id='w', full_name='W W', gender='female'), Person(id='h', full_name='H H', gender='male')]

        lines = formatter.format_gedcom(persons, spouses=[SpouseEdge('w', 'h')])

        assert record(lines, "0 @F1@ FAM") == ["0 @F1@ FAM", "1 HUSB @I2@", "1 WIFE @I1@"]

    @pytest.mark.parametrize("first_gender,second_gender", [(None, None), ('female', 'female'), ('other', None)])
    def test_first_listed_spouse_is_husband_without_male_partner(self, formatter, first_gender, second_gender):
        persons = [Person(id='a', full_name='A A', gender=first_gender),
                   Person(id='b', full_name='B B', gender=second_gender)]

        lines = formatter.format_gedcom(persons, spouses=[SpouseEdge('a', 'b')])

        assert record(lines, "0 @F1@ FAM") == ["0 @F1@ FAM", "1 HUSB @I1@", "1 WIFE @I2@"]

    def test_children_of_both_spouses(self, formatter):
        persons = [
            Person(id='h', full_name='H H', gender='male'),
            Person(id='w', full_name='W W', gender='female'),
            Person(id='c1', full_name='C One'),
            Person(id='c2', full_name='C Two'),
        ]
        parent_child = [ParentChildEdge('h', 'c1'), ParentChildEdge('w', 'c1'),
                        ParentChildEdge('h', 'c2'), ParentChildEdge('w', 'c2')]

        lines = formatter.format_gedcom(persons, parent_child, [SpouseEdge('h', 'w')])

        assert record(lines, "0 @F1@ FAM") == [
            "0 @F1@ FAM", "1 HUSB @I1@", "1 WIFE @I2@", "1 CHIL @I3@", "1 CHIL @I4@",
        ]

    def test_child_attached_to_first_matching_family(self, formatter):
        persons = [
            Person(id='h', full_name='H H', gender='male'),
            Person(id='w1', full_name='W One', gender='female'),
            Person(id='w2', full_name='W Two', gender='female'),
            Person(id='c', full_name='C C'),
        ]
        spouses = [SpouseEdge('h', 'w1'), SpouseEdge('h', 'w2')]

        lines = formatter.format_gedcom(persons, [ParentChildEdge('h', 'c')], spouses)

        assert "1 CHIL @I4@" in record(lines, "0 @F1@ FAM")
        assert "1 CHIL @I4@" not in record(lines, "0 @F2@ FAM")

    def test_child_of_second_wife_goes_to_second_family(self, formatter):
        persons = [
            Person(id='h', full_name='H H', gender='male'),
            Person(id='w1', full_name='W One', gender='female'),
            Person(id='w2', full_name='W Two', gender='female'),
            Person(id='c', full_name='C C'),
        ]
        spouses = [SpouseEdge('h', 'w1'), SpouseEdge('h', 'w2')]
        parent_child = [ParentChildEdge('h', 'c'), ParentChildEdge('w2', 'c')]

        lines = formatter.format_gedcom(persons, parent_child, spouses)

        assert "1 CHIL @I4@" not in record(lines, "0 @F1@ FAM")
        assert "1 CHIL @I4@" in record(lines, "0 @F2@ FAM")

    def test_child_of_unmarried_parents_is_dropped(self, formatter):
        persons = [
            Person(id='a', full_name='A A', gender='male'),
            Person(id='b', full_name='B B', gender='female'),
            Person(id='c', full_name='C C'),
        ]
        parent_child = [ParentChildEdge('a', 'c'), ParentChildEdge('b', 'c')]

        lines = formatter.format_gedcom(persons, parent_child)

        assert not any(line.startswith("1 CHIL") for line in lines)
        assert formatter.dropped_children == ['I3']

    def test_single_parent_without_spouse_gets_own_family(self, formatter):
        persons = [Person(id='m', full_name='M M', gender='female'), Person(id='c', full_name='C C')]

        lines = formatter.format_gedcom(persons, [ParentChildEdge('m', 'c')])

        assert record(lines, "0 @F1@ FAM") == ["0 @F1@ FAM", "1 WIFE @I1@", "1 CHIL @I2@"]

    def test_single_parent_family_reused_for_siblings(self, formatter):
        persons = [Person(id='f', full_name='F F'), Person(id='c1', full_name='C One'),
                   Person(id='c2', full_name='C Two')]

        lines = formatter.format_gedcom(persons, [ParentChildEdge('f', 'c1'), ParentChildEdge('f', 'c2')])

        assert record(lines, "0 @F1@ FAM") == ["0 @F1@ FAM", "1 HUSB @I1@", "1 CHIL @I2@", "1 CHIL @I3@"]
        assert "0 @F2@ FAM" not in lines

    def test_edges_to_unknown_persons_ignored(self, formatter):
        persons = [Person(id='a', full_name='A A')]

        lines = formatter.format_gedcom(persons, [ParentChildEdge('a', 'ghost')], [SpouseEdge('a', 'ghost')])

        assert not any(line.endswith(" FAM") for line in lines)


class TestFormatterHelpers:

    def test_escape_text(self):
        assert escape_text(None) == ''
        assert escape_text('  one\r\ntwo\nthree ') == 'one two three'

    def test_wrap_words_keeps_long_word_whole(self):
        word = 'x' * 250
        assert wrap_words(f"short {word} tail", 200) == ['short', word, 'tail']

    def test_wrap_words_empty(self):
        assert wrap_words('   ') == []


class TestGEDCOMFileWriter:
    """Test GEDCOM file I/O operations"""

    def test_write_and_read(self, temp_dir):
        output_file = temp_dir / "family.ged"

        GEDCOMFileWriter.write_gedcom_file(["0 HEAD", "0 TRLR"], str(output_file))

        assert output_file.read_bytes() == b"0 HEAD\n0 TRLR"
        assert GEDCOMFileWriter.read_gedcom_file(str(output_file)) == "0 HEAD\n0 TRLR"

    def test_read_strips_byte_order_mark(self, temp_dir):
        input_file = temp_dir / "bom.ged"
        input_file.write_bytes("\ufeff0 HEAD\n0 TRLR".encode('utf-8'))

        assert GEDCOMFileWriter.read_gedcom_file(str(input_file)) == "0 HEAD\n0 TRLR"
