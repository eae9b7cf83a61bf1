import string

from hypothesis import given, strategies as st

from pkgctx.data_models import SectionName
from pkgctx.extractors.rd.markup_stripper import strip_markup
from pkgctx.extractors.rd.section_extractor import SectionExtractor, extract_sections, match_section_opener


def test_title_and_description_on_one_line():
    sections = extract_sections(r"\title{Sum two numbers}\description{Adds \code{x} and \code{y}.}")

    assert strip_markup(sections[SectionName.TITLE].content) == "Sum two numbers"
    assert strip_markup(sections[SectionName.DESCRIPTION].content) == "Adds x and y."


def test_multi_line_section_keeps_newlines():
    sections = extract_sections("\\description{\n  Line one\n  line two.\n}\n")

    assert sections[SectionName.DESCRIPTION].content == "\n  Line one\n  line two.\n"


def test_unterminated_section_does_not_hide_later_sections():
    sections = extract_sections("\\title{Broken\n\\description{OK}\n")

    assert SectionName.TITLE not in sections
    assert sections[SectionName.DESCRIPTION].content == "OK"


def test_section_unterminated_at_end_of_input_is_dropped():
    sections = extract_sections("\\name{x}\n\\title{Broken\nmore text\n")

    assert sections == {}


def test_later_duplicate_section_replaces_earlier():
    sections = extract_sections("\\title{First}\n\\description{D}\n\\title{Second}\n")

    assert sections[SectionName.TITLE].content == "Second"
    assert list(sections) == [SectionName.TITLE, SectionName.DESCRIPTION]


def test_nested_braces_are_captured_verbatim():
    sections = extract_sections("\\value{A \\code{list} with {braces}}")

    assert sections[SectionName.VALUE].content == "A \\code{list} with {braces}"


def test_comment_and_unmodelled_lines_are_ignored():
    text = "% \\title{Commented}\n\\name{f}\n\\alias{g}\n\\title{Real}\n\\keyword{misc}\n"

    sections = extract_sections(text)

    assert list(sections) == [SectionName.TITLE]
    assert sections[SectionName.TITLE].content == "Real"


def test_indented_opener_is_recognized():
    sections = SectionExtractor().extract("  \\usage{f(x)}")

    assert sections[SectionName.USAGE].content == "f(x)"


def test_match_section_opener():
    assert match_section_opener("\\examples{") is SectionName.EXAMPLES
    assert match_section_opener("\\example{") is None
    assert match_section_opener("text \\title{") is None


_PLAIN = st.text(alphabet=string.ascii_letters + string.digits + " \n", max_size=12)
_BALANCED = st.recursive(
    _PLAIN,
    lambda inner: st.builds(lambda a, b, c: f"{a}{{{b}}}{c}", inner, inner, inner),
    max_leaves=8,
)


@given(_BALANCED)
def test_finalized_sections_have_balanced_braces(body):
    text = "\\description{" + body + "}\n\\title{After}"

    sections = extract_sections(text)

    captured = "{" + sections[SectionName.DESCRIPTION].content + "}"
    assert captured.count("{") == captured.count("}")
    assert sections[SectionName.DESCRIPTION].content == body
    assert sections[SectionName.TITLE].content == "After"
