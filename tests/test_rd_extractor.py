from pkgctx.extractors.rd.rd_extractor import RdExtractor


def test_parse_full_unit(add_rd):
    doc = RdExtractor().parse_content(add_rd, "man/add.Rd")

    assert doc.name == "add"
    assert doc.aliases == ["add", "plus"]
    assert doc.title == "Add two numbers"
    assert doc.description == "Adds two numbers together."
    assert doc.value == "The sum of x and y."
    assert doc.details is None
    assert doc.usage == "add(x, y = 1)"
    assert doc.arguments == {"x": "A numeric vector.", "y": "Value to add."}
    assert [block.code for block in doc.examples] == ["add(1, 2)", "add(1:3,\n    4)"]


def test_example_cap_is_configurable(add_rd):
    doc = RdExtractor(max_examples=1).parse_content(add_rd, "man/add.Rd")

    assert [block.code for block in doc.examples] == ["add(1, 2)"]


def test_unit_without_sections():
    doc = RdExtractor().parse_content("\\name{empty}\n\\keyword{internal}\n", "man/empty.Rd")

    assert doc.name == "empty"
    assert doc.aliases == ["empty"]
    assert doc.title is None
    assert doc.arguments == {}
    assert doc.examples == []


def test_broken_title_keeps_other_sections():
    doc = RdExtractor().parse_content("\\title{Broken\n\\description{OK}\n", "man/broken.Rd")

    assert doc.title is None
    assert doc.description == "OK"


def test_extract_file(tmp_path, add_rd):
    path = tmp_path / "add.Rd"
    path.write_text(add_rd, encoding="utf-8")

    doc = RdExtractor().extract_file(path)

    assert doc is not None
    assert doc.title == "Add two numbers"


def test_extract_file_rejects_missing_and_unsupported_files(tmp_path):
    other = tmp_path / "notes.txt"
    other.write_text("\\title{x}", encoding="utf-8")
    extractor = RdExtractor()

    assert extractor.extract_file(tmp_path / "missing.Rd") is None
    assert extractor.extract_file(other) is None
    assert extractor.can_extract("man/FOO.RD")
