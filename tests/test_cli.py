import json

import yaml

from pkgctx import cli
from pkgctx.data_models import FunctionRecord, PackageRecord


def load_json_stream(text):
    decoder = json.JSONDecoder()
    documents, index = [], 0
    text = text.strip()
    while index < len(text):
        document, index = decoder.raw_decode(text, index)
        documents.append(document)
        while index < len(text) and text[index].isspace():
            index += 1
    return documents


def test_main_writes_json_file(r_package, tmp_path):
    output = tmp_path / "out.json"

    assert cli.main(["r", str(r_package), "-f", "json", "-o", str(output)]) == 0

    documents = load_json_stream(output.read_text(encoding="utf-8"))
    assert documents[0]["kind"] == "package"
    assert documents[0]["name"] == "demo"
    assert [d["name"] for d in documents[1:]] == ["add", "scale_by", "print.demo"]


def test_main_prints_yaml(r_package, capsys):
    assert cli.main(["r", str(r_package)]) == 0

    out = capsys.readouterr().out
    assert out.startswith("---\n")
    documents = list(yaml.safe_load_all(out))
    assert documents[1]["signature"] == "add(x, y = 1)"
    assert documents[1]["purpose"] == "Add two numbers"


def test_main_compact_drops_examples(r_package, capsys):
    assert cli.main(["r", str(r_package), "--compact"]) == 0

    documents = list(yaml.safe_load_all(capsys.readouterr().out))
    assert all("examples" not in document for document in documents)


def test_main_hoists_common_arguments(tmp_path, capsys):
    root = tmp_path / "shared"
    (root / "R").mkdir(parents=True)
    (root / "man").mkdir()
    (root / "DESCRIPTION").write_text("Package: shared\nVersion: 1.0\n", encoding="utf-8")
    (root / "R" / "f.R").write_text(
        "f1 <- function(data) 1\nf2 <- function(data) 2\nf3 <- function(data) 3\n", encoding="utf-8"
    )
    for name in ("f1", "f2", "f3"):
        (root / "man" / f"{name}.Rd").write_text(
            f"\\name{{{name}}}\n\\title{{T}}\n\\arguments{{\n\\item{{data}}{{A data frame.}}\n}}\n",
            encoding="utf-8"
        )

    assert cli.main(["r", str(root), "--hoist-common-args", "-f", "json"]) == 0

    documents = load_json_stream(capsys.readouterr().out)
    assert documents[0]["common_arguments"] == {"data": "A data frame."}
    assert documents[1]["arguments"] == {"data": "(see common_arguments)"}


def test_main_bad_spec(capsys):
    assert cli.main(["r", "not a package!"]) == 1

    assert "error [bad_spec]" in capsys.readouterr().err


def test_main_missing_config(r_package, tmp_path, capsys):
    assert cli.main(["r", str(r_package), "--config", str(tmp_path / "absent.yaml")]) == 1

    assert "file_not_found" in capsys.readouterr().err


def test_main_installed(monkeypatch, capsys):
    seen = {}

    class FakeIntrospection:
        def extract(self, package, options):
            seen["package"] = package
            return [
                PackageRecord(name=package, version="1.0"),
                FunctionRecord(name="f", exported=True, signature="f(x)", arguments={"x": "Input."}),
            ]

    monkeypatch.setattr(cli, "RIntrospectionExtractor", FakeIntrospection)

    assert cli.main(["r", "demo", "--installed", "-f", "json"]) == 0

    documents = load_json_stream(capsys.readouterr().out)
    assert seen["package"] == "demo"
    assert documents[1]["arguments"] == {"x": "Input."}


def test_main_rejects_non_numeric_config_value(r_package, tmp_path, capsys):
    config = tmp_path / "pkgctx.yaml"
    config.write_text("extraction:\n  max_examples: lots\n", encoding="utf-8")

    assert cli.main(["r", str(r_package), "--config", str(config)]) == 1

    err = capsys.readouterr().err
    assert "error [bad_config]" in err
    assert "hint:" in err


def test_main_python_source_tree(python_package, capsys):
    assert cli.main(["python", str(python_package), "--emit-classes", "-f", "json"]) == 0

    documents = load_json_stream(capsys.readouterr().out)
    assert documents[0]["language"] == "Python"
    assert documents[0]["version"] == "1.2.0"
    assert [d["name"] for d in documents[1:]] == ["greet", "fetch_all", "Greeter"]
    assert documents[1]["return_type"] == "str"
    assert documents[-1]["kind"] == "class"


def test_main_python_compact_drops_doctests(python_package, capsys):
    assert cli.main(["python", str(python_package), "--compact"]) == 0

    documents = list(yaml.safe_load_all(capsys.readouterr().out))
    assert documents[1]["purpose"] == "Build a greeting."
    assert all("examples" not in document for document in documents)


def test_main_python_installed(monkeypatch, capsys):
    seen = {}

    class FakeIntrospection:
        def extract(self, package, options):
            seen["package"] = package
            seen["emit_classes"] = options.emit_classes
            return [PackageRecord(name=package, version="2.0", language="Python")]

    monkeypatch.setattr(cli, "PythonIntrospectionExtractor", FakeIntrospection)

    assert cli.main(["python", "json", "--installed", "--emit-classes"]) == 0

    assert seen == {"package": "json", "emit_classes": True}
    assert "language: Python" in capsys.readouterr().out


def test_main_python_bad_spec(capsys):
    assert cli.main(["python", "not a package!"]) == 1

    assert "error [bad_spec]" in capsys.readouterr().err
