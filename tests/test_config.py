import pytest

from pkgctx.config import APP, DEFAULTS, parse_arguments
from pkgctx.data_models import ExtractOptions
from pkgctx.utils.config_loader import ConfigLoader
from pkgctx.utils.error_handler import ConfigurationError


def write_config(tmp_path, text):
    path = tmp_path / "pkgctx.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults_without_config():
    loader = ConfigLoader()

    assert loader.build_extract_options() == ExtractOptions()
    assert loader.get_log_level() == DEFAULTS.LOG_LEVEL
    assert loader.get_cran_mirror() == "https://cloud.r-project.org"


def test_values_from_file(tmp_path):
    loader = ConfigLoader(write_config(tmp_path, """
extraction:
  include_internal: true
  max_examples: 1
  compact: true
output:
  format: json
network:
  cran_mirror: https://cran.example.org
  timeout: 10
logging:
  level: debug
"""))

    options = loader.build_extract_options()

    assert options.include_internal is True
    assert options.max_examples == 1
    assert options.compact is True
    assert options.hoist_common_args is False
    assert options.output_format == "json"
    assert loader.get_cran_mirror() == "https://cran.example.org"
    assert loader.get_timeout() == 10
    assert loader.get_log_level() == "DEBUG"


def test_overrides_take_precedence(tmp_path):
    loader = ConfigLoader(write_config(tmp_path, "extraction:\n  max_examples: 1\n"))

    options = loader.build_extract_options({"max_examples": 5, "compact": None, "output_format": "yaml"})

    assert options.max_examples == 5
    assert options.compact is False


def test_empty_file_means_defaults(tmp_path):
    assert ConfigLoader(write_config(tmp_path, "")).build_extract_options() == ExtractOptions()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(str(tmp_path / "absent.yaml"))


@pytest.mark.parametrize("text", [
    "extraction: [unclosed",
    "- just\n- a list\n",
    "extraction: 3\n",
    "extraction:\n  max_examples: -1\n",
    "output:\n  format: xml\n",
    "extraction:\n  max_examples: lots\n",
    "extraction:\n  max_examples: true\n",
])
def test_invalid_config(tmp_path, text):
    with pytest.raises(ConfigurationError):
        ConfigLoader(write_config(tmp_path, text)).build_extract_options()


def test_parse_arguments():
    args = parse_arguments(["r", "dplyr", "--compact", "-f", "json", "--max-examples", "2"])

    assert args.language == "r"
    assert args.package == "dplyr"
    assert args.compact is True
    assert args.hoist_common_args is None
    assert args.format == "json"
    assert args.max_examples == 2
    assert args.installed is False


def test_parse_arguments_rejects_unknown_format():
    with pytest.raises(SystemExit):
        parse_arguments(["r", "dplyr", "--format", "xml"])


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(["--version"])

    assert excinfo.value.code == 0
    assert APP.VERSION in capsys.readouterr().out


def test_non_numeric_timeout(tmp_path):
    loader = ConfigLoader(write_config(tmp_path, "network:\n  timeout: soon\n"))

    with pytest.raises(ConfigurationError) as excinfo:
        loader.get_timeout()

    assert excinfo.value.error_code == "bad_config"


def test_parse_python_arguments():
    args = parse_arguments(["python", "requests==2.32.3", "--emit-classes", "--installed"])

    assert args.language == "python"
    assert args.package == "requests==2.32.3"
    assert args.emit_classes is True
    assert args.installed is True
    assert args.include_internal is None


def test_emit_classes_is_python_only():
    with pytest.raises(SystemExit):
        parse_arguments(["r", "dplyr", "--emit-classes"])


def test_python_settings_from_file(tmp_path):
    loader = ConfigLoader(write_config(tmp_path, """
extraction:
  emit_classes: true
network:
  pypi_index: https://pypi.example.org
"""))

    assert loader.build_extract_options().emit_classes is True
    assert loader.get_pypi_index() == "https://pypi.example.org"
    assert ConfigLoader().get_pypi_index() == "https://pypi.org"
