import pytest

from jrep.core.config import ENV_VAR, JrepConfig, candidate_paths, load_config, parse_config
from jrep.core.errors import ConfigError


def test_defaults_when_nothing_found(tmp_path, monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    config = load_config()
    assert config == JrepConfig()
    assert config.source is None


def test_parse_full_config():
    config = parse_config(
        "color: never\n"
        "line_number: true\n"
        "with_filename: true\n"
        "jump_forward: false\n"
        "log_level: debug\n",
        source="inline"
    )
    assert config.color == "never"
    assert config.line_number is True
    assert config.with_filename is True
    assert config.jump_forward is False
    assert config.log_level == "DEBUG"
    assert config.source == "inline"


def test_empty_document_uses_defaults():
    assert parse_config("").line_number is False


def test_unknown_keys_are_ignored(caplog):
    config = parse_config("colour: always\nline_number: true\n")
    assert config.line_number is True
    assert "colour" in caplog.text


@pytest.mark.parametrize("text, message", [
    ("- a\n- b\n", "mapping"),
    ("line_number: maybe\n", "line_number"),
    ("color: purple\n", "color"),
    ("log_level: LOUD\n", "log_level"),
    ("color: [unclosed\n", "invalid YAML"),
])
def test_invalid_config_raises(text, message):
    with pytest.raises(ConfigError) as excinfo:
        parse_config(text)
    assert message in str(excinfo.value)


def test_env_var_is_searched_first(tmp_path, monkeypatch):
    cfg = tmp_path / "custom.yaml"
    cfg.write_text("line_number: true\n")
    monkeypatch.setenv(ENV_VAR, str(cfg))
    assert candidate_paths()[0] == cfg
    assert load_config().line_number is True


def test_local_dotfile(tmp_path, monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".jrep.yaml").write_text("with_filename: true\n")
    config = load_config()
    assert config.with_filename is True
    assert config.source.endswith(".jrep.yaml")


def test_explicit_missing_path_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "absent.yaml"))
