import pytest

from perfxray.config import CONFIG_ENV_VAR, Config, load_config
from perfxray.errors import ConfigError
from perfxray.rules.catalog import RULES


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def test_missing_default_config_yields_defaults():
    config = load_config()

    assert config == Config()
    assert config.active_rules() == RULES


def test_explicit_missing_config_is_an_error(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "nope.yaml"))


def test_default_config_file_is_loaded(tmp_path):
    (tmp_path / ".perfxray.yaml").write_text(
        """
severity: high
format: markdown
ignore:
  - generated
  - fixtures
disable: [console-in-prod]
jobs: 4
        """.strip(),
        encoding="utf-8",
    )

    config = load_config()

    assert config.severity == "high"
    assert config.format == "markdown"
    assert config.ignore == ("generated", "fixtures")
    assert config.jobs == 4
    assert "console-in-prod" not in [rule.id for rule in config.active_rules()]
    assert len(config.active_rules()) == len(RULES) - 1


def test_config_path_from_environment(tmp_path, monkeypatch):
    custom = tmp_path / "ci.yml"
    custom.write_text("ignore: legacy\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))

    assert load_config().ignore == ("legacy",)


@pytest.mark.parametrize(
    "body, message",
    [
        ("- just\n- a list\n", "not a mapping"),
        ("format: xml\n", "'format' must be one of"),
        ("disable: [made-up-rule]\n", "Unknown rule id"),
        ("ignore: {a: 1}\n", "'ignore' must be a list"),
        ("jobs: 0\n", "'jobs' must be a positive integer"),
        ("jobs: many\n", "'jobs' must be a positive integer"),
        ("severity: [unclosed\n", "Failed to read config"),
    ],
)
def test_invalid_config_raises(tmp_path, body, message):
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(str(path))


def test_environment_config_path_must_exist(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yml"))

    with pytest.raises(ConfigError, match="not found"):
        load_config()
