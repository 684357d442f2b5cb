"""Configuration loading and applying it to a registry."""

import logging
import textwrap

import pytest

from hookchain import (
    ConfigError,
    HookConfig,
    apply_config,
    configure_logging,
    hook,
    import_object,
    load_extension,
)


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Run from an empty directory with no HOOKCHAIN_* variables set."""
    monkeypatch.chdir(tmp_path)
    for key in ("HOOKCHAIN_CONFIG", "HOOKCHAIN_LOG_LEVEL", "HOOKCHAIN_EXTENSIONS"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def filter_module(tmp_path, monkeypatch):
    """An importable module with filters and an extension setup()."""
    (tmp_path / "sample_filters.py").write_text(
        textwrap.dedent(
            """
            class Owner:
                pass

            def bang(args, next):
                return next() + "!"

            def quote(args, next):
                return '"' + next() + '"'

            NOT_CALLABLE = 3

            def setup(registry):
                registry.register("ext", "shout", bang)
            """
        )
    )
    (tmp_path / "no_setup.py").write_text("VALUE = 1\n")
    (tmp_path / "async_setup.py").write_text(
        "async def setup(registry):\n"
        "    registry.register(\"ext\", \"shout\", lambda args, next: next())\n"
    )
    (tmp_path / "awaitable_setup.py").write_text(
        "import asyncio\n\n"
        "def setup(registry):\n"
        "    return asyncio.sleep(0)\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    return "sample_filters"


def write_yaml(tmp_path, body):
    path = tmp_path / "hookchain.yaml"
    path.write_text(textwrap.dedent(body))
    return path


class TestLoad:
    def test_defaults(self):
        config = HookConfig.load()
        assert config.log_level == "INFO"
        assert config.extensions == []
        assert config.filters == {}

    def test_missing_file_uses_defaults(self, tmp_path):
        assert HookConfig.load(tmp_path / "nope.yaml") == HookConfig()

    def test_yaml_file(self, tmp_path):
        path = write_yaml(
            tmp_path,
            """
            log_level: debug
            extensions: [a.b, c]
            filters:
              words:
                shout:
                  - "mod:one"
                  - "mod:two"
                whisper: "mod:three"
            """,
        )
        config = HookConfig.load(path)
        assert config.log_level == "DEBUG"
        assert config.extensions == ["a.b", "c"]
        assert config.filters == {
            "words": {"shout": ["mod:one", "mod:two"], "whisper": ["mod:three"]}
        }

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path, "log_level: debug\nextensions: [a]\n")
        monkeypatch.setenv("HOOKCHAIN_LOG_LEVEL", "warning")
        monkeypatch.setenv("HOOKCHAIN_EXTENSIONS", "x, y,")
        config = HookConfig.load(path)
        assert config.log_level == "WARNING"
        assert config.extensions == ["x", "y"]

    def test_explicit_args_win(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOOKCHAIN_LOG_LEVEL", "warning")
        config = HookConfig.load(log_level="error", extensions=["only"])
        assert config.log_level == "ERROR"
        assert config.extensions == ["only"]

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path, "log_level: critical\n")
        monkeypatch.setenv("HOOKCHAIN_CONFIG", str(path))
        assert HookConfig.load().log_level == "CRITICAL"

    def test_dotenv_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("# comment\nHOOKCHAIN_LOG_LEVEL=debug\n")
        assert HookConfig.load().log_level == "DEBUG"

    def test_dotenv_does_not_override_environment(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("HOOKCHAIN_LOG_LEVEL=debug\n")
        monkeypatch.setenv("HOOKCHAIN_LOG_LEVEL", "error")
        assert HookConfig.load().log_level == "ERROR"

    @pytest.mark.parametrize(
        "body",
        [
            "- just\n- a list\n",
            "filters: [a, b]\n",
            "filters:\n  words: [a]\n",
            "filters:\n  words:\n    shout: 3\n",
            "log_level: [unclosed\n",
        ],
    )
    def test_invalid_shapes(self, tmp_path, body):
        with pytest.raises(ConfigError):
            HookConfig.load(write_yaml(tmp_path, body))


class TestApply:
    def test_import_object(self, filter_module):
        assert import_object("sample_filters:bang").__name__ == "bang"
        assert import_object("sample_filters:Owner.__name__") == "Owner"

    @pytest.mark.parametrize(
        "path", ["sample_filters", "sample_filters:", "no_such_module:x", "sample_filters:missing"]
    )
    def test_import_object_errors(self, filter_module, path):
        with pytest.raises(ConfigError):
            import_object(path)

    def test_filters_registered_in_order(self, registry, filter_module):
        config = HookConfig(
            filters={
                "words": {"shout": ["sample_filters:quote", "sample_filters:bang"]},
                "sample_filters:Owner": {"shout": ["sample_filters:bang"]},
                "global": {"shout": ["sample_filters:quote"]},
            }
        )
        assert apply_config(config, registry) is registry

        result = hook("shout", {"word": "Hi"}, lambda args: args["word"], owner="words", registry=registry)
        assert result == '"Hi!"'

        owner = import_object("sample_filters:Owner")
        assert registry.count(owner, "shout") == 1
        assert registry.count(None, "shout") == 1

    def test_not_callable_filter(self, registry, filter_module):
        config = HookConfig(filters={"words": {"shout": ["sample_filters:NOT_CALLABLE"]}})
        with pytest.raises(ConfigError, match="not callable"):
            apply_config(config, registry)

    def test_extensions(self, registry, filter_module, caplog):
        with caplog.at_level(logging.INFO, logger="hookchain.loader"):
            apply_config(HookConfig(extensions=[filter_module]), registry)
        assert registry.count("ext", "shout") == 1
        assert filter_module in registry.extensions
        assert "Loaded extension: sample_filters" in caplog.text

    def test_extension_loaded_twice(self, registry, filter_module):
        load_extension(filter_module, registry)
        with pytest.raises(ConfigError, match="already loaded"):
            load_extension(filter_module, registry)

    def test_extension_without_setup(self, registry, filter_module):
        with pytest.raises(ConfigError, match="no setup"):
            load_extension("no_setup", registry)

    @pytest.mark.parametrize("module_name", ["async_setup", "awaitable_setup"])
    def test_async_setup_is_rejected(self, registry, filter_module, module_name):
        with pytest.raises(ConfigError, match="async|awaitable"):
            load_extension(module_name, registry)
        assert module_name not in registry.extensions
        assert registry.lookup("ext", "shout") == ()

    def test_missing_extension(self, registry):
        with pytest.raises(ConfigError, match="Cannot import"):
            load_extension("hookchain_missing_extension", registry)

    def test_configure_logging(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        configure_logging(HookConfig(log_level="DEBUG"))
        assert calls[0]["level"] == logging.DEBUG
