import logging

from arborea.config import ConfigManager


def test_packaged_defaults_are_loaded():
    editor = ConfigManager().get_editor_config()

    assert editor["root_title"] == "Root"
    assert editor["new_node_title"] == "New option"
    assert editor["json_indent"] == 2
    assert ConfigManager().get_logging_config()["version"] == 1


def test_manager_is_a_singleton():
    assert ConfigManager() is ConfigManager()


def test_defaults_are_copied_to_user_directory(isolated_config):
    ConfigManager()

    assert (isolated_config / "editor.yml").exists()
    assert (isolated_config / "logging.yml").exists()


def test_user_overrides_are_merged(isolated_config):
    isolated_config.mkdir(parents=True)
    (isolated_config / "editor.yml").write_text('root_title: "Racine"\n', encoding="utf-8")

    editor = ConfigManager().get_editor_config()

    assert editor["root_title"] == "Racine"
    assert editor["json_indent"] == 2


def test_invalid_user_file_keeps_defaults(isolated_config, caplog):
    isolated_config.mkdir(parents=True)
    (isolated_config / "editor.yml").write_text("root_title: [unclosed\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="arborea.config.manager"):
        editor = ConfigManager().get_editor_config()

    assert editor["root_title"] == "Root"
    assert "Could not parse user config" in caplog.text


def test_reset_reloads(isolated_config):
    first = ConfigManager()
    ConfigManager.reset()
    assert ConfigManager() is not first
