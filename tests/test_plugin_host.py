import pytest

from midnotes.plugin_host import (
    PluginError,
    PluginManager,
    PluginNotFoundError,
    WasmPlugin,
)


@pytest.fixture
def plugin_dir(tmp_path):
    (tmp_path / "uppercase.wasm").write_bytes(b"\x00asm")
    (tmp_path / "counter.wasm").write_bytes(b"\x00asm")
    (tmp_path / "readme.txt").write_text("not a plugin")
    return tmp_path


def test_new_plugin_manager_has_no_plugins():
    assert PluginManager().list() == []


def test_loading_from_nonexistent_directory_returns_empty(tmp_path):
    mgr = PluginManager()
    assert mgr.load_from_directory(tmp_path / "nonexistent" / "plugins") == []
    assert mgr.list() == []


def test_processing_with_no_plugins_returns_empty():
    assert PluginManager().process_all("test input") == []


def test_only_wasm_files_are_loaded(plugin_dir):
    mgr = PluginManager()
    loaded = mgr.load_from_directory(plugin_dir)
    assert sorted(loaded) == ["counter", "uppercase"]
    assert sorted(mgr.list()) == ["counter", "uppercase"]


def test_get_returns_loaded_plugin_or_none(plugin_dir):
    mgr = PluginManager()
    mgr.load_from_directory(plugin_dir)
    assert mgr.get("uppercase").name == "uppercase"
    assert mgr.get("readme") is None


def test_process_all_runs_every_plugin(plugin_dir):
    mgr = PluginManager()
    mgr.load_from_directory(plugin_dir)
    results = mgr.process_all("test input")
    assert sorted(name for name, _ in results) == ["counter", "uppercase"]
    assert all(output == "" for _, output in results)


def test_wasm_plugin_is_named_by_file_stem(tmp_path):
    plugin = WasmPlugin.load(tmp_path / "uppercase.wasm")
    assert plugin.name == "uppercase"
    assert plugin.process("hello") == ""


def test_loading_from_a_file_path_raises(tmp_path):
    target = tmp_path / "plain.txt"
    target.write_text("x")
    with pytest.raises(PluginError):
        PluginManager().load_from_directory(target)


def test_not_found_error_names_the_plugin():
    err = PluginNotFoundError("uppercase")
    assert err.name == "uppercase"
    assert str(err) == "plugin not found: uppercase"
    assert isinstance(err, PluginError)