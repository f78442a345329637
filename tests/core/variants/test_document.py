"""ShaderVariantDocument（open/save/編集/undo/通知）のテスト。"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from shadervariants.core.runtime_config import set_config_path
from shadervariants.core.variants import (
    INVALID_DESCRIPTOR,
    NotReadyError,
    OptionDescriptor,
    ShaderVariantDocument,
    VariantList,
    VariantRecord,
    catalog_from_spec,
)
from shadervariants.core.variants.invariants import assert_defragmented, assert_invariants
from shadervariants.core.variants.persistence import load_variant_list, save_variant_list


@pytest.fixture(autouse=True)
def _reset_runtime_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    set_config_path(None)
    yield
    set_config_path(None)


_CATALOG = catalog_from_spec(
    [
        {"name": "o_fog", "values": ["false", "true"]},
        {"name": "o_shadow", "values": ["none", "pcf", "esm"], "default": "none"},
        {"name": "o_debug", "values": ["false", "true"]},
    ]
)


def _loader(shader_path: Path):
    if shader_path.name.startswith("missing"):
        return None
    if shader_path.name.startswith("pending"):
        raise NotReadyError("asset not processed yet")
    return _CATALOG


class _Recorder:
    def __init__(self) -> None:
        self.events: list[str] = []

    def on_object_info_invalidated(self, document) -> None:
        self.events.append("invalidated")

    def on_document_modified(self, document) -> None:
        self.events.append("modified")


def _write_shader(tmp_path: Path, name: str = "foo", system_options: dict | None = None) -> Path:
    shader = tmp_path / "shaders" / f"{name}.shader"
    shader.parent.mkdir(parents=True, exist_ok=True)
    shader.write_text("{}", encoding="utf-8")
    if system_options is not None:
        shader.with_suffix(".systemoptions").write_text(json.dumps(system_options), encoding="utf-8")
    return shader


def test_open_shader_expands_system_options(tmp_path: Path):
    shader = _write_shader(tmp_path, system_options={"o_fog": "", "o_shadow": "", "o_debug": "false"})
    document = ShaderVariantDocument(_loader)

    assert document.open(shader) is True

    variant_list = document.variant_list
    assert variant_list.shader_file_path == str(shader.resolve())
    assert len(variant_list.variants) == 6
    assert dict(variant_list.variants[0].options) == {
        "o_fog": "false",
        "o_shadow": "none",
        "o_debug": "false",
    }
    assert_invariants(variant_list)
    assert document.is_modified is False
    assert len(document.history) == 0


def test_open_shader_without_system_options_keeps_empty_list(tmp_path: Path):
    shader = _write_shader(tmp_path)
    document = ShaderVariantDocument(_loader)

    assert document.open(shader) is True
    assert document.variant_list.variants == ()
    assert document.option_descriptor_count() == 3


def test_expansion_over_configured_limit_keeps_empty_list(tmp_path: Path):
    config = tmp_path / "limit.yaml"
    config.write_text("expansion:\n  max_variant_count: 4\n", encoding="utf-8")
    set_config_path(config)
    shader = _write_shader(tmp_path, system_options={"o_fog": "", "o_shadow": ""})
    document = ShaderVariantDocument(_loader)

    assert document.open(shader) is True
    assert document.variant_list.variants == ()


def test_sparse_append_is_undoable_and_notifies(tmp_path: Path):
    shader = _write_shader(tmp_path)
    document = ShaderVariantDocument(_loader)
    document.open(shader)
    recorder = _Recorder()
    document.add_observer(recorder)

    assert document.append_sparse_variant_set(["o_fog", "o_shadow"], ["false", "pcf", "true", "esm"])

    after = document.variant_list
    assert [dict(v.options) for v in after.variants] == [
        {"o_fog": "false", "o_shadow": "pcf"},
        {"o_fog": "true", "o_shadow": "esm"},
    ]
    assert after.stable_ids() == [1, 2]
    assert document.is_modified is True
    assert recorder.events == ["invalidated", "modified"]
    assert len(document.history) == 1

    assert document.undo() is True
    assert document.variant_list.variants == ()
    assert document.redo() is True
    assert document.variant_list == after


def test_invalid_sparse_append_leaves_document_untouched(tmp_path: Path):
    shader = _write_shader(tmp_path)
    document = ShaderVariantDocument(_loader)
    document.open(shader)
    recorder = _Recorder()
    document.add_observer(recorder)

    assert document.append_sparse_variant_set(["o_fog", "o_shadow"], ["false"]) is False

    assert document.variant_list.variants == ()
    assert document.is_modified is False
    assert recorder.events == []
    assert len(document.history) == 0


def test_defragment_through_document(tmp_path: Path):
    path = tmp_path / "foo.shadervariantlist"
    save_variant_list(
        VariantList(
            shader_file_path="shaders/foo.shader",
            variants=(
                VariantRecord(3, {"o_fog": "true"}),
                VariantRecord(1, {"o_fog": "true"}),
                VariantRecord(2, {"o_fog": "false"}),
            ),
        ),
        path,
    )
    _write_shader(tmp_path)
    document = ShaderVariantDocument(_loader)
    assert document.open(path) is True

    document.defragment_variant_list()
    assert_defragmented(document.variant_list)
    assert [dict(v.options) for v in document.variant_list.variants] == [
        {"o_fog": "true"},
        {"o_fog": "false"},
    ]
    assert len(document.history) == 1

    # 2 回目は変化しないので履歴も増えない。
    document.defragment_variant_list()
    assert len(document.history) == 1

    document.undo()
    assert document.variant_list.stable_ids() == [3, 1, 2]


def test_explicit_edit_groups_several_operations(tmp_path: Path):
    shader = _write_shader(tmp_path)
    document = ShaderVariantDocument(_loader)
    document.open(shader)

    document.begin_edit()
    assert document.add_one_variant_row() == 1
    assert document.add_one_variant_row() == 2
    assert document.end_edit() is True

    assert len(document.history) == 1
    document.undo()
    assert document.variant_list.variants == ()


def test_missing_catalog_is_reported(tmp_path: Path):
    shader = _write_shader(tmp_path, name="missing_asset", system_options={"o_fog": ""})
    document = ShaderVariantDocument(_loader)

    assert document.open(shader) is True
    assert document.catalog is None
    assert document.variant_list.variants == ()
    assert document.option_descriptor_count() == 0
    assert document.option_descriptor(0) == INVALID_DESCRIPTOR
    assert document.add_one_variant_row() == 0
    assert document.append_sparse_variant_set(["o_fog"], ["true"]) is False


def test_not_ready_loader_is_treated_as_missing(tmp_path: Path):
    shader = _write_shader(tmp_path, name="pending_asset")
    document = ShaderVariantDocument(_loader)

    assert document.set_variant_list(VariantList(shader_file_path=str(shader))) is False
    assert document.catalog is None


def test_option_descriptor_out_of_range_returns_sentinel(tmp_path: Path):
    document = ShaderVariantDocument(_loader)
    document.open(_write_shader(tmp_path))

    assert document.option_descriptor(1).name == "o_shadow"
    assert document.option_descriptor(3) == INVALID_DESCRIPTOR
    assert not INVALID_DESCRIPTOR.is_valid


def test_save_as_and_reopen_roundtrip(tmp_path: Path):
    shader = _write_shader(tmp_path, system_options={"o_fog": "", "o_debug": ""})
    document = ShaderVariantDocument(_loader)
    document.open(shader)
    document.add_one_variant_row()
    assert document.is_modified is True

    target = tmp_path / "out" / "foo.shadervariantlist"
    assert document.save_as(target) is True
    assert document.is_modified is False
    assert document.path == target.resolve()
    assert load_variant_list(target) == document.variant_list

    reopened = ShaderVariantDocument(_loader)
    assert reopened.open(target) is True
    assert reopened.variant_list == document.variant_list
    assert reopened.catalog is _CATALOG


def test_open_rejects_unknown_extension_and_broken_files(tmp_path: Path):
    document = ShaderVariantDocument(_loader)
    other = tmp_path / "foo.txt"
    other.write_text("", encoding="utf-8")
    broken = tmp_path / "broken.shadervariantlist"
    broken.write_text("{broken-json", encoding="utf-8")

    assert document.open(other) is False
    assert document.open(broken) is False
    assert document.open(tmp_path / "absent.shadervariantlist") is False
    assert document.save() is False


def test_clear_resets_state(tmp_path: Path):
    document = ShaderVariantDocument(_loader)
    document.open(_write_shader(tmp_path, system_options={"o_fog": ""}))
    document.add_one_variant_row()

    document.clear()

    assert document.variant_list == VariantList()
    assert document.catalog is None
    assert document.path is None
    assert document.is_modified is False
    assert len(document.history) == 0


def test_opened_shader_is_never_overwritten_by_save(tmp_path: Path):
    shader = _write_shader(tmp_path, system_options={"o_fog": ""})
    shader.write_text('{"ProgramSettings": 1}', encoding="utf-8")
    document = ShaderVariantDocument(_loader)
    document.open(shader)
    document.add_one_variant_row()

    assert document.path is None
    assert document.save() is False
    assert document.save_as(shader) is False
    assert shader.read_text(encoding="utf-8") == '{"ProgramSettings": 1}'
    assert document.is_modified is True

    target = shader.with_suffix(".shadervariantlist")
    assert document.save_as(target) is True
    assert document.path == target.resolve()
    assert document.save() is True
    assert shader.read_text(encoding="utf-8") == '{"ProgramSettings": 1}'


def test_descriptor_count_without_catalog_logs_error(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    document = ShaderVariantDocument(_loader)

    with caplog.at_level("ERROR"):
        assert document.option_descriptor_count() == 0

    assert any("option_descriptor_count" in r.getMessage() for r in caplog.records)


class _ListCatalog:
    """範囲外で素の IndexError を出すカタログ。"""

    def __init__(self, options: list[OptionDescriptor]) -> None:
        self._options = options

    def option_count(self) -> int:
        return len(self._options)

    def get_option(self, index: int) -> OptionDescriptor:
        return self._options[index]


def test_option_descriptor_handles_plain_index_error(tmp_path: Path):
    fog = OptionDescriptor(name="o_fog", default_value="false", values=("false", "true"))
    document = ShaderVariantDocument(lambda _path: _ListCatalog([fog]))
    document.open(_write_shader(tmp_path))

    assert document.option_descriptor_count() == 1
    assert document.option_descriptor(0) == fog
    assert document.option_descriptor(5) == INVALID_DESCRIPTOR
