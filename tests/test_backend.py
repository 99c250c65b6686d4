from pathlib import Path

import pytest

from funpaintball.config import (
    CorruptConfigError,
    DocumentTreeError,
    JsonBackend,
    YamlBackend,
    backend_for,
    get_section,
    load,
    persistable,
    persisted,
    save,
    set_section,
    validate_tree,
)
from funpaintball.world import Vector

TREE = {
    "name": "arena1",
    "count": 7,
    "ratio": 0.5,
    "enabled": True,
    "note": None,
    "tags": ["a", "b"],
    "region": {"min": {"x": 1.0, "y": 2.5, "z": -3.0}, "max": {"x": 4.0, "y": 5.0, "z": 6.0}},
}


@persistable
class Spot:
    name: str = persisted("spot")
    at: Vector = persisted(default_factory=Vector)


class Plain:
    pass


@pytest.mark.parametrize("backend, filename", [(YamlBackend(), "tree.yml"), (JsonBackend(), "tree.json")])
def test_tree_round_trips(tmp_path: Path, backend, filename):
    path = tmp_path / "nested" / filename
    backend.save_tree(TREE, path)

    assert path.exists()
    assert backend.load_tree(path) == TREE
    # no temp file left behind by the atomic write
    assert list(path.parent.iterdir()) == [path]


def test_yaml_keeps_insertion_order(tmp_path: Path):
    path = tmp_path / "order.yml"
    YamlBackend().save_tree({"zeta": 1, "alpha": 2}, path)
    assert list(YamlBackend().load_tree(path)) == ["zeta", "alpha"]


def test_missing_and_empty_files_read_as_empty_tree(tmp_path: Path):
    backend = YamlBackend()
    assert backend.load_tree(tmp_path / "missing.yml") == {}
    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")
    assert backend.load_tree(empty) == {}


def test_invalid_yaml_is_corrupt(tmp_path: Path):
    path = tmp_path / "bad.yml"
    path.write_text("name: [unclosed\n", encoding="utf-8")
    with pytest.raises(CorruptConfigError):
        YamlBackend().load_tree(path)


def test_invalid_json_is_corrupt(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text("{ this is not valid json ", encoding="utf-8")
    with pytest.raises(CorruptConfigError):
        JsonBackend().load_tree(path)


def test_non_mapping_root_is_corrupt(tmp_path: Path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(CorruptConfigError):
        YamlBackend().load_tree(path)


def test_non_string_keys_are_rejected(tmp_path: Path):
    path = tmp_path / "keys.yml"
    path.write_text("section:\n  1: one\n", encoding="utf-8")
    with pytest.raises(CorruptConfigError):
        YamlBackend().load_tree(path)


def test_backend_for_picks_by_extension():
    assert isinstance(backend_for("arenas.json"), JsonBackend)
    assert isinstance(backend_for("arenas.yml"), YamlBackend)
    assert isinstance(backend_for("arenas"), YamlBackend)


def test_validate_tree_accepts_scalars_and_sections():
    validate_tree(TREE)


@pytest.mark.parametrize(
    "tree",
    [
        ["not", "a", "mapping"],
        {"a": {1, 2}},
        {"a": {"b": object()}},
        {"a": {2: "b"}},
    ],
)
def test_validate_tree_rejects_bad_shapes(tree):
    with pytest.raises(DocumentTreeError):
        validate_tree(tree)


def test_saving_unsupported_leaf_raises(tmp_path: Path):
    with pytest.raises(DocumentTreeError):
        YamlBackend().save_tree({"when": object()}, tmp_path / "x.yml")


def test_sections():
    tree = {"arenas": {"one": {"name": "one"}}, "version": 1}

    assert get_section(tree, "arenas.one") == {"name": "one"}
    assert get_section(tree, "arenas.two") is None
    assert get_section(tree, "version") is None
    assert get_section(tree, None) == tree

    set_section(tree, "arenas.two", {"name": "two"})
    set_section(tree, "version.major", {"n": 2})
    assert tree["arenas"] == {"one": {"name": "one"}, "two": {"name": "two"}}
    assert tree["version"] == {"major": {"n": 2}}

    set_section(tree, None, {"extra": True})
    assert tree["extra"] is True


def test_load_and_save_wrappers(tmp_path: Path):
    path = tmp_path / "spot.yml"

    assert save(Spot(name="flag", at=Vector(1.0, 2.0, 3.0)), path) is True
    assert "at:" in path.read_text(encoding="utf-8")
    assert load(Spot, path) == Spot(name="flag", at=Vector(1.0, 2.0, 3.0))


def test_load_missing_file_gives_defaults(tmp_path: Path):
    assert load(Spot, tmp_path / "nothing.yml") == Spot()


def test_save_failure_writes_nothing(tmp_path: Path):
    path = tmp_path / "plain.json"
    assert save(Plain(), path) is False
    assert not path.exists()
