import datetime
import logging
from pathlib import Path

import pytest

from funpaintball.config import ConfigManager, JsonBackend, persistable, persisted
from funpaintball.paths import ENV_DATA_DIR
from funpaintball.world import Location, World


@persistable
class Team:
    name: str = persisted("blue")
    size: int = persisted(4)
    home: Location = persisted(default_factory=lambda: Location(World("world")))
    loaded: int = 0
    saved: int = 0

    def on_deserialize(self) -> None:
        self.loaded += 1

    def on_pre_serialize(self) -> None:
        self.saved += 1


class Plain:
    pass


def test_data_dir_is_created(tmp_path: Path):
    data_dir = tmp_path / "a" / "b"
    mgr = ConfigManager(data_dir=data_dir)
    assert mgr.data_dir == data_dir.resolve()
    assert data_dir.is_dir()


def test_env_override_for_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(ENV_DATA_DIR, str(tmp_path / "env_data"))
    mgr = ConfigManager()
    assert mgr.data_dir == (tmp_path / "env_data").resolve()
    assert mgr.data_dir.exists()


def test_load_missing_file_returns_none(manager: ConfigManager):
    assert manager.load(Team, "teams.yml") is None
    assert not manager.get_file("teams.yml").exists()


def test_save_then_load_calls_root_hooks(manager: ConfigManager):
    team = Team(name="red", size=6, home=Location(World("arena"), 1.0, 65.0, 1.0))

    assert manager.save(team, "team.yml") is True
    assert team.saved == 1

    loaded = manager.load(Team, "team.yml")
    assert loaded.name == "red"
    assert loaded.size == 6
    assert loaded.home == Location(World("arena"), 1.0, 65.0, 1.0)
    assert loaded.loaded == 1


def test_save_merges_into_existing_file(manager: ConfigManager):
    manager.save_tree({"motd": "hello", "size": 1}, "team.yml")

    manager.save(Team(size=9), "team.yml")

    tree = manager.load_tree("team.yml")
    assert tree["motd"] == "hello"
    assert tree["size"] == 9


def test_sections_hold_several_objects(manager: ConfigManager):
    manager.save(Team(name="blue"), "teams.yml", section="teams.blue")
    manager.save(Team(name="red", size=2), "teams.yml", section="teams.red")

    assert manager.load(Team, "teams.yml", section="teams.red").size == 2
    assert manager.load(Team, "teams.yml", section="teams.blue").name == "blue"
    assert manager.load(Team, "teams.yml", section="teams.green") is None
    assert set(manager.load_tree("teams.yml")["teams"]) == {"blue", "red"}


def test_delete_section(manager: ConfigManager):
    manager.save(Team(name="blue"), "teams.yml", section="teams.blue")

    assert manager.delete_section("teams.yml", "teams.blue") is True
    assert manager.delete_section("teams.yml", "teams.blue") is False
    assert manager.load_tree("teams.yml") == {"teams": {}}


def test_failed_serialization_writes_nothing(manager: ConfigManager):
    assert manager.save(Plain(), "plain.yml") is False
    assert not manager.get_file("plain.yml").exists()


def test_ensure_file(manager: ConfigManager):
    assert manager.ensure_file("sub/new.yml") is False
    assert manager.get_file("sub/new.yml").exists()
    assert manager.ensure_file("sub/new.yml") is True
    # an empty file loads as a default instance
    assert manager.load(Team, "sub/new.yml") == Team(loaded=1)


def test_json_files_use_json_backend(manager: ConfigManager):
    manager.save(Team(name="json"), "team.json")
    assert manager.get_file("team.json").read_text(encoding="utf-8").lstrip().startswith("{")
    assert manager.load(Team, "team.json").name == "json"


def test_explicit_backend_wins(tmp_path: Path):
    mgr = ConfigManager(data_dir=tmp_path, backend=JsonBackend())
    mgr.save(Team(), "team.yml")
    assert mgr.get_file("team.yml").read_text(encoding="utf-8").lstrip().startswith("{")


@persistable
class Stamp:
    name: str = persisted("x")
    when: datetime.date = persisted(default_factory=lambda: datetime.date(2020, 1, 1))


def test_unstorable_field_is_left_out_of_the_save(manager: ConfigManager, caplog):
    caplog.set_level(logging.ERROR, logger="funpaintball")

    assert manager.save(Stamp(), "stamp.yml") is True

    assert manager.load_tree("stamp.yml") == {"name": "x"}
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "'when'" in errors[0].message
