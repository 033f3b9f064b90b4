import configparser

import pytest

from chatgate.config import ConfigMgr, SectionInfo, load_config

SAMPLE = """\
[GateServer]
Port = 8080

[Redis]
Host = 127.0.0.1
Port = 6380
Passwd =

[chatservers]
Name = chatserver1,chatserver2
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


def test_load_reads_values(config_file):
    config = load_config(config_file)
    assert config["GateServer"]["Port"] == "8080"
    assert config["Redis"]["Host"] == "127.0.0.1"
    assert config.get_value("Redis", "Port") == "6380"
    assert config["chatservers"]["Name"] == "chatserver1,chatserver2"


def test_empty_value_is_empty_string(config_file):
    config = load_config(config_file)
    assert "Passwd" in config["Redis"]
    assert config["Redis"]["Passwd"] == ""


def test_missing_section_and_key_read_empty(config_file):
    config = load_config(config_file)
    assert config["NoSuchSection"]["Host"] == ""
    assert len(config["NoSuchSection"]) == 0
    assert config["Redis"]["NoSuchKey"] == ""
    assert config.get_value("Nope", "Nope") == ""


def test_section_names_sorted(config_file):
    config = load_config(config_file)
    assert config.section_names() == ["GateServer", "Redis", "chatservers"]


def test_keys_are_case_sensitive(tmp_path):
    path = tmp_path / "c.ini"
    path.write_text("[S]\nHost = a\nhost = b\n", encoding="utf-8")
    config = load_config(path)
    assert config["S"]["Host"] == "a"
    assert config["S"]["host"] == "b"


def test_default_section_is_ordinary(tmp_path):
    path = tmp_path / "c.ini"
    path.write_text("[DEFAULT]\nk = v\n[Other]\nx = y\n", encoding="utf-8")
    config = load_config(path)
    assert config["DEFAULT"]["k"] == "v"
    assert config["Other"]["k"] == ""


def test_load_from_working_directory(config_file, monkeypatch):
    monkeypatch.chdir(config_file.parent)
    config = load_config()
    assert config["GateServer"]["Port"] == "8080"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.ini")


def test_key_outside_section_raises(tmp_path):
    path = tmp_path / "bad.ini"
    path.write_text("k = v\n", encoding="utf-8")
    with pytest.raises(configparser.Error):
        load_config(path)


def test_section_info_get_value_matches_indexing():
    info = SectionInfo({"Host": "localhost"})
    assert info.get_value("Host") == info["Host"] == "localhost"
    assert info.get_value("Port") == ""
    assert list(info) == ["Host"]


def test_config_mgr_from_mapping():
    config = ConfigMgr({"A": {"k": "v"}})
    assert config["A"] == SectionInfo({"k": "v"})
    assert config["B"] == SectionInfo()
    assert "A" in config and "B" not in config