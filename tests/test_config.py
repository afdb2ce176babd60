"""Tests for vmbuild.config module."""

from __future__ import annotations

import pytest
import yaml

from vmbuild.config import decode_config, load_template
from vmbuild.exceptions import BuildError


@pytest.fixture
def template_file(tmp_path):
    config = {
        "build_name": "win2019",
        "iso_urls": ["https://example.com/a.iso", "https://mirror.example.com/a.iso"],
        "disk_size": 40960,
        "ram_size_mb": "2048",
        "skip_compaction": "yes",
        "provisioners": ["echo one", "echo two"],
    }
    path = tmp_path / "build.yaml"
    path.write_text(yaml.dump(config))
    return path


class TestLoadTemplate:
    def test_valid_template(self, template_file):
        raw = load_template(template_file)
        assert raw["build_name"] == "win2019"
        assert len(raw["iso_urls"]) == 2

    def test_missing_template(self, tmp_path):
        with pytest.raises(BuildError, match="Build template missing"):
            load_template(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("iso_url: [unterminated\n")
        with pytest.raises(BuildError, match="invalid YAML"):
            load_template(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(BuildError, match="must be a YAML mapping, got list"):
            load_template(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_template(path) == {}


class TestDecodeConfig:
    def test_coerces_values(self, template_file):
        cfg = decode_config(load_template(template_file))
        assert cfg.build_name == "win2019"
        assert cfg.ram_size_mb == 2048
        assert cfg.disk_size == 40960
        assert cfg.skip_compaction is True
        assert cfg.provisioners == ["echo one", "echo two"]

    def test_later_mapping_wins(self):
        cfg = decode_config({"vm_name": "a", "ram_size_mb": 1024}, {"vm_name": "b"})
        assert cfg.vm_name == "b"
        assert cfg.ram_size_mb == 1024

    def test_unknown_keys_rejected(self):
        with pytest.raises(BuildError, match="Unknown configuration key\\(s\\): bogus, other"):
            decode_config({"other": 1}, {"bogus": 2, "vm_name": "x"})

    def test_single_string_becomes_list(self):
        assert decode_config({"iso_urls": "a.iso"}).iso_urls == ["a.iso"]

    def test_list_type_checked(self):
        with pytest.raises(BuildError, match="provisioners must be a list"):
            decode_config({"provisioners": {"a": 1}})

    def test_bad_integer(self):
        with pytest.raises(BuildError, match="disk_size must be an integer"):
            decode_config({"disk_size": "big"})

    def test_bad_number(self):
        with pytest.raises(BuildError, match="shutdown_timeout must be a number"):
            decode_config({"shutdown_timeout": "soon"})

    def test_floats_accepted(self):
        cfg = decode_config({"shutdown_settle_delay": "1.5", "shutdown_poll_interval": 2})
        assert cfg.shutdown_settle_delay == 1.5
        assert cfg.shutdown_poll_interval == 2.0

    def test_null_keeps_default(self):
        cfg = decode_config({"shutdown_timeout": None})
        assert cfg.shutdown_timeout == 4 * 60 * 60

    @pytest.mark.parametrize("value, expected", [("true", True), ("off", False), (1, True), (False, False)])
    def test_bool_values(self, value, expected):
        assert decode_config({"force": value}).force is expected
