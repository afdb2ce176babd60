"""Tests for vmbuild.artifact."""

from __future__ import annotations

import dataclasses

import pytest

from vmbuild.artifact import new_artifact
from vmbuild.constants import BUILDER_ID
from vmbuild.exceptions import BuildError


def test_new_artifact_lists_files(tmp_path):
    out = tmp_path / "output"
    (out / "sub").mkdir(parents=True)
    (out / "vm.qcow2").write_text("disk")
    (out / "vm.xml").write_text("<domain/>")
    (out / "sub" / "notes.txt").write_text("x")

    artifact = new_artifact(str(out))
    assert artifact.builder_id == BUILDER_ID
    assert artifact.directory == out
    assert artifact.files == tuple(sorted([out / "vm.qcow2", out / "vm.xml", out / "sub" / "notes.txt"]))
    assert artifact.id() == "VM"
    assert artifact.string() == f"VM files in directory: {out}"


def test_artifact_is_immutable(tmp_path):
    artifact = new_artifact(str(tmp_path))
    with pytest.raises(dataclasses.FrozenInstanceError):
        artifact.directory = tmp_path / "elsewhere"


def test_missing_directory_raises(tmp_path):
    with pytest.raises(BuildError, match="Output directory missing"):
        new_artifact(str(tmp_path / "nope"))


def test_destroy_removes_directory(tmp_path):
    out = tmp_path / "output"
    out.mkdir()
    (out / "vm.qcow2").write_text("disk")
    new_artifact(str(out)).destroy()
    assert not out.exists()
