"""Tests for vmbuild.commands."""

from __future__ import annotations

from pathlib import Path

from vmbuild import commands


class TestCreateVm:
    def test_dynamic_disk(self):
        cmd = commands.create_vm("vm1", Path("/tmp/build"), 2048, 131072, "sw0", "Dynamic", uri="qemu:///system")
        assert cmd.startswith("qemu-img create -q -f qcow2 /tmp/build/disk.qcow2 131072M && ")
        assert "preallocation" not in cmd
        assert "--name vm1" in cmd
        assert "--memory 2048" in cmd
        assert "network=sw0" in cmd
        assert cmd.endswith("| virsh -c qemu:///system define /dev/stdin")

    def test_fixed_disk_preallocates(self):
        cmd = commands.create_vm("vm1", Path("/tmp/build"), 2048, 20480, "sw0", "Fixed")
        assert "-o preallocation=full" in cmd

    def test_disk_named_from_config(self):
        cmd = commands.create_vm("vm1", Path("/tmp/build"), 1024, 20480, "sw0", "Dynamic", disk_name="win2019")
        assert "/tmp/build/win2019.qcow2 20480M" in cmd
        assert "path=/tmp/build/win2019.qcow2,format=qcow2" in cmd

    def test_values_are_shell_quoted(self):
        cmd = commands.create_vm("my vm", Path("/tmp/a b"), 1024, 20480, "sw;rm", "Dynamic")
        assert "--name 'my vm'" in cmd
        assert "'/tmp/a b/disk.qcow2'" in cmd
        assert "'network=sw;rm'" in cmd


def test_remove_vm_forces_power_off():
    cmd = commands.remove_vm("vm1", uri="test:///default")
    assert cmd == (
        "virsh -c test:///default destroy vm1 >/dev/null 2>&1; "
        "virsh -c test:///default undefine vm1 --remove-all-storage --nvram"
    )


def test_floppy_attach_and_detach():
    attach = commands.set_floppy("vm1", Path("/tmp/x/floppy.vfd"), uri="test:///default")
    assert attach == "virsh -c test:///default attach-disk vm1 /tmp/x/floppy.vfd fda --type floppy --config"
    detach = commands.set_floppy("vm1", None, uri="test:///default")
    assert detach == "virsh -c test:///default detach-disk vm1 fda --config"


def test_dvd_attach_is_readonly():
    cmd = commands.set_dvd("vm1", Path("/isos/os.iso"))
    assert "--type cdrom --mode readonly" in cmd


def test_power_off_check_prints_true_or_false():
    cmd = commands.vm_is_off("vm1", uri="test:///default")
    assert cmd == (
        'if [ "$(virsh -c test:///default domstate vm1)" = "shut off" ]; '
        "then echo True; else echo False; fi"
    )


def test_network_commands():
    assert "net-info sw0" in commands.network_exists("sw0")
    create = commands.create_network("pis_1")
    assert "'<network><name>pis_1</name></network>'" in create
    assert "net-start pis_1" in create
    assert "net-undefine pis_1" in commands.remove_network("pis_1")


def test_export_vm():
    cmd = commands.export_vm("vm1", Path("/tmp/b/disk.qcow2"), Path("/out"), compact=False)
    assert "dumpxml vm1 > /out/vm1.xml" in cmd
    assert cmd.endswith("qemu-img convert -q -O qcow2 /tmp/b/disk.qcow2 /out/disk.qcow2")


def test_disk_path():
    assert commands.disk_path(Path("/tmp/b"), "win2019") == Path("/tmp/b/win2019.qcow2")


def test_export_uses_disk_name():
    cmd = commands.export_vm("vm1", Path("/tmp/b/win2019.qcow2"), Path("/out"), disk_name="win2019")
    assert cmd.endswith("-O qcow2 -c /tmp/b/win2019.qcow2 /out/win2019.qcow2")
