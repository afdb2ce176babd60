"""Shell command rendering for the libvirt toolchain (virsh, virt-install, qemu-img)."""

from __future__ import annotations

from pathlib import Path
from shlex import quote
from typing import Optional

from vmbuild.constants import (
    CDROM_TARGET,
    CONDITION_TRUE,
    DEFAULT_DISK_NAME,
    DISK_FORMAT,
    DISK_TYPE_FIXED,
    FLOPPY_TARGET,
    LIBVIRT_URI,
)


def _virsh(uri: str) -> str:
    return f"virsh -c {quote(uri)}"


def _bool_test(test: str) -> str:
    return f"if {test}; then echo {CONDITION_TRUE}; else echo False; fi"


def disk_path(directory: Path, disk_name: str) -> Path:
    return Path(directory) / f"{disk_name}.{DISK_FORMAT}"


def create_vm(
    vm_name: str,
    path: Path,
    ram_size_mb: int,
    disk_size_mb: int,
    switch_name: str,
    disk_type: str,
    disk_name: str = DEFAULT_DISK_NAME,
    uri: str = LIBVIRT_URI,
) -> str:
    """Create the disk image and define (but do not start) the domain."""
    disk = disk_path(path, disk_name)
    prealloc = " -o preallocation=full" if disk_type == DISK_TYPE_FIXED else ""
    create_disk = f"qemu-img create -q -f {DISK_FORMAT}{prealloc} {quote(str(disk))} {disk_size_mb}M"
    install = (
        f"virt-install --connect {quote(uri)} --name {quote(vm_name)}"
        f" --memory {ram_size_mb}"
        f" --disk {quote(f'path={disk},format={DISK_FORMAT},bus=virtio')}"
        f" --network {quote(f'network={switch_name}')}"
        " --osinfo detect=on,require=off --boot hd,cdrom,fd"
        " --graphics vnc --noautoconsole --import --print-xml"
    )
    return f"{create_disk} && {install} | {_virsh(uri)} define /dev/stdin"


def remove_vm(vm_name: str, uri: str = LIBVIRT_URI) -> str:
    """Forcibly power off and undefine the domain together with its storage."""
    name = quote(vm_name)
    return (
        f"{_virsh(uri)} destroy {name} >/dev/null 2>&1; "
        f"{_virsh(uri)} undefine {name} --remove-all-storage --nvram"
    )


def set_floppy(vm_name: str, path: Optional[Path], uri: str = LIBVIRT_URI) -> str:
    """Attach ``path`` as the floppy drive, or detach the drive when ``path`` is None."""
    if path is None:
        return f"{_virsh(uri)} detach-disk {quote(vm_name)} {FLOPPY_TARGET} --config"
    return (
        f"{_virsh(uri)} attach-disk {quote(vm_name)} {quote(str(path))} {FLOPPY_TARGET}"
        " --type floppy --config"
    )


def set_dvd(vm_name: str, path: Optional[Path], uri: str = LIBVIRT_URI) -> str:
    """Attach ``path`` as a read-only cdrom, or detach it when ``path`` is None."""
    if path is None:
        return f"{_virsh(uri)} detach-disk {quote(vm_name)} {CDROM_TARGET} --config"
    return (
        f"{_virsh(uri)} attach-disk {quote(vm_name)} {quote(str(path))} {CDROM_TARGET}"
        " --type cdrom --mode readonly --config"
    )


def start_vm(vm_name: str, uri: str = LIBVIRT_URI) -> str:
    return f"{_virsh(uri)} start {quote(vm_name)}"


def stop_vm(vm_name: str, uri: str = LIBVIRT_URI) -> str:
    return f"{_virsh(uri)} destroy {quote(vm_name)}"


def vm_is_running(vm_name: str, uri: str = LIBVIRT_URI) -> str:
    return _bool_test(f'[ "$({_virsh(uri)} domstate {quote(vm_name)})" = "running" ]')


def vm_is_off(vm_name: str, uri: str = LIBVIRT_URI) -> str:
    """Print True once the domain reports the shut off state, False otherwise."""
    return _bool_test(f'[ "$({_virsh(uri)} domstate {quote(vm_name)})" = "shut off" ]')


def network_exists(name: str, uri: str = LIBVIRT_URI) -> str:
    return _bool_test(f"{_virsh(uri)} net-info {quote(name)} >/dev/null 2>&1")


def create_network(name: str, uri: str = LIBVIRT_URI) -> str:
    """Define and start an isolated network named ``name``."""
    xml = f"<network><name>{name}</name></network>"
    return (
        f"printf '%s' {quote(xml)} | {_virsh(uri)} net-define /dev/stdin && "
        f"{_virsh(uri)} net-start {quote(name)}"
    )


def remove_network(name: str, uri: str = LIBVIRT_URI) -> str:
    return (
        f"{_virsh(uri)} net-destroy {quote(name)} >/dev/null 2>&1; "
        f"{_virsh(uri)} net-undefine {quote(name)}"
    )


def first_active_network(uri: str = LIBVIRT_URI) -> str:
    return f"{_virsh(uri)} net-list --name | sed '/^$/d' | head -n 1"


def host_free_memory_mb(uri: str = LIBVIRT_URI) -> str:
    return f"{_virsh(uri)} nodememstats | awk '$1 == \"free\" {{print int($3 / 1024)}}'"


def export_vm(
    vm_name: str,
    source_disk: Path,
    output_dir: Path,
    compact: bool = True,
    disk_name: str = DEFAULT_DISK_NAME,
    uri: str = LIBVIRT_URI,
) -> str:
    """Write the domain definition and a converted copy of its disk into ``output_dir``."""
    xml_path = Path(output_dir) / f"{vm_name}.xml"
    target = disk_path(output_dir, disk_name)
    compress = " -c" if compact else ""
    return (
        f"{_virsh(uri)} dumpxml {quote(vm_name)} > {quote(str(xml_path))} && "
        f"qemu-img convert -q -O {DISK_FORMAT}{compress} {quote(str(source_disk))} {quote(str(target))}"
    )
