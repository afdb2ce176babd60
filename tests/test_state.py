"""Tests for vmbuild.state."""

from __future__ import annotations

from pathlib import Path

import pytest

from vmbuild.exceptions import BuildError
from vmbuild.models import Disposition
from vmbuild.state import BuildState


class TestAccessors:
    def test_get_unpublished_raises(self, state):
        with pytest.raises(BuildError, match="'vm_name' has not been published"):
            state.get("vm_name")

    def test_get_ok_unpublished_returns_none(self, state):
        assert state.get_ok("floppy_path") is None

    def test_put_then_get(self, state):
        state.put("vm_name", "vm1")
        assert state.get("vm_name") == "vm1"

    def test_unknown_key_rejected(self, state):
        with pytest.raises(BuildError, match="Unknown build state key 'scratchDir'"):
            state.put("scratchDir", "/tmp")
        with pytest.raises(BuildError, match="Unknown build state key"):
            state.get_ok("_cancel_event")

    def test_type_change_rejected(self, state):
        state.put("vm_name", "vm1")
        with pytest.raises(BuildError, match="holds str, refusing int"):
            state.put("vm_name", 5)

    def test_same_type_republish_allowed(self, state, tmp_path):
        state.put("temp_dir", tmp_path / "other")
        assert state.temp_dir == Path(tmp_path / "other")

    def test_keys_exclude_private_fields(self):
        keys = BuildState.keys()
        assert "vm_name" in keys
        assert "_cancel_event" not in keys


class TestErrorsAndDisposition:
    def test_first_error_wins(self, state):
        state.record_error(BuildError("first"))
        state.record_error(BuildError("second"))
        assert str(state.error) == "first"

    def test_default_succeeded(self, state):
        assert state.disposition() is Disposition.SUCCEEDED

    def test_halted(self, state):
        state.put("halted", True)
        assert state.disposition() is Disposition.HALTED

    def test_cancelled_beats_halted(self, state):
        state.put("halted", True)
        state.put("cancelled", True)
        assert state.disposition() is Disposition.CANCELLED

    def test_error_beats_everything(self, state):
        state.put("halted", True)
        state.put("cancelled", True)
        state.record_error(BuildError("x"))
        assert state.disposition() is Disposition.FAILED


class TestSleep:
    def test_zero_sleep_reports_cancellation(self, state):
        assert state.sleep(0) is False
        state.cancel()
        assert state.sleep(0) is True

    def test_sleep_returns_immediately_when_cancelled(self, state):
        state.cancel()
        assert state.sleep(3600) is True


class TestCancelRequest:
    def test_request_alone_keeps_outcome(self, state):
        state.cancel()
        assert state.cancel_requested
        assert state.cancelled is False
        assert state.disposition() is Disposition.SUCCEEDED
