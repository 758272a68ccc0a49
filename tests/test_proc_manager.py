from datetime import datetime, timezone

import pytest

from stembuild.fakes.proc_manager import FakeProcManager
from stembuild.guest_manager import (
    GuestAuthentication,
    GuestManager,
    GuestManagerError,
    GuestProcessInfo,
    GuestProgramSpec,
)


def test_start_program_records_arguments_and_returns_configured_pid():
    fake = FakeProcManager()
    fake.start_program_fake.returns(600)
    auth = GuestAuthentication("user", "")
    spec = GuestProgramSpec("mkdir", "C:\\dummy")

    assert fake.start_program(auth, spec) == 600
    assert fake.start_program_fake.call_count() == 1
    assert fake.start_program_fake.args_for_call(0) == (auth, spec)


def test_start_program_defaults_to_zero():
    fake = FakeProcManager()
    assert fake.start_program(GuestAuthentication(), GuestProgramSpec("cmd")) == 0


def test_list_processes_copies_pid_list():
    fake = FakeProcManager()
    info = GuestProcessInfo(pid=1000, exit_code=3)
    fake.list_processes_fake.returns([info])
    pids = [1000]

    assert fake.list_processes(GuestAuthentication(), pids) == [info]
    pids.append(2000)
    _, recorded = fake.list_processes_fake.args_for_call(0)
    assert recorded == [1000]


def test_list_processes_returns_on_specific_call():
    fake = FakeProcManager()
    running = GuestProcessInfo(pid=5)
    done = GuestProcessInfo(pid=5, end_time=datetime.now(timezone.utc), exit_code=7)
    fake.list_processes_fake.returns([done])
    fake.list_processes_fake.returns_on_call(0, [running])

    assert fake.list_processes(GuestAuthentication(), [5]) == [running]
    assert fake.list_processes(GuestAuthentication(), [5]) == [done]


def test_client_returns_configured_value_and_is_recorded():
    fake = FakeProcManager()
    marker = object()
    fake.client_fake.returns(marker)

    assert fake.client() is marker
    assert fake.invocations() == {"client": [()]}


def test_guest_manager_polls_fake_until_process_ends():
    fake = FakeProcManager()
    running = GuestProcessInfo(pid=9)
    done = GuestProcessInfo(pid=9, end_time=datetime.now(timezone.utc), exit_code=42)
    fake.list_processes_fake.returns([done])
    fake.list_processes_fake.returns_on_call(0, [running])
    manager = GuestManager(GuestAuthentication(), fake, None, None, poll_interval=0)

    assert manager.exit_code_for_program_in_guest(9) == 42
    assert fake.list_processes_fake.call_count() == 2


def test_guest_manager_wraps_fake_error():
    fake = FakeProcManager()
    fake.start_program_fake.raises(RuntimeError("boom"))
    manager = GuestManager(GuestAuthentication(), fake, None, None)

    with pytest.raises(GuestManagerError) as excinfo:
        manager.start_program_in_guest("mkdir", "x")
    assert str(excinfo.value) == (
        "vcenter_client - could not run process: mkdir x on guest os, error: boom"
    )