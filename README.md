# stembuild

A small Python library for the vCenter side of building Windows stemcells.
It drives the `govc` command-line tool to find, inspect, export and
modify virtual machines, and wraps vSphere-style collaborators for
logging in, cloning VMs and running programs inside their guest
operating systems.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Parts

- `stembuild.govc_cli`: `CliRunner`, the interface for running govc, and
  `GovcRunner`, which runs a govc executable (`"govc"` by default) and
  returns its exit code from `run`, or its standard output and exit code
  from `run_with_output`.
- `stembuild.vcenter_client`: `VcenterClient`, which builds govc command
  lines (credentials URL-encoded, optional `-tls-ca-certs` file) for
  `validate_url`, `validate_credentials`, `find_vm`, `list_devices`,
  `remove_device`, `eject_cdrom`, `export_vm`, `upload_artifact`,
  `make_directory`, `start`, `wait_for_exit` and `is_powered_off`, and
  raises `VcenterClientError` when a command fails.
- `stembuild.guest_manager`: `GuestManager` for starting programs in a
  guest (`start_program_in_guest`), polling until they end
  (`exit_code_for_program_in_guest`) and downloading guest files
  (`download_file_in_guest`); failures raise `GuestManagerError`. The
  data classes `GuestAuthentication`, `GuestProgramSpec`,
  `GuestProcessInfo` and `FileTransferInformation` describe what passes
  between them.
- `stembuild.vcenter_manager`: `VCenterManager` for logging in
  (`login`), finding VMs (`find_vm`), cloning them (`clone_vm`, which
  powers the clone on) and creating a `GuestManager` (`guest_manager`).
- `stembuild.vcenter_manager_factory`: `ManagerFactory` and
  `FactoryConfig`, which assemble a `VCenterManager` from a server
  address, credentials, a client creator and a finder creator;
  `parse_vcenter_url` (scheme defaults to `https`, path to `/sdk`,
  errors raise `VCenterURLError`) and `SoapClient`, whose
  `set_root_cas` loads trusted CA certificates from PEM files.
- `stembuild.fakes`: recording test doubles built on `Fake` and
  `FakeMethod` from `stembuild.fakes.recorder`: `FakeCliRunner`,
  `FakeDownloadClient`, `FakeFileManager`, `FakeProcManager`,
  `FakeGovmomiClient`, `FakeFinder`, `FakeOpsManager`,
  `FakeFinderCreator` and `FakeVim25ClientCreator`.

## Example

```python
from stembuild.govc_cli import GovcRunner
from stembuild.vcenter_client import VcenterClient, VcenterClientError

password = "password"
client = VcenterClient("user", password, "vcenter.example.com", "", GovcRunner("govc"))

try:
    client.validate_url()
    client.validate_credentials()
    client.find_vm("/my-datacenter/vm/my-folder/my-vm-name")
    devices = client.list_devices("/my-datacenter/vm/my-folder/my-vm-name")
    print(devices)
except VcenterClientError as error:
    print(error)
```

Messages that mention the vCenter URL with credentials never include the
password; it is shown as `REDACTED`.

## Testing with fakes

Each fake exposes one `FakeMethod` per method, named `<method>_fake`.
A `FakeMethod` can be told what to return (`returns`,
`returns_on_call`), what to raise (`raises`, `raises_on_call`) or what
to call (`calls`), and reports `call_count()` and `args_for_call(i)`
(a single argument is returned on its own).

```python
from stembuild.fakes.cli_runner import FakeCliRunner
from stembuild.vcenter_client import VcenterClient

password = "password"
runner = FakeCliRunner()
runner.run_fake.returns(0)

client = VcenterClient("user", password, "vcenter.example.com", "", runner)
client.validate_credentials()

assert runner.run_fake.call_count() == 1
assert runner.run_fake.args_for_call(0) == [
    "about", "-u", "user:password@vcenter.example.com"
]
```

## What it does not do

- There is no command-line program; this is a library only.
- It does not speak the vSphere SOAP API itself. `ManagerFactory` needs a
  client creator and a finder creator supplied in its `FactoryConfig`;
  the package ships only fakes of them. `VCenterManager` likewise works
  with whatever client, finder, VM and operations-manager objects it is
  given.
- It does not build or package stemcell assets.