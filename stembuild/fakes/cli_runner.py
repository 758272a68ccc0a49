"""A recording fake for CliRunner."""

from __future__ import annotations

from collections.abc import Sequence

from stembuild.fakes.recorder import Fake, FakeMethod
from stembuild.govc_cli import CliRunner


class FakeCliRunner(Fake, CliRunner):
    """CliRunner double; configure it through ``run_fake`` and ``run_with_output_fake``."""

    def __init__(self) -> None:
        super().__init__()
        self.run_fake = FakeMethod("run", self)
        self.run_fake.returns(0)
        self.run_with_output_fake = FakeMethod("run_with_output", self)
        self.run_with_output_fake.returns("", 0)

    def run(self, args: Sequence[str]) -> int:
        return self.run_fake(args)

    def run_with_output(self, args: Sequence[str]) -> tuple[str, int]:
        return self.run_with_output_fake(args)