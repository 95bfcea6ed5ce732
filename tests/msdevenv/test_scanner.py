# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import pytest

from msdevenv.config import ALL_CONFIGURATIONS, ToolchainConfiguration
from msdevenv.exception import SubprocessLaunchError, VersionNotFoundError
from msdevenv.scanner import ConfigurationScanner, VersionedConfig
from msdevenv.types import EnvironmentEntry as E

from tests.msdevenv.helper import (UNSUPPORTED_OUTPUT, FakeCapturer, env_output,
                                   write_script)

BASELINE = (E("PATH", "C:\\Win"), E("OS", "Windows_NT"))


class TestConfigurationScanner:

  @pytest.fixture
  def script(self, tmp_path):
    return write_script(tmp_path / "VC" / "vcvarsall.bat", "14.0")

  def test_unsupported_configurations_are_omitted(self, script):
    capturer = FakeCapturer()
    capturer.set_output(
        script, ToolchainConfiguration.X86,
        env_output("PATH=C:\\Win;C:\\VC", "OS=Windows_NT",
                   "INCLUDE=C:\\VC\\include"))
    capturer.set_output(script, ToolchainConfiguration.AMD64,
                        UNSUPPORTED_OUTPUT)
    result = ConfigurationScanner(capturer, BASELINE).scan(script)
    assert result.script == script
    assert result.version == "14.0"
    assert result.entries == (VersionedConfig(
        "14.0", ToolchainConfiguration.X86,
        (E("PATH", "C:\\Win;C:\\VC"), E("INCLUDE", "C:\\VC\\include"))),)

  def test_all_configurations_in_enumeration_order(self, script):
    capturer = FakeCapturer()
    for configuration in reversed(ALL_CONFIGURATIONS):
      capturer.set_output(script, configuration,
                          env_output(f"Platform={configuration}"))
    result = ConfigurationScanner(capturer, BASELINE).scan(script)
    assert result.configurations == ALL_CONFIGURATIONS
    assert [call[1] for call in capturer.calls] == [
        str(configuration) for configuration in ALL_CONFIGURATIONS
    ]
    for entry in result.entries:
      assert entry.version == "14.0"
      assert entry.variables == (E("Platform", str(entry.configuration)),)

  def test_no_supported_configuration(self, script):
    result = ConfigurationScanner(FakeCapturer(), BASELINE).scan(script)
    assert result.version == "14.0"
    assert result.entries == tuple()

  def test_empty_diff_is_kept(self, script):
    capturer = FakeCapturer()
    capturer.set_output(script, ToolchainConfiguration.X86,
                        env_output("PATH=C:\\Win", "OS=Windows_NT"))
    result = ConfigurationScanner(capturer, BASELINE).scan(script)
    assert result.entries == (VersionedConfig(
        "14.0", ToolchainConfiguration.X86, tuple()),)

  def test_subset_of_configurations(self, script):
    capturer = FakeCapturer()
    scanner = ConfigurationScanner(
        capturer,
        BASELINE,
        configurations=(ToolchainConfiguration.AMD64,
                        ToolchainConfiguration.AMD64_ARM))
    scanner.scan(script)
    assert [call[1] for call in capturer.calls] == ["amd64", "amd64_arm"]

  def test_missing_version_spawns_nothing(self, tmp_path):
    script = tmp_path / "vcvarsall.bat"
    script.write_text("@echo off\n", encoding="utf-8")
    capturer = FakeCapturer()
    with pytest.raises(VersionNotFoundError):
      ConfigurationScanner(capturer, BASELINE).scan(script)
    assert not capturer.calls

  def test_launch_errors_propagate(self, script):

    class BrokenCapturer(FakeCapturer):

      def _sh_stdout(self, args):
        raise SubprocessLaunchError("cmd.exe not found")

    with pytest.raises(SubprocessLaunchError):
      ConfigurationScanner(BrokenCapturer(), BASELINE).scan(script)

  def test_baseline_is_not_mutated(self, script):
    capturer = FakeCapturer()
    capturer.set_output(script, ToolchainConfiguration.X86,
                        env_output("PATH=C:\\VC"))
    baseline = tuple(BASELINE)
    scanner = ConfigurationScanner(capturer, baseline)
    scanner.scan(script)
    assert scanner.baseline == BASELINE
