# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import dataclasses
import logging
from typing import List, Tuple

from msdevenv import config as cfg
from msdevenv import path as pth
from msdevenv.capture import EnvironmentCapturer
from msdevenv.diff import environment_diff
from msdevenv.types import EnvironmentCapture
from msdevenv.version import read_script_version


@dataclasses.dataclass(frozen=True)
class VersionedConfig:
  version: str
  configuration: cfg.ToolchainConfiguration
  # Only entries that differ from the baseline.
  variables: EnvironmentCapture


@dataclasses.dataclass(frozen=True)
class ScriptResult:
  script: pth.LocalPath
  version: str
  entries: Tuple[VersionedConfig, ...] = tuple()

  @property
  def configurations(self) -> Tuple[cfg.ToolchainConfiguration, ...]:
    return tuple(entry.configuration for entry in self.entries)


class ConfigurationScanner:
  """Captures the environment of every configuration a single setup script
  supports."""

  def __init__(self,
               capturer: EnvironmentCapturer,
               baseline: EnvironmentCapture,
               configurations: Tuple[cfg.ToolchainConfiguration,
                                     ...] = cfg.ALL_CONFIGURATIONS,
               version_marker: str = cfg.DEFAULT_VERSION_MARKER) -> None:
    self._capturer = capturer
    self._baseline = baseline
    self._configurations = configurations
    self._version_marker = version_marker

  @property
  def baseline(self) -> EnvironmentCapture:
    return self._baseline

  def scan(self, script: pth.LocalPath) -> ScriptResult:
    # Raises VersionNotFoundError before any subprocess is spawned.
    version = read_script_version(script, self._version_marker)
    logging.info("SCAN: %s (version %s)", script, version)
    entries: List[VersionedConfig] = []
    for configuration in self._configurations:
      configured = self._capturer.capture(script, configuration)
      if configured is None:
        logging.info("SCAN: %s: configuration '%s' is not installed", version,
                     configuration)
        continue
      variables = environment_diff(self._baseline, configured)
      logging.debug("SCAN: %s: configuration '%s' changes %d variables",
                    version, configuration, len(variables))
      entries.append(VersionedConfig(version, configuration, variables))
    return ScriptResult(script, version, tuple(entries))
