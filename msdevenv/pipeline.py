# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from typing import List, Mapping, Optional, Tuple

from immutabledict import immutabledict
from ordered_set import OrderedSet

from msdevenv import config as cfg
from msdevenv import path as pth
from msdevenv.capture import EnvironmentCapturer
from msdevenv.exception import VersionNotFoundError
from msdevenv.generator import ElispGenerator, GeneratedUnit, collect_units
from msdevenv.locate import find_files
from msdevenv.scanner import ConfigurationScanner, ScriptResult
from msdevenv.types import EnvironmentCapture


@dataclasses.dataclass(frozen=True)
class PipelineResult:
  root: Optional[pth.LocalPath]
  scripts: Tuple[pth.LocalPath, ...]
  baseline: EnvironmentCapture
  results: Tuple[ScriptResult, ...]
  units: immutabledict[str, GeneratedUnit]
  text: str

  @property
  def skipped_scripts(self) -> Tuple[pth.LocalPath, ...]:
    scanned = {result.script for result in self.results}
    return tuple(script for script in self.scripts if script not in scanned)


class ToolchainPipeline:
  """Locates setup scripts, captures their environments and renders them."""

  def __init__(self,
               config: cfg.ToolchainScanConfig,
               capturer: Optional[EnvironmentCapturer] = None,
               environ: Optional[Mapping[str, str]] = None,
               generated_at: Optional[dt.datetime] = None) -> None:
    self._config = config
    self._capturer = capturer or EnvironmentCapturer.from_config(config)
    self._root = config.resolve_root(environ)
    self._generated_at = generated_at

  @property
  def root(self) -> Optional[pth.LocalPath]:
    return self._root

  def locate(self) -> OrderedSet[pth.LocalPath]:
    if self._root is None:
      logging.warning("No installation root available, nothing to scan.")
      return OrderedSet()
    scripts = find_files(self._root, self._config.script_name)
    logging.info("LOCATE: found %d '%s' below %s", len(scripts),
                 self._config.script_name, self._root)
    return scripts

  def scan(self, scripts: OrderedSet[pth.LocalPath],
           baseline: EnvironmentCapture) -> Tuple[ScriptResult, ...]:
    scanner = ConfigurationScanner(
        self._capturer,
        baseline,
        configurations=self._config.configurations,
        version_marker=self._config.version_marker)
    results: List[ScriptResult] = []
    for script in scripts:
      try:
        results.append(scanner.scan(script))
      except VersionNotFoundError as e:
        logging.warning("SCAN: skipping script without version: %s", e)
    return tuple(results)

  def run(self) -> PipelineResult:
    scripts = self.locate()
    baseline: EnvironmentCapture = tuple()
    if scripts:
      baseline = self._capturer.capture_baseline()
      logging.debug("BASELINE: %d variables", len(baseline))
    results = self.scan(scripts, baseline)
    units = collect_units(results)
    generator = ElispGenerator(
        feature=self._config.feature,
        root=self._root,
        generated_at=self._generated_at)
    text = generator.render(units)
    return PipelineResult(self._root, tuple(scripts), baseline, results, units,
                          text)
