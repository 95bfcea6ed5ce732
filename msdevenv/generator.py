# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
import re
from typing import Dict, Final, Iterable, List, Mapping, Optional

from immutabledict import immutabledict

import msdevenv
from msdevenv import config as cfg
from msdevenv import path as pth
from msdevenv.scanner import ScriptResult
from msdevenv.types import EnvironmentCapture

IDENTIFIER_PREFIX: Final[str] = "setup-ms-dev-environment"
# Version characters outside this set are replaced in identifiers.
_NON_SYMBOL_RE = re.compile(r"[^A-Za-z0-9_-]")


def unit_identifier(version: str,
                    configuration: cfg.ToolchainConfiguration) -> str:
  normalized_version = _NON_SYMBOL_RE.sub("-", version.replace(".", "-"))
  return f"{IDENTIFIER_PREFIX}-{normalized_version}-{configuration}"


@dataclasses.dataclass(frozen=True)
class GeneratedUnit:
  identifier: str
  version: str
  configuration: cfg.ToolchainConfiguration
  variables: EnvironmentCapture
  script: pth.LocalPath


def collect_units(
    results: Iterable[ScriptResult]) -> immutabledict[str, GeneratedUnit]:
  """Flattens scan results into one unit per (version, configuration).

  Configurations that change nothing are dropped. If several installations
  report the same version, the last one wins but keeps the position of the
  first.
  """
  units: Dict[str, GeneratedUnit] = {}
  for result in results:
    for entry in result.entries:
      identifier = unit_identifier(entry.version, entry.configuration)
      if not entry.variables:
        logging.info("GENERATE: skipping %s, no variables changed", identifier)
        continue
      if previous := units.get(identifier):
        logging.warning("GENERATE: %s from %s replaces the one from %s",
                        identifier, result.script, previous.script)
      units[identifier] = GeneratedUnit(identifier, entry.version,
                                        entry.configuration, entry.variables,
                                        result.script)
  return immutabledict(units)


def elisp_string(value: str) -> str:
  escaped = value.replace("\\", "\\\\").replace('"', '\\"')
  return f'"{escaped}"'


class ElispGenerator:
  """Renders generated units as an Emacs Lisp library with one interactive
  command per unit."""

  def __init__(self,
               feature: str = cfg.DEFAULT_FEATURE,
               root: Optional[pth.LocalPath] = None,
               generated_at: Optional[dt.datetime] = None) -> None:
    self._feature = feature
    self._root = root
    self._generated_at = generated_at

  def render(self, units: Mapping[str, GeneratedUnit]) -> str:
    blocks: List[str] = [self._header()]
    blocks.extend(self._unit(unit) for unit in units.values())
    blocks.append(self._footer())
    return "\n".join(blocks)

  def _header(self) -> str:
    lines = [
        f";;; {self._feature}.el --- Visual C++ build environments  "
        "-*- lexical-binding: t -*-",
        "",
        f";; This file was automatically generated by msdevenv "
        f"{msdevenv.__version__}.",
        ";; Do not edit it by hand, re-run msdevenv to update it.",
        ";;",
        f";; Scanned root: {self._root or '(none)'}",
    ]
    if self._generated_at:
      timestamp = self._generated_at.isoformat(timespec="seconds")
      lines.append(f";; Generated at: {timestamp}")
    lines.extend([
        "",
        ";;; Commentary:",
        "",
        f";; Each `{IDENTIFIER_PREFIX}-*' command sets the environment",
        ";; variables of one Visual C++ toolchain configuration.",
        "",
        ";;; Code:",
        "",
    ])
    return "\n".join(lines)

  def _unit(self, unit: GeneratedUnit) -> str:
    doc = (f"Set up the Visual C++ {unit.version} build environment for "
           f"{unit.configuration}.\n\nCaptured from {unit.script}.")
    lines = [
        f"(defun {unit.identifier} ()",
        f"  {elisp_string(doc)}",
        "  (interactive)",
    ]
    # Replayed in capture order, later duplicates win.
    lines.extend(f"  (setenv {elisp_string(entry.name)} "
                 f"{elisp_string(entry.value)})" for entry in unit.variables)
    lines[-1] += ")"
    lines.append("")
    return "\n".join(lines)

  def _footer(self) -> str:
    return "\n".join([
        f"(provide '{self._feature})",
        "",
        f";;; {self._feature}.el ends here",
        "",
    ])
