# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from msdevenv import config as cfg
from msdevenv import path as pth
from msdevenv.capture import EnvironmentCapturer

UNSUPPORTED_OUTPUT = (
    "The specified configuration type is missing.  The tools for the\n"
    "configuration might not be installed.\n")


def env_output(*lines: str) -> str:
  return "\r\n".join(lines) + "\r\n"


def write_script(path: pth.LocalPath, version: str = "14.0") -> pth.LocalPath:
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(
      "@echo off\n"
      f"@set VisualStudioVersion={version}\n"
      "if \"%1\" == \"\" goto x86\n",
      encoding="utf-8")
  return path


class FakeCapturer(EnvironmentCapturer):
  """Replays canned shell output instead of spawning cmd.exe."""

  def __init__(self,
               baseline: str = "",
               outputs: Optional[Dict[Tuple[str, str], str]] = None) -> None:
    super().__init__()
    self.baseline_output = baseline
    self.outputs: Dict[Tuple[str, str], str] = outputs or {}
    self.calls: List[Tuple[str, ...]] = []

  def set_output(self, script: pth.LocalPath,
                 configuration: cfg.ToolchainConfiguration,
                 output: str) -> None:
    self.outputs[(str(script), str(configuration))] = output

  def _sh_stdout(self, args: Sequence[str]) -> str:
    self.calls.append(tuple(args))
    if list(args) == ["set"]:
      return self.baseline_output
    return self.outputs.get((args[0], args[1]), UNSUPPORTED_OUTPUT)
