# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import locale
import logging
import subprocess
from typing import List, Optional, Sequence

from msdevenv import config as cfg
from msdevenv import path as pth
from msdevenv.exception import SubprocessLaunchError, SubprocessTimeoutError
from msdevenv.types import EnvironmentCapture, EnvironmentEntry

# Shell built-in that lists the full environment as NAME=VALUE lines.
SET_COMMAND = "set"
# Seconds to wait for the output pipe to close after killing a timed out
# shell.
KILL_TIMEOUT = 5


def parse_environment(output: str) -> EnvironmentCapture:
  """Parses the output of `set` into entries, keeping order and duplicates.
  Lines without '=' are dropped."""
  entries: List[EnvironmentEntry] = []
  for line in output.splitlines():
    if "=" not in line:
      continue
    name, value = line.split("=", 1)
    entries.append(EnvironmentEntry(name, value))
  return tuple(entries)


def is_unsupported(
    output: str,
    marker: str = cfg.UNSUPPORTED_CONFIGURATION_MARKER) -> bool:
  return any(line.startswith(marker) for line in output.splitlines())


class EnvironmentCapturer:
  """Runs setup scripts in a child shell and captures the environment they
  leave behind."""

  def __init__(self,
               unsupported_marker: str = cfg.UNSUPPORTED_CONFIGURATION_MARKER,
               timeout: Optional[float] = None,
               encoding: Optional[str] = None) -> None:
    self._unsupported_marker = unsupported_marker
    self._timeout = timeout
    # The shell writes in the host code page, not necessarily utf-8.
    self._encoding = encoding or locale.getpreferredencoding(False)

  @classmethod
  def from_config(cls, config: cfg.ToolchainScanConfig) -> EnvironmentCapturer:
    return cls(
        unsupported_marker=config.unsupported_marker,
        timeout=config.timeout,
        encoding=config.encoding)

  def capture_baseline(self) -> EnvironmentCapture:
    return parse_environment(self._sh_stdout([SET_COMMAND]))

  def capture(self, script: pth.LocalPath,
              configuration: cfg.ToolchainConfiguration
             ) -> Optional[EnvironmentCapture]:
    """Returns the environment after running |script| for |configuration|,
    or None if the script reports the configuration as not installed."""
    args = [str(script), str(configuration), "&&", SET_COMMAND]
    output = self._sh_stdout(args)
    if is_unsupported(output, self._unsupported_marker):
      return None
    return parse_environment(output)

  def _sh_stdout(self, args: Sequence[str]) -> str:
    # The exit status is not checked, setup scripts report unsupported
    # configurations through their output only.
    logging.debug("SHELL: %s", " ".join(args))
    try:
      popen = subprocess.Popen(
          list(args),
          shell=True,
          stdout=subprocess.PIPE,
          stderr=subprocess.STDOUT)
    except OSError as e:
      raise SubprocessLaunchError(
          f"Could not launch shell for {repr(' '.join(args))}: {e}") from e
    try:
      stdout, _ = popen.communicate(timeout=self._timeout)
    except subprocess.TimeoutExpired as e:
      popen.kill()
      try:
        # Children started by the script may still hold the pipe open.
        popen.communicate(timeout=KILL_TIMEOUT)
      except subprocess.TimeoutExpired:
        logging.debug("SHELL: output of %s still open after kill", args[0])
      raise SubprocessTimeoutError(
          f"{repr(' '.join(args))} did not finish within "
          f"{self._timeout}s") from e
    if popen.returncode != 0:
      logging.debug("SHELL: %s exited with %d", args[0], popen.returncode)
    return self._decode(stdout, args[0])

  def _decode(self, stdout: bytes, command: str) -> str:
    try:
      return stdout.decode(self._encoding)
    except UnicodeDecodeError as e:
      logging.warning(
          "SHELL: output of %s is not valid %s, "
          "undecodable bytes are replaced: %s", command, self._encoding, e)
      return stdout.decode(self._encoding, errors="replace")
