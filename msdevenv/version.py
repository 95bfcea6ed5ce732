# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

from msdevenv import config as cfg
from msdevenv import path as pth
from msdevenv.exception import VersionNotFoundError


def extract_version(text: str,
                    marker: str = cfg.DEFAULT_VERSION_MARKER) -> str:
  for line in text.splitlines():
    if not line.startswith(marker):
      continue
    if version := line[len(marker):].strip():
      return version
    raise VersionNotFoundError(f"Empty version after marker {repr(marker)}")
  raise VersionNotFoundError(f"No line starts with marker {repr(marker)}")


def read_script_version(script: pth.LocalPath,
                        marker: str = cfg.DEFAULT_VERSION_MARKER) -> str:
  try:
    # Setup scripts are not guaranteed to be valid utf-8.
    text = script.read_text(encoding="utf-8", errors="ignore")
  except OSError as e:
    raise VersionNotFoundError(f"Could not read {script}: {e}") from e
  try:
    return extract_version(text, marker)
  except VersionNotFoundError as e:
    raise VersionNotFoundError(f"{script}: {e}") from e
