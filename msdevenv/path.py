# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import os
import pathlib
from typing import Mapping, Optional, Sequence

LocalPath = pathlib.Path

# Checked in order, the first non-empty value wins.
PROGRAM_FILES_ENV_VARS: Sequence[str] = ("ProgramFiles(x86)", "ProgramFiles")


def default_root(
    environ: Optional[Mapping[str, str]] = None) -> Optional[LocalPath]:
  """Returns the architecture-specific program-installation directory, or None
  if the host does not define one."""
  if environ is None:
    environ = os.environ
  for name in PROGRAM_FILES_ENV_VARS:
    if value := environ.get(name):
      return LocalPath(value)
  return None
