# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import dataclasses
from typing import Tuple


@dataclasses.dataclass(frozen=True)
class EnvironmentEntry:
  # Names are not unique within a capture.
  name: str
  value: str

  def __str__(self) -> str:
    return f"{self.name}={self.value}"


EnvironmentCapture = Tuple[EnvironmentEntry, ...]
