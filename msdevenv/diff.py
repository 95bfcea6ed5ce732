# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import collections
from typing import Counter, List

from msdevenv.types import EnvironmentCapture, EnvironmentEntry


def environment_diff(base: EnvironmentCapture,
                     derived: EnvironmentCapture) -> EnvironmentCapture:
  """Returns the entries of |derived| that are not matched by an entry of
  |base|.

  This is a multiset difference on (name, value) pairs: every occurrence in
  |base| cancels at most one occurrence in |derived|, earliest first. Entries
  whose value changed are kept since they no longer match their base pair.
  """
  remaining: Counter[EnvironmentEntry] = collections.Counter(base)
  result: List[EnvironmentEntry] = []
  for entry in derived:
    if remaining[entry] > 0:
      remaining[entry] -= 1
    else:
      result.append(entry)
  return tuple(result)
