# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import logging
import os

from ordered_set import OrderedSet

from msdevenv import path as pth


def names_match(name: str, other: str) -> bool:
  return name.casefold() == other.casefold()


def find_files(root: pth.LocalPath, name: str) -> OrderedSet[pth.LocalPath]:
  """Returns all files below |root| whose file name matches |name| ignoring
  case.

  The walk is depth-first, directories that cannot be listed are skipped.
  A missing or unreadable |root| results in an empty set.
  """
  matches: OrderedSet[pth.LocalPath] = OrderedSet()
  _walk(pth.LocalPath(root).absolute(), name, matches)
  logging.debug("Found %d files named '%s' below %s", len(matches), name, root)
  return matches


def _walk(directory: pth.LocalPath, name: str,
          matches: OrderedSet[pth.LocalPath]) -> None:
  subdirectories = []
  try:
    with os.scandir(directory) as entries:
      for entry in entries:
        try:
          # Do not follow directory links to avoid cycles.
          is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
          logging.debug("Skipping unreadable entry %s: %s", entry.path, e)
          continue
        if is_dir:
          subdirectories.append(entry.path)
        elif names_match(entry.name, name):
          matches.add(pth.LocalPath(entry.path))
  except OSError as e:
    logging.debug("Skipping unreadable directory %s: %s", directory, e)
    return
  for subdirectory in subdirectories:
    _walk(pth.LocalPath(subdirectory), name, matches)
