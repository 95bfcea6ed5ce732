# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import argparse
import math
from typing import Any, Optional

from msdevenv import path as pth


def parse_non_empty_str(value: Any, name: Optional[str] = None) -> str:
  if not isinstance(value, str):
    raise argparse.ArgumentTypeError(
        f"Expected {name or 'str'} to be a string, but got {repr(value)}")
  if not value:
    raise argparse.ArgumentTypeError(f"Expected non-empty {name or 'str'}.")
  return value


def parse_positive_float(value: Any, name: Optional[str] = None) -> float:
  try:
    value_f = float(value)
  except (ValueError, TypeError) as e:
    raise argparse.ArgumentTypeError(
        f"Expected {name or 'float'}, but got {repr(value)}") from e
  if not math.isfinite(value_f) or value_f <= 0:
    raise argparse.ArgumentTypeError(
        f"Expected positive {name or 'float'}, but got {value_f}")
  return value_f


def parse_path(value: Any, name: Optional[str] = None) -> pth.LocalPath:
  # The path does not have to exist, a missing root is a valid empty scan.
  return pth.LocalPath(parse_non_empty_str(value, name or "path")).absolute()


def parse_existing_file_path(value: Any,
                             name: Optional[str] = None) -> pth.LocalPath:
  path = parse_path(value, name)
  if not path.exists():
    raise argparse.ArgumentTypeError(f"{name or 'File'} not found: {path}")
  if not path.is_file():
    raise argparse.ArgumentTypeError(
        f"{name or 'Path'} is not a file: {path}")
  return path
