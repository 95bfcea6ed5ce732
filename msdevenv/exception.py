# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import contextlib
from typing import Iterator, Type


class MsDevEnvError(Exception):
  """Base class for all errors reported to the user.

  Every subclass names the pipeline stage it belongs to, so that a failed run
  can tell filesystem problems apart from subprocess problems.
  """
  STAGE: str = "msdevenv"

  @property
  def stage(self) -> str:
    return self.STAGE


class FilesystemError(MsDevEnvError):
  STAGE = "filesystem access"


class OutputWriteError(FilesystemError):
  pass


class SubprocessError(MsDevEnvError):
  STAGE = "subprocess invocation"


class SubprocessLaunchError(SubprocessError):
  pass


class SubprocessTimeoutError(SubprocessError):
  pass


class VersionNotFoundError(MsDevEnvError):
  STAGE = "version detection"


@contextlib.contextmanager
def annotate_os_error(message: str,
                      error_cls: Type[MsDevEnvError] = FilesystemError
                     ) -> Iterator[None]:
  """Re-raises OSErrors from the wrapped block as |error_cls| with a
  prefixed |message|."""
  try:
    yield
  except OSError as e:
    raise error_cls(f"{message}: {e}") from e
