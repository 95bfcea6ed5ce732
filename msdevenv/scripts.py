# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

import sys

from msdevenv.cli import MsDevEnvCLI


def msdevenv(argv=None):
  if not argv:
    argv = sys.argv
  cli = MsDevEnvCLI()
  sys.exit(cli.run(argv[1:]))
