#!/usr/bin/env python3
# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

import sys
from msdevenv.cli import MsDevEnvCLI

if __name__ == "__main__":
  cli = MsDevEnvCLI()
  sys.exit(cli.run(sys.argv[1:]))
