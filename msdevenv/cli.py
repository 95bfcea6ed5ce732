# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import argparse
import datetime as dt
import logging
import os
import sys
import tempfile
from typing import Mapping, Optional, Sequence

from tabulate import tabulate

import msdevenv
from msdevenv import cli_helper
from msdevenv import config as cfg
from msdevenv import exception
from msdevenv import path as pth
from msdevenv.capture import EnvironmentCapturer
from msdevenv.pipeline import PipelineResult, ToolchainPipeline

STDOUT = "-"


class MsDevEnvCLI:

  def __init__(self,
               capturer: Optional[EnvironmentCapturer] = None,
               environ: Optional[Mapping[str, str]] = None) -> None:
    self._capturer = capturer
    self._environ = environ
    self.parser = argparse.ArgumentParser(
        prog="msdevenv",
        description=(
            "Finds all installed Visual C++ toolchains, captures the "
            "environment every toolchain configuration sets up and writes "
            "an Emacs Lisp library with one command per configuration that "
            "replays those settings."),
        epilog=("Configurations:\n" + cfg.ToolchainConfiguration.help_text()),
        formatter_class=argparse.RawDescriptionHelpFormatter)
    self.parser.add_argument(
        "--version", action="version", version=msdevenv.__version__)
    self.parser.add_argument(
        "--config",
        type=cli_helper.parse_existing_file_path,
        help="Path to a hjson scan config. Command line flags take precedence.")
    self.parser.add_argument(
        "--root",
        type=cli_helper.parse_path,
        help=("Directory to search for setup scripts. Defaults to "
              "%%ProgramFiles(x86)%% or %%ProgramFiles%%."))
    self.parser.add_argument(
        "--script-name",
        type=cli_helper.parse_non_empty_str,
        help=f"Setup script file name (default: {cfg.DEFAULT_SCRIPT_NAME}).")
    self.parser.add_argument(
        "--configuration",
        dest="configurations",
        type=cfg.ToolchainConfiguration.parse,
        action="append",
        help=("Only scan the given configuration. "
              "Repeat for multiple configurations."))
    self.parser.add_argument(
        "--version-marker",
        type=cli_helper.parse_non_empty_str,
        help=("Prefix of the line holding the toolchain version "
              f"(default: {repr(cfg.DEFAULT_VERSION_MARKER)})."))
    self.parser.add_argument(
        "--timeout",
        type=cli_helper.parse_positive_float,
        help="Abort if a single setup script runs longer than this (seconds).")
    self.parser.add_argument(
        "--encoding",
        type=cli_helper.parse_non_empty_str,
        help=("Encoding of the shell output "
              "(default: the host's preferred encoding)."))
    self.parser.add_argument(
        "--feature",
        type=cli_helper.parse_non_empty_str,
        help=("Name of the generated Emacs Lisp feature "
              f"(default: {cfg.DEFAULT_FEATURE})."))
    self.parser.add_argument(
        "--output",
        "-o",
        type=cli_helper.parse_non_empty_str,
        default=STDOUT,
        help="Output file, '-' writes to stdout.")
    self.parser.add_argument(
        "--no-timestamp",
        dest="timestamp",
        action="store_false",
        help="Omit the generation time for reproducible output.")
    self.parser.add_argument(
        "--list",
        action="store_true",
        help="Print a table of the found configurations instead of code.")
    verbosity = self.parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log level, repeat for debug output.")
    verbosity.add_argument(
        "--quiet", "-q", action="store_true", help="Only log errors.")

  def run(self, argv: Sequence[str]) -> int:
    args = self.parser.parse_args(argv)
    self._setup_logging(args)
    try:
      config = self._load_config(args)
      generated_at = dt.datetime.now().astimezone() if args.timestamp else None
      pipeline = ToolchainPipeline(
          config,
          capturer=self._capturer,
          environ=self._environ,
          generated_at=generated_at)
      result = pipeline.run()
      logging.info("Generated %d environments from %d of %d scripts",
                   len(result.units),
                   len(result.scripts) - len(result.skipped_scripts),
                   len(result.scripts))
      for script in result.skipped_scripts:
        logging.info("  skipped: %s", script)
      if args.list:
        self._write(args.output, self._format_table(result))
      else:
        self._write(args.output, result.text)
    except exception.MsDevEnvError as e:
      logging.error("%s failed: %s", e.stage, e)
      return 1
    return 0

  def _setup_logging(self, args: argparse.Namespace) -> None:
    if args.quiet:
      level = logging.ERROR
    else:
      level = max(logging.DEBUG, logging.WARNING - 10 * args.verbose)
    logging.basicConfig(format="[%(levelname)s] %(message)s")
    logging.getLogger().setLevel(level)

  def _load_config(self, args: argparse.Namespace) -> cfg.ToolchainScanConfig:
    config = cfg.ToolchainScanConfig()
    if args.config:
      config = cfg.ToolchainScanConfig.parse_path(args.config)
    configurations = None
    if args.configurations:
      configurations = cfg.ToolchainConfiguration.in_scan_order(
          args.configurations)
    return config.merge(
        root=args.root,
        script_name=args.script_name,
        version_marker=args.version_marker,
        configurations=configurations,
        timeout=args.timeout,
        encoding=args.encoding,
        feature=args.feature)

  def _format_table(self, result: PipelineResult) -> str:
    rows = [(unit.identifier, unit.version, str(unit.configuration),
             len(unit.variables), str(unit.script))
            for unit in result.units.values()]
    table = tabulate(
        rows,
        headers=("identifier", "version", "configuration", "variables",
                 "script"))
    return f"{table}\n"

  def _write(self, output: str, text: str) -> None:
    if output == STDOUT:
      sys.stdout.write(text)
      return
    path = cli_helper.parse_path(output, "output")
    with exception.annotate_os_error(f"Could not write {path}",
                                     exception.OutputWriteError):
      path.parent.mkdir(parents=True, exist_ok=True)
      # Written next to the target, then renamed over it.
      fd, tmp_name = tempfile.mkstemp(
          dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
      tmp_path = pth.LocalPath(tmp_name)
      try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
          f.write(text)
        os.replace(tmp_path, path)
      except BaseException:
        tmp_path.unlink()
        raise
    logging.info("Generated environments written to %s", path)
