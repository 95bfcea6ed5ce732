# Copyright 2026 The Chromium Authors
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from __future__ import annotations

import argparse
import codecs
import dataclasses
import enum
from typing import (Any, Dict, Final, Iterable, Mapping, Optional, Tuple, Type,
                    TypeVar)

import hjson

from msdevenv import cli_helper
from msdevenv import path as pth
from msdevenv.exception import MsDevEnvError

DEFAULT_SCRIPT_NAME: Final[str] = "vcvarsall.bat"
DEFAULT_VERSION_MARKER: Final[str] = "@set VisualStudioVersion="
UNSUPPORTED_CONFIGURATION_MARKER: Final[str] = (
    "The specified configuration type is missing")
DEFAULT_FEATURE: Final[str] = "ms-dev-environments"


class ConfigError(MsDevEnvError, argparse.ArgumentTypeError):
  STAGE = "configuration"


ConfigEnumT = TypeVar("ConfigEnumT", bound="ConfigEnum")


class ConfigEnum(enum.Enum):
  """Enum whose members are (value, help) pairs and that parse from their
  string value."""

  def __new__(cls, value: str, help_text: str):
    member = object.__new__(cls)
    member._value_ = value
    member.help = help_text
    return member

  @classmethod
  def parse(cls: Type[ConfigEnumT], value: Any) -> ConfigEnumT:
    if isinstance(value, cls):
      return value
    for member in cls:
      if member.value == value:
        return member
    choices = ", ".join(repr(member.value) for member in cls)
    raise ConfigError(
        f"Unknown {cls.__name__}: {repr(value)}. Choices are: {choices}")

  @classmethod
  def help_text(cls) -> str:
    return "\n".join(f"{member.value}: {member.help}" for member in cls)

  def __str__(self) -> str:
    return str(self.value)


@enum.unique
class ToolchainConfiguration(ConfigEnum):
  """Target and cross-compilation pairs understood by vcvarsall.bat.

  Member order is the scan order and thus the order of the generated output.
  """
  X86 = ("x86", "Native 32-bit x86 tools")
  AMD64 = ("amd64", "Native 64-bit x64 tools")
  ARM = ("arm", "Native ARM tools")
  X86_AMD64 = ("x86_amd64", "x86 hosted tools targeting x64")
  X86_ARM = ("x86_arm", "x86 hosted tools targeting ARM")
  AMD64_X86 = ("amd64_x86", "x64 hosted tools targeting x86")
  AMD64_ARM = ("amd64_arm", "x64 hosted tools targeting ARM")

  @classmethod
  def in_scan_order(
      cls, configurations: Iterable[ToolchainConfiguration]
  ) -> Tuple[ToolchainConfiguration, ...]:
    selected = set(configurations)
    return tuple(member for member in cls if member in selected)


ALL_CONFIGURATIONS: Final[Tuple[ToolchainConfiguration, ...]] = tuple(
    ToolchainConfiguration)


@dataclasses.dataclass(frozen=True)
class ToolchainScanConfig:
  root: Optional[pth.LocalPath] = None
  script_name: str = DEFAULT_SCRIPT_NAME
  version_marker: str = DEFAULT_VERSION_MARKER
  unsupported_marker: str = UNSUPPORTED_CONFIGURATION_MARKER
  configurations: Tuple[ToolchainConfiguration, ...] = ALL_CONFIGURATIONS
  timeout: Optional[float] = None
  # None means the host's preferred encoding.
  encoding: Optional[str] = None
  feature: str = DEFAULT_FEATURE

  def __post_init__(self) -> None:
    if not self.configurations:
      raise ConfigError("At least one configuration must be scanned.")
    if self.timeout is not None and self.timeout <= 0:
      raise ConfigError(f"Timeout must be positive, but got {self.timeout}")
    if self.encoding is not None:
      try:
        codecs.lookup(self.encoding)
      except LookupError as e:
        raise ConfigError(f"Unknown encoding: {repr(self.encoding)}") from e

  @classmethod
  def parse_path(cls, path: pth.LocalPath) -> ToolchainScanConfig:
    try:
      with path.open(encoding="utf-8") as f:
        config = hjson.load(f)
    except OSError as e:
      raise ConfigError(f"Could not read config file {path}: {e}") from e
    except hjson.HjsonDecodeError as e:
      raise ConfigError(f"Invalid hjson in config file {path}: {e}") from e
    if not isinstance(config, dict):
      raise ConfigError(
          f"Expected a dict in config file {path}, but got {type(config)}")
    return cls.parse_dict(config)

  @classmethod
  def parse_dict(cls, config: Mapping[str, Any]) -> ToolchainScanConfig:
    known_keys = {field.name for field in dataclasses.fields(cls)}
    if unknown_keys := set(config) - known_keys:
      raise ConfigError(
          f"Unknown config keys: {', '.join(sorted(unknown_keys))}")
    kwargs: Dict[str, Any] = {}
    try:
      for key, value in config.items():
        kwargs[key] = cls._parse_value(key, value)
    except ConfigError:
      raise
    except argparse.ArgumentTypeError as e:
      raise ConfigError(f"Invalid config value for '{key}': {e}") from e
    return cls(**kwargs)

  @classmethod
  def _parse_value(cls, key: str, value: Any) -> Any:
    if value is None:
      if key in ("root", "timeout", "encoding"):
        return None
      raise ConfigError(f"Config value for '{key}' cannot be null.")
    if key == "root":
      return cli_helper.parse_path(value, key)
    if key == "timeout":
      return cli_helper.parse_positive_float(value, key)
    if key == "configurations":
      if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(
            f"Expected a list of configurations, but got {repr(value)}")
      return ToolchainConfiguration.in_scan_order(
          ToolchainConfiguration.parse(item) for item in value)
    return cli_helper.parse_non_empty_str(value, key)

  def merge(self, **overrides: Any) -> ToolchainScanConfig:
    """Returns a copy with every non-None override applied."""
    changes = {
        key: value for key, value in overrides.items() if value is not None
    }
    return dataclasses.replace(self, **changes)

  def resolve_root(
      self,
      environ: Optional[Mapping[str, str]] = None) -> Optional[pth.LocalPath]:
    if self.root is not None:
      return self.root
    return pth.default_root(environ)
