"""
打开包时的设置和 YAML 配置文件加载。

配置文件示例:
    markup_compatibility:
      process_mode: ProcessAllParts
      target_version: Office2007
    namespace:
      prefix: pt14
      uri: http://powertools.codeplex.com/2011
    unid:
      include_root: false

标记兼容性处理模式只是透传给外部处理器的设置，本包不解释它。
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import yaml

from .errors import ConfigError
from .namespaces import PT_NAMESPACE, PT_PREFIX


class MarkupCompatibilityProcessMode(Enum):
    NO_PROCESS = "NoProcess"
    PROCESS_ALL_PARTS = "ProcessAllParts"
    PROCESS_LOADED_PARTS_ONLY = "ProcessLoadedPartsOnly"


class FileFormatVersion(Enum):
    OFFICE_2007 = "Office2007"
    OFFICE_2010 = "Office2010"
    OFFICE_2013 = "Office2013"
    OFFICE_2016 = "Office2016"
    OFFICE_2019 = "Office2019"
    OFFICE_2021 = "Office2021"
    MICROSOFT_365 = "Microsoft365"


@dataclass
class OpenSettings:
    """打开包并处理主文档部件时使用的设置。"""

    process_mode: MarkupCompatibilityProcessMode = (
        MarkupCompatibilityProcessMode.NO_PROCESS
    )
    target_version: FileFormatVersion = FileFormatVersion.OFFICE_2007
    prefix: str = PT_PREFIX
    namespace_uri: str = PT_NAMESPACE
    include_root: bool = False


# 允许的配置键
ALLOWED_SECTIONS = {
    "markup_compatibility": {"process_mode", "target_version"},
    "namespace": {"prefix", "uri"},
    "unid": {"include_root"},
}


def _parse_enum(enum_cls, value, key):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigError(
            f"Invalid {key} '{value}'. Allowed values: {allowed}"
        ) from None


def parse_process_mode(value):
    return _parse_enum(MarkupCompatibilityProcessMode, value, "process_mode")


def parse_target_version(value):
    return _parse_enum(FileFormatVersion, value, "target_version")


def settings_from_dict(data):
    """从已解析的配置字典构建 OpenSettings。

    抛出:
        ConfigError: 如果存在未知的键或无效的值
    """
    if data is None:
        return OpenSettings()
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    unexpected = set(data) - set(ALLOWED_SECTIONS)
    if unexpected:
        raise ConfigError(
            f"Unexpected configuration section(s): {', '.join(sorted(unexpected))}. "
            f"Allowed: {', '.join(sorted(ALLOWED_SECTIONS))}"
        )

    for section, keys in ALLOWED_SECTIONS.items():
        values = data.get(section) or {}
        if not isinstance(values, dict):
            raise ConfigError(f"Section '{section}' must be a mapping")
        unexpected = set(values) - keys
        if unexpected:
            raise ConfigError(
                f"Unexpected key(s) in '{section}': {', '.join(sorted(unexpected))}"
            )

    settings = OpenSettings()
    mc = data.get("markup_compatibility") or {}
    if "process_mode" in mc:
        settings.process_mode = parse_process_mode(mc["process_mode"])
    if "target_version" in mc:
        settings.target_version = parse_target_version(mc["target_version"])

    ns = data.get("namespace") or {}
    if "prefix" in ns:
        prefix = ns["prefix"]
        if not isinstance(prefix, str) or not prefix or " " in prefix:
            raise ConfigError(f"Invalid namespace prefix: {prefix!r}")
        settings.prefix = prefix
    if "uri" in ns:
        if not isinstance(ns["uri"], str) or not ns["uri"]:
            raise ConfigError(f"Invalid namespace uri: {ns['uri']!r}")
        settings.namespace_uri = ns["uri"]

    unid = data.get("unid") or {}
    if "include_root" in unid:
        if not isinstance(unid["include_root"], bool):
            raise ConfigError("unid.include_root must be true or false")
        settings.include_root = unid["include_root"]

    return settings


def load_settings(path):
    """读取 YAML 配置文件并返回 OpenSettings。"""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    return settings_from_dict(data)
