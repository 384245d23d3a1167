"""
OOXML 部件 XML 树缓存、Unid 分配和标记兼容性命名空间注册。
"""

from .cache import PartTreeCache
from .compat import (
    add_ignorable_prefix,
    ensure_namespace_declared,
    ignorable_prefixes,
    register_ignorable,
)
from .config import (
    FileFormatVersion,
    MarkupCompatibilityProcessMode,
    OpenSettings,
    load_settings,
)
from .document import stamp_document, stamp_package, stamp_part, verify_document
from .errors import (
    CacheMissError,
    ConfigError,
    DuplicateUnidError,
    InvariantViolation,
    OxmlError,
    PartNotFoundError,
    PartParseError,
    PrefixConflictError,
)
from .namespaces import IGNORABLE, MC_NAMESPACE, PT_NAMESPACE, PT_PREFIX, UNID
from .package import OpcPackage, Part
from .unid import assign_unids, collect_unids, find_missing_unids, new_unid

__version__ = "0.1.0"
