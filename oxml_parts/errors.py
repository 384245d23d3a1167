"""
oxml_parts 抛出的异常。

IO 失败不在此处定义：流打开、读取或写入时的 OSError 原样向调用方传播。
"""


class OxmlError(Exception):
    """所有 oxml_parts 异常的基类。"""


class PartParseError(OxmlError, ValueError):
    """部件内容不是格式良好的 XML。"""

    def __init__(self, part_name, message):
        super().__init__(f"{part_name}: {message}")
        self.part_name = part_name


class CacheMissError(OxmlError, LookupError):
    """在 get() 之前调用了 put()，缓存中没有可写出的树。"""

    def __init__(self, part_name):
        super().__init__(f"No cached tree for part {part_name}; call get() first")
        self.part_name = part_name


class PartNotFoundError(OxmlError, KeyError):
    """包中找不到请求的部件或主文档关系。"""

    def __str__(self):
        return str(self.args[0]) if self.args else ""


class InvariantViolation(OxmlError, RuntimeError):
    """树的结构不变量被破坏。从不自动修复。"""


class DuplicateUnidError(InvariantViolation):
    """两个元素携带相同的 Unid 值。"""

    def __init__(self, unid):
        super().__init__(f"Duplicate Unid value in tree: {unid}")
        self.unid = unid


class PrefixConflictError(InvariantViolation):
    """前缀已在根元素上绑定到另一个命名空间 URI。"""

    def __init__(self, prefix, existing_uri, requested_uri):
        super().__init__(
            f"Prefix '{prefix}' is already bound to {existing_uri}, "
            f"cannot bind it to {requested_uri}"
        )
        self.prefix = prefix
        self.existing_uri = existing_uri
        self.requested_uri = requested_uri


class ConfigError(OxmlError, ValueError):
    """配置文件内容无效。"""
