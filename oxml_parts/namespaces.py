"""
OOXML 部件处理使用的命名空间 URI 和限定名常量。

所有限定名都使用 Clark 表示法（"{uri}local"），即 lxml 的原生格式。
"""

# PowerTools 私有命名空间（Unid 属性所在）
PT_NAMESPACE = "http://powertools.codeplex.com/2011"
PT_PREFIX = "pt14"

# 标记兼容性命名空间
MC_NAMESPACE = "http://schemas.openxmlformats.org/markup-compatibility/2006"
MC_PREFIX = "mc"

WORD_2006_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# 包级关系
PACKAGE_RELATIONSHIPS_NAMESPACE = (
    "http://schemas.openxmlformats.org/package/2006/relationships"
)
OFFICE_DOCUMENT_REL_TYPES = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument",
    "http://purl.oclc.org/ooxml/officeDocument/relationships/officeDocument",
)


def qn(namespace_uri: str, local_name: str) -> str:
    """返回 Clark 表示法的限定名。"""
    return f"{{{namespace_uri}}}{local_name}"


UNID = qn(PT_NAMESPACE, "Unid")
IGNORABLE = qn(MC_NAMESPACE, "Ignorable")
