#!/usr/bin/env python3
"""
为 Word 文档主部件中的元素分配 Unid，并将扩展命名空间注册为可忽略。

用法：
    oxml-parts stamp input.docx output.docx
    oxml-parts stamp input.docx output.docx --mode ProcessAllParts --prefix pt14
    oxml-parts verify output.docx
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import (
    OpenSettings,
    load_settings,
    parse_process_mode,
    parse_target_version,
)
from .document import stamp_document, verify_document
from .errors import OxmlError


def build_parser():
    parser = argparse.ArgumentParser(
        prog="oxml-parts",
        description="为 OOXML 主文档部件中的元素分配 Unid 并注册可忽略命名空间。",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例：
  oxml-parts stamp template.docx stamped.docx
    为 template.docx 主文档部件的所有后代元素分配 pt14:Unid，保存为 stamped.docx

  oxml-parts stamp template.docx stamped.docx --config settings.yaml
    使用 YAML 配置文件中的前缀、命名空间和处理模式

  oxml-parts verify stamped.docx
    检查是否所有元素都带有 Unid（缺失时退出码为 1）
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    parser.add_argument("--config", help="YAML 配置文件路径")
    parser.add_argument("--namespace", help="Unid 所在的命名空间 URI")
    parser.add_argument(
        "--include-root", action="store_true", help="同时为根元素分配 Unid"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    stamp = subparsers.add_parser("stamp", help="分配 Unid 并保存到新文件")
    stamp.add_argument("source", help="源文档路径")
    stamp.add_argument("destination", help="输出文档路径")
    stamp.add_argument(
        "--mode",
        help="标记兼容性处理模式（NoProcess、ProcessAllParts、ProcessLoadedPartsOnly）",
    )
    stamp.add_argument("--target-version", help="目标文件格式版本（例如 Office2007）")
    stamp.add_argument("--prefix", help="注册为可忽略的命名空间前缀")

    verify = subparsers.add_parser("verify", help="检查所有元素是否带有 Unid")
    verify.add_argument("source", help="要检查的文档路径")

    return parser


def resolve_settings(args):
    """合并配置文件和命令行参数（命令行优先）。"""
    settings = load_settings(args.config) if args.config else OpenSettings()
    if args.namespace:
        settings.namespace_uri = args.namespace
    if args.include_root:
        settings.include_root = True
    if getattr(args, "mode", None):
        settings.process_mode = parse_process_mode(args.mode)
    if getattr(args, "target_version", None):
        settings.target_version = parse_target_version(args.target_version)
    if getattr(args, "prefix", None):
        settings.prefix = args.prefix
    return settings


def run_stamp(args, settings):
    source = Path(args.source)
    if not source.exists():
        print(f"错误：找不到源文件：{args.source}")
        return 1

    report = stamp_document(source, Path(args.destination), settings)
    print(
        f"{report.part_name}：新分配 {report.stamped} 个 Unid，"
        f"命名空间前缀 {settings.prefix} "
        f"{'已注册' if report.registered else '此前已注册'}"
    )
    print(f"已保存到 {args.destination}")
    return 0


def run_verify(args, settings):
    source = Path(args.source)
    if not source.exists():
        print(f"错误：找不到文件：{args.source}")
        return 1

    missing = verify_document(source, settings)
    if missing:
        print(f"失败 - 发现 {len(missing)} 个缺少 Unid 的元素:")
        for path in missing:
            print(f"  {path}")
        return 1
    print("通过 - 所有元素均带有 Unid")
    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    try:
        settings = resolve_settings(args)
        if args.command == "stamp":
            return run_stamp(args, settings)
        return run_verify(args, settings)
    except (OxmlError, OSError) as e:
        print(f"错误：{e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
