"""hostcrawl.report: текстовый и JSON-вывод дерева обхода."""

from hostcrawl.report.json_report import render_json, tree_to_dict
from hostcrawl.report.text_report import render_text

__all__ = ["render_json", "render_text", "tree_to_dict"]
