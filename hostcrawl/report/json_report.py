# hostcrawl/report/json_report.py

"""
Генерация JSON-отчёта для проекта HostCrawl.

Сериализация дерева CrawlNode в файл.
"""
import json
from pathlib import Path
from typing import Any, Dict

from hostcrawl.crawler.models import CrawlNode


def tree_to_dict(node: CrawlNode) -> Dict[str, Any]:
    return {
        'location': node.location,
        'status': node.status,
        'fetched': node.fetched,
        'outbound_links': list(node.outbound_links),
        'children': [tree_to_dict(child) for child in node.children],
    }


def render_json(node: CrawlNode, output_path: Path | str) -> Path:
    """
    Сохраняет дерево обхода в формате JSON по указанному пути.

    :param node: корневой CrawlNode
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(tree_to_dict(node), f, ensure_ascii=False, indent=2)

    return output
