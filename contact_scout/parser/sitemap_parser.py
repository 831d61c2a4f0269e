# File: contact_scout/parser/sitemap_parser.py
"""contact_scout.parser.sitemap_parser: разбор sitemap.xml и извлечение URL."""

from __future__ import annotations

from typing import List

from lxml import etree


def parse_sitemap(xml_content: str) -> List[str]:
    """Разбирает XML content sitemap и возвращает список URL из тегов <loc>.

    Args:
        xml_content: строка с содержимым sitemap.xml.

    Returns:
        Список URL, найденных в <loc> тегах (в порядке документа). Для
        пустого или нечитаемого документа — пустой список.

    Пример:
    ```python
    from contact_scout.parser.sitemap_parser import parse_sitemap

    urls = parse_sitemap(page.body)
    ```
    """
    if not xml_content or not xml_content.strip():
        return []
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False)
    try:
        root = etree.fromstring(xml_content.strip().encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError:
        return []
    if root is None:
        return []
    locs = root.findall(".//{*}loc")
    return [loc.text.strip() for loc in locs if loc.text and loc.text.strip()]
