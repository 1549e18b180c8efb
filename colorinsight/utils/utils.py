"""
Small helpers shared by the services and the wizard.
"""

import re
from typing import Iterable, List

from colorinsight.utils.constants import MAX_SEARCH_SOURCES, REPORT_FILE_SUFFIX, DEFAULT_CUSTOMER_NAME

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers (```json ... ```) around a JSON payload."""
    return _CODE_FENCE.sub("", text).strip()


def dedupe_sources(sources: Iterable, limit: int = MAX_SEARCH_SOURCES) -> List:
    """
    Deduplicate citation sources by URL.

    Args:
        sources: Iterable of objects (or dicts) carrying a ``url``
        limit: Maximum number of entries to keep

    Returns:
        Sources in first-seen order, one per URL, at most ``limit`` entries
    """
    seen_urls = set()
    unique = []
    for source in sources:
        url = source["url"] if isinstance(source, dict) else source.url
        if url in seen_urls:
            continue
        seen_urls.add(url)
        unique.append(source)
    return unique[:limit]


def safe_file_stem(customer_name: str) -> str:
    """
    Turn a customer name into a single file-name component.

    Whitespace runs and characters that are unsafe in file names (path
    separators included) become "_", and edge dots are dropped, so the
    result never names a parent or hidden path.
    """
    name = _UNSAFE_FILENAME.sub("_", (customer_name or "").strip())
    name = _WHITESPACE.sub("_", name)
    name = re.sub(r"_+", "_", name).strip("_.")
    return name or DEFAULT_CUSTOMER_NAME.replace(" ", "_")


def report_file_name(customer_name: str) -> str:
    """Build the export file name from the customer name."""
    return f"{safe_file_stem(customer_name)}{REPORT_FILE_SUFFIX}"


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit]
