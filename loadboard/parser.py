from typing import Dict, List, Optional
from pydantic import BaseModel
from selectolax.lexbor import LexborHTMLParser
from .models import RawLoadRow


class SelectorMap(BaseModel):
    """CSS selectors for a saved load board page, relative to each row."""
    list_item_selector: str
    selectors: Dict[str, Optional[str]]
    detail_text_selector: Optional[str] = None


def page_text(html: str, selector: Optional[str] = None) -> str:
    """Visible text of a page (or of the first element matching ``selector``), one node per line."""
    tree = LexborHTMLParser(html)
    for tag in tree.css("script, style, noscript"):
        tag.decompose()

    root = tree.css_first(selector) if selector else tree.body
    if root is None:
        return ""
    return root.text(separator="\n", strip=True)


class LoadTableParser:
    """Pulls raw load rows out of saved load board HTML."""

    def __init__(self, selector_map: SelectorMap):
        self.selector_map = selector_map

    def parse_page(self, html: str) -> List[RawLoadRow]:
        tree = LexborHTMLParser(html)
        rows = []

        for item in tree.css(self.selector_map.list_item_selector):
            data = self._extract_from_element(item)
            if data:
                rows.append(RawLoadRow(**data))

        # One detail panel per saved page: give its text to every row for reference lookup
        if rows and self.selector_map.detail_text_selector:
            text = page_text(html, self.selector_map.detail_text_selector)
            if text:
                rows = [row.model_copy(update={"page_text": text}) for row in rows]

        return rows

    def _extract_from_element(self, element) -> Dict[str, str]:
        data = {}
        for field_name, selector in self.selector_map.selectors.items():
            if not selector:
                continue
            match = element.css_first(selector)
            if match is None:
                continue
            # Joined like the browser's textContent, which is what glues
            # "Manteca, CA" and "Aurora, CO" together on the live board
            text = match.text(separator="", strip=True)
            if text:
                data[field_name] = text
        return data
