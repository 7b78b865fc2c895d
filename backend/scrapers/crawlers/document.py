"""
BeautifulSoup-backed view of a rendered page.
"""

from typing import Any, List, Optional, Union
from bs4 import BeautifulSoup, Tag

from ..base import DocumentView
from ..utils.normalizers import clean_text


class SoupDocument(DocumentView):
    """
    DocumentView over a BeautifulSoup tree.

    Elements are bs4 Tags; selectors are CSS (soupsieve).
    """

    def __init__(self, source: Union[str, BeautifulSoup]):
        if isinstance(source, BeautifulSoup):
            self.soup = source
        else:
            self.soup = BeautifulSoup(source or '', 'html.parser')

    def _root(self, root: Any) -> Tag:
        return self.soup if root is None else root

    def find_all(self, selector: str, root: Any = None) -> List[Tag]:
        return self._root(root).select(selector)

    def find_first(self, selector: str, root: Any = None) -> Optional[Tag]:
        return self._root(root).select_one(selector)

    def text(self, element: Any) -> Optional[str]:
        if element is None:
            return None
        # get_text() without a separator matches the DOM textContent
        return clean_text(element.get_text())

    def attribute(self, element: Any, name: str) -> Optional[str]:
        if element is None:
            return None
        value = element.get(name)
        if isinstance(value, list):
            # Multi-valued attributes like class come back as lists
            value = ' '.join(value)
        return value
