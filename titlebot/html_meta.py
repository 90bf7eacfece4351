"""Meta tag extraction for pages that keep their title outside <title>."""

from dataclasses import dataclass
from typing import Optional, Union

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class MetaTag:
    name: str = ""
    property: str = ""
    content: str = ""
    http_equiv: str = ""
    charset: str = ""


_ATTRS = {
    "name": "name",
    "property": "property",
    "content": "content",
    "http-equiv": "http_equiv",
    "charset": "charset",
}


def extract_meta_tags(markup: Union[str, bytes]) -> list[MetaTag]:
    """Return every <meta> tag in *markup* that carries a known attribute.

    Attribute names are matched case-insensitively; attribute values are
    returned with entities already decoded. Truncated markup is fine.
    """
    soup = BeautifulSoup(markup, "html.parser")
    tags = []
    for element in soup.find_all("meta"):
        fields = {}
        for key, value in element.attrs.items():
            field = _ATTRS.get(key.lower())
            if field is not None:
                fields[field] = value if isinstance(value, str) else " ".join(value)
        tag = MetaTag(**fields)
        if tag != MetaTag():
            tags.append(tag)
    return tags


def find_meta_title(markup: Union[str, bytes]) -> Optional[str]:
    """Content of ``<meta name="title">``, if the page has one."""
    for tag in extract_meta_tags(markup):
        if tag.name.lower() == "title":
            return tag.content
    return None
