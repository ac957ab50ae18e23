#!/usr/bin/env python3
"""
Parse championships from the archives page.

The archives page is prose, not a table: a heading per season type
("Winter Champions") followed by lines such as "2025: Barbary Coast" or
"2024 - Fog City". Markup varies between headings, so there are two
strategies:

1. Heading scan: find headings naming a season and read the lines that
   follow them up to the next heading.
2. Text scan (only if 1 finds nothing): split the whole page text at
   season keywords and read year/team pairs from each section.
"""
from typing import Iterator, List, Set, Tuple
from bs4 import BeautifulSoup, Comment, NavigableString, Tag
import re

from .config import DEFAULT_DIVISION, SEASONS
from .models import Championship


SEASON_HEADINGS = ['h3', 'h4', 'strong']
BLOCK_HEADINGS = {'h1', 'h2', 'h3', 'h4', 'h5', 'h6'}
INLINE_TAGS = {'a', 'span', 'em', 'b', 'i', 'u', 'small', 'font', 'strong'}
LINE_BLOCKS = ['li', 'p', 'tr', 'dd', 'dt']

CHAMPION_LINE_RE = re.compile(r'\b((?:19|20)\d{2})[:\s\-–—]+(.+?)\s*$')
CHAMPION_TEXT_RE = re.compile(r'((?:19|20)\d{2})[:\s\-–—]+([^,\n]+)')


def _mentions_season(text: str) -> bool:
    lowered = text.lower()
    return any(season in lowered for season in SEASONS)


def _is_section_break(element: Tag) -> bool:
    """Any block heading, or a season-naming heading inside the element, ends the section."""
    if element.name in BLOCK_HEADINGS:
        return True
    if element.name == 'strong':
        return _mentions_season(element.get_text())
    return any(_mentions_season(h.get_text()) for h in element.find_all(SEASON_HEADINGS))


def _node_text(node: Tag) -> str:
    """Text of an element with ``<br>`` kept as a line break."""
    parts: List[str] = []
    for child in node.descendants:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif child.name == 'br':
            parts.append('\n')
    return ''.join(parts)


def _block_lines(block: Tag) -> List[str]:
    """Lines of a block element: one per list item/paragraph/row when it has them."""
    items = block.find_all(LINE_BLOCKS)
    texts = [_node_text(item) for item in items] if items else [_node_text(block)]
    return [line for text in texts for line in text.splitlines()]


def _has_text_after(element: Tag) -> bool:
    for sibling in element.next_siblings:
        if isinstance(sibling, Comment):
            continue
        if isinstance(sibling, NavigableString):
            if sibling.strip():
                return True
        elif sibling.get_text(strip=True):
            return True
    return False


def _section_lines(heading: Tag) -> Iterator[str]:
    """
    Yield the text lines following a heading until the next heading.

    Inline runs ("2025: <a>Fog City</a><br>") are joined into one line.
    A heading with nothing after it (``<p><strong>Winter</strong></p>``)
    is widened to its enclosing block first.
    """
    anchor = heading
    while (not _has_text_after(anchor) and anchor.parent is not None
           and anchor.parent.name not in ('body', '[document]')):
        anchor = anchor.parent

    lines: List[str] = []
    inline: List[str] = []
    for sibling in anchor.next_siblings:
        if isinstance(sibling, Comment):
            continue
        if isinstance(sibling, NavigableString):
            inline.append(str(sibling))
            continue
        if _is_section_break(sibling):
            break
        if sibling.name == 'br':
            inline.append('\n')
        elif sibling.name in INLINE_TAGS:
            inline.append(_node_text(sibling))
        else:
            lines.extend(''.join(inline).splitlines())
            inline = []
            lines.extend(_block_lines(sibling))
    lines.extend(''.join(inline).splitlines())

    for line in lines:
        line = ' '.join(line.split())
        if line:
            yield line


def _parse_by_headings(soup: BeautifulSoup) -> List[Championship]:
    championships: List[Championship] = []
    headings = soup.find_all(SEASON_HEADINGS)
    for season in SEASONS:
        for heading in headings:
            if season not in heading.get_text().lower():
                continue
            for line in _section_lines(heading):
                match = CHAMPION_LINE_RE.search(line)
                if match:
                    championships.append(Championship(
                        year=int(match.group(1)),
                        season=season,
                        division=DEFAULT_DIVISION,
                        champion=match.group(2).strip(),
                    ))
    return championships


def _parse_by_text(soup: BeautifulSoup) -> List[Championship]:
    championships: List[Championship] = []
    root = soup.body if soup.body is not None else soup
    page_text = root.get_text('\n')
    boundary = '|'.join(SEASONS)
    for season in SEASONS:
        section = re.search(rf'{season}[:\s]*([\s\S]*?)(?={boundary}|$)', page_text, re.IGNORECASE)
        if not section:
            continue
        for match in CHAMPION_TEXT_RE.finditer(section.group(1)):
            champion = ' '.join(match.group(2).split())
            if champion:
                championships.append(Championship(
                    year=int(match.group(1)),
                    season=season,
                    division=DEFAULT_DIVISION,
                    champion=champion,
                ))
    return championships


def dedupe_championships(championships: List[Championship]) -> List[Championship]:
    """Drop repeated (year, season, champion) entries, keeping the first."""
    seen: Set[Tuple[int, str, str]] = set()
    unique: List[Championship] = []
    for championship in championships:
        key = (championship.year, championship.season, championship.champion)
        if key not in seen:
            seen.add(key)
            unique.append(championship)
    return unique


def parse_championships(html_content: str) -> List[Championship]:
    """
    Parse every championship listed on the archives page.

    Parameters
    ----------
    html_content : str
        The HTML content of ``<base>/winter/archives``, which lists the
        champions of all three season types

    Returns
    -------
    List[Championship]
        Championships grouped by season type (winter, spring, summer) in
        page order; empty if neither strategy finds anything
    """
    soup = BeautifulSoup(html_content, 'html.parser')
    championships = _parse_by_headings(soup)
    if not championships:
        championships = _parse_by_text(soup)
    return dedupe_championships(championships)
