"""Parser for University of Wyoming sounding pages (TEXT:LIST).

Each observation is an <h2> heading ("40179 Bet Dagan Observations at 00Z 20
Feb 2022") followed by a <pre> block holding the level table.
"""

import logging

from bs4 import BeautifulSoup, PageElement, Tag

from airsounds.errors import ParseError
from airsounds.ingest.levels import TEXT_LIST_LAYOUT, Tokenizer, append_row
from airsounds.ingest.units import parse_zoned_header
from airsounds.models.sounding import ProfileBuilder, VerticalProfile

logger = logging.getLogger(__name__)

# Rule, column names, units, rule.
TABLE_HEADER_LINES = 4


def find_element(node: PageElement | None, tag: str | list[str]) -> Tag | None:
    """Return node itself if it is a matching element, else the first match after it.

    The search goes through node's descendants, then on through the rest of the
    document in order.
    """
    if node is None:
        return None
    names = [tag] if isinstance(tag, str) else tag
    if isinstance(node, Tag) and node.name in names:
        logger.debug("Found <%s>", node.name)
        return node
    found = node.find_next(names)
    if found is not None:
        logger.debug("Found <%s>", found.name)
    return found


def parse_sounding_page(
    data: bytes,
    reference_zone: str = "Asia/Jerusalem",
    tokenizer: Tokenizer | str = Tokenizer.WHITESPACE,
    station: int | None = None,
) -> list[VerticalProfile]:
    """Return one profile per heading/table pair, in document order.

    Running out of headings ends the page; a heading without its table is an
    error.
    """
    tokenizer = Tokenizer(tokenizer)
    soup = BeautifulSoup(data, "html.parser")
    body = soup.body
    if body is None:
        logger.info("No <body> in sounding page")
        return []

    profiles: list[VerticalProfile] = []
    node: PageElement | None = body
    while True:
        heading = find_element(node, "h2")
        if heading is None:
            break
        table = find_element(heading.next_element, ["pre", "h2"])
        if table is None or table.name != "pre":
            raise ParseError("no <pre> table after heading", heading.get_text())
        profiles.append(
            parse_table(heading, table, reference_zone, tokenizer, station)
        )
        # Resume after the table's own text.
        node = table.next_sibling or table.find_next()

    logger.info("Parsed %d sounding tables", len(profiles))
    return profiles


def parse_table(
    heading: Tag,
    table: Tag,
    reference_zone: str = "Asia/Jerusalem",
    tokenizer: Tokenizer = Tokenizer.WHITESPACE,
    station: int | None = None,
) -> VerticalProfile:
    title = heading.get_text(" ", strip=True)
    if not title:
        raise ParseError("expected text within the h2 node", str(heading))
    builder = ProfileBuilder(
        time=parse_zoned_header(title, reference_zone),
        station=_station_from_title(title, station),
    )

    lines = table.get_text().splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        raise ParseError("empty sounding table", title)

    for line in lines[TABLE_HEADER_LINES:]:
        if not line.strip():
            continue
        append_row(builder, line, TEXT_LIST_LAYOUT, tokenizer)

    profile = builder.build()
    logger.info(
        "Found sounding for time %s: %d levels, %d wind levels",
        profile.time.isoformat(), profile.level_count, profile.wind_level_count,
    )
    return profile


def _station_from_title(title: str, default: int | None) -> int | None:
    first = title.split(maxsplit=1)[0]
    if first.isdigit():
        return int(first)
    return default
