"""Markdown codec for importing and exporting posts as .md files."""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

import markdown
import yaml
from markdownify import ATX, markdownify

from .database.models import DBFeedItem
from .dates import date_stamp, now_iso, parse_datetime, to_iso

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
DATED_FILENAME_RE = re.compile(r"\d{4}-\d{2}-\d{2}-(.*?)\.md$", re.IGNORECASE)

# Per-key patterns used when the block is not valid YAML
FRONTMATTER_KEY_RES = {
    "title": re.compile(r'^title:[ \t]*"?(.*?)"?[ \t\r]*$', re.MULTILINE),
    "date": re.compile(r"^date:[ \t]*(.*?)[ \t\r]*$", re.MULTILINE),
    "private": re.compile(r"^private:[ \t]*(true|false)[ \t\r]*$", re.MULTILINE),
}

DUPLICATE_THRESHOLD = 0.8


@dataclass
class MarkdownPost:
    """A post recovered from a Markdown file."""
    title: str
    html: str
    pub_date: str
    is_private: bool


def is_markdown_filename(filename: str) -> bool:
    return filename.lower().endswith(".md")


def split_frontmatter(text: str) -> tuple[dict | None, str]:
    """
    Separate a leading ``---`` delimited YAML block from the body.

    Returns (fields, body). fields is None when there is no frontmatter. A
    block that is not a valid YAML mapping (an unquoted colon in a title, an
    impossible calendar date) is read line by line instead, keeping whatever
    ``title``, ``date`` and ``private`` lines it has as strings.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return None, text

    block = match.group(1)
    try:
        fields = yaml.safe_load(block)
    except (yaml.YAMLError, ValueError):
        fields = None
    if not isinstance(fields, dict):
        fields = _scan_frontmatter(block)
    return fields, text[match.end():]


def _scan_frontmatter(block: str) -> dict:
    fields = {}
    for key, pattern in FRONTMATTER_KEY_RES.items():
        found = pattern.search(block)
        if found:
            fields[key] = found.group(1)
    return fields


def title_from_filename(filename: str) -> str:
    """
    Derive a title from a file name.

    ``2024-01-15-my-first-post.md`` becomes ``My First Post``; any other name
    loses its extension and has hyphens replaced by spaces.
    """
    name = PurePosixPath(filename.replace("\\", "/")).name
    match = DATED_FILENAME_RE.search(name)
    if match:
        title = match.group(1).replace("-", " ")
        return re.sub(r"\b\w", lambda m: m.group().upper(), title)
    return re.sub(r"\.md$", "", name, flags=re.IGNORECASE).replace("-", " ")


def _parse_private(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def parse_markdown_post(text: str, filename: str) -> MarkdownPost:
    """Parse a Markdown file (with optional frontmatter) into a post."""
    title = ""
    pub_date = now_iso()
    is_private = False

    fields, body = split_frontmatter(text)
    if fields:
        if fields.get("title") is not None:
            title = str(fields["title"]).strip()
        if "date" in fields:
            parsed = parse_datetime(fields["date"])
            if parsed is not None:
                pub_date = to_iso(parsed)
        is_private = _parse_private(fields.get("private"))

    if not title:
        title = title_from_filename(filename)

    return MarkdownPost(
        title=title,
        html=markdown_to_html(body),
        pub_date=pub_date,
        is_private=is_private,
    )


def markdown_to_html(text: str) -> str:
    return markdown.markdown(text, extensions=["fenced_code", "tables"])


def html_to_markdown(html: str) -> str:
    return markdownify(
        html,
        heading_style=ATX,
        strong_em_symbol="*",
        bullets="-",
    ).strip() + "\n"


# ─────────────────────────────────────────────────────────────
# Duplicate detection
# ─────────────────────────────────────────────────────────────

def similarity(a: str, b: str) -> float:
    """
    Position-wise character similarity.

    Counts equal characters at the same index over the overlapping prefix and
    divides by the longer length. Not permutation-invariant.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    same = sum(1 for x, y in zip(a, b) if x == y)
    return same / longest


def is_duplicate_post(existing: DBFeedItem, post: MarkdownPost) -> bool:
    """Same title (case-insensitive) and more than 80% similar plain text."""
    if existing.title.lower() != post.title.lower():
        return False
    existing_text = strip_tags(existing.content)
    new_text = strip_tags(post.html)
    return similarity(existing_text, new_text) > DUPLICATE_THRESHOLD


def strip_tags(html: str) -> str:
    """Remove tags without normalizing whitespace."""
    return re.sub(r"<[^>]*>", "", html or "").strip()


# ─────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────

def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]", "-", title, flags=re.IGNORECASE)
    return re.sub(r"-+", "-", slug).lower()


def markdown_filename(item: DBFeedItem) -> str:
    return f"{date_stamp(item.pub_date)}-{slugify(item.title)}.md"


def render_frontmatter(item: DBFeedItem) -> str:
    title = item.title.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")
    parsed = parse_datetime(item.pub_date)
    date = to_iso(parsed) if parsed else item.pub_date
    private = "true" if item.is_private else "false"
    return f'---\ntitle: "{title}"\ndate: {date}\nprivate: {private}\n---\n\n'


def render_markdown_post(item: DBFeedItem, include_frontmatter: bool = True) -> str:
    """Render an own post as a Markdown document."""
    body = html_to_markdown(item.content)
    if include_frontmatter:
        return render_frontmatter(item) + body
    return body