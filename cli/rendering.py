"""Utilities for rendering scrape records in the CLI."""

from __future__ import annotations

from typing import Any

_PREVIEW_CHARS = 400


def render_record(record: dict[str, Any], preview: int = _PREVIEW_CHARS) -> str:
    """Render a wire-format scrape record as a short human-readable block.

    Args:
        record: Output of ``ScrapeResult.to_dict()`` or ``ScrapeRow.as_record()``.
        preview: Maximum characters of page content to show.
    """
    meta = record.get("metadata", {})
    lines = [f"id       : {record.get('id', '')}", f"url      : {record.get('url', '')}"]

    if record.get("status") == "error":
        lines.append("status   : error")
        lines.append(f"error    : {record.get('errorMessage', '')}")
        lines.append(f"duration : {meta.get('scrapeDuration', 0)} ms")
        return "\n".join(lines)

    lines += [
        "status   : success",
        f"title    : {record.get('title', '')}",
        f"summary  : {record.get('description', '')}",
        (
            f"counts   : {meta.get('wordCount', 0)} words, "
            f"{meta.get('paragraphCount', 0)} paragraphs, "
            f"{meta.get('linkCount', 0)} links, "
            f"{meta.get('imageCount', 0)} images"
        ),
        f"duration : {meta.get('scrapeDuration', 0)} ms",
    ]

    extracted = record.get("extractedData")
    if extracted:
        lines.append("")
        lines.append("Headings:")
        lines += [f"  - {h}" for h in extracted.get("headings", [])] or ["  (none)"]

    if record.get("aiAnalysis"):
        lines.append("")
        lines.append("AI analysis:")
        lines.append(record["aiAnalysis"])

    content = record.get("content", "")
    if content:
        lines.append("")
        lines.append(content[:preview] + ("…" if len(content) > preview else ""))

    return "\n".join(lines)


def render_row_summary(record: dict[str, Any]) -> str:
    """One-line listing entry: id, status, and title or error message."""
    label = record.get("title") if record.get("status") == "success" else record.get("errorMessage")
    return f"  {record.get('id', '')}  [{record.get('status', '?')}]  {record.get('url', '')}  {label!r}"
