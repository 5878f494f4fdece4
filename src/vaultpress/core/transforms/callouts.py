"""Callout blockquotes: > [!type][+-] title  ->  styled, optionally collapsible boxes

Title resolution follows four states, checked in this order:

- MULTI_PARA       blockquote has several blocks: mapped title, first block dropped
- HEADER_OWN_LINE  header followed by a newline: mapped title, header line stripped
- HEADER_ONLY      nothing after '[!type][+-]': mapped title, paragraph dropped
- INLINE_TITLE     text follows on the header line: custom title (or mapped), header removed
"""

from dataclasses import dataclass
from enum import Enum

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_core import StateCore

from vaultpress.core.scan import match_callout_header
from vaultpress.core.utils.tokens import TokenEdits, child_blocks, closing_index, html_block


@dataclass(frozen=True)
class CalloutStyle:
    type:  str
    icon:  str
    title: str


class CalloutState(str, Enum):
    multi_para = "MULTI_PARA"
    header_own_line = "HEADER_OWN_LINE"
    header_only = "HEADER_ONLY"
    inline_title = "INLINE_TITLE"


@dataclass(frozen=True)
class Callout:
    style:       CalloutStyle
    title:       str
    state:       CalloutState
    collapsible: bool
    collapsed:   bool


CALLOUT_STYLES: dict[str, CalloutStyle] = {
    "note":      CalloutStyle("note", "info", "Note"),
    "tip":       CalloutStyle("tip", "lightbulb", "Tip"),
    "important": CalloutStyle("important", "star", "Important"),
    "warning":   CalloutStyle("warning", "triangle-alert", "Warning"),
    "caution":   CalloutStyle("caution", "circle-alert", "Caution"),
    "danger":    CalloutStyle("caution", "circle-x", "Danger"),
    "info":      CalloutStyle("note", "info", "Info"),
    "question":  CalloutStyle("important", "circle-help", "Question"),
    "success":   CalloutStyle("tip", "circle-check", "Success"),
    "failure":   CalloutStyle("caution", "circle-x", "Failure"),
    "bug":       CalloutStyle("caution", "bug", "Bug"),
    "example":   CalloutStyle("tip", "code", "Example"),
    "quote":     CalloutStyle("note", "quote", "Quote"),
    "abstract":  CalloutStyle("important", "file-text", "Abstract"),
    "summary":   CalloutStyle("important", "file-text", "Summary"),
    "tldr":      CalloutStyle("important", "file-text", "TL;DR"),
}

# Lucide icon paths
ICON_PATHS: dict[str, str] = {
    "info": '<circle cx="12" cy="12" r="10"/><path d="M12 16v-4"/><path d="m12 8 .01 0"/>',
    "lightbulb": (
        '<path d="M15 14c.2-1 .7-1.7 1.5-2.5 1-.9 1.5-2.2 1.5-3.5A6 6 0 0 0 6 8c0 1 .2 2.2 1.5 3.5.7.7 1.3 1.5 1.5 2.5"/>'
        '<path d="M9 18h6"/><path d="M10 22h4"/>'
    ),
    "star": '<polygon points="12,2 15.09,8.26 22,9.27 17,14.14 18.18,21.02 12,17.77 5.82,21.02 7,14.14 2,9.27 8.91,8.26"/>',
    "triangle-alert": (
        '<path d="m21.73 18-8-14a2 2 0 0 0-3.48 0l-8 14A2 2 0 0 0 4 21h16a2 2 0 0 0 1.73-3Z"/>'
        '<path d="M12 9v4"/><path d="m12 17 .01 0"/>'
    ),
    "circle-alert": '<circle cx="12" cy="12" r="10"/><path d="M12 8v4"/><path d="m12 16 .01 0"/>',
    "circle-x": '<circle cx="12" cy="12" r="10"/><path d="m15 9-6 6"/><path d="m9 9 6 6"/>',
    "circle-help": (
        '<circle cx="12" cy="12" r="10"/><path d="M9.09 9a3 3 0 0 1 5.83 1c0 2-3 3-3 3"/><path d="M12 17h.01"/>'
    ),
    "circle-check": '<circle cx="12" cy="12" r="10"/><path d="m9 12 2 2 4-4"/>',
    "bug": (
        '<path d="m8 2 1.88 1.88"/><path d="M14.12 3.88 16 2"/><path d="M9 7.13v-1a3.003 3.003 0 1 1 6 0v1"/>'
        '<path d="M12 20c-3.3 0-6-2.7-6-6v-3a4 4 0 0 1 4-4h4a4 4 0 0 1 4 4v3c0 3.3-2.7 6-6 6"/>'
        '<path d="M12 20v-9"/><path d="M6.53 9C4.6 8.8 3 7.1 3 5"/><path d="M6 13H2"/>'
        '<path d="M3 21c0-2.1 1.7-3.9 3.8-4"/><path d="M20.97 5c0 2.1-1.6 3.8-3.5 4"/>'
        '<path d="M22 13h-4"/><path d="M17.2 17c2.1.1 3.8 1.9 3.8 4"/>'
    ),
    "code": '<polyline points="16 18 22 12 16 6"/><polyline points="8 6 2 12 8 18"/>',
    "quote": (
        '<path d="M3 21c3 0 7-1 7-8V5c0-1.25-.756-2.017-2-2H4c-1.25 0-2 .75-2 1.972V11c0 1.25.75 2 2 2 '
        '1 0 1 0 1 1v1c0 1-1 2-2 2s-1 .008-1 1.031V20c0 1 0 1 1 1z"/>'
        '<path d="M15 21c3 0 7-1 7-8V5c0-1.25-.757-2.017-2-2h-4c-1.25 0-2 .75-2 1.972V11c0 1.25.75 2 2 2h.75'
        'c0 2.25.25 4-2.75 4v3c0 1 0 1 1 1z"/>'
    ),
    "file-text": (
        '<path d="M15 2H6a2 2 0 0 0-2 2v16a2 2 0 0 0 2 2h12a2 2 0 0 0 2-2V7Z"/><path d="M14 2v4a2 2 0 0 0 2 2h4"/>'
        '<path d="M10 9H8"/><path d="M16 13H8"/><path d="M16 17H8"/>'
    ),
}

TOGGLE_BUTTON = (
    '<button class="callout-toggle" aria-expanded="{expanded}" aria-label="Toggle callout content">'
    '<svg class="callout-toggle-icon" width="16" height="16" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    '<polyline points="6,9 12,15 18,9"></polyline></svg></button>'
)


def callout_style(keyword: str) -> CalloutStyle:
    """Map a callout keyword to its style; unknown keywords render as notes."""
    return CALLOUT_STYLES.get(keyword.lower()) or CalloutStyle("note", "info", keyword[:1].upper() + keyword[1:])


def icon_svg(icon: str) -> str:
    path = ICON_PATHS.get(icon, ICON_PATHS["info"])
    return (
        '<svg width="16" height="16" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
        f'stroke-linecap="round" stroke-linejoin="round" class="callout-icon">{path}</svg>'
    )


def open_html(callout: Callout) -> str:
    classes = f"callout callout-{callout.style.type}"
    if callout.collapsible:
        classes += " callout-collapsible"
    if callout.collapsed:
        classes += " callout-collapsed"
    toggle = TOGGLE_BUTTON.format(expanded=str(not callout.collapsed).lower()) if callout.collapsible else ""
    hidden = ' style="display: none;"' if callout.collapsed else ""
    return (
        f'<div class="{classes}">'
        f'<div class="callout-title">{icon_svg(callout.style.icon)}'
        f'<span>{escapeHtml(callout.title)}</span>{toggle}</div>'
        f'<div class="callout-content"{hidden}>'
    )


CLOSE_HTML = "</div></div>"


def parse_callout(first_text: str, block_count: int) -> tuple[Callout, str | None] | None:
    """Classify a blockquote by its first paragraph's source text.

    Returns (callout, remaining paragraph text) where None means the first
    paragraph is dropped, or None when the blockquote is not a callout.
    """
    header = match_callout_header(first_text)
    if header is None:
        return None
    style = callout_style(header.keyword)
    rest = first_text[header.end:]

    if block_count > 1:
        state, title, remaining = CalloutState.multi_para, style.title, None
    elif header.own_line:
        state, title, remaining = CalloutState.header_own_line, style.title, rest
    elif header.title is None and not rest.strip():
        state, title, remaining = CalloutState.header_only, style.title, None
    else:
        remaining = rest.strip() or None
        state, title = CalloutState.inline_title, header.title or style.title

    callout = Callout(
        style=style,
        title=title,
        state=state,
        collapsible=header.collapse in ("+", "-"),
        collapsed=header.collapse == "-",
    )
    return callout, remaining


def _callouts_rule(state: StateCore) -> None:
    tokens = state.tokens
    edits = TokenEdits()
    for idx, token in enumerate(tokens):
        if token.type != 'blockquote_open':
            continue
        close = closing_index(tokens, idx)
        blocks = child_blocks(tokens, idx, close)
        if not blocks or tokens[blocks[0][0]].type != 'paragraph_open':
            continue
        first_start, first_end = blocks[0]
        inline = tokens[first_start + 1]
        parsed = parse_callout(inline.content, len(blocks))
        if parsed is None:
            continue
        callout, remaining = parsed
        edits.replace(idx, idx + 1, [html_block(open_html(callout), token.level)])
        if remaining is None:
            edits.remove(first_start, first_end)
        else:
            inline.content = remaining
        edits.replace(close, close + 1, [html_block(CLOSE_HTML, token.level)])
    edits.commit(tokens)


def callouts_plugin(md: MarkdownIt) -> None:
    """Turn callout blockquotes into callout markup (runs on block tokens)."""
    md.core.ruler.after("obsidian_comments", "callouts", _callouts_rule)
