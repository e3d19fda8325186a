"""Aozora inline annotation handling.

The body is scanned once, left to right. At every position where an
annotation can start, the rules of :data:`ANNOTATION_RULES` are tried in
table order and the first one that accepts the position wins. Rule order is
significant: explicit ruby (``｜base《gloss》``) must win over the implicit
form, and every specific ``［＃...］`` directive must be tried before the
catch-all that deletes unknown directives.

Scanning produces a small node tree (indent blocks nest), which is then
rendered for one of three targets:

``RENDER``
    HTML fragments (``<ruby>``, ``<em>``, headings, indent containers).
``PLAIN_STRIP``
    Base text only; line structure kept so line/column positions stay useful.
``SPEECH``
    Plain text collapsed into a single run of prose for text-to-speech.

Malformed directives never raise; whatever no rule accepts is kept as text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import html
import re
from typing import Callable, Sequence, Union


class TransformMode(str, Enum):
    RENDER = "render"
    SPEECH = "speech"
    PLAIN_STRIP = "plain"


@dataclass(slots=True)
class Text:
    text: str


@dataclass(slots=True)
class Ruby:
    base: str
    gloss: str
    explicit: bool = False


@dataclass(slots=True)
class Emphasis:
    children: list["Node"] = field(default_factory=list)


@dataclass(slots=True)
class Bold:
    children: list["Node"] = field(default_factory=list)


@dataclass(slots=True)
class Heading:
    level: int
    children: list["Node"] = field(default_factory=list)


@dataclass(slots=True)
class PageBreak:
    pass


@dataclass(slots=True)
class IndentBlock:
    level: int
    children: list["Node"] = field(default_factory=list)


@dataclass(slots=True)
class ParagraphIndent:
    width: int


@dataclass(slots=True)
class LineBreak:
    pass


Node = Union[Text, Ruby, Emphasis, Bold, Heading, PageBreak, IndentBlock, ParagraphIndent, LineBreak]

_IDEOGRAPH_CLASS = "\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\U00020000-\U0002fa1f々〆〇ヶ"
_HIRAGANA_CLASS = "\u3041-\u3096"
_KATAKANA_CLASS = "\u30a1-\u30faー"
_ALNUM_CLASS = "A-Za-z0-9\uff10-\uff19\uff21-\uff3a\uff41-\uff5a"

# Candidate ruby bases, most preferred first. A kanji stem with okurigana
# (見出し) is used only when the text does not end in a bare kanji run.
_RUBY_BASE_PATTERNS = (
    re.compile(f"[{_IDEOGRAPH_CLASS}]+$"),
    re.compile(f"[{_IDEOGRAPH_CLASS}]+[{_HIRAGANA_CLASS}]+$"),
    re.compile(f"[{_KATAKANA_CLASS}]+$"),
    re.compile(f"[{_ALNUM_CLASS}]+$"),
)
_TRIGGER_RE = re.compile("[｜|《［（\n\u3000]")
_INDENT_OPEN = "［＃ここから([0-9０-９〇一二三四五六七八九十]+)字下げ］"
_INDENT_END = "［＃ここで字下げ終わり］"
_INDENT_MARKER_RE = re.compile(f"{_INDENT_OPEN}|{_INDENT_END}")
_EMPHASIS_END = "［＃傍点終わり］"
_BLANK_RUN_RE = re.compile("\n(?:[ \t\u3000]*\n){2,}")
_WHITESPACE_RE = re.compile(r"\s+")

_KANJI_DIGITS = {"〇": 0, "一": 1, "二": 2, "三": 3, "四": 4, "五": 5, "六": 6, "七": 7, "八": 8, "九": 9}
_HEADING_LEVELS = {"大": 1, "中": 2, "小": 3}
_HEADING_CLASSES = {1: "chapter-title", 2: "section-title", 3: "subsection-title"}


def _parse_count(raw: str) -> int:
    """Parse ASCII, full-width or kanji (up to 99) counts such as ``２`` or ``十二``."""

    if raw.isdigit():
        return int(raw)
    if "十" in raw:
        tens_raw, _, ones_raw = raw.partition("十")
        tens = _KANJI_DIGITS.get(tens_raw, 0) if tens_raw else 1
        ones = _KANJI_DIGITS.get(ones_raw, 0) if ones_raw else 0
        return tens * 10 + ones
    value = 0
    for char in raw:
        value = value * 10 + _KANJI_DIGITS.get(char, 0)
    return value


class _SegmentBuilder:
    """Accumulates nodes for one segment (document or indent block)."""

    def __init__(self, *, at_line_start: bool) -> None:
        self.nodes: list[Node] = []
        self._buffer: list[str] = []
        self._line_has_content = not at_line_start

    @property
    def at_line_start(self) -> bool:
        return not self._line_has_content

    def add_text(self, text: str) -> None:
        if text:
            self._buffer.append(text)
            self._line_has_content = True

    def add(self, node: Node) -> None:
        self.flush()
        self.nodes.append(node)
        self._line_has_content = not isinstance(node, LineBreak)

    def flush(self) -> None:
        if not self._buffer:
            return
        joined = "".join(self._buffer)
        self._buffer = []
        if self.nodes and isinstance(self.nodes[-1], Text):
            self.nodes[-1] = Text(self.nodes[-1].text + joined)
        else:
            self.nodes.append(Text(joined))

    def take_ruby_base(self) -> str:
        """Detach the ruby base that ends the pending text, preferring a bare ideograph run."""

        joined = "".join(self._buffer)
        for pattern in _RUBY_BASE_PATTERNS:
            match = pattern.search(joined)
            if match is not None:
                remainder = joined[: match.start()]
                self._buffer = [remainder] if remainder else []
                return match.group(0)
        return ""

    def claim_tail(self, target: str) -> list[Node] | None:
        """Detach the trailing nodes whose visible text is exactly *target*.

        Text nodes may be split. Ruby nodes are claimed whole, including one
        whose base only ends with what is left of *target*. Returns ``None``
        (and leaves the builder untouched) when the preceding prose does not
        end with *target*.
        """

        self.flush()
        remaining = target
        index = len(self.nodes)
        split_at: int | None = None

        while remaining and index > 0:
            node = self.nodes[index - 1]
            if isinstance(node, Text):
                if node.text.endswith(remaining):
                    split_at = len(node.text) - len(remaining)
                    remaining = ""
                elif remaining.endswith(node.text):
                    remaining = remaining[: -len(node.text)]
                else:
                    return None
            elif isinstance(node, Ruby) and remaining.endswith(node.base):
                remaining = remaining[: -len(node.base)]
            elif isinstance(node, Ruby) and node.base.endswith(remaining):
                remaining = ""
            else:
                return None
            index -= 1

        if remaining:
            return None

        claimed = self.nodes[index:]
        del self.nodes[index:]
        if split_at:
            head = claimed[0]
            assert isinstance(head, Text)
            self.nodes.append(Text(head.text[:split_at]))
            claimed[0] = Text(head.text[split_at:])
        return claimed


RuleHandler = Callable[["_Scanner", _SegmentBuilder, "re.Match[str]", int], Union[int, None]]


@dataclass(frozen=True, slots=True)
class AnnotationRule:
    """A recognizer for one annotation syntax.

    ``handler`` receives the match and returns the position where scanning
    resumes, or ``None`` to decline so the next rule in the table is tried.
    """

    name: str
    pattern: re.Pattern[str]
    handler: RuleHandler


def _explicit_ruby(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    builder.add(Ruby(base=match.group(1), gloss=match.group(2), explicit=True))
    return match.end()


def _implicit_ruby(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    base = builder.take_ruby_base()
    if not base:
        return None
    builder.add(Ruby(base=base, gloss=match.group(1)))
    return match.end()


def _claimed_or_literal(builder: _SegmentBuilder, target: str) -> list[Node]:
    claimed = builder.claim_tail(target)
    return claimed if claimed is not None else [Text(target)]


def _emphasis(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    builder.add(Emphasis(children=_claimed_or_literal(builder, match.group(1))))
    return match.end()


def _emphasis_block(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    close_start = scanner.text.find(_EMPHASIS_END, match.end(), end)
    if close_start == -1:
        return None
    builder.add(Emphasis(children=scanner.parse_segment(match.end(), close_start)))
    return close_start + len(_EMPHASIS_END)


def _bold(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    builder.add(Bold(children=_claimed_or_literal(builder, match.group(1))))
    return match.end()


def _page_break(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    builder.add(PageBreak())
    return match.end()


def _indent_block(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    close = scanner.find_indent_close(match.end(), end)
    if close is None:
        return None
    close_start, close_end = close
    children = scanner.parse_segment(match.end(), close_start)
    builder.add(IndentBlock(level=_parse_count(match.group(1)), children=children))
    return close_end


def _heading(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    level = _HEADING_LEVELS[match.group(2)]
    builder.add(Heading(level=level, children=_claimed_or_literal(builder, match.group(1))))
    return match.end()


def _inline_note(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    builder.add_text("（")
    return match.start(1)


def _drop_directive(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    return match.end()


def _paragraph_indent(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    if not builder.at_line_start:
        return None
    builder.add(ParagraphIndent(width=len(match.group(0))))
    return match.end()


def _line_break(scanner: "_Scanner", builder: _SegmentBuilder, match: "re.Match[str]", end: int) -> int | None:
    builder.add(LineBreak())
    return match.end()


ANNOTATION_RULES: tuple[AnnotationRule, ...] = (
    AnnotationRule("explicit_ruby", re.compile(r"[｜|]([^｜|《》\n]+)《([^《》\n]+)》"), _explicit_ruby),
    AnnotationRule("implicit_ruby", re.compile(r"《([^《》\n]+)》"), _implicit_ruby),
    AnnotationRule("emphasis_dots", re.compile(r"［＃「([^」\n]+)」に[^」］\n]*傍点］"), _emphasis),
    AnnotationRule("emphasis_block", re.compile("［＃傍点］"), _emphasis_block),
    AnnotationRule("bold", re.compile(r"［＃「([^」\n]+)」は太字］"), _bold),
    AnnotationRule("page_break", re.compile(r"［＃(?:改ページ|改丁|改段|改見開き)］"), _page_break),
    AnnotationRule("indent_block", re.compile(_INDENT_OPEN), _indent_block),
    AnnotationRule("heading", re.compile(r"［＃「([^」\n]+)」は([大中小])見出し］"), _heading),
    AnnotationRule("directive", re.compile(r"［＃[^］\n]*］"), _drop_directive),
    AnnotationRule("inline_note", re.compile(r"（注：([^）\n]*)）"), _inline_note),
    AnnotationRule("paragraph_indent", re.compile("\u3000+(?=[^\u3000\n])"), _paragraph_indent),
    AnnotationRule("line_break", re.compile("\n"), _line_break),
)


class _Scanner:
    def __init__(self, text: str, rules: Sequence[AnnotationRule]) -> None:
        self.text = text
        self._rules = rules

    def parse_segment(self, start: int, end: int) -> list[Node]:
        text = self.text
        builder = _SegmentBuilder(at_line_start=start == 0 or text[start - 1] == "\n")
        pos = start

        while pos < end:
            trigger = _TRIGGER_RE.search(text, pos, end)
            if trigger is None:
                builder.add_text(text[pos:end])
                break

            builder.add_text(text[pos : trigger.start()])
            pos = trigger.start()

            for rule in self._rules:
                match = rule.pattern.match(text, pos, end)
                if match is None:
                    continue
                resume = rule.handler(self, builder, match, end)
                if resume is not None:
                    pos = resume
                    break
            else:
                builder.add_text(text[pos])
                pos += 1

        builder.flush()
        return builder.nodes

    def find_indent_close(self, start: int, end: int) -> tuple[int, int] | None:
        depth = 1
        for marker in _INDENT_MARKER_RE.finditer(self.text, start, end):
            if marker.group(0) == _INDENT_END:
                depth -= 1
                if depth == 0:
                    return marker.start(), marker.end()
            else:
                depth += 1
        return None


class AnnotationTransformer:
    """Rewrite Aozora annotations for display, speech or plain-text use."""

    def __init__(self, rules: Sequence[AnnotationRule] | None = None) -> None:
        self._rules = tuple(rules) if rules is not None else ANNOTATION_RULES

    @property
    def rules(self) -> tuple[AnnotationRule, ...]:
        return self._rules

    def parse(self, body: str) -> list[Node]:
        return _Scanner(body, self._rules).parse_segment(0, len(body))

    def transform(self, body: str, mode: TransformMode | str = TransformMode.RENDER) -> str:
        target = TransformMode(mode)
        return self.render(self.parse(body), target)

    def render(self, nodes: Sequence[Node], mode: TransformMode | str) -> str:
        target = TransformMode(mode)
        output = _BLANK_RUN_RE.sub("\n\n", _render_nodes(nodes, target)).strip("\n")

        if target is TransformMode.RENDER:
            return output.replace("\n", "<br>\n")
        if target is TransformMode.SPEECH:
            return _WHITESPACE_RE.sub(" ", output).strip()
        return output


def _render_nodes(nodes: Sequence[Node], mode: TransformMode) -> str:
    return "".join(_render_node(node, mode) for node in nodes)


def _render_node(node: Node, mode: TransformMode) -> str:
    render = mode is TransformMode.RENDER

    if isinstance(node, Text):
        return html.escape(node.text, quote=False) if render else node.text
    if isinstance(node, LineBreak):
        return "\n"
    if isinstance(node, Ruby):
        if not render:
            return node.base
        return f"<ruby>{html.escape(node.base, quote=False)}<rt>{html.escape(node.gloss, quote=False)}</rt></ruby>"
    if isinstance(node, ParagraphIndent):
        return f'<span class="indent-{node.width}"></span>' if render else ""
    if isinstance(node, PageBreak):
        return '<div class="page-break"></div>' if render else "\n"

    if not isinstance(node, (Emphasis, Bold, Heading, IndentBlock)):
        raise TypeError(f"Unsupported node type: {type(node).__name__}")

    inner = _render_nodes(node.children, mode)
    if not render:
        return inner
    if isinstance(node, Emphasis):
        return f'<em class="emphasis-dots">{inner}</em>'
    if isinstance(node, Bold):
        return f"<strong>{inner}</strong>"
    if isinstance(node, Heading):
        css_class = _HEADING_CLASSES[node.level]
        return f'<h{node.level} class="{css_class}">{inner}</h{node.level}>'
    content = inner.strip("\n")
    return f'<div class="indent-{node.level}">{content}</div>'
