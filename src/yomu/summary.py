"""Hand-off of plain text to an external summarization collaborator.

Nothing here calls a model. This module bounds the excerpt and builds the
request text; a :class:`Summarizer` implementation owned by the host
application does the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from yomu.config import DEFAULT_SUMMARY_MAX_CHARS


TRUNCATION_MARKER = "\n\n（以下省略）"
UNKNOWN_TITLE = "無題"
UNKNOWN_AUTHOR = "不明"

SUMMARY_SYSTEM_PROMPT = (
    "あなたは日本文学の専門家です。与えられた作品の内容を読み、簡潔で魅力的なあらすじを日本語で生成してください。\n\n"
    "ルール:\n"
    "- あらすじは300～500文字程度でまとめてください\n"
    "- 物語の主要なテーマやメッセージを含めてください\n"
    "- ネタバレは避け、読者の興味を引くように書いてください\n"
    "- 文学的な表現を使い、作品の雰囲気を伝えてください\n"
    "- プレーンテキストで出力してください（マークダウン記法や特殊記号は使用しない）\n"
    "- 段落を分けて読みやすくしてください"
)


def truncate_for_summary(text: str, max_chars: int = DEFAULT_SUMMARY_MAX_CHARS) -> str:
    if max_chars < 1:
        raise ValueError("max_chars must be >= 1")
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


@dataclass(frozen=True, slots=True)
class SummaryRequest:
    title: str | None
    author: str | None
    excerpt: str

    @classmethod
    def from_plain_text(
        cls,
        text: str,
        *,
        title: str | None = None,
        author: str | None = None,
        max_chars: int = DEFAULT_SUMMARY_MAX_CHARS,
    ) -> "SummaryRequest":
        return cls(title=title, author=author, excerpt=truncate_for_summary(text, max_chars))

    def build_prompt(self) -> str:
        return (
            "以下の作品のあらすじをプレーンテキストで生成してください。"
            "マークダウン記法（**や*など）は使用しないでください。\n\n"
            f"タイトル: {self.title or UNKNOWN_TITLE}\n"
            f"著者: {self.author or UNKNOWN_AUTHOR}\n\n"
            f"本文:\n{self.excerpt}"
        )

    def to_messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {"role": "user", "content": self.build_prompt()},
        ]


@runtime_checkable
class Summarizer(Protocol):
    """External collaborator that turns a request into a short synopsis."""

    def summarize(self, request: SummaryRequest) -> str:
        """Return synopsis text for ``request``."""
