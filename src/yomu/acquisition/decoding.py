"""Best-effort decoding of legacy Japanese text payloads.

The corpus is distributed as Shift_JIS (in practice the cp932 superset), so
that is tried first. Decoding is an ordered list of strategies; the last one
decodes as UTF-8 with replacement characters and therefore always succeeds,
which keeps :meth:`LegacyTextDecoder.decode` free of exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
import codecs
import logging
from typing import Protocol, Sequence, runtime_checkable

from charset_normalizer import from_bytes

from yomu.text.models import DecodedDocument, DetectedEncoding


logger = logging.getLogger(__name__)

_SHIFT_JIS_FAMILY = {"shift_jis", "cp932", "shift_jis_2004", "shift_jisx0213", "ms932", "sjis"}
_UTF8_FAMILY = {"utf_8", "utf_8_sig"}


def _classify(encoding: str) -> DetectedEncoding:
    try:
        name = codecs.lookup(encoding).name.replace("-", "_")
    except LookupError:
        return DetectedEncoding.UNKNOWN
    if name in _SHIFT_JIS_FAMILY:
        return DetectedEncoding.SHIFT_JIS
    if name in _UTF8_FAMILY:
        return DetectedEncoding.UTF8
    return DetectedEncoding.UNKNOWN


def _normalize_newlines(text: str) -> str:
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


@dataclass(frozen=True, slots=True)
class DecodeAttempt:
    """Successful output of one decoding strategy."""

    text: str
    encoding: DetectedEncoding
    encoding_name: str


@runtime_checkable
class DecodeStrategy(Protocol):
    """One way of turning bytes into text; ``None`` means "not applicable"."""

    def try_decode(self, raw: bytes) -> DecodeAttempt | None:
        """Return decoded text or ``None`` to let the next strategy try."""


class StrictCodecStrategy:
    """Decode with a named codec, declining on any decode error."""

    def __init__(self, encoding: str) -> None:
        codecs.lookup(encoding)
        self._encoding = encoding

    def try_decode(self, raw: bytes) -> DecodeAttempt | None:
        try:
            text = raw.decode(self._encoding)
        except UnicodeDecodeError:
            return None
        return DecodeAttempt(text=text, encoding=_classify(self._encoding), encoding_name=self._encoding)


class ShiftJISStrategy(StrictCodecStrategy):
    """Strict cp932; declines payloads that open with a UTF-8 byte-order mark."""

    def __init__(self) -> None:
        super().__init__("cp932")

    def try_decode(self, raw: bytes) -> DecodeAttempt | None:
        if raw.startswith(codecs.BOM_UTF8):
            return None
        return super().try_decode(raw)


class Utf8Strategy(StrictCodecStrategy):
    def __init__(self) -> None:
        super().__init__("utf-8-sig")


class CharsetNormalizerStrategy:
    """Ask charset-normalizer for its best guess."""

    def try_decode(self, raw: bytes) -> DecodeAttempt | None:
        best = from_bytes(raw).best()
        if best is None or not best.encoding:
            return None
        return DecodeAttempt(text=str(best), encoding=_classify(best.encoding), encoding_name=best.encoding)


class ReplacementFallbackStrategy:
    """UTF-8 with U+FFFD substitutions; never declines."""

    def try_decode(self, raw: bytes) -> DecodeAttempt | None:
        return DecodeAttempt(
            text=raw.decode("utf-8", errors="replace"),
            encoding=DetectedEncoding.UNKNOWN,
            encoding_name="utf-8",
        )


def default_strategies() -> list[DecodeStrategy]:
    return [ShiftJISStrategy(), Utf8Strategy(), CharsetNormalizerStrategy(), ReplacementFallbackStrategy()]


class LegacyTextDecoder:
    """Try each strategy in order and return the first result."""

    def __init__(self, strategies: Sequence[DecodeStrategy] | None = None) -> None:
        chain = list(strategies) if strategies is not None else default_strategies()
        if not chain or not isinstance(chain[-1], ReplacementFallbackStrategy):
            chain.append(ReplacementFallbackStrategy())
        self._strategies = chain

    @property
    def strategies(self) -> list[DecodeStrategy]:
        return list(self._strategies)

    def decode(self, raw: bytes, *, encoding_hint: str | None = None) -> str:
        return self.decode_document(raw, encoding_hint=encoding_hint).raw_text

    def decode_document(self, raw: bytes, *, encoding_hint: str | None = None) -> DecodedDocument:
        strategies = list(self._strategies)
        if encoding_hint:
            try:
                strategies.insert(0, StrictCodecStrategy(encoding_hint))
            except LookupError:
                logger.debug("Ignoring unknown encoding hint %r", encoding_hint)

        for strategy in strategies:
            try:
                attempt = strategy.try_decode(raw)
            except Exception:
                logger.exception("Decode strategy %s raised; trying next", type(strategy).__name__)
                continue
            if attempt is None:
                continue
            if attempt.encoding is not DetectedEncoding.SHIFT_JIS:
                logger.debug("Decoded payload with %s fallback", attempt.encoding_name)
            return DecodedDocument(
                raw_text=_normalize_newlines(attempt.text),
                detected_encoding=attempt.encoding,
                encoding_name=attempt.encoding_name,
            )

        # Only reachable when the fallback strategy itself raised.
        return DecodedDocument(
            raw_text=_normalize_newlines(raw.decode("utf-8", errors="replace")),
            detected_encoding=DetectedEncoding.UNKNOWN,
            encoding_name="utf-8",
        )
