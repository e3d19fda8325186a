from __future__ import annotations

from bs4 import BeautifulSoup
import pytest

from yomu.text.annotations import (
    ANNOTATION_RULES,
    AnnotationTransformer,
    Emphasis,
    Heading,
    IndentBlock,
    Ruby,
    Text,
    TransformMode,
)
from yomu.text.markup import html_to_text


def _transform(body: str, mode: TransformMode) -> str:
    return AnnotationTransformer().transform(body, mode)


def _is_subsequence(expected: str, output: str) -> bool:
    remaining = iter(output)
    return all(char in remaining for char in expected)


@pytest.mark.parametrize("body", ["道具《どうぐ》", "｜道具《どうぐ》", "|道具《どうぐ》"])
def test_render_builds_ruby_for_implicit_and_explicit_forms(body: str) -> None:
    assert _transform(body, TransformMode.RENDER) == "<ruby>道具<rt>どうぐ</rt></ruby>"


@pytest.mark.parametrize("body", ["道具《どうぐ》", "｜道具《どうぐ》"])
def test_speech_drops_gloss_and_markup(body: str) -> None:
    assert _transform(body, TransformMode.SPEECH) == "道具"


def test_implicit_ruby_takes_maximal_trailing_ideograph_run() -> None:
    nodes = AnnotationTransformer().parse("その下人《げにん》は")

    assert nodes == [Text("その"), Ruby(base="下人", gloss="げにん"), Text("は")]


def test_explicit_marker_bounds_the_ruby_base() -> None:
    nodes = AnnotationTransformer().parse("英国｜倫敦塔《ロンドンとう》")

    assert nodes == [Text("英国"), Ruby(base="倫敦塔", gloss="ロンドンとう", explicit=True)]


def test_implicit_ruby_on_kana_stem_and_katakana_words() -> None:
    transformer = AnnotationTransformer()

    assert transformer.parse("見出し《みだし》") == [Ruby(base="見出し", gloss="みだし")]
    assert transformer.parse("あのテーブル《たく》") == [Text("あの"), Ruby(base="テーブル", gloss="たく")]


def test_gloss_without_base_is_kept_as_text() -> None:
    assert _transform("《どうぐ》だけ", TransformMode.PLAIN_STRIP) == "《どうぐ》だけ"


def test_nested_indent_block_contains_transformed_ruby() -> None:
    body = "［＃ここから2字下げ］見出し《みだし》［＃ここで字下げ終わり］"
    transformer = AnnotationTransformer()

    assert transformer.parse(body) == [IndentBlock(level=2, children=[Ruby(base="見出し", gloss="みだし")])]

    soup = BeautifulSoup(transformer.transform(body, TransformMode.RENDER), "lxml")
    container = soup.select_one("div.indent-2")
    assert container is not None
    ruby = container.find("ruby")
    assert ruby is not None
    assert ruby.rt.get_text() == "みだし"
    assert ruby.find(string=True, recursive=False) == "見出し"


def test_indent_blocks_nest_and_accept_kanji_counts() -> None:
    body = (
        "［＃ここから一字下げ］外側\n"
        "［＃ここから３字下げ］内側［＃ここで字下げ終わり］\n"
        "［＃ここで字下げ終わり］"
    )

    nodes = AnnotationTransformer().parse(body)

    assert len(nodes) == 1
    outer = nodes[0]
    assert isinstance(outer, IndentBlock)
    assert outer.level == 1
    inner = [node for node in outer.children if isinstance(node, IndentBlock)]
    assert [block.level for block in inner] == [3]
    assert inner[0].children == [Text("内側")]


def test_unterminated_indent_is_removed_without_losing_prose() -> None:
    body = "［＃ここから２字下げ］本文が続く"

    for mode in TransformMode:
        assert _transform(body, mode) == "本文が続く"


def test_indent_depth_ignores_openers_the_block_rule_rejects() -> None:
    body = "［＃ここから２字下げ］前［＃ここから改行天付き、折り返して３字下げ］後［＃ここで字下げ終わり］"

    assert AnnotationTransformer().parse(body) == [IndentBlock(level=2, children=[Text("前後")])]


def test_emphasis_wraps_preceding_span() -> None:
    body = "それは道具［＃「道具」に傍点］だ。"

    assert _transform(body, TransformMode.RENDER) == 'それは<em class="emphasis-dots">道具</em>だ。'
    assert _transform(body, TransformMode.PLAIN_STRIP) == "それは道具だ。"


def test_emphasis_can_wrap_ruby() -> None:
    nodes = AnnotationTransformer().parse("道具《どうぐ》［＃「道具」に白ゴマ傍点］")

    assert nodes == [Emphasis(children=[Ruby(base="道具", gloss="どうぐ")])]


def test_emphasis_without_matching_prose_emits_quoted_span() -> None:
    assert _transform("［＃「遠く」に傍点］近い", TransformMode.PLAIN_STRIP) == "遠く近い"


def test_emphasis_quoting_end_of_ruby_base_wraps_whole_ruby() -> None:
    body = "大学生《だいがくせい》［＃「学生」に傍点］だ"

    assert AnnotationTransformer().parse(body) == [
        Emphasis(children=[Ruby(base="大学生", gloss="だいがくせい")]),
        Text("だ"),
    ]
    assert _transform(body, TransformMode.PLAIN_STRIP) == "大学生だ"


def test_paired_emphasis_markers_wrap_enclosed_text() -> None:
    body = "それは［＃傍点］大事《だいじ》な道具［＃傍点終わり］だ。"

    assert _transform(body, TransformMode.RENDER) == (
        'それは<em class="emphasis-dots"><ruby>大事<rt>だいじ</rt></ruby>な道具</em>だ。'
    )
    assert _transform(body, TransformMode.PLAIN_STRIP) == "それは大事な道具だ。"


def test_unclosed_emphasis_marker_is_dropped() -> None:
    assert _transform("［＃傍点］だけ", TransformMode.RENDER) == "だけ"


def test_inline_note_keeps_content_in_plain_parentheses() -> None:
    assert _transform("本文（注：古い言い方）続き", TransformMode.PLAIN_STRIP) == "本文（古い言い方）続き"
    assert _transform("（注：漢字《かんじ》）", TransformMode.RENDER) == "（<ruby>漢字<rt>かんじ</rt></ruby>）"
    assert _transform("（例）下人", TransformMode.PLAIN_STRIP) == "（例）下人"


def test_bold_and_headings_render_distinct_elements() -> None:
    transformer = AnnotationTransformer()

    assert transformer.transform("強い［＃「強い」は太字］", TransformMode.RENDER) == "<strong>強い</strong>"
    assert transformer.transform("第一章［＃「第一章」は大見出し］", TransformMode.RENDER) == (
        '<h1 class="chapter-title">第一章</h1>'
    )
    assert transformer.transform("一［＃「一」は中見出し］", TransformMode.RENDER) == '<h2 class="section-title">一</h2>'
    assert transformer.transform("序［＃「序」は小見出し］", TransformMode.RENDER) == '<h3 class="subsection-title">序</h3>'
    assert transformer.parse("第一章［＃「第一章」は大見出し］") == [Heading(level=1, children=[Text("第一章")])]
    assert transformer.transform("第一章［＃「第一章」は大見出し］", TransformMode.SPEECH) == "第一章"


def test_page_break_never_joins_adjacent_words() -> None:
    body = "前の頁［＃改ページ］次の頁"

    assert _transform(body, TransformMode.RENDER) == '前の頁<div class="page-break"></div>次の頁'
    assert _transform(body, TransformMode.PLAIN_STRIP) == "前の頁\n次の頁"
    assert _transform(body, TransformMode.SPEECH) == "前の頁 次の頁"


def test_unknown_directives_are_removed_entirely() -> None:
    body = "本文［＃「本文」は底本では「本分」］続き［＃地から２字上げ］"

    for mode in TransformMode:
        assert _transform(body, mode) == "本文続き"


def test_unclosed_bracket_stays_visible() -> None:
    assert _transform("［＃閉じない注記\n次", TransformMode.PLAIN_STRIP) == "［＃閉じない注記\n次"


def test_paragraph_indent_only_at_line_start() -> None:
    body = "　ある日の暮方\n門の下　雨"

    assert _transform(body, TransformMode.RENDER) == '<span class="indent-1"></span>ある日の暮方<br>\n門の下　雨'
    assert _transform(body, TransformMode.PLAIN_STRIP) == "ある日の暮方\n門の下　雨"


def test_five_newlines_collapse_to_one_blank_line_in_every_mode() -> None:
    body = "一行目\n\n\n\n\n二行目"

    assert _transform(body, TransformMode.PLAIN_STRIP) == "一行目\n\n二行目"
    assert _transform(body, TransformMode.RENDER) == "一行目<br>\n<br>\n二行目"
    assert _transform(body, TransformMode.SPEECH) == "一行目 二行目"


def test_render_escapes_html_in_prose() -> None:
    assert _transform("a<b & c", TransformMode.RENDER) == "a&lt;b &amp; c"


def test_render_preserves_every_prose_character_in_order() -> None:
    body = (
        "　その下人《げにん》は｜羅生門《らしょうもん》の下で［＃「下で」に傍点］雨やみを待っていた。\n"
        "［＃改ページ］\n"
        "［＃ここから２字下げ］広い門の下には、この男のほかに誰もいない。［＃ここで字下げ終わり］\n"
        "第二章［＃「第二章」は中見出し］"
    )
    prose = "その下人は羅生門の下で雨やみを待っていた。広い門の下には、この男のほかに誰もいない。第二章"

    rendered = _transform(body, TransformMode.RENDER)

    assert _is_subsequence(prose, rendered)
    assert "".join(html_to_text(rendered).split()) == prose


def test_rule_table_tries_explicit_ruby_first_and_catch_all_late() -> None:
    names = [rule.name for rule in ANNOTATION_RULES]

    assert names.index("explicit_ruby") < names.index("implicit_ruby")
    assert names.index("directive") > names.index("heading")
    assert names.index("directive") > names.index("indent_block")
    assert names.index("directive") > names.index("emphasis_block")


def test_transform_accepts_mode_names() -> None:
    assert AnnotationTransformer().transform("道具《どうぐ》", "plain") == "道具"
