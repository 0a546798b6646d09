import pytest

from gep.grammars import Function, GrammarError, load_grammar, parse_grammar

SAMPLE = """<?xml version="1.0"?>
<grammar name="Go" version="1" ext="go" type="Boolean">
<!-- sample grammar -->
<functions count="3">
<function idx="0" symbol="Not" terminals="1" uniontype="">(!(x0))</function>
<function idx="1" symbol="And" terminals="2" uniontype="{tempvarname} = {tempvarname} &amp;&amp; {member}">(x0 &amp;&amp; x1)</function>
<function idx="2" symbol="Nand" terminals="2" uniontype="">gepNand(x0, x1)</function>
</functions>
<order><item name="open"/><item name="footers"/></order>
<open>package gepModel{CRLF}</open>
<headers><header type="default" replace="" indexzero="true" indexone="false">func gepModel(d []bool) bool {</header></headers>
<tempvars><tempvar type="default" typename="bool" varname="y">{TAB}var y bool</tempvar></tempvars>
<endline>{CRLF}</endline>
<indent>1</indent>
<parenstype>1</parenstype>
<footers><footer type="default">return y</footer></footers>
<helpers count="1" declaration="decl" assignment="assign"><helper replaces="Nand" prototype="gepNand">func gepNand(x, y bool) bool</helper></helpers>
<keywords><keyword>func</keyword><keyword>var</keyword></keywords>
<commentmark>//</commentmark>
<linkingFunctions count="1"><linkingFunction replaces="And" prototype="p">link</linkingFunction></linkingFunctions>
</grammar>
"""


@pytest.fixture
def grammar():
    return parse_grammar(SAMPLE)


def test_attributes(grammar):
    assert (grammar.name, grammar.version, grammar.ext, grammar.type) == ("Go", "1", "go", "Boolean")


def test_functions_are_keyed_by_symbol(grammar):
    assert list(grammar.functions) == ["Not", "And", "Nand"]
    and_func = grammar.functions["And"]
    assert and_func.terminals == 2
    assert and_func.idx == 1
    assert and_func.chardata == "(x0 && x1)"
    assert and_func.uniontype == "{tempvarname} = {tempvarname} && {member}"


def test_text_elements(grammar):
    assert grammar.open == "package gepModel{CRLF}"
    assert grammar.endline == "{CRLF}"
    assert grammar.commentmark == "//"
    assert grammar.close == ""


def test_integer_elements(grammar):
    assert grammar.indent == 1
    assert grammar.parenstype == 1


def test_headers_and_footers(grammar):
    header = grammar.headers[0]
    assert header.type == "default"
    assert header.indexzero is True
    assert header.indexone is False
    assert header.chardata == "func gepModel(d []bool) bool {"
    assert [f.chardata for f in grammar.footers] == ["return y"]


def test_tempvars(grammar):
    tempvar = grammar.tempvars[0]
    assert (tempvar.typename, tempvar.varname, tempvar.chardata) == ("bool", "y", "{TAB}var y bool")


def test_helpers_map(grammar):
    assert grammar.helpers == {"Nand": "func gepNand(x, y bool) bool"}
    assert grammar.helper_declaration == "decl"
    assert grammar.helper_assignment == "assign"


def test_lists(grammar):
    assert grammar.order == ["open", "footers"]
    assert grammar.keywords == ["func", "var"]
    assert [h.replaces for h in grammar.linking_functions] == ["And"]
    assert grammar.basic_functions == []


def test_comments_are_kept(grammar):
    assert grammar.comments == " sample grammar "


def test_chardata_skips_nested_elements():
    g = parse_grammar('<grammar><functions><function symbol="X">a<b>ignored</b>c</function></functions></grammar>')
    assert g.functions["X"].chardata == "ac"


def test_later_duplicate_symbol_wins():
    g = parse_grammar(
        '<grammar><functions>'
        '<function symbol="X" terminals="1">first</function>'
        '<function symbol="X" terminals="2">second</function>'
        '</functions></grammar>'
    )
    assert g.functions["X"] == Function(symbol="X", terminals=2, chardata="second")


def test_empty_integer_is_zero():
    assert parse_grammar("<grammar><indent></indent></grammar>").indent == 0


def test_wrong_root_element():
    with pytest.raises(GrammarError):
        parse_grammar("<notgrammar/>")


def test_malformed_document():
    with pytest.raises(GrammarError):
        parse_grammar("<grammar")


def test_bad_integer():
    with pytest.raises(GrammarError):
        parse_grammar("<grammar><indent>abc</indent></grammar>")


def test_bad_boolean():
    with pytest.raises(GrammarError):
        parse_grammar('<grammar><headers><header indexzero="maybe"/></headers></grammar>')


def test_load_grammar_from_file(tmp_path, grammar):
    path = tmp_path / "go.Boolean.grm.xml"
    path.write_text(SAMPLE, encoding="utf-8")
    assert load_grammar(path) == grammar


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_grammar(tmp_path / "missing.xml")