"""XML grammars that describe how to render Karva expressions in a target language."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_INT_RE = re.compile(r"[+-]?[0-9]+")


class GrammarError(ValueError):
    """Raised when a grammar document cannot be understood."""


def _to_int(text: str | None, what: str) -> int:
    value = (text or "").strip()
    if not value:
        return 0
    if not _INT_RE.fullmatch(value):
        raise GrammarError(f"invalid integer for {what}: {text!r}")
    return int(value)


def _to_bool(text: str | None, what: str) -> bool:
    value = (text or "").strip()
    if not value or value in _FALSE:
        return False
    if value in _TRUE:
        return True
    raise GrammarError(f"invalid boolean for {what}: {text!r}")


def _chardata(elem: ET.Element) -> str:
    """Character data directly inside ``elem``, skipping nested elements."""
    return (elem.text or "") + "".join(child.tail or "" for child in elem)


def _last_text(root: ET.Element, tag: str) -> str:
    found = root.findall(tag)
    return _chardata(found[-1]) if found else ""


def _last_int(root: ET.Element, tag: str) -> int:
    found = root.findall(tag)
    return _to_int(_chardata(found[-1]), tag) if found else 0


@dataclass
class Function:
    """A function of the grammar and its rendering in the target language."""

    symbol: str
    terminals: int = 0
    idx: int = 0
    uniontype: str = ""
    chardata: str = ""

    @classmethod
    def _from_element(cls, elem: ET.Element) -> Function:
        return cls(
            symbol=elem.get("symbol", ""),
            terminals=_to_int(elem.get("terminals"), "function terminals"),
            idx=_to_int(elem.get("idx"), "function idx"),
            uniontype=elem.get("uniontype", ""),
            chardata=_chardata(elem),
        )


@dataclass
class Replacement:
    """A header, footer or similar block of text with its options."""

    type: str = ""
    replace: str = ""
    indexzero: bool = False
    indexone: bool = False
    chardata: str = ""

    @classmethod
    def _from_element(cls, elem: ET.Element) -> Replacement:
        return cls(
            type=elem.get("type", ""),
            replace=elem.get("replace", ""),
            indexzero=_to_bool(elem.get("indexzero"), "indexzero"),
            indexone=_to_bool(elem.get("indexone"), "indexone"),
            chardata=_chardata(elem),
        )


@dataclass
class Tempvar:
    """A temporary variable declaration."""

    type: str = ""
    typename: str = ""
    varname: str = ""
    chardata: str = ""

    @classmethod
    def _from_element(cls, elem: ET.Element) -> Tempvar:
        return cls(
            type=elem.get("type", ""),
            typename=elem.get("typename", ""),
            varname=elem.get("varname", ""),
            chardata=_chardata(elem),
        )


@dataclass
class Helper:
    """A helper definition that a rendered function relies upon."""

    replaces: str = ""
    prototype: str = ""
    chardata: str = ""

    @classmethod
    def _from_element(cls, elem: ET.Element) -> Helper:
        return cls(
            replaces=elem.get("replaces", ""),
            prototype=elem.get("prototype", ""),
            chardata=_chardata(elem),
        )


@dataclass
class Grammar:
    """A complete specification for rendering Karva expressions in one language."""

    name: str = ""
    version: str = ""
    ext: str = ""
    type: str = ""
    comments: str = ""
    functions: dict[str, Function] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)
    open: str = ""
    close: str = ""
    headers: list[Replacement] = field(default_factory=list)
    subheaders: list[Replacement] = field(default_factory=list)
    random_constants: list[Replacement] = field(default_factory=list)
    tempvars: list[Tempvar] = field(default_factory=list)
    endline: str = ""
    indent: int = 0
    parenstype: int = 0
    footers: list[Replacement] = field(default_factory=list)
    helper_declaration: str = ""
    helper_assignment: str = ""
    helpers: dict[str, str] = field(default_factory=dict)
    keywords: list[str] = field(default_factory=list)
    commentmark: str = ""
    linking_functions: list[Helper] = field(default_factory=list)
    basic_functions: list[Helper] = field(default_factory=list)
    ddfcomment: str = ""
    udfcomment: str = ""


def parse_grammar(data: str | bytes) -> Grammar:
    """Parse an XML grammar document."""
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    try:
        root = ET.fromstring(data, parser=parser)
    except ET.ParseError as exc:
        raise GrammarError(f"malformed grammar document: {exc}") from exc
    if root.tag != "grammar":
        raise GrammarError(f"expected element <grammar>, found <{root.tag}>")

    functions: dict[str, Function] = {}
    for elem in root.findall("functions/function"):
        func = Function._from_element(elem)
        functions[func.symbol] = func

    helpers: dict[str, str] = {}
    for elem in root.findall("helpers/helper"):
        helper = Helper._from_element(elem)
        helpers[helper.replaces] = helper.chardata
    helpers_elems = root.findall("helpers")
    helpers_elem = helpers_elems[-1] if helpers_elems else None

    def replacements(path: str) -> list[Replacement]:
        return [Replacement._from_element(e) for e in root.findall(path)]

    def helper_list(path: str) -> list[Helper]:
        return [Helper._from_element(e) for e in root.findall(path)]

    comments = "".join(
        child.text or "" for child in root if child.tag is ET.Comment
    )

    return Grammar(
        name=root.get("name", ""),
        version=root.get("version", ""),
        ext=root.get("ext", ""),
        type=root.get("type", ""),
        comments=comments,
        functions=functions,
        order=[e.get("name", "") for e in root.findall("order/item")],
        open=_last_text(root, "open"),
        close=_last_text(root, "close"),
        headers=replacements("headers/header"),
        subheaders=replacements("subheaders/subheader"),
        random_constants=replacements("randomconstants/randomconst"),
        tempvars=[Tempvar._from_element(e) for e in root.findall("tempvars/tempvar")],
        endline=_last_text(root, "endline"),
        indent=_last_int(root, "indent"),
        parenstype=_last_int(root, "parenstype"),
        footers=replacements("footers/footer"),
        helper_declaration=helpers_elem.get("declaration", "") if helpers_elem is not None else "",
        helper_assignment=helpers_elem.get("assignment", "") if helpers_elem is not None else "",
        helpers=helpers,
        keywords=[_chardata(e) for e in root.findall("keywords/keyword")],
        commentmark=_last_text(root, "commentmark"),
        linking_functions=helper_list("linkingFunctions/linkingFunction"),
        basic_functions=helper_list("basicFunctions/basicFunction"),
        ddfcomment=_last_text(root, "ddfcomment"),
        udfcomment=_last_text(root, "udfcomment"),
    )


def load_grammar(path: str | PathLike[str]) -> Grammar:
    """Read and parse the XML grammar stored at ``path``."""
    return parse_grammar(Path(path).read_bytes())