"""Word template rendering for docxtemplater-style tags.

Supported tags:

* ``{name}`` replaced by the value of ``name``; dotted names walk nested
  mappings and ``{.}`` is the current loop item.
* ``{#name}`` ... ``{/name}`` repeated once per list item, rendered once for a
  truthy mapping or value, skipped for falsy values and empty lists.
* ``{^name}`` ... ``{/name}`` rendered only when ``name`` is falsy or empty.

Word often splits typed text over several runs, so tags are first merged back
together and then moved into runs of their own. Loops over table rows repeat
the rows, loops whose tags sit alone in their paragraphs repeat the content
between those paragraphs, and loops inside one paragraph repeat the runs in
between.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Iterable, Iterator, Mapping, Sequence

from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.parts.hdrftr import FooterPart, HeaderPart

_TAG_PATTERN = re.compile(r"\{([#^/]?)\s*([^{}]*?)\s*\}")

_W_P = qn("w:p")
_W_R = qn("w:r")
_W_T = qn("w:t")
_W_TR = qn("w:tr")
_W_TBL = qn("w:tbl")
_W_RPR = qn("w:rPr")
_XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"

_MISSING = object()


class TemplateError(ValueError):
    """Raised when a template is malformed or cannot be bound to the data."""


@dataclass(frozen=True)
class _Tag:
    run: Any
    kind: str
    name: str


def _nearest(node: Any, tag: str) -> Any | None:
    for ancestor in node.iterancestors(tag):
        return ancestor
    return None


def _common_ancestor(first: Any, second: Any) -> Any:
    ancestors = list(first.iterancestors())
    for candidate in second.iterancestors():
        if any(candidate is ancestor for ancestor in ancestors):
            return candidate
    raise TemplateError("Loop tags are not part of the same document section.")


def _child_of(ancestor: Any, node: Any) -> Any:
    """Return the child of ``ancestor`` that contains ``node``."""
    current = node
    while current.getparent() is not ancestor:
        current = current.getparent()
    return current


def _siblings_between(first: Any, last: Any) -> list[Any]:
    between = []
    for sibling in first.itersiblings():
        if sibling is last:
            return between
        between.append(sibling)
    raise TemplateError("Closing loop tag appears before its opening tag.")


def _span(first: Any, last: Any) -> list[Any]:
    return [first] if first is last else [first, *_siblings_between(first, last), last]


def _make_run(rpr: Any | None, text: str | None = None) -> Any:
    run = OxmlElement("w:r")
    if rpr is not None:
        run.append(copy.deepcopy(rpr))
    if text is not None:
        text_node = OxmlElement("w:t")
        text_node.text = text
        text_node.set(_XML_SPACE, "preserve")
        run.append(text_node)
    return run


def _remove(node: Any) -> None:
    parent = node.getparent()
    if parent is not None:
        parent.remove(node)


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class DocxTemplate:
    """A .docx document whose tags can be bound to a data mapping once."""

    def __init__(self, source: bytes, *, paragraph_loop: bool = True, linebreaks: bool = True) -> None:
        try:
            self._document = Document(BytesIO(source))
        except Exception as exc:
            raise TemplateError(f"Template is not a readable .docx document: {exc}") from exc
        self.paragraph_loop = paragraph_loop
        self.linebreaks = linebreaks
        self._rendered = False

    def render(self, context: Mapping[str, Any]) -> None:
        if self._rendered:
            raise TemplateError("Template has already been rendered.")
        roots = list(self._roots())
        for root in roots:
            for paragraph in list(root.iter(_W_P)):
                self._normalize_paragraph(paragraph)
        for root in roots:
            self._render([root], (context,))
        self._rendered = True

    def to_bytes(self) -> bytes:
        buffer = BytesIO()
        self._document.save(buffer)
        return buffer.getvalue()

    def _roots(self) -> Iterator[Any]:
        yield self._document.element.body
        for part in self._document.part.package.iter_parts():
            if isinstance(part, (HeaderPart, FooterPart)):
                yield part.element

    # -- preparation -----------------------------------------------------

    def _normalize_paragraph(self, paragraph: Any) -> None:
        text_nodes = [node for node in paragraph.iter(_W_T) if _nearest(node, _W_P) is paragraph]
        texts = [node.text or "" for node in text_nodes]
        joined = "".join(texts)
        if "{" not in joined and "}" not in joined:
            return
        remainder = _TAG_PATTERN.sub("", joined)
        if "{" in remainder or "}" in remainder:
            raise TemplateError(f"Unbalanced tag braces in paragraph: {joined!r}")

        # Give every character of a tag to the text node holding its opening brace.
        owners = [index for index, text in enumerate(texts) for _ in text]
        for match in _TAG_PATTERN.finditer(joined):
            start, end = match.span()
            owners[start:end] = [owners[start]] * (end - start)
        rebuilt = [""] * len(text_nodes)
        for char, owner in zip(joined, owners):
            rebuilt[owner] += char
        for node, text in zip(text_nodes, rebuilt):
            node.text = text
            if text:
                node.set(_XML_SPACE, "preserve")

        for node in text_nodes:
            if node.text and _TAG_PATTERN.search(node.text):
                self._isolate_tags(node)

    def _isolate_tags(self, text_node: Any) -> None:
        run = text_node.getparent()
        if run is None or run.tag != _W_R:
            raise TemplateError("Template tag found outside of a text run.")
        pieces: list[str] = []
        cursor = 0
        text = text_node.text
        for match in _TAG_PATTERN.finditer(text):
            pieces.extend([text[cursor:match.start()], match.group(0)])
            cursor = match.end()
        pieces.append(text[cursor:])

        children = list(run)
        following = children[children.index(text_node) + 1:]
        run.remove(text_node)
        for child in following:
            run.remove(child)

        rpr = run.find(_W_RPR)
        anchor = run
        for piece in pieces:
            if not piece:
                continue
            new_run = _make_run(rpr, piece)
            anchor.addnext(new_run)
            anchor = new_run
        if following:
            tail = _make_run(rpr)
            tail.extend(following)
            anchor.addnext(tail)
        if len(run) == (0 if rpr is None else 1):
            _remove(run)

    # -- rendering -------------------------------------------------------

    def _collect(self, elements: Iterable[Any]) -> list[_Tag]:
        tags: list[_Tag] = []
        for element in elements:
            for run in element.iter(_W_R):
                text_nodes = run.findall(_W_T)
                if len(text_nodes) != 1:
                    continue
                match = _TAG_PATTERN.fullmatch(text_nodes[0].text or "")
                if match:
                    tags.append(_Tag(run=run, kind=match.group(1), name=match.group(2)))
        return tags

    def _render(self, elements: Sequence[Any], scope: tuple[Any, ...]) -> None:
        tags = self._collect(elements)
        index = 0
        while index < len(tags):
            tag = tags[index]
            if tag.kind == "/":
                raise TemplateError(f"Closing tag {{/{tag.name}}} has no matching opening tag.")
            if not tag.kind:
                self._write_text(tag.run, format_value(self._lookup(tag.name, scope)))
                index += 1
                continue
            close = self._find_close(tags, index)
            self._expand(tag, tags[close], scope)
            index = close + 1

    def _find_close(self, tags: Sequence[_Tag], index: int) -> int:
        name = tags[index].name
        depth = 0
        for position in range(index + 1, len(tags)):
            tag = tags[position]
            if tag.name != name:
                continue
            if tag.kind in ("#", "^"):
                depth += 1
            elif tag.kind == "/":
                if depth == 0:
                    return position
                depth -= 1
        raise TemplateError(f"Loop tag {{{tags[index].kind}{name}}} is never closed.")

    def _expand(self, opening: _Tag, closing: _Tag, scope: tuple[Any, ...]) -> None:
        value = self._lookup(opening.name, scope)
        contexts = self._iterations(opening.kind, value)
        block, leftovers = self._loop_block(opening.run, closing.run)
        for context in contexts:
            copies = [copy.deepcopy(element) for element in block]
            for element in copies:
                block[0].addprevious(element)
            self._render(copies, scope + (context,))
        for element in [*block, *leftovers]:
            _remove(element)

    @staticmethod
    def _iterations(kind: str, value: Any) -> list[Any]:
        empty = not value
        if kind == "^":
            return [None] if empty else []
        if empty:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]

    def _loop_block(self, open_run: Any, close_run: Any) -> tuple[list[Any], list[Any]]:
        """Return the elements to repeat and the elements to drop afterwards."""
        ancestor = _common_ancestor(open_run, close_run)

        if ancestor.tag == _W_P or _nearest(ancestor, _W_P) is not None:
            first = _child_of(ancestor, open_run)
            last = _child_of(ancestor, close_run)
            return _siblings_between(first, last), [open_run, close_run]

        if ancestor.tag in (_W_TBL, _W_TR):
            if ancestor.tag == _W_TR:
                rows = [ancestor]
            else:
                rows = _span(_child_of(ancestor, open_run), _child_of(ancestor, close_run))
            _remove(open_run)
            _remove(close_run)
            return rows, []

        first = _child_of(ancestor, open_run)
        last = _child_of(ancestor, close_run)
        if (
            self.paragraph_loop
            and first.tag == _W_P
            and last.tag == _W_P
            and self._holds_only(first, open_run)
            and self._holds_only(last, close_run)
        ):
            return _siblings_between(first, last), [first, last]
        _remove(open_run)
        _remove(close_run)
        return _span(first, last), []

    @staticmethod
    def _holds_only(paragraph: Any, run: Any) -> bool:
        paragraph_text = "".join(node.text or "" for node in paragraph.iter(_W_T))
        run_text = "".join(node.text or "" for node in run.iter(_W_T))
        return paragraph_text.strip() == run_text

    def _lookup(self, name: str, scope: tuple[Any, ...]) -> Any:
        if name == ".":
            return scope[-1]
        head, *rest = name.split(".")
        value: Any = _MISSING
        for context in reversed(scope):
            if isinstance(context, Mapping) and head in context:
                value = context[head]
                break
        if value is _MISSING:
            raise TemplateError(f"No value supplied for template tag '{name}'.")
        for part in rest:
            if not isinstance(value, Mapping) or part not in value:
                raise TemplateError(f"No value supplied for template tag '{name}'.")
            value = value[part]
        return value

    def _write_text(self, run: Any, text: str) -> None:
        for node in run.findall(_W_T):
            run.remove(node)
        lines = text.replace("\r\n", "\n").split("\n") if self.linebreaks else [text]
        for position, line in enumerate(lines):
            if position:
                run.append(OxmlElement("w:br"))
            text_node = OxmlElement("w:t")
            text_node.text = line
            text_node.set(_XML_SPACE, "preserve")
            run.append(text_node)
