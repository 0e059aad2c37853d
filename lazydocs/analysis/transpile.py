"""Literal-value transpiler from JavaScript/TypeScript exports to Python source.

Virtual file systems use this when no module loader result is available.
Only statically known values are supported: numbers, strings, booleans,
``null``/``undefined``, arrays and objects of those, and references to
earlier top-level constants. Anything else is recorded in the generated
``__untranspiled__`` mapping instead of raising, so the remaining exports of
a file stay usable.
"""

from __future__ import annotations

import codecs
import keyword
import logging

from ..errors import TranspileError
from .parsers import ParsedSource, language_for_path, parse_source

logger = logging.getLogger(__name__)

JAVASCRIPT_LIKE_EXTENSIONS = frozenset({"js", "jsx", "mjs", "cjs", "ts", "tsx", "mts", "cts"})
UNTRANSPILED_NAME = "__untranspiled__"
_WRAPPER_TYPES = {"as_expression", "satisfies_expression", "non_null_expression", "parenthesized_expression"}
_CONSTANTS = {"true": "True", "false": "False", "null": "None", "undefined": "None"}


class _Unsupported(Exception):
    """Raised internally for expressions with no literal Python equivalent."""


def _name_ref(name: str) -> str:
    """Python expression reading module-level ``name``."""
    if name.isidentifier() and not keyword.iskeyword(name):
        return name
    return f"globals()[{name!r}]"


def _assignment(name: str, expression: str) -> str:
    if name.isidentifier() and not keyword.iskeyword(name):
        return f"{name} = {expression}"
    return f"globals()[{name!r}] = {expression}"


class _Transpiler:
    def __init__(self, parsed: ParsedSource) -> None:
        self.parsed = parsed
        self.defined: set[str] = set()
        self.lines: list[str] = [f"# Transpiled from {parsed.path}", f"{UNTRANSPILED_NAME} = {{}}"]

    def _string(self, node) -> str:
        parts: list[str] = []
        for child in node.named_children:
            if child.type == "template_substitution":
                raise _Unsupported("template substitution")
            text = self.parsed.text(child)
            if child.type == "escape_sequence":
                try:
                    text = codecs.decode(text, "unicode_escape")
                except UnicodeDecodeError as exc:
                    raise _Unsupported(f"escape sequence {text}") from exc
            parts.append(text)
        return repr("".join(parts))

    def _number(self, text: str) -> str:
        cleaned = text.replace("_", "")
        if cleaned.endswith("n"):
            cleaned = cleaned[:-1]
        lowered = cleaned.lower()
        if lowered.startswith(("0x", "0o", "0b")):
            return repr(int(cleaned, 0))
        if len(cleaned) > 1 and cleaned.startswith("0") and cleaned.isdigit():
            return repr(int(cleaned, 8))
        try:
            value = int(cleaned)
        except ValueError:
            value = float(cleaned)
        return repr(value)

    def expression(self, node) -> str:
        node_type = node.type
        if node_type in _WRAPPER_TYPES and node.named_children:
            return self.expression(node.named_children[0])
        if node_type in _CONSTANTS:
            return _CONSTANTS[node_type]
        if node_type == "number":
            return self._number(self.parsed.text(node))
        if node_type in {"string", "template_string"}:
            return self._string(node)
        if node_type == "unary_expression":
            operator = node.child_by_field_name("operator")
            argument = node.child_by_field_name("argument")
            op_text = self.parsed.text(operator) if operator is not None else ""
            if argument is not None and op_text in {"-", "+"}:
                return f"({op_text}{self.expression(argument)})"
            if argument is not None and op_text == "!":
                return f"(not {self.expression(argument)})"
            raise _Unsupported(f"unary operator {op_text}")
        if node_type == "array":
            return "[" + ", ".join(self.expression(child) for child in node.named_children if child.type != "comment") + "]"
        if node_type == "object":
            items: list[str] = []
            for child in node.named_children:
                if child.type == "comment":
                    continue
                if child.type == "shorthand_property_identifier":
                    name = self.parsed.text(child)
                    items.append(f"{name!r}: {self._reference(name)}")
                    continue
                if child.type != "pair":
                    raise _Unsupported(child.type)
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                if key is None or value is None:
                    raise _Unsupported("incomplete pair")
                if key.type in {"string", "number"}:
                    key_text = self.expression(key) if key.type == "string" else repr(self.parsed.text(key))
                elif key.type == "property_identifier":
                    key_text = repr(self.parsed.text(key))
                else:
                    raise _Unsupported(f"computed key {key.type}")
                items.append(f"{key_text}: {self.expression(value)}")
            return "{" + ", ".join(items) + "}"
        if node_type == "identifier":
            return self._reference(self.parsed.text(node))
        raise _Unsupported(node_type)

    def _reference(self, name: str) -> str:
        if name not in self.defined:
            raise _Unsupported(f"reference to {name}")
        return _name_ref(name)

    def bind(self, name: str, value_node, exported: bool) -> None:
        try:
            expression = self.expression(value_node)
        except _Unsupported as exc:
            if exported:
                self.lines.append(f"{UNTRANSPILED_NAME}[{name!r}] = {str(exc)!r}")
            logger.debug("skipping %s in %s: %s", name, self.parsed.path, exc)
            return
        self.lines.append(_assignment(name, expression))
        self.defined.add(name)

    def unsupported(self, name: str, reason: str) -> None:
        self.lines.append(f"{UNTRANSPILED_NAME}[{name!r}] = {reason!r}")

    def declarations(self, node, exported: bool) -> None:
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name_node is None or name_node.type != "identifier":
                continue
            name = self.parsed.text(name_node)
            if value is None:
                self.lines.append(_assignment(name, "None"))
                self.defined.add(name)
                continue
            self.bind(name, value, exported)

    def statement(self, statement) -> None:
        if statement.type in {"lexical_declaration", "variable_declaration"}:
            self.declarations(statement, exported=False)
            return
        if statement.type != "export_statement":
            return
        declaration = statement.child_by_field_name("declaration")
        value = statement.child_by_field_name("value")
        if declaration is not None:
            if declaration.type in {"lexical_declaration", "variable_declaration"}:
                self.declarations(declaration, exported=True)
                return
            name_node = declaration.child_by_field_name("name")
            if any(child.type == "default" for child in statement.children):
                self.unsupported("default", declaration.type)
            elif name_node is not None and declaration.type not in {"type_alias_declaration", "interface_declaration"}:
                self.unsupported(self.parsed.text(name_node), declaration.type)
            return
        if value is not None:
            self.bind("default", value, exported=True)
            return
        if statement.child_by_field_name("source") is not None:
            return
        for clause in statement.named_children:
            if clause.type != "export_clause":
                continue
            for specifier in clause.named_children:
                local_node = specifier.child_by_field_name("name")
                if local_node is None:
                    continue
                alias_node = specifier.child_by_field_name("alias")
                local_name = self.parsed.text(local_node)
                exported_name = self.parsed.text(alias_node) if alias_node is not None else local_name
                if local_name in self.defined:
                    if exported_name != local_name:
                        self.lines.append(_assignment(exported_name, _name_ref(local_name)))
                        self.defined.add(exported_name)
                else:
                    self.unsupported(exported_name, f"reference to {local_name}")

    def run(self) -> str:
        for statement in self.parsed.root.named_children:
            self.statement(statement)
        return "\n".join(self.lines) + "\n"


def transpile_module(path: str, source: str) -> str:
    """Return Python source binding each literal export of ``source``."""
    language = language_for_path(path)
    if language is None:
        raise TranspileError(f"No transpiler available for {path}")
    parsed, error = parse_source(path, source, language)
    if parsed is None:
        raise TranspileError(error or f"Unable to parse {path}")
    return _Transpiler(parsed).run()


__all__ = ["JAVASCRIPT_LIKE_EXTENSIONS", "UNTRANSPILED_NAME", "transpile_module"]
