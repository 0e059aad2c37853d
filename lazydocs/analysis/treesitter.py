"""Type-analysis service backed by Tree-sitter JavaScript/TypeScript grammars.

Exports are discovered from top-level ``export`` statements. Each export is
keyed by a position: the start offset of its declaration with preceding
whitespace included, so re-parsing unchanged source yields the same keys.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import AnalysisError
from .jsdoc import is_doc_comment, parse_doc_comment
from .parsers import ParsedSource, language_for_path, parse_source
from .types import (
    ENVIRONMENT_CLIENT,
    ENVIRONMENT_ISOMORPHIC,
    ENVIRONMENT_SERVER,
    Diagnostic,
    ExportDeclaration,
    ExportMetadata,
    TypeDescription,
    TypeMember,
)

logger = logging.getLogger(__name__)

VARIABLE_DECLARATION_TYPES = {"lexical_declaration", "variable_declaration"}
FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
}
CLASS_TYPES = {"class_declaration", "abstract_class_declaration", "class"}
PATTERN_IDENTIFIER_TYPES = {"identifier", "shorthand_property_identifier_pattern"}
MEMBER_NODE_TYPES = {
    "property_signature",
    "method_signature",
    "public_field_definition",
    "field_definition",
    "method_definition",
}
TYPE_KIND_BY_NODE = {
    "object_type": "Object",
    "union_type": "Union",
    "intersection_type": "Intersection",
    "function_type": "Function",
    "tuple_type": "Tuple",
    "array_type": "Array",
    "literal_type": "Literal",
    "predefined_type": "Primitive",
}
VALUE_KIND_BY_NODE = {
    "number": "Number",
    "string": "String",
    "template_string": "String",
    "true": "Boolean",
    "false": "Boolean",
    "null": "Null",
    "undefined": "Undefined",
    "object": "Object",
    "array": "Array",
    "regex": "RegExp",
}
SERVER_ONLY_MODULE = "server-only"
CLIENT_ONLY_MODULE = "client-only"


@dataclass(frozen=True)
class _ExportRecord:
    """Export declaration plus the nodes metadata is read from."""

    declaration: ExportDeclaration
    statement: object
    node: object
    is_default: bool


def _leading_position(source_bytes: bytes, offset: int) -> int:
    """Move ``offset`` back over whitespace preceding a declaration."""
    while offset > 0 and source_bytes[offset - 1 : offset] in (b" ", b"\t", b"\n", b"\r"):
        offset -= 1
    return offset


def _has_token(node, token: str) -> bool:
    return any(child.type == token for child in node.children)


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in {"'", '"', "`"}:
        return text[1:-1]
    return text


def _pattern_identifiers(node) -> list:
    """Collect bound identifiers from a destructuring pattern."""
    if node.type in PATTERN_IDENTIFIER_TYPES:
        return [node]
    found: list = []
    for child in node.named_children:
        if child.type == "pair_pattern":
            value = child.child_by_field_name("value")
            if value is not None:
                found.extend(_pattern_identifiers(value))
            continue
        found.extend(_pattern_identifiers(child))
    return found


class TreeSitterAnalyzer:
    """Default :class:`~lazydocs.analysis.types.TypeAnalyzer` implementation."""

    def _parse(self, path: str, source: str) -> ParsedSource:
        language = language_for_path(path)
        if language is None:
            raise AnalysisError(f"No Tree-sitter grammar configured for {path}")
        parsed, error = parse_source(path, source, language)
        if parsed is None:
            raise AnalysisError(error or f"Unable to parse {path}")
        return parsed

    def _local_declarations(self, parsed: ParsedSource) -> dict[str, tuple[object, object]]:
        """Map top-level local names to ``(statement, declaration node)``."""
        declarations: dict[str, tuple[object, object]] = {}
        for statement in parsed.root.named_children:
            node = statement
            if statement.type == "export_statement":
                node = statement.child_by_field_name("declaration")
                if node is None:
                    continue
            if node.type in VARIABLE_DECLARATION_TYPES:
                for declarator in node.named_children:
                    if declarator.type != "variable_declarator":
                        continue
                    name_node = declarator.child_by_field_name("name")
                    if name_node is None:
                        continue
                    for identifier in _pattern_identifiers(name_node):
                        declarations.setdefault(parsed.text(identifier), (statement, declarator))
                continue
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                declarations.setdefault(parsed.text(name_node), (statement, node))
        return declarations

    def _records(self, parsed: ParsedSource) -> list[_ExportRecord]:
        records: list[_ExportRecord] = []
        locals_by_name: dict[str, tuple[object, object]] | None = None
        source_bytes = parsed.source_bytes

        def add(name: str, statement, node, kind: str, is_default: bool = False, anchor=None) -> None:
            position = _leading_position(source_bytes, (anchor if anchor is not None else node).start_byte)
            records.append(
                _ExportRecord(
                    declaration=ExportDeclaration(name=name, position=position, kind=kind),
                    statement=statement,
                    node=node,
                    is_default=is_default,
                )
            )

        for statement in parsed.root.named_children:
            if statement.type != "export_statement":
                continue
            is_default = _has_token(statement, "default")
            declaration = statement.child_by_field_name("declaration")
            value = statement.child_by_field_name("value")

            if declaration is not None:
                if declaration.type in VARIABLE_DECLARATION_TYPES:
                    for declarator in declaration.named_children:
                        if declarator.type != "variable_declarator":
                            continue
                        name_node = declarator.child_by_field_name("name")
                        if name_node is None:
                            continue
                        for identifier in _pattern_identifiers(name_node):
                            anchor = declarator if identifier is name_node else identifier
                            add(parsed.text(identifier), statement, declarator, "variable", anchor=anchor)
                    continue
                name_node = declaration.child_by_field_name("name")
                if is_default:
                    add("default", statement, declaration, declaration.type, is_default=True, anchor=statement)
                elif name_node is not None:
                    add(parsed.text(name_node), statement, declaration, declaration.type, anchor=statement)
                continue

            if value is not None:
                add("default", statement, value, value.type, is_default=True)
                continue

            clause = next((child for child in statement.named_children if child.type == "export_clause"), None)
            if clause is None:
                continue
            is_reexport = statement.child_by_field_name("source") is not None
            for specifier in clause.named_children:
                if specifier.type != "export_specifier":
                    continue
                local_node = specifier.child_by_field_name("name")
                alias_node = specifier.child_by_field_name("alias")
                if local_node is None:
                    continue
                local_name = parsed.text(local_node)
                exported_name = parsed.text(alias_node) if alias_node is not None else local_name
                if not is_reexport:
                    if locals_by_name is None:
                        locals_by_name = self._local_declarations(parsed)
                    local = locals_by_name.get(local_name)
                    if local is not None:
                        local_statement, local_node_decl = local
                        add(
                            exported_name,
                            local_statement,
                            local_node_decl,
                            local_node_decl.type,
                            is_default=exported_name == "default",
                        )
                        continue
                add(exported_name, statement, specifier, "export_specifier", is_default=exported_name == "default")
        return records

    def get_exports(self, path: str, source: str) -> list[ExportDeclaration]:
        parsed = self._parse(path, source)
        return [record.declaration for record in self._records(parsed)]

    def _record_at(self, parsed: ParsedSource, name: str, position: int) -> _ExportRecord:
        for record in self._records(parsed):
            if record.declaration.position == position and record.declaration.name == name:
                return record
        raise AnalysisError(f'Declaration "{name}" not found at position {position} in {parsed.path}')

    def _declaration_name(self, parsed: ParsedSource, record: _ExportRecord) -> str | None:
        """Declared name, resolving default exports to the underlying declaration."""
        if not record.is_default:
            return record.declaration.name
        node = record.node
        if node.type == "identifier":
            return parsed.text(node)
        if node.type == "variable_declarator":
            name_node = node.child_by_field_name("name")
            return parsed.text(name_node) if name_node is not None else None
        if node.type in FUNCTION_TYPES or node.type in CLASS_TYPES:
            name_node = node.child_by_field_name("name")
            return parsed.text(name_node) if name_node is not None else None
        return None

    def _environment(self, parsed: ParsedSource) -> str:
        for statement in parsed.root.named_children:
            if statement.type != "import_statement":
                continue
            source_node = statement.child_by_field_name("source")
            if source_node is None:
                continue
            specifier = _unquote(parsed.text(source_node))
            if specifier == SERVER_ONLY_MODULE:
                return ENVIRONMENT_SERVER
            if specifier == CLIENT_ONLY_MODULE:
                return ENVIRONMENT_CLIENT
        return ENVIRONMENT_ISOMORPHIC

    def _doc_comment(self, parsed: ParsedSource, statement) -> str | None:
        previous = statement.prev_sibling
        if previous is None or previous.type != "comment":
            return None
        text = parsed.text(previous)
        return text if is_doc_comment(text) else None

    def get_export_metadata(self, path: str, source: str, name: str, position: int) -> ExportMetadata:
        parsed = self._parse(path, source)
        record = self._record_at(parsed, name, position)
        description, tags = None, ()
        comment = self._doc_comment(parsed, record.statement)
        if comment is not None:
            description, tags = parse_doc_comment(comment)
        return ExportMetadata(
            name=self._declaration_name(parsed, record),
            environment=self._environment(parsed),
            description=description,
            tags=tags,
        )

    def get_environment(self, path: str, source: str) -> str:
        return self._environment(self._parse(path, source))

    def _annotation_text(self, parsed: ParsedSource, node) -> str | None:
        if node is None:
            return None
        text = parsed.text(node).strip()
        if node.type == "type_annotation" and text.startswith(":"):
            text = text[1:].strip()
        return text or None

    def _signature_members(self, parsed: ParsedSource, body) -> tuple[TypeMember, ...]:
        members: list[TypeMember] = []
        if body is None:
            return ()
        for child in body.named_children:
            if child.type in MEMBER_NODE_TYPES:
                name_node = child.child_by_field_name("name")
                if name_node is None:
                    name_node = child.child_by_field_name("property")
                if name_node is None:
                    continue
                parameters = child.child_by_field_name("parameters")
                if parameters is not None:
                    type_text = parsed.text(parameters)
                else:
                    type_text = self._annotation_text(parsed, child.child_by_field_name("type"))
                members.append(
                    TypeMember(
                        name=parsed.text(name_node),
                        type=type_text,
                        optional=_has_token(child, "?"),
                    )
                )
            elif child.type in {"property_identifier", "enum_assignment"}:
                name_node = child if child.type == "property_identifier" else child.child_by_field_name("name")
                if name_node is not None:
                    members.append(TypeMember(name=parsed.text(name_node)))
        return tuple(members)

    def _parameter_members(self, parsed: ParsedSource, node) -> tuple[TypeMember, ...]:
        parameters = node.child_by_field_name("parameters")
        if parameters is None:
            parameter = node.child_by_field_name("parameter")
            return (TypeMember(name=parsed.text(parameter)),) if parameter is not None else ()
        members: list[TypeMember] = []
        for child in parameters.named_children:
            if child.type in {"required_parameter", "optional_parameter"}:
                pattern = child.child_by_field_name("pattern")
                members.append(
                    TypeMember(
                        name=parsed.text(pattern) if pattern is not None else parsed.text(child),
                        type=self._annotation_text(parsed, child.child_by_field_name("type")),
                        optional=child.type == "optional_parameter",
                    )
                )
            elif child.type != "comment":
                members.append(TypeMember(name=parsed.text(child)))
        return tuple(members)

    def _describe_value(self, parsed: ParsedSource, name: str | None, node) -> TypeDescription:
        if node.type in {"as_expression", "satisfies_expression", "parenthesized_expression"} and node.named_children:
            return self._describe_value(parsed, name, node.named_children[0])
        if node.type in FUNCTION_TYPES:
            return TypeDescription("Function", name, parsed.text(node), self._parameter_members(parsed, node))
        if node.type in CLASS_TYPES:
            return TypeDescription("Class", name, parsed.text(node), self._signature_members(parsed, node.child_by_field_name("body")))
        if node.type == "object":
            members = []
            for child in node.named_children:
                key = child.child_by_field_name("key") if child.type == "pair" else child
                if key is not None and child.type in {"pair", "shorthand_property_identifier"}:
                    members.append(TypeMember(name=_unquote(parsed.text(key))))
            return TypeDescription("Object", name, parsed.text(node), tuple(members))
        return TypeDescription(VALUE_KIND_BY_NODE.get(node.type, "Unknown"), name, parsed.text(node))

    def _describe(self, parsed: ParsedSource, name: str | None, node) -> TypeDescription | None:
        node_type = node.type
        if node_type == "type_alias_declaration":
            value = node.child_by_field_name("value")
            if value is None:
                return None
            members = self._signature_members(parsed, value) if value.type == "object_type" else ()
            kind = TYPE_KIND_BY_NODE.get(value.type, "Reference")
            return TypeDescription(kind, name, parsed.text(value), members)
        if node_type == "interface_declaration":
            return TypeDescription("Interface", name, parsed.text(node), self._signature_members(parsed, node.child_by_field_name("body")))
        if node_type == "enum_declaration":
            return TypeDescription("Enum", name, parsed.text(node), self._signature_members(parsed, node.child_by_field_name("body")))
        if node_type == "variable_declarator":
            annotation = self._annotation_text(parsed, node.child_by_field_name("type"))
            value = node.child_by_field_name("value")
            if value is not None:
                described = self._describe_value(parsed, name, value)
                if annotation is not None:
                    return TypeDescription(described.kind, name, annotation, described.members)
                return described
            if annotation is not None:
                return TypeDescription("Reference", name, annotation)
            return None
        return self._describe_value(parsed, name, node)

    def get_type(self, path: str, source: str, name: str, position: int) -> TypeDescription | None:
        parsed = self._parse(path, source)
        record = self._record_at(parsed, name, position)
        if record.node.type == "export_specifier":
            return None
        declared_name = self._declaration_name(parsed, record) or name
        return self._describe(parsed, declared_name, record.node)

    def get_diagnostics(self, path: str, source: str) -> list[Diagnostic]:
        parsed = self._parse(path, source)
        diagnostics: list[Diagnostic] = []

        def walk(node) -> None:
            if node.type == "ERROR":
                line, column = node.start_point
                diagnostics.append(Diagnostic(int(line), int(column), f"Unexpected syntax: {parsed.text(node)[:40]}"))
            elif node.is_missing:
                line, column = node.start_point
                diagnostics.append(Diagnostic(int(line), int(column), f"Missing {node.type}"))
            if not node.has_error:
                return
            for child in node.children:
                walk(child)

        walk(parsed.root)
        logger.debug("%d diagnostics for %s", len(diagnostics), path)
        return diagnostics


__all__ = ["TreeSitterAnalyzer"]
