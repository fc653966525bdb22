"""JavaScript analyzer built on the tree-sitter JavaScript grammar.

The source is parsed into a concrete syntax tree and walked once in document
order. Each node kind listed in HANDLERS adds records, one explanation entry
and (for most kinds) one flowchart node to the FlowBuilder passed down the
walk. A tree containing ERROR or MISSING nodes is reported as a syntax error
and not walked.
"""

import logging
from typing import Iterator, Optional

import tree_sitter
import tree_sitter_javascript

from .base_analyzer import (
    AnalysisResult,
    AsyncOpRecord,
    BaseAnalyzer,
    ClassRecord,
    ControlFlowRecord,
    ExportRecord,
    FlowBuilder,
    FunctionRecord,
    ImportRecord,
    NodeColor,
    NodeType,
    VariableRecord,
)


logger = logging.getLogger("codeflow.analyzers.javascript")

_JS_LANGUAGE = tree_sitter.Language(tree_sitter_javascript.language())

FUNCTION_EXPRESSIONS = {"function_expression", "function", "generator_function"}
ACCESSOR_TOKENS = {"get", "set", "static get"}


class JavaScriptAnalyzer(BaseAnalyzer):
    """Syntax-tree driven analyzer for JavaScript modules."""

    language_label = "JavaScript"

    HANDLERS = {
        "function_declaration": "_handle_function",
        "generator_function_declaration": "_handle_function",
        "lexical_declaration": "_handle_variable_declaration",
        "variable_declaration": "_handle_variable_declaration",
        "class_declaration": "_handle_class",
        "import_statement": "_handle_import",
        "export_statement": "_handle_export",
        "if_statement": "_handle_if",
        "for_statement": "_handle_for",
        "for_in_statement": "_handle_for_in",
        "while_statement": "_handle_while",
        "await_expression": "_handle_await",
        "try_statement": "_handle_try",
        "call_expression": "_handle_call",
        # Arrow functions bound to a declarator are counted there
        "arrow_function": None,
    }

    def aliases(self) -> list[str]:
        return ["javascript", "js"]

    def count_lines(self, code: str) -> int:
        """Raw line count, blank lines included."""
        return len(code.split("\n"))

    def analyze(self, code: str) -> AnalysisResult:
        """Parse and walk the code, degrading to start/end on syntax errors."""
        builder = FlowBuilder()
        tree = self.parse(code)

        if tree.root_node.has_error:
            message = self._syntax_error_message(tree.root_node)
            logger.info(f"JavaScript parse failed: {message}")
            builder.explanation.append(f"Syntax Error: {message}")
            return builder.build(self.language_label, self.count_lines(code))

        for node in self.walk(tree.root_node):
            handler_name = self.HANDLERS.get(node.type)
            if handler_name:
                getattr(self, handler_name)(builder, node)

        result = builder.build(self.language_label, self.count_lines(code))
        logger.debug(
            f"JavaScript analysis: {len(result.functions)} functions, "
            f"{len(result.flowchart.nodes)} nodes"
        )
        return result

    def parse(self, code: str) -> tree_sitter.Tree:
        """Parse code with a parser created for this call."""
        parser = tree_sitter.Parser(_JS_LANGUAGE)
        return parser.parse(code.encode("utf-8"))

    def walk(self, root: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
        """Yield every named node in pre-order (document order)."""
        stack = [root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.named_children))

    # ===== Handlers =====

    def _handle_function(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        name = self._field_text(node, "name") or "anonymous"
        line = self._line(node)
        is_async = self._is_async(node)
        param_count = self._param_count(node)

        builder.functions.append(FunctionRecord(
            name=name,
            line=line,
            kind="function",
            param_count=param_count,
            is_async=is_async,
        ))
        label = f"Function: {name}" + (" (async)" if is_async else "")
        builder.add_node(NodeType.FUNCTION, label, NodeColor.FUNCTION)

        prefix = "Async function" if is_async else "Function"
        builder.explain(line, f"{prefix} '{name}' is declared with {param_count} parameter(s)")

    def _handle_variable_declaration(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        """One entry per declarator; arrow-function initializers count twice."""
        decl_kind = node.children[0].type if node.children else "var"

        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            self._declare(
                builder,
                declarator.child_by_field_name("name"),
                declarator.child_by_field_name("value"),
                decl_kind,
                self._line(declarator),
            )

    def _handle_for_in(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        """for..in / for..of are not loops, but a declared binding is a variable."""
        kind = node.child_by_field_name("kind")
        if kind is None:
            return
        left = node.child_by_field_name("left")
        self._declare(builder, left, None, self._text(kind), self._line(left or node))

    def _declare(
        self,
        builder: FlowBuilder,
        target: Optional[tree_sitter.Node],
        value: Optional[tree_sitter.Node],
        decl_kind: str,
        line: int,
    ) -> None:
        name = ", ".join(self._pattern_names(target)) or "variable"

        if value is not None and value.type == "arrow_function":
            is_async = self._is_async(value)
            builder.variables.append(VariableRecord(
                name=name, line=line, kind="arrow-function", is_async=is_async
            ))
            builder.functions.append(FunctionRecord(
                name=name,
                line=line,
                kind="arrow-function",
                param_count=self._param_count(value),
                is_async=is_async,
            ))
            label = f"Arrow Function: {name}" + (" (async)" if is_async else "")
            builder.add_node(NodeType.FUNCTION, label, NodeColor.FUNCTION)

            prefix = "Async arrow function" if is_async else "Arrow function"
            builder.explain(line, f"{prefix} '{name}' is assigned ({decl_kind})")
        else:
            builder.variables.append(VariableRecord(name=name, line=line))
            builder.add_node(NodeType.VARIABLE, f"Variable: {name}", NodeColor.VARIABLE)
            builder.explain(line, f"Variable '{name}' is declared ({decl_kind})")

    def _handle_class(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        name = self._field_text(node, "name") or "anonymous"
        line = self._line(node)

        method_names = []
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type != "method_definition":
                continue
            if any(child.type in ACCESSOR_TOKENS for child in member.children):
                continue
            key_name = self._property_name(member.child_by_field_name("name"))
            if key_name and key_name != "constructor":
                method_names.append(key_name)

        builder.classes.append(ClassRecord(
            name=name, line=line, method_names=tuple(method_names)
        ))
        builder.add_node(NodeType.CLASS, f"Class: {name}", NodeColor.CLASS)
        builder.explain(line, f"Class '{name}' is declared with {len(method_names)} method(s)")

    def _handle_import(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        source = self._string_value(self._source_node(node))
        line = self._line(node)

        names = []
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    names.append(self._text(part))
                elif part.type == "namespace_import":
                    names.extend(self._text(c) for c in part.named_children if c.type == "identifier")
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type == "import_specifier":
                            local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                            names.append(self._text(local) or "?")

        builder.imports.append(ImportRecord(source=source, line=line, specifier_names=tuple(names)))
        if names:
            builder.explain(line, f"Imports {', '.join(names)} from '{source}'")
        else:
            builder.explain(line, f"Imports '{source}'")

    def _handle_export(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        if any(child.type == "default" for child in node.children):
            self._handle_default_export(builder, node)
        else:
            self._handle_named_export(builder, node)

    def _handle_named_export(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        line = self._line(node)
        declaration = node.child_by_field_name("declaration")
        clause = next((c for c in node.named_children if c.type == "export_clause"), None)

        if declaration is not None:
            if declaration.type in ("lexical_declaration", "variable_declaration"):
                declarators = [c for c in declaration.named_children if c.type == "variable_declarator"]
                name = ", ".join(self._pattern_names(
                    declarators[0].child_by_field_name("name") if declarators else None
                ))
            else:
                name = self._field_text(declaration, "name")
        elif clause is not None:
            name = ", ".join(
                self._text(spec.child_by_field_name("alias") or spec.child_by_field_name("name")) or "?"
                for spec in clause.named_children
                if spec.type == "export_specifier"
            )
        else:
            # export * from '...'
            return

        name = name or "anonymous"
        builder.exports.append(ExportRecord(name=name, line=line, kind="named"))
        builder.explain(line, f"Named export '{name}'")

    def _handle_default_export(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        line = self._line(node)
        target = node.child_by_field_name("declaration") or node.child_by_field_name("value")

        if target is None:
            name = None
        elif target.type == "identifier":
            name = self._text(target)
        else:
            name = self._field_text(target, "name")

        builder.exports.append(ExportRecord(name=name or "default", line=line, kind="default"))
        builder.explain(line, f"Default export '{name or 'default'}'")

        # Default declarations in expression form are not reached by HANDLERS
        if target is not None:
            if target.type in FUNCTION_EXPRESSIONS:
                self._handle_function(builder, target)
            elif target.type == "class":
                self._handle_class(builder, target)

    def _handle_if(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        line = self._line(node)
        builder.control_flow.append(ControlFlowRecord(kind="conditional", line=line))
        builder.add_node(NodeType.DECISION, "Conditional", NodeColor.DECISION)
        builder.explain(line, "Conditional statement")

    def _handle_for(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        line = self._line(node)
        builder.control_flow.append(ControlFlowRecord(kind="loop", line=line, loop_kind="for"))
        builder.add_node(NodeType.LOOP, "For Loop", NodeColor.LOOP)
        builder.explain(line, "For loop")

    def _handle_while(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        line = self._line(node)
        builder.control_flow.append(ControlFlowRecord(kind="loop", line=line, loop_kind="while"))
        builder.add_node(NodeType.LOOP, "While Loop", NodeColor.LOOP)
        builder.explain(line, "While loop")

    def _handle_await(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        line = self._line(node)
        builder.async_operations.append(AsyncOpRecord(line=line))
        builder.explain(line, "Awaits an asynchronous operation")

    def _handle_try(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        line = self._line(node)
        builder.control_flow.append(ControlFlowRecord(kind="try-catch", line=line))
        builder.add_node(NodeType.ERROR_HANDLING, "Try/Catch", NodeColor.ERROR_HANDLING)
        builder.explain(line, "Try/catch block")

    def _handle_call(self, builder: FlowBuilder, node: tree_sitter.Node) -> None:
        """Only console.<method>(...) calls are charted."""
        method = self._console_method(node.child_by_field_name("function"))
        if method is None:
            return
        line = self._line(node)
        builder.add_node(NodeType.OUTPUT, f"console.{method}()", NodeColor.OUTPUT)
        builder.explain(line, f"Output via console.{method}()")

    # ===== Helpers =====

    @staticmethod
    def _line(node: tree_sitter.Node) -> int:
        return node.start_point.row + 1

    @staticmethod
    def _text(node: Optional[tree_sitter.Node]) -> Optional[str]:
        if node is None or node.text is None:
            return None
        return node.text.decode("utf-8", errors="replace")

    def _field_text(self, node: tree_sitter.Node, field_name: str) -> Optional[str]:
        return self._text(node.child_by_field_name(field_name))

    @staticmethod
    def _is_async(node: tree_sitter.Node) -> bool:
        return any(child.type == "async" for child in node.children)

    @staticmethod
    def _param_count(node: tree_sitter.Node) -> int:
        # x => ... has a single bare parameter
        if node.child_by_field_name("parameter") is not None:
            return 1
        params = node.child_by_field_name("parameters")
        if params is None:
            return 0
        return len([p for p in params.named_children if p.type != "comment"])

    def _property_name(self, key: Optional[tree_sitter.Node]) -> Optional[str]:
        if key is None or key.type == "computed_property_name":
            return None
        if key.type == "string":
            return self._string_value(key)
        return self._text(key)

    def _string_value(self, node: Optional[tree_sitter.Node]) -> str:
        """Contents of a string literal, without its quotes."""
        text = self._text(node) or ""
        if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
            return text[1:-1]
        return text

    @staticmethod
    def _source_node(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        source = node.child_by_field_name("source")
        if source is not None:
            return source
        for child in node.named_children:
            if child.type == "string":
                return child
            if child.type == "from_clause":
                return child.child_by_field_name("source")
        return None

    def _pattern_names(self, pattern: Optional[tree_sitter.Node]) -> list[str]:
        """Identifiers bound by a declarator target, destructuring included."""
        if pattern is None:
            return []

        if pattern.type in ("identifier", "shorthand_property_identifier_pattern"):
            return [self._text(pattern)]
        if pattern.type == "pair_pattern":
            return self._pattern_names(pattern.child_by_field_name("value"))
        if pattern.type in ("assignment_pattern", "object_assignment_pattern"):
            return self._pattern_names(pattern.child_by_field_name("left"))
        if pattern.type in ("object_pattern", "array_pattern", "rest_pattern"):
            names = []
            for child in pattern.named_children:
                names.extend(self._pattern_names(child))
            return names
        return []

    def _console_method(self, callee: Optional[tree_sitter.Node]) -> Optional[str]:
        if callee is None or callee.type != "member_expression":
            return None
        obj = callee.child_by_field_name("object")
        if obj is None or obj.type != "identifier" or self._text(obj) != "console":
            return None
        prop = callee.child_by_field_name("property")
        if prop is None or prop.type != "property_identifier":
            return None
        return self._text(prop)

    def _syntax_error_message(self, root: tree_sitter.Node) -> str:
        """Describe the first ERROR or MISSING node in the tree."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_missing:
                return f"Line {self._line(node)}: Missing {node.type}"
            if node.type == "ERROR":
                snippet = (self._text(node) or "").strip().split("\n", 1)[0]
                return f"Line {self._line(node)}: Unexpected token {snippet!r}"
            stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
        return "Line 1: Invalid syntax"
