"""Extract identifiers from Python source files.

Every file is parsed with :mod:`ast` and each name occurrence becomes an
:class:`~identypo.models.Identifier`, ordered by source position. Declarations
(``def``, ``class``, parameters, assignments and imports) carry their own kind;
plain name loads take the kind of the module-wide declaration with the same
name and fall back to ``OTHER`` when nothing in the file declares it.
"""

from __future__ import annotations

import ast
import logging
import tokenize
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from identypo.errors import TargetResolutionError
from identypo.models import Identifier, IdentifierKind

LOGGER = logging.getLogger(__name__)

_MODULE_SCOPE = "module"
_CLASS_SCOPE = "class"
_FUNCTION_SCOPE = "function"


@dataclass
class _Occurrence:
    name: str
    line: int
    column: int
    kind: IdentifierKind | None
    declares: bool = False


def _is_constant_name(name: str) -> bool:
    return any(char.isalpha() for char in name) and name == name.upper()


def _is_final_annotation(annotation: ast.expr) -> bool:
    if isinstance(annotation, ast.Subscript):
        annotation = annotation.value
    if isinstance(annotation, ast.Name):
        return annotation.id == "Final"
    if isinstance(annotation, ast.Attribute):
        return annotation.attr == "Final"
    return False


class _IdentifierCollector(ast.NodeVisitor):
    """Record name occurrences while tracking the enclosing scope type."""

    def __init__(self) -> None:
        self.occurrences: list[_Occurrence] = []
        self._scopes: list[str] = [_MODULE_SCOPE]

    def _add(
        self,
        name: str,
        line: int,
        column: int,
        kind: IdentifierKind | None,
        *,
        declares: bool = False,
    ) -> None:
        if name:
            self.occurrences.append(_Occurrence(name, line, column, kind, declares))

    def _visit_in_scope(self, node: ast.AST, scope: str) -> None:
        self._scopes.append(scope)
        try:
            self.generic_visit(node)
        finally:
            self._scopes.pop()

    def _assignment_kind(self, name: str) -> IdentifierKind:
        if self._scopes[-1] in (_MODULE_SCOPE, _CLASS_SCOPE) and _is_constant_name(name):
            return IdentifierKind.CONSTANT
        return IdentifierKind.VARIABLE

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._add(node.name, node.lineno, node.col_offset, IdentifierKind.FUNCTION, declares=True)
        self._visit_in_scope(node, _FUNCTION_SCOPE)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._add(node.name, node.lineno, node.col_offset, IdentifierKind.FUNCTION, declares=True)
        self._visit_in_scope(node, _FUNCTION_SCOPE)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        self._visit_in_scope(node, _FUNCTION_SCOPE)

    def visit_ListComp(self, node: ast.ListComp) -> None:
        self._visit_in_scope(node, _FUNCTION_SCOPE)

    def visit_SetComp(self, node: ast.SetComp) -> None:
        self._visit_in_scope(node, _FUNCTION_SCOPE)

    def visit_DictComp(self, node: ast.DictComp) -> None:
        self._visit_in_scope(node, _FUNCTION_SCOPE)

    def visit_GeneratorExp(self, node: ast.GeneratorExp) -> None:
        self._visit_in_scope(node, _FUNCTION_SCOPE)

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self._add(node.name, node.lineno, node.col_offset, IdentifierKind.OTHER, declares=True)
        self._visit_in_scope(node, _CLASS_SCOPE)

    def visit_arg(self, node: ast.arg) -> None:
        self._add(node.arg, node.lineno, node.col_offset, IdentifierKind.VARIABLE, declares=True)
        self.generic_visit(node)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        target = node.target
        if isinstance(target, ast.Name) and _is_final_annotation(node.annotation):
            self._add(
                target.id,
                target.lineno,
                target.col_offset,
                IdentifierKind.CONSTANT,
                declares=True,
            )
            self.visit(node.annotation)
            if node.value is not None:
                self.visit(node.value)
            return
        self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, ast.Store):
            self._add(
                node.id,
                node.lineno,
                node.col_offset,
                self._assignment_kind(node.id),
                declares=True,
            )
        else:
            self._add(node.id, node.lineno, node.col_offset, None)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        self.generic_visit(node)
        line = node.end_lineno or node.lineno
        column = (node.end_col_offset or node.col_offset) - len(node.attr)
        self._add(node.attr, line, column, IdentifierKind.OTHER)

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            self._add_alias(alias, bound_name=alias.name.split(".")[0])

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        if node.module:
            self._add(node.module, node.lineno, node.col_offset, IdentifierKind.OTHER)
        for alias in node.names:
            if alias.name != "*":
                self._add_alias(alias, bound_name=alias.name)

    def _add_alias(self, alias: ast.alias, *, bound_name: str) -> None:
        self._add(alias.name, alias.lineno, alias.col_offset, IdentifierKind.OTHER)
        if alias.asname:
            end_column = alias.end_col_offset or alias.col_offset
            self._add(
                alias.asname,
                alias.lineno,
                end_column - len(alias.asname),
                IdentifierKind.OTHER,
                declares=True,
            )
        else:
            self._add_declaration_only(bound_name)

    def _add_declaration_only(self, name: str) -> None:
        # Imports bind a name without a separate occurrence of it.
        self.occurrences.append(_Occurrence(name, -1, -1, IdentifierKind.OTHER, True))

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> None:
        if node.name:
            self._add(node.name, node.lineno, node.col_offset, IdentifierKind.VARIABLE, declares=True)
        self.generic_visit(node)

    def visit_Global(self, node: ast.Global) -> None:
        for name in node.names:
            self._add(name, node.lineno, node.col_offset, IdentifierKind.VARIABLE)

    def visit_Nonlocal(self, node: ast.Nonlocal) -> None:
        for name in node.names:
            self._add(name, node.lineno, node.col_offset, IdentifierKind.VARIABLE)

    def visit_MatchAs(self, node: ast.MatchAs) -> None:
        if node.name:
            self._add(node.name, node.lineno, node.col_offset, IdentifierKind.VARIABLE, declares=True)
        self.generic_visit(node)

    def visit_MatchStar(self, node: ast.MatchStar) -> None:
        if node.name:
            self._add(node.name, node.lineno, node.col_offset, IdentifierKind.VARIABLE, declares=True)

    def visit_MatchMapping(self, node: ast.MatchMapping) -> None:
        self.generic_visit(node)
        if node.rest:
            # ``**rest`` is the last element before the closing brace.
            line = node.end_lineno or node.lineno
            column = (node.end_col_offset or node.col_offset) - len(node.rest) - 1
            self._add(node.rest, line, column, IdentifierKind.VARIABLE, declares=True)

    # Type parameters and ``type`` aliases (Python 3.12+) declare types.
    def _visit_type_param(self, node: ast.AST) -> None:
        self._add(node.name, node.lineno, node.col_offset, IdentifierKind.OTHER, declares=True)
        self.generic_visit(node)

    visit_TypeVar = _visit_type_param
    visit_ParamSpec = _visit_type_param
    visit_TypeVarTuple = _visit_type_param

    def visit_TypeAlias(self, node: ast.AST) -> None:
        name = node.name
        self._add(name.id, name.lineno, name.col_offset, IdentifierKind.OTHER, declares=True)
        for param in node.type_params:
            self.visit(param)
        self.visit(node.value)


def extract_identifiers(tree: ast.AST, filename: str) -> list[Identifier]:
    """Return the identifiers of a parsed module in source position order."""

    collector = _IdentifierCollector()
    collector.visit(tree)

    ordered = sorted(
        enumerate(collector.occurrences),
        key=lambda item: (item[1].line, item[1].column, item[0]),
    )

    declarations: dict[str, IdentifierKind] = {}
    for _, occurrence in ordered:
        if occurrence.declares and occurrence.kind is not None:
            declarations.setdefault(occurrence.name, occurrence.kind)

    identifiers: list[Identifier] = []
    for _, occurrence in ordered:
        if occurrence.line < 0:
            continue
        kind = occurrence.kind or declarations.get(occurrence.name, IdentifierKind.OTHER)
        identifiers.append(
            Identifier(name=occurrence.name, kind=kind, file=filename, line=occurrence.line)
        )
    return identifiers


def parse_source_file(path: Path) -> ast.Module:
    """Parse ``path``, honouring any PEP 263 encoding declaration."""

    try:
        with tokenize.open(path) as handle:
            source = handle.read()
        return ast.parse(source, filename=str(path))
    except (OSError, SyntaxError, UnicodeDecodeError, ValueError) as exc:
        raise TargetResolutionError(f"could not parse input {path}: {exc}") from exc


def collect_identifiers(paths: Iterable[Path]) -> list[Identifier]:
    """Parse every file in ``paths`` and return their identifiers in order.

    All files are parsed before any identifier is returned so that a parse
    failure aborts the scan without partial results.
    """

    trees = [(path, parse_source_file(path)) for path in paths]
    LOGGER.debug("Parsed %d Python file(s)", len(trees))

    identifiers: list[Identifier] = []
    for path, tree in trees:
        found = extract_identifiers(tree, str(path))
        LOGGER.debug("Found %d identifier(s) in %s", len(found), path)
        identifiers.extend(found)
    return identifiers
