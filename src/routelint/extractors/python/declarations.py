from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional

from routelint.domain.declarations import (
    Declaration,
    DeclarationKind,
    ListValue,
    MarkerInstance,
    MarkerValue,
    StrValue,
    TokenValue,
    Value,
)
from routelint.engine.names import CONTROLLER, PATH_VARIABLE, ROUTE_MARKERS
from routelint.engine.resolver import resolve_marker
from routelint.extractors.python.types import MarkerTypeTable

logger = logging.getLogger("routelint.extractors")

_ANNOTATED = {"typing.Annotated", "typing_extensions.Annotated"}

# route marker arguments declared as arrays; a lone scalar means a one-element list
_ARRAY_ARGUMENTS = {"value", "path", "method"}

_FUNCTION_DEFS = (ast.FunctionDef, ast.AsyncFunctionDef)


class UnsupportedValueError(ValueError):
    """Argument expression that has no counterpart in the value model."""


@dataclass
class ModuleDeclarations:
    module: Declaration
    types: MarkerTypeTable
    declarations: list[Declaration] = field(default_factory=list)  # source order
    classes: list[tuple[Declaration, str]] = field(default_factory=list)  # module-level, with qualified name

    @property
    def marker_definitions(self) -> list[Declaration]:
        return [cls for cls, qualified in self.classes if self.types.is_marker_class(qualified)]

    def batch(self) -> list[Declaration]:
        """
        Declarations the route engine has to look at. Call once every file is
        parsed: a marker base class may live in a file read later.
        """
        skip = {id(d) for d in self.marker_definitions}
        return [d for d in self.declarations if id(d) not in skip and is_batch_candidate(d)]


def is_batch_candidate(declaration: Declaration) -> bool:
    direct = {m.qualified_name for m in declaration.markers}
    if declaration.kind == "method":
        return any(name in ROUTE_MARKERS for name in direct)
    if declaration.kind == "class":
        # route hosts may be marked through a stereotype such as @RestController
        return bool(direct & ROUTE_MARKERS.keys()) or resolve_marker(declaration, CONTROLLER) is not None
    if declaration.kind == "parameter":
        return PATH_VARIABLE in direct
    return False


def module_name_for(path: Path, root: Path) -> str:
    """
    Dotted module name of ``path`` relative to ``root``:
      src/shop/api.py -> shop.api
      shop/__init__.py -> shop
    """
    try:
        rel = path.resolve().relative_to(root.resolve())
    except ValueError:
        rel = Path(path.name)

    parts = list(rel.with_suffix("").parts)
    if parts and parts[0] == "src" and len(parts) > 1:
        parts = parts[1:]
    if len(parts) > 1 and parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(parts) or path.stem


def build_declarations(
    source: str,
    module_name: str,
    types: MarkerTypeTable,
    file_path: str = "",
) -> Optional[ModuleDeclarations]:
    """
    Parse Python source into declarations. Uses ast only; never imports the code.

    Every class defined in the module is registered in ``types`` with its own
    decorators as meta-markers; classes deriving from a marker class are marker
    definitions and stay out of the batch. Returns None when the source does not
    parse.
    """
    try:
        tree = ast.parse(source, filename=file_path or module_name)
    except SyntaxError as exc:
        logger.warning("skipping %s: %s", file_path or module_name, exc)
        return None

    is_package = Path(file_path).name == "__init__.py"
    builder = _Builder(module_name, types, file_path, _import_aliases(tree, module_name, is_package))
    module = Declaration(kind="module", name=module_name, file_path=file_path, line=1)
    result = ModuleDeclarations(module=module, types=types)
    builder.visit_body(tree.body, module, result)
    return result


def build_declarations_from_file(
    path: Path,
    module_name: str,
    types: MarkerTypeTable,
    max_bytes: int = 2_000_000,
) -> Optional[ModuleDeclarations]:
    try:
        data = path.read_bytes()[:max_bytes]
    except OSError as exc:
        logger.warning("cannot read %s: %s", path, exc)
        return None
    source = data.decode("utf-8", errors="ignore")
    return build_declarations(source, module_name, types, file_path=str(path))


def _import_aliases(tree: ast.Module, module_name: str, is_package: bool = False) -> dict[str, str]:
    """Local name -> qualified name, from module-level imports."""
    aliases: dict[str, str] = {}
    package = module_name.split(".")
    # a package __init__ is its own anchor for one-dot imports
    depth = len(package) + 1 if is_package else len(package)

    for node in tree.body:
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    aliases[alias.asname] = alias.name
                else:
                    head = alias.name.split(".")[0]
                    aliases[head] = head
        elif isinstance(node, ast.ImportFrom):
            base = node.module or ""
            if node.level:
                # from .x import Y inside a.b.c -> a.b.x.Y; inside a/b/__init__.py -> a.b.x.Y
                anchor = package[: max(depth - node.level, 0)]
                base = ".".join([*anchor, base] if base else anchor)
            for alias in node.names:
                if alias.name == "*":
                    continue
                qualified = f"{base}.{alias.name}" if base else alias.name
                aliases[alias.asname or alias.name] = qualified
    return aliases


class _Builder:
    def __init__(self, module_name: str, types: MarkerTypeTable, file_path: str, aliases: dict[str, str]) -> None:
        self.module_name = module_name
        self.types = types
        self.file_path = file_path
        self.aliases = aliases

    # ----------------------------
    # Statements
    # ----------------------------

    def visit_body(self, body: list[ast.stmt], owner: Declaration, out: ModuleDeclarations) -> None:
        for node in _iter_definitions(body):
            if isinstance(node, ast.ClassDef):
                self._visit_class(node, owner, out)
            else:
                self._visit_function(node, owner, out)

    def _visit_class(self, node: ast.ClassDef, owner: Declaration, out: ModuleDeclarations) -> None:
        markers = self._markers(node.decorator_list)
        cls = owner.add_member(self._declaration("class", node.name, node.lineno, markers))
        out.declarations.append(cls)

        # every class may be used as a marker; its decorators are its meta-markers
        if owner.kind == "module":
            qualified = f"{self.module_name}.{node.name}"
            self.types.define(qualified, markers)
            self.types.record_bases(qualified, [b for b in map(self._qualify, node.bases) if b is not None])
            out.classes.append((cls, qualified))

        self.visit_body(node.body, cls, out)

    def _visit_function(self, node: ast.AST, owner: Declaration, out: ModuleDeclarations) -> None:
        markers = self._markers(node.decorator_list)
        method = owner.add_member(self._declaration("method", node.name, node.lineno, markers))
        out.declarations.append(method)

        for arg, default in _iter_parameters(node.args, skip_receiver=owner.kind == "class"):
            param_markers = self._annotation_markers(arg.annotation)
            if isinstance(default, ast.Call):
                marker = self._marker(default)
                if marker is not None:
                    param_markers.append(marker)
            parameter = method.add_parameter(
                self._declaration("parameter", arg.arg, getattr(arg, "lineno", node.lineno), param_markers)
            )
            out.declarations.append(parameter)

        self.visit_body(node.body, method, out)

    def _declaration(
        self, kind: DeclarationKind, name: str, line: int, markers: list[MarkerInstance]
    ) -> Declaration:
        return Declaration(kind=kind, name=name, markers=markers, file_path=self.file_path, line=line)

    # ----------------------------
    # Markers and values
    # ----------------------------

    def _markers(self, nodes: Iterable[ast.expr]) -> list[MarkerInstance]:
        out: list[MarkerInstance] = []
        for node in nodes:
            marker = self._marker(node)
            if marker is not None:
                out.append(marker)
        return out

    def _annotation_markers(self, annotation: Optional[ast.expr]) -> list[MarkerInstance]:
        # Annotated[int, PathVariable("id")]
        if not isinstance(annotation, ast.Subscript):
            return []
        if self._qualify(annotation.value) not in _ANNOTATED and _name_of(annotation.value) != "Annotated":
            return []
        elts = annotation.slice.elts if isinstance(annotation.slice, ast.Tuple) else []
        return self._markers(e for e in elts[1:] if isinstance(e, (ast.Call, ast.Name, ast.Attribute)))

    def _marker(self, node: ast.expr) -> Optional[MarkerInstance]:
        func = node.func if isinstance(node, ast.Call) else node
        qualified = self._qualify(func)
        if qualified is None:
            return None

        marker = MarkerInstance(type=self.types.get(qualified))
        if not isinstance(node, ast.Call):
            return marker

        positional = [a for a in node.args if not isinstance(a, ast.Starred)]
        if positional:
            target = positional[0] if len(positional) == 1 else ast.List(elts=positional, ctx=ast.Load())
            self._set_argument(marker, "value", target)
        for kw in node.keywords:
            if kw.arg is not None:
                self._set_argument(marker, kw.arg, kw.value)
        return marker

    def _set_argument(self, marker: MarkerInstance, name: str, node: ast.expr) -> None:
        try:
            value = self.decode_value(node)
        except UnsupportedValueError as exc:
            logger.debug("%s: dropping argument %s of %s: %s", self.file_path, name, marker.simple_name, exc)
            return

        if (
            name in _ARRAY_ARGUMENTS
            and marker.qualified_name in ROUTE_MARKERS
            and isinstance(value, (StrValue, TokenValue))
        ):
            value = ListValue((value,))
        marker.arguments[name] = value

    def decode_value(self, node: ast.expr) -> Value:
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            return StrValue(node.value)
        if isinstance(node, (ast.List, ast.Tuple, ast.Set)):
            return ListValue(tuple(self.decode_value(e) for e in node.elts))
        if isinstance(node, (ast.Name, ast.Attribute)):
            qualified = self._qualify(node)
            if qualified is not None:
                return TokenValue(qualified)
        if isinstance(node, ast.Call):
            marker = self._marker(node)
            if marker is not None:
                return MarkerValue(marker)
        raise UnsupportedValueError(f"unsupported expression {type(node).__name__}")

    def _qualify(self, node: ast.AST) -> Optional[str]:
        dotted = _name_of(node)
        if dotted is None:
            return None
        head, _, rest = dotted.partition(".")
        if head in self.aliases:
            base = self.aliases[head]
        else:
            base = f"{self.module_name}.{head}"
        return f"{base}.{rest}" if rest else base


def _name_of(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _name_of(node.value)
        return f"{base}.{node.attr}" if base else None
    return None


def _iter_definitions(body: list[ast.stmt]) -> Iterator[ast.stmt]:
    """Class and function definitions in ``body``, looking through if/try/with/loops."""
    for node in body:
        if isinstance(node, (ast.ClassDef, *_FUNCTION_DEFS)):
            yield node
        elif isinstance(node, (ast.If, ast.For, ast.AsyncFor, ast.While)):
            yield from _iter_definitions(node.body)
            yield from _iter_definitions(node.orelse)
        elif isinstance(node, (ast.With, ast.AsyncWith)):
            yield from _iter_definitions(node.body)
        elif isinstance(node, ast.Try):
            yield from _iter_definitions(node.body)
            for handler in node.handlers:
                yield from _iter_definitions(handler.body)
            yield from _iter_definitions(node.orelse)
            yield from _iter_definitions(node.finalbody)


def _iter_parameters(args: ast.arguments, skip_receiver: bool) -> Iterator[tuple[ast.arg, Optional[ast.expr]]]:
    positional = [*args.posonlyargs, *args.args]
    defaults: list[Optional[ast.expr]] = [None] * (len(positional) - len(args.defaults)) + list(args.defaults)

    for index, (arg, default) in enumerate(zip(positional, defaults)):
        if index == 0 and skip_receiver and arg.arg in ("self", "cls"):
            continue
        yield arg, default

    for arg, default in zip(args.kwonlyargs, args.kw_defaults):
        yield arg, default
