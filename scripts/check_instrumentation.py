"""
Static checks over the sizing package's diagnostics:

- every Cat.X referenced anywhere is a member of the Cat enum
- every event name passed to emit_diag()/_emit_diag() is listed in DiagEvent
- every DiagEvent name is actually emitted somewhere

Exit status 0 when clean, 1 on mismatches, 2 when the package is not found.
"""

from __future__ import annotations

import ast
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent.parent / "src" / "cri"

Location = tuple[Path, int]


def _load_cat_members(inst_path: Path) -> set[str]:
    mod = ast.parse(inst_path.read_text(encoding="utf-8"))
    for node in mod.body:
        if isinstance(node, ast.ClassDef) and node.name == "Cat":
            return {
                stmt.targets[0].id
                for stmt in node.body
                if isinstance(stmt, ast.Assign)
                and len(stmt.targets) == 1
                and isinstance(stmt.targets[0], ast.Name)
            }
    return set()


def _load_diag_events(types_path: Path) -> set[str]:
    mod = ast.parse(types_path.read_text(encoding="utf-8"))
    for node in mod.body:
        if not (isinstance(node, ast.Assign) and len(node.targets) == 1):
            continue
        target = node.targets[0]
        if not (isinstance(target, ast.Name) and target.id == "DiagEvent"):
            continue
        if isinstance(node.value, ast.Subscript):
            elts = node.value.slice.elts if isinstance(node.value.slice, ast.Tuple) else [node.value.slice]
            return {e.value for e in elts if isinstance(e, ast.Constant) and isinstance(e.value, str)}
    return set()


def _emitted_event(call: ast.Call) -> ast.expr | None:
    # sink.emit_diag(cat, event, ...) / self._emit_diag(event, ...)
    func = call.func
    name = func.attr if isinstance(func, ast.Attribute) else getattr(func, "id", None)
    if name == "emit_diag" and len(call.args) >= 2:
        return call.args[1]
    if name == "_emit_diag" and len(call.args) >= 1:
        return call.args[0]
    return None


def scan(root: Path) -> tuple[dict[str, list[Location]], dict[str, list[Location]]]:
    """Return (Cat attribute uses, literal diagnostic event uses) under root."""
    cats: dict[str, list[Location]] = {}
    events: dict[str, list[Location]] = {}
    for path in sorted(root.rglob("*.py")):
        mod = ast.parse(path.read_text(encoding="utf-8"))
        for node in ast.walk(mod):
            if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name):
                if node.value.id == "Cat":
                    cats.setdefault(node.attr, []).append((path, node.lineno))
            elif isinstance(node, ast.Call):
                event = _emitted_event(node)
                if isinstance(event, ast.Constant) and isinstance(event.value, str):
                    events.setdefault(event.value, []).append((path, node.lineno))
    return cats, events


def main(root: Path = PACKAGE_ROOT) -> int:
    inst_path = root / "sizing" / "instrumentation.py"
    types_path = root / "sizing" / "types.py"

    for path in (inst_path, types_path):
        if not path.exists():
            print(f"ERROR: {path.name} not found at {path}")
            return 2

    cat_members = _load_cat_members(inst_path)
    diag_events = _load_diag_events(types_path)
    cats, events = scan(root)

    problems: list[str] = []
    for name in sorted(set(cats) - cat_members):
        for path, line in cats[name]:
            problems.append(f"  unknown Cat.{name}: {path}:{line}")
    for name in sorted(set(events) - diag_events):
        for path, line in events[name]:
            problems.append(f"  event {name!r} missing from DiagEvent: {path}:{line}")
    for name in sorted(diag_events - set(events)):
        problems.append(f"  DiagEvent {name!r} is never emitted")

    if not problems:
        print("OK: Cat references and diagnostic events are consistent.")
        return 0

    print("ERROR: instrumentation mismatches:")
    for line in problems:
        print(line)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
