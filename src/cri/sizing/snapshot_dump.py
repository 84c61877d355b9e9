import json
from pathlib import Path
from typing import Any

from .instrumentation import Cat
from .plugin import ResponsiveImagesPlugin
from .types import RegistrySnapshot


def build_snapshot(plugin: ResponsiveImagesPlugin) -> RegistrySnapshot:
    return {
        "sections": plugin.registry.snapshot(),
        "stack": list(plugin.stack.section_ids()),
    }


def dump_sections_json(plugin: ResponsiveImagesPlugin, out_path: Path) -> bool:
    def _emit(level: str, msg: str, **ctx: Any) -> None:
        plugin.sink.emit_signal(Cat.DUMP, msg, level=level, **ctx)

    payload = build_snapshot(plugin)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False, default=str),
            encoding="utf-8",
        )
        _emit("info", f"Wrote sections dump to: {out_path}", sections=len(payload["sections"]))
        return True
    except OSError as e:
        _emit("warning", f"Could not output to json. Message: {e!r}")
        return False
