from __future__ import annotations

import json
from pathlib import Path

import pytest

from cri import config
from cri.main import main

SECTIONS = {
    "sections": [
        {
            "id": "hero",
            "sizes": [
                {"screen_min_width": "1200px", "container_max_width": "800px"},
                {"screen_max_width": "600px", "container_max_width": "400px"},
            ],
        }
    ]
}


@pytest.fixture
def sections_file(tmp_path: Path) -> Path:
    path = tmp_path / "sections.json"
    path.write_text(json.dumps(SECTIONS), encoding="utf-8")
    return path


def test_prints_generated_sizes(sections_file, capsys) -> None:
    code = main([
        "--sections", str(sections_file),
        "--section", "hero",
        "(max-width: 600px) 480px, 300px",
        "(max-width: 1024px) 100vw, 1024px",
    ])

    assert code == 0
    assert capsys.readouterr().out.splitlines() == [
        "(max-width: 600px) 400px, (min-width: 1200px) 800px, 300px",
        "(max-width: 600px) 400px, (min-width: 1200px) 800px, 1024px",
    ]


def test_unparseable_sizes_exit_2(sections_file, capsys) -> None:
    code = main(["--sections", str(sections_file), "--section", "hero", "300px"])

    assert code == 2
    assert "Could not parse image size '300px'." in capsys.readouterr().err


def test_unknown_section_exit_1(sections_file, capsys) -> None:
    code = main(["--sections", str(sections_file), "--section", "footer", "a, 300px"])

    assert code == 1
    assert "'footer' is not registered" in capsys.readouterr().err


def test_no_valid_sections_exit_1(tmp_path: Path) -> None:
    path = tmp_path / "sections.yml"
    path.write_text("id: hero\nsizes: []\n", encoding="utf-8")

    assert main(["--sections", str(path), "--section", "hero", "a, 300px"]) == 1


def test_missing_sections_file_exit_2(tmp_path: Path) -> None:
    assert main(["--sections", str(tmp_path / "nope.yml"), "--section", "hero", "a, 300px"]) == 2


def test_sections_path_required(monkeypatch) -> None:
    monkeypatch.setattr(config, "SECTIONS_PATH", None)

    assert main(["--section", "hero", "a, 300px"]) == 2


def test_bad_context_json_exit_2(sections_file) -> None:
    assert main(["--sections", str(sections_file), "--section", "hero", "--context", "{nope", "a, 300px"]) == 2


def test_dump_and_debug(sections_file, tmp_path: Path, capsys) -> None:
    dump = tmp_path / "dump.json"

    code = main([
        "--sections", str(sections_file),
        "--section", "hero",
        "--context", '{"columns": 2}',
        "--debug",
        "--dump", str(dump),
        "a, 10px",
    ])

    assert code == 0
    data = json.loads(dump.read_text(encoding="utf-8"))
    assert data["stack"] == ["hero"]
    assert list(data["sections"]) == ["hero"]
