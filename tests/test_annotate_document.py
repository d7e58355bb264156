"""Tests for scripts/annotate_document.py."""
from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import Any

import orjson
import pytest
from lxml import etree


def _load_cli_module() -> Any:
    root = Path(__file__).resolve().parents[1]
    script_path = root / "scripts" / "annotate_document.py"
    spec = importlib.util.spec_from_file_location("annotate_document", script_path)
    assert spec is not None
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


def _write_doc(tmp_path: Path, *, bad: bool = False) -> Path:
    citations = [{"section": [0], "paragraph": 0, "start": 5, "end": 8, "index": 0}]
    if bad:
        citations.append({"section": [0], "paragraph": 1, "start": 2, "end": 50, "index": 1})
    doc = {
        "sections": [
            {"title": "Intro", "paragraphs": ["Some [1] text.", "More."]},
            {"title": "End", "paragraphs": []},
        ],
        "images": [{"path": "img.png"}],
        "citations": citations,
    }
    path = tmp_path / "doc.json"
    path.write_bytes(orjson.dumps(doc))
    return path


class TestAnnotateDocumentCli:
    def test_json_to_stdout(self, tmp_path: Path, capsysbinary: pytest.CaptureFixture[bytes]) -> None:
        cli = _load_cli_module()
        rc = cli.main(["--input", str(_write_doc(tmp_path))])
        assert rc == 0
        payload = orjson.loads(capsysbinary.readouterr().out)
        assert [s["id"] for s in payload["sections"]] == ["1", "2"]
        runs = payload["sections"][0]["paragraphs"][0]["runs"]
        assert runs[1] == {"type": "xref", "text": "[1]", "targets": ["ref1"]}

    def test_xml_to_file(self, tmp_path: Path) -> None:
        cli = _load_cli_module()
        out = tmp_path / "out" / "body.xml"
        rc = cli.main(["--input", str(_write_doc(tmp_path)), "--format", "xml", "--output", str(out)])
        assert rc == 0
        root = etree.fromstring(out.read_bytes())
        assert root.tag == "body"
        assert [sec.get("id") for sec in root.iter("sec")] == ["sec-1", "sec-2"]

    def test_bad_paragraph_fails(self, tmp_path: Path) -> None:
        cli = _load_cli_module()
        out = tmp_path / "body.json"
        rc = cli.main(["--input", str(_write_doc(tmp_path, bad=True)), "--output", str(out)])
        assert rc == 1
        assert not out.exists()

    def test_skip_bad_paragraphs(self, tmp_path: Path) -> None:
        cli = _load_cli_module()
        out = tmp_path / "body.json"
        rc = cli.main([
            "--input", str(_write_doc(tmp_path, bad=True)),
            "--output", str(out),
            "--skip-bad-paragraphs",
        ])
        assert rc == 0
        payload = orjson.loads(out.read_bytes())
        assert len(payload["skipped"]) == 1
        assert payload["skipped"][0]["kind"] == "structural"
        assert [p["index"] for p in payload["sections"][0]["paragraphs"]] == [0]

    def test_missing_input(self, tmp_path: Path) -> None:
        cli = _load_cli_module()
        assert cli.main(["--input", str(tmp_path / "missing.json")]) == 2

    def test_config_file(self, tmp_path: Path) -> None:
        cli = _load_cli_module()
        config_path = tmp_path / "cfg.json"
        config_path.write_bytes(orjson.dumps({"section_id_prefix": "s-"}))
        out = tmp_path / "body.xml"
        rc = cli.main([
            "--input", str(_write_doc(tmp_path)),
            "--config", str(config_path),
            "--format", "xml",
            "--output", str(out),
        ])
        assert rc == 0
        assert b'id="s-1"' in out.read_bytes()

    @pytest.mark.parametrize(
        "patch",
        [
            {"images": [{"href": "img.png"}]},
            {"images": ["img.png"]},
            {"citations": [{"section": [3], "paragraph": 7, "start": 0, "end": 1, "index": 0}]},
            {"sections": [{"title": "Intro", "paragraphs": "Some [1] text."}]},
        ],
    )
    def test_malformed_document_exits_2(self, tmp_path: Path, patch: dict[str, Any]) -> None:
        cli = _load_cli_module()
        path = _write_doc(tmp_path)
        doc = orjson.loads(path.read_bytes())
        doc.update(patch)
        path.write_bytes(orjson.dumps(doc))
        out = tmp_path / "body.json"
        assert cli.main(["--input", str(path), "--output", str(out)]) == 2
        assert not out.exists()

    def test_non_integer_bib_count_exits_2(self, tmp_path: Path) -> None:
        cli = _load_cli_module()
        config_path = tmp_path / "cfg.json"
        config_path.write_bytes(orjson.dumps({"bib_count": "3"}))
        rc = cli.main(["--input", str(_write_doc(tmp_path)), "--config", str(config_path)])
        assert rc == 2

    def test_bad_config(self, tmp_path: Path) -> None:
        cli = _load_cli_module()
        config_path = tmp_path / "cfg.json"
        config_path.write_bytes(orjson.dumps({"on_error": "ignore"}))
        rc = cli.main(["--input", str(_write_doc(tmp_path)), "--config", str(config_path)])
        assert rc == 2
