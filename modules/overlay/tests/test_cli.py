from __future__ import annotations

import base64
import json
from pathlib import Path

from modules.overlay.__main__ import main

LAYOUT = {
    "pageWidth": 792,
    "pageHeight": 612,
    "fields": [{"id": "job", "label": "Job", "position": {"x": 10, "y": 10, "width": 100, "height": 20}}],
}


def _inputs(tmp_path: Path, template_pdf: bytes) -> list[str]:
    pdf = tmp_path / "template.pdf"
    pdf.write_bytes(template_pdf)
    layout = tmp_path / "layout.json"
    layout.write_text(json.dumps(LAYOUT), encoding="utf-8")
    values = tmp_path / "values.json"
    values.write_text(json.dumps({"job": "J-77"}), encoding="utf-8")
    return ["--pdf", str(pdf), "--layout", str(layout), "--values", str(values)]


def test_cli_writes_output(tmp_path, template_pdf, monkeypatch):
    monkeypatch.setenv("WEARCO_DATA_DIR", str(tmp_path))
    out = tmp_path / "out" / "filled.pdf"
    assert main(_inputs(tmp_path, template_pdf) + ["--out", str(out)]) == 0
    assert out.read_bytes().startswith(b"%PDF")


def test_cli_prints_base64(tmp_path, template_pdf, monkeypatch, capsys):
    monkeypatch.setenv("WEARCO_DATA_DIR", str(tmp_path))
    assert main(_inputs(tmp_path, template_pdf) + ["--base64"]) == 0
    assert base64.b64decode(capsys.readouterr().out.strip()).startswith(b"%PDF")


def test_cli_reports_bad_layout(tmp_path, template_pdf, monkeypatch, capsys):
    monkeypatch.setenv("WEARCO_DATA_DIR", str(tmp_path))
    args = _inputs(tmp_path, template_pdf)
    (tmp_path / "layout.json").write_text("{}", encoding="utf-8")
    assert main(args) == 1
    assert "error:" in capsys.readouterr().err
