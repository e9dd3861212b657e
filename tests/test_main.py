"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import FakeClient, image_part, make_response, text_part
from remixer import main as cli
from remixer.config import Settings


@pytest.fixture
def logo_file(tmp_path: Path, logo_png: bytes) -> Path:
    path = tmp_path / "logo.png"
    path.write_bytes(logo_png)
    return path


@pytest.fixture
def wire(monkeypatch, tmp_path: Path):
    """Point the CLI at a fake client; returns a setter for the client."""
    holder = {}

    def install(client: FakeClient) -> FakeClient:
        holder["client"] = client
        return client

    monkeypatch.setattr(
        cli, "load_settings", lambda: Settings(api_key="test", output_dir=tmp_path / "out")
    )
    monkeypatch.setattr(cli, "create_client", lambda settings: holder["client"])
    return install


def test_preservation_from_args():
    preservation = cli.preservation_from_args(["color", "background"])
    assert preservation.labels() == ["Typography", "Style", "Icon / Shape"]


def test_show_prompt_makes_no_call(wire, capsys):
    client = wire(FakeClient())
    code = cli.main(["--brand", "Aperture Labs", "--no-preserve", "background", "--show-prompt"])

    assert code == 0
    assert client.models.calls == []
    out = capsys.readouterr().out
    assert "Aperture Labs" in out
    assert "transparent" in out


def test_missing_image_fails_before_network(wire, tmp_path: Path, capsys):
    client = wire(FakeClient())

    assert cli.main(["--brand", "Acme"]) == 1
    assert cli.main(["--image", str(tmp_path / "missing.png")]) == 1

    assert client.models.calls == []
    assert "Please upload a logo" in capsys.readouterr().out


def test_success_saves_output(wire, logo_file: Path, generated_png: bytes, tmp_path: Path):
    client = wire(FakeClient(response=make_response(image_part(generated_png))))
    output = tmp_path / "result.png"

    code = cli.main(
        [
            "--image", str(logo_file),
            "--brand", "Aperture Labs",
            "--industry", "Technology",
            "--no-preserve", "color",
            "--output", str(output),
            "--model", "custom-model",
        ]
    )

    assert code == 0
    assert output.read_bytes() == generated_png
    call = client.models.calls[0]
    assert call["model"] == "custom-model"
    assert "Color Palette" not in call["contents"][1].text


def test_default_output_dir(wire, logo_file: Path, generated_png: bytes, tmp_path: Path):
    wire(FakeClient(response=make_response(image_part(generated_png))))

    assert cli.main(["--image", str(logo_file), "--brand", "Acme"]) == 0
    saved = list((tmp_path / "out").glob("acme_*.png"))
    assert len(saved) == 1


def test_generation_failure_exit_code(wire, logo_file: Path, capsys):
    wire(FakeClient(response=make_response(text_part("no can do"))))

    assert cli.main(["--image", str(logo_file)]) == 1
    assert "No image data found" in capsys.readouterr().out
