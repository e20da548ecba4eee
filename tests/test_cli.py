import io
import json

import pytest
import requests
from PIL import Image

from pressfit import __version__
from pressfit.cli import optimize_cli
from pressfit.cli.main import main
from pressfit.core.buffer import ImageBuffer
from pressfit.utils.data_uri import build_data_uri

from conftest import encode_image, make_gradient


@pytest.fixture
def image_file(tmp_path, png_bytes):
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes)
    return path


def test_optimize_writes_next_to_input(image_file, capsys):
    exit_code = main(["optimize", str(image_file), "--max-dimension", "32"])

    assert exit_code == 0
    output = image_file.with_name("photo_optimized.jpg")
    with Image.open(output) as img:
        assert img.format == "JPEG"
        assert img.size == (32, 24)
    assert "Optimized" in capsys.readouterr().out


def test_passthrough_keeps_original_extension(image_file, png_bytes):
    assert main(["optimize", str(image_file)]) == 0
    assert image_file.with_name("photo_optimized.png").read_bytes() == png_bytes


def test_optimize_to_explicit_file(image_file, tmp_path):
    target = tmp_path / "out" / "small.webp"

    exit_code = main(
        ["optimize", str(image_file), "-d", "16", "--format", "webp", "-o", str(target)]
    )

    assert exit_code == 0
    with Image.open(target) as img:
        assert img.format == "WEBP"


def test_explicit_file_with_wrong_extension_fails(image_file, tmp_path, capsys):
    target = tmp_path / "small.png"

    exit_code = main(["optimize", str(image_file), "-d", "16", "-o", str(target)])

    assert exit_code == 1
    assert not target.exists()
    assert "does not match format" in capsys.readouterr().err


def test_multiple_inputs_into_directory(tmp_path):
    paths = []
    for name in ("a", "b"):
        path = tmp_path / f"{name}.png"
        path.write_bytes(encode_image(make_gradient((80, 40))))
        paths.append(str(path))
    out_dir = tmp_path / "out"

    exit_code = main(["optimize", *paths, "-d", "40", "-o", str(out_dir)])

    assert exit_code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["a.jpg", "b.jpg"]


def test_same_named_inputs_do_not_overwrite(tmp_path):
    uris = [
        build_data_uri("image/png", encode_image(make_gradient((80, 40)))),
        build_data_uri("image/png", encode_image(make_gradient((60, 40)))),
    ]
    out_dir = tmp_path / "out"

    exit_code = main(["optimize", *uris, "-d", "32", "-o", str(out_dir) + "/"])

    assert exit_code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["image.jpg", "image_1.jpg"]
    sizes = set()
    for path in out_dir.iterdir():
        with Image.open(path) as img:
            sizes.add(img.size)
    assert sizes == {(32, 16), (32, 21)}


def test_same_file_names_from_different_directories(tmp_path):
    paths = []
    for folder in ("a", "b"):
        (tmp_path / folder).mkdir()
        path = tmp_path / folder / "x.png"
        path.write_bytes(encode_image(make_gradient((80, 40))))
        paths.append(str(path))
    out_dir = tmp_path / "out"

    assert main(["optimize", *paths, "-d", "40", "-o", str(out_dir)]) == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["x.jpg", "x_1.jpg"]


def test_passthrough_to_file_with_wrong_extension_fails(image_file, tmp_path, capsys):
    target = tmp_path / "result.jpg"

    exit_code = main(["optimize", str(image_file), "-o", str(target)])

    assert exit_code == 1
    assert not target.exists()
    assert "does not match format" in capsys.readouterr().err


def test_passthrough_to_file_with_matching_extension(image_file, tmp_path, png_bytes):
    target = tmp_path / "result.png"

    assert main(["optimize", str(image_file), "-o", str(target)]) == 0
    assert target.read_bytes() == png_bytes


def test_json_summary(image_file, capsys):
    assert main(["optimize", str(image_file), "-d", "32", "--json"]) == 0

    summary = json.loads(capsys.readouterr().out)
    assert summary["optimized"] is True
    assert summary["width"] == 32
    assert summary["output"].endswith("photo_optimized.jpg")


def test_data_uri_output(image_file, capsys):
    assert main(["optimize", str(image_file), "-d", "32", "--data-uri"]) == 0

    out = capsys.readouterr().out.strip()
    assert out.startswith("data:image/jpeg;base64,")
    assert not image_file.with_name("photo_optimized.jpg").exists()


def test_data_uri_input(tmp_path, png_bytes, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    uri = build_data_uri("image/png", png_bytes)

    assert main(["optimize", uri, "-d", "32"]) == 0
    assert (tmp_path / "image_optimized.jpg").exists()


def test_url_input(tmp_path, png_bytes, monkeypatch):
    monkeypatch.chdir(tmp_path)
    requested = []

    def fake_download(url, timeout=10):
        requested.append(url)
        return ImageBuffer(png_bytes, "image/png")

    monkeypatch.setattr(optimize_cli, "download_image", fake_download)

    assert main(["optimize", "https://example.com/pics/cat.png", "-d", "32"]) == 0
    assert requested == ["https://example.com/pics/cat.png"]
    assert (tmp_path / "cat_optimized.jpg").exists()


def test_download_failure_is_reported(monkeypatch, capsys):
    def failing_download(url, timeout=10):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(optimize_cli, "download_image", failing_download)

    assert main(["optimize", "https://example.com/cat.png"]) == 1
    assert "unreachable" in capsys.readouterr().err


def test_errors_do_not_stop_other_inputs(image_file, tmp_path, capsys, no_magick):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    missing = tmp_path / "missing.png"

    exit_code = main(["optimize", str(broken), str(missing), str(image_file), "-d", "32"])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "broken.png" in err
    assert "missing.png" in err
    assert image_file.with_name("photo_optimized.jpg").exists()


def test_invalid_options_exit_code(image_file, capsys):
    assert main(["optimize", str(image_file), "--max-bytes", "0"]) == 1
    assert "max_bytes" in capsys.readouterr().err


def test_estimate_argument(capsys):
    uri = build_data_uri("image/png", b"12345")
    assert main(["estimate", uri]) == 0
    assert capsys.readouterr().out.strip() == "5"


def test_estimate_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("data:image/png;base64,QUI=\n"))
    assert main(["estimate"]) == 0
    assert capsys.readouterr().out.strip() == "2"


def test_estimate_without_marker(capsys):
    assert main(["estimate", "hello"]) == 1
    assert "not a base64 data URI" in capsys.readouterr().err


def test_version(capsys):
    assert main(["version"]) == 0
    assert __version__ in capsys.readouterr().out
