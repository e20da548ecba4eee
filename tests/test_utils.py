import subprocess
import sys

import pytest
import requests

from pressfit.core.errors import MissingDependencyError
from pressfit.utils import image as image_utils
from pressfit.utils.subprocess_utils import (
    check_command_exists,
    check_dependencies,
    run_command,
)
from pressfit.utils.validation import (
    validate_file_exists,
    validate_output_extension,
    validate_positive_int,
)


class FakeResponse:
    def __init__(self, content, headers, status=200):
        self.content = content
        self.headers = headers
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


def test_run_command_success():
    result = run_command([sys.executable, "-c", "print('ok')"])
    assert result.returncode == 0
    assert result.stdout.strip() == b"ok"


def test_run_command_failure_raises():
    with pytest.raises(subprocess.CalledProcessError):
        run_command([sys.executable, "-c", "import sys; sys.exit(3)"])


def test_run_command_failure_without_check():
    result = run_command([sys.executable, "-c", "import sys; sys.exit(3)"], check=False)
    assert result.returncode == 3


def test_missing_command_detected():
    assert not check_command_exists("pressfit-no-such-tool")
    with pytest.raises(MissingDependencyError, match="pressfit-no-such-tool"):
        check_dependencies(["pressfit-no-such-tool"])


def test_download_image_uses_content_type(monkeypatch):
    def fake_get(url, timeout):
        return FakeResponse(b"bytes", {"Content-Type": "image/webp; charset=binary"})

    monkeypatch.setattr(image_utils.requests, "get", fake_get)

    buffer = image_utils.download_image("https://example.com/a.webp")
    assert buffer.data == b"bytes"
    assert buffer.mime_type == "image/webp"


def test_download_image_ignores_non_image_content_type(monkeypatch):
    monkeypatch.setattr(
        image_utils.requests,
        "get",
        lambda url, timeout: FakeResponse(b"x", {"Content-Type": "application/octet-stream"}),
    )
    assert image_utils.download_image("https://example.com/a").mime_type is None


def test_download_image_http_error(monkeypatch):
    monkeypatch.setattr(
        image_utils.requests, "get", lambda url, timeout: FakeResponse(b"", {}, status=404)
    )
    with pytest.raises(requests.HTTPError):
        image_utils.download_image("https://example.com/missing.png")


def test_validate_file_exists(tmp_path):
    @validate_file_exists
    def read(path):
        return "read"

    existing = tmp_path / "a.txt"
    existing.write_text("x")

    assert read(str(existing)) == "read"
    with pytest.raises(FileNotFoundError):
        read(str(tmp_path / "b.txt"))


def test_validate_positive_int():
    validate_positive_int("limit", 1)
    with pytest.raises(ValueError, match="limit"):
        validate_positive_int("limit", 0)


def test_validate_output_extension():
    validate_output_extension("out/photo.JPG", ["jpg", "jpeg"])
    with pytest.raises(ValueError):
        validate_output_extension("out/photo.png", ["jpg", "jpeg"])
