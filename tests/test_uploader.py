"""Tests for the pic-od upload invoker."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from pic_od_upload.exceptions import UploadError, UploadTimeoutError
from pic_od_upload.uploader import (
    UploadResult,
    build_upload_args,
    parse_upload_output,
    upload_images,
)


def _completed(stdout: str = "", stderr: str = "", code: int = 0):
    return subprocess.CompletedProcess(["pic-od"], code, stdout, stderr)


class TestBuildUploadArgs:
    def test_without_profile(self):
        assert build_upload_args("pic-od", ["a.png", "b.png"]) == [
            "pic-od",
            "upload",
            "a.png",
            "b.png",
        ]

    def test_with_profile(self):
        assert build_upload_args("/opt/pic-od", [Path("a.png")], "work") == [
            "/opt/pic-od",
            "upload",
            "--profile",
            "work",
            "a.png",
        ]


class TestParseUploadOutput:
    def test_positional_zip(self):
        results = parse_upload_output(
            "http://a/1.png\nhttp://a/2.png\n", ["/tmp/x/one.png", "two.png"]
        )
        assert results == [
            UploadResult("one.png", "http://a/1.png"),
            UploadResult("two.png", "http://a/2.png"),
        ]

    def test_fewer_urls_than_files_gives_empty_urls(self):
        results = parse_upload_output("http://a/1.png", ["a.png", "b.png", "c.png"])
        assert [r.url for r in results] == ["http://a/1.png", "", ""]
        assert [r.filename for r in results] == ["a.png", "b.png", "c.png"]

    def test_blank_lines_and_crlf_are_ignored(self):
        results = parse_upload_output(
            "\r\nhttp://a/1.png\r\n\r\n  http://a/2.png  \r\n", ["a.png", "b.png"]
        )
        assert [r.url for r in results] == ["http://a/1.png", "http://a/2.png"]

    def test_extra_lines_are_dropped(self):
        results = parse_upload_output("u1\nu2\nu3", ["a.png"])
        assert results == [UploadResult("a.png", "u1")]


class TestUploadImages:
    def test_single_invocation_for_batch(self):
        with patch(
            "pic_od_upload.uploader.subprocess.run",
            return_value=_completed("u1\nu2\n"),
        ) as mock_run:
            results = upload_images(["a.png", "b.png"], profile="blog")

        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == [
            "pic-od",
            "upload",
            "--profile",
            "blog",
            "a.png",
            "b.png",
        ]
        assert mock_run.call_args[1]["capture_output"] is True
        assert [r.url for r in results] == ["u1", "u2"]

    def test_nonzero_exit_uses_stderr(self):
        with patch(
            "pic_od_upload.uploader.subprocess.run",
            return_value=_completed(stderr="  403 Forbidden\n", code=1),
        ):
            with pytest.raises(UploadError, match="^403 Forbidden$"):
                upload_images(["a.png"])

    def test_nonzero_exit_without_stderr(self):
        with patch(
            "pic_od_upload.uploader.subprocess.run",
            return_value=_completed(code=2),
        ):
            with pytest.raises(UploadError, match="pic-od exited with code 2"):
                upload_images(["a.png"])

    def test_spawn_failure(self):
        with patch(
            "pic_od_upload.uploader.subprocess.run",
            side_effect=FileNotFoundError(2, "No such file or directory"),
        ):
            with pytest.raises(UploadError, match="Failed to execute nope"):
                upload_images(["a.png"], binary_path="nope")

    def test_timeout(self):
        with patch(
            "pic_od_upload.uploader.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["pic-od"], 5),
        ) as mock_run:
            with pytest.raises(UploadTimeoutError, match="within 5s"):
                upload_images(["a.png"], timeout=5)
        assert mock_run.call_args[1]["timeout"] == 5

    def test_no_timeout_by_default(self):
        with patch(
            "pic_od_upload.uploader.subprocess.run", return_value=_completed("u\n")
        ) as mock_run:
            upload_images(["a.png"])
        assert mock_run.call_args[1]["timeout"] is None

    def test_empty_path_list_rejected(self):
        with pytest.raises(ValueError):
            upload_images([])


class TestRealSubprocess:
    """Run the fake pic-od script as an actual child process."""

    def test_urls_in_input_order(self, fake_pic_od: str, images: list[Path]):
        results = upload_images(images, binary_path=fake_pic_od)
        assert results == [
            UploadResult("first.png", "https://img.example/first.png"),
            UploadResult("second.jpg", "https://img.example/second.jpg"),
        ]

    def test_profile_is_passed(self, fake_pic_od: str, images: list[Path]):
        results = upload_images(images[:1], binary_path=fake_pic_od, profile="work")
        assert results[0].url == "https://img.example/first.png"

    def test_failure_surfaces_stderr(self, fake_pic_od, images, monkeypatch):
        monkeypatch.setenv("FAKE_PIC_OD_MODE", "fail")
        with pytest.raises(UploadError, match="bucket not configured"):
            upload_images(images, binary_path=fake_pic_od)

    def test_undecodable_stderr_becomes_upload_error(
        self, fake_pic_od, images, monkeypatch
    ):
        monkeypatch.setenv("FAKE_PIC_OD_MODE", "garbled")
        with pytest.raises(UploadError, match="bad$") as exc_info:
            upload_images(images, binary_path=fake_pic_od)
        assert "�" in str(exc_info.value)

    def test_short_output(self, fake_pic_od, images, monkeypatch):
        monkeypatch.setenv("FAKE_PIC_OD_MODE", "short")
        results = upload_images(images, binary_path=fake_pic_od)
        assert [r.url for r in results] == ["https://img.example/first.png", ""]
