import zipfile

import pytest

from app.agent.artifacts import GeneratedFile
from app.packaging import archive_download_name, build_archive, write_generated_files

FILES = [
    GeneratedFile(path="package.json", content='{"name": "demo"}\n', language="json"),
    GeneratedFile(path="backend/src/index.ts", content="console.log('héllo');\n", language="typescript"),
    GeneratedFile(path="frontend/src/App.tsx", content="export default () => null;\n", language="typescript"),
    GeneratedFile(path=".env.example", content="PORT=3000\n", language="dotenv"),
]


def test_archive_round_trip(tmp_path):
    source = write_generated_files(tmp_path / "project", FILES)
    archive = build_archive(source, tmp_path / "out" / "demo.zip")

    extracted = tmp_path / "extracted"
    with zipfile.ZipFile(archive) as zipf:
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zipf.infolist())
        zipf.extractall(extracted)

    for generated in FILES:
        assert (extracted / generated.path).read_bytes() == generated.content.encode("utf-8")
    extracted_paths = sorted(
        p.relative_to(extracted).as_posix() for p in extracted.rglob("*") if p.is_file()
    )
    assert extracted_paths == sorted(f.path for f in FILES)


def test_write_keeps_hostile_paths_inside_output_dir(tmp_path):
    root = write_generated_files(
        tmp_path / "project",
        [
            GeneratedFile(path="../../escape.txt", content="x", language="text"),
            GeneratedFile(path="/abs/path.txt", content="y", language="text"),
        ],
    )

    assert (root / "escape.txt").read_text() == "x"
    assert (root / "abs" / "path.txt").read_text() == "y"
    assert not (tmp_path / "escape.txt").exists()


def test_write_rejects_unusable_path(tmp_path):
    with pytest.raises(ValueError, match="unusable path"):
        write_generated_files(tmp_path / "project", [GeneratedFile(path="..", content="", language="text")])


def test_build_archive_requires_source_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_archive(tmp_path / "missing", tmp_path / "out.zip")


def test_archive_download_name():
    assert archive_download_name("abc-123") == "project-abc-123.zip"


def test_rebuilding_archive_replaces_it_without_leftovers(tmp_path):
    source = write_generated_files(tmp_path / "project", FILES)
    target = tmp_path / "out" / "demo.zip"

    build_archive(source, target)
    (source / "extra.txt").write_text("added later\n")
    build_archive(source, target)

    assert [p.name for p in target.parent.iterdir()] == ["demo.zip"]
    with zipfile.ZipFile(target) as zipf:
        assert "extra.txt" in zipf.namelist()
