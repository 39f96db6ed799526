from __future__ import annotations

import json
import shutil
from typing import TYPE_CHECKING

import pytest

from curatorial.adapters.snapshot import decode_snapshot
from curatorial.adapters.snapshot.embedded import read_embedded_snapshot
from curatorial.domain.model import RecordKindName
from curatorial.ui import cli

if TYPE_CHECKING:
    from pathlib import Path


def test_lookup_prints_every_match(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["lookup", "galleries", "F-2A", "--lookup-uri", "galleries://"])

    lines = capsys.readouterr().out.splitlines()
    assert [line.split("#")[0] for line in lines] == ["1763588365", "1914601015"]


def test_lookup_current_only(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["lookup", "publicart", "PA-12", "--current"])

    assert capsys.readouterr().out.startswith('"Four Seasons" 1360391311')


def test_lookup_not_found_exits_with_failure() -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["lookup", "exhibitions", "99999", "--lookup-uri", "exhibitions://"])

    assert exc.value.code == 1


@pytest.mark.parametrize(
    "argv",
    [
        ["resolve-gallery", "42", "--date", "sometime"],
        ["resolve-gallery", "42", "--date", "2024/.."],
        ["lookup", "galleries", "42", "--lookup-uri", "galleries://ftp"],
    ],
)
def test_invalid_input_exits_with_usage_error(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)

    assert exc.value.code == 2


def test_resolve_gallery_prints_parent_updates(
    capsys: pytest.CaptureFixture[str], architecture_dir: Path
) -> None:
    cli.main(
        [
            "resolve-gallery",
            "42",
            "--date",
            "2024-06-17",
            "--architecture",
            str(architecture_dir),
        ]
    )

    updates = json.loads(capsys.readouterr().out)
    assert updates["properties.wof:parent_id"] == 1914601015


def test_compile_writes_the_target(tmp_path: Path, exhibitions_dir: Path) -> None:
    target = tmp_path / "out" / "exhibitions.json"

    cli.main(["compile", "exhibitions", "--source", str(exhibitions_dir), "--target", str(target)])

    kind = RecordKindName.EXHIBITIONS
    assert decode_snapshot(kind, target.read_text(encoding="utf-8")) == sorted(
        decode_snapshot(kind, read_embedded_snapshot(kind)), key=lambda r: r.wof_id
    )


def test_backfill_writes_into_the_writer_directory(
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    exhibitions_dir: Path,
    architecture_dir: Path,
) -> None:
    corpus = tmp_path / "exhibitions"
    shutil.copytree(exhibitions_dir, corpus)
    output = tmp_path / "updated"

    cli.main(
        [
            "backfill-exhibitions",
            "--exhibitions",
            str(corpus),
            "--architecture",
            str(architecture_dir),
            "--writer",
            str(output),
            "--lookup-uri",
            "galleries://",
        ]
    )

    summary = json.loads(capsys.readouterr().out)
    assert summary == {"examined": 6, "updated": 3, "unchanged": 2, "skipped": 1}
    written = sorted(path.name for path in output.rglob("*.geojson"))
    assert written == ["1729791721.geojson", "1729791733.geojson", "1746382277.geojson"]


def test_assign_parent_dry_run_prints_the_feature(
    capsys: pytest.CaptureFixture[str], exhibitions_dir: Path, architecture_dir: Path
) -> None:
    cli.main(
        [
            "assign-parent",
            "--exhibition-id",
            "1746382277",
            "--gallery-id",
            "1914601015",
            "--exhibitions",
            str(exhibitions_dir),
            "--architecture",
            str(architecture_dir),
            "--dry-run",
        ]
    )

    feature = json.loads(capsys.readouterr().out)
    assert feature["properties"]["wof:parent_id"] == 1914601015


def test_supersede_writes_both_features(
    tmp_path: Path, exhibitions_dir: Path, architecture_dir: Path
) -> None:
    cli.main(
        [
            "supersede-exhibition",
            "--exhibition-id",
            "1746382277",
            "--parent-id",
            "1914601015",
            "--new-id",
            "1914700001",
            "--exhibitions",
            str(exhibitions_dir),
            "--architecture",
            str(architecture_dir),
            "--writer",
            str(tmp_path),
        ]
    )

    successor = json.loads((tmp_path / "191/470/000/1/1914700001.geojson").read_text())
    predecessor = json.loads((tmp_path / "174/638/227/7/1746382277.geojson").read_text())
    assert successor["properties"]["wof:supersedes"] == [1746382277]
    assert predecessor["properties"]["wof:superseded_by"] == [1914700001]


def test_supersede_rejects_non_positive_ids(exhibitions_dir: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(
            [
                "supersede-exhibition",
                "--exhibition-id",
                "1746382277",
                "--parent-id",
                "1914601015",
                "--new-id",
                "0",
                "--exhibitions",
                str(exhibitions_dir),
                "--architecture",
                str(exhibitions_dir),
            ]
        )

    assert exc.value.code == 2
