"""Smoke tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest


def test_main_module_importable() -> None:
    """The __main__ module is importable and exposes main()."""
    from tactigrid.__main__ import main

    assert callable(main)


def test_prints_map(capsys: pytest.CaptureFixture[str]) -> None:
    from tactigrid.__main__ import main

    main(["--width", "8", "--height", "6", "--seed", "3"])
    rows = capsys.readouterr().out.splitlines()
    assert len(rows) == 6
    assert all(len(row) == 8 for row in rows)
    assert set("".join(rows)) <= set(".~^T:=#")


def test_unit_overlay(capsys: pytest.CaptureFixture[str]) -> None:
    from tactigrid.__main__ import main

    main(["--width", "10", "--height", "10", "--unit", "2,2", "--move-points", "3"])
    out = capsys.readouterr().out
    assert out.splitlines()[2][2] == "@"
    assert out.count("@") == 1


def test_custom_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    from tactigrid.__main__ import main

    config = tmp_path / "tiny.yaml"
    config.write_text("width: 4\nheight: 3\nseed: 7\n")
    main(["-c", str(config)])
    assert len(capsys.readouterr().out.splitlines()) == 3


def test_bad_unit_position() -> None:
    from tactigrid.__main__ import main

    with pytest.raises(SystemExit):
        main(["--unit", "two,three"])
