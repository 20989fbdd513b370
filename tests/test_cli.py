import pytest

from conftest import FakeMetadataReader, make_file
import media_sorter.main as cli
import media_sorter.scanning.extractor as extractor_module


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch):
    # Keep the real exifread and logging setup out of CLI runs
    monkeypatch.setattr(extractor_module, "ExifMetadataReader", FakeMetadataReader)
    monkeypatch.setattr(cli, "setup_logging", lambda verbose: None)


def test_preview_prints_table_and_moves_nothing(media_dir, monkeypatch, capsys):
    monkeypatch.chdir(media_dir)

    assert cli.run(["--no-progress"]) == 0

    out = capsys.readouterr().out
    assert "IMG_0001.dng" in out
    assert "2023-05-01" in out
    assert 'add the "move" command' in out
    assert "Image/2023-05-01: 1 groups, 3 files" in out
    assert ".DS_Store" not in out
    assert not (media_dir / "Image").exists()


def test_move_organizes_and_second_run_finds_nothing(media_dir, monkeypatch, capsys):
    monkeypatch.chdir(media_dir)

    assert cli.run(["move", "--no-progress"]) == 0
    assert "organized successfully" in capsys.readouterr().out
    assert (media_dir / "Image" / "2023-05-01" / "IMG_0001.edited.jpg").exists()
    assert (media_dir / "Audio" / "2020-08-15" / "song.mp3").exists()
    assert (media_dir / "Other" / "2021-03-04" / "notes.txt").exists()
    assert (media_dir / ".DS_Store").exists()

    assert cli.run(["--no-progress"]) == 0
    assert "Nothing to organize." in capsys.readouterr().out


def test_extraction_failure_aborts_with_summary(media_dir, monkeypatch, capsys):
    make_file(media_dir, "IMG_0002.jpg", b"corrupt")
    monkeypatch.chdir(media_dir)

    assert cli.run(["move", "--no-progress"]) == 1

    out = capsys.readouterr().out
    assert "IMG_0002.jpg" in out
    assert not (media_dir / "Image").exists()
    assert (media_dir / "clip.mp4").exists()


def test_skip_errors_leaves_whole_group_in_place(media_dir, monkeypatch, capsys):
    make_file(media_dir, "IMG_0002.jpg", b"corrupt")
    make_file(media_dir, "IMG_0002.dng", b"raw")
    monkeypatch.chdir(media_dir)

    assert cli.run(["move", "--skip-errors", "--no-progress"]) == 0

    assert (media_dir / "IMG_0002.jpg").exists()
    assert (media_dir / "IMG_0002.dng").exists()
    assert (media_dir / "Video" / "2022-01-10" / "clip.mp4").exists()
    out = capsys.readouterr().out
    assert "IMG_0002.jpg" in out
    # The readable sidecar is listed too, not just the file that failed
    assert "IMG_0002.dng" in out


def test_move_failure_gives_nonzero_exit(media_dir, monkeypatch, capsys):
    taken = media_dir / "Other" / "2021-03-04"
    taken.mkdir(parents=True)
    make_file(taken, "notes.txt", b"already here")
    monkeypatch.chdir(media_dir)

    assert cli.run(["move", "--no-progress"]) == 1

    out = capsys.readouterr().out
    assert "could not be moved" in out
    assert "notes.txt" in out
    assert (media_dir / "notes.txt").exists()


def test_report_csv(media_dir, tmp_path_factory, monkeypatch):
    report = tmp_path_factory.mktemp("reports") / "plan.csv"
    monkeypatch.chdir(media_dir)

    assert cli.run(["--no-progress", "--report-csv", str(report)]) == 0
    assert "clip.mp4" in report.read_text(encoding="utf-8")


def test_empty_directory(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert cli.run(["--no-progress"]) == 0
    assert "Nothing to organize." in capsys.readouterr().out


def test_unknown_command_is_usage_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as exc:
        cli.run(["shuffle"])
    assert exc.value.code == 2


def test_main_exits_with_run_code(monkeypatch):
    monkeypatch.setattr(cli, "run", lambda: 1)
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1


@pytest.mark.parametrize("interruption", [KeyboardInterrupt, cli.OperationCancelledError])
def test_cancelled_run_exits_nonzero(media_dir, monkeypatch, interruption):
    def interrupted(self, cancel_event=None):
        raise interruption()

    monkeypatch.setattr(cli.SorterApp, "build_plan", interrupted)
    monkeypatch.chdir(media_dir)

    assert cli.run(["move", "--no-progress"]) == 1
    assert not (media_dir / "Image").exists()
    assert (media_dir / "clip.mp4").exists()
