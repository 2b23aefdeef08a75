from importlib import resources
from pathlib import Path

import simplejson as json
from click.testing import CliRunner

from ultrastartools.version import __version__

from ..cli import convert
from . import data


def test_that_converting_to_a_timeline_works() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(), resources.path(data, "Simple Song.txt") as p:
        result = runner.invoke(
            convert, [str(p.resolve(strict=True)), "out.json", "-f", "timeline"]
        )
        if result.exception:
            raise result.exception
        assert result.exit_code == 0
        assert "Detected input file format" in result.output

        with open("out.json", encoding="utf-8") as f:
            timeline = json.load(f)
        assert timeline["metadata"]["title"] == "Simple Song"


def test_that_corrections_are_reported() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(), resources.path(
        data, "Overlapping Notes.txt"
    ) as p:
        result = runner.invoke(
            convert,
            [
                "--input-format",
                "ultrastar",
                str(p.resolve(strict=True)),
                "out.json",
                "-f",
                "timeline",
            ],
        )
        if result.exception:
            raise result.exception
        assert result.exit_code == 0
        assert result.output.count("in the Vocals track") == 3


def test_that_the_encoding_option_reaches_the_loader() -> None:
    with resources.path(data, "Simple Song.txt") as p:
        context = convert.make_context(
            "convert",
            [
                str(p.resolve(strict=True)),
                "out.json",
                "-f",
                "timeline",
                "--encoding",
                "utf-8",
            ],
        )
        assert context.params["loader_options"] == {"encoding": "utf-8"}

        context = convert.make_context(
            "convert", [str(p.resolve(strict=True)), "out.json", "-f", "timeline"]
        )
        assert not context.params.get("loader_options")


def test_version_option() -> None:
    result = CliRunner().invoke(convert, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_that_broken_files_give_a_clean_error() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("broken.txt").write_text(
            "#TITLE:Broken\n#ARTIST:Someone\n#BPM:120\n: 0 4 60 la\nX 4 4 60 la\n"
        )
        result = runner.invoke(convert, ["broken.txt", "out.json", "-f", "timeline"])
        assert result.exit_code == 1
        assert "Unknown note type" in result.output
        assert "line 5" in result.output
        assert not Path("out.json").exists()


def test_that_unrecognized_files_give_a_clean_error() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("notes.txt").write_text("just some notes\n")
        result = runner.invoke(convert, ["notes.txt", "out.json", "-f", "timeline"])
        assert result.exit_code == 1
        assert "Unrecognized file format" in result.output
        assert "--input-format" in result.output


def test_that_a_folder_with_several_songs_gives_a_clean_error() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("songs").mkdir()
        for name in ("a.txt", "b.txt"):
            Path("songs", name).write_text(
                "#TITLE:Song\n#ARTIST:Someone\n#BPM:120\n: 0 4 60 la\nE\n"
            )
        result = runner.invoke(
            convert,
            ["--input-format", "ultrastar", "songs", "out.json", "-f", "timeline"],
        )
        assert result.exit_code == 1
        assert "Multiple UltraStar files" in result.output


def test_that_encoding_problems_give_a_clean_error() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("song.txt").write_bytes(
            "#TITLE:Café\n#ARTIST:Someone\n#BPM:120\n: 0 4 60 la\nE\n".encode("utf-8")
        )
        for encoding, message in [
            ("not-a-codec", "Unknown text encoding"),
            ("ascii", "Could not decode"),
        ]:
            result = runner.invoke(
                convert,
                ["song.txt", "out.json", "-f", "timeline", "--encoding", encoding],
            )
            assert result.exit_code == 1
            assert message in result.output
