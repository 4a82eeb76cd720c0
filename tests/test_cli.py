from pathlib import Path

from structurray.compiler.cli import default_output_path, main


def write(p: Path, content: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content)
    return p


GOOD = """\
use serde::Serialize;

#[derive(Serialize)]
#[faux_array(u8, 2)]
struct Bytes {}
"""


def test_writes_expanded_file(tmp_path: Path, capsys):
    src = write(tmp_path / "bytes.rs", GOOD)

    assert main([str(src)]) == 0

    out_path = tmp_path / "bytes.expanded.rs"
    assert default_output_path(src) == out_path
    generated = out_path.read_text()
    assert '#[serde(rename = "1")]\n    _1: u8,' in generated
    assert "faux_array" not in generated
    assert src.read_text() == GOOD
    assert f"Wrote {out_path}" in capsys.readouterr().out


def test_explicit_output_path(tmp_path: Path):
    src = write(tmp_path / "bytes.rs", GOOD)
    out = tmp_path / "gen" / "out.rs"
    out.parent.mkdir()

    assert main([str(src), "-o", str(out)]) == 0
    assert out.exists()
    assert not (tmp_path / "bytes.expanded.rs").exists()


def test_relative_paths_use_structurray_cwd(tmp_path: Path, monkeypatch):
    write(tmp_path / "bytes.rs", GOOD)
    monkeypatch.setenv("STRUCTURRAY_CWD", str(tmp_path))

    assert main(["bytes.rs", "-o", "out.rs"]) == 0
    assert (tmp_path / "out.rs").exists()


def test_stdout_mode(tmp_path: Path, capsys):
    src = write(tmp_path / "bytes.rs", GOOD)

    assert main([str(src), "--stdout"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("use serde::Serialize;\n")
    assert "_0: u8," in out
    assert not (tmp_path / "bytes.expanded.rs").exists()


def test_check_writes_nothing(tmp_path: Path):
    src = write(tmp_path / "bytes.rs", GOOD)

    assert main([str(src), "--check"]) == 0
    assert list(tmp_path.iterdir()) == [src]


def test_errors_exit_2_without_output(tmp_path: Path, capsys):
    src = write(tmp_path / "bad.rs", GOOD.replace("struct Bytes {}", "enum Bytes { A }"))

    assert main([str(src)]) == 2

    err = capsys.readouterr().err
    assert "bad.rs:5:1: error [CE2001]" in err
    assert "enum 'Bytes'" in err
    assert not (tmp_path / "bad.expanded.rs").exists()


def test_missing_serialization_reported(tmp_path: Path, capsys):
    src = write(tmp_path / "plain.rs", "#[faux_array(u8, 2)]\nstruct Plain {}\n")

    assert main([str(src)]) == 2
    assert "[CE2002]" in capsys.readouterr().err


def test_no_annotation_warns(tmp_path: Path, capsys):
    src = write(tmp_path / "plain.rs", "struct Plain { a: u8 }\n")

    assert main([str(src)]) == 1

    assert "[CW1001]" in capsys.readouterr().err
    assert (tmp_path / "plain.expanded.rs").read_text() == "struct Plain { a: u8 }\n"


def test_missing_trailing_newline_warns(tmp_path: Path, capsys):
    src = write(tmp_path / "bytes.rs", GOOD.rstrip("\n"))

    assert main([str(src)]) == 1

    assert "[CW0001]" in capsys.readouterr().err
    assert (tmp_path / "bytes.expanded.rs").read_text().endswith("}")


def test_refuses_to_overwrite_source(tmp_path: Path):
    src = write(tmp_path / "bytes.rs", GOOD)

    assert main([str(src), "-o", str(src)]) == 2
    assert src.read_text() == GOOD


def test_missing_source(tmp_path: Path, capsys):
    assert main([str(tmp_path / "nope.rs")]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_source_required(capsys):
    assert main([]) == 2
    assert "source file required" in capsys.readouterr().err


def test_encode_and_decode(capsys):
    assert main(["--encode", "0", "61", "62", "--decode", "Z", "10"]) == 0

    out = capsys.readouterr().out
    assert "0 -> 0" in out
    assert "61 -> Z" in out
    assert "62 -> 10" in out
    assert "Z -> 61" in out
    assert "10 -> 62" in out


def test_bad_codec_input(capsys):
    assert main(["--encode", "-1"]) == 2
    assert main(["--decode", "007"]) == 2
    err = capsys.readouterr().err
    assert "'-1'" in err
    assert "leading zero" in err


def test_version(capsys):
    assert main(["--version"]) == 0
    assert "structurray" in capsys.readouterr().out
