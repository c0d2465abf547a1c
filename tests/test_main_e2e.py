import pytest


@pytest.fixture()
def sample_file(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_bytes(b"Hello World!\n" * 20 + bytes(range(256)))
    return path


@pytest.mark.parametrize("mode", ["classical", "canonical"])
@pytest.mark.parametrize("unpacked", [False, True])
def test_roundtrip_command(sample_file, mode, unpacked, capsys, m):
    argv = ["roundtrip", str(sample_file), "--mode", mode]
    if unpacked:
        argv.append("--unpacked")
    assert m.main(argv) == 0
    out = capsys.readouterr().out
    assert "Round trip OK" in out
    assert mode in out


def test_roundtrip_empty_file(tmp_path, capsys, m):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    assert m.roundtrip_file(str(path)) == 0
    assert "Round trip OK (0 bits" in capsys.readouterr().out


def test_codes_command(tmp_path, capsys, m):
    path = tmp_path / "cannata.txt"
    path.write_bytes(b"CANNATA")
    assert m.main(["codes", str(path)]) == 0
    out = capsys.readouterr().out
    assert "'C'\t1\t3\t110\t110" in out
    assert "Weighted length: 13 bits" in out


def test_missing_file(tmp_path, capsys, m):
    missing = str(tmp_path / "nope.bin")
    assert m.main(["codes", missing]) == 1
    assert m.main(["roundtrip", missing]) == 1
    assert "[!] File not found" in capsys.readouterr().out
