from pathlib import Path

import pytest
from PIL import Image

from hilbertscope.config import EngineConfig
from hilbertscope.main import main


def _argv(engine: EngineConfig, *command: str) -> list[str]:
    return [
        "--samples-dir", str(engine.samples_dir),
        "--maps-dir", str(engine.maps_dir),
        "--dataset", str(engine.dataset_path),
        "--metadata", str(engine.metadata_path),
        *command,
    ]


def test_train_identify_reconstruct(engine: EngineConfig, samples: Path, tmp_path: Path,
                                    capsys: pytest.CaptureFixture) -> None:
    assert main(_argv(engine, "train-all")) == 0
    assert "[Batch Training Complete]" in capsys.readouterr().out

    probe = tmp_path / "probe.txt"
    probe.write_bytes(b"the lazy dog. the quick fox. " * 20)
    assert main(_argv(engine, "identify", str(probe))) == 0
    out = capsys.readouterr().out
    assert "--- IDENTIFICATION RESULTS ---" in out
    assert out.index("Category: text") < out.index("Category: zeros")

    restored = tmp_path / "restored.txt"
    image = engine.maps_dir / "text" / "a.txt.png"
    assert main(_argv(engine, "reconstruct", str(image), str(restored))) == 0
    assert restored.read_bytes() == (samples / "text" / "a.txt").read_bytes()


def test_train_single_directory(engine: EngineConfig, samples: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(_argv(engine, "train", str(samples / "zeros"), "nulls")) == 0
    assert main(_argv(engine, "train", str(samples / "zeros"), "nulls")) == 0
    assert "[nulls] processed 0, skipped 2" in capsys.readouterr().out
    assert (engine.maps_dir / "nulls" / "z1.bin.png").is_file()


def test_errors_exit_with_status_one(engine: EngineConfig, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    probe = tmp_path / "probe.bin"
    probe.write_bytes(b"\x00\x01")
    assert main(_argv(engine, "identify", str(probe))) == 1
    assert "empty" in capsys.readouterr().err

    image = tmp_path / "never.bin.png"
    Image.new("L", (2, 2)).save(image)
    out = tmp_path / "never.bin"
    assert main(_argv(engine, "reconstruct", str(image), str(out))) == 1
    assert "No metadata for 'never.bin'" in capsys.readouterr().err
    assert not out.exists()

    assert main(_argv(engine, "train", str(tmp_path / "missing"), "x")) == 1


def test_strict_store_flag(engine: EngineConfig, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    engine.dataset_path.write_text("garbage")
    probe = tmp_path / "probe.bin"
    probe.write_bytes(b"abc")

    assert main(_argv(engine, "--strict-store", "identify", str(probe))) == 1
    assert "invalid JSON" in capsys.readouterr().err


def test_render_dashboard(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    target = tmp_path / "sample.bin"
    target.write_bytes(bytes(range(256)) * 8)

    assert main(["render", str(target)]) == 0
    out = tmp_path / "sample.bin.fingerprint.png"
    assert out.is_file()
    assert str(out) in capsys.readouterr().out


def test_reconstruct_with_mismatched_length_exits_cleanly(engine: EngineConfig, tmp_path: Path,
                                                          capsys: pytest.CaptureFixture) -> None:
    image = tmp_path / "a.bin.png"
    Image.new("L", (2, 2)).save(image)
    engine.metadata_path.write_text('{"a.bin": 5000}')
    out = tmp_path / "a.bin"

    assert main(_argv(engine, "reconstruct", str(image), str(out))) == 1
    assert "exceeds its 2x2 map" in capsys.readouterr().err
    assert not out.exists()


def test_non_utf8_dataset_does_not_abort_training(engine: EngineConfig, samples: Path) -> None:
    engine.dataset_path.write_bytes(b"\xff\xfe\x00garbage")

    assert main(_argv(engine, "train", str(samples / "text"), "text")) == 0
    assert len(engine.fingerprint_store().load()) == 2


@pytest.mark.parametrize("value", ["0", "-1", "many"])
def test_identify_rejects_bad_top(engine: EngineConfig, tmp_path: Path, value: str) -> None:
    probe = tmp_path / "probe.bin"
    probe.write_bytes(b"abc")

    with pytest.raises(SystemExit) as info:
        main(_argv(engine, "identify", str(probe), "--top", value))
    assert info.value.code == 2
