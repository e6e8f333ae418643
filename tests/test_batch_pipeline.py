import threading
import time
from pathlib import Path

import pytest
import yaml

from conftest import FakeRunner, make_orchestrator
from reencoder.domain.exceptions import OutputFolderException, SourceFolderException
from reencoder.domain.models import EncodeOutcome
from reencoder.pipeline.batch_pipeline import BatchOrchestrator
from reencoder.services.classifier import FileClassifier
from reencoder.utils.process_utils import CommandResult


def by_file(outcomes):
    return {outcome.file_name: outcome for outcome in outcomes}


def test_one_outcome_per_supported_file(media_folder, fake_runner):
    outcomes = make_orchestrator(fake_runner).run(media_folder)

    results = by_file(outcomes)
    assert set(results) == {"a.png", "b.mp4"}
    assert all(outcome.status == "success" for outcome in outcomes)


def test_success_outcome_carries_sizes_and_output_path(media_folder, fake_runner):
    outcomes = by_file(make_orchestrator(fake_runner).run(media_folder))

    image = outcomes["a.png"]
    assert image.original_size_bytes == 5000
    assert image.encoded_size_bytes == 1200
    assert image.output_path == media_folder.resolve() / "reencoded" / "a.jxl"
    assert image.error_detail is None

    video = outcomes["b.mp4"]
    assert video.original_size_bytes == 20000
    assert video.output_path.name == "b.mkv"


def test_quality_scores_attached(media_folder, fake_runner):
    outcomes = by_file(make_orchestrator(fake_runner).run(media_folder))

    assert outcomes["a.png"].quality_score == pytest.approx(93.512345)
    assert outcomes["b.mp4"].quality_score == pytest.approx(93.512345)


def test_encoder_failure_is_isolated(media_folder):
    runner = FakeRunner(fail_sources={"a.png"})

    outcomes = by_file(make_orchestrator(runner).run(media_folder))

    failed = outcomes["a.png"]
    assert failed.status == "failed"
    assert failed.error_detail
    assert failed.original_size_bytes is None
    assert failed.encoded_size_bytes is None
    assert failed.quality_score is None
    assert outcomes["b.mp4"].status == "success"


def test_missing_encoder_binary_fails_only_that_category(media_folder):
    runner = FakeRunner(missing_tools={"cjxl"})

    outcomes = by_file(make_orchestrator(runner).run(media_folder))

    assert outcomes["a.png"].status == "failed"
    assert "cjxl" in outcomes["a.png"].error_detail
    assert outcomes["b.mp4"].status == "success"


def test_failed_encode_skips_quality_check(media_folder):
    runner = FakeRunner(fail_sources={"b.mp4"})

    make_orchestrator(runner).run(media_folder)

    vmaf_calls = [call for call in runner.calls if "-lavfi" in call]
    assert len(vmaf_calls) == 1
    assert str(media_folder.resolve() / "a.png") in vmaf_calls[0]


def test_validator_failure_never_flips_success(media_folder):
    runner = FakeRunner(fail_vmaf=True)

    outcomes = make_orchestrator(runner).run(media_folder)

    assert [outcome.status for outcome in outcomes] == ["success", "success"]
    assert all(outcome.quality_score is None for outcome in outcomes)


def test_unparsable_score_yields_no_score(media_folder):
    runner = FakeRunner(vmaf_output="libvmaf finished without a summary")

    outcomes = make_orchestrator(runner).run(media_folder)

    assert all(outcome.is_success and outcome.quality_score is None for outcome in outcomes)


def test_empty_folder_still_creates_output_folder(tmp_path, fake_runner):
    outcomes = make_orchestrator(fake_runner).run(tmp_path)

    assert outcomes == []
    assert (tmp_path / "reencoded").is_dir()
    assert fake_runner.calls == []


def test_output_folder_creation_failure_is_fatal(media_folder, fake_runner):
    # A regular file where the output folder should be makes mkdir fail.
    (media_folder / "reencoded").write_text("in the way")

    with pytest.raises(OutputFolderException):
        make_orchestrator(fake_runner).run(media_folder)

    assert fake_runner.calls == []


def test_missing_source_folder_is_fatal(tmp_path, fake_runner):
    missing = tmp_path / "does-not-exist"

    with pytest.raises(SourceFolderException):
        make_orchestrator(fake_runner).run(missing)

    assert not missing.exists()


def test_subdirectories_are_skipped(media_folder, fake_runner):
    nested = media_folder / "holiday.mp4"
    nested.mkdir()
    (nested / "inner.png").write_bytes(b"\0" * 10)

    outcomes = make_orchestrator(fake_runner).run(media_folder)

    assert {outcome.file_name for outcome in outcomes} == {"a.png", "b.mp4"}


def test_extension_matching_is_case_insensitive(tmp_path, fake_runner):
    (tmp_path / "CLIP.MOV").write_bytes(b"\0" * 100)
    (tmp_path / "Photo.JPEG").write_bytes(b"\0" * 100)

    outcomes = by_file(make_orchestrator(fake_runner).run(tmp_path))

    assert outcomes["CLIP.MOV"].output_path.name == "CLIP.mkv"
    assert outcomes["Photo.JPEG"].output_path.name == "Photo.jxl"


def test_decoded_images_are_cleaned_up(media_folder, fake_runner):
    make_orchestrator(fake_runner).run(media_folder)

    output_dir = media_folder / "reencoded"
    assert not list(output_dir.glob("*_decoded.png"))
    assert sorted(p.name for p in output_dir.iterdir()) == ["a.jxl", "b.mkv"]


def test_rerun_reproduces_classification(media_folder):
    runner = FakeRunner(fail_sources={"b.mp4"})
    orchestrator = make_orchestrator(runner)

    first = {o.file_name: o.status for o in orchestrator.run(media_folder)}
    second = {o.file_name: o.status for o in orchestrator.run(media_folder)}

    assert first == second == {"a.png": "success", "b.mp4": "failed"}


def test_outcomes_follow_enumeration_order_with_worker_pool(tmp_path):
    for index in range(8):
        (tmp_path / f"img{index}.png").write_bytes(b"\0" * (index + 1))
    (tmp_path / "reencoded").mkdir()
    expected_order = [p.name for p in tmp_path.iterdir() if p.is_file()]

    outcomes = make_orchestrator(FakeRunner(), max_workers=4).run(tmp_path)

    assert [outcome.file_name for outcome in outcomes] == expected_order
    assert [outcome.original_size_bytes for outcome in outcomes] == [
        (tmp_path / name).stat().st_size for name in expected_order
    ]


def test_unexpected_exception_becomes_failed_outcome(media_folder, fake_runner):
    orchestrator = make_orchestrator(fake_runner)

    class ExplodingValidator:
        def validate(self, task, output_path):
            if task.file_name == "a.png":
                raise RuntimeError("boom")
            return None

    orchestrator.validator = ExplodingValidator()
    outcomes = by_file(orchestrator.run(media_folder))

    assert outcomes["a.png"].status == "failed"
    assert "boom" in outcomes["a.png"].error_detail
    assert outcomes["b.mp4"].status == "success"


def test_tasks_run_one_at_a_time_by_default(tmp_path):
    for index in range(4):
        (tmp_path / f"clip{index}.mp4").write_bytes(b"\0" * 10)

    active = []
    peak = []
    lock = threading.Lock()
    inner = FakeRunner()

    def tracking_runner(cmd_list, timeout=None, show_cmd=True):
        with lock:
            active.append(1)
            peak.append(len(active))
        try:
            return inner(cmd_list, timeout=timeout)
        finally:
            with lock:
                active.pop()

    outcomes = make_orchestrator(tracking_runner).run(tmp_path)

    assert len(outcomes) == 4
    assert max(peak) == 1


def test_sources_sharing_an_output_are_encoded_in_turn(tmp_path):
    (tmp_path / "a.png").write_bytes(b"\0" * 5000)
    (tmp_path / "a.jpg").write_bytes(b"\0" * 7000)
    (tmp_path / "c.png").write_bytes(b"\0" * 3000)

    writers = {}
    peak = []
    lock = threading.Lock()
    inner = FakeRunner()

    def scaled_runner(cmd_list, timeout=None, show_cmd=True):
        if Path(cmd_list[0]).name != "cjxl":
            return inner(cmd_list, timeout=timeout)
        source, output = Path(cmd_list[1]), Path(cmd_list[2])
        with lock:
            writers[output] = writers.get(output, 0) + 1
            peak.append(writers[output])
        try:
            time.sleep(0.05)
            output.write_bytes(b"\0" * (source.stat().st_size // 10))
            return CommandResult(returncode=0)
        finally:
            with lock:
                writers[output] -= 1

    outcomes = by_file(make_orchestrator(scaled_runner, max_workers=3).run(tmp_path))

    assert max(peak) == 1
    assert outcomes["a.png"].encoded_size_bytes == 500
    assert outcomes["a.jpg"].encoded_size_bytes == 700
    assert outcomes["c.png"].encoded_size_bytes == 300
    assert not list((tmp_path / "reencoded").glob("*_decoded.png"))


def test_group_by_output_keeps_enumeration_order(tmp_path):
    classifier = FileClassifier()
    tasks = [classifier.build_task(tmp_path / name, tmp_path / "out") for name in ("x.mp4", "y.png", "x.mov")]

    assert BatchOrchestrator.group_by_output(tasks) == [[0, 2], [1]]


def test_batch_logs_written_to_output_folder(media_folder):
    runner = FakeRunner(fail_sources={"a.png"})

    make_orchestrator(runner, write_logs=True).run(media_folder)

    output_dir = media_folder / "reencoded"
    with (output_dir / "reencode_log.yaml").open(encoding="utf-8") as f:
        report = yaml.safe_load(f)
    assert report["success_count"] == 1
    assert report["failed_count"] == 1
    assert {entry["file"] for entry in report["results"]} == {"a.png", "b.mp4"}

    error_text = (output_dir / "error.txt").read_text(encoding="utf-8")
    assert "a.png" in error_text
    assert "cannot encode a.png" in error_text


def test_stat_failure_after_encode_is_reported_as_failed(media_folder, fake_runner, monkeypatch):
    orchestrator = make_orchestrator(fake_runner)
    original_invoke = orchestrator.invoker.invoke

    def invoke_then_delete(task):
        original_invoke(task)
        if task.file_name == "b.mp4":
            task.output_path.unlink()

    monkeypatch.setattr(orchestrator.invoker, "invoke", invoke_then_delete)
    outcomes = by_file(orchestrator.run(media_folder))

    assert outcomes["b.mp4"] == EncodeOutcome.failed("b.mp4", outcomes["b.mp4"].error_detail)
    assert outcomes["b.mp4"].encoded_size_bytes is None
    assert outcomes["a.png"].is_success
