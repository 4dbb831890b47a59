import pytest

from wrsubmit.options import ExecutorOptions, OptionsBuilder


def test_defaults(tmp_path):
    options = OptionsBuilder(tmp_path).build()
    assert options.analysis_path == tmp_path.resolve()
    assert options.log_dir == tmp_path.resolve() / "log"
    assert not options.interactive
    assert not options.has_job_name_prefix()
    assert not options.has_job_priority()
    assert options.wr_binary == "wr"


def test_builder(tmp_path):
    options = (
        OptionsBuilder(tmp_path)
        .with_log_dir(tmp_path / "logs")
        .with_prefix("run1")
        .with_priority(0)
        .interactive()
        .future_path_in_outgoing()
        .build()
    )
    assert options.log_dir == tmp_path.resolve() / "logs"
    assert options.has_job_name_prefix()
    assert options.has_job_priority()
    assert options.job_priority == 0
    assert options.interactive
    assert options.future_path_is_in_outgoing


@pytest.mark.parametrize("priority", [-1, 256])
def test_priority_range(tmp_path, priority):
    with pytest.raises(ValueError, match="job_priority"):
        OptionsBuilder(tmp_path).with_priority(priority).build()


def test_model_direct(tmp_path):
    options = ExecutorOptions(analysis_path=str(tmp_path), job_name_prefix="")
    assert not options.has_job_name_prefix()
