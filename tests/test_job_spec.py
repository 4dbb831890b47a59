import json
import random

import pytest

from wrsubmit.dsl import composition, definition
from wrsubmit.errors import ResourceParseError
from wrsubmit.executor.wr import (
    cpus4job,
    generate_group_id,
    log_file4job,
    memory4job,
    report_group,
    serialize,
    wr_job4definition,
)

STAMP = "20240101-000000"


def test_default_memory():
    assert memory4job(definition("run1", "ls")) == "2000M"


def test_explicit_memory():
    assert memory4job(definition("run1", "ls", memory=500)) == "500M"


@pytest.mark.parametrize(
    "num_cpus, expected",
    [([2.0], 2), ([2.9], 2), ([3, 8], 3), (["4"], 4), (["2.5"], 2)],
)
def test_cpus_truncated_to_int(num_cpus, expected):
    assert cpus4job(definition("run1", "ls", num_cpus=num_cpus)) == expected


def test_no_cpus_requested():
    assert cpus4job(definition("run1", "ls")) is None


@pytest.mark.parametrize("value", ["four", "", None, True, float("nan")])
def test_non_numeric_cpus(value):
    d = definition("run1", "ls", num_cpus=[value])
    with pytest.raises(ResourceParseError) as exc:
        cpus4job(d)
    assert exc.value.identifier == "run1"


def test_empty_cpu_list_rejected():
    with pytest.raises(ValueError, match="num_cpus"):
        definition("run1", "ls", num_cpus=[])


def test_log_file_uses_identifier():
    d = definition("26291", "ls", created_on=STAMP)
    assert log_file4job("run_archival_check", "/logs/f", d) == (
        "/logs/f/run_archival_check-20240101-000000-26291.out"
    )


def test_log_file_uses_composition():
    d = definition(
        "26291_1",
        "ls",
        created_on=STAMP,
        composition=composition("26291:2:1", "26291:1:1"),
    )
    assert log_file4job("align", "/logs/align", d) == (
        "/logs/align/align-20240101-000000-26291:1:1;26291:2:1.out"
    )


def test_report_group():
    d = definition("26291_1", "ls")
    assert report_group("qc", d) == "26291_1-qc"
    assert report_group("qc", d, prefix="mytest") == "mytest-26291_1-qc"


def test_wrapped_command_tees_into_log():
    d = definition("run1", "qc --check adapter", created_on=STAMP)
    job = wr_job4definition("qc", "/logs/qc", d, "qc-run1-7")
    assert job.cmd == (
        "set -o pipefail; ( qc --check adapter ) 2>&1 | tee /logs/qc/qc-20240101-000000-run1.out"
    )


def test_source_job_has_no_deps_field():
    d = definition("run1", "ls", created_on=STAMP)
    record = wr_job4definition("start", "/logs", d, "start-run1-1").to_dict()
    assert "deps" not in record
    assert "cpus" not in record
    assert record["dep_grps"] == ["start-run1-1"]


def test_downstream_job_record():
    d = definition("run1", "merge", memory=500, num_cpus=[2.0], created_on=STAMP)
    job = wr_job4definition("merge", "/logs", d, "merge-run1-3", ["qc-run1-1", "qc-run1-2"], prefix="p")
    assert json.loads(serialize(job)) == {
        "cmd": "set -o pipefail; ( merge ) 2>&1 | tee /logs/merge-20240101-000000-run1.out",
        "cpus": 2,
        "dep_grps": ["merge-run1-3"],
        "deps": ["qc-run1-1", "qc-run1-2"],
        "memory": "500M",
        "rep_grp": "p-run1-merge",
    }


def test_serialization_is_canonical():
    d = definition("run1", "ls", created_on=STAMP)
    line = serialize(wr_job4definition("f", "/l", d, "g"))
    assert "\n" not in line
    assert line == json.dumps(json.loads(line), sort_keys=True, separators=(",", ":"))
    assert line.startswith('{"cmd":')


def test_group_id_format():
    gid = generate_group_id("qc", "run1", random.Random(1))
    name, identifier, nonce = gid.split("-")
    assert (name, identifier) == ("qc", "run1")
    assert nonce.isdigit()


def test_group_ids_unique():
    rng = random.Random(42)
    ids = {generate_group_id("qc", "run1", rng) for _ in range(10_000)}
    assert len(ids) == 10_000


def test_group_ids_reproducible_with_seed():
    assert generate_group_id("qc", "run1", random.Random(5)) == generate_group_id(
        "qc", "run1", random.Random(5)
    )


@pytest.mark.parametrize("memory", ["2G", 1500.5, 0, -100, True])
def test_memory_must_be_positive_integer(memory):
    with pytest.raises(ValueError, match="memory"):
        definition("run1", "ls", memory=memory)


def test_memory_from_records_is_checked():
    from wrsubmit.dsl import definitions_from_records

    with pytest.raises(ValueError, match="memory"):
        definitions_from_records([{"identifier": "r1", "command": "ls", "memory": "2G"}])
