import json
from pathlib import Path

import pytest

from wrsubmit.loader import load_pipeline

ROOT = Path(__file__).resolve().parents[1]


def test_example_pipeline():
    p = load_pipeline(ROOT / "example_pipeline.py")
    assert p.graph.topological_sort() == [
        "pipeline_start",
        "run_archival_check",
        "run_qc_adapter",
        "run_seq_alignment",
        "pipeline_end",
    ]
    assert p.job_count() == 4


def test_constant_pipeline(tmp_path):
    f = tmp_path / "p.py"
    f.write_text(
        "from wrsubmit import pipeline, function, definition\n"
        "PIPELINE = pipeline(function('a', definition('r', 'ls')))\n"
    )
    p = load_pipeline(f)
    assert p.graph.vertices() == ["a"]


def test_python_file_without_pipeline(tmp_path):
    f = tmp_path / "p.py"
    f.write_text("from wrsubmit import pipeline\nX = 1\n")
    with pytest.raises(TypeError, match="Pipeline"):
        load_pipeline(f)


def test_json_pipeline(tmp_path):
    f = tmp_path / "p.json"
    f.write_text(
        json.dumps(
            {
                "graph": {
                    "nodes": [{"id": "a"}, {"id": "b"}],
                    "edges": [{"source": "a", "target": "b"}],
                },
                "definitions": {
                    "a": [{"identifier": "r", "command": "echo a"}],
                    "b": [{"identifier": "r", "command": "echo b", "num_cpus": [2]}],
                },
            }
        )
    )
    p = load_pipeline(f)
    assert p.graph.edges() == [("a", "b")]
    assert p.definitions["b"][0].num_cpus == (2,)


def test_json_definitions_for_unknown_function(tmp_path):
    f = tmp_path / "p.json"
    f.write_text(json.dumps({"graph": {"nodes": [{"id": "a"}]}, "definitions": {"b": []}}))
    with pytest.raises(ValueError, match="unknown function 'b'"):
        load_pipeline(f)


def test_missing_and_bad_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_pipeline(tmp_path / "nope.py")
    f = tmp_path / "p.yaml"
    f.write_text("a: 1\n")
    with pytest.raises(ValueError, match=".py or .json"):
        load_pipeline(f)
