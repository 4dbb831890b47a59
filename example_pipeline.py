# example_pipeline.py
# A small sequencing run: per-lane QC fans out, per-sample alignment fans in.
from __future__ import annotations

from wrsubmit.dsl import build, composition, definition, function
from wrsubmit.dsl import pipeline as make_pipeline

RUN = "26291"
STAMP = "20240101-120000"


def pipeline():
    return make_pipeline(
        function(
            "pipeline_start",
            definition(RUN, "true", excluded=True, created_on=STAMP),
        ),
        function(
            "run_archival_check",
            definition(RUN, "npg_archival_check --id_run 26291", created_on=STAMP),
            needs=["pipeline_start"],
        ),
        function(
            "run_qc_adapter",
            *[
                definition(
                    f"{RUN}_{lane}",
                    f"qc --check adapter --rpt_list {RUN}:{lane}",
                    composition=composition(f"{RUN}:{lane}"),
                    created_on=STAMP,
                )
                for lane in (1, 2)
            ],
            needs=["run_archival_check"],
        ),
        (
            build("run_seq_alignment")
            .runs_after("run_qc_adapter")
            .define_job(
                f"{RUN}_1",
                "align --rpt 26291:1:1;26291:2:1",
                memory=12000,
                num_cpus=[12, 16],
                composition=composition(f"{RUN}:1:1", f"{RUN}:2:1"),
                created_on=STAMP,
            )
            .build()
        ),
        function(
            "pipeline_end",
            definition(RUN, "true", excluded=True, created_on=STAMP),
            needs=["run_seq_alignment"],
        ),
    )
