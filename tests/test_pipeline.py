"""Tests for jsoncontext.pipeline."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from jsoncontext.config import DriverConfig
from jsoncontext.loader import compile_module
from jsoncontext.models import InputSource, SourceFailure
from jsoncontext.pipeline import (
    JsonContextDriver,
    build_candidate,
    format_failure_report,
    generate,
    infer,
)
from jsoncontext.sampler import SourceReadError
from jsoncontext.shapes import INTEGER, STRING, OptionalShape, Primitive


def test_end_to_end_optional_field_and_rereading_accessor(sources, module_name) -> None:
    path = sources.write_text("people.json", '[{"id":1,"name":"a"}, {"id":2}]')
    config = DriverConfig(
        root=sources.path(),
        namespace=module_name,
        container="PeopleContext",
        inputs=[InputSource.file(str(path), sample_count=10)],
    )

    context, result = JsonContextDriver(config).load()

    assert result.failures == []
    fields = {spec.name: spec for spec in result.code.manifest["people"]}
    assert fields["id"].annotation == "int" and not fields["id"].optional
    assert fields["name"].annotation == "Optional[str]" and fields["name"].optional

    people = context.peoples
    assert [(person.id, person.name) for person in people] == [(1, "a"), (2, None)]

    path.write_text(json.dumps([{"id": 5, "name": "e"}]), encoding="utf-8")
    assert [person.id for person in context.peoples] == [5]


def test_build_candidate_infers_shape(sources) -> None:
    path = sources.write_text("people.json", '[{"id":1,"name":"a"}, {"id":2}]')

    candidate = build_candidate(str(path), 10, source_index=3)

    assert candidate.success
    assert candidate.class_name == "people"
    assert candidate.source_index == 3
    assert candidate.shape.fields == {
        "id": Primitive(INTEGER),
        "name": OptionalShape(Primitive(STRING)),
    }


def test_build_candidate_turns_read_errors_into_data(tmp_path: Path) -> None:
    candidate = build_candidate(str(tmp_path / "missing.json"), 10)

    assert not candidate.success
    assert isinstance(candidate.error, SourceReadError)
    assert candidate.class_name == "missing"


def test_partial_failure_keeps_successful_sources(sources) -> None:
    good = sources.write_records("good.json", [{"a": 1}])
    bad = sources.write_text("bad.json", "[{oops}]")

    result = generate([InputSource.file(str(good)), InputSource.file(str(bad))])

    assert result.graph.class_names == ["good"]
    assert [failure.path for failure in result.failures] == [str(bad)]
    assert "class good(BaseModel):" in result.source
    assert "class bad(" not in result.source


def test_duplicate_file_names_across_directories_are_disambiguated(sources) -> None:
    sources.write_records("2019/Order.json", [{"id": 1}])
    sources.write_records("2020/Order.json", [{"id": "x"}])

    graph, failures = infer(
        [InputSource.directory(str(sources.path()), "*.json", recursive=True)]
    )

    assert failures == []
    assert graph.class_names == ["Order", "Order_1"]
    assert graph.classes[0].data_file_path.endswith(str(Path("2019") / "Order.json"))
    assert [accessor.name for accessor in graph.accessors] == ["Orders", "Order_1s"]


def test_concurrent_inference_matches_sequential(sources) -> None:
    for index in range(6):
        sources.write_records(f"batch{index % 2}/Order.json" if index < 2 else f"file{index}.json", [{"n": index}])
    inputs = [InputSource.directory(str(sources.path()), recursive=True)]

    sequential, _ = infer(inputs)
    concurrent, _ = infer(inputs, max_workers=4)

    assert concurrent.class_names == sequential.class_names
    assert [item.data_file_path for item in concurrent.classes] == [
        item.data_file_path for item in sequential.classes
    ]


def test_missing_directory_is_reported_not_raised(tmp_path: Path, sources) -> None:
    good = sources.write_records("good.json", [{"a": 1}])
    missing = tmp_path / "nowhere"

    graph, failures = infer([InputSource.directory(str(missing)), InputSource.file(str(good))])

    assert graph.class_names == ["good"]
    assert [failure.path for failure in failures] == [str(missing)]


def test_container_name_is_never_shadowed(sources) -> None:
    path = sources.write_records("JsonDataContext.json", [{"a": 1}])

    result = generate([InputSource.file(str(path))])

    assert result.graph.class_names == ["JsonDataContext_1"]


def test_module_level_names_are_never_shadowed(sources) -> None:
    path = sources.write_records("List.json", [{"a": 1}])

    graph, _ = infer([InputSource.file(str(path))])

    assert graph.class_names == ["List_1"]


def test_zero_sample_count_generates_empty_class(sources) -> None:
    path = sources.write_records("rows.json", [{"a": 1}])

    result = generate([InputSource.file(str(path), sample_count=0)])

    assert result.code.manifest["rows"] == []


def test_format_failure_report() -> None:
    failures = [
        SourceFailure(path="/a.json", error=SourceReadError("/a.json", "invalid JSON")),
        SourceFailure(path="/b.json", error=ValueError()),
    ]

    report = format_failure_report(failures)

    assert report.splitlines() == [
        "Couldn't process 2 files:",
        "/a.json - /a.json: invalid JSON",
        "/b.json - ValueError",
    ]
    assert format_failure_report([]) == ""


def test_driver_uses_injected_compiler(sources) -> None:
    path = sources.write_records("rows.json", [{"a": 1}])
    seen = {}

    class _Module:
        class Ctx:
            pass

    def _compiler(source: str, name: str):
        seen["source"] = source
        seen["name"] = name
        return _Module

    config = DriverConfig(
        root=sources.path(), namespace="ns", container="Ctx", inputs=[InputSource.file(str(path))]
    )

    context, result = JsonContextDriver(config, compiler=_compiler).load()

    assert isinstance(context, _Module.Ctx)
    assert seen == {"source": result.source, "name": "ns"}


def test_keyword_file_names_still_compile_with_their_siblings(sources, module_name) -> None:
    short = sources.write_records("a.json", [{"n": 1}])
    people = sources.write_records("people.json", [{"name": "x"}])

    result = generate([InputSource.file(str(short)), InputSource.file(str(people))])
    module = compile_module(result.source, module_name)
    context = module.JsonDataContext()

    assert [accessor.name for accessor in result.graph.accessors] == ["as_", "peoples"]
    assert [row.n for row in context.as_] == [1]
    assert [person.name for person in context.peoples] == ["x"]


@pytest.mark.parametrize("stem", ["str", "int", "float", "bool", "dict", "isinstance", "list"])
def test_builtin_file_names_do_not_rebind_builtins(sources, module_name, stem) -> None:
    shadow = sources.write_records(f"{stem}.json", [{"a": 1}])
    people = sources.write_records("people.json", [{"name": "x", "score": 1.5, "ok": True, "n": 2}])

    result = generate([InputSource.file(str(shadow)), InputSource.file(str(people))])
    module = compile_module(result.source, module_name)
    context = module.JsonDataContext()

    assert result.graph.class_names == [f"{stem}_1", "people"]
    assert f"class {stem}(" not in result.source
    person = context.peoples[0]
    assert (person.name, person.score, person.ok, person.n) == ("x", 1.5, True, 2)
    assert [row.a for row in getattr(context, f"{stem}_1s")] == [1]


@pytest.mark.parametrize(
    "content,expected",
    [
        ('[{"a": 1}, {"a": 2}]', [1, 2]),
        ('{"a": 1}', [1]),
        ('{"a": 1}\n{"a": 2}\n\n{"a": 3}\n', [1, 2, 3]),
        ('{\n  "a": 1\n}\n{\n  "a": 2\n}\n', [1, 2]),
        ('[[{"a": 1}, {"a": 2}]]', [1, 2]),
        ('[1, {"a": 1}, "x", [{"a": 2}]]', [1, 2]),
    ],
    ids=["array", "object", "lines", "pretty-concatenated", "nested-array", "mixed"],
)
def test_accessor_reads_every_format_the_sampler_reads(
    sources, module_name, content, expected
) -> None:
    path = sources.write_text("rows.json", content)

    result = generate([InputSource.file(str(path))])
    module = compile_module(result.source, module_name)

    assert result.failures == []
    assert [row.a for row in module.JsonDataContext().rowss] == expected


def test_scalar_root_yields_empty_class_and_empty_accessor(sources, module_name) -> None:
    path = sources.write_text("count.json", "5\n")

    result = generate([InputSource.file(str(path))])
    module = compile_module(result.source, module_name)

    assert result.code.manifest["count"] == []
    assert module.JsonDataContext().counts == []
