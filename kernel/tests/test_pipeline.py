"""Tests for kernel/pipeline.py: the full run with fake adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from domain.errors import ConnectivityError, LoadGeneratorError, MissingToolError
from domain.models import (
    CACHE_FILE,
    REPORT_FILE,
    SUMMARY_CSV,
    SUSTAINED_FILE,
    RpcResponse,
    detail_file_name,
)
from kernel import pipeline
from wiring import Adapters

if TYPE_CHECKING:
    from collections.abc import Callable

    from conftest import FakeClock, FakeLoadGenerator, FakeRpcClient, InMemoryFileSystem
    from domain.models import BenchmarkConfig

NULL_BODY = '{"jsonrpc":"2.0","id":1,"result":null}'


@pytest.fixture
def make_adapters(
    rpc_client_factory: type[FakeRpcClient],
    load_generator_factory: type[FakeLoadGenerator],
    memory_fs: InMemoryFileSystem,
    fake_clock: FakeClock,
) -> Callable[..., Adapters]:
    def _make(
        client: FakeRpcClient | None = None,
        generator: FakeLoadGenerator | None = None,
    ) -> Adapters:
        return Adapters(
            client=client or rpc_client_factory(clock=fake_clock, latency=0.05),
            generator=generator or load_generator_factory(),
            fs=memory_fs,
            clock=fake_clock,
        )

    return _make


def test_full_run_writes_every_artifact(
    make_adapters: Callable[..., Adapters],
    config_factory: Callable[..., BenchmarkConfig],
    memory_fs: InMemoryFileSystem,
) -> None:
    config = config_factory()
    run = pipeline.run_benchmark(config, make_adapters())

    expected = {
        SUMMARY_CSV,
        SUSTAINED_FILE,
        CACHE_FILE,
        REPORT_FILE,
        *(detail_file_name(c) for c in (10, 50, 100)),
    }
    assert set(memory_fs.files) == expected
    assert len(memory_fs.files[SUMMARY_CSV].splitlines()) == 4
    assert run.probe is not None
    assert run.probe.block_number == "0x1a"
    assert [r.concurrency for r in run.load_tests] == [10, 50, 100]
    assert run.sustained is not None
    assert run.cache is not None
    assert run.cache.request_count == 5
    assert run.report_path == REPORT_FILE
    assert memory_fs.files[REPORT_FILE].count('<tr class="good">') == 3
    assert "Node URL: http://localhost\n" in memory_fs.files[SUSTAINED_FILE]


def test_previous_results_are_cleared(
    make_adapters: Callable[..., Adapters],
    config_factory: Callable[..., BenchmarkConfig],
    memory_fs: InMemoryFileSystem,
) -> None:
    memory_fs.write_file("load_test_5000_clients_detailed.txt", "old")
    memory_fs.write_file("notes.txt", "mine")
    pipeline.run_benchmark(config_factory(), make_adapters())

    assert "load_test_5000_clients_detailed.txt" not in memory_fs.files
    assert memory_fs.files["notes.txt"] == "mine"
    assert memory_fs.clear_count == 1


def test_repeated_runs_produce_same_file_set(
    make_adapters: Callable[..., Adapters],
    config_factory: Callable[..., BenchmarkConfig],
    memory_fs: InMemoryFileSystem,
) -> None:
    config = config_factory()
    pipeline.run_benchmark(config, make_adapters())
    first = set(memory_fs.files)
    first_csv = memory_fs.files[SUMMARY_CSV]

    pipeline.run_benchmark(config, make_adapters())
    assert set(memory_fs.files) == first
    assert memory_fs.files[SUMMARY_CSV] == first_csv


def test_null_block_number_aborts_before_output(
    make_adapters: Callable[..., Adapters],
    rpc_client_factory: type[FakeRpcClient],
    config_factory: Callable[..., BenchmarkConfig],
    memory_fs: InMemoryFileSystem,
) -> None:
    """A failed JSON-RPC probe stops the run before any artifact is written."""
    memory_fs.write_file(SUMMARY_CSV, "from a previous run\n")
    client = rpc_client_factory([RpcResponse(status_code=200, body=NULL_BODY)])
    generator_adapters = make_adapters(client=client)

    with pytest.raises(ConnectivityError):
        pipeline.run_benchmark(config_factory(), generator_adapters)

    assert memory_fs.clear_count == 0
    assert memory_fs.files == {SUMMARY_CSV: "from a previous run\n"}
    assert generator_adapters.generator.calls == []  # type: ignore[attr-defined]


def test_missing_tool_aborts_before_probe(
    make_adapters: Callable[..., Adapters],
    rpc_client_factory: type[FakeRpcClient],
    load_generator_factory: type[FakeLoadGenerator],
    config_factory: Callable[..., BenchmarkConfig],
) -> None:
    client = rpc_client_factory()
    adapters = make_adapters(client=client, generator=load_generator_factory(available=False))

    with pytest.raises(MissingToolError, match="apache2-utils"):
        pipeline.run_benchmark(config_factory(), adapters)
    assert client.health_calls == 0
    assert client.rpc_calls == 0


def test_failing_level_keeps_completed_rows(
    make_adapters: Callable[..., Adapters],
    load_generator_factory: type[FakeLoadGenerator],
    config_factory: Callable[..., BenchmarkConfig],
    memory_fs: InMemoryFileSystem,
) -> None:
    adapters = make_adapters(generator=load_generator_factory(fail_at=50))

    with pytest.raises(LoadGeneratorError):
        pipeline.run_benchmark(config_factory(), adapters)

    assert memory_fs.files[SUMMARY_CSV].splitlines()[1].split(",")[1] == "10"
    assert len(memory_fs.files[SUMMARY_CSV].splitlines()) == 2
    assert SUSTAINED_FILE not in memory_fs.files
    assert REPORT_FILE not in memory_fs.files


def test_health_failure_is_only_a_warning(
    make_adapters: Callable[..., Adapters],
    rpc_client_factory: type[FakeRpcClient],
    config_factory: Callable[..., BenchmarkConfig],
    fake_clock: FakeClock,
    memory_fs: InMemoryFileSystem,
) -> None:
    client = rpc_client_factory(health="not found", clock=fake_clock, latency=0.05)
    run = pipeline.run_benchmark(config_factory(), make_adapters(client=client))

    assert run.probe is not None
    assert not run.probe.health_passed
    assert REPORT_FILE in memory_fs.files


def test_cooldown_between_levels(
    make_adapters: Callable[..., Adapters],
    config_factory: Callable[..., BenchmarkConfig],
    fake_clock: FakeClock,
) -> None:
    config = config_factory(level_cooldown_seconds=5.0, sustained_duration_seconds=0.0)
    pipeline.run_benchmark(config, make_adapters())
    assert fake_clock.sleeps == [5.0, 5.0]


def test_run_checks_only_probes(
    make_adapters: Callable[..., Adapters],
    config_factory: Callable[..., BenchmarkConfig],
    memory_fs: InMemoryFileSystem,
) -> None:
    adapters = make_adapters()
    result = pipeline.run_checks(config_factory(), adapters)

    assert result.rpc_passed
    assert memory_fs.files == {}
    assert adapters.generator.calls == []  # type: ignore[attr-defined]
