"""
Job Registry Tests

Keyword validation, id generation, lookup, saturation and shutdown, with the
traversal replaced by a controllable engine.
"""

import asyncio
import re

import pytest
import pytest_asyncio

from keyword_crawler.core.exceptions import KEYWORD_ERROR, InvalidKeyword, PoolSaturated
from keyword_crawler.domain.job import JobStatus
from keyword_crawler.services.registry import JobRegistry, generate_job_id, validate_keyword


class BlockingEngine:
    """Holds each job ACTIVE until released or cancelled."""

    def __init__(self):
        self.release = asyncio.Event()
        self.jobs = []

    async def run(self, job):
        self.jobs.append(job)
        try:
            await self.release.wait()
        finally:
            job.mark_done()


@pytest_asyncio.fixture
async def registry(make_config):
    async with JobRegistry(make_config(), engine=BlockingEngine()) as registry:
        yield registry


@pytest.mark.parametrize("keyword", ["four", "a" * 32, "security", "a b c"])
def test_validate_keyword_accepts(keyword):
    assert validate_keyword(keyword) == keyword


@pytest.mark.parametrize("keyword", [None, "", "abc", "a" * 33])
def test_validate_keyword_rejects(keyword):
    with pytest.raises(InvalidKeyword) as exc_info:
        validate_keyword(keyword)

    assert str(exc_info.value) == KEYWORD_ERROR


def test_generate_job_id_format():
    ids = {generate_job_id() for _ in range(50)}

    assert all(re.fullmatch(r"[A-Za-z0-9]{8}", job_id) for job_id in ids)
    assert len(ids) > 1


@pytest.mark.asyncio
async def test_submit_registers_active_job(registry):
    job = registry.submit("security")

    assert re.fullmatch(r"[A-Za-z0-9]{8}", job.id)
    assert job.keyword == "security"
    assert job.status is JobStatus.ACTIVE
    assert registry.lookup(job.id) is job
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_submit_applies_result_cap(make_config):
    async with JobRegistry(make_config(max_results=7), engine=BlockingEngine()) as registry:
        assert registry.submit("security").max_results == 7

    async with JobRegistry(make_config(limit_results=False), engine=BlockingEngine()) as registry:
        assert registry.submit("security").max_results is None


@pytest.mark.asyncio
@pytest.mark.parametrize("keyword", [None, "", "abc", "a" * 33])
async def test_invalid_keyword_registers_nothing(registry, keyword):
    with pytest.raises(InvalidKeyword):
        registry.submit(keyword)

    assert len(registry) == 0


@pytest.mark.asyncio
async def test_lookup_unknown_id(registry):
    assert registry.lookup("nope1234") is None


@pytest.mark.asyncio
async def test_each_submission_gets_distinct_id(registry):
    ids = {registry.submit(f"keyword-{i}").id for i in range(3)}

    assert len(ids) == 3


@pytest.mark.asyncio
async def test_saturation_leaves_no_job_behind(make_config):
    config = make_config(min_workers=1, max_workers=1, job_queue_size=0)
    async with JobRegistry(config, engine=BlockingEngine()) as registry:
        registry.submit("first")
        await asyncio.sleep(0)

        with pytest.raises(PoolSaturated):
            registry.submit("second")

        assert len(registry) == 1


@pytest.mark.asyncio
async def test_shutdown_finishes_every_job(make_config):
    engine = BlockingEngine()
    registry = JobRegistry(make_config(job_queue_size=10, max_workers=2), engine=engine)
    await registry.start()

    jobs = [registry.submit(f"keyword-{i}") for i in range(4)]
    await asyncio.sleep(0.01)
    assert registry.stats()["jobs_active"] == 4

    await registry.shutdown()

    assert all(job.status is JobStatus.DONE for job in jobs)
    assert not registry.accepting
    with pytest.raises(PoolSaturated):
        registry.submit("too late")


@pytest.mark.asyncio
async def test_shutdown_is_idempotent(make_config):
    registry = JobRegistry(make_config(), engine=BlockingEngine())
    await registry.start()

    await registry.shutdown()
    await registry.shutdown()

    assert not registry.accepting


@pytest.mark.asyncio
async def test_stats(registry):
    registry.submit("security")
    await asyncio.sleep(0.01)

    stats = registry.stats()

    assert stats["jobs_total"] == 1
    assert stats["jobs_active"] == 1
    assert stats["jobs_done"] == 0
    assert stats["pool_status"] == "running"
    assert stats["active_tasks"] == 1
    assert stats["min_workers"] == 1
    assert stats["max_workers"] == 4
    assert stats["uptime_seconds"] >= 0


@pytest.mark.asyncio
async def test_completed_job_reported_done(registry):
    job = registry.submit("security")
    await asyncio.sleep(0.01)

    registry._engine.release.set()
    await asyncio.sleep(0.01)

    assert registry.lookup(job.id).status is JobStatus.DONE
    assert registry.stats()["jobs_done"] == 1


@pytest.mark.asyncio
async def test_stats_after_immediate_shutdown(make_config):
    registry = JobRegistry(make_config(min_workers=2), engine=BlockingEngine())
    await registry.start()

    await registry.shutdown()

    stats = registry.stats()
    assert stats["pool_status"] == "stopped"
    assert stats["workers"] == 0
    assert stats["active_tasks"] == 0
