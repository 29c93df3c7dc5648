"""
Job State Tests

Tests for Job status transitions, match recording and result capping.
"""

import threading

from keyword_crawler.domain.job import Job, JobStatus


def test_new_job_is_active_and_empty():
    job = Job("abcd1234", "security")

    assert job.id == "abcd1234"
    assert job.keyword == "security"
    assert job.status is JobStatus.ACTIVE
    assert job.is_done is False
    assert job.snapshot_matches() == []
    assert job.updated_at == job.created_at


def test_add_match_is_idempotent():
    job = Job("abcd1234", "security")

    assert job.add_match("http://site.test/a") is True
    assert job.add_match("http://site.test/a") is False

    assert job.snapshot_matches() == ["http://site.test/a"]
    assert job.match_count == 1


def test_add_match_keeps_discovery_order():
    job = Job("abcd1234", "security")
    for url in ("http://site.test/c", "http://site.test/a", "http://site.test/b"):
        job.add_match(url)

    assert job.snapshot_matches() == [
        "http://site.test/c",
        "http://site.test/a",
        "http://site.test/b",
    ]


def test_add_match_updates_timestamp():
    job = Job("abcd1234", "security")
    before = job.updated_at

    job.add_match("http://site.test/a")

    assert job.updated_at >= before


def test_status_only_moves_forward():
    job = Job("abcd1234", "security")

    assert job.mark_done() is True
    assert job.status is JobStatus.DONE

    assert job.set_status(JobStatus.ACTIVE) is False
    assert job.status is JobStatus.DONE

    # Repeating the terminal transition is a no-op
    assert job.mark_done() is False


def test_matches_still_recorded_after_done():
    job = Job("abcd1234", "security")
    job.mark_done()
    job.add_match("http://site.test/late")

    assert job.snapshot_matches() == ["http://site.test/late"]
    assert job.status is JobStatus.DONE


class TestResultCap:
    def test_snapshot_is_capped(self):
        job = Job("abcd1234", "security", max_results=2)
        for i in range(5):
            job.add_match(f"http://site.test/{i}")

        assert job.snapshot_matches() == ["http://site.test/0", "http://site.test/1"]
        # Growth beyond the cap is still tracked internally
        assert job.match_count == 5

    def test_cap_reached(self):
        job = Job("abcd1234", "security", max_results=2)
        assert job.cap_reached is False

        job.add_match("http://site.test/0")
        assert job.cap_reached is False

        job.add_match("http://site.test/1")
        assert job.cap_reached is True

    def test_no_cap_when_limiting_disabled(self):
        job = Job("abcd1234", "security", max_results=None)
        for i in range(150):
            job.add_match(f"http://site.test/{i}")

        assert len(job.snapshot_matches()) == 150
        assert job.cap_reached is False


def test_snapshot_is_consistent_copy():
    job = Job("abcd1234", "security", max_results=10)
    job.add_match("http://site.test/a")

    snapshot = job.snapshot()
    job.add_match("http://site.test/b")
    job.mark_done()

    assert snapshot.id == "abcd1234"
    assert snapshot.keyword == "security"
    assert snapshot.status is JobStatus.ACTIVE
    assert snapshot.urls == ["http://site.test/a"]
    assert job.snapshot().urls == ["http://site.test/a", "http://site.test/b"]


def test_concurrent_readers_never_see_torn_state():
    """Readers polling from other threads always see a complete list"""
    job = Job("abcd1234", "security")
    urls = [f"http://site.test/{i}" for i in range(500)]
    errors = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            snapshot = job.snapshot()
            if snapshot.urls != urls[: len(snapshot.urls)]:
                errors.append(snapshot.urls)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for thread in readers:
        thread.start()

    for url in urls:
        job.add_match(url)
    job.mark_done()

    stop.set()
    for thread in readers:
        thread.join()

    assert errors == []
    assert job.snapshot().urls == urls
    assert job.snapshot().status is JobStatus.DONE
