"""
Unit tests for the markdown jobs report.
"""

from jobmatch import report
from jobmatch.models import AggregationResult, AggregationStats, CachedJobs, JobMatch
from jobmatch.report import PER_SECTION, build_jobs_report, write_jobs_report


def _result(jobs, matches, **stats):
    defaults = dict(total=len(jobs), unique=len(jobs), platforms=["remotive"], failed=0)
    defaults.update(stats)
    return AggregationResult(jobs=jobs, matches=matches, stats=AggregationStats(**defaults))


class TestBuildJobsReport:
    """Test report rendering."""

    def test_header_and_stats(self, now):
        content = build_jobs_report(_result([], [], total=12, unique=0, failed=2), now=now)

        assert content.startswith("# Job Matches: 2026-03-01")
        assert "**12** fetched | **0** unique | **1** platforms (remotive) | **2** failed fetches" in content
        assert "_No jobs found._" in content

    def test_job_entry(self, make_listing, now):
        job = make_listing(
            title="React Developer",
            salary_min=60000,
            salary_max=80000,
            source_url="https://www.example.com/jobs/1",
        )
        match = JobMatch(job.id, 94, ["React"], ["1 matching skills", "Near you"], "city")

        content = build_jobs_report(_result([job], [match]), now=now)

        assert "## In Your City (1)" in content
        assert "### React Developer @ Acme" in content
        assert "- **Score:** 94%" in content
        assert "- **Posted:** 2d ago via remotive" in content
        assert "- **Salary:** 60,000 - 80,000 USD" in content
        assert "- **Why:** 1 matching skills, Near you" in content
        assert "- **Apply:** [Example](https://www.example.com/jobs/1)" in content

    def test_sections_follow_locality_order(self, make_listing, now):
        remote = make_listing(external_id="r", title="Remote Role")
        city = make_listing(external_id="c", title="City Role")
        matches = [
            JobMatch(remote.id, 80, locality="remote"),
            JobMatch(city.id, 70, locality="city"),
        ]

        content = build_jobs_report(_result([remote, city], matches), now=now)

        assert content.index("## In Your City") < content.index("## Remote")

    def test_long_section_truncated(self, make_listing, now):
        jobs = [make_listing(external_id=str(i), title=f"Role {i}") for i in range(PER_SECTION + 2)]
        matches = [JobMatch(j.id, 50, locality="international") for j in jobs]

        content = build_jobs_report(_result(jobs, matches), now=now)

        assert f"## International ({PER_SECTION + 2})" in content
        assert "_...and 2 more._" in content
        assert f"Role {PER_SECTION + 1}" not in content

    def test_unmatched_job_goes_to_other(self, make_listing, now):
        content = build_jobs_report(_result([make_listing()], []), now=now)

        assert "## Other (1)" in content
        assert "- **Score:** 0%" in content

    def test_cached_result(self, make_listing, now):
        cached = CachedJobs(jobs=[make_listing()], matches=[], refreshed_at="2026-03-01T10:15:00Z")

        content = build_jobs_report(cached, now=now)

        assert "**1** cached jobs | last refresh 2026-03-01 10:15 UTC" in content


class TestWriteJobsReport:
    """Test writing the report file."""

    def test_writes_dated_file(self, tmp_path, monkeypatch, now):
        monkeypatch.setattr(report, "REPORTS_DIR", tmp_path / "reports")

        path = write_jobs_report("# hello", now=now)

        assert path == tmp_path / "reports" / "jobs_2026-03-01.md"
        assert path.read_text(encoding="utf-8") == "# hello"
