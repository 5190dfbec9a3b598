"""
Unit tests for JSON API sources.

These tests use mocked API responses to verify adapter behavior
without making real API calls.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from jobmatch.models import AppSettings
from jobmatch.sources import (
    AdzunaSource,
    ArbeitnowSource,
    HimalayasSource,
    JobicySource,
    JoinRiseSource,
    JoobleSource,
    JSearchSource,
    RemoteOKSource,
    RemotiveSource,
    SearchAPISource,
    TheMuseSource,
    get_sources,
)
from jobmatch.sources.adzuna import country_code
from jobmatch.sources.base import match_country
from jobmatch.sources.himalayas import collect_skills
from jobmatch.sources.jobicy import map_job_level
from jobmatch.sources.remoteok import query_tag
from jobmatch.sources.themuse import DEFAULT_CATEGORY, map_category, map_levels

GET = "jobmatch.sources.base.requests.get"


def _response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


SAMPLE_REMOTIVE_RESPONSE = {
    "job-count": 1,
    "jobs": [
        {
            "id": 1897302,
            "url": "https://remotive.com/remote-jobs/software-dev/senior-react-engineer-1897302",
            "title": "Senior React Engineer",
            "company_name": "Doist",
            "company_logo": "https://remotive.com/job/1897302/logo",
            "category": "Software Development",
            "tags": ["react", "typescript", "x"],
            "job_type": "full_time",
            "publication_date": "2026-02-27T09:30:11",
            "candidate_required_location": "Worldwide",
            "description": "<p>Join our <b>frontend</b> team.</p>",
        }
    ],
}

SAMPLE_REMOTEOK_RESPONSE = [
    {"legal": "API terms of service"},
    {
        "id": "1093422",
        "slug": "remote-senior-python-developer-acme-1093422",
        "position": "Senior Python Developer",
        "company": "Acme",
        "tags": ["python", "django", "saas"],
        "location": "",
        "salary_min": 90000,
        "salary_max": 0,
        "url": "https://remoteok.com/remote-jobs/1093422",
        "date": "2026-02-26T10:00:00+00:00",
        "description": "Work on our Django backend.",
    },
]

SAMPLE_JSEARCH_RESPONSE = {
    "status": "OK",
    "data": [
        {
            "job_id": "abc123==",
            "employer_name": "TechCorp Inc",
            "employer_logo": None,
            "job_publisher": "LinkedIn",
            "job_employment_type": "CONTRACTOR",
            "job_title": "Backend Developer",
            "job_apply_link": "https://example.com/apply/123",
            "job_description": "Build APIs with Python and Docker.",
            "job_is_remote": False,
            "job_posted_at_datetime_utc": "2026-02-25T00:00:00.000Z",
            "job_city": "Karachi",
            "job_state": "Sindh",
            "job_country": "PK",
            "job_min_salary": 40000,
            "job_max_salary": None,
            "job_salary_currency": None,
            "job_highlights": {"Qualifications": ["3+ years Python"], "Benefits": ["Health"]},
        }
    ],
}


class TestRemotiveSource:
    """Test the Remotive adapter."""

    @patch(GET)
    def test_fetch(self, mock_get):
        mock_get.return_value = _response(SAMPLE_REMOTIVE_RESPONSE)

        jobs = RemotiveSource().fetch("react developer")

        assert mock_get.call_args.kwargs["params"] == {"search": "react developer", "limit": 20}
        assert len(jobs) == 1
        job = jobs[0]
        assert job.source_platform == "remotive"
        assert job.external_id == "1897302"
        assert job.description == "Join our frontend team."
        assert job.skills_required == ["react", "typescript"]
        assert job.is_remote is True
        assert job.experience_level == "senior"
        assert job.location == "Worldwide"
        assert job.metadata["category"] == "Software Development"

    @patch(GET)
    def test_http_error_propagates(self, mock_get):
        """Test that HTTP failures reach the caller for retry."""
        mock_get.return_value.raise_for_status.side_effect = requests.HTTPError("503")

        with pytest.raises(requests.HTTPError):
            RemotiveSource().fetch("react")

    @patch(GET)
    def test_empty(self, mock_get):
        mock_get.return_value = _response({"jobs": []})

        assert RemotiveSource().fetch("react") == []


class TestRemoteOKSource:
    """Test the RemoteOK adapter."""

    def test_query_tag(self):
        assert query_tag("Senior Python Developer") == "python"
        assert query_tag("Haskell wizard") == "haskell"
        assert query_tag("") == ""

    @patch(GET)
    def test_fetch_skips_legal_notice(self, mock_get):
        mock_get.return_value = _response(SAMPLE_REMOTEOK_RESPONSE)

        jobs = RemoteOKSource().fetch("python developer")

        assert mock_get.call_args.kwargs["params"] == {"tags": "python"}
        assert [j.title for j in jobs] == ["Senior Python Developer"]
        job = jobs[0]
        assert job.skills_required == ["Python", "Django"]
        assert job.location == "Remote"
        assert job.salary_min == 90000
        assert job.salary_max is None

    @patch(GET)
    def test_non_list_payload(self, mock_get):
        mock_get.return_value = _response({"error": "rate limited"})

        assert RemoteOKSource().fetch("python") == []


class TestArbeitnowSource:
    """Test the Arbeitnow adapter."""

    @patch(GET)
    def test_fetch(self, mock_get):
        mock_get.return_value = _response({
            "data": [
                {
                    "slug": "backend-developer-berlin-123",
                    "company_name": "Wolt",
                    "title": "Backend Developer",
                    "description": "<p>Go and Kafka</p>",
                    "remote": False,
                    "url": "https://www.arbeitnow.com/jobs/backend-developer-berlin-123",
                    "tags": ["Go", "Kafka"],
                    "location": "Berlin",
                    "created_at": 1772100000,
                },
                {"slug": "", "company_name": "NoSlug GmbH", "title": "Data Analyst", "remote": True},
            ]
        })

        jobs = ArbeitnowSource().fetch("developer")

        assert jobs[0].salary_currency == "EUR"
        assert jobs[0].is_remote is False
        assert jobs[0].posted_at.endswith("Z")
        assert jobs[1].external_id.startswith("an-")
        assert jobs[1].is_remote is True
        assert jobs[1].posted_at is None


class TestJobicySource:
    """Test the Jobicy adapter."""

    def test_map_job_level(self):
        assert map_job_level("Senior", "Engineer") == "senior"
        assert map_job_level("Any", "Junior Engineer") == "entry"
        assert map_job_level(None, "Engineer") == "mid"

    @patch(GET)
    def test_fetch(self, mock_get):
        mock_get.return_value = _response({
            "jobs": [
                {
                    "id": 98765,
                    "url": "https://jobicy.com/jobs/98765",
                    "jobTitle": "React Native Developer",
                    "companyName": "Appify",
                    "jobGeo": "",
                    "jobLevel": "Midweight",
                    "jobType": ["Full-Time"],
                    "jobDescription": "<p>React Native and TypeScript</p>",
                    "pubDate": "2026-02-20 10:00:00",
                    "annualSalaryMin": "70000",
                    "salaryCurrency": "USD",
                }
            ]
        })

        jobs = JobicySource().fetch("react")

        assert mock_get.call_args.kwargs["params"] == {"count": 50, "tag": "react"}
        job = jobs[0]
        assert job.external_id == "98765"
        assert job.location == "Remote"
        assert job.salary_min == 70000
        assert job.job_type == "full_time"
        assert job.experience_level == "mid"
        assert "TypeScript" in job.skills_required


class TestJoinRiseSource:
    """Test the JoinRise adapter."""

    @patch(GET)
    def test_fetch(self, mock_get):
        mock_get.return_value = _response({
            "result": {
                "jobs": [
                    {
                        "_id": "65f0c1",
                        "title": "Platform Engineer",
                        "owner": {"companyName": "Rise", "photo": "https://cdn/logo.png"},
                        "locationAddress": "Remote, US",
                        "seniority": "Senior",
                        "url": "https://joinrise.co/jobs/65f0c1",
                        "createdAt": "2026-02-26T00:00:00.000Z",
                        "skills_suggest": ["Go", "Kubernetes"],
                        "descriptionBreakdown": {
                            "keywords": ["Go", "Kubernetes", "Terraform"],
                            "workModel": "Remote",
                            "employmentType": "Full-time",
                            "salaryRangeMinYearly": 150000,
                            "oneSentenceJobSummary": "Own the internal platform.",
                        },
                    }
                ]
            }
        })

        job = JoinRiseSource().fetch("platform engineer")[0]

        assert job.company_name == "Rise"
        assert job.is_remote is True
        assert job.experience_level == "senior"
        assert job.skills_required == ["Go", "Kubernetes", "Terraform"]
        assert job.requirements == ["Go", "Kubernetes"]
        assert job.description == "Own the internal platform."

    @patch(GET)
    def test_missing_result(self, mock_get):
        mock_get.return_value = _response({})

        assert JoinRiseSource().fetch("x") == []


class TestHimalayasSource:
    """Test the Himalayas adapter."""

    def test_collect_skills_tops_up_from_description(self):
        skills = collect_skills(["Engineering"], [], "We use Python and AWS")

        assert skills == ["Engineering", "Python", "AWS"]

    @patch(GET)
    def test_fetch(self, mock_get):
        mock_get.return_value = _response({
            "jobs": [
                {
                    "title": "Staff Data Engineer",
                    "companyName": "Himalayas",
                    "slug": "staff-data-engineer",
                    "categories": ["Data", "Engineering", "Analytics"],
                    "applicationUrl": "https://himalayas.app/apply/1",
                    "minSalary": 120000,
                    "pubDate": 1772000000,
                }
            ]
        })

        job = HimalayasSource().fetch("data engineer")[0]

        assert job.external_id == "staff-data-engineer"
        assert job.experience_level == "senior"
        assert job.skills_required == ["Data", "Engineering", "Analytics"]
        assert job.source_url == "https://himalayas.app/apply/1"


class TestTheMuseSource:
    """Test The Muse adapter."""

    def test_map_category(self):
        assert map_category("Data Analyst") == "Data and Analytics"
        assert map_category("React Developer") == DEFAULT_CATEGORY

    def test_map_levels(self):
        assert map_levels([{"name": "Internship"}], "Intern") == ("internship", "entry")
        assert map_levels([{"name": "Senior Level"}], "Engineer") == ("full_time", "senior")
        assert map_levels([], "Lead Engineer") == ("full_time", "lead")

    @patch(GET)
    def test_fetch_passes_location(self, mock_get):
        mock_get.return_value = _response({
            "results": [
                {
                    "id": 555,
                    "name": "Software Engineer",
                    "company": {"name": "Muse Co"},
                    "locations": [{"name": "Flexible / Remote"}],
                    "levels": [{"name": "Mid Level"}],
                    "contents": "<p>Python services</p>",
                    "refs": {"landing_page": "https://www.themuse.com/jobs/555"},
                    "publication_date": "2026-02-25T00:00:00Z",
                }
            ]
        })

        jobs = TheMuseSource().fetch("software engineer", "New York, NY")

        assert mock_get.call_args.kwargs["params"] == {
            "page": 0, "category": DEFAULT_CATEGORY, "location": "New York, NY",
        }
        assert jobs[0].is_remote is True
        assert jobs[0].skills_required == ["Python"]


class TestJSearchSource:
    """Test the JSearch adapter."""

    @patch(GET)
    def test_fetch(self, mock_get):
        mock_get.return_value = _response(SAMPLE_JSEARCH_RESPONSE)

        jobs = JSearchSource("test-key").fetch("backend developer", "Karachi")

        kwargs = mock_get.call_args.kwargs
        assert kwargs["params"]["query"] == "backend developer in Karachi"
        assert kwargs["headers"]["X-RapidAPI-Key"] == "test-key"
        job = jobs[0]
        assert job.location == "Karachi, Sindh, PK"
        assert job.job_type == "contract"
        assert job.salary_min == 40000
        assert job.salary_currency == "USD"
        assert job.requirements == ["3+ years Python"]
        assert job.skills_required == ["Python", "Docker"]


class TestAdzunaSource:
    """Test the Adzuna adapter."""

    @pytest.mark.parametrize(
        "location, expected",
        [
            ("Sydney, Australia", "au"),
            ("Vienna, Austria", "at"),
            ("London, UK", "gb"),
            ("Austin, US", "us"),
            ("Moscow, Russia", "ru"),
            ("Karachi, Pakistan", "gb"),
            ("Lagos, Nigeria", "us"),
            (None, "us"),
        ],
    )
    def test_country_code(self, location, expected):
        assert country_code(location) == expected

    def test_match_country_needs_whole_word(self):
        assert match_country("Russia", {"us": "us"}, "xx") == "xx"

    @patch(GET)
    def test_fetch(self, mock_get):
        mock_get.return_value = _response({
            "results": [
                {
                    "id": "4433221",
                    "title": "Python Developer (Remote)",
                    "company": {"display_name": "DataCo"},
                    "location": {"display_name": "London, UK"},
                    "category": {"tag": "it-jobs"},
                    "description": "Django APIs",
                    "contract_type": "permanent",
                    "redirect_url": "https://adzuna.co.uk/land/ad/4433221",
                    "created": "2026-02-24T12:00:00Z",
                }
            ]
        })

        jobs = AdzunaSource("id", "key").fetch("python developer", "London, UK")

        url = mock_get.call_args.args[0]
        assert url.endswith("/gb/search/1")
        assert mock_get.call_args.kwargs["params"]["where"] == "London, UK"
        job = jobs[0]
        assert job.skills_required == ["it-jobs", "Python"]
        assert job.is_remote is True
        assert job.job_type == "full_time"


class TestJoobleSource:
    """Test the Jooble adapter."""

    @patch("jobmatch.sources.jooble.requests.post")
    def test_fetch(self, mock_post):
        mock_post.return_value = _response({
            "totalCount": 2,
            "jobs": [
                {
                    "id": -8812,
                    "title": "Remote React Developer",
                    "company": "Jooble Partner",
                    "location": "Remote",
                    "snippet": "<b>React</b> and Redux",
                    "salary": "$50,000 - $70,000",
                    "type": "Full-time",
                    "link": "https://jooble.org/desc/-8812",
                    "updated": "2026-02-26T08:00:00.0000000",
                },
                {"title": "QA Engineer", "company": "Acme", "location": "Lahore"},
            ],
        })

        jobs = JoobleSource("jkey").fetch("react developer", "Remote")

        assert mock_post.call_args.args[0] == "https://jooble.org/api/jkey"
        assert mock_post.call_args.kwargs["json"] == {
            "keywords": "react developer", "page": "1", "location": "Remote",
        }
        assert jobs[0].external_id == "-8812"
        assert jobs[0].salary_min == 50000
        assert jobs[0].salary_max == 70000
        assert jobs[0].is_remote is True
        assert jobs[1].external_id.startswith("jooble-")
        assert jobs[1].external_id == JoobleSource("jkey").fetch("x")[1].external_id

    @patch("jobmatch.sources.jooble.requests.post")
    def test_http_error_propagates(self, mock_post):
        mock_post.return_value.raise_for_status.side_effect = requests.HTTPError("403")

        with pytest.raises(requests.HTTPError):
            JoobleSource("bad").fetch("react")


class TestSearchAPISource:
    """Test the SearchAPI Google Jobs adapter."""

    @patch(GET)
    def test_fetch(self, mock_get):
        mock_get.return_value = _response({
            "jobs": [
                {
                    "title": "Flutter Developer",
                    "company_name": "AppWorks",
                    "location": "Anywhere",
                    "via": "LinkedIn",
                    "description": "Build Flutter apps for iOS and Android.",
                    "job_highlights": [
                        {"title": "Qualifications", "items": ["5 years of Flutter"]},
                        {"title": "Responsibilities", "items": ["Ship features"]},
                    ],
                    "apply_links": [{"link": "https://apply.example.com/1"}],
                    "sharing_link": "https://www.google.com/search?q=flutter#job1",
                    "detected_extensions": {
                        "posted_at": "3 days ago",
                        "schedule": "Contractor",
                        "salary": "25–30 an hour",
                    },
                }
            ]
        })

        job = SearchAPISource("skey").fetch("flutter developer", "Karachi")[0]

        params = mock_get.call_args.kwargs["params"]
        assert params["engine"] == "google_jobs"
        assert params["location"] == "Karachi"
        assert job.external_id == "https://www.google.com/search?q=flutter#job1"
        assert job.source_url == "https://apply.example.com/1"
        assert job.is_remote is True
        assert job.job_type == "contract"
        assert (job.salary_min, job.salary_max) == (52000, 62400)
        assert job.experience_level == "mid"
        assert job.requirements == ["5 years of Flutter"]
        assert job.metadata["responsibilities"] == ["Ship features"]
        assert job.posted_at is not None
        assert "Flutter" in job.skills_required


class TestGetSources:
    """Test the source registry."""

    def test_free_sources_only(self):
        names = [s.platform_name for s in get_sources(AppSettings())]

        assert names == [
            "indeed", "linkedin", "careerjet", "remotive", "remoteok", "arbeitnow",
            "jobicy", "joinrise", "himalayas", "themuse",
        ]

    def test_keyed_sources_enabled_by_settings(self):
        settings = AppSettings(
            rapidapi_key="r", jooble_api_key="j", searchapi_key="s",
            adzuna_app_id="id", adzuna_app_key="k", gemini_api_key="g",
        )

        names = [s.platform_name for s in get_sources(settings)]

        assert names[-5:] == ["jsearch", "jooble", "searchapi", "adzuna", "gemini_search"]
        assert all(s.requires_api_key for s in get_sources(settings)[-5:])

    def test_adzuna_needs_both_keys(self):
        names = [s.platform_name for s in get_sources(AppSettings(adzuna_app_id="id"))]

        assert "adzuna" not in names
