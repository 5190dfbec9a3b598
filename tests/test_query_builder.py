"""
Unit tests for search query and location building.
"""

import pytest

from jobmatch.config import MAX_QUERIES
from jobmatch.models import UserProfile
from jobmatch.query_builder import (
    DEFAULT_QUERY,
    HomeLocation,
    build_search_queries,
    effective_locations,
    experience_level_keyword,
    parse_user_location,
)


class TestParseUserLocation:
    """Test home location parsing."""

    def test_city_and_country(self):
        assert parse_user_location("Karachi, Pakistan") == HomeLocation("karachi", "pakistan")

    def test_middle_segments_ignored(self):
        assert parse_user_location("Karachi, Sindh, Pakistan") == HomeLocation("karachi", "pakistan")

    def test_single_part_is_city_and_country(self):
        assert parse_user_location("Pakistan") == HomeLocation("pakistan", "pakistan")

    def test_empty(self):
        assert parse_user_location(None) is None
        assert parse_user_location(" , ") is None


class TestExperienceLevelKeyword:
    """Test the seniority word prefixed to queries."""

    @pytest.mark.parametrize(
        "years, expected",
        [(0, "junior"), (2, "junior"), (3, None), (5, None), (6, "senior"), (10, "senior"),
         (12, "lead"), (15, "lead"), (20, "director"), (None, "junior")],
    )
    def test_thresholds(self, years, expected):
        assert experience_level_keyword(years) == expected


@pytest.mark.unit
class TestBuildSearchQueries:
    """Test query generation from a profile."""

    def test_headline_first(self, profile):
        """Test that the headline is the primary query and top skills follow."""
        queries = build_search_queries(profile)

        assert queries[0] == "React Developer"
        assert queries[1] == "React TypeScript Node.js"
        assert queries[2] == "Frontend Developer"

    def test_location_and_type_variants(self, profile):
        """Test the home-location and remote variants."""
        queries = build_search_queries(profile)

        assert "React Developer pakistan" in queries
        assert "React Developer karachi" in queries
        assert "React Developer Remote" in queries
        assert "remote React" in queries

    def test_desired_location_matching_home_is_skipped(self, profile):
        """Test that a desired location equal to the home city adds nothing."""
        queries = build_search_queries(profile)

        assert "React Developer Karachi" not in queries

    def test_bounded_and_unique(self, profile):
        """Test the query cap and uniqueness."""
        queries = build_search_queries(profile)

        assert len(queries) <= MAX_QUERIES
        assert len(queries) == len(set(queries))

    def test_level_variant_replaces_seniority_word(self):
        """Test that an experienced profile gets a re-leveled headline."""
        profile = UserProfile(headline="Senior React Developer", experience_years=7)

        queries = build_search_queries(profile)

        assert queries[:2] == ["Senior React Developer", "senior React Developer"]

    def test_internship_variant(self):
        """Test the internship query for students."""
        profile = UserProfile(skills=["Python"], desired_job_types=["internship"])

        assert "Python internship" in build_search_queries(profile)

    def test_empty_profile_uses_default(self):
        """Test the fallback when the profile says nothing."""
        assert build_search_queries(UserProfile()) == [DEFAULT_QUERY]


class TestEffectiveLocations:
    """Test the ordered list of search locations."""

    def test_desired_covering_home(self, profile):
        """Test that home is not repeated when a desired location covers it."""
        assert effective_locations(profile) == ["Karachi", "Remote"]

    def test_home_appended_when_not_covered(self):
        profile = UserProfile(location="Karachi, Pakistan", desired_locations=["Berlin"])

        assert effective_locations(profile) == ["Berlin", "Karachi, Pakistan"]

    def test_desired_capped_at_three(self):
        profile = UserProfile(desired_locations=["Berlin", "Dubai", "London", "Toronto"])

        assert effective_locations(profile) == ["Berlin", "Dubai", "London"]

    def test_home_and_country_without_desired(self):
        profile = UserProfile(location="Karachi, Pakistan")

        assert effective_locations(profile) == ["Karachi, Pakistan", "pakistan"]

    def test_country_only_home(self):
        profile = UserProfile(location="Pakistan")

        assert effective_locations(profile) == ["Pakistan"]

    def test_nowhere(self):
        assert effective_locations(UserProfile()) == [None]
