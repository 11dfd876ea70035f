"""Tests for picking the version current at a date."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from cargo_downgrade.errors import NoQualifyingVersion
from cargo_downgrade.models import DowngradeTarget, VersionRecord
from cargo_downgrade.picker import find_appropriate_version


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


VERSIONS = [
    VersionRecord("1.0.0", _utc(2021, 1, 1), yanked=False),
    VersionRecord("1.0.1", _utc(2021, 2, 1), yanked=False),
    VersionRecord("1.0.2", _utc(2021, 3, 1), yanked=True),
]


def test_picks_latest_unyanked_before_date():
    target = find_appropriate_version("demo", VERSIONS, _utc(2021, 2, 15))

    assert target == DowngradeTarget(name="demo", version="1.0.1")


def test_yanked_versions_are_skipped():
    target = find_appropriate_version("demo", VERSIONS, _utc(2022, 1, 1))

    assert target.version == "1.0.1"


def test_version_published_at_cutoff_does_not_qualify():
    target = find_appropriate_version("demo", VERSIONS, _utc(2021, 2, 1))

    assert target.version == "1.0.0"


def test_input_order_does_not_matter():
    versions = VERSIONS + [VersionRecord("0.9.0", _utc(2020, 6, 1))]
    cutoff = _utc(2021, 2, 15)

    results = {
        find_appropriate_version("demo", list(order), cutoff)
        for order in itertools.permutations(versions)
    }

    assert results == {DowngradeTarget("demo", "1.0.1")}


def test_naive_cutoff_is_treated_as_utc():
    target = find_appropriate_version("demo", VERSIONS, datetime(2021, 2, 15))

    assert target.version == "1.0.1"


def test_no_version_before_date_reports_oldest():
    versions = [VersionRecord("1.0.0", _utc(2021, 1, 1))]

    with pytest.raises(NoQualifyingVersion) as excinfo:
        find_appropriate_version("demo", versions, _utc(2020, 1, 1))

    assert excinfo.value.crate_name == "demo"
    assert excinfo.value.oldest_unyanked == "1.0.0 (2021-01-01)"
    assert "demo" in str(excinfo.value)
    assert "1.0.0" in str(excinfo.value)


def test_oldest_hint_ignores_yanked_versions():
    versions = [
        VersionRecord("0.1.0", _utc(2019, 1, 1), yanked=True),
        VersionRecord("0.2.0", _utc(2019, 6, 1)),
    ]

    with pytest.raises(NoQualifyingVersion) as excinfo:
        find_appropriate_version("demo", versions, _utc(2019, 3, 1))

    assert excinfo.value.oldest_unyanked == "0.2.0 (2019-06-01)"


def test_only_yanked_versions():
    versions = [VersionRecord("0.1.0", _utc(2019, 1, 1), yanked=True)]

    with pytest.raises(NoQualifyingVersion, match="no known versions at all"):
        find_appropriate_version("demo", versions, _utc(2020, 1, 1))


def test_empty_version_list():
    with pytest.raises(NoQualifyingVersion):
        find_appropriate_version("demo", [], _utc(2020, 1, 1))


def test_target_renders_as_pin():
    assert str(DowngradeTarget("serde", "1.0.123")) == 'serde = "=1.0.123"'


def test_equal_timestamps_pick_same_version_in_any_order():
    published = _utc(2021, 1, 1)
    versions = [VersionRecord("1.0.0", published), VersionRecord("1.0.1", published)]

    forward = find_appropriate_version("demo", versions, _utc(2021, 2, 1))
    backward = find_appropriate_version("demo", list(reversed(versions)), _utc(2021, 2, 1))

    assert forward == backward == DowngradeTarget("demo", "1.0.1")


def test_oldest_hint_uses_utc_date():
    plus_five = timezone(timedelta(hours=5))
    versions = [VersionRecord("1.0.0", datetime(2021, 1, 1, 1, tzinfo=plus_five))]

    with pytest.raises(NoQualifyingVersion) as excinfo:
        find_appropriate_version("demo", versions, _utc(2020, 1, 1))

    assert excinfo.value.oldest_unyanked == "1.0.0 (2020-12-31)"
