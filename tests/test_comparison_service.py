import pytest

from app.config import Settings
from app.errors import InvalidCountry, UpstreamFetchError
from app.services.comparison_service import ComparisonService, allowed_message, normalize_country
from app.utils.series_sort import sort_observations_desc


@pytest.mark.parametrize("name", ["sweden", "SWEDEN", "Sweden", "sWeDeN", "  sweden "])
def test_normalize_country_case_insensitive(name):
    """Case variants collapse to the same canonical name."""
    assert normalize_country(name) == "Sweden"


def test_normalize_country_multi_word():
    """Every word of a multi-word name is capitalized."""
    assert normalize_country("new zealand") == "New Zealand"
    assert normalize_country("NEW ZEALAND") == "New Zealand"


@pytest.mark.parametrize("pair", [("sweden", "MEXICO"), ("Thailand", "new zealand")])
def test_validate_accepts_allowed_pairs(settings, make_provider, pair):
    """Allowed countries pass validation in any case."""
    service = ComparisonService(settings, provider=make_provider())
    c1, c2 = service.validate(*pair)
    assert c1 in settings.allowed_countries
    assert c2 in settings.allowed_countries


@pytest.mark.parametrize("pair", [("France", "Mexico"), ("Sweden", "Germany"), ("", "Mexico")])
def test_compare_rejects_countries_outside_allow_list(settings, make_provider, pair):
    """Unknown countries fail before any fetch and the message names all four."""
    provider = make_provider()
    service = ComparisonService(settings, provider=provider)
    with pytest.raises(InvalidCountry) as exc:
        service.compare(pair[0], pair[1], "GDP", "GDP")
    assert "New Zealand" in str(exc.value)
    # nothing fetched for an invalid request
    assert provider.calls == []


def test_allowed_message_names_every_country():
    """The 400 message lists the whole free list."""
    msg = allowed_message(("Sweden", "Mexico", "New Zealand", "Thailand"))
    assert msg == "Only Sweden, Mexico, New Zealand and Thailand are allowed for free users."


def test_compare_sorts_both_series_desc(settings, make_provider, sweden_gdp, mexico_inflation):
    """Both series come back most recent first with provider fields intact."""
    provider = make_provider({
        ("Sweden", "GDP"): sweden_gdp,
        ("Mexico", "Inflation Rate"): mexico_inflation,
    })
    service = ComparisonService(settings, provider=provider)

    result = service.compare("sweden", "mexico", "GDP", "Inflation Rate")

    assert provider.calls == [("Sweden", "GDP"), ("Mexico", "Inflation Rate")]
    assert [r["DateTime"][:4] for r in result["country1"]] == ["2023", "2022", "2021"]
    assert [r["Value"] for r in result["country2"]] == [4.42, 4.4, 4.88]
    # provider fields pass through
    assert result["country1"][0]["Country"] == "Sweden"


def test_sort_is_stable_for_equal_timestamps():
    """Equal timestamps keep their input order."""
    records = [
        {"DateTime": "2020-01-01T00:00:00", "Value": 1},
        {"DateTime": "2021-01-01T00:00:00", "Value": 2},
        {"DateTime": "2020-01-01T00:00:00", "Value": 3},
        {"DateTime": "2020-01-01T00:00:00Z", "Value": 4},
    ]
    out = sort_observations_desc(records)
    assert [r["Value"] for r in out] == [2, 1, 3, 4]


def test_sort_rejects_record_without_datetime():
    """A record without DateTime cannot be ordered."""
    with pytest.raises(ValueError):
        sort_observations_desc([{"Value": 1}])


@pytest.mark.parametrize("failing", ["Sweden", "Mexico"])
def test_any_upstream_failure_fails_whole_comparison(settings, make_provider, sweden_gdp, mexico_inflation, failing):
    """No partial result: one failing side aborts the comparison."""
    provider = make_provider(
        {("Sweden", "GDP"): sweden_gdp, ("Mexico", "GDP"): mexico_inflation},
        fail_for=failing,
    )
    service = ComparisonService(settings, provider=provider)
    with pytest.raises(UpstreamFetchError) as exc:
        service.compare("Sweden", "Mexico", "GDP", "GDP")
    assert exc.value.detail() == {"Message": f"no data for {failing}"}


def test_concurrent_fetch_propagates_failure(make_provider, sweden_gdp):
    """A worker failure surfaces from the thread pool."""
    settings = Settings(api_key="k", concurrent_fetches=True)
    provider = make_provider({("Sweden", "GDP"): sweden_gdp}, fail_for="Thailand")
    service = ComparisonService(settings, provider=provider)
    with pytest.raises(UpstreamFetchError):
        service.compare("Sweden", "Thailand", "GDP", "GDP")
    assert sorted(provider.calls) == [("Sweden", "GDP"), ("Thailand", "GDP")]


def test_malformed_record_is_upstream_error(settings, make_provider):
    """An unparseable DateTime fails the comparison."""
    provider = make_provider({
        ("Sweden", "GDP"): [{"DateTime": "not a date", "Value": 1}],
        ("Mexico", "GDP"): [],
    })
    service = ComparisonService(settings, provider=provider)
    with pytest.raises(UpstreamFetchError) as exc:
        service.compare("Sweden", "Mexico", "GDP", "GDP")
    assert "Sweden" in str(exc.value)


def test_fetch_delay_sleeps_before_each_call(monkeypatch, make_provider):
    """FETCH_DELAY is slept before each of the two calls."""
    slept = []
    monkeypatch.setattr("app.services.comparison_service._time.sleep", slept.append)
    settings = Settings(api_key="k", fetch_delay=1.0, concurrent_fetches=False)
    service = ComparisonService(settings, provider=make_provider())
    service.compare("Sweden", "Mexico", "GDP", "GDP")
    assert slept == [1.0, 1.0]
