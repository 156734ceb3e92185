from scanlogs.domain.classify import (
    Malformed, ProviderFailure, QueryTooLarge, RateLimited, Success, classify_response,
)

from conftest import full_page, make_record


def test_full_page_is_query_too_large():
    page = full_page()
    outcome = classify_response({"status": "1", "message": "OK", "result": page})
    assert isinstance(outcome, QueryTooLarge)
    assert outcome.records is page


def test_partial_page_is_success():
    recs = [make_record(0), make_record(1)]
    assert classify_response({"result": recs}) == Success(recs)


def test_empty_result_is_success():
    assert classify_response({"status": "0", "message": "No records found", "result": []}) == Success([])


def test_rate_limit_message():
    outcome = classify_response({"status": "0", "message": "NOTOK", "result": "Max rate limit reached"})
    assert isinstance(outcome, RateLimited)


def test_rate_limit_marker_is_substring_match():
    msg = "Max rate limit reached, please use API Key for higher rate limit"
    assert isinstance(classify_response({"result": msg}), RateLimited)


def test_query_timeout_is_query_too_large_without_records():
    outcome = classify_response({"result": "Query Timeout occured. Please select a smaller result dataset"})
    assert outcome == QueryTooLarge()
    assert outcome.records is None


def test_other_string_is_provider_failure_verbatim():
    assert classify_response({"result": "Invalid API Key"}) == ProviderFailure("Invalid API Key")


def test_non_list_results_are_malformed():
    assert isinstance(classify_response({"result": None}), Malformed)
    assert isinstance(classify_response({"result": {"a": 1}}), Malformed)
    assert isinstance(classify_response({"status": "1"}), Malformed)
    assert isinstance(classify_response("<html>"), Malformed)
