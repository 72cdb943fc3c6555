"""Tests for the flowruleoperator.rules module."""

import json

from flowruleoperator.rules import DEFAULT_FLOW_RULES


def test_default_flow_rules_is_a_json_list_of_rules() -> None:
    rules = json.loads(DEFAULT_FLOW_RULES)

    assert len(rules) == 14
    for rule in rules:
        assert set(rule) == {"resource", "count", "grade", "limit-app"}
        assert rule["grade"] in ("THREAD", "QPS")
        assert rule["limit-app"] == "default"


def test_default_flow_rules_is_compact() -> None:
    assert DEFAULT_FLOW_RULES.startswith(
        '[{"resource":"loopme.grpc.ssp.v0.AdsTxtRecordService/'
        'GetAdsTxtRelationships","count":100.0,"grade":"THREAD",'
        '"limit-app":"default"},'
    )
    assert DEFAULT_FLOW_RULES.endswith(
        '{"resource":"kafka_dmp_ads_requests_info","count":500.0,'
        '"grade":"QPS","limit-app":"default"}]'
    )
    assert " " not in DEFAULT_FLOW_RULES
