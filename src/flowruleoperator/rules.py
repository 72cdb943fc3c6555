"""The flow-rule payload distributed through Redis.

Each flow rule is a rate-limiting descriptor: the guarded resource, the
threshold (``count``), the threshold type (``grade``, either concurrent
``THREAD`` count or ``QPS``) and the caller it applies to (``limit-app``).
The payload is written verbatim and is never parsed by the operator.
"""

__all__ = ("DEFAULT_FLOW_RULES", "DEFAULT_FLOW_RULES_KEY")

DEFAULT_FLOW_RULES_KEY = "flow-rules-key"
"""Redis key the flow rules are written under."""

_RULES: list[tuple[str, float, str]] = [
    ("loopme.grpc.ssp.v0.AdsTxtRecordService/GetAdsTxtRelationships", 100.0, "THREAD"),
    ("loopme.grpc.ssp.v0.PublisherAccountService/GetPublisherById", 5.0, "THREAD"),
    ("loopme.grpc.ssp.v1.PublisherAccountService/GetPublisherById", 5.0, "THREAD"),
    ("loopme.grpc.ssp.v0.BundleLegacyService/GetBundleByKey", 20.0, "THREAD"),
    ("loopme.lsm.ssp.v0.BundleService/GetBundleById", 20.0, "THREAD"),
    ("loopme.lsm.ssp.v0.BundleService/QueryBundle", 20.0, "THREAD"),
    ("loopme.grpc.ssp.v0.AppLegacyService/GetAppById", 10.0, "THREAD"),
    ("loopme.grpc.ssp.v0.AppLegacyService/GetAppIdByKey", 10.0, "THREAD"),
    ("loopme.grpc.ssp.v0.AppLegacyService/GetAppIdByContainerKey", 16.0, "THREAD"),
    ("loopme.grpc.ssp.v0.AppLegacyService/GetAppByContainerKey", 10.0, "THREAD"),
    ("ExchangeThrottleRateService/GetThrottleRatesByKeys", 20.0, "THREAD"),
    ("dsp-fetcher", 25.0, "THREAD"),
    ("exchange-fetcher", 300.0, "THREAD"),
    ("kafka_dmp_ads_requests_info", 500.0, "QPS"),
]

DEFAULT_FLOW_RULES = (
    "["
    + ",".join(
        f'{{"resource":"{resource}","count":{count!r},'
        f'"grade":"{grade}","limit-app":"default"}}'
        for resource, count, grade in _RULES
    )
    + "]"
)
"""The flow rules as a compact JSON array."""
