from datetime import date

from subfeed.core.partition_keys import (
    profile_subscriptions_key,
    query_filter_for_key,
    service_subscriptions_key,
    service_unsubscriptions_key,
)

DAY = date(2021, 5, 1)


def test_profile_key() -> None:
    assert profile_subscriptions_key(DAY) == "P-2021-05-01-S"


def test_service_keys() -> None:
    assert service_subscriptions_key(DAY, "01EYNPZXQJF9A2DBTH5GYB951V") == "S-2021-05-01-01EYNPZXQJF9A2DBTH5GYB951V-S"
    assert service_unsubscriptions_key(DAY, "01EYNPZXQJF9A2DBTH5GYB951V") == "S-2021-05-01-01EYNPZXQJF9A2DBTH5GYB951V-U"


def test_query_filter_for_key() -> None:
    assert query_filter_for_key("P-2021-05-01-S") == "PartitionKey eq 'P-2021-05-01-S'"
    assert query_filter_for_key("S-2021-05-01-o'neil-S") == "PartitionKey eq 'S-2021-05-01-o''neil-S'"
