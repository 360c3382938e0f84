from datetime import timedelta

import orjson
import pytest
from pydantic import ValidationError

from clusterscan.core.model import (
    ServerInfo,
    ServerStatsMessage,
    StatusRecord,
    decode_status,
)


def test_decode_flattens_nested_routes_and_gateways(status_payload) -> None:
    document = status_payload(
        "n1",
        cluster="east",
        connections=12,
        subscriptions=40,
        routes=2,
        gateways=(3, 4),
        mem=2048,
        cpu=12.5,
        slow_consumers=1,
        jetstream=True,
        domain="hub",
    )

    message = decode_status(orjson.dumps(document))
    record = StatusRecord.from_message(message, round_trip_time=0.025)

    assert record.server_name == "n1"
    assert record.host == "n1.example.com"
    assert record.version == "2.10.0"
    assert record.cluster_name == "east"
    assert record.domain == "hub"
    assert record.jetstream_enabled is True
    assert record.connections == 12
    assert record.subscriptions == 40
    assert record.route_count == 2
    assert record.gateway_count == 2
    assert record.gateway_inbound_total == 7
    assert record.memory_bytes == 2048
    assert record.cpu_percent == 12.5
    assert record.slow_consumer_count == 1
    assert record.round_trip_time == 0.025


def test_uptime_is_report_time_minus_start(status_payload) -> None:
    document = status_payload("n1", uptime=timedelta(days=1, minutes=5))
    record = StatusRecord.from_message(decode_status(orjson.dumps(document)))

    assert record.uptime == timedelta(days=1, minutes=5).total_seconds()


def test_decode_ignores_unknown_fields_and_defaults_optional_ones(
    status_payload,
) -> None:
    document = status_payload("n1")
    document["server"]["flags"] = 7
    document["statsz"]["sent"] = {"msgs": 1, "bytes": 2}
    del document["server"]["cluster"]
    del document["statsz"]["gateways"]

    record = StatusRecord.from_message(decode_status(orjson.dumps(document)))

    assert record.cluster_name == ""
    assert record.gateway_count == 0


@pytest.mark.parametrize("block, field", [("statsz", "start"), ("server", "time")])
def test_decode_rejects_timestamps_without_offset(
    status_payload, block, field
) -> None:
    document = status_payload("n1")
    document[block][field] = "2024-05-01T11:00:00"

    with pytest.raises(ValidationError):
        decode_status(orjson.dumps(document))


def test_decode_keeps_non_utc_offsets(status_payload) -> None:
    document = status_payload("n1", uptime=timedelta(hours=1))
    document["statsz"]["start"] = "2024-05-01T13:00:00+02:00"

    record = StatusRecord.from_message(decode_status(orjson.dumps(document)))

    assert record.uptime == timedelta(hours=1).total_seconds()


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b"{}",
        b'{"server": {"name": "n1"}, "statsz": {}}',
    ],
)
def test_decode_rejects_malformed_payloads(payload: bytes) -> None:
    with pytest.raises(ValidationError):
        decode_status(payload)


def test_record_is_immutable(make_record) -> None:
    record = make_record("n1")
    with pytest.raises(AttributeError):
        record.connections = 5  # type: ignore[misc]


def test_to_dict_is_json_safe(make_record) -> None:
    record = make_record("n1", cluster="east", connections=3)

    document = orjson.loads(orjson.dumps(record.to_dict()))

    assert document["server_name"] == "n1"
    assert document["cluster_name"] == "east"
    assert document["connections"] == 3
    assert document["report_time"].startswith("2024-05-01T12:00:00")
    assert document["uptime"] == 3600.0


def test_server_info_serializes_version_under_wire_name() -> None:
    info = ServerInfo(name="n1", version="1.2.3", time="2024-05-01T12:00:00Z")
    message = ServerStatsMessage.model_validate(
        {
            "server": info.model_dump(by_alias=True),
            "statsz": {"start": "2024-05-01T11:00:00Z"},
        }
    )

    assert info.model_dump(by_alias=True)["ver"] == "1.2.3"
    assert message.server.version == "1.2.3"
