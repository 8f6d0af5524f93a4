"""Tests for the SecorConfig accessor facade."""

from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from secor.config.errors import (
    ConfigTypeError,
    ConfigValidationError,
    MissingKeyError,
    UnknownKeyError,
)
from secor.config.loader import ConfigLoader
from secor.config.schema import get_all_required_keys, get_required_keys


@pytest.fixture
def base_config(base_properties_file):
    return ConfigLoader(config_path=base_properties_file, override_path="", environ={}).load()


class TestGenericGet:
    """Tests for schema-typed get()."""

    def test_types_follow_schema(self, base_config):
        assert base_config.get("kafka.seed.broker.port") == 9092
        assert base_config.get("secor.max.file.size.bytes") == 200000000
        assert base_config.get("kafka.seed.broker.host") == "localhost"
        assert base_config.get("zookeeper.quorum") == ["localhost:2181"]

    def test_unknown_key(self, base_config):
        with pytest.raises(UnknownKeyError) as exc_info:
            base_config.get("secor.no.such.key")
        assert exc_info.value.key == "secor.no.such.key"

    def test_missing_required_key(self, make_config):
        with pytest.raises(MissingKeyError, match="secor.s3.bucket"):
            make_config().get("secor.s3.bucket")

    def test_absent_optional_key_returns_default(self, make_config):
        config = make_config()
        assert config.get("kafka.consumer.auto.offset.reset") == "smallest"
        assert config.get("secor.upload.on.shutdown") is False
        assert config.get("message.timestamp.required") is True
        assert config.get("zookeeper.quorum") == []

    def test_boolean_unparseable_uses_schema_default(self, make_config):
        config = make_config({"message.timestamp.required": "yes", "secor.upload.on.shutdown": "yes"})
        assert config.get_message_timestamp_required() is True
        assert config.get_upload_on_shutdown() is False

    def test_malformed_int(self, make_config):
        with pytest.raises(ConfigTypeError):
            make_config({"secor.consumer.threads": "many"}).get_consumer_threads()

    def test_empty_string_for_string_key(self, base_config):
        """Test that a present-but-empty required string is returned as ''."""
        assert base_config.get_aws_access_key() == ""
        assert base_config.get_rebalance_max_retries() == ""

    def test_get_string_passthrough(self, base_config):
        assert base_config.get_string("secor.kafka.group") == "secor_backup"
        assert base_config.get_string("not.in.schema") is None
        assert base_config.get_string("not.in.schema", "x") == "x"

    def test_get_boolean_passthrough(self, make_config):
        config = make_config({"custom.flag": "TRUE"})
        assert config.get_boolean("custom.flag", False) is True
        assert config.get_boolean("other.flag", True) is True


class TestNamedAccessors:
    """Tests for the named accessors over a realistic base file."""

    def test_kafka(self, base_config):
        assert base_config.get_kafka_seed_broker_host() == "localhost"
        assert base_config.get_kafka_seed_broker_port() == 9092
        assert base_config.get_consumer_timeout_ms() == 10000
        assert base_config.get_socket_receive_buffer_bytes() == ""
        assert base_config.get_dual_commit_enabled() == "true"

    def test_core(self, base_config):
        assert base_config.get_generation() == 1
        assert base_config.get_consumer_threads() == 7
        assert base_config.get_max_file_size_bytes() == 200000000
        assert base_config.get_max_file_age_seconds() == 3600
        assert base_config.get_offsets_per_partition() == 10000000
        assert base_config.get_local_log_delete_age_hours() == -1
        assert base_config.get_kafka_group() == "secor_backup"

    def test_optional_defaults(self, base_config):
        assert base_config.get_finalizer_lookback_periods() == 10
        assert base_config.get_gs_connect_timeout_in_ms() == 180000
        assert base_config.get_gs_read_timeout_in_ms() == 180000
        assert base_config.get_file_writer_delimiter() == "\n"
        assert base_config.get_file_reader_delimiter() == "\n"
        assert base_config.get_max_file_timestamp_range_millis() == -1
        assert base_config.get_parquet_block_size() == 134217728
        assert base_config.get_parquet_enable_dictionary() is True
        assert base_config.get_metrics_collector_class() == "com.pinterest.secor.monitoring.OstrichMetricCollector"
        assert base_config.get_partitioner_date_prefix() == "dt="

    def test_zookeeper_quorum_joined(self, make_config):
        config = make_config({"zookeeper.quorum": "zk1:2181, zk2:2181"})
        assert config.get_zookeeper_quorum() == "zk1:2181,zk2:2181"

    def test_zookeeper_quorum_absent(self, make_config):
        assert make_config().get_zookeeper_quorum() == ""


class TestDerivedAccessors:
    """Tests for accessors that compose several keys."""

    def test_s3_prefix(self, make_config):
        config = make_config({"secor.s3.filesystem": "s3", "secor.s3.bucket": "b", "secor.s3.path": "p"})
        assert config.get_s3_prefix() == "s3://b/p"

    def test_s3_prefix_missing_part(self, make_config):
        with pytest.raises(MissingKeyError, match="secor.s3.path"):
            make_config({"secor.s3.filesystem": "s3", "secor.s3.bucket": "b"}).get_s3_prefix()

    def test_s3_alternative_prefix(self, make_config):
        config = make_config(
            {"secor.s3.filesystem": "s3a", "secor.s3.bucket": "b", "secor.s3.alternative.prefix": "alt"}
        )
        assert config.get_s3_alternative_prefix() == "s3a://b/alt"

    def test_gs_prefix(self, make_config):
        assert make_config({"secor.gs.bucket": "b", "secor.gs.path": "p"}).get_gs_prefix() == "gs://b/p"

    @pytest.mark.parametrize("raw,expected", [("true", True), ("TRUE", True), ("false", False), ("", False)])
    def test_separate_containers_for_topics(self, make_config, raw, expected):
        config = make_config({"secor.swift.containers.for.each.topic": raw})
        assert config.get_separate_containers_for_topics() is expected

    def test_hive_table_name_per_topic(self, make_config):
        config = make_config({"secor.hive.table.name.clicks": "X"})
        assert config.get_hive_table_name("clicks") == "X"
        assert config.get_hive_table_name("views") is None

    def test_thrift_message_class_per_topic(self, make_config):
        config = make_config({"secor.thrift.message.class.clicks": "com.example.Click"})
        assert config.get_thrift_message_class("clicks") == "com.example.Click"
        assert config.get_thrift_message_class("views") is None


class TestTimeZone:
    """Tests for get_time_zone."""

    def test_absent_is_utc(self, make_config):
        assert make_config().get_time_zone() == ZoneInfo("UTC")

    def test_empty_is_utc(self, make_config):
        assert make_config({"secor.parser.timezone": ""}).get_time_zone() == ZoneInfo("UTC")

    def test_named_zone(self, make_config):
        zone = make_config({"secor.parser.timezone": "America/Los_Angeles"}).get_time_zone()
        assert zone.key == "America/Los_Angeles"

    @pytest.mark.parametrize("zone", ["America", "Europe"])
    def test_zone_directory_is_not_a_zone(self, make_config, zone):
        """Test that a zone database directory name is rejected as a type error."""
        with pytest.raises(ConfigTypeError) as exc_info:
            make_config({"secor.parser.timezone": zone}).get_time_zone()
        assert exc_info.value.value == zone

    def test_invalid_zone(self, make_config):
        with pytest.raises(ConfigTypeError) as exc_info:
            make_config({"secor.parser.timezone": "Not/AZone"}).get_time_zone()
        assert exc_info.value.key == "secor.parser.timezone"


class TestValidateRequiredKeys:
    """Tests for eager validation of required keys."""

    def test_s3_deployment_passes(self, base_config):
        """Test that an S3-only base file does not need Swift, GS, Azure or Qubole keys."""
        assert base_config.active_backends() == {"s3"}
        assert base_config.validate_required_keys() == len(get_required_keys({"s3"}))

    def test_all_present(self, make_config):
        values = {key: "1" for key in get_all_required_keys()}
        values["cloud.service"] = "S3"
        values["secor.enable.qubole"] = "true"
        config = make_config(values)
        assert config.active_backends() == {"s3", "qubole"}
        assert config.validate_required_keys() == len(get_required_keys({"s3", "qubole"}))

    def test_reports_keys_of_configured_backend(self, base_properties_file):
        """Test that only the backend named by cloud.service is checked."""
        config = ConfigLoader(
            config_path=base_properties_file, override_path="", environ={}, properties={"cloud.service": "GS"}
        ).load()
        with pytest.raises(ConfigValidationError) as exc_info:
            config.validate_required_keys()
        assert sorted(exc_info.value.missing_keys) == ["secor.gs.bucket", "secor.gs.credentials.path", "secor.gs.path"]
        assert exc_info.value.invalid_values == []

    def test_qubole_token_required_when_enabled(self, base_properties_file):
        config = ConfigLoader(
            config_path=base_properties_file, override_path="", environ={}, properties={"secor.enable.qubole": "true"}
        ).load()
        with pytest.raises(ConfigValidationError) as exc_info:
            config.validate_required_keys()
        assert exc_info.value.missing_keys == ["qubole.api.token"]

    def test_missing_cloud_service(self, make_config):
        """Test that without cloud.service no backend keys are checked but the key itself is reported."""
        values = {key: "1" for key in get_required_keys(set())}
        del values["cloud.service"]
        with pytest.raises(ConfigValidationError) as exc_info:
            make_config(values).validate_required_keys()
        assert exc_info.value.missing_keys == ["cloud.service"]

    def test_reports_invalid_values(self, make_config):
        values = {key: "1" for key in get_all_required_keys()}
        values["secor.consumer.threads"] = "seven"
        with pytest.raises(ConfigValidationError) as exc_info:
            make_config(values).validate_required_keys()
        assert exc_info.value.missing_keys == []
        assert len(exc_info.value.invalid_values) == 1
        assert exc_info.value.invalid_values[0].startswith("secor.consumer.threads")


class TestIdempotence:
    """Tests that reads do not change the resolved configuration."""

    def test_repeated_reads(self, base_config):
        assert base_config.get_s3_prefix() == base_config.get_s3_prefix()
        assert base_config.get_consumer_threads() == base_config.get_consumer_threads()

    def test_returned_list_is_not_shared(self, make_config):
        config = make_config({"zookeeper.quorum": "a,b"})
        config.get("zookeeper.quorum").append("c")
        assert config.get("zookeeper.quorum") == ["a", "b"]
