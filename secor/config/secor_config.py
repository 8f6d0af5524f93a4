"""
SecorConfig - typed accessor facade over the resolved configuration.

Every named accessor delegates to ``get()``, which consults ``CONFIG_SCHEMA``
for the key's type, whether it is required, and its default. Required keys
are checked lazily: a missing key only fails when its accessor runs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigTypeError, ConfigValidationError, MissingKeyError, UnknownKeyError
from .properties import LIST_DELIMITER
from .schema import (
    CONFIG_SCHEMA,
    HIVE_TABLE_NAME_PREFIX,
    QUBOLE_BACKEND,
    THRIFT_MESSAGE_CLASS_PREFIX,
    get_required_keys,
)
from .store import ResolvedConfiguration
from .types import ConfigType

logger = logging.getLogger(__name__)

DEFAULT_TIME_ZONE = "UTC"


class SecorConfig:
    """
    One-stop shop for Secor configuration options.

    Usage:
        # Explicit ownership: resolve once, pass to components
        config = ConfigLoader().load()

        # Or the per-thread cached instance
        config = SecorConfig.load()

        config.get_kafka_seed_broker_port()   # int
        config.get_s3_prefix()                # "s3n://bucket/path"
        config.get("secor.consumer.threads")  # generic, schema-typed
    """

    def __init__(self, store: ResolvedConfiguration):
        self._store = store

    @classmethod
    def from_mapping(cls, values: Mapping[str, str | Sequence[str]]) -> SecorConfig:
        """Build a config directly from key/value pairs, bypassing the layer stack."""
        return cls(ResolvedConfiguration(values))

    @classmethod
    def load(cls) -> SecorConfig:
        """Get the configuration resolved for the current thread, loading it on first use."""
        from .context import current_config

        return current_config()

    @property
    def store(self) -> ResolvedConfiguration:
        return self._store

    def __repr__(self) -> str:
        return f"SecorConfig({len(self._store)} keys)"

    # =========================================================================
    # GENERIC ACCESS
    # =========================================================================

    def get(self, key: str) -> Any:
        """
        Get a configuration value typed according to the schema.

        Args:
            key: Configuration key (e.g., "secor.consumer.threads")

        Returns:
            The typed value, or the schema default for an absent optional key

        Raises:
            UnknownKeyError: If key is not in schema
            MissingKeyError: If a required key is absent
            ConfigTypeError: If the value cannot be converted
        """
        schema = CONFIG_SCHEMA.get(key)
        if schema is None:
            raise UnknownKeyError(key)

        if key not in self._store:
            if schema.required:
                raise MissingKeyError(key)
            if schema.config_type == ConfigType.STRING_ARRAY:
                return list(schema.default or ())
            return schema.default

        if schema.config_type == ConfigType.INT:
            return self._store.get_int(key)
        if schema.config_type == ConfigType.LONG:
            return self._store.get_long(key)
        if schema.config_type == ConfigType.BOOL:
            return self._store.get_boolean(key, bool(schema.default))
        if schema.config_type == ConfigType.STRING_ARRAY:
            return self._store.get_string_array(key)
        return self._store.get_string(key)

    def get_string(self, name: str, default: str | None = None) -> str | None:
        """Get any key as a raw string, returning ``default`` when absent."""
        return self._store.get_string(name, default)

    def get_boolean(self, name: str, default: bool) -> bool:
        return self._store.get_boolean(name, default)

    def active_backends(self) -> set[str]:
        """Backends this deployment uses: the lowercased ``cloud.service``, plus Qubole when enabled."""
        backends: set[str] = set()
        service = self._store.get_string("cloud.service", "").strip().lower()
        if service:
            backends.add(service)
        if self.get_qubole_enabled():
            backends.add(QUBOLE_BACKEND)
        return backends

    def validate_required_keys(self) -> int:
        """
        Check the required keys of this deployment now instead of at first use.

        Keys of storage backends other than ``cloud.service``, and the Qubole
        token unless ``secor.enable.qubole`` is set, are not checked.

        Returns:
            Number of required keys checked

        Raises:
            ConfigValidationError: If any required key is missing or has an invalid value
        """
        missing_keys: list[str] = []
        invalid_values: list[str] = []

        backends = self.active_backends()
        required_keys = get_required_keys(backends)
        for key in required_keys:
            if key not in self._store:
                missing_keys.append(key)
                continue
            try:
                self.get(key)
            except ConfigTypeError as e:
                invalid_values.append(f"{key}: {e}")

        if missing_keys or invalid_values:
            raise ConfigValidationError(missing_keys, invalid_values)

        logger.info(f"Validated {len(required_keys)} required config keys for backends {sorted(backends)}")
        return len(required_keys)

    # =========================================================================
    # KAFKA
    # =========================================================================

    def get_kafka_seed_broker_host(self) -> str:
        return self.get("kafka.seed.broker.host")

    def get_kafka_seed_broker_port(self) -> int:
        return self.get("kafka.seed.broker.port")

    def get_kafka_zookeeper_path(self) -> str:
        return self.get("kafka.zookeeper.path")

    def get_consumer_timeout_ms(self) -> int:
        return self.get("kafka.consumer.timeout.ms")

    def get_partition_assignment_strategy(self) -> str:
        return self.get("kafka.partition.assignment.strategy")

    def get_rebalance_max_retries(self) -> str:
        return self.get("kafka.rebalance.max.retries")

    def get_rebalance_backoff_ms(self) -> str:
        return self.get("kafka.rebalance.backoff.ms")

    def get_fetch_message_max_bytes(self) -> str:
        return self.get("kafka.fetch.message.max.bytes")

    def get_socket_receive_buffer_bytes(self) -> str:
        return self.get("kafka.socket.receive.buffer.bytes")

    def get_fetch_min_bytes(self) -> str:
        return self.get("kafka.fetch.min.bytes")

    def get_fetch_wait_max_ms(self) -> str:
        return self.get("kafka.fetch.wait.max.ms")

    def get_offsets_storage(self) -> str:
        return self.get("kafka.offsets.storage")

    def get_dual_commit_enabled(self) -> str:
        return self.get("kafka.dual.commit.enabled")

    def get_consumer_auto_offset_reset(self) -> str:
        return self.get("kafka.consumer.auto.offset.reset")

    def get_use_kafka_timestamp(self) -> bool:
        """Whether partitions come from the Kafka message timestamp rather than the payload."""
        return self.get("kafka.useTimestamp")

    # =========================================================================
    # ZOOKEEPER
    # =========================================================================

    def get_zookeeper_quorum(self) -> str:
        """Get the ZooKeeper ensemble as a connect string (members joined with commas)."""
        return LIST_DELIMITER.join(self.get("zookeeper.quorum"))

    def get_zookeeper_session_timeout_ms(self) -> int:
        return self.get("zookeeper.session.timeout.ms")

    def get_zookeeper_sync_time_ms(self) -> int:
        return self.get("zookeeper.sync.time.ms")

    def get_zookeeper_path(self) -> str:
        return self.get("secor.zookeeper.path")

    # =========================================================================
    # SECOR CORE
    # =========================================================================

    def get_generation(self) -> int:
        return self.get("secor.generation")

    def get_consumer_threads(self) -> int:
        return self.get("secor.consumer.threads")

    def get_max_file_size_bytes(self) -> int:
        return self.get("secor.max.file.size.bytes")

    def get_max_file_age_seconds(self) -> int:
        return self.get("secor.max.file.age.seconds")

    def get_file_age_youngest(self) -> bool:
        return self.get("secor.file.age.youngest")

    def get_max_file_timestamp_range_millis(self) -> int:
        return self.get("secor.max.file.timestamp.range.millis")

    def get_offsets_per_partition(self) -> int:
        return self.get("secor.offsets.per.partition")

    def get_messages_per_second(self) -> int:
        return self.get("secor.messages.per.second")

    def get_local_path(self) -> str:
        return self.get("secor.local.path")

    def get_kafka_topic_filter(self) -> str:
        return self.get("secor.kafka.topic_filter")

    def get_kafka_topic_blacklist(self) -> str:
        return self.get("secor.kafka.topic_blacklist")

    def get_kafka_group(self) -> str:
        return self.get("secor.kafka.group")

    def get_message_parser_class(self) -> str:
        return self.get("secor.message.parser.class")

    def get_message_transformer_class(self) -> str:
        return self.get("secor.message.transformer.class")

    def get_upload_manager_class(self) -> str:
        return self.get("secor.upload.manager.class")

    def get_upload_on_shutdown(self) -> bool:
        return self.get("secor.upload.on.shutdown")

    def get_upload_minute_mark(self) -> int:
        return self.get("secor.upload.minute_mark")

    def get_deterministic_upload(self) -> bool:
        return self.get("secor.deterministic.upload")

    def get_topic_partition_forget_seconds(self) -> int:
        return self.get("secor.topic_partition.forget.seconds")

    def get_local_log_delete_age_hours(self) -> int:
        return self.get("secor.local.log.delete.age.hours")

    def get_file_extension(self) -> str:
        return self.get("secor.file.extension")

    def get_compression_codec(self) -> str:
        return self.get("secor.compression.codec")

    def get_max_message_size_bytes(self) -> int:
        return self.get("secor.max.message.size.bytes")

    def get_file_reader_writer_factory(self) -> str:
        return self.get("secor.file.reader.writer.factory")

    def get_file_reader_delimiter(self) -> str:
        return self.get("secor.file.reader.Delimiter")

    def get_file_writer_delimiter(self) -> str:
        return self.get("secor.file.writer.Delimiter")

    def get_perf_test_topic_prefix(self) -> str:
        return self.get("secor.kafka.perf_topic_prefix")

    def get_offsets_prefix(self) -> str:
        return self.get("secor.offsets.prefix")

    def get_thrift_protocol_class(self) -> str:
        return self.get("secor.thrift.protocol.class")

    def get_thrift_message_class(self, topic: str) -> str | None:
        """
        Get the Thrift message class configured for one topic.

        Returns:
            The value of ``secor.thrift.message.class.<topic>``, or None when the
            topic has no entry
        """
        return self._store.get_string(THRIFT_MESSAGE_CLASS_PREFIX + topic, None)

    def get_metrics_collector_class(self) -> str:
        return self.get("secor.monitoring.metrics.collector.class")

    # =========================================================================
    # CLOUD STORAGE - S3
    # =========================================================================

    def get_cloud_service(self) -> str:
        return self.get("cloud.service")

    def get_s3_file_system(self) -> str:
        return self.get("secor.s3.filesystem")

    def get_s3_bucket(self) -> str:
        return self.get("secor.s3.bucket")

    def get_s3_path(self) -> str:
        return self.get("secor.s3.path")

    def get_s3_prefix(self) -> str:
        """Compose the upload root, e.g. ``s3n://bucket/path``."""
        return f"{self.get_s3_file_system()}://{self.get_s3_bucket()}/{self.get_s3_path()}"

    def get_s3_alternative_path(self) -> str:
        return self.get("secor.s3.alternative.prefix")

    def get_s3_alter_path_date(self) -> str:
        return self.get("secor.s3.alter.path.date")

    def get_s3_alternative_prefix(self) -> str:
        """Compose the upload root used from ``secor.s3.alter.path.date`` onwards."""
        return f"{self.get_s3_file_system()}://{self.get_s3_bucket()}/{self.get_s3_alternative_path()}"

    def get_aws_access_key(self) -> str:
        return self.get("aws.access.key")

    def get_aws_secret_key(self) -> str:
        return self.get("aws.secret.key")

    def get_aws_endpoint(self) -> str:
        return self.get("aws.endpoint")

    def get_aws_region(self) -> str:
        return self.get("aws.region")

    def get_aws_sse_type(self) -> str:
        return self.get("aws.sse.type")

    def get_aws_sse_kms_key(self) -> str:
        return self.get("aws.sse.kms.key")

    def get_aws_sse_customer_key(self) -> str:
        return self.get("aws.sse.customer.key")

    # =========================================================================
    # CLOUD STORAGE - SWIFT
    # =========================================================================

    def get_separate_containers_for_topics(self) -> bool:
        """Whether each topic is uploaded to its own Swift container."""
        return self.get("secor.swift.containers.for.each.topic").lower() == "true"

    def get_swift_container(self) -> str:
        return self.get("secor.swift.container")

    def get_swift_path(self) -> str:
        return self.get("secor.swift.path")

    def get_swift_tenant(self) -> str:
        return self.get("swift.tenant")

    def get_swift_username(self) -> str:
        return self.get("swift.username")

    def get_swift_password(self) -> str:
        return self.get("swift.password")

    def get_swift_auth_url(self) -> str:
        return self.get("swift.auth.url")

    def get_swift_public(self) -> str:
        return self.get("swift.public")

    def get_swift_port(self) -> str:
        return self.get("swift.port")

    def get_swift_get_auth(self) -> str:
        return self.get("swift.use.get.auth")

    def get_swift_api_key(self) -> str:
        return self.get("swift.api.key")

    # =========================================================================
    # CLOUD STORAGE - GOOGLE CLOUD STORAGE
    # =========================================================================

    def get_gs_credentials_path(self) -> str:
        return self.get("secor.gs.credentials.path")

    def get_gs_bucket(self) -> str:
        return self.get("secor.gs.bucket")

    def get_gs_path(self) -> str:
        return self.get("secor.gs.path")

    def get_gs_prefix(self) -> str:
        return f"gs://{self.get_gs_bucket()}/{self.get_gs_path()}"

    def get_gs_connect_timeout_in_ms(self) -> int:
        return self.get("secor.gs.connect.timeout.ms")

    def get_gs_read_timeout_in_ms(self) -> int:
        return self.get("secor.gs.read.timeout.ms")

    def get_gs_upload_direct(self) -> bool:
        return self.get("secor.gs.upload.direct")

    # =========================================================================
    # CLOUD STORAGE - AZURE BLOB STORAGE
    # =========================================================================

    def get_azure_endpoints_protocol(self) -> str:
        return self.get("secor.azure.endpoints.protocol")

    def get_azure_account_name(self) -> str:
        return self.get("secor.azure.account.name")

    def get_azure_account_key(self) -> str:
        return self.get("secor.azure.account.key")

    def get_azure_container_name(self) -> str:
        return self.get("secor.azure.container.name")

    def get_azure_path(self) -> str:
        return self.get("secor.azure.path")

    # =========================================================================
    # WAREHOUSE - QUBOLE / HIVE
    # =========================================================================

    def get_qubole_api_token(self) -> str:
        return self.get("qubole.api.token")

    def get_qubole_enabled(self) -> bool:
        return self.get("secor.enable.qubole")

    def get_qubole_timeout_ms(self) -> int:
        return self.get("secor.qubole.timeout.ms")

    def get_hive_prefix(self) -> str:
        return self.get("secor.hive.prefix")

    def get_hive_table_name(self, topic: str) -> str | None:
        """
        Get the Hive table name overriding the default for one topic.

        Args:
            topic: Kafka topic name

        Returns:
            The value of ``secor.hive.table.name.<topic>``, or None when the
            topic has no override
        """
        return self._store.get_string(HIVE_TABLE_NAME_PREFIX + topic, None)

    # =========================================================================
    # MONITORING
    # =========================================================================

    def get_ostrich_port(self) -> int:
        return self.get("ostrich.port")

    def get_tsdb_hostport(self) -> str:
        return self.get("tsdb.hostport")

    def get_statsd_hostport(self) -> str:
        return self.get("statsd.hostport")

    def get_statsd_prefix_with_consumer_group(self) -> bool:
        return self.get("statsd.prefixWithConsumerGroup")

    def get_monitoring_blacklist_topics(self) -> str:
        return self.get("monitoring.blacklist.topics")

    def get_monitoring_prefix(self) -> str:
        return self.get("monitoring.prefix")

    # =========================================================================
    # MESSAGE TIMESTAMP PARSING
    # =========================================================================

    def get_message_timestamp_name(self) -> str:
        return self.get("message.timestamp.name")

    def get_message_timestamp_name_separator(self) -> str:
        return self.get("message.timestamp.name.separator")

    def get_message_timestamp_id(self) -> int:
        return self.get("message.timestamp.id")

    def get_message_timestamp_type(self) -> str:
        return self.get("message.timestamp.type")

    def get_message_timestamp_input_pattern(self) -> str:
        return self.get("message.timestamp.input.pattern")

    def get_message_timestamp_required(self) -> bool:
        return self.get("message.timestamp.required")

    def get_time_zone(self) -> ZoneInfo:
        """Get the partitioning timezone; UTC when ``secor.parser.timezone`` is absent or empty."""
        timezone = self.get("secor.parser.timezone")
        if not timezone:
            return ZoneInfo(DEFAULT_TIME_ZONE)
        try:
            return ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ConfigTypeError("secor.parser.timezone", timezone, "time zone") from e

    # =========================================================================
    # PARTITIONER / FINALIZER
    # =========================================================================

    def get_finalizer_delay_seconds(self) -> int:
        return self.get("partitioner.finalizer.delay.seconds")

    def get_finalizer_lookback_periods(self) -> int:
        return self.get("secor.finalizer.lookback.periods")

    def get_partitioner_granularity_hour(self) -> bool:
        return self.get("partitioner.granularity.hour")

    def get_partitioner_granularity_minute(self) -> bool:
        return self.get("partitioner.granularity.minute")

    def get_partitioner_date_prefix(self) -> str:
        return self.get("partitioner.granularity.date.prefix")

    def get_partitioner_hour_prefix(self) -> str:
        return self.get("partitioner.granularity.hour.prefix")

    def get_partitioner_minute_prefix(self) -> str:
        return self.get("partitioner.granularity.minute.prefix")

    def get_partitioner_date_format(self) -> str:
        return self.get("partitioner.granularity.date.format")

    def get_partitioner_hour_format(self) -> str:
        return self.get("partitioner.granularity.hour.format")

    def get_partitioner_minute_format(self) -> str:
        return self.get("partitioner.granularity.minute.format")

    # =========================================================================
    # PARQUET
    # =========================================================================

    def get_parquet_block_size(self) -> int:
        return self.get("parquet.block.size")

    def get_parquet_page_size(self) -> int:
        return self.get("parquet.page.size")

    def get_parquet_enable_dictionary(self) -> bool:
        return self.get("parquet.enable.dictionary")

    def get_parquet_validation(self) -> bool:
        return self.get("parquet.validation")
