"""Configuration schema registry.

Defines every configuration key the pipeline reads, with its type and whether
it is required. This is the single source of truth for configuration
structure; the named accessors on ``SecorConfig`` are thin wrappers over it.

Per-topic keys (``secor.hive.table.name.<topic>``,
``secor.thrift.message.class.<topic>``) are templated at read time and are
listed in ``TOPIC_KEY_PREFIXES`` instead.
"""

from __future__ import annotations

from collections.abc import Iterable

from .types import ConfigKey, ConfigType

STRING = ConfigType.STRING
INT = ConfigType.INT
LONG = ConfigType.LONG
BOOL = ConfigType.BOOL
STRING_ARRAY = ConfigType.STRING_ARRAY

HIVE_TABLE_NAME_PREFIX = "secor.hive.table.name."
THRIFT_MESSAGE_CLASS_PREFIX = "secor.thrift.message.class."

TOPIC_KEY_PREFIXES = (HIVE_TABLE_NAME_PREFIX, THRIFT_MESSAGE_CLASS_PREFIX)

DEFAULT_FINALIZER_LOOKBACK_PERIODS = 10
DEFAULT_GS_TIMEOUT_MS = 3 * 60000

# Values of cloud.service (compared case-insensitively), plus the Qubole warehouse
S3_BACKEND = "s3"
SWIFT_BACKEND = "swift"
GS_BACKEND = "gs"
AZURE_BACKEND = "azure"
QUBOLE_BACKEND = "qubole"


def _required(key: str, config_type: ConfigType, description: str, backend: str | None = None) -> ConfigKey:
    return ConfigKey(key=key, config_type=config_type, required=True, description=description, backend=backend)


def _optional(key: str, config_type: ConfigType, default: object, description: str) -> ConfigKey:
    return ConfigKey(key=key, config_type=config_type, required=False, default=default, description=description)


_KEYS: list[ConfigKey] = [
    # =========================================================================
    # KAFKA
    # =========================================================================
    _required("kafka.seed.broker.host", STRING, "Broker used to discover topic metadata"),
    _required("kafka.seed.broker.port", INT, "Port of the seed broker"),
    _required("kafka.zookeeper.path", STRING, "ZooKeeper chroot used by Kafka"),
    _required("kafka.consumer.timeout.ms", INT, "Consumer iterator timeout"),
    _required("kafka.partition.assignment.strategy", STRING, "range or roundrobin"),
    _required("kafka.rebalance.max.retries", STRING, "Consumer rebalance retries"),
    _required("kafka.rebalance.backoff.ms", STRING, "Backoff between rebalance retries"),
    _required("kafka.fetch.message.max.bytes", STRING, "Max bytes fetched per partition request"),
    _required("kafka.socket.receive.buffer.bytes", STRING, "Consumer socket receive buffer"),
    _required("kafka.fetch.min.bytes", STRING, "Minimum bytes before a fetch returns"),
    _required("kafka.fetch.wait.max.ms", STRING, "Max wait before a fetch returns"),
    _required("kafka.offsets.storage", STRING, "Where consumer offsets are committed (zookeeper or kafka)"),
    _required("kafka.dual.commit.enabled", STRING, "Commit offsets to both zookeeper and kafka"),
    _optional("kafka.consumer.auto.offset.reset", STRING, "smallest", "Reset policy when no committed offset exists"),
    _optional("kafka.useTimestamp", BOOL, False, "Use the Kafka message timestamp instead of parsing the payload"),
    # =========================================================================
    # ZOOKEEPER
    # =========================================================================
    _optional("zookeeper.quorum", STRING_ARRAY, (), "ZooKeeper ensemble members"),
    _required("zookeeper.session.timeout.ms", INT, "ZooKeeper session timeout"),
    _required("zookeeper.sync.time.ms", INT, "ZooKeeper follower sync time"),
    _required("secor.zookeeper.path", STRING, "ZooKeeper path where Secor keeps its own state"),
    # =========================================================================
    # SECOR CORE
    # =========================================================================
    _required("secor.generation", INT, "Output format generation"),
    _required("secor.consumer.threads", INT, "Consumer threads per process"),
    _required("secor.max.file.size.bytes", LONG, "Upload once a local file reaches this size"),
    _required("secor.max.file.age.seconds", LONG, "Upload once a local file reaches this age"),
    _optional("secor.file.age.youngest", BOOL, False, "Measure file age from the youngest file of a topic partition"),
    _optional("secor.max.file.timestamp.range.millis", LONG, -1, "Upload once message timestamps in a file span this range"),
    _required("secor.offsets.per.partition", LONG, "Offsets per partition read by the progress monitor"),
    _required("secor.messages.per.second", INT, "Consumer rate limit"),
    _required("secor.local.path", STRING, "Local directory for message logs"),
    _required("secor.kafka.topic_filter", STRING, "Regex of topics to consume"),
    _optional("secor.kafka.topic_blacklist", STRING, "", "Regex of topics to skip"),
    _required("secor.kafka.group", STRING, "Kafka consumer group"),
    _required("secor.message.parser.class", STRING, "Class extracting partitions from messages"),
    _optional("secor.message.transformer.class", STRING, "", "Class transforming messages before they are written"),
    _required("secor.upload.manager.class", STRING, "Class uploading local files to cloud storage"),
    _optional("secor.upload.on.shutdown", BOOL, False, "Upload local files when the consumer shuts down"),
    _optional("secor.upload.minute_mark", INT, 0, "Force uploads at this minute of every hour (0 disables)"),
    _optional("secor.deterministic.upload", BOOL, False, "Upload file boundaries that do not depend on timing"),
    _required("secor.topic_partition.forget.seconds", INT, "Forget idle topic partitions after this many seconds"),
    _required("secor.local.log.delete.age.hours", INT, "Delete local logs older than this"),
    _required("secor.file.extension", STRING, "Extension of written files"),
    _required("secor.compression.codec", STRING, "Codec class used to compress written files"),
    _required("secor.max.message.size.bytes", INT, "Messages larger than this are dropped"),
    _required("secor.file.reader.writer.factory", STRING, "Factory producing file readers and writers"),
    _optional("secor.file.reader.Delimiter", STRING, "\n", "Record delimiter for delimited text readers"),
    _optional("secor.file.writer.Delimiter", STRING, "\n", "Record delimiter for delimited text writers"),
    _required("secor.kafka.perf_topic_prefix", STRING, "Topic prefix used by performance tests"),
    _optional("secor.offsets.prefix", STRING, "offset=", "Prefix of offset components in output paths"),
    _optional("secor.thrift.protocol.class", STRING, "", "Thrift protocol used to decode messages"),
    _optional(
        "secor.monitoring.metrics.collector.class",
        STRING,
        "com.pinterest.secor.monitoring.OstrichMetricCollector",
        "Metrics collector implementation",
    ),
    # =========================================================================
    # CLOUD STORAGE - S3
    # =========================================================================
    _required("cloud.service", STRING, "Storage backend: S3, Swift, GS or Azure"),
    _required("secor.s3.filesystem", STRING, "Filesystem scheme for S3 URIs (s3, s3n, s3a)", S3_BACKEND),
    _required("secor.s3.bucket", STRING, "Destination bucket", S3_BACKEND),
    _required("secor.s3.path", STRING, "Path under the bucket", S3_BACKEND),
    _optional("secor.s3.alternative.prefix", STRING, "", "Path used instead of secor.s3.path on alter dates"),
    _optional("secor.s3.alter.path.date", STRING, "", "Date from which the alternative prefix is used"),
    _required("aws.access.key", STRING, "AWS access key", S3_BACKEND),
    _required("aws.secret.key", STRING, "AWS secret key", S3_BACKEND),
    _required("aws.endpoint", STRING, "S3 endpoint", S3_BACKEND),
    _required("aws.region", STRING, "AWS region", S3_BACKEND),
    _required("aws.sse.type", STRING, "Server-side encryption type (S3, KMS, customer)", S3_BACKEND),
    _required("aws.sse.kms.key", STRING, "KMS key for SSE-KMS", S3_BACKEND),
    _required("aws.sse.customer.key", STRING, "Customer key for SSE-C", S3_BACKEND),
    # =========================================================================
    # CLOUD STORAGE - SWIFT
    # =========================================================================
    _required("secor.swift.containers.for.each.topic", STRING, "Use one Swift container per topic", SWIFT_BACKEND),
    _required("secor.swift.container", STRING, "Swift container", SWIFT_BACKEND),
    _required("secor.swift.path", STRING, "Path under the Swift container", SWIFT_BACKEND),
    _required("swift.tenant", STRING, "Swift tenant", SWIFT_BACKEND),
    _required("swift.username", STRING, "Swift user name", SWIFT_BACKEND),
    _required("swift.password", STRING, "Swift password", SWIFT_BACKEND),
    _required("swift.auth.url", STRING, "Swift authentication URL", SWIFT_BACKEND),
    _required("swift.public", STRING, "Use the public Swift endpoint", SWIFT_BACKEND),
    _required("swift.port", STRING, "Swift port", SWIFT_BACKEND),
    _required("swift.use.get.auth", STRING, "Authenticate with GET instead of POST", SWIFT_BACKEND),
    _required("swift.api.key", STRING, "Swift API key", SWIFT_BACKEND),
    # =========================================================================
    # CLOUD STORAGE - GOOGLE CLOUD STORAGE
    # =========================================================================
    _required("secor.gs.credentials.path", STRING, "Service account credentials file", GS_BACKEND),
    _required("secor.gs.bucket", STRING, "Destination bucket", GS_BACKEND),
    _required("secor.gs.path", STRING, "Path under the bucket", GS_BACKEND),
    _optional("secor.gs.connect.timeout.ms", INT, DEFAULT_GS_TIMEOUT_MS, "Connect timeout"),
    _optional("secor.gs.read.timeout.ms", INT, DEFAULT_GS_TIMEOUT_MS, "Read timeout"),
    _optional("secor.gs.upload.direct", BOOL, False, "Upload in a single request instead of resumable chunks"),
    # =========================================================================
    # CLOUD STORAGE - AZURE BLOB STORAGE
    # =========================================================================
    _optional("secor.azure.endpoints.protocol", STRING, "https", "Protocol of the blob endpoint"),
    _required("secor.azure.account.name", STRING, "Storage account name", AZURE_BACKEND),
    _required("secor.azure.account.key", STRING, "Storage account key", AZURE_BACKEND),
    _required("secor.azure.container.name", STRING, "Blob container", AZURE_BACKEND),
    _required("secor.azure.path", STRING, "Path under the blob container", AZURE_BACKEND),
    # =========================================================================
    # WAREHOUSE - QUBOLE / HIVE
    # =========================================================================
    _required("qubole.api.token", STRING, "Qubole API token", QUBOLE_BACKEND),
    _optional("secor.enable.qubole", BOOL, False, "Register finalized partitions with Qubole"),
    _optional("secor.qubole.timeout.ms", LONG, 300000, "Timeout for Qubole commands"),
    _required("secor.hive.prefix", STRING, "Prefix of Hive table names"),
    # =========================================================================
    # MONITORING
    # =========================================================================
    _required("ostrich.port", INT, "Port of the Ostrich admin server"),
    _required("tsdb.hostport", STRING, "OpenTSDB host:port"),
    _required("statsd.hostport", STRING, "StatsD host:port"),
    _optional("statsd.prefixWithConsumerGroup", BOOL, False, "Prefix StatsD metrics with the consumer group"),
    _required("monitoring.blacklist.topics", STRING, "Topics excluded from monitoring"),
    _required("monitoring.prefix", STRING, "Metric name prefix"),
    # =========================================================================
    # MESSAGE TIMESTAMP PARSING
    # =========================================================================
    _required("message.timestamp.name", STRING, "Name of the timestamp field"),
    _optional("message.timestamp.name.separator", STRING, ".", "Separator of nested timestamp field names"),
    _required("message.timestamp.id", INT, "Thrift field id of the timestamp"),
    _required("message.timestamp.type", STRING, "Thrift type of the timestamp field"),
    _required("message.timestamp.input.pattern", STRING, "Date pattern of string timestamps"),
    _optional("message.timestamp.required", BOOL, True, "Reject messages without a timestamp"),
    _optional("secor.parser.timezone", STRING, "", "Timezone used to build date partitions (UTC if empty)"),
    # =========================================================================
    # PARTITIONER / FINALIZER
    # =========================================================================
    _required("partitioner.finalizer.delay.seconds", INT, "Delay before a partition is finalized"),
    _optional(
        "secor.finalizer.lookback.periods",
        INT,
        DEFAULT_FINALIZER_LOOKBACK_PERIODS,
        "Number of past periods the finalizer inspects",
    ),
    _optional("partitioner.granularity.hour", BOOL, False, "Partition output by hour"),
    _optional("partitioner.granularity.minute", BOOL, False, "Partition output by minute"),
    _optional("partitioner.granularity.date.prefix", STRING, "dt=", "Prefix of the date partition component"),
    _optional("partitioner.granularity.hour.prefix", STRING, "hr=", "Prefix of the hour partition component"),
    _optional("partitioner.granularity.minute.prefix", STRING, "min=", "Prefix of the minute partition component"),
    _optional("partitioner.granularity.date.format", STRING, "yyyy-MM-dd", "Format of the date partition component"),
    _optional("partitioner.granularity.hour.format", STRING, "HH", "Format of the hour partition component"),
    _optional("partitioner.granularity.minute.format", STRING, "mm", "Format of the minute partition component"),
    # =========================================================================
    # PARQUET
    # =========================================================================
    _optional("parquet.block.size", INT, 134217728, "Parquet row group size"),
    _optional("parquet.page.size", INT, 1048576, "Parquet page size"),
    _optional("parquet.enable.dictionary", BOOL, True, "Enable dictionary encoding"),
    _optional("parquet.validation", BOOL, False, "Validate records against the schema while writing"),
]

CONFIG_SCHEMA: dict[str, ConfigKey] = {definition.key: definition for definition in _KEYS}


def get_schema_key(key: str) -> ConfigKey | None:
    """
    Get the schema definition for a config key.

    Args:
        key: The dot-notation config key

    Returns:
        ConfigKey if found, None if unknown
    """
    return CONFIG_SCHEMA.get(key)


def get_all_required_keys() -> list[str]:
    """
    Get all required configuration keys.

    Returns:
        List of key names whose accessors fail when the key is absent
    """
    return [key for key, schema in CONFIG_SCHEMA.items() if schema.required]


def get_required_keys(backends: Iterable[str]) -> list[str]:
    """
    Get the required keys of a deployment using the given backends.

    Keys owned by a backend that is not listed are left out; keys without a
    backend are always included.

    Args:
        backends: Active backend names (e.g., {"s3", "qubole"})
    """
    active = {backend.lower() for backend in backends}
    return [
        key
        for key, schema in CONFIG_SCHEMA.items()
        if schema.required and (schema.backend is None or schema.backend in active)
    ]
