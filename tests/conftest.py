"""
Root test configuration and fixtures for the Secor configuration resolver.

Note: sys.path manipulation is handled here to ensure imports work correctly
without an editable install.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from secor.config import SecorConfig  # noqa: E402

# A trimmed secor.common.properties, enough to exercise every accessor group
BASE_PROPERTIES = """\
# Kafka
kafka.seed.broker.host=localhost
kafka.seed.broker.port=9092
kafka.zookeeper.path=/
kafka.consumer.timeout.ms=10000
kafka.partition.assignment.strategy=range
kafka.rebalance.max.retries=
kafka.rebalance.backoff.ms=
kafka.fetch.message.max.bytes=
kafka.socket.receive.buffer.bytes=
kafka.fetch.min.bytes=
kafka.fetch.wait.max.ms=
kafka.offsets.storage=zookeeper
kafka.dual.commit.enabled=true

zookeeper.quorum=localhost:2181
zookeeper.session.timeout.ms=3000
zookeeper.sync.time.ms=200
secor.zookeeper.path=/

secor.generation=1
secor.consumer.threads=7
secor.max.file.size.bytes=200000000
secor.max.file.age.seconds=3600
secor.offsets.per.partition=10000000
secor.messages.per.second=10000
secor.local.path=/mnt/secor_data/message_logs/backup
secor.kafka.topic_filter=.*
secor.kafka.group=secor_backup
secor.message.parser.class=com.pinterest.secor.parser.OffsetMessageParser
secor.upload.manager.class=com.pinterest.secor.uploader.HadoopS3UploadManager
secor.topic_partition.forget.seconds=600
secor.local.log.delete.age.hours=-1
secor.file.extension=
secor.compression.codec=
secor.max.message.size.bytes=100000
secor.file.reader.writer.factory=com.pinterest.secor.io.impl.SequenceFileReaderWriterFactory
secor.kafka.perf_topic_prefix=secor_perf_

cloud.service=S3
secor.s3.filesystem=s3n
secor.s3.bucket=secor-backup
secor.s3.path=raw_logs/secor_backup
aws.access.key=
aws.secret.key=
aws.endpoint=
aws.region=
aws.sse.type=
aws.sse.kms.key=
aws.sse.customer.key=

ostrich.port=9999
tsdb.hostport=
statsd.hostport=
monitoring.blacklist.topics=
monitoring.prefix=secor

message.timestamp.name=timestamp
message.timestamp.id=1
message.timestamp.type=i64
message.timestamp.input.pattern=

secor.hive.prefix=

partitioner.finalizer.delay.seconds=3600
"""


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing text files under a temporary directory."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def base_properties_file(write_file: Callable[[str, str], Path]) -> Path:
    """A realistic base properties file."""
    return write_file("secor.common.properties", BASE_PROPERTIES)


@pytest.fixture
def clean_environ():
    """Run with no SECOR_* startup variables set."""
    with patch.dict("os.environ", {}, clear=True):
        yield


@pytest.fixture
def make_config() -> Callable[..., SecorConfig]:
    """Build a SecorConfig directly from a dict of key/value pairs."""

    def _make(values: dict[str, str] | None = None) -> SecorConfig:
        return SecorConfig.from_mapping(values or {})

    return _make
