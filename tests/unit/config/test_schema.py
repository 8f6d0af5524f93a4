"""Tests for the configuration schema registry."""

from __future__ import annotations

from secor.config.schema import (
    AZURE_BACKEND,
    CONFIG_SCHEMA,
    DEFAULT_FINALIZER_LOOKBACK_PERIODS,
    DEFAULT_GS_TIMEOUT_MS,
    GS_BACKEND,
    QUBOLE_BACKEND,
    S3_BACKEND,
    SWIFT_BACKEND,
    TOPIC_KEY_PREFIXES,
    get_all_required_keys,
    get_required_keys,
    get_schema_key,
)
from secor.config.secor_config import SecorConfig
from secor.config.types import ConfigType


class TestConfigSchema:
    """Tests for CONFIG_SCHEMA contents."""

    def test_lookup(self):
        key = get_schema_key("kafka.seed.broker.port")
        assert key is not None
        assert key.config_type == ConfigType.INT
        assert key.required

    def test_unknown_lookup(self):
        assert get_schema_key("not.a.key") is None

    def test_long_keys(self):
        for name in ("secor.max.file.size.bytes", "secor.max.file.age.seconds", "secor.offsets.per.partition"):
            assert CONFIG_SCHEMA[name].config_type == ConfigType.LONG

    def test_defaults(self):
        assert CONFIG_SCHEMA["secor.finalizer.lookback.periods"].default == DEFAULT_FINALIZER_LOOKBACK_PERIODS == 10
        assert CONFIG_SCHEMA["secor.gs.connect.timeout.ms"].default == DEFAULT_GS_TIMEOUT_MS == 180000
        assert CONFIG_SCHEMA["secor.gs.read.timeout.ms"].default == DEFAULT_GS_TIMEOUT_MS

    def test_optional_keys_have_defaults_of_their_type(self):
        python_types = {
            ConfigType.STRING: str,
            ConfigType.INT: int,
            ConfigType.LONG: int,
            ConfigType.BOOL: bool,
            ConfigType.STRING_ARRAY: tuple,
        }
        for key, definition in CONFIG_SCHEMA.items():
            if not definition.required:
                assert isinstance(definition.default, python_types[definition.config_type]), key

    def test_required_keys_have_no_default(self):
        for key in get_all_required_keys():
            assert CONFIG_SCHEMA[key].default is None, key

    def test_topic_prefixes_are_not_schema_keys(self):
        for prefix in TOPIC_KEY_PREFIXES:
            assert prefix.endswith(".")
            assert not any(key.startswith(prefix) for key in CONFIG_SCHEMA)

    def test_every_key_is_readable_through_get(self):
        """Test that every schema key resolves when defined with a valid value."""
        samples = {
            ConfigType.STRING: "x",
            ConfigType.INT: "1",
            ConfigType.LONG: "1",
            ConfigType.BOOL: "true",
            ConfigType.STRING_ARRAY: "a,b",
        }
        config = SecorConfig.from_mapping({key: samples[d.config_type] for key, d in CONFIG_SCHEMA.items()})
        for key in CONFIG_SCHEMA:
            assert config.get(key) is not None


class TestRequiredKeysByBackend:
    """Tests for get_required_keys."""

    def test_no_backend_excludes_backend_keys(self):
        keys = get_required_keys(set())
        assert "cloud.service" in keys
        assert "secor.hive.prefix" in keys
        assert "secor.s3.bucket" not in keys
        assert "qubole.api.token" not in keys

    def test_backend_names_are_case_insensitive(self):
        assert get_required_keys({"S3"}) == get_required_keys({"s3"})

    def test_only_selected_backend_included(self):
        keys = get_required_keys({"swift"})
        assert "swift.tenant" in keys
        assert "secor.swift.container" in keys
        assert "secor.gs.bucket" not in keys
        assert "aws.secret.key" not in keys

    def test_all_backends_cover_every_required_key(self):
        backends = {definition.backend for definition in CONFIG_SCHEMA.values() if definition.backend}
        assert backends == {S3_BACKEND, SWIFT_BACKEND, GS_BACKEND, AZURE_BACKEND, QUBOLE_BACKEND}
        assert get_required_keys(backends) == get_all_required_keys()

    def test_only_required_keys_carry_a_backend(self):
        for key, definition in CONFIG_SCHEMA.items():
            if definition.backend is not None:
                assert definition.required, key
