"""
Tests for decoding the config file and the Config accessors.
"""
import logging

import pytest
from pydantic import ValidationError

from app_json_config import (
    ClientConfig,
    Config,
    ConfigFlag,
    DatabaseNotFoundError,
    LoggingConfig,
    ServiceNotFoundError,
    TRACE_LEVEL,
)


def test_decode_example_config(example_config_bytes):
    config = Config.model_validate_json(example_config_bytes)

    assert config.env == "UnitTest"
    assert config.port == 8000
    assert config.logging.level == "trace"

    defaults = config.default_component_configs
    assert defaults.service_logging.log_call_duration == ConfigFlag.TRUE
    assert defaults.client == ClientConfig(
        timeout=10,
        idle_conn_timeout=30,
        max_idle_conns_per_host=16,
        max_conns_per_host=32,
        max_retries=2,
        disable_compression=ConfigFlag.FALSE,
        insecure_skip_verify=ConfigFlag.UNSET,
        ca_bundle_path="example_cabundle.pem",
    )

    assert set(config.service_configs) == {"ABS", "DEF"}
    abs_service = config.service_configs["ABS"]
    assert abs_service.url == "https://some.url.com"
    assert abs_service.auth_required is True
    assert abs_service.auth_credentials.key_component1 == "keyc_1"
    assert abs_service.auth_credentials.key_component2 == "keyc_2"
    assert abs_service.auth_credentials.euuid == "abs_euuid"
    assert abs_service.auth_key == ""
    assert abs_service.endpoints["ClaimStatus"].path == "/mvClaimStatuses?"
    assert abs_service.component_config_overrides.client.timeout == 30
    assert abs_service.component_config_overrides.service_logging.log_call_duration == ConfigFlag.FALSE

    assert config.service_configs["DEF"].endpoints == {}

    assert set(config.database_configs) == {"MDBAuth", "MDBNoAuth"}
    assert config.database_configs["MDBAuth"].password == ""
    assert config.options == {"DummyBool": True, "DummyNum": 8, "DummyString": "a dumb string"}


def test_unknown_top_level_field_rejected():
    with pytest.raises(ValidationError) as exc:
        Config.model_validate_json(b'{"OopsBadField": 123}')
    assert "extra_forbidden" in str(exc.value) or "Extra inputs are not permitted" in str(exc.value)


def test_unknown_nested_field_rejected():
    data = b'{"DefaultComponentConfigs": {"Client": {"Timout": 10}}}'
    with pytest.raises(ValidationError):
        Config.model_validate_json(data)


def test_unknown_keys_in_list_entries_ignored():
    data = b"""{
        "ServiceConfigs": [{
            "Name": "A",
            "Description": "x",
            "AuthCredentials": {"KeyComponent1": "k", "Extra": 1},
            "Endpoints": [{"Name": "E", "Path": "/e", "Verb": "GET"}],
            "ComponentConfigOverrides": {
                "Client": {"Timeout": 5, "Timout": 10},
                "Tracing": {"Enabled": true}
            }
        }],
        "DatabaseConfigs": [{"Name": "D", "Port": 5432}]
    }"""
    config = Config.model_validate_json(data)

    service = config.service_configs["A"]
    assert service.auth_credentials.key_component1 == "k"
    assert service.endpoints["E"].path == "/e"
    assert service.component_config_overrides.client.timeout == 5
    assert config.database_configs["D"].name == "D"


@pytest.mark.parametrize("data", [
    b'{"Port": "8000"}',
    b'{"DefaultComponentConfigs": {"Client": {"Timeout": "10"}}}',
    b'{"ServiceConfigs": [{"Name": "A", "AuthRequired": "yes"}]}',
    b'{"ServiceConfigs": [{"Name": "A", "ComponentConfigOverrides": {"Client": {"MaxRetries": "2"}}}]}',
    b'{"DatabaseConfigs": [{"Name": "D", "AuthRequired": 1}]}',
])
def test_mistyped_values_rejected(data):
    with pytest.raises(ValidationError):
        Config.model_validate_json(data)


def test_flag_accepts_booleans():
    client = ClientConfig.model_validate({"DisableCompression": True, "InsecureSkipVerify": False})
    assert client.disable_compression == ConfigFlag.TRUE
    assert client.insecure_skip_verify == ConfigFlag.FALSE


def test_flag_rejects_out_of_range_value():
    with pytest.raises(ValidationError):
        ClientConfig.model_validate({"DisableCompression": 3})


def test_flag_defaults_to_unset():
    assert ClientConfig().disable_compression == ConfigFlag.UNSET
    assert ConfigFlag(0) is ConfigFlag.UNSET


def test_duplicate_service_names_last_wins():
    data = b"""{
        "ServiceConfigs": [
            {"Name": "A", "Url": "https://first"},
            {"Name": "A", "Url": "https://second"}
        ],
        "DatabaseConfigs": [
            {"Name": "D", "Server": "first"},
            {"Name": "D", "Server": "second"}
        ]
    }"""
    config = Config.model_validate_json(data)
    assert list(config.service_configs) == ["A"]
    assert config.service_configs["A"].url == "https://second"
    assert config.database_configs["D"].server == "second"


def test_duplicate_endpoint_names_last_wins():
    data = b"""{"ServiceConfigs": [{"Name": "A", "Endpoints": [
        {"Name": "E", "Path": "/one"}, {"Name": "E", "Path": "/two"}
    ]}]}"""
    config = Config.model_validate_json(data)
    assert config.service_configs["A"].endpoints["E"].path == "/two"


def test_null_lists_decode_to_empty_mappings():
    config = Config.model_validate_json(b'{"ServiceConfigs": null, "DatabaseConfigs": null, "Options": null}')
    assert config.service_configs == {}
    assert config.database_configs == {}
    assert config.options == {}


def test_get_service_config(example_config_bytes):
    config = Config.model_validate_json(example_config_bytes)
    assert config.get_service_config("ABS").name == "ABS"

    with pytest.raises(ServiceNotFoundError) as exc:
        config.get_service_config("missing")
    assert "unable to locate service configuration for missing" in str(exc.value)


def test_get_database_config_resolves_password(example_config_bytes, monkeypatch):
    monkeypatch.setenv("CRM_DB_PW", "s3cret")
    config = Config.model_validate_json(example_config_bytes)

    assert config.get_database_config("MDBAuth").password == "s3cret"
    assert config.get_database_config("MDBNoAuth").password == ""

    with pytest.raises(DatabaseNotFoundError):
        config.get_database_config("missing")


def test_get_database_config_unset_password(example_config_bytes, monkeypatch):
    monkeypatch.delenv("CRM_DB_PW", raising=False)
    config = Config.model_validate_json(example_config_bytes)
    assert config.get_database_config("MDBAuth").password == ""


@pytest.mark.parametrize("env,expected", [
    ("local", True),
    ("LOCAL", True),
    ("Local", True),
    ("Dev", False),
    ("", False),
])
def test_is_local(env, expected):
    assert Config(env=env).is_local() is expected


def test_option_as_string(example_config_bytes):
    config = Config.model_validate_json(example_config_bytes)
    assert config.option_as_string("DummyBool") == "true"
    assert config.option_as_string("DummyNum") == "8"
    assert config.option_as_string("DummyString") == "a dumb string"
    assert config.option_as_string("Missing") == ""


def test_option_as_string_nested_values():
    config = Config(options={"Nested": {"a": 1}, "List": [1, 2]})
    assert config.option_as_string("Nested") == '{"a": 1}'
    assert config.option_as_string("List") == "[1, 2]"


@pytest.mark.parametrize("level,expected", [
    ("trace", TRACE_LEVEL),
    ("debug", logging.DEBUG),
    ("Info", logging.INFO),
    ("warn", logging.WARNING),
    ("error", logging.ERROR),
    ("panic", logging.CRITICAL),
    ("nonsense", logging.INFO),
])
def test_log_level(level, expected):
    assert LoggingConfig(level=level).log_level() == expected


def test_trace_level_has_a_name():
    assert logging.getLevelName(TRACE_LEVEL) == "TRACE"


def test_log_level_drives_caller_logger(example_config_bytes):
    config = Config.model_validate_json(example_config_bytes)
    logger = logging.getLogger("app_json_config.tests.caller")
    logger.setLevel(config.logging.log_level())
    assert logger.isEnabledFor(TRACE_LEVEL)
