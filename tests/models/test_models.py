"""Tests for registry and package metadata parsing."""

import pytest
from pydantic import ValidationError

from dec.models.pack import PackMetadata
from dec.models.registry import PackRegistry


def test_flat_registry_form_is_keyed_by_name() -> None:
    registry = PackRegistry.model_validate(
        {
            "version": "1",
            "packages": [
                {"name": "go", "version": "1.0.0"},
                {"name": "py", "version": "2.0.0"},
            ],
        }
    )

    assert sorted(registry.packs) == ["go", "py"]
    pack = registry.get("py")
    assert pack is not None
    assert pack.version == "2.0.0"


def test_flat_registry_entry_without_name_is_rejected() -> None:
    with pytest.raises(ValidationError):
        PackRegistry.model_validate({"packages": [{"version": "1.0.0"}]})


def test_requires_is_an_alias_for_dependencies() -> None:
    pack = PackMetadata.model_validate({"name": "app", "requires": ["base"]})

    assert pack.dependencies == ["base"]


def test_repository_object_is_flattened() -> None:
    pack = PackMetadata.model_validate(
        {"name": "go", "repository": {"type": "git", "url": "https://example.com/go"}}
    )

    assert pack.repository == "https://example.com/go"


def test_unknown_fields_are_preserved() -> None:
    pack = PackMetadata.model_validate({"name": "go", "homepage": "https://go.dev"})

    assert pack.to_json_dict()["homepage"] == "https://go.dev"


def test_config_defaults_skip_fields_without_default() -> None:
    pack = PackMetadata.model_validate(
        {
            "name": "pg",
            "config_schema": {
                "host": {"type": "string", "default": "localhost"},
                "token": {"type": "string", "required": True},
            },
        }
    )

    assert pack.config_defaults() == {"host": "localhost"}


def test_empty_type_defaults_to_rule() -> None:
    assert PackMetadata.model_validate({"name": "go", "type": ""}).type == "rule"
