import pytest
from zodgen.core.errors import ConfigurationError, PatternNotFoundError
from zodgen.core.expression import number
from zodgen.core.patterns import list_patterns, pattern_names, resolve_pattern


def test_registry_contents():
    assert set(pattern_names()) == {
        "record", "string_record", "string_array", "number_array", "object_array",
        "tags", "user_profile", "settings", "metadata", "address",
    }


def test_fixed_patterns():
    assert resolve_pattern("string_record") == "z.record(z.string())"
    assert resolve_pattern("number_array") == "z.array(z.number())"
    assert resolve_pattern("tags") == "z.array(z.string())"
    assert resolve_pattern("metadata") == "z.record(z.union([z.string(), z.number(), z.boolean()]))"
    assert resolve_pattern("settings").startswith('z.object({ theme: z.enum(["light", "dark", "auto"]).optional()')


def test_parameterized_patterns():
    assert resolve_pattern("record") == "z.record(z.unknown())"
    assert resolve_pattern("record", "z.number()") == "z.record(z.number())"
    assert resolve_pattern("record", number()) == "z.record(z.number())"
    assert resolve_pattern("object_array") == "z.array(z.object({}).passthrough())"
    assert resolve_pattern("object_array", "z.object({ id: z.string() })") == "z.array(z.object({ id: z.string() }))"


def test_parameter_ignored_for_fixed_patterns():
    assert resolve_pattern("tags", "z.number()") == "z.array(z.string())"


def test_list_patterns():
    patterns = list_patterns()
    assert patterns["tags"] == "z.array(z.string())"
    assert callable(patterns["record"])
    assert patterns["record"]("z.boolean()") == "z.record(z.boolean())"
    assert "postal_code: z.string().optional()" in patterns["address"]


def test_unknown_pattern():
    with pytest.raises(PatternNotFoundError):
        resolve_pattern("does_not_exist")
    with pytest.raises(ConfigurationError):
        resolve_pattern("does_not_exist")
