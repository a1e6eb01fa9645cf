import pytest

RULESETS_YAML = """
rulesets:
  signup:
    description: New account form
    rules:
      name: required|min:3
      email:
        - required
        - email
    messages:
      name.required: Please tell us your name.
  address:
    rules:
      city: required
      postcode:
        regex: "^[A-Z0-9 ]+$"
"""


@pytest.fixture
def rulesets_file(tmp_path):
    """Rulesets document on disk."""
    path = tmp_path / "rulesets.yaml"
    path.write_text(RULESETS_YAML)
    return path


@pytest.fixture
def config_file(tmp_path, rulesets_file):
    """Validator config pointing at the rulesets document by relative path."""
    path = tmp_path / "validator-config.yaml"
    path.write_text(
        "grammar:\n"
        "  rule_separator: \"|\"\n"
        "rulesets_uri: rulesets.yaml\n"
    )
    return path
