#!/usr/bin/env python3
"""Validate fleet data YAML files against the schema."""
import sys
from importlib import resources
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError


def load_schema() -> dict:
    """Load the JSON schema shipped in the fleet package."""
    schema_file = resources.files("fleet").joinpath("schema.yaml")
    return yaml.safe_load(schema_file.read_text(encoding="utf-8"))


def validate_fleet_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single fleet data file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main():
    """Validate the fleet data files given on the command line."""
    if len(sys.argv) < 2:
        print("Usage: validate_yaml.py FLEET_FILE [FLEET_FILE ...]")
        return 1

    schema = load_schema()
    all_valid = True
    for name in sys.argv[1:]:
        filepath = Path(name)
        errors = validate_fleet_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
