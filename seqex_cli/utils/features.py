"""Feature map input for CLI commands"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from seqex import feature_examples
from seqex_cli.utils.exceptions import ValidationError


def load_features(
    features_file: Optional[str] = None,
    features_json: Optional[str] = None,
    example: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Load a feature map from exactly one of the supported sources

    # Arguments
        features_file: Path to a JSON or YAML file holding the feature map
        features_json: Feature map as inline JSON
        example: Index of a canned example

    # Returns
        Feature map

    # Raises
        ValidationError: If no or several sources are given, or the input is not a mapping
    """
    sources = [s for s in (features_file, features_json, example) if s is not None]
    if len(sources) != 1:
        raise ValidationError(
            "Provide exactly one of --features-file, --json or --example"
        )

    if example is not None:
        try:
            return feature_examples.get_example(example)
        except IndexError as e:
            raise ValidationError(str(e)) from e

    try:
        if features_json is not None:
            features = json.loads(features_json)
        else:
            # YAML is a superset of JSON, one loader covers both
            features = yaml.safe_load(Path(features_file).read_text())
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"Could not parse features: {e}") from e

    if not isinstance(features, dict):
        raise ValidationError("Features must be a mapping of name to list of values")
    return features
