"""
JSON output for pgtools results.
"""

import json
from dataclasses import asdict, is_dataclass


def to_dict(result):
    """Convert a result dataclass to plain data, adding derived values."""
    data = asdict(result)
    if hasattr(result, 'mean_node_len'):
        data['mean_node_len'] = result.mean_node_len
    if hasattr(result, 'basic') and is_dataclass(result.basic):
        data['basic']['mean_node_len'] = result.basic.mean_node_len
    if hasattr(result, 'is_valid'):
        data['is_valid'] = result.is_valid
    return data


def to_json(result):
    """Serialize a result dataclass (or a plain dict) as indented JSON."""
    data = to_dict(result) if is_dataclass(result) else result
    return json.dumps(data, indent=2)
