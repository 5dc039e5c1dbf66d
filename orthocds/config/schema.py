#!/usr/bin/env python3
"""
Expected types and limits of every orthocds configuration setting
"""
from typing import Dict, Any, List, Optional


class ConfigSchema:
    """Per-section field types, requirements and value limits"""

    SCHEMA = {
        'tools': {
            'transdecoder_longorfs_path': {'type': str, 'required': False},
            'transdecoder_predict_path': {'type': str, 'required': False},
            'estscan_path': {'type': str, 'required': False},
            'hmmsearch_path': {'type': str, 'required': False},
            'cap3_path': {'type': str, 'required': False},
            'mafft_path': {'type': str, 'required': False},
            'trimal_path': {'type': str, 'required': False},
            'cdhit_path': {'type': str, 'required': False},
        },
        'prediction': {
            'method': {'type': str, 'required': True, 'choices': ('transdecoder', 'estscan')},
            'stranded': {'type': bool, 'required': False},
            'score_matrix': {'type': str, 'required': False},
            'min_length': {'type': int, 'required': False, 'min': 0},
        },
        'dedup': {
            'enabled': {'type': bool, 'required': False},
        },
        'targeted': {
            'scaffold': {'type': str, 'required': False},
            'evalue': {'type': (int, float), 'required': False},
            'strict_evalue': {'type': (int, float), 'required': False},
            'overlap_length': {'type': int, 'required': False, 'min': 1},
            'percent_identity': {'type': (int, float), 'required': False, 'range': (0, 100)},
            'gap_threshold': {'type': (int, float), 'required': False, 'range': (0.0, 1.0)},
            'threads': {'type': int, 'required': False, 'min': 1},
            'max_workers': {'type': int, 'required': False, 'min': 1},
            'keep_intermediates': {'type': bool, 'required': False},
        },
        'logging': {
            'level': {'type': str, 'required': False},
            'format': {'type': str, 'required': False},
            'log_dir': {'type': str, 'required': False},
            'tool_level': {'type': str, 'required': False},
        },
    }

    @staticmethod
    def _type_name(expected) -> str:
        if isinstance(expected, type):
            return expected.__name__
        return '/'.join(t.__name__ for t in expected)

    @classmethod
    def check_field(cls, name: str, value: Any, props: Dict[str, Any]) -> Optional[str]:
        """Problem with one value, or None

        Booleans are not accepted where a number is expected.
        """
        expected = props.get('type')
        wants_bool = expected is bool
        if expected is not None and (not isinstance(value, expected)
                                     or (isinstance(value, bool) and not wants_bool)):
            return (f"Invalid type for {name}: expected {cls._type_name(expected)}, "
                    f"got {type(value).__name__}")

        if 'choices' in props and value not in props['choices']:
            return f"Invalid value for {name}: {value!r} (expected one of {', '.join(props['choices'])})"

        if 'range' in props:
            low, high = props['range']
            if not low <= value <= high:
                return f"Value for {name} out of range [{low}, {high}]: {value}"

        if 'min' in props and value < props['min']:
            return f"Value for {name} must be at least {props['min']}: {value}"
        return None

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate a merged configuration

        Returns:
            Problems found, empty if the configuration is usable
        """
        errors = []
        for section, fields in cls.SCHEMA.items():
            section_required = any(props.get('required', False) for props in fields.values())
            if section not in config:
                if section_required:
                    errors.append(f"Missing required configuration section: {section}")
                continue

            values = config[section]
            if not isinstance(values, dict):
                errors.append(f"Configuration section {section} must be a mapping")
                continue

            for field, props in fields.items():
                name = f"{section}.{field}"
                if field not in values:
                    if props.get('required', False):
                        errors.append(f"Missing required configuration field: {name}")
                    continue
                problem = cls.check_field(name, values[field], props)
                if problem:
                    errors.append(problem)

        return errors
