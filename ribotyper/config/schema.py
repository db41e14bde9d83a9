#!/usr/bin/env python3
"""
Expected shape of the ribotyper configuration
"""
from typing import Dict, Any, List, Tuple

NUMBER = (int, float)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# section -> field -> (accepted types, required)
FieldSpec = Tuple[Any, bool]


class ConfigSchema:
    """Type and presence rules for each configuration section"""

    SCHEMA: Dict[str, Dict[str, FieldSpec]] = {
        'search': {
            'method': (str, True),
        },
        'logging': {
            'level': (str, False),
            'format': (str, False),
            'log_dir': (str, False),
        },
        'classification': {
            'min_score': (NUMBER + (type(None),), False),
            'low_ppos_score': (NUMBER, False),
            'total_coverage': (NUMBER, False),
            'low_ppos_diff': (NUMBER, False),
            'vlow_ppos_diff': (NUMBER, False),
            'low_abs_diff': (NUMBER, False),
            'vlow_abs_diff': (NUMBER, False),
            'max_overlap': (int, False),
            'absolute_diff': (bool, False),
            'use_evalues': (bool, False),
            'same_model': (bool, False),
            'minus_fail': (bool, False),
            'score_fail': (bool, False),
            'diff_fail': (bool, False),
            'cov_fail': (bool, False),
            'mult_fail': (bool, False),
        },
    }

    @staticmethod
    def _describe(types) -> str:
        if not isinstance(types, tuple):
            types = (types,)
        return " or ".join(t.__name__ for t in types)

    @staticmethod
    def _matches(value: Any, types) -> bool:
        # YAML 'true' must not satisfy a numeric field
        if isinstance(value, bool):
            return types is bool or (isinstance(types, tuple) and bool in types)
        return isinstance(value, types)

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Check a merged configuration

        Args:
            config: Configuration dictionary

        Returns:
            Problems found, empty when the configuration is usable
        """
        errors: List[str] = []

        for section, fields in cls.SCHEMA.items():
            values = config.get(section)
            if values is None:
                if any(required for _, required in fields.values()):
                    errors.append(f"Missing required configuration section: {section}")
                continue
            if not isinstance(values, dict):
                errors.append(f"Configuration section {section} must be a mapping")
                continue

            for name, (types, required) in fields.items():
                key = f"{section}.{name}"
                if name not in values:
                    if required:
                        errors.append(f"Missing required configuration field: {key}")
                    continue
                if not cls._matches(values[name], types):
                    errors.append(f"Invalid type for {key}: expected {cls._describe(types)}, "
                                  f"got {type(values[name]).__name__}")

        level = (config.get('logging') or {}).get('level') if not errors else None
        if isinstance(level, str) and level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid logging.level '{level}', expected one of {', '.join(LOG_LEVELS)}")

        return errors

