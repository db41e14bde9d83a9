#!/usr/bin/env python3
"""
Classification thresholds and failure toggles.
"""

from dataclasses import dataclass, fields, asdict
from typing import Dict, Any, Optional

from ribotyper.exceptions import ConfigurationError


@dataclass(frozen=True)
class ClassificationOptions:
    """
    Immutable configuration for the classification engine.

    Defaults match the command-line defaults of the ribotyper tool.
    """

    # ========== HIT FILTERING ==========
    min_score: Optional[float] = 20.0  # None: every hit counts
    max_overlap: int = 10              # max model positions two hits may share

    # ========== SCORE AND COVERAGE THRESHOLDS ==========
    low_ppos_score: float = 0.5        # bits per nucleotide
    total_coverage: float = 0.88

    # ========== TOP-TWO SCORE DIFFERENCE ==========
    absolute_diff: bool = False        # compare total bits instead of bits per position
    low_ppos_diff: float = 0.10
    vlow_ppos_diff: float = 0.04
    low_abs_diff: float = 100.0
    vlow_abs_diff: float = 40.0

    # ========== RANKING ==========
    use_evalues: bool = False
    same_model: bool = False           # second-best is a different model, not a different domain

    # ========== OPTIONAL FAILURES ==========
    minus_fail: bool = False
    score_fail: bool = False
    diff_fail: bool = False
    cov_fail: bool = False
    mult_fail: bool = False

    def validate(self) -> None:
        """Check threshold consistency

        Raises:
            ConfigurationError: If any threshold is out of range
        """
        errors = []

        if self.min_score is not None and self.min_score < 0:
            errors.append("min_score must be non-negative")

        if self.max_overlap < 0:
            errors.append("max_overlap must be non-negative")

        if self.low_ppos_score < 0:
            errors.append("low_ppos_score must be non-negative")

        if not 0.0 <= self.total_coverage <= 1.0:
            errors.append("total_coverage must be between 0.0 and 1.0")

        if self.low_ppos_diff < self.vlow_ppos_diff:
            errors.append("low_ppos_diff must be >= vlow_ppos_diff")

        if self.low_abs_diff < self.vlow_abs_diff:
            errors.append("low_abs_diff must be >= vlow_abs_diff")

        if errors:
            raise ConfigurationError(f"Invalid classification options: {'; '.join(errors)}",
                                     {'errors': errors})

    @property
    def low_diff_threshold(self) -> float:
        return self.low_abs_diff if self.absolute_diff else self.low_ppos_diff

    @property
    def vlow_diff_threshold(self) -> float:
        return self.vlow_abs_diff if self.absolute_diff else self.vlow_ppos_diff

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClassificationOptions':
        """Create from dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_config(cls, config_manager, **overrides) -> 'ClassificationOptions':
        """Create from a ConfigManager's classification section

        Args:
            config_manager: ConfigManager instance
            **overrides: Values that take precedence over the configuration

        Returns:
            Validated ClassificationOptions
        """
        data = config_manager.get_classification_config()
        data.update({k: v for k, v in overrides.items() if v is not None})
        options = cls.from_dict(data)
        options.validate()
        return options
