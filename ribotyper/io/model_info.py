# ribotyper/io/model_info.py
"""
Model lookup tables: model -> family/domain, and acceptable models.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from ribotyper.core.file_utils import safe_open, check_file_exists
from ribotyper.exceptions import FileOperationError, MissingLookupError, ValidationError

logger = logging.getLogger("ribotyper.io.model_info")


class ModelInfo:
    """Read-only model lookup table"""

    def __init__(self, families: Dict[str, str], domains: Dict[str, str],
                 acceptable: Optional[Iterable[str]] = None):
        """Initialize lookup table

        Args:
            families: Model name to family name
            domains: Model name to domain name
            acceptable: Models whose hits may PASS; None means all models
        """
        if set(families) != set(domains):
            raise ValidationError("Family and domain tables must list the same models")
        self._families = dict(families)
        self._domains = dict(domains)
        self._acceptable: Optional[Set[str]] = None
        if acceptable is not None:
            self.set_acceptable(acceptable)

    def __contains__(self, model: str) -> bool:
        return model in self._families

    def __len__(self) -> int:
        return len(self._families)

    @property
    def models(self) -> List[str]:
        return sorted(self._families)

    def family_of(self, model: str) -> str:
        try:
            return self._families[model]
        except KeyError:
            raise MissingLookupError(f"Unrecognized model {model}, no family information",
                                     {'model': model})

    def domain_of(self, model: str) -> str:
        try:
            return self._domains[model]
        except KeyError:
            raise MissingLookupError(f"Unrecognized model {model}, no domain information",
                                     {'model': model})

    def is_acceptable(self, model: str) -> bool:
        if self._acceptable is None:
            return True
        return model in self._acceptable

    def set_acceptable(self, models: Iterable[str]) -> None:
        """Restrict passing hits to the given models

        Raises:
            ValidationError: If a model is not in the table
        """
        acceptable = set()
        for model in models:
            if model not in self._families:
                raise ValidationError(
                    f"Invalid model name \"{model}\" in acceptable model list",
                    {'model': model, 'valid_models': self.models}
                )
            acceptable.add(model)
        self._acceptable = acceptable

    def check_models(self, model_names: Iterable[str]) -> None:
        """Verify 1:1 correspondence with model names from a model file

        Raises:
            ValidationError: If either side has a model the other lacks
        """
        names = set(model_names)
        extra = sorted(names - set(self._families))
        if extra:
            raise ValidationError(
                f"Model \"{extra[0]}\" from the model file is not listed in the model info file",
                {'models': extra}
            )
        missing = sorted(set(self._families) - names)
        if missing:
            raise ValidationError(
                f"Model \"{missing[0]}\" from the model info file is not in the model file",
                {'models': missing}
            )

    def max_widths(self) -> Dict[str, int]:
        """Longest model, family, domain and family.domain names"""
        return {
            'model': max((len(m) for m in self._families), default=0),
            'family': max((len(f) for f in self._families.values()), default=0),
            'domain': max((len(d) for d in self._domains.values()), default=0),
            'classification': max(
                (len(self._families[m]) + len(self._domains[m]) + 1 for m in self._families),
                default=0),
        }


def _require_file(file_path: str, description: str) -> None:
    if not check_file_exists(file_path):
        raise FileOperationError(f"{description} {file_path} does not exist", {'path': file_path})


def parse_model_info_file(file_path: str, accept_file: Optional[str] = None) -> ModelInfo:
    """Parse a model info file of 'model family domain' lines

    Args:
        file_path: Path to model info file
        accept_file: Optional file listing acceptable models

    Returns:
        ModelInfo
    """
    _require_file(file_path, "Model info file")

    families: Dict[str, str] = {}
    domains: Dict[str, str] = {}

    with safe_open(file_path) as f:
        for line_num, line in enumerate(f, 1):
            if line.startswith('#') or not line.strip():
                continue
            tokens = line.split()
            if len(tokens) != 3:
                raise ValidationError(
                    f"Didn't read 3 tokens in model info file {file_path}, line {line_num}: {line.rstrip()}",
                    {'path': file_path, 'line': line_num}
                )
            model, family, domain = tokens
            if model in families:
                raise ValidationError(f"Read model {model} twice in {file_path}",
                                      {'path': file_path, 'model': model})
            families[model] = family
            domains[model] = domain

    if not families:
        raise ValidationError(f"No models read from model info file {file_path}")

    model_info = ModelInfo(families, domains)
    logger.info(f"Read {len(model_info)} models from {file_path}")

    if accept_file:
        model_info.set_acceptable(parse_accept_file(accept_file))

    return model_info


def parse_accept_file(file_path: str) -> List[str]:
    """Read acceptable model names, one per non-blank line"""
    _require_file(file_path, "Acceptable model file")

    models = []
    with safe_open(file_path) as f:
        for line_num, line in enumerate(f, 1):
            tokens = line.split()
            if not tokens:
                continue
            if len(tokens) != 1:
                raise ValidationError(
                    f"Didn't read 1 token in acceptable model file {file_path}, line {line_num}; "
                    f"each line should hold exactly one model name",
                    {'path': file_path, 'line': line_num}
                )
            models.append(tokens[0])

    logger.info(f"Read {len(models)} acceptable models from {file_path}")
    return models


def read_model_names(file_path: str) -> List[str]:
    """Collect model names from the NAME lines of a CM or HMM file"""
    _require_file(file_path, "Model file")

    names = []
    with safe_open(file_path) as f:
        for line in f:
            if line.startswith("NAME"):
                tokens = line.split()
                if len(tokens) >= 2:
                    names.append(tokens[1])

    if not names:
        raise ValidationError(f"No NAME lines found in model file {file_path}")
    return names
