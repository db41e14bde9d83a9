#!/usr/bin/env python3
"""
Parsers that turn backend-specific tabular lines into canonical Hits.

Each search backend writes a whitespace-delimited table with its own
column layout. A parser knows one layout and returns Hit objects with
family and domain filled in from the model info table.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Sequence

from ribotyper.core.file_utils import safe_open, check_file_exists
from ribotyper.exceptions import FileOperationError, ValidationError
from ribotyper.models.hit import Hit, Strand
from ribotyper.models.search import SearchMethod


class HitParser(ABC):
    """
    Abstract base class for tabular hit parsers.

    Subclasses define which columns hold which fields; the base class
    handles comment skipping, numeric conversion and lookups.
    """

    #: Search methods this parser understands
    methods: Sequence[SearchMethod] = ()

    def __init__(self, model_info, method: SearchMethod, logger: Optional[logging.Logger] = None):
        """
        Initialize parser.

        Args:
            model_info: ModelInfo used to look up family and domain
            method: Search method whose output is being parsed
            logger: Logger instance (creates one if not provided)
        """
        if method not in self.methods:
            raise ValueError(f"{self.__class__.__name__} cannot parse {method.value} output")
        self.model_info = model_info
        self.method = method
        self.logger = logger or logging.getLogger(f"ribotyper.processors.{self.__class__.__name__}")

    @abstractmethod
    def extract_fields(self, tokens: List[str], line: str) -> Dict[str, Optional[str]]:
        """
        Pick raw field values out of one split line.

        Returns:
            Dictionary with keys target, model, seq_from, seq_to, strand,
            score, evalue, model_from, model_to (missing ones are None)

        Raises:
            ValidationError: If the column count is wrong for this layout
        """
        pass

    def parse_line(self, line: str) -> Optional[Hit]:
        """Parse one line, returning None for comments and blank lines"""
        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            return None

        tokens = stripped.split()
        raw = self.extract_fields(tokens, stripped)

        model = raw['model']
        seq_from = self._to_int(raw['seq_from'], 'seq_from', stripped)
        seq_to = self._to_int(raw['seq_to'], 'seq_to', stripped)

        if raw['strand'] is None:
            strand = Strand.from_coords(seq_from, seq_to)
        else:
            try:
                strand = Strand(raw['strand'])
            except ValueError:
                raise ValidationError(f"Invalid strand '{raw['strand']}' at line: {stripped}")

        return Hit(
            target=raw['target'],
            model=model,
            family=self.model_info.family_of(model),
            domain=self.model_info.domain_of(model),
            seq_from=seq_from,
            seq_to=seq_to,
            strand=strand,
            score=self._to_float(raw['score'], 'score', stripped),
            evalue=self._to_evalue(raw.get('evalue'), stripped),
            model_from=self._to_int(raw['model_from'], 'model_from', stripped) if raw.get('model_from') else None,
            model_to=self._to_int(raw['model_to'], 'model_to', stripped) if raw.get('model_to') else None,
        )

    def parse_lines(self, lines) -> Iterator[Hit]:
        for line in lines:
            hit = self.parse_line(line)
            if hit is not None:
                yield hit

    def parse_file(self, file_path: str) -> Iterator[Hit]:
        """Yield hits from a tabular file in file order"""
        if not check_file_exists(file_path):
            raise FileOperationError(f"Tabular file {file_path} does not exist", {'path': file_path})

        with safe_open(file_path) as f:
            yield from self.parse_lines(f)

    def _require_columns(self, tokens: List[str], line: str, exact: Optional[int] = None,
                         minimum: Optional[int] = None) -> None:
        if exact is not None and len(tokens) != exact:
            raise ValidationError(
                f"Did not find {exact} columns in {self.method.value} tabular output at line: {line}",
                {'columns': len(tokens)}
            )
        if minimum is not None and len(tokens) < minimum:
            raise ValidationError(
                f"Found less than {minimum} columns in {self.method.value} tabular output at line: {line}",
                {'columns': len(tokens)}
            )

    @staticmethod
    def _to_int(value: str, name: str, line: str) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Non-integer {name} '{value}' at line: {line}")

    @staticmethod
    def _to_float(value: str, name: str, line: str) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Non-numeric {name} '{value}' at line: {line}")

    def _to_evalue(self, value: Optional[str], line: str) -> Optional[float]:
        if value is None or value == "-":
            return None
        return self._to_float(value, 'E-value', line)


class FastCMParser(HitParser):
    """Short-format cmsearch/cmscan output: no model coordinates, no E-values"""

    methods = (SearchMethod.CMSEARCH_FAST, SearchMethod.CMSCAN_FAST)

    def extract_fields(self, tokens: List[str], line: str) -> Dict[str, Optional[str]]:
        if self.method is SearchMethod.CMSEARCH_FAST:
            # target model score seqfrom seqto strand bounds ? seqlen
            self._require_columns(tokens, line, exact=9)
            target, model, score, seq_from, seq_to, strand = tokens[0:6]
        else:
            # idx model target clan score seqfrom seqto strand ...
            self._require_columns(tokens, line, exact=17)
            model, target = tokens[1], tokens[2]
            score, seq_from, seq_to, strand = tokens[4:8]

        return {
            'target': target, 'model': model, 'score': score,
            'seq_from': seq_from, 'seq_to': seq_to, 'strand': strand,
            'evalue': None, 'model_from': None, 'model_to': None,
        }


class CMParser(HitParser):
    """Full cmsearch/cmscan --tblout output, from CM or HMM-only searches"""

    methods = (SearchMethod.CMSEARCH_SLOW, SearchMethod.CMSCAN_SLOW,
               SearchMethod.CMSEARCH_HMMONLY, SearchMethod.CMSCAN_HMMONLY)

    def extract_fields(self, tokens: List[str], line: str) -> Dict[str, Optional[str]]:
        if self.method.is_cmscan:
            # target and query columns are swapped relative to cmsearch
            self._require_columns(tokens, line, minimum=27)
            return {
                'target': tokens[3], 'model': tokens[1],
                'model_from': tokens[7], 'model_to': tokens[8],
                'seq_from': tokens[9], 'seq_to': tokens[10], 'strand': tokens[11],
                'score': tokens[16], 'evalue': tokens[17],
            }

        self._require_columns(tokens, line, minimum=18)
        return {
            'target': tokens[0], 'model': tokens[2],
            'model_from': tokens[5], 'model_to': tokens[6],
            'seq_from': tokens[7], 'seq_to': tokens[8], 'strand': tokens[9],
            'score': tokens[14], 'evalue': tokens[15],
        }


class NhmmerParser(HitParser):
    """nhmmer --tblout output"""

    methods = (SearchMethod.NHMMER,)

    def extract_fields(self, tokens: List[str], line: str) -> Dict[str, Optional[str]]:
        self._require_columns(tokens, line, minimum=16)
        return {
            'target': tokens[0], 'model': tokens[2],
            'model_from': tokens[4], 'model_to': tokens[5],
            'seq_from': tokens[6], 'seq_to': tokens[7], 'strand': tokens[11],
            'evalue': tokens[12], 'score': tokens[13],
        }


class SSUAlignParser(HitParser):
    """SSU-ALIGN .tab output; strand comes from coordinate order"""

    methods = (SearchMethod.SSUALIGN,)

    def extract_fields(self, tokens: List[str], line: str) -> Dict[str, Optional[str]]:
        # model target seqstart seqstop mdlstart mdlstop score evalue gc
        self._require_columns(tokens, line, exact=9)
        return {
            'target': tokens[1], 'model': tokens[0],
            'seq_from': tokens[2], 'seq_to': tokens[3],
            'model_from': tokens[4], 'model_to': tokens[5],
            'score': tokens[6], 'strand': None, 'evalue': None,
        }


PARSERS = (FastCMParser, CMParser, NhmmerParser, SSUAlignParser)


def get_hit_parser(method: SearchMethod, model_info) -> HitParser:
    """Return the parser for a search method's tabular output"""
    for parser_class in PARSERS:
        if method in parser_class.methods:
            return parser_class(model_info, method)
    raise ValueError(f"No parser registered for search method {method}")


def load_sorted_hits(file_path: str, parser: HitParser) -> List[Hit]:
    """Read every hit from a tabular file, stably sorted by target name"""
    hits = list(parser.parse_file(file_path))
    hits.sort(key=lambda hit: hit.target)
    parser.logger.info(f"Read {len(hits)} hits from {file_path}")
    return hits
