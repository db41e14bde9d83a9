# ribotyper/io/sequences.py
"""
The sequence universe: every input sequence with its index and length.
"""

import logging
import re
from collections import Counter
from typing import Dict, Iterator, List, Tuple

from Bio import SeqIO

from ribotyper.core.file_utils import safe_open, check_file_exists
from ribotyper.exceptions import FileOperationError, ValidationError

logger = logging.getLogger("ribotyper.io.sequences")

SEQSTAT_LINE = re.compile(r'^=\s+(\S+)\s+(\d+)')


class SequenceUniverse:
    """Ordered mapping of sequence name to (1-based index, length)"""

    def __init__(self, entries: List[Tuple[str, int]], source: str = ""):
        """Initialize from (name, length) pairs in input order

        Raises:
            ValidationError: If empty or if any name occurs more than once
        """
        if not entries:
            raise ValidationError(f"Did not read any sequence lengths{' from ' + source if source else ''}")

        counts = Counter(name for name, _ in entries)
        duplicates = sorted(name for name, count in counts.items() if count > 1)
        if duplicates:
            listing = "\n".join(f"\t({i}) {name} {counts[name]}" for i, name in enumerate(duplicates, 1))
            raise ValidationError(
                "Not all sequences in input sequence file have a unique name. "
                "List of sequences that occur more than once, with number of occurrences:\n" + listing,
                {'duplicates': {name: counts[name] for name in duplicates}}
            )

        self.source = source
        self._names = [name for name, _ in entries]
        self._info: Dict[str, Tuple[int, int]] = {
            name: (index, length) for index, (name, length) in enumerate(entries, 1)
        }

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._info

    def __iter__(self) -> Iterator[Tuple[str, int, int]]:
        """Yield (name, index, length) in input order"""
        for name in self._names:
            index, length = self._info[name]
            yield name, index, length

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def index_of(self, name: str) -> int:
        return self._lookup(name)[0]

    def length_of(self, name: str) -> int:
        return self._lookup(name)[1]

    def _lookup(self, name: str) -> Tuple[int, int]:
        try:
            return self._info[name]
        except KeyError:
            raise ValidationError(f"Found sequence {name} with no length information",
                                  {'target': name})

    def max_widths(self) -> Dict[str, int]:
        """Longest name, longest length string, and digits in the sequence count"""
        return {
            'target': max(len(name) for name in self._names),
            'length': max(len(str(length)) for _, length in self._info.values()),
            'index': len(str(len(self._names))),
        }


def parse_seqstat_file(file_path: str) -> SequenceUniverse:
    """Parse per-sequence lines ('= name length') of an esl-seqstat -a report"""
    if not check_file_exists(file_path):
        raise FileOperationError(f"Seqstat file {file_path} does not exist", {'path': file_path})

    entries = []
    with safe_open(file_path) as f:
        for line in f:
            match = SEQSTAT_LINE.match(line)
            if match:
                entries.append((match.group(1), int(match.group(2))))

    if not entries:
        raise ValidationError(
            f"Did not read any sequence lengths in seqstat file {file_path}, "
            f"was it generated with esl-seqstat -a?", {'path': file_path}
        )

    universe = SequenceUniverse(entries, source=file_path)
    logger.info(f"Read lengths of {len(universe)} sequences from {file_path}")
    return universe


def read_fasta_lengths(file_path: str) -> SequenceUniverse:
    """Read sequence names and lengths directly from a FASTA file"""
    if not check_file_exists(file_path):
        raise FileOperationError(f"Sequence file {file_path} does not exist", {'path': file_path})

    with safe_open(file_path) as handle:
        entries = [(record.id, len(record.seq)) for record in SeqIO.parse(handle, "fasta")]

    universe = SequenceUniverse(entries, source=file_path)
    logger.info(f"Read {len(universe)} sequences from {file_path}")
    return universe
