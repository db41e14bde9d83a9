# ribotyper/output/writer.py
"""
Fixed-width text output of classification results.

Two files are written: a short one with the classification and verdict
per sequence, and a long one with the best and second-best hit details.
Both have a column header and an explanation of columns at the end.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ribotyper.core.file_utils import atomic_write
from ribotyper.models.options import ClassificationOptions
from ribotyper.models.result import ClassificationResult
from ribotyper.models.search import SearchMethod

FEATURE_EXPLANATIONS = [
    ("no_hits", "no hits above the score threshold", True),
    ("hits_to_more_than_one_family", "hits to models of more than one family", True),
    ("hits_on_both_strands", "hits to the best model on both strands", True),
    ("duplicate_model_region", "two hits to the best model overlap in model coordinates", True),
    ("inconsistent_hit_order", "hits to the best model are in a different order in sequence and model", True),
    ("unacceptable_model", "best model is not in the list of acceptable models", True),
    ("opposite_strand", "best hit is on the minus strand", False),
    ("low_score_per_posn", "bits per nucleotide of the best hit is below the threshold", False),
    ("low_total_coverage", "fraction of the sequence covered by hits to the best model is below the threshold", False),
    ("low_score_difference_between_top_two", "score difference between the top two hits is low", False),
    ("very_low_score_difference_between_top_two", "score difference between the top two hits is very low", False),
    ("multiple_hits_to_best_model", "more than one hit to the best model", False),
]


def dash_string(width: int) -> str:
    return "-" * max(width, 0)


def center_string(width: int, text: str) -> str:
    """Prepend enough spaces to center text in a field of the given width"""
    return " " * max((width - len(text)) // 2, 0) + text


@dataclass
class ColumnWidths:
    """Field widths shared by every line of an output file"""
    index: int = len("#idx")
    target: int = len("target")
    length: int = len("length")
    model: int = len("model")
    family: int = len("fam")
    domain: int = len("domain")
    classification: int = len("classification")

    @classmethod
    def from_tables(cls, model_info, universe, model_names: Optional[Iterable[str]] = None) -> 'ColumnWidths':
        """Compute widths from the model table and sequence universe

        Args:
            model_info: ModelInfo lookup table
            universe: SequenceUniverse
            model_names: Names read from the model file, if one was given
        """
        widths = cls()
        model_widths = model_info.max_widths()
        seq_widths = universe.max_widths()

        if model_names is not None:
            widths.model = max([widths.model] + [len(name) for name in model_names])
        else:
            widths.model = max(widths.model, model_widths['model'])
        widths.family = max(widths.family, model_widths['family'])
        widths.domain = max(widths.domain, model_widths['domain'])
        widths.classification = max(widths.classification, model_widths['classification'])

        widths.target = max(widths.target, seq_widths['target'])
        widths.length = max(widths.length, seq_widths['length'])
        widths.index = max(widths.index, seq_widths['index'])
        return widths


class ResultWriter:
    """Formats ClassificationResults into short and long output lines"""

    def __init__(self, widths: ColumnWidths, options: ClassificationOptions, method: SearchMethod):
        self.widths = widths
        self.options = options
        self.method = method
        self.logger = logging.getLogger("ribotyper.output.writer")

    @property
    def use_evalues(self) -> bool:
        return self.options.use_evalues

    # ---------------------------------------------------------------
    # short format
    # ---------------------------------------------------------------

    def short_header(self) -> List[str]:
        w = self.widths
        return [
            "%-*s  %-*s  %-*s  %5s  %4s  %s" % (
                w.index, "#idx", w.target, "target", w.classification, "classification",
                "strnd", "p/f", "unexpected_features"),
            "%-*s  %-*s  %-*s  %3s  %4s  %s" % (
                w.index, "#" + dash_string(w.index - 1), w.target, dash_string(w.target),
                w.classification, dash_string(w.classification),
                "-----", "----", "-------------------"),
        ]

    def short_line(self, result: ClassificationResult) -> str:
        w = self.widths
        if not result.has_hits:
            return "%-*s  %-*s  %-*s  %5s  %s  %s" % (
                w.index, result.index, w.target, result.target, w.classification, "-",
                "-", result.verdict.value, result.unexpected_features)

        return "%-*s  %-*s  %-*s  %-5s  %s  %s" % (
            w.index, result.index, w.target, result.target, w.classification, result.classification,
            result.strand.label, result.verdict.value, result.unexpected_features)

    def short_tail(self) -> List[str]:
        lines = [
            "#",
            "# Explanation of columns:",
            "#",
            "# Column 1 [idx]:                 index of sequence in input sequence file",
            "# Column 2 [target]:              name of target sequence",
            "# Column 3 [classification]:      classification of sequence",
            "# Column 4 [strnd]:               strand ('plus' or 'minus') of best-scoring hit",
            "# Column 5 [p/f]:                 PASS or FAIL",
            "# Column 6 [unexpected_features]: unexpected/unusual features of sequence (see below)",
        ]
        return lines + self.feature_explanation()

    # ---------------------------------------------------------------
    # long format
    # ---------------------------------------------------------------

    def _evalue_field(self, evalue: Optional[float]) -> str:
        if not self.use_evalues:
            return ""
        if evalue is None:
            return "%8s  " % "-"
        return "%8g  " % evalue

    def long_header(self) -> List[str]:
        w = self.widths
        ev = "  evalue  " if self.use_evalues else ""
        ev_dash = "--------  " if self.use_evalues else ""

        best_width = w.model + 2 + 6 + 2 + 4 + 2 + 3 + 2 + 5 + 2 + 5 + 2 + 5 + 2 + w.length + 2 + w.length
        second_width = w.model + 2 + 6
        if self.use_evalues:
            best_width += 2 + 8
            second_width += 2 + 8

        best_label = "best-scoring model"
        second_label = ("second best-scoring model" if self.options.same_model
                        else "different domain's best-scoring model")
        best_width = max(best_width, len(best_label))
        second_width = max(second_width, len(second_label))

        group_fmt = "%-*s  %-*s  %4s  %*s  %3s  %*s  %*s  %-*s  %6s  %-*s  %s"
        return [
            group_fmt % (
                w.index, "#", w.target, "", "", w.length, "", "", w.family, "", w.domain, "",
                best_width, center_string(best_width, best_label), "",
                second_width, center_string(second_width, second_label), ""),
            group_fmt % (
                w.index, "#", w.target, "", "", w.length, "", "", w.family, "", w.domain, "",
                best_width, dash_string(best_width), "",
                second_width, dash_string(second_width), ""),
            ("%-*s  %-*s  %4s  %*s  %3s  %-*s  %-*s  %-*s  %5s  %6s  %s%4s  %3s  %5s  %5s  "
             "%*s  %*s  %6s  %-*s  %6s  %s%s") % (
                w.index, "#idx", w.target, "target", "p/f", w.length, "length", "#fm",
                w.family, "fam", w.domain, "domain", w.model, "model", "strnd", "score", ev,
                "b/nt", "#ht", "tcov", "bcov", w.length, "bstart", w.length, "bstop",
                "scdiff", w.model, "model", "score", ev, "unexpected_features"),
            ("%-*s  %-*s  %4s  %*s  %3s  %*s  %*s  %-*s  %5s  %6s  %s%4s  %3s  %5s  %5s  "
             "%*s  %*s  %6s  %-*s  %6s  %s%s") % (
                w.index, "#" + dash_string(w.index - 1), w.target, dash_string(w.target),
                "----", w.length, dash_string(w.length), "---",
                w.family, dash_string(w.family), w.domain, dash_string(w.domain),
                w.model, dash_string(w.model), "-----", "------", ev_dash,
                "----", "---", "-----", "-----",
                w.length, dash_string(w.length), w.length, dash_string(w.length),
                "------", w.model, dash_string(w.model), "------", ev_dash,
                "-------------------"),
        ]

    def long_line(self, result: ClassificationResult) -> str:
        w = self.widths
        if not result.has_hits:
            best = ("%-*s  %-*s  %4s  %*d  %3d  %-*s  %-*s  %-*s  %-5s  %6s  %s%4s  %3s  %5s  %5s  "
                    "%*s  %*s  ") % (
                w.index, result.index, w.target, result.target, result.verdict.value,
                w.length, result.length, 0, w.family, "-", w.domain, "-", w.model, "-",
                "-", "-", self._evalue_field(None), "-", "-", "-", "-",
                w.length, "-", w.length, "-")
        else:
            best = ("%-*s  %-*s  %4s  %*d  %3d  %-*s  %-*s  %-*s  %-5s  %6.1f  %s%4.2f  %3d  %5.3f  %5.3f  "
                    "%*d  %*d  ") % (
                w.index, result.index, w.target, result.target, result.verdict.value,
                w.length, result.length, result.n_families,
                w.family, result.family, w.domain, result.domain, w.model, result.model,
                result.strand.label, result.score, self._evalue_field(result.evalue),
                result.bits_per_nt, result.n_hits,
                result.total_coverage, result.best_coverage,
                w.length, result.best_start, w.length, result.best_stop)

        if result.second_model is not None:
            second = "%6.1f  %-*s  %6.1f  %s" % (
                result.score_diff, w.model, result.second_model, result.second_score,
                self._evalue_field(result.second_evalue))
        else:
            second = "%6s  %-*s  %6s  %s" % ("-", w.model, "-", "-", self._evalue_field(None))

        return best + second + result.unexpected_features

    def long_tail(self) -> List[str]:
        inaccurate = ("#                                  (these values are inaccurate, "
                      "use a non-fast search method to get accurate coverage)")
        columns = [
            ("idx", "index of sequence in input sequence file"),
            ("target", "name of target sequence"),
            ("p/f", "PASS or FAIL (see below for more on FAIL)"),
            ("length", "length of target sequence (nt)"),
            ("#fm", "number of different families detected in sequence"),
            ("fam", "name of family the best-scoring model to this sequence belongs to"),
            ("domain", "name of domain the best-scoring model to this sequence belongs to"),
            ("model", "name of best-scoring model"),
            ("strnd", "strand ('plus' or 'minus') of best-scoring hit"),
            ("score", "bit score of best-scoring hit to this sequence"),
        ]
        if self.use_evalues:
            columns.append(("evalue", "E-value of best-scoring hit to this sequence"))
        columns += [
            ("b/nt", "bits per nucleotide (bits/sequence_length) of best-scoring hit to this sequence"),
            ("#ht", "number of hits of best-scoring model to this sequence above the score threshold"),
            ("tcov", "fraction of target sequence included in all hits to the best-scoring model"),
            ("bcov", "fraction of target sequence included in single best-scoring hit"),
            ("bstart", "start position of best-scoring hit"),
            ("bstop", "stop position of best-scoring hit"),
            ("scdiff", "difference in score between top scoring hit in best model "
                       "and top scoring hit in second best model"),
            ("model", "name of second best-scoring model"),
            ("score", "bit score of top scoring hit to second best-scoring model"),
        ]
        if self.use_evalues:
            columns.append(("evalue", "E-value of top scoring hit to second best-scoring model"))
        columns.append(("unexpected_features", "unexpected/unusual features of sequence (see below)"))

        lines = ["#", "# Explanation of columns:", "#"]
        for number, (name, text) in enumerate(columns, 1):
            lines.append("# Column %2d %-22s %s" % (number, f"[{name}]:", text))
            if name in ("tcov", "bcov") and not self.method.reports_accurate_coverage:
                lines.append(inaccurate)
        return lines + self.feature_explanation()

    def feature_explanation(self) -> List[str]:
        lines = [
            "#",
            "# Explanation of possible values in unexpected_features column:",
            "#",
            "# '-' if no unexpected features were detected, otherwise one or more",
            "# of the following, separated by ';'. Features prefixed with '*' caused",
            "# the sequence to FAIL.",
            "#",
        ]
        for tag, text, strict in FEATURE_EXPLANATIONS:
            kind = "always FAIL" if strict else "FAIL only if enabled"
            lines.append("# %-42s %s (%s)" % (tag + ":", text, kind))
        return lines

    # ---------------------------------------------------------------
    # files
    # ---------------------------------------------------------------

    def write(self, results: Iterable[ClassificationResult], short_path: str, long_path: str) -> int:
        """Write both output files

        Args:
            results: Results in output order
            short_path: Path of the short output file
            long_path: Path of the long output file

        Returns:
            Number of results written
        """
        count = 0
        with atomic_write(short_path) as short_out, atomic_write(long_path) as long_out:
            for line in self.short_header():
                short_out.write(line + "\n")
            for line in self.long_header():
                long_out.write(line + "\n")

            for result in results:
                short_out.write(self.short_line(result) + "\n")
                long_out.write(self.long_line(result) + "\n")
                count += 1

            for line in self.short_tail():
                short_out.write(line + "\n")
            for line in self.long_tail():
                long_out.write(line + "\n")

        self.logger.info(f"Wrote {count} results to {short_path} and {long_path}")
        return count
