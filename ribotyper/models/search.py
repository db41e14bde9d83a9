#!/usr/bin/env python3
"""
Search backends and what their tabular output can tell us.
"""

from enum import Enum


class SearchMethod(Enum):
    """Search backend that produced the tabular hit file"""
    CMSEARCH_FAST = "cmsearch-fast"      # short-format tabular output without model coordinates
    CMSCAN_FAST = "cmscan-fast"          # cmscan equivalent of the above
    CMSEARCH_SLOW = "cmsearch-slow"      # full CM search (--slow, --mid, --max)
    CMSCAN_SLOW = "cmscan-slow"
    CMSEARCH_HMMONLY = "cmsearch-hmmonly"
    CMSCAN_HMMONLY = "cmscan-hmmonly"
    NHMMER = "nhmmer"                    # profile HMM search
    SSUALIGN = "ssualign"                # alignment-based, SSU-ALIGN tab output

    @property
    def is_fast(self) -> bool:
        return self in (SearchMethod.CMSEARCH_FAST, SearchMethod.CMSCAN_FAST)

    @property
    def is_cmscan(self) -> bool:
        return self.value.startswith("cmscan")

    @property
    def reports_model_coords(self) -> bool:
        return not self.is_fast

    @property
    def reports_accurate_coverage(self) -> bool:
        return not self.is_fast

    @property
    def reports_evalues(self) -> bool:
        return not self.is_fast and self is not SearchMethod.SSUALIGN

    @classmethod
    def choices(cls):
        return [method.value for method in cls]
