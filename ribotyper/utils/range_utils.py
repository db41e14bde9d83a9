# ribotyper/utils/range_utils.py

from typing import List, Tuple, Optional, Sequence

from ribotyper.exceptions import InvalidIntervalError, DuplicateIntervalError

Region = Tuple[int, int]


def region_strand(region: Region) -> str:
    """Return '+' if start <= stop, else '-'"""
    start, stop = region
    return "+" if start <= stop else "-"


def format_region(region: Region) -> str:
    """Render a region as "start.stop\""""
    return f"{region[0]}.{region[1]}"


def format_span(span: Optional[Region]) -> str:
    """Render an overlap span as "lo-hi", or an empty string when absent"""
    if span is None:
        return ""
    return f"{span[0]}-{span[1]}"


def _common_strand(regions: Sequence[Region], strand: Optional[str]) -> str:
    """Strand shared by all regions

    A single-position region fits either strand. Without an explicit
    strand, the first multi-position region decides, and '+' is used
    when every region is a single position.
    """
    for i, region in enumerate(regions, start=1):
        if region[0] == region[1]:
            continue
        if strand is None:
            strand = region_strand(region)
        elif region_strand(region) != strand:
            raise InvalidIntervalError(
                f"Not all regions are on the {strand} strand, region {i}: "
                f"{format_region(region)} {region_strand(region)}",
                {'region': region, 'strand': strand}
            )
    return strand or "+"


def get_overlap(region1: Region, region2: Region, strand: Optional[str] = None) -> Tuple[int, Optional[Region]]:
    """Calculate overlap between two same-strand regions

    Minus-strand regions (start > stop) are flipped before comparison,
    so the returned span is always ascending.

    Args:
        region1: First (start, stop) region
        region2: Second (start, stop) region
        strand: Strand both regions are on ('+' or '-'), taken from
            coordinate order when not given

    Returns:
        Tuple of (overlap length, overlap span or None if disjoint)

    Raises:
        InvalidIntervalError: If the regions are on different strands
    """
    _common_strand((region1, region2), strand)

    lo1, hi1 = sorted(region1)
    lo2, hi2 = sorted(region2)

    # Ensure lo1 <= lo2
    if lo1 > lo2:
        lo1, hi1, lo2, hi2 = lo2, hi2, lo1, hi1

    if hi1 < lo2:
        return 0, None

    hi = min(hi1, hi2)
    return hi - lo2 + 1, (lo2, hi)


def sort_regions(regions: Sequence[Region], allow_duplicates: bool,
                 strand: Optional[str] = None) -> Tuple[List[int], str]:
    """Sort same-strand regions, preserving sequence direction

    Regions are ordered ascending by (start, stop). For minus-strand
    regions the order is reversed so it always follows the 5' to 3'
    walk along the sequence.

    Args:
        regions: Two or more regions, all on the same strand
        allow_duplicates: Whether identical regions are permitted
        strand: Strand of the regions ('+' or '-'), taken from
            coordinate order when not given

    Returns:
        Tuple of (1-based original indices in sorted order, comma-joined order string)

    Raises:
        InvalidIntervalError: If fewer than two regions or mixed strands
        DuplicateIntervalError: If duplicates are found and not allowed
    """
    if len(regions) < 2:
        raise InvalidIntervalError(f"Need more than one region to sort, got {len(regions)}")

    strand = _common_strand(regions, strand)

    order = sorted(range(1, len(regions) + 1), key=lambda idx: regions[idx - 1])

    if not allow_duplicates:
        for prev, cur in zip(order, order[1:]):
            if regions[prev - 1] == regions[cur - 1]:
                raise DuplicateIntervalError(
                    f"Region {format_region(regions[cur - 1])} occurs more than once",
                    {'region': regions[cur - 1]}
                )

    if strand == "-":
        order.reverse()

    return order, ",".join(str(idx) for idx in order)
