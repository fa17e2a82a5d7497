"""Allele codec and genotype synthesis.

Turns raw one- or two-character base calls into allele indices and
genotype codes relative to a reference base.

Call outcomes:
- hom RR: both bases equal the reference
- het RA: exactly one base equals the reference (either position)
- hom AA: neither base is the reference, both identical
- het AA: neither base is the reference, bases differ
- rejected: call starts with '-', 'I' or 'D' (not a SNP); voids the row
"""

from variant_converter.exceptions import MalformedRowError
from variant_converter.models import Base, GenotypeCall, GenotypeTally

# First characters marking missing data, insertions and deletions
NON_SNP_MARKERS = frozenset("-ID")

_BASE_LOOKUP: dict[str, Base] = {
    "A": Base.A,
    "C": Base.C,
    "G": Base.G,
    "T": Base.T,
}


def base_to_index(base: str) -> Base:
    """Map a base character onto the five-symbol alphabet.

    Case-insensitive. Anything other than A/C/G/T folds into N.

    Args:
        base: Single base character

    Returns:
        Base enum member (A=0, C=1, G=2, T=3, N=4)

    Example:
        >>> base_to_index("g")
        <Base.G: 2>
        >>> base_to_index("R")
        <Base.N: 4>
    """
    return _BASE_LOOKUP.get(base.upper(), Base.N)


def index_to_base(index: int) -> str:
    """Map an alphabet index back to its base letter."""
    return Base(index).symbol


class AlleleSlots:
    """Allele index assignment for one table row.

    Each of the five alphabet slots is either unassigned (None) or holds
    an allele index. The reference base owns index 0; other bases get
    1, 2, ... in the order they are first seen across the row. Once
    assigned, a slot never changes.
    """

    __slots__ = ("_slots", "_next")

    def __init__(self, ref: Base) -> None:
        self._slots: list[int | None] = [None] * len(Base)
        self._slots[ref] = 0
        self._next = 1

    def assign(self, base: Base) -> int:
        """Return the allele index for a base, assigning one if needed."""
        index = self._slots[base]
        if index is None:
            index = self._next
            self._slots[base] = index
            self._next += 1
        return index

    def get(self, base: Base) -> int | None:
        return self._slots[base]

    def __len__(self) -> int:
        """Number of alleles assigned so far, reference included."""
        return self._next

    def alternate_bases(self) -> list[Base]:
        """Non-reference bases in ascending allele-index order."""
        assigned = [
            (index, Base(slot))
            for slot, index in enumerate(self._slots)
            if index is not None and index > 0
        ]
        return [base for _, base in sorted(assigned)]


def classify_call(ref: Base, a0: Base, a1: Base, tally: GenotypeTally) -> None:
    """Count one call in the reference-relative genotype tally."""
    if a0 == ref and a1 == ref:
        tally.hom_rr += 1
    elif a0 == ref or a1 == ref:
        tally.het_ra += 1
    elif a0 == a1:
        tally.hom_aa += 1
    else:
        tally.het_aa += 1


def synthesize_genotype(
    ref: Base,
    call: str,
    slots: AlleleSlots,
    tally: GenotypeTally,
) -> GenotypeCall | None:
    """Convert one sample's base call into a genotype.

    A single-character call is haploid: the base is counted twice for
    classification but only one allele is emitted.

    Args:
        ref: Reference base of the row
        call: Raw base call (one or two characters)
        slots: Allele slots for the current row (updated in place)
        tally: Run-wide counters (updated in place)

    Returns:
        GenotypeCall, or None when the call marks a non-SNP site

    Raises:
        MalformedRowError: If the call is longer than two characters
    """
    if len(call) > 2:
        raise MalformedRowError(f"expected at most two characters, got '{call}'")

    if not call or call[0] in NON_SNP_MARKERS:
        return None

    a0 = base_to_index(call[0])
    a1 = base_to_index(call[1]) if len(call) == 2 else a0

    first = slots.assign(a0)
    second = slots.assign(a1) if len(call) == 2 else None

    classify_call(ref, a0, a1, tally)
    return GenotypeCall(first=first, second=second)
