"""Site synthesis from ancestral-allele table rows.

For each row: look up the reference base, seed the allele slots with it,
run every sample call through the genotype synthesizer, and assemble the
allele list. A single non-SNP call voids the whole row so that every
written record has a consistent allele set across samples.
"""

import logging

from variant_converter.alleles import AlleleSlots, base_to_index, synthesize_genotype
from variant_converter.exceptions import MalformedRowError
from variant_converter.models import GenotypeCall, GenotypeTally, SiteRow, SynthesizedSite
from variant_converter.reference.base import ReferenceIndex

logger = logging.getLogger(__name__)


def build_site(
    row: SiteRow,
    reference: ReferenceIndex,
    tally: GenotypeTally,
) -> SynthesizedSite | None:
    """Synthesize alleles and genotypes for one row.

    Calls processed before a rejected call stay counted in the tally.

    Args:
        row: Parsed table row
        reference: Reference index for the REF base
        tally: Run-wide counters (updated in place)

    Returns:
        SynthesizedSite, or None if any call marks a non-SNP site

    Raises:
        ReferenceFetchError: If the reference has no base at the row's coordinate
        MalformedRowError: If a call is longer than two characters
    """
    ref_char = reference.fetch_base(row.chrom, row.pos).upper()
    ref = base_to_index(ref_char)
    slots = AlleleSlots(ref)

    genotypes: list[GenotypeCall] = []
    for call in row.calls:
        try:
            genotype = synthesize_genotype(ref, call, slots, tally)
        except MalformedRowError:
            raise MalformedRowError(
                f"Error parsing the site {row.chrom}:{row.pos}, expected two characters"
            ) from None
        if genotype is None:
            logger.debug("Non-SNP call '%s' at %s:%d, row dropped", call, row.chrom, row.pos)
            return None
        genotypes.append(genotype)

    alleles = [ref_char] + [base.symbol for base in slots.alternate_bases()]
    return SynthesizedSite(alleles=alleles, genotypes=genotypes)
