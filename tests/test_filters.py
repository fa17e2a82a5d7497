"""Tests for site filter expressions."""

import pytest

from variant_converter.config import FilterLogic
from variant_converter.exceptions import FilterExpressionError
from variant_converter.filters import SiteFilter, variant_type


class TestSiteFilter:
    """Tests for expression evaluation."""

    def test_numeric_comparison(self, make_record) -> None:
        site_filter = SiteFilter("QUAL>=30")
        assert site_filter.test(make_record(qual=50.0))
        assert not site_filter.test(make_record(qual=10.0))

    def test_missing_value_never_matches(self, make_record) -> None:
        """Missing QUAL fails every comparison."""
        assert not SiteFilter("QUAL>=30").test(make_record(qual=None))
        assert not SiteFilter("QUAL<30").test(make_record(qual=None))

    def test_string_comparison(self, make_record) -> None:
        record = make_record(filter=["PASS"])
        assert SiteFilter('FILTER="PASS"').test(record)
        assert not SiteFilter("FILTER!='PASS'").test(record)

    def test_missing_filter_is_dot(self, make_record) -> None:
        assert SiteFilter('FILTER="."').test(make_record(filter=[]))

    def test_info_tags(self, make_record) -> None:
        record = make_record(info={"DP": 25})
        assert SiteFilter("INFO/DP>20").test(record)
        assert SiteFilter("DP>20").test(record)
        assert not SiteFilter("INFO/DP>30").test(record)

    def test_multi_valued_any(self, make_record) -> None:
        """A multi-valued field matches when any element matches."""
        record = make_record(info={"AC": (1, 3)})
        assert SiteFilter("AC>2").test(record)
        assert not SiteFilter("AC>5").test(record)

    def test_flag(self, make_record) -> None:
        """A bare operand is true when present and truthy."""
        assert SiteFilter("DB").test(make_record(info={"DB": True}))
        assert not SiteFilter("DB").test(make_record(info={}))

    def test_boolean_operators(self, make_record) -> None:
        record = make_record(qual=40.0, info={"DP": 5})
        assert not SiteFilter("QUAL>30 && DP>10").test(record)
        assert SiteFilter("QUAL>30 || DP>10").test(record)
        assert not SiteFilter("QUAL>30 & DP>10").test(record)
        assert SiteFilter("QUAL>30 | DP>10").test(record)

    def test_precedence_and_parentheses(self, make_record) -> None:
        """&& binds tighter than ||; parentheses override."""
        record = make_record(qual=10.0, info={"DP": 5})
        assert SiteFilter("QUAL<20 || QUAL>30 && DP>10").test(record)
        assert not SiteFilter("(QUAL<20 || QUAL>30) && DP>10").test(record)

    def test_site_fields(self, make_record) -> None:
        record = make_record(chrom="chr2", pos=150, ref="A", alts=("G", "T"))
        assert SiteFilter('CHROM="chr2" && POS>=100').test(record)
        assert SiteFilter("N_ALT=2").test(record)
        assert SiteFilter('ALT="G"').test(record)
        assert SiteFilter('TYPE="snp"').test(record)

    def test_type_indel(self, make_record) -> None:
        record = make_record(ref="AT", alts=("A",))
        assert SiteFilter('TYPE="indel"').test(record)
        assert not SiteFilter('TYPE="snp"').test(record)


class TestFilterLogic:
    """Tests for include/exclude."""

    def test_include(self, make_record) -> None:
        site_filter = SiteFilter("QUAL>30", FilterLogic.INCLUDE)
        assert site_filter.passes(make_record(qual=50.0))
        assert not site_filter.passes(make_record(qual=5.0))

    def test_exclude(self, make_record) -> None:
        """Exclude keeps exactly the records include would drop."""
        site_filter = SiteFilter("QUAL>30", FilterLogic.EXCLUDE)
        assert not site_filter.passes(make_record(qual=50.0))
        assert site_filter.passes(make_record(qual=5.0))


class TestFilterErrors:
    """Tests for malformed expressions."""

    @pytest.mark.parametrize(
        "expression",
        ["", "QUAL>", "QUAL>30 )", "(QUAL>30", "QUAL $ 30", "&& QUAL>1", "INFO/"],
    )
    def test_malformed(self, expression: str) -> None:
        with pytest.raises(FilterExpressionError):
            SiteFilter(expression)


class TestVariantType:
    """Tests for alternate allele classification."""

    @pytest.mark.parametrize(
        "ref,alt,expected",
        [
            ("A", "G", "snp"),
            ("AC", "GT", "mnp"),
            ("A", "AT", "indel"),
            ("A", "<DEL>", "other"),
            ("A", "*", "other"),
        ],
    )
    def test_classification(self, ref: str, alt: str, expected: str) -> None:
        assert variant_type(ref, alt) == expected
