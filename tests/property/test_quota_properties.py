"""
Property-based tests for quota decisions and ledger arithmetic.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from filegate.domain.errors import ForbiddenError, ValidationError
from filegate.domain.file_storage import FileName, QuotaLedger, QuotaPolicy
from tests.fixtures import make_principal, make_record

sizes = st.lists(st.integers(min_value=0, max_value=500), max_size=8)


@given(existing=sizes, candidate=st.integers(min_value=0, max_value=2000))
def test_size_check_matches_arithmetic(existing, candidate):
    ledger = QuotaLedger(QuotaPolicy(max_files=100, max_bytes=2000))
    principal = make_principal(files=[make_record(f"f{i}", s) for i, s in enumerate(existing)])

    allowed = sum(existing) + candidate <= 2000
    if allowed:
        ledger.check(principal, candidate)
    else:
        with pytest.raises(ForbiddenError):
            ledger.check(principal, candidate)


@given(existing=sizes, extra=st.integers(min_value=0, max_value=500))
def test_add_then_remove_restores_usage(existing, extra):
    files = [make_record(f"f{i}", s) for i, s in enumerate(existing)]
    grown = QuotaLedger.with_record(files, make_record("new", extra))
    assert QuotaLedger.usage(QuotaLedger.without(grown, ["new"])) == QuotaLedger.usage(files)


@given(count=st.integers(min_value=0, max_value=6), limit=st.integers(min_value=1, max_value=6))
def test_count_check_rejects_at_limit(count, limit):
    ledger = QuotaLedger(QuotaPolicy(max_files=limit, max_bytes=10 ** 9))
    principal = make_principal(files=[make_record(f"f{i}", 0) for i in range(count)])
    if count >= limit:
        with pytest.raises(ForbiddenError):
            ledger.check(principal, 0)
    else:
        ledger.check(principal, 0)


@given(prefix=st.text(max_size=10), suffix=st.text(max_size=10), bad=st.sampled_from(["/", ".."]))
def test_names_with_separators_are_always_rejected(prefix, suffix, bad):
    with pytest.raises(ValidationError):
        FileName(prefix + bad + suffix)
