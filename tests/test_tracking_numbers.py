"""Tests for tracking number parsing and carrier classification."""

import pytest

from podtrack.tracking_numbers import (RULES, USPS, FEDEX, classify, normalize,
    parse_tracking_numbers)


class TestParseTrackingNumbers:

    def test_comma_separated(self):
        assert parse_tracking_numbers('9405511206213334271430, 1234567890123456') == [
            '9405511206213334271430', '1234567890123456']

    def test_empty_input(self):
        assert parse_tracking_numbers('') == []
        assert parse_tracking_numbers(None) == []
        assert parse_tracking_numbers(' ,\n\t ') == []

    def test_mixed_separators(self):
        text = 'A,B\tC\nD  E,,F\r\nG'
        assert parse_tracking_numbers(text) == ['A', 'B', 'C', 'D', 'E', 'F', 'G']

    def test_order_and_duplicates_kept(self):
        assert parse_tracking_numbers('B A B') == ['B', 'A', 'B']


class TestClassify:

    @pytest.mark.parametrize('tracking_number', [
        '9405511206213334271430',       # 94 + 20 digits
        '9205590164917312751089',
        '9300120111405487654321',
        '9505512345678901234567',
        '420123459212345678',           # 420 ZIP routing
        'EA123456789US',
        'ez123456789us',
        'RR123456789US',
        'LZ987654321US',
        '7012345678901234',             # certified mail
        '2312345678',
        '91123456789012345678',
    ])
    def test_usps_specific(self, tracking_number):
        assert classify(tracking_number) == USPS

    @pytest.mark.parametrize('tracking_number', [
        '123456789012',
        '12345678901234',
        '123456789012345',
        '1234567890123456',
        '123456789012345678',
        '9612345678901234567890',       # SmartPost
        '1234 5678 9012',
    ])
    def test_fedex(self, tracking_number):
        assert classify(tracking_number) == FEDEX

    @pytest.mark.parametrize('length', [12, 14, 15, 16, 18])
    def test_fedex_lengths(self, length):
        assert classify('1' * length) == FEDEX
        assert classify('5' * length) == FEDEX

    def test_usps_wins_overlapping_lengths(self):
        # 16 and 18 digits are FedEx lengths, but these carry USPS prefixes
        assert classify('7012345678901234') == USPS
        assert classify('420123459212345678') == USPS
        assert classify('1012345678901234') == FEDEX

    def test_generic_fallbacks(self):
        assert classify('90123456789012345678') == USPS          # 20 digits
        assert classify('970123456789012345678') == USPS         # 21 digits
        assert classify('9712345678901234567890') == USPS        # 22 digits
        assert classify('12345678901234567890') == FEDEX         # 20 digits, no 9

    @pytest.mark.parametrize('tracking_number', [
        '', '   ', 'INVALID123', '12345', '1234567890123', '1Z999AA10123456784',
        None, 12345678901234,
        '١٢٣٤٥٦٧٨٩٠١٢',  # Arabic-Indic digits
        '１２３４５６７８９０１２',  # full-width digits
        'EA١٢٣٤٥٦٧٨٩US',
    ])
    def test_no_match(self, tracking_number):
        assert classify(tracking_number) is None

    def test_normalizes_whitespace_and_case(self):
        assert normalize(' ea 123 456 789 us ') == 'EA123456789US'
        assert classify(' 9405 5112 0621 3334 2714 30 ') == USPS

    def test_rule_order(self):
        labels = [label for _, label, _ in RULES]
        first_fedex = labels.index(FEDEX)
        assert set(labels[:first_fedex]) == {USPS}
        # the generic rules come last: USPS then FedEx
        assert labels[-2:] == [USPS, FEDEX]
        assert all(description for _, _, description in RULES)
